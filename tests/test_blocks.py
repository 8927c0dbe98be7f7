"""
Tests for the block schema: defaults, lenient coercion and unknown blocks.
"""
import pytest

from manual.blocks import (
    BLOCK_TYPES,
    DialogueBlock,
    HeadingBlock,
    ImageBlock,
    ListBlock,
    ParagraphBlock,
    UnknownBlock,
    block_from_dict,
    default_block,
    make_content,
    sort_blocks,
)
from manual.renderer import render_blocks


class TestDefaults:
    """Fresh blocks carry the editor's default content."""

    @pytest.mark.parametrize('block_type', sorted(BLOCK_TYPES))
    def test_every_type_has_a_default(self, block_type):
        block = default_block(block_type, order=3)
        assert block.type == block_type
        assert block.order == 3
        assert block.id

    def test_heading_defaults(self):
        content = default_block('heading').content
        assert content.fontSize == '24px'
        assert content.level == 1
        assert content.design_style == 1
        assert content.color1 == '#2589d0'
        assert content.color2 == '#f2f2f2'
        assert content.color3 == '#333333'

    def test_paragraph_defaults(self):
        content = default_block('paragraph').content
        assert content.text == ''
        assert content.fontSize == '16px'
        assert content.color == '#454545'
        assert content.backgroundColor == 'transparent'
        assert content.alignment == 'left'

    def test_dialogue_defaults(self):
        content = default_block('dialogue').content
        assert content.leftIcon == '/placeholder.svg'
        assert content.leftName == '左の名前'
        assert content.rightName == '右の名前'
        assert len(content.items) == 1
        assert content.items[0].alignment == 'left'

    def test_image_and_list_defaults(self):
        image = default_block('image').content
        assert image.size == 'medium'
        assert image.rounded is True
        assert image.linkUrl is None
        assert default_block('list').content.items == ['']
        assert default_block('code').content.language == 'javascript'

    def test_explicit_id(self):
        assert default_block('note', block_id='fixed').id == 'fixed'


class TestLenientContent:
    """Out-of-range values fall back to defaults instead of failing."""

    def test_heading_level_out_of_range(self):
        content = make_content('heading', {'text': 'x', 'level': 9, 'design_style': 'bogus'})
        assert content.level == 1
        assert content.design_style == 1

    def test_heading_level_from_string(self):
        assert make_content('heading', {'level': '3'}).level == 3

    def test_invalid_enum_falls_back(self):
        content = make_content('image', {'size': 'huge', 'alignment': 'middle'})
        assert content.size == 'medium'
        assert content.alignment == 'left'

    def test_null_and_numeric_text(self):
        assert make_content('paragraph', {'text': None}).text == ''
        assert make_content('paragraph', {'text': 42}).text == '42'

    def test_malformed_flags_and_styles_fall_back(self):
        content = make_content('paragraph', {
            'text': 'x', 'bold': {'nested': True}, 'italic': 'true', 'color': ['red'],
        })
        assert content.bold is False
        assert content.italic is True
        assert content.color == '#454545'

    def test_malformed_dialogue_item_field(self):
        content = make_content('dialogue', {'items': [{'alignment': 'right', 'text': {'x': 1}}]})
        assert content.items[0].alignment == 'right'
        assert content.items[0].text == ''

    def test_unknown_keys_are_kept(self):
        content = make_content('paragraph', {'text': 'a', 'futureField': True})
        assert content.model_dump()['futureField'] is True


class TestBlockFromDict:

    def test_known_block(self):
        block = block_from_dict({
            'id': 'b1', 'type': 'heading', 'order': 2,
            'content': {'text': 'Title', 'level': 2},
        })
        assert isinstance(block, HeadingBlock)
        assert block.content.text == 'Title'
        assert block.content.level == 2
        assert block.order == 2.0

    def test_missing_content_uses_defaults(self):
        block = block_from_dict({'id': 'b1', 'type': 'dialogue', 'order': 0})
        assert isinstance(block, DialogueBlock)
        assert block.content.rightName == '右の名前'

    def test_unknown_type_is_preserved(self):
        payload = {'id': 'x', 'type': 'table', 'content': {'rows': [[1, 2]]}, 'order': 1}
        block = block_from_dict(payload)
        assert isinstance(block, UnknownBlock)
        assert block.dump() == {'id': 'x', 'type': 'table', 'content': {'rows': [[1, 2]]}, 'order': 1.0}

    def test_uncoercible_field_takes_its_default(self):
        block = block_from_dict({'id': 'x', 'type': 'list', 'content': {'items': 'not a list'}})
        assert isinstance(block, ListBlock)
        assert block.content.items == ['']

    def test_numeric_style_keeps_the_block(self):
        block = block_from_dict({'type': 'paragraph', 'content': {'text': 'hello', 'fontSize': 16}})
        assert isinstance(block, ParagraphBlock)
        assert block.content.fontSize == '16'
        assert 'hello' in render_blocks([block])

    def test_non_object_content_becomes_unknown(self):
        block = block_from_dict({'id': 'x', 'type': 'list', 'content': ['a', 'b']})
        assert isinstance(block, UnknownBlock)
        assert block.type == 'list'
        assert block.content == ['a', 'b']

    def test_ids_and_orders_are_coerced(self):
        block = block_from_dict({'id': 7, 'type': 'paragraph', 'order': 'nope', 'content': {}})
        assert block.id == '7'
        assert block.order == 0.0

    def test_missing_id_gets_one(self):
        assert block_from_dict({'type': 'separator'}).id


class TestSortBlocks:

    def test_sorts_by_order_keeping_ties_stable(self):
        a = ParagraphBlock(id='a', order=1)
        b = ParagraphBlock(id='b', order=0)
        c = ImageBlock(id='c', order=1)
        assert [block.id for block in sort_blocks([a, b, c])] == ['b', 'a', 'c']
