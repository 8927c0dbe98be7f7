"""
Tests for the block editor: document operations, collapse state, previews
and uploads.
"""
import itertools
from unittest import mock

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from manual.blocks import ParagraphBlock, UnknownBlock, block_from_dict, default_block
from manual.editor import BlockEditor
from manual.exceptions import (
    BlockNotFound,
    InvalidBlockContent,
    InvalidOperation,
    UnknownBlockType,
    UploadFailed,
    UploadRejected,
)


def sequential_ids():
    counter = itertools.count(1)
    return lambda: f"new-{next(counter)}"


@pytest.fixture
def editor():
    blocks = [
        default_block('heading', order=0, block_id='a'),
        default_block('paragraph', order=1, block_id='b'),
        default_block('image', order=2, block_id='c'),
    ]
    return BlockEditor(blocks, id_factory=sequential_ids())


def ids(editor):
    return [block.id for block in editor]


class FakeStorage:
    def __init__(self, fail=False):
        self.fail = fail
        self.uploaded = []

    def upload(self, file):
        if self.fail:
            raise UploadFailed()
        self.uploaded.append(file.name)
        return f"https://cdn.example.com/{file.name}"


class TestLoad:

    def test_blocks_are_kept_in_display_order(self):
        editor = BlockEditor([
            ParagraphBlock(id='late', order=2),
            ParagraphBlock(id='early', order=0),
        ])
        assert ids(editor) == ['early', 'late']


class TestAdd:

    def test_appends_with_order_equal_to_length(self, editor):
        block = editor.add('quote')
        assert ids(editor)[-1] == 'new-1'
        assert block.order == 3
        assert block.content.backgroundColor == '#f3f4f6'

    def test_unknown_type_is_rejected(self, editor):
        with pytest.raises(UnknownBlockType):
            editor.add('table')
        assert len(editor) == 3


class TestUpdate:

    def test_replaces_content(self, editor):
        editor.update('b', {'text': 'hello', 'bold': True})
        block = editor.get('b')
        assert block.content.text == 'hello'
        assert block.content.bold is True

    def test_replace_is_not_a_merge(self, editor):
        editor.update('b', {'text': 'hello', 'color': '#000000'})
        editor.update('b', {'text': 'again'})
        assert editor.get('b').content.color == '#454545'

    def test_invalid_content(self, editor):
        with pytest.raises(InvalidBlockContent):
            editor.update('b', ['not', 'an', 'object'])

    def test_missing_block(self, editor):
        with pytest.raises(BlockNotFound):
            editor.update('zzz', {})

    def test_unknown_block_content_is_replaced_verbatim(self):
        editor = BlockEditor([block_from_dict({'id': 'u', 'type': 'poll', 'content': {'q': 1}})])
        editor.update('u', {'q': 2})
        assert isinstance(editor.get('u'), UnknownBlock)
        assert editor.get('u').content == {'q': 2}


class TestDelete:

    def test_removes_without_renumbering(self, editor):
        editor.delete('b')
        assert ids(editor) == ['a', 'c']
        assert editor.get('c').order == 2

    def test_missing_block(self, editor):
        with pytest.raises(BlockNotFound):
            editor.delete('zzz')


class TestDuplicate:

    def test_copy_lands_after_source(self, editor):
        copy = editor.duplicate('a')
        assert ids(editor) == ['a', 'new-1', 'b', 'c']
        assert copy.order == 0.5
        assert copy.type == 'heading'

    def test_copy_is_independent(self, editor):
        editor.update('c', {'url': '/a.png'})
        copy = editor.duplicate('c')
        editor.update(copy.id, {'url': '/b.png'})
        assert editor.get('c').content.url == '/a.png'

    def test_duplicate_of_last_block(self, editor):
        editor.duplicate('c')
        assert ids(editor) == ['a', 'b', 'c', 'new-1']

    def test_tie_keeps_copy_next_to_source(self):
        editor = BlockEditor(
            [ParagraphBlock(id='a', order=0), ParagraphBlock(id='b', order=0.5)],
            id_factory=sequential_ids(),
        )
        editor.duplicate('a')
        assert ids(editor) == ['a', 'new-1', 'b']


class TestMove:

    def test_swaps_positions(self, editor):
        assert editor.move('b', 'up') is True
        assert ids(editor) == ['b', 'a', 'c']
        assert editor.move('b', 'down') is True
        assert ids(editor) == ['a', 'b', 'c']

    def test_boundaries_are_no_ops(self, editor):
        assert editor.move('a', 'up') is False
        assert editor.move('c', 'down') is False
        assert ids(editor) == ['a', 'b', 'c']

    def test_order_values_follow_the_move(self, editor):
        editor.move('c', 'up')
        assert ids(editor) == ['a', 'c', 'b']
        assert [block.order for block in editor] == [0, 1, 2]

    def test_duplicate_keeps_an_earlier_move(self, editor):
        editor.move('c', 'up')
        editor.duplicate('a')
        assert ids(editor) == ['a', 'new-1', 'c', 'b']

    def test_move_survives_a_save(self, editor):
        editor.move('c', 'up')
        restored = BlockEditor.from_json(editor.to_json())
        assert ids(restored) == ['a', 'c', 'b']

    def test_bad_direction(self, editor):
        with pytest.raises(InvalidOperation):
            editor.move('a', 'left')


class TestCollapse:

    def test_toggle(self, editor):
        assert editor.toggle_collapse('a') is True
        assert editor.is_collapsed('a')
        assert editor.toggle_collapse('a') is False

    def test_collapse_state_is_not_persisted(self, editor):
        editor.collapse('a')
        restored = BlockEditor.from_json(editor.to_json())
        assert not restored.is_collapsed('a')

    def test_collapse_missing_block(self, editor):
        with pytest.raises(BlockNotFound):
            editor.collapse('zzz')


class TestPreview:

    def test_text_blocks_are_truncated(self, editor):
        editor.update('b', {'text': 'あ' * 40})
        assert editor.preview('b') == f"段落: {'あ' * 30}..."

    def test_short_text(self, editor):
        editor.update('a', {'text': 'タイトル'})
        assert editor.preview('a') == '見出し: タイトル'

    def test_image_uses_alt_then_filename(self, editor):
        editor.update('c', {'url': '/media/uploads/photo.png'})
        assert editor.preview('c') == '画像: photo.png'
        editor.update('c', {'url': '/media/uploads/photo.png', 'alt': '写真'})
        assert editor.preview('c') == '画像: 写真'

    def test_list_and_separator(self):
        editor = BlockEditor([
            default_block('list', block_id='l'),
            default_block('separator', block_id='s'),
        ])
        editor.update('l', {'items': ['x' * 25, 'y']})
        assert editor.preview('l') == f"リスト: {'x' * 20}..."
        assert editor.preview('s') == '区切り線'

    def test_unknown_block_preview_is_its_type(self):
        editor = BlockEditor([block_from_dict({'id': 'u', 'type': 'poll'})])
        assert editor.preview('u') == 'poll'

    def test_outline(self, editor):
        editor.collapse('a')
        outline = editor.outline()
        assert [item['id'] for item in outline] == ['a', 'b', 'c']
        assert outline[0]['collapsed'] is True
        assert outline[1]['preview'] == '段落: '


class TestUpload:

    def test_success_sets_field(self, editor):
        storage = FakeStorage()
        editor.storage = storage
        url = editor.upload('c', 'url', SimpleUploadedFile('pic.png', b'data'))
        assert url == 'https://cdn.example.com/pic.png'
        assert editor.get('c').content.url == url

    def test_dialogue_icons(self):
        editor = BlockEditor([default_block('dialogue', block_id='d')], storage=FakeStorage())
        editor.upload('d', 'rightIcon', SimpleUploadedFile('me.png', b'data'))
        content = editor.get('d').content
        assert content.rightIcon == 'https://cdn.example.com/me.png'
        assert content.leftIcon == '/placeholder.svg'

    def test_failure_leaves_block_untouched(self, editor):
        editor.storage = FakeStorage(fail=True)
        with pytest.raises(UploadFailed):
            editor.upload('c', 'url', SimpleUploadedFile('pic.png', b'data'))
        assert editor.get('c').content.url == ''

    def test_defaults_to_media_storage(self, editor):
        with mock.patch('manual.editor.MediaStorage') as storage_class:
            storage_class.return_value.upload.return_value = '/media/pic.png'
            url = editor.upload('c', 'url', SimpleUploadedFile('pic.png', b'data'))
        assert url == '/media/pic.png'
        storage_class.assert_called_once_with()

    def test_field_must_accept_uploads(self, editor):
        editor.storage = FakeStorage()
        with pytest.raises(UploadRejected):
            editor.upload('b', 'url', SimpleUploadedFile('pic.png', b'data'))
        assert editor.storage.uploaded == []


class TestApply:

    def test_dispatches_operations(self, editor):
        added = editor.apply({'op': 'add', 'type': 'code'})
        editor.apply({'op': 'update', 'id': added.id, 'content': {'code': 'print(1)'}})
        editor.apply({'op': 'move', 'id': added.id, 'direction': 'up'})
        editor.apply({'op': 'duplicate', 'id': 'a'})
        editor.apply({'op': 'delete', 'id': 'b'})
        assert ids(editor) == ['a', 'new-2', 'new-1', 'c']
        assert editor.get('new-1').content.code == 'print(1)'

    def test_unknown_operation(self, editor):
        with pytest.raises(InvalidOperation):
            editor.apply({'op': 'explode'})
