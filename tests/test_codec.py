"""
Tests for block document encoding and the legacy plain-text fallback.
"""
import json

from manual.blocks import ParagraphBlock, UnknownBlock, block_from_dict, default_block
from manual.codec import LEGACY_BLOCK_ID, decode_blocks, encode_blocks, is_block_document


class TestEncodeDecode:

    def test_round_trip_preserves_document(self, sample_blocks):
        decoded = decode_blocks(encode_blocks(sample_blocks))
        assert [block.dump() for block in decoded] == [block.dump() for block in sample_blocks]

    def test_encoding_keeps_non_ascii(self, sample_blocks):
        raw = encode_blocks(sample_blocks)
        assert 'はじめに' in raw
        assert json.loads(raw)[0] == {
            'id': 'h1',
            'type': 'heading',
            'content': sample_blocks[0].content.model_dump(mode='json'),
            'order': 0.0,
        }

    def test_round_trip_keeps_unknown_blocks(self):
        blocks = [
            default_block('paragraph', order=0, block_id='p'),
            block_from_dict({'id': 'u', 'type': 'poll', 'content': {'q': '?'}, 'order': 1}),
        ]
        decoded = decode_blocks(encode_blocks(blocks))
        assert isinstance(decoded[1], UnknownBlock)
        assert decoded[1].dump() == blocks[1].dump()

    def test_array_order_is_kept_on_decode(self):
        raw = json.dumps([
            {'id': 'b', 'type': 'paragraph', 'content': {}, 'order': 5},
            {'id': 'a', 'type': 'paragraph', 'content': {}, 'order': 1},
        ])
        assert [block.id for block in decode_blocks(raw)] == ['b', 'a']

    def test_empty_array_is_empty_document(self):
        assert decode_blocks('[]') == []
        assert encode_blocks([]) == '[]'


class TestLegacyFallback:

    def test_plain_text_becomes_one_paragraph(self):
        blocks = decode_blocks('昔の本文です')
        assert len(blocks) == 1
        assert isinstance(blocks[0], ParagraphBlock)
        assert blocks[0].id == LEGACY_BLOCK_ID
        assert blocks[0].order == 0
        assert blocks[0].content.text == '昔の本文です'

    def test_json_that_is_not_a_block_array(self):
        for raw in ('{"a": 1}', '42', '"text"', '[1, 2]'):
            blocks = decode_blocks(raw)
            assert blocks[0].id == LEGACY_BLOCK_ID
            assert blocks[0].content.text == raw

    def test_array_of_objects_without_type_is_legacy(self):
        raw = '[{"title": "FAQ", "body": "old export"}]'
        blocks = decode_blocks(raw)
        assert len(blocks) == 1
        assert blocks[0].id == LEGACY_BLOCK_ID
        assert blocks[0].content.text == raw
        assert not is_block_document(raw)

    def test_none_and_empty(self):
        assert decode_blocks(None)[0].content.text == ''
        assert decode_blocks('')[0].content.text == ''

    def test_is_block_document(self, sample_blocks):
        assert is_block_document(encode_blocks(sample_blocks))
        assert is_block_document('[]')
        assert not is_block_document('plain text')
        assert not is_block_document('{"a": 1}')
