"""
Block document encoding.

Article.content and SiteSetting.value hold a JSON array of
``{id, type, content, order}`` objects. Rows written before the block
editor existed hold plain text instead; those are read back as a single
paragraph block.
"""
import json
import logging

from .blocks import ParagraphBlock, ParagraphContent, block_from_dict

logger = logging.getLogger(__name__)

LEGACY_BLOCK_ID = 'legacy'


def encode_blocks(blocks) -> str:
    return json.dumps([block.dump() for block in blocks], ensure_ascii=False)


def decode_blocks(raw):
    """
    Decode a stored content field into a list of blocks.

    Anything that is not a JSON array of block-shaped objects (each with a
    string ``type``) is treated as legacy plain text and wrapped into one
    paragraph block with ``order`` 0.
    """
    if raw is None:
        raw = ''

    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        return legacy_blocks(raw)

    if not _is_block_array(data):
        logger.debug("Content is not a block array, using legacy fallback")
        return legacy_blocks(raw)

    return [block_from_dict(item) for item in data]


def legacy_blocks(text):
    return [
        ParagraphBlock(
            id=LEGACY_BLOCK_ID,
            content=ParagraphContent(text=text if isinstance(text, str) else str(text)),
            order=0,
        )
    ]


def is_block_document(raw) -> bool:
    """True when ``raw`` is stored in the block format (not legacy text)."""
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        return False
    return _is_block_array(data)


def _is_block_array(data) -> bool:
    return isinstance(data, list) and all(
        isinstance(item, dict) and isinstance(item.get('type'), str) for item in data
    )
