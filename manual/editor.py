"""
Block Editor

In-memory editing session over one block document (an article body, the
privacy policy or the terms of service). The admin API loads a document,
applies one operation and saves the result back.

Collapsed/expanded state is editor-only and never persisted.
"""
import logging
import posixpath
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError as PydanticValidationError

from .blocks import (
    BLOCK_TYPES,
    BlockContent,
    UnknownBlock,
    default_block,
    make_content,
    new_block_id,
    sort_blocks,
)
from .codec import decode_blocks, encode_blocks
from .exceptions import (
    BlockNotFound,
    InvalidBlockContent,
    InvalidOperation,
    UnknownBlockType,
    UploadRejected,
)
from .storage import MediaStorage

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 30
LIST_PREVIEW_LENGTH = 20

# Content fields that accept an uploaded file, per block type
UPLOAD_FIELDS = {
    'image': ('url',),
    'video': ('url',),
    'dialogue': ('leftIcon', 'rightIcon'),
}

PREVIEW_LABELS = {
    'heading': '見出し',
    'paragraph': '段落',
    'image': '画像',
    'video': '動画',
    'list': 'リスト',
    'quote': '引用',
    'code': 'コード',
    'separator': '区切り線',
    'note': '注意事項',
    'dialogue': '会話',
}


def _truncate(text, length=PREVIEW_LENGTH):
    text = text or ''
    return text if len(text) <= length else f"{text[:length]}..."


class BlockEditor:
    """
    Owns the canonical block list of one document.

    The list is kept in display order (ascending ``order``), so positions
    seen by ``move`` match what readers see.

    Args:
        blocks: initial blocks
        storage: object with ``upload(file) -> url`` (see MediaStorage)
        id_factory: callable producing ids for new and duplicated blocks
    """

    def __init__(self, blocks: Iterable = (), storage=None, id_factory=new_block_id):
        self._blocks = sort_blocks(blocks)
        self.storage = storage
        self.id_factory = id_factory
        self._collapsed = set()

    @classmethod
    def from_json(cls, raw, **kwargs):
        return cls(decode_blocks(raw), **kwargs)

    def to_json(self) -> str:
        return encode_blocks(self._blocks)

    @property
    def blocks(self) -> List:
        return list(self._blocks)

    def __len__(self):
        return len(self._blocks)

    def __iter__(self):
        return iter(self._blocks)

    def get(self, block_id):
        for block in self._blocks:
            if block.id == block_id:
                return block
        raise BlockNotFound(f"Block {block_id} not found")

    def index_of(self, block_id) -> int:
        for index, block in enumerate(self._blocks):
            if block.id == block_id:
                return index
        raise BlockNotFound(f"Block {block_id} not found")

    # -------------------------------------------------------------------------
    # Document operations
    # -------------------------------------------------------------------------

    def add(self, block_type: str):
        """Append a block of ``block_type`` with its default content."""
        if block_type not in BLOCK_TYPES:
            raise UnknownBlockType(f"Unknown block type: {block_type}")
        block = default_block(block_type, order=len(self._blocks), block_id=self.id_factory())
        self._blocks.append(block)
        return block

    def update(self, block_id, content):
        """
        Replace a block's content wholesale.

        Callers send the full content object; fields left out fall back to
        their defaults, they are not merged with the previous content.
        """
        index = self.index_of(block_id)
        block = self._blocks[index]

        if isinstance(block, UnknownBlock):
            self._blocks[index] = block.model_copy(update={'content': content})
            return self._blocks[index]

        if isinstance(content, BlockContent):
            content = content.model_dump()
        try:
            new_content = make_content(block.type, content)
        except PydanticValidationError as e:
            raise InvalidBlockContent(e.errors(include_url=False)) from e

        self._blocks[index] = block.model_copy(update={'content': new_content})
        return self._blocks[index]

    def delete(self, block_id):
        """Remove a block. Other blocks keep their ``order`` values."""
        index = self.index_of(block_id)
        removed = self._blocks.pop(index)
        self._collapsed.discard(block_id)
        return removed

    def duplicate(self, block_id):
        """
        Copy a block right after its source.

        The copy gets ``order + 0.5`` and the list is re-sorted by ``order``;
        on a tie the copy stays next to its source.
        """
        index = self.index_of(block_id)
        source = self._blocks[index]
        copy = source.model_copy(
            deep=True,
            update={'id': self.id_factory(), 'order': source.order + 0.5},
        )
        self._blocks.insert(index + 1, copy)
        self._blocks = sort_blocks(self._blocks)
        return copy

    def move(self, block_id, direction: str) -> bool:
        """
        Swap a block with its neighbour in the list.

        Picks the neighbour by array position and swaps the two ``order``
        values along with the positions, so the rendered page follows the
        move. Returns False (no-op) at the boundaries.
        """
        if direction not in ('up', 'down'):
            raise InvalidOperation(f"Invalid direction: {direction}")

        index = self.index_of(block_id)
        target = index - 1 if direction == 'up' else index + 1
        if target < 0 or target >= len(self._blocks):
            return False

        moved, other = self._blocks[index], self._blocks[target]
        self._blocks[index] = other.model_copy(update={'order': moved.order})
        self._blocks[target] = moved.model_copy(update={'order': other.order})
        return True

    # -------------------------------------------------------------------------
    # Collapse state (UI only)
    # -------------------------------------------------------------------------

    def collapse(self, block_id):
        self.get(block_id)
        self._collapsed.add(block_id)

    def expand(self, block_id):
        self._collapsed.discard(block_id)

    def toggle_collapse(self, block_id) -> bool:
        if block_id in self._collapsed:
            self.expand(block_id)
        else:
            self.collapse(block_id)
        return block_id in self._collapsed

    def is_collapsed(self, block_id) -> bool:
        return block_id in self._collapsed

    def preview(self, block_id) -> str:
        """Short one-line summary shown for collapsed blocks."""
        block = self.get(block_id)
        label = PREVIEW_LABELS.get(block.type)
        if label is None or isinstance(block, UnknownBlock):
            return block.type or 'unknown'

        content = block.content
        if block.type == 'separator':
            return label
        if block.type == 'image':
            return f"{label}: {content.alt or posixpath.basename(content.url)}"
        if block.type == 'video':
            return f"{label}: {content.url}"
        if block.type == 'list':
            first = content.items[0] if content.items else ''
            return f"{label}: {_truncate(first, LIST_PREVIEW_LENGTH)}"
        if block.type == 'code':
            return f"{label}: {_truncate(content.code)}"
        if block.type == 'dialogue':
            first = content.items[0].text if content.items else ''
            return f"{label}: {_truncate(first)}"
        return f"{label}: {_truncate(content.text)}"

    def outline(self) -> List[Dict[str, Any]]:
        """Blocks in array order with their preview and collapse state."""
        return [
            {
                **block.dump(),
                'preview': self.preview(block.id),
                'collapsed': self.is_collapsed(block.id),
            }
            for block in self._blocks
        ]

    # -------------------------------------------------------------------------
    # Uploads
    # -------------------------------------------------------------------------

    def upload(self, block_id, field: str, file) -> str:
        """
        Upload ``file`` and store its public URL in ``field`` of the block.

        On failure the block is left untouched and the storage error
        propagates. Nothing is retried.
        """
        block = self.get(block_id)
        if field not in UPLOAD_FIELDS.get(block.type, ()):
            raise UploadRejected(f"{block.type} blocks do not accept uploads for '{field}'")

        if self.storage is None:
            self.storage = MediaStorage()

        url = self.storage.upload(file)
        index = self.index_of(block_id)
        self._blocks[index] = block.model_copy(
            update={'content': block.content.model_copy(update={field: url})}
        )
        logger.info("Stored upload for block %s (%s.%s)", block_id, block.type, field)
        return url

    # -------------------------------------------------------------------------
    # API dispatch
    # -------------------------------------------------------------------------

    def apply(self, operation: Dict[str, Any]) -> Optional[Any]:
        """
        Apply one operation from an admin request body, e.g.
        ``{"op": "duplicate", "id": "..."}``.
        """
        op = operation.get('op')
        block_id = operation.get('id')

        if op == 'add':
            return self.add(operation.get('type'))
        if op == 'update':
            return self.update(block_id, operation.get('content') or {})
        if op == 'delete':
            return self.delete(block_id)
        if op == 'duplicate':
            return self.duplicate(block_id)
        if op == 'move':
            return self.move(block_id, operation.get('direction'))
        raise InvalidOperation(f"Unknown operation: {op}")
