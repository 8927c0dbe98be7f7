"""
Block Schema

Structured article content is an ordered list of blocks. Each block is a
tagged variant keyed by ``type`` with its own ``content`` model:

    paragraph, heading, image, video, list, quote, code,
    separator, note, dialogue

Content models are lenient on read: a missing field takes its default, and
a field whose value cannot be coerced falls back to its default instead of
failing, so a block of a known type always renders. Numbers are accepted
wherever text or a style string is expected.

Blocks whose ``type`` is not one of the variants above, or whose content is
not an object at all, are kept as ``UnknownBlock`` so they survive an
edit/save cycle untouched.
"""
import uuid
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)


def new_block_id() -> str:
    return uuid.uuid4().hex


def _fallback(allowed, default):
    """Coerce values outside ``allowed`` to ``default``."""
    def coerce(value):
        return value if value in allowed else default
    return BeforeValidator(coerce)


def _bounded(low: int, high: int, default: int):
    def coerce(value):
        try:
            number = int(value)
        except (TypeError, ValueError):
            return default
        return number if low <= number <= high else default
    return BeforeValidator(coerce)


def _text(value):
    if value is None:
        return ''
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _optional_text(value):
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


Alignment = Annotated[Literal['left', 'center', 'right'], _fallback(('left', 'center', 'right'), 'left')]
Side = Annotated[Literal['left', 'right'], _fallback(('left', 'right'), 'left')]
Size = Annotated[
    Literal['small', 'medium', 'large', 'full'],
    _fallback(('small', 'medium', 'large', 'full'), 'medium'),
]
ListStyle = Annotated[Literal['bullet', 'numbered'], _fallback(('bullet', 'numbered'), 'bullet')]
Text = Annotated[str, BeforeValidator(_text)]
# CSS values (colors, font sizes); None means "not set"
Style = Annotated[Optional[str], BeforeValidator(_optional_text)]


class LenientModel(BaseModel):
    """A field that fails validation takes its declared default."""

    @field_validator('*', mode='wrap')
    @classmethod
    def _default_on_error(cls, value, handler, info):
        try:
            return handler(value)
        except ValidationError:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)


class BlockContent(LenientModel):
    """Base for all content payloads. Unknown keys are kept, not dropped."""
    model_config = ConfigDict(extra='allow', populate_by_name=True)


class TextStyle(BlockContent):
    text: Text = ''
    fontSize: Style = '16px'
    color: Style = '#454545'
    backgroundColor: Style = 'transparent'
    bold: bool = False
    italic: bool = False
    underline: bool = False
    alignment: Alignment = 'left'


class ParagraphContent(TextStyle):
    pass


class HeadingContent(TextStyle):
    fontSize: Style = '24px'
    level: Annotated[int, _bounded(1, 4, 1)] = 1
    design_style: Annotated[int, _bounded(1, 4, 1)] = 1
    color1: Style = '#2589d0'
    color2: Style = '#f2f2f2'
    color3: Style = '#333333'


class NoteContent(TextStyle):
    pass


class ImageContent(BlockContent):
    url: Text = ''
    alt: Text = ''
    caption: Text = ''
    size: Size = 'medium'
    alignment: Alignment = 'left'
    linkUrl: Optional[str] = None
    hoverEffect: bool = False
    rounded: bool = True


class VideoContent(BlockContent):
    url: Text = ''
    caption: Text = ''
    borderColor: Style = '#000000'
    size: Size = 'medium'
    alignment: Alignment = 'left'


class ListContent(BlockContent):
    items: List[Text] = Field(default_factory=lambda: [''])
    type: ListStyle = 'bullet'


class QuoteContent(BlockContent):
    text: Text = ''
    author: Text = ''
    backgroundColor: Style = '#f3f4f6'


class CodeContent(BlockContent):
    code: Text = ''
    language: Text = 'javascript'


class SeparatorContent(BlockContent):
    pass


class DialogueItem(LenientModel):
    model_config = ConfigDict(extra='allow')

    alignment: Side = 'left'
    text: Text = ''


class DialogueContent(BlockContent):
    leftIcon: Text = '/placeholder.svg'
    rightIcon: Text = '/placeholder.svg'
    leftName: Text = '左の名前'
    rightName: Text = '右の名前'
    bubbleBackgroundColor: Style = '#f2f2f2'
    items: List[DialogueItem] = Field(
        default_factory=lambda: [DialogueItem(alignment='left', text='これは会話風の吹き出しです。')]
    )


# =============================================================================
# BLOCK VARIANTS
# =============================================================================

class BaseBlock(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=new_block_id)
    order: float = 0

    def dump(self) -> Dict[str, Any]:
        """Plain dict in the persisted ``{id, type, content, order}`` shape."""
        return self.model_dump(mode='json', include={'id', 'type', 'content', 'order'})


class ParagraphBlock(BaseBlock):
    type: Literal['paragraph'] = 'paragraph'
    content: ParagraphContent = Field(default_factory=ParagraphContent)


class HeadingBlock(BaseBlock):
    type: Literal['heading'] = 'heading'
    content: HeadingContent = Field(default_factory=HeadingContent)


class ImageBlock(BaseBlock):
    type: Literal['image'] = 'image'
    content: ImageContent = Field(default_factory=ImageContent)


class VideoBlock(BaseBlock):
    type: Literal['video'] = 'video'
    content: VideoContent = Field(default_factory=VideoContent)


class ListBlock(BaseBlock):
    type: Literal['list'] = 'list'
    content: ListContent = Field(default_factory=ListContent)


class QuoteBlock(BaseBlock):
    type: Literal['quote'] = 'quote'
    content: QuoteContent = Field(default_factory=QuoteContent)


class CodeBlock(BaseBlock):
    type: Literal['code'] = 'code'
    content: CodeContent = Field(default_factory=CodeContent)


class SeparatorBlock(BaseBlock):
    type: Literal['separator'] = 'separator'
    content: SeparatorContent = Field(default_factory=SeparatorContent)


class NoteBlock(BaseBlock):
    type: Literal['note'] = 'note'
    content: NoteContent = Field(default_factory=NoteContent)


class DialogueBlock(BaseBlock):
    type: Literal['dialogue'] = 'dialogue'
    content: DialogueContent = Field(default_factory=DialogueContent)


class UnknownBlock(BaseBlock):
    """A block this version cannot interpret. Payload is carried verbatim."""
    type: str
    content: Any = None


KnownBlock = Annotated[
    Union[
        ParagraphBlock,
        HeadingBlock,
        ImageBlock,
        VideoBlock,
        ListBlock,
        QuoteBlock,
        CodeBlock,
        SeparatorBlock,
        NoteBlock,
        DialogueBlock,
    ],
    Field(discriminator='type'),
]

Block = Union[KnownBlock, UnknownBlock]

BLOCK_TYPES: Dict[str, type] = {
    'paragraph': ParagraphBlock,
    'heading': HeadingBlock,
    'image': ImageBlock,
    'video': VideoBlock,
    'list': ListBlock,
    'quote': QuoteBlock,
    'code': CodeBlock,
    'separator': SeparatorBlock,
    'note': NoteBlock,
    'dialogue': DialogueBlock,
}

_known_block = TypeAdapter(KnownBlock)


def block_from_dict(data: Dict[str, Any]):
    """
    Build a block from its persisted dict form.

    Never raises for a dict: an unrecognised ``type`` or content that is not
    an object becomes an ``UnknownBlock``.
    """
    data = dict(data)
    data['id'] = str(data['id']) if data.get('id') not in (None, '') else new_block_id()
    data['order'] = _coerce_order(data.get('order'))
    if data.get('content') is None and data.get('type') in BLOCK_TYPES:
        data['content'] = {}

    if data.get('type') in BLOCK_TYPES:
        try:
            return _known_block.validate_python(data)
        except ValidationError:
            pass

    return UnknownBlock(
        id=str(data['id']),
        type=str(data.get('type', '')),
        content=data.get('content'),
        order=data['order'],
    )


def make_content(block_type: str, content: Optional[Dict[str, Any]] = None) -> BlockContent:
    """Validate ``content`` into the content model of ``block_type``."""
    model = BLOCK_TYPES[block_type].model_fields['content'].annotation
    return model.model_validate(content or {})


def default_block(block_type: str, order: float = 0, block_id: Optional[str] = None):
    """A fresh block of ``block_type`` carrying that type's default content."""
    kwargs = {'order': order}
    if block_id is not None:
        kwargs['id'] = block_id
    return BLOCK_TYPES[block_type](**kwargs)


def sort_blocks(blocks):
    """Display order: ascending ``order``, ties keep their list position."""
    return sorted(blocks, key=lambda block: block.order)


def _coerce_order(value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0
