"""
Block Renderer

Turns a block document into HTML for the public site. Rendering is pure:
the only hook is ``link_builder``, which decides the ``href`` of every link
produced from content (auto-linked URLs and linked images). The public API
passes a builder that routes through the click-tracking redirect, so a
LinkClick is recorded before the visitor reaches the target.
"""
import logging
import re
from typing import Callable, Iterable, Optional

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.utils.html import escape, format_html, format_html_join
from django.utils.safestring import SafeString, mark_safe

from .blocks import BLOCK_TYPES, UnknownBlock, sort_blocks
from .codec import decode_blocks

logger = logging.getLogger(__name__)

LinkBuilder = Callable[[str, Optional[str], Optional[str]], str]

URL_PATTERN = re.compile(r'(https?://[^\s]+)')

YOUTUBE_PATTERN = re.compile(r'(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([^&\n?#]+)')

YOUTUBE_EMBED_URL = 'https://www.youtube.com/embed/{}'

SIZE_CLASSES = {
    'small': 'w-1/4',
    'medium': 'w-1/2',
    'large': 'w-3/4',
    'full': 'w-full',
}


def normalize_video_url(url: str) -> str:
    """
    Rewrite YouTube watch/short/embed URLs to the embeddable form.

    Any other URL is returned unchanged.
    """
    match = YOUTUBE_PATTERN.search(url or '')
    if match:
        return YOUTUBE_EMBED_URL.format(match.group(1))
    return url


def direct_link(url, block_id=None, article_id=None):
    return url


class BlockRenderer:
    """Renders one document; ``article_id`` is attached to tracked links."""

    def __init__(self, article_id=None, link_builder: Optional[LinkBuilder] = None):
        self.article_id = str(article_id) if article_id else None
        self.link_builder = link_builder or direct_link
        self.placeholder_icon = getattr(settings, 'MANUAL_PLACEHOLDER_ICON', '/placeholder.svg')

    def render(self, blocks: Iterable) -> SafeString:
        parts = [self.render_block(block) for block in sort_blocks(blocks)]
        return format_html(
            '<div class="prose prose-lg max-w-none">{}</div>',
            mark_safe(''.join(parts)),
        )

    def render_block(self, block) -> str:
        if isinstance(block, UnknownBlock):
            logger.debug("Skipping block %s of unknown type %r", block.id, block.type)
            return ''
        return _RENDERERS[block.type](self, block)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def href(self, url, block_id):
        return self.link_builder(url, block_id, self.article_id)

    def linkify(self, text, block_id) -> SafeString:
        """Escape ``text`` and turn bare http(s) URLs into tracked links."""
        pieces = []
        for index, part in enumerate(URL_PATTERN.split(text or '')):
            if index % 2:
                pieces.append(format_html(
                    '<a href="{}" target="_blank" rel="noopener noreferrer" class="content-link">{}</a>',
                    self.href(part, block_id),
                    part,
                ))
            else:
                pieces.append(escape(part))
        return mark_safe(''.join(pieces))

    @staticmethod
    def style(**declarations) -> str:
        return '; '.join(
            f"{name.replace('_', '-')}: {value}"
            for name, value in declarations.items()
            if value not in (None, '')
        )

    def text_style(self, content) -> str:
        return self.style(
            font_size=content.fontSize,
            color=content.color,
            background_color=None if content.backgroundColor == 'transparent' else content.backgroundColor,
            font_weight='bold' if content.bold else 'normal',
            font_style='italic' if content.italic else 'normal',
            text_decoration='underline' if content.underline else 'none',
            text_align=content.alignment,
        )

    # -------------------------------------------------------------------------
    # Block types
    # -------------------------------------------------------------------------

    def paragraph(self, block):
        return format_html(
            '<p class="mb-4 whitespace-pre-wrap" style="{}">{}</p>',
            self.text_style(block.content),
            self.linkify(block.content.text, block.id),
        )

    def heading(self, block):
        content = block.content
        return format_html(
            '<div class="heading-style-{}" style="{}"><h{} class="m-0 p-0" style="{}">{}</h{}></div>',
            content.design_style,
            self.style(**{
                '--heading-color-1': content.color1,
                '--heading-color-2': content.color2,
                '--heading-color-3': content.color3,
            }),
            content.level,
            self.text_style(content),
            self.linkify(content.text, block.id),
            content.level,
        )

    def note(self, block):
        return format_html(
            '<div class="note-box"><p class="whitespace-pre-wrap" style="{}">{}</p></div>',
            self.text_style(block.content),
            self.linkify(block.content.text, block.id),
        )

    def image(self, block):
        content = block.content
        if not content.url:
            return ''

        classes = ['max-w-full', 'h-auto', SIZE_CLASSES[content.size]]
        if content.rounded:
            classes.append('rounded-lg')
        if content.hoverEffect:
            classes.append('hover-effect')

        image = format_html(
            '<img src="{}" alt="{}" class="{}">',
            content.url,
            content.alt,
            ' '.join(classes),
        )
        if content.linkUrl:
            image = format_html(
                '<a href="{}" target="_blank" rel="noopener noreferrer" class="image-link">{}</a>',
                self.href(content.linkUrl, block.id),
                image,
            )

        return format_html(
            '<figure class="mb-4 text-{}">{}{}</figure>',
            content.alignment,
            image,
            self.caption(content.caption),
        )

    def video(self, block):
        content = block.content
        if not content.url:
            return ''
        return format_html(
            '<figure class="mb-4 text-{}"><div class="aspect-video {}">'
            '<iframe src="{}" class="w-full h-full rounded-lg" style="{}" allowfullscreen></iframe>'
            '</div>{}</figure>',
            content.alignment,
            SIZE_CLASSES[content.size],
            normalize_video_url(content.url),
            self.style(border=f"3px solid {content.borderColor or '#000000'}"),
            self.caption(content.caption),
        )

    @staticmethod
    def caption(text):
        if not text:
            return ''
        return format_html('<figcaption class="text-sm mt-2 italic text-center">{}</figcaption>', text)

    def list(self, block):
        content = block.content
        tag, css = ('ol', 'list-decimal') if content.type == 'numbered' else ('ul', 'list-disc')
        return format_html(
            '<{} class="mb-4 {} list-inside space-y-1">{}</{}>',
            tag,
            css,
            format_html_join('', '<li>{}</li>', ((item,) for item in content.items)),
            tag,
        )

    def quote(self, block):
        content = block.content
        author = ''
        if content.author:
            author = format_html('<cite class="text-sm">— {}</cite>', content.author)
        return format_html(
            '<blockquote class="mb-4 p-4 border-l-4 rounded-r-lg" style="{}">'
            '<p class="italic mb-2">{}</p>{}</blockquote>',
            self.style(background_color=content.backgroundColor or '#f3f4f6'),
            content.text,
            author,
        )

    def code(self, block):
        content = block.content
        return format_html(
            '<div class="mb-4"><div class="code-language text-xs">{}</div>'
            '<pre class="overflow-x-auto"><code class="text-sm font-mono">{}</code></pre></div>',
            content.language,
            content.code,
        )

    def separator(self, block):
        return mark_safe('<hr class="my-6">')

    def dialogue(self, block):
        content = block.content
        bubble_style = self.style(background_color=content.bubbleBackgroundColor or '#f2f2f2')
        rows = []
        for item in content.items:
            right = item.alignment == 'right'
            icon = (content.rightIcon if right else content.leftIcon) or self.placeholder_icon
            name = content.rightName if right else content.leftName
            label = format_html('<span class="dialogue-name">{}</span>', name) if name else ''
            rows.append(format_html(
                '<div class="dialogue-row dialogue-{}">'
                '<div class="dialogue-speaker"><img src="{}" alt="icon" class="dialogue-icon">{}</div>'
                '<div class="dialogue-bubble" style="{}"><p class="m-0 whitespace-pre-wrap">{}</p></div>'
                '</div>',
                'right' if right else 'left',
                icon,
                label,
                bubble_style,
                self.linkify(item.text, block.id),
            ))
        return format_html('<div class="dialogue space-y-2 my-4">{}</div>', mark_safe(''.join(rows)))


_RENDERERS = {
    'paragraph': BlockRenderer.paragraph,
    'heading': BlockRenderer.heading,
    'image': BlockRenderer.image,
    'video': BlockRenderer.video,
    'list': BlockRenderer.list,
    'quote': BlockRenderer.quote,
    'code': BlockRenderer.code,
    'separator': BlockRenderer.separator,
    'note': BlockRenderer.note,
    'dialogue': BlockRenderer.dialogue,
}

if set(_RENDERERS) != set(BLOCK_TYPES):
    raise ImproperlyConfigured(
        f"Block renderers out of sync with block types: {sorted(set(BLOCK_TYPES) ^ set(_RENDERERS))}"
    )


def render_blocks(blocks, article_id=None, link_builder: Optional[LinkBuilder] = None) -> SafeString:
    return BlockRenderer(article_id=article_id, link_builder=link_builder).render(blocks)


def render_document(raw, article_id=None, link_builder: Optional[LinkBuilder] = None) -> SafeString:
    """Decode a stored content field and render it."""
    return render_blocks(decode_blocks(raw), article_id=article_id, link_builder=link_builder)
