"""
Base prose rendering with inline tags

Paragraphs and heading text are rendered by markdown-it. Before markdown
runs, registered inline tags ('Value: [print value="110"]') are rendered
through their handlers and replaced by placeholders; the placeholders are
swapped back for the handler output afterwards, so markdown never sees or
escapes handler markup.

Unregistered bracket text and links ('[text](url)') are left to markdown.
"""

import re
from typing import Any, List, Tuple

from markdown_it import MarkdownIt

from ..config import AppSettings
from .header import header_parse
from .log import LOG

# A code span (kept literal), or [name ...] not followed by '(' (a link).
# Quoted literals may hold brackets.
INLINE_TAG_RE = re.compile(
    r'(?P<code>(?<!`)(?P<ticks>`+)(?!`).*?(?<!`)(?P=ticks)(?!`))'
    r'|\[(?P<tag>[\w!:][^\[\]"]*(?:"[^"]*"[^\[\]"]*)*)\](?!\()',
    re.DOTALL,
)


def markdown_make(settings: AppSettings) -> MarkdownIt:
    """Create the markdown-it renderer used for prose"""
    md = MarkdownIt(settings.markdown_preset)
    md.enable(["table", "strikethrough"])
    return md


def tags_protect(text: str, options: Any) -> Tuple[str, List[str]]:
    """
    Render inline tags and replace them with placeholders

    Only tags whose name is registered are rendered; the anonymous and
    custom-element fallbacks apply to block directives only. Brackets
    inside `code spans` are left alone.

    Returns:
        (text with placeholders, rendered tag HTML indexed by placeholder)
    """
    from .renderer import data_build

    rendered: List[str] = []

    def protect(match: re.Match[str]) -> str:
        if match.group('code'):
            return match.group(0)

        header = header_parse(match.group('tag'), options.settings)
        spec = options.registry.spec_get(header.name) if header.name else None
        if spec is None or spec.is_wildcard:
            return match.group(0)

        LOG(f"Inline tag [{header.name}]", level=3)
        data = data_build(header, [], spec, options)
        rendered.append(spec.handler_bind(header.name)(data, options))
        return options.settings.placeHolder_make(len(rendered) - 1)

    return INLINE_TAG_RE.sub(protect, text), rendered


def tags_restore(html: str, rendered: List[str], settings: AppSettings) -> str:
    """Swap placeholders back for rendered tag HTML"""
    if not rendered:
        return html

    pattern = re.compile(
        re.escape(settings.placeholder_prefix) + r'\d+' + re.escape(settings.placeholder_suffix)
    )

    def restore(match: re.Match[str]) -> str:
        index = settings.childIndex_extract(match.group(0))
        if index is None or index >= len(rendered):
            return match.group(0)
        return rendered[index]

    return pattern.sub(restore, html)


def prose_render(lines: List[str], options: Any) -> str:
    """
    Render one paragraph of markdown to HTML

    Args:
        lines: Paragraph lines
        options: Active RenderOptions

    Returns:
        HTML with surrounding whitespace removed
    """
    text, rendered = tags_protect('\n'.join(lines), options)
    html = options.markdown.render(text).strip()
    return tags_restore(html, rendered, options.settings)


def inline_render(text: str, options: Any) -> str:
    """Render inline markdown (no <p> wrapper), including inline tags"""
    protected, rendered = tags_protect(text, options)
    html = options.markdown.renderInline(protected).strip()
    return tags_restore(html, rendered, options.settings)
