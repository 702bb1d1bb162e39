"""
tagdown - Markup extension engine for content authors

Bracketed [tag ...] directives and indentation-structured blocks on top of
Markdown, rendered to HTML.
"""

__version__ = "1.0.0"

from .lib import (
    markup_render,
    lines_render,
    header_parse,
    blocks_parse,
    TagRegistry,
    TagdownError,
    UnresolvedTagError,
    LOG,
)
from .models import RenderOptions, TagSpec, TagCategory

__all__ = [
    "markup_render",
    "lines_render",
    "header_parse",
    "blocks_parse",
    "TagRegistry",
    "TagdownError",
    "UnresolvedTagError",
    "LOG",
    "RenderOptions",
    "TagSpec",
    "TagCategory",
    "__version__",
]
