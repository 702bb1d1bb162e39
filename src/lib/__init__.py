"""
tagdown - Markup extension engine for content authors

Bracketed [tag ...] directives and indentation-structured blocks on top of
Markdown, rendered to HTML.
"""

__version__ = "1.0.0"

from .renderer import markup_render, lines_render, nodes_render
from .blocks import blocks_parse, groups_split
from .header import header_parse, attr_parse, specs_parse
from .tokenizer import quotes_mask
from .registry import TagRegistry
from .errors import TagdownError, UnresolvedTagError
from .log import LOG, options_connectToLogger

__all__ = [
    "markup_render",
    "lines_render",
    "nodes_render",
    "blocks_parse",
    "groups_split",
    "header_parse",
    "attr_parse",
    "specs_parse",
    "quotes_mask",
    "TagRegistry",
    "TagdownError",
    "UnresolvedTagError",
    "LOG",
    "options_connectToLogger",
    "__version__",
]
