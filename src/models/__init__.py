"""
Models package for tagdown

Contains data structures and type definitions for the parse/render pipeline.
"""

from .header import DirectiveHeader, MaskedHeader, ParsedSpecs, Value
from .blocks import BlockKind, BlockNode, LineGroup
from .tags import TagSpec, TagCategory, RESERVED_TAGS
from .options import RenderOptions

__all__ = [
    "DirectiveHeader",
    "MaskedHeader",
    "ParsedSpecs",
    "Value",
    "BlockKind",
    "BlockNode",
    "LineGroup",
    "TagSpec",
    "TagCategory",
    "RESERVED_TAGS",
    "RenderOptions",
]
