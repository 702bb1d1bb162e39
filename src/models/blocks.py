"""
Block structure models

Defines the node types produced by the block-structuring engine.
"""

from enum import Enum
from dataclasses import dataclass, field
from functools import cached_property
from typing import List, Sequence


class BlockKind(Enum):
    """Kinds of structural units in a tagdown document"""
    DIRECTIVE = "directive"        # [name ...] header plus indented body
    HEADING = "heading"            # # Title
    LIST_ITEM = "list-item"        # * item
    CODE_FENCE = "code-fence"      # ``` lang .class
    RULE_GROUP = "rule-group"      # lines between --- separators
    PROSE = "prose"                # one markdown paragraph


# Kinds whose content is itself tagdown markup and can be re-segmented
NESTING_KINDS = {BlockKind.DIRECTIVE, BlockKind.LIST_ITEM, BlockKind.RULE_GROUP}


class LineGroup(list):
    """
    Lines of one content group that remember where they start

    Compares and behaves as a plain list. line_offset is the number of
    document lines before the first one, so errors raised while the group
    is rendered point at the right source line.
    """

    def __init__(self, lines: Sequence[str] = (), line_offset: int = 0) -> None:
        super().__init__(lines)
        self.line_offset = line_offset


@dataclass
class BlockNode:
    """
    One structural unit of a document

    Attributes:
        kind: What the node is
        header: Directive header (without brackets), heading text, or fence info string
        content: Lines belonging to the node. For directives and list items these
                 are the nested lines with one indentation level removed
        level: Heading level (1-6), zero otherwise
        indent: Column of the opening line
        line_number: 1-based line of the opening line (for error reporting)
        content_offset: Document lines before content[0]

    Example:
        For lines ['[list]', '  * foo', '  * bar']:
        BlockNode(
            kind=BlockKind.DIRECTIVE,
            header='list',
            content=['* foo', '* bar'],
            line_number=1
        )
    """
    kind: BlockKind
    header: str = ""
    content: List[str] = field(default_factory=list)
    level: int = 0
    indent: int = 0
    line_number: int = 1
    content_offset: int = 0

    @cached_property
    def children(self) -> List["BlockNode"]:
        """Nested nodes, segmented on first access"""
        if self.kind not in NESTING_KINDS:
            return []
        from ..lib.blocks import blocks_parse
        return blocks_parse(self.content, self.content_offset)

    @property
    def text(self) -> str:
        """Content lines joined back into a single string"""
        return "\n".join(self.content)
