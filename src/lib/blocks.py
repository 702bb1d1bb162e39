"""
Block-structuring engine for tagdown documents

Groups an ordered sequence of lines into a flat list of BlockNodes. Nested
content (directive bodies, list item bodies, rule-separated groups) is kept
as raw lines on the node and fed back through the same entry point when it
is rendered.

Structure is decided line by line:
- [name ...]    opens a DIRECTIVE; deeper-indented lines are its body
- # Heading     HEADING, no body
- * item        LIST_ITEM; deeper-indented lines are its body
- ```           CODE_FENCE, taken verbatim until the closing fence
- ---           splits the whole collection into RULE_GROUP siblings
- anything else PROSE; a blank line ends the paragraph

Indentation is compared relatively only: a line belongs to the nearest
preceding header line that is less indented.

Example:
    >>> nodes = blocks_parse(['[list]', '  * foo', '  * bar', 'Done.'])
    >>> [node.kind.value for node in nodes]
    ['directive', 'prose']
    >>> nodes[0].content
    ['* foo', '* bar']
"""

import re
from typing import List, Optional, Sequence

from ..models.blocks import BlockKind, BlockNode, LineGroup
from .tokenizer import quotes_mask

HEADING_RE = re.compile(r'(#{1,6})(?:\s+(.*))?')
BULLET_RE = re.compile(r'\*(?:\s+(.*))?')
RULE_RE = re.compile(r'-{3,}')
FENCE_CLOSE_RE = re.compile(r'`{3,}')
HEADER_START_RE = re.compile(r'[\w.#!:]')
FENCE_MARKER = '```'


def indent_get(line: str) -> int:
    """Column of the first non-blank character"""
    return len(line) - len(line.lstrip())


def line_dedent(line: str, amount: int) -> str:
    """Remove up to amount leading whitespace characters"""
    return line[min(amount, indent_get(line)):]


def lines_trim(lines: Sequence[str]) -> List[str]:
    """Drop leading and trailing blank lines"""
    start, end = 0, len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return list(lines[start:end])


def lines_group(lines: Sequence[str], line_offset: int) -> LineGroup:
    """Trim blank lines into a LineGroup, shifting the offset past leading ones"""
    leading = next((index for index, line in enumerate(lines) if line.strip()), 0)
    return LineGroup(lines_trim(lines), line_offset + leading)


def indent_base(lines: Sequence[str]) -> int:
    """Smallest indentation among non-blank lines"""
    indents = [indent_get(line) for line in lines if line.strip()]
    return min(indents) if indents else 0


def directive_is(stripped: str) -> bool:
    """
    Check if a stripped line is a block directive header

    The line must be exactly one bracketed header: '[image "a].png"]' is a
    header, '[a] and [b]' and '[link](url)' are not.
    """
    if len(stripped) < 3 or stripped[0] != '[' or stripped[-1] != ']':
        return False
    interior = stripped[1:-1]
    if not HEADER_START_RE.match(interior):
        return False
    skeleton = quotes_mask(interior).skeleton
    return '[' not in skeleton and ']' not in skeleton


def rules_find(lines: Sequence[str]) -> List[int]:
    """
    Indices of --- rule lines that split this collection

    Only rules at the collection's base indentation count, and never
    inside a code fence.
    """
    base = indent_base(lines)
    rules = []
    fenced = False

    for index, line in enumerate(lines):
        stripped = line.strip()
        if fenced:
            if FENCE_CLOSE_RE.fullmatch(stripped):
                fenced = False
        elif stripped.startswith(FENCE_MARKER):
            fenced = True
        elif RULE_RE.fullmatch(stripped) and indent_get(line) == base:
            rules.append(index)

    return rules


def groups_split(lines: Sequence[str], line_offset: Optional[int] = None) -> List[LineGroup]:
    """
    Split lines on --- rules into independently renderable groups

    Always returns at least one group. Blank lines around each group are
    trimmed; empty groups are kept so positions stay stable. Each group
    carries the document line offset of its first line, counted from
    line_offset (by default the offset carried by lines itself).

    Example:
        >>> groups_split(['Hey', '---', 'Girl'])
        [['Hey'], ['Girl']]
    """
    if line_offset is None:
        line_offset = getattr(lines, 'line_offset', 0)

    groups = []
    start = 0
    for index in rules_find(lines) + [len(lines)]:
        groups.append(lines_group(lines[start:index], line_offset + start))
        start = index + 1
    return groups


class BlockParser:
    """
    One-pass block parser over a sequence of lines

    A parser instance is single use: construct, call parse(), discard.
    """

    def __init__(self, lines: Sequence[str], line_offset: int = 0):
        """
        Initialize parser with source lines

        Args:
            lines: Ordered lines, already split on line boundaries
            line_offset: Number of lines preceding these in the enclosing
                         document, used to report absolute line numbers

        Attributes:
            position: Index of the line being examined
            nodes: Accumulated top-level nodes
            paragraph: Open PROSE node, if any
        """
        self.lines = list(lines)
        self.line_offset = line_offset
        self.position = 0
        self.nodes: List[BlockNode] = []
        self.paragraph: Optional[BlockNode] = None

    def parse(self) -> List[BlockNode]:
        """
        Segment the lines into BlockNodes

        Returns:
            Top-level nodes in the order of their opening lines. If the
            collection contains --- rules, one RULE_GROUP node per group.
        """
        rules = rules_find(self.lines)
        if rules:
            return self.groups_build(rules)

        while self.position < len(self.lines):
            line = self.lines[self.position]
            stripped = line.strip()
            indent = indent_get(line)

            if not stripped:
                self.paragraph_close()
                self.position += 1
                continue

            # Deeper-indented lines continue the open paragraph, whatever their shape
            if self.paragraph and indent > self.paragraph.indent:
                self.paragraph.content.append(line_dedent(line, self.paragraph.indent))
                self.position += 1
                continue

            if stripped.startswith(FENCE_MARKER):
                self.paragraph_close()
                self.fence_collect(stripped, indent)
                continue

            heading = HEADING_RE.fullmatch(stripped)
            if heading:
                self.paragraph_close()
                self.heading_add(heading, indent)
                continue

            bullet = BULLET_RE.fullmatch(stripped)
            if bullet:
                self.paragraph_close()
                self.item_collect(bullet.group(1) or '', indent)
                continue

            if directive_is(stripped):
                self.paragraph_close()
                self.directive_collect(stripped, indent)
                continue

            self.prose_add(line, indent)

        self.paragraph_close()
        return self.nodes

    def lineNumber_get(self) -> int:
        """1-based source line number of the current position"""
        return self.line_offset + self.position + 1

    def groups_build(self, rules: List[int]) -> List[BlockNode]:
        """Build one RULE_GROUP node per --- separated group"""
        nodes = []
        start = 0
        for index in rules + [len(self.lines)]:
            group = lines_group(self.lines[start:index], self.line_offset + start)
            nodes.append(BlockNode(
                kind=BlockKind.RULE_GROUP,
                content=group,
                indent=indent_base(self.lines),
                line_number=self.line_offset + start + 1,
                content_offset=group.line_offset,
            ))
            start = index + 1
        return nodes

    def body_collect(self, header_indent: int) -> LineGroup:
        """
        Collect the lines nested under a header line

        Consumes every following line that is blank or indented deeper than
        header_indent. The body is dedented by the indentation of its first
        non-blank line; blank lines around it are dropped. The
        returned group knows its document line offset.
        """
        start = self.position
        while self.position < len(self.lines):
            line = self.lines[self.position]
            if line.strip() and indent_get(line) <= header_indent:
                break
            self.position += 1

        body = lines_group(self.lines[start:self.position], self.line_offset + start)
        amount = indent_base(body)
        return LineGroup([line_dedent(line, amount) for line in body], body.line_offset)

    def directive_collect(self, stripped: str, indent: int) -> None:
        """Open a DIRECTIVE node and collect its body"""
        node = BlockNode(
            kind=BlockKind.DIRECTIVE,
            header=stripped[1:-1].strip(),
            indent=indent,
            line_number=self.lineNumber_get(),
        )
        self.position += 1
        body = self.body_collect(indent)
        node.content = body
        node.content_offset = body.line_offset
        self.nodes.append(node)

    def item_collect(self, text: str, indent: int) -> None:
        """
        Open a LIST_ITEM node: bullet text plus its indented body

        Blank lines between the bullet text and the body are kept so that
        content lines map one to one onto source lines.
        """
        node = BlockNode(
            kind=BlockKind.LIST_ITEM,
            indent=indent,
            line_number=self.lineNumber_get(),
        )
        self.position += 1
        body = self.body_collect(indent)
        if text:
            gap = max(body.line_offset - node.line_number, 0) if body else 0
            node.content = [text] + [''] * gap + body
            node.content_offset = node.line_number - 1
        else:
            node.content = body
            node.content_offset = body.line_offset
        self.nodes.append(node)

    def fence_collect(self, stripped: str, indent: int) -> None:
        """Open a CODE_FENCE node; lines are verbatim until the closing fence"""
        node = BlockNode(
            kind=BlockKind.CODE_FENCE,
            header=stripped.lstrip('`').strip(),
            indent=indent,
            line_number=self.lineNumber_get(),
        )
        self.position += 1

        # An unterminated fence runs to the end of input
        while self.position < len(self.lines):
            line = self.lines[self.position]
            self.position += 1
            if FENCE_CLOSE_RE.fullmatch(line.strip()):
                break
            node.content.append(line_dedent(line, indent))

        self.nodes.append(node)

    def heading_add(self, match: re.Match[str], indent: int) -> None:
        """Add a HEADING node; trailing closing hashes are dropped"""
        text = re.sub(r'\s+#+$', '', match.group(2) or '').strip()
        self.nodes.append(BlockNode(
            kind=BlockKind.HEADING,
            header=text,
            level=len(match.group(1)),
            indent=indent,
            line_number=self.lineNumber_get(),
        ))
        self.position += 1

    def prose_add(self, line: str, indent: int) -> None:
        """Append a line to the open paragraph, opening one if needed"""
        if self.paragraph is None:
            self.paragraph = BlockNode(
                kind=BlockKind.PROSE,
                indent=indent,
                line_number=self.lineNumber_get(),
            )
        self.paragraph.content.append(line_dedent(line, self.paragraph.indent))
        self.position += 1

    def paragraph_close(self) -> None:
        """Emit the open paragraph, if any"""
        if self.paragraph is not None:
            self.nodes.append(self.paragraph)
            self.paragraph = None


def blocks_parse(lines: Sequence[str], line_offset: Optional[int] = None) -> List[BlockNode]:
    """
    Segment lines into top-level BlockNodes

    Re-entrant: nested node content goes back through this same function.

    Args:
        lines: Ordered lines, already split on line boundaries
        line_offset: Lines preceding these in the enclosing document; by
                     default the offset a LineGroup carries, else 0

    Returns:
        List of BlockNodes in document order
    """
    if line_offset is None:
        line_offset = getattr(lines, 'line_offset', 0)
    return BlockParser(lines, line_offset=line_offset).parse()
