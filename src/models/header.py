"""
Header parsing data models

Type-safe structures for the tag-header parser and its intermediate results.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

# Tagged value produced once during header parsing: String | Number | Boolean
Value = Union[str, int, float, bool]

PLACEHOLDER_RE = re.compile(r':(\d+):')


@dataclass
class MaskedHeader:
    """
    Result of masking double-quoted literals in a header string

    Returned by quotes_mask(). Every quoted literal is replaced by a numbered
    placeholder (:1:, :2:, ...) in the skeleton, so the skeleton can be split
    on whitespace and '=' safely.

    Attributes:
        skeleton: Header text with quoted literals replaced by placeholders
        literals: Unquoted literal contents, literals[0] backs ':1:'

    Example:
        Input: 'foo="yo" bar="hey dude"'
        Result: MaskedHeader(
            skeleton='foo=:1: bar=:2:',
            literals=['yo', 'hey dude']
        )
    """
    skeleton: str
    literals: List[str] = field(default_factory=list)

    def literal_get(self, token: str) -> Optional[str]:
        """
        Map a placeholder token back to its literal

        Returns:
            The unquoted literal for ':N:', or None if token is not a placeholder
        """
        match = PLACEHOLDER_RE.fullmatch(token)
        if not match:
            return None
        index = int(match.group(1)) - 1
        if 0 <= index < len(self.literals):
            return self.literals[index]
        return None

    def text_restore(self, text: str) -> str:
        """Substitute every placeholder embedded in text with its literal"""
        def restore(match: re.Match[str]) -> str:
            literal = self.literal_get(match.group(0))
            return match.group(0) if literal is None else literal

        return PLACEHOLDER_RE.sub(restore, text)


@dataclass
class ParsedSpecs:
    """
    Result of splitting a name token into tag name and shorthand attributes

    Example:
        'tabs.#foo.bar' -> ParsedSpecs(name='tabs', attr={'id': 'foo', 'class': 'bar'})
        '.note'         -> ParsedSpecs(name='', attr={'class': 'note'})
    """
    name: str
    attr: Dict[str, str] = field(default_factory=dict)


@dataclass
class DirectiveHeader:
    """
    Parsed form of one [...] directive header

    Attributes:
        name: Tag name; empty for anonymous [.class#id] tags, '!' for the media shortcut
        attr: Rendering attributes (id, class, boolean flags such as hidden)
        data: Everything else, type-coerced. A positional literal lives under '_'

    Invariant:
        attr and data never share a key.

    Example:
        'tip#foo.bar "Hey there" size="40" grayed hidden' ->
        DirectiveHeader(
            name='tip',
            attr={'class': 'bar', 'id': 'foo', 'hidden': True},
            data={'_': 'Hey there', 'size': 40, 'grayed': True}
        )
    """
    name: str
    attr: Dict[str, Union[str, bool]] = field(default_factory=dict)
    data: Dict[str, Value] = field(default_factory=dict)

    def anonymous_is(self) -> bool:
        """True for [.class#id] headers with no explicit tag name"""
        return not self.name and bool(self.attr.get('class') or self.attr.get('id'))
