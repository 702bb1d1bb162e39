"""
Quote masking for directive headers

Attribute values and positional strings may contain spaces, '=' or brackets.
Masking swaps every double-quoted literal for a numbered placeholder so the
header parser can split the rest on whitespace and '=' safely, then resolve
the literals afterwards.

Example:
    >>> masked = quotes_mask('foo="yo" bar="hey dude"')
    >>> masked.skeleton
    'foo=:1: bar=:2:'
    >>> masked.literal_get(':2:')
    'hey dude'
"""

import re

from ..models.header import MaskedHeader

# An unterminated quote runs to the end of the string
QUOTED_RE = re.compile(r'"([^"]*)(?:"|$)')


def quotes_mask(header: str) -> MaskedHeader:
    """
    Replace double-quoted literals with :1:, :2:, ... placeholders

    Numbering always starts at 1, so masking is independent per header.

    Args:
        header: One header line (content between the outer brackets)

    Returns:
        MaskedHeader with the skeleton string and the literal lookup
    """
    literals = []

    def mask(match: re.Match[str]) -> str:
        literals.append(match.group(1))
        return f':{len(literals)}:'

    skeleton = QUOTED_RE.sub(mask, header)
    return MaskedHeader(skeleton=skeleton, literals=literals)
