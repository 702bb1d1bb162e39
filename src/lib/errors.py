"""
Exceptions raised by tagdown

Structural problems either recover locally (with a LOG() warning) or fail
the whole render call with one of these. Errors raised by tag handlers are
not wrapped and reach the caller unchanged.
"""

from typing import Optional


class TagdownError(Exception):
    """Base class for tagdown errors"""
    pass


class UnresolvedTagError(TagdownError):
    """
    Raised when a directive names a tag that is not registered

    Anonymous [.class#id] tags and hyphenated custom elements have
    fallbacks and never raise this.

    Attributes:
        name: The offending tag name
        line_number: 1-based source line of the directive, if known
        header: Full header text, for context
    """

    def __init__(self, name: str, line_number: Optional[int] = None, header: str = ""):
        self.name = name
        self.line_number = line_number
        self.header = header

        location = f" at line {line_number}" if line_number else ""
        message = f"Unknown tag '{name}'{location}"
        if header:
            message += f"\nContext: [{header}]"
        super().__init__(message)
