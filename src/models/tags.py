"""
Tag specification and metadata models

Defines the structure and categories of tagdown tags for registry
management, dispatch and documentation.
"""

from enum import Enum
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, List, Set


class TagCategory(Enum):
    """
    Categories of tagdown tags

    Used for organization, documentation generation, and registry listings.
    """
    LAYOUT = "layout"        # [div], [section], [list], [tabs], [accordion]
    MEDIA = "media"          # [image], [video], [!], [icon]
    CONTENT = "content"      # [button], [table]
    ISLAND = "island"        # [my-widget] client-side custom elements
    CUSTOM = "custom"        # caller-supplied handlers


@dataclass
class TagSpec:
    """
    Specification for a tagdown tag

    Defines metadata and the handler for a tag. Used by TagRegistry to
    manage available tags.

    Attributes:
        name: Tag name as written in the header ([name ...])
        category: Category for organization
        description: Human-readable description
        handler: Render function (data, options) -> str. Wildcard handlers
                 also receive the matched tag as name=
        nested_data: Whether an indented YAML body is read as tag data
        is_wildcard: Whether the spec matches patterns (e.g., *-* custom elements)
        examples: Example usage strings
        aliases: Alternative names for the tag
    """
    name: str
    category: TagCategory
    description: str
    handler: Callable
    nested_data: bool = True
    is_wildcard: bool = False
    examples: List[str] = field(default_factory=list)
    aliases: List[str] = field(default_factory=list)

    def matches(self, tag_name: str) -> bool:
        """
        Check if this spec matches a tag name

        Handles wildcards: '*-*' matches any hyphenated name, 'x-*' matches
        names starting with 'x-'.

        Args:
            tag_name: Name to check

        Returns:
            True if this spec handles the tag
        """
        if self.name == tag_name:
            return True

        if tag_name in self.aliases:
            return True

        if self.is_wildcard and '-' in tag_name:
            prefix = self.name.rsplit('-', 1)[0]
            if prefix == '*':
                return not tag_name.startswith('-') and not tag_name.endswith('-')
            return tag_name.startswith(prefix + '-')

        return False

    def handler_bind(self, tag_name: str) -> Callable:
        """Handler for tag_name, with the matched name bound for wildcard specs"""
        if self.is_wildcard:
            return partial(self.handler, name=tag_name)
        return self.handler


# Names with a fixed meaning in the dispatcher
RESERVED_TAGS: Set[str] = {
    'div',   # default container for anonymous [.class#id] tags
    '!',     # media shortcut: image or video by file extension
}


def reserved_is(tag_name: str) -> bool:
    """Check if a tag name is reserved"""
    return tag_name in RESERVED_TAGS
