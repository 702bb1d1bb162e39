"""
Render options model

Defines RenderOptions, the state carried through one render call. It is
passed explicitly to every stage and every tag handler; nothing about a
render call lives in module-level state.
"""

from typing import Any, Mapping, Optional, Type, Union, TYPE_CHECKING
from dataclasses import dataclass, field

from markdown_it import MarkdownIt

from ..config import AppSettings, appsettings

# Forward reference for type hint - avoid circular import
if TYPE_CHECKING:
    from ..lib.registry import TagRegistry


@dataclass
class RenderOptions:
    """
    Central state container for a render call (state bus pattern).

    Handlers receive the same RenderOptions the renderer was called with,
    so nested rendering (a [section] rendering its body) sees the same
    registry and data.

    Attributes:
        registry: Tags available to this call
        data: Caller-supplied values for :key="name" header references
        verbosity: Logging verbosity level (1-3)
        settings: Parser and rendering configuration
        markdown: Prose renderer, built from settings when omitted
    """

    registry: "TagRegistry"
    data: Mapping[str, Any] = field(default_factory=dict)
    verbosity: int = field(default=1)
    settings: AppSettings = field(default_factory=lambda: appsettings)
    markdown: Optional[MarkdownIt] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.markdown is None:
            from ..lib.prose import markdown_make
            self.markdown = markdown_make(self.settings)

    @classmethod
    def options_make(
        cls: Type["RenderOptions"],
        tags: Optional[Union["TagRegistry", Mapping[str, Any]]] = None,
        data: Optional[Mapping[str, Any]] = None,
        verbosity: Optional[int] = None,
        settings: Optional[AppSettings] = None,
    ) -> "RenderOptions":
        """
        Create RenderOptions with the built-in tags plus caller extensions.

        The caller's mappings are read, never modified: extensions are
        merged into a fresh registry.

        Args:
            tags: Extra tags, as a TagRegistry or a mapping of name to
                  handler function or TagSpec. These override built-ins
            data: Values for :key="name" references
            verbosity: Overrides settings.verbosity
            settings: Overrides the appsettings singleton

        Returns:
            RenderOptions ready for lines_render()
        """
        from ..lib.registry import TagRegistry

        settings = settings or appsettings
        registry = TagRegistry.builtins()
        if tags:
            registry = registry.merge(tags)

        return cls(
            registry=registry,
            data=data if data is not None else {},
            verbosity=settings.verbosity if verbosity is None else verbosity,
            settings=settings,
        )
