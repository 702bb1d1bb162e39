"""
Tag registry

Maps tag names to TagSpec objects. A registry is an ordinary value: it is
built per render call (built-ins plus caller extensions) and handed to the
renderer inside RenderOptions, never looked up globally.
"""

from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Union

from ..config import AppSettings
from ..models.header import DirectiveHeader
from ..models.tags import TagSpec, TagCategory, reserved_is
from .log import LOG


class TagRegistry:
    """
    Registry of tag specifications and handlers

    Lookup order for a name: exact name or alias first, then wildcard
    specs (the *-* custom-element pattern).
    """

    def __init__(self, specs: Optional[Iterable[TagSpec]] = None) -> None:
        """Initialize the registry, optionally with an initial set of specs"""
        self.specs: Dict[str, TagSpec] = {}
        for spec in specs or []:
            self.register(spec)

    @classmethod
    def builtins(cls) -> "TagRegistry":
        """Fresh registry holding the built-in tag library"""
        from .tags import builtins_register

        registry = cls()
        builtins_register(registry)
        return registry

    def register(self, spec: TagSpec) -> None:
        """Register a tag specification"""
        self.specs[spec.name] = spec
        # Also register aliases
        for alias in spec.aliases:
            self.specs[alias] = spec

    def get(self, name: str) -> Optional[Callable[..., str]]:
        """
        Get tag handler by name

        Wildcard handlers come back with the matched name already bound.

        Args:
            name: Tag name to look up

        Returns:
            Handler function or None if not found
        """
        spec = self.spec_get(name)
        return spec.handler_bind(name) if spec else None

    def spec_get(self, name: str) -> Optional[TagSpec]:
        """Get full tag specification by name"""
        if name in self.specs:
            return self.specs[name]

        # Wildcard matching
        for spec in self.specs.values():
            if spec.is_wildcard and spec.matches(name):
                return spec

        return None

    def spec_resolve(self, header: DirectiveHeader, settings: AppSettings) -> Optional[TagSpec]:
        """
        Resolve the spec that renders a parsed directive header

        Resolution order:
            1. exact name or alias
            2. anonymous [.class#id] -> settings.default_container
            3. hyphenated name -> *-* custom element (if settings.custom_elements)

        Returns:
            TagSpec, or None when the header names nothing renderable
        """
        if not header.name:
            if header.anonymous_is():
                return self.specs.get(settings.default_container)
            return None

        spec = self.spec_get(header.name)
        if spec and spec.is_wildcard and not settings.custom_elements:
            return None
        return spec

    def merge(self, extensions: Union["TagRegistry", Mapping[str, Any]]) -> "TagRegistry":
        """
        New registry with extensions layered over this one

        Neither this registry nor the extensions are modified. Extension
        entries win on name collisions.

        Args:
            extensions: A TagRegistry, or a mapping of tag name to either a
                        TagSpec or a bare handler function (data, options) -> str

        Returns:
            Merged TagRegistry
        """
        merged = TagRegistry()
        merged.specs = dict(self.specs)

        if isinstance(extensions, TagRegistry):
            merged.specs.update(extensions.specs)
            return merged

        for name, value in extensions.items():
            if reserved_is(name):
                LOG(f"Warning: extension replaces reserved tag [{name}]", level=2)
            if isinstance(value, TagSpec):
                merged.specs[name] = value
            else:
                merged.specs[name] = TagSpec(
                    name=name,
                    category=TagCategory.CUSTOM,
                    description=(getattr(value, '__doc__', None) or '').strip(),
                    handler=value,
                )

        return merged
