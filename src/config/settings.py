"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use TAGDOWN_ prefix (e.g., TAGDOWN_CUSTOM_ELEMENTS=false).

Settings can also be loaded from a .env file in the project root.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use TAGDOWN_ prefix.

    Examples:
        TAGDOWN_DEFAULT_CONTAINER=section
        TAGDOWN_HIGHLIGHT_CODE=false
        TAGDOWN_ATTRIBUTE_KEYS='["id", "class", "hidden"]'
    """

    model_config = SettingsConfigDict(
        env_prefix="TAGDOWN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Inline tag protection while markdown runs. Private-use code points
    # survive markdown-it untouched (NUL does not, it becomes U+FFFD).
    placeholder_prefix: str = Field(
        default="\ue000TAG_",
        description="Prefix for inline tag placeholders in prose",
    )

    placeholder_suffix: str = Field(
        default="\ue001",
        description="Suffix for inline tag placeholders in prose",
    )

    # Header parsing
    attribute_keys: List[str] = Field(
        default_factory=lambda: ["id", "class", "style", "hidden"],
        description="Header keys routed to rendering attributes instead of tag data",
    )

    # Dispatch
    default_container: str = Field(
        default="div",
        description="Tag used for anonymous [.class#id] directives",
    )

    custom_elements: bool = Field(
        default=True,
        description="Resolve unregistered hyphenated names (my-widget) as client-side islands",
    )

    # Rendering
    markdown_preset: str = Field(
        default="commonmark",
        description="markdown-it preset used for prose",
    )

    highlight_code: bool = Field(
        default=True,
        description="Syntax highlight code fences that name a language",
    )

    pygments_style: str = Field(
        default="default",
        description="Pygments style for highlighted code fences",
    )

    verbosity: int = Field(
        default=1,
        description="Default logging verbosity for render calls (1-3)",
    )

    def placeHolder_make(self, index: int) -> str:
        """
        Generate a placeholder string for an inline tag at given index.

        Args:
            index: Zero-based index of the inline tag within a paragraph

        Returns:
            Placeholder string (e.g., "\\ue000TAG_0\\ue001")

        Example:
            >>> settings = AppSettings()
            >>> settings.placeHolder_make(0)
            '\\ue000TAG_0\\ue001'
        """
        return f"{self.placeholder_prefix}{index}{self.placeholder_suffix}"

    def childIndex_extract(self, placeholder: str) -> int | None:
        """
        Extract inline tag index from a placeholder string.

        Args:
            placeholder: Placeholder string to parse

        Returns:
            Tag index if valid placeholder, None otherwise
        """
        if not placeholder.startswith(self.placeholder_prefix):
            return None
        if not placeholder.endswith(self.placeholder_suffix):
            return None

        content = placeholder[len(self.placeholder_prefix) : -len(self.placeholder_suffix)]

        try:
            return int(content)
        except ValueError:
            return None

    def attributeKey_is(self, key: str) -> bool:
        """Check if a header key belongs to the rendering attributes"""
        return key in self.attribute_keys


# Singleton instance - import this in your code
appsettings = AppSettings()
