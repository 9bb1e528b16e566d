"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use TAGWRIGHT_ prefix (e.g., TAGWRIGHT_DEBUG_MODE=true).

Settings can also be loaded from a .env file in the project root.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use TAGWRIGHT_ prefix.

    Examples:
        TAGWRIGHT_INDENT_UNIT="  "
        TAGWRIGHT_WHITESPACE_TAG=PRE-SPACE
        TAGWRIGHT_DEBUG_MODE=true
    """

    model_config = SettingsConfigDict(
        env_prefix="TAGWRIGHT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Program builder configuration
    indent_unit: str = Field(
        default="    ",
        description="Text prepended once per indentation level in generated programs",
    )

    # Template vocabulary
    whitespace_tag: str = Field(
        default="SPACE",
        description="Wrapper tag whose subtree keeps significant whitespace (emits no node itself)",
    )

    argument_tag: str = Field(
        default="ARGUMENT",
        description="Tag bound to the template's own parameter when <meta accepts> has no 'as'",
    )

    alias_suffixes: List[str] = Field(
        default=[".html", ".xhtml", ".xml", ".js"],
        description="Suffixes stripped from a link href when deriving its tag or attribute alias",
    )

    # Compilation configuration
    debug_mode: bool = Field(
        default=False,
        description="Print tracebacks when a pipeline stage fails",
    )

    def alias_derive(self, href: str) -> str:
        """
        Derive a tag or attribute alias from a link reference.

        Takes the trailing path segment and strips the first matching
        suffix from alias_suffixes.

        Args:
            href: Link reference (e.g., "./widgets/my-button.html")

        Returns:
            Alias in its original case, empty if nothing remains

        Example:
            >>> settings = AppSettings()
            >>> settings.alias_derive('./widgets/my-button.html')
            'my-button'
        """
        segment = href.rstrip("/").rsplit("/", 1)[-1]
        if segment in (".", ".."):
            return ""
        for suffix in self.alias_suffixes:
            if segment.lower().endswith(suffix.lower()):
                return segment[: -len(suffix)]
        return segment


# Singleton instance - import this in your code
appsettings = AppSettings()
