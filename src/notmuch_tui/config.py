"""Configuration management for notmuch-tui.

This module handles application configuration using Pydantic settings.
Configuration can be loaded from environment variables or .env files.
"""

import os
import shlex
from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from notmuch_tui.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with
    the NOTMUCH_TUI_ prefix (e.g., NOTMUCH_TUI_DEFAULT_QUERY).
    """

    model_config = SettingsConfigDict(
        env_prefix="NOTMUCH_TUI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Notmuch Configuration
    notmuch_bin: str = Field(
        default="notmuch",
        description="notmuch executable used for show/insert",
    )
    default_query: str = Field(
        default="tag:inbox",
        description="Search used when the search string is blank",
    )
    insert_folder: str | None = Field(
        default=None,
        description="Maildir folder passed to `notmuch insert --folder`",
    )
    insert_tags: list[str] = Field(
        default_factory=list,
        description="Tags added to composed messages on insert (without the leading '+')",
    )

    # External tools
    editor: str = Field(
        default_factory=lambda: os.environ.get("EDITOR", "vi"),
        description="Editor command used for composing (defaults to $EDITOR)",
    )
    viewer: str = Field(
        default="xdg-open",
        description="Command used to open attachments; receives the file path",
    )
    html_dump_command: str = Field(
        default="lynx -stdin -dump -width {width} -display_charset=UTF-8",
        description="Command reading HTML on stdin and writing plain text on stdout",
    )
    html_width: int = Field(
        default=80,
        ge=20,
        description="Column width passed to the HTML dump command",
    )

    # Composing
    compose_from: str | None = Field(
        default=None,
        description="From address for composed mail (default: user@host)",
    )

    # Terminal
    title_width: int = Field(
        default=45,
        ge=10,
        description="Width of the subject column in the index",
    )
    tick_rate_ms: int = Field(
        default=250,
        ge=10,
        description="Interval between redraw ticks in milliseconds",
    )

    # Application Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_file: Path = Field(
        default=Path("notmuch-tui.log"),
        description="File receiving log output (the terminal is owned by the UI)",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    @field_validator("notmuch_bin", "editor", "viewer", "html_dump_command")
    @classmethod
    def _parsable_command(cls, value: str) -> str:
        try:
            args = shlex.split(value)
        except ValueError as exc:
            raise ValueError(f"cannot split command {value!r}: {exc}") from exc
        if not args:
            raise ValueError("command must not be empty")
        return value

    @field_validator("html_dump_command")
    @classmethod
    def _known_placeholders(cls, value: str) -> str:
        try:
            for arg in shlex.split(value):
                arg.format(width=80)
        except (KeyError, IndexError, ValueError) as exc:
            raise ValueError(f"only the {{width}} placeholder is supported: {exc}") from exc
        return value


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings: Application settings instance.

    Raises:
        ConfigurationError: If the environment or .env file holds invalid values.
    """
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc
