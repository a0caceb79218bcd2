"""Workspace configuration loaded from ``autolens.toml``."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import tomllib
from pydantic import BaseModel, ConfigDict, Field, field_validator

from scan.files import DEFAULT_EXCLUDE_PATTERNS, SOURCE_EXTENSIONS
from store.listener import DEFAULT_POLL_INTERVAL

if TYPE_CHECKING:
    from pathlib import Path

CONFIG_FILENAME = "autolens.toml"

_LOG_LEVELS = frozenset(logging.getLevelNamesMapping())


class AutolensConfig(BaseModel):
    """Configuration for source scanning and store watching."""

    model_config = ConfigDict(extra="forbid")

    extensions: list[str] = Field(
        default_factory=lambda: list(SOURCE_EXTENSIONS),
        description="Source file suffixes to scan for compiler calls",
    )
    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to include (empty = all sources)",
    )
    exclude: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS),
        description="Glob patterns for files to exclude",
    )
    nested_gitignore: bool = Field(
        default=False,
        description="Enable nested .gitignore composition (default: root-only)",
    )
    store_path: str | None = Field(
        default=None,
        description="Explicit snapshot store path, relative to the root",
    )
    poll_interval: float = Field(
        default=DEFAULT_POLL_INTERVAL,
        gt=0,
        description="Seconds between store discovery attempts",
    )
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("extensions")
    @classmethod
    def validate_extensions(cls, v: list[str]) -> list[str]:
        for ext in v:
            if not ext.startswith(".") or len(ext) < 2:
                msg = f"Invalid extension '{ext}': expected a suffix like '.ts'"
                raise ValueError(msg)
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: Any) -> Any:
        if not isinstance(v, str) or v.upper() not in _LOG_LEVELS:
            msg = f"Invalid log level {v!r}. Valid levels: {', '.join(sorted(_LOG_LEVELS))}"
            raise ValueError(msg)
        return v.upper()

    def resolve_store_path(self, root: Path) -> Path | None:
        if self.store_path is None:
            return None
        return (root / self.store_path).expanduser().resolve()


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def load_config(root: Path) -> AutolensConfig:
    """Load configuration from autolens.toml if it exists."""
    config_path = root / CONFIG_FILENAME

    if not config_path.is_file():
        return AutolensConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return AutolensConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e


__all__ = ["CONFIG_FILENAME", "AutolensConfig", "ConfigError", "load_config"]
