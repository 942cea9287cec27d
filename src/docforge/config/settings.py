"""Application settings loaded from the environment.

Values are read from ``DOCFORGE_*`` environment variables or a local ``.env``
file. Use :func:`get_settings` to access the cached instance.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from docforge.constants import DEFAULT_LOGO_ALT


class Settings(BaseSettings):
    """Runtime configuration for the composition engine."""

    model_config = SettingsConfigDict(
        env_prefix="DOCFORGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(default="INFO", description="Logging level for docforge loggers")
    max_inheritance_depth: int = Field(
        default=32,
        ge=1,
        description="Maximum number of ancestors walked while resolving inheritance",
    )
    default_logo_alt: str = Field(
        default=DEFAULT_LOGO_ALT,
        description="Alt text used when a branding logo has none",
    )
    include_css_variables: bool = Field(
        default=False,
        description="Prepend a :root block of brand CSS custom properties when branding",
    )
    templates_dir: Path = Field(
        default_factory=lambda: Path.home() / ".docforge" / "templates",
        description="Root directory read by FileTemplateStore",
    )
    store_read_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts for a template file read before the error propagates",
    )

    def to_dict(self) -> dict[str, str]:
        """Settings as display strings, for diagnostics."""
        return {name: str(value) for name, value in self.model_dump().items()}


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache so the next call re-reads the environment."""
    get_settings.cache_clear()
