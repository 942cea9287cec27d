"""Configuration and settings management."""

from docforge.config.logging import get_logger, setup_logging
from docforge.config.settings import Settings, clear_settings_cache, get_settings

__all__ = ["Settings", "get_settings", "clear_settings_cache", "setup_logging", "get_logger"]
