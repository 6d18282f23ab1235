"""Core module - configuration and logging."""

from archmerge.core.config import Settings, clear_settings_cache, get_settings
from archmerge.core.logging_setup import configure_logging

__all__ = [
    "Settings",
    "clear_settings_cache",
    "configure_logging",
    "get_settings",
]
