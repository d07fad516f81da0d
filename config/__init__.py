"""
Configuration module.

Exports:
    Settings: Application settings model
    get_settings: Cached settings (raises ConfigurationError when incomplete)
    load_settings: Uncached settings with optional overrides
    configure_logging: structlog/stdlib logging setup
"""

from config.settings import Settings, get_settings, load_settings
from config.logging import configure_logging

__all__ = [
    "Settings",
    "get_settings",
    "load_settings",
    "configure_logging",
]
