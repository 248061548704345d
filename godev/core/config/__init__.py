"""Configuration management for GoDev."""

from godev.core.config.loader import ConfigLoader
from godev.core.config.settings import (
    CompilerSettings,
    LoggingSettings,
    Settings,
)

__all__ = [
    "ConfigLoader",
    "CompilerSettings",
    "LoggingSettings",
    "Settings",
]
