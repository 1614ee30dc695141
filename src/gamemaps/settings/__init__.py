"""
Settings package for gamemaps.

This package provides a modular, type-safe configuration management system
using Qt's QSettings for cross-platform storage.

Usage:
    from gamemaps.settings import GameMapsSettings, ValidationResult

    settings = GameMapsSettings()
    result = settings.validate()
"""

from .core import GameMapsSettings
from .formats import FormatSettings
from .logging import LoggingSettings
from .types import ConfigVersion, ConfigError, ValidationResult

__all__ = [
    "GameMapsSettings",
    "ConfigVersion",
    "ConfigError",
    "ValidationResult",
    "FormatSettings",
    "LoggingSettings",
]
