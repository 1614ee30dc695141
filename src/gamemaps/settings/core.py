"""
Core settings management for gamemaps.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from PySide6.QtCore import QSettings

from .formats import FormatSettings
from .logging import LoggingSettings
from .migration import SettingsMigrator
from .types import ConfigVersion, ValidationResult
from .validation import SettingsValidator

logger = logging.getLogger(__name__)


class GameMapsSettings:
    """
    Configuration management using QSettings.

    Provides type-safe access to library settings with automatic
    cross-platform storage and validation.
    """

    def __init__(self, profile: str = "default", path: Optional[Union[str, Path]] = None):
        """Initialize settings for a profile.

        Args:
            profile: Settings profile name (default: "default")
            path: INI file to use instead of the platform's native store
        """
        if path is not None:
            self.settings = QSettings(str(path), QSettings.Format.IniFormat)
        else:
            self.settings = QSettings("gamemaps", "gamemaps")
        self.profile = profile

        # Use profile as a group to create hierarchy: gamemaps/gamemaps/default/...
        self.settings.beginGroup(profile)

        # Initialize subsystems
        self._migrator = SettingsMigrator(self.settings)
        self._validator = SettingsValidator(self)
        self._logging = LoggingSettings(self.settings)
        self._formats = FormatSettings(self.settings)

        # Ensure version and migrate if needed
        self._migrator.ensure_version()

        logger.debug(
            f"Settings initialized for profile '{profile}', stored at: {self.settings.fileName()}"
        )

    # === SUBSYSTEM ACCESS ===

    @property
    def logging(self) -> LoggingSettings:
        """Access logging settings subsystem."""
        return self._logging

    @property
    def formats(self) -> FormatSettings:
        """Access format settings subsystem."""
        return self._formats

    # === VERSION AND FIRST RUN ===

    @property
    def is_first_run(self) -> bool:
        """Check if these settings were created by this run."""
        return self._get_bool("app/first_run", True)

    def set_first_run_complete(self) -> None:
        """Mark first run as complete."""
        self.settings.setValue("app/first_run", False)
        self.settings.sync()

    @property
    def version(self) -> str:
        """Get configuration version."""
        return self._get_str("app/version", ConfigVersion.CURRENT.value)

    # === HELPER METHODS ===

    def _get_str(self, key: str, default: str = "") -> str:
        """Type-safe string retrieval from settings."""
        value = self.settings.value(key, default)
        return str(value) if value is not None else default

    def _get_bool(self, key: str, default: bool = False) -> bool:
        """Type-safe boolean retrieval from settings."""
        value = self.settings.value(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes")
        return bool(value) if value is not None else default

    # === LOGGING SETTINGS (DELEGATED) ===

    @property
    def console_logging(self) -> bool:
        """Check if console logging is enabled."""
        return self._logging.console_logging

    @console_logging.setter
    def console_logging(self, value: bool) -> None:
        """Set console logging enabled state."""
        self._logging.console_logging = value

    @property
    def console_log_level(self) -> str:
        """Get console logging level."""
        return self._logging.console_log_level

    @console_log_level.setter
    def console_log_level(self, value: str) -> None:
        """Set console logging level."""
        self._logging.console_log_level = value

    @property
    def console_use_colors(self) -> bool:
        """Check if console should use colors."""
        return self._logging.console_use_colors

    @console_use_colors.setter
    def console_use_colors(self, value: bool) -> None:
        """Set console color usage."""
        self._logging.console_use_colors = value

    @property
    def file_logging(self) -> bool:
        """Check if file logging is enabled."""
        return self._logging.file_logging

    @file_logging.setter
    def file_logging(self, value: bool) -> None:
        """Set file logging enabled state."""
        self._logging.file_logging = value

    @property
    def log_file_path(self) -> str:
        """Get log file path."""
        return self._logging.log_file_path

    @log_file_path.setter
    def log_file_path(self, value: str) -> None:
        """Set log file path."""
        self._logging.log_file_path = value

    # === FORMAT SETTINGS (DELEGATED) ===

    @property
    def disabled_formats(self) -> List[str]:
        """Get codes of formats left out of the registry."""
        return self._formats.disabled_formats

    @disabled_formats.setter
    def disabled_formats(self, value: List[str]) -> None:
        """Set codes of formats left out of the registry."""
        self._formats.disabled_formats = value

    @property
    def detection_threshold(self) -> str:
        """Get the lowest certainty name accepted by auto-detection."""
        return self._formats.detection_threshold

    @detection_threshold.setter
    def detection_threshold(self, value: str) -> None:
        """Set the detection threshold."""
        self._formats.detection_threshold = value

    # === VALIDATION ===

    def validate(self, known_codes: Optional[Iterable[str]] = None) -> ValidationResult:
        """Validate current configuration."""
        return self._validator.validate(known_codes)

    # === UTILITY METHODS ===

    def get_settings_file_path(self) -> str:
        """Get the file path where settings are stored."""
        return self.settings.fileName()

    def sync(self) -> None:
        """Force synchronization of settings to storage."""
        self.settings.sync()
