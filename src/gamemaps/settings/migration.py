"""
Settings migration system for gamemaps.
"""

import logging
from typing import TYPE_CHECKING

from .types import ConfigVersion

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)

# Version 1.0 stored the detection threshold as the numeric certainty value
_LEGACY_CERTAINTY_NAMES = {
    "0": "DEFINITELY_NO",
    "1": "UNSURE",
    "2": "POSSIBLY_YES",
    "3": "DEFINITELY_YES",
}


class SettingsMigrator:
    """Handles configuration migration between versions."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def ensure_version(self) -> None:
        """Ensure configuration version is set and handle migrations."""
        current_version = str(self.settings.value("app/version", "") or "")

        if not current_version:
            # First run - set current version
            self.settings.setValue("app/version", ConfigVersion.CURRENT.value)
            self.settings.setValue("app/first_run", True)
            self.settings.sync()
            logger.info("First run detected, initializing configuration")
        elif current_version != ConfigVersion.CURRENT.value:
            # Migration needed
            self._migrate_config(current_version, ConfigVersion.CURRENT.value)

    def _migrate_config(self, from_version: str, to_version: str) -> None:
        """Migrate configuration from old version to new version."""
        logger.info(f"Migrating configuration from {from_version} to {to_version}")

        if from_version == ConfigVersion.V1_0.value and to_version == ConfigVersion.V1_1.value:
            self._migrate_1_0_to_1_1()
        else:
            logger.warning(f"No migration path from {from_version}, keeping stored values")

        # Update version after successful migration
        self.settings.setValue("app/version", to_version)
        self.settings.setValue("app/migrated_from", from_version)
        self.settings.sync()
        logger.info(f"Migration from {from_version} to {to_version} completed")

    def _migrate_1_0_to_1_1(self) -> None:
        """Migrate from version 1.0 to 1.1 - certainty names instead of numbers."""
        logger.debug("Performing migration from 1.0 to 1.1")

        old_value = self.settings.value("formats/min_certainty", None)
        if old_value is None:
            return

        name = _LEGACY_CERTAINTY_NAMES.get(str(old_value).strip())
        if name is not None:
            self.settings.setValue("formats/detection_threshold", name)
            logger.info(f"Migrated detection threshold: {old_value} -> {name}")
        else:
            logger.warning(f"Dropped unrecognised detection threshold: {old_value}")

        self.settings.remove("formats/min_certainty")
        self.settings.sync()
