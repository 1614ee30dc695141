"""
Settings validation system for gamemaps.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, List, Optional

from ..formats.base import Certainty
from .logging import VALID_LOG_LEVELS
from .types import ValidationResult

if TYPE_CHECKING:
    from .core import GameMapsSettings

logger = logging.getLogger(__name__)


class SettingsValidator:
    """Validates configuration settings."""

    def __init__(self, settings: "GameMapsSettings"):
        self.settings = settings

    def validate(self, known_codes: Optional[Iterable[str]] = None) -> ValidationResult:
        """Validate current configuration.

        Args:
            known_codes: Format codes the application knows about. When given,
                disabled codes not in this set are reported as warnings.
        """
        errors: List[str] = []
        warnings: List[str] = []

        # Logging
        level = self.settings.logging.console_log_level
        if level.upper() not in VALID_LOG_LEVELS:
            errors.append(f"Invalid console log level: {level}")

        if self.settings.logging.file_logging:
            log_dir = Path(self.settings.logging.log_file_path).parent
            if log_dir.exists() and not log_dir.is_dir():
                errors.append(f"Log directory is not a directory: {log_dir}")

        # Formats
        threshold = self.settings.formats.detection_threshold
        if threshold not in Certainty.__members__:
            errors.append(f"Invalid detection threshold: {threshold}")
        elif Certainty[threshold] == Certainty.DEFINITELY_NO:
            warnings.append("Detection threshold DEFINITELY_NO accepts any data")

        if known_codes is not None:
            known = set(known_codes)
            for code in self.settings.formats.disabled_formats:
                if code not in known:
                    warnings.append(f"Disabled format is not known: {code}")

        result = ValidationResult(
            is_valid=len(errors) == 0, errors=errors, warnings=warnings
        )
        if not result.is_valid:
            logger.warning(f"Configuration has {len(errors)} error(s)")
        return result
