"""
Format selection settings for gamemaps.
"""

import logging
from typing import TYPE_CHECKING, List, cast

from ..formats.base import Certainty

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)

DEFAULT_DETECTION_THRESHOLD = "POSSIBLY_YES"


class FormatSettings:
    """Manages which map formats are offered and how detection behaves."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def _get_str(self, key: str, default: str = "") -> str:
        """Type-safe string retrieval from settings."""
        value = self.settings.value(key, default)
        return str(value) if value is not None else default

    def _get_list(self, key: str, default: List[str] | None = None) -> List[str]:
        """Type-safe list retrieval from settings."""
        if default is None:
            default = []
        value = self.settings.value(key, default)
        if isinstance(value, list):
            return [
                str(item) if item is not None else ""
                for item in cast(list[object], value)
            ]
        # INI files hand back a one-element list as a plain string
        if isinstance(value, str):
            return [value] if value else []
        return default

    # === DISABLED FORMATS ===

    @property
    def disabled_formats(self) -> List[str]:
        """Get codes of formats left out of the registry."""
        return self._get_list("formats/disabled", [])

    @disabled_formats.setter
    def disabled_formats(self, value: List[str]) -> None:
        """Set codes of formats left out of the registry."""
        self.settings.setValue("formats/disabled", list(value))
        self.settings.sync()

    def disable_format(self, code: str) -> None:
        """Add a format code to the disabled list if not already present."""
        disabled = self.disabled_formats
        if code not in disabled:
            disabled.append(code)
            self.disabled_formats = disabled

    def enable_format(self, code: str) -> None:
        """Remove a format code from the disabled list."""
        disabled = self.disabled_formats
        if code in disabled:
            disabled.remove(code)
            self.disabled_formats = disabled

    def is_format_enabled(self, code: str) -> bool:
        """Check if a format code is not disabled."""
        return code not in self.disabled_formats

    # === DETECTION ===

    @property
    def detection_threshold(self) -> str:
        """Get the lowest certainty name accepted by auto-detection."""
        return self._get_str("formats/detection_threshold", DEFAULT_DETECTION_THRESHOLD).upper()

    @detection_threshold.setter
    def detection_threshold(self, value: str) -> None:
        """Set the detection threshold. Unknown certainty names are ignored."""
        if value.upper() in Certainty.__members__:
            self.settings.setValue("formats/detection_threshold", value.upper())
            self.settings.sync()
        else:
            logger.warning(
                f"Invalid detection threshold: {value}, keeping current: {self.detection_threshold}"
            )
