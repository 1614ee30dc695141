"""
Exception hierarchy for gamemaps.

Every failure raised by the library derives from GameMapsError so callers can
catch the whole family at once, or pick out the specific kind they can act on.
"""

from typing import Iterable


class GameMapsError(Exception):
    """Base class for all gamemaps errors."""
    pass


class StreamError(GameMapsError):
    """Raised when a stream cannot be read or written."""
    pass


class FormatError(GameMapsError):
    """Raised when data is inconsistent with the format being parsed."""
    pass


class MissingSupplementError(GameMapsError):
    """Raised when a required supplementary stream was not supplied.

    Attributes:
        missing: Supplement kinds that were required but absent
    """

    def __init__(self, missing: Iterable[object], message: str = ""):
        self.missing = list(missing)
        if not message:
            names = ", ".join(str(getattr(m, "value", m)) for m in self.missing)
            message = f"Missing required supplementary data: {names}"
        super().__init__(message)


class MapValidationError(GameMapsError):
    """Raised when a map cannot be written because it violates format limits."""
    pass


class CapabilityError(GameMapsError):
    """Raised when a map or layer does not support the requested change."""
    pass


class RegistrationError(GameMapsError):
    """Raised when the format registry is misconfigured."""
    pass


class ConfigError(GameMapsError):
    """Raised when configuration is invalid or cannot be accessed."""
    pass


# =============================================================================
# Attribute validation
# =============================================================================


class AttributeValidationError(GameMapsError, ValueError):
    """Base class for rejected attribute values."""
    pass


class AttributeRangeError(AttributeValidationError):
    """Integer value outside the attribute's [min, max] bounds."""
    pass


class AttributeIndexError(AttributeValidationError):
    """Enum index outside the attribute's option list."""
    pass


class AttributeLengthError(AttributeValidationError):
    """String longer than the attribute's maximum length."""
    pass


class AttributeTypeError(AttributeValidationError):
    """Value of the wrong type for the attribute."""
    pass
