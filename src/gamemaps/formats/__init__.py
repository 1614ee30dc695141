"""
Map format codecs and the registry that holds them.

Usage:
    from gamemaps.formats import build_registry

    registry = build_registry()
    with open("level.pt", "rb") as f:
        map_type = registry.detect(f)
        level = map_type.open(f)
"""

import logging
from typing import TYPE_CHECKING, Callable, Iterable, Optional

from ..errors import ConfigError
from .base import Certainty, MapOutput, MapType, SuppType
from .ccomic import CComicMapType
from .ddave import DDaveMapType
from .hocus import HocusMapType
from .json_map import JsonMapType
from .registry import FormatRegistry, Identification

if TYPE_CHECKING:
    from ..settings import GameMapsSettings

logger = logging.getLogger(__name__)

# Registration order decides which codec wins a certainty tie
ALL_FORMATS: tuple[Callable[[], MapType], ...] = (
    CComicMapType,
    DDaveMapType,
    HocusMapType,
    JsonMapType,
)


def build_registry(
    factories: Iterable[Callable[[], MapType]] = ALL_FORMATS,
    settings: Optional["GameMapsSettings"] = None,
) -> FormatRegistry:
    """Create, fill and seal a registry.

    Args:
        factories: Codec constructors, in registration order
        settings: Optional settings; codes listed in ``formats.disabled_formats``
            are skipped and ``formats.detection_threshold`` becomes the
            registry's default detection threshold

    Returns:
        A sealed FormatRegistry

    Raises:
        RegistrationError: If two factories produce the same code
        ConfigError: If the configured detection threshold is not a Certainty
    """
    disabled: set[str] = set()
    minimum = Certainty.POSSIBLY_YES
    if settings is not None:
        disabled = set(settings.formats.disabled_formats)
        threshold = settings.formats.detection_threshold
        if threshold not in Certainty.__members__:
            raise ConfigError(f"Invalid detection threshold: {threshold}")
        minimum = Certainty[threshold]

    registry = FormatRegistry(minimum_certainty=minimum)
    for factory in factories:
        map_type = factory()
        if map_type.code in disabled:
            logger.info(f"Skipping disabled map format: {map_type.code}")
            continue
        registry.register(map_type)

    registry.seal()
    logger.debug(f"Format registry ready: {', '.join(registry.codes())}")
    return registry


__all__ = [
    "ALL_FORMATS",
    "build_registry",
    "Certainty",
    "CComicMapType",
    "DDaveMapType",
    "FormatRegistry",
    "HocusMapType",
    "Identification",
    "JsonMapType",
    "MapOutput",
    "MapType",
    "SuppType",
]
