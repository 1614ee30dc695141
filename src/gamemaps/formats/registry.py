"""Registry of available map formats.

Holds the set of codecs an application can use, looks them up by code or
extension, and ranks them against an unknown stream for auto-detection.
"""

import logging
from typing import BinaryIO, Iterator, NamedTuple, Optional

from ..errors import RegistrationError, StreamError
from .base import Certainty, MapType
from .streams import preserved_position


class Identification(NamedTuple):
    """One codec's verdict on a stream."""

    map_type: MapType
    certainty: Certainty


class FormatRegistry:
    """Central registry for map formats.

    Codecs are registered once at start-up, in a fixed order, and the registry
    is then sealed. A sealed registry never changes and can be shared between
    threads without locking.
    """

    def __init__(self, minimum_certainty: Certainty = Certainty.POSSIBLY_YES):
        """Initialize an empty registry.

        Args:
            minimum_certainty: Default threshold used by ``detect``
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        self.minimum_certainty = minimum_certainty
        self._types: dict[str, MapType] = {}
        self._sealed = False

    def register(self, map_type: MapType) -> None:
        """Add a codec to the registry.

        Raises:
            RegistrationError: If the code is empty or already registered, or
                the registry has been sealed
        """
        if self._sealed:
            raise RegistrationError(
                f"Cannot register {map_type.code!r}: registry is sealed"
            )
        if not map_type.code:
            raise RegistrationError(f"{map_type!r} has no format code")
        if map_type.code in self._types:
            existing = self._types[map_type.code]
            raise RegistrationError(
                f"Format code {map_type.code!r} is already registered by {existing!r}"
            )

        self._types[map_type.code] = map_type
        self.logger.debug(f"Registered map format: {map_type.code} ({map_type.name})")

    def seal(self) -> None:
        """Refuse any further registrations."""
        self._sealed = True
        self.logger.debug(f"Registry sealed with {len(self._types)} format(s)")

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get_by_code(self, code: str) -> Optional[MapType]:
        """Get a codec by its code.

        Returns:
            The MapType, or None if no codec uses that code
        """
        return self._types.get(code)

    def codes(self) -> list[str]:
        """Get all registered codes, in registration order."""
        return list(self._types)

    def find_by_extension(self, extension: str) -> list[MapType]:
        """Get codecs listing the given filename extension.

        Args:
            extension: Extension with or without the leading dot, any case

        Returns:
            Matching codecs, in registration order
        """
        wanted = extension.lstrip(".").lower()
        return [
            map_type
            for map_type in self._types.values()
            if wanted in (ext.lower() for ext in map_type.extensions)
        ]

    # -------------------------------------------------------------------------
    # Auto-detection
    # -------------------------------------------------------------------------

    def identify(self, stream: BinaryIO) -> list[Identification]:
        """Ask every codec how likely the stream is in its format.

        Results are ordered by certainty, most certain first. Codecs reporting
        the same certainty keep their registration order. The stream position
        is unchanged on return.

        Raises:
            StreamError: If the stream cannot be read
        """
        results: list[Identification] = []
        try:
            with preserved_position(stream):
                for map_type in self._types.values():
                    results.append(Identification(map_type, map_type.is_instance(stream)))
        except OSError as e:
            raise StreamError(f"Could not read stream for format detection: {e}") from e

        # sorted() is stable, so equal certainties stay in registration order
        ranked = sorted(results, key=lambda r: r.certainty, reverse=True)
        if ranked:
            best = ranked[0]
            self.logger.debug(f"Best format match: {best.map_type.code} ({best.certainty.name})")
        return ranked

    def detect(
        self, stream: BinaryIO, minimum: Optional[Certainty] = None
    ) -> Optional[MapType]:
        """Get the most likely codec for a stream.

        Args:
            stream: Stream to examine (position unchanged on return)
            minimum: Lowest certainty accepted as a match. Defaults to the
                registry's ``minimum_certainty`` (POSSIBLY_YES unless configured)

        Returns:
            The best-ranked codec, or None if none reaches ``minimum``
        """
        if minimum is None:
            minimum = self.minimum_certainty
        ranked = self.identify(stream)
        if ranked and ranked[0].certainty >= minimum:
            return ranked[0].map_type
        self.logger.info("No map format recognised the data")
        return None

    # -------------------------------------------------------------------------
    # Container protocol
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._types)

    def __iter__(self) -> Iterator[MapType]:
        return iter(list(self._types.values()))

    def __contains__(self, code: object) -> bool:
        return code in self._types
