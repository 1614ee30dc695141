"""
Codec contract shared by every map format.

A MapType describes one file format: its code, name and extensions, how to
recognise it, which auxiliary files it needs, and how to translate between
bytes and a Map. Concrete codecs only implement the byte-level hooks
(``_check``, ``_read``, ``_encode``); this base class wraps them with the
behaviour every format must share:

- detection never moves the stream position,
- missing supplements are reported before any parsing starts,
- low-level read failures become FormatError / StreamError,
- writing is done entirely in memory so a failure produces no output,
- a failed write puts readable output streams back as they were.
"""

import logging
import struct
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from pathlib import PurePath
from typing import BinaryIO, Mapping, Optional

from ..errors import (
    FormatError,
    MapValidationError,
    MissingSupplementError,
    StreamError,
)
from ..maps.attributes import Attribute
from ..maps.models import Layer, Map, Map2D, Map2DCaps, Path, TileSize
from .streams import preserved_position, snapshot, write_all


class Certainty(IntEnum):
    """Confidence that a stream is in a given format.

    Ordered so that a higher value means more confident.
    """

    DEFINITELY_NO = 0
    """The stream cannot be in this format."""

    UNSURE = 1
    """The checks were inconclusive."""

    POSSIBLY_YES = 2
    """Everything checked out, but the format has no signature."""

    DEFINITELY_YES = 3
    """The format has a signature and it matched."""


class SuppType(Enum):
    """Kinds of supplementary files a format may need."""

    LAYER1 = "layer1"
    """Data for an extra layer stored in its own file."""

    LAYER2 = "layer2"
    """Data for a second extra layer."""

    EXTRA1 = "extra1"
    """Any other format-specific auxiliary data."""

    DICTIONARY = "dictionary"
    """External compression dictionary."""


@dataclass(frozen=True)
class MapOutput:
    """Result of serialising a map.

    Attributes:
        data: Content of the primary file
        supplements: Content of each supplementary file
    """

    data: bytes
    supplements: dict[SuppType, bytes] = field(default_factory=dict)


class MapType(ABC):
    """Interface to a particular map format.

    Class attributes:
        code: Short unique identifier, e.g. "map-ccomic"
        name: Friendly name, e.g. "Captain Comic level"
        extensions: Known filename extensions, without the dot
        games: Games using this format
        fallback_tile_size: Tile size assumed when neither a layer nor the map
            declare one
    """

    code: str = ""
    name: str = ""
    extensions: tuple[str, ...] = ()
    games: tuple[str, ...] = ()
    fallback_tile_size: TileSize = TileSize(1, 1)

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    # =========================================================================
    # Public contract
    # =========================================================================

    def is_instance(self, stream: BinaryIO) -> Certainty:
        """Check whether a stream looks like this format.

        The stream position is the same on return as on entry.

        Raises:
            StreamError: If the stream cannot be read
        """
        try:
            with preserved_position(stream):
                certainty = self._check(stream)
        except OSError as e:
            raise StreamError(f"Could not read stream while checking {self.code}: {e}") from e
        self.logger.debug(f"{self.code}: {certainty.name}")
        return certainty

    def required_supplements(self, stream: BinaryIO, filename: str = "") -> dict[SuppType, str]:
        """List the supplementary files needed to open the given stream.

        Args:
            stream: Primary stream (not modified)
            filename: Name of the primary file, used to derive the names of
                the supplementary files. May be empty for embedded maps.

        Returns:
            Mapping of supplement kind to expected filename. Empty for formats
            that keep everything in one file.
        """
        return {}

    def open(
        self,
        stream: BinaryIO,
        supplements: Optional[Mapping[SuppType, BinaryIO]] = None,
    ) -> Map:
        """Parse a map from the primary stream and its supplements.

        Raises:
            MissingSupplementError: If a required supplement was not supplied
            FormatError: If the data is not valid for this format
            StreamError: If a stream cannot be read
        """
        supplements = dict(supplements or {})
        missing = [kind for kind in self.required_supplements(stream) if kind not in supplements]
        if missing:
            raise MissingSupplementError(missing)

        try:
            result = self._read(stream, supplements)
        except struct.error as e:
            raise FormatError(f"Malformed {self.name}: {e}") from e
        except OSError as e:
            raise StreamError(f"Could not read {self.name}: {e}") from e

        self.logger.debug(f"Opened {self.code} map")
        return result

    def write(self, map: Map) -> MapOutput:
        """Serialise a map into this format.

        The map is not modified.

        Raises:
            MapValidationError: If the map cannot be represented in this format
        """
        map2d = map.as_map2d()
        if map2d is None:
            raise MapValidationError(f"{self.name} can only store 2D grid maps")
        try:
            output = self._encode(map2d)
        except struct.error as e:
            raise MapValidationError(f"Value out of range for {self.name}: {e}") from e
        self.logger.debug(
            f"Wrote {self.code} map: {len(output.data)} bytes, "
            f"{len(output.supplements)} supplement(s)"
        )
        return output

    def write_to(
        self,
        map: Map,
        output: BinaryIO,
        supplements: Optional[Mapping[SuppType, BinaryIO]] = None,
    ) -> MapOutput:
        """Serialise a map and store the result in the given streams.

        The whole map is encoded before any stream is touched, so a validation
        failure leaves every output stream unchanged. Supplements are written
        before the primary stream. If a write fails, every stream already
        written is put back to its previous content where the stream can be
        read back; write-only streams may keep the new data.

        Raises:
            MapValidationError: If the map cannot be represented in this format
            MissingSupplementError: If an output stream for a supplement is absent
            StreamError: If a stream cannot be written
        """
        result = self.write(map)
        supplements = dict(supplements or {})
        missing = [kind for kind in result.supplements if kind not in supplements]
        if missing:
            names = ", ".join(kind.value for kind in missing)
            raise MissingSupplementError(missing, f"No output stream for supplement(s): {names}")

        # Primary goes last so a failing supplement never costs the main file
        targets = [(supplements[kind], data) for kind, data in result.supplements.items()]
        targets.append((output, result.data))

        written: list[tuple[BinaryIO, Optional[bytes]]] = []
        try:
            for stream, data in targets:
                previous = snapshot(stream)
                write_all(stream, data)
                written.append((stream, previous))
        except OSError as e:
            self._roll_back(written)
            raise StreamError(f"Could not write {self.name}: {e}") from e
        return result

    def _roll_back(self, written: list[tuple[BinaryIO, Optional[bytes]]]) -> None:
        for stream, previous in reversed(written):
            if previous is None:
                self.logger.warning(f"Cannot restore write-only stream after failed {self.code} write")
                continue
            try:
                write_all(stream, previous)
            except OSError as e:
                self.logger.error(f"Could not restore stream after failed {self.code} write: {e}")

    # =========================================================================
    # Format hooks
    # =========================================================================

    @abstractmethod
    def _check(self, stream: BinaryIO) -> Certainty:
        """Inspect the stream and return a certainty. May move the position."""

    @abstractmethod
    def _read(self, stream: BinaryIO, supplements: dict[SuppType, BinaryIO]) -> Map:
        """Build a Map from the streams. Supplements are already checked."""

    @abstractmethod
    def _encode(self, map2d: Map2D) -> MapOutput:
        """Serialise a Map2D, raising MapValidationError on any violation."""

    # =========================================================================
    # Helpers for subclasses
    # =========================================================================

    def _new_map2d(
        self,
        layers: list[Layer],
        attributes: tuple[Attribute, ...] = (),
        tile_size: Optional[TileSize] = None,
        viewport: Optional[tuple[int, int]] = None,
        paths: Optional[list[Path]] = None,
        caps: Map2DCaps = Map2DCaps.NONE,
    ) -> Map2D:
        """Build a Map2D stamped with this codec's code and fallback tile size."""
        return Map2D(
            attributes=attributes,
            format_code=self.code,
            layers=layers,
            tile_size=tile_size,
            viewport=viewport,
            paths=paths if paths is not None else [],
            caps=caps,
            fallback_tile_size=self.fallback_tile_size,
        )

    def _require_layer_count(self, map2d: Map2D, count: int) -> None:
        if map2d.layer_count != count:
            raise MapValidationError(
                f"{self.name} needs exactly {count} layer(s), map has {map2d.layer_count}"
            )

    def _require_layer_size(self, layer: Layer, width: int, height: int) -> None:
        if (layer.width, layer.height) != (width, height):
            raise MapValidationError(
                f"Layer {layer.title!r} is {layer.width}x{layer.height}, "
                f"{self.name} layers must be {width}x{height}"
            )

    def _pack_u8_codes(self, layer: Layer) -> bytes:
        """Encode a layer's codes as one byte per cell."""
        codes = layer.codes()
        for offset, code in enumerate(codes):
            if code > 0xFF:
                x, y = offset % layer.width, offset // layer.width
                raise MapValidationError(
                    f"Tile code {code} at ({x}, {y}) in layer {layer.title!r} "
                    f"does not fit in one byte"
                )
        return bytes(codes)

    @staticmethod
    def _derive_filename(filename: str, suffix: str) -> str:
        """Replace the extension of ``filename`` (or append one if it has none)."""
        path = PurePath(filename)
        if path.suffix:
            return str(path.with_suffix(suffix))
        return f"{filename}{suffix}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r})"
