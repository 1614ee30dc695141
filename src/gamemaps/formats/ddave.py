"""Dangerous Dave level format.

Every level file is exactly 1280 bytes::

    256 bytes   monster path: signed 8-bit (dx, dy) steps in pixels, ended by
                the pair 0xEA 0xEA, zero padded
    1000 bytes  background layer, 100x10 tile codes, row-major
    24 bytes    padding (zero)
"""

import struct
from typing import BinaryIO

from ..errors import FormatError, MapValidationError
from ..maps.models import (
    CoordinateUnits,
    Layer,
    Map,
    Map2D,
    Map2DCaps,
    Path,
    TileSize,
)
from .base import Certainty, MapOutput, MapType, SuppType
from .streams import read_exact, stream_size

DD_MAP_WIDTH = 100
DD_MAP_HEIGHT = 10
DD_TILE_SIZE = TileSize(16, 16)

DD_LAYER_LEN_PATH = 256
DD_LAYER_LEN_BG = DD_MAP_WIDTH * DD_MAP_HEIGHT
DD_LAYER_LEN_PAD = 24
DD_FILESIZE = DD_LAYER_LEN_PATH + DD_LAYER_LEN_BG + DD_LAYER_LEN_PAD

DD_PATH_END = 0xEA
# One pair is always reserved for the end marker
DD_MAX_PATH_POINTS = DD_LAYER_LEN_PATH // 2 - 1

# Largest valid tile code in the background layer
DD_MAX_VALID_TILECODE = 52

_STEP = struct.Struct("<bb")


class DDaveMapType(MapType):
    """Dangerous Dave level (.dav)."""

    code = "map-ddave"
    name = "Dangerous Dave level"
    extensions = ("dav",)
    games = ("Dangerous Dave",)

    def _check(self, stream: BinaryIO) -> Certainty:
        if stream_size(stream) != DD_FILESIZE:
            return Certainty.DEFINITELY_NO  # wrong size

        stream.seek(DD_LAYER_LEN_PATH)
        background = stream.read(DD_LAYER_LEN_BG)
        if len(background) != DD_LAYER_LEN_BG:
            return Certainty.DEFINITELY_NO
        if any(code > DD_MAX_VALID_TILECODE for code in background):
            return Certainty.DEFINITELY_NO  # invalid tile

        return Certainty.DEFINITELY_YES

    def _read(self, stream: BinaryIO, supplements: dict[SuppType, BinaryIO]) -> Map:
        length = stream_size(stream)
        if length != DD_FILESIZE:
            raise FormatError(f"{self.name} must be {DD_FILESIZE} bytes, got {length}")

        stream.seek(0)
        path = self._parse_path(read_exact(stream, DD_LAYER_LEN_PATH, "path"))
        codes = read_exact(stream, DD_LAYER_LEN_BG, "background layer")

        background = Layer.from_codes(
            "Background", DD_MAP_WIDTH, DD_MAP_HEIGHT, codes, tile_size=DD_TILE_SIZE
        )
        return self._new_map2d(
            layers=[background],
            paths=[path],
            caps=Map2DCaps.HAS_PATHS | Map2DCaps.FIXED_PATHS,
        )

    def _parse_path(self, data: bytes) -> Path:
        path = Path(units=CoordinateUnits.PIXELS, relative=True)
        for offset in range(0, len(data), 2):
            if data[offset] == DD_PATH_END and data[offset + 1] == DD_PATH_END:
                return path
            path.append(*_STEP.unpack_from(data, offset))
        raise FormatError("Monster path has no end marker")

    def _encode(self, map2d: Map2D) -> MapOutput:
        self._require_layer_count(map2d, 1)
        layer = map2d.get_layer(0)
        self._require_layer_size(layer, DD_MAP_WIDTH, DD_MAP_HEIGHT)
        if len(map2d.paths) != 1:
            raise MapValidationError(
                f"{self.name} needs exactly one path, map has {len(map2d.paths)}"
            )

        path_data = self._pack_path(map2d.paths[0])
        background = self._pack_u8_codes(layer)
        return MapOutput(path_data + background + bytes(DD_LAYER_LEN_PAD))

    def _pack_path(self, path: Path) -> bytes:
        if len(path) > DD_MAX_PATH_POINTS:
            raise MapValidationError(
                f"Path has {len(path)} points, {self.name} allows {DD_MAX_PATH_POINTS}"
            )

        data = bytearray()
        for x, y in path:
            if not (-128 <= x <= 127 and -128 <= y <= 127):
                raise MapValidationError(f"Path step ({x}, {y}) does not fit in a signed byte")
            step = _STEP.pack(x, y)
            if step == bytes((DD_PATH_END, DD_PATH_END)):
                raise MapValidationError(f"Path step ({x}, {y}) collides with the end marker")
            data += step
        data += bytes((DD_PATH_END, DD_PATH_END))
        return bytes(data).ljust(DD_LAYER_LEN_PATH, b"\x00")
