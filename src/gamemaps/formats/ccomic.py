"""Captain Comic level format.

File layout (little-endian)::

    u16  width in tiles
    u16  height in tiles
    u8   tile code, width * height times, row-major

There is no signature, but the header must account for the exact file length
and the game only has 88 background tiles, which makes detection reliable.
"""

from typing import BinaryIO

from ..errors import FormatError, MapValidationError
from ..maps.models import Layer, Map, Map2D, Map2DCaps, TileSize
from .base import Certainty, MapOutput, MapType, SuppType
from .streams import pack_u16le, read_exact, read_u16le, stream_size

CC_TILE_SIZE = TileSize(16, 16)
CC_VIEWPORT = (193, 160)
CC_HEADER_LEN = 4

# Number of tiles in the game's tileset, minus one
CC_MAX_VALID_TILECODE = 87


class CComicMapType(MapType):
    """Captain Comic level (.pt)."""

    code = "map-ccomic"
    name = "Captain Comic level"
    extensions = ("pt",)
    games = ("Captain Comic",)

    def _check(self, stream: BinaryIO) -> Certainty:
        length = stream_size(stream)
        if length < CC_HEADER_LEN:
            return Certainty.DEFINITELY_NO  # too short

        stream.seek(0)
        width = read_u16le(stream)
        height = read_u16le(stream)
        if length != CC_HEADER_LEN + width * height:
            return Certainty.DEFINITELY_NO  # dimensions don't cover the file

        if any(code > CC_MAX_VALID_TILECODE for code in stream.read(width * height)):
            return Certainty.DEFINITELY_NO

        return Certainty.DEFINITELY_YES

    def _read(self, stream: BinaryIO, supplements: dict[SuppType, BinaryIO]) -> Map:
        stream.seek(0)
        width = read_u16le(stream, "map width")
        height = read_u16le(stream, "map height")
        codes = read_exact(stream, width * height, "background layer")
        if stream.read(1):
            raise FormatError("Trailing data after background layer")

        background = Layer.from_codes(
            "Background", width, height, codes, tile_size=CC_TILE_SIZE
        )
        return self._new_map2d(
            layers=[background],
            viewport=CC_VIEWPORT,
            caps=Map2DCaps.HAS_VIEWPORT,
        )

    def _encode(self, map2d: Map2D) -> MapOutput:
        self._require_layer_count(map2d, 1)
        layer = map2d.get_layer(0)
        if layer.width > 0xFFFF or layer.height > 0xFFFF:
            raise MapValidationError(
                f"Map is {layer.width}x{layer.height}, {self.name} is limited to 65535x65535"
            )

        data = pack_u16le(layer.width) + pack_u16le(layer.height) + self._pack_u8_codes(layer)
        return MapOutput(data)
