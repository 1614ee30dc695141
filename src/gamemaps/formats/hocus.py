"""Hocus Pocus level format.

A level is split over two files of 240x60 one-byte tile codes each: the main
file holds the background layer and a supplementary file holds the
foreground. Code 0xFF means "no tile" in both.
"""

from typing import BinaryIO

from ..errors import FormatError
from ..maps.models import Layer, Map, Map2D, Map2DCaps, TileSize
from .base import Certainty, MapOutput, MapType, SuppType
from .streams import read_exact, stream_size

HP_MAP_WIDTH = 240
HP_MAP_HEIGHT = 60
HP_MAP_SIZE = HP_MAP_WIDTH * HP_MAP_HEIGHT
HP_TILE_SIZE = TileSize(16, 16)
HP_VIEWPORT = (320, 160)

HP_DEFAULT_TILE = 0xFF


class HocusMapType(MapType):
    """Hocus Pocus level (background file plus foreground supplement)."""

    code = "map-hocus"
    name = "Hocus Pocus level"
    extensions = ()
    games = ("Hocus Pocus",)

    def _check(self, stream: BinaryIO) -> Certainty:
        if stream_size(stream) != HP_MAP_SIZE:
            return Certainty.DEFINITELY_NO  # wrong size
        # No signature, so any file of the right size could be a level
        return Certainty.POSSIBLY_YES

    def required_supplements(self, stream: BinaryIO, filename: str = "") -> dict[SuppType, str]:
        return {SuppType.LAYER1: self._derive_filename(filename, ".l1")}

    def _read(self, stream: BinaryIO, supplements: dict[SuppType, BinaryIO]) -> Map:
        layers = [
            self._read_layer("Background", stream),
            self._read_layer("Foreground", supplements[SuppType.LAYER1]),
        ]
        return self._new_map2d(
            layers=layers,
            tile_size=HP_TILE_SIZE,
            viewport=HP_VIEWPORT,
            caps=Map2DCaps.HAS_VIEWPORT,
        )

    def _read_layer(self, title: str, stream: BinaryIO) -> Layer:
        length = stream_size(stream)
        if length != HP_MAP_SIZE:
            raise FormatError(
                f"{title} layer must be {HP_MAP_SIZE} bytes, got {length}"
            )
        stream.seek(0)
        codes = read_exact(stream, HP_MAP_SIZE, f"{title.lower()} layer")
        return Layer.from_codes(
            title, HP_MAP_WIDTH, HP_MAP_HEIGHT, codes, default_code=HP_DEFAULT_TILE
        )

    def _encode(self, map2d: Map2D) -> MapOutput:
        self._require_layer_count(map2d, 2)
        background, foreground = map2d.layers
        for layer in (background, foreground):
            self._require_layer_size(layer, HP_MAP_WIDTH, HP_MAP_HEIGHT)

        return MapOutput(
            self._pack_u8_codes(background),
            {SuppType.LAYER1: self._pack_u8_codes(foreground)},
        )
