"""Tests for the Captain Comic level codec."""

import io

import pytest

from gamemaps.formats.base import Certainty
from gamemaps.formats.ccomic import CComicMapType


class TestCComicDetection:
    """Test Captain Comic format recognition."""

    def test_valid_level(self, ccomic_bytes: bytes) -> None:
        """Test a consistent level is a definite match."""
        assert CComicMapType().is_instance(io.BytesIO(ccomic_bytes)) is Certainty.DEFINITELY_YES

    def test_too_short(self) -> None:
        """Test files shorter than the header are rejected."""
        assert CComicMapType().is_instance(io.BytesIO(b"\x01\x00")) is Certainty.DEFINITELY_NO

    def test_size_mismatch(self, ccomic_bytes: bytes) -> None:
        """Test the header must account for the whole file."""
        map_type = CComicMapType()
        assert map_type.is_instance(io.BytesIO(ccomic_bytes + b"\x00")) is Certainty.DEFINITELY_NO
        assert map_type.is_instance(io.BytesIO(ccomic_bytes[:-1])) is Certainty.DEFINITELY_NO

    def test_invalid_tile_code(self) -> None:
        """Test codes above the tileset size are rejected."""
        data = b"\x02\x00\x01\x00" + bytes([87, 88])
        assert CComicMapType().is_instance(io.BytesIO(data)) is Certainty.DEFINITELY_NO

    def test_position_preserved(self, ccomic_bytes: bytes) -> None:
        """Test detection does not move the stream."""
        stream = io.BytesIO(ccomic_bytes)
        stream.seek(5)
        CComicMapType().is_instance(stream)
        assert stream.tell() == 5


class TestCComicRead:
    """Test opening Captain Comic levels."""

    def test_open(self, ccomic_bytes: bytes) -> None:
        """Test the level becomes one 16x16-tile background layer."""
        from gamemaps.maps.dimensions import resolve_layer_dims
        from gamemaps.maps.models import TileSize

        level = CComicMapType().open(io.BytesIO(ccomic_bytes))
        map2d = level.as_map2d()
        assert map2d is not None
        assert level.format_code == "map-ccomic"
        assert map2d.layer_count == 1

        layer = map2d.get_layer(0)
        assert layer.title == "Background"
        assert (layer.width, layer.height) == (4, 3)
        assert layer.codes() == list(range(12))
        assert resolve_layer_dims(map2d, 0).tile == TileSize(16, 16)
        assert map2d.viewport == (193, 160)

    def test_truncated(self, ccomic_bytes: bytes) -> None:
        """Test a short file is a format error."""
        from gamemaps.errors import FormatError

        with pytest.raises(FormatError):
            CComicMapType().open(io.BytesIO(ccomic_bytes[:-2]))

    def test_trailing_data(self, ccomic_bytes: bytes) -> None:
        """Test extra bytes after the grid are a format error."""
        from gamemaps.errors import FormatError

        with pytest.raises(FormatError):
            CComicMapType().open(io.BytesIO(ccomic_bytes + b"\x00"))

    def test_header_only(self) -> None:
        """Test a file cut inside the header is a format error."""
        from gamemaps.errors import FormatError

        with pytest.raises(FormatError):
            CComicMapType().open(io.BytesIO(b"\x01"))


class TestCComicWrite:
    """Test writing Captain Comic levels."""

    def test_round_trip(self, ccomic_bytes: bytes) -> None:
        """Test opening and writing a level reproduces it exactly."""
        map_type = CComicMapType()
        output = map_type.write(map_type.open(io.BytesIO(ccomic_bytes)))
        assert output.data == ccomic_bytes
        assert output.supplements == {}

    def test_edit_then_write(self, ccomic_bytes: bytes) -> None:
        """Test edits show up in the written bytes."""
        map_type = CComicMapType()
        level = map_type.open(io.BytesIO(ccomic_bytes))
        level.as_map2d().get_layer(0).set_code(1, 0, 80)

        data = map_type.write(level).data
        assert data[4 + 1] == 80

    def test_write_does_not_mutate(self, ccomic_bytes: bytes) -> None:
        """Test writing leaves the map unchanged."""
        map_type = CComicMapType()
        level = map_type.open(io.BytesIO(ccomic_bytes))
        before = level.as_map2d().get_layer(0).cells
        map_type.write(level)
        assert level.as_map2d().get_layer(0).cells == before

    def test_code_too_large(self) -> None:
        """Test codes that do not fit in a byte are refused."""
        from gamemaps.errors import MapValidationError
        from gamemaps.maps.models import Layer, Map2D

        level = Map2D(layers=[Layer.from_codes("Background", 2, 1, [1, 256])])
        with pytest.raises(MapValidationError, match=r"\(1, 0\)"):
            CComicMapType().write(level)

    def test_layer_count(self) -> None:
        """Test exactly one layer is required."""
        from gamemaps.errors import MapValidationError
        from gamemaps.maps.models import Layer, Map2D

        with pytest.raises(MapValidationError):
            CComicMapType().write(Map2D(layers=[Layer("A", 1, 1), Layer("B", 1, 1)]))
        with pytest.raises(MapValidationError):
            CComicMapType().write(Map2D())

    def test_non_grid_map(self) -> None:
        """Test maps without a 2D view are refused."""
        from gamemaps.errors import MapValidationError
        from gamemaps.maps.models import Map

        class TextMap(Map):
            @property
            def kind(self):
                return "text"

        with pytest.raises(MapValidationError):
            CComicMapType().write(TextMap())

    def test_write_to_replaces_content(self, ccomic_bytes: bytes) -> None:
        """Test write_to overwrites and truncates the output stream."""
        map_type = CComicMapType()
        level = map_type.open(io.BytesIO(ccomic_bytes))

        output = io.BytesIO(b"\xaa" * 100)
        output.seek(50)
        map_type.write_to(level, output)
        assert output.getvalue() == ccomic_bytes

    def test_write_to_failure_leaves_output(self) -> None:
        """Test a rejected map never touches the output stream."""
        from gamemaps.errors import MapValidationError
        from gamemaps.maps.models import Layer, Map2D

        output = io.BytesIO(b"original")
        level = Map2D(layers=[Layer.from_codes("Background", 1, 1, [999])])
        with pytest.raises(MapValidationError):
            CComicMapType().write_to(level, output)
        assert output.getvalue() == b"original"
