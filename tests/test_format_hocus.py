"""Tests for the Hocus Pocus level codec."""

import io

import pytest

from gamemaps.formats.base import Certainty, SuppType
from gamemaps.formats.hocus import HocusMapType


class _FailingStream(io.BytesIO):
    def write(self, data) -> int:
        raise OSError("No space left on device")


class TestHocusSupplements:
    """Test the foreground supplement handling."""

    def test_required_supplements(self, hocus_bytes: bytes) -> None:
        """Test the foreground file name is derived from the level name."""
        required = HocusMapType().required_supplements(io.BytesIO(hocus_bytes), "LEVEL1.MAP")
        assert required == {SuppType.LAYER1: "LEVEL1.l1"}

    def test_required_supplements_without_extension(self, hocus_bytes: bytes) -> None:
        """Test names without an extension get one appended."""
        required = HocusMapType().required_supplements(io.BytesIO(hocus_bytes), "level1")
        assert required == {SuppType.LAYER1: "level1.l1"}

    def test_missing_supplement(self, hocus_bytes: bytes) -> None:
        """Test opening without the foreground fails with the missing kind."""
        from gamemaps.errors import MissingSupplementError

        with pytest.raises(MissingSupplementError) as exc_info:
            HocusMapType().open(io.BytesIO(hocus_bytes))
        assert exc_info.value.missing == [SuppType.LAYER1]

    def test_missing_supplement_checked_first(self) -> None:
        """Test missing supplements are reported even for malformed data."""
        from gamemaps.errors import MissingSupplementError

        with pytest.raises(MissingSupplementError):
            HocusMapType().open(io.BytesIO(b"garbage"))


class TestHocusReadWrite:
    """Test opening and writing Hocus Pocus levels."""

    def test_detection(self, hocus_bytes: bytes) -> None:
        """Test only the exact size is a possible match."""
        map_type = HocusMapType()
        assert map_type.is_instance(io.BytesIO(hocus_bytes)) is Certainty.POSSIBLY_YES
        assert map_type.is_instance(io.BytesIO(hocus_bytes[:-1])) is Certainty.DEFINITELY_NO

    def test_open(self, hocus_bytes: bytes, hocus_l1_bytes: bytes) -> None:
        """Test both layers are decoded and use the map tile size."""
        from gamemaps.maps.dimensions import resolve_layer_dims
        from gamemaps.maps.models import TileSize

        level = HocusMapType().open(
            io.BytesIO(hocus_bytes), {SuppType.LAYER1: io.BytesIO(hocus_l1_bytes)}
        )
        map2d = level.as_map2d()
        assert [layer.title for layer in map2d.layers] == ["Background", "Foreground"]
        assert map2d.get_layer(0).get_cell(3, 0).code == 3
        assert map2d.get_layer(1).get_cell(0, 0).code == 255
        assert map2d.get_layer(1).tile_size is None
        assert resolve_layer_dims(map2d, 1).tile == TileSize(16, 16)
        assert map2d.viewport == (320, 160)

    def test_bad_supplement_size(self, hocus_bytes: bytes) -> None:
        """Test a short foreground file is a format error."""
        from gamemaps.errors import FormatError

        with pytest.raises(FormatError):
            HocusMapType().open(
                io.BytesIO(hocus_bytes), {SuppType.LAYER1: io.BytesIO(b"\x00" * 10)}
            )

    def test_round_trip(self, hocus_bytes: bytes, hocus_l1_bytes: bytes) -> None:
        """Test both files are reproduced exactly."""
        map_type = HocusMapType()
        level = map_type.open(
            io.BytesIO(hocus_bytes), {SuppType.LAYER1: io.BytesIO(hocus_l1_bytes)}
        )
        output = map_type.write(level)
        assert output.data == hocus_bytes
        assert output.supplements == {SuppType.LAYER1: hocus_l1_bytes}

    def test_write_to_needs_supplement_stream(
        self, hocus_bytes: bytes, hocus_l1_bytes: bytes
    ) -> None:
        """Test write_to refuses to write anything without a foreground stream."""
        from gamemaps.errors import MissingSupplementError

        map_type = HocusMapType()
        level = map_type.open(
            io.BytesIO(hocus_bytes), {SuppType.LAYER1: io.BytesIO(hocus_l1_bytes)}
        )
        output = io.BytesIO(b"untouched")
        with pytest.raises(MissingSupplementError):
            map_type.write_to(level, output)
        assert output.getvalue() == b"untouched"

    def test_write_to(self, hocus_bytes: bytes, hocus_l1_bytes: bytes) -> None:
        """Test write_to fills the primary and supplement streams."""
        map_type = HocusMapType()
        level = map_type.open(
            io.BytesIO(hocus_bytes), {SuppType.LAYER1: io.BytesIO(hocus_l1_bytes)}
        )
        main, foreground = io.BytesIO(), io.BytesIO()
        map_type.write_to(level, main, {SuppType.LAYER1: foreground})
        assert main.getvalue() == hocus_bytes
        assert foreground.getvalue() == hocus_l1_bytes

    def test_failed_supplement_keeps_primary(
        self, hocus_bytes: bytes, hocus_l1_bytes: bytes
    ) -> None:
        """Test a failing foreground stream leaves the primary stream as it was."""
        from gamemaps.errors import StreamError

        map_type = HocusMapType()
        level = map_type.open(
            io.BytesIO(hocus_bytes), {SuppType.LAYER1: io.BytesIO(hocus_l1_bytes)}
        )
        main = io.BytesIO(b"ORIGINAL")
        with pytest.raises(StreamError):
            map_type.write_to(level, main, {SuppType.LAYER1: _FailingStream(b"OLD")})
        assert main.getvalue() == b"ORIGINAL"

    def test_failed_primary_restores_supplement(
        self, hocus_bytes: bytes, hocus_l1_bytes: bytes
    ) -> None:
        """Test a failing primary stream puts the written foreground back."""
        from gamemaps.errors import StreamError

        map_type = HocusMapType()
        level = map_type.open(
            io.BytesIO(hocus_bytes), {SuppType.LAYER1: io.BytesIO(hocus_l1_bytes)}
        )
        foreground = io.BytesIO(b"OLD FOREGROUND")
        with pytest.raises(StreamError):
            map_type.write_to(level, _FailingStream(b"ORIGINAL"), {SuppType.LAYER1: foreground})
        assert foreground.getvalue() == b"OLD FOREGROUND"

    def test_layer_count(self) -> None:
        """Test two 240x60 layers are required."""
        from gamemaps.errors import MapValidationError
        from gamemaps.maps.models import Layer, Map2D

        with pytest.raises(MapValidationError):
            HocusMapType().write(Map2D(layers=[Layer("Background", 240, 60)]))
        with pytest.raises(MapValidationError):
            HocusMapType().write(
                Map2D(layers=[Layer("Background", 240, 60), Layer("Foreground", 240, 59)])
            )
