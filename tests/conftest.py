"""Shared fixtures for gamemaps tests."""

import io
import struct
from pathlib import Path
from typing import Callable

import pytest


def _ccomic_level(width: int, height: int, codes: list[int]) -> bytes:
    return struct.pack("<HH", width, height) + bytes(codes)


@pytest.fixture
def make_stream() -> Callable[[bytes], io.BytesIO]:
    """Factory for seekable in-memory byte streams."""

    def _make(data: bytes = b"") -> io.BytesIO:
        return io.BytesIO(data)

    return _make


@pytest.fixture
def ccomic_bytes() -> bytes:
    """A 4x3 Captain Comic level using codes 0-11."""
    return _ccomic_level(4, 3, list(range(12)))


@pytest.fixture
def ddave_bytes() -> bytes:
    """A Dangerous Dave level with a three-step monster path."""
    steps = [(1, 0), (0, -2), (-3, 4)]
    path = b"".join(struct.pack("<bb", x, y) for x, y in steps) + b"\xea\xea"
    path = path.ljust(256, b"\x00")
    background = bytes(i % 53 for i in range(1000))
    return path + background + bytes(24)


@pytest.fixture
def hocus_bytes() -> bytes:
    """Background layer of a Hocus Pocus level."""
    return bytes(i % 256 for i in range(240 * 60))


@pytest.fixture
def hocus_l1_bytes() -> bytes:
    """Foreground supplement of a Hocus Pocus level."""
    return bytes((255 - i) % 256 for i in range(240 * 60))


@pytest.fixture
def registry():
    """Sealed registry with every built-in format."""
    from gamemaps.formats import build_registry

    return build_registry()


@pytest.fixture
def settings_path(tmp_path: Path) -> Path:
    """Location of an INI settings file private to the test."""
    return tmp_path / "gamemaps.ini"


@pytest.fixture
def settings(settings_path: Path):
    """INI-backed settings that never touch the user's real configuration."""
    from gamemaps.settings import GameMapsSettings

    return GameMapsSettings(profile="test", path=settings_path)
