"""Binary stream helpers shared by the codecs."""

import io
import struct
from contextlib import contextmanager
from typing import BinaryIO, Iterator, Optional

from ..errors import FormatError

_U16LE = struct.Struct("<H")


@contextmanager
def preserved_position(stream: BinaryIO) -> Iterator[BinaryIO]:
    """Restore the stream position when the block exits, however it exits."""
    position = stream.tell()
    try:
        yield stream
    finally:
        stream.seek(position, io.SEEK_SET)


def stream_size(stream: BinaryIO) -> int:
    """Total length of a seekable stream, leaving the position untouched."""
    with preserved_position(stream):
        return stream.seek(0, io.SEEK_END)


def read_exact(stream: BinaryIO, length: int, what: str = "data") -> bytes:
    """Read exactly ``length`` bytes or raise FormatError."""
    data = stream.read(length)
    if len(data) != length:
        raise FormatError(f"Unexpected end of file reading {what}: wanted {length} bytes, got {len(data)}")
    return data


def read_u16le(stream: BinaryIO, what: str = "value") -> int:
    return _U16LE.unpack(read_exact(stream, _U16LE.size, what))[0]


def pack_u16le(value: int) -> bytes:
    return _U16LE.pack(value)


def write_all(stream: BinaryIO, data: bytes) -> None:
    """Replace the stream content with ``data``.

    Non-seekable streams (pipes, sockets) simply receive the data.
    """
    if stream.seekable():
        stream.seek(0, io.SEEK_SET)
        stream.write(data)
        stream.truncate()
    else:
        stream.write(data)
    stream.flush()


def snapshot(stream: BinaryIO) -> Optional[bytes]:
    """Whole current content of a stream, or None if it cannot be read back."""
    if not (stream.seekable() and stream.readable()):
        return None
    with preserved_position(stream):
        stream.seek(0, io.SEEK_SET)
        return stream.read()
