"""Cursor over a seekable little-endian byte stream.

Every primitive read either returns the full value and advances the cursor
by its exact width, or raises TruncatedStreamError. Decoders built on top
never recover from that; the whole decode is abandoned.
"""
from __future__ import annotations

import io
import os
import struct
from typing import BinaryIO, Callable, TypeVar

from chariotdata.config import STRING_ENCODING
from chariotdata.errors import OffsetOutOfRangeError, TruncatedStreamError

T = TypeVar("T")

# Struct formats (little-endian)
_U8 = struct.Struct("<B")
_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_I8 = struct.Struct("<b")
_I16 = struct.Struct("<h")
_I32 = struct.Struct("<i")
_F32 = struct.Struct("<f")


def decode_fixed_string(raw: bytes) -> str:
    """Decode a NUL-padded fixed-width string field."""
    return raw.split(b"\x00", 1)[0].decode(STRING_ENCODING, errors="replace")


class StreamReader:
    """Typed reads over a binary file object with a moving cursor."""

    __slots__ = ("_stream", "_size")

    def __init__(self, stream: BinaryIO):
        self._stream = stream
        # Size is fixed for the lifetime of a decode
        here = stream.tell()
        self._size = stream.seek(0, os.SEEK_END)
        stream.seek(here)

    @classmethod
    def from_bytes(cls, data: bytes) -> "StreamReader":
        return cls(io.BytesIO(data))

    @property
    def position(self) -> int:
        return self._stream.tell()

    @property
    def size(self) -> int:
        return self._size

    @property
    def remaining(self) -> int:
        return self._size - self.position

    def seek(self, offset: int) -> None:
        """Seek to an absolute offset inside the stream."""
        if offset < 0 or offset > self._size:
            raise OffsetOutOfRangeError(offset, self._size)
        self._stream.seek(offset)

    def skip(self, size: int) -> None:
        """Advance the cursor by `size` bytes without decoding them."""
        pos = self._stream.tell()
        if size < 0 or pos + size > self._size:
            raise TruncatedStreamError(pos, size, self._size - pos)
        self._stream.seek(size, os.SEEK_CUR)

    def read_bytes(self, size: int) -> bytes:
        pos = self._stream.tell()
        data = self._stream.read(size)
        if len(data) != size:
            raise TruncatedStreamError(pos, size, len(data))
        return data

    def _unpack(self, fmt: struct.Struct):
        return fmt.unpack(self.read_bytes(fmt.size))[0]

    def read_u8(self) -> int:
        return self._unpack(_U8)

    def read_u16(self) -> int:
        return self._unpack(_U16)

    def read_u32(self) -> int:
        return self._unpack(_U32)

    def read_i8(self) -> int:
        return self._unpack(_I8)

    def read_i16(self) -> int:
        return self._unpack(_I16)

    def read_i32(self) -> int:
        return self._unpack(_I32)

    def read_f32(self) -> float:
        return self._unpack(_F32)

    def read_fixed_string(self, size: int) -> str:
        """Read a `size`-byte field and decode up to the first NUL."""
        return decode_fixed_string(self.read_bytes(size))

    def read_pascal_string(self) -> str:
        """Read a u16 length prefix followed by that many bytes."""
        return self.read_fixed_string(self.read_u16())

    def read_array(self, count: int, item_decoder: Callable[["StreamReader"], T]) -> list[T]:
        """Decode exactly `count` items in order."""
        return [item_decoder(self) for _ in range(count)]
