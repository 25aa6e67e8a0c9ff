"""Open game-data files and run section decoders over them."""
from __future__ import annotations

import logging
import zlib
from pathlib import Path
from typing import Callable, Optional, TypeVar

from chariotdata.config import DEFLATE_WBITS
from chariotdata.dat.reader import StreamReader
from chariotdata.errors import DecodeError, SectionDecodeError

log = logging.getLogger(__name__)

T = TypeVar("T")


def inflate(data: bytes) -> bytes:
    """Decompress a headerless deflate stream (as used by empires.dat)."""
    try:
        return zlib.decompress(data, DEFLATE_WBITS)
    except zlib.error as e:
        raise DecodeError(f"Corrupt deflate stream: {e}") from e


def open_data_file(path: Path, inflate_payload: bool = True) -> StreamReader:
    """Read a data file into memory and wrap it in a StreamReader."""
    with open(path, "rb") as f:
        data = f.read()
    log.debug("Read %s (%d bytes)", path, len(data))
    if inflate_payload:
        data = inflate(data)
        log.debug("Inflated %s to %d bytes", path.name, len(data))
    return StreamReader.from_bytes(data)


def decode_section(
    family: str,
    decoder: Callable[[StreamReader], T],
    reader: StreamReader,
    offset: Optional[int] = None,
) -> T:
    """Run `decoder` at `offset` (or the current position).

    Any DecodeError is re-raised as SectionDecodeError naming `family`.
    """
    try:
        if offset is not None:
            reader.seek(offset)
        start = reader.position
        result = decoder(reader)
    except DecodeError as e:
        raise SectionDecodeError(family, e) from e
    log.debug("Decoded %s at offset %d (%d bytes)", family, start, reader.position - start)
    return result
