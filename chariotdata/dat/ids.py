"""Sentinel-encoded identifiers.

The data files store "no id" as -1 in whatever integer width the field
has. Decoders convert at the read site so raw sentinels never reach a
record.
"""
from __future__ import annotations

from typing import Optional

from chariotdata.errors import MissingIdentifierError

ABSENT_ID = -1


def optional_id(raw: int) -> Optional[int]:
    """Map the sentinel to None, any other value to itself."""
    if raw == ABSENT_ID:
        return None
    return raw


def required_id(raw: int, field_name: str) -> int:
    """Return `raw`, or raise MissingIdentifierError if it is the sentinel."""
    if raw == ABSENT_ID:
        raise MissingIdentifierError(field_name, raw)
    return raw
