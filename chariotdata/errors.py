"""Exceptions raised while decoding legacy game-data files."""
from __future__ import annotations


class DecodeError(ValueError):
    """Base class for all structural decode failures."""


class TruncatedStreamError(DecodeError):
    """A read or skip ran past the end of the stream."""

    def __init__(self, offset: int, requested: int, available: int):
        self.offset = offset
        self.requested = requested
        self.available = available
        super().__init__(
            f"Read of {requested} bytes at offset {offset} "
            f"exceeds stream ({available} bytes available)"
        )


class OffsetOutOfRangeError(TruncatedStreamError):
    """A seek targeted an offset outside the stream."""

    def __init__(self, offset: int, size: int):
        DecodeError.__init__(self, f"Offset {offset} is outside the stream (size {size})")
        self.offset = offset
        self.requested = 0
        self.available = size


class MissingIdentifierError(DecodeError):
    """A required identifier held the absent sentinel."""

    def __init__(self, field_name: str, raw: int):
        self.field_name = field_name
        self.raw = raw
        super().__init__(f"Required identifier '{field_name}' is absent (raw value {raw})")


class SeparatorMismatchError(DecodeError):
    """Strict scenario decoding found an unexpected separator value."""

    def __init__(self, name: str, expected: int, actual: int, offset: int):
        self.name = name
        self.expected = expected
        self.actual = actual
        self.offset = offset
        super().__init__(
            f"Separator '{name}' at offset {offset}: expected {expected}, got {actual}"
        )


class SectionDecodeError(DecodeError):
    """Decoding a whole record family failed; wraps the underlying error."""

    def __init__(self, family: str, cause: Exception):
        self.family = family
        self.cause = cause
        super().__init__(f"Failed to decode {family}: {cause}")
