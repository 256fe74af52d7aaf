"""
Error taxonomy for the query-string SerDe.

Every failure a caller can observe is one of the four subclasses below.
Tolerated input quirks (malformed pairs, unknown type names, loose booleans,
bad percent escapes) are absorbed by the decoder and never raised.
"""

from __future__ import annotations

from typing import Optional


class SerDeError(Exception):
    """Base error for this package."""


class SchemaMismatch(SerDeError):
    """Raised when column names and type declarations cannot be bound together."""


class MalformedRecord(SerDeError):
    """Raised when a raw line does not split into a key and a payload."""

    def __init__(self, message: str, raw: Optional[str] = None) -> None:
        super().__init__(message)
        self.raw = raw


class TypeCoercionError(SerDeError):
    """Raised when a raw value cannot be parsed as its column's numeric type."""

    def __init__(self, field: str, type_name: str, raw: str) -> None:
        super().__init__(f"cannot coerce {raw!r} to {type_name} for column {field!r}")
        self.field = field
        self.type_name = type_name
        self.raw = raw


class NotSupported(SerDeError):
    """Raised on any attempt to serialize a record back to query-string form."""


__all__ = [
    "SerDeError",
    "SchemaMismatch",
    "MalformedRecord",
    "TypeCoercionError",
    "NotSupported",
]
