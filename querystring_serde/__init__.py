"""
querystring_serde - typed decoding of ``key<TAB>query-string`` log records.

Each input line carries a record key, a tab, and a URL query string such as
``Name=Jane%20Doe&age=42``. This package binds a table schema (ordered column
names plus scalar types) and decodes each line into a row of typed values:

- Case-insensitive matching of query parameters to columns
- The record key exposed as the synthetic ``key`` column
- Numeric, boolean and percent-decoded text coercion
- A Hive-style SerDe facade, a batch pipeline and a CLI

Decoding is read-only: serializing rows back to query strings is not supported.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from querystring_serde.config import Settings, get_settings
from querystring_serde.decoder import RecordDecoder, decode, parse_query, percent_decode
from querystring_serde.domain.types import DecodedRecord, Field, ScalarType, Schema
from querystring_serde.errors import (
    MalformedRecord,
    NotSupported,
    SchemaMismatch,
    SerDeError,
    TypeCoercionError,
)
from querystring_serde.pipeline import decode_lines, run_decode
from querystring_serde.schema import bind, bind_from_strings
from querystring_serde.serde import QueryStringSerDe, SerDe, SerDeStats
from querystring_serde.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Schema binding
    "bind",
    "bind_from_strings",
    "Field",
    "ScalarType",
    "Schema",
    # Decoding
    "DecodedRecord",
    "RecordDecoder",
    "decode",
    "parse_query",
    "percent_decode",
    # SerDe facade
    "QueryStringSerDe",
    "SerDe",
    "SerDeStats",
    # Batch pipeline
    "decode_lines",
    "run_decode",
    # Errors
    "SerDeError",
    "SchemaMismatch",
    "MalformedRecord",
    "TypeCoercionError",
    "NotSupported",
    # Logging
    "configure_logging",
    "get_logger",
]
