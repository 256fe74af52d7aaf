"""
Record decoding: one ``key<TAB>query`` line in, one typed row out.

A raw line looks like::

    K1\\tName=Jane%20Doe&age=42&vip=true

The part before the first tab is the record key; the part after it is a URL
query string. Parameter names are matched case-insensitively against the
schema, the record key is exposed as the synthetic column ``key``, and each
raw value is coerced to its column's declared ScalarType.

Usage:
    from querystring_serde.decoder import RecordDecoder
    from querystring_serde.schema import bind_from_strings

    decoder = RecordDecoder(bind_from_strings("key,name,age", "string,string,int"))
    row = decoder.decode("K1\\tname=Jane&age=42")
    row.as_dict()  # {"key": "K1", "name": "Jane", "age": 42}
"""

from __future__ import annotations

import math
import re
import struct
from typing import Callable, Dict, List, NoReturn, Optional, Tuple
from urllib.parse import unquote_plus

from querystring_serde.domain.types import (
    DecodedRecord,
    Field,
    QueryParamMap,
    RawRecord,
    ScalarType,
    Schema,
    Value,
)
from querystring_serde.errors import MalformedRecord, NotSupported, TypeCoercionError
from querystring_serde.utils.logging import get_logger

log = get_logger(__name__)

KEY_COLUMN = "key"

_RECORD_SEPARATOR = "\t"
_PAIR_SEPARATOR = "&"
_KEY_VALUE_SEPARATOR = "="

# Decimals are trimmed of control chars and spaces and may carry a d/f suffix.
# Integers are ASCII digits with an optional sign, nothing else.
_NUMERIC_PADDING = "".join(chr(code) for code in range(0x21))
_DECIMAL_RE = re.compile(
    r"[+-]?(?:NaN|Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?[fFdD]?)"
)
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_INTEGER_BITS: Dict[ScalarType, int] = {
    ScalarType.BIGINT: 64,
    ScalarType.INT: 32,
    ScalarType.TINYINT: 8,
}

_MALFORMED_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def split_record(raw: str) -> Tuple[str, str]:
    """
    Split a raw line into (key, payload).

    Only the first two tab-delimited parts are significant; anything after a
    second tab is ignored.

    Raises
    ------
    MalformedRecord
        If the line contains no tab.
    """
    parts = raw.split(_RECORD_SEPARATOR, 2)
    if len(parts) < 2:
        raise MalformedRecord(f"expected '<key>\\t<query>', got {raw!r}", raw=raw)
    return parts[0], parts[1]


def parse_query(payload: str) -> QueryParamMap:
    """
    Parse a query string into a lower-cased name -> raw value mapping.

    Pairs without ``=``, or with an empty name or value, are dropped. Values
    are left percent-encoded; later duplicates win.
    """
    params: QueryParamMap = {}
    for pair in payload.split(_PAIR_SEPARATOR):
        name, sep, value = pair.partition(_KEY_VALUE_SEPARATOR)
        if not sep or not name or not value:
            continue
        params[name.lower()] = value
    return params


def percent_decode(raw: str) -> str:
    """
    Decode ``%XX`` escapes and ``+`` as UTF-8 form data.

    Malformed escapes or invalid UTF-8 leave the value as it came in.
    """
    if "%" not in raw and "+" not in raw:
        return raw
    if _MALFORMED_ESCAPE_RE.search(raw):
        return raw
    try:
        return unquote_plus(raw, encoding="utf-8", errors="strict")
    except UnicodeDecodeError:
        return raw


def _parse_decimal(raw: str) -> Optional[float]:
    text = raw.strip(_NUMERIC_PADDING)
    if not _DECIMAL_RE.fullmatch(text):
        return None
    if text[-1] in "fFdD":
        text = text[:-1]
    return float(text)


def _to_double(field: Field, raw: str) -> float:
    value = _parse_decimal(raw)
    if value is None:
        raise TypeCoercionError(field.name, field.type.value, raw)
    return value


def _to_float(field: Field, raw: str) -> float:
    value = _to_double(field, raw)
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _to_integer(field: Field, raw: str) -> int:
    if not _INTEGER_RE.fullmatch(raw):
        raise TypeCoercionError(field.name, field.type.value, raw)
    value = int(raw)
    bound = 1 << (_INTEGER_BITS[field.type] - 1)
    if not -bound <= value < bound:
        raise TypeCoercionError(field.name, field.type.value, raw)
    return value


def _to_boolean(field: Field, raw: str) -> bool:
    return raw.lower() == "true"


def _to_text(field: Field, raw: str) -> str:
    return percent_decode(raw)


_COERCERS: Dict[ScalarType, Callable[[Field, str], Value]] = {
    ScalarType.DOUBLE: _to_double,
    ScalarType.BIGINT: _to_integer,
    ScalarType.INT: _to_integer,
    ScalarType.TINYINT: _to_integer,
    ScalarType.FLOAT: _to_float,
    ScalarType.BOOLEAN: _to_boolean,
    ScalarType.TEXT: _to_text,
}


def coerce_value(field: Field, raw: str) -> Value:
    """
    Coerce a raw parameter value to the field's declared type.

    Raises
    ------
    TypeCoercionError
        If a numeric column's value is not a valid literal or is out of range.
    """
    return _COERCERS[field.type](field, raw)


def decode(schema: Schema, raw: str) -> DecodedRecord:
    """
    Decode one raw line against a schema.

    The record key always wins over a ``key`` parameter in the payload and is
    stored verbatim, without percent-decoding.
    """
    key, payload = split_record(raw)
    log.debug("Deserialize row: %s", payload)

    params = parse_query(payload)
    params[KEY_COLUMN] = key

    values: List[Optional[Value]] = []
    for field in schema.columns:
        if field.name not in params:
            values.append(None)
            continue
        if field.name == KEY_COLUMN and field.type is ScalarType.TEXT:
            values.append(key)
            continue
        values.append(coerce_value(field, params[field.name]))
    return DecodedRecord(schema=schema, values=tuple(values))


class RecordDecoder:
    """
    Decoder bound to one schema.

    Holds no per-record state: every call builds a fresh row, so one instance
    can be shared across threads.
    """

    def __init__(self, schema: Schema, encoding: str = "utf-8") -> None:
        self._schema = schema
        self._encoding = encoding

    @property
    def schema(self) -> Schema:
        return self._schema

    @property
    def encoding(self) -> str:
        return self._encoding

    def decode(self, raw: RawRecord) -> DecodedRecord:
        """
        Decode one record; bytes are decoded with the decoder's encoding first.

        Raises
        ------
        MalformedRecord, TypeCoercionError
        """
        if isinstance(raw, (bytes, bytearray)):
            raw = raw.decode(self._encoding, errors="replace")
        return decode(self._schema, raw)

    def encode(self, record: object) -> NoReturn:
        """Records are read-only; encoding back to a query string is not supported."""
        log.debug("Refusing to serialize record", extra={"record_type": type(record).__name__})
        raise NotSupported("query-string records cannot be serialized")


__all__ = [
    "KEY_COLUMN",
    "RecordDecoder",
    "coerce_value",
    "decode",
    "parse_query",
    "percent_decode",
    "split_record",
]
