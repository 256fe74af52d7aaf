"""
SerDe interface and the query-string SerDe a host engine plugs in.

A host (table reader, row pipeline) drives a SerDe through a small lifecycle:
``initialize`` once with the table properties, then ``deserialize`` per line.
Hosts may also ask for the row shape (``object_inspector``), the wire type
(``serialized_class``) and running counters (``stats``).

Table properties follow the Hive names:
- ``columns``: comma-separated column names
- ``columns.types``: comma-separated column types
- ``serialization.encoding``: optional charset for byte input (default UTF-8)
"""

from __future__ import annotations

import abc
import threading
from typing import (
    Any,
    Dict,
    List,
    Mapping,
    NoReturn,
    Optional,
    Protocol,
    TypedDict,
    runtime_checkable,
)

from querystring_serde.decoder import RecordDecoder
from querystring_serde.domain.types import DecodedRecord, RawRecord, Schema
from querystring_serde.errors import SchemaMismatch, SerDeError
from querystring_serde.schema import bind_from_strings
from querystring_serde.utils.logging import get_logger

log = get_logger(__name__)

LIST_COLUMNS = "columns"
LIST_COLUMN_TYPES = "columns.types"
SERIALIZATION_ENCODING = "serialization.encoding"


class SerDeStats(TypedDict):
    """
    Counters accumulated over ``deserialize`` calls.

    ``raw_data_size`` counts characters (or bytes, for byte input) of the
    lines handed in, including lines that failed to decode.
    """

    raw_data_size: int
    row_count: int


@runtime_checkable
class SerDe(Protocol):
    """
    Common interface a host engine drives.
    """

    def initialize(self, properties: Mapping[str, str]) -> None:
        """Bind the table schema from its properties."""
        ...

    def deserialize(self, blob: RawRecord) -> DecodedRecord:
        """Turn one stored line into a row."""
        ...

    def serialize(self, obj: Any) -> Any:
        """Turn a row back into its stored form."""
        ...

    @property
    def object_inspector(self) -> List[Dict[str, str]]:
        """Row shape: column names and types in order."""
        ...

    @property
    def serialized_class(self) -> type:
        """Python type of the stored form."""
        ...

    def stats(self) -> Optional[SerDeStats]:
        """Counters since initialization, if tracked."""
        ...


class AbstractSerDe(abc.ABC):
    """
    Optional ABC helper for class-based implementations.
    """

    @abc.abstractmethod
    def initialize(self, properties: Mapping[str, str]) -> None:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    def deserialize(self, blob: RawRecord) -> DecodedRecord:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    def serialize(self, obj: Any) -> Any:  # pragma: no cover - interface only
        raise NotImplementedError


class QueryStringSerDe(AbstractSerDe):
    """
    Reads ``key<TAB>query`` lines as typed rows. Writing is not supported.
    """

    def __init__(self) -> None:
        self._decoder: Optional[RecordDecoder] = None
        self._lock = threading.Lock()
        self._raw_data_size = 0
        self._row_count = 0

    @classmethod
    def from_properties(cls, properties: Mapping[str, str]) -> QueryStringSerDe:
        serde = cls()
        serde.initialize(properties)
        return serde

    def initialize(self, properties: Mapping[str, str]) -> None:
        """
        Bind the schema from ``columns`` / ``columns.types``.

        Raises
        ------
        SchemaMismatch
            If either property is missing or the two lists do not line up.
        """
        log.debug("Initializing QueryStringSerDe")
        self._decoder = None
        missing = [key for key in (LIST_COLUMNS, LIST_COLUMN_TYPES) if key not in properties]
        if missing:
            raise SchemaMismatch(f"missing table properties: {', '.join(missing)}")

        schema = bind_from_strings(properties[LIST_COLUMNS], properties[LIST_COLUMN_TYPES])
        encoding = properties.get(SERIALIZATION_ENCODING) or "utf-8"
        self._decoder = RecordDecoder(schema, encoding=encoding)
        with self._lock:
            self._raw_data_size = 0
            self._row_count = 0
        log.debug("QueryStringSerDe initialization complete", extra={"columns": len(schema)})

    @property
    def decoder(self) -> RecordDecoder:
        if self._decoder is None:
            raise SerDeError("SerDe used before initialize()")
        return self._decoder

    @property
    def schema(self) -> Schema:
        return self.decoder.schema

    @property
    def object_inspector(self) -> List[Dict[str, str]]:
        return self.schema.describe()

    @property
    def serialized_class(self) -> type:
        return str

    def deserialize(self, blob: RawRecord) -> DecodedRecord:
        decoder = self.decoder
        with self._lock:
            self._raw_data_size += len(blob)
        record = decoder.decode(blob)
        with self._lock:
            self._row_count += 1
        return record

    def serialize(self, obj: Any) -> NoReturn:
        self.decoder.encode(obj)

    def stats(self) -> SerDeStats:
        with self._lock:
            return SerDeStats(raw_data_size=self._raw_data_size, row_count=self._row_count)


__all__ = [
    "AbstractSerDe",
    "LIST_COLUMNS",
    "LIST_COLUMN_TYPES",
    "QueryStringSerDe",
    "SERIALIZATION_ENCODING",
    "SerDe",
    "SerDeStats",
]
