"""
Domain package for the query-string SerDe.

Exports the schema and record types shared by the binder, decoder and pipeline.
Keep this package focused on data definitions and validation concerns.
"""

from querystring_serde.domain.types import (
    DecodedRecord,
    Field,
    QueryParamMap,
    RawRecord,
    ScalarType,
    Schema,
    Value,
)

__all__ = [
    "DecodedRecord",
    "Field",
    "QueryParamMap",
    "RawRecord",
    "ScalarType",
    "Schema",
    "Value",
]
