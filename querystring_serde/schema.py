"""
Schema binding: turn table metadata into an immutable, validated Schema.

Table metadata arrives as two parallel, order-significant lists: column names
and column type declarations. Hosts usually hand them over as two strings
(Hive's ``columns`` and ``columns.types`` table properties):

    schema = bind_from_strings("key,name,hits", "string,string,int")
"""

from __future__ import annotations

from typing import List, Sequence

from querystring_serde.domain.types import Field, ScalarType, Schema
from querystring_serde.errors import SchemaMismatch
from querystring_serde.utils.logging import get_logger

log = get_logger(__name__)

_OPENING = "<("
_CLOSING = ">)"
_TYPE_SEPARATORS = ",:;"


def split_column_names(columns: str) -> List[str]:
    """Split a comma-separated column name list, trimming whitespace."""
    if not columns.strip():
        return []
    return [name.strip() for name in columns.split(",")]


def split_type_declarations(column_types: str) -> List[str]:
    """
    Split a column type list at top-level separators only.

    Separators nested inside ``<...>`` or ``(...)`` belong to a compound
    declaration, so ``"int,map<string,int>,decimal(10,2)"`` yields three items.
    """
    if not column_types.strip():
        return []

    decls: List[str] = []
    depth = 0
    current: List[str] = []
    for char in column_types:
        if char in _OPENING:
            depth += 1
        elif char in _CLOSING:
            depth = max(depth - 1, 0)
        elif char in _TYPE_SEPARATORS and depth == 0:
            decls.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    decls.append("".join(current).strip())
    return decls


def bind(names: Sequence[str], type_decls: Sequence[str]) -> Schema:
    """
    Bind parallel column name / type declaration lists into a Schema.

    Raises
    ------
    SchemaMismatch
        If the lists differ in length, are empty, or contain a blank name.
    """
    log.debug("Binding schema", extra={"columns": len(names), "types": len(type_decls)})

    if len(names) != len(type_decls):
        raise SchemaMismatch(
            f"{len(names)} column name(s) but {len(type_decls)} type declaration(s): "
            f"names={list(names)!r} types={list(type_decls)!r}"
        )
    if not names:
        raise SchemaMismatch("schema must declare at least one column")
    if any(not name.strip() for name in names):
        raise SchemaMismatch(f"blank column name in {list(names)!r}")

    schema = Schema(
        columns=tuple(
            Field(name=name, type=ScalarType.parse(decl)) for name, decl in zip(names, type_decls)
        )
    )

    log.debug("Schema binding complete", extra={"schema": schema.describe()})
    return schema


def bind_from_strings(columns: str, column_types: str) -> Schema:
    """Bind a Schema from comma-separated name and type strings."""
    return bind(split_column_names(columns), split_type_declarations(column_types))


__all__ = [
    "bind",
    "bind_from_strings",
    "split_column_names",
    "split_type_declarations",
]
