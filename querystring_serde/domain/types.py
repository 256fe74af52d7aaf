"""
Domain types for the query-string SerDe.

Defines the closed set of scalar column types, the bound table schema, and the
decoded record handed to the consuming row pipeline. Schemas are validated
pydantic models built once per decoder; decoded records are plain frozen
dataclasses because one is allocated per input line.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

import pydantic
from pydantic import BaseModel, field_validator

# One Python type per ScalarType variant: DOUBLE/FLOAT -> float,
# BIGINT/INT/TINYINT -> int, BOOLEAN -> bool, TEXT -> str.
Value = Union[float, int, bool, str]

# Lower-cased parameter name -> raw (still percent-encoded) value.
QueryParamMap = Dict[str, str]

RawRecord = Union[str, bytes]


class ScalarType(str, Enum):
    """
    Column types a record can be decoded into.

    Members carry their Hive type names as values.
    """

    DOUBLE = "double"
    BIGINT = "bigint"
    INT = "int"
    TINYINT = "tinyint"
    FLOAT = "float"
    BOOLEAN = "boolean"
    TEXT = "string"

    @classmethod
    def parse(cls, decl: str) -> ScalarType:
        """
        Map a column type declaration onto a ScalarType.

        Matching is case-insensitive. Unknown or compound declarations
        (``map<string,int>``, ``decimal(10,2)``, ...) fall back to TEXT.
        """
        return _DECLARATIONS.get(decl.strip().lower(), cls.TEXT)


_DECLARATIONS: Dict[str, ScalarType] = {member.value: member for member in ScalarType}
_DECLARATIONS["text"] = ScalarType.TEXT


class Field(BaseModel):
    """
    A single named, typed column. Names are stored lower-cased.
    """

    name: str = pydantic.Field(..., min_length=1, description="Lower-cased column name.")
    type: ScalarType = pydantic.Field(..., description="Declared scalar type.")

    model_config = {
        "frozen": True,
    }

    @field_validator("name", mode="before")
    @classmethod
    def _fold_case(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class Schema(BaseModel):
    """
    Ordered, immutable list of columns. Order defines output field order.
    """

    columns: Tuple[Field, ...] = pydantic.Field(..., min_length=1)

    model_config = {
        "frozen": True,
    }

    @property
    def names(self) -> List[str]:
        return [column.name for column in self.columns]

    @property
    def types(self) -> List[ScalarType]:
        return [column.type for column in self.columns]

    def describe(self) -> List[Dict[str, str]]:
        """Column metadata in declaration order, for hosts that inspect row shape."""
        return [{"name": column.name, "type": column.type.value} for column in self.columns]

    def __len__(self) -> int:
        return len(self.columns)


@dataclass(frozen=True)
class DecodedRecord:
    """
    One decoded row: a value (or None when absent) per schema column.
    """

    schema: Schema
    values: Tuple[Optional[Value], ...]

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, item: Union[int, str]) -> Optional[Value]:
        if isinstance(item, str):
            try:
                return self.values[self.schema.names.index(item.lower())]
            except ValueError:
                raise KeyError(item) from None
        return self.values[item]

    def as_dict(self) -> Dict[str, Any]:
        return dict(zip(self.schema.names, self.values))


__all__ = [
    "DecodedRecord",
    "Field",
    "QueryParamMap",
    "RawRecord",
    "ScalarType",
    "Schema",
    "Value",
]
