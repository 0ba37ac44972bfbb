"""
Record adapters and row shapes.

Two directions are handled here:

    Inbound:  to_record(data) turns whatever the caller passed to
              insert()/update()/save() into a plain ordered dict.
              One adapter is registered per accepted input shape:
                  * Mapping        (dict, OrderedDict, ...)
                  * namedtuple     (via _asdict)
                  * dataclass      (declared field order)
                  * plain object   (public instance attributes)

    Outbound: shape_row(row, columns, shape) materializes one fetched row
              as the configured RecordShape.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from enum import Enum
from functools import singledispatch
from types import SimpleNamespace
from typing import Any, Dict, Sequence, Union


Record = Dict[str, Any]


# ----------------------------------------------------------------------
# Output shape
# ----------------------------------------------------------------------

class RecordShape(Enum):
    """How multi-column rows are handed back to callers."""

    OBJECT = "object"     # attribute access: row.name
    MAPPING = "mapping"   # dict access:      row["name"]
    TUPLE = "tuple"       # positional:       row[1]

    @classmethod
    def parse(cls, value: Union["RecordShape", str]) -> "RecordShape":
        """
        Accept either an enum member or its string value
        (case-insensitive). Anything else raises ValueError.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        choices = ", ".join(repr(s.value) for s in cls)
        raise ValueError(f"Unknown record shape {value!r}; expected one of {choices}")


def shape_row(row: Sequence[Any], columns: Sequence[str], shape: RecordShape) -> Any:
    """
    Build one caller-visible row from a raw DB-API row tuple.

    Parameters
    ----------
    row:
        Raw row as returned by cursor.fetchone() / fetchall().
    columns:
        Column names from cursor.description, in result order.
    shape:
        Target RecordShape.
    """
    if shape is RecordShape.TUPLE:
        return tuple(row)

    data = dict(zip(columns, row))
    if shape is RecordShape.MAPPING:
        return data
    return SimpleNamespace(**data)


# ----------------------------------------------------------------------
# Inbound adapters
# ----------------------------------------------------------------------

@singledispatch
def to_record(data: Any) -> Record:
    """
    Normalize a caller-supplied record into an ordered column -> value dict.

    Raises
    ------
    TypeError
        If the value has no recognizable column names.
    """
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        return _from_dataclass(data)
    return _from_object(data)


@to_record.register(Mapping)
def _from_mapping(data: Mapping) -> Record:
    return {str(k): data[k] for k in data.keys()}


@to_record.register(tuple)
def _from_namedtuple(data: tuple) -> Record:
    if hasattr(data, "_asdict"):
        return dict(data._asdict())
    raise TypeError(
        "Plain tuples carry no column names; pass a mapping or a namedtuple"
    )


@to_record.register(list)
@to_record.register(str)
@to_record.register(bytes)
def _reject_sequence(data: Any) -> Record:
    raise TypeError(f"Cannot use {type(data).__name__} as a record")


def _from_dataclass(data: Any) -> Record:
    return {f.name: getattr(data, f.name) for f in dataclasses.fields(data)}


def _from_object(data: Any) -> Record:
    try:
        attrs = vars(data)
    except TypeError:
        raise TypeError(
            f"Cannot use {type(data).__name__} as a record; "
            "expected a mapping or an object with public attributes"
        ) from None
    return {k: v for k, v in attrs.items() if not k.startswith("_")}


__all__ = [
    "Record",
    "RecordShape",
    "shape_row",
    "to_record",
]
