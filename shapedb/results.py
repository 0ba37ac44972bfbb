"""
Result normalizer.

Turns an executed cursor into the caller-visible shape. The decision is
made only from the cursor's own column metadata, never from caller hints:

    columns   read_one            read_many              read_pairs
    -------   -----------------   --------------------   ------------------
    0         None                []                     ShapeMismatchError
    1         scalar | None       [scalar, ...]          ShapeMismatchError
    2         record | None       [record, ...]          {col1: col2, ...}
    3+        record | None       [record, ...]          ShapeMismatchError

"None" from read_one means "no row". It is never raised as an error.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .db.helpers import column_count, column_names
from .errors import ShapeMismatchError
from .records import RecordShape, shape_row


def read_one(cursor: Any, shape: RecordShape = RecordShape.OBJECT) -> Optional[Any]:
    """
    First row of the result: a scalar for one-column results, otherwise a
    record in `shape`. None when there is no row.
    """
    columns = column_names(cursor)
    if not columns:
        return None

    row = cursor.fetchone()
    if row is None:
        return None
    if len(columns) == 1:
        return row[0]
    return shape_row(row, columns, shape)


def read_many(cursor: Any, shape: RecordShape = RecordShape.OBJECT) -> List[Any]:
    """
    Every row of the result: scalars for one-column results, otherwise
    records in `shape`. Empty list when there are no rows.
    """
    columns = column_names(cursor)
    if not columns:
        return []

    rows = cursor.fetchall()
    if len(columns) == 1:
        return [row[0] for row in rows]
    return [shape_row(row, columns, shape) for row in rows]


def read_pairs(cursor: Any) -> Dict[Any, Any]:
    """
    Key/value map from a two-column result, in row order. A repeated key
    keeps the value from its last row.

    Raises
    ------
    ShapeMismatchError
        If the result does not have exactly two columns. Raised before any
        row is fetched.
    """
    count = column_count(cursor)
    if count != 2:
        raise ShapeMismatchError(expected=2, actual=count)

    return {key: value for key, value in cursor.fetchall()}


__all__ = [
    "read_one",
    "read_many",
    "read_pairs",
]
