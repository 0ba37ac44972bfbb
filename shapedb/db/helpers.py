"""
Shared statement helpers.

These wrappers ensure:
    - one parameter-binding convention across backends
    - driver failures surface as shapedb.errors.ExecutionError
    - predictable column metadata for the result normalizer

Backends import this module as `.helpers`
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, List, Optional, Union

from ..errors import ExecutionError

logger = logging.getLogger(__name__)

Params = Union[tuple, dict]


# ----------------------------------------------------------------------
# Parameter binding
# ----------------------------------------------------------------------

def normalize_params(params: Optional[Any]) -> Params:
    """
    Coerce caller parameters into what DB-API execute() accepts.

        None              -> ()              no placeholders
        Mapping           -> dict            named placeholders
        list / tuple      -> tuple           positional, in statement order
        anything else     -> (value,)        a single positional value

    Strings and bytes are single values, not sequences. Falsy scalars
    such as 0 or "" are still bound.
    """
    if params is None:
        return ()
    if isinstance(params, Mapping):
        return dict(params)
    if isinstance(params, (list, tuple)):
        return tuple(params)
    return (params,)


# ----------------------------------------------------------------------
# Execution helpers
# ----------------------------------------------------------------------

def safe_execute(conn: Any, query: str, params: Optional[Any] = None):
    """
    Prepare, bind and execute a single SQL statement.
    Returns the raw cursor.

    Parameters
    ----------
    conn:
        DB-API compatible connection object (sqlite3, psycopg2, etc.).
    query:
        SQL string with placeholders.
    params:
        Scalar, sequence or mapping; see normalize_params().

    Raises
    ------
    ExecutionError
        Wrapped driver error with context.
    """
    bound = normalize_params(params)
    cur = conn.cursor()
    logger.debug("execute: %s | params=%r", query, bound)
    try:
        # psycopg2 interpolates "%" whenever an argument tuple is passed,
        # even an empty one, so parameterless statements go through bare.
        if bound:
            cur.execute(query, bound)
        else:
            cur.execute(query)
    except Exception as e:
        cur.close()
        raise ExecutionError(
            f"DB execute failed: {e} | Query: {query!r} | Params: {bound!r}",
            query=query,
            params=bound,
        ) from e
    return cur


def safe_execute_for_count(conn: Any, query: str, params: Optional[Any] = None) -> int:
    """
    Execute a statement and return only its affected-row count.

    The cursor is closed before returning, so no live result set leaks
    out of write operations.
    """
    cur = safe_execute(conn, query, params)
    try:
        return cur.rowcount
    finally:
        cur.close()


# ----------------------------------------------------------------------
# Column metadata
# ----------------------------------------------------------------------

def column_names(cursor: Any) -> List[str]:
    """
    Column names of an executed cursor, in result order.

    Statements without a result set (UPDATE, DDL, ...) have
    cursor.description == None and yield an empty list.
    """
    description = cursor.description
    if not description:
        return []
    return [col[0] for col in description]


def column_count(cursor: Any) -> int:
    return len(column_names(cursor))


__all__ = [
    "Params",
    "normalize_params",
    "safe_execute",
    "safe_execute_for_count",
    "column_names",
    "column_count",
]
