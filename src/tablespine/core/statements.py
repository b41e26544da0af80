"""
Dynamic statement builder.

Turns a structured CRUD description into a :class:`BoundStatement`:
parameterized SQL text plus the ordered list of values to bind to its ``?``
placeholders.

Rules shared by every builder:

- Every table and column name passes
  :func:`~tablespine.core.identifiers.require_identifier` **before** any
  statement text is assembled. A bad name aborts the whole build.
- Every value is bound, never interpolated.
- ``LIMIT`` / ``OFFSET`` are typed integers and are written as literals.

.. warning:: **Trust boundary.**
   ``where`` and ``order_by`` are raw SQL fragments. They are appended
   verbatim after ``WHERE`` / ``ORDER BY`` and are **not** parsed, validated
   or escaped. Only trusted callers may supply them; identifier validation
   does not reach inside them. Values referenced by ``?`` inside ``where``
   go in ``params`` and are bound like any other value.

Architecture:
    ::

        build_insert(table, values)
            INSERT INTO t (a, b) VALUES (?, ?)            params: values
        build_select(table, columns, where, params, order_by, limit, offset)
            SELECT a, b FROM t WHERE <where> ORDER BY <order_by> LIMIT n OFFSET m
                                                          params: where params
        build_update(table, set, where, params)
            UPDATE t SET a = ?, b = ? WHERE <where>       params: set values, then where params
        build_delete(table, where, params)
            DELETE FROM t WHERE <where>                   params: where params

Examples:
    >>> stmt = build_insert("t", {"a": Integer(1), "b": Text("x")})
    >>> stmt.sql
    'INSERT INTO t (a, b) VALUES (?, ?)'
    >>> stmt.params
    (Integer(value=1), Text(value='x'))

Tags:
    sql-builder, parameterized-sql, injection-defense, tablespine
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from tablespine.core.errors import BindEncodingError, EmptyColumnSetError
from tablespine.core.identifiers import require_identifier
from tablespine.core.logging import get_logger
from tablespine.core.marshal import bind_all
from tablespine.core.values import DynamicValue

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class BoundStatement:
    """Statement text and its positional bind values."""

    sql: str
    params: tuple[DynamicValue, ...] = ()

    def native_params(self) -> tuple[Any, ...]:
        """Bind values encoded as native SQLite parameters."""
        return bind_all(self.params)


def _validate_columns(columns: Sequence[str]) -> list[str]:
    return [require_identifier(c, kind="column") for c in columns]


def _literal_int(name: str, value: Any) -> int:
    # bool is an int subclass, reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise BindEncodingError(f"{name} must be an integer, got {value!r}", field=name, value=value)
    return value


def _append_filter(sql: str, where: str | None) -> str:
    if where is not None:
        sql += f" WHERE {where}"
    return sql


def build_insert(table: str, values: Mapping[str, DynamicValue]) -> BoundStatement:
    """Build ``INSERT INTO <table> (<cols>) VALUES (?, ...)``.

    Raises:
        InvalidIdentifierError: table or a column name fails validation.
        EmptyColumnSetError: *values* is empty.
    """
    require_identifier(table, kind="table")
    # One snapshot of the mapping drives both the column list and the binds
    items = list(values.items())
    columns = _validate_columns([column for column, _ in items])
    if not columns:
        raise EmptyColumnSetError("insert")

    placeholders = ", ".join("?" for _ in columns)
    sql = f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"
    return BoundStatement(sql, tuple(value for _, value in items))


def build_select(
    table: str,
    columns: Sequence[str] | None = None,
    where: str | None = None,
    params: Sequence[DynamicValue] | None = None,
    order_by: str | None = None,
    limit: int | None = None,
    offset: int | None = None,
) -> BoundStatement:
    """Build ``SELECT``. Empty or missing *columns* selects ``*``.

    Raises:
        InvalidIdentifierError: table or a column name fails validation.
        BindEncodingError: *limit* / *offset* is not an integer.
    """
    require_identifier(table, kind="table")
    selected = _validate_columns(columns) if columns else []
    if limit is not None:
        limit = _literal_int("limit", limit)
    if offset is not None:
        offset = _literal_int("offset", offset)

    sql = f"SELECT {', '.join(selected) if selected else '*'} FROM {table}"
    sql = _append_filter(sql, where)
    if order_by is not None:
        sql += f" ORDER BY {order_by}"
    if limit is not None:
        sql += f" LIMIT {limit}"
    if offset is not None:
        # SQLite's grammar has no bare OFFSET
        if limit is None:
            sql += " LIMIT -1"
        sql += f" OFFSET {offset}"
    return BoundStatement(sql, tuple(params or ()))


def build_update(
    table: str,
    set_values: Mapping[str, DynamicValue],
    where: str | None = None,
    params: Sequence[DynamicValue] | None = None,
) -> BoundStatement:
    """Build ``UPDATE <table> SET c = ?, ...``.

    Binds the set-values first, then *params*, matching the textual order
    of ``SET`` before ``WHERE``.

    Raises:
        InvalidIdentifierError: table or a set-column fails validation.
        EmptyColumnSetError: *set_values* is empty.
    """
    require_identifier(table, kind="table")
    if not set_values:
        raise EmptyColumnSetError("update")
    items = list(set_values.items())
    columns = _validate_columns([column for column, _ in items])

    assignments = ", ".join(f"{column} = ?" for column in columns)
    sql = _append_filter(f"UPDATE {table} SET {assignments}", where)
    return BoundStatement(sql, tuple(value for _, value in items) + tuple(params or ()))


def build_delete(
    table: str,
    where: str | None = None,
    params: Sequence[DynamicValue] | None = None,
) -> BoundStatement:
    """Build ``DELETE FROM <table>``.

    Without *where* every row of the table is deleted.

    Raises:
        InvalidIdentifierError: table fails validation.
    """
    require_identifier(table, kind="table")
    sql = _append_filter(f"DELETE FROM {table}", where)
    if where is None:
        logger.info("delete_without_filter", table=table)
    return BoundStatement(sql, tuple(params or ()))


__all__ = [
    "BoundStatement",
    "build_insert",
    "build_select",
    "build_update",
    "build_delete",
]
