"""
Typed request objects for operations.

Each dataclass is the *input* contract of one operation function. Values are
already :data:`~tablespine.core.values.DynamicValue`; names are plain,
unvalidated strings (the statement builder validates them).

``from_wire`` constructors convert JSON-like transport arguments and raise
:class:`~tablespine.core.errors.BindEncodingError` for values that have no
DynamicValue form.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from tablespine.core.values import DynamicValue, from_wire


def _values_from_wire(values: Mapping[str, Any] | None) -> dict[str, DynamicValue]:
    return {name: from_wire(value) for name, value in (values or {}).items()}


def _params_from_wire(params: Sequence[Any] | None) -> tuple[DynamicValue, ...]:
    return tuple(from_wire(p) for p in (params or ()))


# ------------------------------------------------------------------ #
# Generic CRUD
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class InsertRequest:
    """Request for :func:`tablespine.ops.crud.insert_row`."""

    table: str
    values: dict[str, DynamicValue] = field(default_factory=dict)

    @classmethod
    def from_wire(cls, table: str, values: Mapping[str, Any] | None) -> InsertRequest:
        return cls(table=table, values=_values_from_wire(values))


@dataclass(frozen=True, slots=True)
class SelectRequest:
    """Request for :func:`tablespine.ops.crud.select_rows`.

    Attributes:
        table: Table to read.
        columns: Columns to return; ``None`` or empty selects every column.
        where: Raw, trusted SQL filter fragment (``?`` placeholders allowed).
        params: Values for the ``?`` placeholders in *where*.
        order_by: Raw, trusted SQL ordering fragment.
        limit: Maximum rows.
        offset: Rows to skip.
    """

    table: str
    columns: tuple[str, ...] | None = None
    where: str | None = None
    params: tuple[DynamicValue, ...] = ()
    order_by: str | None = None
    limit: int | None = None
    offset: int | None = None

    @classmethod
    def from_wire(
        cls,
        table: str,
        columns: Sequence[str] | None = None,
        where: str | None = None,
        params: Sequence[Any] | None = None,
        order_by: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> SelectRequest:
        return cls(
            table=table,
            columns=tuple(columns) if columns is not None else None,
            where=where,
            params=_params_from_wire(params),
            order_by=order_by,
            limit=limit,
            offset=offset,
        )


@dataclass(frozen=True, slots=True)
class UpdateRequest:
    """Request for :func:`tablespine.ops.crud.update_rows`."""

    table: str
    set: dict[str, DynamicValue] = field(default_factory=dict)
    where: str | None = None
    params: tuple[DynamicValue, ...] = ()

    @classmethod
    def from_wire(
        cls,
        table: str,
        set: Mapping[str, Any] | None,
        where: str | None = None,
        params: Sequence[Any] | None = None,
    ) -> UpdateRequest:
        return cls(
            table=table,
            set=_values_from_wire(set),
            where=where,
            params=_params_from_wire(params),
        )


@dataclass(frozen=True, slots=True)
class DeleteRequest:
    """Request for :func:`tablespine.ops.crud.delete_rows`.

    No *where* deletes every row in the table.
    """

    table: str
    where: str | None = None
    params: tuple[DynamicValue, ...] = ()

    @classmethod
    def from_wire(
        cls,
        table: str,
        where: str | None = None,
        params: Sequence[Any] | None = None,
    ) -> DeleteRequest:
        return cls(table=table, where=where, params=_params_from_wire(params))


# ------------------------------------------------------------------ #
# Notebooks
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class CreateNotebookRequest:
    """Request for :func:`tablespine.ops.notebooks.create_notebook`."""

    body: str
    title: str | None = None


@dataclass(frozen=True, slots=True)
class AppendNotebookRequest:
    """Request for :func:`tablespine.ops.notebooks.append_notebook`."""

    id: int
    delta: str


@dataclass(frozen=True, slots=True)
class ListNotebooksRequest:
    """Request for :func:`tablespine.ops.notebooks.list_notebooks`.

    ``limit`` is clamped to 1..500 and ``offset`` to >= 0 by the operation.
    """

    query: str | None = None
    limit: int | None = None
    offset: int | None = None


# ------------------------------------------------------------------ #
# MCP server registry
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class SetServerEnvRequest:
    """Request for :func:`tablespine.ops.registry.set_server_env`.

    ``env`` is any JSON value; it is stored as JSON text.
    """

    mcp_server_uuid: str
    env: Any = None
