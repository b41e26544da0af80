"""
Protocols for the store primitive the core consumes.

The statement builder and marshaller never touch ``sqlite3`` directly. They
talk to a :class:`StorePrimitive` (one pooled connection, for one operation)
and read results through :class:`NativeColumn`. Tests inject a recording
fake; production uses :class:`tablespine.core.pool.PooledConnection`.

Architecture:
    ::

        StorePrimitive
          ├── execute(sql, params) -> ExecuteOutcome   (writes)
          └── query(sql, params)   -> list[NativeRow]  (reads)

        NativeRow = Sequence[NativeColumn]
        NativeColumn
          ├── name
          ├── is_null            (checked before any typed read)
          ├── native_type        (for diagnostics)
          └── try_get(kind)      -> Result  (kind: int | float | str | bytes)

Tags:
    protocol, store, tablespine
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from tablespine.core.result import Result


@dataclass(frozen=True, slots=True)
class ExecuteOutcome:
    """What a write statement reports back."""

    last_insert_id: int | None
    affected_count: int


@runtime_checkable
class NativeColumn(Protocol):
    """One cell of a native result row."""

    @property
    def name(self) -> str:
        """Store-supplied column name."""
        ...

    @property
    def is_null(self) -> bool:
        """True when the underlying value is SQL NULL."""
        ...

    @property
    def native_type(self) -> str:
        """Name of the driver-level type, for logging."""
        ...

    def try_get(self, kind: type) -> Result[Any]:
        """Typed read: ``Ok(value)`` if the cell decodes as *kind*, else ``Err``."""
        ...


NativeRow = Sequence[NativeColumn]


@runtime_checkable
class StorePrimitive(Protocol):
    """Execution primitive for a single operation."""

    async def execute(self, sql: str, params: tuple[Any, ...] = ()) -> ExecuteOutcome:
        """Run a write statement and commit it."""
        ...

    async def query(self, sql: str, params: tuple[Any, ...] = ()) -> list[NativeRow]:
        """Run a read statement and return every row."""
        ...


__all__ = [
    "ExecuteOutcome",
    "NativeColumn",
    "NativeRow",
    "StorePrimitive",
]
