"""
Value marshalling between DynamicValue and native SQLite values.

Write path: :func:`bind_value` maps each :data:`DynamicValue` to exactly one
native parameter. Read path: :func:`marshal_column` turns one result cell of
unknown type back into a :data:`DynamicValue` without schema knowledge.

Architecture:
    ::

        bind_value()                           marshal_column()
        ────────────                           ────────────────
        Null     -> None                       is_null?  -> Null   (no typed read)
        Boolean  -> 0 / 1                      probe int    ─┐
        Integer  -> int                        probe float   │ first Ok wins
        Float    -> float                      probe str     │
        Text     -> str                        probe bytes  ─┘
        Binary   -> bytes                      nothing matched -> Null (marshal gap)

    The read probes are an ordered tuple of functions, each returning a
    ``Result``; there is no exception-driven fallthrough.

Guardrails:
    ❌ DON'T: Attempt a typed read before checking ``is_null``
    ✅ DO: Short-circuit NULL cells to ``Null``

    ❌ DON'T: Fail a whole read because one cell has an exotic type
    ✅ DO: Resolve it to ``Null`` and log ``marshal_gap``

Tags:
    marshalling, value-model, sqlite, tablespine
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from tablespine.core.errors import BindEncodingError
from tablespine.core.logging import get_logger
from tablespine.core.protocols import NativeColumn, NativeRow
from tablespine.core.result import Err, Ok, Result
from tablespine.core.values import (
    NULL,
    Binary,
    Boolean,
    DynamicValue,
    Float,
    Integer,
    Null,
    Text,
)

logger = get_logger(__name__)


# =============================================================================
# WRITE PATH
# =============================================================================


def bind_value(value: DynamicValue) -> Any:
    """Encode *value* as a native SQLite parameter.

    Raises:
        BindEncodingError: *value* is not a DynamicValue.
    """
    match value:
        case Null():
            return None
        case Boolean(value=flag):
            # SQLite has no boolean storage class
            return 1 if flag else 0
        case Integer(value=number):
            return number
        case Float(value=number):
            return number
        case Text(value=text):
            return text
        case Binary(value=data):
            return bytes(data)
    raise BindEncodingError(
        f"Cannot bind value of type {type(value).__name__}",
        value=value,
    )


def bind_all(values: Sequence[DynamicValue]) -> tuple[Any, ...]:
    """Encode a bind list, preserving order."""
    return tuple(bind_value(v) for v in values)


# =============================================================================
# READ PATH
# =============================================================================

Probe = Callable[[NativeColumn], Result[DynamicValue]]


def _probe_integer(column: NativeColumn) -> Result[DynamicValue]:
    return column.try_get(int).map(Integer)


def _probe_float(column: NativeColumn) -> Result[DynamicValue]:
    return column.try_get(float).map(Float)


def _probe_text(column: NativeColumn) -> Result[DynamicValue]:
    return column.try_get(str).map(Text)


def _probe_binary(column: NativeColumn) -> Result[DynamicValue]:
    return column.try_get(bytes).map(lambda data: Binary(bytes(data)))


READ_PROBES: tuple[Probe, ...] = (
    _probe_integer,
    _probe_float,
    _probe_text,
    _probe_binary,
)


def marshal_column(column: NativeColumn) -> DynamicValue:
    """Convert one native cell into a :data:`DynamicValue`.

    NULL cells short-circuit before any typed read. A cell no probe accepts
    becomes ``Null``; that is a marshal gap, not an error.
    """
    if column.is_null:
        return NULL

    for probe in READ_PROBES:
        result = probe(column)
        match result:
            case Ok(value=value):
                return value
            case Err():
                continue

    logger.debug("marshal_gap", column=column.name, native_type=column.native_type)
    return NULL


def marshal_row(row: NativeRow) -> dict[str, DynamicValue]:
    """Convert one native row into a ResultRow, in the store's column order."""
    return {column.name: marshal_column(column) for column in row}


__all__ = [
    "bind_value",
    "bind_all",
    "READ_PROBES",
    "marshal_column",
    "marshal_row",
]
