"""
Dynamic value model.

The closed set of value kinds that tablespine binds to and reads from the
store, kept separate from the JSON-like wire representation so that the
core's contract does not depend on how the transport encodes values.

Architecture:
    ::

        wire (JSON)            DynamicValue              native (sqlite3)
        ───────────            ────────────              ────────────────
        null          ──►      Null            ──►       None
        true/false    ──►      Boolean         ──►       0 / 1
        int           ──►      Integer         ──►       int
        float         ──►      Float           ──►       float
        str           ──►      Text            ──►       str
        list / dict   ──►      Text (JSON)     ──►       str
                               Binary          ◄──►      bytes
        base64 str    ◄──      Binary

        from_wire() / to_wire() are the only crossings of the left edge;
        tablespine.core.marshal owns the right edge.

Policies:
    - **Unsigned overflow:** a wire integer above ``2**63 - 1`` is clamped
      to ``2**63 - 1``. This is lossy by definition and logged as
      ``int_clamped``.
    - **Negative overflow:** a wire integer below ``-2**63`` becomes the
      nearest ``Float``.
    - **Structured values:** lists and objects are stored as canonical JSON
      text (compact separators, sorted keys). They come back as ``Text``.
    - **Binary:** no wire literal produces ``Binary``; read results render it
      as standard base64 text.

Tags:
    value-model, sum-type, wire-format, tablespine
"""

from __future__ import annotations

import base64
import json
from dataclasses import dataclass
from typing import Any

from tablespine.core.errors import BindEncodingError
from tablespine.core.logging import get_logger

logger = get_logger(__name__)

INT64_MAX = 2**63 - 1
INT64_MIN = -(2**63)


@dataclass(frozen=True, slots=True)
class Null:
    """SQL NULL / JSON null."""

    def __repr__(self) -> str:
        return "Null()"


@dataclass(frozen=True, slots=True)
class Boolean:
    value: bool


@dataclass(frozen=True, slots=True)
class Integer:
    """Signed 64-bit integer."""

    value: int

    def __post_init__(self) -> None:
        if not INT64_MIN <= self.value <= INT64_MAX:
            raise BindEncodingError(
                f"Integer out of signed 64-bit range: {self.value}",
                value=self.value,
            )


@dataclass(frozen=True, slots=True)
class Float:
    value: float


@dataclass(frozen=True, slots=True)
class Text:
    value: str


@dataclass(frozen=True, slots=True)
class Binary:
    value: bytes

    def to_base64(self) -> str:
        return base64.b64encode(self.value).decode("ascii")


DynamicValue = Null | Boolean | Integer | Float | Text | Binary

NULL = Null()


def canonical_json(value: Any) -> str:
    """Serialize a structured wire value to its canonical text form."""
    try:
        return json.dumps(value, separators=(",", ":"), sort_keys=True, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise BindEncodingError(
            f"Cannot encode structured value as JSON text: {exc}",
            value=value,
            cause=exc,
        ) from exc


def _from_wire_int(value: int) -> DynamicValue:
    if value > INT64_MAX:
        logger.warning("int_clamped", original=str(value), clamped=INT64_MAX)
        return Integer(INT64_MAX)
    if value < INT64_MIN:
        try:
            return Float(float(value))
        except OverflowError as exc:
            raise BindEncodingError(
                "Integer too large to encode as a float",
                value=value,
                cause=exc,
            ) from exc
    return Integer(value)


def from_wire(value: Any) -> DynamicValue:
    """Convert a parsed JSON-like wire value into a :data:`DynamicValue`.

    Raises:
        BindEncodingError: *value* is not something a JSON parser produces.
    """
    if value is None:
        return NULL
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return Boolean(value)
    if isinstance(value, int):
        return _from_wire_int(value)
    if isinstance(value, float):
        return Float(value)
    if isinstance(value, str):
        return Text(value)
    if isinstance(value, (list, tuple, dict)):
        return Text(canonical_json(value))
    raise BindEncodingError(
        f"Unsupported value type: {type(value).__name__}",
        value=value,
    )


def to_wire(value: DynamicValue) -> Any:
    """Convert a :data:`DynamicValue` into its JSON-like wire form."""
    match value:
        case Null():
            return None
        case Binary():
            return value.to_base64()
        case Boolean() | Integer() | Float() | Text():
            return value.value
    raise TypeError(f"Not a DynamicValue: {value!r}")


def row_to_wire(row: dict[str, DynamicValue]) -> dict[str, Any]:
    """Convert one result row, preserving column order."""
    return {name: to_wire(value) for name, value in row.items()}


__all__ = [
    "INT64_MAX",
    "INT64_MIN",
    "Null",
    "Boolean",
    "Integer",
    "Float",
    "Text",
    "Binary",
    "DynamicValue",
    "NULL",
    "canonical_json",
    "from_wire",
    "to_wire",
    "row_to_wire",
]
