"""
Typed response objects for operations.

Each dataclass is the *output* contract of one operation. ``to_dict()``
renders the JSON-ready form the MCP tools return.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from tablespine.core.values import DynamicValue, row_to_wire

ResultRow = dict[str, DynamicValue]


@dataclass(frozen=True, slots=True)
class InsertResponse:
    generated_id: int | None

    def to_dict(self) -> dict[str, Any]:
        return {"generated_id": self.generated_id}


@dataclass(frozen=True, slots=True)
class SelectResponse:
    rows: list[ResultRow] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"rows": [row_to_wire(row) for row in self.rows]}


@dataclass(frozen=True, slots=True)
class MutationResponse:
    """Update / delete outcome."""

    affected_count: int

    def to_dict(self) -> dict[str, Any]:
        return {"affected_count": self.affected_count}


@dataclass(frozen=True, slots=True)
class RowsAffected:
    """Outcome of the fixed-schema write operations."""

    rows_affected: int

    def to_dict(self) -> dict[str, Any]:
        return {"rows_affected": self.rows_affected}


@dataclass(frozen=True, slots=True)
class NotebookSummary:
    id: int
    title: str
    snippet: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title, "snippet": self.snippet}


@dataclass(frozen=True, slots=True)
class NotebookDetail:
    id: int
    title: str
    data: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title, "data": self.data}


@dataclass(frozen=True, slots=True)
class HealthReport:
    connected: bool
    backend: str
    path: str
    latency_ms: float
    pool: dict[str, Any] = field(default_factory=dict)
    version: str = ""
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d = {
            "connected": self.connected,
            "backend": self.backend,
            "path": self.path,
            "latency_ms": round(self.latency_ms, 2),
            "pool": self.pool,
            "version": self.version,
        }
        if self.error:
            d["error"] = self.error
        return d
