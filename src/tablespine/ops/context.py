"""
Request-scoped context for operations.

Every operation function receives an :class:`OperationContext` as its first
argument. It carries the connection pool (owned by the server lifespan, not
by the operation), a request id for log correlation, and caller metadata.
"""

from __future__ import annotations

import uuid
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass, field
from typing import Any, Protocol

from tablespine.core.protocols import StorePrimitive


class ConnectionSource(Protocol):
    """Anything that hands out a :class:`StorePrimitive` for one operation.

    :class:`tablespine.core.pool.SqlitePool` in production; tests pass fakes.
    """

    def acquire(self) -> AbstractAsyncContextManager[StorePrimitive]:
        ...


@dataclass
class OperationContext:
    """Context passed to every operation function.

    Attributes:
        pool: Source of pooled connections.
        request_id: Unique ID for this invocation (auto-generated).
        caller: Origin of the request, ``"mcp"`` or ``"sdk"``.
        metadata: Arbitrary key/value pairs forwarded to logging.
    """

    pool: ConnectionSource
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    caller: str = "sdk"
    metadata: dict[str, Any] = field(default_factory=dict)
