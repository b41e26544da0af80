"""
Operations layer for tablespine.

Typed request/response functions over the core statement builder and pool:

- Every function takes an ``OperationContext`` as its first argument
- Every function returns ``OperationResult[T]``; expected failures become
  error codes, not exceptions
- Nothing here knows about MCP

Usage::

    from tablespine.ops import OperationContext
    from tablespine.ops.crud import insert_row
    from tablespine.ops.requests import InsertRequest

    ctx = OperationContext(pool=pool)
    result = await insert_row(ctx, InsertRequest.from_wire("notes", {"body": "hi"}))
    assert result.success
"""

from tablespine.ops.context import ConnectionSource, OperationContext
from tablespine.ops.result import OperationError, OperationResult

__all__ = [
    "ConnectionSource",
    "OperationContext",
    "OperationError",
    "OperationResult",
]
