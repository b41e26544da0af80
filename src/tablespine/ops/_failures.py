"""Failure logging shared by the operation modules."""

from __future__ import annotations

from tablespine.core.errors import TablespineError, categorize_error
from tablespine.core.logging import get_logger
from tablespine.ops.context import OperationContext
from tablespine.ops.result import OperationResult

logger = get_logger("tablespine.ops")


def failed(op: str, ctx: OperationContext, exc: TablespineError, elapsed_ms: float) -> OperationResult:
    """Expected failure: log it and carry its code into the result."""
    logger.warning(
        "op_failed",
        op=op,
        code=exc.code,
        error=exc.message,
        request_id=ctx.request_id,
    )
    return OperationResult.from_error(exc, elapsed_ms=elapsed_ms)


def internal(op: str, ctx: OperationContext, exc: Exception, elapsed_ms: float) -> OperationResult:
    category = categorize_error(exc)
    logger.exception("op_failed", op=op, category=category.value, error=str(exc), request_id=ctx.request_id)
    return OperationResult.fail(
        "INTERNAL",
        f"{op} failed: {exc}",
        category=category,
        elapsed_ms=elapsed_ms,
    )
