"""
Health operation.

Round-trips ``SELECT 1`` through the pool and reports what the server is
connected to.
"""

from __future__ import annotations

import time

from tablespine import __version__
from tablespine.core.logging import get_logger
from tablespine.core.pool import SqlitePool
from tablespine.ops.context import OperationContext
from tablespine.ops.responses import HealthReport
from tablespine.ops.result import OperationResult, start_timer

logger = get_logger(__name__)


async def check_health(ctx: OperationContext) -> OperationResult[HealthReport]:
    """Check database connectivity.

    Always succeeds; an unreachable database is reported as
    ``connected=False`` with a warning rather than as a failed result.
    """
    timer = start_timer()
    pool = ctx.pool
    backend, path, stats = "unknown", "", {}
    if isinstance(pool, SqlitePool):
        backend, path = pool.info.backend, pool.info.path

    try:
        start = time.perf_counter()
        async with pool.acquire() as conn:
            await conn.query("SELECT 1")
        latency = (time.perf_counter() - start) * 1000
        if isinstance(pool, SqlitePool):
            stats = pool.stats()
        return OperationResult.ok(
            HealthReport(
                connected=True,
                backend=backend,
                path=path,
                latency_ms=latency,
                pool=stats,
                version=__version__,
            ),
            elapsed_ms=timer.elapsed_ms,
        )
    except Exception as exc:
        logger.exception("op_failed", op="health_check", error=str(exc))
        return OperationResult.ok(
            HealthReport(
                connected=False,
                backend=backend,
                path=path,
                latency_ms=0.0,
                version=__version__,
                error=str(exc),
            ),
            warnings=[f"Health check error: {exc}"],
            elapsed_ms=timer.elapsed_ms,
        )
