"""SQLite URL parsing.

Turns the configured database URL into a :class:`ConnectionInfo` the pool can
open. Accepted forms:

==============================  ========================================
Form                            Meaning
==============================  ========================================
``sqlite:///abs/path.db``       absolute file path ``/abs/path.db``
``sqlite://./rel/path.db``      relative file path ``./rel/path.db``
``sqlite:path.db``              relative file path ``path.db``
``sqlite::memory:``             in-memory database
``sqlite://:memory:``           in-memory database
``:memory:`` / ``memory``       in-memory database
``./data/app.db``               bare file path
==============================  ========================================

A query string may carry ``mode=ro`` (open read-only) or ``mode=rwc``
(default). Other query parameters are ignored with a warning.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from urllib.parse import parse_qs

from tablespine.core.errors import InvalidConfigError
from tablespine.core.logging import get_logger

logger = get_logger(__name__)

_MEMORY_TARGETS = ("", ":memory:", "memory")


@dataclass(frozen=True)
class ConnectionInfo:
    """Where a pool's connections point."""

    url: str
    """The original URL or path."""

    path: str
    """``":memory:"`` or the resolved absolute file path."""

    persistent: bool
    """Whether data survives process exit."""

    readonly: bool = False

    backend: str = "sqlite"

    @property
    def is_memory(self) -> bool:
        return not self.persistent

    def __repr__(self) -> str:
        return (
            f"ConnectionInfo(backend={self.backend!r}, path={self.path!r}, "
            f"persistent={self.persistent}, readonly={self.readonly})"
        )


def _split_query(target: str) -> tuple[str, bool]:
    if "?" not in target:
        return target, False
    target, query = target.split("?", 1)
    readonly = False
    for key, values in parse_qs(query).items():
        if key == "mode":
            mode = values[-1]
            if mode not in ("ro", "rw", "rwc"):
                raise InvalidConfigError("database_url", query, f"Unsupported sqlite mode: {mode!r}")
            readonly = mode == "ro"
        else:
            logger.warning("database_url_param_ignored", param=key)
    return target, readonly


def parse_sqlite_url(url: str | None) -> ConnectionInfo:
    """Parse a SQLite URL or path.

    Raises:
        InvalidConfigError: *url* names a non-SQLite scheme.
    """
    original = url or ":memory:"
    target = original

    if target.startswith("sqlite://"):
        target = target[len("sqlite://"):]
    elif target.startswith("sqlite:"):
        target = target[len("sqlite:"):]
    elif "://" in target:
        scheme = target.split("://", 1)[0]
        raise InvalidConfigError("database_url", original, f"Unsupported database scheme: {scheme!r}")

    target, readonly = _split_query(target)

    if target in _MEMORY_TARGETS:
        return ConnectionInfo(url=original, path=":memory:", persistent=False, readonly=readonly)

    resolved = str(Path(target).expanduser().resolve())
    return ConnectionInfo(url=original, path=resolved, persistent=True, readonly=readonly)


__all__ = [
    "ConnectionInfo",
    "parse_sqlite_url",
]
