"""Process settings for tablespine.

``BaseServiceSettings`` carries what every service needs (host, port, log
level, debug); ``TablespineSettings`` adds where the SQLite store lives and
how the connection pool is sized.

The database URL is resolved in this order:

1. ``DATABASE_URL`` environment variable
2. ``TABLESPINE_DATABASE_URL`` environment variable (or ``.env``)
3. ``[database] url`` in ``config.toml`` (current directory, then the
   directory of the running script; or ``TABLESPINE_CONFIG_FILE``)
4. ``sqlite://./app.sqlite``

Examples:
    >>> from tablespine.core.settings import load_settings
    >>> settings = load_settings(database_url="sqlite::memory:")
    >>> settings.max_connections
    5

Tags:
    settings, configuration, pydantic, environment, tablespine
"""

from __future__ import annotations

import sys
import tomllib
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tablespine.core.errors import InvalidConfigError
from tablespine.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_DATABASE_URL = "sqlite://./app.sqlite"


class BaseServiceSettings(BaseSettings):
    """Common settings for a tablespine service process.

    Fields
    ──────
    host         : Bind address for the HTTP MCP transport
    port         : Bind port for the HTTP MCP transport
    debug        : Enable debug mode (verbose logging)
    log_level    : Structlog log level
    log_json     : JSON log lines; ``None`` picks JSON when stderr is not a tty
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Network ──────────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 8100

    # ── Observability ────────────────────────────────────────────
    debug: bool = False
    log_level: str = "INFO"
    log_json: bool | None = None


class TablespineSettings(BaseServiceSettings):
    """Settings for the SQLite CRUD MCP server (``TABLESPINE_`` prefix)."""

    model_config = SettingsConfigDict(
        env_prefix="TABLESPINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Store ────────────────────────────────────────────────────
    database_url: str = Field(
        default=DEFAULT_DATABASE_URL,
        validation_alias=AliasChoices("DATABASE_URL", "TABLESPINE_DATABASE_URL", "database_url"),
        description="SQLite URL or file path",
    )
    config_file: Path = Field(
        default=Path("config.toml"),
        description="TOML file consulted for [database] url when no env var is set",
    )

    # ── Pool ─────────────────────────────────────────────────────
    max_connections: int = Field(default=5, ge=1)
    busy_timeout: float = Field(default=5.0, ge=0.0, description="Seconds to wait on a locked database")
    journal_mode: str | None = Field(default="WAL", description="Applied best-effort on every new connection")


def _database_url_from_toml(path: Path) -> str | None:
    """Read ``[database] url`` from *path*; missing or malformed files yield ``None``."""
    if not path.is_file():
        return None
    try:
        data: dict[str, Any] = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning("config_file_unreadable", path=str(path), error=str(exc))
        return None
    database = data.get("database")
    if not isinstance(database, dict):
        return None
    url = database.get("url")
    if url is None:
        return None
    if not isinstance(url, str):
        raise InvalidConfigError("database.url", url, f"{path}: [database] url must be a string")
    return url


def _config_candidates(config_file: Path) -> list[Path]:
    if config_file.is_absolute() or not sys.argv or not sys.argv[0]:
        return [config_file]
    beside_script = Path(sys.argv[0]).resolve().parent / config_file
    return [config_file, beside_script]


def load_settings(**overrides: Any) -> TablespineSettings:
    """Build settings from overrides, environment, ``.env`` and ``config.toml``."""
    settings = TablespineSettings(**overrides)
    if "database_url" in settings.model_fields_set:
        return settings

    for path in _config_candidates(settings.config_file):
        url = _database_url_from_toml(path)
        if url is not None:
            logger.debug("database_url_from_config", path=str(path))
            return settings.model_copy(update={"database_url": url})
    return settings


__all__ = [
    "DEFAULT_DATABASE_URL",
    "BaseServiceSettings",
    "TablespineSettings",
    "load_settings",
]
