"""
Structured error types for tablespine.

Every failure an operation can report is a :class:`TablespineError`
subclass carrying a category, a retry flag, structured context and the
chained underlying exception. Operations translate these into
``OperationResult`` failures; the MCP layer turns those into tool errors.

Manifesto:
    - **Typed taxonomy:** caller-input errors and store failures are
      different types, so the transport can report them differently
    - **Explicit retry semantics:** nothing in this package retries, and
      every error says so (``retryable=False``)
    - **Verbatim store messages:** execution failures keep the SQLite
      message untouched and chain the original exception as ``cause``

Architecture:
    ::

        ┌───────────────────────────────────────────────────────────┐
        │                     TablespineError                        │
        │   (category, retryable, context, cause, to_dict())         │
        ├───────────────────────────────────────────────────────────┤
        │  ValidationError (VALIDATION)   DatabaseError (DATABASE)   │
        │       │                              │                     │
        │  InvalidIdentifierError         ExecutionError             │
        │  EmptyColumnSetError              ConstraintViolationError │
        │  BindEncodingError                StoreBusyError           │
        │                                 DatabaseConnectionError    │
        │  ConfigError (CONFIG)                                      │
        │  InvalidConfigError                                        │
        └───────────────────────────────────────────────────────────┘

    A result column whose native type matches none of the read probes is a
    *marshal gap*. It is not an error: the cell becomes ``Null`` and the
    operation proceeds (see :mod:`tablespine.core.marshal`).

Examples:
    >>> err = InvalidIdentifierError("1abc", kind="column")
    >>> err.code
    'INVALID_IDENTIFIER'
    >>> err.to_dict()["identifier"]
    '1abc'

Tags:
    error-handling, exception-hierarchy, error-context, tablespine
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    DATABASE = "DATABASE"         # Store rejected or failed the statement
    VALIDATION = "VALIDATION"     # Caller-supplied input is unusable
    CONFIG = "CONFIG"             # Missing or invalid settings
    INTERNAL = "INTERNAL"         # Bugs, unexpected state


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Only fields that are set end up in :meth:`to_dict`, so the context can be
    splatted straight into a structured log event.

    Attributes:
        operation: Operation kind (``insert``, ``select``, ``update``, ``delete``)
        table: Target table name, as supplied by the caller
        sql: Statement text, once it has been built
        request_id: Operation invocation id
        metadata: Additional key-value pairs
    """

    operation: str | None = None
    table: str | None = None
    sql: str | None = None
    request_id: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["operation", "table", "sql", "request_id"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class TablespineError(Exception):
    """
    Base exception for all tablespine errors.

    Subclasses set ``default_category`` and ``code``; ``code`` is the
    machine-readable string that operations put into their failure results.

    Examples:
        >>> err = TablespineError("boom")
        >>> err.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> err.with_context(table="notes").context.table
        'notes'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False
    code: str = "INTERNAL"

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> TablespineError:
        """
        Add context to this error (fluent API).

        Usage:
            raise ExecutionError("locked").with_context(table="notes", sql=sql)
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CALLER-INPUT ERRORS (never retryable)
# =============================================================================


class ValidationError(TablespineError):
    """
    Caller-supplied input cannot be turned into a statement.

    Never retryable - the request must be fixed.
    """

    default_category = ErrorCategory.VALIDATION
    default_retryable = False
    code = "VALIDATION_FAILED"

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        if self.value is not None:
            result["value"] = repr(self.value)
        return result


class InvalidIdentifierError(ValidationError):
    """A table or column name is not safe to splice into statement text."""

    code = "INVALID_IDENTIFIER"

    def __init__(self, identifier: Any, *, kind: str = "identifier", **kwargs: Any):
        self.identifier = identifier
        self.kind = kind
        if kind == "table":
            message = f"Invalid table name: {identifier!r}"
        elif kind == "column":
            message = f"Invalid column: {identifier!r}"
        else:
            message = f"Invalid identifier: {identifier!r}"
        super().__init__(message, field=kind, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["identifier"] = self.identifier
        return result


class EmptyColumnSetError(ValidationError):
    """Insert with no values, or update with no set-columns."""

    code = "EMPTY_COLUMN_SET"

    def __init__(self, operation: str, **kwargs: Any):
        self.operation = operation
        if operation == "update":
            message = "No columns provided in set"
        else:
            message = "No columns provided"
        super().__init__(message, **kwargs)


class BindEncodingError(ValidationError):
    """A caller-supplied value cannot be encoded as a native parameter."""

    code = "BIND_ENCODING_FAILED"


# =============================================================================
# STORE ERRORS
# =============================================================================


class DatabaseError(TablespineError):
    """Database-level error."""

    default_category = ErrorCategory.DATABASE
    default_retryable = False
    code = "DATABASE_ERROR"


class ExecutionError(DatabaseError):
    """
    The store rejected or failed a statement.

    The message is the store's own message, unmodified.
    """

    code = "EXECUTION_FAILED"


class ConstraintViolationError(ExecutionError):
    """UNIQUE / NOT NULL / FOREIGN KEY / CHECK violation."""

    pass


class StoreBusyError(ExecutionError):
    """The database file is locked by another writer."""

    pass


class DatabaseConnectionError(DatabaseError):
    """Opening a connection to the store failed."""

    code = "CONNECTION_FAILED"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(TablespineError):
    """
    Configuration error.

    Never retryable - configuration must be fixed.
    """

    default_category = ErrorCategory.CONFIG
    default_retryable = False
    code = "CONFIG_ERROR"


class InvalidConfigError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}")


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def translate_sqlite_error(exc: sqlite3.Error) -> ExecutionError:
    """Wrap a ``sqlite3`` exception, keeping its message verbatim."""
    message = str(exc) or exc.__class__.__name__
    if isinstance(exc, sqlite3.IntegrityError):
        return ConstraintViolationError(message, cause=exc)
    if isinstance(exc, sqlite3.OperationalError) and (
        "locked" in message or "busy" in message
    ):
        return StoreBusyError(message, cause=exc)
    return ExecutionError(message, cause=exc)


def categorize_error(error: Exception) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, TablespineError):
        return error.category
    if isinstance(error, sqlite3.Error):
        return ErrorCategory.DATABASE
    if isinstance(error, (TypeError, ValueError)):
        return ErrorCategory.VALIDATION
    return ErrorCategory.INTERNAL


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "TablespineError",
    # Caller input
    "ValidationError",
    "InvalidIdentifierError",
    "EmptyColumnSetError",
    "BindEncodingError",
    # Store
    "DatabaseError",
    "ExecutionError",
    "ConstraintViolationError",
    "StoreBusyError",
    "DatabaseConnectionError",
    # Config
    "ConfigError",
    "InvalidConfigError",
    # Utilities
    "translate_sqlite_error",
    "categorize_error",
]
