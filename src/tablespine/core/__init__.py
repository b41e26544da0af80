"""tablespine.core -- the data-access layer behind the CRUD tools.

Manifesto:
    Remote callers describe CRUD work as structured data (table, column/value
    mappings, filters, bind parameters), never as literal SQL. The core turns
    those descriptions into parameterized statements, refusing any table or
    column name that is not a plain identifier, and converts values between
    the open JSON-like wire model and native SQLite parameters in both
    directions.

    - **Validated identifiers:** names are checked before any SQL text exists
    - **Bound values:** values never become statement text
    - **Trusted fragments:** ``where`` / ``order_by`` pass through verbatim;
      they are the one explicit trust boundary
    - **Schema-free reads:** each result cell is probed int -> float -> str ->
      bytes, never failing the read

Architecture::

    Layer 1 -- Types & Errors
        errors.py          TablespineError hierarchy + sqlite3 translation
        result.py          Ok / Err envelope used by the read probes
        values.py          DynamicValue sum type + wire conversion
        protocols.py       StorePrimitive / NativeColumn contracts

    Layer 2 -- Core
        identifiers.py     Identifier validator
        statements.py      Statement builder (insert/select/update/delete)
        marshal.py         Bind path + read probes

    Layer 3 -- Infrastructure
        connection.py      SQLite URL parsing
        pool.py            SqlitePool (scoped acquisition, worker threads)
        settings.py        pydantic-settings configuration
        logging.py         structlog configuration
        transports/        MCP server scaffold
"""

from tablespine.core.errors import (
    BindEncodingError,
    EmptyColumnSetError,
    ExecutionError,
    InvalidIdentifierError,
    TablespineError,
)
from tablespine.core.identifiers import is_valid_identifier, require_identifier
from tablespine.core.marshal import bind_value, marshal_column, marshal_row
from tablespine.core.statements import (
    BoundStatement,
    build_delete,
    build_insert,
    build_select,
    build_update,
)
from tablespine.core.values import (
    NULL,
    Binary,
    Boolean,
    DynamicValue,
    Float,
    Integer,
    Null,
    Text,
    from_wire,
    to_wire,
)

__all__ = [
    # Errors
    "TablespineError",
    "InvalidIdentifierError",
    "EmptyColumnSetError",
    "BindEncodingError",
    "ExecutionError",
    # Identifiers
    "is_valid_identifier",
    "require_identifier",
    # Statements
    "BoundStatement",
    "build_insert",
    "build_select",
    "build_update",
    "build_delete",
    # Values
    "DynamicValue",
    "Null",
    "NULL",
    "Boolean",
    "Integer",
    "Float",
    "Text",
    "Binary",
    "from_wire",
    "to_wire",
    # Marshalling
    "bind_value",
    "marshal_column",
    "marshal_row",
]
