"""Identifier validation for table and column names.

SQL bind parameters cannot stand in for identifiers, so table and column
names are spliced into statement text directly. Every such name must pass
:func:`is_valid_identifier` first: ASCII letter or underscore, then ASCII
letters, digits or underscores. Nothing else (no quoting, no dots, no
whitespace) is accepted.
"""

from __future__ import annotations

import re
from typing import Any

from tablespine.core.errors import InvalidIdentifierError

IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def is_valid_identifier(name: Any) -> bool:
    """Return True if *name* is safe to interpolate as a table/column name.

    Pure and total: any non-``str`` input is simply invalid.

    >>> is_valid_identifier("_abc9")
    True
    >>> is_valid_identifier("1abc")
    False
    """
    if not isinstance(name, str):
        return False
    # fullmatch, not match + "$": "$" also matches before a trailing newline
    return IDENTIFIER_PATTERN.fullmatch(name) is not None


def require_identifier(name: Any, *, kind: str = "identifier") -> str:
    """Return *name* unchanged, or raise :class:`InvalidIdentifierError`."""
    if not is_valid_identifier(name):
        raise InvalidIdentifierError(name, kind=kind)
    return name


__all__ = [
    "IDENTIFIER_PATTERN",
    "is_valid_identifier",
    "require_identifier",
]
