"""Statement classification for the SQL editor."""

import re
from typing import Optional

# Leading comments are skipped so "-- note\nSELECT 1" still counts as a query
_LEADING_COMMENTS = re.compile(r"^\s*(?:(?:--[^\n]*(?:\n|$))|(?:/\*.*?\*/)|\s)*", re.DOTALL)


def normalize_statement(statement: str) -> Optional[str]:
    """Trim a statement for submission.

    Returns:
        The stripped statement, or None if nothing but whitespace is left
    """
    stripped = statement.strip()
    return stripped or None


def is_query(statement: str) -> bool:
    """Decide whether a statement returns rows.

    A statement is a query when it starts with ``SELECT``, compared
    case-insensitively after leading whitespace and comments. Everything else
    (INSERT, UPDATE, DDL, ``WITH ...``, ``SHOW ...``) goes through ``execute``.
    """
    body = _LEADING_COMMENTS.sub("", statement, count=1)
    return body[:6].upper() == "SELECT"
