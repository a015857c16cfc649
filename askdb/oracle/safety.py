"""
Safety gate for generated SQL.

This is a coarse lexical filter, not a parser: any forbidden keyword found
anywhere in the lower-cased text rejects the query, including inside
identifiers, string literals and comments. Best effort only; the database
account the oracle runs with should be read-only regardless.
"""

import logging

import sqlparse

from askdb.models.oracle import PotentiallyUnsafeQuery

logger = logging.getLogger(__name__)

FORBIDDEN_WORDS = (
    "insert",
    "update",
    "delete",
    "alter",
    "drop",
    "truncate",
    "create",
    "replace",
)


def ensure_query_safe(query: str, strict_mode: bool) -> None:
    """
    Reject data-mutating SQL when strict mode is on.

    Empty queries and non-strict mode are never rejected.

    Raises:
        PotentiallyUnsafeQuery: If a forbidden keyword is present or the text
            holds more than one statement
    """
    if not query or not query.strip():
        return

    if not strict_mode:
        return

    lowered = query.lower()
    matched = [word for word in FORBIDDEN_WORDS if word in lowered]
    if matched:
        raise PotentiallyUnsafeQuery.from_query(lowered, reason=f"contains {matched[0]}")

    statements = [stmt for stmt in sqlparse.split(query) if stmt.strip().rstrip(";").strip()]
    if len(statements) > 1:
        raise PotentiallyUnsafeQuery.from_query(lowered, reason="multiple statements")

    logger.debug("Query passed safety gate", extra={"query": query[:200]})
