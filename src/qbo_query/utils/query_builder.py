"""Query statement construction for the QuickBooks query language.

QuickBooks accepts a restricted SQL dialect:

    SELECT * FROM Invoice WHERE ... ORDER BY ... STARTPOSITION 1 MAXRESULTS 1000

The helpers here build each clause independently so the query engine only has
to vary STARTPOSITION between pages.
"""

import re

from qbo_query.constants import ENTITY_NAME_PATTERN, TRANSACTION_ENTITIES
from qbo_query.models.query import QueryOptions

_ENTITY_NAME = re.compile(ENTITY_NAME_PATTERN)

START_OF_DAY = "00:00:00Z"
END_OF_DAY = "23:59:59Z"


def validate_entity_name(entity: str) -> str:
    """Ensure an entity name is safe to embed in a statement or URL path.

    Raises:
        ValueError: If the name contains anything other than ASCII letters
    """
    if not _ENTITY_NAME.match(entity):
        raise ValueError(f"Invalid entity name: {entity!r}")
    return entity


def format_start(value: str) -> str:
    """Widen a bare date to midnight UTC; timestamps pass through unchanged."""
    if "T" in value:
        return value
    return f"{value}T{START_OF_DAY}"


def format_end(value: str) -> str:
    """Widen a bare date to the last second of the day (UTC); timestamps pass through."""
    if "T" in value:
        return value
    return f"{value}T{END_OF_DAY}"


def build_conditions(options: QueryOptions) -> list[str]:
    """Build the individual WHERE conditions for a query.

    The ``where`` option is appended verbatim. It is a caller-controlled
    filter expression and is intentionally not escaped.
    """
    conditions: list[str] = []
    if options.start:
        conditions.append(f"{options.query_by} >= '{format_start(options.start)}'")
    if options.end:
        conditions.append(f"{options.query_by} <= '{format_end(options.end)}'")
    if options.where:
        conditions.append(options.where)
    return conditions


def build_where_clause(options: QueryOptions) -> str:
    """Join conditions with AND; empty string when there are none."""
    conditions = build_conditions(options)
    if not conditions:
        return ""
    return "WHERE " + " AND ".join(conditions)


def is_transaction_entity(entity: str) -> bool:
    return entity in TRANSACTION_ENTITIES


def build_order_by(entity: str) -> str:
    """Deterministic ordering so STARTPOSITION paging never skips or repeats rows."""
    if is_transaction_entity(entity):
        return "ORDER BY TxnDate DESC, Id DESC"
    return "ORDER BY Id DESC"


def build_select(
    entity: str,
    *,
    columns: str = "*",
    where_clause: str = "",
    order_by: str = "",
    start_position: int = 1,
    max_results: int,
) -> str:
    """Render a complete paged statement.

    Args:
        entity: QuickBooks entity name (e.g. ``Invoice``)
        columns: Projection (``*`` or a comma-separated field list)
        where_clause: Output of :func:`build_where_clause`, may be empty
        order_by: Output of :func:`build_order_by`, may be empty
        start_position: 1-based position of the first row to return
        max_results: Page size

    Returns:
        Statement text with single spaces between clauses
    """
    parts = [f"SELECT {columns} FROM {entity}"]
    if where_clause:
        parts.append(where_clause)
    if order_by:
        parts.append(order_by)
    parts.append(f"STARTPOSITION {start_position} MAXRESULTS {max_results}")
    return " ".join(parts)
