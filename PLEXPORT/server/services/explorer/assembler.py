from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from PLEXPORT.server.services.explorer.filters import CompiledFilters
from PLEXPORT.server.services.explorer.identifiers import quote_identifier
from PLEXPORT.server.utils.types import extract_int

ASCENDING = "ASC"
DESCENDING = "DESC"


###############################################################################
@dataclass(frozen=True)
class AssembledQuery:
    sql: str
    count_sql: str
    params: dict[str, Any]
    count_params: dict[str, Any]


# -----------------------------------------------------------------------------
def clamp_limit(value: Any, default: int, maximum: int) -> int:
    parsed = extract_int(value)
    if parsed is None:
        return min(max(default, 1), maximum)
    return min(max(parsed, 1), maximum)


# -----------------------------------------------------------------------------
def clamp_offset(value: Any) -> int:
    parsed = extract_int(value)
    if parsed is None:
        return 0
    return max(parsed, 0)


# -----------------------------------------------------------------------------
def normalize_direction(value: Any) -> str:
    if isinstance(value, str) and value.strip().lower() == "desc":
        return DESCENDING
    return ASCENDING


# -----------------------------------------------------------------------------
def compute_has_more(offset: int, row_count: int, total: int) -> bool:
    return offset + row_count < total


# -----------------------------------------------------------------------------
def assemble_query(
    table: str,
    selected_columns: Sequence[str],
    compiled: CompiledFilters,
    order_by: str | None,
    direction: str,
    limit: int,
    offset: int,
) -> AssembledQuery:
    """Build the page SELECT and its matching COUNT.

    Every identifier must already be confirmed against live introspection;
    values only travel as bound parameters. The COUNT statement reuses the
    WHERE clause so the total reflects the filtered set.
    """
    table_identifier = quote_identifier(table)
    select_clause = ", ".join(quote_identifier(column) for column in selected_columns)
    where_clause = compiled.where_clause()
    order_clause = ""
    if order_by:
        order_direction = DESCENDING if direction == DESCENDING else ASCENDING
        order_clause = f" ORDER BY {quote_identifier(order_by)} {order_direction}"

    filter_params = compiled.bound_parameters()
    sql = (
        f"SELECT {select_clause} FROM {table_identifier}"
        f"{where_clause}{order_clause} LIMIT :limit OFFSET :offset"
    )
    count_sql = f"SELECT COUNT(*) AS count FROM {table_identifier}{where_clause}"
    return AssembledQuery(
        sql=sql,
        count_sql=count_sql,
        params={**filter_params, "limit": limit, "offset": offset},
        count_params=dict(filter_params),
    )
