from __future__ import annotations

from PLEXPORT.server.services.explorer.exceptions import (
    DatabaseUnavailableError,
    ExplorerError,
    InvalidRequestError,
    QueryExecutionError,
    TableNotFoundError,
)
from PLEXPORT.server.services.explorer.introspection import (
    ColumnInfo,
    SchemaIntrospector,
    TableSummary,
)
from PLEXPORT.server.services.explorer.service import DatabaseExplorer, QueryResult

__all__ = [
    "ColumnInfo",
    "DatabaseExplorer",
    "DatabaseUnavailableError",
    "ExplorerError",
    "InvalidRequestError",
    "QueryExecutionError",
    "QueryResult",
    "SchemaIntrospector",
    "TableNotFoundError",
    "TableSummary",
]
