from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import sqlalchemy
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from PLEXPORT.server.configurations import ExplorerSettings
from PLEXPORT.server.services.explorer.assembler import (
    AssembledQuery,
    assemble_query,
    clamp_limit,
    clamp_offset,
    compute_has_more,
    normalize_direction,
)
from PLEXPORT.server.services.explorer.classifier import date_columns, resolve_primary_key
from PLEXPORT.server.services.explorer.exceptions import (
    DatabaseUnavailableError,
    InvalidRequestError,
    QueryExecutionError,
    TableNotFoundError,
)
from PLEXPORT.server.services.explorer.facets import EnumValue, collect_enum_values
from PLEXPORT.server.services.explorer.filters import (
    FilterRequest,
    IsNullFilter,
    compile_filters,
    parse_filter_request,
    resolve_search_columns,
)
from PLEXPORT.server.services.explorer.identifiers import is_valid_identifier
from PLEXPORT.server.services.explorer.introspection import (
    ColumnInfo,
    SchemaIntrospector,
    TableSummary,
    to_count,
)
from PLEXPORT.server.services.explorer.rows import normalize_row
from PLEXPORT.server.utils.logger import logger


###############################################################################
@dataclass(frozen=True)
class FilterOptions:
    primary_key: str | None
    date_columns: list[str]
    enum_values: dict[str, list[EnumValue]]
    nullable_columns: list[str]


###############################################################################
@dataclass(frozen=True)
class Pagination:
    limit: int
    offset: int
    total: int
    has_more: bool


###############################################################################
@dataclass(frozen=True)
class QueryResult:
    table: str
    columns: list[ColumnInfo]
    schema: list[ColumnInfo]
    rows: list[dict[str, Any]]
    pagination: Pagination
    search: str | None
    order_by: str | None
    direction: str
    searchable_columns: list[str]
    filter_options: FilterOptions
    applied_filters: dict[str, Any]
    selected_columns: list[str] = field(default_factory=list)


# -----------------------------------------------------------------------------
def resolve_selected_columns(raw: Any, available: Sequence[str]) -> list[str]:
    if not isinstance(raw, list):
        return list(available)
    selected: list[str] = []
    for candidate in raw:
        if not isinstance(candidate, str):
            continue
        name = candidate.strip()
        if is_valid_identifier(name) and name in available and name not in selected:
            selected.append(name)
    return selected or list(available)


# -----------------------------------------------------------------------------
def resolve_order_column(raw: Any, available: Sequence[str]) -> str | None:
    if not isinstance(raw, str):
        return None
    name = raw.strip()
    if name and name in available:
        return name
    return None


# -----------------------------------------------------------------------------
def describe_applied_filters(request: FilterRequest) -> dict[str, Any]:
    date_range = request.date_range
    anchor = request.primary_key_anchor
    return {
        "equals": [
            {"column": item.column, "value": item.value} for item in request.equals
        ],
        "dateRange": (
            {"column": date_range.column, "from": date_range.start, "to": date_range.end}
            if date_range is not None
            else None
        ),
        "nulls": [
            {
                "column": item.column,
                "mode": "null" if isinstance(item, IsNullFilter) else "notNull",
            }
            for item in request.nulls
        ],
        "primaryKeyValue": str(anchor.value) if anchor is not None else None,
    }


###############################################################################
class DatabaseExplorer:
    """Ad hoc, read-only explorer over any table of the application store.

    Table and column names coming from the client are authorized only by
    membership in the live introspection result of the current request;
    every value is bound as a statement parameter.
    """

    def __init__(self, engine: Engine | None, settings: ExplorerSettings) -> None:
        if engine is None:
            raise DatabaseUnavailableError()
        self.engine = engine
        self.settings = settings
        self.introspector = SchemaIntrospector(engine, settings.excluded_tables)

    # -------------------------------------------------------------------------
    def list_tables(self) -> list[TableSummary]:
        return self.introspector.list_tables()

    # -------------------------------------------------------------------------
    def load_schema(self, table: Any) -> tuple[str, list[ColumnInfo]]:
        table_name = table.strip() if isinstance(table, str) else ""
        if not table_name or not is_valid_identifier(table_name):
            raise InvalidRequestError("Invalid table name supplied.")
        columns = self.introspector.get_columns(table_name)
        if not columns:
            raise TableNotFoundError()
        return table_name, columns

    # -------------------------------------------------------------------------
    def execute(self, assembled: AssembledQuery) -> tuple[list[dict[str, Any]], int]:
        with self.engine.connect() as conn:
            result = conn.execute(sqlalchemy.text(assembled.sql), assembled.params)
            rows = [normalize_row(row) for row in result.mappings().all()]
            total = to_count(
                conn.execute(
                    sqlalchemy.text(assembled.count_sql), assembled.count_params
                ).scalar()
            )
        return rows, total

    # -------------------------------------------------------------------------
    def query(self, payload: dict[str, Any]) -> QueryResult:
        table_name, columns = self.load_schema(payload.get("table"))
        available = [column.name for column in columns]
        column_map = {column.name: column for column in columns}

        limit = clamp_limit(
            payload.get("limit"), self.settings.default_limit, self.settings.max_limit
        )
        offset = clamp_offset(payload.get("offset"))
        direction = normalize_direction(payload.get("direction"))
        selected_columns = resolve_selected_columns(payload.get("columns"), available)
        primary_key = resolve_primary_key(columns)

        request = parse_filter_request(payload, columns, selected_columns, primary_key)
        order_by = resolve_order_column(payload.get("orderBy"), available)
        anchor = request.primary_key_anchor
        if order_by is None and anchor is not None:
            order_by = anchor.column
        if anchor is not None and self.settings.anchor_pagination == "keyset":
            offset = 0

        compiled = compile_filters(columns, request, direction)
        assembled = assemble_query(
            table_name, selected_columns, compiled, order_by, direction, limit, offset
        )

        try:
            rows, total = self.execute(assembled)
        except SQLAlchemyError as exc:
            logger.exception(
                "Database explorer query on %s failed (columns: %s)",
                table_name,
                ", ".join(selected_columns),
            )
            raise QueryExecutionError() from exc

        filter_options = FilterOptions(
            primary_key=primary_key.name if primary_key is not None else None,
            date_columns=date_columns(columns),
            enum_values=collect_enum_values(
                self.engine,
                table_name,
                columns,
                self.settings.max_enum_columns,
                self.settings.max_enum_value_length,
                self.settings.max_enum_sample,
            ),
            nullable_columns=[column.name for column in columns if not column.not_null],
        )
        search_term = payload.get("search")
        search_term = search_term.strip() if isinstance(search_term, str) else ""
        return QueryResult(
            table=table_name,
            columns=[column_map[name] for name in selected_columns],
            schema=columns,
            rows=rows,
            pagination=Pagination(
                limit=limit,
                offset=offset,
                total=total,
                has_more=compute_has_more(offset, len(rows), total),
            ),
            search=search_term or None,
            order_by=order_by,
            direction=direction,
            searchable_columns=resolve_search_columns(columns, selected_columns),
            filter_options=filter_options,
            applied_filters=describe_applied_filters(request),
            selected_columns=selected_columns,
        )
