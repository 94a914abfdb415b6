from __future__ import annotations

import math
from collections.abc import Collection, Sequence
from dataclasses import dataclass, field
from typing import Any, Union

from PLEXPORT.server.services.explorer.classifier import (
    ColumnTag,
    date_columns,
    has_tag,
    json_columns,
    text_columns,
)
from PLEXPORT.server.services.explorer.exceptions import InvalidRequestError
from PLEXPORT.server.services.explorer.identifiers import (
    LIKE_ESCAPE_CHARACTER,
    escape_like_pattern,
    quote_as_text,
    quote_identifier,
)
from PLEXPORT.server.services.explorer.introspection import ColumnInfo

ScalarValue = Union[str, int, float]

NULL_MODE = "null"
NOT_NULL_MODE = "notNull"


# [FILTER VARIANTS]
###############################################################################
@dataclass(frozen=True)
class EqualsFilter:
    column: str
    value: ScalarValue


@dataclass(frozen=True)
class IsNullFilter:
    column: str


@dataclass(frozen=True)
class IsNotNullFilter:
    column: str


@dataclass(frozen=True)
class DateRangeFilter:
    column: str
    start: str | None = None
    end: str | None = None


@dataclass(frozen=True)
class SearchFilter:
    term: str
    columns: tuple[str, ...]


@dataclass(frozen=True)
class PrimaryKeyAnchor:
    column: str
    value: ScalarValue


Filter = Union[
    EqualsFilter,
    IsNullFilter,
    IsNotNullFilter,
    DateRangeFilter,
    SearchFilter,
    PrimaryKeyAnchor,
]

FILTER_VARIANTS = (
    EqualsFilter,
    IsNullFilter,
    IsNotNullFilter,
    DateRangeFilter,
    SearchFilter,
    PrimaryKeyAnchor,
)


###############################################################################
@dataclass(frozen=True)
class FilterRequest:
    equals: tuple[EqualsFilter, ...] = ()
    nulls: tuple[IsNullFilter | IsNotNullFilter, ...] = ()
    date_range: DateRangeFilter | None = None
    search: SearchFilter | None = None
    primary_key_anchor: PrimaryKeyAnchor | None = None

    # -------------------------------------------------------------------------
    def variants(self) -> list[Filter]:
        """Filters in compilation order, matching the order of bound params."""
        ordered: list[Filter] = []
        if self.search is not None:
            ordered.append(self.search)
        ordered.extend(self.equals)
        ordered.extend(self.nulls)
        if self.date_range is not None:
            ordered.append(self.date_range)
        if self.primary_key_anchor is not None:
            ordered.append(self.primary_key_anchor)
        return ordered


###############################################################################
@dataclass
class CompiledFilters:
    predicates: list[str] = field(default_factory=list)
    params: list[Any] = field(default_factory=list)

    # -------------------------------------------------------------------------
    def bind(self, value: Any) -> str:
        placeholder = f":p{len(self.params)}"
        self.params.append(value)
        return placeholder

    # -------------------------------------------------------------------------
    def bound_parameters(self) -> dict[str, Any]:
        return {f"p{index}": value for index, value in enumerate(self.params)}

    # -------------------------------------------------------------------------
    def where_clause(self) -> str:
        if not self.predicates:
            return ""
        return " WHERE " + " AND ".join(self.predicates)


# [PARSING]
###############################################################################
def is_scalar_value(value: Any) -> bool:
    if isinstance(value, bool):
        return True
    if isinstance(value, (int, str)):
        return True
    return isinstance(value, float) and math.isfinite(value)


# -----------------------------------------------------------------------------
def coerce_scalar(value: Any) -> ScalarValue:
    if isinstance(value, bool):
        return 1 if value else 0
    return value


# -----------------------------------------------------------------------------
def resolve_search_columns(
    columns: Sequence[ColumnInfo], selected_columns: Sequence[str]
) -> list[str]:
    """Selected text-like columns, or every text-like column as a fallback."""
    text_names = text_columns(columns)
    selected_text = [name for name in selected_columns if name in text_names]
    candidates = selected_text or text_names
    return list(dict.fromkeys(candidates))


# -----------------------------------------------------------------------------
def parse_equals_filters(raw: Any, available: set[str]) -> tuple[EqualsFilter, ...]:
    if not isinstance(raw, list):
        return ()
    parsed: list[EqualsFilter] = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        column = entry.get("column")
        value = entry.get("value")
        if not isinstance(column, str) or column not in available:
            continue
        if not is_scalar_value(value):
            continue
        parsed.append(EqualsFilter(column=column, value=coerce_scalar(value)))
    return tuple(parsed)


# -----------------------------------------------------------------------------
def parse_null_filters(
    raw: Any, available: set[str]
) -> tuple[IsNullFilter | IsNotNullFilter, ...]:
    if not isinstance(raw, list):
        return ()
    parsed: list[IsNullFilter | IsNotNullFilter] = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        column = entry.get("column")
        if not isinstance(column, str) or column not in available:
            continue
        mode = entry.get("mode")
        if mode == NULL_MODE:
            parsed.append(IsNullFilter(column=column))
        elif mode == NOT_NULL_MODE:
            parsed.append(IsNotNullFilter(column=column))
    return tuple(parsed)


# -----------------------------------------------------------------------------
def parse_date_range(raw: Any, columns: Sequence[ColumnInfo]) -> DateRangeFilter | None:
    if not isinstance(raw, dict):
        return None
    column = raw.get("column")
    if not isinstance(column, str) or column not in date_columns(columns):
        return None
    start = raw.get("from")
    end = raw.get("to")
    return DateRangeFilter(
        column=column,
        start=start if isinstance(start, str) and start else None,
        end=end if isinstance(end, str) and end else None,
    )


# -----------------------------------------------------------------------------
def parse_search(raw: Any, search_columns: Sequence[str]) -> SearchFilter | None:
    if not isinstance(raw, str):
        return None
    term = raw.strip()
    if not term or not search_columns:
        return None
    return SearchFilter(term=term, columns=tuple(search_columns))


# -----------------------------------------------------------------------------
def parse_numeric_anchor(text: str) -> ScalarValue:
    """Integers are kept exact, beyond the 53-bit range of a float."""
    try:
        return int(text)
    except ValueError:
        pass
    try:
        numeric = float(text)
    except ValueError as exc:
        raise InvalidRequestError("Invalid numeric primary key value supplied.") from exc
    if not math.isfinite(numeric):
        raise InvalidRequestError("Invalid numeric primary key value supplied.")
    return int(numeric) if numeric.is_integer() else numeric


# -----------------------------------------------------------------------------
def parse_primary_key_value(raw: Any, primary_key: ColumnInfo | None) -> PrimaryKeyAnchor | None:
    if primary_key is None or raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None
    if not has_tag(primary_key, ColumnTag.NUMERIC_LIKE):
        return PrimaryKeyAnchor(column=primary_key.name, value=text)
    return PrimaryKeyAnchor(column=primary_key.name, value=parse_numeric_anchor(text))


# -----------------------------------------------------------------------------
def parse_filter_request(
    payload: dict[str, Any],
    columns: Sequence[ColumnInfo],
    selected_columns: Sequence[str],
    primary_key: ColumnInfo | None,
) -> FilterRequest:
    """Build a FilterRequest from an untrusted JSON body.

    Entries naming a column outside `columns` or carrying an unusable value are
    dropped. Only a non-numeric anchor for a numeric primary key is rejected.
    """
    available = {column.name for column in columns}
    raw_filters = payload.get("filters")
    filters = raw_filters if isinstance(raw_filters, dict) else {}
    return FilterRequest(
        equals=parse_equals_filters(filters.get("equals"), available),
        nulls=parse_null_filters(filters.get("nulls"), available),
        date_range=parse_date_range(filters.get("dateRange"), columns),
        search=parse_search(
            payload.get("search"), resolve_search_columns(columns, selected_columns)
        ),
        primary_key_anchor=parse_primary_key_value(
            payload.get("primaryKeyValue"), primary_key
        ),
    )


# [COMPILATION]
###############################################################################
def compile_filter(
    item: Filter,
    compiled: CompiledFilters,
    available: set[str],
    direction: str,
    text_cast_columns: Collection[str] = frozenset(),
) -> None:
    if not isinstance(item, FILTER_VARIANTS):
        raise TypeError(f"Unsupported filter variant: {type(item).__name__}")

    if isinstance(item, SearchFilter):
        search_columns = [name for name in item.columns if name in available]
        if not search_columns:
            return
        like_value = f"%{escape_like_pattern(item.term)}%"
        clauses = [
            f"{quote_as_text(name, name in text_cast_columns)} "
            f"LIKE {compiled.bind(like_value)} "
            f"ESCAPE '{LIKE_ESCAPE_CHARACTER}'"
            for name in search_columns
        ]
        compiled.predicates.append("(" + " OR ".join(clauses) + ")")
        return

    column = item.column
    if column not in available:
        return
    identifier = quote_identifier(column)

    if isinstance(item, EqualsFilter):
        compiled.predicates.append(f"{identifier} = {compiled.bind(item.value)}")
    elif isinstance(item, IsNullFilter):
        compiled.predicates.append(f"{identifier} IS NULL")
    elif isinstance(item, IsNotNullFilter):
        compiled.predicates.append(f"{identifier} IS NOT NULL")
    elif isinstance(item, DateRangeFilter):
        if item.start:
            compiled.predicates.append(f"{identifier} >= {compiled.bind(item.start)}")
        if item.end:
            compiled.predicates.append(f"{identifier} <= {compiled.bind(item.end)}")
    elif isinstance(item, PrimaryKeyAnchor):
        comparator = "<=" if direction == "DESC" else ">="
        compiled.predicates.append(f"{identifier} {comparator} {compiled.bind(item.value)}")


# -----------------------------------------------------------------------------
def compile_filters(
    columns: Sequence[ColumnInfo], request: FilterRequest, direction: str = "ASC"
) -> CompiledFilters:
    available = {column.name for column in columns}
    text_cast_columns = set(json_columns(columns))
    compiled = CompiledFilters()
    for item in request.variants():
        compile_filter(item, compiled, available, direction, text_cast_columns)
    return compiled
