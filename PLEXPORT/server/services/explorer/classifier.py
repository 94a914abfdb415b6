from __future__ import annotations

import re
from collections.abc import Iterable
from enum import Enum

from PLEXPORT.server.services.explorer.introspection import ColumnInfo


###############################################################################
class ColumnTag(str, Enum):
    TEXT_LIKE = "textLike"
    DATE_LIKE = "dateLike"
    NUMERIC_LIKE = "numericLike"


TAG_PATTERNS: dict[ColumnTag, re.Pattern[str]] = {
    ColumnTag.TEXT_LIKE: re.compile(r"char|clob|text|json", re.IGNORECASE),
    ColumnTag.DATE_LIKE: re.compile(r"date|time", re.IGNORECASE),
    ColumnTag.NUMERIC_LIKE: re.compile(r"int|real|numeric|double|float", re.IGNORECASE),
}
JSON_TYPE_PATTERN = re.compile(r"json", re.IGNORECASE)


# -----------------------------------------------------------------------------
def classify_column(column: ColumnInfo) -> frozenset[ColumnTag]:
    declared_type = column.declared_type
    if not isinstance(declared_type, str) or not declared_type:
        return frozenset()
    return frozenset(
        tag for tag, pattern in TAG_PATTERNS.items() if pattern.search(declared_type)
    )


# -----------------------------------------------------------------------------
def has_tag(column: ColumnInfo, tag: ColumnTag) -> bool:
    return tag in classify_column(column)



# -----------------------------------------------------------------------------
def columns_with_tag(columns: Iterable[ColumnInfo], tag: ColumnTag) -> list[str]:
    return [column.name for column in columns if has_tag(column, tag)]


# -----------------------------------------------------------------------------
def text_columns(columns: Iterable[ColumnInfo]) -> list[str]:
    return columns_with_tag(columns, ColumnTag.TEXT_LIKE)


# -----------------------------------------------------------------------------
def date_columns(columns: Iterable[ColumnInfo]) -> list[str]:
    return columns_with_tag(columns, ColumnTag.DATE_LIKE)


# -----------------------------------------------------------------------------
def numeric_columns(columns: Iterable[ColumnInfo]) -> list[str]:
    return columns_with_tag(columns, ColumnTag.NUMERIC_LIKE)


# -----------------------------------------------------------------------------
def json_columns(columns: Iterable[ColumnInfo]) -> list[str]:
    """Text-like JSON columns, which need a cast before LIKE or LENGTH."""
    return [
        column.name
        for column in columns
        if isinstance(column.declared_type, str)
        and JSON_TYPE_PATTERN.search(column.declared_type)
    ]


# -----------------------------------------------------------------------------
def resolve_primary_key(columns: Iterable[ColumnInfo]) -> ColumnInfo | None:
    """Numeric primary key columns win over the others, then schema order."""
    candidates = [column for column in columns if column.primary_key]
    for candidate in candidates:
        if has_tag(candidate, ColumnTag.NUMERIC_LIKE):
            return candidate
    return candidates[0] if candidates else None
