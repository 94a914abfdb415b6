from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import sqlalchemy
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from PLEXPORT.server.services.explorer.classifier import ColumnTag, has_tag, json_columns
from PLEXPORT.server.services.explorer.identifiers import quote_as_text, quote_identifier
from PLEXPORT.server.services.explorer.introspection import ColumnInfo, to_count
from PLEXPORT.server.utils.logger import logger


###############################################################################
@dataclass(frozen=True)
class EnumValue:
    value: str
    count: int


# -----------------------------------------------------------------------------
def build_enum_query(table: str, column: str, as_text: bool = False) -> str:
    column_identifier = quote_as_text(column, as_text)
    return (
        f"SELECT {column_identifier} AS value, COUNT(*) AS count "
        f"FROM {quote_identifier(table)} "
        f"WHERE {column_identifier} IS NOT NULL "
        f"AND LENGTH({column_identifier}) <= :max_length "
        f"GROUP BY {column_identifier} "
        f"ORDER BY count DESC "
        f"LIMIT :max_sample"
    )


# -----------------------------------------------------------------------------
def derive_enum_values(
    engine: Engine,
    table: str,
    column: str,
    max_value_length: int,
    max_sample: int,
    as_text: bool = False,
) -> list[EnumValue]:
    """Most frequent short values of a text column.

    Values longer than `max_value_length` are excluded before grouping, never
    truncated. A failing aggregation (collation, type mismatch) is logged and
    yields an empty list.
    """
    statement = sqlalchemy.text(build_enum_query(table, column, as_text=as_text))
    try:
        with engine.connect() as conn:
            rows = conn.execute(
                statement,
                {"max_length": max_value_length, "max_sample": max_sample},
            ).mappings().all()
    except SQLAlchemyError as exc:
        logger.warning(
            "Failed to collect enum values for column %s.%s: %s", table, column, exc
        )
        return []

    values: list[EnumValue] = []
    for row in rows:
        raw_value = row.get("value")
        text = "" if raw_value is None else str(raw_value)
        if not text:
            continue
        values.append(EnumValue(value=text, count=to_count(row.get("count"))))
    return values


# -----------------------------------------------------------------------------
def collect_enum_values(
    engine: Engine,
    table: str,
    columns: Sequence[ColumnInfo],
    max_columns: int,
    max_value_length: int,
    max_sample: int,
) -> dict[str, list[EnumValue]]:
    candidates = [
        column for column in columns if has_tag(column, ColumnTag.TEXT_LIKE)
    ][:max_columns]
    cast_columns = set(json_columns(candidates))
    enum_values: dict[str, list[EnumValue]] = {}
    for candidate in candidates:
        values = derive_enum_values(
            engine,
            table,
            candidate.name,
            max_value_length,
            max_sample,
            as_text=candidate.name in cast_columns,
        )
        if values:
            enum_values[candidate.name] = values
    return enum_values
