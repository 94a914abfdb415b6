from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import sqlalchemy
from sqlalchemy.engine import Engine
from sqlalchemy.exc import CompileError, NoSuchTableError, OperationalError, SQLAlchemyError

from PLEXPORT.server.services.explorer.exceptions import (
    DatabaseUnavailableError,
    QueryExecutionError,
)
from PLEXPORT.server.services.explorer.identifiers import quote_identifier
from PLEXPORT.server.utils.constants import INTERNAL_TABLE_PREFIXES
from PLEXPORT.server.utils.logger import logger


###############################################################################
@dataclass(frozen=True)
class TableSummary:
    name: str
    row_count: int | None


###############################################################################
@dataclass(frozen=True)
class ColumnInfo:
    name: str
    declared_type: str
    not_null: bool
    primary_key: bool
    default_value: Any = None


# -----------------------------------------------------------------------------
def to_count(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return 0
    return 0


###############################################################################
class SchemaIntrospector:
    """Reads table and column metadata from the live store.

    Nothing is cached: a new SQLAlchemy inspector is built for every call so
    schema changes between requests are always visible.
    """

    def __init__(self, engine: Engine, excluded_tables: Iterable[str] = ()) -> None:
        self.engine = engine
        self.excluded_tables = {name.lower() for name in excluded_tables}

    # -------------------------------------------------------------------------
    def is_internal_table(self, table_name: str) -> bool:
        lowered = table_name.lower()
        if lowered in self.excluded_tables:
            return True
        return any(lowered.startswith(prefix) for prefix in INTERNAL_TABLE_PREFIXES)

    # -------------------------------------------------------------------------
    def get_table_names(self) -> list[str]:
        try:
            inspector = sqlalchemy.inspect(self.engine)
            table_names = inspector.get_table_names()
        except OperationalError as exc:
            logger.exception("Unable to reach the database while listing tables.")
            raise DatabaseUnavailableError() from exc
        except SQLAlchemyError as exc:
            logger.exception("Unable to list database tables.")
            raise QueryExecutionError("Failed to list database tables.") from exc
        return sorted(name for name in table_names if not self.is_internal_table(name))

    # -------------------------------------------------------------------------
    def count_rows(self, table_name: str) -> int:
        statement = sqlalchemy.text(
            f"SELECT COUNT(*) AS count FROM {quote_identifier(table_name)}"
        )
        with self.engine.connect() as conn:
            return to_count(conn.execute(statement).scalar())

    # -------------------------------------------------------------------------
    def list_tables(self) -> list[TableSummary]:
        summaries: list[TableSummary] = []
        for table_name in self.get_table_names():
            try:
                row_count: int | None = self.count_rows(table_name)
            except SQLAlchemyError as exc:
                logger.warning(
                    "Failed to compute row count for table %s: %s", table_name, exc
                )
                row_count = None
            summaries.append(TableSummary(name=table_name, row_count=row_count))
        return summaries

    # -------------------------------------------------------------------------
    def render_declared_type(self, column_type: Any) -> str:
        if column_type is None:
            return ""
        try:
            return str(column_type.compile(dialect=self.engine.dialect))
        except (CompileError, AttributeError, TypeError):
            return ""

    # -------------------------------------------------------------------------
    def read_declared_types(self, table_name: str) -> dict[str, str]:
        """Column types as written in the table definition, keyed by column.

        Reflected SQLAlchemy types collapse unknown names to a type affinity
        (SQLite turns UUID or TIMESTAMPTZ into NUMERIC), so the catalog is read
        directly where the dialect allows it. Unsupported dialects give {}.
        """
        dialect_name = self.engine.dialect.name
        with self.engine.connect() as conn:
            if dialect_name == "sqlite":
                rows = conn.exec_driver_sql(
                    f"PRAGMA table_info({quote_identifier(table_name)})"
                ).mappings().all()
            elif dialect_name == "postgresql":
                rows = conn.execute(
                    sqlalchemy.text(
                        "SELECT a.attname AS name, "
                        "format_type(a.atttypid, a.atttypmod) AS type "
                        "FROM pg_catalog.pg_attribute a "
                        "WHERE a.attrelid = to_regclass(:table_name) "
                        "AND a.attnum > 0 AND NOT a.attisdropped"
                    ),
                    {"table_name": quote_identifier(table_name)},
                ).mappings().all()
            else:
                return {}
        return {
            str(row["name"]): "" if row["type"] is None else str(row["type"])
            for row in rows
        }

    # -------------------------------------------------------------------------
    def get_columns(self, table_name: str) -> list[ColumnInfo]:
        """Column metadata of `table_name` in schema order, [] when missing."""
        if self.is_internal_table(table_name):
            return []
        try:
            inspector = sqlalchemy.inspect(self.engine)
            raw_columns = inspector.get_columns(table_name)
            pk_constraint = inspector.get_pk_constraint(table_name) or {}
            declared_types = self.read_declared_types(table_name)
        except NoSuchTableError:
            return []
        except OperationalError as exc:
            logger.exception("Unable to reach the database while reflecting %s.", table_name)
            raise DatabaseUnavailableError() from exc
        except SQLAlchemyError as exc:
            logger.exception("Unable to reflect table %s.", table_name)
            raise QueryExecutionError("Failed to load table schema.") from exc

        pk_columns = set(pk_constraint.get("constrained_columns") or [])
        columns: list[ColumnInfo] = []
        for raw in raw_columns:
            name = raw.get("name")
            if not isinstance(name, str):
                continue
            columns.append(
                ColumnInfo(
                    name=name,
                    declared_type=declared_types.get(
                        name, self.render_declared_type(raw.get("type"))
                    ),
                    not_null=not raw.get("nullable", True),
                    primary_key=name in pk_columns,
                    default_value=raw.get("default"),
                )
            )
        return columns
