from __future__ import annotations

import sqlalchemy
from sqlalchemy.exc import SQLAlchemyError

from PLEXPORT.server.configurations import DatabaseSettings, server_settings
from PLEXPORT.server.database.postgres import PostgresRepository
from PLEXPORT.server.database.schema import Base
from PLEXPORT.server.database.sqlite import SQLiteRepository
from PLEXPORT.server.database.utils import (
    build_postgres_connect_args,
    build_postgres_url,
    normalize_postgres_engine,
)
from PLEXPORT.server.utils.logger import logger


###############################################################################
def initialize_sqlite_database(
    settings: DatabaseSettings, db_path: str | None = None
) -> str | None:
    repository = SQLiteRepository(settings, db_path=db_path)
    try:
        Base.metadata.create_all(repository.engine)
    finally:
        repository.dispose()
    logger.info("Initialized SQLite database at %s", repository.db_path)
    return repository.db_path


# -----------------------------------------------------------------------------
def ensure_postgres_database(settings: DatabaseSettings) -> str:
    if not settings.host:
        raise ValueError("Database host is required for PostgreSQL initialization.")
    if not settings.username:
        raise ValueError("Database username is required for PostgreSQL initialization.")
    if not settings.database_name:
        raise ValueError("Database name is required for PostgreSQL initialization.")

    target_database = settings.database_name
    safe_database = target_database.replace('"', '""')
    connect_args = build_postgres_connect_args(settings)

    admin_url = build_postgres_url(settings, "postgres")
    admin_engine = sqlalchemy.create_engine(
        admin_url,
        echo=False,
        future=True,
        connect_args=connect_args,
        isolation_level="AUTOCOMMIT",
        pool_pre_ping=True,
    )

    try:
        with admin_engine.connect() as conn:
            exists = conn.execute(
                sqlalchemy.text("SELECT 1 FROM pg_database WHERE datname=:name"),
                {"name": target_database},
            ).scalar()
            if exists:
                logger.info("PostgreSQL database %s already exists", target_database)
            else:
                conn.execute(sqlalchemy.text(f'CREATE DATABASE "{safe_database}"'))
                logger.info("Created PostgreSQL database %s", target_database)
    finally:
        admin_engine.dispose()

    repository = PostgresRepository(settings)
    try:
        Base.metadata.create_all(repository.engine)
    finally:
        repository.dispose()
    logger.info("Ensured PostgreSQL tables exist in %s", target_database)

    return target_database


# -----------------------------------------------------------------------------
def run_database_initialization(settings: DatabaseSettings | None = None) -> None:
    settings = settings or server_settings.database
    if settings.embedded_database:
        initialize_sqlite_database(settings)
        return

    engine_name = normalize_postgres_engine(settings.engine).lower()
    if engine_name not in {"postgres", "postgresql", "postgresql+psycopg", "postgresql+psycopg2"}:
        raise ValueError(f"Unsupported database engine: {settings.engine}")

    ensure_postgres_database(settings)


# -----------------------------------------------------------------------------
def initialize_database() -> None:
    try:
        run_database_initialization()
    except (SQLAlchemyError, ValueError) as exc:
        logger.error("Database initialization failed: %s", exc)
        raise SystemExit(1) from exc
    except Exception as exc:
        logger.exception("Unexpected error during database initialization.")
        raise SystemExit(1) from exc
