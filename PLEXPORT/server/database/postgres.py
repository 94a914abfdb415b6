from __future__ import annotations

import sqlalchemy
from sqlalchemy.engine import Engine

from PLEXPORT.server.configurations import DatabaseSettings
from PLEXPORT.server.database.utils import (
    build_postgres_connect_args,
    build_postgres_url,
)


###############################################################################
class PostgresRepository:
    def __init__(self, settings: DatabaseSettings) -> None:
        if not settings.host:
            raise ValueError("Database host must be provided for external database.")
        if not settings.database_name:
            raise ValueError(
                "Database name must be provided for external database."
            )
        if not settings.username:
            raise ValueError(
                "Database username must be provided for external database."
            )

        self.settings = settings
        self.db_path: str | None = None
        self.engine: Engine = sqlalchemy.create_engine(
            build_postgres_url(settings, settings.database_name),
            echo=False,
            future=True,
            connect_args=build_postgres_connect_args(settings),
            pool_pre_ping=True,
        )

    # -------------------------------------------------------------------------
    def dispose(self) -> None:
        self.engine.dispose()
