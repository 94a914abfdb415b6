from __future__ import annotations

import os

import sqlalchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

from PLEXPORT.server.configurations import DatabaseSettings
from PLEXPORT.server.database.schema import Base
from PLEXPORT.server.database.utils import build_sqlite_url
from PLEXPORT.server.utils.constants import DATA_PATH, DATABASE_FILENAME
from PLEXPORT.server.utils.logger import logger
from PLEXPORT.server.utils.variables import env_variables


# [SQLITE DATABASE]
###############################################################################
class SQLiteRepository:
    def __init__(self, settings: DatabaseSettings, db_path: str | None = None) -> None:
        self.settings = settings
        self.db_path: str | None = (
            db_path
            or env_variables.sqlite_path
            or os.path.join(DATA_PATH, DATABASE_FILENAME)
        )
        os.makedirs(os.path.dirname(os.path.abspath(self.db_path)), exist_ok=True)
        is_new_database = not os.path.exists(self.db_path)
        self.engine: Engine = sqlalchemy.create_engine(
            build_sqlite_url(self.db_path), echo=False, future=True
        )
        event.listen(self.engine, "connect", self.enable_foreign_keys)
        if is_new_database:
            logger.info("Creating SQLite database at %s", self.db_path)
            Base.metadata.create_all(self.engine)

    # -------------------------------------------------------------------------
    @staticmethod
    def enable_foreign_keys(dbapi_connection, connection_record) -> None:  # noqa: ARG004
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()

    # -------------------------------------------------------------------------
    def dispose(self) -> None:
        self.engine.dispose()
