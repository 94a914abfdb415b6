from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

from sqlalchemy.exc import SQLAlchemyError

from PLEXPORT.server.configurations import DatabaseSettings, server_settings
from PLEXPORT.server.database.postgres import PostgresRepository
from PLEXPORT.server.database.sqlite import SQLiteRepository
from PLEXPORT.server.utils.logger import logger


###############################################################################
class DatabaseBackend(Protocol):
    db_path: str | None
    engine: Any

    # -------------------------------------------------------------------------
    def dispose(self) -> None: ...


BackendFactory = Callable[[DatabaseSettings], DatabaseBackend]

# -----------------------------------------------------------------------------
def build_sqlite_backend(settings: DatabaseSettings) -> DatabaseBackend:
    return SQLiteRepository(settings)

# -----------------------------------------------------------------------------
def build_postgres_backend(settings: DatabaseSettings) -> DatabaseBackend:
    return PostgresRepository(settings)


BACKEND_FACTORIES: dict[str, BackendFactory] = {
    "sqlite": build_sqlite_backend,
    "postgres": build_postgres_backend,
    "postgresql": build_postgres_backend,
    "postgresql+psycopg": build_postgres_backend,
    "postgresql+psycopg2": build_postgres_backend,
}


# [DATABASE]
###############################################################################
class PlexportDatabase:
    """Owns the single shared connection handle of the server.

    A backend that cannot be built leaves `backend` set to None; routes then
    answer 503 instead of the application failing at import time.
    """

    def __init__(self, settings: DatabaseSettings | None = None) -> None:
        self.settings = settings or server_settings.database
        self.backend: DatabaseBackend | None = self._build_backend(
            self.settings.embedded_database
        )

    # -------------------------------------------------------------------------
    def _build_backend(self, is_embedded: bool) -> DatabaseBackend | None:
        backend_name = "sqlite" if is_embedded else (self.settings.engine or "postgres")
        normalized_name = backend_name.lower()
        logger.info("Initializing %s database backend", backend_name)
        if normalized_name not in BACKEND_FACTORIES:
            logger.error("Unsupported database engine: %s", backend_name)
            return None
        factory = BACKEND_FACTORIES[normalized_name]
        try:
            return factory(self.settings)
        except (SQLAlchemyError, ValueError, OSError, ImportError):
            logger.exception("Unable to initialize the %s database backend", backend_name)
            return None

    # -------------------------------------------------------------------------
    @property
    def engine(self) -> Any | None:
        if self.backend is None:
            return None
        return self.backend.engine


database = PlexportDatabase()
