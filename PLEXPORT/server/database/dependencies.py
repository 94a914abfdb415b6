from __future__ import annotations

from sqlalchemy.engine import Engine

from PLEXPORT.server.configurations import ExplorerSettings, server_settings
from PLEXPORT.server.database.database import database


# -----------------------------------------------------------------------------
def get_database_engine() -> Engine | None:
    return database.engine


# -----------------------------------------------------------------------------
def get_explorer_settings() -> ExplorerSettings:
    return server_settings.explorer
