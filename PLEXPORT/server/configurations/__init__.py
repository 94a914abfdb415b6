from __future__ import annotations

from PLEXPORT.server.configurations.base import (
    ensure_mapping,
    ensure_sequence,
    load_configuration_data,
)

from PLEXPORT.server.configurations.server import (
    DatabaseSettings,
    ExplorerSettings,
    FastAPISettings,
    RuntimeSettings,
    ServerSettings,
    build_database_settings,
    build_explorer_settings,
    build_server_settings,
    server_settings,
    get_server_settings,
)

__all__ = [
    "ensure_mapping",
    "ensure_sequence",
    "load_configuration_data",
    "DatabaseSettings",
    "ExplorerSettings",
    "FastAPISettings",
    "RuntimeSettings",
    "ServerSettings",
    "build_database_settings",
    "build_explorer_settings",
    "build_server_settings",
    "server_settings",
    "get_server_settings",
]
