from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from PLEXPORT.server.configurations.base import (
    ensure_mapping,
    ensure_sequence,
    load_configuration_data,
)

from PLEXPORT.server.utils.constants import (
    ANCHOR_PAGINATION_MODES,
    DEFAULT_QUERY_LIMIT,
    MAX_ENUM_COLUMNS,
    MAX_ENUM_SAMPLE,
    MAX_ENUM_VALUE_LENGTH,
    MAX_QUERY_LIMIT,
    SERVER_CONFIGURATION_FILE,
)

from PLEXPORT.server.utils.types import (
    coerce_int,
    coerce_str,
    coerce_str_or_none,
    coerce_string_tuple,
)


# [SERVER SETTINGS]
###############################################################################
@dataclass(frozen=True)
class FastAPISettings:
    title: str
    description: str
    version: str

# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class DatabaseSettings:
    embedded_database: bool
    engine: str | None
    host: str | None
    port: int | None
    database_name: str | None
    username: str | None
    password: str | None
    ssl: bool
    ssl_ca: str | None
    connect_timeout: int

# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ExplorerSettings:
    default_limit: int
    max_limit: int
    max_enum_columns: int
    max_enum_sample: int
    max_enum_value_length: int
    anchor_pagination: str
    excluded_tables: tuple[str, ...]

# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class RuntimeSettings:
    environment: str

# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ServerSettings:
    fastapi: FastAPISettings
    database: DatabaseSettings
    explorer: ExplorerSettings
    runtime: RuntimeSettings


# [BUILDER FUNCTIONS]
###############################################################################
def build_fastapi_settings(data: dict[str, Any]) -> FastAPISettings:
    payload = ensure_mapping(data)
    return FastAPISettings(
        title=coerce_str(payload.get("title"), "Plex Exporter Backend"),
        version=coerce_str(payload.get("version"), "0.1.0"),
        description=coerce_str(
            payload.get("description"), "Plex metadata exporter admin API"
        ),
    )

# -----------------------------------------------------------------------------
def build_database_settings(payload: dict[str, Any] | Any) -> DatabaseSettings:
    payload = ensure_mapping(payload)
    embedded = bool(payload.get("embedded_database", True))
    if embedded:
        # External fields are ignored entirely when embedded DB is active
        return DatabaseSettings(
            embedded_database=True,
            engine=None,
            host=None,
            port=None,
            database_name=None,
            username=None,
            password=None,
            ssl=False,
            ssl_ca=None,
            connect_timeout=10,
        )

    engine_value = coerce_str_or_none(payload.get("engine")) or "postgres"
    return DatabaseSettings(
        embedded_database=False,
        engine=engine_value.lower(),
        host=coerce_str_or_none(payload.get("host")),
        port=coerce_int(payload.get("port"), 5432, minimum=1, maximum=65535),
        database_name=coerce_str_or_none(payload.get("database_name")),
        username=coerce_str_or_none(payload.get("username")),
        password=coerce_str_or_none(payload.get("password")),
        ssl=bool(payload.get("ssl", False)),
        ssl_ca=coerce_str_or_none(payload.get("ssl_ca")),
        connect_timeout=coerce_int(payload.get("connect_timeout"), 10, minimum=1),
    )

# -----------------------------------------------------------------------------
def build_explorer_settings(data: dict[str, Any]) -> ExplorerSettings:
    payload = ensure_mapping(data)
    max_limit = coerce_int(payload.get("max_limit"), MAX_QUERY_LIMIT, minimum=1)
    anchor_mode = coerce_str(payload.get("anchor_pagination"), "narrow").lower()
    if anchor_mode not in ANCHOR_PAGINATION_MODES:
        anchor_mode = "narrow"
    return ExplorerSettings(
        default_limit=coerce_int(
            payload.get("default_limit"), DEFAULT_QUERY_LIMIT, minimum=1, maximum=max_limit
        ),
        max_limit=max_limit,
        max_enum_columns=coerce_int(
            payload.get("max_enum_columns"), MAX_ENUM_COLUMNS, minimum=0
        ),
        max_enum_sample=coerce_int(
            payload.get("max_enum_sample"), MAX_ENUM_SAMPLE, minimum=1
        ),
        max_enum_value_length=coerce_int(
            payload.get("max_enum_value_length"), MAX_ENUM_VALUE_LENGTH, minimum=1
        ),
        anchor_pagination=anchor_mode,
        excluded_tables=coerce_string_tuple(ensure_sequence(payload.get("excluded_tables"))),
    )

# -----------------------------------------------------------------------------
def build_runtime_settings(data: dict[str, Any]) -> RuntimeSettings:
    payload = ensure_mapping(data)
    return RuntimeSettings(
        environment=coerce_str(payload.get("environment"), "development"),
    )

# -----------------------------------------------------------------------------
def build_server_settings(data: dict[str, Any] | Any) -> ServerSettings:
    payload = ensure_mapping(data)
    return ServerSettings(
        fastapi=build_fastapi_settings(payload.get("fastapi")),
        database=build_database_settings(payload.get("database")),
        explorer=build_explorer_settings(payload.get("explorer")),
        runtime=build_runtime_settings(payload.get("runtime")),
    )


# [SERVER CONFIGURATION LOADER]
###############################################################################
def get_server_settings(config_path: str | None = None) -> ServerSettings:
    path = config_path or SERVER_CONFIGURATION_FILE
    payload = load_configuration_data(path)

    return build_server_settings(payload)


server_settings = get_server_settings()
