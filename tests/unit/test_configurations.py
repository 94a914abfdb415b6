from PLEXPORT.server.configurations import (
    build_database_settings,
    build_explorer_settings,
    build_server_settings,
    get_server_settings,
)


###############################################################################
class TestExplorerSettings:
    def test_defaults(self) -> None:
        settings = build_explorer_settings({})

        assert settings.default_limit == 50
        assert settings.max_limit == 200
        assert settings.max_enum_columns == 4
        assert settings.max_enum_sample == 12
        assert settings.max_enum_value_length == 64
        assert settings.anchor_pagination == "narrow"
        assert settings.excluded_tables == ()

    def test_unknown_anchor_mode_falls_back_to_narrow(self) -> None:
        assert build_explorer_settings({"anchor_pagination": "sideways"}).anchor_pagination == "narrow"
        assert build_explorer_settings({"anchor_pagination": "KEYSET"}).anchor_pagination == "keyset"

    def test_default_limit_never_exceeds_max(self) -> None:
        settings = build_explorer_settings({"default_limit": 500, "max_limit": 100})

        assert settings.default_limit == 100
        assert settings.max_limit == 100

    def test_excluded_tables(self) -> None:
        settings = build_explorer_settings({"excluded_tables": ["alembic_version", None, " "]})

        assert settings.excluded_tables == ("alembic_version",)


###############################################################################
class TestDatabaseSettings:
    def test_embedded_database_ignores_external_fields(self) -> None:
        settings = build_database_settings(
            {"embedded_database": True, "host": "db.internal", "port": 6543}
        )

        assert settings.embedded_database is True
        assert settings.host is None
        assert settings.port is None

    def test_external_database(self) -> None:
        settings = build_database_settings(
            {
                "embedded_database": False,
                "engine": "Postgres",
                "host": "db.internal",
                "port": "99999",
                "database_name": "plex",
            }
        )

        assert settings.engine == "postgres"
        assert settings.host == "db.internal"
        assert settings.port == 65535
        assert settings.database_name == "plex"
        assert settings.connect_timeout == 10


###############################################################################
def test_server_settings_tolerate_missing_sections() -> None:
    settings = build_server_settings({"fastapi": "not a mapping"})

    assert settings.fastapi.title
    assert settings.database.embedded_database is True
    assert settings.runtime.environment == "development"


def test_shipped_configuration_loads() -> None:
    settings = get_server_settings()

    assert settings.explorer.default_limit == 50
    assert settings.explorer.anchor_pagination in ("narrow", "keyset")
