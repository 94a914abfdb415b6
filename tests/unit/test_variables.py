import os

import pytest

from PLEXPORT.server.utils.variables import DEFAULT_HOST, DEFAULT_PORT, EnvironmentVariables

PLEXPORT_KEYS = ("PLEXPORT_ENV", "PLEXPORT_HOST", "PLEXPORT_PORT", "PLEXPORT_SQLITE_PATH")


# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def isolated_environ(monkeypatch):
    environ = {key: value for key, value in os.environ.items() if key not in PLEXPORT_KEYS}
    monkeypatch.setattr(os, "environ", environ)
    return environ


###############################################################################
class TestEnvironmentVariables:
    def test_reads_plexport_keys_from_env_file(self, tmp_path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text(
            "PLEXPORT_ENV=staging\n"
            "PLEXPORT_HOST=0.0.0.0\n"
            "PLEXPORT_PORT=9100\n"
            f"PLEXPORT_SQLITE_PATH={tmp_path / 'library.sqlite'}\n"
        )

        variables = EnvironmentVariables(env_path=str(env_file))

        assert variables.loaded
        assert variables.environment == "staging"
        assert variables.host == "0.0.0.0"
        assert variables.port == 9100
        assert variables.sqlite_path == str(tmp_path / "library.sqlite")

    def test_exported_values_win_over_env_file(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("PLEXPORT_ENV", "production")
        env_file = tmp_path / ".env"
        env_file.write_text("PLEXPORT_ENV=development\n")

        variables = EnvironmentVariables(env_path=str(env_file))

        assert variables.environment == "production"

    def test_missing_file_falls_back_to_defaults(self, tmp_path) -> None:
        variables = EnvironmentVariables(env_path=str(tmp_path / "missing.env"))

        assert not variables.loaded
        assert variables.host == DEFAULT_HOST
        assert variables.port == DEFAULT_PORT

    def test_blank_and_invalid_values_use_defaults(self, monkeypatch, tmp_path) -> None:
        monkeypatch.setenv("PLEXPORT_HOST", "   ")
        monkeypatch.setenv("PLEXPORT_PORT", "not-a-port")

        variables = EnvironmentVariables(env_path=str(tmp_path / "missing.env"))

        assert variables.get("PLEXPORT_HOST") is None
        assert variables.host == DEFAULT_HOST
        assert variables.port == DEFAULT_PORT

    def test_port_is_clamped_to_valid_range(self, monkeypatch, tmp_path) -> None:
        monkeypatch.setenv("PLEXPORT_PORT", "70000")

        variables = EnvironmentVariables(env_path=str(tmp_path / "missing.env"))

        assert variables.port == 65535
