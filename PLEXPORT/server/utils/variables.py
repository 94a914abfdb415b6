from __future__ import annotations

import os
from dotenv import load_dotenv

from PLEXPORT.server.utils.constants import ENV_FILE_PATH
from PLEXPORT.server.utils.logger import logger
from PLEXPORT.server.utils.types import coerce_int

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


# [LOAD ENVIRONMENT VARIABLES]
###############################################################################
class EnvironmentVariables:
    """Process environment seeded from `PLEXPORT/settings/.env`.

    Variables already exported by the shell or the test runner win over the
    file, so a deployment can point the server elsewhere without editing it.
    """

    def __init__(self, env_path: str = ENV_FILE_PATH) -> None:
        self.env_path = env_path
        self.loaded = self.load()

    # -------------------------------------------------------------------------
    def load(self) -> bool:
        if not os.path.exists(self.env_path):
            logger.error(".env file not found at: %s", self.env_path)
            return False
        load_dotenv(dotenv_path=self.env_path, override=False)
        return True

    # -------------------------------------------------------------------------
    def get(self, key: str, default: str | None = None) -> str | None:
        value = os.getenv(key)
        if value is None or not value.strip():
            return default
        return value.strip()

    # -------------------------------------------------------------------------
    def get_int(
        self,
        key: str,
        default: int,
        minimum: int | None = None,
        maximum: int | None = None,
    ) -> int:
        return coerce_int(self.get(key), default, minimum=minimum, maximum=maximum)

    # -------------------------------------------------------------------------
    @property
    def environment(self) -> str | None:
        return self.get("PLEXPORT_ENV")

    # -------------------------------------------------------------------------
    @property
    def sqlite_path(self) -> str | None:
        return self.get("PLEXPORT_SQLITE_PATH")

    # -------------------------------------------------------------------------
    @property
    def host(self) -> str:
        return self.get("PLEXPORT_HOST", DEFAULT_HOST) or DEFAULT_HOST

    # -------------------------------------------------------------------------
    @property
    def port(self) -> int:
        return self.get_int("PLEXPORT_PORT", DEFAULT_PORT, minimum=1, maximum=65535)


env_variables = EnvironmentVariables()
