from __future__ import annotations

from os.path import abspath, join

# [PATHS]
###############################################################################
ROOT_DIR = abspath(join(__file__, "../../../.."))
PROJECT_DIR = join(ROOT_DIR, "PLEXPORT")
SETTING_PATH = join(PROJECT_DIR, "settings")
RESOURCES_PATH = join(PROJECT_DIR, "resources")
DATA_PATH = join(RESOURCES_PATH, "database")
LOGS_PATH = join(RESOURCES_PATH, "logs")
ENV_FILE_PATH = join(SETTING_PATH, ".env")
DATABASE_FILENAME = "plex-exporter.sqlite"
LOG_FILENAME = "plexport_server.log"

###############################################################################
SERVER_CONFIGURATION_FILE = join(SETTING_PATH, "server_configurations.json")

# [ENDPOINTS]
###############################################################################
ADMIN_API_PREFIX = "/admin/api"
EXPLORER_API_PREFIX = "/admin/api/db"

# [DATABASE EXPLORER]
###############################################################################
IDENTIFIER_PATTERN = r"^[A-Za-z_][A-Za-z0-9_]*$"
DEFAULT_QUERY_LIMIT = 50
MAX_QUERY_LIMIT = 200
MAX_ENUM_COLUMNS = 4
MAX_ENUM_SAMPLE = 12
MAX_ENUM_VALUE_LENGTH = 64
ANCHOR_PAGINATION_MODES = ("narrow", "keyset")
INTERNAL_TABLE_PREFIXES = ("sqlite_",)
JSON_SAFE_INTEGER = 2**53 - 1

# [LOGGING]
###############################################################################
LOG_BUFFER_SIZE = 500
LOG_LEVELS = ("debug", "info", "warn", "error")
