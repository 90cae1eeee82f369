# syncpos/constants.py
APP_NAME = "SyncPOS"

DB_FOLDER_NAME = ".syncpos"
DB_FILE_NAME = "syncpos.db"

TABLE_SCHEMA_VERSION = "schema_version"
SCHEMA_VERSION = "1.0.0"

PROPERTIES_FILE_NAME = "application.properties"

# ---- fallbacks used when neither env nor properties provide a value ----
DEFAULT_BACKEND_URL = "http://localhost:54321"
DEFAULT_API_KEY = ""
DEFAULT_DB_PATH = f"~/{DB_FOLDER_NAME}/{DB_FILE_NAME}"

# ---- environment overrides ----
ENV_BACKEND_URL = "SYNCPOS_BACKEND_URL"
ENV_API_KEY = "SYNCPOS_API_KEY"
ENV_DB_PATH = "SYNCPOS_DB_PATH"
