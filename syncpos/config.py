# syncpos/config.py
from __future__ import annotations

import configparser
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .constants import (
    DEFAULT_API_KEY,
    DEFAULT_BACKEND_URL,
    DEFAULT_DB_PATH,
    ENV_API_KEY,
    ENV_BACKEND_URL,
    ENV_DB_PATH,
    PROPERTIES_FILE_NAME,
)

_log = logging.getLogger(__name__)

# properties keys, as written by the desktop installer
_KEY_BACKEND_URL = "supabase.url"
_KEY_API_KEY = "supabase.anon.key"
_KEY_DB_PATH = "database.path"


@dataclass(frozen=True)
class AppConfig:
    backend_url: str
    api_key: str
    db_path: Path


def _read_properties(path: Path) -> dict[str, str]:
    """
    Read a Java-style `key=value` properties file.

    configparser needs a section header, so a synthetic one is prepended.
    """
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str  # keep keys case-sensitive
    parser.read_string("[app]\n" + path.read_text(encoding="utf-8"))
    return dict(parser["app"])


def load_config(properties_path: Path | str | None = None) -> AppConfig:
    """
    Resolve configuration: environment first, then the properties file,
    then the documented defaults.
    """
    path = Path(properties_path) if properties_path else Path.cwd() / PROPERTIES_FILE_NAME
    props: dict[str, str] = {}
    if path.exists():
        try:
            props = _read_properties(path)
            _log.info("Loaded application configuration from %s", path)
        except (OSError, configparser.Error) as e:
            _log.error("Error loading %s, using defaults: %s", path, e)
    else:
        _log.warning("Unable to find %s. Using default values.", path)

    def pick(env_key: str, prop_key: str, default: str) -> str:
        value = os.environ.get(env_key)
        if value:
            return value
        return props.get(prop_key) or default

    db_path = Path(pick(ENV_DB_PATH, _KEY_DB_PATH, DEFAULT_DB_PATH)).expanduser()
    return AppConfig(
        backend_url=pick(ENV_BACKEND_URL, _KEY_BACKEND_URL, DEFAULT_BACKEND_URL),
        api_key=pick(ENV_API_KEY, _KEY_API_KEY, DEFAULT_API_KEY),
        db_path=db_path,
    )
