from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import List

_BACKENDS = {"memory", "sqlite", "mongo"}
DEFAULT_USER_ID_HEADER = "X-User-Id"


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'memory' (default), 'sqlite' or 'mongo'
    - SQLITE_DB_PATH: path to sqlite db file. Default './data/tasks.db'
    - MONGO_URI: MongoDB connection string. Default 'mongodb://localhost:27017'
    - MONGO_DB_NAME: MongoDB database name. Default 'tasks'
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - USER_ID_HEADER: request header carrying the caller's resolved user id (default: X-User-Id)
    - LOG_LEVEL: root log level for the server entry point (default: INFO)
    - HOST / PORT: bind address for `python -m tasks_api`
    """

    persistence_backend: str
    sqlite_db_path: str
    mongo_uri: str
    mongo_db_name: str
    cors_allow_origins: List[str]
    user_id_header: str
    log_level: str
    host: str
    port: int


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_int(value: str, default: int) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


def load_settings() -> Settings:
    """Read settings from the current environment without caching."""
    backend = _get_env("PERSISTENCE_BACKEND", "memory").strip().lower()
    if backend not in _BACKENDS:
        # Fallback to memory if unsupported
        backend = "memory"

    return Settings(
        persistence_backend=backend,
        sqlite_db_path=_get_env("SQLITE_DB_PATH", "./data/tasks.db").strip(),
        mongo_uri=_get_env("MONGO_URI", "mongodb://localhost:27017").strip(),
        mongo_db_name=_get_env("MONGO_DB_NAME", "tasks").strip(),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        user_id_header=_get_env("USER_ID_HEADER", DEFAULT_USER_ID_HEADER).strip(),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
        host=_get_env("HOST", "127.0.0.1").strip(),
        port=_parse_int(_get_env("PORT", "8000"), 8000),
    )


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return application settings loaded once from environment variables."""
    return load_settings()
