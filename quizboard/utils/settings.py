"""Environment-driven settings.

A ``.env`` file in the working directory is loaded first when present.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import os
from urllib.parse import quote, urlencode

from dotenv import load_dotenv

from quizboard.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT

DEFAULT_DATABASE_URL = "sqlite:///quizboard.db"
STORAGE_BACKENDS = ("sql", "memory")
_DB_PARTS = ("DB_USER", "DB_PASSWORD", "DB_HOST", "DB_PORT", "DB_NAME")


class ConfigurationError(RuntimeError):
    """Raised when the environment holds an unusable configuration."""


@dataclass(slots=True, frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    storage: str = "sql"
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build settings from ``env`` (defaults to ``os.environ`` after loading ``.env``)."""
    if env is None:
        load_dotenv()
        env = os.environ

    storage = _get(env, "QUIZBOARD_STORAGE", "sql").lower()
    if storage not in STORAGE_BACKENDS:
        raise ConfigurationError(
            f"QUIZBOARD_STORAGE must be one of {', '.join(STORAGE_BACKENDS)}, got '{storage}'"
        )

    raw_port = _get(env, "QUIZBOARD_PORT", str(DEFAULT_PORT))
    try:
        port = int(raw_port)
    except ValueError as exc:
        raise ConfigurationError(f"QUIZBOARD_PORT must be an integer, got '{raw_port}'") from exc

    return Settings(
        database_url=_database_url(env),
        storage=storage,
        host=_get(env, "QUIZBOARD_HOST", DEFAULT_HOST),
        port=port,
        log_level=_get(env, "QUIZBOARD_LOG_LEVEL", "INFO").upper(),
    )


def _get(env: Mapping[str, str], name: str, default: str) -> str:
    val = env.get(name)
    if val is None or val.strip() == "":
        return default
    return val.strip()


def _database_url(env: Mapping[str, str]) -> str:
    explicit = env.get("QUIZBOARD_DATABASE_URL", "").strip()
    if explicit:
        return explicit

    present = [name for name in _DB_PARTS if env.get(name, "").strip()]
    if not present:
        return DEFAULT_DATABASE_URL
    missing = [name for name in _DB_PARTS if name not in present]
    if missing:
        raise ConfigurationError(f"Missing required environment variable: {missing[0]}")
    return postgres_url(
        user=env["DB_USER"].strip(),
        password=env["DB_PASSWORD"].strip(),
        host=env["DB_HOST"].strip(),
        port=env["DB_PORT"].strip(),
        name=env["DB_NAME"].strip(),
        tls_disabled=_truthy(env.get("DB_TLS_DISABLED", "")),
    )


def postgres_url(
    user: str, password: str, host: str, port: str, name: str, tls_disabled: bool
) -> str:
    query = urlencode({"sslmode": "disable" if tls_disabled else "require"})
    credentials = f"{quote(user, safe='')}:{quote(password, safe='')}"
    return f"postgresql+psycopg2://{credentials}@{host}:{port}/{name}?{query}"


def _truthy(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")
