"""
Configuration helpers for the rates backend.

Settings are read once from environment variables so that routers and stores
do not fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

DEFAULT_DATA_PREFIX = Path(__file__).resolve().parents[2] / "data"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    data_prefix: Path
    seed_file: Path
    data_file: Path
    persistent: bool
    storage_backend: str
    database_url: str
    default_actor: str
    log_level: str


def _resolve(prefix: Path, value: str) -> Path:
    path = Path(value)
    if path.is_absolute():
        return path
    return prefix / path


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    prefix = Path(os.getenv("RATES_DATA_PREFIX") or DEFAULT_DATA_PREFIX)
    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        data_prefix=prefix,
        seed_file=_resolve(prefix, os.getenv("RATES_SEED_FILE") or "seed.json"),
        data_file=_resolve(prefix, os.getenv("RATES_DATA_FILE") or "data.json"),
        persistent=_bool(os.getenv("RATES_PERSISTENT"), True),
        storage_backend=(os.getenv("RATES_STORAGE_BACKEND") or "file").strip().lower(),
        database_url=os.getenv("DATABASE_URL", ""),
        default_actor=os.getenv("RATES_DEFAULT_ACTOR") or "system",
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
