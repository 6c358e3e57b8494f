from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Resolve repo root from this file's location:
# app/settings.py → parent = app/ → parent = repo root
REPO_ROOT = Path(__file__).resolve().parents[1]

DEFAULT_PORTS = {"postgresql": 5432, "mysql": 3306}


@dataclass
class Settings:
    """
    Centralized application configuration.

    Does NOT depend on pydantic. Values are loaded from environment
    variables via Settings.from_env().
    """

    # --- Backend selection ---
    db_type: str = "sqlite"  # "sqlite", "postgresql" or "mysql"

    # --- SQLite ---
    sqlite_path: str = ":memory:"

    # --- PostgreSQL / MySQL ---
    database_url: str = ""
    db_host: str = "localhost"
    db_port: Optional[int] = None
    db_user: Optional[str] = None
    db_password: Optional[str] = None
    db_name: Optional[str] = None

    # --- HTTP listener ---
    host: str = "localhost"
    port: int = 3000

    # --- Misc ---
    log_level: str = "INFO"
    app_version: str = "dev"

    @property
    def resolved_db_port(self) -> Optional[int]:
        if self.db_port is not None:
            return self.db_port
        return DEFAULT_PORTS.get(self.db_type.lower())

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build Settings from environment variables with sane fallbacks.

        - SQLITE_PATH can be absolute or relative; relative paths are
          resolved against the current working directory by the handle.
        - Malformed integers fall back to the defaults.
        """

        def getenv_int(name: str, default: Optional[int]) -> Optional[int]:
            raw = os.getenv(name)
            if raw is None or raw.strip() == "":
                return default
            try:
                return int(raw)
            except ValueError:
                return default

        def getenv_opt(name: str) -> Optional[str]:
            raw = os.getenv(name)
            if raw is None or raw == "":
                return None
            return raw

        return cls(
            db_type=os.getenv("DB_TYPE", cls.db_type).strip().lower(),
            sqlite_path=os.getenv("SQLITE_PATH", "").strip() or cls.sqlite_path,
            database_url=os.getenv("DATABASE_URL", cls.database_url).strip(),
            db_host=os.getenv("DB_HOST", "").strip() or cls.db_host,
            db_port=getenv_int("DB_PORT", cls.db_port),
            db_user=getenv_opt("DB_USER"),
            db_password=getenv_opt("DB_PASSWORD"),
            db_name=getenv_opt("DB_NAME"),
            host=os.getenv("HOST", "").strip() or cls.host,
            port=getenv_int("PORT", cls.port) or cls.port,
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
            app_version=os.getenv("APP_VERSION", cls.app_version),
        )


@lru_cache()
def get_settings() -> Settings:
    load_dotenv()
    return Settings.from_env()
