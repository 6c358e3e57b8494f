from __future__ import annotations

import logging
from urllib.parse import unquote, urlparse

from adapters.db.base import DBHandle
from app.errors import HandleConfigError
from app.settings import Settings
from dbstudio.dialects import Dialect

log = logging.getLogger(__name__)


def _mysql_kwargs(settings: Settings) -> dict:
    if settings.database_url:
        url = urlparse(settings.database_url)
        if url.scheme not in ("mysql", "mysql+pymysql"):
            raise HandleConfigError(
                f"DATABASE_URL scheme {url.scheme!r} is not a MySQL URL"
            )
        return {
            "host": url.hostname or "localhost",
            "port": url.port or 3306,
            "user": unquote(url.username) if url.username else None,
            "password": unquote(url.password) if url.password else None,
            "database": url.path.lstrip("/") or None,
        }
    return {
        "host": settings.db_host,
        "port": settings.resolved_db_port,
        "user": settings.db_user,
        "password": settings.db_password,
        "database": settings.db_name,
    }


def _postgres_kwargs(settings: Settings) -> dict:
    if settings.database_url:
        return {"conninfo": settings.database_url}
    return {
        "host": settings.db_host,
        "port": settings.resolved_db_port,
        "user": settings.db_user,
        "password": settings.db_password,
        "dbname": settings.db_name,
    }


def create_handle(settings: Settings) -> DBHandle:
    """
    Open the process-wide database handle described by ``settings``.

    Drivers are imported lazily so a SQLite deployment does not need
    psycopg or PyMySQL to be importable.
    """
    try:
        dialect = Dialect.parse(settings.db_type)
    except ValueError as exc:
        raise HandleConfigError(str(exc)) from exc

    log.info("Creating database handle", extra={"dialect": dialect.value})

    if dialect is Dialect.SQLITE:
        from adapters.db.sqlite_adapter import SQLiteHandle

        return SQLiteHandle(settings.sqlite_path)

    if dialect is Dialect.POSTGRESQL:
        from adapters.db.postgres_adapter import PostgresHandle

        return PostgresHandle(**_postgres_kwargs(settings))

    if dialect is Dialect.MYSQL:
        from adapters.db.mysql_adapter import MySQLHandle

        return MySQLHandle(**_mysql_kwargs(settings))

    raise HandleConfigError(f"Unsupported database type: {settings.db_type}")
