import logging
import threading
from typing import List, Optional, Sequence

import pymysql
import pymysql.cursors

from adapters.db.base import DBHandle, backend_failure
from adapters.db.paramstyle import qmark_to_format
from dbstudio.dialects import Dialect
from dbstudio.types import Param, Row, RunResult

log = logging.getLogger(__name__)

# PyMySQL interpolates args with `query % args`; a placeholder/param count
# mismatch raises TypeError before anything reaches the server.
STATEMENT_ERRORS = (pymysql.MySQLError, TypeError, ValueError)


class MySQLHandle(DBHandle):
    name = "mysql"
    dialect = Dialect.MYSQL

    def __init__(
        self,
        host: str = "localhost",
        port: int = 3306,
        user: Optional[str] = None,
        password: Optional[str] = None,
        database: Optional[str] = None,
    ):
        self.host = host
        self.port = port
        self.database = database
        self._lock = threading.Lock()
        try:
            self._conn = pymysql.connect(
                host=host,
                port=port,
                user=user,
                password=password or "",
                database=database,
                autocommit=True,
                charset="utf8mb4",
                cursorclass=pymysql.cursors.DictCursor,
            )
        except pymysql.MySQLError as exc:
            raise backend_failure(exc, dialect=self.dialect) from exc
        log.info(
            "MySQLHandle connected",
            extra={"host": host, "port": port, "database": database},
        )

    def _prepare_query(self, sql: str, params: Sequence[Param]) -> tuple[str, Optional[tuple]]:
        if not params:
            # PyMySQL skips %-formatting entirely when args is None.
            return sql, None
        return qmark_to_format(sql, backslash_escapes=True), tuple(params)

    def fetch_all(self, sql: str, params: Sequence[Param]) -> List[Row]:
        query, args = self._prepare_query(sql, params)
        log.debug("Executing SQL: %s", query.strip().replace("\n", " "))
        with self._lock:
            try:
                with self._conn.cursor() as cur:
                    cur.execute(query, args)
                    if cur.description is None:
                        return []
                    return list(cur.fetchall())
            except STATEMENT_ERRORS as exc:
                raise backend_failure(exc, dialect=self.dialect, sql=sql) from exc

    def execute(self, sql: str, params: Sequence[Param]) -> RunResult:
        query, args = self._prepare_query(sql, params)
        log.debug("Executing SQL: %s", query.strip().replace("\n", " "))
        with self._lock:
            try:
                with self._conn.cursor() as cur:
                    affected = cur.execute(query, args)
                    return RunResult(success=True, rowcount=affected)
            except STATEMENT_ERRORS as exc:
                raise backend_failure(exc, dialect=self.dialect, sql=sql) from exc

    def ping(self) -> None:
        with self._lock:
            try:
                self._conn.ping(reconnect=False)
            except pymysql.MySQLError as exc:
                raise backend_failure(exc, dialect=self.dialect) from exc

    def close(self) -> None:
        with self._lock:
            self._conn.close()
        log.info("MySQLHandle closed connection")
