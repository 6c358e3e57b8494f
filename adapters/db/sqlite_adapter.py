import sqlite3
import logging
import threading
from typing import List, Sequence
from pathlib import Path

from adapters.db.base import DBHandle, backend_failure
from dbstudio.dialects import Dialect
from dbstudio.types import Param, Row, RunResult

log = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"

# Binding failures (e.g. integers beyond 64 bits) surface as builtin errors.
STATEMENT_ERRORS = (sqlite3.Error, OverflowError, ValueError)


class SQLiteHandle(DBHandle):
    name = "sqlite"
    dialect = Dialect.SQLITE

    def __init__(self, path: str = MEMORY_PATH):
        # resolve absolute path for file databases; keep :memory: as-is
        if path and path != MEMORY_PATH and not path.startswith("file:"):
            self.path = str(Path(path).resolve())
        else:
            self.path = path or MEMORY_PATH
        self._lock = threading.Lock()
        # One connection for the process lifetime, shared by request threads.
        self._conn = sqlite3.connect(
            self.path,
            check_same_thread=False,
            isolation_level=None,
            uri=self.path.startswith("file:"),
        )
        self._conn.row_factory = sqlite3.Row
        log.info("SQLiteHandle opened database: %s", self.path)

    def fetch_all(self, sql: str, params: Sequence[Param]) -> List[Row]:
        log.debug("Executing SQL: %s", sql.strip().replace("\n", " "))
        with self._lock:
            try:
                cur = self._conn.execute(sql, tuple(params))
                if cur.description is None:
                    return []
                rows = [dict(r) for r in cur.fetchall()]
            except STATEMENT_ERRORS as exc:
                raise backend_failure(exc, dialect=self.dialect, sql=sql) from exc
        log.debug("Query returned %d rows.", len(rows))
        return rows

    def execute(self, sql: str, params: Sequence[Param]) -> RunResult:
        log.debug("Executing SQL: %s", sql.strip().replace("\n", " "))
        with self._lock:
            try:
                cur = self._conn.execute(sql, tuple(params))
            except STATEMENT_ERRORS as exc:
                raise backend_failure(exc, dialect=self.dialect, sql=sql) from exc
        return RunResult(success=True, rowcount=cur.rowcount)

    def close(self) -> None:
        with self._lock:
            self._conn.close()
        log.info("SQLiteHandle closed database: %s", self.path)
