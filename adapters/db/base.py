from __future__ import annotations

import logging
from typing import Any, List, Optional, Protocol, Sequence

from dbstudio.dialects import Dialect
from dbstudio.errors.exceptions import BackendExecutionFailure
from dbstudio.types import Param, Row, RunResult

log = logging.getLogger(__name__)


class Statement:
    """SQL text bound to a handle; executed with positional parameters."""

    def __init__(self, handle: "DBHandle", sql: str):
        self.handle = handle
        self.sql = sql

    def all(self, *params: Param) -> List[Row]:
        return self.handle.fetch_all(self.sql, list(params))

    def run(self, *params: Param) -> RunResult:
        return self.handle.execute(self.sql, list(params))

    def __repr__(self) -> str:
        return f"Statement(dialect={self.handle.dialect.value!r}, sql={self.sql!r})"


class DBHandle(Protocol):
    """
    Live connection to exactly one backend, tagged with its Dialect.

    SQL placeholders are always written as ``?``; handles translate to the
    driver's paramstyle. Driver errors must surface as BackendExecutionFailure.
    """

    name: str
    dialect: Dialect

    def prepare(self, sql: str) -> Statement:
        return Statement(self, sql)

    def fetch_all(self, sql: str, params: Sequence[Param]) -> List[Row]:
        """Execute ``sql`` and return every row as a dict (empty if none)."""

    def execute(self, sql: str, params: Sequence[Param]) -> RunResult:
        """Execute a mutating statement."""

    def ping(self) -> None:
        self.fetch_all("SELECT 1", [])

    def close(self) -> None:
        """Release the underlying connection."""


def backend_failure(
    exc: BaseException, *, dialect: Dialect, sql: Optional[str] = None
) -> BackendExecutionFailure:
    """Wrap a driver exception, keeping its message verbatim."""
    log.warning(
        "Backend rejected statement: %s",
        exc,
        extra={"dialect": dialect.value, "error_type": type(exc).__name__},
    )
    extra: dict[str, Any] = {"dialect": dialect.value}
    if sql is not None:
        extra["sql_length"] = len(sql)
    return BackendExecutionFailure(
        str(exc) or type(exc).__name__,
        details=[type(exc).__name__],
        extra=extra,
    )
