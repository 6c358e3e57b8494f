from __future__ import annotations

import logging
import time
from typing import Any, List, Optional

from adapters.db.base import DBHandle
from adapters.metrics.base import Metrics
from adapters.metrics.noop import NoOpMetrics
from dbstudio.errors.exceptions import InvalidRequest, MethodNotAllowed, StudioError
from dbstudio.types import Param, RawQueryRequest, Row, RunResult

log = logging.getLogger(__name__)

_SCALARS = (str, int, float, bool, type(None))


def normalize_params(params: Any) -> List[Param]:
    """
    Coerce the caller's ``params`` into a positional list.

    None (absent) → [], a list/tuple → list, any other scalar → [scalar].
    Falsy scalars such as 0, False and "" are kept as real values.
    """
    if params is None:
        return []
    if isinstance(params, (list, tuple)):
        values = list(params)
    else:
        values = [params]
    for value in values:
        if not isinstance(value, _SCALARS):
            raise InvalidRequest(
                "Parameters must be strings, numbers, booleans or null",
                details=[f"got {type(value).__name__}"],
            )
    return values


def build_request(sql: Any, params: Any = None) -> RawQueryRequest:
    if not isinstance(sql, str) or not sql.strip():
        raise InvalidRequest("SQL query is required")
    return RawQueryRequest(sql=sql, params=normalize_params(params))


class RawGateway:
    """
    Executes caller supplied SQL verbatim.

    No semantic validation happens here: any statement the backend accepts is
    run, DDL and DCL included. Parameter binding is left to the handle.
    """

    name = "raw"

    def __init__(self, db: DBHandle, metrics: Optional[Metrics] = None):
        self.db = db
        self.metrics = metrics or NoOpMetrics()

    def _timed(self, operation: str, fn):
        t0 = time.perf_counter()
        ok = False
        try:
            result = fn()
            ok = True
            return result
        except StudioError as exc:
            self.metrics.inc_gateway_error(gateway=self.name, error_code=exc.code.value)
            raise
        finally:
            dt_ms = (time.perf_counter() - t0) * 1000
            self.metrics.inc_statement(gateway=self.name, operation=operation, ok=ok)
            self.metrics.observe_statement_duration_ms(
                gateway=self.name, operation=operation, dt_ms=dt_ms
            )
            log.debug(
                "raw %s finished",
                operation,
                extra={"ok": ok, "duration_ms": round(dt_ms, 3)},
            )

    def execute_read(self, sql: Any, params: Any = None) -> List[Row]:
        req = build_request(sql, params)
        return self._timed(
            "read", lambda: self.db.prepare(req.sql).all(*req.params)
        )

    def execute_write(self, sql: Any, params: Any = None) -> RunResult:
        req = build_request(sql, params)
        result = self._timed(
            "write", lambda: self.db.prepare(req.sql).run(*req.params)
        )
        log.info("raw write applied", extra={"rowcount": result.rowcount})
        return result

    def handle(self, method: str, sql: Any, params: Any = None) -> dict[str, Any]:
        """GET reads rows, POST runs a statement; other methods are refused."""
        method = (method or "").upper()
        if method == "GET":
            return {"rows": self.execute_read(sql, params)}
        if method == "POST":
            return {"success": self.execute_write(sql, params).success}
        raise MethodNotAllowed()
