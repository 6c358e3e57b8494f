from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Mapping, Optional

from adapters.db.base import DBHandle
from adapters.metrics.base import Metrics
from adapters.metrics.noop import NoOpMetrics
from dbstudio.dialects import describe_columns_sql, list_tables_sql
from dbstudio.errors.exceptions import InvalidRequest, MethodNotAllowed, StudioError
from dbstudio.normalizer import normalize_columns, table_names
from dbstudio.types import ColumnDescriptor

log = logging.getLogger(__name__)


class ActionGateway:
    """
    Closed set of named introspection operations.

    Requests are JSON objects with an ``action`` field; the action picks
    the operation and the remaining fields are its parameters.
    """

    name = "actions"

    def __init__(self, db: DBHandle, metrics: Optional[Metrics] = None):
        self.db = db
        self.metrics = metrics or NoOpMetrics()
        self._actions: Dict[str, Callable[[Mapping[str, Any]], Dict[str, Any]]] = {
            "getTables": self._get_tables_action,
            "getTableInfo": self._get_table_info_action,
        }

    @property
    def actions(self) -> List[str]:
        return list(self._actions)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def get_tables(self) -> List[str]:
        rows = self.db.prepare(list_tables_sql(self.db.dialect)).all()
        return table_names(rows, self.db.dialect)

    def get_table_info(self, table: Any) -> List[ColumnDescriptor]:
        if not isinstance(table, str) or not table:
            raise InvalidRequest("Table name is required")

        # The name ends up inside SQL text; only accept tables that exist.
        if table not in self.get_tables():
            raise InvalidRequest(f"Unknown table: {table}")

        rows = self.db.prepare(describe_columns_sql(self.db.dialect, table)).all()
        return normalize_columns(rows, self.db.dialect)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------
    def _get_tables_action(self, body: Mapping[str, Any]) -> Dict[str, Any]:
        return {"tables": self.get_tables()}

    def _get_table_info_action(self, body: Mapping[str, Any]) -> Dict[str, Any]:
        columns = self.get_table_info(body.get("table"))
        return {"columns": [c.to_dict() for c in columns]}

    def dispatch(self, body: Any) -> Dict[str, Any]:
        if not isinstance(body, Mapping):
            raise InvalidRequest("Request body must be a JSON object")

        action = body.get("action")
        if not action:
            raise InvalidRequest("Action is required")
        if not isinstance(action, str) or action not in self._actions:
            raise InvalidRequest(f"Unknown action: {action}")

        t0 = time.perf_counter()
        ok = False
        try:
            result = self._actions[action](body)
            ok = True
            return result
        except StudioError as exc:
            self.metrics.inc_gateway_error(gateway=self.name, error_code=exc.code.value)
            raise
        finally:
            dt_ms = (time.perf_counter() - t0) * 1000
            self.metrics.inc_statement(gateway=self.name, operation=action, ok=ok)
            self.metrics.observe_statement_duration_ms(
                gateway=self.name, operation=action, dt_ms=dt_ms
            )
            log.debug(
                "action %s finished",
                action,
                extra={"ok": ok, "duration_ms": round(dt_ms, 3)},
            )

    def handle(self, method: str, body: Any) -> Dict[str, Any]:
        if (method or "").upper() != "POST":
            raise MethodNotAllowed()
        return self.dispatch(body)
