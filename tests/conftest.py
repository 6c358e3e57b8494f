from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import pytest
from fastapi.testclient import TestClient

from adapters.db.base import DBHandle
from adapters.db.sqlite_adapter import SQLiteHandle
from app.dependencies import get_db_handle
from app.main import app
from dbstudio.dialects import Dialect
from dbstudio.types import Param, Row, RunResult


class FakeHandle(DBHandle):
    """
    In-memory stand-in for a PostgreSQL/MySQL connection.

    Returns canned rows keyed by a substring of the SQL text and records every
    statement it was asked to run.
    """

    name = "fake"

    def __init__(self, dialect: Dialect, responses: Optional[Dict[str, List[Row]]] = None):
        self.dialect = dialect
        self.responses = responses or {}
        self.calls: List[tuple[str, str, List[Param]]] = []
        self.closed = False

    def _rows_for(self, sql: str) -> List[Row]:
        for needle, rows in self.responses.items():
            if needle in sql:
                return rows
        return []

    def fetch_all(self, sql: str, params: Sequence[Param]) -> List[Row]:
        self.calls.append(("all", sql, list(params)))
        return self._rows_for(sql)

    def execute(self, sql: str, params: Sequence[Param]) -> RunResult:
        self.calls.append(("run", sql, list(params)))
        return RunResult(success=True, rowcount=0)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def sqlite_handle():
    handle = SQLiteHandle(":memory:")
    try:
        yield handle
    finally:
        handle.close()


@pytest.fixture
def fake_handle_factory():
    def make(dialect: Dialect, responses: Optional[Dict[str, List[Row]]] = None) -> FakeHandle:
        return FakeHandle(dialect, responses)

    return make


@pytest.fixture
def client(sqlite_handle):
    """TestClient bound to a fresh in-memory SQLite database."""
    app.dependency_overrides[get_db_handle] = lambda: sqlite_handle
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db_handle, None)


@pytest.fixture
def make_client():
    """Build a TestClient around an arbitrary handle."""
    def make(handle: Any) -> TestClient:
        app.dependency_overrides[get_db_handle] = lambda: handle
        return TestClient(app)

    yield make
    app.dependency_overrides.pop(get_db_handle, None)
