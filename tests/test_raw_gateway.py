from __future__ import annotations

import pytest

from adapters.metrics.base import Metrics
from dbstudio.dialects import Dialect
from dbstudio.errors.codes import ErrorCode
from dbstudio.errors.exceptions import (
    BackendExecutionFailure,
    InvalidRequest,
    MethodNotAllowed,
)
from dbstudio.raw_gateway import RawGateway, build_request, normalize_params


class RecordingMetrics(Metrics):
    def __init__(self):
        self.statements = []
        self.errors = []

    def observe_statement_duration_ms(self, *, gateway, operation, dt_ms):
        return

    def inc_statement(self, *, gateway, operation, ok):
        self.statements.append((gateway, operation, ok))

    def inc_gateway_error(self, *, gateway, error_code):
        self.errors.append((gateway, error_code))


# ---------------------------------------------------------------------------
# Parameter normalization
# ---------------------------------------------------------------------------


def test_absent_params_become_empty_list():
    assert normalize_params(None) == []


def test_scalar_param_becomes_single_element():
    assert normalize_params(5) == [5]
    assert normalize_params("x") == ["x"]


@pytest.mark.parametrize("value", [0, False, ""])
def test_falsy_scalars_are_real_values(value):
    assert normalize_params(value) == [value]


def test_sequence_params_pass_through():
    assert normalize_params([5, 6]) == [5, 6]
    assert normalize_params((1, None, True)) == [1, None, True]


def test_nested_params_are_rejected():
    with pytest.raises(InvalidRequest):
        normalize_params([[1, 2]])
    with pytest.raises(InvalidRequest):
        normalize_params({"a": 1})


@pytest.mark.parametrize("sql", [None, "", "   \n", 42])
def test_build_request_requires_sql(sql):
    with pytest.raises(InvalidRequest) as ei:
        build_request(sql)
    assert ei.value.message == "SQL query is required"


# ---------------------------------------------------------------------------
# Execution against SQLite
# ---------------------------------------------------------------------------


def test_write_then_read_round_trip(sqlite_handle):
    gw = RawGateway(sqlite_handle)

    result = gw.execute_write("CREATE TABLE t(a INT)")
    assert result.success is True

    assert gw.execute_read("SELECT * FROM t") == []


def test_read_binds_positional_params(sqlite_handle):
    gw = RawGateway(sqlite_handle)
    gw.execute_write("CREATE TABLE users(id INTEGER, name TEXT)")
    gw.execute_write("INSERT INTO users VALUES (?, ?)", [1, "Alice"])
    gw.execute_write("INSERT INTO users VALUES (?, ?)", [2, "Bob"])

    assert gw.execute_read("SELECT name FROM users WHERE id = ?", 2) == [{"name": "Bob"}]
    assert gw.execute_read("SELECT id FROM users WHERE id IN (?, ?) ORDER BY id", [1, 2]) == [
        {"id": 1},
        {"id": 2},
    ]


def test_zero_param_is_bound_not_dropped(sqlite_handle):
    gw = RawGateway(sqlite_handle)
    assert gw.execute_read("SELECT ? AS v", 0) == [{"v": 0}]


def test_backend_errors_surface_unmodified(sqlite_handle):
    metrics = RecordingMetrics()
    gw = RawGateway(sqlite_handle, metrics=metrics)

    with pytest.raises(BackendExecutionFailure) as ei:
        gw.execute_read("SELEC * FROM nowhere")

    assert ei.value.code is ErrorCode.BACKEND_FAILURE
    assert "syntax error" in ei.value.message
    assert ei.value.details == ["OperationalError"]
    assert metrics.statements == [("raw", "read", False)]
    assert metrics.errors == [("raw", "BACKEND_FAILURE")]


def test_constraint_violation_is_backend_failure(sqlite_handle):
    gw = RawGateway(sqlite_handle)
    gw.execute_write("CREATE TABLE t(a INT NOT NULL)")
    with pytest.raises(BackendExecutionFailure):
        gw.execute_write("INSERT INTO t VALUES (NULL)")


def test_successful_statements_are_counted(sqlite_handle):
    metrics = RecordingMetrics()
    gw = RawGateway(sqlite_handle, metrics=metrics)
    gw.execute_write("CREATE TABLE t(a INT)")
    gw.execute_read("SELECT * FROM t")
    assert metrics.statements == [("raw", "write", True), ("raw", "read", True)]


# ---------------------------------------------------------------------------
# Dialect independence
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("dialect", list(Dialect))
def test_empty_sql_is_invalid_for_every_dialect(dialect, fake_handle_factory):
    handle = fake_handle_factory(dialect)
    gw = RawGateway(handle)

    with pytest.raises(InvalidRequest):
        gw.execute_read("")
    with pytest.raises(InvalidRequest):
        gw.execute_write("")

    # Validation fails before the handle is touched.
    assert handle.calls == []


@pytest.mark.parametrize("dialect", [Dialect.POSTGRESQL, Dialect.MYSQL])
def test_params_reach_the_handle_positionally(dialect, fake_handle_factory):
    handle = fake_handle_factory(dialect)
    gw = RawGateway(handle)

    gw.execute_write("UPDATE t SET a = ? WHERE b = ?", ["x", 3])
    gw.execute_read("SELECT * FROM t WHERE a = ?", "x")

    assert handle.calls == [
        ("run", "UPDATE t SET a = ? WHERE b = ?", ["x", 3]),
        ("all", "SELECT * FROM t WHERE a = ?", ["x"]),
    ]


# ---------------------------------------------------------------------------
# Method dispatch
# ---------------------------------------------------------------------------


def test_handle_maps_methods(sqlite_handle):
    gw = RawGateway(sqlite_handle)
    assert gw.handle("POST", "CREATE TABLE t(a INT)") == {"success": True}
    assert gw.handle("GET", "SELECT * FROM t") == {"rows": []}

    with pytest.raises(MethodNotAllowed) as ei:
        gw.handle("DELETE", "SELECT 1")
    assert ei.value.code is ErrorCode.METHOD_NOT_ALLOWED


def test_write_logs_affected_rowcount(sqlite_handle, caplog):
    gw = RawGateway(sqlite_handle)
    gw.execute_write("CREATE TABLE t(a INT)")
    gw.execute_write("INSERT INTO t VALUES (1), (2)")

    caplog.set_level("INFO", logger="dbstudio.raw_gateway")
    gw.execute_write("UPDATE t SET a = a + 1")

    [record] = [r for r in caplog.records if r.getMessage() == "raw write applied"]
    assert record.rowcount == 2
