from __future__ import annotations

import sqlite3
import threading

import pytest

from adapters.db.sqlite_adapter import SQLiteHandle
from dbstudio.errors.exceptions import BackendExecutionFailure


def _make_db(db_path) -> None:
    """Create a minimal SQLite DB for handle tests."""
    conn = sqlite3.connect(str(db_path))
    try:
        conn.execute("CREATE TABLE users(id INTEGER, name TEXT);")
        conn.execute("INSERT INTO users VALUES (1, 'Alice');")
        conn.commit()
    finally:
        conn.close()


def test_statement_all_returns_dict_rows(tmp_path):
    db_path = tmp_path / "test.db"
    _make_db(db_path)

    handle = SQLiteHandle(str(db_path))
    try:
        rows = handle.prepare("SELECT id, name FROM users ORDER BY id;").all()
    finally:
        handle.close()

    assert rows == [{"id": 1, "name": "Alice"}]


def test_statement_run_reports_success_and_persists(tmp_path):
    db_path = tmp_path / "test.db"
    _make_db(db_path)

    handle = SQLiteHandle(str(db_path))
    try:
        result = handle.prepare("INSERT INTO users VALUES (?, ?)").run(2, "Bob")
        assert result.success is True
        assert result.rowcount == 1
    finally:
        handle.close()

    # Autocommit: a separate connection sees the row.
    conn = sqlite3.connect(str(db_path))
    try:
        assert conn.execute("SELECT COUNT(*) FROM users").fetchone()[0] == 2
    finally:
        conn.close()


def test_all_on_statement_without_result_set(sqlite_handle):
    assert sqlite_handle.prepare("CREATE TABLE t(a)").all() == []


def test_driver_errors_are_wrapped(sqlite_handle):
    with pytest.raises(BackendExecutionFailure) as ei:
        sqlite_handle.prepare("SELECT * FROM missing_table").all()
    assert "no such table: missing_table" in ei.value.message
    assert isinstance(ei.value.__cause__, sqlite3.OperationalError)


def test_handle_is_shared_across_threads(sqlite_handle):
    sqlite_handle.execute("CREATE TABLE n(v INTEGER)", [])
    errors = []

    def worker(i: int) -> None:
        try:
            sqlite_handle.prepare("INSERT INTO n VALUES (?)").run(i)
        except Exception as exc:  # pragma: no cover - surfaced via assert
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert sqlite_handle.prepare("SELECT COUNT(*) AS c FROM n").all() == [{"c": 20}]


def test_ping(sqlite_handle):
    sqlite_handle.ping()
