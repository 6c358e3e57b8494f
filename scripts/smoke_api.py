"""Portable smoke requests for a running DB Studio server.

- Creates a scratch table through POST /raw
- Inspects it through /actions (getTables, getTableInfo)
- Reads it back through GET /raw with a bound parameter
- Drops the table again
- Exits non-zero on failure (so Make/CI can trust it)

Env:
  API_BASE: base URL of API (default: http://localhost:3000)
"""

from __future__ import annotations

import json
import os
import time
import uuid

import requests


API_BASE = os.getenv("API_BASE", "http://localhost:3000").rstrip("/")
TIMEOUT_S = float(os.getenv("SMOKE_TIMEOUT", "30"))


def _call(method: str, path: str, **kwargs) -> dict:
    t0 = time.time()
    resp = requests.request(method, f"{API_BASE}{path}", timeout=TIMEOUT_S, **kwargs)
    dt_ms = int(round((time.time() - t0) * 1000))

    out: dict = {}
    try:
        out = resp.json()
    except ValueError:
        out = {"raw": resp.text}

    return {"status": resp.status_code, "latency_ms": dt_ms, "body": out}


def _report(label: str, r: dict) -> None:
    print(f"\n{label}")
    print(f"HTTP {r['status']} | {r['latency_ms']} ms")
    print(json.dumps(r["body"], indent=2)[:800])


def main() -> int:
    table = f"smoke_{uuid.uuid4().hex[:8]}"

    checks = [
        (
            "create table",
            ("POST", "/raw"),
            {"json": {"sql": f"CREATE TABLE {table}(id INT NOT NULL, note TEXT)"}},
            lambda b: b == {"success": True},
        ),
        (
            "insert row",
            ("POST", "/raw"),
            {"json": {"sql": f"INSERT INTO {table} VALUES (?, ?)", "params": [1, "hi"]}},
            lambda b: b == {"success": True},
        ),
        (
            "list tables",
            ("POST", "/actions"),
            {"json": {"action": "getTables"}},
            lambda b: table in b.get("tables", []),
        ),
        (
            "describe table",
            ("POST", "/actions"),
            {"json": {"action": "getTableInfo", "table": table}},
            lambda b: [c.get("nullable") for c in b.get("columns", [])] == [False, True],
        ),
        (
            "read back",
            ("GET", "/raw"),
            {"params": {"sql": f"SELECT note FROM {table} WHERE id = ?", "params": "1"}},
            lambda b: b.get("rows") == [{"note": "hi"}],
        ),
        (
            "unknown action is rejected",
            ("POST", "/actions"),
            {"json": {"action": "bogus"}},
            lambda b: b.get("error") == "Unknown action: bogus",
        ),
    ]

    ok_all = True
    try:
        for label, (method, path), kwargs, check in checks:
            try:
                r = _call(method, path, **kwargs)
            except requests.RequestException as e:
                print(f"❌ {label}: request failed: {e}")
                return 3
            _report(label, r)
            if not check(r["body"]):
                ok_all = False
    finally:
        try:
            _call("POST", "/raw", json={"sql": f"DROP TABLE {table}"})
        except requests.RequestException:
            pass

    if ok_all:
        print("\n✅ smoke passed")
        return 0

    print("\n❌ smoke failed (see output above)")
    return 4


if __name__ == "__main__":
    raise SystemExit(main())
