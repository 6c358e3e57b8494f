"""
Per-dialect introspection SQL.

Each Dialect maps to a DialectQueries entry holding the "list tables" query and
a builder for the "describe columns" query of one table. The lookup is a plain
dict keyed by the enum, so a new Dialect member without an entry is caught by
``queries_for`` (and by the test-suite, which walks every member).

Table names are spliced into the describe-columns SQL as string literals, not
bound parameters: PRAGMA statements in SQLite do not accept bound values. Callers
must only pass names they already trust; ``ActionGateway`` checks the name
against the live table list before calling ``describe_columns``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict

from sqlglot import exp


class Dialect(str, Enum):
    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"

    @property
    def sqlglot_name(self) -> str:
        """Dialect name as understood by sqlglot."""
        return _SQLGLOT_NAMES[self]

    @property
    def is_sqlite_family(self) -> bool:
        return self is Dialect.SQLITE

    @classmethod
    def parse(cls, value: str) -> "Dialect":
        """
        Resolve a user supplied backend name.

        Accepts the enum values plus the ``postgres`` alias, case-insensitive.
        Raises ValueError listing the valid names otherwise.
        """
        key = (value or "").strip().lower()
        key = _ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            allowed = ", ".join(d.value for d in cls)
            raise ValueError(
                f"Unsupported database type: {value!r}. Must be one of: {allowed}"
            ) from None


_ALIASES = {"postgres": "postgresql", "pg": "postgresql", "sqlite3": "sqlite"}

_SQLGLOT_NAMES = {
    Dialect.SQLITE: "sqlite",
    Dialect.POSTGRESQL: "postgres",
    Dialect.MYSQL: "mysql",
}


def sql_string_literal(value: str, dialect: Dialect) -> str:
    """Render ``value`` as an escaped SQL string literal for ``dialect``."""
    return exp.Literal.string(value).sql(dialect=dialect.sqlglot_name)


@dataclass(frozen=True)
class DialectQueries:
    list_tables: str
    describe_columns: Callable[[str], str]


def _sqlite_columns(table: str) -> str:
    return f"PRAGMA table_info({sql_string_literal(table, Dialect.SQLITE)})"


def _postgres_columns(table: str) -> str:
    return (
        "SELECT column_name AS name, data_type AS type, is_nullable AS is_nullable "
        "FROM information_schema.columns "
        "WHERE table_schema = 'public' "
        f"AND table_name = {sql_string_literal(table, Dialect.POSTGRESQL)} "
        "ORDER BY ordinal_position"
    )


def _mysql_columns(table: str) -> str:
    # information_schema labels are upper-case in MySQL 8; alias everything.
    return (
        "SELECT column_name AS name, data_type AS type, is_nullable AS is_nullable "
        "FROM information_schema.columns "
        "WHERE table_schema = DATABASE() "
        f"AND table_name = {sql_string_literal(table, Dialect.MYSQL)} "
        "ORDER BY ordinal_position"
    )


QUERY_TABLE: Dict[Dialect, DialectQueries] = {
    Dialect.SQLITE: DialectQueries(
        list_tables=(
            "SELECT name FROM sqlite_master "
            "WHERE type='table' AND name NOT LIKE 'sqlite_%'"
        ),
        describe_columns=_sqlite_columns,
    ),
    Dialect.POSTGRESQL: DialectQueries(
        list_tables=(
            "SELECT table_name AS name FROM information_schema.tables "
            "WHERE table_schema='public'"
        ),
        describe_columns=_postgres_columns,
    ),
    Dialect.MYSQL: DialectQueries(
        list_tables=(
            "SELECT table_name AS name FROM information_schema.tables "
            "WHERE table_schema=DATABASE()"
        ),
        describe_columns=_mysql_columns,
    ),
}


def queries_for(dialect: Dialect) -> DialectQueries:
    try:
        return QUERY_TABLE[dialect]
    except KeyError:
        raise LookupError(f"No introspection queries registered for {dialect!r}")


def list_tables_sql(dialect: Dialect) -> str:
    return queries_for(dialect).list_tables


def describe_columns_sql(dialect: Dialect, table: str) -> str:
    return queries_for(dialect).describe_columns(table)
