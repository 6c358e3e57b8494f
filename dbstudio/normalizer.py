from __future__ import annotations

from typing import Any, Iterable, List, Mapping

from dbstudio.dialects import Dialect
from dbstudio.errors.exceptions import MalformedRow
from dbstudio.types import ColumnDescriptor, Row

SQLITE_DEFAULT_TYPE = "TEXT"


def _field(row: Mapping[str, Any], key: str, dialect: Dialect) -> Any:
    try:
        return row[key]
    except (KeyError, TypeError):
        raise MalformedRow(
            f"Introspection row is missing '{key}'",
            details=[f"dialect={dialect.value}", f"row={row!r}"],
        ) from None


def table_names(rows: Iterable[Row], dialect: Dialect) -> List[str]:
    """Pull the ``name`` field out of every list-tables row."""
    return [str(_field(row, "name", dialect)) for row in rows]


def normalize_columns(rows: Iterable[Row], dialect: Dialect) -> List[ColumnDescriptor]:
    """
    Turn describe-columns rows into ColumnDescriptor objects.

    SQLite PRAGMA rows carry an integer ``notnull`` flag and may report an
    empty type (columns declared without one); those default to TEXT.
    information_schema rows carry ``is_nullable`` as 'YES'/'NO'.
    Types are passed through otherwise untouched.
    """
    columns: List[ColumnDescriptor] = []
    for row in rows:
        name = _field(row, "name", dialect)
        col_type = _field(row, "type", dialect)

        if dialect.is_sqlite_family:
            nullable = int(_field(row, "notnull", dialect)) == 0
            col_type = col_type or SQLITE_DEFAULT_TYPE
        else:
            nullable = str(_field(row, "is_nullable", dialect)).upper() == "YES"

        columns.append(
            ColumnDescriptor(name=str(name), type=str(col_type or ""), nullable=nullable)
        )
    return columns
