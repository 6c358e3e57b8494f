import pytest

from dbstudio.dialects import Dialect
from dbstudio.errors.codes import ErrorCode
from dbstudio.errors.exceptions import MalformedRow
from dbstudio.normalizer import normalize_columns, table_names
from dbstudio.types import ColumnDescriptor


def test_sqlite_rows_use_notnull_flag():
    rows = [
        {"cid": 0, "name": "a", "type": "INT", "notnull": 0, "dflt_value": None, "pk": 0},
        {"cid": 1, "name": "b", "type": "TEXT", "notnull": 1, "dflt_value": None, "pk": 0},
    ]
    assert normalize_columns(rows, Dialect.SQLITE) == [
        ColumnDescriptor(name="a", type="INT", nullable=True),
        ColumnDescriptor(name="b", type="TEXT", nullable=False),
    ]


def test_sqlite_empty_type_defaults_to_text():
    rows = [{"name": "loose", "type": "", "notnull": 0}]
    [col] = normalize_columns(rows, Dialect.SQLITE)
    assert col.type == "TEXT"


@pytest.mark.parametrize("dialect", [Dialect.POSTGRESQL, Dialect.MYSQL])
def test_information_schema_rows_use_is_nullable(dialect):
    rows = [
        {"name": "a", "type": "integer", "is_nullable": "YES"},
        {"name": "b", "type": "character varying", "is_nullable": "NO"},
    ]
    cols = normalize_columns(rows, dialect)
    assert [c.to_dict() for c in cols] == [
        {"name": "a", "type": "integer", "nullable": True},
        {"name": "b", "type": "character varying", "nullable": False},
    ]


def test_information_schema_types_are_not_defaulted():
    # Only SQLite gets the TEXT fallback.
    [col] = normalize_columns(
        [{"name": "x", "type": "", "is_nullable": "YES"}], Dialect.POSTGRESQL
    )
    assert col.type == ""


def test_missing_field_raises_malformed_row():
    with pytest.raises(MalformedRow) as ei:
        normalize_columns([{"name": "a", "type": "INT"}], Dialect.SQLITE)
    assert ei.value.code is ErrorCode.MALFORMED_ROW
    assert "notnull" in ei.value.message


def test_table_names_extracts_name_field():
    assert table_names([{"name": "t1"}, {"name": "t2"}], Dialect.MYSQL) == ["t1", "t2"]
    with pytest.raises(MalformedRow):
        table_names([{"table_name": "t1"}], Dialect.POSTGRESQL)
