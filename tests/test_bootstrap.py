from datetime import time, timedelta
from pathlib import Path

from src.branch_attendance.branch_attendance.database.bootstrap import iter_sql_statements
from src.branch_attendance.branch_attendance.database.mysql_base import normalize_mysql_time

SCHEMA = Path(__file__).resolve().parents[1] / "database" / "schema.sql"


def test_schema_splits_into_table_statements():
    statements = iter_sql_statements(SCHEMA.read_text(encoding="utf-8"))

    assert len(statements) == 4
    assert all(s.upper().startswith("CREATE TABLE") for s in statements)
    assert not any(";" in s for s in statements)
    assert "uq_sessions_one_active" in statements[-1]


def test_database_level_statements_are_dropped():
    sql = "CREATE DATABASE x;\nUSE x;\n-- note\nCREATE TABLE t (id INT);\nINSERT INTO t VALUES (1)"

    assert iter_sql_statements(sql) == ["CREATE TABLE t (id INT)", "INSERT INTO t VALUES (1)"]


def test_mysql_time_values_normalize():
    assert normalize_mysql_time(timedelta(hours=8, minutes=30)) == time(8, 30)
    assert normalize_mysql_time("18:00:00") == time(18, 0)
    assert normalize_mysql_time(time(6, 15)) == time(6, 15)
    assert normalize_mysql_time(None) is None
