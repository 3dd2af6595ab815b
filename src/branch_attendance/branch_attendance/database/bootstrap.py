"""Schema bootstrap for MySQL.

`database/schema.sql` is written with `CREATE ... IF NOT EXISTS`, so applying
it on every start is safe. The database name in the file is ignored in
favour of the configured one.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Mapping

from .connection import DBConfig, open_connection

logger = logging.getLogger(__name__)

_DB_LEVEL = re.compile(r"^\s*(CREATE\s+DATABASE|USE)\b", re.IGNORECASE)


def iter_sql_statements(sql: str) -> List[str]:
    """Split a DDL script into statements.

    Statements end with `;` at end of line. `--` comment lines and
    database-level statements (`CREATE DATABASE`, `USE`) are dropped.
    """
    statements: List[str] = []
    pending: List[str] = []
    for line in sql.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("--"):
            continue
        pending.append(line)
        if stripped.endswith(";"):
            stmt = "\n".join(pending).strip().rstrip(";").strip()
            pending = []
            if not _DB_LEVEL.match(stmt):
                statements.append(stmt)
    tail = "\n".join(pending).strip()
    if tail and not _DB_LEVEL.match(tail):
        statements.append(tail)
    return statements


def ensure_database_exists(db_config: Mapping) -> None:
    config = DBConfig.from_mapping(db_config)
    conn = open_connection(config, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
        cur.close()
    finally:
        conn.close()


def apply_schema(db_config: Mapping, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    statements = iter_sql_statements(Path(schema_path).read_text(encoding="utf-8"))

    conn = open_connection(DBConfig.from_mapping(db_config))
    try:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
        cur.close()
    finally:
        conn.close()
    logger.info("Applied %d statements from %s", len(statements), schema_path)


def list_tables(db_config: Mapping) -> List[str]:
    conn = open_connection(DBConfig.from_mapping(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [str(row[0]) for row in cur.fetchall()]
    finally:
        conn.close()
