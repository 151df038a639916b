"""Schema bootstrap for a fresh MySQL database.

``schema.sql`` names its own database; the bootstrap drops those lines and
targets the database from the active settings instead, so the same file
serves development, testing and production.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator, List

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

_DATABASE_LINES = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b.*?;\s*$")


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a schema script on ``;`` outside quoted strings.

    Whole-line ``--`` comments are dropped first.
    """

    text = "\n".join(ln for ln in sql.splitlines() if not ln.lstrip().startswith("--"))

    start = 0
    quote = ""
    i = 0
    while i < len(text):
        ch = text[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = ""
        elif ch in ("'", '"', "`"):
            quote = ch
        elif ch == ";":
            stmt = text[start:i].strip()
            if stmt:
                yield stmt
            start = i + 1
        i += 1

    tail = text[start:].strip()
    if tail:
        yield tail


def ensure_database_exists(target: DBConfig) -> None:
    conn = mysql.connector.connect(**target.connect_kwargs(with_database=False))
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> int:
    """Create the database if needed and run every schema statement.

    Returns the number of statements executed.
    """

    target = DBConfig.from_dict(db_config)
    ensure_database_exists(target)

    sql = _DATABASE_LINES.sub("", Path(schema_path).read_text(encoding="utf-8"))
    statements = list(iter_sql_statements(sql))

    conn = mysql.connector.connect(**target.connect_kwargs())
    try:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()

    logger.info("Applied %d schema statements to %s", len(statements), target.database)
    return len(statements)


def list_tables(db_config: dict) -> List[str]:
    conn = mysql.connector.connect(**DBConfig.from_dict(db_config).connect_kwargs())
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return sorted(str(row[0]) for row in cur.fetchall())
    finally:
        conn.close()
