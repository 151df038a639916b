from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, List, Optional, Type

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import StoreError, StoreReadError, StoreWriteError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One connection per unit of work: commit on exit, roll back on error."""
    conn = conn_factory.connect()
    cur = None
    try:
        cur = conn.cursor(dictionary=dictionary)
        yield conn, cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        if cur is not None:
            cur.close()
        conn.close()


@contextmanager
def store_errors(
    action: str,
    *,
    write: bool = False,
    on_duplicate: Optional[Type[StoreError]] = None,
):
    """Translate mysql-connector failures into store errors.

    Reads raise StoreReadError, writes StoreWriteError. A duplicate-key
    violation raises ``on_duplicate`` when given.
    """

    try:
        yield
    except mysql.connector.IntegrityError as e:
        if on_duplicate is not None and e.errno == errorcode.ER_DUP_ENTRY:
            raise on_duplicate(f"{action}: {e.msg}") from e
        logger.exception("Store integrity failure during %s", action)
        raise StoreWriteError(f"{action} failed: {e.msg}") from e
    except mysql.connector.Error as e:
        logger.exception("Store failure during %s", action)
        error_cls = StoreWriteError if write else StoreReadError
        raise error_cls(f"{action} failed: {e.msg}") from e


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Schedule columns are TIME; the pure connector hands them back as
    ``timedelta`` (offset from midnight), other drivers as ``time`` or text.
    """

    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        return time(seconds // 3600, (seconds % 3600) // 60, seconds % 60)
    if isinstance(value, str):
        return time.fromisoformat(value.strip())
    raise TypeError(f"Unsupported MySQL TIME value: {value!r}")
