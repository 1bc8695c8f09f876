from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, List, Optional

from mysql.connector import errorcode
from mysql.connector import errors as mysql_errors

from ..core.exceptions import StorageUnavailableError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield ``(conn, cursor)``; commit on success, roll back on error.

    Connection loss and timeouts surface as StorageUnavailableError so callers
    can tell them apart from constraint violations.
    """
    try:
        conn = conn_factory.connect()
    except (mysql_errors.InterfaceError, mysql_errors.OperationalError) as exc:
        logger.error("Cannot connect to MySQL: %s", exc)
        raise StorageUnavailableError(str(exc)) from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except (mysql_errors.InterfaceError, mysql_errors.OperationalError) as exc:
        _safe_rollback(conn)
        logger.error("MySQL operation failed: %s", exc)
        raise StorageUnavailableError(str(exc)) from exc
    except Exception:
        _safe_rollback(conn)
        raise
    finally:
        conn.close()


def _safe_rollback(conn) -> None:
    try:
        conn.rollback()
    except mysql_errors.Error as exc:
        logger.warning("Rollback failed: %s", exc)


def is_duplicate_key(exc: mysql_errors.IntegrityError) -> bool:
    return getattr(exc, "errno", None) == errorcode.ER_DUP_ENTRY


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def dump_json(value: Optional[dict]) -> Optional[str]:
    if value is None:
        return None
    return json.dumps(value, ensure_ascii=False)


def load_json(value: Any) -> Optional[dict]:
    if value is None or value == "":
        return None
    if isinstance(value, dict):
        return value
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    return json.loads(value)


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Coerce a TIME column (working-hours start/end) to ``datetime.time``.

    The C extension hands TIME back as ``timedelta``; the pure-Python
    connector and some proxies return ``'HH:MM[:SS]'`` strings.
    """
    if value is None or isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        minutes, seconds = divmod(int(value.total_seconds()) % 86400, 60)
        hours, minutes = divmod(minutes, 60)
        return time(hours, minutes, seconds)

    if isinstance(value, str):
        try:
            fields = [int(p) for p in value.strip().split(":")]
        except ValueError:
            fields = []
        if len(fields) not in (2, 3):
            raise ValueError(f"Unreadable TIME value from working_hours_settings: {value!r}")
        return time(*fields)

    raise TypeError(f"Unexpected TIME column type: {type(value).__name__}")
