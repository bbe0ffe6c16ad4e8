from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import ConflictError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One connection, one transaction: commit on success, rollback on any error."""
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def is_duplicate_key(exc: BaseException) -> bool:
    return isinstance(exc, mysql.connector.IntegrityError) and exc.errno == errorcode.ER_DUP_ENTRY


@contextmanager
def translate_duplicates(message: str):
    """Re-raise unique-index violations as ConflictError with a readable message."""
    try:
        yield
    except mysql.connector.IntegrityError as exc:
        if is_duplicate_key(exc):
            raise ConflictError(message) from exc
        raise


def dump_json(value: Any) -> str:
    return json.dumps(value, default=str)


def load_json(value: Any, default: Any) -> Any:
    """JSON columns come back as str, bytes or None depending on the connector."""
    if value is None or value == "":
        return default
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        return json.loads(value)
    return value


def full_name(first: Optional[str], last: Optional[str]) -> Optional[str]:
    if first is None and last is None:
        return None
    return f"{first or ''} {last or ''}".strip()
