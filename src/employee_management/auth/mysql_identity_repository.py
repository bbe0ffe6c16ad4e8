from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Identity
from .repository import IdentityRepository


def _row_to_identity(r: Dict[str, Any]) -> Identity:
    return Identity(
        identity_id=int(r["identity_id"]),
        email=r["email"],
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        employee_id=r.get("employee_id"),
        is_active=bool(r.get("is_active", True)),
        last_login=r.get("last_login"),
    )


class MySQLIdentityRepository(IdentityRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, identity_id: int) -> Optional[Identity]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT identity_id, email, password_hash, role, employee_id, is_active, last_login
                FROM identities
                WHERE identity_id=%s
                """,
                (int(identity_id),),
            )
            row = fetchone(cur)
            return _row_to_identity(row) if row else None

    def get_by_email(self, email: str) -> Optional[Identity]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT identity_id, email, password_hash, role, employee_id, is_active, last_login
                FROM identities
                WHERE email=%s
                """,
                (email,),
            )
            row = fetchone(cur)
            return _row_to_identity(row) if row else None

    def touch_last_login(self, identity_id: int, *, when: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE identities SET last_login=%s WHERE identity_id=%s", (when, int(identity_id)))

    def update_password(self, identity_id: int, *, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE identities SET password_hash=%s WHERE identity_id=%s",
                (password_hash, int(identity_id)),
            )
            return cur.rowcount > 0
