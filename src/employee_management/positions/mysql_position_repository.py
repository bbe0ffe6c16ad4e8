from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..core.enums import DeleteResult, PositionLevel
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Position
from .repository import PositionRepository

_SELECT = """
    SELECT p.position_id, p.title, p.department_id, p.description, p.base_salary, p.level,
           p.is_active, p.created_at, p.updated_at, d.name AS department_name
    FROM positions p
    LEFT JOIN departments d ON d.department_id = p.department_id
"""

# Level order follows PositionLevel declaration, not the alphabet.
_LEVEL_ORDER = "FIELD(p.level, " + ", ".join(f"'{lv.value}'" for lv in PositionLevel) + ")"


def _row_to_position(r: Dict[str, Any]) -> Position:
    return Position(
        position_id=int(r["position_id"]),
        title=r["title"],
        department_id=int(r["department_id"]),
        base_salary=Decimal(r["base_salary"]),
        level=PositionLevel(r["level"]),
        description=r.get("description"),
        is_active=bool(r.get("is_active", True)),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        department_name=r.get("department_name"),
    )


class MySQLPositionRepository(PositionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Position]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + f" ORDER BY d.name, {_LEVEL_ORDER}, p.title")
            return [_row_to_position(r) for r in fetchall(cur)]

    def list_active_by_department(self, department_id: int) -> Sequence[Position]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE p.department_id=%s AND p.is_active=1 ORDER BY {_LEVEL_ORDER}, p.title",
                (int(department_id),),
            )
            return [_row_to_position(r) for r in fetchall(cur)]

    def get_by_id(self, position_id: int) -> Optional[Position]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE p.position_id=%s", (int(position_id),))
            row = fetchone(cur)
            return _row_to_position(row) if row else None

    def create(self, position: Position) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO positions(title, department_id, description, base_salary, level, is_active)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    position.title,
                    int(position.department_id),
                    position.description,
                    position.base_salary,
                    position.level.value,
                    int(position.is_active),
                ),
            )
            return int(cur.lastrowid)

    def update(self, position: Position) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE positions
                SET title=%s, department_id=%s, description=%s, base_salary=%s, level=%s, is_active=%s
                WHERE position_id=%s
                """,
                (
                    position.title,
                    int(position.department_id),
                    position.description,
                    position.base_salary,
                    position.level.value,
                    int(position.is_active),
                    int(position.position_id),
                ),
            )
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 FROM positions WHERE position_id=%s", (int(position.position_id),))
            return fetchone(cur) is not None

    def delete_if_unreferenced(self, position_id: int) -> DeleteResult:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                DELETE FROM positions
                WHERE position_id=%s
                  AND NOT EXISTS (SELECT 1 FROM employees e WHERE e.position_id=%s)
                """,
                (int(position_id), int(position_id)),
            )
            if cur.rowcount > 0:
                return DeleteResult.DELETED
            cur.execute("SELECT 1 FROM positions WHERE position_id=%s", (int(position_id),))
            return DeleteResult.IN_USE if fetchone(cur) else DeleteResult.NOT_FOUND
