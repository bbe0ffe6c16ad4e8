from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..core.enums import DeleteResult
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, full_name, translate_duplicates
from .model import Department
from .repository import DepartmentRepository

_SELECT = """
    SELECT d.department_id, d.name, d.description, d.budget, d.head_id, d.is_active,
           d.created_at, d.updated_at,
           h.first_name AS head_first_name, h.last_name AS head_last_name
    FROM departments d
    LEFT JOIN employees h ON h.employee_id = d.head_id
"""

_DUPLICATE_MESSAGE = "A department with this name already exists"


def _row_to_department(r: Dict[str, Any]) -> Department:
    return Department(
        department_id=int(r["department_id"]),
        name=r["name"],
        description=r.get("description"),
        budget=Decimal(r.get("budget") or 0),
        head_id=r.get("head_id"),
        is_active=bool(r.get("is_active", True)),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        employee_count=int(r["employee_count"]) if r.get("employee_count") is not None else None,
        head_name=full_name(r.get("head_first_name"), r.get("head_last_name")),
    )


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_with_counts(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT d.department_id, d.name, d.description, d.budget, d.head_id, d.is_active,
                       d.created_at, d.updated_at,
                       h.first_name AS head_first_name, h.last_name AS head_last_name,
                       (SELECT COUNT(*) FROM employees e WHERE e.department_id = d.department_id) AS employee_count
                FROM departments d
                LEFT JOIN employees h ON h.employee_id = d.head_id
                ORDER BY d.name
                """
            )
            return [_row_to_department(r) for r in fetchall(cur)]

    def get_by_id(self, department_id: int) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE d.department_id=%s", (int(department_id),))
            row = fetchone(cur)
            return _row_to_department(row) if row else None

    def get_by_name(self, name: str) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE d.name=%s", (name,))
            row = fetchone(cur)
            return _row_to_department(row) if row else None

    def create(self, department: Department) -> int:
        with translate_duplicates(_DUPLICATE_MESSAGE), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO departments(name, description, budget, head_id, is_active)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    department.name,
                    department.description,
                    department.budget,
                    department.head_id,
                    int(department.is_active),
                ),
            )
            return int(cur.lastrowid)

    def update(self, department: Department) -> bool:
        with translate_duplicates(_DUPLICATE_MESSAGE), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE departments
                SET name=%s, description=%s, budget=%s, head_id=%s, is_active=%s
                WHERE department_id=%s
                """,
                (
                    department.name,
                    department.description,
                    department.budget,
                    department.head_id,
                    int(department.is_active),
                    int(department.department_id),
                ),
            )
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 FROM departments WHERE department_id=%s", (int(department.department_id),))
            return fetchone(cur) is not None

    def delete_if_unreferenced(self, department_id: int) -> DeleteResult:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                DELETE FROM departments
                WHERE department_id=%s
                  AND NOT EXISTS (SELECT 1 FROM employees e WHERE e.department_id=%s)
                """,
                (int(department_id), int(department_id)),
            )
            if cur.rowcount > 0:
                return DeleteResult.DELETED
            cur.execute("SELECT 1 FROM departments WHERE department_id=%s", (int(department_id),))
            return DeleteResult.IN_USE if fetchone(cur) else DeleteResult.NOT_FOUND
