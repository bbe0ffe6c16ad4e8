from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import EmployeeStatus, Gender, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, full_name, translate_duplicates
from .model import Address, DepartmentHeadcount, EmergencyContact, Employee
from .repository import EmployeeRepository

_SELECT = """
    SELECT e.*,
           d.name AS department_name,
           p.title AS position_title, p.base_salary AS position_base_salary,
           m.first_name AS manager_first_name, m.last_name AS manager_last_name
    FROM employees e
    LEFT JOIN departments d ON d.department_id = e.department_id
    LEFT JOIN positions p ON p.position_id = e.position_id
    LEFT JOIN employees m ON m.employee_id = e.manager_id
"""

_DUPLICATE_MESSAGE = "An employee or account with this email already exists"


def _row_to_employee(r: Dict[str, Any]) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        employee_code=r["employee_code"],
        first_name=r["first_name"],
        last_name=r["last_name"],
        email=r["email"],
        phone=r["phone"],
        department_id=int(r["department_id"]),
        position_id=int(r["position_id"]),
        date_of_joining=r["date_of_joining"],
        status=EmployeeStatus(r["status"]),
        manager_id=r.get("manager_id"),
        date_of_birth=r.get("date_of_birth"),
        gender=Gender(r["gender"]) if r.get("gender") else None,
        address=Address(
            street=r.get("street"),
            city=r.get("city"),
            state=r.get("state"),
            zip_code=r.get("zip_code"),
            country=r.get("country"),
        ),
        emergency_contact=EmergencyContact(
            name=r.get("emergency_name"),
            relationship=r.get("emergency_relationship"),
            phone=r.get("emergency_phone"),
        ),
        profile_picture=r.get("profile_picture"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        department_name=r.get("department_name"),
        position_title=r.get("position_title"),
        position_base_salary=r.get("position_base_salary"),
        manager_name=full_name(r.get("manager_first_name"), r.get("manager_last_name")),
    )


def _columns(e: Employee) -> Dict[str, Any]:
    return {
        "employee_code": e.employee_code,
        "first_name": e.first_name,
        "last_name": e.last_name,
        "email": e.email,
        "phone": e.phone,
        "date_of_birth": e.date_of_birth,
        "gender": e.gender.value if e.gender else None,
        "street": e.address.street,
        "city": e.address.city,
        "state": e.address.state,
        "zip_code": e.address.zip_code,
        "country": e.address.country,
        "department_id": e.department_id,
        "position_id": e.position_id,
        "manager_id": e.manager_id,
        "date_of_joining": e.date_of_joining,
        "status": e.status.value,
        "profile_picture": e.profile_picture,
        "emergency_name": e.emergency_contact.name,
        "emergency_relationship": e.emergency_contact.relationship,
        "emergency_phone": e.emergency_contact.phone,
    }


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE e.employee_id=%s", (int(employee_id),))
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def get_by_email(self, email: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE e.email=%s", (email,))
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY e.created_at DESC, e.employee_id DESC")
            return [_row_to_employee(r) for r in fetchall(cur)]

    def list_by_department(self, department_id: int) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE e.department_id=%s ORDER BY e.first_name", (int(department_id),))
            return [_row_to_employee(r) for r in fetchall(cur)]

    def create_with_identity(self, employee: Employee, *, password_hash: str, account_role: Role) -> int:
        cols = _columns(employee)
        placeholders = ",".join(["%s"] * len(cols))
        with translate_duplicates(_DUPLICATE_MESSAGE), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO employees({','.join(cols)}) VALUES({placeholders})",
                tuple(cols.values()),
            )
            employee_id = int(cur.lastrowid)
            cur.execute(
                """
                INSERT INTO identities(email, password_hash, role, employee_id, is_active)
                VALUES(%s,%s,%s,%s,1)
                """,
                (employee.email, password_hash, account_role.value, employee_id),
            )
            return employee_id

    def update(self, employee: Employee) -> bool:
        cols = _columns(employee)
        assignments = ", ".join(f"{c}=%s" for c in cols)
        with translate_duplicates(_DUPLICATE_MESSAGE), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE employees SET {assignments} WHERE employee_id=%s",
                tuple(cols.values()) + (int(employee.employee_id),),
            )
            # rowcount is 0 when nothing changed, so re-check existence
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 FROM employees WHERE employee_id=%s", (int(employee.employee_id),))
            return fetchone(cur) is not None

    def delete_with_identity(self, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employees WHERE employee_id=%s", (int(employee_id),))
            if cur.rowcount == 0:
                return False
            cur.execute("DELETE FROM identities WHERE employee_id=%s", (int(employee_id),))
            cur.execute("UPDATE employees SET manager_id=NULL WHERE manager_id=%s", (int(employee_id),))
            cur.execute("UPDATE departments SET head_id=NULL WHERE head_id=%s", (int(employee_id),))
            return True

    def count(self, *, status: Optional[EmployeeStatus] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            if status is None:
                cur.execute("SELECT COUNT(*) AS n FROM employees")
            else:
                cur.execute("SELECT COUNT(*) AS n FROM employees WHERE status=%s", (status.value,))
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def headcount_by_department(self) -> Sequence[DepartmentHeadcount]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT d.department_id, d.name, COUNT(e.employee_id) AS n
                FROM employees e
                JOIN departments d ON d.department_id = e.department_id
                GROUP BY d.department_id, d.name
                ORDER BY d.name
                """
            )
            return [
                DepartmentHeadcount(department_id=int(r["department_id"]), name=r["name"], count=int(r["n"]))
                for r in fetchall(cur)
            ]
