from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..core.enums import SalaryStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, full_name
from .model import Allowances, Deductions, Overtime, Salary
from .repository import SalaryRepository

_SELECT = """
    SELECT s.*, e.first_name, e.last_name, e.employee_code, d.name AS department_name
    FROM salaries s
    LEFT JOIN employees e ON e.employee_id = s.employee_id
    LEFT JOIN departments d ON d.department_id = e.department_id
"""

_ORDER = " ORDER BY s.year DESC, s.month DESC, s.salary_id DESC"


def _dec(value: Any) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


def _row_to_salary(r: Dict[str, Any]) -> Salary:
    return Salary(
        salary_id=int(r["salary_id"]),
        employee_id=int(r["employee_id"]),
        basic_salary=_dec(r["basic_salary"]),
        allowances=Allowances(**{n: _dec(r.get(f"allowance_{n}")) for n in Allowances.names()}),
        deductions=Deductions(**{n: _dec(r.get(f"deduction_{n}")) for n in Deductions.names()}),
        month=int(r["month"]),
        year=int(r["year"]),
        working_days=int(r["working_days"]),
        attended_days=int(r["attended_days"]),
        overtime=Overtime(hours=_dec(r.get("overtime_hours")), rate=_dec(r.get("overtime_rate"))),
        bonus=_dec(r.get("bonus")),
        net_salary=_dec(r["net_salary"]),
        status=SalaryStatus(r["status"]),
        processed_date=r.get("processed_date"),
        paid_date=r.get("paid_date"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        employee_name=full_name(r.get("first_name"), r.get("last_name")),
        employee_code=r.get("employee_code"),
        department_name=r.get("department_name"),
    )


def _columns(s: Salary) -> Dict[str, Any]:
    cols: Dict[str, Any] = {
        "employee_id": int(s.employee_id),
        "basic_salary": s.basic_salary,
    }
    for n in Allowances.names():
        cols[f"allowance_{n}"] = getattr(s.allowances, n)
    for n in Deductions.names():
        cols[f"deduction_{n}"] = getattr(s.deductions, n)
    cols.update(
        {
            "month": int(s.month),
            "year": int(s.year),
            "working_days": int(s.working_days),
            "attended_days": int(s.attended_days),
            "overtime_hours": s.overtime.hours,
            "overtime_rate": s.overtime.rate,
            "bonus": s.bonus,
            "net_salary": s.net_salary,
        }
    )
    return cols


class MySQLSalaryRepository(SalaryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, salary: Salary) -> int:
        cols = _columns(salary)
        cols["status"] = salary.status.value
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO salaries({','.join(cols)}) VALUES({','.join(['%s'] * len(cols))})",
                tuple(cols.values()),
            )
            return int(cur.lastrowid)

    def update(self, salary: Salary) -> bool:
        # Status only moves through mark_processed / mark_paid.
        cols = _columns(salary)
        assignments = ", ".join(f"{c}=%s" for c in cols)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE salaries SET {assignments} WHERE salary_id=%s",
                tuple(cols.values()) + (int(salary.salary_id),),
            )
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 FROM salaries WHERE salary_id=%s", (int(salary.salary_id),))
            return fetchone(cur) is not None

    def get_by_id(self, salary_id: int) -> Optional[Salary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE s.salary_id=%s", (int(salary_id),))
            row = fetchone(cur)
            return _row_to_salary(row) if row else None

    def list(
        self,
        *,
        employee_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> Sequence[Salary]:
        where = []
        params: list[Any] = []
        if employee_id is not None:
            where.append("s.employee_id=%s")
            params.append(int(employee_id))
        if month is not None:
            where.append("s.month=%s")
            params.append(int(month))
        if year is not None:
            where.append("s.year=%s")
            params.append(int(year))

        sql = _SELECT
        if where:
            sql += " WHERE " + " AND ".join(where)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + _ORDER, tuple(params))
            return [_row_to_salary(r) for r in fetchall(cur)]

    def mark_processed(self, salary_id: int, *, when: datetime) -> bool:
        return self._transition(salary_id, SalaryStatus.DRAFT, SalaryStatus.PROCESSED, "processed_date", when)

    def mark_paid(self, salary_id: int, *, when: datetime) -> bool:
        return self._transition(salary_id, SalaryStatus.PROCESSED, SalaryStatus.PAID, "paid_date", when)

    def _transition(
        self,
        salary_id: int,
        expected: SalaryStatus,
        target: SalaryStatus,
        stamp_column: str,
        when: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE salaries SET status=%s, {stamp_column}=%s WHERE salary_id=%s AND status=%s",
                (target.value, when, int(salary_id), expected.value),
            )
            return cur.rowcount > 0
