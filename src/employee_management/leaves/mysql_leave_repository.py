from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, full_name, load_json
from .model import LeaveDocument, LeaveRequest
from .repository import LeaveRepository

_SELECT = """
    SELECT r.*,
           e.first_name AS employee_first_name, e.last_name AS employee_last_name,
           e.employee_code,
           a.first_name AS approver_first_name, a.last_name AS approver_last_name
    FROM leave_requests r
    LEFT JOIN employees e ON e.employee_id = r.employee_id
    LEFT JOIN employees a ON a.employee_id = r.approver_id
"""


def _row_to_leave(r: Dict[str, Any]) -> LeaveRequest:
    documents = tuple(
        LeaveDocument(name=str(d.get("name", "")), url=str(d.get("url", "")))
        for d in load_json(r.get("documents"), [])
    )
    return LeaveRequest(
        leave_id=int(r["leave_id"]),
        employee_id=int(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        days=int(r["days"]),
        reason=r["reason"],
        status=LeaveStatus(r["status"]),
        approver_id=r.get("approver_id"),
        approval_date=r.get("approval_date"),
        approval_comments=r.get("approval_comments"),
        documents=documents,
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        employee_name=full_name(r.get("employee_first_name"), r.get("employee_last_name")),
        employee_code=r.get("employee_code"),
        approver_name=full_name(r.get("approver_first_name"), r.get("approver_last_name")),
    )


def _documents_json(leave: LeaveRequest) -> str:
    return dump_json([{"name": d.name, "url": d.url} for d in leave.documents])


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, leave: LeaveRequest) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(employee_id, leave_type, start_date, end_date, days, reason, status, documents)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(leave.employee_id),
                    leave.leave_type.value,
                    leave.start_date,
                    leave.end_date,
                    int(leave.days),
                    leave.reason,
                    leave.status.value,
                    _documents_json(leave),
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, leave_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE r.leave_id=%s", (int(leave_id),))
            row = fetchone(cur)
            return _row_to_leave(row) if row else None

    def list(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
    ) -> Sequence[LeaveRequest]:
        clauses = ["1=1"]
        params: list[object] = []

        if employee_id is not None:
            clauses.append("r.employee_id=%s")
            params.append(int(employee_id))
        if status is not None:
            clauses.append("r.status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + f" WHERE {where} ORDER BY r.created_at DESC, r.leave_id DESC", tuple(params))
            return [_row_to_leave(r) for r in fetchall(cur)]

    def update_details(self, leave: LeaveRequest) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET leave_type=%s, start_date=%s, end_date=%s, reason=%s, documents=%s
                WHERE leave_id=%s AND status=%s
                """,
                (
                    leave.leave_type.value,
                    leave.start_date,
                    leave.end_date,
                    leave.reason,
                    _documents_json(leave),
                    int(leave.leave_id),
                    LeaveStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def decide(
        self,
        *,
        leave_id: int,
        status: LeaveStatus,
        approver_id: int,
        decided_at: datetime,
        comments: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, approver_id=%s, approval_date=%s, approval_comments=%s
                WHERE leave_id=%s AND status=%s
                """,
                (
                    status.value,
                    int(approver_id),
                    decided_at,
                    comments,
                    int(leave_id),
                    LeaveStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def cancel(self, *, leave_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE leave_requests SET status=%s WHERE leave_id=%s AND status=%s",
                (LeaveStatus.CANCELLED.value, int(leave_id), LeaveStatus.PENDING.value),
            )
            return cur.rowcount > 0
