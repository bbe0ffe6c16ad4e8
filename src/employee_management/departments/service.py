from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..common.validators import optional_str, parse_bool, parse_decimal, parse_optional_int, require_non_empty
from ..core.enums import DeleteResult
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..core.permissions import ADMIN_ONLY, Caller, ensure_role
from ..employees.repository import EmployeeRepository
from .model import Department
from .repository import DepartmentRepository

logger = logging.getLogger(__name__)


class DepartmentService:
    def __init__(self, departments: DepartmentRepository, employees: EmployeeRepository):
        self._departments = departments
        self._employees = employees

    def list_departments(self) -> Sequence[Department]:
        return self._departments.list_with_counts()

    def get_department(self, department_id: int) -> Department:
        department = self._departments.get_by_id(int(department_id))
        if not department:
            raise NotFoundError("Department not found")
        return department

    def create_department(self, caller: Caller, data: Mapping[str, Any]) -> Department:
        ensure_role(caller, ADMIN_ONLY)

        department = self._build(data, existing=None)
        self._check_unique_name(department)
        self._check_head(department.head_id)

        department_id = self._departments.create(department)
        logger.info("Department %s (%s) created", department_id, department.name)
        return self.get_department(department_id)

    def update_department(self, caller: Caller, department_id: int, data: Mapping[str, Any]) -> Department:
        ensure_role(caller, ADMIN_ONLY)

        existing = self.get_department(department_id)
        department = self._build(data, existing=existing)
        if department.name != existing.name:
            self._check_unique_name(department)
        self._check_head(department.head_id)

        if not self._departments.update(department):
            raise NotFoundError("Department not found")
        return self.get_department(department.department_id)

    def delete_department(self, caller: Caller, department_id: int) -> None:
        ensure_role(caller, ADMIN_ONLY)

        result = self._departments.delete_if_unreferenced(int(department_id))
        if result == DeleteResult.NOT_FOUND:
            raise NotFoundError("Department not found")
        if result == DeleteResult.IN_USE:
            raise ConflictError("Cannot delete department with existing employees. Please reassign them first.")
        logger.info("Department %s deleted by identity %s", department_id, caller.identity_id)

    def _check_unique_name(self, department: Department) -> None:
        other = self._departments.get_by_name(department.name)
        if other and other.department_id != department.department_id:
            raise ConflictError("A department with this name already exists")

    def _check_head(self, head_id: Optional[int]) -> None:
        if head_id is not None and not self._employees.get_by_id(head_id):
            raise ValidationError("Department head does not exist")

    @staticmethod
    def _build(data: Mapping[str, Any], *, existing: Optional[Department]) -> Department:
        def get(key: str, current: Any = None) -> Any:
            return data[key] if key in data else current

        cur = existing
        fields = dict(
            name=require_non_empty(get("name", cur and cur.name), "Department name"),
            description=optional_str(get("description", cur and cur.description)),
            budget=parse_decimal(get("budget", cur.budget if cur else None), "Budget", default=Decimal("0")),
            head_id=parse_optional_int(get("head_id", cur and cur.head_id), "Department head"),
            is_active=parse_bool(get("is_active", cur.is_active if cur else True), "Active"),
        )
        if fields["budget"] < 0:
            raise ValidationError("Budget cannot be negative")

        if cur:
            return replace(cur, **fields)
        return Department(department_id=0, **fields)
