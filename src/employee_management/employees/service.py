from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import date
from typing import Any, Callable, Mapping, Optional, Sequence

from ..auth.repository import IdentityRepository
from ..auth.service import hash_password, parse_account_role
from ..common.datetime_utils import coerce_date, coerce_optional_date, now_local
from ..common.validators import (
    optional_str,
    parse_enum,
    parse_int,
    parse_optional_enum,
    parse_optional_int,
    require_mapping,
    require_non_empty,
)
from ..core.constants import DEFAULT_COUNTRY, EMPLOYEE_CODE_PREFIX
from ..core.enums import EmployeeStatus, Gender, Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..core.permissions import ADMIN_HR, ADMIN_ONLY, Caller, ensure_role
from ..departments.repository import DepartmentRepository
from ..positions.repository import PositionRepository
from .model import Address, EmergencyContact, Employee, EmployeeStats
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


def generate_employee_code() -> str:
    """Human-readable business id. Uniqueness is enforced by the store, not here."""
    return f"{EMPLOYEE_CODE_PREFIX}{uuid.uuid4().hex[:10].upper()}"


class EmployeeService:
    """Use case: employee lifecycle (admin/HR) and headcount statistics."""

    def __init__(
        self,
        employees: EmployeeRepository,
        departments: DepartmentRepository,
        positions: PositionRepository,
        identities: IdentityRepository,
        *,
        code_factory: Callable[[], str] = generate_employee_code,
    ):
        self._employees = employees
        self._departments = departments
        self._positions = positions
        self._identities = identities
        self._code_factory = code_factory

    def list_employees(self) -> Sequence[Employee]:
        return self._employees.list_all()

    def get_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def list_by_department(self, department_id: int) -> list[dict]:
        return [
            {"id": e.employee_id, "first_name": e.first_name, "last_name": e.last_name}
            for e in self._employees.list_by_department(int(department_id))
        ]

    def create_employee(self, caller: Caller, data: Mapping[str, Any], *, today: Optional[date] = None) -> Employee:
        ensure_role(caller, ADMIN_HR)

        account_role = parse_account_role(data.get("account_role"))
        if account_role in {Role.ADMIN, Role.HR} and caller.role != Role.ADMIN:
            raise AuthorizationError("Only an admin can create admin or HR accounts")
        password_hash = hash_password(data.get("password") or "")

        employee = self._build(data, existing=None, today=today or now_local().date())
        self._validate_references(employee)

        if self._employees.get_by_email(employee.email) or self._identities.get_by_email(employee.email):
            raise ConflictError("An employee or account with this email already exists")

        employee_id = self._employees.create_with_identity(
            employee,
            password_hash=password_hash,
            account_role=account_role,
        )
        logger.info("Employee %s (%s) created by identity %s", employee_id, employee.employee_code, caller.identity_id)
        return self.get_employee(employee_id)

    def update_employee(self, caller: Caller, employee_id: int, data: Mapping[str, Any]) -> Employee:
        ensure_role(caller, ADMIN_HR)

        existing = self.get_employee(employee_id)
        employee = self._build(data, existing=existing, today=existing.date_of_joining)
        self._validate_references(employee)

        if employee.email != existing.email:
            other = self._employees.get_by_email(employee.email)
            if other and other.employee_id != existing.employee_id:
                raise ConflictError("An employee with this email already exists")

        if not self._employees.update(employee):
            raise NotFoundError("Employee not found")
        return self.get_employee(employee.employee_id)

    def delete_employee(self, caller: Caller, employee_id: int) -> None:
        ensure_role(caller, ADMIN_ONLY)

        if not self._employees.delete_with_identity(int(employee_id)):
            raise NotFoundError("Employee not found")
        logger.info("Employee %s and linked account deleted by identity %s", employee_id, caller.identity_id)

    def get_stats(self, caller: Caller) -> EmployeeStats:
        ensure_role(caller, ADMIN_HR)

        total = self._employees.count()
        active = self._employees.count(status=EmployeeStatus.ACTIVE)
        return EmployeeStats(
            total=total,
            active=active,
            inactive=total - active,
            department_stats=list(self._employees.headcount_by_department()),
        )

    def _validate_references(self, employee: Employee) -> None:
        if not self._departments.get_by_id(employee.department_id):
            raise ValidationError("Department does not exist")
        if not self._positions.get_by_id(employee.position_id):
            raise ValidationError("Role does not exist")
        if employee.manager_id is not None:
            if employee.manager_id == employee.employee_id:
                raise ValidationError("An employee cannot be their own manager")
            if not self._employees.get_by_id(employee.manager_id):
                raise ValidationError("Manager does not exist")

    def _build(self, data: Mapping[str, Any], *, existing: Optional[Employee], today: date) -> Employee:
        """Merge payload fields over `existing` (or over nothing, for create) and validate."""

        def get(key: str, current: Any = None) -> Any:
            return data[key] if key in data else current

        cur = existing
        email = require_non_empty(get("email", cur and cur.email), "Email").lower()
        if "@" not in email:
            raise ValidationError("Email is not valid")

        address = cur.address if cur else Address(country=DEFAULT_COUNTRY)
        if "address" in data:
            patch = require_mapping(data["address"], "Address")
            address = Address(
                street=optional_str(patch.get("street", address.street)),
                city=optional_str(patch.get("city", address.city)),
                state=optional_str(patch.get("state", address.state)),
                zip_code=optional_str(patch.get("zip_code", address.zip_code)),
                country=optional_str(patch.get("country", address.country)) or DEFAULT_COUNTRY,
            )

        contact = cur.emergency_contact if cur else EmergencyContact()
        if "emergency_contact" in data:
            patch = require_mapping(data["emergency_contact"], "Emergency contact")
            contact = EmergencyContact(
                name=optional_str(patch.get("name", contact.name)),
                relationship=optional_str(patch.get("relationship", contact.relationship)),
                phone=optional_str(patch.get("phone", contact.phone)),
            )

        joined = get("date_of_joining", cur and cur.date_of_joining)
        fields = dict(
            first_name=require_non_empty(get("first_name", cur and cur.first_name), "First name"),
            last_name=require_non_empty(get("last_name", cur and cur.last_name), "Last name"),
            email=email,
            phone=require_non_empty(get("phone", cur and cur.phone), "Phone"),
            department_id=parse_int(get("department_id", cur and cur.department_id), "Department"),
            position_id=parse_int(get("position_id", cur and cur.position_id), "Role"),
            manager_id=parse_optional_int(get("manager_id", cur and cur.manager_id), "Manager"),
            date_of_joining=coerce_date(joined, "Date of joining") if joined else today,
            date_of_birth=coerce_optional_date(get("date_of_birth", cur and cur.date_of_birth), "Date of birth"),
            status=parse_enum(EmployeeStatus, get("status", cur.status if cur else EmployeeStatus.ACTIVE), "Status"),
            gender=parse_optional_enum(Gender, get("gender", cur and cur.gender), "Gender"),
            address=address,
            emergency_contact=contact,
            profile_picture=optional_str(get("profile_picture", cur and cur.profile_picture)),
        )

        if cur:
            return replace(cur, **fields)
        return Employee(employee_id=0, employee_code=self._code_factory(), **fields)
