from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import parse_decimal, parse_int, parse_optional_int, require_mapping
from ..core.constants import DEFAULT_WORKING_DAYS
from ..core.enums import SalaryStatus
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..core.permissions import ADMIN_HR, Caller, ensure_role
from ..employees.repository import EmployeeRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import ZERO, Allowances, Deductions, Overtime, Salary
from .repository import SalaryRepository

logger = logging.getLogger(__name__)


def compute_net_salary(record: Salary, calculator: Optional[PayrollCalculator] = None) -> Decimal:
    return (calculator or StandardPayrollCalculator()).net_salary(record)


def _parse_components(cls, value: Any, label: str, base):
    data = require_mapping(value, label)
    unknown = set(data) - set(cls.names())
    if unknown:
        raise ValidationError(f"Unknown {label.lower()}: {', '.join(sorted(unknown))}")
    return replace(base, **{n: parse_decimal(data[n], f"{label} '{n}'", default=ZERO) for n in data})


def _parse_overtime(value: Any, base: Overtime) -> Overtime:
    data = require_mapping(value, "Overtime")
    return Overtime(
        hours=parse_decimal(data["hours"], "Overtime hours", default=ZERO) if "hours" in data else base.hours,
        rate=parse_decimal(data["rate"], "Overtime rate", default=ZERO) if "rate" in data else base.rate,
    )


def _parse_month(value: Any) -> int:
    month = parse_int(value, "Month")
    if not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12")
    return month


def _parse_days(value: Any, name: str) -> int:
    days = parse_int(value, name)
    if days < 0:
        raise ValidationError(f"{name} cannot be negative")
    return days


class PayrollService:
    """Use case: monthly payroll records and their draft -> processed -> paid lifecycle."""

    def __init__(
        self,
        salaries: SalaryRepository,
        employees: EmployeeRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._salaries = salaries
        self._employees = employees
        self._calculator = calculator or StandardPayrollCalculator()

    def create_salary(self, caller: Caller, data: Mapping[str, Any]) -> Salary:
        ensure_role(caller, ADMIN_HR)

        employee_id = parse_optional_int(data.get("employee_id"), "Employee")
        if employee_id is None:
            raise ValidationError("Employee is required")
        self._require_employee(employee_id)

        draft = Salary(
            salary_id=0,
            employee_id=employee_id,
            basic_salary=parse_decimal(data.get("basic_salary"), "Basic salary"),
            month=_parse_month(data.get("month")),
            year=parse_int(data.get("year"), "Year"),
            attended_days=_parse_days(data.get("attended_days"), "Attended days"),
            allowances=_parse_components(Allowances, data.get("allowances"), "Allowance", Allowances()),
            deductions=_parse_components(Deductions, data.get("deductions"), "Deduction", Deductions()),
            working_days=_parse_days(data.get("working_days", DEFAULT_WORKING_DAYS), "Working days"),
            overtime=_parse_overtime(data.get("overtime"), Overtime()),
            bonus=parse_decimal(data.get("bonus"), "Bonus", default=ZERO),
        )
        draft = replace(draft, net_salary=self._calculator.net_salary(draft))

        salary_id = self._salaries.create(draft)
        logger.info(
            "Salary %s created for employee %s (%02d/%s, net %s)",
            salary_id,
            employee_id,
            draft.month,
            draft.year,
            draft.net_salary,
        )
        return self._get(salary_id)

    def update_salary(self, caller: Caller, salary_id: int, data: Mapping[str, Any]) -> Salary:
        ensure_role(caller, ADMIN_HR)
        salary = self._get(salary_id)
        if salary.status == SalaryStatus.PAID:
            raise ConflictError("Paid salary records cannot be edited")

        employee_id = salary.employee_id
        if "employee_id" in data:
            employee_id = parse_int(data["employee_id"], "Employee")
            self._require_employee(employee_id)

        updated = replace(
            salary,
            employee_id=employee_id,
            basic_salary=parse_decimal(data["basic_salary"], "Basic salary")
            if "basic_salary" in data
            else salary.basic_salary,
            month=_parse_month(data["month"]) if "month" in data else salary.month,
            year=parse_int(data["year"], "Year") if "year" in data else salary.year,
            attended_days=_parse_days(data["attended_days"], "Attended days")
            if "attended_days" in data
            else salary.attended_days,
            working_days=_parse_days(data["working_days"], "Working days")
            if "working_days" in data
            else salary.working_days,
            allowances=_parse_components(Allowances, data["allowances"], "Allowance", salary.allowances)
            if "allowances" in data
            else salary.allowances,
            deductions=_parse_components(Deductions, data["deductions"], "Deduction", salary.deductions)
            if "deductions" in data
            else salary.deductions,
            overtime=_parse_overtime(data["overtime"], salary.overtime) if "overtime" in data else salary.overtime,
            bonus=parse_decimal(data["bonus"], "Bonus", default=ZERO) if "bonus" in data else salary.bonus,
        )
        updated = replace(updated, net_salary=self._calculator.net_salary(updated))

        if not self._salaries.update(updated):
            raise NotFoundError("Salary record not found")
        return self._get(salary.salary_id)

    def process_salary(self, caller: Caller, salary_id: int, *, now: Optional[datetime] = None) -> Salary:
        ensure_role(caller, ADMIN_HR)
        salary = self._get(salary_id)
        if salary.status != SalaryStatus.DRAFT or not self._salaries.mark_processed(
            salary.salary_id, when=now or now_local()
        ):
            raise ConflictError("Only draft salaries can be processed")
        logger.info("Salary %s processed", salary.salary_id)
        return self._get(salary.salary_id)

    def mark_paid(self, caller: Caller, salary_id: int, *, now: Optional[datetime] = None) -> Salary:
        ensure_role(caller, ADMIN_HR)
        salary = self._get(salary_id)
        if salary.status != SalaryStatus.PROCESSED or not self._salaries.mark_paid(
            salary.salary_id, when=now or now_local()
        ):
            raise ConflictError("Only processed salaries can be marked as paid")
        logger.info("Salary %s paid", salary.salary_id)
        return self._get(salary.salary_id)

    def list_salaries(
        self,
        caller: Caller,
        *,
        month: Any = None,
        year: Any = None,
    ) -> Sequence[Salary]:
        ensure_role(caller, ADMIN_HR)
        month_filter = _parse_month(month) if month not in (None, "") else None
        return self._salaries.list(month=month_filter, year=parse_optional_int(year, "Year"))

    def get_salary(self, caller: Caller, salary_id: int) -> Salary:
        salary = self._get(salary_id)
        if caller.role not in ADMIN_HR and salary.employee_id != caller.employee_id:
            raise AuthorizationError("Access denied")
        return salary

    def list_my_salaries(self, caller: Caller) -> Sequence[Salary]:
        return self._salaries.list(employee_id=caller.require_employee_id())

    def list_for_employee(self, caller: Caller, employee_id: int) -> Sequence[Salary]:
        ensure_role(caller, ADMIN_HR)
        return self._salaries.list(employee_id=int(employee_id))

    def _require_employee(self, employee_id: int) -> None:
        if not self._employees.get_by_id(employee_id):
            raise ValidationError("Employee does not exist")

    def _get(self, salary_id: int) -> Salary:
        salary = self._salaries.get_by_id(int(salary_id))
        if not salary:
            raise NotFoundError("Salary record not found")
        return salary
