from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.constants import DEFAULT_WORKING_DAYS
from ..core.enums import SalaryStatus

ZERO = Decimal("0")


@dataclass(frozen=True)
class Allowances:
    hra: Decimal = ZERO
    transport: Decimal = ZERO
    meal: Decimal = ZERO
    medical: Decimal = ZERO
    other: Decimal = ZERO

    @classmethod
    def names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def total(self) -> Decimal:
        return sum((getattr(self, n) for n in self.names()), ZERO)


@dataclass(frozen=True)
class Deductions:
    pf: Decimal = ZERO
    tax: Decimal = ZERO
    insurance: Decimal = ZERO
    other: Decimal = ZERO

    @classmethod
    def names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def total(self) -> Decimal:
        return sum((getattr(self, n) for n in self.names()), ZERO)


@dataclass(frozen=True)
class Overtime:
    hours: Decimal = ZERO
    rate: Decimal = ZERO


@dataclass(frozen=True)
class Salary:
    """Domain entity: one monthly payroll record.

    `net_salary` is recomputed by the service before every write.
    """

    salary_id: int
    employee_id: int
    basic_salary: Decimal
    month: int
    year: int
    attended_days: int
    allowances: Allowances = Allowances()
    deductions: Deductions = Deductions()
    working_days: int = DEFAULT_WORKING_DAYS
    overtime: Overtime = Overtime()
    bonus: Decimal = ZERO
    net_salary: Decimal = ZERO
    status: SalaryStatus = SalaryStatus.DRAFT
    processed_date: Optional[datetime] = None
    paid_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    employee_name: Optional[str] = None
    employee_code: Optional[str] = None
    department_name: Optional[str] = None
