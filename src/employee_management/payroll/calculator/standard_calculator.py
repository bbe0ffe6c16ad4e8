from __future__ import annotations

from decimal import Decimal

from ..model import Salary
from .base import PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: basic + allowances + overtime hours x rate + bonus - deductions.

    Attendance does not prorate the result.
    """

    def net_salary(self, record: Salary) -> Decimal:
        gross = (
            record.basic_salary
            + record.allowances.total()
            + record.overtime.hours * record.overtime.rate
            + record.bonus
        )
        return gross - record.deductions.total()
