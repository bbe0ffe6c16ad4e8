from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Salary


class SalaryRepository(Protocol):
    def create(self, salary: Salary) -> int:
        raise NotImplementedError

    def update(self, salary: Salary) -> bool:
        raise NotImplementedError

    def get_by_id(self, salary_id: int) -> Optional[Salary]:
        raise NotImplementedError

    def list(
        self,
        *,
        employee_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> Sequence[Salary]:
        """Newest period first."""

        raise NotImplementedError

    def mark_processed(self, salary_id: int, *, when: datetime) -> bool:
        """draft -> processed; False when the record is not a draft."""

        raise NotImplementedError

    def mark_paid(self, salary_id: int, *, when: datetime) -> bool:
        """processed -> paid; False when the record is not processed."""

        raise NotImplementedError
