from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import DeleteResult
from .model import Department


class DepartmentRepository(Protocol):
    def list_with_counts(self) -> Sequence[Department]:
        """All departments sorted by name, with employee_count and head_name filled."""

        raise NotImplementedError

    def get_by_id(self, department_id: int) -> Optional[Department]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[Department]:
        raise NotImplementedError

    def create(self, department: Department) -> int:
        raise NotImplementedError

    def update(self, department: Department) -> bool:
        raise NotImplementedError

    def delete_if_unreferenced(self, department_id: int) -> DeleteResult:
        """Delete only when no employee points at the department, as one statement."""

        raise NotImplementedError
