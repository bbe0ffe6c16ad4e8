from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import EmployeeStatus, Role
from .model import DepartmentHeadcount, Employee


class EmployeeRepository(Protocol):
    """Repository interface for Employee.

    Note (DIP): the service layer depends on this interface, never on a concrete DB.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        """Newest first, with department/position/manager joined in."""

        raise NotImplementedError

    def list_by_department(self, department_id: int) -> Sequence[Employee]:
        raise NotImplementedError

    def create_with_identity(
        self,
        employee: Employee,
        *,
        password_hash: str,
        account_role: Role,
    ) -> int:
        """Insert the employee and its login identity in one transaction."""

        raise NotImplementedError

    def update(self, employee: Employee) -> bool:
        raise NotImplementedError

    def delete_with_identity(self, employee_id: int) -> bool:
        """Delete the employee with its linked identity in one transaction; manager and head references to it become null."""

        raise NotImplementedError

    def count(self, *, status: Optional[EmployeeStatus] = None) -> int:
        raise NotImplementedError

    def headcount_by_department(self) -> Sequence[DepartmentHeadcount]:
        raise NotImplementedError
