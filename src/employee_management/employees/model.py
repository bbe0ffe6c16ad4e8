from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..common.serialization import to_json
from ..core.constants import DEFAULT_COUNTRY
from ..core.enums import EmployeeStatus, Gender


@dataclass(frozen=True)
class Address:
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = DEFAULT_COUNTRY


@dataclass(frozen=True)
class EmergencyContact:
    name: Optional[str] = None
    relationship: Optional[str] = None
    phone: Optional[str] = None


@dataclass(frozen=True)
class Employee:
    """Domain entity: the canonical HR record for a person.

    `employee_id` is 0 until the record is persisted. The trailing
    `department_name` .. `manager_name` fields are read-model data filled by
    repository joins and are never written back.
    """

    employee_id: int
    employee_code: str
    first_name: str
    last_name: str
    email: str
    phone: str
    department_id: int
    position_id: int
    date_of_joining: date
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    manager_id: Optional[int] = None
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    address: Address = field(default_factory=Address)
    emergency_contact: EmergencyContact = field(default_factory=EmergencyContact)
    profile_picture: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    department_name: Optional[str] = None
    position_title: Optional[str] = None
    position_base_salary: Optional[Decimal] = None
    manager_name: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_dict(self) -> dict:
        data = to_json(self)
        data["full_name"] = self.full_name
        return data


@dataclass(frozen=True)
class DepartmentHeadcount:
    department_id: int
    name: str
    count: int


@dataclass(frozen=True)
class EmployeeStats:
    total: int
    active: int
    inactive: int
    department_stats: list[DepartmentHeadcount]
