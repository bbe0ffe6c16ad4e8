from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Department:
    """Domain entity: organizational unit.

    `employee_count` and `head_name` are derived at read time and never stored.
    """

    department_id: int
    name: str
    description: Optional[str] = None
    budget: Decimal = Decimal("0")
    head_id: Optional[int] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    employee_count: Optional[int] = None
    head_name: Optional[str] = None
