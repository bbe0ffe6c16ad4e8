from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import PositionLevel


@dataclass(frozen=True)
class Position:
    """Domain entity: a job title with its base salary band (exposed as "role")."""

    position_id: int
    title: str
    department_id: int
    base_salary: Decimal
    level: PositionLevel = PositionLevel.JUNIOR
    description: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    department_name: Optional[str] = None
