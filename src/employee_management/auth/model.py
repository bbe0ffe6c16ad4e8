from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Identity:
    """Domain entity: login credential bound to one employee and a role.

    Note: Plain data object, no DB access code here.
    """

    identity_id: int
    email: str
    password_hash: str
    role: Role
    employee_id: Optional[int]
    is_active: bool = True
    last_login: Optional[datetime] = None

    def public_dict(self) -> dict:
        return {
            "id": self.identity_id,
            "email": self.email,
            "role": self.role.value,
            "employee_id": self.employee_id,
            "last_login": self.last_login.isoformat() if self.last_login else None,
        }
