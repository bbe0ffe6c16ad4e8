from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import Identity


class IdentityRepository(Protocol):
    def get_by_id(self, identity_id: int) -> Optional[Identity]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Identity]:
        raise NotImplementedError

    def touch_last_login(self, identity_id: int, *, when: datetime) -> None:
        raise NotImplementedError

    def update_password(self, identity_id: int, *, password_hash: str) -> bool:
        raise NotImplementedError
