from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import DeleteResult
from .model import Position


class PositionRepository(Protocol):
    def list_all(self) -> Sequence[Position]:
        """Sorted by department, then level."""

        raise NotImplementedError

    def list_active_by_department(self, department_id: int) -> Sequence[Position]:
        raise NotImplementedError

    def get_by_id(self, position_id: int) -> Optional[Position]:
        raise NotImplementedError

    def create(self, position: Position) -> int:
        raise NotImplementedError

    def update(self, position: Position) -> bool:
        raise NotImplementedError

    def delete_if_unreferenced(self, position_id: int) -> DeleteResult:
        raise NotImplementedError
