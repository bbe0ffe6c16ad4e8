from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping, Optional, Sequence

from ..common.validators import optional_str, parse_bool, parse_decimal, parse_enum, parse_int, require_non_empty
from ..core.enums import DeleteResult, PositionLevel
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..core.permissions import ADMIN_ONLY, Caller, ensure_role
from ..departments.repository import DepartmentRepository
from .model import Position
from .repository import PositionRepository

logger = logging.getLogger(__name__)


class PositionService:
    """Use case: manage roles (job titles + salary band) inside departments."""

    def __init__(self, positions: PositionRepository, departments: DepartmentRepository):
        self._positions = positions
        self._departments = departments

    def list_positions(self) -> Sequence[Position]:
        return self._positions.list_all()

    def list_by_department(self, department_id: int) -> Sequence[Position]:
        return self._positions.list_active_by_department(int(department_id))

    def get_position(self, position_id: int) -> Position:
        position = self._positions.get_by_id(int(position_id))
        if not position:
            raise NotFoundError("Role not found")
        return position

    def create_position(self, caller: Caller, data: Mapping[str, Any]) -> Position:
        ensure_role(caller, ADMIN_ONLY)

        position = self._build(data, existing=None)
        self._check_department(position.department_id)

        position_id = self._positions.create(position)
        logger.info("Role %s (%s) created", position_id, position.title)
        return self.get_position(position_id)

    def update_position(self, caller: Caller, position_id: int, data: Mapping[str, Any]) -> Position:
        ensure_role(caller, ADMIN_ONLY)

        position = self._build(data, existing=self.get_position(position_id))
        self._check_department(position.department_id)

        if not self._positions.update(position):
            raise NotFoundError("Role not found")
        return self.get_position(position.position_id)

    def delete_position(self, caller: Caller, position_id: int) -> None:
        ensure_role(caller, ADMIN_ONLY)

        result = self._positions.delete_if_unreferenced(int(position_id))
        if result == DeleteResult.NOT_FOUND:
            raise NotFoundError("Role not found")
        if result == DeleteResult.IN_USE:
            raise ConflictError("Cannot delete role with existing employees")
        logger.info("Role %s deleted by identity %s", position_id, caller.identity_id)

    def _check_department(self, department_id: int) -> None:
        if not self._departments.get_by_id(department_id):
            raise ValidationError("Department does not exist")

    @staticmethod
    def _build(data: Mapping[str, Any], *, existing: Optional[Position]) -> Position:
        def get(key: str, current: Any = None) -> Any:
            return data[key] if key in data else current

        cur = existing
        fields = dict(
            title=require_non_empty(get("title", cur and cur.title), "Title"),
            department_id=parse_int(get("department_id", cur and cur.department_id), "Department"),
            base_salary=parse_decimal(get("base_salary", cur and cur.base_salary), "Base salary"),
            level=parse_enum(PositionLevel, get("level", cur.level if cur else PositionLevel.JUNIOR), "Level"),
            description=optional_str(get("description", cur and cur.description)),
            is_active=parse_bool(get("is_active", cur.is_active if cur else True), "Active"),
        )
        if fields["base_salary"] < 0:
            raise ValidationError("Base salary cannot be negative")

        if cur:
            return replace(cur, **fields)
        return Position(position_id=0, **fields)
