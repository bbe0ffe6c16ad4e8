from __future__ import annotations

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional, Type, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


def require_non_empty(value: str, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def parse_enum(enum_cls: Type[E], value: Any, field_name: str) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}")


def parse_optional_enum(enum_cls: Type[E], value: Any, field_name: str) -> Optional[E]:
    if value is None or value == "":
        return None
    return parse_enum(enum_cls, value, field_name)


def parse_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"{field_name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def parse_optional_int(value: Any, field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    return parse_int(value, field_name)


def parse_decimal(value: Any, field_name: str, *, default: Optional[Decimal] = None) -> Decimal:
    if value is None or value == "":
        if default is not None:
            return default
        raise ValidationError(f"{field_name} is required")
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        # str() first so floats like 0.1 keep their printed value
        result = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"{field_name} must be a number")
    if not result.is_finite():
        raise ValidationError(f"{field_name} must be a number")
    return result


def parse_optional_decimal(value: Any, field_name: str) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    return parse_decimal(value, field_name)


def parse_bool(value: Any, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int,)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str) and value.lower() in {"true", "false", "1", "0"}:
        return value.lower() in {"true", "1"}
    raise ValidationError(f"{field_name} must be true or false")


def parse_str_list(value: Any, field_name: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError(f"{field_name} must be a list")
    return [str(v).strip() for v in value if str(v).strip()]


def require_mapping(value: Any, field_name: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValidationError(f"{field_name} must be an object")
    return value
