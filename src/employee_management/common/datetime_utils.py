from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Optional

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date.

    Full ISO timestamps (as sent by browser date pickers) are accepted too,
    only the date part is kept.
    """
    return datetime.strptime(value[:10], "%Y-%m-%d").date()


def coerce_date(value: Any, field_name: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    try:
        return parse_iso_date(value.strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")


def coerce_optional_date(value: Any, field_name: str) -> Optional[date]:
    if value is None or value == "":
        return None
    return coerce_date(value, field_name)


def coerce_optional_datetime(value: Any, field_name: str) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"{field_name} must be an ISO date/time")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def now_utc() -> datetime:
    return datetime.now(timezone.utc)
