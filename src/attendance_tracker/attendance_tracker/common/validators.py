from __future__ import annotations

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_month(value: int) -> int:
    month = int(value)
    if month < 1 or month > 12:
        raise ValidationError(f"Invalid month: {value}")
    return month


def require_year(value: int) -> int:
    year = int(value)
    if year < 1970 or year > 9999:
        raise ValidationError(f"Invalid year: {value}")
    return year
