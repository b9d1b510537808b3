from __future__ import annotations

from ..core.exceptions import ValidationError


def require_non_empty(value: str | None, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is empty")
    return value.strip()


def require_min_length(value: str | None, field_name: str, min_len: int) -> str:
    value = require_non_empty(value, field_name)
    if len(value) < min_len:
        raise ValidationError(f"{field_name} must have at least {min_len} characters")
    return value
