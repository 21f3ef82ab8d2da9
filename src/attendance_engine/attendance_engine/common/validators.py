from __future__ import annotations

from typing import Any

from ..core.exceptions import ValidationError


def require_non_negative_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer") from None
    if isinstance(value, float) and value != number:
        raise ValidationError(f"{field_name} must be a whole number of minutes")
    if number < 0:
        raise ValidationError(f"{field_name} must be >= 0")
    return number
