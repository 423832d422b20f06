"""Reusable validation helpers for request payloads and domain values.

All helpers raise ValidationFailed (never abort) so services stay usable outside
a request context; the app error handler renders the failure.
"""
from __future__ import annotations
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable, Mapping

from canteen.errors import ValidationFailed

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
PHONE_RE = re.compile(r'^[\d\s\-+()]{10,}$')
CENT = Decimal('0.01')
MIN_PASSWORD_LENGTH = 6


def validate_status(new_status: str, allowed: Iterable[str], field_name: str = 'status') -> str:
    """Validate that new_status is inside allowed.

    Returns the status (to enable inline usage) or raises ValidationFailed.
    """
    if new_status not in allowed:
        raise ValidationFailed(f'{field_name} invalid', field=field_name, value=new_status)
    return new_status


def is_blank(value: Any) -> bool:
    return value is None or str(value).strip() == ''


def require_fields(data: Mapping[str, Any], fields: Iterable[str], message: str | None = None) -> None:
    missing = [f for f in fields if is_blank(data.get(f))]
    if missing:
        raise ValidationFailed(message or f"{', '.join(missing)} required", missing=missing)


def is_valid_email(email: str | None) -> bool:
    return bool(email) and EMAIL_RE.match(email) is not None


def is_valid_phone(phone: str | None) -> bool:
    return bool(phone) and PHONE_RE.match(phone) is not None


def quantize_money(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def parse_money(value: Any, field_name: str = 'price') -> Decimal:
    """Coerce a price-like value to a non-negative Decimal with cent precision."""
    if isinstance(value, bool) or value is None:
        raise ValidationFailed(f'{field_name} must be a number', field=field_name)
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationFailed(f'{field_name} must be a number', field=field_name)
    if not amount.is_finite() or amount < 0:
        raise ValidationFailed(f'{field_name} must be zero or more', field=field_name)
    return quantize_money(amount)


def parse_quantity(value: Any, field_name: str = 'quantity') -> int:
    if isinstance(value, bool):
        raise ValidationFailed(f'{field_name} must be an integer', field=field_name)
    if isinstance(value, float) and not value.is_integer():
        raise ValidationFailed(f'{field_name} must be an integer', field=field_name)
    try:
        qty = int(value)
    except (TypeError, ValueError):
        raise ValidationFailed(f'{field_name} must be an integer', field=field_name)
    if qty < 1:
        raise ValidationFailed(f'{field_name} must be at least 1', field=field_name)
    return qty


def parse_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


__all__ = [
    'validate_status', 'is_blank', 'require_fields', 'is_valid_email', 'is_valid_phone',
    'quantize_money', 'parse_money', 'parse_quantity', 'parse_float', 'MIN_PASSWORD_LENGTH',
]
