from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

from ..core.constants import MAX_EMAIL_LENGTH, MAX_PENALTY_AMOUNT, ZERO_AMOUNT
from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_max_length(value: str, field_name: str, max_len: int) -> str:
    if value is not None and len(value) > max_len:
        raise ValidationError(f"{field_name} must be at most {max_len} characters")
    return value


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def normalize_email(value: str) -> str:
    email = require_non_empty(value, "Email").lower()
    require_max_length(email, "Email", MAX_EMAIL_LENGTH)
    if not _EMAIL_RE.match(email):
        raise ValidationError("Email is not valid")
    return email


def parse_amount(value, field_name: str = "Penalty amount") -> Decimal:
    """Parse a non-negative currency amount with two decimal places.

    Negative or out-of-range values are rejected, never clamped.
    """

    if value is None or (isinstance(value, str) and not value.strip()):
        return ZERO_AMOUNT
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} is not a number")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"{field_name} is not a number")
    if not amount.is_finite():
        raise ValidationError(f"{field_name} is not a number")
    if amount < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    if amount > MAX_PENALTY_AMOUNT:
        raise ValidationError(f"{field_name} cannot exceed {MAX_PENALTY_AMOUNT}")
    return amount.quantize(Decimal("0.01"))
