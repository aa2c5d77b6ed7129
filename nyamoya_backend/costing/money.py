# costing/money.py

"""
DECIMAL NORMALISERS

Rules:
- Every quantity and amount entering the engine becomes a Decimal here.
- Floats are converted through str() so 0.1 stays 0.1.
- Stock quantities carry at most QUANTITY_PLACES decimals (the column scale);
  finer input is a ValidationError.
- Rounding (ROUND_HALF_UP, 0.01) is a DISPLAY concern: only report/serializer
  code calls q2() / to_minor_int(). Ledger math never rounds.
"""

from __future__ import annotations

import uuid
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from costing.exceptions import ValidationError


ZERO = Decimal("0")
TWOPLACES = Decimal("0.01")
QUANTITY_PLACES = 4


def to_decimal(value, *, field_name="value") -> Decimal:
    if value is None or value == "" or value == "null":
        raise ValidationError(f"{field_name} is required")
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise ValidationError(f"{field_name} must be a valid decimal") from exc
    if not d.is_finite():
        raise ValidationError(f"{field_name} must be a finite number")
    return d


def require_positive(value, *, field_name="quantity") -> Decimal:
    d = to_decimal(value, field_name=field_name)
    if d <= ZERO:
        raise ValidationError(f"{field_name} must be greater than zero")
    return d


def _require_scale(d: Decimal, places: int, field_name: str) -> Decimal:
    if d.normalize().as_tuple().exponent < -places:
        raise ValidationError(f"{field_name} cannot have more than {places} decimal places")
    return d


def require_quantity(value, *, field_name="quantity") -> Decimal:
    return _require_scale(require_positive(value, field_name=field_name), QUANTITY_PLACES, field_name)


def optional_quantity(value, *, field_name="quantity") -> Decimal:
    d = optional_non_negative(value, field_name=field_name)
    return _require_scale(d, QUANTITY_PLACES, field_name)


def require_non_negative(value, *, field_name="amount") -> Decimal:
    d = to_decimal(value, field_name=field_name)
    if d < ZERO:
        raise ValidationError(f"{field_name} cannot be negative")
    return d


def optional_non_negative(value, *, field_name="amount") -> Decimal:
    if value is None or value == "":
        return ZERO
    return require_non_negative(value, field_name=field_name)


def require_text(value, *, field_name="name") -> str:
    text = str(value if value is not None else "").strip()
    if not text:
        raise ValidationError(f"{field_name} is required")
    return text


def normalize_operation_id(value):
    """
    Client-generated idempotency key. None means "not idempotent".
    """
    if value is None or value == "":
        return None
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError) as exc:
        raise ValidationError("operation_id must be a UUID") from exc


def q2(amount) -> Decimal:
    return Decimal(str(amount or ZERO)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def to_major_number(amount) -> float:
    return float(q2(amount))


def to_minor_int(amount) -> int:
    return int((q2(amount) * 100).to_integral_value(rounding=ROUND_HALF_UP))


def money_str(amount) -> str:
    """
    JSON-safe money string.
    """
    return f"{q2(amount):.2f}"
