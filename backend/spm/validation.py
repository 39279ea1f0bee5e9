from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any


# Maximum price/cost accepted from clients: 9,999,999.99
# This prevents database overflow issues and nonsensical prices
MAX_MONEY = Decimal("9999999.99")

CENT = Decimal("0.01")


class ValidationError(ValueError):
    """400-level input problem."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class NotFoundError(LookupError):
    """404-level missing entity (e.g., unknown producto_id)."""


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., duplicate barcode)."""


def quantize_money(value: Decimal) -> Decimal:
    """Round to cents, half-up."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def money_to_json(value: Decimal | None) -> float | None:
    """Money goes over the wire as a JSON number, not a string."""
    if value is None:
        return None
    return float(value)


def _coerce_int(value: Any, message: str) -> int:
    """
    Strict integer coercion.

    Accepts ints, integral floats (3.0) and plain digit strings ("3").
    Rejects bools, fractional values, scientific notation and blanks.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(message)

    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            raise ValidationError(message)
        return int(value)
    if isinstance(value, str):
        stripped = value.strip()
        digits = stripped[1:] if stripped.startswith("-") else stripped
        # Reject scientific notation and decimals (e.g., "1e3", "2.5")
        if not digits or not digits.isascii() or not digits.isdigit():
            raise ValidationError(message)
        return int(stripped)
    raise ValidationError(message)


def parse_positive_int(value: Any, field: str) -> int:
    message = f"{field} debe ser un número entero mayor a 0"
    parsed = _coerce_int(value, message)
    if parsed <= 0:
        raise ValidationError(message)
    return parsed


def parse_non_negative_int(value: Any, field: str, default: int = 0) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    message = f"{field} debe ser un número entero no negativo"
    parsed = _coerce_int(value, message)
    if parsed < 0:
        raise ValidationError(message)
    return parsed


def parse_money(value: Any, field: str) -> Decimal:
    """
    Parse a non-negative monetary amount into a 2-place Decimal.

    Accepts numbers and plain numeric strings ("1.50"); no currency symbols.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field} es requerido")

    if isinstance(value, (int, float)):
        text = repr(value) if isinstance(value, float) else str(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValidationError(f"{field} es requerido")
    elif isinstance(value, Decimal):
        text = str(value)
    else:
        raise ValidationError(f"{field} debe ser un número")

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValidationError(f"{field} debe ser un número")

    if not amount.is_finite():
        raise ValidationError(f"{field} debe ser un número")
    if amount < 0:
        raise ValidationError(f"{field} debe ser mayor o igual a 0")
    if amount > MAX_MONEY:
        raise ValidationError(f"{field} no puede superar {MAX_MONEY}")

    return quantize_money(amount)


def parse_optional_money(value: Any, field: str) -> Decimal | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_money(value, field)


def clean_text(value: Any) -> str | None:
    """Strip strings; blank or missing -> None."""
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None
