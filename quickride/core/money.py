"""Decimal helpers for currency values."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from quickride.core.errors import ValidationDecline

CENT = Decimal("0.01")
# Largest value a Numeric(18, 2) column holds.
MAX_AMOUNT = Decimal("9999999999999999.99")


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Convert a numeric input to ``Decimal`` without float artefacts."""

    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def bounded_amount(value: Decimal | int | float | str, *, label: str) -> Decimal:
    """Return ``value`` as a ``Decimal``, declining non-finite or unstorable amounts."""

    amount = to_decimal(value)
    if not amount.is_finite() or abs(amount) > MAX_AMOUNT:
        raise ValidationDecline(f"{label} is out of range")
    return amount


def round2(value: Decimal | int | float | str) -> Decimal:
    """Round to two decimal places, half away from zero."""

    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_inr(value: Decimal | int | float | str, *, decimals: bool = False) -> str:
    """Format an amount with Indian digit grouping, e.g. ``1,20,000``."""

    amount = round2(value)
    sign = "-" if amount < 0 else ""
    integral, _, fraction = f"{abs(amount):.2f}".partition(".")
    if len(integral) > 3:
        head, tail = integral[:-3], integral[-3:]
        groups: list[str] = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        integral = ",".join(groups + [tail])
    if decimals or fraction != "00":
        return f"{sign}{integral}.{fraction}"
    return f"{sign}{integral}"


__all__ = ["CENT", "MAX_AMOUNT", "bounded_amount", "format_inr", "round2", "to_decimal"]
