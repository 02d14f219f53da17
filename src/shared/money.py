"""Decimal money helpers.

Amounts are ``Decimal`` in code and canonical two-place text (``"49.98"``) in
storage and on the wire. Payment providers take integer minor units.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENT = Decimal("0.01")


def parse_amount(value) -> Decimal | None:
    """Return ``value`` as a ``Decimal``, or ``None`` when it is not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return amount if amount.is_finite() else None


def format_amount(amount) -> str:
    return str(Decimal(str(amount)).quantize(CENT, rounding=ROUND_HALF_UP))


def to_minor_units(amount) -> int:
    """``round-half-up(amount * 100)``: 49.98 -> 4998, 0.005 -> 1."""
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
