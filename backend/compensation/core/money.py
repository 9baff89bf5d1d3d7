"""Currency helpers shared by the balance, allocation and status code.

Amounts are stored with four decimal places but every compensation
allocation is rounded to whole cents. Anything at or below half a cent
is therefore indistinguishable from zero once rounded.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

CENT = Decimal("0.01")
ZERO = Decimal("0")

# Half of the smallest currency unit. Pending amounts and remaining credit
# at or below this value count as fully settled.
SETTLEMENT_TOLERANCE = Decimal("0.005")


def to_decimal(value: Any) -> Decimal:
    """Coerce a column value (Decimal, int, str or None) into a Decimal."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_to_cents(value: Decimal) -> Decimal:
    """Round to two decimal places, half away from zero."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def is_settled(amount: Decimal) -> bool:
    """True when *amount* is zero for currency purposes."""
    return to_decimal(amount) <= SETTLEMENT_TOLERANCE
