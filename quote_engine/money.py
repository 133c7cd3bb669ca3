"""
Currency helpers.

All engine arithmetic happens in integer cents. Dollars are converted once,
at the boundary, and fractional cents are rounded half away from zero.
"""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("1")
HUNDRED = Decimal("100")


def round_cents(value) -> int:
    """Round a (possibly fractional) cent amount to an integer, ties away from zero."""
    return int(Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP))


def to_cents(dollars) -> int:
    """Convert decimal dollars to integer cents."""
    if dollars is None:
        return 0
    if not isinstance(dollars, Decimal):
        dollars = Decimal(str(dollars))
    return round_cents(dollars * HUNDRED)


def percent_of(cents: int, percent: Decimal) -> int:
    """Return `percent`% of a cent amount, rounded to a whole cent."""
    return round_cents(Decimal(cents) * Decimal(percent) / HUNDRED)


def fmt_cents(cents: int) -> str:
    """Format a cent amount as a currency string for descriptions."""
    return f"${Decimal(cents) / HUNDRED:,.2f}"
