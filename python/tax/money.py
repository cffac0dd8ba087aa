"""
Money Helpers

Decimal coercion and centavo rounding shared by the calculators.
"""

from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Any

CENTAVO = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    """Coerce an int, float, str or Decimal into a Decimal."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value: Decimal) -> Decimal:
    """Round an amount to centavos (half up).

    Precision is widened for amounts whose integer part plus centavos
    would not fit the default context.
    """
    value = to_decimal(value)
    with localcontext() as ctx:
        if value.is_finite():
            ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(CENTAVO, rounding=ROUND_HALF_UP)


def non_negative(value: Decimal) -> Decimal:
    return max(ZERO, value)
