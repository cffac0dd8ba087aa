"""
Progressive Tax Evaluator

Finds the bracket containing an amount and applies
``base_amount + rate * (amount - bracket.min)``.
"""

import logging
from decimal import Decimal
from typing import Iterable

from .money import ZERO, to_decimal
from .rules import TaxBracket

logger = logging.getLogger(__name__)


def find_bracket(amount: Decimal, brackets: Iterable[TaxBracket]) -> TaxBracket:
    """Return the bracket containing ``amount``.

    An amount exactly on a boundary belongs to the upper bracket.
    Negative amounts are treated as zero.
    """
    amount = max(ZERO, to_decimal(amount))
    last = None
    for bracket in brackets:
        if bracket.contains(amount):
            return bracket
        last = bracket
    if last is None:
        raise ValueError("Empty bracket table")
    # Validated tables always end unbounded
    return last


def evaluate(amount: Decimal, brackets: Iterable[TaxBracket]) -> Decimal:
    """Compute progressive tax for an amount.

    Args:
        amount: Taxable amount; negative values are clamped to zero
        brackets: Ordered, contiguous brackets

    Returns:
        Unrounded tax amount
    """
    amount = to_decimal(amount)
    if amount < 0:
        logger.warning(f"Negative taxable amount {amount} clamped to zero")
        amount = ZERO

    bracket = find_bracket(amount, brackets)
    tax = bracket.base_amount + bracket.rate * (amount - bracket.min)
    logger.debug(f"Progressive tax on {amount}: {tax} ({bracket.description})")
    return tax
