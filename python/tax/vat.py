"""
VAT Calculator Module

Flat-rate value-added tax on a base amount, and the reverse split of a
VAT-inclusive amount.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from .money import round_money, to_decimal
from .rules import TaxRules, get_rules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VATComputation:
    """VAT computation result."""

    base_amount: Decimal  # Amount before VAT
    rate: Decimal
    amount: Decimal
    gross_amount: Decimal  # Amount including VAT

    def to_dict(self) -> dict:
        return {
            "base_amount": float(self.base_amount),
            "rate": float(self.rate),
            "amount": float(self.amount),
            "gross_amount": float(self.gross_amount)
        }


class VATCalculator:
    """Standard-rate VAT."""

    def __init__(self, rules: TaxRules | None = None):
        self.rules = rules or get_rules()

    @property
    def rate(self) -> Decimal:
        return self.rules.vat_rate

    def compute(self, base_amount: Decimal) -> VATComputation:
        """Compute VAT on a VAT-exclusive amount.

        Args:
            base_amount: Amount before VAT

        Returns:
            VATComputation result
        """
        base = round_money(to_decimal(base_amount))
        vat_amount = round_money(base * self.rate)

        return VATComputation(
            base_amount=base,
            rate=self.rate,
            amount=vat_amount,
            gross_amount=base + vat_amount
        )

    def extract(self, inclusive_amount: Decimal) -> VATComputation:
        """Split a VAT-inclusive amount into its base and VAT.

        Args:
            inclusive_amount: Amount including VAT

        Returns:
            VATComputation result
        """
        gross = round_money(to_decimal(inclusive_amount))
        base = round_money(gross / (1 + self.rate))
        logger.debug(f"Extracted VAT from {gross}: base={base}")

        return VATComputation(
            base_amount=base,
            rate=self.rate,
            amount=gross - base,
            gross_amount=gross
        )


def calculate_vat(base_amount: Decimal, rules: TaxRules | None = None) -> VATComputation:
    return VATCalculator(rules).compute(base_amount)


def extract_vat(inclusive_amount: Decimal, rules: TaxRules | None = None) -> VATComputation:
    return VATCalculator(rules).extract(inclusive_amount)
