"""
Customs Duty Calculator Module

BOC-style estimate of duties, taxes and fees on imported goods, from the
dutiable value through to total landed cost.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from .money import ZERO, round_money, to_decimal
from .progressive import evaluate
from .rules import TaxRules, get_rules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CustomsInput:
    """Shipment details entered by the importer.

    Foreign amounts are in the invoice currency; ``exchange_rate`` converts
    them to pesos. When ``rate_of_duty`` is None it is looked up from the
    tariff schedule by ``ahtn_code``.
    """

    fob_fca_value: Decimal
    freight: Decimal
    insurance: Decimal
    exchange_rate: Decimal
    rate_of_duty: Decimal | None = None
    excise_rate: Decimal = ZERO
    ahtn_code: str = ""
    description: str = ""


@dataclass(frozen=True)
class GoodsInfo:
    ahtn_code: str
    description: str
    rate_of_duty: Decimal

    def to_dict(self) -> dict:
        return {
            "ahtn_code": self.ahtn_code,
            "description": self.description,
            "rate_of_duty": float(self.rate_of_duty)
        }


@dataclass(frozen=True)
class DutiableValue:
    fob_fca_value: Decimal
    freight: Decimal
    insurance: Decimal
    total_dutiable_value_foreign: Decimal
    exchange_rate: Decimal
    total_dutiable_value_php: Decimal

    def to_dict(self) -> dict:
        return {
            "fob_fca_value": float(self.fob_fca_value),
            "freight": float(self.freight),
            "insurance": float(self.insurance),
            "total_dutiable_value_foreign": float(self.total_dutiable_value_foreign),
            "exchange_rate": float(self.exchange_rate),
            "total_dutiable_value_php": float(self.total_dutiable_value_php)
        }


@dataclass(frozen=True)
class CustomsCharges:
    customs_duty: Decimal
    excise_tax: Decimal
    brokerage_fee: Decimal
    import_processing_charge: Decimal
    bir_documentary_stamp_tax: Decimal
    customs_documentary_stamp: Decimal
    total_landed_cost: Decimal

    def to_dict(self) -> dict:
        return {
            "customs_duty": float(self.customs_duty),
            "excise_tax": float(self.excise_tax),
            "brokerage_fee": float(self.brokerage_fee),
            "import_processing_charge": float(self.import_processing_charge),
            "bir_documentary_stamp_tax": float(self.bir_documentary_stamp_tax),
            "customs_documentary_stamp": float(self.customs_documentary_stamp),
            "total_landed_cost": float(self.total_landed_cost)
        }


@dataclass(frozen=True)
class CustomsSummary:
    customs_duty: Decimal
    vat: Decimal
    excise_tax: Decimal
    import_processing_charge: Decimal
    bir_documentary_stamp_tax: Decimal
    customs_documentary_stamp: Decimal
    total_tax_amount: Decimal

    def to_dict(self) -> dict:
        return {
            "customs_duty": float(self.customs_duty),
            "vat": float(self.vat),
            "excise_tax": float(self.excise_tax),
            "import_processing_charge": float(self.import_processing_charge),
            "bir_documentary_stamp_tax": float(self.bir_documentary_stamp_tax),
            "customs_documentary_stamp": float(self.customs_documentary_stamp),
            "total_tax_amount": float(self.total_tax_amount)
        }


@dataclass(frozen=True)
class CustomsCalculation:
    """Customs duty computation result."""

    goods: GoodsInfo
    dutiable_value: DutiableValue
    charges: CustomsCharges
    summary: CustomsSummary

    def to_dict(self) -> dict:
        return {
            "goods": self.goods.to_dict(),
            "dutiable_value": self.dutiable_value.to_dict(),
            "charges": self.charges.to_dict(),
            "summary": self.summary.to_dict()
        }


class CustomsDutyCalculator:
    """Duties and taxes on imported goods."""

    def __init__(self, rules: TaxRules | None = None):
        self.rules = rules or get_rules()

    def resolve_goods(self, data: CustomsInput) -> GoodsInfo:
        """Determine the rate of duty and description for the goods.

        Raises:
            UnknownTariffError: If no rate was given and the AHTN code is unknown
        """
        if data.rate_of_duty is not None:
            return GoodsInfo(
                ahtn_code=data.ahtn_code,
                description=data.description,
                rate_of_duty=to_decimal(data.rate_of_duty)
            )

        item = self.rules.customs.lookup_tariff(data.ahtn_code)
        return GoodsInfo(
            ahtn_code=item.ahtn,
            description=data.description or item.description,
            rate_of_duty=item.rate
        )

    def compute(self, data: CustomsInput) -> CustomsCalculation:
        """Compute duties, taxes, fees and landed cost for a shipment.

        Each stage feeds the next, so the order below is significant.

        Args:
            data: Shipment details

        Returns:
            CustomsCalculation result
        """
        customs_rules = self.rules.customs
        goods = self.resolve_goods(data)

        fob = to_decimal(data.fob_fca_value)
        freight = to_decimal(data.freight)
        insurance = to_decimal(data.insurance)
        exchange_rate = to_decimal(data.exchange_rate)
        excise_rate = to_decimal(data.excise_rate)

        dutiable_foreign = fob + freight + insurance
        dutiable_php = round_money(dutiable_foreign * exchange_rate)

        customs_duty = round_money(dutiable_php * goods.rate_of_duty)
        excise_tax = round_money((dutiable_php + customs_duty) * excise_rate)

        vat_base = dutiable_php + customs_duty + excise_tax
        vat = round_money(vat_base * self.rules.vat_rate)

        brokerage_fee = round_money(evaluate(dutiable_php, customs_rules.brokerage_fee))
        processing_charge = round_money(
            evaluate(dutiable_php, customs_rules.import_processing_charge)
        )
        bir_dst = customs_rules.bir_documentary_stamp_tax
        customs_stamp = customs_rules.customs_documentary_stamp

        total_landed_cost = (
            dutiable_php + customs_duty + excise_tax + vat
            + brokerage_fee + processing_charge + bir_dst + customs_stamp
        )
        total_tax = customs_duty + vat + excise_tax + processing_charge + bir_dst + customs_stamp

        logger.debug(
            f"Customs on {dutiable_php} PHP dutiable value: "
            f"taxes={total_tax}, landed={total_landed_cost}"
        )

        return CustomsCalculation(
            goods=goods,
            dutiable_value=DutiableValue(
                fob_fca_value=fob,
                freight=freight,
                insurance=insurance,
                total_dutiable_value_foreign=dutiable_foreign,
                exchange_rate=exchange_rate,
                total_dutiable_value_php=dutiable_php
            ),
            charges=CustomsCharges(
                customs_duty=customs_duty,
                excise_tax=excise_tax,
                brokerage_fee=brokerage_fee,
                import_processing_charge=processing_charge,
                bir_documentary_stamp_tax=bir_dst,
                customs_documentary_stamp=customs_stamp,
                total_landed_cost=total_landed_cost
            ),
            summary=CustomsSummary(
                customs_duty=customs_duty,
                vat=vat,
                excise_tax=excise_tax,
                import_processing_charge=processing_charge,
                bir_documentary_stamp_tax=bir_dst,
                customs_documentary_stamp=customs_stamp,
                total_tax_amount=total_tax
            )
        )


def calculate_customs(data: CustomsInput, rules: TaxRules | None = None) -> CustomsCalculation:
    return CustomsDutyCalculator(rules).compute(data)
