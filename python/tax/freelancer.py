"""
Freelancer Tax Calculator Module

Compares the graduated income tax and the optional 8% flat tax for
self-employed individuals, and applies percentage tax or VAT depending on
the annual gross sales threshold.
"""

import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from .money import ZERO, non_negative, round_money, to_decimal
from .progressive import evaluate
from .rules import TaxRules, get_rules

logger = logging.getLogger(__name__)


class FilingPeriod(Enum):
    """Filing cadence."""
    QUARTERLY = "quarterly"
    YEARLY = "yearly"

    @property
    def multiplier(self) -> int:
        """Periods per year."""
        return 4 if self is FilingPeriod.QUARTERLY else 1


class TaxMethod(Enum):
    """Income tax regimes available to a freelancer."""
    GRADUATED = "graduated_tax"
    FLAT_8_PERCENT = "flat_tax_8_percent"

    @property
    def label(self) -> str:
        return "8% Flat Tax" if self is TaxMethod.FLAT_8_PERCENT else "Graduated Tax"


@dataclass(frozen=True)
class GraduatedTaxOption:
    """Graduated income tax, per filing period."""

    gross_sales: Decimal
    deductions: Decimal
    taxable_income: Decimal
    income_tax: Decimal
    total_tax: Decimal
    net_income: Decimal

    def to_dict(self) -> dict:
        return {
            "gross_sales": float(self.gross_sales),
            "deductions": float(self.deductions),
            "taxable_income": float(self.taxable_income),
            "income_tax": float(self.income_tax),
            "total_tax": float(self.total_tax),
            "net_income": float(self.net_income)
        }


@dataclass(frozen=True)
class FlatTaxOption:
    """8% flat income tax, per filing period."""

    gross_sales: Decimal
    exemption: Decimal
    taxable_amount: Decimal
    income_tax: Decimal
    total_tax: Decimal
    net_income: Decimal

    def to_dict(self) -> dict:
        return {
            "gross_sales": float(self.gross_sales),
            "exemption": float(self.exemption),
            "taxable_amount": float(self.taxable_amount),
            "income_tax": float(self.income_tax),
            "total_tax": float(self.total_tax),
            "net_income": float(self.net_income)
        }


@dataclass(frozen=True)
class IncomeTaxOptions:
    graduated_tax: GraduatedTaxOption
    flat_tax_8_percent: FlatTaxOption | None

    def get(self, method: TaxMethod) -> GraduatedTaxOption | FlatTaxOption | None:
        if method is TaxMethod.FLAT_8_PERCENT:
            return self.flat_tax_8_percent
        return self.graduated_tax

    def to_dict(self) -> dict:
        return {
            "graduated_tax": self.graduated_tax.to_dict(),
            "flat_tax_8_percent": (
                self.flat_tax_8_percent.to_dict() if self.flat_tax_8_percent else None
            )
        }


@dataclass(frozen=True)
class OtherTax:
    applicable: bool
    rate: Decimal
    amount: Decimal

    def to_dict(self) -> dict:
        return {"applicable": self.applicable, "rate": float(self.rate), "amount": float(self.amount)}


@dataclass(frozen=True)
class OtherTaxes:
    """Business taxes; exactly one of the two applies."""

    percentage_tax: OtherTax
    vat: OtherTax

    @property
    def total(self) -> Decimal:
        return self.percentage_tax.amount + self.vat.amount

    def to_dict(self) -> dict:
        return {"percentage_tax": self.percentage_tax.to_dict(), "vat": self.vat.to_dict()}


@dataclass(frozen=True)
class FreelancerSummary:
    method: str
    total_income_tax: Decimal
    total_other_tax: Decimal
    total_all_taxes: Decimal
    net_income: Decimal

    def to_dict(self) -> dict:
        return {
            "method": self.method,
            "total_income_tax": float(self.total_income_tax),
            "total_other_tax": float(self.total_other_tax),
            "total_all_taxes": float(self.total_all_taxes),
            "net_income": float(self.net_income)
        }


@dataclass(frozen=True)
class FreelancerCalculation:
    """Freelancer tax computation result. Amounts are per filing period."""

    gross_sales: Decimal
    filing_period: FilingPeriod
    is_eligible_for_8_percent: bool
    is_vat_required: bool
    income_tax_options: IncomeTaxOptions
    other_taxes: OtherTaxes
    recommended: TaxMethod
    summary: FreelancerSummary

    def to_dict(self) -> dict:
        return {
            "gross_sales": float(self.gross_sales),
            "filing_period": self.filing_period.value,
            "is_eligible_for_8_percent": self.is_eligible_for_8_percent,
            "is_vat_required": self.is_vat_required,
            "income_tax_options": self.income_tax_options.to_dict(),
            "other_taxes": self.other_taxes.to_dict(),
            "recommended": self.recommended.value,
            "summary": self.summary.to_dict()
        }


class FreelancerTaxCalculator:
    """Self-employed income tax comparison."""

    def __init__(self, rules: TaxRules | None = None):
        self.rules = rules or get_rules()

    def compute(
        self,
        gross_sales: Decimal,
        deductions: Decimal = ZERO,
        filing_period: FilingPeriod | str = FilingPeriod.QUARTERLY
    ) -> FreelancerCalculation:
        """Compute both income tax methods and recommend one.

        Thresholds are tested on annualised amounts; every figure in the
        result is converted back to the filing period.

        Args:
            gross_sales: Gross sales/receipts for the period
            deductions: Allowable deductions for the period
            filing_period: 'quarterly' or 'yearly'

        Returns:
            FreelancerCalculation result
        """
        period = FilingPeriod(filing_period)
        multiplier = period.multiplier
        rules = self.rules

        gross_sales = to_decimal(gross_sales)
        deductions = to_decimal(deductions)
        annual_gross_sales = gross_sales * multiplier
        annual_deductions = deductions * multiplier

        is_eligible_for_8_percent = annual_gross_sales < rules.flat_tax_threshold
        is_vat_required = annual_gross_sales >= rules.vat_threshold

        other_taxes = self._other_taxes(annual_gross_sales, is_vat_required, multiplier)

        # Graduated method
        annual_taxable_income = non_negative(
            annual_gross_sales - annual_deductions - rules.individual_exemption
        )
        annual_income_tax = evaluate(annual_taxable_income, rules.income_tax)
        graduated_income_tax = round_money(annual_income_tax / multiplier)
        graduated_total = graduated_income_tax + other_taxes.total
        graduated = GraduatedTaxOption(
            gross_sales=gross_sales,
            deductions=deductions,
            taxable_income=round_money(annual_taxable_income / multiplier),
            income_tax=graduated_income_tax,
            total_tax=graduated_total,
            net_income=gross_sales - graduated_total
        )

        # 8% flat method; deductions do not apply
        flat = None
        if is_eligible_for_8_percent:
            annual_flat_taxable = non_negative(annual_gross_sales - rules.individual_exemption)
            flat_income_tax = round_money(annual_flat_taxable * rules.flat_tax_rate / multiplier)
            flat_total = flat_income_tax + other_taxes.total
            flat = FlatTaxOption(
                gross_sales=gross_sales,
                exemption=round_money(rules.individual_exemption / multiplier),
                taxable_amount=round_money(annual_flat_taxable / multiplier),
                income_tax=flat_income_tax,
                total_tax=flat_total,
                net_income=gross_sales - flat_total
            )

        options = IncomeTaxOptions(graduated_tax=graduated, flat_tax_8_percent=flat)
        recommended = recommend(options)
        best = options.get(recommended)

        logger.debug(
            f"Freelancer tax on {gross_sales} ({period.value}): "
            f"recommended={recommended.value}, total={best.total_tax}"
        )

        return FreelancerCalculation(
            gross_sales=gross_sales,
            filing_period=period,
            is_eligible_for_8_percent=is_eligible_for_8_percent,
            is_vat_required=is_vat_required,
            income_tax_options=options,
            other_taxes=other_taxes,
            recommended=recommended,
            summary=FreelancerSummary(
                method=recommended.label,
                total_income_tax=best.income_tax,
                total_other_tax=other_taxes.total,
                total_all_taxes=best.total_tax,
                net_income=best.net_income
            )
        )

    def _other_taxes(
        self,
        annual_gross_sales: Decimal,
        is_vat_required: bool,
        multiplier: int
    ) -> OtherTaxes:
        """Percentage tax below the VAT threshold, VAT at or above it."""
        percentage_rate = self.rules.percentage_tax_rate
        vat_rate = self.rules.vat_rate

        percentage_amount = ZERO
        vat_amount = ZERO
        if is_vat_required:
            vat_amount = round_money(annual_gross_sales * vat_rate / multiplier)
        else:
            percentage_amount = round_money(annual_gross_sales * percentage_rate / multiplier)

        return OtherTaxes(
            percentage_tax=OtherTax(
                applicable=not is_vat_required, rate=percentage_rate, amount=percentage_amount
            ),
            vat=OtherTax(applicable=is_vat_required, rate=vat_rate, amount=vat_amount)
        )


def recommend(options: IncomeTaxOptions) -> TaxMethod:
    """Pick the method with the highest net income.

    Candidates are ranked in declaration order, so a tie keeps the
    graduated method.
    """
    candidates = [method for method in TaxMethod if options.get(method) is not None]
    return max(candidates, key=lambda method: options.get(method).net_income)


def calculate_freelancer_tax(
    gross_sales: Decimal,
    deductions: Decimal = ZERO,
    filing_period: FilingPeriod | str = FilingPeriod.QUARTERLY,
    rules: TaxRules | None = None
) -> FreelancerCalculation:
    return FreelancerTaxCalculator(rules).compute(gross_sales, deductions, filing_period)


if __name__ == "__main__":
    import argparse

    from .validators import InvalidAmountError, parse_amount

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    parser = argparse.ArgumentParser(description="Compare freelancer income tax options")
    parser.add_argument("--gross-sales", required=True, help="Gross sales for the period")
    parser.add_argument("--deductions", default="0", help="Deductions for the period")
    parser.add_argument(
        "--period",
        choices=[p.value for p in FilingPeriod],
        default=FilingPeriod.QUARTERLY.value,
        help="Filing period"
    )
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")

    args = parser.parse_args()

    try:
        gross_sales = parse_amount(args.gross_sales, "gross-sales")
        deductions = parse_amount(args.deductions, "deductions", allow_empty=True)
    except InvalidAmountError as e:
        parser.error(str(e))

    result = calculate_freelancer_tax(gross_sales, deductions, args.period)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        summary = result.summary
        print(f"Recommended: {summary.method}")
        print(f"Income tax: {summary.total_income_tax:,.2f}")
        print(f"Other taxes: {summary.total_other_tax:,.2f}")
        print(f"Total taxes: {summary.total_all_taxes:,.2f}")
        print(f"Net income: {summary.net_income:,.2f}")
