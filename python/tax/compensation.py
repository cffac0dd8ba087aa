"""
Compensation Tax Calculator Module

Computes mandatory SSS, PhilHealth and Pag-IBIG employee contributions
and the withholding tax on monthly compensation.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from .money import ZERO, non_negative, round_money, to_decimal
from .progressive import evaluate, find_bracket
from .rules import PagIbigRules, PhilHealthRules, SSSRules, TaxRules, get_rules

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = 12


@dataclass(frozen=True)
class TaxCalculation:
    """Compensation tax computation result."""

    gross_salary: Decimal
    annual_salary: Decimal
    sss_contribution: Decimal
    philhealth_contribution: Decimal
    pagibig_contribution: Decimal
    total_contributions: Decimal
    taxable_income: Decimal
    annual_taxable_income: Decimal
    monthly_tax: Decimal
    annual_tax: Decimal
    net_salary: Decimal
    tax_bracket: str

    @property
    def effective_rate(self) -> Decimal:
        """Monthly tax as a percentage of gross salary."""
        if self.gross_salary <= 0:
            return ZERO
        return round_money(self.monthly_tax / self.gross_salary * 100)

    def to_dict(self) -> dict:
        return {
            "gross_salary": float(self.gross_salary),
            "annual_salary": float(self.annual_salary),
            "sss_contribution": float(self.sss_contribution),
            "philhealth_contribution": float(self.philhealth_contribution),
            "pagibig_contribution": float(self.pagibig_contribution),
            "total_contributions": float(self.total_contributions),
            "taxable_income": float(self.taxable_income),
            "annual_taxable_income": float(self.annual_taxable_income),
            "monthly_tax": float(self.monthly_tax),
            "annual_tax": float(self.annual_tax),
            "net_salary": float(self.net_salary),
            "tax_bracket": self.tax_bracket,
            "effective_rate": float(self.effective_rate)
        }


# ==================== Contributions ====================

def compute_sss(monthly_salary: Decimal, rules: SSSRules) -> Decimal:
    """Employee SSS contribution.

    The Monthly Salary Credit is the salary rounded half-up to the nearest
    credit step, clamped to the min/max credit.
    """
    salary = to_decimal(monthly_salary)
    if salary <= 0:
        return ZERO

    # Salaries above the maximum credit all map to it
    salary = min(salary, rules.max_salary_credit)
    steps = (salary / rules.salary_credit_step).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    credit = steps * rules.salary_credit_step
    credit = min(max(credit, rules.min_salary_credit), rules.max_salary_credit)
    return round_money(credit * rules.employee_rate)


def compute_philhealth(monthly_salary: Decimal, rules: PhilHealthRules) -> Decimal:
    """Employee share of the PhilHealth premium."""
    salary = to_decimal(monthly_salary)
    if salary <= 0:
        return ZERO

    base = min(max(salary, rules.min_salary), rules.max_salary)
    return round_money(base * rules.premium_rate * rules.employee_share)


def compute_pagibig(monthly_salary: Decimal, rules: PagIbigRules) -> Decimal:
    """Employee Pag-IBIG contribution."""
    salary = to_decimal(monthly_salary)
    if salary <= 0:
        return ZERO

    rate = rules.low_rate if salary <= rules.threshold else rules.high_rate
    return round_money(min(salary, rules.max_fund_salary) * rate)


# ==================== Compensation Tax ====================

class CompensationTaxCalculator:
    """Withholding tax on compensation income."""

    def __init__(self, rules: TaxRules | None = None):
        self.rules = rules or get_rules()

    def compute(self, gross_monthly_salary: Decimal) -> TaxCalculation:
        """Compute contributions, tax and net pay for a monthly salary.

        Contribution floors (minimum SSS credit, PhilHealth salary floor)
        apply to any positive salary, so net pay is negative for salaries
        below the combined minimum contributions.

        Args:
            gross_monthly_salary: Gross monthly compensation

        Returns:
            TaxCalculation result
        """
        gross = to_decimal(gross_monthly_salary)

        sss = compute_sss(gross, self.rules.sss)
        philhealth = compute_philhealth(gross, self.rules.philhealth)
        pagibig = compute_pagibig(gross, self.rules.pagibig)
        total_contributions = sss + philhealth + pagibig

        taxable_income = non_negative(gross - total_contributions)
        annual_taxable_income = taxable_income * MONTHS_PER_YEAR

        annual_tax = round_money(evaluate(annual_taxable_income, self.rules.income_tax))
        monthly_tax = round_money(annual_tax / MONTHS_PER_YEAR)
        bracket = find_bracket(annual_taxable_income, self.rules.income_tax)

        logger.debug(
            f"Compensation tax on {gross}: contributions={total_contributions}, "
            f"monthly_tax={monthly_tax}"
        )

        return TaxCalculation(
            gross_salary=round_money(gross),
            annual_salary=round_money(gross * MONTHS_PER_YEAR),
            sss_contribution=sss,
            philhealth_contribution=philhealth,
            pagibig_contribution=pagibig,
            total_contributions=total_contributions,
            taxable_income=round_money(taxable_income),
            annual_taxable_income=round_money(annual_taxable_income),
            monthly_tax=monthly_tax,
            annual_tax=annual_tax,
            net_salary=round_money(gross - total_contributions - monthly_tax),
            tax_bracket=bracket.description
        )


def calculate_income_tax(annual_taxable_income: Decimal, rules: TaxRules | None = None) -> Decimal:
    """Graduated income tax on an annual taxable income."""
    rules = rules or get_rules()
    return evaluate(to_decimal(annual_taxable_income), rules.income_tax)


def calculate_compensation_tax(
    gross_monthly_salary: Decimal,
    rules: TaxRules | None = None
) -> TaxCalculation:
    return CompensationTaxCalculator(rules).compute(gross_monthly_salary)
