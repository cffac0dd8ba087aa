"""
Philippine Tax Computation Module

Income tax on compensation, VAT, customs duty and freelancer tax,
computed from bracket tables and policy constants in tax_rules.yaml.
"""

from .rules import (
    TaxRules,
    TaxBracket,
    BracketTable,
    TariffItem,
    TaxRulesError,
    UnknownTariffError,
    get_rules,
)
from .progressive import evaluate, find_bracket
from .compensation import (
    CompensationTaxCalculator,
    TaxCalculation,
    calculate_compensation_tax,
    calculate_income_tax,
    compute_sss,
    compute_philhealth,
    compute_pagibig,
)
from .vat import VATCalculator, VATComputation, calculate_vat, extract_vat
from .customs import (
    CustomsDutyCalculator,
    CustomsInput,
    CustomsCalculation,
    calculate_customs,
)
from .freelancer import (
    FreelancerTaxCalculator,
    FreelancerCalculation,
    FilingPeriod,
    TaxMethod,
    calculate_freelancer_tax,
)
from .validators import InvalidAmountError, parse_amount

__all__ = [
    # Rules
    "TaxRules",
    "TaxBracket",
    "BracketTable",
    "TariffItem",
    "TaxRulesError",
    "UnknownTariffError",
    "get_rules",
    # Progressive evaluator
    "evaluate",
    "find_bracket",
    # Compensation
    "CompensationTaxCalculator",
    "TaxCalculation",
    "calculate_compensation_tax",
    "calculate_income_tax",
    "compute_sss",
    "compute_philhealth",
    "compute_pagibig",
    # VAT
    "VATCalculator",
    "VATComputation",
    "calculate_vat",
    "extract_vat",
    # Customs
    "CustomsDutyCalculator",
    "CustomsInput",
    "CustomsCalculation",
    "calculate_customs",
    # Freelancer
    "FreelancerTaxCalculator",
    "FreelancerCalculation",
    "FilingPeriod",
    "TaxMethod",
    "calculate_freelancer_tax",
    # Validation
    "InvalidAmountError",
    "parse_amount",
]
