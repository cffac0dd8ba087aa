"""
Pytest configuration and fixtures for tax calculator tests.
"""

import copy
import sys
from pathlib import Path

import pytest
import yaml

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "python"))

from tax import (  # noqa: E402
    CompensationTaxCalculator,
    CustomsDutyCalculator,
    FreelancerTaxCalculator,
    TaxRules,
    VATCalculator,
)


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def rules_dir() -> Path:
    """Return the directory holding tax_rules.yaml."""
    return PROJECT_ROOT / "python" / "tax"


@pytest.fixture
def raw_rules(rules_dir: Path) -> dict:
    """Load the shipped rules file as a plain mapping (safe to mutate)."""
    with open(rules_dir / "tax_rules.yaml", encoding="utf-8") as f:
        return copy.deepcopy(yaml.safe_load(f))


@pytest.fixture
def rules(rules_dir: Path) -> TaxRules:
    """Validated tax rules."""
    return TaxRules.load(rules_dir)


@pytest.fixture
def compensation_calculator(rules: TaxRules) -> CompensationTaxCalculator:
    return CompensationTaxCalculator(rules)


@pytest.fixture
def vat_calculator(rules: TaxRules) -> VATCalculator:
    return VATCalculator(rules)


@pytest.fixture
def customs_calculator(rules: TaxRules) -> CustomsDutyCalculator:
    return CustomsDutyCalculator(rules)


@pytest.fixture
def freelancer_calculator(rules: TaxRules) -> FreelancerTaxCalculator:
    return FreelancerTaxCalculator(rules)
