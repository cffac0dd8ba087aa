"""
Tax Rules Module

Loads Philippine bracket tables and policy constants from YAML and
validates them once at startup.
"""

import logging
import os
from dataclasses import dataclass, field
from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from .money import to_decimal

logger = logging.getLogger(__name__)

RULES_FILENAME = "tax_rules.yaml"
RULES_DIR_ENV = "TAX_RULES_DIR"


class TaxRulesError(Exception):
    """Raised when the rules file is missing or a table is malformed."""


class UnknownTariffError(KeyError):
    """Raised when an AHTN code is not in the tariff schedule."""


@dataclass(frozen=True)
class TaxBracket:
    """A single progressive bracket."""

    min: Decimal
    max: Decimal | None
    rate: Decimal
    base_amount: Decimal
    description: str = ""

    def contains(self, amount: Decimal) -> bool:
        """Brackets include their min and exclude their max."""
        if amount < self.min:
            return False
        return self.max is None or amount < self.max

    def to_dict(self) -> dict:
        return {
            "min": float(self.min),
            "max": float(self.max) if self.max is not None else None,
            "rate": float(self.rate),
            "base_amount": float(self.base_amount),
            "description": self.description
        }


@dataclass(frozen=True)
class BracketTable:
    """An ordered, contiguous sequence of brackets for one tax category."""

    name: str
    effective_date: str
    brackets: tuple[TaxBracket, ...]

    def __iter__(self):
        return iter(self.brackets)

    def __len__(self) -> int:
        return len(self.brackets)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "effective_date": self.effective_date,
            "brackets": [b.to_dict() for b in self.brackets]
        }


@dataclass(frozen=True)
class TariffItem:
    """AHTN tariff line."""

    ahtn: str
    description: str
    rate: Decimal

    def to_dict(self) -> dict:
        return {"ahtn": self.ahtn, "description": self.description, "rate": float(self.rate)}


@dataclass(frozen=True)
class DirectoryRate:
    """One published rate line; min/max are None when the rate is not banded."""

    rate: Decimal
    description: str
    min: Decimal | None = None
    max: Decimal | None = None

    def to_dict(self) -> dict:
        return {
            "rate": float(self.rate),
            "description": self.description,
            "min": float(self.min) if self.min is not None else None,
            "max": float(self.max) if self.max is not None else None
        }


@dataclass(frozen=True)
class DirectoryEntry:
    """Reference rates for one tax type."""

    category: str
    type: str
    description: str
    effective_date: str
    rates: tuple[DirectoryRate, ...]

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "type": self.type,
            "description": self.description,
            "effective_date": self.effective_date,
            "rates": [r.to_dict() for r in self.rates]
        }


@dataclass(frozen=True)
class SSSRules:
    employee_rate: Decimal
    min_salary_credit: Decimal
    max_salary_credit: Decimal
    salary_credit_step: Decimal


@dataclass(frozen=True)
class PhilHealthRules:
    premium_rate: Decimal
    employee_share: Decimal
    min_salary: Decimal
    max_salary: Decimal


@dataclass(frozen=True)
class PagIbigRules:
    low_rate: Decimal
    high_rate: Decimal
    threshold: Decimal
    max_fund_salary: Decimal


@dataclass(frozen=True)
class CustomsRules:
    brokerage_fee: BracketTable
    import_processing_charge: BracketTable
    bir_documentary_stamp_tax: Decimal
    customs_documentary_stamp: Decimal
    tariff_items: dict[str, TariffItem] = field(default_factory=dict)

    def lookup_tariff(self, ahtn: str) -> TariffItem:
        """Find a tariff line by AHTN code.

        Raises:
            UnknownTariffError: If the code is not in the schedule
        """
        try:
            return self.tariff_items[ahtn.strip()]
        except KeyError:
            raise UnknownTariffError(ahtn) from None


@dataclass(frozen=True)
class TaxRules:
    """Read-only collection of every table and constant the calculators use."""

    income_tax: BracketTable
    vat_rate: Decimal
    percentage_tax_rate: Decimal
    vat_threshold: Decimal
    flat_tax_threshold: Decimal
    flat_tax_rate: Decimal
    individual_exemption: Decimal
    sss: SSSRules
    philhealth: PhilHealthRules
    pagibig: PagIbigRules
    customs: CustomsRules
    directory: tuple[DirectoryEntry, ...] = ()
    source: Path | None = None

    @classmethod
    def load(cls, config_dir: Path | str | None = None) -> "TaxRules":
        """Load rules from ``tax_rules.yaml``.

        Args:
            config_dir: Directory holding the rules file. Falls back to the
                TAX_RULES_DIR environment variable, then this package.

        Returns:
            Validated TaxRules

        Raises:
            TaxRulesError: If the file is missing or invalid
        """
        if config_dir is None:
            config_dir = os.getenv(RULES_DIR_ENV) or Path(__file__).parent
        rules_file = Path(config_dir) / RULES_FILENAME

        if not rules_file.exists():
            raise TaxRulesError(f"Rules file not found: {rules_file}")

        try:
            with open(rules_file, encoding="utf-8") as f:
                raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise TaxRulesError(f"Invalid YAML in {rules_file}: {e}") from e

        rules = cls.from_dict(raw or {}, source=rules_file)
        logger.info(f"Loaded tax rules from {rules_file}")
        return rules

    @classmethod
    def from_dict(cls, raw: dict[str, Any], source: Path | None = None) -> "TaxRules":
        """Build rules from an already-parsed mapping."""
        try:
            freelancer = raw["freelancer"]
            contributions = raw["contributions"]
            customs = raw["customs"]
            sss = contributions["sss"]
            philhealth = contributions["philhealth"]
            pagibig = contributions["pagibig"]

            return cls(
                income_tax=parse_bracket_table(raw["income_tax"]),
                vat_rate=to_decimal(raw["vat"]["standard_rate"]),
                percentage_tax_rate=to_decimal(raw["percentage_tax"]["rate"]),
                vat_threshold=to_decimal(freelancer["vat_threshold"]),
                flat_tax_threshold=to_decimal(freelancer["flat_tax_threshold"]),
                flat_tax_rate=to_decimal(freelancer["flat_tax_rate"]),
                individual_exemption=to_decimal(freelancer["individual_exemption"]),
                sss=SSSRules(
                    employee_rate=to_decimal(sss["employee_rate"]),
                    min_salary_credit=to_decimal(sss["min_salary_credit"]),
                    max_salary_credit=to_decimal(sss["max_salary_credit"]),
                    salary_credit_step=to_decimal(sss["salary_credit_step"])
                ),
                philhealth=PhilHealthRules(
                    premium_rate=to_decimal(philhealth["premium_rate"]),
                    employee_share=to_decimal(philhealth["employee_share"]),
                    min_salary=to_decimal(philhealth["min_salary"]),
                    max_salary=to_decimal(philhealth["max_salary"])
                ),
                pagibig=PagIbigRules(
                    low_rate=to_decimal(pagibig["low_rate"]),
                    high_rate=to_decimal(pagibig["high_rate"]),
                    threshold=to_decimal(pagibig["threshold"]),
                    max_fund_salary=to_decimal(pagibig["max_fund_salary"])
                ),
                customs=CustomsRules(
                    brokerage_fee=parse_bracket_table(customs["brokerage_fee"]),
                    import_processing_charge=parse_bracket_table(
                        customs["import_processing_charge"]
                    ),
                    bir_documentary_stamp_tax=to_decimal(customs["bir_documentary_stamp_tax"]),
                    customs_documentary_stamp=to_decimal(customs["customs_documentary_stamp"]),
                    tariff_items={
                        str(item["ahtn"]): TariffItem(
                            ahtn=str(item["ahtn"]),
                            description=item.get("description", ""),
                            rate=to_decimal(item["rate"])
                        )
                        for item in customs.get("tariff_items", [])
                    }
                ),
                directory=tuple(parse_directory_entry(e) for e in raw.get("directory", [])),
                source=source
            )
        except KeyError as e:
            raise TaxRulesError(f"Missing rules key: {e}") from e


def parse_bracket_table(raw: dict[str, Any]) -> BracketTable:
    """Parse and validate one bracket table.

    Args:
        raw: Mapping with 'name', 'effective_date' and 'brackets'

    Returns:
        BracketTable

    Raises:
        TaxRulesError: If the table breaks ordering or contiguity
    """
    name = raw.get("name", "")
    brackets = tuple(
        TaxBracket(
            min=to_decimal(b.get("min", 0)),
            max=to_decimal(b["max"]) if b.get("max") is not None else None,
            rate=to_decimal(b.get("rate", 0)),
            base_amount=to_decimal(b.get("base_amount", 0)),
            description=b.get("description", "")
        )
        for b in raw.get("brackets", [])
    )
    validate_brackets(brackets, name)
    return BracketTable(
        name=name,
        effective_date=str(raw.get("effective_date", "")),
        brackets=brackets
    )


def parse_directory_entry(raw: dict[str, Any]) -> DirectoryEntry:
    rates = tuple(
        DirectoryRate(
            rate=to_decimal(r["rate"]),
            description=r.get("description", ""),
            min=to_decimal(r["min"]) if r.get("min") is not None else None,
            max=to_decimal(r["max"]) if r.get("max") is not None else None
        )
        for r in raw.get("rates", [])
    )
    return DirectoryEntry(
        category=raw["category"],
        type=raw["type"],
        description=raw.get("description", ""),
        effective_date=str(raw.get("effective_date", "")),
        rates=rates
    )


def validate_brackets(brackets: tuple[TaxBracket, ...], name: str = "") -> None:
    """Check a bracket sequence is contiguous from zero and ends unbounded."""
    label = name or "bracket table"

    if not brackets:
        raise TaxRulesError(f"{label}: no brackets")
    if brackets[0].min != 0:
        raise TaxRulesError(f"{label}: first bracket must start at 0")

    for i, bracket in enumerate(brackets):
        if not (0 <= bracket.rate <= 1):
            raise TaxRulesError(f"{label}: rate {bracket.rate} out of range")
        if bracket.base_amount < 0:
            raise TaxRulesError(f"{label}: negative base amount")

        is_last = i == len(brackets) - 1
        if is_last:
            if bracket.max is not None:
                raise TaxRulesError(f"{label}: last bracket must be unbounded")
            continue

        if bracket.max is None:
            raise TaxRulesError(f"{label}: only the last bracket may be unbounded")
        if bracket.max <= bracket.min:
            raise TaxRulesError(f"{label}: bracket max must exceed min")
        if bracket.max != brackets[i + 1].min:
            raise TaxRulesError(
                f"{label}: gap or overlap between {bracket.max} and {brackets[i + 1].min}"
            )


@lru_cache(maxsize=1)
def get_rules() -> TaxRules:
    """Process-wide rules, loaded once."""
    return TaxRules.load()
