"""
Tests for Progressive Tax Evaluation

Tests for bracket lookup, progressive evaluation and rule table loading.
"""

import pytest
import yaml
from decimal import Decimal

from tax import (
    TaxRules,
    TaxRulesError,
    calculate_income_tax,
    evaluate,
    find_bracket,
    get_rules,
)
from tax.rules import parse_bracket_table


class TestProgressiveEvaluator:
    """Tests for evaluate() and find_bracket()."""

    @pytest.mark.parametrize("amount,expected", [
        (Decimal("0"), Decimal("0")),
        (Decimal("250000"), Decimal("0")),
        (Decimal("350000"), Decimal("15000")),
        (Decimal("400000"), Decimal("22500")),
        (Decimal("750000"), Decimal("92500")),
        (Decimal("2000000"), Decimal("402500")),
        (Decimal("8000000"), Decimal("2202500")),
        (Decimal("10000000"), Decimal("2902500")),
    ])
    def test_individual_income_tax(self, rules, amount, expected):
        """Test graduated income tax at representative amounts."""
        assert evaluate(amount, rules.income_tax) == expected

    def test_boundary_belongs_to_upper_bracket(self, rules):
        """Test an amount on a boundary uses the upper bracket."""
        bracket = find_bracket(Decimal("250000"), rules.income_tax)

        assert bracket.min == Decimal("250000")
        assert bracket.rate == Decimal("0.15")

    def test_just_below_boundary(self, rules):
        """Test an amount just below a boundary uses the lower bracket."""
        bracket = find_bracket(Decimal("249999.99"), rules.income_tax)

        assert bracket.rate == Decimal("0")

    def test_unbounded_last_bracket(self, rules):
        """Test very large amounts fall into the last bracket."""
        bracket = find_bracket(Decimal("999999999"), rules.income_tax)

        assert bracket.max is None
        assert bracket.rate == Decimal("0.35")

    def test_negative_amount_clamped(self, rules):
        """Test negative taxable income is treated as zero."""
        assert evaluate(Decimal("-5000"), rules.income_tax) == Decimal("0")
        assert find_bracket(Decimal("-5000"), rules.income_tax).min == Decimal("0")

    def test_accepts_int_and_float(self, rules):
        """Test plain numbers are coerced to Decimal."""
        assert evaluate(350000, rules.income_tax) == Decimal("15000")
        assert evaluate(350000.0, rules.income_tax) == Decimal("15000")

    def test_bracket_continuity(self, rules):
        """Test every boundary is shared and evaluates with the upper bracket."""
        brackets = rules.income_tax.brackets

        for lower, upper in zip(brackets, brackets[1:]):
            assert lower.max == upper.min
            assert find_bracket(upper.min, brackets) is upper
            assert evaluate(upper.min, brackets) == upper.base_amount

    def test_no_jump_at_boundaries(self, rules):
        """Test the lower bracket formula meets the upper base amount."""
        brackets = rules.income_tax.brackets

        for lower, upper in zip(brackets, brackets[1:]):
            lower_at_max = lower.base_amount + lower.rate * (lower.max - lower.min)
            assert lower_at_max == upper.base_amount

    def test_monotonic(self, rules):
        """Test tax never decreases as income grows."""
        amounts = [Decimal(n) * 12500 for n in range(0, 800)]
        taxes = [evaluate(a, rules.income_tax) for a in amounts]

        assert all(a <= b for a, b in zip(taxes, taxes[1:]))

    def test_calculate_income_tax(self, rules):
        """Test the income tax entry point wraps the individual table."""
        assert calculate_income_tax(Decimal("1000000"), rules) == Decimal("152500")
        assert calculate_income_tax(1000000) == Decimal("152500")


class TestRulesLoading:
    """Tests for TaxRules loading and bracket validation."""

    def test_load_shipped_rules(self, rules):
        """Test the shipped rules load and carry policy constants."""
        assert len(rules.income_tax) == 6
        assert rules.income_tax.effective_date == "2023-01-01"
        assert rules.vat_rate == Decimal("0.12")
        assert rules.percentage_tax_rate == Decimal("0.03")
        assert rules.vat_threshold == Decimal("3000000")
        assert rules.flat_tax_threshold == Decimal("3000000")
        assert rules.individual_exemption == Decimal("250000")

    def test_get_rules_cached(self):
        """Test the process-wide rules are loaded once."""
        assert get_rules() is get_rules()

    def test_missing_file(self, tmp_path):
        """Test a missing rules file raises."""
        with pytest.raises(TaxRulesError, match="not found"):
            TaxRules.load(tmp_path)

    def test_env_override(self, tmp_path, monkeypatch, raw_rules):
        """Test TAX_RULES_DIR selects the rules file."""
        raw_rules["vat"]["standard_rate"] = 0.10
        (tmp_path / "tax_rules.yaml").write_text(yaml.safe_dump(raw_rules), encoding="utf-8")
        monkeypatch.setenv("TAX_RULES_DIR", str(tmp_path))

        rules = TaxRules.load()

        assert rules.vat_rate == Decimal("0.1")
        assert rules.source == tmp_path / "tax_rules.yaml"

    def test_invalid_yaml(self, tmp_path):
        """Test unparsable YAML raises TaxRulesError."""
        (tmp_path / "tax_rules.yaml").write_text("income_tax: [unclosed", encoding="utf-8")

        with pytest.raises(TaxRulesError):
            TaxRules.load(tmp_path)

    def test_missing_key(self, raw_rules):
        """Test a missing section raises TaxRulesError."""
        del raw_rules["freelancer"]

        with pytest.raises(TaxRulesError, match="freelancer"):
            TaxRules.from_dict(raw_rules)

    def test_gap_between_brackets(self, raw_rules):
        """Test a gap between brackets is rejected."""
        raw_rules["income_tax"]["brackets"][1]["min"] = 260000

        with pytest.raises(TaxRulesError, match="gap or overlap"):
            TaxRules.from_dict(raw_rules)

    def test_bounded_last_bracket(self):
        """Test the last bracket must be unbounded."""
        table = {
            "name": "test",
            "brackets": [
                {"min": 0, "max": 100, "rate": 0, "base_amount": 0},
                {"min": 100, "max": 200, "rate": 0.1, "base_amount": 0},
            ],
        }
        with pytest.raises(TaxRulesError, match="unbounded"):
            parse_bracket_table(table)

    def test_first_bracket_starts_at_zero(self):
        """Test tables must start at zero."""
        table = {"name": "test", "brackets": [{"min": 10, "rate": 0.1, "base_amount": 0}]}

        with pytest.raises(TaxRulesError, match="start at 0"):
            parse_bracket_table(table)

    def test_rate_out_of_range(self):
        """Test rates above 100% are rejected."""
        table = {"name": "test", "brackets": [{"min": 0, "rate": 1.5, "base_amount": 0}]}

        with pytest.raises(TaxRulesError, match="out of range"):
            parse_bracket_table(table)

    def test_empty_table(self):
        """Test an empty table is rejected."""
        with pytest.raises(TaxRulesError, match="no brackets"):
            parse_bracket_table({"name": "test", "brackets": []})

    def test_table_to_dict(self, rules):
        """Test dictionary conversion of a table."""
        data = rules.income_tax.to_dict()

        assert data["effective_date"] == "2023-01-01"
        assert data["brackets"][0]["max"] == 250000.0
        assert data["brackets"][-1]["max"] is None

    def test_directory_loaded(self, rules):
        """Test the reference rate directory is parsed."""
        by_type = {entry.type: entry for entry in rules.directory}

        assert by_type["Corporate Income Tax"].category == "Income Tax"
        assert by_type["Corporate Income Tax"].rates[0].rate == Decimal("0.25")
        assert by_type["Donor's Tax"].rates[1].min == Decimal("250000")
        assert by_type["Minimum Corporate Income Tax (MCIT)"].rates[0].max is None

    def test_directory_optional(self, raw_rules):
        """Test rules without a directory section still load."""
        del raw_rules["directory"]

        assert TaxRules.from_dict(raw_rules).directory == ()
