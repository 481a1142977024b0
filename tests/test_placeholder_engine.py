"""
Tests for PlaceholderEngine.

Tests currency formatting, fallbacks, custom fields and single-pass substitution.
"""

import pytest

from loanquill.engine.placeholder_engine import (
    PLACEHOLDER_FIELDS,
    PlaceholderEngine,
    format_currency,
    substitute,
)
from loanquill.models.form import CustomField, FormValues
from loanquill.models.template import Template


class TestCurrencyFormatting:
    """Test currency formatting."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("10000", "10,000.00"),
            ("1234567.891", "1,234,567.89"),
            ("2.005", "2.01"),
            ("₹1,000", "1,000.00"),
            (2500, "2,500.00"),
        ],
    )
    def test_positive_amounts(self, raw, expected):
        assert format_currency(raw) == expected

    @pytest.mark.parametrize("raw", ["", "0", "-5", "abc", None, "NaN"])
    def test_missing_or_invalid_amounts(self, raw):
        assert format_currency(raw) is None

    def test_amount_wider_than_default_precision(self):
        formatted = format_currency("12345678901234567890123456789")
        assert formatted == "12,345,678,901,234,567,890,123,456,789.00"

    def test_exponent_notation(self):
        assert format_currency("1e30") == "1," + ",".join(["000"] * 10) + ".00"

    def test_unrepresentable_amount_falls_back(self):
        assert format_currency("1e1000000") is None


class TestSubstitution:
    """Test substitution into templates."""

    def test_fallback_and_currency(self):
        """A missing name falls back, an amount is grouped with two decimals."""
        template = Template(headline="HI {{name}}", body="Amount: ₹{{loanAmount}}")
        rendered = substitute(template, FormValues(loan_amount="10000"))

        assert rendered.headline == "HI [Name]"
        assert rendered.body == "Amount: ₹10,000.00"

    def test_all_known_tokens_replaced(self, form_values):
        body = " ".join(field.token for field in PLACEHOLDER_FIELDS)
        rendered = substitute(Template(body=body), form_values)

        for field in PLACEHOLDER_FIELDS:
            assert field.token not in rendered.body

    def test_huge_amount_does_not_raise(self):
        template = Template(body="Amount: {{loanAmount}}")
        rendered = substitute(template, FormValues(loan_amount="12345678901234567890123456789"))
        assert rendered.body == "Amount: 12,345,678,901,234,567,890,123,456,789.00"

    def test_derived_emi_is_grouped_currency(self):
        """500000 at 8.5% over 5 years amortizes to 10,258.27 a month."""
        values = FormValues(loan_amount="500000", interest_rate="8.5", year="5").with_emi()
        rendered = substitute(Template(body="EMI: ₹{{monthlyEmi}}"), values)
        assert rendered.body == "EMI: ₹10,258.27"

    def test_every_occurrence_replaced(self, form_values):
        rendered = substitute(Template(body="{{name}} and {{name}}"), form_values)
        assert rendered.body == "Asha Rao and Asha Rao"

    def test_inserted_values_are_not_rescanned(self):
        """A value that looks like a token is emitted literally."""
        values = FormValues(name="{{loanAmount}}", loan_amount="100")
        rendered = substitute(Template(body="Dear {{name}}, ₹{{loanAmount}}"), values)
        assert rendered.body == "Dear {{loanAmount}}, ₹100.00"

    def test_unknown_tokens_left_verbatim(self, form_values):
        rendered = substitute(Template(body="Ref {{reference}} for {{name}}"), form_values)
        assert rendered.body == "Ref {{reference}} for Asha Rao"

    def test_numeric_fields(self):
        values = FormValues(interest_rate="8.5", year="0")
        rendered = substitute(Template(body="{{interestRate}}% for {{year}} years"), values)
        assert rendered.body == "8.5% for [Year] years"

    def test_blank_text_value_uses_fallback(self):
        rendered = substitute(Template(body="IFSC: {{ifscCode}}"), FormValues(ifsc_code="   "))
        assert rendered.body == "IFSC: [IFSC Code]"

    def test_custom_fields(self):
        values = FormValues(custom_fields=[CustomField("Branch", "Pune"), CustomField("Agent", "")])
        rendered = substitute(Template(body="{{custom:Branch}} / {{custom:Agent}}"), values)
        assert rendered.body == "Pune / [Agent]"

    def test_overlapping_custom_labels(self):
        values = FormValues(custom_fields=[CustomField("Ref", "A"), CustomField("Ref No", "B")])
        rendered = substitute(Template(body="{{custom:Ref No}} {{custom:Ref}}"), values)
        assert rendered.body == "B A"

    def test_empty_template(self, form_values):
        rendered = substitute(Template(), form_values)
        assert rendered.headline == ""
        assert rendered.body == ""


class TestPlaceholderExtraction:
    """Test placeholder discovery."""

    def test_order_of_first_appearance(self):
        text = "{{name}} {{loanAmount}} {{name}} {{custom:Branch}} {{unknown}}"
        assert PlaceholderEngine.extract_placeholders(text) == [
            "name", "loanAmount", "custom:Branch", "unknown",
        ]

    def test_no_placeholders(self):
        assert PlaceholderEngine.extract_placeholders("plain text") == []
        assert PlaceholderEngine.extract_placeholders("") == []

    def test_replacements_include_custom_tokens(self, form_values):
        replacements = PlaceholderEngine(form_values).build_replacements()
        assert replacements["{{custom:Branch}}"] == "Pune"
        assert replacements["{{loanAmount}}"] == "500,000.00"
