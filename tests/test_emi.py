"""
Tests for EMI calculation.
"""

from decimal import Decimal

import pytest

from loanquill.engine.emi import calculate_emi
from loanquill.models.form import FormValues


class TestCalculateEmi:
    """Test the amortization formula."""

    def test_known_value(self):
        assert calculate_emi(100000, 12, 1) == Decimal("8884.88")

    def test_zero_rate_divides_evenly(self):
        assert calculate_emi("120000", "0", "1") == Decimal("10000.00")

    def test_string_inputs(self):
        assert calculate_emi("100000", "12", "1") == calculate_emi(100000, 12.0, 1)

    def test_two_decimal_places(self):
        assert calculate_emi(500000, 10.5, 5).as_tuple().exponent == -2

    def test_five_year_loan(self):
        assert calculate_emi("500000", "8.5", "5") == Decimal("10258.27")

    def test_principal_wider_than_default_precision(self):
        emi = calculate_emi("1e30", "12", "1")
        assert emi > Decimal("1e28")
        assert emi.as_tuple().exponent == -2

    @pytest.mark.parametrize("principal", ["NaN", "Infinity", "-Infinity"])
    def test_unusable_principal_yields_zero(self, principal):
        assert calculate_emi(principal, 10, 5) == Decimal("0.00")

    @pytest.mark.parametrize(
        "principal, rate, years",
        [(0, 10, 5), (-1, 10, 5), (1000, -1, 5), (1000, 10, 0), ("abc", 10, 5), (1000, 10, "")],
    )
    def test_invalid_inputs_yield_zero(self, principal, rate, years):
        assert calculate_emi(principal, rate, years) == Decimal("0.00")


class TestWithEmi:
    """Test deriving the EMI on form values."""

    def test_fills_monthly_emi(self):
        values = FormValues(loan_amount="100000", interest_rate="12", year="1").with_emi()
        assert values.monthly_emi == "8884.88"

    def test_leaves_original_untouched(self):
        values = FormValues(loan_amount="100000", interest_rate="12", year="1")
        values.with_emi()
        assert values.monthly_emi == ""

    def test_missing_inputs_leave_emi_blank(self):
        assert FormValues(loan_amount="100000").with_emi().monthly_emi == ""
