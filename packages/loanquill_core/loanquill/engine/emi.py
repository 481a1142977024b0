"""Monthly installment (EMI) calculation."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Union

Number = Union[int, float, str, Decimal]

TWO_PLACES = Decimal("0.01")


def _to_decimal(value: Number) -> Decimal:
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal(0)
    return amount if amount.is_finite() else Decimal(0)


def calculate_emi(principal: Number, annual_rate: Number, tenure_years: Number) -> Decimal:
    """Standard amortization: ``P * r * (1 + r)**n / ((1 + r)**n - 1)``.

    ``r`` is the monthly rate (annual percentage / 12 / 100) and ``n`` the
    number of months. Non-positive or unparsable inputs yield zero.
    """
    p = _to_decimal(principal)
    rate = _to_decimal(annual_rate)
    years = _to_decimal(tenure_years)
    if p <= 0 or rate < 0 or years <= 0:
        return Decimal("0.00")

    months = int(years * 12)
    if months <= 0:
        return Decimal("0.00")
    r = rate / Decimal(1200)
    if r == 0:
        return _round(p / months)

    try:
        growth = (1 + r) ** months
        emi = p * r * growth / (growth - 1)
    except ArithmeticError:
        return Decimal("0.00")
    return _round(emi)


def _round(amount: Decimal) -> Decimal:
    """Round half-up to two places; amounts too large to represent yield zero."""
    with localcontext() as ctx:
        try:
            ctx.prec = max(ctx.prec, amount.adjusted() + 4)
            return amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
        except (InvalidOperation, ValueError):
            return Decimal("0.00")
