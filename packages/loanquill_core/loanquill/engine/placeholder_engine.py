"""

Placeholder Engine - binding template text to applicant data.

Supports:
- Literal ``{{field}}`` tokens for the fixed applicant/loan fields
- ``{{custom:<label>}}`` tokens for user-defined fields
- Currency formatting with thousands grouping and two decimals
- Bracketed fallbacks (``[Loan Amount]``) for missing values

Substitution is a single pass over the input: inserted values are never
re-scanned, and tokens that are not bound are left verbatim.

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from ..models.form import FormValues
    from ..models.template import Template

logger = logging.getLogger(__name__)

TEXT = "text"
CURRENCY = "currency"
NUMBER = "number"

CUSTOM_PREFIX = "custom:"


@dataclass(frozen=True, slots=True)
class PlaceholderField:
    """A bindable placeholder and the form attribute feeding it."""
    key: str
    attribute: str
    display_name: str
    kind: str = TEXT

    @property
    def token(self) -> str:
        return "{{" + self.key + "}}"

    @property
    def fallback(self) -> str:
        return f"[{self.display_name}]"


PLACEHOLDER_FIELDS = (
    PlaceholderField("name", "name", "Name"),
    PlaceholderField("loanAmount", "loan_amount", "Loan Amount", CURRENCY),
    PlaceholderField("interestRate", "interest_rate", "Interest Rate", NUMBER),
    PlaceholderField("year", "year", "Year", NUMBER),
    PlaceholderField("monthlyEmi", "monthly_emi", "Monthly EMI", CURRENCY),
    PlaceholderField("processingCharge", "processing_charge", "Processing Charge", CURRENCY),
    PlaceholderField("bankAccountNumber", "bank_account_number", "Bank Account Number"),
    PlaceholderField("ifscCode", "ifsc_code", "IFSC Code"),
    PlaceholderField("upiId", "upi_id", "UPI ID"),
    PlaceholderField("loanType", "loan_type", "Loan Type"),
    PlaceholderField("mobile", "mobile", "Mobile"),
    PlaceholderField("address", "address", "Address"),
    PlaceholderField("panNumber", "pan_number", "PAN Number"),
)


@dataclass(slots=True)
class RenderedText:
    """Placeholder-free headline and body for one render."""
    headline: str
    body: str


def _parse_amount(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    text = str(value).strip().replace(",", "").replace("₹", "").strip()
    if not text:
        return None
    try:
        amount = Decimal(text)
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None
    return amount


def format_currency(value: Any) -> Optional[str]:
    """Format a positive amount as ``1,234,567.89``.

    Args:
        value: Number or numeric string (commas and a rupee sign are tolerated)

    Returns:
        Grouped two-decimal string, or None when the value is missing or not positive
    """
    amount = _parse_amount(value)
    if amount is None or amount <= 0:
        return None
    # Room for every integer digit plus the two decimals
    with localcontext() as ctx:
        try:
            ctx.prec = max(ctx.prec, amount.adjusted() + 4)
            amount = amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        except (InvalidOperation, ValueError):
            logger.debug("Amount %r cannot be formatted as currency", value)
            return None
    return f"{amount:,.2f}"


def _format_number(value: Any) -> Optional[str]:
    amount = _parse_amount(value)
    if amount is None or amount <= 0:
        return None
    return str(value).strip()


class PlaceholderEngine:
    """

    Engine substituting form values into template text.

    Each literal token is matched once per occurrence; replacement values
    are opaque, so a value containing ``{{name}}`` is emitted unchanged.

    """

    # Any double-brace token, used for discovery only
    PLACEHOLDER_PATTERN = re.compile(r"\{\{(?P<name>[^{}]+)\}\}")

    def __init__(self, values: "FormValues") -> None:
        self.values = values
        self._replacements = self.build_replacements()
        self._pattern = self._compile(self._replacements)

    def build_replacements(self) -> Dict[str, str]:
        """Map every bindable literal token to its formatted value or fallback."""
        replacements: Dict[str, str] = {}
        for field in PLACEHOLDER_FIELDS:
            raw = getattr(self.values, field.attribute, "")
            replacements[field.token] = self._format(field, raw)

        for custom in self.values.custom_fields:
            label = custom.label
            token = "{{" + CUSTOM_PREFIX + label + "}}"
            value = (custom.value or "").strip()
            replacements[token] = value if value else f"[{label}]"
        return replacements

    @staticmethod
    def _format(field: PlaceholderField, raw: Any) -> str:
        if field.kind == CURRENCY:
            formatted = format_currency(raw)
        elif field.kind == NUMBER:
            formatted = _format_number(raw)
        else:
            text = "" if raw is None else str(raw).strip()
            formatted = text or None

        if formatted is None:
            logger.debug("No value bound for %s, using fallback", field.token)
            return field.fallback
        return formatted

    @staticmethod
    def _compile(replacements: Dict[str, str]) -> "re.Pattern[str]":
        # Longest first so overlapping custom labels match whole tokens
        tokens = sorted(replacements, key=len, reverse=True)
        return re.compile("|".join(re.escape(token) for token in tokens))

    def fill(self, text: str) -> str:
        if not text:
            return ""
        return self._pattern.sub(lambda match: self._replacements[match.group(0)], text)

    def render(self, template: "Template") -> RenderedText:
        return RenderedText(
            headline=self.fill(template.headline or ""),
            body=self.fill(template.body or ""),
        )

    @classmethod
    def extract_placeholders(cls, text: str) -> List[str]:
        """

        Lists double-brace token names in order of first appearance.

        Args:
        text: Template text

        Returns:
        Token names without braces, known or not

        """
        seen: List[str] = []
        for match in cls.PLACEHOLDER_PATTERN.finditer(text or ""):
            name = match.group("name")
            if name not in seen:
                seen.append(name)
        return seen


def substitute(template: "Template", values: "FormValues") -> RenderedText:
    """Substitute ``values`` into the headline and body of ``template``."""
    return PlaceholderEngine(values).render(template)
