"""Applicant and loan values supplied by the form collaborator."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from ..engine.emi import calculate_emi
from ..exceptions import TemplateError


@dataclass(slots=True)
class CustomField:
    """User-defined ``{key, value}`` pair, bound to ``{{custom:<label>}}``."""
    label: str
    value: str = ""


@dataclass(slots=True)
class FormValues:
    """Flat applicant/loan record.

    Numeric fields stay strings: the pipeline formats them and the
    upstream validator owns parsing errors.
    """
    name: str = ""
    loan_amount: str = ""
    interest_rate: str = ""
    year: str = ""
    monthly_emi: str = ""
    processing_charge: str = ""
    bank_account_number: str = ""
    ifsc_code: str = ""
    upi_id: str = ""
    loan_type: str = ""
    mobile: str = ""
    address: str = ""
    pan_number: str = ""
    custom_fields: List[CustomField] = field(default_factory=list)

    def with_emi(self) -> "FormValues":
        """Return a copy with ``monthly_emi`` computed from amount, rate and tenure."""
        emi = calculate_emi(self.loan_amount, self.interest_rate, self.year)
        return dataclasses.replace(self, monthly_emi=str(emi) if emi > 0 else "")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FormValues":
        """Build values from a mapping using camelCase or snake_case keys."""
        if not isinstance(data, Mapping):
            raise TemplateError("Form values must be a mapping", type(data).__name__)

        kwargs = {}
        for f in dataclasses.fields(cls):
            if f.name == "custom_fields":
                continue
            value = _lookup(data, f.name)
            if value is not None:
                kwargs[f.name] = str(value)

        custom: List[CustomField] = []
        for item in _lookup(data, "custom_fields") or []:
            if not isinstance(item, Mapping):
                continue
            label = item.get("label") or item.get("key")
            if not label:
                continue
            value = item.get("value")
            custom.append(CustomField(label=str(label), value="" if value is None else str(value)))
        return cls(custom_fields=custom, **kwargs)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _lookup(data: Mapping[str, Any], snake_name: str) -> Optional[Any]:
    if snake_name in data:
        return data[snake_name]
    camel = _camel(snake_name)
    if camel in data:
        return data[camel]
    for alias in _ALIASES.get(snake_name, ()):
        if alias in data:
            return data[alias]
    return None


_ALIASES = {
    "year": ("tenure", "tenureYears", "tenure_years"),
    "monthly_emi": ("emi",),
}
