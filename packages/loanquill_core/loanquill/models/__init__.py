"""Data model: templates and form values."""

from .form import CustomField, FormValues
from .template import (
    APPROVAL_LETTER,
    BackgroundOverlay,
    FitMode,
    ImageOverlay,
    Template,
    WatermarkOverlay,
    normalize_template,
)

__all__ = [
    "CustomField",
    "FormValues",
    "APPROVAL_LETTER",
    "BackgroundOverlay",
    "FitMode",
    "ImageOverlay",
    "Template",
    "WatermarkOverlay",
    "normalize_template",
]
