"""Rendering engine: substitution, layout, rasterization and PDF assembly."""

from .geometry import Margins, Point, Rect, Size
from .placeholder_engine import PlaceholderEngine, RenderedText, format_currency, substitute
from .positions import PositionPreset, resolve_absolute, resolve_relative
from .emi import calculate_emi

__all__ = [
    "Margins",
    "Point",
    "Rect",
    "Size",
    "PlaceholderEngine",
    "RenderedText",
    "format_currency",
    "substitute",
    "PositionPreset",
    "resolve_absolute",
    "resolve_relative",
    "calculate_emi",
]
