"""Layer renderers for the page surface."""

from .body_renderer import (
    APPROVAL_LETTER_RULES,
    GENERIC_RULES,
    BodyRenderer,
    BodyStyle,
    LineRule,
    rules_for,
)
from .overlay_compositor import OverlayCompositor, fit_image
from .watermark_renderer import WatermarkRenderer

__all__ = [
    "APPROVAL_LETTER_RULES",
    "GENERIC_RULES",
    "BodyRenderer",
    "BodyStyle",
    "LineRule",
    "rules_for",
    "OverlayCompositor",
    "fit_image",
    "WatermarkRenderer",
]
