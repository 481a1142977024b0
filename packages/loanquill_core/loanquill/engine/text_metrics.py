"""

TextMetricsEngine - measuring text width for page layout.

Uses ReportLab metrics for the TrueType face the FontManager resolved, or
Pillow's own advance widths when its bundled font draws the text.

"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

from reportlab.pdfbase import pdfmetrics

from ..media.font_manager import FontManager

logger = logging.getLogger(__name__)


class TextMetricsEngine:
    """
    Engine for measuring text.

    Widths are memoized per (text, size, bold); layout calls measure the
    same candidate lines repeatedly while wrapping.
    """

    def __init__(self, font_manager: Optional[FontManager] = None):
        self.font_manager = font_manager or FontManager(use_system_fonts=False)
        self._cache: Dict[Tuple[str, float, bool], float] = {}

    def measure(self, text: str, font_size: float, bold: bool = False) -> float:
        """
        Measures the advance width of ``text``.

        Args:
            text: Single-line text
            font_size: Font size in layout units
            bold: Whether the bold face is used

        Returns:
            Width in layout units
        """
        if not text:
            return 0.0
        key = (text, float(font_size), bold)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        face = self.font_manager.face(bold)
        if face.is_bundled:
            width = self.font_manager.pil_length(text, font_size, bold)
        else:
            try:
                width = pdfmetrics.stringWidth(text, face.pdf_name, font_size)
            except Exception:
                # Fallback: simple estimate
                logger.debug("No metrics for %r in %s, estimating", text[:20], face.pdf_name)
                width = len(text) * font_size * 0.6
        self._cache[key] = width
        return width

    def space_width(self, font_size: float, bold: bool = False) -> float:
        return self.measure(" ", font_size, bold)
