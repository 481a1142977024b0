"""
Font manager for rendered pages.

Resolves one regular and one bold face, registers TrueType faces with
ReportLab so text is measured with the same font that Pillow draws, and
caches sized Pillow fonts.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from PIL import ImageFont
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont

logger = logging.getLogger(__name__)

# Looked up by name through Pillow's font search path
SYSTEM_FONT_CANDIDATES = {
    False: ("DejaVuSans.ttf", "LiberationSans-Regular.ttf", "Arial.ttf", "arial.ttf"),
    True: ("DejaVuSans-Bold.ttf", "LiberationSans-Bold.ttf", "Arial Bold.ttf", "arialbd.ttf"),
}


@dataclass(frozen=True, slots=True)
class FontFace:
    """A resolved face: the ReportLab name and TTF path, both None for Pillow's bundled font."""
    pdf_name: Optional[str] = None
    path: Optional[str] = None

    @property
    def is_bundled(self) -> bool:
        return self.path is None


class FontManager:
    """
    Manages the two faces used on a page.

    Without a usable TrueType file, Pillow's bundled default font both draws
    and measures the text, so layout never drifts from the drawn glyphs.
    """

    def __init__(
        self,
        font_path: Optional[str] = None,
        bold_font_path: Optional[str] = None,
        use_system_fonts: bool = True,
    ):
        self.use_system_fonts = use_system_fonts
        self._paths = {False: font_path, True: bold_font_path or font_path}
        self._faces: Dict[bool, FontFace] = {}
        self._pil_fonts: Dict[Tuple[int, bool], ImageFont.ImageFont] = {}

    def face(self, bold: bool = False) -> FontFace:
        if bold not in self._faces:
            self._faces[bold] = self._resolve(bold)
        return self._faces[bold]

    def _resolve(self, bold: bool) -> FontFace:
        candidates = []
        if self._paths[bold]:
            candidates.append(self._paths[bold])
        if self.use_system_fonts:
            candidates.extend(SYSTEM_FONT_CANDIDATES[bold])

        for candidate in candidates:
            path = self._locate(candidate)
            if path is None:
                continue
            pdf_name = self._register(path, bold)
            if pdf_name:
                logger.debug("Using font %s for %s text", path, "bold" if bold else "regular")
                return FontFace(pdf_name=pdf_name, path=path)

        kind = "bold" if bold else "regular"
        if candidates:
            logger.warning("No usable TrueType font for %s text; using Pillow's bundled font", kind)
        else:
            logger.debug("Using Pillow's bundled font for %s text", kind)
        return FontFace()

    @staticmethod
    def _locate(candidate: str) -> Optional[str]:
        try:
            font = ImageFont.truetype(candidate, 12)
        except OSError:
            return None
        return getattr(font, "path", None) or candidate

    @staticmethod
    def _register(path: str, bold: bool) -> Optional[str]:
        pdf_name = f"LoanQuill-{'Bold' if bold else 'Regular'}-{hashlib.md5(path.encode('utf-8')).hexdigest()[:8]}"
        if pdf_name in pdfmetrics.getRegisteredFontNames():
            return pdf_name
        try:
            pdfmetrics.registerFont(TTFont(pdf_name, path))
        except (TTFError, OSError) as exc:
            logger.warning("Font %s cannot be used for metrics: %s", path, exc)
            return None
        return pdf_name

    def pil_font(self, size: float, bold: bool = False) -> ImageFont.ImageFont:
        """Sized Pillow font for drawing."""
        px = max(1, int(round(size)))
        key = (px, bold)
        if key not in self._pil_fonts:
            face = self.face(bold)
            if face.path:
                self._pil_fonts[key] = ImageFont.truetype(face.path, px)
            else:
                self._pil_fonts[key] = ImageFont.load_default(size=px)
        return self._pil_fonts[key]

    def pil_length(self, text: str, size: float, bold: bool = False) -> float:
        """Advance width of ``text`` as Pillow draws it, scaled to the fractional ``size``."""
        px = max(1, int(round(size)))
        return self.pil_font(size, bold).getlength(text) * size / px
