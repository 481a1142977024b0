"""Page geometry and render configuration."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from .engine.geometry import Margins, Size

# A4 at 96 DPI
PAGE_WIDTH_PX = 794
PAGE_HEIGHT_PX = 1123

# A4 in PDF points
PDF_PAGE_WIDTH_PT = 595.28
PDF_PAGE_HEIGHT_PT = 841.89


@dataclass(slots=True)
class PageConfig:
    """Fixed page geometry for one rendered document."""
    page_size: Size = field(default_factory=lambda: Size(PAGE_WIDTH_PX, PAGE_HEIGHT_PX))
    margins: Margins = field(default_factory=lambda: Margins.uniform(60.0))
    header_height: float = 80.0  # nominal band, replaced by rendered header art height
    footer_height: float = 60.0
    content_gap: float = 20.0

    @property
    def content_left(self) -> float:
        return self.margins.left

    @property
    def content_width(self) -> float:
        """Width of the text column between the left and right margins."""
        return self.page_size.width - self.margins.left - self.margins.right

    def content_top(self, header_height: Optional[float] = None) -> float:
        """First y available to body content below the header band.

        Args:
            header_height: Rendered header art height; the nominal band is used when None

        Returns:
            Top of the content area in page coordinates
        """
        band = self.header_height if header_height is None else header_height
        return band + self.content_gap

    def content_bottom(self, footer_height: Optional[float] = None) -> float:
        band = self.footer_height if footer_height is None else footer_height
        return self.page_size.height - band


@dataclass(slots=True)
class RenderOptions:
    """Options for one render request.

    Image references (``header_art``, ``footer_art``) accept data URLs,
    local file paths and http(s) URLs.
    """
    page: PageConfig = field(default_factory=PageConfig)
    jpeg_quality: int = 95
    pdf_page_size: Tuple[float, float] = (PDF_PAGE_WIDTH_PT, PDF_PAGE_HEIGHT_PT)
    header_art: Optional[str] = None
    footer_art: Optional[str] = None
    font_path: Optional[str] = None
    bold_font_path: Optional[str] = None
    use_system_fonts: bool = True
    body_font_size: float = 13.0
    headline_font_size: float = 18.0
    line_height: float = 20.0
    image_timeout: Optional[float] = None
    include_info: bool = False
    text_color: str = "#222222"
    heading_color: str = "#1a365d"
    highlight_color: str = "#fff3c4"
    rule_color: str = "#1a365d"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RenderOptions":
        """Build options from a JSON-like mapping, ignoring unknown keys."""
        known = {f.name for f in dataclasses.fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            if key not in known or key == "page":
                continue
            if key == "pdf_page_size":
                value = tuple(float(v) for v in value)
            kwargs[key] = value
        page_data = data.get("page")
        if isinstance(page_data, Mapping):
            kwargs["page"] = _page_from_mapping(page_data)
        return cls(**kwargs)


def _page_from_mapping(data: Mapping[str, Any]) -> PageConfig:
    page = PageConfig()
    if "width" in data or "height" in data:
        page.page_size = Size(
            float(data.get("width", PAGE_WIDTH_PX)),
            float(data.get("height", PAGE_HEIGHT_PX)),
        )
    if "margin" in data:
        page.margins = Margins.uniform(float(data["margin"]))
    for key in ("header_height", "footer_height", "content_gap"):
        if key in data:
            setattr(page, key, float(data[key]))
    return page
