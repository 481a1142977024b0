"""
Overlay compositor: background, watermark, header/footer art and stamps.

Each ``draw_*`` coroutine awaits one image reference and then paints its
layer. A reference that cannot be loaded leaves its layer out; the rest
of the page is still drawn.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

from PIL import Image

from ..engine.geometry import Point, Size
from ..engine.positions import resolve_absolute, resolve_relative
from ..engine.surface import Z_BACKGROUND, Z_CONTENT, Z_STAMP, PageSurface
from ..media.image_loader import ImageLoader
from ..models.template import BackgroundOverlay, FitMode, ImageOverlay, WatermarkOverlay
from .watermark_renderer import WatermarkRenderer

logger = logging.getLogger(__name__)

SIGNATORY_FONT_SIZE = 11.0
SIGNATORY_COLOR = "#222222"


def fit_image(image: Image.Image, target: Size, mode: FitMode) -> Tuple[Image.Image, Point]:
    """
    Scale ``image`` into a ``target`` box.

    Args:
        image: Source image
        target: Box to fill
        mode: cover (fill and crop), contain (fit inside, centred) or fill (stretch)

    Returns:
        Tuple (scaled image, top-left offset inside the box)
    """
    tw, th = target.as_int()
    if mode is FitMode.FILL:
        return image.resize((tw, th), Image.LANCZOS), Point(0, 0)

    if mode is FitMode.CONTAIN:
        scale = min(tw / image.width, th / image.height)
    else:
        scale = max(tw / image.width, th / image.height)
    width = max(1, int(round(image.width * scale)))
    height = max(1, int(round(image.height * scale)))
    scaled = image.resize((width, height), Image.LANCZOS)

    if mode is FitMode.CONTAIN:
        return scaled, Point((tw - width) / 2, (th - height) / 2)

    left = (width - tw) // 2
    top = (height - th) // 2
    return scaled.crop((left, top, left + tw, top + th)), Point(0, 0)


def scale_to_box(image: Image.Image, size: float) -> Image.Image:
    """Scale so the longer side equals ``size`` pixels, keeping the aspect ratio."""
    longest = max(image.width, image.height)
    scale = max(1.0, size) / longest
    return image.resize(
        (max(1, int(round(image.width * scale))), max(1, int(round(image.height * scale)))),
        Image.LANCZOS,
    )


def scale_to_width(image: Image.Image, width: float) -> Image.Image:
    height = max(1, int(round(image.height * width / image.width)))
    return image.resize((max(1, int(round(width))), height), Image.LANCZOS)


class OverlayCompositor:
    """Draws the image-backed layers of one page."""

    def __init__(self, surface: PageSurface, loader: ImageLoader):
        self.surface = surface
        self.loader = loader

    async def draw_background(self, background: BackgroundOverlay) -> bool:
        if not background.active:
            return False
        image = await self.loader.load(background.image, layer="background")
        if image is None:
            return False
        scaled, offset = fit_image(image, self.surface.size, background.fit)
        self.surface.paste_image(scaled, offset, opacity=background.opacity, z=Z_BACKGROUND, layer="background")
        return True

    async def draw_watermark(self, watermark: WatermarkOverlay) -> bool:
        """Draw the watermark; an image takes precedence over text."""
        if not watermark.active:
            return False
        renderer = WatermarkRenderer(self.surface)
        if watermark.image:
            image = await self.loader.load(watermark.image, layer="watermark")
            if image is not None:
                return renderer.render_image(watermark, image)
            if not watermark.text.strip():
                return False
        return renderer.render_text(watermark)

    async def _draw_band(self, reference: Optional[str], layer: str, at_bottom: bool) -> float:
        if not reference:
            return 0.0
        image = await self.loader.load(reference, layer=layer)
        if image is None:
            return 0.0
        scaled = scale_to_width(image, self.surface.width)
        y = self.surface.height - scaled.height if at_bottom else 0
        self.surface.paste_image(scaled, Point(0, y), z=Z_CONTENT, layer=layer)
        return float(scaled.height)

    async def draw_header_art(self, reference: Optional[str]) -> float:
        """
        Draw header art across the full page width.

        Returns:
            Rendered height in pixels, 0 when there is no art
        """
        return await self._draw_band(reference, "header", at_bottom=False)

    async def draw_footer_art(self, reference: Optional[str]) -> float:
        return await self._draw_band(reference, "footer", at_bottom=True)

    async def draw_stamp(self, overlay: ImageOverlay, layer: str) -> bool:
        """Draw a seal or signature at its preset position (z10)."""
        if not overlay.active:
            return False
        image = await self.loader.load(overlay.image, layer=layer)
        if image is None:
            return False

        scaled = scale_to_box(image, overlay.size)
        position = resolve_absolute(overlay.position, self.surface.size, Size(scaled.width, scaled.height))
        self.surface.paste_image(scaled, position, opacity=overlay.opacity / 100.0, z=Z_STAMP, layer=layer)
        self._draw_signatory(overlay, position, scaled, layer)
        return True

    def _draw_signatory(self, overlay: ImageOverlay, position: Point, image: Image.Image, layer: str) -> None:
        lines = [text for text in (overlay.signatory_name, overlay.signatory_title) if text.strip()]
        if not lines:
            return
        y = position.y + image.height + 4
        line_height = SIGNATORY_FONT_SIZE + 4
        # Keep the caption on the page when the stamp sits at the bottom edge
        if y + line_height * len(lines) > self.surface.height:
            y = max(0.0, position.y - line_height * len(lines) - 4)
        for index, text in enumerate(lines):
            width = self.surface.measure(text, SIGNATORY_FONT_SIZE, bold=index == 0)
            x = position.x + (image.width - width) / 2
            x = max(0.0, min(x, self.surface.width - width))
            self.surface.draw_text(
                x, y, text, SIGNATORY_FONT_SIZE,
                bold=index == 0, color=SIGNATORY_COLOR, z=Z_STAMP, layer=f"{layer}_caption",
            )
            y += line_height

    @staticmethod
    def preview_styles(seal: ImageOverlay, signature: ImageOverlay) -> Dict[str, Dict[str, str]]:
        """CSS-like placement for the active stamps, used by live previews."""
        styles: Dict[str, Dict[str, str]] = {}
        for name, overlay in (("seal", seal), ("signature", signature)):
            if overlay.active:
                style = resolve_relative(overlay.position)
                style["width"] = f"{overlay.size:g}px"
                style["opacity"] = f"{overlay.opacity / 100:g}"
                styles[name] = style
        return styles
