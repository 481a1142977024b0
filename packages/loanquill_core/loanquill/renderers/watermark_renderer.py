"""
Watermark renderer for page surfaces.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from PIL import Image

from ..engine.geometry import Point, Size
from ..engine.positions import resolve_absolute, resolve_relative
from ..engine.surface import Z_WATERMARK, PageSurface, parse_color
from ..models.template import WatermarkOverlay

logger = logging.getLogger(__name__)

# Image watermarks never exceed this share of the page width
MAX_IMAGE_WIDTH_RATIO = 0.7


class WatermarkRenderer:
    """Renderer for the watermark layer (z1)."""

    def __init__(self, surface: PageSurface):
        self.surface = surface

    def render_text(self, watermark: WatermarkOverlay) -> bool:
        """
        Render rotated, semi-transparent watermark text centred on the page.

        Args:
            watermark: Watermark settings (text, size, rotation, colour, opacity)

        Returns:
            True if something was drawn
        """
        text = watermark.text.strip()
        if not text or watermark.opacity <= 0:
            return False

        font_size = max(1.0, watermark.size)
        font = self.surface.metrics.font_manager.pil_font(font_size, bold=True)
        text_width = self.surface.measure(text, font_size, bold=True)
        layer, draw = self.surface.new_layer(Size(text_width + font_size, font_size * 1.6))
        rgb = parse_color(watermark.color, "#cccccc")
        draw.text((font_size / 2, font_size * 0.3), text, font=font, fill=rgb + (255,))

        # Pillow rotates counter-clockwise; rotation is clockwise on the page
        rotated = layer.rotate(-watermark.rotation, expand=True, resample=Image.BICUBIC)
        position = Point(
            (self.surface.width - rotated.width) / 2,
            (self.surface.height - rotated.height) / 2,
        )
        self.surface.paste_image(rotated, position, opacity=watermark.opacity, z=Z_WATERMARK, layer="watermark")
        return True

    def render_image(self, watermark: WatermarkOverlay, image: Image.Image) -> bool:
        """Render an image watermark at its position preset."""
        if watermark.opacity <= 0:
            return False

        max_width = self.surface.width * MAX_IMAGE_WIDTH_RATIO
        if image.width > max_width:
            height = max(1, int(round(image.height * max_width / image.width)))
            image = image.resize((int(round(max_width)), height), Image.LANCZOS)
        rotated = image.convert("RGBA").rotate(-watermark.rotation, expand=True, resample=Image.BICUBIC)

        position = resolve_absolute(
            watermark.position,
            self.surface.size,
            Size(rotated.width, rotated.height),
        )
        self.surface.paste_image(rotated, position, opacity=watermark.opacity, z=Z_WATERMARK, layer="watermark")
        return True

    @staticmethod
    def preview_style(watermark: WatermarkOverlay) -> Optional[Dict[str, str]]:
        """CSS-like style for a live preview of the watermark, or None when inactive."""
        if not watermark.active:
            return None
        style = resolve_relative(watermark.position)
        rotate = f"rotate({watermark.rotation:g}deg)"
        style["transform"] = f"{style['transform']} {rotate}" if "transform" in style else rotate
        style["opacity"] = f"{watermark.opacity:g}"
        style["color"] = watermark.color
        style["font-size"] = f"{watermark.size:g}px"
        return style
