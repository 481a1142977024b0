"""Page surface: the single raster target of one render.

Every drawing call is recorded as a ``DrawOp`` with its z-layer. Layers
must be drawn in non-decreasing z order; the surface rejects a call that
would paint beneath something already drawn.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from PIL import Image, ImageColor, ImageDraw

from ..exceptions import RenderingError
from .geometry import Point, Rect, Size
from .text_metrics import TextMetricsEngine

logger = logging.getLogger(__name__)

Z_BACKGROUND = 0
Z_WATERMARK = 1
Z_CONTENT = 2
Z_STAMP = 10


@dataclass(slots=True)
class DrawOp:
    """Record of one drawing call."""
    kind: str  # "clear", "text", "rect", "line", "image"
    z: int
    layer: str = ""
    text: str = ""
    bold: bool = False
    highlighted: bool = False
    box: Optional[Rect] = None


def parse_color(value: str, default: str = "#000000") -> Tuple[int, int, int]:
    try:
        return ImageColor.getrgb(value)[:3]
    except (ValueError, AttributeError):
        return ImageColor.getrgb(default)[:3]


class PageSurface:
    """Fixed-size RGB page with recorded, z-ordered drawing operations."""

    def __init__(self, size: Size, metrics: TextMetricsEngine):
        self.size = size
        self.metrics = metrics
        self.image = Image.new("RGB", size.as_int(), "white")
        self._draw = ImageDraw.Draw(self.image)
        self.ops: List[DrawOp] = []
        self._z = Z_BACKGROUND

    @property
    def width(self) -> float:
        return self.size.width

    @property
    def height(self) -> float:
        return self.size.height

    def _enter(self, z: int, kind: str) -> None:
        if z < self._z:
            raise RenderingError(
                "Layer drawn out of order",
                f"{kind} at z={z} after z={self._z}",
            )
        self._z = z

    def _record(self, op: DrawOp) -> None:
        self.ops.append(op)

    def measure(self, text: str, font_size: float, bold: bool = False) -> float:
        return self.metrics.measure(text, font_size, bold)

    def clear(self, color: str = "#ffffff") -> None:
        """Fill the page with an opaque colour and reset the layer order."""
        self._draw.rectangle([(0, 0), self.image.size], fill=parse_color(color, "#ffffff"))
        self.ops.clear()
        self._z = Z_BACKGROUND
        self._record(DrawOp("clear", Z_BACKGROUND, layer="page"))

    def draw_text(
        self,
        x: float,
        y: float,
        text: str,
        font_size: float,
        *,
        bold: bool = False,
        color: str = "#222222",
        z: int = Z_CONTENT,
        layer: str = "body",
        highlighted: bool = False,
    ) -> float:
        """Draw single-line text with its top-left at (x, y).

        Returns:
            Measured width of the text
        """
        self._enter(z, "text")
        font = self.metrics.font_manager.pil_font(font_size, bold)
        self._draw.text((x, y), text, font=font, fill=parse_color(color))
        width = self.measure(text, font_size, bold)
        self._record(DrawOp(
            "text", z, layer=layer, text=text, bold=bold, highlighted=highlighted,
            box=Rect(x, y, width, font_size),
        ))
        return width

    def fill_rect(
        self,
        box: Rect,
        color: str,
        *,
        outline: Optional[str] = None,
        outline_width: int = 1,
        radius: float = 0,
        z: int = Z_CONTENT,
        layer: str = "body",
    ) -> None:
        self._enter(z, "rect")
        coords = [(box.left, box.top), (box.right, box.bottom)]
        fill = parse_color(color) if color else None
        line = parse_color(outline) if outline else None
        if radius:
            self._draw.rounded_rectangle(coords, radius=radius, fill=fill, outline=line, width=outline_width)
        else:
            self._draw.rectangle(coords, fill=fill, outline=line, width=outline_width)
        self._record(DrawOp("rect", z, layer=layer, box=box))

    def draw_line(
        self,
        start: Point,
        end: Point,
        color: str,
        width: int = 1,
        *,
        z: int = Z_CONTENT,
        layer: str = "body",
    ) -> None:
        self._enter(z, "line")
        self._draw.line([(start.x, start.y), (end.x, end.y)], fill=parse_color(color), width=width)
        self._record(DrawOp(
            "line", z, layer=layer,
            box=Rect(min(start.x, end.x), min(start.y, end.y), abs(end.x - start.x), abs(end.y - start.y)),
        ))

    def paste_image(
        self,
        image: Image.Image,
        position: Point,
        *,
        opacity: float = 1.0,
        z: int = Z_CONTENT,
        layer: str = "image",
    ) -> None:
        """Alpha-composite ``image`` (already sized) with its top-left at ``position``.

        Args:
            image: Image at its final pixel size
            position: Top-left corner on the page
            opacity: Multiplier applied to the image alpha, 0..1
            z: Layer index
            layer: Name recorded on the operation
        """
        self._enter(z, "image")
        rgba = image.convert("RGBA")
        opacity = max(0.0, min(1.0, opacity))
        if opacity < 1.0:
            alpha = rgba.getchannel("A").point(lambda a: int(round(a * opacity)))
            rgba.putalpha(alpha)
        x, y = position.as_int()
        self.image.paste(rgba, (x, y), rgba)
        self._record(DrawOp("image", z, layer=layer, box=Rect(x, y, rgba.width, rgba.height)))

    def new_layer(self, size: Size) -> Tuple[Image.Image, ImageDraw.ImageDraw]:
        """Transparent scratch image for content that is rotated before pasting."""
        layer = Image.new("RGBA", size.as_int(), (0, 0, 0, 0))
        return layer, ImageDraw.Draw(layer)

    def to_image(self) -> Image.Image:
        return self.image.copy()

    def to_png_bytes(self) -> bytes:
        buffer = io.BytesIO()
        self.image.save(buffer, format="PNG")
        return buffer.getvalue()
