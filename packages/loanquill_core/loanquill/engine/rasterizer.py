"""
Document rasterizer.

Draws one page in fixed layer order:

    white page -> background (z0) -> watermark (z1) -> header art, footer art,
    headline and body (z2) -> seal, signature (z10)

Image-backed layers are awaited one after another, so the order of
drawing never depends on which image loads first.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from ..config import RenderOptions
from ..media.font_manager import FontManager
from ..media.image_loader import ImageLoader
from ..models.form import FormValues
from ..models.template import Template
from ..renderers.body_renderer import BodyRenderer, BodyStyle, rules_for
from ..renderers.overlay_compositor import OverlayCompositor
from .geometry import Point
from .placeholder_engine import substitute
from .surface import PageSurface
from .text_metrics import TextMetricsEngine

logger = logging.getLogger(__name__)

HEADLINE_RULE_GAP = 6.0
HEADLINE_SPACING = 18.0


class DocumentRasterizer:
    """Renders a template and its form values onto a fresh page surface."""

    def __init__(
        self,
        options: Optional[RenderOptions] = None,
        loader: Optional[ImageLoader] = None,
        font_manager: Optional[FontManager] = None,
    ):
        self.options = options or RenderOptions()
        self._loader = loader
        self.font_manager = font_manager or FontManager(
            font_path=self.options.font_path,
            bold_font_path=self.options.bold_font_path,
            use_system_fonts=self.options.use_system_fonts,
        )

    @asynccontextmanager
    async def _loader_scope(self) -> AsyncIterator[ImageLoader]:
        if self._loader is not None:
            yield self._loader
            return
        async with ImageLoader(timeout=self.options.image_timeout) as loader:
            yield loader

    def body_style(self) -> BodyStyle:
        options = self.options
        return BodyStyle(
            font_size=options.body_font_size,
            line_height=options.line_height,
            heading_font_size=options.body_font_size + 1,
            text_color=options.text_color,
            heading_color=options.heading_color,
            highlight_color=options.highlight_color,
            rule_color=options.rule_color,
        )

    async def render(self, template: Template, values: FormValues) -> PageSurface:
        """
        Rasterizes one page.

        Args:
            template: Normalized template
            values: Form values (with any derived EMI already filled in)

        Returns:
            The drawn page surface
        """
        page = self.options.page
        surface = PageSurface(page.page_size, TextMetricsEngine(self.font_manager))
        surface.clear("#ffffff")

        async with self._loader_scope() as loader:
            compositor = OverlayCompositor(surface, loader)
            await compositor.draw_background(template.background)
            await compositor.draw_watermark(template.watermark)
            header_height = await compositor.draw_header_art(self.options.header_art)
            footer_height = await compositor.draw_footer_art(self.options.footer_art)

            rendered = substitute(template, values)
            y = page.content_top(header_height or None)
            y = self._draw_headline(surface, rendered.headline, y)

            renderer = BodyRenderer(surface, self.body_style(), rules_for(template))
            y = renderer.render(rendered.body, page.content_left, y, page.content_width)

            bottom = page.content_bottom(footer_height or None)
            if y > bottom:
                logger.warning(
                    "Body of %r overflows the content area by %.0fpx; it is clipped to one page",
                    template.name, y - bottom,
                )

            await compositor.draw_stamp(template.seal, "seal")
            await compositor.draw_stamp(template.signature, "signature")

        logger.debug("Rendered %r with %d drawing operations", template.name, len(surface.ops))
        return surface

    def _draw_headline(self, surface: PageSurface, headline: str, y: float) -> float:
        text = headline.strip()
        if not text:
            return y
        page = self.options.page
        size = self.options.headline_font_size
        width = surface.measure(text, size, bold=True)
        x = page.content_left + max(0.0, (page.content_width - width) / 2)
        surface.draw_text(x, y, text, size, bold=True, color=self.options.heading_color, layer="headline")

        rule_y = y + size + HEADLINE_RULE_GAP
        surface.draw_line(
            Point(page.content_left, rule_y),
            Point(page.content_left + page.content_width, rule_y),
            self.options.rule_color,
            2,
            layer="headline",
        )
        return rule_y + HEADLINE_SPACING
