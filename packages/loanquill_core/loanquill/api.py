"""

Simple high-level API for LoanQuill.

Usage example:
>>> from loanquill import generate_pdf
>>>
>>> document = generate_pdf(
...     "Loan Approval Letter",
...     {"name": "Asha Rao", "loanAmount": "500000", "interestRate": "10.5", "year": "5"},
... )
>>> document.save("out/")
>>>
>>> # Async callers share one image loader across renders
>>> async with ImageLoader() as loader:
...     document = await generate_pdf_async(template, values, loader=loader)

"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from .config import RenderOptions
from .engine.pdfcompiler import assemble
from .engine.placeholder_engine import substitute
from .engine.rasterizer import DocumentRasterizer
from .engine.surface import PageSurface
from .exceptions import LoanQuillError, RenderingError
from .media.image_loader import ImageLoader
from .models.form import FormValues
from .models.template import Template, normalize_template
from .renderers.overlay_compositor import OverlayCompositor
from .renderers.watermark_renderer import WatermarkRenderer
from .templates.defaults import get_builtin_template

logger = logging.getLogger(__name__)

__all__ = [
    "GeneratedDocument",
    "document_filename",
    "render_page",
    "render_page_async",
    "generate_pdf",
    "generate_pdf_async",
    "preview_layout",
]

TemplateLike = Union[Template, Mapping[str, Any], str]
ValuesLike = Union[FormValues, Mapping[str, Any]]

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(slots=True)
class GeneratedDocument:
    """Finished container bytes plus the name they should be saved under."""
    content: bytes
    filename: str
    mime_type: str = "application/pdf"
    # Rendered page the content was assembled from, for PNG previews
    surface: Optional[PageSurface] = field(default=None, repr=False, compare=False)

    def save(self, target: Union[str, Path]) -> Path:
        """
        Write the document.

        Args:
            target: Directory (the document's filename is used) or file path

        Returns:
            Path written
        """
        path = Path(target)
        if path.is_dir() or str(target).endswith(("/", "\\")):
            path = path / self.filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.content)
        logger.info("Saved %s (%d bytes)", path, len(self.content))
        return path


def document_filename(name: Optional[str]) -> str:
    """Safe ``.pdf`` filename for a logical document name."""
    stem = (name or "").strip()
    if stem.lower().endswith(".pdf"):
        stem = stem[:-4]
    stem = _UNSAFE_FILENAME_CHARS.sub("", stem.replace(" ", "_")).strip("._")
    return f"{stem}.pdf" if stem else "document.pdf"


def _coerce_template(template: TemplateLike) -> Template:
    if isinstance(template, Template):
        return template
    if isinstance(template, str):
        return get_builtin_template(template)
    return normalize_template(template)


def _coerce_values(values: ValuesLike, compute_emi: bool) -> FormValues:
    form = values if isinstance(values, FormValues) else FormValues.from_dict(values)
    if compute_emi and not form.monthly_emi.strip():
        form = form.with_emi()
    return form


async def render_page_async(
    template: TemplateLike,
    values: ValuesLike,
    options: Optional[RenderOptions] = None,
    *,
    loader: Optional[ImageLoader] = None,
    compute_emi: bool = True,
) -> PageSurface:
    """
    Rasterize one page.

    Args:
        template: Template, template mapping or built-in document type name
        values: Form values or a mapping of them
        options: Render options
        loader: Shared image loader (one is created per call otherwise)
        compute_emi: Derive the monthly EMI when the values do not carry one

    Returns:
        Drawn page surface
    """
    rasterizer = DocumentRasterizer(options, loader=loader)
    return await rasterizer.render(_coerce_template(template), _coerce_values(values, compute_emi))


def render_page(
    template: TemplateLike,
    values: ValuesLike,
    options: Optional[RenderOptions] = None,
    *,
    compute_emi: bool = True,
) -> PageSurface:
    """Blocking wrapper around :func:`render_page_async`."""
    return asyncio.run(render_page_async(template, values, options, compute_emi=compute_emi))


async def generate_pdf_async(
    template: TemplateLike,
    values: ValuesLike,
    options: Optional[RenderOptions] = None,
    *,
    document_type: Optional[str] = None,
    loader: Optional[ImageLoader] = None,
    compute_emi: bool = True,
) -> GeneratedDocument:
    """
    Render a template and wrap the page in a single-page PDF.

    Args:
        template: Template, template mapping or built-in document type name
        values: Form values or a mapping of them
        options: Render options
        document_type: Logical name used for the output filename
        loader: Shared image loader
        compute_emi: Derive the monthly EMI when the values do not carry one

    Returns:
        GeneratedDocument with the PDF bytes

    Raises:
        LoanQuillError: If the page cannot be rendered or assembled
    """
    options = options or RenderOptions()
    resolved = _coerce_template(template)
    form = _coerce_values(values, compute_emi)
    title = substitute(resolved, form).headline.strip() or resolved.name or None
    try:
        surface = await DocumentRasterizer(options, loader=loader).render(resolved, form)
        # JPEG encoding is CPU bound; keep the event loop free
        content = await asyncio.to_thread(
            assemble,
            surface.image,
            quality=options.jpeg_quality,
            page_size=options.pdf_page_size,
            include_info=options.include_info,
            title=title,
        )
    except LoanQuillError:
        raise
    except (OSError, ValueError) as exc:
        logger.error("Document generation failed for %r: %s", resolved.name, exc)
        raise RenderingError("Document generation failed", str(exc)) from exc

    filename = document_filename(document_type or resolved.document_type or resolved.name)
    logger.info("Generated %s (%d bytes)", filename, len(content))
    return GeneratedDocument(content=content, filename=filename, surface=surface)


def generate_pdf(
    template: TemplateLike,
    values: ValuesLike,
    options: Optional[RenderOptions] = None,
    *,
    document_type: Optional[str] = None,
    compute_emi: bool = True,
) -> GeneratedDocument:
    """Blocking wrapper around :func:`generate_pdf_async`."""
    return asyncio.run(
        generate_pdf_async(template, values, options, document_type=document_type, compute_emi=compute_emi)
    )


def preview_layout(template: TemplateLike) -> Dict[str, Dict[str, str]]:
    """CSS-like placement of the watermark, seal and signature for a live preview."""
    resolved = _coerce_template(template)
    styles = OverlayCompositor.preview_styles(resolved.seal, resolved.signature)
    watermark = WatermarkRenderer.preview_style(resolved.watermark)
    if watermark is not None:
        styles["watermark"] = watermark
    return styles
