"""
LoanQuill - loan letter rendering to single-page PDF.

Fills a letter template with applicant and loan values, lays the text out
on a fixed-size page with its background, watermark, seal and signature
overlays, and wraps the page raster in a minimal PDF.

Quick Start:
    from loanquill import generate_pdf

    document = generate_pdf("Loan Approval Letter", {"name": "Asha Rao", "loanAmount": "500000"})
    document.save("out/")
"""

from .version import __version__, __version_info__

from .exceptions import (
    AssetLoadError,
    CompilationError,
    EncodingError,
    LoanQuillError,
    MediaError,
    RenderingError,
    TemplateError,
)
from .config import PageConfig, RenderOptions
from .models import CustomField, FormValues, Template, normalize_template
from .engine import PlaceholderEngine, PositionPreset, calculate_emi, substitute
from .media import ImageLoader
from .templates import BUILT_IN_DOC_TYPES, get_builtin_template
from .api import (
    GeneratedDocument,
    document_filename,
    generate_pdf,
    generate_pdf_async,
    preview_layout,
    render_page,
    render_page_async,
)

__all__ = [
    "__version__",
    "__version_info__",
    "AssetLoadError",
    "CompilationError",
    "EncodingError",
    "LoanQuillError",
    "MediaError",
    "RenderingError",
    "TemplateError",
    "PageConfig",
    "RenderOptions",
    "CustomField",
    "FormValues",
    "Template",
    "normalize_template",
    "PlaceholderEngine",
    "PositionPreset",
    "calculate_emi",
    "substitute",
    "ImageLoader",
    "BUILT_IN_DOC_TYPES",
    "get_builtin_template",
    "GeneratedDocument",
    "document_filename",
    "generate_pdf",
    "generate_pdf_async",
    "preview_layout",
    "render_page",
    "render_page_async",
]
