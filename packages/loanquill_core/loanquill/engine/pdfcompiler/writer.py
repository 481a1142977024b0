"""PDF file writer - wraps one JPEG page raster in a minimal PDF 1.4 file.

Object layout:

    1 Catalog, 2 Pages, 3 Page, 4 page content stream, 5 image XObject,
    6 Info (only when requested)

Offsets in the cross-reference table are the exact byte positions of each
``N 0 obj`` line, so the output is deterministic for a given raster.
"""

from __future__ import annotations

import io
import logging
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Tuple, Union

from PIL import Image

from ...config import PDF_PAGE_HEIGHT_PT, PDF_PAGE_WIDTH_PT
from ...exceptions import CompilationError, EncodingError

logger = logging.getLogger(__name__)

PDF_HEADER = b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n"
DEFAULT_JPEG_QUALITY = 95
IMAGE_RESOURCE_NAME = "Im1"

CATALOG_OBJ = 1
PAGES_OBJ = 2
PAGE_OBJ = 3
CONTENT_OBJ = 4
IMAGE_OBJ = 5
INFO_OBJ = 6


class Ref(NamedTuple):
    """Indirect object reference (``N G R``)."""
    num: int
    gen: int = 0

    def __str__(self) -> str:
        return f"{self.num} {self.gen} R"


PdfValue = Union[str, int, float, Ref, Sequence[Any], Dict[str, Any]]


class ByteBuffer:
    """Append-only byte buffer that knows the offset of everything written."""

    def __init__(self) -> None:
        self._chunks: List[bytes] = []
        self.offset = 0

    def write(self, data: Union[bytes, str]) -> int:
        """Append ``data`` and return the offset it starts at."""
        if isinstance(data, str):
            data = data.encode("latin-1")
        start = self.offset
        self._chunks.append(data)
        self.offset += len(data)
        return start

    def tell(self) -> int:
        return self.offset

    def getvalue(self) -> bytes:
        return b"".join(self._chunks)


def format_number(value: Union[int, float]) -> str:
    """Format a number without exponent or trailing zeros (595.28, 0, 12.5)."""
    if isinstance(value, int) or float(value).is_integer():
        return str(int(value))
    return f"{value:.4f}".rstrip("0").rstrip(".")


def escape_pdf_string(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)").replace("\r", "\\r").replace("\n", "\\n")


def pdf_text_string(text: str) -> str:
    """Literal string for ASCII text, UTF-16BE hex string otherwise."""
    if text.isascii():
        return f"({escape_pdf_string(text)})"
    return "<FEFF" + text.encode("utf-16-be").hex().upper() + ">"


def _value_to_pdf(value: PdfValue) -> str:
    if isinstance(value, Ref):
        return str(value)
    if isinstance(value, dict):
        return dict_to_pdf(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, str):
        # Names carry their leading slash; anything else is a text string
        return value if value.startswith("/") else pdf_text_string(value)
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(_value_to_pdf(item) for item in value) + "]"
    raise CompilationError("Unsupported PDF value", repr(value))


def dict_to_pdf(d: Dict[str, PdfValue]) -> str:
    """Convert a dictionary to PDF syntax, e.g. ``<< /Type /Catalog /Pages 2 0 R >>``."""
    parts = ["<<"]
    for key, value in d.items():
        parts.append(f"/{key.lstrip('/')} {_value_to_pdf(value)}")
    parts.append(">>")
    return " ".join(parts)


def encode_jpeg(image: Image.Image, quality: int = DEFAULT_JPEG_QUALITY) -> bytes:
    """
    Encode a raster as baseline RGB JPEG.

    Raises:
        EncodingError: If Pillow cannot encode the image
    """
    if image.width < 1 or image.height < 1:
        raise EncodingError("Cannot encode an empty raster", f"{image.width}x{image.height}")
    buffer = io.BytesIO()
    try:
        image.convert("RGB").save(buffer, format="JPEG", quality=quality)
    except (OSError, ValueError) as exc:
        logger.error("JPEG encoding failed: %s", exc)
        raise EncodingError("JPEG encoding failed", str(exc)) from exc
    return buffer.getvalue()


class PdfImageWriter:
    """Writes a single-page PDF whose page is one full-bleed JPEG image."""

    def __init__(
        self,
        page_size: Tuple[float, float] = (PDF_PAGE_WIDTH_PT, PDF_PAGE_HEIGHT_PT),
        include_info: bool = False,
        title: Optional[str] = None,
    ):
        self.page_size = page_size
        self.include_info = include_info
        self.title = title
        self.buffer = ByteBuffer()
        self.xref_table: List[Tuple[int, int]] = []  # (obj_num, offset)

    def content_stream(self) -> bytes:
        """Page content: scale the unit image square to the page and paint it."""
        width, height = (format_number(v) for v in self.page_size)
        return f"q {width} 0 0 {height} 0 0 cm /{IMAGE_RESOURCE_NAME} Do Q\n".encode("latin-1")

    def _begin_object(self, obj_num: int) -> None:
        offset = self.buffer.write(f"{obj_num} 0 obj\n")
        self.xref_table.append((obj_num, offset))

    def _write_object(self, obj_num: int, content: Dict[str, PdfValue]) -> None:
        self._begin_object(obj_num)
        self.buffer.write(dict_to_pdf(content))
        self.buffer.write("\nendobj\n")

    def _write_stream(self, obj_num: int, stream_dict: Dict[str, PdfValue], payload: bytes) -> None:
        stream_dict = dict(stream_dict)
        stream_dict["Length"] = len(payload)
        self._begin_object(obj_num)
        self.buffer.write(dict_to_pdf(stream_dict))
        self.buffer.write("\nstream\n")
        self.buffer.write(payload)
        self.buffer.write("\nendstream\nendobj\n")

    def _write_xref(self) -> int:
        xref_offset = self.buffer.tell()
        self.buffer.write(f"xref\n0 {len(self.xref_table) + 1}\n")
        self.buffer.write("0000000000 65535 f \n")
        for _, offset in sorted(self.xref_table):
            self.buffer.write(f"{offset:010d} 00000 n \n")
        return xref_offset

    def _write_trailer(self, xref_offset: int) -> None:
        trailer: Dict[str, PdfValue] = {
            "Size": len(self.xref_table) + 1,
            "Root": Ref(CATALOG_OBJ),
        }
        if self.include_info:
            trailer["Info"] = Ref(INFO_OBJ)
        self.buffer.write("trailer\n")
        self.buffer.write(dict_to_pdf(trailer))
        self.buffer.write(f"\nstartxref\n{xref_offset}\n%%EOF\n")

    def write(self, jpeg: bytes, width: int, height: int) -> bytes:
        """
        Assemble the PDF bytes.

        Args:
            jpeg: Baseline JPEG data of the page raster
            width: Raster width in pixels
            height: Raster height in pixels

        Returns:
            Complete PDF file contents
        """
        if not jpeg:
            raise CompilationError("Cannot build a PDF without image data")
        if self.xref_table:
            raise CompilationError("PdfImageWriter instances are single-use")

        self.buffer.write(PDF_HEADER)
        self._write_object(CATALOG_OBJ, {"Type": "/Catalog", "Pages": Ref(PAGES_OBJ)})
        self._write_object(PAGES_OBJ, {"Type": "/Pages", "Kids": [Ref(PAGE_OBJ)], "Count": 1})
        self._write_object(PAGE_OBJ, {
            "Type": "/Page",
            "Parent": Ref(PAGES_OBJ),
            "MediaBox": [0, 0, self.page_size[0], self.page_size[1]],
            "Resources": {"XObject": {IMAGE_RESOURCE_NAME: Ref(IMAGE_OBJ)}},
            "Contents": Ref(CONTENT_OBJ),
        })
        self._write_stream(CONTENT_OBJ, {}, self.content_stream())
        self._write_stream(IMAGE_OBJ, {
            "Type": "/XObject",
            "Subtype": "/Image",
            "Width": int(width),
            "Height": int(height),
            "ColorSpace": "/DeviceRGB",
            "BitsPerComponent": 8,
            "Filter": "/DCTDecode",
        }, jpeg)
        if self.include_info:
            info: Dict[str, PdfValue] = {"Producer": "LoanQuill"}
            if self.title:
                info["Title"] = self.title
            self._write_object(INFO_OBJ, info)

        xref_offset = self._write_xref()
        self._write_trailer(xref_offset)
        data = self.buffer.getvalue()
        logger.debug("Assembled PDF: %d bytes, %d objects", len(data), len(self.xref_table))
        return data


def assemble(
    raster: Image.Image,
    *,
    quality: int = DEFAULT_JPEG_QUALITY,
    page_size: Tuple[float, float] = (PDF_PAGE_WIDTH_PT, PDF_PAGE_HEIGHT_PT),
    include_info: bool = False,
    title: Optional[str] = None,
) -> bytes:
    """
    Encode ``raster`` as JPEG and wrap it in a single-page PDF.

    The same raster and options always produce the same bytes.

    Raises:
        EncodingError: If the raster cannot be encoded
    """
    jpeg = encode_jpeg(raster, quality)
    writer = PdfImageWriter(page_size=page_size, include_info=include_info, title=title)
    return writer.write(jpeg, raster.width, raster.height)
