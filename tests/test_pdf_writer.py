"""
Tests for single-page PDF assembly.
"""

import io
import re

import pytest
from PIL import Image

from loanquill.engine.pdfcompiler import ByteBuffer, PdfImageWriter, assemble, encode_jpeg
from loanquill.engine.pdfcompiler.writer import Ref, dict_to_pdf, format_number, pdf_text_string
from loanquill.exceptions import CompilationError, EncodingError


@pytest.fixture
def raster():
    image = Image.new("RGB", (80, 60), "white")
    image.paste((26, 54, 93), (10, 10, 70, 20))
    return image


def xref_entries(data: bytes):
    start = int(re.search(rb"startxref\n(\d+)\n%%EOF\n$", data).group(1))
    header = re.match(rb"xref\n0 (\d+)\n", data[start:])
    count = int(header.group(1))
    body = data[start + header.end():]
    entries = [body[i * 20:(i + 1) * 20] for i in range(count)]
    return start, count, entries


def object_bytes(data: bytes, num: int) -> bytes:
    match = re.search(rb"(?s)\n%d 0 obj\n(.*?)endobj\n" % num, data)
    return match.group(1)


def stream_parts(data: bytes, num: int):
    body = object_bytes(data, num)
    length = int(re.search(rb"/Length (\d+)", body).group(1))
    payload = body.split(b"\nstream\n", 1)[1].rsplit(b"\nendstream\n", 1)[0]
    return length, payload


class TestContainerLayout:
    """Test the emitted byte layout."""

    def test_header(self, raster):
        data = assemble(raster)
        assert data.startswith(b"%PDF-1.4\n")

    def test_xref_offsets_point_at_objects(self, raster):
        data = assemble(raster)
        _, count, entries = xref_entries(data)

        assert count == 6
        assert entries[0] == b"0000000000 65535 f \n"
        for num, entry in enumerate(entries[1:], start=1):
            assert re.fullmatch(rb"\d{10} 00000 n \n", entry)
            offset = int(entry[:10])
            assert data[offset:].startswith(b"%d 0 obj\n" % num)

    def test_trailer_is_exact(self, raster):
        data = assemble(raster)
        start, _, _ = xref_entries(data)

        assert data[start:].startswith(b"xref\n0 6\n")
        assert data.endswith(
            b"trailer\n<< /Size 6 /Root 1 0 R >>\nstartxref\n" + str(start).encode() + b"\n%%EOF\n"
        )

    def test_stream_lengths(self, raster):
        data = assemble(raster)
        for num in (4, 5):
            length, payload = stream_parts(data, num)
            assert length == len(payload)

    def test_content_stream(self, raster):
        _, payload = stream_parts(assemble(raster), 4)
        assert payload == b"q 595.28 0 0 841.89 0 0 cm /Im1 Do Q\n"

    def test_image_object(self, raster):
        data = assemble(raster)
        body = object_bytes(data, 5)
        _, payload = stream_parts(data, 5)

        assert b"/Width 80 /Height 60" in body
        assert b"/ColorSpace /DeviceRGB /BitsPerComponent 8 /Filter /DCTDecode" in body
        assert payload.startswith(b"\xff\xd8")
        assert payload.endswith(b"\xff\xd9")

    def test_page_object(self, raster):
        body = object_bytes(assemble(raster), 3)
        assert b"/MediaBox [0 0 595.28 841.89]" in body
        assert b"/Resources << /XObject << /Im1 5 0 R >> >>" in body
        assert b"/Contents 4 0 R" in body

    def test_catalog_and_pages(self, raster):
        data = assemble(raster)
        assert object_bytes(data, 1).startswith(b"<< /Type /Catalog /Pages 2 0 R >>")
        assert object_bytes(data, 2).startswith(b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>")

    def test_idempotent(self, raster):
        assert assemble(raster) == assemble(raster.copy())

    def test_quality_changes_payload(self, raster):
        assert assemble(raster, quality=95) != assemble(raster, quality=20)

    def test_custom_page_size(self, raster):
        _, payload = stream_parts(assemble(raster, page_size=(612, 792)), 4)
        assert payload == b"q 612 0 0 792 0 0 cm /Im1 Do Q\n"


class TestInfoObject:
    """Test the optional document information object."""

    def test_sizes_grow(self, raster):
        data = assemble(raster, include_info=True, title="Loan Approval Letter")
        start, count, entries = xref_entries(data)

        assert count == 7
        assert int(entries[6][:10]) == data.index(b"6 0 obj\n")
        assert b"/Size 7 /Root 1 0 R /Info 6 0 R" in data
        assert object_bytes(data, 6).startswith(b"<< /Producer (LoanQuill) /Title (Loan Approval Letter) >>")

    def test_unicode_title(self, raster):
        data = assemble(raster, include_info=True, title="स्वीकृति")
        assert b"/Title <FEFF" in object_bytes(data, 6)


class TestEncoding:
    """Test JPEG encoding."""

    def test_rgba_is_flattened(self):
        jpeg = encode_jpeg(Image.new("RGBA", (10, 10), (0, 0, 0, 128)))
        assert Image.open(io.BytesIO(jpeg)).mode == "RGB"

    def test_empty_raster(self):
        with pytest.raises(EncodingError):
            encode_jpeg(Image.new("RGB", (0, 0)))

    def test_encoding_error_is_compilation_error(self):
        assert issubclass(EncodingError, CompilationError)


class TestWriterPrimitives:
    """Test buffer and serialization helpers."""

    def test_byte_buffer_offsets(self):
        buffer = ByteBuffer()
        assert buffer.write(b"%PDF-1.4\n") == 0
        assert buffer.write("1 0 obj\n") == 9
        assert buffer.tell() == 17
        assert buffer.getvalue() == b"%PDF-1.4\n1 0 obj\n"

    @pytest.mark.parametrize(
        "value, expected",
        [(0, "0"), (12.0, "12"), (595.28, "595.28"), (841.89, "841.89"), (0.5, "0.5")],
    )
    def test_format_number(self, value, expected):
        assert format_number(value) == expected

    def test_dict_to_pdf(self):
        assert dict_to_pdf({"Type": "/Pages", "Kids": [Ref(3)], "Count": 1}) == (
            "<< /Type /Pages /Kids [3 0 R] /Count 1 >>"
        )

    def test_text_string_escaping(self):
        assert pdf_text_string("a (b) \\ c") == "(a \\(b\\) \\\\ c)"

    def test_unsupported_value(self):
        with pytest.raises(CompilationError):
            dict_to_pdf({"Bad": object()})

    def test_writer_is_single_use(self, raster):
        writer = PdfImageWriter()
        jpeg = encode_jpeg(raster)
        writer.write(jpeg, raster.width, raster.height)
        with pytest.raises(CompilationError):
            writer.write(jpeg, raster.width, raster.height)

    def test_empty_image_data(self):
        with pytest.raises(CompilationError):
            PdfImageWriter().write(b"", 1, 1)
