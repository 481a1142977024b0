"""
End-to-end tests for the high-level API.
"""

import asyncio

import httpx
import pytest

from loanquill import (
    GeneratedDocument,
    ImageLoader,
    RenderOptions,
    document_filename,
    generate_pdf,
    generate_pdf_async,
    preview_layout,
    render_page,
)
from loanquill.exceptions import TemplateError

pytestmark = pytest.mark.integration

OPTIONS = RenderOptions(use_system_fonts=False)

VALUES = {
    "name": "Asha Rao",
    "loanAmount": "100000",
    "interestRate": "12",
    "year": "1",
    "processingCharge": "2500",
    "bankAccountNumber": "123456789012",
    "ifscCode": "HDFC0001234",
    "upiId": "asha@upi",
    "loanType": "Personal",
}


def all_text(surface):
    return " ".join(op.text for op in surface.ops if op.kind == "text")


class TestDocumentFilename:
    """Test output filename derivation."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Loan Approval Letter", "Loan_Approval_Letter.pdf"),
            ("letter.pdf", "letter.pdf"),
            ("a/b:c", "abc.pdf"),
            ("", "document.pdf"),
            (None, "document.pdf"),
            ("///", "document.pdf"),
        ],
    )
    def test_names(self, name, expected):
        assert document_filename(name) == expected


class TestGeneratePdf:
    """Test PDF generation end to end."""

    def test_builtin_by_name(self):
        document = generate_pdf("Loan Approval Letter", VALUES, OPTIONS)

        assert isinstance(document, GeneratedDocument)
        assert document.filename == "Loan_Approval_Letter.pdf"
        assert document.mime_type == "application/pdf"
        assert document.content.startswith(b"%PDF-1.4\n")
        assert document.content.endswith(b"%%EOF\n")

    def test_template_mapping(self):
        document = generate_pdf(
            {"name": "Custom Notice", "headline": "HI {{name}}", "body": "Amount: ₹{{loanAmount}}"},
            {"loanAmount": "10000"},
            OPTIONS,
        )
        assert document.filename == "Custom_Notice.pdf"

    def test_document_type_names_file(self):
        document = generate_pdf("Loan GST Letter", VALUES, OPTIONS, document_type="Sanction Copy")
        assert document.filename == "Sanction_Copy.pdf"

    def test_deterministic(self):
        first = generate_pdf("Loan Section Letter", VALUES, OPTIONS)
        second = generate_pdf("Loan Section Letter", VALUES, OPTIONS)
        assert first.content == second.content

    def test_save_to_directory(self, temp_dir):
        document = generate_pdf("Loan Section Letter", VALUES, OPTIONS)
        path = document.save(temp_dir)

        assert path == temp_dir / "Loan_Section_Letter.pdf"
        assert path.read_bytes() == document.content

    def test_save_to_file(self, temp_dir):
        document = generate_pdf("Loan Section Letter", VALUES, OPTIONS)
        path = document.save(temp_dir / "nested" / "letter.pdf")
        assert path.exists()

    def test_info_title_is_substituted(self):
        options = RenderOptions(use_system_fonts=False, include_info=True)
        document = generate_pdf(
            {"name": "Custom Notice", "headline": "HI {{name}}", "body": "Dear {{name}},"},
            VALUES,
            options,
        )

        assert b"/Title (HI Asha Rao)" in document.content
        assert b"{{name}}" not in document.content

    def test_document_keeps_rendered_surface(self):
        document = generate_pdf("Loan Section Letter", VALUES, OPTIONS)

        assert document.surface is not None
        assert "Asha Rao" in all_text(document.surface)
        assert document.surface.to_png_bytes().startswith(b"\x89PNG")

    def test_invalid_values(self):
        with pytest.raises(TemplateError):
            generate_pdf("Loan Approval Letter", ["not", "a", "mapping"], OPTIONS)

    def test_async_with_remote_seal(self, png_bytes):
        def handler(request):
            return httpx.Response(200, content=png_bytes((30, 30)))

        async def scenario():
            client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
            async with client:
                template = {
                    "name": "Custom",
                    "body": "Dear {{name}},",
                    "seal": {"enabled": True, "image": "https://assets.example/seal.png"},
                }
                return await generate_pdf_async(template, VALUES, OPTIONS, loader=ImageLoader(client=client))

        document = asyncio.run(scenario())
        assert document.content.startswith(b"%PDF-1.4\n")


class TestRenderPage:
    """Test page rendering through the API."""

    def test_emi_is_derived(self):
        surface = render_page("Loan Approval Letter", VALUES, OPTIONS)
        assert "₹8,884.88" in all_text(surface)

    def test_emi_left_to_caller(self):
        surface = render_page("Loan Approval Letter", VALUES, OPTIONS, compute_emi=False)
        assert "₹[Monthly" in all_text(surface)

    def test_explicit_emi_kept(self):
        surface = render_page("Loan Approval Letter", dict(VALUES, monthlyEmi="9000"), OPTIONS)
        assert "₹9,000.00" in all_text(surface)

    def test_png_preview(self):
        surface = render_page("TDS Deduction Intimation", VALUES, OPTIONS)
        assert surface.to_png_bytes().startswith(b"\x89PNG")
        assert surface.image.size == (794, 1123)


class TestPreviewLayout:
    """Test preview placement data."""

    def test_builtin_watermark_only(self):
        styles = preview_layout("Loan Approval Letter")
        assert set(styles) == {"watermark"}
        assert styles["watermark"]["transform"] == "translate(-50%, -50%) rotate(-45deg)"

    def test_stamps(self):
        styles = preview_layout({
            "seal": {"enabled": True, "image": "seal.png", "position": "top-left"},
            "signature": {"enabled": True, "image": "sig.png"},
        })
        assert styles["seal"] == {"top": "20px", "left": "20px", "width": "100px", "opacity": "0.8"}
        assert styles["signature"]["right"] == "20px"
