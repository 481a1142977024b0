"""
Pytest configuration for LoanQuill
"""

import base64
import io
import logging
import sys
from pathlib import Path

import pytest
from PIL import Image

from loanquill.engine.geometry import Size
from loanquill.engine.surface import PageSurface
from loanquill.engine.text_metrics import TextMetricsEngine
from loanquill.media.font_manager import FontManager
from loanquill.models.form import CustomField, FormValues


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for tests to avoid file handler issues."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter('%(name)s - %(levelname)s - %(message)s'))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    root_logger.handlers.clear()


@pytest.fixture
def temp_dir(tmp_path) -> Path:
    return tmp_path


@pytest.fixture
def font_manager():
    """Bundled Pillow font only, so widths do not depend on installed fonts."""
    return FontManager(use_system_fonts=False)


@pytest.fixture
def metrics(font_manager):
    return TextMetricsEngine(font_manager)


@pytest.fixture
def surface(metrics):
    return PageSurface(Size(794, 1123), metrics)


@pytest.fixture
def form_values():
    return FormValues(
        name="Asha Rao",
        loan_amount="500000",
        interest_rate="10.5",
        year="5",
        monthly_emi="10747.04",
        processing_charge="2500",
        bank_account_number="123456789012",
        ifsc_code="HDFC0001234",
        upi_id="asha@upi",
        loan_type="Personal",
        custom_fields=[CustomField("Branch", "Pune")],
    )


def make_png(size=(40, 20), color=(200, 30, 30, 255)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGBA", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_bytes():
    return make_png


@pytest.fixture
def png_data_url():
    """Factory for PNG data URLs of a given size and colour."""
    def factory(size=(40, 20), color=(200, 30, 30, 255)) -> str:
        return "data:image/png;base64," + base64.b64encode(make_png(size, color)).decode("ascii")
    return factory
