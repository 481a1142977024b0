"""Template definitions and their normalization.

A template is always complete once normalized: overlay blocks that were
missing from the input become disabled defaults instead of ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

from ..engine.positions import PositionPreset
from ..exceptions import TemplateError

APPROVAL_LETTER = "Loan Approval Letter"


class FitMode(str, Enum):
    COVER = "cover"
    CONTAIN = "contain"
    FILL = "fill"

    @classmethod
    def parse(cls, value: Any) -> "FitMode":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.COVER


@dataclass(slots=True)
class BackgroundOverlay:
    enabled: bool = False
    image: Optional[str] = None
    opacity: float = 0.1  # 0..1
    fit: FitMode = FitMode.COVER

    @property
    def active(self) -> bool:
        return self.enabled and bool(self.image)


@dataclass(slots=True)
class WatermarkOverlay:
    enabled: bool = False
    text: str = ""
    image: Optional[str] = None
    opacity: float = 0.05  # 0..1
    size: float = 72.0
    rotation: float = -45.0
    position: PositionPreset = PositionPreset.CENTER
    color: str = "#cccccc"

    @property
    def active(self) -> bool:
        return self.enabled and bool(self.image or self.text.strip())


@dataclass(slots=True)
class ImageOverlay:
    """Seal or signature image."""
    enabled: bool = False
    image: Optional[str] = None
    size: float = 100.0
    position: PositionPreset = PositionPreset.BOTTOM_LEFT
    opacity: float = 80.0  # 0..100
    signatory_name: str = ""
    signatory_title: str = ""

    @property
    def active(self) -> bool:
        return self.enabled and bool(self.image)


@dataclass(slots=True)
class Template:
    """A named document definition: headline and body with placeholders plus overlays."""
    name: str = ""
    headline: str = ""
    body: str = ""
    document_type: str = ""
    id: str = ""
    background: BackgroundOverlay = field(default_factory=BackgroundOverlay)
    watermark: WatermarkOverlay = field(default_factory=WatermarkOverlay)
    seal: ImageOverlay = field(default_factory=ImageOverlay)
    signature: ImageOverlay = field(
        default_factory=lambda: ImageOverlay(
            size=120.0, position=PositionPreset.BOTTOM_RIGHT, opacity=100.0
        )
    )

    @property
    def is_approval_letter(self) -> bool:
        """Whether the flagship approval-letter rule set applies."""
        return (self.document_type or self.name) == APPROVAL_LETTER

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Template":
        return normalize_template(data)


def normalize_template(data: Mapping[str, Any]) -> Template:
    """Build a complete ``Template`` from a JSON-like mapping.

    Accepts camelCase or snake_case keys; missing overlay blocks are
    disabled, unknown fit modes become ``cover`` and unknown positions
    ``bottom-right``.

    Args:
        data: Template mapping (e.g. parsed from JSON)

    Returns:
        Normalized template

    Raises:
        TemplateError: If ``data`` is not a mapping
    """
    if isinstance(data, Template):
        return data
    if not isinstance(data, Mapping):
        raise TemplateError("Template must be a mapping", type(data).__name__)

    name = _text(data.get("name"))
    background = _block(data, "background")
    watermark = _block(data, "watermark")
    seal = _block(data, "seal")
    signature = _block(data, "signature")

    return Template(
        name=name,
        headline=_text(data.get("headline")),
        body=_text(data.get("body")),
        document_type=_text(data.get("documentType", data.get("document_type"))) or name,
        id=_text(data.get("id")) or name,
        background=BackgroundOverlay(
            enabled=bool(background.get("enabled", False)),
            image=_image_ref(background),
            opacity=_clamp(_number(background.get("opacity"), 0.1), 0.0, 1.0),
            fit=FitMode.parse(background.get("fit")),
        ),
        watermark=WatermarkOverlay(
            enabled=bool(watermark.get("enabled", False)),
            text=_text(watermark.get("text")),
            image=_image_ref(watermark, "watermarkImageUrl", "watermark_image_url"),
            opacity=_clamp(_number(watermark.get("opacity"), 0.05), 0.0, 1.0),
            size=_number(watermark.get("size"), 72.0),
            rotation=_number(watermark.get("rotation"), -45.0),
            position=PositionPreset.parse(watermark.get("position", PositionPreset.CENTER)),
            color=_text(watermark.get("color")) or "#cccccc",
        ),
        seal=_image_overlay(seal, size=100.0, position=PositionPreset.BOTTOM_LEFT, opacity=80.0),
        signature=_image_overlay(signature, size=120.0, position=PositionPreset.BOTTOM_RIGHT, opacity=100.0),
    )


def _block(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key)
    return value if isinstance(value, Mapping) else {}


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _number(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _image_ref(block: Mapping[str, Any], *extra_keys: str) -> Optional[str]:
    for key in ("image", "dataUrl", "data_url", "imageUrl", "image_url", *extra_keys):
        value = block.get(key)
        if value:
            return str(value)
    return None


def _image_overlay(
    block: Mapping[str, Any],
    *,
    size: float,
    position: PositionPreset,
    opacity: float,
) -> ImageOverlay:
    return ImageOverlay(
        enabled=bool(block.get("enabled", False)),
        image=_image_ref(block),
        size=_number(block.get("size"), size),
        position=PositionPreset.parse(block.get("position", position)),
        opacity=_clamp(_number(block.get("opacity"), opacity), 0.0, 100.0),
        signatory_name=_text(block.get("signatoryName", block.get("signatory_name"))),
        signatory_title=_text(block.get("signatoryTitle", block.get("signatory_title"))),
    )
