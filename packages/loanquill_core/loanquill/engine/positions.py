"""Position presets for overlay elements (seal, signature, watermark image).

Two materializations share one table of anchors: a relative form for live
previews (CSS-like offsets) and an absolute pixel form for rasterization.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict

from .geometry import Point, Size

PRESET_MARGIN = 20.0


class PositionPreset(str, Enum):
    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"
    CENTER = "center"

    @classmethod
    def parse(cls, value: Any) -> "PositionPreset":
        """Coerce a preset name; unknown values fall back to bottom-right."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower().replace("_", "-")
            for preset in cls:
                if preset.value == normalized:
                    return preset
        return cls.BOTTOM_RIGHT


# (vertical edge, horizontal edge); None means centred on that axis
_ANCHORS = {
    PositionPreset.TOP_LEFT: ("top", "left"),
    PositionPreset.TOP_RIGHT: ("top", "right"),
    PositionPreset.BOTTOM_LEFT: ("bottom", "left"),
    PositionPreset.BOTTOM_RIGHT: ("bottom", "right"),
    PositionPreset.CENTER: (None, None),
}


def resolve_relative(preset: Any, margin: float = PRESET_MARGIN) -> Dict[str, str]:
    """Resolve a preset to CSS-style offsets for an interactive preview.

    Args:
        preset: Preset name or ``PositionPreset``
        margin: Distance from the anchored edges in layout units

    Returns:
        Mapping of CSS properties, e.g. ``{"top": "20px", "left": "20px"}``
    """
    vertical, horizontal = _ANCHORS[PositionPreset.parse(preset)]
    if vertical is None:
        return {"top": "50%", "left": "50%", "transform": "translate(-50%, -50%)"}
    offset = f"{margin:g}px"
    return {vertical: offset, horizontal: offset}


def resolve_absolute(
    preset: Any,
    container: Size,
    element: Size,
    margin: float = PRESET_MARGIN,
) -> Point:
    """Resolve a preset to the top-left pixel position of ``element`` in ``container``.

    Args:
        preset: Preset name or ``PositionPreset``
        container: Size of the surface the element is placed on
        element: Size of the element being placed
        margin: Distance from the anchored edges in layout units

    Returns:
        Top-left corner of the element
    """
    vertical, horizontal = _ANCHORS[PositionPreset.parse(preset)]
    if vertical is None:
        return Point(
            (container.width - element.width) / 2,
            (container.height - element.height) / 2,
        )
    x = margin if horizontal == "left" else container.width - element.width - margin
    y = margin if vertical == "top" else container.height - element.height - margin
    return Point(x, y)
