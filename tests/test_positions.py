"""
Tests for position presets.
"""

import pytest

from loanquill.engine.geometry import Point, Size
from loanquill.engine.positions import PRESET_MARGIN, PositionPreset, resolve_absolute, resolve_relative

PAGE = Size(794, 1123)
STAMP = Size(100, 50)


class TestPresetParsing:
    """Test preset coercion."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("top-left", PositionPreset.TOP_LEFT),
            ("TOP_RIGHT", PositionPreset.TOP_RIGHT),
            (" bottom-left ", PositionPreset.BOTTOM_LEFT),
            ("center", PositionPreset.CENTER),
            (PositionPreset.CENTER, PositionPreset.CENTER),
        ],
    )
    def test_known_values(self, value, expected):
        assert PositionPreset.parse(value) is expected

    @pytest.mark.parametrize("value", ["middle", "", None, 3])
    def test_unknown_values_fall_back_to_bottom_right(self, value):
        assert PositionPreset.parse(value) is PositionPreset.BOTTOM_RIGHT


class TestRelativeResolution:
    """Test CSS-like preview offsets."""

    def test_corners(self):
        assert resolve_relative("top-left") == {"top": "20px", "left": "20px"}
        assert resolve_relative("bottom-right") == {"bottom": "20px", "right": "20px"}
        assert resolve_relative("top-right", margin=8) == {"top": "8px", "right": "8px"}

    def test_center(self):
        assert resolve_relative("center") == {
            "top": "50%",
            "left": "50%",
            "transform": "translate(-50%, -50%)",
        }

    def test_unknown_resolves_like_bottom_right(self):
        assert resolve_relative("nowhere") == resolve_relative("bottom-right")


class TestAbsoluteResolution:
    """Test pixel placement."""

    def test_corners(self):
        m = PRESET_MARGIN
        assert resolve_absolute("top-left", PAGE, STAMP) == Point(m, m)
        assert resolve_absolute("top-right", PAGE, STAMP) == Point(794 - 100 - m, m)
        assert resolve_absolute("bottom-left", PAGE, STAMP) == Point(m, 1123 - 50 - m)
        assert resolve_absolute("bottom-right", PAGE, STAMP) == Point(794 - 100 - m, 1123 - 50 - m)

    def test_center(self):
        assert resolve_absolute("center", PAGE, STAMP) == Point((794 - 100) / 2, (1123 - 50) / 2)

    @pytest.mark.parametrize("preset", list(PositionPreset))
    def test_element_stays_inside_container(self, preset):
        point = resolve_absolute(preset, PAGE, STAMP)
        assert 0 <= point.x <= PAGE.width - STAMP.width
        assert 0 <= point.y <= PAGE.height - STAMP.height

    def test_relative_and_absolute_agree_on_anchor(self):
        """Both forms anchor to the same edges with the same margin."""
        relative = resolve_relative("bottom-left")
        point = resolve_absolute("bottom-left", PAGE, STAMP)
        assert relative["left"] == f"{point.x:g}px"
        assert relative["bottom"] == f"{PAGE.height - STAMP.height - point.y:g}px"
