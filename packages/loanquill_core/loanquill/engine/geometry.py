"""Geometry primitives for page layout (top-left origin, layout units)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(slots=True)
class Point:
    x: float
    y: float

    def as_int(self) -> Tuple[int, int]:
        return (int(round(self.x)), int(round(self.y)))


@dataclass(slots=True)
class Size:
    width: float
    height: float

    def as_int(self) -> Tuple[int, int]:
        return (max(1, int(round(self.width))), max(1, int(round(self.height))))


@dataclass(slots=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    def __post_init__(self):
        """Ensure non-negative dimensions."""
        if self.width < 0:
            self.width = abs(self.width)
        if self.height < 0:
            self.height = abs(self.height)

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass(slots=True)
class Margins:
    top: float = 0.0
    bottom: float = 0.0
    left: float = 0.0
    right: float = 0.0

    @classmethod
    def uniform(cls, value: float) -> "Margins":
        return cls(value, value, value, value)
