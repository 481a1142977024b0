"""Greedy line breaking over measured tokens."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple

from .text_metrics import TextMetricsEngine

_WORD = re.compile(r"\S+")


@dataclass(slots=True)
class WrapToken:
    """An unbreakable piece of text.

    ``space_before`` records whether whitespace separated it from the
    previous token in the source line; tokens without it stay glued to
    their predecessor when wrapping.
    """
    text: str
    financial: bool = False
    space_before: bool = True


@dataclass(slots=True)
class WrappedLine:
    """One output line: tokens with their x offsets from the line start."""
    placements: List[Tuple[WrapToken, float]] = field(default_factory=list)
    width: float = 0.0

    @property
    def text(self) -> str:
        parts: List[str] = []
        for index, (token, _) in enumerate(self.placements):
            if index and token.space_before:
                parts.append(" ")
            parts.append(token.text)
        return "".join(parts)


def tokenize(text: str, financial: bool = False, offset: int = 0, source: str = "") -> List[WrapToken]:
    """Split ``text`` on whitespace into tokens.

    Args:
        text: Text to split
        financial: Flag stored on every produced token
        offset: Position of ``text`` inside ``source``
        source: Full line, used to tell whether a token follows whitespace

    Returns:
        Tokens in source order
    """
    source = source or text
    tokens = []
    for match in _WORD.finditer(text):
        start = offset + match.start()
        space_before = start > 0 and source[start - 1].isspace()
        tokens.append(WrapToken(match.group(0), financial, space_before))
    return tokens


def _group_units(tokens: Iterable[WrapToken]) -> List[List[WrapToken]]:
    units: List[List[WrapToken]] = []
    for token in tokens:
        if units and not token.space_before:
            units[-1].append(token)
        else:
            units.append([token])
    return units


class LineBreaker:
    """Simple greedy line breaker.

    Accumulates units while the measured width stays within ``max_width``;
    a unit wider than the column occupies a line of its own.
    """

    def __init__(self, metrics_engine: TextMetricsEngine, font_size: float):
        self.metrics_engine = metrics_engine
        self.font_size = font_size

    def token_width(self, token: WrapToken) -> float:
        return self.metrics_engine.measure(token.text, self.font_size, bold=token.financial)

    def tokens_width(self, tokens: Sequence[WrapToken]) -> float:
        """Width of tokens laid out on one line (spaces where the source had them)."""
        space = self.metrics_engine.space_width(self.font_size)
        width = 0.0
        for index, token in enumerate(tokens):
            if index and token.space_before:
                width += space
            width += self.token_width(token)
        return width

    def break_text(self, text: str, max_width: float) -> List[WrappedLine]:
        return self.break_tokens(tokenize(text), max_width)

    def break_tokens(self, tokens: Sequence[WrapToken], max_width: float) -> List[WrappedLine]:
        space = self.metrics_engine.space_width(self.font_size)
        lines: List[WrappedLine] = []
        current = WrappedLine()

        for unit in _group_units(tokens):
            unit_width = sum(self.token_width(token) for token in unit)
            gap = space if current.placements else 0.0
            if current.placements and current.width + gap + unit_width > max_width:
                lines.append(current)
                current = WrappedLine()
                gap = 0.0

            x = current.width + gap
            for token in unit:
                current.placements.append((token, x))
                x += self.token_width(token)
            current.width = x

        if current.placements:
            lines.append(current)
        return lines
