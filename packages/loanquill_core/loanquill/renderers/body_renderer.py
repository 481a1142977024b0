"""
Body renderer: classifies each body line and lays it out on the page.

Classification is an ordered table of ``LineRule`` entries; the first rule
whose predicate matches a line renders it. Two tables exist: the generic
one and the approval-letter one, which adds a boxed refundable notice and
looser section-heading matching. Both share the same measuring and
wrapping primitives.

Every handler takes the current y and returns the y below what it drew.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, List, Optional, Sequence, Tuple

from ..engine.geometry import Point, Rect
from ..engine.line_breaker import LineBreaker, WrappedLine, WrapToken, tokenize
from ..engine.surface import PageSurface

if TYPE_CHECKING:
    from ..models.template import Template

logger = logging.getLogger(__name__)

BLANK_LINE_FACTOR = 0.4

# Identifier-style labels rendered as label + highlighted value
LABEL_TOKEN_PATTERN = re.compile(
    r"^\s*(?P<label>"
    r"(?:Application|Loan|Account|Reference|Sanction|Customer|Bank\s+Account)\s+"
    r"(?:Number|No\.?|Reference|ID|Code)"
    r"|IFSC\s+Code|UPI\s+(?:ID|Reference)|PAN\s+(?:Number|No\.?)"
    r")\s*:\s*(?P<value>\S.*?)\s*$",
    re.IGNORECASE,
)

LABEL_VALUE_PATTERN = re.compile(r"^\s*(?P<label>[^:]+?)\s*:\s*(?P<value>\S.*?)\s*$")
MAX_LABEL_LENGTH = 40

BULLET_PATTERN = re.compile(r"^\s*(?P<marker>[•\-\*–·▪])\s+(?P<text>.*)$")
BULLET_GLYPH = "•"

FINANCIAL_PATTERN = re.compile(
    r"(?:₹|\$|Rs\.?|INR)\s?\d[\d,]*(?:\.\d+)?"
    r"|\d[\d,]*(?:\.\d+)?\s?%"
)

# Characters that disqualify an upper-case line from being a heading
_HEADING_EXCLUDED = re.compile(r"[\d₹$%]")

SECTION_HEADINGS = frozenset({
    "Processing & Verification",
    "Bank Account Details",
    "Sanction Details",
    "Financial Summary",
    "Disbursement Details",
    "Repayment Schedule",
    "Terms & Conditions",
    "Applicant Details",
    "Important Information",
})

APPROVAL_HEADING_VOCABULARY = (
    "processing & verification",
    "bank account details",
    "important information",
    "terms & conditions",
    "next steps",
    "loan details",
    "repayment schedule",
    "disbursement details",
    "documents required",
    "applicant details",
)


@dataclass(slots=True)
class BodyStyle:
    font_size: float = 13.0
    line_height: float = 20.0
    heading_font_size: float = 14.0
    text_color: str = "#222222"
    heading_color: str = "#1a365d"
    highlight_color: str = "#fff3c4"
    rule_color: str = "#1a365d"
    notice_fill: str = "#eef6ee"
    notice_border: str = "#2f855a"
    notice_padding: float = 10.0


@dataclass(slots=True)
class Segment:
    """A run of a body line; financial segments are atomic and highlighted."""
    text: str
    financial: bool = False


@dataclass(slots=True)
class LineContext:
    """Running state shared by rule predicates and handlers for one body."""
    surface: PageSurface
    breaker: LineBreaker
    style: BodyStyle
    x: float
    width: float
    previous_kind: Optional[str] = None


Predicate = Callable[[str, LineContext], bool]
Handler = Callable[[str, LineContext, float], float]


@dataclass(frozen=True, slots=True)
class LineRule:
    name: str
    matches: Predicate
    render: Handler


def split_financial_segments(line: str) -> List[Segment]:
    """Split a line into alternating plain and financial segments.

    ``"Loan Amount: ₹500,000.00"`` becomes ``[Segment("Loan Amount: "),
    Segment("₹500,000.00", financial=True)]``.
    """
    segments: List[Segment] = []
    cursor = 0
    for match in FINANCIAL_PATTERN.finditer(line):
        if match.start() > cursor:
            segments.append(Segment(line[cursor:match.start()]))
        segments.append(Segment(match.group(0), financial=True))
        cursor = match.end()
    if cursor < len(line):
        segments.append(Segment(line[cursor:]))
    return segments


def segment_tokens(line: str) -> List[WrapToken]:
    """Wrap tokens for a line, keeping every financial segment whole."""
    tokens: List[WrapToken] = []
    offset = 0
    for segment in split_financial_segments(line):
        if segment.financial:
            space_before = offset > 0 and line[offset - 1].isspace()
            tokens.append(WrapToken(segment.text, True, space_before))
        else:
            tokens.extend(tokenize(segment.text, offset=offset, source=line))
        offset += len(segment.text)
    return tokens


# ---------------------------------------------------------------- predicates

def is_blank(line: str, ctx: LineContext) -> bool:
    return not line.strip()


def is_label_token(line: str, ctx: LineContext) -> bool:
    return LABEL_TOKEN_PATTERN.match(line) is not None


def is_section_heading(line: str, ctx: LineContext) -> bool:
    text = line.strip()
    if text in SECTION_HEADINGS:
        return True
    return len(text) > 3 and text.isupper() and not _HEADING_EXCLUDED.search(text)


def _normalize_heading(text: str) -> str:
    text = re.sub(r"\s+", " ", text.strip().rstrip(":").strip().lower())
    return text.replace(" and ", " & ")


def is_approval_heading(line: str, ctx: LineContext) -> bool:
    if is_section_heading(line, ctx):
        return True
    text = _normalize_heading(line)
    if not text or len(text) > 50 or _HEADING_EXCLUDED.search(text):
        return False
    return any(text == item or text.startswith(item) for item in APPROVAL_HEADING_VOCABULARY)


def is_bullet(line: str, ctx: LineContext) -> bool:
    return BULLET_PATTERN.match(line) is not None


def has_financial_token(line: str, ctx: LineContext) -> bool:
    return FINANCIAL_PATTERN.search(line) is not None


def is_label_value(line: str, ctx: LineContext) -> bool:
    match = LABEL_VALUE_PATTERN.match(line)
    if match is None or len(match.group("label")) >= MAX_LABEL_LENGTH:
        return False
    # Rendered unwrapped, so only lines that fit qualify
    return _label_value_width(match.group("label"), match.group("value"), ctx) <= ctx.width


def is_refundable_notice(line: str, ctx: LineContext) -> bool:
    text = line.strip()
    if text.startswith(":") and len(text) > 1:
        return True
    lowered = text.lower()
    return "refundable" in lowered and "processing charge" in lowered


def always(line: str, ctx: LineContext) -> bool:
    return True


# ------------------------------------------------------------------ handlers

def render_spacer(line: str, ctx: LineContext, y: float) -> float:
    return y + ctx.style.line_height * BLANK_LINE_FACTOR


def _label_value_width(label: str, value: str, ctx: LineContext) -> float:
    size = ctx.style.font_size
    return (
        ctx.surface.measure(f"{label}: ", size, bold=True)
        + ctx.surface.measure(value, size, bold=False)
    )


def _draw_highlighted(text: str, x: float, y: float, ctx: LineContext, *, bold: bool) -> float:
    size = ctx.style.font_size
    width = ctx.surface.measure(text, size, bold)
    pad = 2.0
    ctx.surface.fill_rect(
        Rect(x - pad, y - pad, width + 2 * pad, size + 2 * pad + 2),
        ctx.style.highlight_color,
        radius=2,
    )
    ctx.surface.draw_text(x, y, text, size, bold=bold, color=ctx.style.text_color, highlighted=True)
    return width


def render_label_value(line: str, ctx: LineContext, y: float) -> float:
    match = LABEL_TOKEN_PATTERN.match(line) or LABEL_VALUE_PATTERN.match(line)
    if match is None:
        return render_paragraph(line, ctx, y)
    size = ctx.style.font_size
    label = f"{match.group('label')}: "
    label_width = ctx.surface.measure(label, size, bold=True)
    ctx.surface.draw_text(ctx.x, y, label.rstrip(), size, bold=True, color=ctx.style.text_color)
    _draw_highlighted(match.group("value"), ctx.x + label_width, y, ctx, bold=False)
    return y + ctx.style.line_height


def render_heading(line: str, ctx: LineContext, y: float) -> float:
    style = ctx.style
    if ctx.previous_kind not in (None, "blank"):
        y += style.line_height * BLANK_LINE_FACTOR
    text = line.strip()
    width = ctx.surface.draw_text(
        ctx.x, y, text, style.heading_font_size, bold=True, color=style.heading_color, layer="heading",
    )
    rule_y = y + style.heading_font_size + 4
    ctx.surface.draw_line(
        Point(ctx.x, rule_y), Point(ctx.x + width, rule_y), style.rule_color, 1, layer="heading",
    )
    return y + style.line_height + 6


def _draw_plain_lines(lines: Sequence[WrappedLine], x: float, y: float, ctx: LineContext) -> float:
    for wrapped in lines:
        ctx.surface.draw_text(x, y, wrapped.text, ctx.style.font_size, color=ctx.style.text_color)
        y += ctx.style.line_height
    return y


def render_bullet(line: str, ctx: LineContext, y: float) -> float:
    match = BULLET_PATTERN.match(line)
    size = ctx.style.font_size
    indent = ctx.surface.measure(BULLET_GLYPH + "  ", size)
    ctx.surface.draw_text(ctx.x, y, BULLET_GLYPH, size, color=ctx.style.text_color, layer="bullet")
    lines = ctx.breaker.break_text(match.group("text") if match else line, ctx.width - indent)
    if not lines:
        return y + ctx.style.line_height
    return _draw_plain_lines(lines, ctx.x + indent, y, ctx)


def _runs(wrapped: WrappedLine) -> List[Tuple[str, float, bool]]:
    """Merge neighbouring plain tokens into one run; financial tokens stay single."""
    runs: List[Tuple[str, float, bool]] = []
    for token, offset in wrapped.placements:
        if runs and not token.financial and not runs[-1][2]:
            text, start, _ = runs[-1]
            joiner = " " if token.space_before else ""
            runs[-1] = (text + joiner + token.text, start, False)
        else:
            runs.append((token.text, offset, token.financial))
    return runs


def render_financial(line: str, ctx: LineContext, y: float) -> float:
    tokens = segment_tokens(line)
    breaker = ctx.breaker
    if breaker.tokens_width(tokens) <= ctx.width:
        lines = breaker.break_tokens(tokens, float("inf"))
    else:
        lines = breaker.break_tokens(tokens, ctx.width)

    size = ctx.style.font_size
    for wrapped in lines:
        for text, offset, financial in _runs(wrapped):
            if financial:
                _draw_highlighted(text, ctx.x + offset, y, ctx, bold=True)
            else:
                ctx.surface.draw_text(ctx.x + offset, y, text, size, color=ctx.style.text_color)
        y += ctx.style.line_height
    return y


def render_paragraph(line: str, ctx: LineContext, y: float) -> float:
    return _draw_plain_lines(ctx.breaker.break_text(line, ctx.width), ctx.x, y, ctx)


def render_refundable_notice(line: str, ctx: LineContext, y: float) -> float:
    style = ctx.style
    text = line.strip().lstrip(":").strip()
    pad = style.notice_padding
    lines = ctx.breaker.break_text(text, ctx.width - 2 * pad)
    box_height = len(lines) * style.line_height + 2 * pad
    ctx.surface.fill_rect(
        Rect(ctx.x, y, ctx.width, box_height),
        style.notice_fill,
        outline=style.notice_border,
        outline_width=1,
        radius=6,
        layer="notice",
    )
    _draw_plain_lines(lines, ctx.x + pad, y + pad, ctx)
    return y + box_height + style.line_height * BLANK_LINE_FACTOR


GENERIC_RULES: Tuple[LineRule, ...] = (
    LineRule("blank", is_blank, render_spacer),
    LineRule("label", is_label_token, render_label_value),
    LineRule("heading", is_section_heading, render_heading),
    LineRule("bullet", is_bullet, render_bullet),
    LineRule("financial", has_financial_token, render_financial),
    LineRule("label_value", is_label_value, render_label_value),
    LineRule("paragraph", always, render_paragraph),
)

APPROVAL_LETTER_RULES: Tuple[LineRule, ...] = (
    LineRule("blank", is_blank, render_spacer),
    LineRule("refundable_notice", is_refundable_notice, render_refundable_notice),
    LineRule("label", is_label_token, render_label_value),
    LineRule("heading", is_approval_heading, render_heading),
    LineRule("bullet", is_bullet, render_bullet),
    LineRule("financial", has_financial_token, render_financial),
    LineRule("label_value", is_label_value, render_label_value),
    LineRule("paragraph", always, render_paragraph),
)


class BodyRenderer:
    """Lays out a substituted body on a page surface with one rule table."""

    def __init__(
        self,
        surface: PageSurface,
        style: Optional[BodyStyle] = None,
        rules: Sequence[LineRule] = GENERIC_RULES,
    ):
        self.surface = surface
        self.style = style or BodyStyle()
        self.rules = tuple(rules)
        self.breaker = LineBreaker(surface.metrics, self.style.font_size)

    def context(self, x: float, width: float) -> LineContext:
        return LineContext(self.surface, self.breaker, self.style, x, width)

    def classify(self, line: str, ctx: LineContext) -> LineRule:
        for rule in self.rules:
            if rule.matches(line, ctx):
                return rule
        raise LookupError(f"No rule matches line {line!r}")

    def render(self, body: str, x: float, y: float, width: float) -> float:
        """
        Draws ``body`` line by line starting at ``y``.

        Args:
            body: Substituted, placeholder-free body text
            x: Left edge of the content column
            y: Top of the first line
            width: Content column width

        Returns:
            The y position below the last drawn block
        """
        ctx = self.context(x, width)
        for line in body.replace("\r\n", "\n").split("\n"):
            rule = self.classify(line, ctx)
            y = rule.render(line, ctx, y)
            ctx.previous_kind = rule.name
        return y


def rules_for(template: "Template") -> Tuple[LineRule, ...]:
    """Rule table for a template: approval letters get their own variant."""
    return APPROVAL_LETTER_RULES if template.is_approval_letter else GENERIC_RULES
