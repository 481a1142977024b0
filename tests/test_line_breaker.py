"""
Tests for greedy line breaking.
"""

import pytest

from loanquill.engine.line_breaker import LineBreaker, WrapToken, tokenize

PARAGRAPH = (
    "We are pleased to inform you that, based on the information and documents "
    "submitted by you, your loan application has been successfully approved after "
    "careful assessment of your profile."
)


@pytest.fixture
def breaker(metrics):
    return LineBreaker(metrics, 13)


class TestTokenize:
    """Test whitespace tokenization."""

    def test_words(self):
        assert [t.text for t in tokenize("  a  bb ccc ")] == ["a", "bb", "ccc"]

    def test_space_before_uses_source(self):
        source = "Amount:₹500 due"
        tokens = tokenize(source[7:], offset=7, source=source)
        assert tokens[0].space_before is False
        assert tokens[-1].space_before is True


class TestLineBreaker:
    """Test line breaking."""

    def test_lines_fit_column(self, breaker):
        lines = breaker.break_text(PARAGRAPH, 200)

        assert len(lines) > 1
        for line in lines:
            assert line.width <= 200

    def test_text_is_preserved(self, breaker):
        lines = breaker.break_text(PARAGRAPH, 200)
        assert " ".join(line.text for line in lines) == PARAGRAPH

    def test_line_width_matches_measurement(self, breaker, metrics):
        for line in breaker.break_text(PARAGRAPH, 250):
            assert line.width == pytest.approx(metrics.measure(line.text, 13))

    def test_short_text_single_line(self, breaker):
        lines = breaker.break_text("Dear Asha,", 500)
        assert [line.text for line in lines] == ["Dear Asha,"]

    def test_overlong_token_gets_own_line(self, breaker):
        long_token = "X" * 80
        lines = breaker.break_text(f"before {long_token} after", 100)

        assert [line.text for line in lines] == ["before", long_token, "after"]
        assert lines[1].width > 100

    def test_empty_text(self, breaker):
        assert breaker.break_text("", 100) == []
        assert breaker.break_text("   ", 100) == []

    def test_stable_output(self, breaker):
        first = [line.text for line in breaker.break_text(PARAGRAPH, 180)]
        second = [line.text for line in breaker.break_text(PARAGRAPH, 180)]
        assert first == second

    def test_glued_tokens_stay_together(self, breaker):
        tokens = [
            WrapToken("Fee:"),
            WrapToken("₹2,500.00", financial=True, space_before=False),
            WrapToken("only"),
        ]
        width = breaker.tokens_width(tokens[:2])
        lines = breaker.break_tokens(tokens, width + 1)

        assert [line.text for line in lines] == ["Fee:₹2,500.00", "only"]

    def test_financial_tokens_measured_bold(self, breaker, metrics):
        token = WrapToken("₹500.00", financial=True)
        assert breaker.token_width(token) == metrics.measure("₹500.00", 13, bold=True)
