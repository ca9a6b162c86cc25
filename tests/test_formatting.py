import io
import sys

import pytest

from tokemon.formatting import (
    bold,
    bold_row,
    csv_quote,
    cyan_bold,
    dim,
    display_width,
    format_cost,
    format_cost_styled,
    format_tokens,
    format_tokens_short,
    format_tokens_styled,
    green,
    red,
    style_header,
    terminal_width,
    use_color,
    yellow,
)


class _TtyStream(io.StringIO):
    def isatty(self):
        return True


@pytest.mark.parametrize(
    "n, expected",
    [(0, "0"), (123, "123"), (1234, "1,234"), (1234567, "1,234,567")],
)
def test_format_tokens(n, expected):
    assert format_tokens(n) == expected


@pytest.mark.parametrize(
    "cost, expected",
    [
        (0.0, "$0.00"),
        (1.50, "$1.50"),
        (0.005, "$0.0050"),
        (0.0012, "$0.0012"),
        (123.456, "$123"),
        (5.678, "$5.68"),
        (0.00004, "$0.00"),
    ],
)
def test_format_cost(cost, expected):
    assert format_cost(cost) == expected


def test_format_cost_styled_no_color():
    assert format_cost_styled(0.0, False) == "$0.00"
    assert format_cost_styled(1.50, False) == "$1.50"


def test_format_cost_styled_colors_by_magnitude():
    assert format_cost_styled(0.0, True) == "\x1b[2m$0.00\x1b[0m"
    assert format_cost_styled(0.5, True) == green("$0.50", True)
    assert format_cost_styled(5.0, True) == yellow("$5.00", True)
    assert format_cost_styled(50.0, True) == red("$50.00", True)


def test_format_tokens_styled_no_color():
    assert format_tokens_styled(0, False) == "0"
    assert format_tokens_styled(1234, False) == "1,234"


def test_format_tokens_styled_dims_zero_only():
    assert format_tokens_styled(0, True) == "\x1b[2m0\x1b[0m"
    assert format_tokens_styled(1234, True) == "1,234"


@pytest.mark.parametrize(
    "n, expected",
    [(999, "999"), (1500, "1.5K"), (2_500_000, "2.5M"), (3_000_000_000, "3.0B")],
)
def test_format_tokens_short(n, expected):
    assert format_tokens_short(n) == expected


def test_use_color_false_when_not_a_tty(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setattr(sys, "stdout", io.StringIO())
    assert use_color() is False


def test_use_color_true_on_tty(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setattr(sys, "stdout", _TtyStream())
    assert use_color() is True


def test_use_color_respects_no_color(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "")
    monkeypatch.setattr(sys, "stdout", _TtyStream())
    assert use_color() is False


def test_ansi_helpers():
    assert bold("x", True) == "\x1b[1mx\x1b[0m"
    assert cyan_bold("x", True) == "\x1b[1;36mx\x1b[0m"
    assert dim("x", False) == "x"
    assert red("x", True) == "\x1b[31mx\x1b[0m"


def test_bold_row_skips_empty_cells():
    row = ["TOTAL", "", "1,234"]
    assert bold_row(row, True) == [bold("TOTAL", True), "", bold("1,234", True)]
    assert bold_row(row, False) == row


def test_style_header():
    assert style_header(["Date", "Cost"], True) == [
        cyan_bold("Date", True),
        cyan_bold("Cost", True),
    ]
    assert style_header(["Date"], False) == ["Date"]


def test_display_width_ignores_escapes():
    assert display_width("hello") == 5
    assert display_width(bold("hello", True)) == 5
    assert display_width("\x1b[1;36mabc\x1b[0m") == 3
    assert display_width("") == 0


def test_terminal_width_uses_columns_env(monkeypatch):
    monkeypatch.setenv("COLUMNS", "77")
    assert terminal_width() == 77


def test_csv_quote_plain():
    assert csv_quote("hello") == "hello"
    assert csv_quote("2026-02-20") == "2026-02-20"


def test_csv_quote_with_comma():
    assert csv_quote("hello, world") == '"hello, world"'


def test_csv_quote_with_quotes():
    assert csv_quote('say "hi"') == '"say ""hi"""'


def test_csv_quote_with_newline():
    assert csv_quote("line1\nline2") == '"line1\nline2"'


def test_csv_quote_with_carriage_return():
    assert csv_quote("line1\r\nline2") == '"line1\r\nline2"'
    assert csv_quote("text\r") == '"text\r"'


def test_csv_quote_empty():
    assert csv_quote("") == ""