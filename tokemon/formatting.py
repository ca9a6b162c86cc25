"""Number formatting, ANSI styling and CSV quoting for terminal output."""

from __future__ import annotations

import math
import os
import shutil
import sys

_DEFAULT_WIDTH = 120


def _round_half_away(x: float) -> float:
    return math.copysign(math.floor(abs(x) + 0.5), x)


def format_cost(cost: float) -> str:
    """Format a USD amount, choosing precision by magnitude."""
    rounded = _round_half_away(cost * 10_000.0) / 10_000.0
    if rounded == 0.0:
        return "$0.00"
    if rounded < 0.01:
        return f"${rounded:.4f}"
    if rounded >= 100.0:
        return f"${rounded:.0f}"
    return f"${rounded:.2f}"


def format_cost_styled(cost: float, color: bool) -> str:
    """Format a cost, coloured by how large it is when ``color`` is set."""
    text = format_cost(cost)
    if not color:
        return text
    if cost == 0.0:
        return dim(text, True)
    if cost < 1.0:
        return green(text, True)
    if cost < 10.0:
        return yellow(text, True)
    return red(text, True)


def format_tokens(n: int) -> str:
    """Token count with thousands separators."""
    return f"{n:,}"


def format_tokens_styled(n: int, color: bool) -> str:
    """Token count, dimmed when zero and ``color`` is set."""
    text = format_tokens(n)
    return dim(text, True) if color and n == 0 else text


def format_tokens_short(n: int) -> str:
    """Compact token count such as ``1.5K`` or ``2.3M``."""
    if n >= 1_000_000_000:
        return f"{n / 1e9:.1f}B"
    if n >= 1_000_000:
        return f"{n / 1e6:.1f}M"
    if n >= 1_000:
        return f"{n / 1e3:.1f}K"
    return str(n)


def use_color() -> bool:
    """Whether to emit ANSI colours: stdout is a terminal and NO_COLOR is unset."""
    try:
        is_tty = sys.stdout.isatty()
    except (AttributeError, ValueError):
        is_tty = False
    return is_tty and "NO_COLOR" not in os.environ


def _ansi(code: str, s: str, color: bool) -> str:
    return f"\x1b[{code}m{s}\x1b[0m" if color else s


def bold(s: str, color: bool) -> str:
    return _ansi("1", s, color)


def dim(s: str, color: bool) -> str:
    return _ansi("2", s, color)


def cyan_bold(s: str, color: bool) -> str:
    return _ansi("1;36", s, color)


def green(s: str, color: bool) -> str:
    return _ansi("32", s, color)


def yellow(s: str, color: bool) -> str:
    return _ansi("33", s, color)


def red(s: str, color: bool) -> str:
    return _ansi("31", s, color)


def bold_row(row: list[str], color: bool) -> list[str]:
    """Return the row with every non-empty cell in bold."""
    if not color:
        return list(row)
    return [bold(cell, True) if cell else cell for cell in row]


def style_header(header: list[str], color: bool) -> list[str]:
    """Return the header row with every cell in bold cyan."""
    if not color:
        return list(header)
    return [cyan_bold(cell, True) for cell in header]


def terminal_width() -> int:
    """Terminal width in columns, 120 when it cannot be determined."""
    return shutil.get_terminal_size((_DEFAULT_WIDTH, 24)).columns


def display_width(s: str) -> int:
    """Visible width of a string, ignoring ANSI escape sequences."""
    width = 0
    in_escape = False
    for ch in s:
        if in_escape:
            if ch.isascii() and ch.isalpha():
                in_escape = False
        elif ch == "\x1b":
            in_escape = True
        else:
            width += 1
    return width


def csv_quote(s: str) -> str:
    """Quote a CSV field when it holds a comma, quote or line break."""
    if any(c in s for c in ',"\n\r'):
        return '"' + s.replace('"', '""') + '"'
    return s