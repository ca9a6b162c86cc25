"""Command-line arguments."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from enum import StrEnum
from importlib.metadata import PackageNotFoundError, version

from tokemon.config import Config, ConfigSortOrder


class DisplayMode(StrEnum):
    """Table layout."""

    BREAKDOWN = "breakdown"
    COMPACT = "compact"


class SortOrder(StrEnum):
    """Row order."""

    ASC = "asc"
    DESC = "desc"


class Frequency(StrEnum):
    """Aggregation period."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


@dataclass
class Cli:
    """Parsed command line."""

    command: str
    frequency: Frequency = Frequency.DAILY
    json: bool = False
    csv: bool = False
    display: DisplayMode | None = None
    providers: list[str] = field(default_factory=list)
    since: date | None = None
    until: date | None = None
    no_cost: bool = False
    offline: bool = False
    order: SortOrder | None = None
    refresh: bool = False
    reparse: bool = False
    top: int = 20
    before: date | None = None
    view: str = "today"
    interval: int = 0

    def display_mode(self, config: Config) -> DisplayMode:
        """The display flag, or the config default when it was not given."""
        if self.display is not None:
            return self.display
        return DisplayMode.BREAKDOWN if config.breakdown else DisplayMode.COMPACT

    def is_desc(self, config: Config) -> bool:
        """Whether rows are sorted newest first."""
        if self.order is not None:
            return self.order is SortOrder.DESC
        return config.sort_order is ConfigSortOrder.DESC


_SUBCOMMANDS = (
    ("report", "Generate a static usage report (table, json, or csv)"),
    ("statusline", "Compact one-line output for shell prompts and status bars"),
    ("budget", "Show budget progress against configured limits"),
    ("discover", "List auto-detected providers on this machine"),
    ("init", "Generate default config file at ~/.config/tokemon/config.toml"),
    ("sessions", "Show per-session cost breakdown"),
    ("prune", "Delete old preserved data from the cache"),
    ("mcp", "Start MCP (Model Context Protocol) server over stdio"),
    ("top", "Live monitoring dashboard"),
)


def _version() -> str:
    try:
        return version("tokemon")
    except PackageNotFoundError:
        return "unknown"


def _enum_type(enum_cls: type[StrEnum]):
    def convert(text: str) -> StrEnum:
        try:
            return enum_cls(text)
        except ValueError:
            allowed = ", ".join(m.value for m in enum_cls)
            raise argparse.ArgumentTypeError(
                f"invalid value '{text}' (possible values: {allowed})"
            ) from None

    return convert


def _date(text: str) -> date:
    try:
        return datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"invalid date '{text}' (expected YYYY-MM-DD)"
        ) from None


def _non_negative_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        value = -1
    if value < 0:
        raise argparse.ArgumentTypeError(f"invalid non-negative integer '{text}'")
    return value


def _add_global_options(parser: argparse.ArgumentParser, suppress: bool) -> None:
    def default(value):
        return argparse.SUPPRESS if suppress else value

    def metavar(enum_cls: type[StrEnum]) -> str:
        return "{" + ",".join(m.value for m in enum_cls) + "}"

    parser.add_argument(
        "-f", "--frequency", type=_enum_type(Frequency), metavar=metavar(Frequency),
        default=default(Frequency.DAILY),
        help="Aggregation frequency: daily, weekly, or monthly",
    )
    parser.add_argument(
        "--json", action="store_true", default=default(False),
        help="Output as JSON instead of table",
    )
    parser.add_argument(
        "--csv", action="store_true", default=default(False), help="Output as CSV"
    )
    parser.add_argument(
        "-d", "--display", type=_enum_type(DisplayMode), metavar=metavar(DisplayMode),
        default=default(None),
        help="Display mode: breakdown (per-model) or compact (per-date)",
    )
    parser.add_argument(
        "-p", "--provider", dest="providers", action="append", default=default([]),
        help="Filter by provider (repeatable: -p claude-code -p codex)",
    )
    parser.add_argument(
        "--since", type=_date, default=default(None),
        help="Show usage since this date (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--until", type=_date, default=default(None),
        help="Show usage until this date (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--no-cost", action="store_true", default=default(False),
        help="Skip cost calculation (faster, shows tokens only)",
    )
    parser.add_argument(
        "--offline", action="store_true", default=default(False),
        help="Don't fetch remote pricing data (use cached/offline)",
    )
    parser.add_argument(
        "-o", "--order", type=_enum_type(SortOrder), metavar=metavar(SortOrder),
        default=default(None),
        help="Sort order: asc (oldest first) or desc (newest first)",
    )
    parser.add_argument(
        "--refresh", action="store_true", default=default(False),
        help="Force re-discovery of files (ignore cache freshness)",
    )
    parser.add_argument(
        "--reparse", action="store_true", default=default(False),
        help="Force re-parse of all files (ignore cached data)",
    )


def build_parser() -> argparse.ArgumentParser:
    """The argument parser for the ``tokemon`` command."""
    parser = argparse.ArgumentParser(
        prog="tokemon",
        description="Unified LLM token usage tracking across all providers",
    )
    parser.add_argument("-V", "--version", action="version", version=f"tokemon {_version()}")
    _add_global_options(parser, suppress=False)

    common = argparse.ArgumentParser(add_help=False)
    _add_global_options(common, suppress=True)

    subparsers = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")
    commands = {
        name: subparsers.add_parser(name, help=text, description=text, parents=[common])
        for name, text in _SUBCOMMANDS
    }

    commands["sessions"].add_argument(
        "--top", type=_non_negative_int, default=20, help="Show top N sessions by cost"
    )
    commands["prune"].add_argument(
        "--before", type=_date, required=True,
        help="Delete preserved entries before this date (YYYY-MM-DD)",
    )
    commands["top"].add_argument(
        "--view", default="today", help="Initial view: today, week, or month"
    )
    commands["top"].add_argument(
        "--interval", type=_non_negative_int, default=0,
        help="Data refresh interval in seconds (0 = use config or default of 2s)",
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> Cli:
    """Parse a command line; exits with a usage message on bad input."""
    parser = build_parser()
    namespace = parser.parse_args(argv)
    if namespace.json and namespace.csv:
        parser.error("argument --csv: not allowed with argument --json")
    values = vars(namespace)
    return Cli(**{f.name: values[f.name] for f in fields(Cli) if f.name in values})