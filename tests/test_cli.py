from dataclasses import replace
from datetime import date

import pytest

from tokemon.cli import Cli, DisplayMode, Frequency, SortOrder, build_parser, parse_args
from tokemon.config import Config, ConfigSortOrder


def test_report_defaults():
    cli = parse_args(["report"])
    assert cli.command == "report"
    assert cli.frequency is Frequency.DAILY
    assert cli.json is False
    assert cli.csv is False
    assert cli.display is None
    assert cli.providers == []
    assert cli.order is None


@pytest.mark.parametrize(
    "argv",
    [["--json", "-f", "weekly", "report"], ["report", "--json", "-f", "weekly"]],
)
def test_global_options_before_or_after_subcommand(argv):
    cli = parse_args(argv)
    assert cli.json is True
    assert cli.frequency is Frequency.WEEKLY


def test_providers_are_repeatable():
    cli = parse_args(["report", "-p", "claude-code", "--provider", "codex"])
    assert cli.providers == ["claude-code", "codex"]


def test_dates_parsed():
    cli = parse_args(["report", "--since", "2026-02-01", "--until", "2026-02-20"])
    assert cli.since == date(2026, 2, 1)
    assert cli.until == date(2026, 2, 20)


def test_enum_options():
    cli = parse_args(["report", "-d", "breakdown", "-o", "desc"])
    assert cli.display is DisplayMode.BREAKDOWN
    assert cli.order is SortOrder.DESC


def test_csv_conflicts_with_json():
    with pytest.raises(SystemExit):
        parse_args(["report", "--json", "--csv"])


def test_subcommand_required():
    with pytest.raises(SystemExit):
        parse_args([])


@pytest.mark.parametrize(
    "argv",
    [
        ["report", "--since", "yesterday"],
        ["report", "-f", "hourly"],
        ["sessions", "--top", "-3"],
        ["frobnicate"],
    ],
)
def test_bad_arguments_exit(argv):
    with pytest.raises(SystemExit):
        parse_args(argv)


def test_sessions_top():
    assert parse_args(["sessions"]).top == 20
    assert parse_args(["sessions", "--top", "5"]).top == 5


def test_prune_requires_before():
    with pytest.raises(SystemExit):
        parse_args(["prune"])
    assert parse_args(["prune", "--before", "2026-01-01"]).before == date(2026, 1, 1)


def test_top_defaults_and_overrides():
    cli = parse_args(["top"])
    assert (cli.view, cli.interval) == ("today", 0)
    cli = parse_args(["top", "--view", "month", "--interval", "7"])
    assert (cli.view, cli.interval) == ("month", 7)


def test_every_subcommand_parses():
    names = ["report", "statusline", "budget", "discover", "init", "sessions", "mcp", "top"]
    assert [parse_args([name]).command for name in names] == names


def test_flags_parse_to_true():
    cli = parse_args(["budget", "--no-cost", "--offline", "--refresh", "--reparse"])
    assert (cli.no_cost, cli.offline, cli.refresh, cli.reparse) == (True, True, True, True)


def test_build_parser_prog():
    assert build_parser().prog == "tokemon"


def test_display_mode_follows_config_when_unset():
    cli = Cli(command="report")
    assert cli.display_mode(Config()) is DisplayMode.COMPACT
    assert cli.display_mode(replace(Config(), breakdown=True)) is DisplayMode.BREAKDOWN


def test_display_mode_flag_overrides_config():
    cli = Cli(command="report", display=DisplayMode.COMPACT)
    assert cli.display_mode(replace(Config(), breakdown=True)) is DisplayMode.COMPACT


def test_is_desc():
    desc_config = replace(Config(), sort_order=ConfigSortOrder.DESC)
    assert Cli(command="report").is_desc(Config()) is False
    assert Cli(command="report").is_desc(desc_config) is True
    assert Cli(command="report", order=SortOrder.ASC).is_desc(desc_config) is False
    assert Cli(command="report", order=SortOrder.DESC).is_desc(Config()) is True