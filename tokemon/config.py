"""User configuration stored in ``config.toml``."""

from __future__ import annotations

import sys
import tomllib
from collections.abc import Callable, Mapping
from dataclasses import asdict, dataclass, field, fields, replace
from enum import Enum, StrEnum
from pathlib import Path
from typing import Any

import tomli_w

from tokemon.paths import config_dir

CONFIG_FILENAME = "config.toml"

_HEADER = (
    "# Tokemon configuration\n"
    "# Location: ~/.config/tokemon/config.toml\n"
    "#\n"
    "# Changes here affect default behavior.\n"
    "# CLI flags always override config values.\n\n"
)


def _cycle(member: Enum) -> Any:
    members = list(type(member))
    return members[(members.index(member) + 1) % len(members)]


class DefaultCommand(StrEnum):
    """Default aggregation when no subcommand is given."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    def next(self) -> DefaultCommand:
        """The following value, wrapping around."""
        return _cycle(self)


class ConfigSortOrder(StrEnum):
    """Sort order for table output."""

    ASC = "asc"
    DESC = "desc"

    def next(self) -> ConfigSortOrder:
        """The following value, wrapping around."""
        return _cycle(self)


class SparklineMetric(StrEnum):
    """Metric plotted by sparkline trendlines."""

    TOKENS = "tokens"
    COST = "cost"

    def next(self) -> SparklineMetric:
        """The following value, wrapping around."""
        return _cycle(self)


@dataclass
class BudgetConfig:
    """Spending limits in USD; ``None`` means no limit for that period."""

    daily: float | None = None
    weekly: float | None = None
    monthly: float | None = None


@dataclass
class ColumnConfig:
    """Which columns table output shows."""

    date: bool = True
    model: bool = True
    api_provider: bool = True
    client: bool = True
    input: bool = True
    output: bool = True
    cache_write: bool = True
    cache_read: bool = True
    total_tokens: bool = True
    cost: bool = True


@dataclass
class Config:
    """User configuration; every field has a default."""

    default_command: DefaultCommand = DefaultCommand.DAILY
    default_format: str = "table"
    breakdown: bool = False
    no_cost: bool = False
    offline: bool = False
    providers: list[str] = field(default_factory=list)
    columns: ColumnConfig = field(default_factory=ColumnConfig)
    sort_order: ConfigSortOrder = ConfigSortOrder.ASC
    refresh: bool = False
    reparse: bool = False
    budget: BudgetConfig = field(default_factory=BudgetConfig)
    tick_interval: int = 0
    show_sparklines: bool = True
    sparkline_metric: SparklineMetric = SparklineMetric.TOKENS
    today_bucket_mins: int = 10
    week_bucket_hours: int = 4
    month_bucket_days: int = 1

    def validated(self) -> Config:
        """A copy with invalid values replaced by defaults and limits clamped."""
        defaults = Config()
        config = replace(
            self,
            providers=list(self.providers),
            columns=replace(self.columns),
            budget=replace(self.budget),
        )

        if config.default_format not in ("table", "json"):
            _warn(
                f"invalid default_format '{config.default_format}'; "
                f"using '{defaults.default_format}'"
            )
            config.default_format = defaults.default_format

        if not 1 <= config.today_bucket_mins <= 60:
            config.today_bucket_mins = defaults.today_bucket_mins
        if not 1 <= config.week_bucket_hours <= 24:
            config.week_bucket_hours = defaults.week_bucket_hours
        if not 1 <= config.month_bucket_days <= 7:
            config.month_bucket_days = defaults.month_bucket_days

        if config.tick_interval > 300:
            _warn(
                f"tick_interval {config.tick_interval} exceeds maximum (300s); clamping"
            )
            config.tick_interval = 300

        return config

    def to_dict(self) -> dict[str, Any]:
        """Plain TOML-ready mapping; unset budget limits are left out."""
        out: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Enum):
                value = value.value
            elif isinstance(value, ColumnConfig):
                value = asdict(value)
            elif isinstance(value, BudgetConfig):
                value = {k: v for k, v in asdict(value).items() if v is not None}
            elif isinstance(value, list):
                value = list(value)
            out[f.name] = value
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Config:
        """Build a config from a mapping; missing keys take defaults.

        Raises ValueError when a value has the wrong type or is not a known
        variant. Unknown keys are ignored.
        """
        table = _as_table("config", data)
        kwargs = {
            name: parse(name, table[name])
            for name, parse in _CONFIG_PARSERS.items()
            if name in table
        }
        return cls(**kwargs)

    @classmethod
    def load(cls, path: str | Path | None = None) -> Config:
        """Read the config file, falling back to defaults when absent or invalid."""
        path = Path(path) if path is not None else cls.config_path()
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return cls()
        try:
            config = cls.from_dict(tomllib.loads(text))
        except ValueError as exc:
            _warn(f"failed to parse {path}: {exc}; using defaults")
            return cls()
        return config.validated()

    def save(self, path: str | Path | None = None) -> Path:
        """Write this config to disk and return the path written."""
        path = Path(path) if path is not None else self.config_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(_HEADER + tomli_w.dumps(self.to_dict()), encoding="utf-8")
        return path

    @classmethod
    def write_default(cls, path: str | Path | None = None) -> Path:
        """Write the default config to disk and return the path written."""
        return cls().save(path)

    @staticmethod
    def config_path() -> Path:
        """Default location of the config file."""
        return config_dir() / CONFIG_FILENAME


def _warn(message: str) -> None:
    print(f"[tokemon] Warning: {message}", file=sys.stderr)


def _as_table(name: str, value: Any) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValueError(f"{name}: expected a table, got {value!r}")
    return value


def _as_bool(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{name}: expected a boolean, got {value!r}")
    return value


def _as_uint(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{name}: expected a non-negative integer, got {value!r}")
    return value


def _as_str(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{name}: expected a string, got {value!r}")
    return value


def _as_str_list(name: str, value: Any) -> list[str]:
    if not isinstance(value, list):
        raise ValueError(f"{name}: expected an array, got {value!r}")
    return [_as_str(name, item) for item in value]


def _as_limit(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name}: expected a number, got {value!r}")
    return float(value)


def _as_enum(enum_cls: type[StrEnum]) -> Callable[[str, Any], StrEnum]:
    def parse(name: str, value: Any) -> StrEnum:
        text = _as_str(name, value)
        try:
            return enum_cls(text)
        except ValueError:
            variants = ", ".join(m.value for m in enum_cls)
            raise ValueError(
                f"{name}: unknown variant '{text}', expected one of {variants}"
            ) from None

    return parse


def _columns(name: str, value: Any) -> ColumnConfig:
    table = _as_table(name, value)
    return ColumnConfig(
        **{
            f.name: _as_bool(f"{name}.{f.name}", table[f.name])
            for f in fields(ColumnConfig)
            if f.name in table
        }
    )


def _budget(name: str, value: Any) -> BudgetConfig:
    table = _as_table(name, value)
    return BudgetConfig(
        **{
            f.name: _as_limit(f"{name}.{f.name}", table[f.name])
            for f in fields(BudgetConfig)
            if f.name in table
        }
    )


_CONFIG_PARSERS: dict[str, Callable[[str, Any], Any]] = {
    "default_command": _as_enum(DefaultCommand),
    "default_format": _as_str,
    "breakdown": _as_bool,
    "no_cost": _as_bool,
    "offline": _as_bool,
    "providers": _as_str_list,
    "columns": _columns,
    "sort_order": _as_enum(ConfigSortOrder),
    "refresh": _as_bool,
    "reparse": _as_bool,
    "budget": _budget,
    "tick_interval": _as_uint,
    "show_sparklines": _as_bool,
    "sparkline_metric": _as_enum(SparklineMetric),
    "today_bucket_mins": _as_uint,
    "week_bucket_hours": _as_uint,
    "month_bucket_days": _as_uint,
}