# tokemon

Building blocks for tracking the token usage of LLM coding assistants
(Claude Code, Codex CLI, Gemini CLI, OpenCode and others): a usage `Record`
type with de-duplication, a local SQLite cache of parsed records, budget
evaluation, a TOML configuration, command-line argument parsing, and helpers
for display names and number formatting.

## Installing

```
pip install .
pip install ".[test]"   # with pytest, to run the tests
```

## Modules

| Module                | Purpose                                                               |
|-----------------------|-----------------------------------------------------------------------|
| `tokemon.records`     | `Record` for one usage entry, `Record.dedup_key()`, `deduplicate()`.  |
| `tokemon.cache`       | `Cache`, a SQLite store of parsed records keyed by source file.       |
| `tokemon.filetimes`   | `file_mtime_secs()` and `file_mtime_secs_for_db()` (WAL aware).       |
| `tokemon.config`      | `Config`, loaded from and saved to a TOML file, with validation.      |
| `tokemon.cli`         | `build_parser()`, `parse_args()` and the parsed `Cli` dataclass.      |
| `tokemon.pacemaker`   | `evaluate()` of spending against daily, weekly and monthly limits.    |
| `tokemon.display`     | Human-readable names for clients, models and API providers.           |
| `tokemon.formatting`  | Cost and token formatting, ANSI colour helpers, CSV quoting.          |
| `tokemon.paths`       | Home, cache and config directories, VS Code fork storage directories. |
| `tokemon.demo`        | Deterministic synthetic records for demos.                            |
| `tokemon.errors`      | The `TokemonError` exception hierarchy.                               |

## Records and de-duplication

```python
from datetime import datetime, UTC
from tokemon.records import Record, deduplicate

r = Record(timestamp=datetime(2026, 2, 20, 10, tzinfo=UTC), provider="claude-code",
           model="claude-opus-4-6", input_tokens=100, output_tokens=50)
r.total_tokens()          # 150
deduplicate([r, r])       # [r]
```

Records with a `message_id` are identified by provider, message id and request
id; others by provider, timestamp, session, model and token counts. The first
occurrence is kept, in order.

## Display names

```python
from tokemon.display import display_client, display_model, normalize_model, infer_api_provider

display_client("claude-code")                             # "Claude Code"
display_client("my-tool")                                 # "My Tool"
normalize_model("vertexai.claude-opus-4-6@default")       # "claude-opus-4-6"
display_model("claude-opus-4-1-20250805")                 # "opus-4-1"
infer_api_provider("vertexai.gemini-2.5-flash")           # "Vertex AI"
infer_api_provider("unknown-model")                       # ""
```

## Formatting

```python
from tokemon.formatting import format_cost, format_tokens, format_tokens_short, csv_quote

format_cost(0.005)          # "$0.0050"
format_cost(1.5)            # "$1.50"
format_tokens(1234567)      # "1,234,567"
format_tokens_short(2_500)  # "2.5K"
csv_quote("hello, world")   # '"hello, world"'
```

The colour helpers (`bold`, `dim`, `green`, `yellow`, `red`, `cyan_bold`) take
a `color` flag and wrap the text in ANSI codes only when it is true.
`use_color()` is true only when stdout is a terminal and `NO_COLOR` is unset.
`display_width()` measures text while ignoring ANSI escapes, and
`terminal_width()` falls back to 120 columns.

## Configuration

`Config` is a dataclass holding every default: output format, column
visibility (`ColumnConfig`), sort order, budget limits (`BudgetConfig`),
refresh interval and sparkline settings. `Config.config_path()` points at
`config.toml` in the platform's configuration directory.

```python
from tokemon.config import Config

config = Config.load()            # defaults when the file is absent or invalid
print(config.budget.daily, config.sort_order)
config.save("/tmp/tokemon.toml")
```

`Config.validated()` returns a corrected copy: an unknown `default_format`
falls back to `"table"`, bucket sizes outside their ranges (1–60 minutes,
1–24 hours, 1–7 days) return to their defaults, and `tick_interval` is clamped
to 300 seconds. `Config.write_default(path)` writes the defaults under a
comment header. The enums `DefaultCommand`, `ConfigSortOrder` and
`SparklineMetric` each have `next()`, which cycles through their values.

## Command-line arguments

`parse_args(argv)` parses a `tokemon` command line into a `Cli` dataclass. The
subcommands are `report`, `statusline`, `budget`, `discover`, `init`,
`sessions` (`--top`), `prune` (`--before`, required), `mcp` and `top`
(`--view`, `--interval`), with shared options such as `--frequency`, `--json`,
`--csv` (not together with `--json`), `--display`, `--provider`, `--since`,
`--until` and `--order`. `Cli.display_mode(config)` and `Cli.is_desc(config)`
fall back to the configuration when the option was not given.

## Budgets

`tokemon.pacemaker.evaluate(entries, budget, today=None)` sums the cost of
records since the start of the day, the week (Monday) and the month, and
returns a `BudgetStatus` with a `BudgetPeriod` (`spent`, `limit`) for each
configured limit and `None` for the others.

## The cache

`Cache.open(path=None)` opens (and creates) the SQLite cache, by default
`usage.db` in the user cache directory, in WAL mode; `":memory:"` opens a
private in-memory database. A `Cache` is a context manager. Records are stored
per source file together with the file's modification time:

- `store_file_entries(path, mtime, entries)` replaces one file's records;
- `write_entries(files)` replaces the records of many files in one transaction
  and records the discovery time;
- `cached_file_mtimes()` maps each cached file to its stored mtime;
- `load_all_entries()` and `load_entries_filtered(since, until, providers)`
  return de-duplicated records ordered by timestamp;
- `should_rediscover(max_age_secs)` and `set_last_discovery()` track when
  files were last looked for;
- `mark_preserved(discovered_files)` keeps records whose source files are gone,
  and `prune_before(date)` deletes such preserved records older than a date.

## What this package does not do

The package has no runnable command: `parse_args` reads the arguments, but
nothing here carries out the subcommands. It does not find or parse any
assistant's usage files, has no pricing data to compute costs with, and has
no report tables, live dashboard or MCP server. Records come from your own
code or from `tokemon.demo.records(enabled=True)`.

## Errors

Failures raised by the package derive from `tokemon.errors.TokemonError`, with
`CacheError`, `DatabaseError`, `JsonParseError`, `PricingError` and
`ProviderNotFoundError` for the specific cases. Cache operations raise
`DatabaseError` for SQLite failures.