"""SQLite cache of parsed usage records, keyed by source file and mtime."""

from __future__ import annotations

import os
import sqlite3
import sys
import time
from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager
from datetime import UTC, date, datetime, timedelta
from pathlib import Path
from typing import Any

from tokemon.errors import CacheError, DatabaseError
from tokemon.paths import cache_dir
from tokemon.records import Record, deduplicate

DB_FILENAME = "usage.db"

_BUSY_TIMEOUT_SECS = 5.0

_ENTRY_COLUMNS = (
    "provider, timestamp, model, input_tokens, output_tokens, "
    "cache_read_tokens, cache_creation_tokens, thinking_tokens, "
    "cost_usd, message_id, request_id, session_id"
)

_INSERT_SQL = (
    "INSERT INTO usage_entries ("
    "provider, source_file, source_mtime, timestamp, model, "
    "input_tokens, output_tokens, cache_read_tokens, "
    "cache_creation_tokens, thinking_tokens, cost_usd, "
    "message_id, request_id, session_id, dedup_key"
    ") VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)"
)

_SCHEMA = (
    """CREATE TABLE IF NOT EXISTS usage_entries (
        id INTEGER PRIMARY KEY,
        provider TEXT NOT NULL,
        source_file TEXT NOT NULL,
        source_mtime INTEGER NOT NULL,
        timestamp TEXT NOT NULL,
        model TEXT,
        input_tokens INTEGER NOT NULL,
        output_tokens INTEGER NOT NULL,
        cache_read_tokens INTEGER NOT NULL,
        cache_creation_tokens INTEGER NOT NULL,
        thinking_tokens INTEGER NOT NULL,
        cost_usd REAL,
        message_id TEXT,
        request_id TEXT,
        session_id TEXT,
        dedup_key TEXT
    )""",
    """CREATE TABLE IF NOT EXISTS cache_meta (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL
    )""",
    "CREATE INDEX IF NOT EXISTS idx_timestamp ON usage_entries(timestamp)",
    "CREATE INDEX IF NOT EXISTS idx_source_file ON usage_entries(source_file, source_mtime)",
    "CREATE INDEX IF NOT EXISTS idx_provider_timestamp ON usage_entries(provider, timestamp)",
)


def _warn(message: str) -> None:
    print(f"[tokemon] Warning: {message}", file=sys.stderr)


@contextmanager
def _database_errors() -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as exc:
        raise DatabaseError(exc) from exc


def _now_secs() -> int:
    return max(int(time.time()), 0)


def _to_rfc3339(ts: datetime) -> str:
    ts = ts.replace(tzinfo=UTC) if ts.tzinfo is None else ts.astimezone(UTC)
    return ts.isoformat()


def _parse_timestamp(text: Any) -> datetime:
    if not isinstance(text, str):
        raise ValueError(f"timestamp is not text: {text!r}")
    ts = datetime.fromisoformat(text)
    if ts.tzinfo is None:
        raise ValueError(f"timestamp has no offset: {text!r}")
    return ts.astimezone(UTC)


def _count(value: Any) -> int:
    if not isinstance(value, int):
        raise ValueError(f"token count is not an integer: {value!r}")
    return max(value, 0)


def _row_to_record(row: Sequence[Any]) -> Record:
    (provider, ts, model, inp, out, cache_read, cache_creation,
     thinking, cost, message_id, request_id, session_id) = row
    if not isinstance(provider, str):
        raise ValueError(f"provider is not text: {provider!r}")
    return Record(
        timestamp=_parse_timestamp(ts),
        provider=provider,
        model=model,
        input_tokens=_count(inp),
        output_tokens=_count(out),
        cache_read_tokens=_count(cache_read),
        cache_creation_tokens=_count(cache_creation),
        thinking_tokens=_count(thinking),
        cost_usd=None if cost is None else float(cost),
        message_id=message_id,
        request_id=request_id,
        session_id=session_id,
    )


def _insert_params(entry: Record, path_str: str, mtime: int) -> tuple[Any, ...]:
    return (
        entry.provider,
        path_str,
        mtime,
        _to_rfc3339(entry.timestamp),
        entry.model,
        entry.input_tokens,
        entry.output_tokens,
        entry.cache_read_tokens,
        entry.cache_creation_tokens,
        entry.thinking_tokens,
        entry.cost_usd,
        entry.message_id,
        entry.request_id,
        entry.session_id,
        entry.dedup_key(),
    )


class Cache:
    """Parsed usage records stored in SQLite, one group of rows per source file."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._conn = connection

    @classmethod
    def open(cls, path: str | os.PathLike[str] | None = None) -> Cache:
        """Open (creating if needed) the cache database and check that it is writable.

        ``path`` defaults to ``usage.db`` in the user cache directory;
        ``":memory:"`` opens a private in-memory database.
        """
        in_memory = path is not None and os.fspath(path) == ":memory:"
        if path is None:
            path = cache_dir() / DB_FILENAME
        if not in_memory:
            Path(path).parent.mkdir(parents=True, exist_ok=True)

        with _database_errors():
            conn = sqlite3.connect(
                os.fspath(path), timeout=_BUSY_TIMEOUT_SECS, isolation_level=None
            )
        cache = cls(conn)
        try:
            with _database_errors():
                mode = conn.execute("PRAGMA journal_mode=wal").fetchone()[0]
                conn.execute("PRAGMA synchronous=normal")
                conn.execute("PRAGMA cache_size=-10000")
                conn.execute("PRAGMA temp_store=memory")
                conn.execute("PRAGMA mmap_size=268435456")
            if str(mode).lower() != "wal" and not in_memory:
                _warn(
                    f"requested WAL journal mode but got '{mode}'; writes may be slower"
                )
            cache.init_schema()
            cache._verify_writable()
        except BaseException:
            conn.close()
            raise
        return cache

    def __enter__(self) -> Cache:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        with _database_errors():
            self._conn.execute("BEGIN")
            try:
                yield
            except BaseException:
                self._conn.execute("ROLLBACK")
                raise
            self._conn.execute("COMMIT")

    def init_schema(self) -> None:
        """Create tables and indexes, and add columns missing from older databases."""
        with _database_errors():
            for statement in _SCHEMA:
                self._conn.execute(statement)
            (has_preserved,) = self._conn.execute(
                "SELECT COUNT(*) FROM pragma_table_info('usage_entries') "
                "WHERE name='preserved'"
            ).fetchone()
            if not has_preserved:
                self._conn.execute(
                    "ALTER TABLE usage_entries "
                    "ADD COLUMN preserved INTEGER NOT NULL DEFAULT 0"
                )
            self._conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_preserved_timestamp "
                "ON usage_entries(preserved, timestamp)"
            )

    def _verify_writable(self) -> None:
        with _database_errors():
            self._conn.execute(
                "INSERT OR REPLACE INTO cache_meta (key, value) VALUES ('_write_test', '1')"
            )
            row = self._conn.execute(
                "SELECT value FROM cache_meta WHERE key = '_write_test'"
            ).fetchone()
            value = None if row is None else row[0]
            if value != "1":
                raise CacheError(f"cache write verification failed: read back '{value}'")
            self._conn.execute("DELETE FROM cache_meta WHERE key = '_write_test'")

    def cached_file_mtimes(self) -> dict[str, int]:
        """Latest cached mtime of every source file."""
        with _database_errors():
            rows = self._conn.execute(
                "SELECT source_file, MAX(source_mtime) FROM usage_entries "
                "GROUP BY source_file"
            ).fetchall()
        return {file: mtime for file, mtime in rows}

    def _load(self, sql: str, params: Sequence[Any] = ()) -> list[Record]:
        with _database_errors():
            rows = self._conn.execute(sql, params).fetchall()
        entries: list[Record] = []
        skipped = 0
        for row in rows:
            try:
                entries.append(_row_to_record(row))
            except (ValueError, TypeError):
                skipped += 1
        if skipped:
            _warn(f"skipped {skipped} cached entries with parse errors")
        return deduplicate(entries)

    def load_all_entries(self) -> list[Record]:
        """Every cached record, de-duplicated, oldest first."""
        return self._load(
            f"SELECT {_ENTRY_COLUMNS} FROM usage_entries ORDER BY timestamp"
        )

    def load_entries_filtered(
        self,
        since: date | None = None,
        until: date | None = None,
        providers: Iterable[str] = (),
    ) -> list[Record]:
        """Cached records within the date range (inclusive) from the given providers."""
        conditions: list[str] = []
        params: list[Any] = []

        if since is not None:
            conditions.append("timestamp >= ?")
            params.append(since.isoformat())

        if until is not None:
            try:
                next_day = until + timedelta(days=1)
            except OverflowError:
                next_day = None
            if next_day is not None:
                conditions.append("timestamp < ?")
                params.append(next_day.isoformat())

        provider_list = list(providers)
        if provider_list:
            placeholders = ",".join("?" for _ in provider_list)
            conditions.append(f"provider IN ({placeholders})")
            params.extend(provider_list)

        where = f" WHERE {' AND '.join(conditions)}" if conditions else ""
        return self._load(
            f"SELECT {_ENTRY_COLUMNS} FROM usage_entries{where} ORDER BY timestamp",
            params,
        )

    def _replace_file(self, path_str: str, mtime: int, entries: Iterable[Record]) -> int:
        self._conn.execute("DELETE FROM usage_entries WHERE source_file = ?", (path_str,))
        written = 0
        for entry in entries:
            self._conn.execute(_INSERT_SQL, _insert_params(entry, path_str, mtime))
            written += 1
        return written

    def store_file_entries(
        self,
        path: str | os.PathLike[str],
        mtime_secs: int,
        entries: Iterable[Record],
    ) -> None:
        """Replace the cached records of one source file."""
        with self._transaction():
            self._replace_file(os.fspath(path), mtime_secs, entries)

    def write_entries(
        self,
        files: Iterable[tuple[str | os.PathLike[str], int, Iterable[Record]]],
    ) -> int:
        """Replace the records of several files in one transaction.

        Also records the discovery time. Returns the number of records written;
        nothing is changed when ``files`` is empty or any write fails.
        """
        batch = list(files)
        if not batch:
            return 0
        total = 0
        with self._transaction():
            for path, mtime, entries in batch:
                total += self._replace_file(os.fspath(path), mtime, entries)
            self._set_last_discovery(_now_secs())
        return total

    def should_rediscover(self, max_age_secs: int) -> bool:
        """Whether the last discovery is older than ``max_age_secs`` or never happened."""
        try:
            row = self._conn.execute(
                "SELECT value FROM cache_meta WHERE key = 'last_discovery_at'"
            ).fetchone()
        except sqlite3.Error:
            row = None
        if row is None:
            return True
        try:
            last = int(row[0])
        except (TypeError, ValueError):
            last = 0
        return max(_now_secs() - last, 0) > max_age_secs

    def _set_last_discovery(self, now: int) -> None:
        self._conn.execute(
            "INSERT OR REPLACE INTO cache_meta (key, value) "
            "VALUES ('last_discovery_at', ?)",
            (str(now),),
        )

    def set_last_discovery(self) -> None:
        """Record the current time as the last discovery."""
        with _database_errors():
            self._set_last_discovery(_now_secs())

    def mark_preserved(self, discovered_files: Iterable[str]) -> None:
        """Mark records of source files missing from ``discovered_files`` as preserved."""
        discovered = set(discovered_files)
        with _database_errors():
            cached = [
                file
                for (file,) in self._conn.execute(
                    "SELECT DISTINCT source_file FROM usage_entries WHERE preserved = 0"
                ).fetchall()
            ]
            for file in cached:
                if file not in discovered:
                    self._conn.execute(
                        "UPDATE usage_entries SET preserved = 1 "
                        "WHERE source_file = ? AND preserved = 0",
                        (file,),
                    )

    def prune_before(self, before: date) -> int:
        """Delete preserved records dated before ``before``; return how many went."""
        with _database_errors():
            cursor = self._conn.execute(
                "DELETE FROM usage_entries WHERE preserved = 1 AND timestamp < ?",
                (before.isoformat(),),
            )
        return cursor.rowcount