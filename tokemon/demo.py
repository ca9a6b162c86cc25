"""Deterministic synthetic usage data for showing off the dashboard."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from functools import cache

from tokemon.records import Record

DEMO_ENABLED = False
HISTORY_DAYS = 365
TODAY_BURST_COUNT = 48
ACTIVE_SESSION_COUNT = 480
ACTIVE_SESSION_WINDOW_SECS = 3_600

_MASK64 = (1 << 64) - 1
_SEED = 0x1234_5678_9ABC_DEF0


@dataclass(frozen=True)
class _DemoModel:
    provider: str
    model: str
    base_input: int
    base_output: int
    base_cache_read: int
    base_cache_creation: int


DEMO_MODELS = (
    _DemoModel("claude-code", "claude-sonnet-4-5-20250929", 1_500, 3_200, 18_000, 4_500),
    _DemoModel("codex", "gpt-5", 4_200, 2_600, 11_000, 0),
    _DemoModel("gemini", "gemini-2.5-pro", 6_400, 1_900, 0, 0),
)


class XorShift:
    """Small deterministic 64-bit xorshift generator."""

    def __init__(self, seed: int) -> None:
        self.state = seed & _MASK64

    def next(self) -> int:
        """Advance the state and return it."""
        x = self.state
        x ^= (x << 13) & _MASK64
        x ^= x >> 7
        x ^= (x << 17) & _MASK64
        self.state = x
        return x


@cache
def _demo_now() -> datetime:
    # Frozen on first use so reloads do not drift the synthetic history.
    return datetime.now(UTC)


def records(enabled: bool = DEMO_ENABLED, now: datetime | None = None) -> list[Record]:
    """Synthetic records: a year of history, today's spread and an active last hour.

    Returns an empty list unless ``enabled``. The same ``now`` always yields
    the same records.
    """
    if not enabled:
        return []

    now = now if now is not None else _demo_now()
    rng = XorShift(_SEED)
    out: list[Record] = []

    for days_ago in range(HISTORY_DAYS):
        if rng.next() % 100 < 12:
            continue

        day = now - timedelta(days=days_ago)

        is_spike = rng.next() % 8 == 0
        if is_spike:
            day_mult = 3.0 + (rng.next() % 35) / 10.0
        else:
            day_mult = 0.55 + (rng.next() % 140) / 100.0

        roll = rng.next() % 100
        if days_ago < 30:
            if roll <= 44:
                dominant_idx = 0
            elif roll <= 84:
                dominant_idx = 1
            elif roll <= 96:
                dominant_idx = 2
            else:
                dominant_idx = rng.next() % 3
        elif roll <= 69:
            dominant_idx = 0
        elif roll <= 89:
            dominant_idx = 1
        else:
            dominant_idx = 2

        dominant = DEMO_MODELS[dominant_idx]
        record_count = 4 + rng.next() % 5 if is_spike else 2 + rng.next() % 4
        for i in range(record_count):
            ts = _day_offset(day, rng, i)
            jitter = 0.65 + (rng.next() % 110) / 100.0
            out.append(_build_record(dominant, ts, day_mult * jitter, "demo-history"))

        if rng.next() % 100 < 35:
            sprinkle_idx = rng.next() % 3
            if sprinkle_idx == dominant_idx:
                sprinkle_idx = (sprinkle_idx + 1) % 3
            sprinkle = DEMO_MODELS[sprinkle_idx]
            count = 1 + rng.next() % 2
            for i in range(count):
                ts = _day_offset(day, rng, i + 10)
                small_scale = 0.15 + (rng.next() % 20) / 100.0
                out.append(_build_record(sprinkle, ts, small_scale, "demo-history"))

    today_start = datetime.combine(now.astimezone(UTC).date(), datetime.min.time(), UTC)
    elapsed_secs = max(int((now - today_start).total_seconds()), 60)

    for k in range(TODAY_BURST_COUNT):
        base_offset = (k * elapsed_secs) // TODAY_BURST_COUNT
        jitter_secs = rng.next() % 41 - 20
        offset = min(max(base_offset + jitter_secs, 0), elapsed_secs - 1)
        ts = today_start + timedelta(seconds=offset)
        model = DEMO_MODELS[rng.next() % len(DEMO_MODELS)]
        scale = 0.4 + (rng.next() % 160) / 100.0
        out.append(_build_record(model, ts, scale, "demo-today"))

    window = min(ACTIVE_SESSION_WINDOW_SECS, elapsed_secs)
    for k in range(ACTIVE_SESSION_COUNT):
        t = k / ACTIVE_SESSION_COUNT
        secs_before_now = int((1.0 - t * t) * window)
        jitter = rng.next() % 17 - 8
        secs_before_now = max(secs_before_now + jitter, 0)
        ts = now - timedelta(seconds=secs_before_now)

        pick = rng.next() % 10
        if pick in (0, 1):
            model = DEMO_MODELS[1]
        elif pick == 2:
            model = DEMO_MODELS[2]
        else:
            model = DEMO_MODELS[0]
        scale = 0.8 + (rng.next() % 220) / 100.0
        out.append(_build_record(model, ts, scale, "demo-active"))

    out.append(_build_record(DEMO_MODELS[0], now - timedelta(seconds=3), 2.2, "demo-active"))
    return out


def _day_offset(day: datetime, rng: XorShift, i: int) -> datetime:
    hours = rng.next() % 14
    minutes = rng.next() % 60
    seconds = rng.next() % 60
    return day - timedelta(hours=hours, minutes=minutes, seconds=seconds, milliseconds=i * 37)


def _build_record(m: _DemoModel, ts: datetime, scale: float, session_prefix: str) -> Record:
    return Record(
        timestamp=ts,
        provider=m.provider,
        model=m.model,
        input_tokens=int(m.base_input * scale),
        output_tokens=int(m.base_output * scale),
        cache_read_tokens=int(m.base_cache_read * scale),
        cache_creation_tokens=int(m.base_cache_creation * scale),
        thinking_tokens=0,
        cost_usd=None,
        session_id=f"{session_prefix}-{m.provider}",
    )