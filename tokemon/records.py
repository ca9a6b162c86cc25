"""Usage records and their de-duplication."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True)
class Record:
    """One model request's token usage, as read from a provider's files."""

    timestamp: datetime
    provider: str
    model: str | None = None
    input_tokens: int = 0
    output_tokens: int = 0
    cache_read_tokens: int = 0
    cache_creation_tokens: int = 0
    thinking_tokens: int = 0
    cost_usd: float | None = None
    message_id: str | None = None
    request_id: str | None = None
    session_id: str | None = None

    def total_tokens(self) -> int:
        """All tokens of every kind in this record."""
        return (
            self.input_tokens
            + self.output_tokens
            + self.cache_read_tokens
            + self.cache_creation_tokens
            + self.thinking_tokens
        )

    def dedup_key(self) -> str:
        """Identity of the request this record describes.

        Records that carry a message id are identified by provider, message id
        and request id. Others fall back to everything that describes the
        request: time, session, model and token counts.
        """
        if self.message_id:
            return f"{self.provider}:msg:{self.message_id}:{self.request_id or ''}"
        return ":".join(
            (
                self.provider,
                "ts",
                self.timestamp.isoformat(),
                self.session_id or "",
                self.model or "",
                str(self.input_tokens),
                str(self.output_tokens),
                str(self.cache_read_tokens),
                str(self.cache_creation_tokens),
                str(self.thinking_tokens),
            )
        )


def deduplicate(entries: Iterable[Record]) -> list[Record]:
    """Drop records whose dedup key was already seen, keeping first occurrences in order."""
    seen: set[str] = set()
    result: list[Record] = []
    for entry in entries:
        key = entry.dedup_key()
        if key not in seen:
            seen.add(key)
            result.append(entry)
    return result