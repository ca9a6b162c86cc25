"""Exception hierarchy for tokemon."""

from __future__ import annotations


class TokemonError(Exception):
    """Base class for every error raised by tokemon."""


class JsonParseError(TokemonError):
    """A usage file held JSON that could not be parsed."""

    def __init__(self, file: str, source: object) -> None:
        self.file = str(file)
        self.source = source
        super().__init__(f"JSON parse error in {self.file}: {source}")


class DatabaseError(TokemonError):
    """The SQLite cache database reported a failure."""

    def __init__(self, cause: object) -> None:
        self.cause = cause
        super().__init__(f"Database error: {cause}")


class ProviderNotFoundError(TokemonError):
    """A provider was requested by a name that is not registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Provider '{name}' not found")


class PricingError(TokemonError):
    """Pricing data could not be loaded or applied."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Pricing error: {detail}")


class CacheError(TokemonError):
    """The usage cache is unusable."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Cache error: {detail}")