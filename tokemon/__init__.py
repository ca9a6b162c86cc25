"""Token usage records, their SQLite cache, budgets, configuration and formatting."""

__version__ = "0.2.3"