"""
KQL query construction for ingestion estimation.

Table names are not escaped; they come from the configured table list,
never from free-form operator input.
"""

from __future__ import annotations

COUNT_COLUMN = "TotalEvents"


def lookback_period(days: int) -> str:
    """KQL timespan token, e.g. ``ago(7d)``."""
    return f"ago({days}d)"


def build_count_query(table: str, lookback: str) -> str:
    """Count events in the lookback window."""
    return f"{table} | where Timestamp > {lookback} | summarize {COUNT_COLUMN} = count()"


def build_sample_query(table: str, lookback: str, method: str, sample_size: int) -> str:
    """Fetch up to sample_size rows with ``take`` or ``sample``."""
    return f"{table} | where Timestamp > {lookback} | {method} {sample_size}"
