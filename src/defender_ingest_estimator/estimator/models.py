"""
Result types for ingestion estimation.

TableEstimate is one row of the ResultSet. TableOutcome wraps it with the
per-table status so failures travel as values instead of exceptions.
EstimationRun owns the ordered outcomes and derives totals from them.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Summary CSV columns, in export order
SUMMARY_COLUMNS = (
    "TableName",
    "EventsInLookback",
    "AvgRecordSizeKB",
    "EstDailyEvents",
    "EstDailyMBIngested",
    "EstTotalMBInLookback",
    "EstDailyGBIngested",
    "EstTotalGBInLookback",
)


@dataclass(frozen=True)
class TableEstimate:
    """Extrapolated ingestion volume for one table."""

    table_name: str
    events_in_lookback: int
    avg_record_size_kb: float
    est_daily_events: int
    est_daily_mb_ingested: float
    est_total_mb_in_lookback: float
    est_daily_gb_ingested: float
    est_total_gb_in_lookback: float

    def to_row(self) -> dict[str, Any]:
        """Summary CSV row keyed by SUMMARY_COLUMNS."""
        return dict(
            zip(
                SUMMARY_COLUMNS,
                (
                    self.table_name,
                    self.events_in_lookback,
                    self.avg_record_size_kb,
                    self.est_daily_events,
                    self.est_daily_mb_ingested,
                    self.est_total_mb_in_lookback,
                    self.est_daily_gb_ingested,
                    self.est_total_gb_in_lookback,
                ),
            )
        )


class OutcomeStatus(str, Enum):
    """How a table finished."""

    ESTIMATED = "estimated"
    DEGRADED = "degraded"  # fallback record size used
    SKIPPED = "skipped"  # count failed or zero events


@dataclass(frozen=True)
class TableOutcome:
    """Per-table result: an estimate, or the reason there is none."""

    table_name: str
    status: OutcomeStatus
    estimate: TableEstimate | None = None
    reason: str = ""
    sample_path: str | None = None

    @property
    def has_estimate(self) -> bool:
        return self.estimate is not None


@dataclass
class EstimationRun:
    """Outcomes of one run, in configured table order."""

    outcomes: list[TableOutcome] = field(default_factory=list)

    @property
    def results(self) -> list[TableEstimate]:
        """The ResultSet in processing order."""
        return [o.estimate for o in self.outcomes if o.has_estimate]

    def sorted_for_display(self) -> list[TableEstimate]:
        """ResultSet ordered by total GB, largest first."""
        return sorted(self.results, key=lambda e: e.est_total_gb_in_lookback, reverse=True)

    @property
    def total_mb(self) -> float:
        """Sum of per-table total MB, rounded once."""
        return round(math.fsum(e.est_total_mb_in_lookback for e in self.results), 2)

    @property
    def total_gb(self) -> float:
        """Sum of per-table total GB, rounded once."""
        return round(math.fsum(e.est_total_gb_in_lookback for e in self.results), 2)

    @property
    def skipped(self) -> list[TableOutcome]:
        return [o for o in self.outcomes if o.status == OutcomeStatus.SKIPPED]

    @property
    def degraded(self) -> list[TableOutcome]:
        return [o for o in self.outcomes if o.status == OutcomeStatus.DEGRADED]
