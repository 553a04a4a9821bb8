"""
Console rendering of an estimation run.

The estimate table is sorted by total GB (largest first); the summary
block repeats the run parameters and grand totals.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd

from defender_ingest_estimator.estimator.models import SUMMARY_COLUMNS

if TYPE_CHECKING:
    from defender_ingest_estimator.estimator.inputs import EstimationRequest
    from defender_ingest_estimator.estimator.models import EstimationRun

REPORT_WIDTH = 60


def format_estimate_table(run: EstimationRun) -> str:
    """Render the ResultSet sorted by EstTotalGBInLookback descending."""
    results = run.sorted_for_display()
    if not results:
        return "No tables produced events in the lookback window."

    df = pd.DataFrame([e.to_row() for e in results], columns=list(SUMMARY_COLUMNS))
    return df.to_string(
        index=False,
        formatters={
            "EventsInLookback": lambda v: f"{int(v):,}",
            "EstDailyEvents": lambda v: f"{int(v):,}",
        },
        float_format=lambda v: f"{v:.2f}",
    )


def format_summary(
    run: EstimationRun,
    request: EstimationRequest,
    summary_path: Path | None = None,
    samples_dir: Path | None = None,
) -> str:
    """
    Build the summary block.

    Args:
        run: Completed estimation run
        request: Run parameters shown in the header
        summary_path: Summary CSV location, if written
        samples_dir: Sample CSV directory, if created

    Returns:
        Formatted summary string for CLI output.
    """
    lines = []

    lines.append("=" * REPORT_WIDTH)
    lines.append("Ingestion Estimate Summary")
    lines.append("=" * REPORT_WIDTH)

    lines.append("")
    lines.append("Parameters:")
    lines.append(f"  Lookback window: {request.lookback_days} days ({request.lookback_period})")
    lines.append(f"  Sampling: {request.sample_method} {request.sample_size:,} records per table")

    lines.append("")
    lines.append("Tables:")
    lines.append(f"  Configured: {len(run.outcomes)}")
    lines.append(f"  Estimated: {len(run.results)}")
    lines.append(f"  Skipped: {len(run.skipped)}")
    for outcome in run.skipped:
        lines.append(f"       - {outcome.table_name}: {outcome.reason}")
    if run.degraded:
        lines.append(f"  Fallback record size: {len(run.degraded)}")
        for outcome in run.degraded:
            lines.append(f"       - {outcome.table_name}: {outcome.reason}")

    lines.append("")
    lines.append("Totals:")
    lines.append(f"  Total MB in lookback: {run.total_mb:,.2f}")
    lines.append(f"  Total GB in lookback: {run.total_gb:,.2f}")

    if summary_path or samples_dir:
        lines.append("")
        lines.append("Artifacts:")
        if summary_path:
            lines.append(f"  Summary: {summary_path}")
        if samples_dir:
            lines.append(f"  Samples: {samples_dir}")

    lines.append("")
    lines.append("=" * REPORT_WIDTH)

    return "\n".join(lines)
