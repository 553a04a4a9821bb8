"""
Per-table ingestion estimation.

For each table:
1. Count events in the lookback window (failure or zero count skips it)
2. Sample up to sample_size rows, export them to CSV and measure the
   file to get an average record size (failure falls back to a fixed size)
3. Extrapolate daily and total MB/GB from the count and record size

One table's failure never affects another; every failure is converted to
a TableOutcome at the table boundary.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING

from defender_ingest_estimator.config.settings import DEFAULT_FALLBACK_RECORD_SIZE_KB
from defender_ingest_estimator.config.tables import normalize_tables
from defender_ingest_estimator.estimator.models import (
    EstimationRun,
    OutcomeStatus,
    TableEstimate,
    TableOutcome,
)
from defender_ingest_estimator.estimator.queries import (
    COUNT_COLUMN,
    build_count_query,
    build_sample_query,
)
from defender_ingest_estimator.exceptions import APIError, ExportError
from defender_ingest_estimator.report.export import write_sample_csv

if TYPE_CHECKING:
    from defender_ingest_estimator.config.settings import EstimatorSettings
    from defender_ingest_estimator.estimator.inputs import EstimationRequest
    from defender_ingest_estimator.hunting.client import HuntingClient

logger = logging.getLogger(__name__)

KB = 1024
FALLBACK_RECORD_SIZE_KB = DEFAULT_FALLBACK_RECORD_SIZE_KB


def compute_estimate(
    table_name: str,
    total_events: int,
    avg_record_size_kb: float,
    lookback_days: int,
) -> TableEstimate:
    """
    Extrapolate ingestion volume from event count and record size.

    GB values are derived from the already-rounded MB values. Rounding is
    Python's round() (half-to-even on exact ties).

    Examples:
        >>> e = compute_estimate("X", 70000, 1.0, 7)
        >>> e.est_daily_events, e.est_total_mb_in_lookback, e.est_total_gb_in_lookback
        (10000, 68.36, 0.07)
    """
    daily_events = round(total_events / lookback_days)
    daily_mb = round(daily_events * avg_record_size_kb / KB, 2)
    total_mb = round(total_events * avg_record_size_kb / KB, 2)

    return TableEstimate(
        table_name=table_name,
        events_in_lookback=total_events,
        avg_record_size_kb=avg_record_size_kb,
        est_daily_events=daily_events,
        est_daily_mb_ingested=daily_mb,
        est_total_mb_in_lookback=total_mb,
        est_daily_gb_ingested=round(daily_mb / KB, 2),
        est_total_gb_in_lookback=round(total_mb / KB, 2),
    )


def measure_avg_record_size_kb(sample_path: Path, row_count: int) -> float:
    """
    Average serialized size of one sampled row, in KB.

    An empty sample still divides by 1, so the result is the file size.

    Raises:
        ExportError: If the sample file cannot be read
    """
    try:
        size_bytes = sample_path.stat().st_size
    except OSError as e:
        raise ExportError(f"Cannot measure sample file {sample_path}: {e}") from e
    return round(size_bytes / KB / max(1, row_count), 2)


def _count_events(client: HuntingClient, table: str, lookback: str) -> tuple[int | None, str]:
    """Return (event count, skip reason); count is None when the table must be skipped."""
    try:
        rows = client.run_query(build_count_query(table, lookback))
    except APIError as e:
        return None, f"count query failed: {e}"

    total = rows[0].get_int(COUNT_COLUMN) if rows else None
    if total is None:
        # Missing read permission also lands here as an empty result
        return None, "count query returned no usable TotalEvents value"
    if total <= 0:
        return None, "no events in lookback window"
    return total, ""


def _sample_record_size(
    client: HuntingClient,
    table: str,
    request: EstimationRequest,
    samples_dir: Path | None,
) -> tuple[float, Path]:
    """Run the sample query, export it and measure it."""
    if samples_dir is None:
        raise ExportError("no writable samples directory")
    query = build_sample_query(
        table, request.lookback_period, request.sample_method, request.sample_size
    )
    rows = client.run_query(query)
    sample_path = write_sample_csv(rows, samples_dir / f"{table}.csv")
    avg_kb = measure_avg_record_size_kb(sample_path, len(rows))
    logger.info(f"{table}: sampled {len(rows):,} rows, avg {avg_kb} KB/record")
    return avg_kb, sample_path


def estimate_table(
    client: HuntingClient,
    table: str,
    request: EstimationRequest,
    samples_dir: Path | None,
    fallback_record_size_kb: float = FALLBACK_RECORD_SIZE_KB,
) -> TableOutcome:
    """
    Estimate ingestion for one table.

    Args:
        client: Authenticated hunting client
        table: Table name from the configured list
        request: Normalized run parameters
        samples_dir: Directory receiving the per-table sample CSV; None
            skips sampling and uses the fallback record size
        fallback_record_size_kb: Record size used when sampling fails

    Returns:
        TableOutcome; SKIPPED when the count failed or was zero,
        DEGRADED when the fallback record size was used
    """
    total_events, reason = _count_events(client, table, request.lookback_period)
    if total_events is None:
        logger.warning(f"Skipping {table}: {reason}")
        return TableOutcome(table_name=table, status=OutcomeStatus.SKIPPED, reason=reason)

    logger.info(f"{table}: {total_events:,} events in last {request.lookback_days} days")

    try:
        avg_kb, sample_path = _sample_record_size(client, table, request, samples_dir)
    except (APIError, ExportError) as e:
        logger.warning(
            f"{table}: sampling failed ({e}); using fallback {fallback_record_size_kb} KB/record"
        )
        estimate = compute_estimate(
            table, total_events, fallback_record_size_kb, request.lookback_days
        )
        return TableOutcome(
            table_name=table,
            status=OutcomeStatus.DEGRADED,
            estimate=estimate,
            reason=f"sampling failed: {e}",
        )

    estimate = compute_estimate(table, total_events, avg_kb, request.lookback_days)
    return TableOutcome(
        table_name=table,
        status=OutcomeStatus.ESTIMATED,
        estimate=estimate,
        sample_path=str(sample_path),
    )


def run_estimation(
    client: HuntingClient,
    request: EstimationRequest,
    settings: EstimatorSettings,
    samples_dir: Path | None,
) -> EstimationRun:
    """
    Estimate every table in the request.

    With settings.max_workers > 1 tables run on a bounded thread pool.
    Outcomes are always returned in configured table order.

    Args:
        client: Authenticated hunting client
        request: Normalized run parameters, including the table list
        settings: Run configuration (fallback size, worker count)
        samples_dir: Directory receiving per-table sample CSVs (None when
            the output directory is unwritable)

    Returns:
        EstimationRun with one outcome per table
    """
    # Repeated names would race on the same samples/<Table>.csv
    tables = normalize_tables(request.tables) if request.tables else settings.tables
    logger.info(
        f"Estimating {len(tables)} tables over {request.lookback_days} days "
        f"({request.sample_method} {request.sample_size:,})"
    )

    def _estimate(table: str) -> TableOutcome:
        return estimate_table(
            client, table, request, samples_dir, settings.fallback_record_size_kb
        )

    if settings.max_workers > 1 and len(tables) > 1:
        workers = min(settings.max_workers, len(tables))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="estimator") as executor:
            outcomes = list(executor.map(_estimate, tables))
    else:
        outcomes = [_estimate(table) for table in tables]

    run = EstimationRun(outcomes=outcomes)
    logger.info(
        f"Estimated {len(run.results)} of {len(tables)} tables "
        f"({len(run.skipped)} skipped, {len(run.degraded)} with fallback size)"
    )
    return run
