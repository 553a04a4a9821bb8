"""
CSV artifacts for an estimation run.

Layout under the configured output directory:

    <output_dir>/<YYYYMMDD_HHMMSS>/
        samples/<Table>.csv      raw sampled rows, measured for record size
        IngestionEstimate.csv    one row per estimated table, loop order
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd

from defender_ingest_estimator.estimator.models import SUMMARY_COLUMNS
from defender_ingest_estimator.exceptions import ExportError

if TYPE_CHECKING:
    from defender_ingest_estimator.estimator.models import TableEstimate
    from defender_ingest_estimator.hunting.rows import HuntingRow

logger = logging.getLogger(__name__)

SAMPLES_DIRNAME = "samples"
SUMMARY_FILENAME = "IngestionEstimate.csv"
RUN_DIR_FORMAT = "%Y%m%d_%H%M%S"


def run_dir_path(output_dir: Path, now: datetime | None = None) -> Path:
    """Timestamped run directory under output_dir (not created)."""
    return Path(output_dir) / (now or datetime.now()).strftime(RUN_DIR_FORMAT)


def create_run_dir(output_dir: Path, now: datetime | None = None) -> Path:
    """
    Create a timestamped run directory with its samples/ subdirectory.

    Raises:
        ExportError: If the directory cannot be created
    """
    run_dir = run_dir_path(output_dir, now)
    try:
        (run_dir / SAMPLES_DIRNAME).mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ExportError(f"Cannot create output directory {run_dir}: {e}") from e
    return run_dir


def write_sample_csv(rows: Sequence[HuntingRow], path: Path) -> Path:
    """
    Write sampled rows with a header row.

    Columns follow first-seen order across rows, so sparse rows do not
    drop columns.

    Raises:
        ExportError: If the file cannot be written
    """
    df = pd.DataFrame([row.as_record() for row in rows])
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(path, index=False)
    except OSError as e:
        raise ExportError(f"Cannot write sample file {path}: {e}") from e
    return path


def write_summary_csv(results: Sequence[TableEstimate], path: Path) -> Path:
    """
    Write the ResultSet in processing order.

    The header is written even when no table produced an estimate.

    Raises:
        ExportError: If the file cannot be written
    """
    df = pd.DataFrame([e.to_row() for e in results], columns=list(SUMMARY_COLUMNS))
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(path, index=False)
    except OSError as e:
        raise ExportError(f"Cannot write summary file {path}: {e}") from e

    logger.info(f"Wrote {len(results)} estimates to {path}")
    return path
