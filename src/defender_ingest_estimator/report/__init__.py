"""
Report output: CSV artifacts and console rendering.
"""

from defender_ingest_estimator.report.console import format_estimate_table, format_summary
from defender_ingest_estimator.report.export import (
    create_run_dir,
    write_sample_csv,
    write_summary_csv,
)

__all__ = [
    "create_run_dir",
    "format_estimate_table",
    "format_summary",
    "write_sample_csv",
    "write_summary_csv",
]
