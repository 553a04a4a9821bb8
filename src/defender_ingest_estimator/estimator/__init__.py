"""
Ingestion estimation: operator input, KQL queries, per-table algorithm.
"""

from defender_ingest_estimator.estimator.core import (
    FALLBACK_RECORD_SIZE_KB,
    compute_estimate,
    estimate_table,
    measure_avg_record_size_kb,
    run_estimation,
)
from defender_ingest_estimator.estimator.inputs import (
    EstimationRequest,
    build_request,
    parse_lookback_days,
    parse_sample_method,
    parse_sample_size,
    prompt_request,
)
from defender_ingest_estimator.estimator.models import (
    SUMMARY_COLUMNS,
    EstimationRun,
    OutcomeStatus,
    TableEstimate,
    TableOutcome,
)
from defender_ingest_estimator.estimator.queries import (
    build_count_query,
    build_sample_query,
    lookback_period,
)

__all__ = [
    # inputs
    "EstimationRequest",
    "build_request",
    "parse_lookback_days",
    "parse_sample_method",
    "parse_sample_size",
    "prompt_request",
    # queries
    "build_count_query",
    "build_sample_query",
    "lookback_period",
    # core
    "FALLBACK_RECORD_SIZE_KB",
    "compute_estimate",
    "estimate_table",
    "measure_avg_record_size_kb",
    "run_estimation",
    # models
    "SUMMARY_COLUMNS",
    "EstimationRun",
    "OutcomeStatus",
    "TableEstimate",
    "TableOutcome",
]
