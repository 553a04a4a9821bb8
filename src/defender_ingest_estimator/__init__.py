"""
defender-ingest-estimator: predict Defender XDR log ingestion volume.

Counts events per advanced hunting table over a lookback window, samples
records to measure their serialized size, and extrapolates daily and
total MB/GB before streaming is enabled to a downstream workspace.

Quick Start:
    from defender_ingest_estimator import (
        EstimatorSettings, HuntingClient, build_request, get_access_token, run_estimation,
    )

    settings = EstimatorSettings.from_env()
    client = HuntingClient(get_access_token(settings), settings)
    request = build_request("7", "1000", "take", tables=settings.tables)
    estimation = run_estimation(client, request, settings, samples_dir)
    print(estimation.total_gb)
"""

from defender_ingest_estimator.config import DEFAULT_TABLES, EstimatorSettings, load_tables
from defender_ingest_estimator.estimator import (
    EstimationRequest,
    EstimationRun,
    OutcomeStatus,
    TableEstimate,
    TableOutcome,
    build_request,
    compute_estimate,
    estimate_table,
    run_estimation,
)
from defender_ingest_estimator.exceptions import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    CredentialError,
    EstimatorError,
    ExportError,
    QueryError,
    RateLimitError,
)
from defender_ingest_estimator.hunting import HuntingClient, HuntingRow, get_access_token

try:
    from importlib.metadata import version as _get_version

    __version__ = _get_version("defender-ingest-estimator")
except Exception:
    __version__ = "0.1.0"  # Fallback for editable installs

__all__ = [
    # Version
    "__version__",
    # Configuration
    "DEFAULT_TABLES",
    "EstimatorSettings",
    "load_tables",
    # Hunting API
    "HuntingClient",
    "HuntingRow",
    "get_access_token",
    # Estimation
    "EstimationRequest",
    "EstimationRun",
    "OutcomeStatus",
    "TableEstimate",
    "TableOutcome",
    "build_request",
    "compute_estimate",
    "estimate_table",
    "run_estimation",
    # Exceptions
    "EstimatorError",
    "ConfigurationError",
    "CredentialError",
    "AuthenticationError",
    "APIError",
    "RateLimitError",
    "QueryError",
    "ExportError",
]
