"""
Interactive entry point.

Usage:
    defender-ingest-estimator
    python -m defender_ingest_estimator

Credentials, output directory and table list come from .env / environment
(see EstimatorSettings.from_env). The operator is prompted for lookback
days, sample size and sample method.

Exit codes: 0 on completion, 1 on configuration or authentication failure.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

import httpx

from defender_ingest_estimator.config.settings import EstimatorSettings
from defender_ingest_estimator.estimator.core import run_estimation
from defender_ingest_estimator.estimator.inputs import prompt_request
from defender_ingest_estimator.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ExportError,
)
from defender_ingest_estimator.hunting.auth import get_access_token
from defender_ingest_estimator.hunting.client import HuntingClient
from defender_ingest_estimator.report.console import format_estimate_table, format_summary
from defender_ingest_estimator.report.export import (
    SAMPLES_DIRNAME,
    SUMMARY_FILENAME,
    create_run_dir,
    run_dir_path,
    write_summary_csv,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def run(
    settings: EstimatorSettings,
    input_fn: Callable[[str], str] = input,
    transport: httpx.BaseTransport | None = None,
) -> int:
    """
    Execute one estimation run with resolved settings.

    Args:
        settings: Run configuration
        input_fn: Prompt function (tests pass a scripted replacement)
        transport: Optional httpx transport shared by token and query calls

    Returns:
        Process exit code
    """
    request = prompt_request(tables=settings.tables, input_fn=input_fn)

    try:
        token = get_access_token(settings, transport=transport)
    except AuthenticationError as e:
        print(f"Error: authentication failed: {e}", file=sys.stderr)
        return 1

    # Export failures are not fatal: unwritable samples degrade each table
    # to the fallback record size and the estimates are still printed.
    now = datetime.now()
    run_dir = run_dir_path(settings.output_dir, now)
    samples_dir: Path | None = run_dir / SAMPLES_DIRNAME
    try:
        create_run_dir(settings.output_dir, now=now)
    except ExportError as e:
        logger.warning(
            f"{e}; using fallback {settings.fallback_record_size_kb} KB/record for every table"
        )
        samples_dir = None

    client = HuntingClient(token, settings, transport=transport)
    if not client.test_connection():
        logger.warning("Hunting API preflight failed; tables may be skipped")
    estimation = run_estimation(client, request, settings, samples_dir)

    summary_path: Path | None = run_dir / SUMMARY_FILENAME
    try:
        write_summary_csv(estimation.results, summary_path)
    except ExportError as e:
        logger.warning(f"Summary export failed: {e}")
        summary_path = None

    print()
    print(format_estimate_table(estimation))
    print()
    print(format_summary(estimation, request, summary_path=summary_path, samples_dir=samples_dir))
    return 0


def main() -> int:
    """CLI entrypoint."""
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    try:
        settings = EstimatorSettings.from_env()
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return run(settings)
