"""
Defender advanced hunting integration.

Token acquisition, the query client and typed result rows.
"""

from defender_ingest_estimator.hunting.auth import get_access_token
from defender_ingest_estimator.hunting.client import HuntingClient
from defender_ingest_estimator.hunting.rows import HuntingRow, rows_from_results

__all__ = [
    "HuntingClient",
    "HuntingRow",
    "get_access_token",
    "rows_from_results",
]
