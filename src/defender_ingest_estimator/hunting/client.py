"""
Advanced hunting API client.

Runs KQL queries through POST /api/advancedhunting/run with a bearer
token. The API allows 45 calls per minute per tenant; throttled calls
(HTTP 429) are retried with exponential backoff, everything else fails
fast with QueryError.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from defender_ingest_estimator.exceptions import APIError, QueryError, RateLimitError
from defender_ingest_estimator.hunting.rows import HuntingRow, rows_from_results

if TYPE_CHECKING:
    from defender_ingest_estimator.config.settings import EstimatorSettings

logger = logging.getLogger(__name__)

# HTTP status codes
HTTP_OK = 200
HTTP_TOO_MANY_REQUESTS = 429

# Backoff bounds for throttled calls
RETRY_WAIT_MIN_SECONDS = 2
RETRY_WAIT_MAX_SECONDS = 60

CONNECTION_TEST_QUERY = "print Ok = 1"


class HuntingClient:
    """
    Client for the Defender advanced hunting API.

    The token comes from get_access_token(); the client never refreshes it.
    """

    def __init__(
        self,
        token: str,
        settings: EstimatorSettings,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize hunting client.

        Args:
            token: Bearer token for api.security.microsoft.com
            settings: Run configuration (endpoint, timeout, retry budget)
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self.url = settings.hunting_api_url
        self.timeout = settings.request_timeout_seconds
        self.max_retries = settings.max_retries
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        self._transport = transport

    def run_query(self, query: str) -> list[HuntingRow]:
        """
        Run a hunting query.

        Args:
            query: KQL query text

        Returns:
            Result rows (empty list when the query matched nothing)

        Raises:
            RateLimitError: If still throttled after max_retries attempts
            QueryError: If the API rejects the query or is unreachable
        """
        retrying = Retrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(
                multiplier=1, min=RETRY_WAIT_MIN_SECONDS, max=RETRY_WAIT_MAX_SECONDS
            ),
            retry=retry_if_exception_type(RateLimitError),
            reraise=True,
        )
        data = retrying(self._post_query, query)
        results = data.get("Results")
        if results is not None and not isinstance(results, list):
            raise QueryError(
                f"Unexpected Results payload from hunting API: {type(results).__name__}"
            )
        return rows_from_results(results)

    def _post_query(self, query: str) -> dict[str, Any]:
        """Send one query request and validate the response."""
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(self.url, headers=self._headers, json={"Query": query})
        except httpx.HTTPError as e:
            raise QueryError(f"Hunting API request failed: {e}") from e

        if response.status_code == HTTP_TOO_MANY_REQUESTS:
            logger.warning("Hunting API rate limit exceeded, backing off")
            raise RateLimitError("Hunting API rate limit exceeded")

        if response.status_code != HTTP_OK:
            raise QueryError(
                f"Hunting API returned {response.status_code}: {_error_message(response)}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise QueryError("Hunting API returned a non-JSON body") from e

        if not isinstance(data, dict):
            raise QueryError(f"Unexpected hunting API response: {type(data).__name__}")
        return data

    def test_connection(self) -> bool:
        """
        Run a trivial query to check token and permissions.

        Returns:
            True if the API answered, False otherwise
        """
        try:
            self.run_query(CONNECTION_TEST_QUERY)
        except APIError as e:
            logger.warning(f"Hunting API connection test failed: {e}")
            return False
        return True


def _error_message(response: httpx.Response) -> str:
    """Extract the API error message, falling back to raw text."""
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return body["error"].get("message") or response.text
    return response.text
