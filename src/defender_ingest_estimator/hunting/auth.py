"""
Access token acquisition for the Defender advanced hunting API.

Uses the OAuth2 client-credentials grant against Entra ID. The token is
treated as an opaque bearer value; no refresh or caching is done since a
run is far shorter than the token lifetime.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from defender_ingest_estimator.exceptions import AuthenticationError

if TYPE_CHECKING:
    from defender_ingest_estimator.config.settings import EstimatorSettings

logger = logging.getLogger(__name__)

# HTTP status codes
HTTP_OK = 200


def get_access_token(
    settings: EstimatorSettings,
    transport: httpx.BaseTransport | None = None,
) -> str:
    """
    Request a bearer token for the hunting API.

    Args:
        settings: Run configuration holding tenant and app credentials
        transport: Optional httpx transport (tests inject a MockTransport)

    Returns:
        Access token string

    Raises:
        AuthenticationError: If the token endpoint is unreachable, rejects
            the credentials, or returns no access_token
    """
    data = {
        "client_id": settings.client_id,
        "client_secret": settings.client_secret,
        "scope": settings.api_scope,
        "grant_type": "client_credentials",
    }

    try:
        with httpx.Client(
            timeout=settings.request_timeout_seconds, transport=transport
        ) as client:
            response = client.post(settings.token_url, data=data)
    except httpx.HTTPError as e:
        raise AuthenticationError(f"Token request to {settings.token_url} failed: {e}") from e

    if response.status_code != HTTP_OK:
        raise AuthenticationError(
            f"Token endpoint returned {response.status_code}: {_error_description(response)}"
        )

    try:
        token = response.json().get("access_token")
    except ValueError as e:
        raise AuthenticationError("Token endpoint returned a non-JSON body") from e

    if not token:
        raise AuthenticationError("Token endpoint response has no access_token")

    logger.info(f"Acquired access token for tenant {settings.tenant_id}")
    return token


def _error_description(response: httpx.Response) -> str:
    """Extract the Entra ID error description, falling back to raw text."""
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict):
        return body.get("error_description") or body.get("error") or response.text
    return response.text
