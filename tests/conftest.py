"""
Shared test fixtures and factories.

FakeDefenderApi stands in for both the Entra ID token endpoint and the
advanced hunting API behind an httpx.MockTransport, so every test runs
the real client code without network access.
"""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest


class FakeDefenderApi:
    """Scripted token + hunting API.

    counts: table -> TotalEvents value (None gives an empty Results array)
    samples: table -> list of row dicts returned by take/sample queries
    failing_counts / failing_samples: tables whose query returns HTTP 400
    malformed_counts / malformed_samples: tables whose Results is not an array
    """

    def __init__(
        self,
        counts: dict[str, Any] | None = None,
        samples: dict[str, list[dict[str, Any]]] | None = None,
        failing_counts: set[str] | None = None,
        failing_samples: set[str] | None = None,
        malformed_counts: set[str] | None = None,
        malformed_samples: set[str] | None = None,
        token_status: int = 200,
    ) -> None:
        self.counts = counts or {}
        self.samples = samples or {}
        self.failing_counts = failing_counts or set()
        self.failing_samples = failing_samples or set()
        self.malformed_counts = malformed_counts or set()
        self.malformed_samples = malformed_samples or set()
        self.token_status = token_status
        self.queries: list[str] = []
        self.token_requests = 0

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == "login.microsoftonline.com":
            self.token_requests += 1
            if self.token_status != 200:
                return httpx.Response(
                    self.token_status,
                    json={"error": "invalid_client", "error_description": "AADSTS7000215"},
                )
            return httpx.Response(200, json={"access_token": "test-token", "expires_in": 3599})

        query = json.loads(request.content)["Query"]
        self.queries.append(query)

        if query.startswith("print"):
            return httpx.Response(200, json={"Schema": [], "Results": [{"Ok": 1}]})

        table = query.split(" |", 1)[0]
        if "summarize TotalEvents" in query:
            if table in self.failing_counts:
                return _bad_request(f"Failed to resolve table '{table}'")
            if table in self.malformed_counts:
                return _malformed()
            count = self.counts.get(table)
            results = [] if count is None else [{"TotalEvents": count}]
            return httpx.Response(200, json={"Schema": [], "Results": results})

        if table in self.failing_samples:
            return _bad_request("Query exceeded the allowed result size")
        if table in self.malformed_samples:
            return _malformed()
        return httpx.Response(200, json={"Schema": [], "Results": self.samples.get(table, [])})


def _bad_request(message: str) -> httpx.Response:
    return httpx.Response(400, json={"error": {"code": "BadRequest", "message": message}})


def _malformed() -> httpx.Response:
    return httpx.Response(200, json={"Schema": [], "Results": {"TotalEvents": 5}})


@pytest.fixture
def settings_factory(tmp_path):
    """Factory for EstimatorSettings with test credentials."""
    from defender_ingest_estimator.config.settings import EstimatorSettings

    def _create(**overrides) -> EstimatorSettings:
        base: dict[str, Any] = {
            "tenant_id": "00000000-0000-0000-0000-000000000001",
            "client_id": "00000000-0000-0000-0000-000000000002",
            "client_secret": "test-secret",
            "output_dir": tmp_path / "output",
            "tables": ("DeviceProcessEvents", "DeviceNetworkEvents"),
            "max_retries": 1,
        }
        base.update(overrides)
        return EstimatorSettings(**base)

    return _create


@pytest.fixture
def fake_api_factory():
    """Factory for FakeDefenderApi instances."""

    def _create(**kwargs) -> FakeDefenderApi:
        return FakeDefenderApi(**kwargs)

    return _create


@pytest.fixture
def sample_row_factory():
    """Factory for device event rows as the hunting API returns them."""

    def _create(**overrides) -> dict[str, Any]:
        base = {
            "Timestamp": "2026-10-17T08:15:42.1234567Z",
            "DeviceId": "c0bd2f9a7e3b4f1d8a6e5c4b3a291817",
            "DeviceName": "wks-0142.contoso.com",
            "ActionType": "ProcessCreated",
            "FileName": "powershell.exe",
            "ProcessCommandLine": "powershell.exe -NoProfile -ExecutionPolicy Bypass",
            "AccountName": "svc-backup",
            "ReportId": 48213,
            "AdditionalFields": {"ProcessIntegrityLevel": "High"},
        }
        base.update(overrides)
        return base

    return _create


@pytest.fixture
def request_factory():
    """Factory for normalized EstimationRequest objects."""
    from defender_ingest_estimator.estimator.inputs import EstimationRequest

    def _create(**overrides) -> EstimationRequest:
        base: dict[str, Any] = {
            "lookback_days": 7,
            "sample_size": 100,
            "sample_method": "take",
            "tables": ("DeviceProcessEvents", "DeviceNetworkEvents"),
        }
        base.update(overrides)
        return EstimationRequest(**base)

    return _create


@pytest.fixture
def skip_without_credentials():
    """Skip test if Defender API credentials are not configured."""
    from defender_ingest_estimator.config.settings import EstimatorSettings
    from defender_ingest_estimator.exceptions import ConfigurationError

    try:
        EstimatorSettings.from_env()
    except ConfigurationError:
        pytest.skip("Defender API credentials not configured")
