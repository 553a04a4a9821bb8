"""Tests for KQL query construction."""

from defender_ingest_estimator.estimator.queries import (
    build_count_query,
    build_sample_query,
    lookback_period,
)


class TestQueries:
    """Query strings match what the hunting API is sent."""

    def test_lookback_period(self):
        assert lookback_period(7) == "ago(7d)"

    def test_count_query(self):
        query = build_count_query("DeviceProcessEvents", "ago(7d)")
        assert query == (
            "DeviceProcessEvents | where Timestamp > ago(7d) | summarize TotalEvents = count()"
        )

    def test_sample_query_take(self):
        query = build_sample_query("EmailEvents", "ago(1d)", "take", 500)
        assert query == "EmailEvents | where Timestamp > ago(1d) | take 500"

    def test_sample_query_sample(self):
        query = build_sample_query("AlertInfo", "ago(30d)", "sample", 10000)
        assert query == "AlertInfo | where Timestamp > ago(30d) | sample 10000"
