"""Tests for the interactive entry point."""

import pandas as pd
import pytest

from defender_ingest_estimator import cli
from defender_ingest_estimator.config import settings as settings_module
from defender_ingest_estimator.config.settings import (
    ENV_CLIENT_ID,
    ENV_CLIENT_SECRET,
    ENV_TENANT_ID,
)


def _answers(*values):
    it = iter(values)
    return lambda prompt: next(it)


@pytest.fixture
def api(fake_api_factory, sample_row_factory):
    return fake_api_factory(
        counts={"DeviceProcessEvents": 70000, "DeviceNetworkEvents": 1_400_000},
        samples={
            "DeviceProcessEvents": [sample_row_factory(ReportId=i) for i in range(10)],
            "DeviceNetworkEvents": [sample_row_factory(ActionType="ConnectionSuccess")],
        },
    )


class TestRun:
    """Test a full run against the fake API."""

    def test_completes_and_writes_artifacts(self, api, settings_factory, capsys):
        settings = settings_factory()

        code = cli.run(settings, input_fn=_answers("7", "100", "take"), transport=api.transport)

        assert code == 0
        run_dirs = list(settings.output_dir.iterdir())
        assert len(run_dirs) == 1
        summary = pd.read_csv(run_dirs[0] / "IngestionEstimate.csv")
        # File keeps configured order; console sorts by size
        assert list(summary["TableName"]) == ["DeviceProcessEvents", "DeviceNetworkEvents"]
        assert (run_dirs[0] / "samples" / "DeviceNetworkEvents.csv").exists()

        out = capsys.readouterr().out
        assert out.index("DeviceNetworkEvents") < out.index("DeviceProcessEvents")
        assert "Ingestion Estimate Summary" in out

    def test_sample_queries_use_normalized_input(self, api, settings_factory):
        cli.run(settings_factory(), input_fn=_answers("0", "999999", "TAKE"), transport=api.transport)

        assert "DeviceProcessEvents | where Timestamp > ago(1d) | take 100000" in api.queries

    def test_unwritable_output_dir_degrades_tables(self, api, settings_factory, tmp_path, capsys):
        blocker = tmp_path / "blocked"
        blocker.write_text("file in the way")
        settings = settings_factory(output_dir=blocker)

        code = cli.run(settings, input_fn=_answers("7", "100", "take"), transport=api.transport)

        assert code == 0
        assert blocker.is_file()
        count_queries = [q for q in api.queries if "summarize TotalEvents" in q]
        assert len(count_queries) == 2
        out = capsys.readouterr().out
        assert "Fallback record size: 2" in out
        assert "DeviceNetworkEvents" in out
        assert "Samples:" not in out

    def test_authentication_failure_is_fatal(self, fake_api_factory, settings_factory, capsys):
        api = fake_api_factory(token_status=401)
        settings = settings_factory()

        code = cli.run(settings, input_fn=_answers("7", "", ""), transport=api.transport)

        assert code == 1
        assert api.queries == []
        assert not settings.output_dir.exists()
        assert "authentication failed" in capsys.readouterr().err


class TestMain:
    """Test configuration handling in main()."""

    def test_missing_credentials_exit_code(self, monkeypatch, capsys):
        monkeypatch.setattr(settings_module, "load_dotenv", lambda **kwargs: False)
        for name in (ENV_TENANT_ID, ENV_CLIENT_ID, ENV_CLIENT_SECRET):
            monkeypatch.delenv(name, raising=False)

        assert cli.main() == 1
        assert "credentials not found" in capsys.readouterr().err
