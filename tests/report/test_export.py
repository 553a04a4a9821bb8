"""Tests for CSV artifacts."""

from datetime import datetime

import pandas as pd
import pytest

from defender_ingest_estimator.estimator.core import compute_estimate
from defender_ingest_estimator.estimator.models import SUMMARY_COLUMNS
from defender_ingest_estimator.exceptions import ExportError
from defender_ingest_estimator.hunting.rows import HuntingRow
from defender_ingest_estimator.report.export import (
    create_run_dir,
    run_dir_path,
    write_sample_csv,
    write_summary_csv,
)


class TestCreateRunDir:
    """Test run directory layout."""

    def test_timestamped_with_samples(self, tmp_path):
        run_dir = create_run_dir(tmp_path, now=datetime(2026, 10, 18, 9, 30, 5))

        assert run_dir == tmp_path / "20261018_093005"
        assert (run_dir / "samples").is_dir()

    def test_unwritable_output_dir(self, tmp_path):
        blocker = tmp_path / "output"
        blocker.write_text("file in the way")

        with pytest.raises(ExportError, match="Cannot create output directory"):
            create_run_dir(blocker)

    def test_run_dir_path_does_not_create(self, tmp_path):
        path = run_dir_path(tmp_path / "output", now=datetime(2026, 10, 18, 9, 30, 5))

        assert path == tmp_path / "output" / "20261018_093005"
        assert not (tmp_path / "output").exists()


class TestWriteSampleCsv:
    """Test per-table sample export."""

    def test_header_and_rows(self, tmp_path, sample_row_factory):
        rows = [HuntingRow(sample_row_factory(ReportId=i)) for i in range(3)]

        path = write_sample_csv(rows, tmp_path / "samples" / "DeviceProcessEvents.csv")

        df = pd.read_csv(path)
        assert len(df) == 3
        assert list(df.columns) == list(rows[0].keys())
        assert df["AdditionalFields"][0] == '{"ProcessIntegrityLevel":"High"}'

    def test_sparse_rows_keep_all_columns(self, tmp_path):
        rows = [HuntingRow({"A": 1}), HuntingRow({"A": 2, "B": "x"})]

        df = pd.read_csv(write_sample_csv(rows, tmp_path / "s.csv"))

        assert list(df.columns) == ["A", "B"]


class TestWriteSummaryCsv:
    """Test summary export."""

    def test_columns_and_loop_order(self, tmp_path):
        small = compute_estimate("DeviceInfo", 70000, 1.0, 7)
        large = compute_estimate("DeviceProcessEvents", 7_000_000, 2.0, 7)

        path = write_summary_csv([small, large], tmp_path / "IngestionEstimate.csv")

        df = pd.read_csv(path)
        assert tuple(df.columns) == SUMMARY_COLUMNS
        assert list(df["TableName"]) == ["DeviceInfo", "DeviceProcessEvents"]
        assert df["EstTotalMBInLookback"][0] == 68.36

    def test_empty_results_write_header(self, tmp_path):
        path = write_summary_csv([], tmp_path / "IngestionEstimate.csv")

        assert path.read_text().strip() == ",".join(SUMMARY_COLUMNS)
