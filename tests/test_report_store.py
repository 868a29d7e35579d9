# ==============================================
# Tests for ReportStore and progress reporting helpers
# ==============================================

import json

import pytest

from catalog_classifier.analysis.decision import BatchReport, TableOutcome
from catalog_classifier.persistence.report_store import ReportStore
from catalog_classifier.reporting import format_duration, progress_bar


@pytest.fixture
def report():
    return BatchReport(
        driver="postgres",
        database_id=3,
        database_name="shop",
        tables_total=2,
        elapsed_seconds=1.25,
        finished_at="2024-01-15T10:30:00+00:00",
        outcomes=[
            TableOutcome(table_id=1, table_name="orders", success=True, updates_applied=4),
            TableOutcome(table_id=2, table_name="events", success=False,
                         error_type="TableProcessingError", error="boom"),
        ],
    )


class TestReportStore:
    def test_creates_directory(self, tmp_path):
        target = tmp_path / "nested" / "metadata"
        ReportStore(str(target))
        assert target.is_dir()

    def test_save_and_load(self, tmp_path, report):
        store = ReportStore(str(tmp_path))
        path = store.save_report(report)

        assert path.name == "last_run_3.json"
        loaded = store.load_report(3)
        assert loaded == report
        assert [o.table_name for o in loaded.failed] == ["events"]

    def test_saved_file_has_summary_fields(self, tmp_path, report):
        path = ReportStore(str(tmp_path)).save_report(report)
        data = json.loads(path.read_text())
        assert data["tables_attempted"] == 2
        assert data["tables_failed"] == 1
        assert data["driver"] == "postgres"

    def test_missing_report(self, tmp_path):
        store = ReportStore(str(tmp_path))
        assert store.load_report(99) is None
        assert not store.exists(99)

    def test_save_replaces_previous(self, tmp_path, report):
        store = ReportStore(str(tmp_path))
        store.save_report(report)
        report.outcomes = report.outcomes[:1]
        store.save_report(report)
        assert len(store.load_report(3).outcomes) == 1
        assert len(store.list_reports()) == 1

    def test_clear(self, tmp_path, report):
        store = ReportStore(str(tmp_path))
        store.save_report(report)
        (tmp_path / "unrelated.txt").write_text("keep")

        assert store.clear() == 1
        assert not store.exists(3)
        assert (tmp_path / "unrelated.txt").exists()


class TestProgressBar:
    def test_half_way(self):
        assert progress_bar(1, 2, width=10) == "[#####.....]  50%"

    def test_complete(self):
        assert progress_bar(4, 4, width=4) == "[####] 100%"

    def test_empty_batch_is_complete(self):
        assert progress_bar(0, 0, width=4) == "[####] 100%"


class TestFormatDuration:
    @pytest.mark.parametrize("seconds, expected", [
        (0.0005, "500.0 µs"),
        (0.25, "250.0 ms"),
        (4.12, "4.1 s"),
        (150, "2.5 mins"),
        (5400, "1.5 hours"),
    ])
    def test_units(self, seconds, expected):
        assert format_duration(seconds) == expected
