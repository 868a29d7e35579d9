import json
import logging
from pathlib import Path
from typing import Any, List, Optional

from catalog_classifier.analysis.decision import BatchReport

logger = logging.getLogger(__name__)


# ==============================================
# ReportStore
# ==============================================
#
# PURPOSE:
#   Keep the last BatchReport of each database on disk so the CLI can
#   show how the previous run went (timing, failed tables) without
#   re-running it.
#
# FILE STRUCTURE:
# ---------------
#   metadata/
#   ├── last_run_1.json    → BatchReport.to_dict() for database 1
#   └── last_run_7.json    → ... for database 7
#
# CLASS: ReportStore
# ------------------
#   - __init__(storage_dir: str = "metadata/")
#       Create storage directory if it doesn't exist.
#   - save_report(report) -> Path
#   - load_report(database_id) -> BatchReport | None
#   - exists(database_id) -> bool
#   - clear() -> int      (files removed)
#
class ReportStore:
    """Persists batch reports as JSON files, one per database."""

    FILE_PREFIX = "last_run_"

    def __init__(self, storage_dir: str = "metadata/"):
        """
        Initialize the report store.

        Args:
            storage_dir: Directory to store report files
        """
        self.storage_dir = Path(storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def _report_file(self, database_id: Any) -> Path:
        return self.storage_dir / f"{self.FILE_PREFIX}{database_id}.json"

    def save_report(self, report: BatchReport) -> Path:
        """
        Save a batch report, replacing the previous one for the database.

        Args:
            report: The report to save

        Returns:
            Path of the written file
        """
        path = self._report_file(report.database_id)
        with open(path, "w") as f:
            json.dump(report.to_dict(), f, indent=2, default=str)

        logger.info("Saved report for database '%s' to %s", report.database_name, path)
        return path

    def load_report(self, database_id: Any) -> Optional[BatchReport]:
        """
        Load the last report of a database.

        Returns:
            The BatchReport, or None if no report was saved
        """
        path = self._report_file(database_id)
        if not path.exists():
            logger.info("No report found at %s", path)
            return None

        with open(path, "r") as f:
            data = json.load(f)
        return BatchReport.from_dict(data)

    def exists(self, database_id: Any) -> bool:
        return self._report_file(database_id).exists()

    def list_reports(self) -> List[Path]:
        return sorted(self.storage_dir.glob(f"{self.FILE_PREFIX}*.json"))

    def clear(self) -> int:
        """Delete every saved report. Returns the number of files removed."""
        removed = 0
        for path in self.list_reports():
            path.unlink()
            removed += 1
        logger.info("Cleared %d reports from %s", removed, self.storage_dir)
        return removed
