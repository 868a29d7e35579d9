# ==============================================
# Progress Reporting
# ==============================================
#
# The BatchRunner emits three events through a ProgressReporter:
#
#   table_finished(finished, total, table_name)  → after every table
#   table_failed(table_name, error)              → a table was skipped
#   batch_finished(driver, database_name, elapsed_seconds)
#
# ProgressReporter ignores everything; LoggingReporter writes progress
# and the summary to the log.
#
# ==============================================

import logging

logger = logging.getLogger(__name__)


def progress_bar(finished: int, total: int, width: int = 20) -> str:
    """
    Render "[######..............]  30%" for finished/total.

    An empty batch renders as complete.
    """
    ratio = 1.0 if total <= 0 else min(max(finished / total, 0.0), 1.0)
    filled = int(round(ratio * width))
    return f"[{'#' * filled}{'.' * (width - filled)}] {int(round(ratio * 100)):3d}%"


def format_duration(seconds: float) -> str:
    """Human-readable duration, e.g. '850.0 µs', '12.3 ms', '4.1 s', '2.5 mins'."""
    if seconds < 1e-3:
        return f"{seconds * 1e6:.1f} µs"
    if seconds < 1:
        return f"{seconds * 1e3:.1f} ms"
    if seconds < 60:
        return f"{seconds:.1f} s"
    if seconds < 3600:
        return f"{seconds / 60:.1f} mins"
    return f"{seconds / 3600:.1f} hours"


class ProgressReporter:
    """Observer for batch progress. The default implementation does nothing."""

    def table_finished(self, finished: int, total: int, table_name: str) -> None:
        pass

    def table_failed(self, table_name: str, error: Exception) -> None:
        pass

    def batch_finished(self, driver: str, database_name: str, elapsed_seconds: float) -> None:
        pass


class LoggingReporter(ProgressReporter):
    def __init__(self, log: logging.Logger = None):
        self.log = log or logger

    def table_finished(self, finished: int, total: int, table_name: str) -> None:
        self.log.info("%s Analyzed table '%s'.", progress_bar(finished, total), table_name)

    def batch_finished(self, driver: str, database_name: str, elapsed_seconds: float) -> None:
        self.log.info("Analysis of %s database '%s' completed (%s).",
                      driver, database_name, format_duration(elapsed_seconds))
