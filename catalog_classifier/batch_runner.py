# ==============================================
# BatchRunner: Database-level Orchestrator
# ==============================================
#
# PURPOSE:
#   Classify every eligible table of a database, one at a time.
#   This is the class the CLI talks to.
#
# HOW IT CONNECTS THE PIECES:
#
#   ┌──────────────────────────────────────────────────────────┐
#   │                      BatchRunner                         │
#   │                                                          │
#   │   TableRegistry.active_tables(db)                        │
#   │                 │ tables                                 │
#   │                 ▼                                        │
#   │  ┌──────────────────────────────────────────────┐        │
#   │  │ for each table (failures isolated per table) │        │
#   │  │   TableClassifier.classify_and_save_table    │        │
#   │  │     FingerprintStore → RuleChain → Writer    │        │
#   │  └──────────────┬───────────────────────────────┘        │
#   │                 │ TableOutcome                           │
#   │                 ▼                                        │
#   │   ProgressReporter.table_finished(n, total, name)        │
#   │                 │                                        │
#   │                 ▼                                        │
#   │   ProgressReporter.batch_finished(driver, db, elapsed)   │
#   │   → BatchReport                                          │
#   └──────────────────────────────────────────────────────────┘
#
# CLASS: BatchRunner
# ------------------
#   - __init__(store, table_classifier=None, reporter=None)
#   - classify_tables(driver, database: DatabaseRef) -> BatchReport
#   - classify_database(database_id) -> BatchReport
#   - classify_table(table_id) -> TableOutcome
#
#   A failing table is logged, recorded as a failed TableOutcome and
#   counted as finished; the batch always runs to the end.
#
# ==============================================

import logging
import time
from datetime import datetime, timezone
from typing import Any, List, Optional

from catalog_classifier.analysis.classifier import TableClassifier
from catalog_classifier.analysis.decision import BatchReport, TableOutcome
from catalog_classifier.errors import TableProcessingError, ValidationError
from catalog_classifier.persistence.catalog_store import CatalogStore, DatabaseRef, TableRef
from catalog_classifier.reporting import LoggingReporter, ProgressReporter

logger = logging.getLogger(__name__)


def driver_name(driver: Any) -> str:
    """Drivers are opaque; use their name attribute if they have one."""
    name = getattr(driver, "name", None)
    return name if isinstance(name, str) else str(driver)


class BatchRunner:
    """Runs the TableClassifier over all eligible tables of a database."""

    def __init__(
        self,
        store: CatalogStore,
        table_classifier: Optional[TableClassifier] = None,
        reporter: Optional[ProgressReporter] = None,
    ):
        """
        Args:
            store: Catalog store (registry, fingerprints, writer)
            table_classifier: Defaults to a TableClassifier over the same store
            reporter: Progress observer; defaults to LoggingReporter
        """
        self.store = store
        self.table_classifier = table_classifier or TableClassifier(store)
        self.reporter = reporter or LoggingReporter()

    def classify_tables(self, driver: Any, database: DatabaseRef) -> BatchReport:
        """
        Classify all active, unrestricted tables of a database.

        Args:
            driver: Driver reference, passed through to the classifier
            database: The database to process

        Returns:
            BatchReport with one outcome per attempted table
        """
        start_time = time.perf_counter()
        tables = self.store.active_tables(database.id)
        tables_count = len(tables)
        finished_tables_count = 0
        outcomes: List[TableOutcome] = []

        for table in tables:
            outcome = self._classify_one(driver, table)
            outcomes.append(outcome)
            finished_tables_count += 1
            self.reporter.table_finished(finished_tables_count, tables_count, table.name)

        elapsed = time.perf_counter() - start_time
        self.reporter.batch_finished(driver_name(driver), database.name, elapsed)

        return BatchReport(
            driver=driver_name(driver),
            database_id=database.id,
            database_name=database.name,
            tables_total=tables_count,
            elapsed_seconds=round(elapsed, 6),
            finished_at=datetime.now(timezone.utc).isoformat(),
            outcomes=outcomes,
        )

    def classify_database(self, database_id: Any) -> BatchReport:
        """Classify all tables of a database, looking up its driver."""
        database = self.store.database(database_id)
        driver = self.store.driver_for(database_id)
        return self.classify_tables(driver, database)

    def classify_table(self, table_id: Any) -> TableOutcome:
        """
        Classify one table outside of a batch.

        Errors propagate to the caller here; there is no batch to protect.
        """
        table = self.store.table(table_id)
        return self.table_classifier.classify_table(table)

    def _classify_one(self, driver: Any, table: TableRef) -> TableOutcome:
        try:
            return self.table_classifier.classify_and_save_table(driver, table)
        except ValidationError as e:
            logger.error("Skipping table '%s': %s", table.name, e)
            self.reporter.table_failed(table.name, e)
            return _failed(table, e)
        except Exception as e:
            error = TableProcessingError(table.name, e)
            error.__cause__ = e
            logger.exception("Unexpected error analyzing table '%s'", table.name)
            self.reporter.table_failed(table.name, error)
            return _failed(table, error)


def _failed(table: TableRef, error: Exception) -> TableOutcome:
    return TableOutcome(
        table_id=table.id,
        table_name=table.name,
        success=False,
        error_type=type(error).__name__,
        error=str(error),
    )
