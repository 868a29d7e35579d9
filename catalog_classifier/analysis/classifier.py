# ==============================================
# TableClassifier
# ==============================================
#
# PURPOSE:
#   Classify every column of one table with the RuleChain, check the
#   result's shape, turn it into catalog updates, and stamp
#   last_analyzed on the table's columns.
#
# CLASS: TableClassifier
# ----------------------
#   Constructor:
#   ------------
#   - __init__(store: CatalogStore, rule_chain: RuleChain = None,
#              clock: () -> datetime = None)
#
#   Pure methods:
#   -------------
#   - classify_table_columns(table_fingerprint, column_fingerprints)
#         -> TableClassification
#   - validate(classification, table_name=None) -> None
#         raises ValidationError
#   - column_updates(classification) -> list[ColumnUpdate]
#
#   Side-effecting methods:
#   -----------------------
#   - classify_and_save_table(driver, table) -> TableOutcome
#       1. Read fingerprints from the store
#       2. Classify + validate
#          (invalid → raise ValidationError; nothing is written)
#       3. update_column() per ColumnUpdate, one call per column
#       4. stamp_analyzed() on every active, non-retired column
#
#   - classify_table(table) -> TableOutcome
#       Resolve the driver from the registry, then as above.
#
# ==============================================

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Optional

from catalog_classifier.errors import ValidationError
from catalog_classifier.persistence.catalog_store import CatalogStore, TableRef
from .decision import ColumnUpdate, TableClassification, TableOutcome
from .fingerprint import ColumnFingerprint, TableFingerprint, Visibility
from .rules import RuleChain

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TableClassifier:
    """
    Applies the RuleChain to all columns of a table and writes the
    results to the catalog store.
    """

    def __init__(
        self,
        store: CatalogStore,
        rule_chain: Optional[RuleChain] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            store: Fingerprint source, catalog writer and table registry
            rule_chain: Rules to apply; a default RuleChain if omitted
            clock: Returns the last_analyzed timestamp; UTC now by default
        """
        self.store = store
        self.rule_chain = rule_chain or RuleChain()
        self.clock = clock or utc_now

    # ======================================
    # Pure steps
    # ======================================
    def classify_table_columns(
        self,
        table_fingerprint: Optional[TableFingerprint],
        column_fingerprints: Iterable[ColumnFingerprint],
    ) -> TableClassification:
        """
        Run the rule chain on every column.

        Args:
            table_fingerprint: Table statistics, None if never computed
            column_fingerprints: One fingerprint per column

        Returns:
            TableClassification with one result per fingerprint, in order
        """
        row_count = table_fingerprint.row_count if table_fingerprint is not None else None
        return TableClassification(
            row_count=row_count,
            columns=[self.rule_chain.classify(fp) for fp in column_fingerprints],
        )

    def validate(self, classification: TableClassification, table_name: Optional[str] = None) -> None:
        """
        Check the structural contract of a TableClassification.

        Raises:
            ValidationError: row count missing or not a non-negative
                             integer, or a result without a column id
        """
        problems: List[str] = []

        row_count = classification.row_count
        if row_count is None:
            problems.append("row count is missing")
        elif isinstance(row_count, bool) or not isinstance(row_count, int) or row_count < 0:
            problems.append(f"row count must be a non-negative integer, got {row_count!r}")

        for position, result in enumerate(classification.columns):
            if result.column_id is None:
                problems.append(f"column result #{position} has no column id")

        if problems:
            raise ValidationError(problems, table_name=table_name)

    def column_updates(self, classification: TableClassification) -> List[ColumnUpdate]:
        """
        Translate results into catalog updates.

        Results with neither a preview decision nor a semantic type
        produce no update. preview_display False hides the column from
        previews by making it details-only.
        """
        updates = []
        for result in classification.columns:
            if result.column_id is None:
                continue
            if result.preview_display is None and result.semantic_type is None:
                continue
            visibility = Visibility.DETAILS_ONLY.value if result.preview_display is False else None
            updates.append(ColumnUpdate(
                column_id=result.column_id,
                visibility_type=visibility,
                semantic_type=result.semantic_type,
            ))
        return updates

    # ======================================
    # Classification + persistence
    # ======================================
    def classify_and_save_table(self, driver: Any, table: TableRef) -> TableOutcome:
        """
        Classify one table and write the results.

        Args:
            driver: Driver of the table's database; passed through for
                    logging only
            table: The table to classify

        Returns:
            A successful TableOutcome with the number of updates applied

        Raises:
            ValidationError: if the classification is malformed; nothing
                             is written for the table, not even the stamp
        """
        column_fingerprints = self.store.columns_for(table.id)
        table_fingerprint = self.store.table_stats(table.id)
        classification = self.classify_table_columns(table_fingerprint, column_fingerprints)

        self.validate(classification, table_name=table.name)

        applied = 0
        for update in self.column_updates(classification):
            self.store.update_column(
                update.column_id,
                visibility_type=update.visibility_type,
                semantic_type=update.semantic_type,
            )
            applied += 1

        stamped = self._stamp_analyzed(table)
        logger.debug("[%s] Table '%s': %d column updates, %d columns stamped.",
                     driver, table.name, applied, stamped)
        return TableOutcome(
            table_id=table.id,
            table_name=table.name,
            success=True,
            updates_applied=applied,
        )

    def classify_table(self, table: TableRef) -> TableOutcome:
        """Classify a single table, looking up its driver in the registry."""
        driver = self.store.driver_for(table.db_id)
        return self.classify_and_save_table(driver, table)

    def _stamp_analyzed(self, table: TableRef) -> int:
        return self.store.stamp_analyzed(
            table.id,
            self.clock(),
            exclude_visibility=Visibility.RETIRED.value,
        )
