# ==============================================
# Catalog Store (interfaces + in-memory store)
# ==============================================
#
# PURPOSE:
#   Everything the classifier needs from the outside world, behind
#   three small interfaces:
#
#   - FingerprintStore → columns_for(table_id), table_stats(table_id)
#   - CatalogWriter    → update_column(...), stamp_analyzed(...)
#   - TableRegistry    → active_tables(db_id), driver_for(db_id),
#                        database(db_id), table(table_id)
#
#   CatalogStore combines the three. Concrete stores:
#   - InMemoryCatalogStore (this file)  → tests and dry runs
#   - MySQLCatalogStore  (mysql_store.py)
#   - MongoCatalogStore  (mongo_store.py)
#
# CLASSES:
# --------
# - DatabaseRef (dataclass)  → id, name, engine
# - TableRef (dataclass)     → id, db_id, name, active, visibility_type
#
# ==============================================

import copy
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from catalog_classifier.analysis.decision import SemanticType
from catalog_classifier.analysis.fingerprint import ColumnFingerprint, TableFingerprint, Visibility
from catalog_classifier.errors import CatalogStoreError


@dataclass(frozen=True)
class DatabaseRef:
    """A database registered in the catalog."""
    id: Any
    name: str
    engine: str


@dataclass(frozen=True)
class TableRef:
    """
    A table registered in the catalog.

    visibility_type None means "no restriction"; only such tables are
    picked up by a batch run.
    """
    id: Any
    db_id: Any
    name: str
    active: bool = True
    visibility_type: Optional[str] = None


class FingerprintStore(ABC):
    """Read access to pre-computed fingerprints."""

    @abstractmethod
    def columns_for(self, table_id: Any) -> List[ColumnFingerprint]:
        """Return the column fingerprints of one table."""

    @abstractmethod
    def table_stats(self, table_id: Any) -> Optional[TableFingerprint]:
        """Return the table fingerprint, or None if none was computed."""


class CatalogWriter(ABC):
    """Write access to catalog column metadata."""

    @abstractmethod
    def update_column(
        self,
        column_id: Any,
        visibility_type: Optional[str] = None,
        semantic_type: Optional[SemanticType] = None,
    ) -> None:
        """Set the given non-None attributes on one column."""

    @abstractmethod
    def stamp_analyzed(
        self,
        table_id: Any,
        timestamp: datetime,
        exclude_visibility: str = Visibility.RETIRED.value,
    ) -> int:
        """
        Set last_analyzed on every active column of a table whose
        visibility is not exclude_visibility.

        Returns the number of columns the backend reports as changed. MySQL
        leaves out rows that already held the same timestamp, so a rerun
        within the same second can return 0.
        """


class TableRegistry(ABC):
    """Lookup of databases, their drivers and their tables."""

    @abstractmethod
    def active_tables(self, database_id: Any) -> List[TableRef]:
        """Active tables of a database with no visibility restriction."""

    @abstractmethod
    def driver_for(self, database_id: Any) -> str:
        """Driver (engine) name of a database."""

    @abstractmethod
    def database(self, database_id: Any) -> DatabaseRef:
        """Look up a database, raising CatalogStoreError if unknown."""

    @abstractmethod
    def table(self, table_id: Any) -> TableRef:
        """Look up a table, raising CatalogStoreError if unknown."""


class CatalogStore(FingerprintStore, CatalogWriter, TableRegistry):
    """
    A complete backend. connect(), disconnect() and ensure_catalog() are
    no-ops unless the backend holds a connection.
    """

    def connect(self) -> None:
        pass

    def disconnect(self) -> None:
        pass

    def ensure_catalog(self) -> None:
        """Create whatever tables or indexes the backend needs. Idempotent."""

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
        return False


class InMemoryCatalogStore(CatalogStore):
    """
    Dict-backed catalog.

    Keeps a log of every update_column / stamp_analyzed call so callers
    can inspect what a run would have written.
    """

    def __init__(self):
        self.databases: Dict[Any, DatabaseRef] = {}
        self.tables: Dict[Any, TableRef] = {}
        self.table_fingerprints: Dict[Any, TableFingerprint] = {}
        self.column_fingerprints: Dict[Any, List[ColumnFingerprint]] = {}
        # column_id -> {"table_id", "active", "visibility_type", "semantic_type", "last_analyzed"}
        self.columns: Dict[Any, Dict[str, Any]] = {}

        self.update_calls: List[Dict[str, Any]] = []
        self.stamp_calls: List[Dict[str, Any]] = []

    # ======================================
    # Seeding
    # ======================================
    def add_database(self, database: DatabaseRef) -> DatabaseRef:
        self.databases[database.id] = database
        return database

    def add_table(self, table: TableRef, row_count: Optional[int] = None) -> TableRef:
        self.tables[table.id] = table
        self.table_fingerprints[table.id] = TableFingerprint(table_id=table.id, row_count=row_count)
        self.column_fingerprints.setdefault(table.id, [])
        return table

    def add_column(self, table_id: Any, fingerprint: ColumnFingerprint, active: bool = True) -> ColumnFingerprint:
        """
        Register a column and its fingerprint under a table.

        The catalog record starts with the fingerprint's visibility.
        """
        self.column_fingerprints.setdefault(table_id, []).append(fingerprint)
        self.columns[fingerprint.id] = {
            "table_id": table_id,
            "active": active,
            "visibility_type": fingerprint.visibility_type,
            "semantic_type": None,
            "last_analyzed": None,
        }
        return fingerprint

    # ======================================
    # FingerprintStore
    # ======================================
    def columns_for(self, table_id: Any) -> List[ColumnFingerprint]:
        return list(self.column_fingerprints.get(table_id, []))

    def table_stats(self, table_id: Any) -> Optional[TableFingerprint]:
        return self.table_fingerprints.get(table_id)

    # ======================================
    # CatalogWriter
    # ======================================
    def update_column(self, column_id, visibility_type=None, semantic_type=None) -> None:
        self.update_calls.append({
            "column_id": column_id,
            "visibility_type": visibility_type,
            "semantic_type": semantic_type,
        })
        record = self.columns.get(column_id)
        if record is None:
            raise CatalogStoreError(f"Unknown column id {column_id!r}")
        if visibility_type is not None:
            record["visibility_type"] = visibility_type
        if semantic_type is not None:
            record["semantic_type"] = semantic_type

    def stamp_analyzed(self, table_id, timestamp, exclude_visibility=Visibility.RETIRED.value) -> int:
        self.stamp_calls.append({
            "table_id": table_id,
            "timestamp": timestamp,
            "exclude_visibility": exclude_visibility,
        })
        stamped = 0
        for record in self.columns.values():
            if record["table_id"] != table_id or not record["active"]:
                continue
            if record["visibility_type"] == exclude_visibility:
                continue
            record["last_analyzed"] = timestamp
            stamped += 1
        return stamped

    # ======================================
    # TableRegistry
    # ======================================
    def active_tables(self, database_id: Any) -> List[TableRef]:
        return [
            table for table in self.tables.values()
            if table.db_id == database_id and table.active and table.visibility_type is None
        ]

    def driver_for(self, database_id: Any) -> str:
        return self.database(database_id).engine

    def database(self, database_id: Any) -> DatabaseRef:
        try:
            return self.databases[database_id]
        except KeyError:
            raise CatalogStoreError(f"Unknown database id {database_id!r}") from None

    def table(self, table_id: Any) -> TableRef:
        try:
            return self.tables[table_id]
        except KeyError:
            raise CatalogStoreError(f"Unknown table id {table_id!r}") from None

    def column(self, column_id: Any) -> Dict[str, Any]:
        """Return a copy of one column's catalog record."""
        return copy.deepcopy(self.columns[column_id])
