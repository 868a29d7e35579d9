# ==============================================
# MySQLCatalogStore
# ==============================================
#
# PURPOSE:
#   Catalog store backed by MySQL. Reads fingerprints and the table
#   registry, writes semantic types, visibility and last_analyzed.
#
# TABLES:
# -------
#   catalog_database   (id, name, engine)
#   catalog_table      (id, db_id, name, active, visibility_type)
#   catalog_column     (id, table_id, name, active, visibility_type,
#                       special_type, last_analyzed)
#   table_fingerprint  (table_id, row_count)
#   column_fingerprint (id, table_id, name, qualified_name, base_type,
#                       visibility_type, is_pk, is_fk, cardinality,
#                       avg_length, percent_urls, percent_json,
#                       percent_email)
#
# CLASS: MySQLCatalogStore
# ------------------------
#   Stateful: holds connection to MySQL.
#
#   Constructor:
#   ------------
#   - __init__(host, port, user, password, database)
#       Store connection params. Don't connect yet.
#
#   Methods:
#   --------
#   - connect() / disconnect()
#   - ensure_schema() -> None
#       CREATE TABLE IF NOT EXISTS for every table above.
#       Run as ensure_catalog() before the CLI classifies anything.
#   - execute(query, params) -> int       (rowcount, commits)
#   - fetch_all(query, params) -> list[dict]
#   - FingerprintStore / CatalogWriter / TableRegistry methods
#
#   Every write commits on its own; a table's column updates are
#   not applied atomically.
#
# ==============================================

import logging
from typing import Any, Dict, List, Optional, Tuple, cast

import pymysql
import pymysql.cursors

from catalog_classifier.analysis.fingerprint import ColumnFingerprint, TableFingerprint, Visibility
from catalog_classifier.errors import CatalogStoreError
from .catalog_store import CatalogStore, DatabaseRef, TableRef

logger = logging.getLogger(__name__)


SCHEMA_STATEMENTS = [
    """CREATE TABLE IF NOT EXISTS catalog_database (
        id BIGINT PRIMARY KEY,
        name VARCHAR(255) NOT NULL,
        engine VARCHAR(64) NOT NULL
    )""",
    """CREATE TABLE IF NOT EXISTS catalog_table (
        id BIGINT PRIMARY KEY,
        db_id BIGINT NOT NULL,
        name VARCHAR(255) NOT NULL,
        active TINYINT(1) NOT NULL DEFAULT 1,
        visibility_type VARCHAR(32) NULL
    )""",
    """CREATE TABLE IF NOT EXISTS catalog_column (
        id BIGINT PRIMARY KEY,
        table_id BIGINT NOT NULL,
        name VARCHAR(255) NOT NULL,
        active TINYINT(1) NOT NULL DEFAULT 1,
        visibility_type VARCHAR(32) NOT NULL DEFAULT 'normal',
        special_type VARCHAR(64) NULL,
        last_analyzed DATETIME NULL
    )""",
    """CREATE TABLE IF NOT EXISTS table_fingerprint (
        table_id BIGINT PRIMARY KEY,
        row_count BIGINT NULL
    )""",
    """CREATE TABLE IF NOT EXISTS column_fingerprint (
        id BIGINT PRIMARY KEY,
        table_id BIGINT NOT NULL,
        name VARCHAR(255) NOT NULL,
        qualified_name VARCHAR(512) NULL,
        base_type VARCHAR(64) NOT NULL,
        visibility_type VARCHAR(32) NOT NULL DEFAULT 'normal',
        is_pk TINYINT(1) NOT NULL DEFAULT 0,
        is_fk TINYINT(1) NOT NULL DEFAULT 0,
        cardinality BIGINT NULL,
        avg_length DOUBLE NULL,
        percent_urls DOUBLE NULL,
        percent_json DOUBLE NULL,
        percent_email DOUBLE NULL
    )""",
]


class MySQLCatalogStore(CatalogStore):
    def __init__(self, host, port, user, password, database):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.database_name = database
        self.connection = None

    def connect(self) -> None:
        # Establish connection to MySQL, create database if it doesn't exist
        self.connection = pymysql.connect(
            host=self.host,
            port=self.port,
            user=self.user,
            password=self.password,
        )
        cursor = self.connection.cursor()
        cursor.execute(f"CREATE DATABASE IF NOT EXISTS {self.database_name}")
        cursor.execute(f"USE {self.database_name}")
        cursor.close()
        logger.info("Connected to MySQL catalog %s@%s:%s", self.database_name, self.host, self.port)

    def disconnect(self) -> None:
        if self.connection:
            self.connection.close()
            self.connection = None

    def ensure_schema(self) -> None:
        for statement in SCHEMA_STATEMENTS:
            self.execute(statement)

    def ensure_catalog(self) -> None:
        self.ensure_schema()

    # ======================================
    # Low-level helpers
    # ======================================
    def _require_connection(self):
        if self.connection is None:
            raise CatalogStoreError("Not connected to MySQL")
        return self.connection

    def execute(self, query: str, params: Optional[Tuple] = None) -> int:
        connection = self._require_connection()
        cursor = connection.cursor()
        try:
            if params:
                affected = cursor.execute(query, params)
            else:
                affected = cursor.execute(query)
            connection.commit()
        finally:
            cursor.close()
        return affected or 0

    def fetch_all(self, query: str, params: Optional[Tuple] = None) -> List[Dict[str, Any]]:
        connection = self._require_connection()
        cursor = connection.cursor(pymysql.cursors.DictCursor)
        try:
            if params is not None:
                cursor.execute(query, params)
            else:
                cursor.execute(query)
            rows = cast(List[Dict[str, Any]], cursor.fetchall())
        finally:
            cursor.close()
        return list(rows)

    def _fetch_one(self, query: str, params: Tuple) -> Optional[Dict[str, Any]]:
        rows = self.fetch_all(query, params)
        return rows[0] if rows else None

    # ======================================
    # FingerprintStore
    # ======================================
    def columns_for(self, table_id: Any) -> List[ColumnFingerprint]:
        rows = self.fetch_all(
            "SELECT id, table_id, name, qualified_name, base_type, visibility_type, "
            "is_pk, is_fk, cardinality, avg_length, percent_urls, percent_json, percent_email "
            "FROM column_fingerprint WHERE table_id = %s ORDER BY id",
            (table_id,)
        )
        return [ColumnFingerprint.from_dict(row) for row in rows]

    def table_stats(self, table_id: Any) -> Optional[TableFingerprint]:
        row = self._fetch_one(
            "SELECT table_id, row_count FROM table_fingerprint WHERE table_id = %s",
            (table_id,)
        )
        return TableFingerprint.from_dict(row) if row else None

    # ======================================
    # CatalogWriter
    # ======================================
    def update_column(self, column_id, visibility_type=None, semantic_type=None) -> None:
        # Only non-None keys are written
        assignments = []
        values: List[Any] = []
        if visibility_type is not None:
            assignments.append("visibility_type = %s")
            values.append(getattr(visibility_type, "value", visibility_type))
        if semantic_type is not None:
            assignments.append("special_type = %s")
            values.append(getattr(semantic_type, "value", semantic_type))
        if not assignments:
            return

        values.append(column_id)
        self.execute(
            f"UPDATE catalog_column SET {', '.join(assignments)} WHERE id = %s",
            tuple(values)
        )

    def stamp_analyzed(self, table_id, timestamp, exclude_visibility=Visibility.RETIRED.value) -> int:
        # rowcount: rows actually changed, not rows matched
        return self.execute(
            "UPDATE catalog_column SET last_analyzed = %s "
            "WHERE table_id = %s AND active = 1 AND visibility_type <> %s",
            (timestamp, table_id, exclude_visibility)
        )

    # ======================================
    # TableRegistry
    # ======================================
    def active_tables(self, database_id: Any) -> List[TableRef]:
        rows = self.fetch_all(
            "SELECT id, db_id, name, active, visibility_type FROM catalog_table "
            "WHERE db_id = %s AND active = 1 AND visibility_type IS NULL ORDER BY id",
            (database_id,)
        )
        return [_table_ref(row) for row in rows]

    def driver_for(self, database_id: Any) -> str:
        return self.database(database_id).engine

    def database(self, database_id: Any) -> DatabaseRef:
        row = self._fetch_one(
            "SELECT id, name, engine FROM catalog_database WHERE id = %s",
            (database_id,)
        )
        if row is None:
            raise CatalogStoreError(f"Unknown database id {database_id!r}")
        return DatabaseRef(id=row["id"], name=row["name"], engine=row["engine"])

    def table(self, table_id: Any) -> TableRef:
        row = self._fetch_one(
            "SELECT id, db_id, name, active, visibility_type FROM catalog_table WHERE id = %s",
            (table_id,)
        )
        if row is None:
            raise CatalogStoreError(f"Unknown table id {table_id!r}")
        return _table_ref(row)


def _table_ref(row: Dict[str, Any]) -> TableRef:
    return TableRef(
        id=row["id"],
        db_id=row["db_id"],
        name=row["name"],
        active=bool(row["active"]),
        visibility_type=row.get("visibility_type"),
    )
