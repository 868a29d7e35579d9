# ==============================================
# MongoCatalogStore
# ==============================================
#
# PURPOSE:
#   Catalog store backed by MongoDB. Same data as the MySQL store,
#   one collection per table:
#
#   catalog_database, catalog_table, catalog_column,
#   table_fingerprint, column_fingerprint
#
#   Documents use "_id" for the record id; fingerprints are read with
#   ColumnFingerprint.from_dict after mapping "_id" -> "id".
#   A document without an "active" field counts as active.
#
# CLASS: MongoCatalogStore
# ------------------------
#   Stateful: holds connection to MongoDB.
#
#   - __init__(host, port, database, user=None, password=None)
#   - connect() / disconnect()
#   - ensure_indexes() → table_id indexes on column collections,
#                        db_id index on catalog_table
#                        (run as ensure_catalog() before the CLI classifies)
#
# ==============================================

import logging
from typing import Any, Dict, List, Optional

from pymongo import ASCENDING, MongoClient as PyMongoClient
from pymongo.errors import ConnectionFailure, OperationFailure

from catalog_classifier.analysis.fingerprint import ColumnFingerprint, TableFingerprint, Visibility
from catalog_classifier.errors import CatalogStoreError
from .catalog_store import CatalogStore, DatabaseRef, TableRef

logger = logging.getLogger(__name__)


class MongoCatalogStore(CatalogStore):
    def __init__(self, host, port, database, user=None, password=None):
        # Store connection params. Don't connect yet.
        self.host = host
        self.port = port
        self.database_name = database
        self.user = user
        self.password = password
        self.client = None
        self.db = None

    def connect(self) -> None:
        try:
            if self.user and self.password:
                uri = f"mongodb://{self.user}:{self.password}@{self.host}:{self.port}/{self.database_name}"
            else:
                uri = f"mongodb://{self.host}:{self.port}/{self.database_name}"
            self.client = PyMongoClient(uri)
            self.client.admin.command("ping")
            self.db = self.client[self.database_name]
            logger.info("Connected to MongoDB catalog %s@%s:%s", self.database_name, self.host, self.port)
        except ConnectionFailure as e:
            logger.error("Could not connect to MongoDB: %s", e)
            raise
        except OperationFailure as e:
            logger.error("MongoDB authentication failed: %s", e)
            raise

    def disconnect(self) -> None:
        if self.client:
            self.client.close()
            self.client = None
            self.db = None

    def ensure_indexes(self) -> None:
        db = self._require_db()
        db["catalog_table"].create_index([("db_id", ASCENDING)])
        db["catalog_column"].create_index([("table_id", ASCENDING)])
        db["column_fingerprint"].create_index([("table_id", ASCENDING)])

    def ensure_catalog(self) -> None:
        self.ensure_indexes()

    def _require_db(self):
        if self.db is None:
            raise CatalogStoreError("Not connected to MongoDB")
        return self.db

    # ======================================
    # FingerprintStore
    # ======================================
    def columns_for(self, table_id: Any) -> List[ColumnFingerprint]:
        cursor = self._require_db()["column_fingerprint"].find({"table_id": table_id}).sort("_id", ASCENDING)
        return [ColumnFingerprint.from_dict(_with_id(doc)) for doc in cursor]

    def table_stats(self, table_id: Any) -> Optional[TableFingerprint]:
        doc = self._require_db()["table_fingerprint"].find_one({"_id": table_id})
        if doc is None:
            return None
        return TableFingerprint(table_id=doc["_id"], row_count=doc.get("row_count"))

    # ======================================
    # CatalogWriter
    # ======================================
    def update_column(self, column_id, visibility_type=None, semantic_type=None) -> None:
        changes: Dict[str, Any] = {}
        if visibility_type is not None:
            changes["visibility_type"] = getattr(visibility_type, "value", visibility_type)
        if semantic_type is not None:
            changes["special_type"] = getattr(semantic_type, "value", semantic_type)
        if not changes:
            return
        self._require_db()["catalog_column"].update_one({"_id": column_id}, {"$set": changes})

    def stamp_analyzed(self, table_id, timestamp, exclude_visibility=Visibility.RETIRED.value) -> int:
        result = self._require_db()["catalog_column"].update_many(
            {
                "table_id": table_id,
                "active": {"$ne": False},
                "visibility_type": {"$ne": exclude_visibility},
            },
            {"$set": {"last_analyzed": timestamp}},
        )
        return result.modified_count

    # ======================================
    # TableRegistry
    # ======================================
    def active_tables(self, database_id: Any) -> List[TableRef]:
        cursor = self._require_db()["catalog_table"].find(
            {"db_id": database_id, "active": {"$ne": False}, "visibility_type": None}
        ).sort("_id", ASCENDING)
        return [_table_ref(doc) for doc in cursor]

    def driver_for(self, database_id: Any) -> str:
        return self.database(database_id).engine

    def database(self, database_id: Any) -> DatabaseRef:
        doc = self._require_db()["catalog_database"].find_one({"_id": database_id})
        if doc is None:
            raise CatalogStoreError(f"Unknown database id {database_id!r}")
        return DatabaseRef(id=doc["_id"], name=doc["name"], engine=doc["engine"])

    def table(self, table_id: Any) -> TableRef:
        doc = self._require_db()["catalog_table"].find_one({"_id": table_id})
        if doc is None:
            raise CatalogStoreError(f"Unknown table id {table_id!r}")
        return _table_ref(doc)


def _with_id(doc: Dict[str, Any]) -> Dict[str, Any]:
    data = dict(doc)
    data["id"] = data.pop("_id")
    return data


def _table_ref(doc: Dict[str, Any]) -> TableRef:
    return TableRef(
        id=doc["_id"],
        db_id=doc["db_id"],
        name=doc["name"],
        active=bool(doc.get("active", True)),
        visibility_type=doc.get("visibility_type"),
    )
