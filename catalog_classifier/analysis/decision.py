# ==============================================
# Decision (Data Classes)
# ==============================================
#
# PURPOSE:
#   Data classes that represent the OUTPUT of classification, and the
#   thresholds that control how decisions are made.
#
#   Used by the rule chain (ClassificationResult), the table classifier
#   (TableClassification, ColumnUpdate), the batch runner
#   (TableOutcome, BatchReport) and the report store (to_dict/from_dict).
#
# ENUMS:
# ------
# - SemanticType(str, Enum): PK, FK, URL, SERIALIZED_JSON, EMAIL, CATEGORY,
#   plus the name-derived NAME, CITY, STATE, COUNTRY, ZIP_CODE,
#   LATITUDE, LONGITUDE
#
# CLASSES:
# --------
# - ClassificationResult (frozen dataclass)
#     column_id, semantic_type, preview_display
#     Threaded through the rule chain; each rule returns a new value.
#
# - TableClassification (dataclass)
#     row_count, columns: list[ClassificationResult]
#
# - ColumnUpdate (frozen dataclass)
#     One persistence action for one column.
#
# - ClassificationThresholds (dataclass)
#     percent_valid_url_threshold   (default 0.95, scale 0.0-1.0)
#     low_cardinality_threshold     (default 300)
#     average_length_no_preview_threshold (default 50)
#
# - TableOutcome / BatchReport (dataclasses)
#     Per-table success/failure and the aggregated batch result.
#
# ==============================================

from enum import Enum
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional


class SemanticType(str, Enum):
    """
    Inferred meaning of a column beyond its storage type.

    PK and FK are assigned only from key flags; the rest come from
    the naming heuristic or from fingerprint statistics.
    """
    PK = "type/PK"
    FK = "type/FK"
    URL = "type/URL"
    SERIALIZED_JSON = "type/SerializedJSON"
    EMAIL = "type/Email"
    CATEGORY = "type/Category"
    NAME = "type/Name"
    CITY = "type/City"
    STATE = "type/State"
    COUNTRY = "type/Country"
    ZIP_CODE = "type/ZipCode"
    LATITUDE = "type/Latitude"
    LONGITUDE = "type/Longitude"


@dataclass(frozen=True)
class ClassificationResult:
    """
    Classification accumulated for one column.

    preview_display is tri-state: True, False, or None (leave unchanged).
    """
    column_id: Any
    semantic_type: Optional[SemanticType] = None
    preview_display: Optional[bool] = None

    def with_semantic_type(self, semantic_type: SemanticType) -> "ClassificationResult":
        return replace(self, semantic_type=semantic_type)

    def with_preview_display(self, preview_display: bool) -> "ClassificationResult":
        return replace(self, preview_display=preview_display)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "column_id": self.column_id,
            "semantic_type": self.semantic_type.value if self.semantic_type else None,
            "preview_display": self.preview_display,
        }


@dataclass
class TableClassification:
    """Classification results for every column of one table."""
    row_count: Optional[int]
    columns: List[ClassificationResult] = field(default_factory=list)

    def by_column_id(self) -> Dict[Any, ClassificationResult]:
        """Index results by their source column id."""
        return {result.column_id: result for result in self.columns}


@dataclass(frozen=True)
class ColumnUpdate:
    """
    A single catalog update. A None attribute means "leave unchanged".
    """
    column_id: Any
    visibility_type: Optional[str] = None
    semantic_type: Optional[SemanticType] = None


@dataclass
class ClassificationThresholds:
    """
    Configurable thresholds used by the rule chain.

    The URL threshold is a fraction; JSON and email rules use a fixed
    exact match of 100 on a 0-100 scale and are not configurable.
    """

    percent_valid_url_threshold: float = 0.95
    """
    Columns with more than this fraction (0.0-1.0) of URL values are
    typed as URL.
    """

    low_cardinality_threshold: int = 300
    """
    Columns with fewer distinct values than this (and more than zero)
    may be typed as Category.
    """

    average_length_no_preview_threshold: int = 50
    """
    Textual columns whose average value length exceeds this are hidden
    from previews.
    """


@dataclass
class TableOutcome:
    """Result of classifying one table inside a batch."""
    table_id: Any
    table_name: str
    success: bool
    updates_applied: int = 0
    error_type: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "table_id": self.table_id,
            "table_name": self.table_name,
            "success": self.success,
            "updates_applied": self.updates_applied,
            "error_type": self.error_type,
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TableOutcome":
        return cls(
            table_id=data.get("table_id"),
            table_name=data.get("table_name", ""),
            success=data.get("success", False),
            updates_applied=data.get("updates_applied", 0),
            error_type=data.get("error_type"),
            error=data.get("error"),
        )


@dataclass
class BatchReport:
    """
    Aggregated result of classifying every eligible table of a database.

    tables_attempted counts every table the runner tried, whether or not
    it succeeded.
    """
    driver: str
    database_id: Any
    database_name: str
    tables_total: int = 0
    elapsed_seconds: float = 0.0
    finished_at: Optional[str] = None
    outcomes: List[TableOutcome] = field(default_factory=list)

    @property
    def tables_attempted(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> List[TableOutcome]:
        return [o for o in self.outcomes if o.success]

    @property
    def failed(self) -> List[TableOutcome]:
        return [o for o in self.outcomes if not o.success]

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the report for the report store.

        Returns:
            A JSON-serializable dictionary
        """
        return {
            "driver": self.driver,
            "database_id": self.database_id,
            "database_name": self.database_name,
            "tables_total": self.tables_total,
            "tables_attempted": self.tables_attempted,
            "tables_failed": len(self.failed),
            "elapsed_seconds": self.elapsed_seconds,
            "finished_at": self.finished_at,
            "outcomes": [o.to_dict() for o in self.outcomes],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BatchReport":
        return cls(
            driver=data.get("driver", ""),
            database_id=data.get("database_id"),
            database_name=data.get("database_name", ""),
            tables_total=data.get("tables_total", 0),
            elapsed_seconds=data.get("elapsed_seconds", 0.0),
            finished_at=data.get("finished_at"),
            outcomes=[TableOutcome.from_dict(o) for o in data.get("outcomes", [])],
        )
