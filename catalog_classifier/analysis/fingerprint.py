# ==============================================
# Fingerprints
# ==============================================
#
# PURPOSE:
#   Read-only statistics snapshots that the rule chain consumes.
#   They are computed upstream once per sync cycle; this package never
#   computes or mutates them.
#
# ENUMS:
# ------
# - BaseType(str, Enum)    → storage type of a column ("type/Text", ...)
# - Visibility(str, Enum)  → catalog visibility ("normal", "retired", ...)
#
# FUNCTIONS:
# ----------
# - is_a(base_type, ancestor) -> bool
#     Walk the base type hierarchy. "type/UUID" is_a "type/Text", etc.
#
# CLASSES:
# --------
# - ColumnFingerprint (frozen dataclass)
#     id, base_type, visibility_type, name, is_pk, is_fk, cardinality,
#     avg_length, percent_urls (0.0-1.0), percent_json (0-100),
#     percent_email (0-100), qualified_name
#
# - TableFingerprint (frozen dataclass)
#     table_id, row_count
#
# ==============================================

from enum import Enum
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Union


class BaseType(str, Enum):
    """Storage types, arranged in a small hierarchy (see _PARENTS)."""
    ANY = "type/*"
    TEXT = "type/Text"
    UUID = "type/UUID"
    INTEGER = "type/Integer"
    BIG_INTEGER = "type/BigInteger"
    FLOAT = "type/Float"
    DECIMAL = "type/Decimal"
    BOOLEAN = "type/Boolean"
    DATE_TIME = "type/DateTime"
    DATE = "type/Date"
    TIME = "type/Time"
    DICTIONARY = "type/Dictionary"
    ARRAY = "type/Array"


class Visibility(str, Enum):
    """
    Catalog-level exposure of a column or table.

    - NORMAL: shown everywhere
    - DETAILS_ONLY: hidden from previews, shown on detail views
    - SENSITIVE / HIDDEN: not shown
    - RETIRED: column no longer exists upstream
    """
    NORMAL = "normal"
    DETAILS_ONLY = "details-only"
    SENSITIVE = "sensitive"
    HIDDEN = "hidden"
    RETIRED = "retired"


# child -> parent
_PARENTS: Dict[str, str] = {
    BaseType.TEXT.value: BaseType.ANY.value,
    BaseType.UUID.value: BaseType.TEXT.value,
    BaseType.INTEGER.value: BaseType.ANY.value,
    BaseType.BIG_INTEGER.value: BaseType.INTEGER.value,
    BaseType.FLOAT.value: BaseType.ANY.value,
    BaseType.DECIMAL.value: BaseType.FLOAT.value,
    BaseType.BOOLEAN.value: BaseType.ANY.value,
    BaseType.DATE_TIME.value: BaseType.ANY.value,
    BaseType.DATE.value: BaseType.DATE_TIME.value,
    BaseType.TIME.value: BaseType.DATE_TIME.value,
    BaseType.DICTIONARY.value: BaseType.ANY.value,
    BaseType.ARRAY.value: BaseType.ANY.value,
}


def _type_name(value: Union[str, Enum, None]) -> Optional[str]:
    if isinstance(value, Enum):
        return value.value
    return value


def is_a(base_type: Union[str, BaseType, None], ancestor: Union[str, BaseType]) -> bool:
    """
    Check whether base_type is ancestor or one of its descendants.

    Unknown base types only match themselves.

    Args:
        base_type: The type to test (may be None)
        ancestor: The type to test against

    Returns:
        True if base_type derives from ancestor
    """
    current = _type_name(base_type)
    target = _type_name(ancestor)
    while current is not None:
        if current == target:
            return True
        current = _PARENTS.get(current)
    return False


def is_textual(base_type: Union[str, BaseType, None]) -> bool:
    return is_a(base_type, BaseType.TEXT)


@dataclass(frozen=True)
class ColumnFingerprint:
    """
    Pre-computed statistics for one column.

    Note the two percentage scales: percent_urls is a fraction in
    [0.0, 1.0], while percent_json and percent_email are on 0-100.
    """

    # --- Identity ---
    id: Any
    name: str
    base_type: str = BaseType.ANY.value
    visibility_type: str = Visibility.NORMAL.value
    qualified_name: Optional[str] = None

    # --- Key flags ---
    is_pk: bool = False
    is_fk: bool = False

    # --- Statistics ---
    cardinality: Optional[int] = None  # Distinct values observed
    avg_length: Optional[float] = None  # Average textual length, None for non-text
    percent_urls: Optional[float] = None  # 0.0 - 1.0
    percent_json: Optional[float] = None  # 0 - 100
    percent_email: Optional[float] = None  # 0 - 100

    @property
    def display_name(self) -> str:
        return self.qualified_name or self.name

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with enum members flattened to their string values."""
        data = asdict(self)
        data["base_type"] = _type_name(self.base_type)
        data["visibility_type"] = _type_name(self.visibility_type)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ColumnFingerprint":
        """
        Build a fingerprint from a stored row or document.

        Args:
            data: Mapping with at least "id" and "name"

        Returns:
            A ColumnFingerprint; missing statistics stay None
        """
        return cls(
            id=data["id"],
            name=data["name"],
            base_type=_type_name(data.get("base_type")) or BaseType.ANY.value,
            visibility_type=_type_name(data.get("visibility_type")) or Visibility.NORMAL.value,
            qualified_name=data.get("qualified_name"),
            is_pk=bool(data.get("is_pk", False)),
            is_fk=bool(data.get("is_fk", False)),
            cardinality=data.get("cardinality"),
            avg_length=data.get("avg_length"),
            percent_urls=data.get("percent_urls"),
            percent_json=data.get("percent_json"),
            percent_email=data.get("percent_email"),
        )


@dataclass(frozen=True)
class TableFingerprint:
    """Row count for one table."""
    table_id: Any
    row_count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"table_id": self.table_id, "row_count": self.row_count}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TableFingerprint":
        return cls(table_id=data["table_id"], row_count=data.get("row_count"))
