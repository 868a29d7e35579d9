# ==============================================
# Naming Heuristic
# ==============================================
#
# PURPOSE:
#   Make an initial guess at a column's semantic type from its name
#   and base type alone. This is the first rule of the chain; anything
#   it assigns counts as "already classified" for later rules.
#
# FUNCTION:
# ---------
# - infer_semantic_type(name: str, base_type: str) -> SemanticType | None
#     1. A column named "id" (any case) is a PK.
#     2. Otherwise the first matching (pattern, allowed base types)
#        entry in NAME_PATTERNS wins.
#
# ==============================================

import re
from typing import Optional, Pattern, Sequence, Tuple

from .decision import SemanticType
from .fingerprint import BaseType, is_a


_BOOL_OR_INT = (BaseType.BOOLEAN, BaseType.INTEGER)
_FLOAT = (BaseType.FLOAT,)
_INT_OR_TEXT = (BaseType.INTEGER, BaseType.TEXT)
_TEXT = (BaseType.TEXT,)

# (name pattern, allowed base types, semantic type); order matters
NAME_PATTERNS: Sequence[Tuple[Pattern, Tuple[BaseType, ...], SemanticType]] = [
    (re.compile(r"^.*_lat$"), _FLOAT, SemanticType.LATITUDE),
    (re.compile(r"^.*_lon$"), _FLOAT, SemanticType.LONGITUDE),
    (re.compile(r"^.*_lng$"), _FLOAT, SemanticType.LONGITUDE),
    (re.compile(r"^.*_long$"), _FLOAT, SemanticType.LONGITUDE),
    (re.compile(r"^.*_longitude$"), _FLOAT, SemanticType.LONGITUDE),
    (re.compile(r"^.*_rating$"), _INT_OR_TEXT, SemanticType.CATEGORY),
    (re.compile(r"^.*_type$"), _INT_OR_TEXT, SemanticType.CATEGORY),
    (re.compile(r"^.*_url$"), _TEXT, SemanticType.URL),
    (re.compile(r"^_latitude$"), _FLOAT, SemanticType.LATITUDE),
    (re.compile(r"^active$"), _BOOL_OR_INT, SemanticType.CATEGORY),
    (re.compile(r"^city$"), _TEXT, SemanticType.CITY),
    (re.compile(r"^country$"), _TEXT, SemanticType.COUNTRY),
    (re.compile(r"^countrycode$"), _TEXT, SemanticType.COUNTRY),
    (re.compile(r"^currency$"), _INT_OR_TEXT, SemanticType.CATEGORY),
    (re.compile(r"^first_name$"), _TEXT, SemanticType.NAME),
    (re.compile(r"^full_name$"), _TEXT, SemanticType.NAME),
    (re.compile(r"^gender$"), _INT_OR_TEXT, SemanticType.CATEGORY),
    (re.compile(r"^last_name$"), _TEXT, SemanticType.NAME),
    (re.compile(r"^lat$"), _FLOAT, SemanticType.LATITUDE),
    (re.compile(r"^latitude$"), _FLOAT, SemanticType.LATITUDE),
    (re.compile(r"^lon$"), _FLOAT, SemanticType.LONGITUDE),
    (re.compile(r"^lng$"), _FLOAT, SemanticType.LONGITUDE),
    (re.compile(r"^long$"), _FLOAT, SemanticType.LONGITUDE),
    (re.compile(r"^longitude$"), _FLOAT, SemanticType.LONGITUDE),
    (re.compile(r"^name$"), _TEXT, SemanticType.NAME),
    (re.compile(r"^postal_code$"), _INT_OR_TEXT, SemanticType.ZIP_CODE),
    (re.compile(r"^role$"), _INT_OR_TEXT, SemanticType.CATEGORY),
    (re.compile(r"^sex$"), _INT_OR_TEXT, SemanticType.CATEGORY),
    (re.compile(r"^state$"), _TEXT, SemanticType.STATE),
    (re.compile(r"^status$"), _INT_OR_TEXT, SemanticType.CATEGORY),
    (re.compile(r"^type$"), _INT_OR_TEXT, SemanticType.CATEGORY),
    (re.compile(r"^url$"), _TEXT, SemanticType.URL),
    (re.compile(r"^zip_code$"), _INT_OR_TEXT, SemanticType.ZIP_CODE),
    (re.compile(r"^zipcode$"), _INT_OR_TEXT, SemanticType.ZIP_CODE),
]


def infer_semantic_type(name: Optional[str], base_type: Optional[str]) -> Optional[SemanticType]:
    """
    Guess a semantic type from a column name and base type.

    Args:
        name: Column name as declared in the source database
        base_type: Column base type, e.g. "type/Text"

    Returns:
        The guessed SemanticType, or None when nothing matches
    """
    if not name:
        return None

    lowered = name.lower()
    if lowered == "id":
        return SemanticType.PK

    for pattern, allowed_types, semantic_type in NAME_PATTERNS:
        if not pattern.match(lowered):
            continue
        if any(is_a(base_type, allowed) for allowed in allowed_types):
            return semantic_type
    return None
