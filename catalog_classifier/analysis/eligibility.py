# ==============================================
# Eligibility
# ==============================================
#
# Decides whether a column's distinct values are worth materializing
# for categorical display. The Category rule only fires when this
# returns True.
#
# ==============================================

from typing import Optional

from .decision import SemanticType
from .fingerprint import BaseType, Visibility, is_a


HIDDEN_VISIBILITIES = frozenset({
    Visibility.RETIRED.value,
    Visibility.SENSITIVE.value,
    Visibility.HIDDEN.value,
    Visibility.DETAILS_ONLY.value,
})


def should_materialize_values(
    base_type: Optional[str],
    semantic_type: Optional[SemanticType],
    visibility_type: Optional[str],
    name: Optional[str] = None,
) -> bool:
    """
    Should this column have its distinct values stored?

    Args:
        base_type: Column base type
        semantic_type: Semantic type assigned so far (may be None)
        visibility_type: Current catalog visibility
        name: Column name (unused by the default predicate)

    Returns:
        True for visible, non-temporal columns that are boolean, textual,
        or already typed as Category
    """
    visibility = visibility_type.value if isinstance(visibility_type, Visibility) else visibility_type
    if visibility in HIDDEN_VISIBILITIES:
        return False
    if is_a(base_type, BaseType.DATE_TIME):
        return False
    return (
        is_a(base_type, BaseType.BOOLEAN)
        or is_a(base_type, BaseType.TEXT)
        or semantic_type == SemanticType.CATEGORY
    )
