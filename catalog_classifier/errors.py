# ==============================================
# Errors
# ==============================================
#
# HIERARCHY:
# ----------
# - ClassificationError            → base for everything raised here
#   ├── ValidationError            → a TableClassification broke its shape
#   ├── TableProcessingError       → any other failure on one table
#   └── CatalogStoreError          → store not connected / lookup missed
#
# The BatchRunner catches these per table; they never cross a table
# boundary during a batch.
#
# ==============================================

from typing import List, Optional


class ClassificationError(Exception):
    """Base class for all classification errors."""


class ValidationError(ClassificationError):
    """
    Raised when a TableClassification fails its structural contract.

    Nothing is persisted for the table when this is raised.
    """

    def __init__(self, problems: List[str], table_name: Optional[str] = None):
        self.problems = list(problems)
        self.table_name = table_name
        where = f" for table '{table_name}'" if table_name else ""
        super().__init__(f"Invalid classification{where}: " + "; ".join(self.problems))


class TableProcessingError(ClassificationError):
    """Wraps an unexpected failure while classifying or persisting one table."""

    def __init__(self, table_name: str, cause: BaseException):
        self.table_name = table_name
        self.cause = cause
        super().__init__(f"Unexpected error analyzing table '{table_name}': {cause}")


class CatalogStoreError(ClassificationError):
    """Raised by catalog stores for backend or lookup failures."""
