# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# FIXTURES:
# ---------
# - make_fingerprint   → factory for ColumnFingerprint with sane defaults
# - now / fixed_clock  → a constant UTC timestamp and a clock returning it
# - store              → InMemoryCatalogStore with one database
# - sample_table       → a table in `store` with a handful of columns
#
# ==============================================

from datetime import datetime, timezone
from itertools import count

import pytest

from catalog_classifier.analysis.fingerprint import BaseType, ColumnFingerprint, Visibility
from catalog_classifier.persistence.catalog_store import DatabaseRef, InMemoryCatalogStore, TableRef


FIXED_NOW = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)


@pytest.fixture
def make_fingerprint():
    """Return a factory building ColumnFingerprints; ids are unique per test."""
    ids = count(1)

    def _make(**overrides) -> ColumnFingerprint:
        column_id = overrides.pop("id", next(ids))
        values = {
            "id": column_id,
            "name": f"column_{column_id}",
            "base_type": BaseType.TEXT.value,
            "visibility_type": Visibility.NORMAL.value,
            "qualified_name": f"public.sample.column_{column_id}",
        }
        values.update(overrides)
        return ColumnFingerprint(**values)

    return _make


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def fixed_clock(now):
    return lambda: now


@pytest.fixture
def store():
    catalog = InMemoryCatalogStore()
    catalog.add_database(DatabaseRef(id=1, name="sample", engine="postgres"))
    return catalog


@pytest.fixture
def sample_table(store, make_fingerprint):
    """
    Table 10 in database 1 with:
      101 id        (PK)
      102 email     (100% emails)
      103 payload   (100% JSON, long)
      104 status    (low cardinality text)
      105 notes     (plain text, nothing special)
      106 old_col   (retired)
    """
    table = store.add_table(TableRef(id=10, db_id=1, name="users"), row_count=500)
    store.add_column(10, make_fingerprint(id=101, name="id", base_type=BaseType.INTEGER.value,
                                          is_pk=True, cardinality=500))
    store.add_column(10, make_fingerprint(id=102, name="contact", percent_email=100, cardinality=480))
    store.add_column(10, make_fingerprint(id=103, name="payload", percent_json=100, avg_length=240.0,
                                          cardinality=500))
    store.add_column(10, make_fingerprint(id=104, name="plan", cardinality=4))
    store.add_column(10, make_fingerprint(id=105, name="notes", cardinality=450, avg_length=20.0))
    store.add_column(10, make_fingerprint(id=106, name="old_col",
                                          visibility_type=Visibility.RETIRED.value))
    return table
