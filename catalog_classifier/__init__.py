# ==============================================
# Catalog Column Classifier
# ==============================================
#
# Package Structure:
#
# catalog_classifier/
# ├── analysis/         # Fingerprints, rule chain, table classifier
# ├── persistence/      # Catalog stores (memory, MySQL, MongoDB) + reports
# ├── batch_runner.py   # Classify every table of a database
# ├── reporting.py      # Progress / summary events
# ├── errors.py         # Exception hierarchy
# ├── config.py         # Configuration management
# └── cli.py            # Command line entry point
#
# ==============================================

__version__ = "0.1.0"
