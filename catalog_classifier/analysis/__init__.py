# ==============================================
# ANALYSIS & CLASSIFICATION
# ==============================================
#
# This package turns pre-computed column statistics into semantic
# metadata for the catalog.
#
# Two-step process:
#   Step 1 (Rules):  fold each column's fingerprint through the RuleChain
#   Step 2 (Table):  assemble, validate and persist a table's results
#
# Modules:
# --------
# - fingerprint.py   → ColumnFingerprint / TableFingerprint, base types
# - decision.py      → Results, updates, thresholds, batch reports
# - naming.py        → Initial guess from column names
# - eligibility.py   → Should a column's distinct values be materialized
# - rules.py         → RuleChain (ordered heuristics)
# - classifier.py    → TableClassifier
#
# ==============================================
