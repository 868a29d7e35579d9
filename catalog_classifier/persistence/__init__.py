# ==============================================
# PERSISTENCE (Catalog stores + run reports)
# ==============================================
#
# Modules:
# --------
# - catalog_store.py  → Interfaces, DatabaseRef/TableRef, InMemoryCatalogStore
# - mysql_store.py    → MySQLCatalogStore (pymysql)
# - mongo_store.py    → MongoCatalogStore (pymongo)
# - report_store.py   → Last BatchReport per database, as JSON
#
# ==============================================
