# ==============================================
# CLI: Command Line Entry Point
# ==============================================
#
# COMMANDS:
# ---------
# 1. Classify every eligible table of a database:
#    python -m catalog_classifier.cli classify-database --database 1
#
# 2. Classify a single table:
#    python -m catalog_classifier.cli classify-table --table 42
#
# 3. Show the last saved report of a database:
#    python -m catalog_classifier.cli report --database 1
#
# Global options: --backend {mysql,mongo}, --log-level LEVEL
#
# Commands 1 and 2 create the catalog tables / indexes if missing.
#
# Exit codes: 0 success, 1 some tables failed / table or database failed,
#             2 nothing to report
#
# ==============================================

import argparse
import json
import logging
import sys
from typing import List, Optional

from catalog_classifier.analysis.classifier import TableClassifier
from catalog_classifier.analysis.rules import RuleChain
from catalog_classifier.batch_runner import BatchRunner
from catalog_classifier.config import SUPPORTED_BACKENDS, AppConfig, get_config
from catalog_classifier.errors import ClassificationError
from catalog_classifier.persistence.catalog_store import CatalogStore
from catalog_classifier.persistence.mongo_store import MongoCatalogStore
from catalog_classifier.persistence.mysql_store import MySQLCatalogStore
from catalog_classifier.persistence.report_store import ReportStore

logger = logging.getLogger("catalog_classifier")


def build_store(config: AppConfig, backend: Optional[str] = None) -> CatalogStore:
    """Create (but don't connect) the catalog store for the chosen backend."""
    backend = backend or config.backend
    if backend == "mongo":
        return MongoCatalogStore(
            host=config.mongo.host,
            port=config.mongo.port,
            database=config.mongo.database,
            user=config.mongo.user,
            password=config.mongo.password
        )
    return MySQLCatalogStore(
        host=config.mysql.host,
        port=config.mysql.port,
        user=config.mysql.user,
        password=config.mysql.password,
        database=config.mysql.database
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catalog-classifier",
        description="Infer semantic types for catalog columns from their fingerprints.",
    )
    parser.add_argument("--backend", choices=SUPPORTED_BACKENDS, help="catalog store backend")
    parser.add_argument("--log-level", help="logging level (default from LOG_LEVEL)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    classify_db = subparsers.add_parser("classify-database", help="classify all tables of a database")
    classify_db.add_argument("--database", type=int, required=True, help="catalog database id")

    classify_table = subparsers.add_parser("classify-table", help="classify one table")
    classify_table.add_argument("--table", type=int, required=True, help="catalog table id")

    report = subparsers.add_parser("report", help="show the last saved report of a database")
    report.add_argument("--database", type=int, required=True, help="catalog database id")
    return parser


def main(argv: Optional[List[str]] = None, config: Optional[AppConfig] = None,
         store: Optional[CatalogStore] = None) -> int:
    args = build_parser().parse_args(argv)
    config = config or get_config()

    logging.basicConfig(
        level=(args.log_level or config.log_level).upper(),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )

    report_store = ReportStore(config.metadata_dir)

    if args.command == "report":
        report = report_store.load_report(args.database)
        if report is None:
            print(f"No report saved for database {args.database}")
            return 2
        print(json.dumps(report.to_dict(), indent=2, default=str))
        return 0

    store = store or build_store(config, args.backend)
    table_classifier = TableClassifier(store, rule_chain=RuleChain(config.thresholds))
    runner = BatchRunner(store, table_classifier=table_classifier)

    with store:
        store.ensure_catalog()

        if args.command == "classify-database":
            try:
                report = runner.classify_database(args.database)
            except ClassificationError as e:
                logger.error("%s", e)
                print(f"✗ {e}")
                return 1
            report_store.save_report(report)
            print(f"✓ {len(report.succeeded)}/{report.tables_total} tables classified "
                  f"in {report.elapsed_seconds:.2f}s")
            for outcome in report.failed:
                print(f"✗ {outcome.table_name}: {outcome.error}")
            return 1 if report.failed else 0

        try:
            outcome = runner.classify_table(args.table)
        except ClassificationError as e:
            logger.error("%s", e)
            print(f"✗ {e}")
            return 1
        print(f"✓ Table '{outcome.table_name}' classified ({outcome.updates_applied} column updates)")
        return 0


if __name__ == "__main__":
    sys.exit(main())
