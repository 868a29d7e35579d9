# ==============================================
# Configuration Management
# ==============================================
#
# PURPOSE:
#   Load and validate all configuration from environment
#   variables / .env file. Provides typed config objects
#   to all other modules.
#
# CLASSES:
# --------
# - MySQLConfig (dataclass)
#     host: str          (default "localhost")
#     port: int          (default 3306)
#     user: str          (default "root")
#     password: str      (default "root")
#     database: str      (default "catalog")
#
# - MongoConfig (dataclass)
#     host: str          (default "localhost")
#     port: int          (default 27017)
#     user: str | None   (default None)
#     password: str | None (default None)
#     database: str      (default "catalog")
#
# - AppConfig (dataclass)
#     mysql: MySQLConfig
#     mongo: MongoConfig
#     thresholds: ClassificationThresholds
#     backend: str               (default "mysql"; "mysql" | "mongo")
#     metadata_dir: str          (default "metadata/")
#     log_level: str             (default "INFO")
#
# FUNCTIONS:
# ----------
# - get_config() -> AppConfig
#     Load .env using python-dotenv, construct AppConfig.
#     Returns the same singleton on repeated calls.
#
# - load_config() -> AppConfig
#     Same, without the singleton (always re-reads the environment).
#
# ENVIRONMENT:
# ------------
#   MYSQL_HOST, MYSQL_PORT, MYSQL_USER, MYSQL_PASSWORD, MYSQL_DATABASE
#   MONGO_HOST, MONGO_PORT, MONGO_USER, MONGO_PASSWORD, MONGO_DATABASE
#   CATALOG_BACKEND, METADATA_DIR, LOG_LEVEL
#   URL_MATCH_THRESHOLD, LOW_CARDINALITY_THRESHOLD,
#   NO_PREVIEW_LENGTH_THRESHOLD
#
# ==============================================

import os
from dataclasses import dataclass, field
from typing import Optional
from pathlib import Path

from dotenv import load_dotenv

from catalog_classifier.analysis.decision import ClassificationThresholds


SUPPORTED_BACKENDS = ("mysql", "mongo")


@dataclass
class MySQLConfig:
    """MySQL catalog configuration."""
    host: str = "localhost"
    port: int = 3306
    user: str = "root"
    password: str = "root"
    database: str = "catalog"


@dataclass
class MongoConfig:
    """MongoDB catalog configuration."""
    host: str = "localhost"
    port: int = 27017
    user: Optional[str] = None
    password: Optional[str] = None
    database: str = "catalog"


@dataclass
class AppConfig:
    """Main application configuration."""
    mysql: MySQLConfig = field(default_factory=MySQLConfig)
    mongo: MongoConfig = field(default_factory=MongoConfig)
    thresholds: ClassificationThresholds = field(default_factory=ClassificationThresholds)
    backend: str = "mysql"
    metadata_dir: str = "metadata/"
    log_level: str = "INFO"

    def __post_init__(self):
        if self.backend not in SUPPORTED_BACKENDS:
            raise ValueError(
                f"Unsupported catalog backend {self.backend!r}; "
                f"expected one of {', '.join(SUPPORTED_BACKENDS)}"
            )
        if not 0.0 <= self.thresholds.percent_valid_url_threshold <= 1.0:
            raise ValueError("URL_MATCH_THRESHOLD must be a fraction between 0.0 and 1.0")


# Singleton instance
_config_instance: Optional[AppConfig] = None


def load_config() -> AppConfig:
    """
    Build configuration from environment variables / .env file.

    Returns:
        AppConfig: Application configuration
    """
    # Load .env file from project root
    env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    mysql_config = MySQLConfig(
        host=os.getenv("MYSQL_HOST", "localhost"),
        port=int(os.getenv("MYSQL_PORT", "3306")),
        user=os.getenv("MYSQL_USER", "root"),
        password=os.getenv("MYSQL_PASSWORD", "root"),
        database=os.getenv("MYSQL_DATABASE", "catalog")
    )

    mongo_config = MongoConfig(
        host=os.getenv("MONGO_HOST", "localhost"),
        port=int(os.getenv("MONGO_PORT", "27017")),
        user=os.getenv("MONGO_USER") or None,
        password=os.getenv("MONGO_PASSWORD") or None,
        database=os.getenv("MONGO_DATABASE", "catalog")
    )

    thresholds = ClassificationThresholds(
        percent_valid_url_threshold=float(os.getenv("URL_MATCH_THRESHOLD", "0.95")),
        low_cardinality_threshold=int(os.getenv("LOW_CARDINALITY_THRESHOLD", "300")),
        average_length_no_preview_threshold=int(os.getenv("NO_PREVIEW_LENGTH_THRESHOLD", "50"))
    )

    return AppConfig(
        mysql=mysql_config,
        mongo=mongo_config,
        thresholds=thresholds,
        backend=os.getenv("CATALOG_BACKEND", "mysql").lower(),
        metadata_dir=os.getenv("METADATA_DIR", "metadata/"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper()
    )


def get_config() -> AppConfig:
    """
    Load configuration once and return the same instance on repeated calls.

    Returns:
        AppConfig: Application configuration
    """
    global _config_instance

    if _config_instance is None:
        _config_instance = load_config()
    return _config_instance
