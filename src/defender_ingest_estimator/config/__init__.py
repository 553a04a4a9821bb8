"""Configuration module for credentials, tables and run defaults."""

from defender_ingest_estimator.config.settings import EstimatorSettings
from defender_ingest_estimator.config.tables import DEFAULT_TABLES, load_tables

__all__ = ["DEFAULT_TABLES", "EstimatorSettings", "load_tables"]
