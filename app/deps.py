# app/deps.py
from functools import lru_cache

from fastapi import Depends

from migration.bigquery_utils import BigQueryTableStore
from migration.config import MigrationConfig
from migration.logging_utils import setup_logging
from migration.pipeline import default_source_factory


@lru_cache()
def get_config() -> MigrationConfig:
    # read once per process; logging follows the configured level from here on
    config = MigrationConfig.from_env()
    setup_logging(config.log_level)
    return config


@lru_cache()
def _table_store(project: str = None) -> BigQueryTableStore:
    return BigQueryTableStore(project=project)


def get_table_store(config: MigrationConfig = Depends(get_config)):
    return _table_store(config.destination_project)


def get_source_factory():
    return default_source_factory
