import logging

import pytest

from app.deps import get_config
from migration.config import MigrationConfig, DEFAULT_BATCH_SIZE
from migration.errors import ConfigurationError
from migration.logging_utils import setup_logging

ENV = {
    "MONGODB_URI": "mongodb://db:27017",
    "MONGODB_DATABASE_NAME": "shop",
    "BIGQUERY_DATASET_ID": "analytics",
}


def test_from_env_defaults():
    config = MigrationConfig.from_env(ENV)
    assert config.source_uri == "mongodb://db:27017"
    assert config.source_database_name == "shop"
    assert config.destination_dataset_id == "analytics"
    assert config.batch_size == DEFAULT_BATCH_SIZE == 100
    assert config.destination_project is None
    assert config.log_level == "INFO"


def test_from_env_batch_size_and_optionals():
    env = dict(ENV, BATCH_INSERT_SIZE="250", BIGQUERY_PROJECT="proj", MIGRATION_ERROR_LOG="/tmp/e.log",
               LOG_LEVEL="debug")
    config = MigrationConfig.from_env(env)
    assert config.batch_size == 250
    assert config.destination_project == "proj"
    assert config.error_log_path == "/tmp/e.log"
    assert config.log_level == "DEBUG"


@pytest.mark.parametrize("raw", ["0", "-5", "abc", "1.5"])
def test_bad_batch_size_is_rejected(raw):
    with pytest.raises(ConfigurationError):
        MigrationConfig.from_env(dict(ENV, BATCH_INSERT_SIZE=raw))


def test_missing_required_values_are_listed():
    with pytest.raises(ConfigurationError, match="MONGODB_URI.*BIGQUERY_DATASET_ID"):
        MigrationConfig.from_env({"MONGODB_DATABASE_NAME": "shop"})


def test_direct_construction_validates_batch_size():
    with pytest.raises(ConfigurationError):
        MigrationConfig("mongodb://x", "db", "ds", batch_size=0)


def test_from_env_reads_process_environment(monkeypatch):
    for k, v in ENV.items():
        monkeypatch.setenv(k, v)
    monkeypatch.delenv("BATCH_INSERT_SIZE", raising=False)
    assert MigrationConfig.from_env().destination_dataset_id == "analytics"


def test_configured_log_level_is_applied_once(monkeypatch):
    for k, v in ENV.items():
        monkeypatch.setenv(k, v)
    monkeypatch.setenv("LOG_LEVEL", "debug")
    get_config.cache_clear()
    try:
        config = get_config()
        assert config.log_level == "DEBUG"
        assert logging.getLogger().level == logging.DEBUG
        assert get_config() is config
    finally:
        get_config.cache_clear()
        setup_logging()
