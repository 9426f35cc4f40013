# migration/config.py
import os
from dataclasses import dataclass
from typing import Optional, Mapping

from migration.errors import ConfigurationError

DEFAULT_BATCH_SIZE = 100
DEFAULT_ERROR_LOG = os.path.join(os.getcwd(), "store", "errors.log")


def parse_batch_size(raw) -> int:
    """Positive int or ConfigurationError; no silent fallback to the default."""
    if isinstance(raw, bool):
        raise ConfigurationError(f"batch size must be a positive integer, got {raw!r}")
    try:
        n = int(str(raw).strip())
    except (TypeError, ValueError):
        raise ConfigurationError(f"batch size must be a positive integer, got {raw!r}")
    if n <= 0:
        raise ConfigurationError(f"batch size must be a positive integer, got {raw!r}")
    return n


@dataclass(frozen=True)
class MigrationConfig:
    source_uri: str
    source_database_name: str
    destination_dataset_id: str
    batch_size: int = DEFAULT_BATCH_SIZE
    destination_project: Optional[str] = None
    error_log_path: str = DEFAULT_ERROR_LOG
    log_level: str = "INFO"

    def __post_init__(self):
        # frozen: coerce through object.__setattr__
        object.__setattr__(self, "batch_size", parse_batch_size(self.batch_size))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = None) -> "MigrationConfig":
        env = os.environ if environ is None else environ
        required = {
            "MONGODB_URI": env.get("MONGODB_URI"),
            "MONGODB_DATABASE_NAME": env.get("MONGODB_DATABASE_NAME"),
            "BIGQUERY_DATASET_ID": env.get("BIGQUERY_DATASET_ID"),
        }
        missing = [k for k, v in required.items() if not v]
        if missing:
            raise ConfigurationError("missing environment variables: " + ", ".join(missing))
        raw_batch = env.get("BATCH_INSERT_SIZE")
        batch_size = DEFAULT_BATCH_SIZE if raw_batch in (None, "") else parse_batch_size(raw_batch)
        return cls(
            source_uri=required["MONGODB_URI"],
            source_database_name=required["MONGODB_DATABASE_NAME"],
            destination_dataset_id=required["BIGQUERY_DATASET_ID"],
            batch_size=batch_size,
            destination_project=env.get("BIGQUERY_PROJECT") or None,
            error_log_path=env.get("MIGRATION_ERROR_LOG") or DEFAULT_ERROR_LOG,
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
        )
