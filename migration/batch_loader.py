# migration/batch_loader.py
from typing import List, Dict, Any

from migration.config import DEFAULT_BATCH_SIZE
from migration.errors import ConfigurationError, PartialInsertError, GenericInsertError
from migration.models import MigrationOutcome, MigrationState
from migration.logging_utils import get_logger

logger = get_logger(__name__)


def create_batches(rows: List[Any], batch_size: int) -> List[List[Any]]:
    """Contiguous slices of at most batch_size; concatenated they give back rows."""
    if isinstance(batch_size, bool) or not isinstance(batch_size, int):
        raise ConfigurationError(f"batch size must be a positive integer, got {batch_size!r}")
    if batch_size <= 0:
        raise ConfigurationError(f"batch size must be a positive integer, got {batch_size!r}")
    return [rows[i:i + batch_size] for i in range(0, len(rows), batch_size)]


class BatchLoader:
    """
    Loads normalized rows into one destination table, one batch at a time.
    store: anything with insert_batch(dataset, table, rows, schema).
    """
    def __init__(self, store, dataset: str, table: str):
        self.store = store
        self.dataset = dataset
        self.table = table

    def load(self, rows: List[Dict[str, Any]], schema: List[Dict[str, str]],
             batch_size: int = DEFAULT_BATCH_SIZE) -> MigrationOutcome:
        """
        Insert the batches in order; the next batch is only sent after the
        previous insert returned. The first failed batch ends the load: a crash
        or failure leaves the rows of earlier batches in the table.
        """
        batches = create_batches(rows, batch_size)
        loaded = 0
        for n, batch in enumerate(batches):
            try:
                self.store.insert_batch(self.dataset, self.table, batch, schema)
            except PartialInsertError as e:
                logger.error("PARTIAL FAILURE in batch %d of %d: %s", n + 1, len(batches), e)
                for r in e.row_errors:
                    logger.error("rejected row %s: %s", r.get("row_id"), r.get("errors"))
                return MigrationOutcome.failure(e, state=MigrationState.LOADING,
                                                rows_loaded=loaded, batches_loaded=n)
            except GenericInsertError as e:
                logger.error("batch %d of %d failed: %s", n + 1, len(batches), e)
                return MigrationOutcome.failure(e, state=MigrationState.LOADING,
                                                rows_loaded=loaded, batches_loaded=n)
            loaded += len(batch)
            logger.info("Data inserted into BigQuery %s.%s: batch %d/%d (%d rows)",
                        self.dataset, self.table, n + 1, len(batches), len(batch))
        return MigrationOutcome.success(
            f"loaded {loaded} rows in {len(batches)} batches",
            rows_loaded=loaded, batches_loaded=len(batches),
        )
