# migration/pipeline.py
from typing import Callable, List

from migration.batch_loader import BatchLoader
from migration.config import MigrationConfig
from migration.errors import MigrationError
from migration.models import MigrationOutcome, MigrationState
from migration.mongo_utils import MongoDocumentSource
from migration.schema_infer import infer_schema
from migration.transformer import normalize_documents
from migration.logging_utils import get_logger

logger = get_logger(__name__)

SUCCESS_MESSAGE = "Migration completed successfully."


def default_source_factory(config: MigrationConfig):
    return MongoDocumentSource(config.source_uri, config.source_database_name)


class MigrationPipeline:
    """
    One full collection -> table migration:
      IDLE -> FETCHING -> INFERRING -> REPLACING_TABLE -> LOADING -> SUCCEEDED | FAILED
    Any failure moves straight to FAILED; nothing is retried.
    The destination table is dropped and re-created on every run, and loading is
    not atomic (a failure leaves the batches inserted so far). Two runs against
    the same table at the same time race with each other.
    """
    def __init__(self, config: MigrationConfig, store, source_factory: Callable = None):
        self.config = config
        self.store = store
        self.source_factory = source_factory or default_source_factory
        self.state = MigrationState.IDLE
        self.history: List[MigrationState] = [MigrationState.IDLE]

    def _enter(self, state: MigrationState):
        logger.info("migration state %s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def _fetch(self, collection_name: str):
        source = self.source_factory(self.config)
        try:
            return source.fetch_all(collection_name)
        finally:
            source.close()

    def _replace_table(self, dataset: str, table: str, schema):
        if self.store.table_exists(dataset, table):
            self.store.delete_table(dataset, table)
            logger.info("Deleted existing BigQuery table: %s", table)
        self.store.create_table(dataset, table, schema)

    def run(self, collection_name: str, table_name: str) -> MigrationOutcome:
        dataset = self.config.destination_dataset_id
        try:
            self._enter(MigrationState.FETCHING)
            docs = self._fetch(collection_name)

            self._enter(MigrationState.INFERRING)
            schema = infer_schema(docs)
            rows = normalize_documents(docs)
            del docs
            logger.info("Inferred %d columns for %d rows", len(schema), len(rows))

            self._enter(MigrationState.REPLACING_TABLE)
            self._replace_table(dataset, table_name, schema)

            self._enter(MigrationState.LOADING)
            loader = BatchLoader(self.store, dataset, table_name)
            outcome = loader.load(rows, schema, self.config.batch_size)
        except MigrationError as e:
            last_state = self.state
            logger.error("Error during migration (%s): %s", last_state.value, e)
            self._enter(MigrationState.FAILED)
            return MigrationOutcome.failure(e, state=last_state)
        except Exception as e:
            # collaborator failed outside the MigrationError family
            last_state = self.state
            logger.exception("Unexpected error during migration (%s)", last_state.value)
            self._enter(MigrationState.FAILED)
            return MigrationOutcome.failure(e, state=last_state)

        if not outcome.succeeded:
            self._enter(MigrationState.FAILED)
            return outcome
        self._enter(MigrationState.SUCCEEDED)
        logger.info("%s %s -> %s.%s (%d rows)", SUCCESS_MESSAGE, collection_name, dataset, table_name,
                    outcome.rows_loaded)
        return MigrationOutcome.success(SUCCESS_MESSAGE, rows_loaded=outcome.rows_loaded,
                                        batches_loaded=outcome.batches_loaded)


def run_migration(config: MigrationConfig, store, collection_name: str, table_name: str,
                  source_factory: Callable = None) -> MigrationOutcome:
    return MigrationPipeline(config, store, source_factory).run(collection_name, table_name)
