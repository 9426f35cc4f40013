# migration/mongo_utils.py
from bson.errors import BSONError
from pymongo import MongoClient, errors
from typing import List, Dict, Any

from migration.errors import SourceConnectionError
from migration.logging_utils import get_logger

logger = get_logger(__name__)


class MongoDocumentSource:
    """
    Reads whole collections from one MongoDB database.
    uri: mongodb connection string, e.g. "mongodb://localhost:27017"
    """
    def __init__(self, uri: str, db_name: str, client: MongoClient = None):
        self.uri = uri
        self.db_name = db_name
        self._client = client

    def _get_client(self) -> MongoClient:
        if self._client is None:
            try:
                self._client = MongoClient(self.uri)
            except (errors.PyMongoError, ValueError) as e:
                # ValueError / ConfigurationError: malformed uri
                raise SourceConnectionError(f"cannot connect to MongoDB: {e}") from e
        return self._client

    def fetch_all(self, collection_name: str) -> List[Dict[str, Any]]:
        """Full snapshot of the collection, materialized in memory."""
        client = self._get_client()
        try:
            docs = list(client[self.db_name][collection_name].find({}))
        except (errors.PyMongoError, BSONError) as e:
            # BSONError: undecodable documents, e.g. out-of-range dates
            raise SourceConnectionError(f"failed to read {self.db_name}.{collection_name}: {e}") from e
        logger.info("Fetched %d documents from %s.%s", len(docs), self.db_name, collection_name)
        return docs

    def close(self):
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
