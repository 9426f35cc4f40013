# migration/bigquery_utils.py
from typing import List, Dict, Any

from google.api_core import exceptions as gexc
from google.auth.exceptions import GoogleAuthError
from google.cloud import bigquery

from migration.errors import TableReplaceError, GenericInsertError, PartialInsertError
from migration.logging_utils import get_logger

logger = get_logger(__name__)


def to_schema_fields(schema: List[Dict[str, str]]) -> List[bigquery.SchemaField]:
    return [bigquery.SchemaField(c["name"], c["type"]) for c in schema]


class BigQueryTableStore:
    """
    Destination-table operations used by the migration, with google-cloud
    failures translated into migration errors.
    client: optional bigquery.Client; created lazily from application default
    credentials otherwise, so credential errors surface on first use.
    """
    def __init__(self, client: bigquery.Client = None, project: str = None):
        self._client = client
        self.project = project

    @property
    def client(self) -> bigquery.Client:
        if self._client is None:
            self._client = bigquery.Client(project=self.project)
        return self._client

    @staticmethod
    def table_id(dataset: str, table: str) -> str:
        return f"{dataset}.{table}"

    def table_exists(self, dataset: str, table: str) -> bool:
        try:
            self.client.get_table(self.table_id(dataset, table))
            return True
        except gexc.NotFound:
            return False
        except (gexc.GoogleAPICallError, GoogleAuthError) as e:
            raise TableReplaceError(f"cannot look up table {self.table_id(dataset, table)}: {e}") from e

    def delete_table(self, dataset: str, table: str):
        try:
            self.client.delete_table(self.table_id(dataset, table), not_found_ok=True)
        except (gexc.GoogleAPICallError, GoogleAuthError) as e:
            raise TableReplaceError(f"cannot delete table {self.table_id(dataset, table)}: {e}") from e

    def create_table(self, dataset: str, table: str, schema: List[Dict[str, str]]):
        try:
            t = bigquery.Table(self._full_table_id(dataset, table), schema=to_schema_fields(schema))
            return self.client.create_table(t)
        except (gexc.GoogleAPICallError, GoogleAuthError) as e:
            raise TableReplaceError(f"cannot create table {self.table_id(dataset, table)}: {e}") from e

    def _full_table_id(self, dataset: str, table: str) -> str:
        # bigquery.Table wants project.dataset.table
        return f"{self.client.project}.{dataset}.{table}"

    def insert_batch(self, dataset: str, table: str, rows: List[Dict[str, Any]], schema: List[Dict[str, str]]):
        """
        Streaming insert of one batch; each row's id is sent as insertId.
        Raises PartialInsertError with the rejected rows when BigQuery reports
        per-row errors, GenericInsertError when the request itself fails.
        """
        try:
            t = bigquery.Table(self._full_table_id(dataset, table), schema=to_schema_fields(schema))
            errors = self.client.insert_rows_json(
                t,
                [r["payload"] for r in rows],
                row_ids=[r["id"] for r in rows],
            )
        except (gexc.GoogleAPICallError, GoogleAuthError, ValueError, TypeError) as e:
            raise GenericInsertError(f"insert into {self.table_id(dataset, table)} failed: {e}") from e
        if errors:
            row_errors = []
            for e in errors:
                idx = e.get("index")
                row = rows[idx] if isinstance(idx, int) and 0 <= idx < len(rows) else {}
                row_errors.append({
                    "row_id": row.get("id"),
                    "row": row.get("payload", {}),
                    "errors": e.get("errors", []),
                })
            raise PartialInsertError(
                f"{len(row_errors)} of {len(rows)} rows rejected by {self.table_id(dataset, table)}",
                row_errors=row_errors,
            )
