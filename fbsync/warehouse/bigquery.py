"""FBSync — BigQuery Sink.

Streams normalized rows into append-only insight tables.
Rows are never updated or checked against what is already there.
"""

import json
from typing import Any, Dict, List, Sequence

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud import bigquery

from fbsync.config import Settings, settings
from fbsync.core.logging import get_logger
from fbsync.models.sync_models import NormalizedRow

logger = get_logger("warehouse.bigquery")


class WarehouseInsertError(Exception):
    """Raised when BigQuery rejects a streaming insert."""

    def __init__(self, table: str, errors: List[Dict[str, Any]] | None = None):
        self.table = table
        self.errors = errors or []
        super().__init__(f"BigQuery insert into {table} failed: {len(self.errors)} errors")


def create_bigquery_client(config: Settings = settings) -> bigquery.Client:
    """Create the process-wide BigQuery client using Application Default Credentials."""
    client = bigquery.Client(project=config.google_project_id or None)
    logger.info(f"BigQuery client initialized for project {client.project}")
    return client


def _api_error_detail(e: Exception) -> List[Dict[str, Any]]:
    errors = getattr(e, "errors", None) or []
    if errors:
        return [err if isinstance(err, dict) else {"message": str(err)} for err in errors]
    return [{"message": str(e)}]


class BigQueryWriter:
    """Append rows to tables in one dataset."""

    def __init__(
        self,
        client: bigquery.Client,
        dataset_id: str | None = None,
        ignore_unknown_values: bool | None = None,
    ):
        self.client = client
        self.dataset_id = dataset_id or settings.bigquery_dataset_id
        self.ignore_unknown_values = (
            settings.bigquery_ignore_unknown_values
            if ignore_unknown_values is None
            else ignore_unknown_values
        )

    def table_id(self, table_name: str) -> str:
        return f"{self.client.project}.{self.dataset_id}.{table_name}"

    def write_rows(self, table_name: str, rows: Sequence[NormalizedRow]) -> int:
        """Stream `rows` into `table_name`. Returns the number of rows written."""
        if not rows:
            logger.info(f"No data for {table_name}", extra={"table": table_name})
            return 0

        table_id = self.table_id(table_name)
        try:
            errors = self.client.insert_rows_json(
                table_id,
                list(rows),
                ignore_unknown_values=self.ignore_unknown_values,
            )
        except (GoogleAPIError, GoogleAuthError) as e:
            detail = _api_error_detail(e)
            logger.error(
                f"BigQuery insert error ({table_name}): {json.dumps(detail, default=str)}",
                extra={"table": table_name},
            )
            raise WarehouseInsertError(table_name, detail) from e

        if errors:
            logger.error(
                f"Streaming insert errors ({table_name}): {json.dumps(errors, default=str)}",
                extra={"table": table_name},
            )
            raise WarehouseInsertError(table_name, list(errors))

        logger.info(
            f"Inserted {len(rows)} rows into BigQuery table: {table_id}",
            extra={"table": table_name, "row_count": len(rows)},
        )
        return len(rows)
