"""FBSync — Error classification for aborted runs."""

import json
from typing import Tuple

from google.api_core.exceptions import GoogleAPIError

from fbsync.connectors.meta.client import MetaAPIError
from fbsync.warehouse.bigquery import WarehouseInsertError

FACEBOOK_API_ERROR = "Facebook API Error"
BIGQUERY_INSERT_ERROR = "BigQuery Insert Error"
BIGQUERY_SCHEMA_ERROR = "BigQuery Schema/Permission Error"
SERVER_ERROR = "Server Execution Error"


def classify_error(exc: BaseException) -> Tuple[str, str]:
    """Return (source, details) describing where a run failed."""
    if isinstance(exc, MetaAPIError):
        fb_error = exc.payload.get("error") or exc.payload
        return FACEBOOK_API_ERROR, json.dumps(fb_error, indent=2) if fb_error else str(exc)

    if isinstance(exc, WarehouseInsertError):
        return BIGQUERY_INSERT_ERROR, json.dumps(exc.errors, indent=2, default=str)

    if isinstance(exc, GoogleAPIError):
        errors = getattr(exc, "errors", None) or []
        first = errors[0] if errors and isinstance(errors[0], dict) else {}
        if first.get("reason") == "invalid":
            return BIGQUERY_SCHEMA_ERROR, json.dumps(errors, indent=2, default=str)
        return BIGQUERY_INSERT_ERROR, str(exc)

    return SERVER_ERROR, str(exc)
