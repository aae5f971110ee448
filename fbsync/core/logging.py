"""FBSync — Structured JSON Logging.

Every line carries the sync context passed through ``extra=``: the level and
table being processed, row counts, and on the final line of a run the
per-level results, failed levels and the date range.
"""

import logging
import json
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fbsync.config import settings

# Per-level context
LEVEL_FIELDS = ("level_name", "table", "row_count", "status_code")
# Attached once per run to the summary line
SUMMARY_FIELDS = ("results", "errors", "date_range", "duration_ms")


class JSONFormatter(logging.Formatter):
    """Produces structured JSON log lines for production observability."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        for key in LEVEL_FIELDS + SUMMARY_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                log_entry[key] = value
        return json.dumps(log_entry, default=str)


def run_summary_extra(
    results: Dict[str, int],
    errors: Dict[str, str],
    date_range: Dict[str, Optional[str]],
    started_at: datetime,
    finished_at: datetime,
) -> Dict[str, Any]:
    """``extra=`` payload for the line that closes a sync run."""
    return {
        "results": dict(results),
        "errors": dict(errors),
        "date_range": date_range,
        "row_count": sum(results.values()),
        "duration_ms": round((finished_at - started_at).total_seconds() * 1000),
    }


def get_logger(name: str) -> logging.Logger:
    """Return a named logger with structured JSON handler."""
    logger = logging.getLogger(f"fbsync.{name}")
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    return logger
