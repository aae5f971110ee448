"""FBSync — Meta Raw → BigQuery Row Transformer.

Flattens raw insight records into fixed-schema rows, one row per record.
Metric coercion follows the metric registry: counts become ints, money and
rates become floats, and anything missing or unparsable becomes 0.
"""

import json
import math
from datetime import date
from typing import Any, List, Optional, Sequence

from fbsync.core.metric_registry import (
    DATE_FIELDS,
    IDENTITY_FIELDS,
    INSIGHT_METRICS,
    LIST_FIELDS,
)
from fbsync.models.sync_models import InsightRecord, Level, NormalizedRow


def to_float(value: Any) -> float:
    """Safely convert a value to float."""
    if isinstance(value, bool):
        return 0.0
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(result) or math.isinf(result):
        return 0.0
    return result


def to_int(value: Any) -> int:
    """Safely convert a value to int. "12.9" truncates to 12."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        pass
    # Fractional strings and floats
    return int(to_float(value))


def _encode_list(value: Any) -> str:
    if value is None:
        return "[]"
    if isinstance(value, str):
        # Already-encoded lists pass through untouched
        try:
            if isinstance(json.loads(value), list):
                return value
        except ValueError:
            pass
    return json.dumps(value)


def normalize_record(
    level: Level,
    record: InsightRecord,
    reporting_date: Optional[date] = None,
    account_id: Optional[str] = None,
) -> NormalizedRow:
    """Map a single raw record onto its table's column set."""
    level = Level(level)
    row: NormalizedRow = {field: record.get(field) for field in IDENTITY_FIELDS[level]}

    # The configured ad account is authoritative for campaign rows
    if level == Level.CAMPAIGN and account_id:
        row["account_id"] = account_id.replace("act_", "")

    for name, metric in INSIGHT_METRICS.items():
        raw = record.get(name)
        row[name] = to_int(raw) if metric.is_integer else to_float(raw)

    for name in LIST_FIELDS:
        row[name] = _encode_list(record.get(name))

    for name in DATE_FIELDS:
        row[name] = record.get(name)

    if reporting_date is not None:
        row["reporting_date"] = reporting_date.isoformat()

    return row


def normalize(
    level: Level,
    records: Sequence[InsightRecord],
    reporting_date: Optional[date] = None,
    account_id: Optional[str] = None,
) -> List[NormalizedRow]:
    """Transform raw insight records into rows. 1:1 and order-preserving."""
    return [
        normalize_record(level, record, reporting_date, account_id)
        for record in records
    ]
