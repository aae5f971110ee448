"""FBSync — Sync Pipeline Orchestrator.

Runs the full data flow for each level in turn:
  fetch insights → normalize → stream into BigQuery

Levels run strictly one after another (campaign, adset, ad). A level whose
fetch fails contributes zero rows; a level whose insert fails is recorded
and skipped unless fail-fast is on, in which case the error propagates.
"""

import asyncio
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Optional, Protocol, Sequence

from fbsync.config import settings
from fbsync.connectors.meta.transformer import normalize
from fbsync.core.logging import get_logger, run_summary_extra
from fbsync.models.sync_models import (
    DateRange,
    InsightRecord,
    Level,
    NormalizedRow,
    SyncRun,
)
from fbsync.warehouse.bigquery import WarehouseInsertError

logger = get_logger("sync.pipeline")

LEVEL_ORDER = (Level.CAMPAIGN, Level.ADSET, Level.AD)


class Reader(Protocol):
    async def fetch_insights(
        self, level: Level, date_range: DateRange
    ) -> Sequence[InsightRecord]: ...


class Writer(Protocol):
    def write_rows(self, table_name: str, rows: Sequence[NormalizedRow]) -> int: ...


def default_tables() -> Dict[Level, str]:
    """Destination table per level from settings."""
    return {
        Level.CAMPAIGN: settings.campaign_table,
        Level.ADSET: settings.adset_table,
        Level.AD: settings.ad_table,
    }


# ─────────────────────────────────────────────
# DATE RANGE RESOLUTION
# ─────────────────────────────────────────────


def _validate_date(d: Optional[str]) -> Optional[date]:
    """Return the parsed date if valid YYYY-MM-DD, else None."""
    if not d:
        return None
    try:
        return datetime.strptime(d, "%Y-%m-%d").date()
    except ValueError:
        return None


def resolve_date_range(
    date_preset: Optional[str] = None,
    since: Optional[str] = None,
    until: Optional[str] = None,
    lookback_days: Optional[int] = None,
    today: Optional[date] = None,
) -> DateRange:
    """Resolve date parameters into a DateRange.

    Explicit dates win, then a named preset, then a relative window that
    ends yesterday and starts `lookback_days` before it.
    """
    today = today or datetime.now(timezone.utc).date()

    # Sanitize inputs
    since_date = _validate_date(since)
    until_date = _validate_date(until)

    if since_date and until_date and since_date <= until_date:
        return DateRange(since=since_date, until=until_date)

    if date_preset:
        return DateRange(date_preset=date_preset)

    if lookback_days is None:
        lookback_days = settings.sync_lookback_days
    yesterday = today - timedelta(days=1)
    return DateRange(
        since=yesterday - timedelta(days=max(lookback_days, 0)), until=yesterday
    )


def default_date_range(today: Optional[date] = None) -> DateRange:
    """Date range configured through settings."""
    return resolve_date_range(
        date_preset=settings.sync_date_preset,
        since=settings.sync_since,
        until=settings.sync_until,
        lookback_days=settings.sync_lookback_days,
        today=today,
    )


# ─────────────────────────────────────────────
# RUN
# ─────────────────────────────────────────────


async def sync_level(
    reader: Reader,
    writer: Writer,
    level: Level,
    table_name: str,
    date_range: DateRange,
    reporting_date: Optional[date] = None,
    account_id: Optional[str] = None,
) -> int:
    """Fetch, normalize and load one level. Returns rows written."""
    logger.info(f"Processing level: {level.value}", extra={"level_name": level.value})
    records = await reader.fetch_insights(level, date_range)
    rows = normalize(level, records, reporting_date, account_id)
    if not rows:
        logger.warning(
            f"No data for {table_name}",
            extra={"level_name": level.value, "table": table_name},
        )
        return 0
    # The BigQuery client blocks; keep the event loop free while it runs
    return await asyncio.to_thread(writer.write_rows, table_name, rows)


async def run_sync(
    reader: Reader,
    writer: Writer,
    date_range: DateRange,
    *,
    tables: Optional[Dict[Level, str]] = None,
    fail_fast: bool = False,
    reporting_date: Optional[date] = None,
    account_id: Optional[str] = None,
) -> SyncRun:
    """Sync every level in order and return the per-level row counts."""
    tables = tables or default_tables()
    run = SyncRun(date_range=date_range)
    logger.info(f"Starting sync for {date_range}")

    for level in LEVEL_ORDER:
        try:
            count = await sync_level(
                reader,
                writer,
                level,
                tables[level],
                date_range,
                reporting_date,
                account_id,
            )
        except WarehouseInsertError as e:
            if fail_fast:
                raise
            logger.error(
                f"Skipping {level.value}: {e}",
                extra={"level_name": level.value, "table": e.table},
            )
            run.record_error(level, str(e))
            continue
        run.record(level, count)

    run.finished_at = datetime.now(timezone.utc)
    logger.info(
        f"Sync finished for {date_range}: {run.results}",
        extra=run_summary_extra(
            run.results,
            run.errors,
            date_range.describe(),
            run.started_at,
            run.finished_at,
        ),
    )
    return run


async def sync_from_settings(
    reader: Reader,
    writer: Writer,
    date_range: Optional[DateRange] = None,
) -> SyncRun:
    """run_sync with table names, fail-fast and reporting date from settings."""
    today = datetime.now(timezone.utc).date()
    return await run_sync(
        reader,
        writer,
        date_range or default_date_range(today),
        tables=default_tables(),
        fail_fast=settings.sync_fail_fast,
        reporting_date=today if settings.include_reporting_date else None,
        account_id=settings.meta_ad_account_id,
    )
