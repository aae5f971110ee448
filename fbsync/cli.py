"""Command-line runner for a one-off insights sync.

Usage:
    fbsync-run
    fbsync-run --since 2025-10-01 --until 2025-10-19
    fbsync-run --preset maximum
"""

import argparse
import asyncio
import sys
from typing import Optional, Sequence

from fbsync.connectors.meta.client import MetaClient
from fbsync.connectors.meta.endpoints import InsightsReader
from fbsync.core.errors import classify_error
from fbsync.core.logging import get_logger
from fbsync.models.sync_models import DateRange
from fbsync.sync.pipeline import default_date_range, resolve_date_range, sync_from_settings
from fbsync.warehouse.bigquery import BigQueryWriter, create_bigquery_client

logger = get_logger("cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fbsync-run",
        description="Sync Facebook Ads insights into BigQuery",
    )
    parser.add_argument("--since", help="Start date (YYYY-MM-DD)")
    parser.add_argument("--until", help="End date (YYYY-MM-DD)")
    parser.add_argument(
        "--preset", dest="date_preset", help='Meta date preset, e.g. "maximum"'
    )
    parser.add_argument(
        "--lookback-days",
        type=int,
        help="Days before yesterday to include (window ends yesterday)",
    )
    return parser


def date_range_from_args(args: argparse.Namespace) -> DateRange:
    if any(
        v is not None for v in (args.since, args.until, args.date_preset, args.lookback_days)
    ):
        return resolve_date_range(
            args.date_preset, args.since, args.until, args.lookback_days
        )
    return default_date_range()


async def _run(date_range: DateRange) -> int:
    bigquery_client = create_bigquery_client()
    try:
        async with MetaClient() as client:
            run = await sync_from_settings(
                InsightsReader(client), BigQueryWriter(bigquery_client), date_range
            )
    finally:
        bigquery_client.close()

    if run.errors:
        logger.warning(f"Levels with insert errors: {', '.join(run.errors)}")
    logger.info(f"🎯 Sync complete for {date_range}: {run.results}")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    date_range = date_range_from_args(args)
    try:
        return asyncio.run(_run(date_range))
    except Exception as e:
        source, details = classify_error(e)
        logger.error(f"❌ Process failed at {source}: {details}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
