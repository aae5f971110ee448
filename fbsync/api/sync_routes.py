"""FBSync — Sync API Routes."""

from typing import AsyncIterator, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from fbsync.connectors.meta.client import MetaClient
from fbsync.connectors.meta.endpoints import InsightsReader
from fbsync.core.errors import classify_error
from fbsync.core.logging import get_logger
from fbsync.models.sync_models import SyncErrorResponse, SyncResponse
from fbsync.sync.pipeline import default_date_range, resolve_date_range, sync_from_settings
from fbsync.warehouse.bigquery import BigQueryWriter, create_bigquery_client

logger = get_logger("api.sync")

router = APIRouter(tags=["Sync"])


# ── Dependencies ──


async def get_reader() -> AsyncIterator[InsightsReader]:
    """Yields an insights reader whose HTTP client is closed after the request."""
    client = MetaClient()
    try:
        yield InsightsReader(client)
    finally:
        await client.close()


def get_writer(request: Request) -> BigQueryWriter:
    """BigQuery writer over the app's shared client, created on first use."""
    client = getattr(request.app.state, "bigquery_client", None)
    if client is None:
        try:
            client = create_bigquery_client()
        except Exception as e:
            logger.error(f"BigQuery client unavailable: {e}")
            raise HTTPException(
                status_code=503, detail=f"BigQuery client unavailable: {str(e)}"
            )
        request.app.state.bigquery_client = client
    return BigQueryWriter(client)


# ── Endpoints ──


@router.get("/sync")
async def trigger_sync(
    since: Optional[str] = Query(None, description="Start date (YYYY-MM-DD)"),
    until: Optional[str] = Query(None, description="End date (YYYY-MM-DD)"),
    date_preset: Optional[str] = Query(
        None, description='Meta date preset, e.g. "maximum" for all history'
    ),
    lookback_days: Optional[int] = Query(
        None, ge=0, description="Days before yesterday to include"
    ),
    reader: InsightsReader = Depends(get_reader),
    writer: BigQueryWriter = Depends(get_writer),
):
    """Fetch campaign, ad set and ad insights and append them to BigQuery.

    Without query parameters the configured default range is used.
    """
    if any(p is not None for p in (since, until, date_preset, lookback_days)):
        date_range = resolve_date_range(date_preset, since, until, lookback_days)
    else:
        date_range = default_date_range()

    try:
        run = await sync_from_settings(reader, writer, date_range)
    except Exception as e:
        logger.exception(f"Master fetch/insert error: {e}")
        source, details = classify_error(e)
        body = SyncErrorResponse(
            error=f"Process Failed at {source}",
            source=source,
            details=details,
            date_range=date_range.describe(),
        )
        return JSONResponse(status_code=500, content=body.model_dump(by_alias=True))

    return SyncResponse(
        message=f"Data fetch complete for {date_range}.",
        results=run.results,
        errors=run.errors,
        date_range=date_range.describe(),
    ).model_dump(by_alias=True)
