"""FBSync — FastAPI Application Entry Point.

Facebook Ads insights → BigQuery sync service.
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fbsync.api.sync_routes import router as sync_router
from fbsync.scheduler.jobs import start_scheduler, stop_scheduler
from fbsync.warehouse.bigquery import create_bigquery_client
from fbsync.core.logging import get_logger

logger = get_logger("main")


IS_SERVERLESS = bool(
    os.environ.get("VERCEL") or os.environ.get("AWS_LAMBDA_FUNCTION_NAME")
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info("🚀 FBSync starting up...")
    logger.info(f"🌍 Environment: {'SERVERLESS' if IS_SERVERLESS else 'LOCAL'}")
    app.state.bigquery_client = None
    try:
        app.state.bigquery_client = create_bigquery_client()
    except Exception as e:
        logger.error(f"❌ BigQuery client creation failed: {e}")
    if not IS_SERVERLESS and app.state.bigquery_client is not None:
        start_scheduler(app.state.bigquery_client)
    yield
    if not IS_SERVERLESS:
        stop_scheduler()
    if app.state.bigquery_client is not None:
        app.state.bigquery_client.close()
    logger.info("FBSync shut down")


app = FastAPI(
    title="FBSync",
    description="Pull Facebook Ads insights at campaign, ad set and ad level and append them to BigQuery.",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(sync_router)


@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "fbsync",
        "version": "1.0.0",
        "environment": "serverless" if IS_SERVERLESS else "local",
    }
