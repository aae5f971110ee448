"""FBSync — Meta Insights Endpoint.

Fetch function for the ad account insights resource, one call per level.
A failed fetch degrades that level to zero rows instead of aborting the run.
"""

from typing import Dict, List

from fbsync.config import settings
from fbsync.connectors.meta.client import MetaAPIError, MetaClient, graph_base
from fbsync.core.logging import get_logger
from fbsync.core.metric_registry import (
    DATE_FIELDS,
    IDENTITY_FIELDS,
    LIST_FIELDS,
    metric_names,
)
from fbsync.models.sync_models import DateRange, InsightRecord, Level

logger = get_logger("meta.endpoints")

# Same for every level
METRIC_FIELDS: List[str] = metric_names() + LIST_FIELDS + DATE_FIELDS


def fields_for_level(level: Level) -> List[str]:
    """Fields requested from the insights endpoint for `level`."""
    return IDENTITY_FIELDS[Level(level)] + METRIC_FIELDS


class InsightsReader:
    """Fetch raw insight rows from Meta."""

    def __init__(self, client: MetaClient):
        self.client = client
        self.ad_account_id = client.ad_account_id

    def build_params(self, level: Level, date_range: DateRange) -> Dict[str, str]:
        level = Level(level)
        params = {
            "level": level.value,
            "fields": ",".join(fields_for_level(level)),
            "limit": str(settings.meta_page_size),
            **date_range.to_params(),
        }
        if settings.meta_time_increment:
            params["time_increment"] = settings.meta_time_increment
        return params

    async def fetch_insights(
        self, level: Level, date_range: DateRange
    ) -> List[InsightRecord]:
        """Fetch insights for one level. Returns [] on any Meta API error."""
        level = Level(level)
        url = f"{graph_base()}/{self.ad_account_id}/insights"
        try:
            data = await self.client.get_paginated(
                url, self.build_params(level, date_range)
            )
        except MetaAPIError as e:
            logger.error(
                f"Facebook API error ({level.value}): {e.payload or str(e)}",
                extra={"level_name": level.value, "status_code": e.status_code},
            )
            return []

        logger.info(
            f"Fetched {len(data)} rows from Facebook for level: {level.value}",
            extra={"level_name": level.value, "row_count": len(data)},
        )
        return data
