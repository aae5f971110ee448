"""FBSync — Insight Metric Registry.

Defines the level-invariant metric fields requested from Meta and how each
one is coerced before it is written to BigQuery. The request field list and
the normalizer both read from here, so adding a metric is a one-line change.
"""

from enum import Enum
from typing import Dict, List

from fbsync.models.sync_models import Level


class MetricType(str, Enum):
    """How a metric is categorised."""

    VOLUME = "volume"  # Raw counts: impressions, clicks, reach
    COST = "cost"  # Monetary: spend
    RATE = "rate"  # Pre-computed rates from source: ctr, cpc, cpm
    AVERAGE = "average"  # frequency


class MetricDefinition:
    """Describes a single metric column."""

    def __init__(
        self, name: str, metric_type: MetricType, unit: str = "", description: str = ""
    ):
        self.name = name
        self.metric_type = metric_type
        self.unit = unit
        self.description = description

    @property
    def is_integer(self) -> bool:
        """Counts are stored as INTEGER, everything else as FLOAT."""
        return self.unit == "count"

    def __repr__(self) -> str:
        return f"<Metric {self.name} ({self.metric_type.value})>"


# ─────────────────────────────────────────────
# INSIGHT METRICS — Canonical Registry
# ─────────────────────────────────────────────

INSIGHT_METRICS: Dict[str, MetricDefinition] = {
    # Volume
    "impressions": MetricDefinition(
        "impressions", MetricType.VOLUME, "count", "Number of times ad was shown"
    ),
    "clicks": MetricDefinition("clicks", MetricType.VOLUME, "count", "Total clicks"),
    "reach": MetricDefinition(
        "reach", MetricType.VOLUME, "count", "Unique users who saw ad"
    ),
    # Cost
    "spend": MetricDefinition(
        "spend", MetricType.COST, "currency", "Total amount spent"
    ),
    # Rates (from Meta directly)
    "cpc": MetricDefinition("cpc", MetricType.RATE, "currency", "Cost per click"),
    "ctr": MetricDefinition("ctr", MetricType.RATE, "%", "Click-through rate"),
    "cpm": MetricDefinition(
        "cpm", MetricType.RATE, "currency", "Cost per 1000 impressions"
    ),
    "frequency": MetricDefinition(
        "frequency", MetricType.AVERAGE, "avg", "Average times ad shown per user"
    ),
}

# List-valued fields serialized to JSON text before loading
LIST_FIELDS: List[str] = ["actions"]

DATE_FIELDS: List[str] = ["date_start", "date_stop"]

# Identity columns per level, own entity first, then its parents
IDENTITY_FIELDS: Dict[Level, List[str]] = {
    Level.CAMPAIGN: ["campaign_id", "campaign_name", "account_id"],
    Level.ADSET: ["adset_id", "adset_name", "campaign_id", "campaign_name"],
    Level.AD: [
        "ad_id",
        "ad_name",
        "adset_id",
        "adset_name",
        "campaign_id",
        "campaign_name",
    ],
}


# ─────────────────────────────────────────────
# HELPERS
# ─────────────────────────────────────────────


def metric_names() -> List[str]:
    """Metric names in registry order."""
    return list(INSIGHT_METRICS)
