"""FBSync — Sync Models (Ephemeral, never persisted)."""

import json
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, model_validator


# Raw insight record as returned by Meta, and a flattened BigQuery row
InsightRecord = Dict[str, Any]
NormalizedRow = Dict[str, Any]


class Level(str, Enum):
    """Entity level requested from the insights endpoint."""

    CAMPAIGN = "campaign"
    ADSET = "adset"
    AD = "ad"

    @property
    def summary_key(self) -> str:
        """Key used for this level in the run summary."""
        return f"{self.value}s"


# ─────────────────────────────────────────────
# DATE RANGE
# ─────────────────────────────────────────────


class DateRange(BaseModel):
    """Either explicit since/until dates or a named Meta date preset."""

    since: Optional[date] = None
    until: Optional[date] = None
    date_preset: Optional[str] = None

    @model_validator(mode="after")
    def _exactly_one_form(self) -> "DateRange":
        explicit = self.since is not None or self.until is not None
        if explicit and self.date_preset:
            raise ValueError("Use either since/until or date_preset, not both")
        if explicit and (self.since is None or self.until is None):
            raise ValueError("Both since and until are required")
        if not explicit and not self.date_preset:
            raise ValueError("A date range needs since/until or a date_preset")
        if explicit and self.since > self.until:
            raise ValueError(f"since {self.since} is after until {self.until}")
        return self

    def to_params(self) -> Dict[str, str]:
        """Query parameters for the Meta insights endpoint."""
        if self.date_preset:
            return {"date_preset": self.date_preset}
        return {
            "time_range": json.dumps(
                {"since": self.since.isoformat(), "until": self.until.isoformat()}
            )
        }

    def describe(self) -> Dict[str, Optional[str]]:
        """JSON-friendly view used in API responses and logs."""
        if self.date_preset:
            return {"date_preset": self.date_preset}
        return {"since": self.since.isoformat(), "until": self.until.isoformat()}

    def __str__(self) -> str:
        if self.date_preset:
            return self.date_preset
        return f"{self.since.isoformat()} to {self.until.isoformat()}"


# ─────────────────────────────────────────────
# SYNC RUN — One execution's outcome
# ─────────────────────────────────────────────


def _empty_results() -> Dict[str, int]:
    return {level.summary_key: 0 for level in Level}


class SyncRun(BaseModel):
    """Per-level row counts for one sync. Discarded after being reported."""

    date_range: DateRange
    results: Dict[str, int] = Field(default_factory=_empty_results)
    errors: Dict[str, str] = Field(default_factory=dict)
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: Optional[datetime] = None

    def record(self, level: Level, row_count: int) -> None:
        self.results[level.summary_key] = row_count

    def record_error(self, level: Level, message: str) -> None:
        self.results[level.summary_key] = 0
        self.errors[level.value] = message

    @property
    def total_rows(self) -> int:
        return sum(self.results.values())


# ─────────────────────────────────────────────
# API RESPONSES
# ─────────────────────────────────────────────


class SyncResponse(BaseModel):
    """Response for GET /sync."""

    message: str
    results: Dict[str, int]
    errors: Dict[str, str] = {}
    date_range: Dict[str, Optional[str]] = Field(serialization_alias="dateRange")


class SyncErrorResponse(BaseModel):
    """Error body for GET /sync when the run aborts."""

    error: str
    source: str
    details: str
    date_range: Dict[str, Optional[str]] = Field(serialization_alias="dateRange")
