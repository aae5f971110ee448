"""Fake collaborators and sample Meta records shared by the tests."""

from typing import Any, Dict, List, Sequence

from fbsync.models.sync_models import DateRange, Level
from fbsync.warehouse.bigquery import WarehouseInsertError


class FakeReader:
    """Returns canned records per level and remembers what was asked for."""

    def __init__(self, records: Dict[Level, List[Dict[str, Any]]] | None = None):
        self.records = records or {}
        self.calls: List[Level] = []

    async def fetch_insights(self, level: Level, date_range: DateRange):
        self.calls.append(level)
        return list(self.records.get(level, []))


class FakeWriter:
    """Records every write; tables listed in `failing` raise an insert error."""

    def __init__(self, failing: Sequence[str] = ()):
        self.failing = set(failing)
        self.calls: List[tuple[str, List[Dict[str, Any]]]] = []

    def write_rows(self, table_name: str, rows) -> int:
        self.calls.append((table_name, list(rows)))
        if table_name in self.failing:
            raise WarehouseInsertError(
                table_name, [{"index": 0, "errors": [{"reason": "invalid"}]}]
            )
        return len(rows)

    @property
    def tables(self) -> List[str]:
        return [table for table, _ in self.calls]


class FakeBigQueryClient:
    """Stands in for google.cloud.bigquery.Client.insert_rows_json."""

    project = "test-project"

    def __init__(self, errors: List[Dict[str, Any]] | None = None, exc: Exception | None = None):
        self.errors = errors or []
        self.exc = exc
        self.calls: List[Dict[str, Any]] = []

    def insert_rows_json(self, table, json_rows, **kwargs):
        self.calls.append({"table": table, "rows": json_rows, **kwargs})
        if self.exc is not None:
            raise self.exc
        return self.errors


def campaign_record(i: int = 1) -> Dict[str, Any]:
    return {
        "campaign_id": f"c{i}",
        "campaign_name": f"Campaign {i}",
        "account_id": "123",
        "impressions": "100",
        "clicks": "7",
        "spend": "12.50",
        "cpc": "1.785714",
        "ctr": "7.0",
        "cpm": "125.0",
        "reach": "90",
        "frequency": "1.111111",
        "actions": [{"action_type": "link_click", "value": "5"}],
        "date_start": "2025-10-01",
        "date_stop": "2025-10-01",
    }


def ad_record(i: int = 1) -> Dict[str, Any]:
    return {
        "ad_id": f"a{i}",
        "ad_name": f"Ad {i}",
        "adset_id": "s1",
        "adset_name": "Ad Set 1",
        "campaign_id": "c1",
        "campaign_name": "Campaign 1",
        "impressions": "10",
        "clicks": "1",
        "spend": "0.99",
        "date_start": "2025-10-01",
        "date_stop": "2025-10-01",
    }


