"""Unit tests for the BigQuery sink writer."""

import pytest
from google.api_core.exceptions import Forbidden
from google.auth.exceptions import RefreshError

from fbsync.warehouse.bigquery import BigQueryWriter, WarehouseInsertError
from tests.fakes import FakeBigQueryClient

ROWS = [{"campaign_id": "c1", "impressions": 1}, {"campaign_id": "c2", "impressions": 2}]


def test_write_rows_streams_into_dataset_table() -> None:
    """Rows go to project.dataset.table with unknown values ignored."""
    client = FakeBigQueryClient()
    writer = BigQueryWriter(client, dataset_id="fb_ads_data", ignore_unknown_values=True)

    written = writer.write_rows("campaign_insights", ROWS)

    assert written == 2
    assert client.calls[0]["table"] == "test-project.fb_ads_data.campaign_insights"
    assert client.calls[0]["rows"] == ROWS
    assert client.calls[0]["ignore_unknown_values"] is True


def test_unknown_value_tolerance_is_configurable() -> None:
    client = FakeBigQueryClient()
    writer = BigQueryWriter(client, dataset_id="fb_ads_data", ignore_unknown_values=False)

    writer.write_rows("fb_ad_insights", ROWS)

    assert client.calls[0]["ignore_unknown_values"] is False


def test_empty_batch_is_a_noop() -> None:
    """No rows means no insert call and a count of zero."""
    client = FakeBigQueryClient()
    writer = BigQueryWriter(client, dataset_id="fb_ads_data")

    assert writer.write_rows("fb_adset_insights", []) == 0
    assert client.calls == []


def test_row_errors_raise_insert_error_with_detail() -> None:
    """Per-row errors returned by BigQuery surface with table name and detail."""
    row_errors = [{"index": 1, "errors": [{"reason": "invalid", "message": "no such field"}]}]
    writer = BigQueryWriter(FakeBigQueryClient(errors=row_errors), dataset_id="fb_ads_data")

    with pytest.raises(WarehouseInsertError) as excinfo:
        writer.write_rows("campaign_insights", ROWS)

    assert excinfo.value.table == "campaign_insights"
    assert excinfo.value.errors == row_errors


def test_api_errors_raise_insert_error() -> None:
    """A permission denial from the API is wrapped, not retried."""
    client = FakeBigQueryClient(exc=Forbidden("Access Denied: Table campaign_insights"))
    writer = BigQueryWriter(client, dataset_id="fb_ads_data")

    with pytest.raises(WarehouseInsertError) as excinfo:
        writer.write_rows("campaign_insights", ROWS)

    assert len(client.calls) == 1
    assert "Access Denied" in excinfo.value.errors[0]["message"]


def test_credential_refresh_failure_raises_insert_error() -> None:
    """Expired credentials surface as an insert error for that table."""
    client = FakeBigQueryClient(exc=RefreshError("token expired"))
    writer = BigQueryWriter(client, dataset_id="fb_ads_data")

    with pytest.raises(WarehouseInsertError) as excinfo:
        writer.write_rows("campaign_insights", ROWS)

    assert excinfo.value.table == "campaign_insights"
    assert excinfo.value.errors == [{"message": "token expired"}]
