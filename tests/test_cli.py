"""Unit tests for the command-line runner."""

from datetime import date

from fbsync import cli
from fbsync.models.sync_models import DateRange, SyncRun
from tests.fakes import FakeBigQueryClient


def test_parser_accepts_no_arguments() -> None:
    args = cli.build_parser().parse_args([])

    assert args.since is None
    assert args.date_preset is None


def test_explicit_dates_from_args() -> None:
    args = cli.build_parser().parse_args(["--since", "2025-10-01", "--until", "2025-10-19"])

    result = cli.date_range_from_args(args)

    assert result == DateRange(since=date(2025, 10, 1), until=date(2025, 10, 19))


def test_preset_from_args() -> None:
    args = cli.build_parser().parse_args(["--preset", "maximum"])

    assert cli.date_range_from_args(args).date_preset == "maximum"


def test_main_returns_one_when_run_aborts(monkeypatch) -> None:
    """An escaping error is classified and logged, with exit code 1."""

    def broken_client():
        raise RuntimeError("no credentials")

    monkeypatch.setattr(cli, "create_bigquery_client", broken_client)

    assert cli.main(["--preset", "maximum"]) == 1


def test_main_returns_zero_after_sync(monkeypatch) -> None:
    calls = []

    class ClosableClient(FakeBigQueryClient):
        def close(self):
            calls.append("closed")

    async def fake_sync(reader, writer, date_range):
        calls.append(str(date_range))
        return SyncRun(date_range=date_range)

    monkeypatch.setattr(cli, "create_bigquery_client", ClosableClient)
    monkeypatch.setattr(cli, "sync_from_settings", fake_sync)

    assert cli.main(["--preset", "maximum"]) == 0
    assert calls == ["maximum", "closed"]
