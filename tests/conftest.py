"""Pytest configuration and shared fixtures."""

import pytest

from fbsync.models.sync_models import DateRange


@pytest.fixture
def date_range() -> DateRange:
    return DateRange(since="2025-10-01", until="2025-10-19")
