"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest  # type: ignore[import-not-found]

from time_ledger.analysis.reports import ReportAggregator
from time_ledger.core.storage import TimeLogStore
from time_ledger.core.tracker import TimeTracker

BASE_TIME = 1_735_725_600  # 2025-01-01 10:00:00 UTC


class FakeClock:
    """Settable clock returning whole epoch seconds."""

    def __init__(self, now: int = BASE_TIME):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest."""
    config.addinivalue_line("markers", "integration: Integration tests")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "data.json"


@pytest.fixture
def store(data_file: Path) -> TimeLogStore:
    return TimeLogStore(data_file)


@pytest.fixture
def tracker(store: TimeLogStore, clock: FakeClock) -> TimeTracker:
    return TimeTracker(store, clock=clock)


@pytest.fixture
def reports(store: TimeLogStore, clock: FakeClock) -> ReportAggregator:
    return ReportAggregator(store, clock=clock)
