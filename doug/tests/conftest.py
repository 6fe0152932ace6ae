"""
Pytest configuration and fixtures for Doug tests.

This module provides shared fixtures and configuration for all test modules.
"""

import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Generator, List, Optional

import pytest

from doug.core.time_tracker import TimeTracker
from doug.db.models import Period
from doug.db.repository import PeriodStore


class FakeClock:
    """Clock returning a fixed, adjustable time."""

    def __init__(self, now: datetime):
        self.current = now

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current = self.current + timedelta(**kwargs)


def utc(*args: int) -> datetime:
    """Build an aware UTC datetime."""
    return datetime(*args, tzinfo=timezone.utc)


def make_period(
    project: str, start: datetime, end: Optional[datetime] = None
) -> Period:
    """Build a period."""
    return Period(project=project, start_time=start, end_time=end)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def data_file(temp_dir: Path) -> Path:
    """Provide a data file path."""
    return temp_dir / "periods.json"


@pytest.fixture
def store(data_file: Path) -> PeriodStore:
    """Provide a period store on a temporary file."""
    return PeriodStore(data_file)


@pytest.fixture
def now() -> datetime:
    """Fixed current time: Wednesday 10 January 2024, 12:00 UTC."""
    return utc(2024, 1, 10, 12, 0, 0)


@pytest.fixture
def clock(now: datetime) -> FakeClock:
    """Provide an adjustable clock starting at ``now``."""
    return FakeClock(now)


@pytest.fixture
def time_tracker(temp_dir: Path, clock: FakeClock) -> TimeTracker:
    """Provide a tracker with a fixed clock, displaying in UTC."""
    return TimeTracker(temp_dir, clock=clock, tz=timezone.utc)


@pytest.fixture
def sample_periods() -> List[Period]:
    """Provide closed periods on Monday 8 January 2024."""
    return [
        make_period("alpha", utc(2024, 1, 8, 9, 0), utc(2024, 1, 8, 11, 0)),
        make_period("beta", utc(2024, 1, 8, 11, 15), utc(2024, 1, 8, 12, 0)),
        make_period("alpha", utc(2024, 1, 8, 13, 0), utc(2024, 1, 8, 13, 30)),
    ]
