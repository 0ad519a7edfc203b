"""Shared test fixtures for the catalyst chart engine."""

from collections.abc import Callable
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from catalyst_chart.config import AppSettings
from catalyst_chart.models import ChartDimensions, Sample

TZ = "America/New_York"

EtClock = Callable[..., int]


def _et_ms(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> int:
    return int(datetime(year, month, day, hour, minute, tzinfo=ZoneInfo(TZ)).timestamp() * 1000)


@pytest.fixture
def et_ms() -> EtClock:
    """Return a helper converting an Eastern wall clock time to Unix ms."""
    return _et_ms


@pytest.fixture
def settings() -> AppSettings:
    """Return AppSettings with defaults and debug logging."""
    return AppSettings(log_level="DEBUG")


@pytest.fixture
def dims() -> ChartDimensions:
    """1000x400 chart: 300px plot between 40px/20px margins, 40px volume strip."""
    return ChartDimensions(width=1000, height=400)


@pytest.fixture
def now_ms() -> int:
    """Friday 2024-03-15 16:00 ET, the regular close of the intraday fixture."""
    return _et_ms(2024, 3, 15, 16, 0)


@pytest.fixture
def intraday_series() -> list[Sample]:
    """78 five-minute samples covering the 09:30-16:00 regular session."""
    start = _et_ms(2024, 3, 15, 9, 30)
    samples = []
    for i in range(78):
        price = 100.0 + i * 0.1
        samples.append(
            Sample(
                timestamp_ms=start + i * 5 * 60_000,
                open=price,
                high=price + 0.2,
                low=price - 0.2,
                close=price + 0.05,
                volume=1000.0 + i,
            )
        )
    return samples


def daily_samples(start_ms: int, days: int, base: float = 50.0) -> list[Sample]:
    """One sample per calendar day at the start timestamp's wall clock."""
    return [
        Sample(
            timestamp_ms=start_ms + i * 86_400_000,
            open=base + i,
            high=base + i + 1,
            low=base + i - 1,
            close=base + i + 0.5,
            volume=10.0,
        )
        for i in range(days)
    ]


@pytest.fixture
def daily_factory() -> Callable[..., list[Sample]]:
    """Return a builder for consecutive daily samples."""
    return daily_samples
