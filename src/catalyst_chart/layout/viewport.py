"""Past/future viewport split and future window sizing.

The chart width is divided into a historical section on the left and a
catalyst timeline on the right. The time span covered by the timeline is a
per-range heuristic:

  1D/1W/1M/3M  months = max(1, round(future_percent / 50 * 3)), 30-day months
  YTD          mirrors the elapsed year (Jan 1 -> now), at least 90 days
  1Y           one 365-day year
  5Y           five 365-day years

The same window must be used by the event projector, the hit test and the
label placer, or dots and labels disagree on what sits at the right edge.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, time

from catalyst_chart.exceptions import ConfigurationError
from catalyst_chart.models import MS_DAY, MS_MONTH, MS_YEAR, ChartDimensions, TimeRange, ViewportSplit
from catalyst_chart.session.market_hours import local_date, local_time_ms

DEFAULT_SPLIT_RATIO = 60.0

_BASE_MONTHS = 3
_BASE_WIDTH_PERCENT = 50
_MIN_YTD_WINDOW_MS = 90 * MS_DAY

_SHORT_RANGES = {
    TimeRange.ONE_DAY,
    TimeRange.ONE_WEEK,
    TimeRange.ONE_MONTH,
    TimeRange.THREE_MONTHS,
}


def split(show_future: bool, ratio: float = DEFAULT_SPLIT_RATIO) -> ViewportSplit:
    """Viewport split for the current configuration.

    Args:
        show_future: Whether the catalyst timeline is shown.
        ratio: Percent of width for the past section when it is.

    Raises:
        ConfigurationError: If ``ratio`` is outside (0, 100].
    """
    if not 0 < ratio <= 100:
        raise ConfigurationError(f"split ratio must be in (0, 100], got {ratio}")
    if not show_future:
        return ViewportSplit(past_percent=100.0, future_percent=0.0)
    return ViewportSplit(past_percent=ratio, future_percent=100.0 - ratio)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def future_months(future_percent: float) -> int:
    """Month count for short ranges: 3 months at 50% width, scaled linearly."""
    return max(1, _round_half_up(future_percent / _BASE_WIDTH_PERCENT * _BASE_MONTHS))


def future_window_ms(
    time_range: TimeRange,
    future_percent: float,
    now_ms: int,
    tz: str = "America/New_York",
) -> int:
    """Duration covered by the future section for a range and split."""
    if time_range in _SHORT_RANGES:
        return future_months(future_percent) * MS_MONTH
    if time_range == TimeRange.YEAR_TO_DATE:
        year_start = local_time_ms(date(local_date(now_ms, tz).year, 1, 1), time(0, 0), tz)
        return max(now_ms - year_start, _MIN_YTD_WINDOW_MS)
    if time_range == TimeRange.ONE_YEAR:
        return MS_YEAR
    return 5 * MS_YEAR


@dataclass(frozen=True)
class ChartLayout:
    """Pixel geometry of the two sections for one render cycle."""

    dims: ChartDimensions
    split: ViewportSplit

    @property
    def past_width(self) -> float:
        return self.dims.width * self.split.past_percent / 100

    @property
    def future_width(self) -> float:
        return self.dims.width * self.split.future_percent / 100

    @property
    def split_x(self) -> float:
        return self.past_width
