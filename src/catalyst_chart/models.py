"""Shared data models for the chart coordinate and interaction engine.

All timestamps are Unix milliseconds, matching the data layer's candle
convention. Value types are frozen dataclasses: a sample or event produced by
the data layer is never mutated by the engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from catalyst_chart.exceptions import SeriesOrderError

MS_MINUTE = 60 * 1000
MS_HOUR = 60 * MS_MINUTE
MS_DAY = 24 * MS_HOUR
MS_WEEK = 7 * MS_DAY
MS_MONTH = 30 * MS_DAY  # chart month, not a calendar month
MS_YEAR = 365 * MS_DAY


class Session(str, Enum):
    """Sub-period of a trading day."""

    PRE_MARKET = "pre-market"
    REGULAR = "regular"
    AFTER_HOURS = "after-hours"


class TimeRange(str, Enum):
    """Selectable chart range."""

    ONE_DAY = "1D"
    ONE_WEEK = "1W"
    ONE_MONTH = "1M"
    THREE_MONTHS = "3M"
    YEAR_TO_DATE = "YTD"
    ONE_YEAR = "1Y"
    FIVE_YEARS = "5Y"


class BucketKind(str, Enum):
    """Aggregation granularity applied to a series before rendering."""

    NONE = "none"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class Section(str, Enum):
    """Horizontal chart section."""

    PAST = "past"
    FUTURE = "future"


class PointerKind(str, Enum):
    """Unified mouse/touch pointer event kind."""

    DOWN = "down"
    MOVE = "move"
    UP = "up"
    CANCEL = "cancel"
    LEAVE = "leave"


@dataclass(frozen=True)
class Sample:
    """A single OHLCV sample.

    ``session`` is set by the data layer for intraday samples when known;
    untagged samples are classified by timestamp.
    """

    timestamp_ms: int
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0
    session: Session | None = None

    @classmethod
    def from_value(cls, timestamp_ms: int, value: float, volume: float = 0.0) -> Sample:
        """Build a sample from the simplified ``{timestamp, value}`` point form."""
        return cls(
            timestamp_ms=timestamp_ms,
            open=value,
            high=value,
            low=value,
            close=value,
            volume=volume,
        )

    @property
    def value(self) -> float:
        return self.close


def ensure_ascending(series: list[Sample]) -> list[Sample]:
    """Return ``series`` unchanged if timestamps are strictly ascending.

    Raises:
        SeriesOrderError: If any sample is not later than its predecessor.
    """
    for prev, cur in zip(series, series[1:]):
        if cur.timestamp_ms <= prev.timestamp_ms:
            raise SeriesOrderError(
                f"series not strictly ascending at {cur.timestamp_ms} "
                f"(previous {prev.timestamp_ms})"
            )
    return series


@dataclass(frozen=True)
class MarketHoursBounds:
    """Extended and regular session boundaries for one trading day."""

    extended_open_ms: int
    regular_open_ms: int
    regular_close_ms: int
    extended_close_ms: int

    @property
    def extended_duration_ms(self) -> int:
        return self.extended_close_ms - self.extended_open_ms


@dataclass(frozen=True)
class ScheduledEvent:
    """A future catalyst (earnings, FDA decision, ...) on the upcoming timeline."""

    id: str
    type: str
    timestamp_ms: int
    title: str


@dataclass(frozen=True)
class HistoricalEvent:
    """A catalyst that already occurred, matched against the sample series."""

    id: str
    type: str
    timestamp_ms: int
    title: str
    actual_ms: int


@dataclass(frozen=True)
class ViewportSplit:
    """Percentage of chart width given to the past and future sections."""

    past_percent: float
    future_percent: float

    def __post_init__(self) -> None:
        if self.past_percent < 0 or self.future_percent < 0:
            raise ValueError("viewport percentages must be non-negative")
        if abs(self.past_percent + self.future_percent - 100) > 1e-9:
            raise ValueError(
                f"viewport split must sum to 100, got "
                f"{self.past_percent} + {self.future_percent}"
            )

    @property
    def shows_future(self) -> bool:
        return self.future_percent > 0


@dataclass(frozen=True)
class ChartDimensions:
    """Pixel dimensions of the chart surface supplied by the host.

    ``height`` covers the price plot and the volume strip below it.
    """

    width: float
    height: float
    margin_top: float = 40.0
    margin_bottom: float = 20.0
    volume_height: float = 40.0

    @property
    def price_height(self) -> float:
        return self.height - self.volume_height

    @property
    def plot_height(self) -> float:
        return max(0.0, self.price_height - self.margin_top - self.margin_bottom)


@dataclass(frozen=True)
class PointerEvent:
    """Host-agnostic pointer event; mouse and touch both map onto it."""

    kind: PointerKind
    x: float
    y: float = 0.0


@dataclass(frozen=True)
class SampleSelection:
    """Crosshair on a past sample, optionally snapped to a historical event."""

    sample_index: int
    pixel_x: float
    pixel_y: float
    event: HistoricalEvent | None = None


@dataclass(frozen=True)
class FutureSelection:
    """Continuous crosshair position inside the future section."""

    x_percent_in_future: float
    pixel_x: float
    pixel_y: float


@dataclass(frozen=True)
class EventSelection:
    """Crosshair snapped to a scheduled future event."""

    event: ScheduledEvent
    pixel_x: float
    pixel_y: float


Selection = SampleSelection | FutureSelection | EventSelection


@dataclass(frozen=True)
class TimeLabel:
    """Axis label; ``x_percent`` is a percentage of total chart width."""

    text: str
    x_percent: float
    section: Section
    visible: bool = True


@dataclass(frozen=True)
class EventDot:
    """Pixel position of an event marker."""

    event: ScheduledEvent | HistoricalEvent
    x: float
    y: float
    sample_index: int | None = None


@dataclass(frozen=True)
class CandleGeometry:
    """Pixel geometry of one candlestick."""

    wick_x: float
    wick_top: float
    wick_bottom: float
    body_x: float
    body_y: float
    body_width: float
    body_height: float
    rising: bool


@dataclass(frozen=True)
class VolumeBar:
    """Pixel rectangle of one volume bar, anchored to the chart bottom."""

    x: float
    y: float
    width: float
    height: float
    rising: bool


@dataclass(frozen=True)
class SessionPaths:
    """Line paths split by trading session (intraday only)."""

    pre_market: str = ""
    regular: str = ""
    after_hours: str = ""
    last_point: tuple[float, float] | None = field(default=None)
