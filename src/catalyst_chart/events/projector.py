"""Event marker positioning on the catalyst timeline and the price chart.

Scheduled (future) events are placed by time inside the future section,
shifted right by a buffer so near-term dots do not sit on the "now" line.

Historical events are matched to the closest sample and positioned with the
same regime mapping as that sample. The hit test reuses ``locate_historical``
so the snap target is exactly where the dot was drawn.

Events that cannot be placed (no sample within tolerance, outside the plot)
are simply not shown.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TypeVar

from catalyst_chart.coords.mapper import EPSILON, Regime, RegimeParams, sample_x, x_pixel
from catalyst_chart.layout.viewport import ChartLayout
from catalyst_chart.logging import get_logger
from catalyst_chart.models import (
    MS_DAY,
    MS_WEEK,
    EventDot,
    HistoricalEvent,
    Sample,
    ScheduledEvent,
    TimeRange,
)

logger = get_logger(__name__)

#: Default shift applied to future events, in milliseconds (14 days).
FUTURE_BUFFER_MS = 14 * MS_DAY

#: Tolerance beyond the plot edge before a dot is dropped, in pixels.
PLOT_EPSILON_PX = 1.0

#: Fraction of the candle spacing used when interpolating inside a bucket.
_INTERPOLATION_SPREAD = 0.8

_WEEKLY_RANGES = {TimeRange.YEAR_TO_DATE, TimeRange.ONE_YEAR, TimeRange.FIVE_YEARS}

E = TypeVar("E", ScheduledEvent, HistoricalEvent)


def filter_events(events: Iterable[E], selected_types: set[str] | None) -> list[E]:
    """Keep events whose type is selected; ``None`` selects every type."""
    if selected_types is None:
        return list(events)
    return [e for e in events if e.type in selected_types]


def future_x_percent(
    timestamp_ms: int,
    now_ms: int,
    window_ms: int,
    buffer_ms: int = FUTURE_BUFFER_MS,
) -> float:
    """Position of a future event as a clamped fraction of the future section."""
    ratio = (timestamp_ms - now_ms + buffer_ms) / max(window_ms, EPSILON)
    return min(1.0, max(0.0, ratio))


def project_future_events(
    events: list[ScheduledEvent],
    layout: ChartLayout,
    now_ms: int,
    window_ms: int,
    dot_y: float,
    buffer_ms: int = FUTURE_BUFFER_MS,
) -> list[EventDot]:
    """Dots for upcoming events inside the future section.

    Only events strictly after ``now_ms`` and within the future window are
    drawn. A hidden future section produces no dots.
    """
    if not layout.split.shows_future:
        return []

    dots: list[EventDot] = []
    for event in events:
        time_from_now = event.timestamp_ms - now_ms
        if time_from_now <= 0 or time_from_now > window_ms:
            continue
        pct = future_x_percent(event.timestamp_ms, now_ms, window_ms, buffer_ms)
        dots.append(EventDot(event=event, x=layout.split_x + pct * layout.future_width, y=dot_y))
    return dots


def tolerance_for_range(time_range: TimeRange) -> int:
    """Maximum event-to-sample time gap: a week for bucketed ranges, else a day."""
    return MS_WEEK if time_range in _WEEKLY_RANGES else MS_DAY


def bucket_span_ms(time_range: TimeRange) -> int:
    """Time span of one sample in the index regime (daily or weekly bars)."""
    if time_range in (TimeRange.YEAR_TO_DATE, TimeRange.ONE_YEAR):
        return MS_WEEK
    return MS_DAY


def match_historical_event(event: HistoricalEvent, series: list[Sample], tolerance_ms: int) -> int | None:
    """Index of the sample closest in time to when the event occurred.

    Linear scan; on ties the first sample wins. Returns None for an empty
    series or when the closest sample is further than ``tolerance_ms``.
    """
    best_index: int | None = None
    best_diff = float("inf")
    for i, sample in enumerate(series):
        diff = abs(sample.timestamp_ms - event.actual_ms)
        if diff < best_diff:
            best_diff = diff
            best_index = i

    if best_index is None or best_diff > tolerance_ms:
        return None
    return best_index


def historical_event_x(
    event: HistoricalEvent,
    index: int,
    series: list[Sample],
    params: RegimeParams,
    time_range: TimeRange,
    section_width: float,
) -> float:
    """Pixel x of a matched historical event.

    Time-proportional regimes place the event at its own timestamp. The
    index regime anchors on the matched sample and offsets the dot by how
    far into the sample's span the event occurred, centred on the sample.
    """
    if params.regime != Regime.INDEX:
        return x_pixel(event.actual_ms, index, params, section_width)

    base = sample_x(series, index, params, section_width)
    if index < len(series) - 1:
        spacing = sample_x(series, index + 1, params, section_width) - base
    elif index > 0:
        spacing = base - sample_x(series, index - 1, params, section_width)
    else:
        spacing = section_width / max(1, len(series))

    into = event.actual_ms - series[index].timestamp_ms
    progress = min(1.0, max(0.0, into / bucket_span_ms(time_range)))
    return base + (progress - 0.5) * spacing * _INTERPOLATION_SPREAD


def visible_historical_events(
    events: list[HistoricalEvent],
    series: list[Sample],
    now_ms: int,
) -> list[HistoricalEvent]:
    """Events that already happened and fall inside the series' time span.

    The span is extended by one day past the last sample so an event on the
    latest trading day still matches.
    """
    if not series:
        return []
    first_ms = series[0].timestamp_ms
    last_ms = series[-1].timestamp_ms + MS_DAY
    return [e for e in events if e.actual_ms <= now_ms and first_ms <= e.actual_ms <= last_ms]


def locate_historical(
    event: HistoricalEvent,
    series: list[Sample],
    params: RegimeParams,
    time_range: TimeRange,
    section_width: float,
) -> tuple[int, float] | None:
    """Matched sample index and pixel x for a historical event, or None."""
    index = match_historical_event(event, series, tolerance_for_range(time_range))
    if index is None:
        logger.debug("historical_event_unmatched", event_id=event.id, actual_ms=event.actual_ms)
        return None

    x = historical_event_x(event, index, series, params, time_range, section_width)
    if x < -PLOT_EPSILON_PX or x > section_width + PLOT_EPSILON_PX:
        logger.debug("historical_event_off_plot", event_id=event.id, x=x)
        return None
    return index, x


def project_historical_events(
    events: list[HistoricalEvent],
    series: list[Sample],
    params: RegimeParams,
    time_range: TimeRange,
    section_width: float,
    now_ms: int,
    dot_y: float,
) -> list[EventDot]:
    """Dots for historical events on the past section."""
    dots: list[EventDot] = []
    for event in visible_historical_events(events, series, now_ms):
        located = locate_historical(event, series, params, time_range, section_width)
        if located is None:
            continue
        index, x = located
        dots.append(EventDot(event=event, x=x, y=dot_y, sample_index=index))
    return dots
