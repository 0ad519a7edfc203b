"""Axis label generation and greedy overlap removal.

Label positions are percentages of the total chart width. Past-side labels
are placed with the same regime mapping as the data, so a label names the
samples drawn above it. Future-side labels use the same window and buffer as
the event projector, so a label names the time a dot at that x represents.

Overlap removal is one left-to-right sweep per section: a label is kept when
it is at least ``min_spacing`` from the last kept label of its section.
Labels hugging the inner edge of a compressed section are dropped first.
"""

from __future__ import annotations

import math
from dataclasses import replace
from datetime import date, datetime, time
from zoneinfo import ZoneInfo

from catalyst_chart.coords.mapper import EPSILON, RegimeParams, x_percent
from catalyst_chart.events.projector import FUTURE_BUFFER_MS
from catalyst_chart.models import (
    MS_MONTH,
    MS_YEAR,
    MarketHoursBounds,
    Sample,
    Section,
    TimeLabel,
    TimeRange,
    ViewportSplit,
)
from catalyst_chart.session.market_hours import local_date, local_time_ms

MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_DAILY_LABEL_TARGET = {TimeRange.ONE_WEEK: 5, TimeRange.ONE_MONTH: 6}


def clock_text(timestamp_ms: int, tz: str) -> str:
    """'9:30 AM' / '4 PM' style clock label."""
    local = datetime.fromtimestamp(timestamp_ms / 1000, tz=ZoneInfo(tz))
    hour = local.hour % 12 or 12
    suffix = "AM" if local.hour < 12 else "PM"
    if local.minute:
        return f"{hour}:{local.minute:02d} {suffix}"
    return f"{hour} {suffix}"


def intraday_labels(bounds: MarketHoursBounds, past_percent: float, tz: str) -> list[TimeLabel]:
    """Regular open, regular close and extended close on the session axis."""
    duration = max(bounds.extended_duration_ms, EPSILON)
    labels = []
    for ts in (bounds.regular_open_ms, bounds.regular_close_ms, bounds.extended_close_ms):
        pct = (ts - bounds.extended_open_ms) / duration
        labels.append(TimeLabel(clock_text(ts, tz), pct * past_percent, Section.PAST))
    return labels


def daily_labels(
    series: list[Sample],
    time_range: TimeRange,
    past_percent: float,
    now_ms: int,
    tz: str,
) -> list[TimeLabel]:
    """One 'M/D' label per calendar day, evenly subsampled (1W/1M views).

    Each label sits on the middle sample of its day in index positioning.
    """
    past = [s for s in series if s.timestamp_ms <= now_ms]
    days: dict[str, list[int]] = {}
    for i, sample in enumerate(past):
        day = local_date(sample.timestamp_ms, tz)
        days.setdefault(f"{day.month}/{day.day}", []).append(i)

    unique = list(days.items())
    count = min(_DAILY_LABEL_TARGET.get(time_range, 6), len(unique))
    labels: list[TimeLabel] = []
    for i in range(count):
        text, indices = unique[(len(unique) - 1) * i // max(1, count - 1)]
        middle = indices[len(indices) // 2]
        labels.append(TimeLabel(text, middle / max(1, len(past) - 1) * past_percent, Section.PAST))
    return labels


def month_labels(
    series: list[Sample],
    params: RegimeParams,
    time_range: TimeRange,
    past_percent: float,
    tz: str,
) -> list[TimeLabel]:
    """Month labels on the middle sample of each month (3M/YTD/1Y views).

    Year-scale views label every other month to reduce density.
    """
    months: dict[tuple[int, int], list[int]] = {}
    for i, sample in enumerate(series):
        day = local_date(sample.timestamp_ms, tz)
        months.setdefault((day.year, day.month), []).append(i)

    every = 1 if time_range == TimeRange.THREE_MONTHS else 2
    labels: list[TimeLabel] = []
    for counter, ((_, month), indices) in enumerate(months.items()):
        if counter % every:
            continue
        middle = indices[len(indices) // 2]
        pct = x_percent(series[middle].timestamp_ms, middle, params)
        labels.append(TimeLabel(MONTH_ABBR[month - 1], pct * past_percent, Section.PAST))
    return labels


def year_labels(params: RegimeParams, past_percent: float, now_ms: int, tz: str) -> list[TimeLabel]:
    """Year labels at mid-year across the fixed lookback window (5Y view)."""
    first_year = local_date(params.window_start_ms, tz).year
    last_year = local_date(now_ms, tz).year
    labels: list[TimeLabel] = []
    for year in range(first_year, last_year + 1):
        start = local_time_ms(date(year, 1, 1), time(0, 0), tz)
        end = local_time_ms(date(year + 1, 1, 1), time(0, 0), tz)
        pct = x_percent((start + end) // 2, 0, params)
        if 0.0 <= pct <= 1.0:
            labels.append(TimeLabel(str(year), pct * past_percent, Section.PAST))
    return labels


def future_labels(
    time_range: TimeRange,
    split: ViewportSplit,
    window_ms: int,
    now_ms: int,
    tz: str,
    buffer_ms: int = FUTURE_BUFFER_MS,
) -> list[TimeLabel]:
    """Evenly spaced labels across the future section.

    The label count derives from the window (one per 30-day month, one per
    year on the 5Y view). Each label names the time an event dot at the same
    x represents, which accounts for the projector's buffer.
    """
    if not split.shows_future:
        return []

    unit = MS_YEAR if time_range == TimeRange.FIVE_YEARS else MS_MONTH
    count = max(1, math.floor(window_ms / unit + 0.5))
    labels: list[TimeLabel] = []
    for i in range(1, count + 1):
        frac = i / (count + 1)
        day = local_date(round(now_ms - buffer_ms + frac * window_ms), tz)
        text = str(day.year) if unit == MS_YEAR else MONTH_ABBR[day.month - 1]
        labels.append(
            TimeLabel(text, split.past_percent + frac * split.future_percent, Section.FUTURE)
        )
    return labels


def generate_labels(
    time_range: TimeRange,
    series: list[Sample],
    params: RegimeParams,
    split: ViewportSplit,
    window_ms: int,
    now_ms: int,
    tz: str = "America/New_York",
    buffer_ms: int = FUTURE_BUFFER_MS,
) -> list[TimeLabel]:
    """Candidate labels for the active range, before overlap removal."""
    past_percent = split.past_percent
    if time_range == TimeRange.ONE_DAY:
        past = intraday_labels(params.bounds, past_percent, tz) if params.bounds else []
    elif time_range in _DAILY_LABEL_TARGET:
        past = daily_labels(series, time_range, past_percent, now_ms, tz)
    elif time_range == TimeRange.FIVE_YEARS:
        past = year_labels(params, past_percent, now_ms, tz)
    else:
        past = month_labels(series, params, time_range, past_percent, tz)

    return past + future_labels(time_range, split, window_ms, now_ms, tz, buffer_ms)


def _sweep(
    indexed: list[tuple[int, TimeLabel]],
    inner_edge: float,
    compressed: bool,
    min_spacing: float,
    edge_threshold: float,
) -> set[int]:
    kept: set[int] = set()
    last = -math.inf
    for idx, label in sorted(indexed, key=lambda pair: pair[1].x_percent):
        if compressed and label.x_percent - inner_edge < edge_threshold:
            continue
        if label.x_percent - last >= min_spacing:
            kept.add(idx)
            last = label.x_percent
    return kept


def filter_overlapping(
    labels: list[TimeLabel],
    past_percent: float,
    min_spacing: float = 12.0,
    edge_threshold: float = 8.0,
    compressed_below: float = 25.0,
) -> list[TimeLabel]:
    """Set ``visible`` on each label so kept labels never overlap.

    Args:
        labels: Candidates in any order.
        past_percent: Width of the past section in percent.
        min_spacing: Minimum distance between kept labels of one section.
        edge_threshold: Distance from a section's inner edge under which
            labels are dropped when that section is compressed.
        compressed_below: Section width (percent) under which it counts as
            compressed.

    Returns:
        The labels in their original order with visibility flags set.
    """
    past = [(i, lab) for i, lab in enumerate(labels) if lab.section == Section.PAST]
    future = [(i, lab) for i, lab in enumerate(labels) if lab.section == Section.FUTURE]

    visible = _sweep(past, 0.0, past_percent < compressed_below, min_spacing, edge_threshold)
    visible |= _sweep(
        future,
        past_percent,
        100 - past_percent < compressed_below,
        min_spacing,
        edge_threshold,
    )
    return [replace(lab, visible=i in visible) for i, lab in enumerate(labels)]
