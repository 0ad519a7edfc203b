"""Sample filtering and OHLC resampling for chart rendering.

Derives the working series for a single render: invalid samples are removed
and long ranges are folded into weekly or monthly buckets. Every function
here is pure; the input list is never modified.

Bucket folding preserves OHLC semantics:
  open   = first constituent's open
  close  = last constituent's close
  high   = max of constituent highs
  low    = min of constituent lows
  volume = sum of constituent volumes
"""

from __future__ import annotations

from datetime import date, time, timedelta

from catalyst_chart.logging import get_logger
from catalyst_chart.models import MS_MINUTE, BucketKind, Sample, TimeRange
from catalyst_chart.session.market_hours import local_date, local_time_ms

logger = get_logger(__name__)

_BUCKET_KINDS: dict[TimeRange, BucketKind] = {
    TimeRange.YEAR_TO_DATE: BucketKind.WEEKLY,
    TimeRange.ONE_YEAR: BucketKind.WEEKLY,
    TimeRange.FIVE_YEARS: BucketKind.MONTHLY,
}


def bucket_kind_for_range(time_range: TimeRange) -> BucketKind:
    """Aggregation applied for a range: weekly for YTD/1Y, monthly for 5Y."""
    return _BUCKET_KINDS.get(time_range, BucketKind.NONE)


def filter_valid(series: list[Sample]) -> list[Sample]:
    """Drop samples with any non-positive open, high, low or close."""
    valid = [s for s in series if s.open > 0 and s.high > 0 and s.low > 0 and s.close > 0]
    if len(valid) != len(series):
        logger.debug("invalid_samples_dropped", dropped=len(series) - len(valid), kept=len(valid))
    return valid


def bucket_start(day: date, bucket_kind: BucketKind) -> date:
    """Local date that keys the bucket containing ``day``."""
    if bucket_kind == BucketKind.WEEKLY:
        return day - timedelta(days=day.weekday())
    if bucket_kind == BucketKind.MONTHLY:
        return day.replace(day=1)
    return day


def aggregate(
    series: list[Sample],
    bucket_kind: BucketKind,
    tz: str = "America/New_York",
) -> list[Sample]:
    """Fold a series into weekly or monthly OHLCV buckets.

    Bucket keys come from each sample's exchange-local date: the Monday of
    its week (weekly) or the first of its month (monthly). Each bucket's
    timestamp is local midnight of that key date.

    Args:
        series: Samples ordered by timestamp ascending.
        bucket_kind: Granularity; ``BucketKind.NONE`` returns the input.
        tz: Exchange time zone used for local dates.

    Returns:
        Buckets sorted by timestamp ascending. Empty input returns empty.
    """
    if bucket_kind == BucketKind.NONE or not series:
        return list(series)

    buckets: dict[date, Sample] = {}
    for sample in series:
        key = bucket_start(local_date(sample.timestamp_ms, tz), bucket_kind)
        existing = buckets.get(key)
        if existing is None:
            buckets[key] = Sample(
                timestamp_ms=local_time_ms(key, time(0, 0), tz),
                open=sample.open,
                high=sample.high,
                low=sample.low,
                close=sample.close,
                volume=sample.volume,
            )
        else:
            buckets[key] = Sample(
                timestamp_ms=existing.timestamp_ms,
                open=existing.open,
                high=max(existing.high, sample.high),
                low=min(existing.low, sample.low),
                close=sample.close,
                volume=existing.volume + sample.volume,
            )

    result = sorted(buckets.values(), key=lambda b: b.timestamp_ms)
    logger.debug(
        "series_aggregated",
        bucket_kind=bucket_kind.value,
        samples=len(series),
        buckets=len(result),
    )
    return result


def normalize_series(
    series: list[Sample],
    time_range: TimeRange,
    tz: str = "America/New_York",
) -> list[Sample]:
    """Filter invalid samples then aggregate for the selected range."""
    return aggregate(filter_valid(series), bucket_kind_for_range(time_range), tz)


def normalize_points(points: list[tuple[int, float]] | list[tuple[int, float, float]]) -> list[Sample]:
    """Convert simplified ``(timestamp_ms, value[, volume])`` points to samples."""
    return [Sample.from_value(*point) for point in points]


def aggregate_intraday(series: list[Sample], interval_minutes: int = 5) -> list[Sample]:
    """Fold raw intraday ticks into fixed-interval candles with no gaps.

    Ticks are grouped by ``floor(ts / interval)``. A candle's high/low also
    cover its open and close. Intervals with no ticks between the first and
    last candle are filled with flat zero-volume candles at the last known
    close so spacing stays even.

    Args:
        series: Raw ticks or finer candles, any order.
        interval_minutes: Candle interval in minutes.

    Returns:
        Continuous candles sorted by timestamp ascending.
    """
    if not series:
        return []

    interval_ms = interval_minutes * MS_MINUTE
    grouped: dict[int, list[Sample]] = {}
    for sample in series:
        grouped.setdefault(sample.timestamp_ms // interval_ms * interval_ms, []).append(sample)

    candles: list[Sample] = []
    for bucket_ms in sorted(grouped):
        points = grouped[bucket_ms]
        if not any(p.close > 0 for p in points):
            continue
        first, last = points[0], points[-1]
        lows = [p.low for p in points if p.low > 0]
        candles.append(
            Sample(
                timestamp_ms=bucket_ms,
                open=first.open,
                high=max(*(p.high for p in points), first.open, last.close),
                low=min(*lows, first.open, last.close) if lows else min(first.open, last.close),
                close=last.close,
                volume=sum(p.volume for p in points),
            )
        )

    if not candles:
        return []

    filled: list[Sample] = []
    by_time = {c.timestamp_ms: c for c in candles}
    last_close = candles[0].close
    for bucket_ms in range(candles[0].timestamp_ms, candles[-1].timestamp_ms + 1, interval_ms):
        candle = by_time.get(bucket_ms)
        if candle is None:
            candle = Sample(
                timestamp_ms=bucket_ms,
                open=last_close,
                high=last_close,
                low=last_close,
                close=last_close,
                volume=0.0,
            )
        filled.append(candle)
        last_close = candle.close

    return filled


def downsample(series: list[Sample], target_points: int) -> list[Sample]:
    """Keep every n-th sample so roughly ``target_points`` remain.

    The last sample is always kept so the path ends at the latest price.
    """
    if target_points <= 0 or len(series) <= target_points:
        return list(series)

    step = len(series) // target_points
    result = series[::step]
    if result[-1] is not series[-1]:
        result.append(series[-1])
    return result
