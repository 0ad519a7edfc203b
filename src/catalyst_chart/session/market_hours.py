"""Market hours resolution for the intraday positioning regime.

Turns a trading day plus the configured exchange clock into the four session
boundaries the intraday x-mapping needs. Holiday and early-close lookup
belongs to the host; it passes the shortened close time (e.g. "13:00" on the
day after Thanksgiving) when one applies.
"""

from datetime import date, datetime, time
from zoneinfo import ZoneInfo

from catalyst_chart.config import MarketHoursSettings
from catalyst_chart.models import MarketHoursBounds, Sample, Session


def parse_clock(value: str) -> time:
    """Parse an "HH:MM" clock string."""
    hour, _, minute = value.partition(":")
    return time(int(hour), int(minute))


def local_date(timestamp_ms: int, tz: str) -> date:
    """Calendar date of ``timestamp_ms`` in the exchange time zone."""
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=ZoneInfo(tz)).date()


def local_time_ms(day: date, clock: time, tz: str) -> int:
    """Unix milliseconds of ``clock`` on ``day`` in the exchange time zone."""
    return round(datetime.combine(day, clock, tzinfo=ZoneInfo(tz)).timestamp() * 1000)


def market_hours_bounds(
    trading_day: date,
    hours: MarketHoursSettings | None = None,
    shortened_close: str | None = None,
) -> MarketHoursBounds:
    """Compute session boundaries for one trading day.

    Args:
        trading_day: Exchange-local calendar date.
        hours: Exchange clock; defaults to US equities (08:00-20:00 ET
            extended, 09:30-16:00 regular).
        shortened_close: Optional "HH:MM" regular close overriding the
            configured one on early-close days.

    Returns:
        MarketHoursBounds for the day.
    """
    hours = hours or MarketHoursSettings()
    regular_close = shortened_close or hours.regular_close

    return MarketHoursBounds(
        extended_open_ms=local_time_ms(trading_day, parse_clock(hours.extended_open), hours.timezone),
        regular_open_ms=local_time_ms(trading_day, parse_clock(hours.regular_open), hours.timezone),
        regular_close_ms=local_time_ms(trading_day, parse_clock(regular_close), hours.timezone),
        extended_close_ms=local_time_ms(trading_day, parse_clock(hours.extended_close), hours.timezone),
    )


def trading_day_for(series: list[Sample], tz: str, now_ms: int) -> date:
    """Trading day a series represents: the local date of its first sample.

    An empty series falls back to the local date of ``now_ms``.
    """
    if not series:
        return local_date(now_ms, tz)
    return local_date(series[0].timestamp_ms, tz)


def session_for_timestamp(timestamp_ms: int, bounds: MarketHoursBounds) -> Session:
    """Classify a timestamp into pre-market, regular or after-hours."""
    if timestamp_ms < bounds.regular_open_ms:
        return Session.PRE_MARKET
    if timestamp_ms <= bounds.regular_close_ms:
        return Session.REGULAR
    return Session.AFTER_HOURS


def session_of(sample: Sample, bounds: MarketHoursBounds) -> Session:
    """Session of a sample, preferring the data layer's own tag."""
    if sample.session is not None:
        return sample.session
    return session_for_timestamp(sample.timestamp_ms, bounds)
