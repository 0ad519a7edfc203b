"""Tests for exchange session bounds and session classification."""

from datetime import date, time

from catalyst_chart.config import MarketHoursSettings
from catalyst_chart.models import MS_HOUR, MS_MINUTE, Sample, Session
from catalyst_chart.session.market_hours import (
    local_date,
    market_hours_bounds,
    parse_clock,
    session_for_timestamp,
    session_of,
    trading_day_for,
)

TZ = "America/New_York"


class TestMarketHoursBounds:
    """Tests for per-day session boundaries."""

    def test_default_us_equity_hours(self, et_ms) -> None:
        """Extended 08:00-20:00 and regular 09:30-16:00 Eastern."""
        bounds = market_hours_bounds(date(2024, 3, 15))

        assert bounds.extended_open_ms == et_ms(2024, 3, 15, 8, 0)
        assert bounds.regular_open_ms == et_ms(2024, 3, 15, 9, 30)
        assert bounds.regular_close_ms == et_ms(2024, 3, 15, 16, 0)
        assert bounds.extended_close_ms == et_ms(2024, 3, 15, 20, 0)
        assert bounds.extended_duration_ms == 12 * MS_HOUR

    def test_dst_transition_day_keeps_local_clock(self, et_ms) -> None:
        """Bounds follow the local clock across the March DST switch."""
        bounds = market_hours_bounds(date(2024, 3, 11))
        assert bounds.regular_open_ms == et_ms(2024, 3, 11, 9, 30)

    def test_shortened_close_overrides_regular_close(self, et_ms) -> None:
        """Early-close days end the regular session at the given time."""
        bounds = market_hours_bounds(date(2024, 11, 29), shortened_close="13:00")

        assert bounds.regular_close_ms == et_ms(2024, 11, 29, 13, 0)
        assert bounds.extended_close_ms == et_ms(2024, 11, 29, 20, 0)

    def test_custom_hours(self, et_ms) -> None:
        """Configured clock times replace the defaults."""
        hours = MarketHoursSettings(extended_open="04:00")
        bounds = market_hours_bounds(date(2024, 3, 15), hours)
        assert bounds.extended_open_ms == et_ms(2024, 3, 15, 4, 0)


class TestSessionClassification:
    """Tests for session_for_timestamp and session_of."""

    def test_boundaries(self, et_ms) -> None:
        """Regular open belongs to regular, regular close is still regular."""
        bounds = market_hours_bounds(date(2024, 3, 15))

        assert session_for_timestamp(bounds.regular_open_ms - MS_MINUTE, bounds) == Session.PRE_MARKET
        assert session_for_timestamp(bounds.regular_open_ms, bounds) == Session.REGULAR
        assert session_for_timestamp(bounds.regular_close_ms, bounds) == Session.REGULAR
        assert session_for_timestamp(bounds.regular_close_ms + MS_MINUTE, bounds) == Session.AFTER_HOURS

    def test_sample_tag_wins(self, et_ms) -> None:
        """A data layer tag takes precedence over the timestamp."""
        bounds = market_hours_bounds(date(2024, 3, 15))
        sample = Sample(et_ms(2024, 3, 15, 12, 0), 1, 1, 1, 1, session=Session.AFTER_HOURS)
        assert session_of(sample, bounds) == Session.AFTER_HOURS

    def test_untagged_sample_uses_timestamp(self, et_ms) -> None:
        """Untagged samples are classified by time."""
        bounds = market_hours_bounds(date(2024, 3, 15))
        sample = Sample.from_value(et_ms(2024, 3, 15, 8, 30), 10.0)
        assert session_of(sample, bounds) == Session.PRE_MARKET


class TestTradingDay:
    """Tests for trading day resolution."""

    def test_first_sample_local_date(self, intraday_series, now_ms) -> None:
        """The trading day is the local date of the first sample."""
        assert trading_day_for(intraday_series, TZ, now_ms) == date(2024, 3, 15)

    def test_empty_series_uses_now(self, et_ms) -> None:
        """An empty series falls back to the local date of now."""
        assert trading_day_for([], TZ, et_ms(2024, 3, 18, 7, 0)) == date(2024, 3, 18)

    def test_local_date_is_not_utc_date(self, et_ms) -> None:
        """21:00 Eastern is already the next day in UTC."""
        assert local_date(et_ms(2024, 3, 15, 21, 0), TZ) == date(2024, 3, 15)

    def test_parse_clock(self) -> None:
        """HH:MM strings become time objects."""
        assert parse_clock("09:30") == time(9, 30)
