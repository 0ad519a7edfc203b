"""Tests for future and historical catalyst event projection."""

from datetime import date

import pytest

from catalyst_chart.coords.mapper import Regime, RegimeParams, sample_x
from catalyst_chart.events.projector import (
    FUTURE_BUFFER_MS,
    filter_events,
    future_x_percent,
    match_historical_event,
    project_future_events,
    project_historical_events,
    tolerance_for_range,
    visible_historical_events,
)
from catalyst_chart.layout.viewport import ChartLayout, split
from catalyst_chart.models import (
    MS_DAY,
    MS_HOUR,
    MS_MONTH,
    MS_WEEK,
    MS_YEAR,
    ChartDimensions,
    HistoricalEvent,
    ScheduledEvent,
    TimeRange,
)
from catalyst_chart.session.market_hours import market_hours_bounds

WINDOW = 2 * MS_MONTH


def _scheduled(event_id: str, ts: int, event_type: str = "earnings") -> ScheduledEvent:
    return ScheduledEvent(id=event_id, type=event_type, timestamp_ms=ts, title=event_id)


def _historical(event_id: str, ts: int, event_type: str = "earnings") -> HistoricalEvent:
    return HistoricalEvent(id=event_id, type=event_type, timestamp_ms=ts, title=event_id, actual_ms=ts)


@pytest.fixture
def layout() -> ChartLayout:
    """1000px chart with the default 60/40 split."""
    return ChartLayout(dims=ChartDimensions(1000, 400), split=split(True, 60))


class TestFilterEvents:
    """Tests for selected type filtering."""

    def test_none_selects_all(self) -> None:
        """No selection means every event type is shown."""
        events = [_scheduled("a", 1), _scheduled("b", 2, "fda")]
        assert filter_events(events, None) == events

    def test_selected_types(self) -> None:
        """Only selected types remain."""
        events = [_scheduled("a", 1), _scheduled("b", 2, "fda")]
        assert [e.id for e in filter_events(events, {"fda"})] == ["b"]


class TestFutureProjection:
    """Tests for scheduled event dots in the future section."""

    def test_buffer_offsets_position(self, now_ms) -> None:
        """An event 16 days out sits halfway across a 60-day window."""
        assert future_x_percent(now_ms + 16 * MS_DAY, now_ms, WINDOW) == pytest.approx(0.5)

    def test_position_is_clamped(self, now_ms) -> None:
        """The buffer never pushes a dot past the right edge."""
        assert future_x_percent(now_ms + WINDOW, now_ms, WINDOW) == 1.0
        assert future_x_percent(now_ms - 30 * MS_DAY, now_ms, WINDOW) == 0.0

    def test_dot_pixels(self, layout, now_ms) -> None:
        """Dot x is split_x plus the fraction of the future width."""
        dots = project_future_events([_scheduled("a", now_ms + 16 * MS_DAY)], layout, now_ms, WINDOW, 350.0)

        assert len(dots) == 1
        assert dots[0].x == pytest.approx(800.0)
        assert dots[0].y == 350.0
        assert dots[0].sample_index is None

    def test_past_and_out_of_window_events_hidden(self, layout, now_ms) -> None:
        """Only events strictly after now and within the window are drawn."""
        events = [
            _scheduled("now", now_ms),
            _scheduled("past", now_ms - MS_DAY),
            _scheduled("edge", now_ms + WINDOW),
            _scheduled("beyond", now_ms + WINDOW + 1),
        ]
        dots = project_future_events(events, layout, now_ms, WINDOW, 350.0)
        assert [d.event.id for d in dots] == ["edge"]

    def test_hidden_future_section_has_no_dots(self, now_ms) -> None:
        """With the timeline hidden nothing is projected."""
        hidden = ChartLayout(dims=ChartDimensions(1000, 400), split=split(False))
        events = [_scheduled("a", now_ms + 16 * MS_DAY)]
        assert project_future_events(events, hidden, now_ms, WINDOW, 350.0) == []

    def test_default_buffer_is_two_weeks(self) -> None:
        """The buffer constant is 14 days."""
        assert FUTURE_BUFFER_MS == 2 * MS_WEEK


class TestHistoricalMatching:
    """Tests for matching past events to samples."""

    def test_tolerance_per_range(self) -> None:
        """Bucketed ranges tolerate a week, the rest a day."""
        assert tolerance_for_range(TimeRange.ONE_YEAR) == MS_WEEK
        assert tolerance_for_range(TimeRange.FIVE_YEARS) == MS_WEEK
        assert tolerance_for_range(TimeRange.ONE_MONTH) == MS_DAY
        assert tolerance_for_range(TimeRange.ONE_DAY) == MS_DAY

    def test_closest_sample_wins(self, intraday_series) -> None:
        """The sample nearest in time is matched."""
        event = _historical("a", intraday_series[10].timestamp_ms + 60_000)
        assert match_historical_event(event, intraday_series, MS_DAY) == 10

    def test_outside_tolerance_is_unmatched(self, intraday_series) -> None:
        """Events too far from any sample are dropped."""
        event = _historical("a", intraday_series[-1].timestamp_ms + 2 * MS_DAY)
        assert match_historical_event(event, intraday_series, MS_DAY) is None
        assert match_historical_event(event, [], MS_DAY) is None

    def test_visible_window(self, intraday_series, now_ms) -> None:
        """Future events and events outside the data span are not shown."""
        first = intraday_series[0].timestamp_ms
        last = intraday_series[-1].timestamp_ms
        events = [
            _historical("before", first - 1),
            _historical("inside", first + MS_HOUR),
            _historical("after_last", last + 12 * MS_HOUR),
            _historical("future", now_ms + 2 * MS_DAY),
        ]
        visible = visible_historical_events(events, intraday_series, now_ms + MS_DAY)
        assert [e.id for e in visible] == ["inside", "after_last"]
        assert visible_historical_events(events, [], now_ms) == []


class TestHistoricalProjection:
    """Tests for historical event dot positions."""

    def test_intraday_event_dot_matches_sample_x(self, intraday_series, now_ms) -> None:
        """An event at a sample's time is drawn exactly on that sample."""
        bounds = market_hours_bounds(date(2024, 3, 15))
        params = RegimeParams.build(TimeRange.ONE_DAY, intraday_series, now_ms, bounds=bounds)
        event = _historical("noon", intraday_series[30].timestamp_ms)

        dots = project_historical_events(
            [event], intraday_series, params, TimeRange.ONE_DAY, 600, now_ms, 350.0
        )

        assert len(dots) == 1
        assert dots[0].sample_index == 30
        assert dots[0].x == pytest.approx(sample_x(intraday_series, 30, params, 600))

    def test_index_regime_interpolates_within_day(self, et_ms, daily_factory) -> None:
        """Midway through a daily bar the dot sits on the sample; at its start it leads."""
        series = daily_factory(et_ms(2024, 2, 1, 0, 0), 20)
        params = RegimeParams(regime=Regime.INDEX, count=len(series))
        now = series[-1].timestamp_ms + MS_DAY
        spacing = 600 / 19

        midway = _historical("mid", series[5].timestamp_ms + 12 * MS_HOUR)
        start = _historical("start", series[8].timestamp_ms)
        dots = project_historical_events(
            [midway, start], series, params, TimeRange.ONE_MONTH, 600, now, 350.0
        )

        assert dots[0].x == pytest.approx(5 * spacing)
        assert dots[1].x == pytest.approx(8 * spacing - 0.5 * spacing * 0.8)

    def test_off_plot_events_dropped(self, now_ms, daily_factory) -> None:
        """Events left of the 5Y window are culled."""
        series = daily_factory(now_ms - 6 * MS_YEAR, 3)
        params = RegimeParams.build(TimeRange.FIVE_YEARS, series, now_ms)
        event = _historical("old", series[1].timestamp_ms)
        assert project_historical_events(
            [event], series, params, TimeRange.FIVE_YEARS, 600, now_ms, 350.0
        ) == []
