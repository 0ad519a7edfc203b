"""Render pipeline composing the chart modules into one frame per input.

The ChartEngine is the top-level coordinator that:
1. Validates and normalizes the series for the selected range
2. Resolves session bounds (1D) and the positioning regime
3. Splits the width into past and future sections
4. Maps prices, candles and volume bars to pixels
5. Projects scheduled and historical events to dots
6. Generates and thins the time axis labels
7. Returns an immutable RenderFrame, memoized in a small LRU cache

Every value in a frame derives from the ChartInput and settings alone, so
the crosshair hit test run against a frame positions samples and events
exactly as they were drawn.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field

from catalyst_chart.config import AppSettings
from catalyst_chart.coords.mapper import (
    PriceScale,
    Regime,
    RegimeParams,
    VolumeScale,
    candle_geometry,
    candle_width,
    line_path,
    price_points,
    sample_x,
    session_paths,
    volume_bars,
    wick_width,
)
from catalyst_chart.data.normalizer import normalize_series
from catalyst_chart.events.projector import (
    filter_events,
    project_future_events,
    project_historical_events,
)
from catalyst_chart.interaction.hit_test import GestureTracker, HitTestContext
from catalyst_chart.labels.placer import filter_overlapping, generate_labels
from catalyst_chart.layout.viewport import ChartLayout, future_window_ms, split
from catalyst_chart.logging import get_logger
from catalyst_chart.models import (
    MS_DAY,
    MS_YEAR,
    CandleGeometry,
    ChartDimensions,
    EventDot,
    HistoricalEvent,
    MarketHoursBounds,
    PointerEvent,
    Sample,
    ScheduledEvent,
    Selection,
    SessionPaths,
    TimeLabel,
    TimeRange,
    VolumeBar,
    ensure_ascending,
)
from catalyst_chart.session.market_hours import market_hours_bounds, trading_day_for

logger = get_logger(__name__)


@dataclass(frozen=True)
class ChartInput:
    """Everything the host supplies for one render.

    Args:
        series: Samples for the selected range, ascending by timestamp.
        dims: Pixel dimensions measured by the host.
        time_range: Selected range.
        now_ms: Current time; the engine never reads a clock.
        scheduled_events: Upcoming catalysts.
        historical_events: Catalysts that already occurred.
        previous_close: Prior session close, included in the price scale.
        shortened_close: "HH:MM" regular close on early-close days (1D only).
    """

    series: list[Sample]
    dims: ChartDimensions
    time_range: TimeRange
    now_ms: int
    scheduled_events: list[ScheduledEvent] = field(default_factory=list)
    historical_events: list[HistoricalEvent] = field(default_factory=list)
    previous_close: float | None = None
    shortened_close: str | None = None


@dataclass(frozen=True)
class RenderFrame:
    """Immutable pixel snapshot of one render cycle."""

    series: list[Sample]
    params: RegimeParams
    layout: ChartLayout
    price_scale: PriceScale
    volume_scale: VolumeScale
    window_ms: int
    points: list[tuple[float, float]]
    price_path: str
    session_paths: SessionPaths | None
    candles: list[CandleGeometry]
    wick_width: float
    volume_bars: list[VolumeBar]
    future_dots: list[EventDot]
    historical_dots: list[EventDot]
    labels: list[TimeLabel]
    hit_context: HitTestContext
    bounds: MarketHoursBounds | None = None


def event_dot_y(dims: ChartDimensions) -> float:
    """Vertical position of event dots: centred in the margin under the plot."""
    return dims.margin_top + dims.plot_height + dims.margin_bottom / 2


class ChartEngine:
    """Turns ChartInput into RenderFrames and owns the crosshair gesture.

    Args:
        settings: Chart configuration. None = defaults plus environment.
    """

    def __init__(self, settings: AppSettings | None = None) -> None:
        self._settings = settings or AppSettings()
        self._cache: OrderedDict[tuple, RenderFrame] = OrderedDict()
        self._last_frame: RenderFrame | None = None
        self._gesture = GestureTracker()

    @property
    def settings(self) -> AppSettings:
        return self._settings

    @property
    def gesture(self) -> GestureTracker:
        return self._gesture

    @property
    def last_frame(self) -> RenderFrame | None:
        return self._last_frame

    def _cache_key(self, chart_input: ChartInput) -> tuple:
        # samples and events are frozen, so the key covers their content
        return (
            tuple(chart_input.series),
            tuple(chart_input.scheduled_events),
            tuple(chart_input.historical_events),
            chart_input.dims,
            chart_input.time_range,
            chart_input.now_ms,
            chart_input.previous_close,
            chart_input.shortened_close,
        )

    def render(self, chart_input: ChartInput) -> RenderFrame:
        """Compute (or reuse) the frame for ``chart_input``.

        Raises:
            SeriesOrderError: If the series is not strictly ascending.
            ConfigurationError: If the configured split ratio is invalid.
        """
        key = self._cache_key(chart_input)
        cached = self._cache.get(key)
        if cached is not None:
            self._cache.move_to_end(key)
            self._last_frame = cached
            logger.debug("render_cache_hit", time_range=chart_input.time_range.value)
            return cached

        frame = self._compute(chart_input)
        capacity = self._settings.scale.render_cache_size
        if capacity > 0:
            self._cache[key] = frame
            while len(self._cache) > capacity:
                self._cache.popitem(last=False)
        self._last_frame = frame
        return frame

    def _compute(self, chart_input: ChartInput) -> RenderFrame:
        settings = self._settings
        tz = settings.market.timezone
        time_range = chart_input.time_range
        now_ms = chart_input.now_ms
        dims = chart_input.dims

        series = normalize_series(ensure_ascending(chart_input.series), time_range, tz)

        bounds: MarketHoursBounds | None = None
        if time_range == TimeRange.ONE_DAY:
            trading_day = trading_day_for(series, tz, now_ms)
            bounds = market_hours_bounds(trading_day, settings.market, chart_input.shortened_close)

        params = RegimeParams.build(
            time_range,
            series,
            now_ms,
            bounds=bounds,
            lookback_ms=settings.scale.lookback_years * MS_YEAR,
        )
        viewport = split(settings.viewport.show_future_section, settings.viewport.split_ratio)
        layout = ChartLayout(dims=dims, split=viewport)
        past_width = layout.past_width
        window_ms = future_window_ms(time_range, viewport.future_percent, now_ms, tz)
        buffer_ms = settings.viewport.future_buffer_days * MS_DAY

        price_scale = PriceScale.from_series(
            series, chart_input.previous_close, dims, settings.scale.price_padding
        )
        volume_scale = VolumeScale.from_series(series, dims.volume_height)

        points = price_points(series, params, price_scale, past_width)
        paths = None
        if params.regime == Regime.INTRADAY and bounds is not None:
            paths = session_paths(series, params, price_scale, past_width, bounds)

        body_width = candle_width(params.regime, len(series), past_width, bounds)
        candles = [
            candle_geometry(sample, x, price_scale, body_width)
            for i, sample in enumerate(series)
            if 0.0 <= (x := sample_x(series, i, params, past_width)) <= past_width
        ]
        bars = [
            bar
            for bar in volume_bars(series, params, past_width, volume_scale, body_width, dims.height)
            if 0.0 <= bar.x + bar.width / 2 <= past_width
        ]

        dot_y = event_dot_y(dims)
        selected = settings.events.selected_event_types
        future_dots = project_future_events(
            filter_events(chart_input.scheduled_events, selected),
            layout,
            now_ms,
            window_ms,
            dot_y,
            buffer_ms,
        )
        historical_dots: list[EventDot] = []
        if settings.events.show_historical_events:
            historical_dots = project_historical_events(
                filter_events(chart_input.historical_events, selected),
                series,
                params,
                time_range,
                past_width,
                now_ms,
                dot_y,
            )

        label_settings = settings.labels
        labels = filter_overlapping(
            generate_labels(time_range, series, params, viewport, window_ms, now_ms, tz, buffer_ms),
            viewport.past_percent,
            label_settings.min_spacing_percent,
            label_settings.edge_threshold_percent,
            label_settings.compressed_section_percent,
        )

        hit_context = HitTestContext(
            series=series,
            params=params,
            layout=layout,
            price_scale=price_scale,
            historical_dots=historical_dots,
            future_dots=future_dots,
            thresholds=settings.interaction,
        )

        logger.debug(
            "chart_rendered",
            time_range=time_range.value,
            regime=params.regime.value,
            samples=len(series),
            future_dots=len(future_dots),
            historical_dots=len(historical_dots),
            labels=sum(1 for label in labels if label.visible),
        )

        return RenderFrame(
            series=series,
            params=params,
            layout=layout,
            price_scale=price_scale,
            volume_scale=volume_scale,
            window_ms=window_ms,
            points=points,
            price_path=line_path(points),
            session_paths=paths,
            candles=candles,
            wick_width=wick_width(params.regime, viewport.past_percent),
            volume_bars=bars,
            future_dots=future_dots,
            historical_dots=historical_dots,
            labels=labels,
            hit_context=hit_context,
            bounds=bounds,
        )

    def handle_pointer(self, event: PointerEvent) -> Selection | None:
        """Feed a pointer event to the gesture tracker against the last frame."""
        ctx = self._last_frame.hit_context if self._last_frame is not None else None
        return self._gesture.handle(event, ctx)

    def invalidate(self) -> None:
        """Drop every cached frame and end any gesture in progress."""
        self._cache.clear()
        self._last_frame = None
        self._gesture.reset()
        logger.debug("render_cache_invalidated")
