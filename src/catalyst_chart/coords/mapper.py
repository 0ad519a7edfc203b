"""Sample-to-pixel coordinate mapping under the three positioning regimes.

Horizontal position depends on the regime chosen for the selected range:

  INTRADAY  x = (ts - extended_open) / (extended_close - extended_open)
            Time-proportional across the extended session, so pre-market
            and after-hours gaps render at their true width.
  INDEX     x = index / max(1, count - 1)
            Non-trading gaps collapse: Friday's last sample sits next to
            Monday's first.
  ABSOLUTE  x = (ts - (now - lookback)) / lookback
            Fixed lookback regardless of available history; a short history
            leaves blank space on the left.

Vertical position is regime independent (see PriceScale).

Every rendering surface (price path, candles, volume bars, event dots) and
the hit test must share one RegimeParams per render cycle; all of them go
through ``x_percent`` so they cannot drift apart.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from catalyst_chart.models import (
    MS_MINUTE,
    MS_YEAR,
    CandleGeometry,
    ChartDimensions,
    MarketHoursBounds,
    Sample,
    SessionPaths,
    Session,
    TimeRange,
    VolumeBar,
)
from catalyst_chart.session.market_hours import session_of

#: Minimum denominator for any ratio; keeps degenerate input from producing NaN.
EPSILON = 1e-9

_INTRADAY_CANDLE_WIDTH = (2.0, 12.0)
_MULTI_DAY_CANDLE_WIDTH = (2.0, 10.0)


class Regime(str, Enum):
    """Horizontal positioning strategy."""

    INTRADAY = "intraday"
    INDEX = "index"
    ABSOLUTE = "absolute"


def regime_for_range(time_range: TimeRange) -> Regime:
    """1D is time-proportional, 5Y absolute, every other range index-based."""
    if time_range == TimeRange.ONE_DAY:
        return Regime.INTRADAY
    if time_range == TimeRange.FIVE_YEARS:
        return Regime.ABSOLUTE
    return Regime.INDEX


@dataclass(frozen=True)
class RegimeParams:
    """Everything the x-mapping needs for one render cycle.

    Args:
        regime: Active positioning regime.
        count: Number of samples in the working series.
        bounds: Session boundaries (INTRADAY only).
        window_start_ms: Left edge timestamp (ABSOLUTE only).
        window_ms: Lookback duration (ABSOLUTE only).
    """

    regime: Regime
    count: int
    bounds: MarketHoursBounds | None = None
    window_start_ms: int = 0
    window_ms: int = 0

    @classmethod
    def build(
        cls,
        time_range: TimeRange,
        series: list[Sample],
        now_ms: int,
        bounds: MarketHoursBounds | None = None,
        lookback_ms: int = 5 * MS_YEAR,
    ) -> RegimeParams:
        regime = regime_for_range(time_range)
        if regime == Regime.INTRADAY:
            return cls(regime=regime, count=len(series), bounds=bounds)
        if regime == Regime.ABSOLUTE:
            return cls(
                regime=regime,
                count=len(series),
                window_start_ms=now_ms - lookback_ms,
                window_ms=lookback_ms,
            )
        return cls(regime=regime, count=len(series))


def x_percent(timestamp_ms: int, index: int, params: RegimeParams) -> float:
    """Horizontal position as a fraction of the past section width.

    Not clamped: samples outside the session or lookback window map outside
    ``[0, 1]`` and are culled by the caller. Degenerate parameters (no
    samples, a single sample, missing bounds) fall back to the centre.
    """
    if params.regime == Regime.INTRADAY:
        if params.bounds is None:
            return 0.5
        duration = max(params.bounds.extended_duration_ms, EPSILON)
        return (timestamp_ms - params.bounds.extended_open_ms) / duration

    if params.regime == Regime.ABSOLUTE:
        return (timestamp_ms - params.window_start_ms) / max(params.window_ms, EPSILON)

    if params.count <= 1:
        return 0.5
    return index / (params.count - 1)


def x_pixel(timestamp_ms: int, index: int, params: RegimeParams, section_width: float) -> float:
    """Pixel x inside the past section."""
    return x_percent(timestamp_ms, index, params) * section_width


def sample_x(series: list[Sample], index: int, params: RegimeParams, section_width: float) -> float:
    """Pixel x of ``series[index]``."""
    return x_pixel(series[index].timestamp_ms, index, params, section_width)


@dataclass(frozen=True)
class PriceScale:
    """Price <-> pixel y conversion.

    The domain spans every OHLC value in the series (and the previous close
    reference line when given), padded by a fraction of the range on each
    side.
    """

    min_price: float
    max_price: float
    margin_top: float
    plot_height: float

    @property
    def price_range(self) -> float:
        return self.max_price - self.min_price

    @property
    def center_y(self) -> float:
        return self.margin_top + self.plot_height / 2

    @classmethod
    def from_series(
        cls,
        series: list[Sample],
        previous_close: float | None,
        dims: ChartDimensions,
        padding: float = 0.1,
    ) -> PriceScale:
        prices = [p for s in series for p in (s.open, s.high, s.low, s.close)]
        if previous_close is not None:
            prices.append(previous_close)

        if not series:
            fallback = previous_close or 100.0
            return cls(fallback * 0.9, fallback * 1.1, dims.margin_top, dims.plot_height)

        low, high = min(prices), max(prices)
        spread = high - low
        if spread < EPSILON:
            # flat series: centre the line instead of pinning it to the bottom
            spread = abs(high) or 1.0
        pad = spread * padding
        return cls(low - pad, high + pad, dims.margin_top, dims.plot_height)

    def price_to_y(self, price: float) -> float:
        ratio = (price - self.min_price) / max(self.price_range, EPSILON)
        return self.margin_top + self.plot_height - ratio * self.plot_height

    def y_to_price(self, y: float) -> float:
        ratio = (self.margin_top + self.plot_height - y) / max(self.plot_height, EPSILON)
        return self.min_price + ratio * self.price_range


@dataclass(frozen=True)
class VolumeScale:
    """Volume -> bar height conversion for the volume strip."""

    max_volume: float
    strip_height: float

    @classmethod
    def from_series(cls, series: list[Sample], strip_height: float) -> VolumeScale:
        return cls(max([s.volume for s in series] + [1.0]), strip_height)

    def volume_to_height(self, volume: float) -> float:
        return volume / self.max_volume * self.strip_height


def candle_width(
    regime: Regime,
    count: int,
    section_width: float,
    bounds: MarketHoursBounds | None = None,
    interval_ms: int = 5 * MS_MINUTE,
) -> float:
    """Candle body width from sample density in the past section.

    Intraday candles take 80% of their time slot within the extended
    session; other regimes take 70% of the per-sample spacing.
    """
    if regime == Regime.INTRADAY and bounds is not None:
        lo, hi = _INTRADAY_CANDLE_WIDTH
        slot = interval_ms / max(bounds.extended_duration_ms, EPSILON) * section_width
        return max(lo, min(hi, slot * 0.8))

    lo, hi = _MULTI_DAY_CANDLE_WIDTH
    if count == 0:
        return hi
    return max(lo, min(hi, section_width / count * 0.7))


def wick_width(regime: Regime, past_percent: float) -> float:
    """Wick stroke width, thinned as the past section is compressed."""
    compression = past_percent / 100
    if regime == Regime.INTRADAY:
        return max(0.3, 0.5 * compression)
    return max(0.5, 1.0 * compression)


def candle_geometry(sample: Sample, x: float, scale: PriceScale, width: float) -> CandleGeometry:
    """Wick and body rectangle for one candle centred on ``x``."""
    open_y = scale.price_to_y(sample.open)
    close_y = scale.price_to_y(sample.close)
    body_top = min(open_y, close_y)
    return CandleGeometry(
        wick_x=x,
        wick_top=scale.price_to_y(sample.high),
        wick_bottom=scale.price_to_y(sample.low),
        body_x=x - width / 2,
        body_y=body_top,
        body_width=width,
        body_height=max(1.0, max(open_y, close_y) - body_top),
        rising=sample.close >= sample.open,
    )


def price_points(
    series: list[Sample],
    params: RegimeParams,
    scale: PriceScale,
    section_width: float,
) -> list[tuple[float, float]]:
    """Pixel (x, y) of every close for the line form."""
    return [
        (sample_x(series, i, params, section_width), scale.price_to_y(s.close))
        for i, s in enumerate(series)
    ]


def line_path(points: list[tuple[float, float]]) -> str:
    """SVG-style path string ``M x y L x y ...``; empty for no points."""
    if not points:
        return ""
    head, *tail = points
    parts = [f"M {head[0]:.2f} {head[1]:.2f}"]
    parts.extend(f"L {x:.2f} {y:.2f}" for x, y in tail)
    return " ".join(parts)


def session_paths(
    series: list[Sample],
    params: RegimeParams,
    scale: PriceScale,
    section_width: float,
    bounds: MarketHoursBounds,
) -> SessionPaths:
    """Split the intraday line into pre-market, regular and after-hours paths.

    Each later segment starts from the last point of the segment before it
    so the three paths join without a visual gap.
    """
    segments: dict[Session, list[tuple[float, float]]] = {s: [] for s in Session}
    last_point: tuple[float, float] | None = None
    for i, sample in enumerate(series):
        point = (sample_x(series, i, params, section_width), scale.price_to_y(sample.close))
        session = session_of(sample, bounds)
        segment = segments[session]
        if not segment and last_point is not None:
            segment.append(last_point)
        segment.append(point)
        last_point = point

    return SessionPaths(
        pre_market=line_path(segments[Session.PRE_MARKET]),
        regular=line_path(segments[Session.REGULAR]),
        after_hours=line_path(segments[Session.AFTER_HOURS]),
        last_point=last_point,
    )


def volume_bars(
    series: list[Sample],
    params: RegimeParams,
    section_width: float,
    volume_scale: VolumeScale,
    bar_width: float,
    bottom_y: float,
) -> list[VolumeBar]:
    """Volume bar rectangles aligned to the same x as the price surface."""
    bars: list[VolumeBar] = []
    for i, sample in enumerate(series):
        x = sample_x(series, i, params, section_width)
        height = volume_scale.volume_to_height(sample.volume)
        bars.append(
            VolumeBar(
                x=x - bar_width / 2,
                y=bottom_y - height,
                width=bar_width,
                height=height,
                rising=sample.close >= sample.open,
            )
        )
    return bars
