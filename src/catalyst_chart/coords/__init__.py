"""Coordinate mapping shared by every rendering surface and the hit test."""

from catalyst_chart.coords.mapper import (
    PriceScale,
    Regime,
    RegimeParams,
    VolumeScale,
    candle_geometry,
    candle_width,
    line_path,
    price_points,
    regime_for_range,
    sample_x,
    session_paths,
    volume_bars,
    wick_width,
    x_percent,
    x_pixel,
)

__all__ = [
    "PriceScale",
    "Regime",
    "RegimeParams",
    "VolumeScale",
    "candle_geometry",
    "candle_width",
    "line_path",
    "price_points",
    "regime_for_range",
    "sample_x",
    "session_paths",
    "volume_bars",
    "wick_width",
    "x_percent",
    "x_pixel",
]
