"""Viewport split between the historical chart and the catalyst timeline."""

from catalyst_chart.layout.viewport import ChartLayout, future_months, future_window_ms, split

__all__ = ["ChartLayout", "future_months", "future_window_ms", "split"]
