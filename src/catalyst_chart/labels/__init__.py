"""Time axis labels for the past and future sections."""

from catalyst_chart.labels.placer import (
    daily_labels,
    filter_overlapping,
    future_labels,
    generate_labels,
    intraday_labels,
    month_labels,
    year_labels,
)

__all__ = [
    "daily_labels",
    "filter_overlapping",
    "future_labels",
    "generate_labels",
    "intraday_labels",
    "month_labels",
    "year_labels",
]
