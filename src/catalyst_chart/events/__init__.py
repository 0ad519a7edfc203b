"""Catalyst event projection onto the chart."""

from catalyst_chart.events.projector import (
    FUTURE_BUFFER_MS,
    filter_events,
    future_x_percent,
    locate_historical,
    match_historical_event,
    project_future_events,
    project_historical_events,
    tolerance_for_range,
    visible_historical_events,
)

__all__ = [
    "FUTURE_BUFFER_MS",
    "filter_events",
    "future_x_percent",
    "locate_historical",
    "match_historical_event",
    "project_future_events",
    "project_historical_events",
    "tolerance_for_range",
    "visible_historical_events",
]
