"""Trading session boundaries for intraday charts."""

from catalyst_chart.session.market_hours import (
    local_date,
    market_hours_bounds,
    session_for_timestamp,
    session_of,
    trading_day_for,
)

__all__ = [
    "local_date",
    "market_hours_bounds",
    "session_for_timestamp",
    "session_of",
    "trading_day_for",
]
