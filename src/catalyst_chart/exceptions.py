"""Custom exceptions for the chart engine.

Degenerate chart input (empty series, unmatched events, pointer far from any
sample) is never an error; it renders nothing. These exceptions cover
contract violations by the caller.
"""


class ChartError(Exception):
    """Base exception for all chart engine errors."""


class SeriesOrderError(ChartError):
    """Raised when a sample series is not strictly ascending by timestamp."""


class ConfigurationError(ChartError):
    """Raised when chart configuration is outside its valid range."""
