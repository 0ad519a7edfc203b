"""Working-series preparation: validity filtering and OHLC resampling."""

from catalyst_chart.data.normalizer import (
    aggregate,
    aggregate_intraday,
    bucket_kind_for_range,
    downsample,
    filter_valid,
    normalize_points,
    normalize_series,
)

__all__ = [
    "aggregate",
    "aggregate_intraday",
    "bucket_kind_for_range",
    "downsample",
    "filter_valid",
    "normalize_points",
    "normalize_series",
]
