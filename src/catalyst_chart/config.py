"""Configuration system using pydantic-settings with environment variable loading.

These settings only shape layout, event filtering, snapping and labelling.
The coordinate math itself takes plain values so a render cycle can be
reproduced from its inputs alone.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ViewportSettings(BaseSettings):
    """Past/future split of the chart width."""

    model_config = SettingsConfigDict(env_prefix="CHART_VIEWPORT_")

    show_future_section: bool = True
    split_ratio: float = 60.0  # percent of width for the past section
    future_buffer_days: int = 14  # pushes future dots away from the "now" line

    @field_validator("split_ratio")
    @classmethod
    def _ratio_in_range(cls, value: float) -> float:
        if not 0 < value <= 100:
            raise ValueError("split_ratio must be in (0, 100]")
        return value


class EventSettings(BaseSettings):
    """Which catalyst events are drawn."""

    model_config = SettingsConfigDict(env_prefix="CHART_EVENTS_")

    show_historical_events: bool = True
    selected_event_types: set[str] | None = None  # None = every type


class InteractionSettings(BaseSettings):
    """Crosshair snap thresholds."""

    model_config = SettingsConfigDict(env_prefix="CHART_INTERACTION_")

    past_snap_fraction: float = 0.05  # of past section width
    event_snap_px: float = 5.0
    future_snap_px: float = 20.0


class LabelSettings(BaseSettings):
    """Axis label overlap removal, all values in percent of chart width."""

    model_config = SettingsConfigDict(env_prefix="CHART_LABELS_")

    min_spacing_percent: float = 12.0
    edge_threshold_percent: float = 8.0
    compressed_section_percent: float = 25.0


class MarketHoursSettings(BaseSettings):
    """Exchange clock used by the intraday regime and calendar bucketing."""

    model_config = SettingsConfigDict(env_prefix="CHART_MARKET_")

    timezone: str = "America/New_York"
    extended_open: str = "08:00"
    regular_open: str = "09:30"
    regular_close: str = "16:00"
    extended_close: str = "20:00"

    @field_validator("extended_open", "regular_open", "regular_close", "extended_close")
    @classmethod
    def _valid_clock(cls, value: str) -> str:
        hour, _, minute = value.partition(":")
        if not (hour.isdigit() and minute.isdigit()):
            raise ValueError(f"expected HH:MM, got {value!r}")
        if not (0 <= int(hour) <= 23 and 0 <= int(minute) <= 59):
            raise ValueError(f"clock time out of range: {value!r}")
        return value


class ScaleSettings(BaseSettings):
    """Price scale padding, long-horizon lookback and render cache size."""

    model_config = SettingsConfigDict(env_prefix="CHART_SCALE_")

    price_padding: float = 0.1  # fraction of price range added on each side
    lookback_years: int = 5
    render_cache_size: int = 16


class AppSettings(BaseSettings):
    """Root chart settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    viewport: ViewportSettings = ViewportSettings()
    events: EventSettings = EventSettings()
    interaction: InteractionSettings = InteractionSettings()
    labels: LabelSettings = LabelSettings()
    market: MarketHoursSettings = MarketHoursSettings()
    scale: ScaleSettings = ScaleSettings()
