"""Crosshair hit testing driven by unified pointer events."""

from catalyst_chart.interaction.hit_test import (
    GestureState,
    GestureTracker,
    HitTestContext,
    hit_test,
    hit_test_future,
    hit_test_past,
)

__all__ = [
    "GestureState",
    "GestureTracker",
    "HitTestContext",
    "hit_test",
    "hit_test_future",
    "hit_test_past",
]
