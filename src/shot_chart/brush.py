# src/shot_chart/brush.py
"""Histogram brush -> distance-range filter."""

from __future__ import annotations
from typing import Optional
import logging
import math

from shot_chart.filter_state import FilterState
from shot_chart.transforms import LinearScale

logger = logging.getLogger(__name__)


class BrushBridge:
    """
    Turns a pixel interval drawn on the histogram into
    ``FilterState.distance_range``.

    The histogram scale is not zoomable, so the same pixel always inverts to
    the same distance. Zero-width, non-finite or fully out-of-range intervals
    clear the range instead of setting an empty one.
    """

    def __init__(self, filters: FilterState, scale: LinearScale, min_span_px: float = 0.5):
        self.filters = filters
        self.scale = scale
        self.min_span_px = min_span_px

    @property
    def pixel_extent(self) -> tuple[float, float]:
        r0, r1 = self.scale.range
        return min(r0, r1), max(r0, r1)

    def to_values(self, x0: float, x1: float) -> Optional[tuple[float, float]]:
        """Pixel interval -> ``(low, high)`` distance, or None when it is not a usable selection."""
        if not (math.isfinite(x0) and math.isfinite(x1)):
            return None
        left, right = min(x0, x1), max(x0, x1)
        lo_px, hi_px = self.pixel_extent
        if right < lo_px or left > hi_px:
            return None
        left, right = max(left, lo_px), min(right, hi_px)
        if right - left <= self.min_span_px:
            return None
        low, high = self.scale.invert(left), self.scale.invert(right)
        return (min(low, high), max(low, high))

    def update(self, x0: float, x1: float) -> bool:
        values = self.to_values(x0, x1)
        if values is None:
            return self.clear()
        logger.debug(f"Brush {x0:.1f}-{x1:.1f}px -> {values[0]:.2f}-{values[1]:.2f} ft")
        return self.filters.set_distance_range(values)

    # SpanSelector hooks: live updates while dragging, final one on release
    def on_move(self, x0: float, x1: float) -> bool:
        return self.update(x0, x1)

    def on_select(self, x0: float, x1: float) -> bool:
        return self.update(x0, x1)

    def clear(self) -> bool:
        return self.filters.clear_distance_range()

    def selection_pixels(self) -> Optional[tuple[float, float]]:
        """Current range mapped back onto the histogram, for redrawing the brush."""
        if self.filters.distance_range is None:
            return None
        low, high = self.filters.distance_range
        return self.scale(low), self.scale(high)
