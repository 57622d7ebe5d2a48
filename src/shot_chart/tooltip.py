# src/shot_chart/tooltip.py
from __future__ import annotations
from typing import Optional
import logging
import math

from matplotlib.transforms import IdentityTransform

from shot_chart.records import Record

logger = logging.getLogger(__name__)

TOOLTIP_OFFSET_PX = 12


def format_clock(record: Record) -> str:
    mins = "" if record.minutes_remaining is None else str(record.minutes_remaining)
    secs = "" if record.seconds_remaining is None else str(record.seconds_remaining)
    return f"{mins}:{secs.rjust(2, '0')}"


def format_tooltip(record: Record) -> str:
    """Hover text for one shot; date and period lines only when known."""
    rows = [
        f"{record.actor} ({record.group})",
        f"Result: {'Made ✓' if record.made else 'Missed ✗'}",
        f"Distance: {record.distance:.1f} ft" if math.isfinite(record.distance) else "Distance: NA ft",
    ]
    if record.timestamp is not None:
        rows.append(f"Date: {record.timestamp.strftime('%Y-%m-%d')}")
    if record.period is not None:
        rows.append(f"Q{record.period}  {format_clock(record)}")
    return "\n".join(rows)


class Tooltip:
    """
    Hover box owned by one chart. Created on mount, destroyed on unmount.

    It is a figure-level annotation positioned in figure pixels so it can
    float over either axes.
    """

    def __init__(self, figure):
        self.figure = figure
        self.annotation = figure.text(
            0, 0, "", transform=IdentityTransform(), visible=False, zorder=10,
            color="white", fontsize=9, va="top", ha="left",
            bbox=dict(boxstyle="round,pad=0.5", facecolor=(0, 0, 0, 0.9),
                      edgecolor="#555555"),
        )
        self.key: Optional[int] = None

    @property
    def visible(self) -> bool:
        return self.annotation is not None and self.annotation.get_visible()

    @property
    def text(self) -> str:
        return self.annotation.get_text() if self.annotation is not None else ""

    def show(self, record: Record, x: float, y: float):
        """Anchor next to the cursor; ``x``/``y`` are display pixels (origin bottom-left)."""
        if self.annotation is None:
            return
        self.key = record.index
        self.annotation.set_text(format_tooltip(record))
        self.annotation.set_position((x + TOOLTIP_OFFSET_PX, y - TOOLTIP_OFFSET_PX))
        self.annotation.set_visible(True)

    def hide(self) -> bool:
        if not self.visible:
            return False
        self.key = None
        self.annotation.set_visible(False)
        return True

    def destroy(self):
        if self.annotation is not None:
            self.annotation.remove()
            logger.debug("Tooltip destroyed")
        self.annotation = None
        self.key = None
