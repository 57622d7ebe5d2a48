# src/shot_chart/court.py
"""
Half-court outline in NBA stats coordinates (hoop at the origin, 0.1 ft units).

``court_primitives`` is a pure function of the domain scale: the same scale
always produces the same polylines. They are drawn once, through the shared
zoom affine, so the court pans and zooms with the shots.
"""

from __future__ import annotations
from dataclasses import dataclass
import math

import numpy as np
from matplotlib.lines import Line2D

from shot_chart.settings import COURT_COLOR, HOOP_COLOR
from shot_chart.transforms import DomainScale

# court geometry (data units)
COURT_HALF_WIDTH = 250.0
BASELINE_Y = -47.5
HALF_COURT_Y = 422.5
HOOP_RADIUS = 7.5
BACKBOARD_Y = -7.5
BACKBOARD_HALF_WIDTH = 30.0
PAINT_HALF_WIDTH = 80.0
FREE_THROW_Y = 142.5
FREE_THROW_RADIUS = 60.0
RESTRICTED_RADIUS = 40.0
THREE_POINT_RADIUS = 237.5
CORNER_THREE_X = 220.0
CENTER_CIRCLE_RADIUS = 60.0

ARC_SAMPLES = 96


@dataclass(frozen=True)
class CourtPrimitive:
    """A polyline in base screen coordinates."""
    name: str
    points: np.ndarray
    color: str = COURT_COLOR
    width: float = 2.0
    alpha: float = 1.0


def _arc(cx, cy, r, theta1, theta2, samples=ARC_SAMPLES):
    theta = np.linspace(math.radians(theta1), math.radians(theta2), samples)
    return np.column_stack([cx + r * np.cos(theta), cy + r * np.sin(theta)])


def _segment(x1, y1, x2, y2):
    return np.array([[x1, y1], [x2, y2]], dtype=float)


def _rect(x0, y0, x1, y1):
    return np.array([[x0, y0], [x1, y0], [x1, y1], [x0, y1], [x0, y0]], dtype=float)


def court_outline() -> list[tuple[str, np.ndarray, dict]]:
    """Court pieces in data coordinates with their style overrides."""
    # where the three-point arc meets the corner lines
    corner_top = math.sqrt(THREE_POINT_RADIUS ** 2 - CORNER_THREE_X ** 2)
    break_angle = math.degrees(math.atan2(corner_top, CORNER_THREE_X))
    return [
        ("outer", _rect(-COURT_HALF_WIDTH, BASELINE_Y, COURT_HALF_WIDTH, HALF_COURT_Y), {}),
        ("backboard", _segment(-BACKBOARD_HALF_WIDTH, BACKBOARD_Y, BACKBOARD_HALF_WIDTH, BACKBOARD_Y),
         {"width": 3.0}),
        ("hoop", _arc(0, 0, HOOP_RADIUS, 0, 360), {"color": HOOP_COLOR}),
        ("paint", _rect(-PAINT_HALF_WIDTH, BASELINE_Y, PAINT_HALF_WIDTH, FREE_THROW_Y), {}),
        ("free_throw", _arc(0, FREE_THROW_Y, FREE_THROW_RADIUS, 0, 360), {}),
        ("restricted", _arc(0, 0, RESTRICTED_RADIUS, 0, 180), {}),
        ("corner_left", _segment(-CORNER_THREE_X, BASELINE_Y, -CORNER_THREE_X, corner_top), {}),
        ("corner_right", _segment(CORNER_THREE_X, BASELINE_Y, CORNER_THREE_X, corner_top), {}),
        ("three_point", _arc(0, 0, THREE_POINT_RADIUS, break_angle, 180 - break_angle), {}),
        ("center_circle", _arc(0, HALF_COURT_Y, CENTER_CIRCLE_RADIUS, 180, 360), {"alpha": 0.3}),
    ]


def court_primitives(scale: DomainScale) -> list[CourtPrimitive]:
    """Map the court outline through ``scale`` into base screen coordinates."""
    primitives = []
    for name, points, style in court_outline():
        px, py = scale(points[:, 0], points[:, 1])
        primitives.append(CourtPrimitive(name, np.column_stack([px, py]), **style))
    return primitives


def draw_court(ax, primitives: list[CourtPrimitive], transform) -> list[Line2D]:
    """Add the court to ``ax``; ``transform`` maps base screen coords to display."""
    lines = []
    for prim in primitives:
        line = Line2D(prim.points[:, 0], prim.points[:, 1], color=prim.color,
                      linewidth=prim.width, alpha=prim.alpha, transform=transform,
                      zorder=1, label=f"court_{prim.name}")
        ax.add_line(line)
        lines.append(line)
    return lines
