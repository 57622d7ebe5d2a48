# src/shot_chart/settings.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import os
import typing as _t

# 🗂️  Default shot data location (override via env if needed)
SHOT_DATA_CSV = Path(
    (Path(__file__).resolve().parent.parent.parent)  # project root
    / "data"
    / "shot_chart_data"
    / "shots.csv"
)

# optional: allow `SHOT_DATA_CSV=/tmp/shots.csv shot-chart`
ENV_OVERRIDE: _t.Optional[str] = os.getenv("SHOT_DATA_CSV")
if ENV_OVERRIDE:
    SHOT_DATA_CSV = Path(ENV_OVERRIDE).expanduser().resolve()

DEBUG = os.getenv("SHOT_CHART_DEBUG", "").lower() in ("1", "true", "yes")

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

# NBA stats (shotchartdetail) column names
DEFAULT_COLUMNS = {
    "x": "LOC_X",
    "y": "LOC_Y",
    "made": "SHOT_MADE_FLAG",
    "player": "PLAYER_NAME",
    "team": "TEAM_NAME",
    "distance": "SHOT_DISTANCE",
    "date": "GAME_DATE",
    "quarter": "PERIOD",
    "minsLeft": "MINUTES_REMAINING",
    "secsLeft": "SECONDS_REMAINING",
}

DATE_FORMAT = "%m-%d-%Y"

# Histogram
BIN_COUNT = 25
HIST_QUANTILE = 0.99
HIST_FALLBACK_MAX = 35.0

# Near <= 10 ft < Mid <= 23 ft < Far
BAND_THRESHOLDS = (10.0, 23.0)

# Court / scatter geometry (screen units)
DOMAIN_PADDING = 10.0
FALLBACK_X_DOMAIN = (-250.0, 250.0)
FALLBACK_Y_DOMAIN = (-50.0, 470.0)
SCATTER_SIZE = (1080.0, 540.0)
HIST_WIDTH = 1040.0

ZOOM_EXTENT = (0.8, 8.0)
WHEEL_ZOOM_STEP = 1.2

DEFAULT_SELECTED_ACTORS = 5

# Dark theme
BACKGROUND_COLOR = "#1a1a1a"
TEXT_COLOR = "#e0e0e0"
COURT_COLOR = "#666666"
HOOP_COLOR = "#ff6b35"
BAR_COLOR = "#4a90e2"
BRUSH_COLOR = "#9ab8e8"
MADE_COLORS = ("#4a90e2", "#6ba3e8")    # fill, stroke
MISSED_COLORS = ("#e74c3c", "#ec7063")
POINT_RADIUS = 4.0
POINT_ALPHA = 0.7


@dataclass
class ChartConfig:
    """Per-chart overrides for the module defaults above."""
    bin_count: int = BIN_COUNT
    hist_quantile: float = HIST_QUANTILE
    hist_fallback_max: float = HIST_FALLBACK_MAX
    # Bars from the full dataset (True) or from the non-brush filtered subset
    context_histogram: bool = True
    domain_padding: float = DOMAIN_PADDING
    fallback_x_domain: tuple[float, float] = FALLBACK_X_DOMAIN
    fallback_y_domain: tuple[float, float] = FALLBACK_Y_DOMAIN
    scatter_size: tuple[float, float] = SCATTER_SIZE
    hist_width: float = HIST_WIDTH
    zoom_extent: tuple[float, float] = ZOOM_EXTENT
    wheel_zoom_step: float = WHEEL_ZOOM_STEP
    default_selected_actors: int = DEFAULT_SELECTED_ACTORS
    made_colors: tuple[str, str] = MADE_COLORS
    missed_colors: tuple[str, str] = MISSED_COLORS
    point_radius: float = POINT_RADIUS
    point_alpha: float = POINT_ALPHA
    figsize: tuple[float, float] = (14.0, 9.0)

    def __post_init__(self):
        if self.bin_count <= 0:
            raise ValueError(f"bin_count must be positive, got {self.bin_count}")
        lo, hi = self.zoom_extent
        if not 0 < lo <= hi:
            raise ValueError(f"Invalid zoom extent {self.zoom_extent}")
        if not 0 < self.hist_quantile <= 1:
            raise ValueError(f"hist_quantile must be in (0, 1], got {self.hist_quantile}")
