"""
NBA Shot Chart Package

Interactive shot chart for NBA shot location data: a court scatter plot
linked to a shot-distance histogram with brushing, multi-criteria filtering
and pan/zoom.
"""

__version__ = "0.1.0"
__all__ = [
    "settings",
    "records",
    "quality",
    "transforms",
    "filter_state",
    "binning",
    "brush",
    "reconcile",
    "tooltip",
    "court",
    "interactive_chart",
    "shot_chart_main",
]
