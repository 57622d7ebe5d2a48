# src/shot_chart/interactive_chart.py
"""
Interactive shot chart: court scatter + distance histogram with brushing.

``InteractiveShotChart`` is the mountable unit. ``mount`` builds the figure,
draws the court once, wires the filter widgets, the histogram brush and the
canvas events; ``unmount`` detaches all of it again. Every callback runs to
completion (state change, recompute, redraw) before the next event.
"""

from __future__ import annotations
from typing import Optional
import logging
import math

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure
from matplotlib.ticker import MaxNLocator
from matplotlib.widgets import CheckButtons, RadioButtons, SpanSelector

from shot_chart.binning import bin_count_max, compute_bins, histogram_domain, nice_upper
from shot_chart.brush import BrushBridge
from shot_chart.court import court_primitives, draw_court
from shot_chart.filter_state import DistanceBand, FilterState, Outcome
from shot_chart.quality import audit_records, log_audit
from shot_chart.reconcile import ViewReconciler
from shot_chart.records import normalize_rows, unique_actors, unique_groups
from shot_chart.settings import (
    BACKGROUND_COLOR, BAR_COLOR, BRUSH_COLOR, COURT_COLOR, TEXT_COLOR, ChartConfig,
)
from shot_chart.tooltip import Tooltip
from shot_chart.transforms import CoordinatePipeline, DomainScale, LinearScale, ZoomTransform

logger = logging.getLogger(__name__)

# figure-fraction layout: [left, bottom, width, height]
SCATTER_RECT = [0.21, 0.31, 0.77, 0.60]
HIST_RECT = [0.21, 0.06, 0.77, 0.19]
PLAYERS_RECT = [0.01, 0.50, 0.17, 0.40]
TEAMS_RECT = [0.01, 0.27, 0.17, 0.21]
RESULT_RECT = [0.01, 0.15, 0.17, 0.10]
DISTANCE_RECT = [0.01, 0.01, 0.17, 0.12]

UNKNOWN_LABEL = "(unknown)"
# not in any default matplotlib keymap ("r" is keymap.home)
RESET_ZOOM_KEY = "0"


def _label(value: str) -> str:
    return value if value else UNKNOWN_LABEL


def _style_axes(ax, title: Optional[str] = None):
    ax.set_facecolor(BACKGROUND_COLOR)
    for spine in ax.spines.values():
        spine.set_color(COURT_COLOR)
    ax.tick_params(colors=TEXT_COLOR, labelsize=8)
    if title:
        ax.set_title(title, color=TEXT_COLOR, fontsize=9, loc="left", fontweight="bold")


class InteractiveShotChart:
    """
    Linked shot scatter and distance histogram.

    Args:
        data: raw rows (sequence of mappings or a pandas DataFrame).
        columns: column mapping ``{x, y, made, player, team, distance, date,
            quarter, minsLeft, secsLeft}``; NBA stats names when omitted.
        title: chart title.
        config: ChartConfig overrides.
    """

    def __init__(self, data, columns=None, title: str = "Interactive Visualization",
                 config: Optional[ChartConfig] = None):
        self.config = config or ChartConfig()
        self.title = title
        self.records = normalize_rows(data, columns)
        log_audit(audit_records(self.records), name=title)

        cfg = self.config
        self.filters = FilterState.with_defaults(self.records, cfg.default_selected_actors)

        width, height = cfg.scatter_size
        self.domain = DomainScale.from_records(
            self.records, width, height, padding=cfg.domain_padding,
            fallback_x=cfg.fallback_x_domain, fallback_y=cfg.fallback_y_domain)
        self.zoom = ZoomTransform(cfg.zoom_extent)
        self.pipeline = CoordinatePipeline(self.domain, self.zoom)

        # fixed once from the full dataset so the brush mapping never shifts
        self.hist_domain = histogram_domain(self.records, cfg.hist_quantile, cfg.hist_fallback_max)
        self.hist_scale = LinearScale(self.hist_domain, (0.0, float(cfg.hist_width)))
        self.brush = BrushBridge(self.filters, self.hist_scale)
        self.reconciler = ViewReconciler(self.pipeline, cfg.made_colors, cfg.missed_colors)
        self.bins = []

        self.figure: Optional[Figure] = None
        self.tooltip: Optional[Tooltip] = None
        self.selector: Optional[SpanSelector] = None
        self.widgets = {}
        self._canvas_cids: list[int] = []
        self._widget_cids: list[tuple[object, int]] = []
        self._filter_cid: Optional[int] = None
        self._pan_anchor: Optional[tuple[float, float]] = None
        self._bars = None
        self._brushing = False
        logger.info(f"Chart '{title}' ready with {len(self.records)} shots, "
                    f"histogram domain {self.hist_domain[0]:.1f}-{self.hist_domain[1]:.1f} ft")

    @property
    def mounted(self) -> bool:
        return self.figure is not None

    # ------------------------------------------------------------------
    # mount / unmount
    # ------------------------------------------------------------------
    def mount(self, figure: Optional[Figure] = None) -> Figure:
        """Attach to ``figure`` (a new pyplot figure when None) and draw."""
        if self.mounted:
            raise RuntimeError("Chart is already mounted")
        if figure is None:
            figure = plt.figure(figsize=self.config.figsize, facecolor=BACKGROUND_COLOR)
        elif not isinstance(figure, Figure):
            raise TypeError(f"Expected a matplotlib Figure to mount on, got {type(figure).__name__}")
        self.figure = figure
        figure.set_facecolor(BACKGROUND_COLOR)
        figure.suptitle(self.title, color=TEXT_COLOR, x=0.21, ha="left", fontsize=14, fontweight="bold")

        self._build_scatter()
        self._build_histogram()
        self._build_controls()
        self.tooltip = Tooltip(figure)

        canvas = figure.canvas
        self._canvas_cids = [
            canvas.mpl_connect("scroll_event", self.on_scroll),
            canvas.mpl_connect("button_press_event", self.on_press),
            canvas.mpl_connect("motion_notify_event", self.on_motion),
            canvas.mpl_connect("button_release_event", self.on_release),
            canvas.mpl_connect("axes_leave_event", self.on_axes_leave),
            canvas.mpl_connect("key_press_event", self.on_key),
        ]
        self._filter_cid = self.filters.connect(self._on_filters_changed)

        self.redraw()
        logger.info(f"Mounted chart '{self.title}'")
        return figure

    def unmount(self):
        """Detach every callback and destroy the tooltip. Safe to call twice."""
        if not self.mounted:
            return
        canvas = self.figure.canvas
        for cid in self._canvas_cids:
            canvas.mpl_disconnect(cid)
        self._canvas_cids = []
        if self._filter_cid is not None:
            self.filters.disconnect(self._filter_cid)
            self._filter_cid = None
        for widget, cid in self._widget_cids:
            widget.disconnect(cid)
            widget.disconnect_events()
        self._widget_cids = []
        self.widgets = {}
        if self.selector is not None:
            self.selector.disconnect_events()
            self.selector = None
        if self.tooltip is not None:
            self.tooltip.destroy()
            self.tooltip = None
        self.reconciler.clear()
        self._pan_anchor = None
        self._bars = None
        logger.info(f"Unmounted chart '{self.title}'")
        self.figure = None

    # ------------------------------------------------------------------
    # layout
    # ------------------------------------------------------------------
    def _build_scatter(self):
        width, height = self.config.scatter_size
        ax = self.figure.add_axes(SCATTER_RECT)
        _style_axes(ax)
        ax.set_xlim(0, width)
        ax.set_ylim(height, 0)
        ax.set_xticks([])
        ax.set_yticks([])
        self.ax_scatter = ax

        # one transform instance for court and shots
        self.layer_transform = self.zoom.affine + ax.transData
        self.court_lines = draw_court(ax, court_primitives(self.domain), self.layer_transform)

        self.points = ax.scatter([], [], s=math.pi * self.config.point_radius ** 2,
                                 alpha=self.config.point_alpha, linewidths=0.5, zorder=2)
        self.points.set_offset_transform(self.layer_transform)

        self.status_text = self.figure.text(SCATTER_RECT[0], 0.925, "", color=TEXT_COLOR, fontsize=10)

    def _build_histogram(self):
        ax = self.figure.add_axes(HIST_RECT)
        _style_axes(ax, "Shot distance (drag to filter)")
        ax.set_xlim(*self.hist_scale.range)
        ticks = MaxNLocator(8).tick_values(*self.hist_domain)
        ticks = [t for t in ticks if self.hist_domain[0] <= t <= self.hist_domain[1]]
        ax.set_xticks([self.hist_scale(t) for t in ticks])
        ax.set_xticklabels([f"{t:g} ft" for t in ticks])
        self.ax_hist = ax

        self.selector = SpanSelector(
            ax, self._on_brush_select, "horizontal",
            onmove_callback=self._on_brush_move,
            props=dict(facecolor=BRUSH_COLOR, alpha=0.3),
            interactive=True, minspan=0,
        )

    def _build_controls(self):
        actors = unique_actors(self.records)
        groups = unique_groups(self.records)
        self._actor_by_label = {_label(a): a for a in actors}
        self._group_by_label = {_label(g): g for g in groups}

        self._add_checks("players", PLAYERS_RECT, "Players",
                         [_label(a) for a in actors],
                         [a in self.filters.selected_actors for a in actors],
                         lambda label: self.filters.toggle_actor(self._actor_by_label[label]))
        self._add_checks("teams", TEAMS_RECT, "Teams",
                         [_label(g) for g in groups],
                         [g in self.filters.selected_groups for g in groups],
                         lambda label: self.filters.toggle_group(self._group_by_label[label]))
        self._add_radio("result", RESULT_RECT, "Result",
                        [o.value for o in Outcome], self.filters.outcome.value,
                        self.filters.set_outcome)
        self._add_radio("distance", DISTANCE_RECT, "Distance Mode",
                        [b.value for b in DistanceBand], self.filters.distance_band.value,
                        self.filters.set_distance_band)

    def _add_checks(self, name, rect, title, labels, actives, on_clicked):
        ax = self.figure.add_axes(rect)
        _style_axes(ax, title)
        ax.set_xticks([])
        ax.set_yticks([])
        if not labels:
            ax.text(0.05, 0.5, "none", color=TEXT_COLOR, fontsize=8, transform=ax.transAxes)
            return
        widget = CheckButtons(ax, labels, actives)
        for text in widget.labels:
            text.set_color(TEXT_COLOR)
            text.set_fontsize(8)
        self._widget_cids.append((widget, widget.on_clicked(on_clicked)))
        self.widgets[name] = widget

    def _add_radio(self, name, rect, title, labels, active_label, on_clicked):
        ax = self.figure.add_axes(rect)
        _style_axes(ax, title)
        ax.set_xticks([])
        ax.set_yticks([])
        widget = RadioButtons(ax, labels, active=labels.index(active_label))
        for text in widget.labels:
            text.set_color(TEXT_COLOR)
            text.set_fontsize(8)
        self._widget_cids.append((widget, widget.on_clicked(on_clicked)))
        self.widgets[name] = widget

    # ------------------------------------------------------------------
    # redraw
    # ------------------------------------------------------------------
    def redraw(self):
        """Points, histogram and status line from the current state."""
        if not self.mounted:
            return
        self.redraw_points(request_draw=False)
        self.redraw_histogram(request_draw=False)
        self._request_draw()

    def redraw_points(self, request_draw: bool = True):
        if not self.mounted:
            return
        visible = self.filters.visible_subset()
        self.reconciler.reconcile(visible)
        self.points.set_offsets(self.reconciler.offsets())
        self.points.set_facecolors(self.reconciler.facecolors())
        self.points.set_edgecolors(self.reconciler.edgecolors())
        if self.tooltip is not None and self.tooltip.key not in self.reconciler.elements:
            self.tooltip.hide()
        self._update_status(visible)
        if request_draw:
            self._request_draw()

    def histogram_records(self):
        if self.config.context_histogram:
            return self.records
        return self.filters.context_subset()

    def redraw_histogram(self, request_draw: bool = True):
        if not self.mounted:
            return
        self.bins = compute_bins(self.histogram_records(), self.hist_domain, self.config.bin_count)
        top = nice_upper(bin_count_max(self.bins))
        xs = [self.hist_scale(b.lower_bound) for b in self.bins]
        widths = [max(1.0, self.hist_scale(b.upper_bound) - self.hist_scale(b.lower_bound) - 1)
                  for b in self.bins]
        heights = [b.count for b in self.bins]
        if self._bars is not None and len(self._bars) == len(self.bins):
            for rect, x, w, h in zip(self._bars, xs, widths, heights):
                rect.set_x(x)
                rect.set_width(w)
                rect.set_height(h)
        else:
            if self._bars is not None:
                self._bars.remove()
            self._bars = self.ax_hist.bar(xs, heights, width=widths, align="edge",
                                          color=BAR_COLOR, alpha=0.7, zorder=1)
        self.ax_hist.set_ylim(0, top)
        if request_draw:
            self._request_draw()

    def _update_status(self, visible):
        total = len(visible)
        made = sum(1 for r in visible if r.made)
        pct = made / total if total > 0 else 0
        self.status_text.set_text(f"Shots: {total} | Made: {made} ({pct:.1%})")

    def _on_brush_move(self, vmin, vmax):
        self._brushing = True
        try:
            self.brush.on_move(vmin, vmax)
        finally:
            self._brushing = False

    def _on_brush_select(self, vmin, vmax):
        self._brushing = True
        try:
            self.brush.on_select(vmin, vmax)
        finally:
            self._brushing = False

    def _sync_brush(self):
        """Redraw the span for range changes that did not come from the selector itself."""
        if self.selector is None or self._brushing:
            return
        pixels = self.brush.selection_pixels()
        if pixels is None:
            self.selector.clear()
        elif not self.selector.get_visible() or not np.allclose(self.selector.extents, pixels):
            self.selector.extents = pixels
            # clear() leaves the span hidden and the extents setter keeps it that way
            self.selector.set_visible(True)

    def _request_draw(self, immediate: bool = False):
        if not self.mounted:
            return
        if immediate:
            self.figure.canvas.draw()
        else:
            self.figure.canvas.draw_idle()

    def _on_filters_changed(self, criterion: str):
        logger.debug(f"Filter changed: {criterion} -> {self.filters!r}")
        if criterion == "distance_range":
            # the brush only filters the scatter; the histogram keeps its bins
            self.redraw_points()
            self._sync_brush()
        else:
            self.redraw()

    # ------------------------------------------------------------------
    # canvas events
    # ------------------------------------------------------------------
    def on_scroll(self, event):
        if event.inaxes is not self.ax_scatter or event.xdata is None:
            return
        factor = self.config.wheel_zoom_step ** event.step
        if self.zoom.scale_by(factor, (event.xdata, event.ydata)):
            logger.debug(f"Zoom {self.zoom!r}")
            self._request_draw(immediate=True)

    def on_press(self, event):
        if event.inaxes is self.ax_scatter and event.button == 1 and event.xdata is not None:
            self._pan_anchor = (event.xdata, event.ydata)

    def on_release(self, event):
        self._pan_anchor = None

    def on_motion(self, event):
        if self._pan_anchor is not None and event.inaxes is self.ax_scatter and event.xdata is not None:
            ax0, ay0 = self._pan_anchor
            if self.zoom.translate_by(event.xdata - ax0, event.ydata - ay0):
                self._pan_anchor = (event.xdata, event.ydata)
                self._request_draw(immediate=True)
            return
        self.on_hover(event)

    def on_hover(self, event):
        if self.tooltip is None:
            return
        if event.inaxes is not self.ax_scatter:
            if self.tooltip.hide():
                self._request_draw()
            return
        hit, info = self.points.contains(event)
        if hit and len(info.get("ind", [])):
            record = self.reconciler.record_at(int(info["ind"][-1]))
            self.tooltip.show(record, event.x, event.y)
            self._request_draw()
        elif self.tooltip.hide():
            self._request_draw()

    def on_axes_leave(self, event):
        if self.tooltip is not None and self.tooltip.hide():
            self._request_draw()

    def on_key(self, event):
        if event.key == "escape":
            self.brush.clear()
        elif event.key == RESET_ZOOM_KEY:
            self.zoom.reset()
            self._request_draw(immediate=True)
