import matplotlib.pyplot as plt
import numpy as np
import pytest
from matplotlib.backend_bases import KeyEvent, MouseEvent
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

from shot_chart.filter_state import Outcome
from shot_chart.interactive_chart import RESET_ZOOM_KEY, InteractiveShotChart
from shot_chart.settings import ChartConfig


def new_figure():
    fig = Figure(figsize=(14, 9))
    FigureCanvasAgg(fig)
    return fig


@pytest.fixture
def chart(raw_rows, columns):
    chart = InteractiveShotChart(raw_rows, columns, title="Test Chart")
    chart.mount(new_figure())
    yield chart
    chart.unmount()


def display_xy(chart, record):
    """Display pixels of a drawn shot."""
    bx, by = chart.pipeline.to_base(record.position.x, record.position.y)
    return chart.layer_transform.transform((bx, by))


def bar_heights(chart):
    return [rect.get_height() for rect in chart._bars]


def test_mount_builds_linked_views(chart):
    assert chart.mounted
    assert len(chart.points.get_offsets()) == 5
    assert len(chart.court_lines) == 10
    assert len(chart._bars) == chart.config.bin_count
    # the 30 ft shot is past the 99th percentile and off the axis
    assert sum(bar_heights(chart)) == 4
    assert chart.status_text.get_text() == "Shots: 5 | Made: 3 (60.0%)"
    assert set(chart.widgets) == {"players", "teams", "result", "distance"}


def test_court_and_points_share_one_transform(chart):
    assert chart.points.get_offset_transform() is chart.layer_transform
    assert all(line.get_transform() is chart.layer_transform for line in chart.court_lines)


def test_mount_rejects_bad_targets(raw_rows, columns, chart):
    with pytest.raises(RuntimeError):
        chart.mount(new_figure())
    other = InteractiveShotChart(raw_rows, columns)
    with pytest.raises(TypeError):
        other.mount("not a figure")
    assert not other.mounted


def test_unmount_detaches_everything(chart):
    fig = chart.figure
    chart.unmount()
    assert not chart.mounted
    assert chart.tooltip is None
    assert len(chart.reconciler) == 0
    # filter changes no longer reach the detached views
    assert chart.filters.set_outcome(Outcome.MADE)
    x, y = fig.axes[0].transData.transform((540, 270))
    fig.canvas.callbacks.process("scroll_event", MouseEvent("scroll_event", fig.canvas, x, y, step=1))
    assert chart.zoom.k == 1.0
    chart.unmount()


def test_redraw_is_idempotent(chart):
    offsets = np.array(chart.points.get_offsets())
    colors = np.array(chart.points.get_facecolors())
    heights = bar_heights(chart)
    chart.redraw()
    chart.redraw()
    np.testing.assert_array_equal(chart.points.get_offsets(), offsets)
    np.testing.assert_array_equal(chart.points.get_facecolors(), colors)
    assert bar_heights(chart) == heights


def test_brush_filters_points_but_not_bars(chart):
    heights = bar_heights(chart)
    chart._on_brush_select(0.0, chart.hist_scale(10.0))
    assert chart.filters.distance_range == pytest.approx((0.0, 10.0))
    assert chart.reconciler.keys() == [0, 1, 3]
    assert len(chart.points.get_offsets()) == 3
    assert bar_heights(chart) == heights
    assert chart.status_text.get_text() == "Shots: 3 | Made: 2 (66.7%)"


def test_brush_clears_on_zero_width(chart):
    chart._on_brush_select(0.0, chart.hist_scale(10.0))
    chart._on_brush_select(300.0, 300.0)
    assert chart.filters.distance_range is None
    assert len(chart.points.get_offsets()) == 5


def test_escape_clears_brush(chart):
    chart._on_brush_select(0.0, chart.hist_scale(10.0))
    chart.on_key(KeyEvent("key_press_event", chart.figure.canvas, "escape"))
    assert chart.filters.distance_range is None
    assert len(chart.reconciler) == 5


def test_programmatic_range_moves_selector(chart):
    chart.filters.set_distance_range((5.0, 15.0))
    np.testing.assert_allclose(chart.selector.extents, (chart.hist_scale(5.0), chart.hist_scale(15.0)))
    assert chart.selector.get_visible()

    chart.filters.clear_distance_range()
    assert not chart.selector.get_visible()

    # same range again after a clear must show the span again
    chart.filters.set_distance_range((5.0, 15.0))
    assert chart.selector.get_visible()
    np.testing.assert_allclose(chart.selector.extents, (chart.hist_scale(5.0), chart.hist_scale(15.0)))


def hist_event(chart, name, distance, **kwargs):
    ax = chart.ax_hist
    x = ax.transData.transform((chart.hist_scale(distance), 0.0))[0]
    y = ax.transAxes.transform((0.0, 0.5))[1]
    return MouseEvent(name, chart.figure.canvas, x, y, **kwargs)


def test_dragging_on_histogram_filters_live(chart):
    callbacks = chart.figure.canvas.callbacks
    heights = bar_heights(chart)

    callbacks.process("button_press_event", hist_event(chart, "button_press_event", 1.0, button=1))
    callbacks.process("motion_notify_event", hist_event(chart, "motion_notify_event", 7.0, button=1))
    low, high = chart.filters.distance_range
    assert low == pytest.approx(1.0, abs=0.1)
    assert high == pytest.approx(7.0, abs=0.1)
    assert chart.reconciler.keys() == [0, 1, 3]

    callbacks.process("motion_notify_event", hist_event(chart, "motion_notify_event", 20.0, button=1))
    assert chart.filters.distance_range[1] == pytest.approx(20.0, abs=0.1)
    assert chart.reconciler.keys() == [0, 1, 2, 3]

    callbacks.process("button_release_event", hist_event(chart, "button_release_event", 20.0, button=1))
    assert chart.filters.distance_range[1] == pytest.approx(20.0, abs=0.1)
    assert bar_heights(chart) == heights

    # a plain click away from the span clears the range
    callbacks.process("button_press_event", hist_event(chart, "button_press_event", 25.0, button=1))
    callbacks.process("button_release_event", hist_event(chart, "button_release_event", 25.0, button=1))
    assert chart.filters.distance_range is None
    assert len(chart.reconciler) == 5


def test_widgets_drive_filters(chart):
    heights = bar_heights(chart)
    chart.widgets["result"].set_active(1)
    assert chart.filters.outcome is Outcome.MADE
    assert chart.reconciler.keys() == [0, 2, 3]

    chart.widgets["players"].set_active(1)  # B off
    assert chart.filters.selected_actors == {"A"}
    assert chart.reconciler.keys() == [0, 2]
    # histogram describes the whole dataset
    assert bar_heights(chart) == heights


def test_context_histogram_can_follow_filters(raw_rows, columns):
    chart = InteractiveShotChart(raw_rows, columns, config=ChartConfig(context_histogram=False))
    chart.mount(new_figure())
    try:
        chart.filters.set_actors(["A"])
        assert sum(bar_heights(chart)) == 3
        chart.filters.set_distance_range((0.0, 10.0))
        # the brush never rebins
        assert sum(bar_heights(chart)) == 3
    finally:
        chart.unmount()


def test_scroll_zooms_around_cursor(chart):
    ax = chart.ax_scatter
    x, y = ax.transData.transform((540.0, 270.0))
    chart.on_scroll(MouseEvent("scroll_event", chart.figure.canvas, x, y, step=1))
    assert chart.zoom.k == pytest.approx(chart.config.wheel_zoom_step)
    np.testing.assert_allclose(chart.zoom.apply(540.0, 270.0), (540.0, 270.0))
    np.testing.assert_allclose(chart.layer_transform.transform((540.0, 270.0)), (x, y))


def test_zoom_is_clamped(chart):
    x, y = chart.ax_scatter.transData.transform((540.0, 270.0))
    for _ in range(30):
        chart.on_scroll(MouseEvent("scroll_event", chart.figure.canvas, x, y, step=1))
    assert chart.zoom.k == chart.config.zoom_extent[1]
    for _ in range(60):
        chart.on_scroll(MouseEvent("scroll_event", chart.figure.canvas, x, y, step=-1))
    assert chart.zoom.k == chart.config.zoom_extent[0]


def test_drag_pans_and_reset_key(chart):
    canvas = chart.figure.canvas
    x, y = chart.ax_scatter.transData.transform((300.0, 270.0))
    chart.on_press(MouseEvent("button_press_event", canvas, x, y, button=1))
    chart.on_motion(MouseEvent("motion_notify_event", canvas, x + 40, y, button=1))
    chart.on_release(MouseEvent("button_release_event", canvas, x + 40, y, button=1))
    assert chart.zoom.tx > 0
    assert chart.zoom.ty == pytest.approx(0.0)

    chart.on_key(KeyEvent("key_press_event", canvas, RESET_ZOOM_KEY))
    assert (chart.zoom.k, chart.zoom.tx, chart.zoom.ty) == (1.0, 0.0, 0.0)


def test_hover_shows_and_hides_tooltip(chart):
    canvas = chart.figure.canvas
    x, y = display_xy(chart, chart.records[2])
    chart.on_motion(MouseEvent("motion_notify_event", canvas, x, y))
    assert chart.tooltip.visible
    assert chart.tooltip.text.splitlines()[0] == "A (T2)"

    chart.on_axes_leave(MouseEvent("axes_leave_event", canvas, x, y))
    assert not chart.tooltip.visible


def test_tooltip_hidden_when_its_shot_is_filtered_out(chart):
    x, y = display_xy(chart, chart.records[2])
    chart.on_motion(MouseEvent("motion_notify_event", chart.figure.canvas, x, y))
    assert chart.tooltip.key == 2
    chart.filters.set_outcome("Missed")
    assert not chart.tooltip.visible


def test_empty_dataset_mounts(columns):
    chart = InteractiveShotChart([], columns)
    chart.mount(new_figure())
    try:
        assert chart.hist_domain == (0.0, 35.0)
        assert len(chart.points.get_offsets()) == 0
        assert chart.status_text.get_text() == "Shots: 0 | Made: 0 (0.0%)"
    finally:
        chart.unmount()


def test_mount_without_figure_uses_pyplot(raw_rows, columns):
    chart = InteractiveShotChart(raw_rows, columns)
    fig = chart.mount()
    try:
        assert plt.fignum_exists(fig.number)
    finally:
        chart.unmount()
        plt.close(fig)
