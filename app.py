import logging

import streamlit as st
from matplotlib.figure import Figure

from shot_chart.filter_state import DistanceBand, Outcome
from shot_chart.interactive_chart import InteractiveShotChart
from shot_chart.records import unique_actors, unique_groups
from shot_chart.settings import BACKGROUND_COLOR, DEBUG, LOG_FORMAT, SHOT_DATA_CSV
from shot_chart.shot_chart_main import load_shots_csv

logging.basicConfig(level=logging.DEBUG if DEBUG else logging.INFO, format=LOG_FORMAT)


@st.cache_data
def get_shots(path):
    """Load the shot CSV once per path."""
    return load_shots_csv(path)


def main():
    st.title("NBA Shot Chart Analysis")

    csv_path = st.sidebar.text_input("Shot data CSV", value=str(SHOT_DATA_CSV))
    title = st.sidebar.text_input("Title", value="Interactive Visualization")

    try:
        shots = get_shots(csv_path)
    except FileNotFoundError as e:
        st.error(f"Error loading shot data: {e}")
        return

    chart = InteractiveShotChart(shots, title=title)
    filters = chart.filters

    # Sidebar drives the same filter state the desktop widgets do
    actors = unique_actors(chart.records)
    groups = unique_groups(chart.records)
    filters.set_actors(st.sidebar.multiselect("Players", actors, default=sorted(filters.selected_actors)))
    filters.set_groups(st.sidebar.multiselect("Teams", groups, default=groups))
    filters.set_outcome(st.sidebar.radio("Result", [o.value for o in Outcome]))
    filters.set_distance_band(st.sidebar.radio("Distance Mode", [b.value for b in DistanceBand]))

    low, high = chart.hist_domain
    use_range = st.sidebar.checkbox("Filter by distance range", value=False)
    if use_range:
        filters.set_distance_range(st.sidebar.slider("Distance (ft)", float(low), float(high),
                                                     (float(low), float(high)), step=0.5))

    zoom = st.sidebar.slider("Zoom", *chart.zoom.scale_extent, value=1.0, step=0.1)

    fig = Figure(figsize=chart.config.figsize, facecolor=BACKGROUND_COLOR)
    chart.mount(fig)
    try:
        width, height = chart.config.scatter_size
        chart.zoom.scale_by(zoom, (width / 2, height / 2))
        st.pyplot(fig)
    finally:
        chart.unmount()

    visible = filters.visible_subset()
    st.write(f"Showing {len(visible)} of {len(chart.records)} shots")
    with st.expander("Shot distance bins"):
        st.dataframe([{"from_ft": round(b.lower_bound, 1), "to_ft": round(b.upper_bound, 1), "shots": b.count}
                      for b in chart.bins])


if __name__ == "__main__":
    main()
