import logging

import matplotlib.pyplot as plt
import pandas as pd
import pytest

from shot_chart.settings import SHOT_DATA_CSV
from shot_chart.shot_chart_main import load_shots_csv, parse_args, run_chart


@pytest.fixture
def shots_csv(tmp_path, raw_rows):
    path = tmp_path / "curry_shots.csv"
    pd.DataFrame(raw_rows).to_csv(path, index=False)
    return path


def test_load_keeps_raw_strings(shots_csv):
    shots = load_shots_csv(shots_csv)
    assert len(shots) == 5
    assert shots.loc[0, "SHOT_MADE_FLAG"] == "TRUE"
    # blanks stay blank for the normalizer
    assert shots.loc[1, "GAME_DATE"] == ""


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_shots_csv(tmp_path / "nope.csv")


def test_load_warns_about_missing_columns(tmp_path, caplog):
    path = tmp_path / "partial.csv"
    pd.DataFrame({"LOC_X": [1], "LOC_Y": [2]}).to_csv(path, index=False)
    with caplog.at_level(logging.WARNING, logger="shot_chart.shot_chart_main"):
        load_shots_csv(path)
    assert "SHOT_DISTANCE" in caplog.text


def test_run_chart_without_gui(shots_csv):
    chart = run_chart(shots_csv, show=False)
    try:
        assert chart.mounted
        assert chart.title == "curry_shots Shot Chart"
        assert len(chart.records) == 5
        assert chart.records[0].made
        assert chart.records[0].timestamp.year == 2004
    finally:
        fig = chart.figure
        chart.unmount()
        plt.close(fig)


def test_parse_args_defaults_and_overrides():
    args = parse_args([])
    assert args.csv == str(SHOT_DATA_CSV)
    assert args.title is None

    args = parse_args(["--csv", "shots.csv", "--title", "Curry", "--debug"])
    assert (args.csv, args.title, args.debug) == ("shots.csv", "Curry", True)
