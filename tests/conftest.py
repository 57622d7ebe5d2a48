import matplotlib

matplotlib.use("Agg")

import pytest

from shot_chart.records import normalize_rows

COLUMNS = {
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


def _row(player, team, made, distance, x, y, date="", period="", mins="", secs=""):
    return {
        "LOC_X": x, "LOC_Y": y, "SHOT_MADE_FLAG": made,
        "PLAYER_NAME": player, "TEAM_NAME": team, "SHOT_DISTANCE": distance,
        "GAME_DATE": date, "PERIOD": period,
        "MINUTES_REMAINING": mins, "SECONDS_REMAINING": secs,
    }


@pytest.fixture
def columns():
    return dict(COLUMNS)


@pytest.fixture
def raw_rows():
    """Five shots; only the first is player A + made + 0-10 ft."""
    return [
        _row("A", "T1", "TRUE", "5", "10", "20", "03-12-2004", "1", "5", "7"),
        _row("A", "T1", "0", "5", "-30", "40"),
        _row("A", "T2", "1", "15", "120", "90", "11-02-2021", "2", "11", "30"),
        _row("B", "T1", "TRUE", "5", "0", "45"),
        _row("B", "T2", False, "30", "-220", "250", "not-a-date", "4", "", ""),
    ]


@pytest.fixture
def records(raw_rows, columns):
    return normalize_rows(raw_rows, columns)
