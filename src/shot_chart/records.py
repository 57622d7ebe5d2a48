# src/shot_chart/records.py
"""
Record normalization for raw shot rows.

Raw rows come from a CSV (via pandas) or any sequence of mappings. Every row
becomes exactly one immutable ``Record``; nothing is dropped here. Malformed
values turn into sentinels (``NaN`` / ``None`` / ``False``) so downstream
filtering and binning can exclude them explicitly.
"""

from __future__ import annotations
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Iterable, Mapping, NamedTuple, Optional
import logging
import math

import pandas as pd

from shot_chart.settings import DATE_FORMAT, DEFAULT_COLUMNS

logger = logging.getLogger(__name__)


class Point(NamedTuple):
    x: float
    y: float


@dataclass(frozen=True)
class Record:
    """One shot. ``index`` is its position in the normalized sequence."""
    index: int
    position: Point
    made: bool
    actor: str
    group: str
    distance: float
    timestamp: Optional[datetime] = None
    period: Optional[int] = None
    minutes_remaining: Optional[int] = None
    seconds_remaining: Optional[int] = None


# camelCase keys used by chart configs -> attribute names
_KEY_ALIASES = {
    "minsLeft": "mins_left",
    "secsLeft": "secs_left",
}


@dataclass(frozen=True)
class ColumnMapping:
    """Names of the raw columns feeding each Record field."""
    x: str = DEFAULT_COLUMNS["x"]
    y: str = DEFAULT_COLUMNS["y"]
    made: str = DEFAULT_COLUMNS["made"]
    player: str = DEFAULT_COLUMNS["player"]
    team: str = DEFAULT_COLUMNS["team"]
    distance: str = DEFAULT_COLUMNS["distance"]
    date: str = DEFAULT_COLUMNS["date"]
    quarter: str = DEFAULT_COLUMNS["quarter"]
    mins_left: str = DEFAULT_COLUMNS["minsLeft"]
    secs_left: str = DEFAULT_COLUMNS["secsLeft"]

    @classmethod
    def from_dict(cls, columns: Optional[Mapping[str, str]]) -> "ColumnMapping":
        """Build a mapping from ``{x, y, made, player, team, distance, date,
        quarter, minsLeft, secsLeft}``; missing keys keep the NBA defaults."""
        if columns is None:
            return cls()
        if isinstance(columns, ColumnMapping):
            return columns
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, column in columns.items():
            name = _KEY_ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown column mapping key: {key}")
            kwargs[name] = column
        return cls(**kwargs)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def to_float(value: Any) -> float:
    """Numeric coercion; empty or unparsable values become NaN."""
    if _is_missing(value):
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def to_optional_int(value: Any) -> Optional[int]:
    number = to_float(value)
    if not math.isfinite(number):
        return None
    return int(number)


def to_made(value: Any) -> bool:
    """True for "TRUE", True, or anything whose numeric value is 1."""
    if isinstance(value, str) and value == "TRUE":
        return True
    if isinstance(value, bool):
        return value
    return to_float(value) == 1.0


def to_date(value: Any, fmt: str = DATE_FORMAT) -> Optional[datetime]:
    if isinstance(value, datetime):
        return None if pd.isna(value) else value
    if not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value.strip(), fmt)
    except ValueError:
        return None


def to_label(value: Any) -> str:
    return "" if _is_missing(value) else str(value)


def _iter_rows(rows) -> Iterable[Mapping[str, Any]]:
    if isinstance(rows, pd.DataFrame):
        return rows.to_dict("records")
    return rows


def normalize_row(index: int, row: Mapping[str, Any], columns: ColumnMapping) -> Record:
    return Record(
        index=index,
        position=Point(to_float(row.get(columns.x)), to_float(row.get(columns.y))),
        made=to_made(row.get(columns.made)),
        actor=to_label(row.get(columns.player)),
        group=to_label(row.get(columns.team)),
        distance=to_float(row.get(columns.distance)),
        timestamp=to_date(row.get(columns.date)),
        period=to_optional_int(row.get(columns.quarter)),
        minutes_remaining=to_optional_int(row.get(columns.mins_left)),
        seconds_remaining=to_optional_int(row.get(columns.secs_left)),
    )


def normalize_rows(rows, columns=None) -> list[Record]:
    """
    Convert raw rows into Records of equal length and order.

    Args:
        rows: sequence of mappings, or a pandas DataFrame.
        columns: ColumnMapping or dict of column names (NBA defaults if None).

    Returns:
        list of Record, ``records[i].index == i``.
    """
    mapping = ColumnMapping.from_dict(columns)
    records = [normalize_row(i, row, mapping) for i, row in enumerate(_iter_rows(rows))]
    logger.info(f"Normalized {len(records)} shot rows")
    return records


def unique_actors(records: Iterable[Record]) -> list[str]:
    return sorted({r.actor for r in records})


def unique_groups(records: Iterable[Record]) -> list[str]:
    return sorted({r.group for r in records})
