# src/shot_chart/filter_state.py
"""
Live filter criteria for the shot chart.

All criteria are ANDed. The distance band and the brushed distance range are
two separate distance filters and both apply when both are set. Every
mutation invalidates the cached visible subset and emits a ``"changed"``
signal carrying the criterion name.
"""

from __future__ import annotations
from enum import Enum
from typing import Callable, Iterable, Optional, Sequence
import logging
import math

from matplotlib import cbook

from shot_chart.records import Record, unique_actors, unique_groups
from shot_chart.settings import BAND_THRESHOLDS, DEFAULT_SELECTED_ACTORS

logger = logging.getLogger(__name__)


class Outcome(Enum):
    ALL = "All"
    MADE = "Made"
    MISSED = "Missed"


class DistanceBand(Enum):
    ALL = "All"
    NEAR = "0–10"
    MID = "10–23"
    FAR = "23+"


def classify_distance_band(distance: float, thresholds=BAND_THRESHOLDS) -> Optional[DistanceBand]:
    """Near <= 10 ft, Mid in (10, 23], Far > 23. Non-finite distances have no band."""
    if not math.isfinite(distance):
        return None
    near, far = thresholds
    if distance <= near:
        return DistanceBand.NEAR
    elif distance <= far:
        return DistanceBand.MID
    return DistanceBand.FAR


def _coerce_enum(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    for member in enum_cls:
        if value in (member.value, member.name):
            return member
    raise ValueError(f"Unknown {enum_cls.__name__}: {value!r}")


class FilterState:
    """
    Current value of every filter criterion plus the derived visible subset.

    Listeners connect with ``callbacks.connect("changed", fn)`` and receive the
    name of the criterion that changed; ``callbacks.disconnect(cid)`` detaches.
    """

    CRITERIA = ("actors", "groups", "outcome", "distance_band", "distance_range")

    def __init__(self, records: Sequence[Record],
                 selected_actors: Iterable[str] = (),
                 selected_groups: Iterable[str] = (),
                 outcome=Outcome.ALL,
                 distance_band=DistanceBand.ALL,
                 distance_range: Optional[tuple[float, float]] = None,
                 band_thresholds=BAND_THRESHOLDS):
        self.records = list(records)
        self.selected_actors = frozenset(selected_actors)
        self.selected_groups = frozenset(selected_groups)
        self.outcome = _coerce_enum(Outcome, outcome)
        self.distance_band = _coerce_enum(DistanceBand, distance_band)
        self.distance_range = self._normalize_range(distance_range)
        self.band_thresholds = band_thresholds
        self.callbacks = cbook.CallbackRegistry(exception_handler=None, signals=["changed"])
        self._visible: Optional[list[Record]] = None

    @classmethod
    def with_defaults(cls, records: Sequence[Record],
                      n_actors: int = DEFAULT_SELECTED_ACTORS) -> "FilterState":
        """First ``n_actors`` players (sorted) and every team selected."""
        actors = unique_actors(records)
        return cls(records,
                   selected_actors=actors[:min(n_actors, len(actors))],
                   selected_groups=unique_groups(records))

    def __repr__(self):
        return (f"FilterState(actors={len(self.selected_actors)}, groups={len(self.selected_groups)}, "
                f"outcome={self.outcome.value}, band={self.distance_band.value}, "
                f"range={self.distance_range})")

    # ------------------------------------------------------------------
    # predicates
    # ------------------------------------------------------------------
    def _outcome_ok(self, record: Record) -> bool:
        if self.outcome is Outcome.MADE:
            return record.made
        if self.outcome is Outcome.MISSED:
            return not record.made
        return True

    def _band_ok(self, record: Record) -> bool:
        if self.distance_band is DistanceBand.ALL:
            return True
        return classify_distance_band(record.distance, self.band_thresholds) is self.distance_band

    def _range_ok(self, record: Record) -> bool:
        if self.distance_range is None:
            return True
        low, high = self.distance_range
        # NaN compares False, so unknown distances drop out here
        return low <= record.distance <= high

    def matches_context(self, record: Record) -> bool:
        """Every criterion except the brushed distance range."""
        return (record.actor in self.selected_actors
                and record.group in self.selected_groups
                and self._outcome_ok(record)
                and self._band_ok(record))

    def matches(self, record: Record) -> bool:
        return self.matches_context(record) and self._range_ok(record)

    # ------------------------------------------------------------------
    # derived subsets
    # ------------------------------------------------------------------
    def visible_subset(self) -> list[Record]:
        if self._visible is None:
            self._visible = [r for r in self.records if self.matches(r)]
            logger.debug(f"Visible subset recomputed: {len(self._visible)} of {len(self.records)} shots ({self!r})")
        return self._visible

    def visible_indices(self) -> list[int]:
        return [r.index for r in self.visible_subset()]

    def context_subset(self) -> list[Record]:
        return [r for r in self.records if self.matches_context(r)]

    # ------------------------------------------------------------------
    # mutators
    # ------------------------------------------------------------------
    def _changed(self, criterion: str):
        self._visible = None
        self.callbacks.process("changed", criterion)

    def _set(self, attr: str, value, criterion: str) -> bool:
        if getattr(self, attr) == value:
            return False
        setattr(self, attr, value)
        self._changed(criterion)
        return True

    def set_actors(self, actors: Iterable[str]) -> bool:
        return self._set("selected_actors", frozenset(actors), "actors")

    def set_groups(self, groups: Iterable[str]) -> bool:
        return self._set("selected_groups", frozenset(groups), "groups")

    def toggle_actor(self, actor: str) -> bool:
        return self.set_actors(self.selected_actors ^ {actor})

    def toggle_group(self, group: str) -> bool:
        return self.set_groups(self.selected_groups ^ {group})

    def set_outcome(self, outcome) -> bool:
        return self._set("outcome", _coerce_enum(Outcome, outcome), "outcome")

    def set_distance_band(self, band) -> bool:
        return self._set("distance_band", _coerce_enum(DistanceBand, band), "distance_band")

    def set_distance_range(self, distance_range: Optional[tuple[float, float]]) -> bool:
        return self._set("distance_range", self._normalize_range(distance_range), "distance_range")

    def clear_distance_range(self) -> bool:
        return self.set_distance_range(None)

    @staticmethod
    def _normalize_range(distance_range) -> Optional[tuple[float, float]]:
        if distance_range is None:
            return None
        low, high = (float(v) for v in distance_range)
        if not (math.isfinite(low) and math.isfinite(high)):
            return None
        return (min(low, high), max(low, high))

    def connect(self, callback: Callable[[str], None]) -> int:
        return self.callbacks.connect("changed", callback)

    def disconnect(self, cid: int):
        self.callbacks.disconnect(cid)
