# src/shot_chart/reconcile.py
"""
Keyed enter/update/exit reconciliation of scatter points.

Each shot's visual element is keyed by its record index. Elements for shots
that stay visible are kept as they are; new shots get a fresh element and
shots that leave the visible subset lose theirs. The matplotlib layer reads
the element map in key order, which keeps repeated redraws identical.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Sequence
import logging

import numpy as np

from shot_chart.records import Record
from shot_chart.settings import MADE_COLORS, MISSED_COLORS
from shot_chart.transforms import CoordinatePipeline

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconcilePlan:
    added: list[int]
    removed: list[int]
    kept: list[int]

    @property
    def unchanged(self) -> bool:
        return not self.added and not self.removed


def plan_reconciliation(current_keys: Iterable[int], next_keys: Iterable[int]) -> ReconcilePlan:
    """Diff two key sets. ``added``/``kept`` follow ``next_keys`` order, ``removed`` is sorted."""
    current = set(current_keys)
    ordered_next = list(dict.fromkeys(next_keys))
    wanted = set(ordered_next)
    return ReconcilePlan(
        added=[k for k in ordered_next if k not in current],
        removed=sorted(current - wanted),
        kept=[k for k in ordered_next if k in current],
    )


@dataclass(frozen=True)
class PointElement:
    """A drawn shot, positioned in base (un-zoomed) screen coordinates."""
    key: int
    x: float
    y: float
    facecolor: str
    edgecolor: str


class ViewReconciler:
    def __init__(self, pipeline: CoordinatePipeline,
                 made_colors: tuple[str, str] = MADE_COLORS,
                 missed_colors: tuple[str, str] = MISSED_COLORS):
        self.pipeline = pipeline
        self.made_colors = made_colors
        self.missed_colors = missed_colors
        self.elements: dict[int, PointElement] = {}
        self.records: dict[int, Record] = {}

    def __len__(self):
        return len(self.elements)

    def create(self, record: Record) -> PointElement:
        # zoom is applied by the shared affine at draw time, not baked in here
        bx, by = self.pipeline.to_base(record.position.x, record.position.y)
        face, edge = self.made_colors if record.made else self.missed_colors
        return PointElement(record.index, float(bx), float(by), face, edge)

    def reconcile(self, visible: Sequence[Record]) -> ReconcilePlan:
        by_key = {r.index: r for r in visible}
        plan = plan_reconciliation(self.elements.keys(), by_key.keys())
        for key in plan.removed:
            del self.elements[key]
            del self.records[key]
        for key in plan.added:
            self.elements[key] = self.create(by_key[key])
            self.records[key] = by_key[key]
        logger.debug(f"Reconciled points: +{len(plan.added)} -{len(plan.removed)} ={len(plan.kept)}")
        return plan

    def clear(self):
        self.elements.clear()
        self.records.clear()

    def keys(self) -> list[int]:
        return sorted(self.elements)

    def offsets(self) -> np.ndarray:
        if not self.elements:
            return np.empty((0, 2))
        return np.array([(self.elements[k].x, self.elements[k].y) for k in self.keys()])

    def facecolors(self) -> list[str]:
        return [self.elements[k].facecolor for k in self.keys()]

    def edgecolors(self) -> list[str]:
        return [self.elements[k].edgecolor for k in self.keys()]

    def record_at(self, position: int) -> Record:
        """Record drawn at ``position`` in key order (what a PathCollection hit test returns)."""
        return self.records[self.keys()[position]]
