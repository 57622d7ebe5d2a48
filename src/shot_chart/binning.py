# src/shot_chart/binning.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Sequence
import logging
import math

import numpy as np

from shot_chart.records import Record
from shot_chart.settings import BIN_COUNT, HIST_FALLBACK_MAX, HIST_QUANTILE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bin:
    lower_bound: float
    upper_bound: float
    count: int


def finite_distances(records: Iterable[Record]) -> np.ndarray:
    values = np.fromiter((r.distance for r in records), dtype=float)
    return values[np.isfinite(values)]


def histogram_domain(records: Sequence[Record], quantile: float = HIST_QUANTILE,
                     fallback: float = HIST_FALLBACK_MAX) -> tuple[float, float]:
    """
    ``(0, q)`` with ``q`` the linear-interpolated quantile of the finite
    distances across the whole dataset. Outliers past the quantile fall off
    the axis instead of squashing every bar to the left.
    """
    values = finite_distances(records)
    if values.size == 0:
        logger.info(f"No finite distances; histogram domain falls back to [0, {fallback}]")
        return 0.0, float(fallback)
    upper = float(np.quantile(values, quantile))
    if not math.isfinite(upper) or upper <= 0:
        return 0.0, float(fallback)
    return 0.0, upper


def bin_edges(domain: tuple[float, float], bin_count: int = BIN_COUNT) -> np.ndarray:
    if bin_count <= 0:
        raise ValueError(f"bin_count must be positive, got {bin_count}")
    return np.linspace(domain[0], domain[1], bin_count + 1)


def compute_bins(records: Iterable[Record], domain: tuple[float, float],
                 bin_count: int = BIN_COUNT) -> list[Bin]:
    """
    Count finite distances into ``bin_count`` uniform bins over ``domain``.

    Bins are half-open ``[lo, hi)`` except the last, which also takes the
    upper bound. Values outside the domain are not counted.
    """
    edges = bin_edges(domain, bin_count)
    values = finite_distances(records)
    values = values[(values >= domain[0]) & (values <= domain[1])]
    counts, _ = np.histogram(values, bins=edges)
    return [Bin(float(lo), float(hi), int(c)) for lo, hi, c in zip(edges[:-1], edges[1:], counts)]


def bin_count_max(bins: Sequence[Bin]) -> int:
    return max((b.count for b in bins), default=0)


def nice_upper(value: float) -> float:
    """Round ``value`` up to 1, 2, 5 or 10 times a power of ten."""
    if not math.isfinite(value) or value <= 0:
        return 1.0
    magnitude = 10 ** math.floor(math.log10(value))
    for step in (1, 2, 5, 10):
        if value <= step * magnitude:
            return float(step * magnitude)
    return float(10 * magnitude)
