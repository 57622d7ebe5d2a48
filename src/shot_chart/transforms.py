# src/shot_chart/transforms.py
"""
Coordinate transforms: data space -> base screen space -> zoomed screen space.

The domain scale is fit once from the data extents and never changes. The
zoom transform is the only mutable piece; it owns a single matplotlib
``Affine2D`` that the court layer and the point layer both render through,
so panning or zooming always moves them together.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Sequence
import logging
import math

import numpy as np
from matplotlib.transforms import Affine2D

from shot_chart.records import Record
from shot_chart.settings import (
    DOMAIN_PADDING, FALLBACK_X_DOMAIN, FALLBACK_Y_DOMAIN, ZOOM_EXTENT,
)

logger = logging.getLogger(__name__)


def _as_float(value):
    """numpy arrays stay arrays, everything else becomes a plain float."""
    if np.ndim(value):
        return np.asarray(value, dtype=float)
    return float(value)


@dataclass(frozen=True)
class LinearScale:
    """Linear map from ``domain`` to ``range``; works on scalars and arrays."""
    domain: tuple[float, float]
    range: tuple[float, float]

    @property
    def slope(self) -> float:
        d0, d1 = self.domain
        if d1 == d0:
            return 0.0
        r0, r1 = self.range
        return (r1 - r0) / (d1 - d0)

    def __call__(self, value):
        value = _as_float(value)
        r0, r1 = self.range
        if self.slope == 0.0:
            return value * 0 + (r0 + r1) / 2
        d0, d1 = self.domain
        return r0 + (value - d0) * (r1 - r0) / (d1 - d0)

    def invert(self, pixel):
        pixel = _as_float(pixel)
        d0, d1 = self.domain
        if self.slope == 0.0:
            return pixel * 0 + (d0 + d1) / 2
        r0, r1 = self.range
        return d0 + (pixel - r0) * (d1 - d0) / (r1 - r0)


def finite_extent(values: Iterable[float]):
    """(min, max) of the finite values, or None when there are none."""
    arr = np.asarray(list(values), dtype=float)
    arr = arr[np.isfinite(arr)]
    if arr.size == 0:
        return None
    return float(arr.min()), float(arr.max())


@dataclass(frozen=True)
class DomainScale:
    """Independent x and y scales; y output is inverted (higher y -> smaller pixel)."""
    x: LinearScale
    y: LinearScale

    @classmethod
    def from_records(cls, records: Sequence[Record], width: float, height: float,
                     padding: float = DOMAIN_PADDING,
                     fallback_x: tuple[float, float] = FALLBACK_X_DOMAIN,
                     fallback_y: tuple[float, float] = FALLBACK_Y_DOMAIN) -> "DomainScale":
        x_ext = finite_extent(r.position.x for r in records)
        y_ext = finite_extent(r.position.y for r in records)
        x_dom = fallback_x if x_ext is None else (x_ext[0] - padding, x_ext[1] + padding)
        # keep the baseline visible even when every shot is far from it
        y_dom = fallback_y if y_ext is None else (
            min(fallback_y[0], y_ext[0] - padding), y_ext[1] + padding)
        logger.debug(f"Domain scale fit: x={x_dom}, y={y_dom}")
        return cls(
            x=LinearScale(tuple(x_dom), (0.0, float(width))),
            y=LinearScale(tuple(y_dom), (float(height), 0.0)),
        )

    def __call__(self, x, y):
        return self.x(x), self.y(y)

    def invert(self, px, py):
        return self.x.invert(px), self.y.invert(py)


class ZoomTransform:
    """
    Uniform scale + translate, ``screen = k * base + t``.

    ``k`` is clamped to ``scale_extent``; there is no rotation. Every change is
    mirrored into ``self.affine`` in place so artists holding it follow along.
    """

    def __init__(self, scale_extent: tuple[float, float] = ZOOM_EXTENT):
        lo, hi = scale_extent
        if not 0 < lo <= hi:
            raise ValueError(f"Invalid zoom scale extent {scale_extent}")
        self.scale_extent = (float(lo), float(hi))
        self.k = 1.0
        self.tx = 0.0
        self.ty = 0.0
        self.affine = Affine2D()

    def __repr__(self):
        return f"ZoomTransform(k={self.k:.3f}, tx={self.tx:.1f}, ty={self.ty:.1f})"

    def _sync(self):
        self.affine.clear().scale(self.k).translate(self.tx, self.ty)

    def clamp(self, k: float) -> float:
        lo, hi = self.scale_extent
        return min(max(k, lo), hi)

    def apply(self, px, py):
        return self.k * _as_float(px) + self.tx, self.k * _as_float(py) + self.ty

    def invert(self, sx, sy):
        return (sx - self.tx) / self.k, (sy - self.ty) / self.k

    def scale_by(self, factor: float, focal: tuple[float, float]) -> bool:
        """Zoom by ``factor`` keeping ``focal`` (screen coords) fixed. Returns True if anything moved."""
        if not math.isfinite(factor) or factor <= 0:
            return False
        new_k = self.clamp(self.k * factor)
        if new_k == self.k:
            return False
        fx, fy = focal
        # base point under the cursor stays under the cursor
        bx, by = self.invert(fx, fy)
        self.k = new_k
        self.tx = fx - new_k * bx
        self.ty = fy - new_k * by
        self._sync()
        return True

    def translate_by(self, dx: float, dy: float) -> bool:
        if not (math.isfinite(dx) and math.isfinite(dy)) or (dx == 0 and dy == 0):
            return False
        self.tx += dx
        self.ty += dy
        self._sync()
        return True

    def reset(self):
        self.k, self.tx, self.ty = 1.0, 0.0, 0.0
        self._sync()


class CoordinatePipeline:
    """Domain scale followed by the zoom transform."""

    def __init__(self, domain: DomainScale, zoom: ZoomTransform):
        self.domain = domain
        self.zoom = zoom

    def to_base(self, x, y):
        return self.domain(x, y)

    def to_screen(self, x, y):
        return self.zoom.apply(*self.domain(x, y))

    def to_data(self, sx, sy):
        return self.domain.invert(*self.zoom.invert(sx, sy))
