"""
geometry_bounds.py — Bounds Calculator for figure_renderer

This file contains ONLY:
- compute_scene_bounds: the padded data extent covering a scene
- the Bounds value type

It intentionally does NOT contain:
- data -> screen mapping (mapper.py)
- geometry rendering (geometry_renderer.py)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional

from geometry_canvas.config import settings
from .curves import sample_curve
from .scene import PointArc, Scene


@dataclass(frozen=True)
class Bounds:
    x_min: float
    x_max: float
    y_min: float
    y_max: float

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.y_max - self.y_min


def raw_scene_bounds(scene: Scene) -> Optional[Bounds]:
    """
    Unpadded union of point coordinates, circle boxes and sampled curves.
    None when the scene contributes nothing.
    """
    xs: List[float] = []
    ys: List[float] = []

    points = scene.point_map()
    for p in scene.points:
        xs.append(float(p.x))
        ys.append(float(p.y))

    for c in scene.circles:
        center = points.get(c.center)
        if center is None:
            continue
        r = abs(float(c.radius))
        kind = c.kind
        if isinstance(kind, PointArc):
            # the drawn radius follows the anchors, so cover those too
            for label in (kind.start_label, kind.end_label):
                anchor = points.get(label)
                if anchor is not None:
                    r = max(r, math.hypot(anchor.x - center.x, anchor.y - center.y))
        xs.extend([center.x - r, center.x + r])
        ys.extend([center.y - r, center.y + r])

    for curve in scene.curves:
        xs.extend([float(curve.x_min), float(curve.x_max)])
        samples = sample_curve(curve)
        if samples.size:
            ys.extend([float(samples[:, 1].min()), float(samples[:, 1].max())])

    if not xs or not ys:
        return None
    return Bounds(min(xs), max(xs), min(ys), max(ys))


def _floor_span(lo: float, hi: float, min_span: float):
    if hi - lo >= min_span:
        return lo, hi
    c = 0.5 * (lo + hi)
    return c - 0.5 * min_span, c + 0.5 * min_span


def compute_scene_bounds(
    scene: Scene,
    pad_frac: float = settings.DOMAIN_PAD_FRAC,
    min_span: float = settings.MIN_SPAN,
    default_extent: float = settings.DEFAULT_EXTENT,
) -> Bounds:
    """
    Padded extent handed to the coordinate mapper.

    - empty scene -> [-default_extent, default_extent] on both axes
    - zero-width / zero-height extents are widened to min_span first
    - then each side is pushed out by pad_frac of the span on that axis
    """
    raw = raw_scene_bounds(scene)
    if raw is None:
        e = abs(float(default_extent)) or 10.0
        return Bounds(-e, e, -e, e)

    x_min, x_max = _floor_span(raw.x_min, raw.x_max, min_span)
    y_min, y_max = _floor_span(raw.y_min, raw.y_max, min_span)

    pad_x = (x_max - x_min) * float(pad_frac)
    pad_y = (y_max - y_min) * float(pad_frac)
    return Bounds(x_min - pad_x, x_max + pad_x, y_min - pad_y, y_max + pad_y)
