"""
view.py — View state + View Transform Stack for figure_renderer

This file contains ONLY:
- ViewState: the explicit {zoom, pan, flip_x, flip_y, rotation, show_grid}
  value object owned by the host / controller
- ViewTransforms: the composed screen-space transforms for one render

Composition order (outermost first, as an SVG transform list reads):

    grid  : pan . zoom@center
    shape : pan . zoom@center . rotate@center . flip@center
    text  : local counter-transform undoing rotate + flip around the anchor

All transforms are matplotlib Affine2D objects so the matplotlib backend,
the SVG backend and pointer inversion share the exact same matrices.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Tuple

import numpy as np
from matplotlib.transforms import Affine2D

from geometry_canvas.config import settings
from .commands import Matrix
from .geometry_common import normalize_degrees
from .mapper import Canvas


def clamp_zoom(z: float, lo: float = settings.ZOOM_MIN, hi: float = settings.ZOOM_MAX) -> float:
    # rounding keeps repeated 0.1 steps from drifting past the clamp edges
    return round(min(max(float(z), lo), hi), 6)


# ============================================================================
# VIEW STATE
# ============================================================================

@dataclass(frozen=True)
class ViewState:
    zoom: float = 1.0
    pan: Tuple[float, float] = (0.0, 0.0)
    flip_x: bool = False
    flip_y: bool = False
    rotation: float = 0.0   # degrees, [0, 360)
    show_grid: bool = False

    def zoomed_by(self, delta: float) -> "ViewState":
        return replace(self, zoom=clamp_zoom(self.zoom + delta))

    def with_zoom(self, zoom: float) -> "ViewState":
        return replace(self, zoom=clamp_zoom(zoom))

    def panned_by(self, dx: float, dy: float) -> "ViewState":
        return replace(self, pan=(self.pan[0] + float(dx), self.pan[1] + float(dy)))

    def rotated_by(self, degrees: float) -> "ViewState":
        return replace(self, rotation=normalize_degrees(self.rotation + degrees))

    def toggled_grid(self) -> "ViewState":
        return replace(self, show_grid=not self.show_grid)

    def toggled_flip_x(self) -> "ViewState":
        return replace(self, flip_x=not self.flip_x)

    def toggled_flip_y(self) -> "ViewState":
        return replace(self, flip_y=not self.flip_y)

    def reset(self) -> "ViewState":
        """Back to zoom 1, no pan, no rotation. Flips and grid are left alone."""
        return replace(self, zoom=1.0, pan=(0.0, 0.0), rotation=0.0)

    @property
    def flip_scale(self) -> Tuple[float, float]:
        return (-1.0 if self.flip_x else 1.0, -1.0 if self.flip_y else 1.0)


# ============================================================================
# TRANSFORMS
# ============================================================================

def grid_transform(view: ViewState, canvas: Canvas) -> Affine2D:
    cx, cy = canvas.center
    return (
        Affine2D()
        .translate(-cx, -cy)
        .scale(view.zoom)
        .translate(cx, cy)
        .translate(view.pan[0], view.pan[1])
    )


def shape_transform(view: ViewState, canvas: Canvas) -> Affine2D:
    cx, cy = canvas.center
    fx, fy = view.flip_scale
    return (
        Affine2D()
        .translate(-cx, -cy)
        .scale(fx, fy)
        .rotate_deg(view.rotation)
        .scale(view.zoom)
        .translate(cx, cy)
        .translate(view.pan[0], view.pan[1])
    )


def text_counter_transform(view: ViewState, x: float, y: float) -> Affine2D:
    """
    Local transform for a text node anchored at (x, y) inside the shape
    group: inverse rotation, then inverse flip, both about the anchor.
    """
    fx, fy = view.flip_scale
    return (
        Affine2D()
        .translate(-x, -y)
        .rotate_deg(-view.rotation)
        .scale(fx, fy)
        .translate(x, y)
    )


def as_matrix(t: Affine2D) -> Matrix:
    """Affine2D -> SVG-order (a, b, c, d, e, f)."""
    m = t.get_matrix()
    return (
        float(m[0, 0]),
        float(m[1, 0]),
        float(m[0, 1]),
        float(m[1, 1]),
        float(m[0, 2]),
        float(m[1, 2]),
    )


def from_matrix(m: Matrix) -> Affine2D:
    """SVG-order (a, b, c, d, e, f) -> Affine2D."""
    a, b, c, d, e, f = m
    return Affine2D(np.array([[a, c, e], [b, d, f], [0.0, 0.0, 1.0]], dtype=float))


@dataclass(frozen=True, eq=False)
class ViewTransforms:
    grid: Affine2D
    shape: Affine2D

    @classmethod
    def build(cls, view: ViewState, canvas: Canvas) -> "ViewTransforms":
        return cls(grid=grid_transform(view, canvas), shape=shape_transform(view, canvas))

    def screen_to_shape(self, sx: float, sy: float) -> Tuple[float, float]:
        """Pointer position -> untransformed (mapper) screen coordinates."""
        x, y = self.shape.inverted().transform((sx, sy))
        return (float(x), float(y))

    def shape_to_screen(self, x: float, y: float) -> Tuple[float, float]:
        sx, sy = self.shape.transform((x, y))
        return (float(sx), float(sy))
