"""
mapper.py — Coordinate Mapper for figure_renderer

This file contains ONLY:
- Canvas (host-supplied sizing)
- LinearScale (one affine axis map with an exact inverse)
- CoordinateMapper (data <-> screen, plain or square/grid mode)

Screen y grows downward, data y grows upward, so the y scale always runs
from the bottom padding edge to the top one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

from geometry_canvas.config import settings
from .geometry_bounds import Bounds

Number = Union[float, np.ndarray]


@dataclass(frozen=True)
class Canvas:
    width: float = 800.0
    height: float = 600.0
    padding: float = 80.0

    @classmethod
    def from_settings(cls) -> "Canvas":
        return cls(
            width=float(settings.CANVAS_WIDTH),
            height=float(settings.CANVAS_HEIGHT),
            padding=float(settings.CANVAS_PADDING),
        )

    @property
    def center(self) -> Tuple[float, float]:
        return (0.5 * self.width, 0.5 * self.height)

    @property
    def inner_width(self) -> float:
        return max(1.0, self.width - 2.0 * self.padding)

    @property
    def inner_height(self) -> float:
        return max(1.0, self.height - 2.0 * self.padding)


@dataclass(frozen=True)
class LinearScale:
    """d3-style linear scale: [d0, d1] -> [r0, r1]."""

    d0: float
    d1: float
    r0: float
    r1: float

    def __post_init__(self) -> None:
        if self.d1 == self.d0:
            object.__setattr__(self, "d1", self.d0 + 1.0)

    @property
    def slope(self) -> float:
        return (self.r1 - self.r0) / (self.d1 - self.d0)

    def __call__(self, v: Number) -> Number:
        return self.r0 + (v - self.d0) * self.slope

    def invert(self, s: Number) -> Number:
        return self.d0 + (s - self.r0) / self.slope


@dataclass(frozen=True)
class CoordinateMapper:
    x: LinearScale
    y: LinearScale
    canvas: Canvas
    square: bool = False

    # ------------------------------------------------------------------
    # construction
    # ------------------------------------------------------------------

    @classmethod
    def from_bounds(
        cls,
        bounds: Bounds,
        canvas: Canvas,
        square: bool = False,
        min_grid_span: float = settings.MIN_GRID_SPAN,
    ) -> "CoordinateMapper":
        p = canvas.padding
        if not square:
            return cls(
                x=LinearScale(bounds.x_min, bounds.x_max, p, canvas.width - p),
                y=LinearScale(bounds.y_min, bounds.y_max, canvas.height - p, p),
                canvas=canvas,
                square=False,
            )

        # One shared span, centred on the data origin. The span also has to
        # reach the farthest coordinate or an off-origin figure is clipped.
        reach = max(abs(bounds.x_min), abs(bounds.x_max), abs(bounds.y_min), abs(bounds.y_max))
        span = max(bounds.width, bounds.height, float(min_grid_span), 2.0 * reach)

        w, h = canvas.inner_width, canvas.inner_height
        if w >= h:
            half_y = 0.5 * span
            half_x = half_y * (w / h)
        else:
            half_x = 0.5 * span
            half_y = half_x * (h / w)

        return cls(
            x=LinearScale(-half_x, half_x, p, p + w),
            y=LinearScale(-half_y, half_y, p + h, p),
            canvas=canvas,
            square=True,
        )

    # ------------------------------------------------------------------
    # mapping
    # ------------------------------------------------------------------

    def to_screen(self, x: float, y: float) -> Tuple[float, float]:
        return (float(self.x(x)), float(self.y(y)))

    def to_data(self, sx: float, sy: float) -> Tuple[float, float]:
        return (float(self.x.invert(sx)), float(self.y.invert(sy)))

    def to_screen_array(self, xy: np.ndarray) -> np.ndarray:
        """(n, 2) data samples -> (n, 2) screen coordinates."""
        arr = np.asarray(xy, dtype=float).reshape(-1, 2)
        return np.column_stack([self.x(arr[:, 0]), self.y(arr[:, 1])])

    @property
    def px_per_unit_x(self) -> float:
        return abs(self.x.slope)

    @property
    def px_per_unit_y(self) -> float:
        return abs(self.y.slope)

    @property
    def x_domain(self) -> Tuple[float, float]:
        return (self.x.d0, self.x.d1)

    @property
    def y_domain(self) -> Tuple[float, float]:
        return (self.y.d0, self.y.d1)
