"""
curves.py — Curve Sampler for figure_renderer

This file contains ONLY:
- sample_curve: Curve -> (n, 2) array of finite (x, y) samples
- curve_label: display text for a curve ("y = 2x²", ...)

Sampling is a pure function of the Curve; nothing is cached between calls.
"""

from __future__ import annotations

import math

import numpy as np

from ..utils import setup_logger
from .geometry_common import format_number
from .scene import Curve

logger = setup_logger(__name__)

_SUBSCRIPT = str.maketrans("0123456789.-", "₀₁₂₃₄₅₆₇₈₉.₋")


def _coefficient(curve: Curve) -> float:
    return 1.0 if curve.coefficient is None else float(curve.coefficient)


def _base(curve: Curve) -> float:
    return math.e if curve.base is None else float(curve.base)


def sample_xs(curve: Curve) -> np.ndarray:
    """x positions from xRange.min to xRange.max, both ends included."""
    n = max(1, int(curve.points))
    if n == 1:
        return np.array([float(curve.x_min)])
    return np.linspace(float(curve.x_min), float(curve.x_max), n)


def evaluate_curve(curve: Curve, xs: np.ndarray) -> np.ndarray:
    """
    y values for the curve family. Out-of-domain samples come back as NaN
    so callers can drop them.
    """
    a = _coefficient(curve)
    t = str(curve.type).strip().lower()

    with np.errstate(all="ignore"):
        if t == "linear":
            return a * xs
        if t == "quadratic":
            return a * xs * xs
        if t == "logarithm":
            base = _base(curve)
            if base <= 0 or abs(base - 1.0) < 1e-12:
                logger.debug(f"Logarithm base {base} has no finite log; curve skipped")
                return np.full_like(xs, np.nan, dtype=float)
            ys = np.full_like(xs, np.nan, dtype=float)
            pos = xs > 0
            ys[pos] = a * np.log(xs[pos]) / math.log(base)
            return ys
        if t == "exponential":
            return a * np.power(_base(curve), xs)

    logger.debug(f"Unknown curve type {curve.type!r}; curve skipped")
    return np.full_like(xs, np.nan, dtype=float)


def sample_curve(curve: Curve) -> np.ndarray:
    """
    Ordered (x, y) samples of the curve as an (n, 2) float array.

    Samples that fall outside the family's domain (log at x <= 0) or that
    overflow are dropped rather than clamped.
    """
    xs = sample_xs(curve).astype(float)
    ys = evaluate_curve(curve, xs)
    keep = np.isfinite(ys)
    dropped = int(xs.size - np.count_nonzero(keep))
    if dropped:
        logger.debug(f"Dropped {dropped} out-of-domain sample(s) from {curve.type} curve")
    return np.column_stack([xs[keep], ys[keep]])


def curve_label(curve: Curve) -> str:
    a = format_number(_coefficient(curve))
    t = str(curve.type).strip().lower()
    if t == "linear":
        return f"y = {a}x"
    if t == "quadratic":
        return f"y = {a}x²"
    if t == "logarithm":
        if curve.base is None or abs(float(curve.base) - math.e) < 1e-12:
            return f"y = {a}ln(x)"
        return f"y = {a}log{format_number(curve.base).translate(_SUBSCRIPT)}(x)"
    if t == "exponential":
        if curve.base is None or abs(float(curve.base) - math.e) < 1e-12:
            return f"y = {a}e^x"
        return f"y = {a}·{format_number(curve.base)}^x"
    return "y = f(x)"
