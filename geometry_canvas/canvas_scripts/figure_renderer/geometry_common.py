"""
geometry_common.py — Shared geometry helpers for figure_renderer

This file contains ONLY:
- small, dependency-light helpers shared by:
  - annotations.py       (arc / glyph / label geometry)
  - geometry_bounds.py   (bounds)
  - geometry_renderer.py (drawing)
  - editing.py           (summaries)

Keep this file free of imports from other project modules to avoid cycles.
"""

from __future__ import annotations

from typing import Any, Optional, Tuple
import math

Vec = Tuple[float, float]

EPS = 1e-9


# ============================================================================
# BASIC COERCION / FORMATTING
# ============================================================================

def safe_float(x: Any) -> Optional[float]:
    try:
        v = float(x)
    except Exception:
        return None
    return v if math.isfinite(v) else None


def format_number(v: float, digits: int = 2) -> str:
    """
    Short display form for lengths, radii and angle values.

      5.0    -> "5"
      2.5    -> "2.5"
      1.2345 -> "1.23"
    """
    x = float(v)
    if abs(x - round(x)) < 1e-6:
        return str(int(round(x)))
    s = f"{x:.{digits}f}".rstrip("0").rstrip(".")
    return "0" if s in {"-0", ""} else s


def format_degrees(v: float) -> str:
    return f"{format_number(v)}°"


# ============================================================================
# VECTORS
# ============================================================================

def sub(a: Vec, b: Vec) -> Vec:
    return (a[0] - b[0], a[1] - b[1])


def add(a: Vec, b: Vec) -> Vec:
    return (a[0] + b[0], a[1] + b[1])


def scale(a: Vec, k: float) -> Vec:
    return (a[0] * k, a[1] * k)


def midpoint(a: Vec, b: Vec) -> Vec:
    return (0.5 * (a[0] + b[0]), 0.5 * (a[1] + b[1]))


def cross(a: Vec, b: Vec) -> float:
    """z-component of the 2-D cross product a x b (positive => b is CCW of a)."""
    return a[0] * b[1] - a[1] * b[0]


def unit(v: Vec) -> Optional[Vec]:
    """Unit vector, or None for a (near) zero-length vector."""
    n = math.hypot(v[0], v[1])
    if n <= EPS:
        return None
    return (v[0] / n, v[1] / n)


def perpendicular(v: Vec) -> Vec:
    """v rotated by +90 degrees."""
    return (-v[1], v[0])


def rotate(v: Vec, theta: float) -> Vec:
    c = math.cos(theta)
    s = math.sin(theta)
    return (v[0] * c - v[1] * s, v[0] * s + v[1] * c)


# ============================================================================
# ANGLES
# ============================================================================

def angle_of(v: Vec) -> float:
    """Polar angle (radians) of v."""
    return math.atan2(v[1], v[0])


def angle_deg(center: Vec, pt: Vec) -> float:
    """Angle (deg) of pt relative to center."""
    cx, cy = center
    x, y = pt
    return math.degrees(math.atan2(y - cy, x - cx))


def normalize_signed(theta: float) -> float:
    """Wrap radians into (-pi, pi]."""
    t = math.fmod(theta, 2.0 * math.pi)
    if t <= -math.pi:
        t += 2.0 * math.pi
    elif t > math.pi:
        t -= 2.0 * math.pi
    return t


def normalize_degrees(theta: float) -> float:
    """Wrap degrees into [0, 360)."""
    t = math.fmod(float(theta), 360.0)
    if t < 0:
        t += 360.0
    return 0.0 if t >= 360.0 else t
