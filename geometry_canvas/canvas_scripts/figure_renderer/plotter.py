"""
plotter.py — matplotlib backend for figure_renderer

This file contains ONLY:
- plot_drawlist (DrawList -> matplotlib Figure)
- save_png (DrawList -> PNG file)
- arc_vertices (SVG endpoint arc -> sampled polyline, via svgpathtools)

The axes are set up as the canvas itself: x 0..width, y height..0 (y
down), no ticks. Group and text transforms are resolved numerically with
the same Affine2D matrices the SVG backend writes as attributes.
"""

import math
from typing import List, Optional, Tuple

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.colors import to_rgb
from matplotlib.patches import PathPatch, Polygon
from matplotlib.path import Path
from matplotlib.transforms import Affine2D
from svgpathtools import Arc

from geometry_canvas.config import settings
from ..utils import setup_logger
from .commands import (
    DrawList,
    EllipseShape,
    LineShape,
    PathSegment,
    PathShape,
    RectShape,
    Shape,
    TextShape,
)
from .view import from_matrix

logger = setup_logger(__name__)

_HA = {"start": "left", "middle": "center", "end": "right"}
_VA = {"middle": "center", "auto": "baseline"}


# ============================================================================
# ARC SAMPLING
# ============================================================================

def arc_vertices(
    start: Tuple[float, float],
    rx: float,
    ry: float,
    phi_deg: float,
    large_arc: bool,
    sweep: bool,
    end: Tuple[float, float],
    n: int = 48,
) -> np.ndarray:
    """
    Sample one SVG `A` segment (endpoint form) with svgpathtools.
    Returns an (n, 2) array running from `start` to `end`; degenerate radii
    collapse to the straight chord.
    """
    if tuple(start) == tuple(end):
        return np.array([start], dtype=float)
    if abs(rx) < 1e-12 or abs(ry) < 1e-12:
        return np.array([start, end], dtype=float)

    arc = Arc(
        start=complex(*start),
        radius=complex(abs(rx), abs(ry)),
        rotation=float(phi_deg),
        large_arc=bool(large_arc),
        sweep=bool(sweep),
        end=complex(*end),
    )
    pts = [arc.point(t) for t in np.linspace(0.0, 1.0, max(2, int(n)))]
    return np.array([(p.real, p.imag) for p in pts], dtype=float)


def _path_vertices(segments: Tuple[PathSegment, ...]) -> Tuple[np.ndarray, List[int]]:
    verts: List[Tuple[float, float]] = []
    codes: List[int] = []
    start: Optional[Tuple[float, float]] = None
    cur: Optional[Tuple[float, float]] = None

    for seg in segments:
        if seg.op == "M":
            cur = start = (seg.args[0], seg.args[1])
            verts.append(cur)
            codes.append(Path.MOVETO)
        elif seg.op == "L":
            cur = (seg.args[0], seg.args[1])
            verts.append(cur)
            codes.append(Path.LINETO)
        elif seg.op == "Q":
            cx, cy, x, y = seg.args
            verts.extend([(cx, cy), (x, y)])
            codes.extend([Path.CURVE3, Path.CURVE3])
            cur = (x, y)
        elif seg.op == "A" and cur is not None:
            rx, ry, rot, large, sweep, x, y = seg.args
            pts = arc_vertices(cur, rx, ry, rot, bool(large), bool(sweep), (x, y))
            for px, py in pts[1:]:
                verts.append((float(px), float(py)))
                codes.append(Path.LINETO)
            cur = (x, y)
        elif seg.op == "Z" and start is not None:
            verts.append(start)
            codes.append(Path.CLOSEPOLY)
            cur = start

    return np.asarray(verts, dtype=float).reshape(-1, 2), codes


# ============================================================================
# SHAPES
# ============================================================================

def _px_to_pt(px: float, dpi: float) -> float:
    return float(px) * 72.0 / float(dpi)


def _linear_scale(t: Affine2D) -> float:
    m = t.get_matrix()
    return math.sqrt(abs(m[0, 0] * m[1, 1] - m[0, 1] * m[1, 0]))


def _draw_shape(ax: plt.Axes, shape: Shape, t: Affine2D, dpi: float, z: int) -> None:
    k = _linear_scale(t)

    if isinstance(shape, LineShape):
        (x1, y1), (x2, y2) = t.transform([(shape.x1, shape.y1), (shape.x2, shape.y2)])
        ax.plot(
            [x1, x2],
            [y1, y2],
            color=shape.stroke,
            linewidth=_px_to_pt(shape.width * k, dpi),
            linestyle="--" if shape.dash else "-",
            zorder=z,
        )

    elif isinstance(shape, PathShape):
        verts, codes = _path_vertices(shape.segments)
        if not len(codes):
            return
        patch = PathPatch(
            Path(t.transform(verts), codes),
            facecolor=shape.fill if shape.fill else "none",
            edgecolor=shape.stroke,
            linewidth=_px_to_pt(shape.width * k, dpi),
            linestyle="--" if shape.dash else "-",
            zorder=z,
        )
        if shape.fill:
            # stroke stays opaque; only the face takes the opacity
            patch.set_facecolor((*to_rgb(shape.fill), shape.fill_opacity))
        ax.add_patch(patch)

    elif isinstance(shape, EllipseShape):
        ts = np.linspace(0.0, 2.0 * math.pi, 73)
        ring = np.column_stack([shape.cx + shape.rx * np.cos(ts), shape.cy + shape.ry * np.sin(ts)])
        ax.add_patch(
            Polygon(
                t.transform(ring),
                closed=True,
                facecolor=shape.fill if shape.fill else "none",
                edgecolor=shape.stroke if shape.stroke else "none",
                linewidth=_px_to_pt(shape.width * k, dpi),
                zorder=z,
            )
        )

    elif isinstance(shape, RectShape):
        corners = [
            (shape.x, shape.y),
            (shape.x + shape.w, shape.y),
            (shape.x + shape.w, shape.y + shape.h),
            (shape.x, shape.y + shape.h),
        ]
        ax.add_patch(
            Polygon(
                t.transform(corners),
                closed=True,
                facecolor=shape.fill,
                edgecolor=shape.stroke if shape.stroke else "none",
                zorder=z,
            )
        )

    elif isinstance(shape, TextShape):
        full = t if shape.transform is None else from_matrix(shape.transform) + t
        x, y = full.transform((shape.x, shape.y))
        m = full.get_matrix()
        # y-down canvas: a clockwise screen rotation is a negative text angle
        rotation = -math.degrees(math.atan2(m[1, 0], m[0, 0]))
        ax.text(
            x,
            y,
            shape.text,
            color=shape.color,
            fontsize=_px_to_pt(shape.size * _linear_scale(full), dpi),
            ha=_HA.get(shape.anchor, "center"),
            va=_VA.get(shape.baseline, "center"),
            rotation=rotation,
            rotation_mode="anchor",
            zorder=z,
        )


# ============================================================================
# ENTRY POINTS
# ============================================================================

def plot_drawlist(drawlist: DrawList, dpi: int = settings.RENDER_DPI) -> plt.Figure:
    """Rasterise one DrawList onto a fresh figure sized to the canvas."""
    w, h = float(drawlist.width), float(drawlist.height)
    fig = plt.figure(figsize=(w / dpi, h / dpi), dpi=dpi)
    ax = fig.add_axes((0.0, 0.0, 1.0, 1.0))
    ax.set_xlim(0.0, w)
    ax.set_ylim(h, 0.0)
    ax.set_axis_off()

    z = 1
    for group in drawlist.groups:
        t = from_matrix(group.transform)
        for shape in group.items:
            _draw_shape(ax, shape, t, dpi, z)
            z += 1

    logger.debug(f"Plotted {z - 1} shape(s) at {int(w)}x{int(h)} @ {dpi}dpi")
    return fig


def save_png(drawlist: DrawList, path, dpi: int = settings.RENDER_DPI) -> None:
    fig = plot_drawlist(drawlist, dpi=dpi)
    try:
        fig.savefig(path, dpi=dpi)
    finally:
        plt.close(fig)
