"""
annotations.py — Geometric Annotation Engine for figure_renderer

This file contains ONLY:
- angle geometry (sweep direction from the raw rays, end ray from `value`)
  and the angle marker shapes (right-angle glyph or arc + degree label)
- circular arc / sector geometry (point-anchored or numeric) and shapes
- radius and segment-length annotations (straight or bowed)

It intentionally does NOT contain:
- entity lookup / skipping of unresolved labels (geometry_renderer.py)
- view transforms (view.py)

Geometry is derived in DATA space (angles CCW from +x, y up) and only
turned into screen coordinates at the end, through the mapper's per-axis
pixel scales. Screen y is flipped, so a data-CCW sweep is drawn with SVG
sweep-flag 0.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional
import math

from geometry_canvas.config import settings
from .commands import EllipseShape, LineShape, PathBuilder, PathShape, Shape, TextShape
from .geometry_common import (
    EPS,
    Vec,
    add,
    angle_of,
    cross,
    format_degrees,
    format_number,
    midpoint,
    normalize_signed,
    perpendicular,
    rotate,
    scale,
    sub,
    unit,
)
from .mapper import CoordinateMapper
from .utils import PALETTE


# ============================================================================
# SCREEN HELPERS
# ============================================================================

def screen_direction(mapper: CoordinateMapper, theta: float) -> Vec:
    """Unit screen vector for the data-space direction `theta` (radians)."""
    v = (math.cos(theta) * mapper.px_per_unit_x, -math.sin(theta) * mapper.px_per_unit_y)
    return unit(v) or (1.0, 0.0)


def screen_vector(mapper: CoordinateMapper, v: Vec) -> Optional[Vec]:
    """Unit screen vector for a data-space vector (None if degenerate)."""
    return unit((v[0] * mapper.px_per_unit_x, -v[1] * mapper.px_per_unit_y))


def outward_normal(p1: Vec, p2: Vec, away_from: Optional[Vec] = None) -> Optional[Vec]:
    """
    Unit normal of the screen segment p1->p2, pointing away from `away_from`
    (usually the figure centroid). Falls back to the upward-pointing normal.
    None for a zero-length segment.
    """
    d = unit(sub(p2, p1))
    if d is None:
        return None
    n = perpendicular(d)
    if away_from is not None:
        side = (midpoint(p1, p2)[0] - away_from[0]) * n[0] + (midpoint(p1, p2)[1] - away_from[1]) * n[1]
        if abs(side) > 1e-6:
            return n if side > 0 else scale(n, -1.0)
    return n if n[1] <= 0 else scale(n, -1.0)


# ============================================================================
# ANGLES
# ============================================================================

@dataclass(frozen=True)
class AngleGeometry:
    start_angle: float   # radians, rotation offset included
    end_angle: float     # start rotated by `value` in the raw sweep direction
    ccw: bool
    value: float         # degrees, as authored
    is_right: bool
    u1: Vec              # unit start ray (data), rotation included
    u2: Vec              # unit end ray (data), rotation included

    @property
    def mid_angle(self) -> float:
        return 0.5 * (self.start_angle + self.end_angle)

    @property
    def sweep(self) -> float:
        return self.end_angle - self.start_angle


def is_right_angle(value: float, epsilon: float = settings.RIGHT_ANGLE_EPSILON) -> bool:
    return abs(float(value) - 90.0) < float(epsilon)


def angle_geometry(
    vertex: Vec,
    start: Vec,
    end: Vec,
    value: float,
    rotation: Optional[float] = None,
    epsilon: float = settings.RIGHT_ANGLE_EPSILON,
) -> Optional[AngleGeometry]:
    """
    Derive the displayed arc of an angle.

    The direction comes from the raw rays (sign of atan2(v2) - atan2(v1),
    wrapped to (-pi, pi]); the extent comes from the authored `value`.
    None when either ray has zero length.
    """
    v1 = sub(start, vertex)
    v2 = sub(end, vertex)
    u1 = unit(v1)
    u2 = unit(v2)
    if u1 is None or u2 is None:
        return None

    a1 = angle_of(v1)
    ccw = normalize_signed(angle_of(v2) - a1) > 0
    extent = math.radians(float(value))
    a_end = a1 + (extent if ccw else -extent)

    rot = math.radians(float(rotation or 0.0))
    return AngleGeometry(
        start_angle=a1 + rot,
        end_angle=a_end + rot,
        ccw=ccw,
        value=float(value),
        is_right=is_right_angle(value, epsilon),
        u1=rotate(u1, rot),
        u2=rotate(u2, rot),
    )


def angle_marker_shapes(
    mapper: CoordinateMapper,
    vertex: Vec,
    geom: AngleGeometry,
    show_value: bool,
    radius_px: float = settings.ANGLE_ARC_RADIUS_PX,
    label_offset_px: float = settings.ANGLE_LABEL_OFFSET_PX,
    glyph_px: float = settings.RIGHT_ANGLE_SIZE_PX,
) -> List[Shape]:
    """
    Angle marker: right-angle glyph, or arc plus degree label. The whole
    marker is hidden when `show_value` is off.
    """
    if not show_value:
        return []

    out: List[Shape] = []
    V = mapper.to_screen(*vertex)
    color = PALETTE["angle"]

    if geom.is_right:
        e1 = screen_vector(mapper, geom.u1)
        e2 = screen_vector(mapper, geom.u2)
        if e1 is None or e2 is None:
            return out
        p1 = add(V, scale(e1, glyph_px))
        corner = add(V, scale(add(e1, e2), glyph_px))
        p2 = add(V, scale(e2, glyph_px))
        segs = PathBuilder().move_to(*p1).line_to(*corner).line_to(*p2).build()
        out.append(PathShape(segs, role="right_angle", stroke=color, width=2.0))
        return out

    sweep_deg = abs(math.degrees(geom.sweep))
    if sweep_deg % 360.0 > 1e-9:
        d1 = screen_direction(mapper, geom.start_angle)
        d2 = screen_direction(mapper, geom.end_angle)
        p1 = add(V, scale(d1, radius_px))
        p2 = add(V, scale(d2, radius_px))
        data_ccw = geom.sweep > 0
        segs = (
            PathBuilder()
            .move_to(*p1)
            .arc_to(radius_px, radius_px, (sweep_deg % 360.0) > 180.0, not data_ccw, *p2)
            .build()
        )
        out.append(PathShape(segs, role="angle_arc", stroke=color, width=2.0))

    d = screen_direction(mapper, geom.mid_angle)
    pos = add(V, scale(d, radius_px + label_offset_px))
    out.append(TextShape(pos[0], pos[1], format_degrees(geom.value), role="angle_label", color=color))
    return out


# ============================================================================
# CIRCULAR ARCS / SECTORS
# ============================================================================

@dataclass(frozen=True)
class ArcGeometry:
    center: Vec
    radius: float        # data units; the anchor average for point arcs
    start_deg: float
    end_deg: float
    ccw: bool
    large_arc: bool
    sweep_deg: float     # magnitude
    fill: bool


def point_arc_geometry(center: Vec, start_pt: Vec, end_pt: Vec, fill: bool = False) -> Optional[ArcGeometry]:
    """
    Arc through two live anchor points. The radius is the mean of the two
    anchor distances; the direction is the sign of cross(v1, v2).

    The sweep is measured in that direction, so it never exceeds 180° and
    `large_arc` is always False. The raw |a2 - a1| > 180° test would flip
    to the major arc whenever the anchors straddle ±180°.
    """
    v1 = sub(start_pt, center)
    v2 = sub(end_pt, center)
    r1 = math.hypot(*v1)
    r2 = math.hypot(*v2)
    if r1 <= EPS or r2 <= EPS:
        return None

    a1 = math.degrees(angle_of(v1))
    a2 = math.degrees(angle_of(v2))
    ccw = cross(v1, v2) > 0
    sweep = (a2 - a1) % 360.0 if ccw else (a1 - a2) % 360.0
    if sweep <= 1e-9:
        return None
    return ArcGeometry(center, 0.5 * (r1 + r2), a1, a2, ccw, sweep > 180.0, sweep, fill)


def angle_arc_geometry(center: Vec, radius: float, start_deg: float, end_deg: float, fill: bool = False) -> Optional[ArcGeometry]:
    """Arc from numeric angles, swept from start toward end by their signed difference."""
    r = float(radius)
    signed = float(end_deg) - float(start_deg)
    if r <= EPS or abs(signed) <= 1e-9:
        return None
    sweep = min(abs(signed), 359.999)
    ccw = signed > 0
    end = float(start_deg) + (sweep if ccw else -sweep)
    return ArcGeometry(center, r, float(start_deg), end, ccw, sweep > 180.0, sweep, fill)


def arc_shapes(mapper: CoordinateMapper, arc: ArcGeometry) -> List[Shape]:
    C = mapper.to_screen(*arc.center)
    rx = arc.radius * mapper.px_per_unit_x
    ry = arc.radius * mapper.px_per_unit_y
    t1 = math.radians(arc.start_deg)
    t2 = math.radians(arc.end_deg)
    p1 = (C[0] + rx * math.cos(t1), C[1] - ry * math.sin(t1))
    p2 = (C[0] + rx * math.cos(t2), C[1] - ry * math.sin(t2))
    color = PALETTE["circle"]

    if arc.fill:
        segs = (
            PathBuilder()
            .move_to(*C)
            .line_to(*p1)
            .arc_to(rx, ry, arc.large_arc, not arc.ccw, *p2)
            .close()
            .build()
        )
        return [
            PathShape(segs, role="sector", stroke=color, width=2.0, fill=color, fill_opacity=0.2),
            LineShape(C[0], C[1], p1[0], p1[1], role="sector_edge", stroke=color, width=2.0),
            LineShape(C[0], C[1], p2[0], p2[1], role="sector_edge", stroke=color, width=2.0),
        ]

    segs = PathBuilder().move_to(*p1).arc_to(rx, ry, arc.large_arc, not arc.ccw, *p2).build()
    return [PathShape(segs, role="arc", stroke=color, width=2.0)]


def full_circle_shape(mapper: CoordinateMapper, center: Vec, radius: float) -> Optional[Shape]:
    r = float(radius)
    if r <= EPS:
        return None
    C = mapper.to_screen(*center)
    return EllipseShape(
        C[0],
        C[1],
        r * mapper.px_per_unit_x,
        r * mapper.px_per_unit_y,
        role="circle",
        stroke=PALETTE["circle"],
        width=2.0,
    )


# ============================================================================
# RADIUS / LENGTH ANNOTATIONS
# ============================================================================

def _bowed(p1: Vec, p2: Vec, n: Vec, fraction: float) -> Vec:
    length = math.hypot(*sub(p2, p1))
    return add(midpoint(p1, p2), scale(n, fraction * length))


def radius_annotation_shapes(
    mapper: CoordinateMapper,
    center: Vec,
    radius: float,
    label_value: float,
    direction_deg: float = 0.0,
    bowed: bool = False,
    bow_fraction: float = settings.BOW_FRACTION,
    offset_px: float = settings.ANGLE_LABEL_OFFSET_PX,
) -> List[Shape]:
    """Dashed radius from the centre along `direction_deg`, labelled r=<value>."""
    if float(radius) <= EPS:
        return []
    t = math.radians(direction_deg)
    C = mapper.to_screen(*center)
    E = mapper.to_screen(center[0] + radius * math.cos(t), center[1] + radius * math.sin(t))
    n = outward_normal(C, E)
    color = PALETTE["circle"]
    text = f"r={format_number(label_value)}"

    if n is None:
        return []
    if bowed:
        ctrl = _bowed(C, E, n, bow_fraction)
        segs = PathBuilder().move_to(*C).quad_to(ctrl[0], ctrl[1], *E).build()
        return [
            PathShape(segs, role="radius", stroke=color, width=1.0, dash="4"),
            TextShape(ctrl[0], ctrl[1], text, role="radius_label", color="#212529"),
        ]

    pos = add(midpoint(C, E), scale(n, offset_px))
    return [
        LineShape(C[0], C[1], E[0], E[1], role="radius", stroke=color, width=1.0, dash="4"),
        TextShape(pos[0], pos[1], text, role="radius_label", color="#212529"),
    ]


def length_annotation_shapes(
    p1: Vec,
    p2: Vec,
    length: float,
    bowed: bool = False,
    away_from: Optional[Vec] = None,
    offset_px: float = settings.LENGTH_LABEL_OFFSET_PX,
    bow_fraction: float = settings.BOW_FRACTION,
) -> List[Shape]:
    """
    Length label for a screen-space segment p1->p2.

    Straight: label at the midpoint pushed out along the normal.
    Bowed: dashed quadratic arc whose control point sits bow_fraction of the
    segment length off the midpoint; the label goes on the control point.
    A zero-length segment keeps its label at the midpoint, without offset.
    """
    text = format_number(length)
    mid = midpoint(p1, p2)
    n = outward_normal(p1, p2, away_from)
    if n is None:
        return [TextShape(mid[0], mid[1], text, role="length_label")]

    if bowed:
        ctrl = _bowed(p1, p2, n, bow_fraction)
        segs = PathBuilder().move_to(*p1).quad_to(ctrl[0], ctrl[1], *p2).build()
        return [
            PathShape(segs, role="length_arc", stroke=PALETTE["annotation"], width=1.0, dash="4"),
            TextShape(ctrl[0], ctrl[1], text, role="length_label"),
        ]

    pos = add(mid, scale(n, offset_px))
    return [TextShape(pos[0], pos[1], text, role="length_label")]
