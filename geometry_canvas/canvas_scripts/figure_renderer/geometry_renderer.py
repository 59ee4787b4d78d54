"""
geometry_renderer.py — Scene Renderer for figure_renderer

This file contains ONLY:
- render(scene, view) -> DrawList (the one pure entry point)
- per-layer drawing helpers (grid, axes, curves, lines, angles, circles, points)

It intentionally does NOT contain:
- arc / glyph / label geometry (annotations.py)
- bounds and scales (geometry_bounds.py, mapper.py)
- pointer handling (interaction.py)
- rasterising / SVG writing (plotter.py, svg_export.py)

Layer order is fixed and later layers sit on top:

    grid group : background + grid
    shape group: axes (only with curves) -> curves -> lines + lengths
                 -> angle markers -> circles/arcs/sectors + radii
                 -> points + labels

Unresolved labels and degenerate geometry are skipped (DEBUG log), never
raised; the rest of the scene still renders.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, List, Optional
import math

from geometry_canvas.config import settings
from ..utils import setup_logger
from .annotations import (
    angle_arc_geometry,
    angle_geometry,
    angle_marker_shapes,
    arc_shapes,
    full_circle_shape,
    length_annotation_shapes,
    point_arc_geometry,
    radius_annotation_shapes,
)
from .commands import (
    DrawList,
    EllipseShape,
    Group,
    LineShape,
    PathBuilder,
    PathShape,
    PointHandle,
    RectShape,
    Shape,
    TextShape,
)
from .curves import curve_label, sample_curve
from .geometry_bounds import compute_scene_bounds
from .geometry_common import Vec
from .mapper import Canvas, CoordinateMapper
from .scene import Angle, AngleArc, Circle, Curve, Line, Point, PointArc, Scene
from .utils import PALETTE, get_curve_color
from .view import ViewState, ViewTransforms, as_matrix, text_counter_transform

logger = setup_logger(__name__)


# ============================================================================
# INTERNAL HELPERS
# ============================================================================

def _screen_centroid(points: Dict[str, Point], mapper: CoordinateMapper) -> Optional[Vec]:
    if not points:
        return None
    xs = [mapper.to_screen(p.x, p.y) for p in points.values()]
    return (sum(x for x, _ in xs) / len(xs), sum(y for _, y in xs) / len(xs))


def _grid_step(span: float) -> int:
    return max(1, int(math.ceil(span / 20.0)))


def _grid_values(lo: float, hi: float, step: int) -> List[int]:
    start = int(math.floor(lo))
    start -= start % step
    return [v for v in range(start, int(math.ceil(hi)) + 1, step) if lo <= v <= hi]


# ============================================================================
# LAYERS
# ============================================================================

def _grid_shapes(mapper: CoordinateMapper) -> List[Shape]:
    """Background, grid lines every ceil(span/20) units, ticks on every second line."""
    c = mapper.canvas
    out: List[Shape] = [
        RectShape(c.padding, c.padding, c.inner_width, c.inner_height, role="grid_background", fill=PALETTE["background"])
    ]

    x0, x1 = mapper.x_domain
    y0, y1 = mapper.y_domain
    step = _grid_step(max(x1 - x0, y1 - y0))
    top, bottom = mapper.y(y1), mapper.y(y0)
    left, right = mapper.x(x0), mapper.x(x1)

    # origin tick row/column, clamped to the plotting area
    oy = min(max(mapper.y(0.0), top), bottom)
    ox = min(max(mapper.x(0.0), left), right)

    for v in _grid_values(x0, x1, step):
        sx = mapper.x(v)
        if v == 0:
            out.append(LineShape(sx, top, sx, bottom, role="grid_axis", stroke=PALETTE["grid_origin"], width=1.5))
        else:
            out.append(LineShape(sx, top, sx, bottom, role="grid_line", stroke=PALETTE["grid"], width=1.0))
        if v % (2 * step) == 0:
            out.append(TextShape(sx, oy + 14.0, str(v), role="grid_tick", size=10.0, color=PALETTE["grid_text"]))

    for v in _grid_values(y0, y1, step):
        sy = mapper.y(v)
        if v == 0:
            out.append(LineShape(left, sy, right, sy, role="grid_axis", stroke=PALETTE["grid_origin"], width=1.5))
        else:
            out.append(LineShape(left, sy, right, sy, role="grid_line", stroke=PALETTE["grid"], width=1.0))
        if v != 0 and v % (2 * step) == 0:
            out.append(TextShape(ox - 14.0, sy, str(v), role="grid_tick", size=10.0, color=PALETTE["grid_text"]))

    return out


def _axes_shapes(mapper: CoordinateMapper) -> List[Shape]:
    """x axis at y=0 and y axis at x=0 (clamped into the domain), with ticks."""
    x0, x1 = mapper.x_domain
    y0, y1 = mapper.y_domain
    ax_y = min(max(0.0, y0), y1)
    ax_x = min(max(0.0, x0), x1)
    col = PALETTE["axis"]

    sy = mapper.y(ax_y)
    sx = mapper.x(ax_x)
    out: List[Shape] = [
        LineShape(mapper.x(x0), sy, mapper.x(x1), sy, role="axis", stroke=col, width=1.0),
        LineShape(sx, mapper.y(y0), sx, mapper.y(y1), role="axis", stroke=col, width=1.0),
    ]

    step = _grid_step(max(x1 - x0, y1 - y0))
    for v in _grid_values(x0, x1, step):
        if v == 0:
            continue
        px = mapper.x(v)
        out.append(LineShape(px, sy - 4.0, px, sy + 4.0, role="axis_tick", stroke=col, width=1.0))
        out.append(TextShape(px, sy + 16.0, str(v), role="axis_tick_label", size=10.0, color=col))
    for v in _grid_values(y0, y1, step):
        if v == 0:
            continue
        py = mapper.y(v)
        out.append(LineShape(sx - 4.0, py, sx + 4.0, py, role="axis_tick", stroke=col, width=1.0))
        out.append(TextShape(sx - 16.0, py, str(v), role="axis_tick_label", size=10.0, color=col))
    return out


def _curve_shapes(mapper: CoordinateMapper, curve: Curve) -> List[Shape]:
    samples = sample_curve(curve)
    if samples.shape[0] < 2:
        logger.debug(f"Curve {curve.type} has fewer than 2 drawable samples; skipped")
        return []
    pts = mapper.to_screen_array(samples)
    pb = PathBuilder().move_to(float(pts[0, 0]), float(pts[0, 1]))
    for x, y in pts[1:]:
        pb.line_to(float(x), float(y))
    color = get_curve_color(curve.type)
    lx, ly = float(pts[-1, 0]), float(pts[-1, 1])
    return [
        PathShape(pb.build(), role="curve", stroke=color, width=2.0),
        TextShape(lx, ly - 10.0, curve_label(curve), role="curve_label", color=color, anchor="end"),
    ]


def _line_shapes(
    mapper: CoordinateMapper,
    line: Line,
    points: Dict[str, Point],
    centroid: Optional[Vec],
) -> List[Shape]:
    a = points.get(line.start)
    b = points.get(line.end)
    if a is None or b is None:
        logger.debug(f"Line {line.start}{line.end} references a missing point; skipped")
        return []

    p1 = mapper.to_screen(a.x, a.y)
    p2 = mapper.to_screen(b.x, b.y)
    out: List[Shape] = [LineShape(p1[0], p1[1], p2[0], p2[1], role="segment", stroke=PALETTE["segment"])]

    if line.show_length or line.show_length_arc:
        # authored length wins; fall back to the coordinate distance
        value = line.length if line.length is not None else math.hypot(b.x - a.x, b.y - a.y)
        out.extend(length_annotation_shapes(p1, p2, value, bowed=line.show_length_arc, away_from=centroid))
    return out


def _angle_shapes(mapper: CoordinateMapper, angle: Angle, points: Dict[str, Point]) -> List[Shape]:
    v = points.get(angle.vertex)
    s = points.get(angle.start)
    e = points.get(angle.end)
    if v is None or s is None or e is None:
        logger.debug(f"Angle {angle.start}{angle.vertex}{angle.end} references a missing point; skipped")
        return []
    geom = angle_geometry((v.x, v.y), (s.x, s.y), (e.x, e.y), angle.value, angle.rotation)
    if geom is None:
        logger.debug(f"Angle at {angle.vertex} has a zero-length ray; skipped")
        return []
    return angle_marker_shapes(mapper, (v.x, v.y), geom, angle.show_value)


def _circle_shapes(mapper: CoordinateMapper, circle: Circle, points: Dict[str, Point]) -> List[Shape]:
    c = points.get(circle.center)
    if c is None:
        logger.debug(f"Circle center {circle.center!r} not found; skipped")
        return []
    center = (c.x, c.y)
    kind = circle.kind
    out: List[Shape] = []
    radius_dir = 0.0

    if isinstance(kind, PointArc):
        a = points.get(kind.start_label)
        b = points.get(kind.end_label)
        if a is None or b is None:
            logger.debug(f"Arc anchors {kind.start_label!r}/{kind.end_label!r} not found; circle skipped")
            return []
        arc = point_arc_geometry(center, (a.x, a.y), (b.x, b.y), kind.fill)
        if arc is None:
            logger.debug(f"Degenerate point arc on circle {circle.center}; skipped")
            return []
        out.extend(arc_shapes(mapper, arc))
        radius_dir = arc.start_deg
        draw_radius = arc.radius
    elif isinstance(kind, AngleArc):
        arc = angle_arc_geometry(center, circle.radius, kind.start, kind.end, kind.fill)
        if arc is None:
            logger.debug(f"Degenerate angle arc on circle {circle.center}; skipped")
            return []
        out.extend(arc_shapes(mapper, arc))
        radius_dir = arc.start_deg
        draw_radius = arc.radius
    else:
        shape = full_circle_shape(mapper, center, circle.radius)
        if shape is None:
            logger.debug(f"Circle {circle.center} has non-positive radius; skipped")
            return []
        out.append(shape)
        draw_radius = float(circle.radius)

    if circle.show_radius:
        out.extend(
            radius_annotation_shapes(
                mapper,
                center,
                draw_radius,
                circle.radius,
                direction_deg=radius_dir,
                bowed=circle.show_radius_arc,
            )
        )
    return out


def _point_shapes(
    mapper: CoordinateMapper,
    point: Point,
    highlight: Optional[str],
) -> List[Shape]:
    sx, sy = mapper.to_screen(point.x, point.y)
    active = highlight is not None and point.label == highlight
    r = settings.POINT_RADIUS_PX
    return [
        EllipseShape(
            sx,
            sy,
            r,
            r,
            role="point",
            stroke="#ffffff",
            width=1.0,
            fill=PALETTE["point_active"] if active else PALETTE["point"],
        ),
        TextShape(sx + 10.0, sy - 10.0, point.label, role="point_label", size=14.0, anchor="start"),
    ]


def _upright(shapes: Group, view: ViewState) -> None:
    """Give every text in the shape group its own counter-transform."""
    for i, s in enumerate(shapes.items):
        if isinstance(s, TextShape):
            shapes.items[i] = replace(s, transform=as_matrix(text_counter_transform(view, s.x, s.y)))


# ============================================================================
# ENTRY POINT
# ============================================================================

def render(
    scene: Scene,
    view: Optional[ViewState] = None,
    *,
    canvas: Optional[Canvas] = None,
    highlight: Optional[str] = None,
) -> DrawList:
    """
    Build the full draw list for one frame.

    Pure: the same (scene, view, canvas, highlight) always yields the same
    shapes and handles, and neither input is touched. `highlight` is the label of a
    point currently being dragged.
    """
    view = view or ViewState()
    canvas = canvas or Canvas.from_settings()

    bounds = compute_scene_bounds(scene)
    mapper = CoordinateMapper.from_bounds(bounds, canvas, square=view.show_grid)
    transforms = ViewTransforms.build(view, canvas)

    grid = Group("grid", as_matrix(transforms.grid))
    shapes = Group("shapes", as_matrix(transforms.shape))

    if view.show_grid:
        grid.extend(_grid_shapes(mapper))

    points = scene.point_map()
    centroid = _screen_centroid(points, mapper)

    if scene.curves:
        shapes.extend(_axes_shapes(mapper))
    for curve in scene.curves:
        shapes.extend(_curve_shapes(mapper, curve))
    for line in scene.lines:
        shapes.extend(_line_shapes(mapper, line, points, centroid))
    for angle in scene.angles:
        shapes.extend(_angle_shapes(mapper, angle, points))
    for circle in scene.circles:
        shapes.extend(_circle_shapes(mapper, circle, points))

    handles: List[PointHandle] = []
    for i, p in enumerate(scene.points):
        if not p.visible:
            continue
        shapes.extend(_point_shapes(mapper, p, highlight))
        sx, sy = mapper.to_screen(p.x, p.y)
        handles.append(PointHandle(i, p.label, sx, sy, settings.POINT_HIT_RADIUS_PX))

    _upright(shapes, view)

    logger.debug(
        f"Rendered {len(shapes.items)} shape(s), {len(grid.items)} grid item(s), {len(handles)} handle(s)"
    )
    return DrawList(
        width=canvas.width,
        height=canvas.height,
        grid=grid,
        shapes=shapes,
        handles=handles,
        mapper=mapper,
        transforms=transforms,
    )
