"""
editing.py — Whole-scene edit operations for figure_renderer

This file contains ONLY:
- add / update / delete helpers for every entity family
- move_point (the drag edit)
- one-line text summaries of entities (describe_* / summarize_scene)

Every operation takes a Scene and returns a NEW Scene built with
dataclasses.replace; the input is never touched. The host owns the scene
and decides whether to adopt the result.

Numeric fields accept numbers or numeric strings (form input). A value
that does not parse as a finite number leaves that field unchanged.
Flags accept bools or the strings true/false, 1/0, yes/no, on/off.
"""

from __future__ import annotations

import string
from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..utils import setup_logger
from .curves import curve_label
from .geometry_common import format_number, safe_float
from .scene import CURVE_TYPES, Angle, Circle, Curve, Line, Point, Scene

logger = setup_logger(__name__)


_POINT_FIELDS = {"x": "num", "y": "num", "label": "str", "visible": "bool"}
_LINE_FIELDS = {"start": "str", "end": "str", "length": "num?", "show_length": "bool", "show_length_arc": "bool"}
_ANGLE_FIELDS = {
    "vertex": "str",
    "start": "str",
    "end": "str",
    "value": "num",
    "show_value": "bool",
    "rotation": "num?",
}
_CIRCLE_FIELDS = {
    "center": "str",
    "radius": "num",
    "show_radius": "bool",
    "show_radius_arc": "bool",
    "start_angle": "num?",
    "end_angle": "num?",
    "show_arc": "bool",
    "fill_arc": "bool",
    "start_point": "str?",
    "end_point": "str?",
}
_CURVE_FIELDS = {
    "type": "curve_type",
    "x_min": "num",
    "x_max": "num",
    "points": "int",
    "base": "num?",
    "coefficient": "num?",
}


# ============================================================================
# INTERNAL HELPERS
# ============================================================================

def _check_index(items: Sequence[Any], index: int, what: str) -> None:
    if not isinstance(index, int) or not 0 <= index < len(items):
        raise IndexError(f"{what} index {index!r} out of range (have {len(items)})")


_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off"}


def _form_bool(raw: Any) -> Optional[bool]:
    """Checkbox / form value -> bool. None for strings that are neither."""
    if isinstance(raw, str):
        s = raw.strip().lower()
        if s in _TRUE_STRINGS:
            return True
        if s in _FALSE_STRINGS:
            return False
        return None
    return bool(raw)


def _coerce_fields(kind: str, schema: Dict[str, str], changes: Dict[str, Any]) -> Dict[str, Any]:
    """
    Turn raw field edits into typed values. Unknown field names raise
    ValueError; unparseable numbers are dropped from the change set.
    """
    out: Dict[str, Any] = {}
    for name, raw in changes.items():
        if name not in schema:
            raise ValueError(f"Unknown {kind} field: {name!r}")
        t = schema[name]
        optional = t.endswith("?")
        t = t.rstrip("?")

        if raw is None or (isinstance(raw, str) and not raw.strip() and optional):
            if optional:
                out[name] = None
            continue

        if t == "num":
            v = safe_float(raw)
            if v is None:
                logger.debug(f"Ignoring non-numeric {kind}.{name}={raw!r}")
                continue
            out[name] = v
        elif t == "int":
            v = safe_float(raw)
            if v is None:
                logger.debug(f"Ignoring non-numeric {kind}.{name}={raw!r}")
                continue
            out[name] = int(v)
        elif t == "bool":
            b = _form_bool(raw)
            if b is None:
                logger.debug(f"Ignoring non-boolean {kind}.{name}={raw!r}")
                continue
            out[name] = b
        elif t == "curve_type":
            ct = str(raw).strip().lower()
            if ct not in CURVE_TYPES:
                raise ValueError(f"Unknown curve type: {raw!r}")
            out[name] = ct
        else:
            out[name] = str(raw)
    return out


def _replace_at(items: Tuple[Any, ...], index: int, new: Any) -> Tuple[Any, ...]:
    return items[:index] + (new,) + items[index + 1:]


def _drop_at(items: Tuple[Any, ...], index: int) -> Tuple[Any, ...]:
    return items[:index] + items[index + 1:]


def _rename_refs(scene: Scene, old: str, new: str) -> Scene:
    def sub(label: Optional[str]) -> Optional[str]:
        return new if label == old else label

    return replace(
        scene,
        lines=tuple(replace(ln, start=sub(ln.start), end=sub(ln.end)) for ln in scene.lines),
        angles=tuple(
            replace(a, vertex=sub(a.vertex), start=sub(a.start), end=sub(a.end)) for a in scene.angles
        ),
        circles=tuple(
            replace(c, center=sub(c.center), start_point=sub(c.start_point), end_point=sub(c.end_point))
            for c in scene.circles
        ),
    )


def next_point_label(scene: Scene) -> str:
    """First capital letter not yet in use, then A1, B1, ..."""
    used = {p.label for p in scene.points}
    suffix = ""
    n = 0
    while True:
        for ch in string.ascii_uppercase:
            if ch + suffix not in used:
                return ch + suffix
        n += 1
        suffix = str(n)


# ============================================================================
# POINTS
# ============================================================================

def add_point(scene: Scene, x: float = 0.0, y: float = 0.0, label: Optional[str] = None) -> Scene:
    p = Point(float(x), float(y), label or next_point_label(scene))
    return replace(scene, points=scene.points + (p,))


def update_point(scene: Scene, index: int, **changes: Any) -> Scene:
    """
    Edit one point. Renaming its label rewrites every line, angle and
    circle reference to the old label.
    """
    _check_index(scene.points, index, "Point")
    fields = _coerce_fields("point", _POINT_FIELDS, changes)
    old = scene.points[index]
    new = replace(old, **fields)
    out = replace(scene, points=_replace_at(scene.points, index, new))
    if new.label != old.label:
        out = _rename_refs(out, old.label, new.label)
    return out


def move_point(scene: Scene, index: int, x: float, y: float) -> Scene:
    """Drag edit: only points[index].x / .y change."""
    _check_index(scene.points, index, "Point")
    moved = replace(scene.points[index], x=float(x), y=float(y))
    return replace(scene, points=_replace_at(scene.points, index, moved))


def delete_point(scene: Scene, index: int) -> Scene:
    """
    Remove a point and every line / angle / circle that references its
    label (as centre or as an arc anchor).
    """
    _check_index(scene.points, index, "Point")
    label = scene.points[index].label
    points = _drop_at(scene.points, index)
    if any(p.label == label for p in points):
        # a duplicate still carries the label, so references stay valid
        return replace(scene, points=points)

    return replace(
        scene,
        points=points,
        lines=tuple(ln for ln in scene.lines if label not in (ln.start, ln.end)),
        angles=tuple(a for a in scene.angles if label not in (a.vertex, a.start, a.end)),
        circles=tuple(
            c for c in scene.circles if label not in (c.center, c.start_point, c.end_point)
        ),
    )


# ============================================================================
# LINES
# ============================================================================

def add_line(scene: Scene) -> Scene:
    if len(scene.points) < 2:
        return scene
    ln = Line(scene.points[0].label, scene.points[1].label)
    return replace(scene, lines=scene.lines + (ln,))


def update_line(scene: Scene, index: int, **changes: Any) -> Scene:
    _check_index(scene.lines, index, "Line")
    fields = _coerce_fields("line", _LINE_FIELDS, changes)
    return replace(scene, lines=_replace_at(scene.lines, index, replace(scene.lines[index], **fields)))


def delete_line(scene: Scene, index: int) -> Scene:
    _check_index(scene.lines, index, "Line")
    return replace(scene, lines=_drop_at(scene.lines, index))


# ============================================================================
# ANGLES
# ============================================================================

def add_angle(scene: Scene, value: float = 90.0) -> Scene:
    if len(scene.points) < 3:
        return scene
    a, b, c = (p.label for p in scene.points[:3])
    return replace(scene, angles=scene.angles + (Angle(vertex=a, start=b, end=c, value=float(value)),))


def update_angle(scene: Scene, index: int, **changes: Any) -> Scene:
    _check_index(scene.angles, index, "Angle")
    fields = _coerce_fields("angle", _ANGLE_FIELDS, changes)
    return replace(scene, angles=_replace_at(scene.angles, index, replace(scene.angles[index], **fields)))


def delete_angle(scene: Scene, index: int) -> Scene:
    _check_index(scene.angles, index, "Angle")
    return replace(scene, angles=_drop_at(scene.angles, index))


# ============================================================================
# CIRCLES
# ============================================================================

def add_circle(scene: Scene, radius: float = 1.0) -> Scene:
    if not scene.points:
        return scene
    return replace(scene, circles=scene.circles + (Circle(scene.points[0].label, float(radius)),))


def update_circle(scene: Scene, index: int, **changes: Any) -> Scene:
    # Circle.kind is re-derived by __post_init__ on replace()
    _check_index(scene.circles, index, "Circle")
    fields = _coerce_fields("circle", _CIRCLE_FIELDS, changes)
    return replace(scene, circles=_replace_at(scene.circles, index, replace(scene.circles[index], **fields)))


def delete_circle(scene: Scene, index: int) -> Scene:
    _check_index(scene.circles, index, "Circle")
    return replace(scene, circles=_drop_at(scene.circles, index))


# ============================================================================
# CURVES
# ============================================================================

def add_curve(scene: Scene) -> Scene:
    cv = Curve(type="linear", x_min=0.0, x_max=10.0, points=100, coefficient=1.0)
    return replace(scene, curves=scene.curves + (cv,))


def update_curve(scene: Scene, index: int, **changes: Any) -> Scene:
    _check_index(scene.curves, index, "Curve")
    fields = _coerce_fields("curve", _CURVE_FIELDS, changes)
    if "points" in fields and fields["points"] <= 0:
        del fields["points"]
    return replace(scene, curves=_replace_at(scene.curves, index, replace(scene.curves[index], **fields)))


def delete_curve(scene: Scene, index: int) -> Scene:
    _check_index(scene.curves, index, "Curve")
    return replace(scene, curves=_drop_at(scene.curves, index))


# ============================================================================
# SUMMARIES
# ============================================================================

def describe_point(p: Point) -> str:
    return f"{p.label}({p.x:.2f}, {p.y:.2f})"


def describe_line(ln: Line) -> str:
    value = "-" if ln.length is None else f"{ln.length:.2f}"
    return f"{ln.start}{ln.end}: {value}"


def describe_angle(a: Angle) -> str:
    return f"∠{a.start}{a.vertex}{a.end}: {format_number(a.value)}°"


def describe_circle(c: Circle) -> str:
    return f"circle {c.center}: r={c.radius:.2f}"


def describe_curve(cv: Curve) -> str:
    return curve_label(cv)


def summarize_scene(scene: Scene) -> List[str]:
    out: List[str] = []
    out.extend(describe_point(p) for p in scene.points)
    out.extend(describe_line(ln) for ln in scene.lines)
    out.extend(describe_angle(a) for a in scene.angles)
    out.extend(describe_circle(c) for c in scene.circles)
    out.extend(describe_curve(cv) for cv in scene.curves)
    return out
