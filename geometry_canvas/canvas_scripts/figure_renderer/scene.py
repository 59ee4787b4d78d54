"""
scene.py — Scene Model for figure_renderer

This file contains ONLY:
- the immutable scene entities (Point, Line, Angle, Circle, Curve, Scene)
- the explicit circle variant (CircleKind = FullCircle | AngleArc | PointArc)
- label lookup helpers shared by bounds, renderer and editing

It intentionally does NOT contain:
- JSON parsing / validation (ingest.py)
- edit operations (editing.py)
- any drawing

Every entity is a frozen dataclass. Edits build a NEW Scene with
dataclasses.replace; nothing in the package mutates a scene in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple, Union


CURVE_TYPES = ("linear", "quadratic", "logarithm", "exponential")


# ============================================================================
# ENTITIES
# ============================================================================

@dataclass(frozen=True)
class Point:
    x: float
    y: float
    label: str
    visible: bool = True


@dataclass(frozen=True)
class Line:
    start: str
    end: str
    length: Optional[float] = None
    show_length: bool = False
    show_length_arc: bool = False


@dataclass(frozen=True)
class Angle:
    vertex: str
    start: str
    end: str
    value: float
    show_value: bool = False
    rotation: Optional[float] = None


# ============================================================================
# CIRCLE VARIANTS
# ============================================================================

@dataclass(frozen=True)
class FullCircle:
    pass


@dataclass(frozen=True)
class AngleArc:
    start: float   # degrees, CCW from +x
    end: float
    fill: bool = False


@dataclass(frozen=True)
class PointArc:
    start_label: str
    end_label: str
    fill: bool = False


CircleKind = Union[FullCircle, AngleArc, PointArc]


def resolve_circle_kind(circle: "Circle") -> CircleKind:
    """
    Decide once which variant a circle is.

    Anchor points win over numeric angles; both ends of a pair are needed.
    showArc=False keeps the arc fields but draws the full outline.
    """
    if not circle.show_arc:
        return FullCircle()
    if circle.start_point is not None and circle.end_point is not None:
        return PointArc(circle.start_point, circle.end_point, circle.fill_arc)
    if circle.start_angle is not None and circle.end_angle is not None:
        return AngleArc(float(circle.start_angle), float(circle.end_angle), circle.fill_arc)
    return FullCircle()


@dataclass(frozen=True)
class Circle:
    center: str
    radius: float
    show_radius: bool = False
    show_radius_arc: bool = False
    start_angle: Optional[float] = None
    end_angle: Optional[float] = None
    show_arc: bool = True
    fill_arc: bool = False
    start_point: Optional[str] = None
    end_point: Optional[str] = None
    kind: CircleKind = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", resolve_circle_kind(self))


@dataclass(frozen=True)
class Curve:
    type: str
    x_min: float
    x_max: float
    points: int = 100
    base: Optional[float] = None
    coefficient: Optional[float] = None


# ============================================================================
# SCENE
# ============================================================================

@dataclass(frozen=True)
class Scene:
    points: Tuple[Point, ...] = ()
    lines: Tuple[Line, ...] = ()
    angles: Tuple[Angle, ...] = ()
    circles: Tuple[Circle, ...] = ()
    curves: Tuple[Curve, ...] = ()

    def point_map(self) -> Dict[str, Point]:
        """label -> Point. On duplicate labels the first point wins."""
        out: Dict[str, Point] = {}
        for p in self.points:
            out.setdefault(p.label, p)
        return out


def default_scene() -> Scene:
    """Template shown before any producer has supplied a scene."""
    return Scene(
        points=(
            Point(0.0, 0.0, "A"),
            Point(4.0, 0.0, "B"),
            Point(0.0, 3.0, "C"),
        ),
        lines=(
            Line("A", "B", length=4.0, show_length=True),
            Line("B", "C", length=5.0, show_length=True),
            Line("C", "A", length=3.0, show_length=True),
        ),
        angles=(Angle("A", "B", "C", 90.0, show_value=True),),
    )
