"""
commands.py — Draw-command model for figure_renderer

This file contains ONLY:
- the shape records the renderer emits (line / path / ellipse / rect / text)
- Group (an ordered layer with one screen-space transform)
- PointHandle (drag hit-circle of a visible point)
- DrawList (the complete output of one render pass)

Backends (plotter.py, svg_export.py) consume a DrawList; nothing here
knows about matplotlib figures or SVG documents.

Every shape carries a `role` string ("segment", "length_label",
"angle_arc", ...) so hosts and tests can pick primitives out by meaning.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, List, Optional, Tuple, Union

if TYPE_CHECKING:
    from .mapper import CoordinateMapper
    from .view import ViewTransforms

Matrix = Tuple[float, float, float, float, float, float]   # SVG matrix(a b c d e f)

IDENTITY: Matrix = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)


def _fmt(v: float, digits: int = 3) -> str:
    s = f"{float(v):.{digits}f}".rstrip("0").rstrip(".")
    return "0" if s in {"-0", ""} else s


def svg_matrix(m: Matrix) -> str:
    return "matrix(" + ",".join(_fmt(v, 6) for v in m) + ")"


# ============================================================================
# PATHS
# ============================================================================

@dataclass(frozen=True)
class PathSegment:
    """One SVG path command. `op` is M, L, Q, A or Z (absolute coordinates)."""

    op: str
    args: Tuple[float, ...] = ()

    def svg(self) -> str:
        if self.op == "Z":
            return "Z"
        if self.op == "A":
            rx, ry, rot, large, sweep, x, y = self.args
            return f"A {_fmt(rx)} {_fmt(ry)} {_fmt(rot)} {int(large)} {int(sweep)} {_fmt(x)} {_fmt(y)}"
        return self.op + " " + " ".join(_fmt(a) for a in self.args)


class PathBuilder:
    def __init__(self) -> None:
        self._segments: List[PathSegment] = []

    def move_to(self, x: float, y: float) -> "PathBuilder":
        self._segments.append(PathSegment("M", (x, y)))
        return self

    def line_to(self, x: float, y: float) -> "PathBuilder":
        self._segments.append(PathSegment("L", (x, y)))
        return self

    def quad_to(self, cx: float, cy: float, x: float, y: float) -> "PathBuilder":
        self._segments.append(PathSegment("Q", (cx, cy, x, y)))
        return self

    def arc_to(self, rx: float, ry: float, large_arc: bool, sweep: bool, x: float, y: float) -> "PathBuilder":
        self._segments.append(PathSegment("A", (rx, ry, 0.0, 1.0 if large_arc else 0.0, 1.0 if sweep else 0.0, x, y)))
        return self

    def close(self) -> "PathBuilder":
        self._segments.append(PathSegment("Z"))
        return self

    def build(self) -> Tuple[PathSegment, ...]:
        return tuple(self._segments)


# ============================================================================
# SHAPES
# ============================================================================

@dataclass(frozen=True)
class LineShape:
    x1: float
    y1: float
    x2: float
    y2: float
    role: str
    stroke: str = "#212529"
    width: float = 2.0
    dash: Optional[str] = None


@dataclass(frozen=True)
class PathShape:
    segments: Tuple[PathSegment, ...]
    role: str
    stroke: str = "#212529"
    width: float = 2.0
    fill: Optional[str] = None
    fill_opacity: float = 1.0
    dash: Optional[str] = None

    @property
    def d(self) -> str:
        return " ".join(seg.svg() for seg in self.segments)


@dataclass(frozen=True)
class EllipseShape:
    cx: float
    cy: float
    rx: float
    ry: float
    role: str
    stroke: Optional[str] = "#212529"
    width: float = 2.0
    fill: Optional[str] = None


@dataclass(frozen=True)
class RectShape:
    x: float
    y: float
    w: float
    h: float
    role: str
    fill: str = "#f8f9fa"
    stroke: Optional[str] = None


@dataclass(frozen=True)
class TextShape:
    x: float
    y: float
    text: str
    role: str
    size: float = 12.0
    color: str = "#212529"
    anchor: str = "middle"       # start | middle | end
    baseline: str = "middle"     # middle | auto
    transform: Optional[Matrix] = None   # local counter-transform, None == identity


Shape = Union[LineShape, PathShape, EllipseShape, RectShape, TextShape]


# ============================================================================
# GROUPS / OUTPUT
# ============================================================================

@dataclass
class Group:
    name: str
    transform: Matrix = IDENTITY
    items: List[Shape] = field(default_factory=list)

    def add(self, shape: Optional[Shape]) -> None:
        if shape is not None:
            self.items.append(shape)

    def extend(self, shapes) -> None:
        for s in shapes:
            self.add(s)


@dataclass(frozen=True)
class PointHandle:
    index: int
    label: str
    x: float        # untransformed (mapper) screen coordinates
    y: float
    radius: float

    def hit(self, x: float, y: float) -> bool:
        return (x - self.x) ** 2 + (y - self.y) ** 2 <= self.radius ** 2


@dataclass
class DrawList:
    width: float
    height: float
    grid: Group
    shapes: Group
    handles: List[PointHandle] = field(default_factory=list)
    mapper: Optional["CoordinateMapper"] = None
    transforms: Optional["ViewTransforms"] = None

    @property
    def groups(self) -> Tuple[Group, Group]:
        return (self.grid, self.shapes)

    def iter_shapes(self) -> Iterator[Shape]:
        for g in self.groups:
            yield from g.items

    def by_role(self, role: str) -> List[Shape]:
        return [s for s in self.iter_shapes() if s.role == role]

    def texts(self, role: Optional[str] = None) -> List[str]:
        return [
            s.text
            for s in self.iter_shapes()
            if isinstance(s, TextShape) and (role is None or s.role == role)
        ]
