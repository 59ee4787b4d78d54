"""
ingest.py — Scene JSON boundary for figure_renderer

This file contains ONLY:
- pydantic wire models mirroring the camelCase Scene JSON
- parse_scene / scene_to_payload (lossless JSON <-> Scene)
- parse_generator_response (cleanup of raw scene-generator output)
- the producer error types

It intentionally does NOT contain:
- rendering, bounds or editing logic

Absent optional fields mean "use the documented default"; a missing
top-level array is a producer error and is never patched up here.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from geometry_canvas.config import settings
from ..utils import setup_logger, load_json_file
from .scene import Angle, Circle, Curve, Line, Point, Scene

logger = setup_logger(__name__)

REQUIRED_ARRAYS = ("points", "lines", "angles", "circles", "curves")


# ============================================================================
# ERRORS
# ============================================================================

class SceneFormatError(ValueError):
    """The producer handed over something that is not a complete Scene."""


class SceneGeneratorError(SceneFormatError):
    """The producer answered with an error payload {"error": "..."}."""


# ============================================================================
# WIRE MODELS
# ============================================================================

class _Wire(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class PointIn(_Wire):
    x: float
    y: float
    label: str
    visible: Optional[bool] = None

    def to_domain(self) -> Point:
        return Point(
            x=self.x,
            y=self.y,
            label=self.label,
            visible=True if self.visible is None else bool(self.visible),
        )


class LineIn(_Wire):
    start: str
    end: str
    length: Optional[float] = None
    show_length: Optional[bool] = Field(default=None, alias="showLength")
    show_length_arc: Optional[bool] = Field(default=None, alias="showLengthArc")

    def to_domain(self) -> Line:
        return Line(
            start=self.start,
            end=self.end,
            length=self.length,
            show_length=bool(self.show_length),
            show_length_arc=bool(self.show_length_arc),
        )


class AngleIn(_Wire):
    vertex: str
    start: str
    end: str
    value: float
    show_value: Optional[bool] = Field(default=None, alias="showValue")
    rotation: Optional[float] = None

    def to_domain(self) -> Angle:
        return Angle(
            vertex=self.vertex,
            start=self.start,
            end=self.end,
            value=self.value,
            show_value=bool(self.show_value),
            rotation=self.rotation,
        )


class CircleIn(_Wire):
    center: str
    radius: float
    show_radius: Optional[bool] = Field(default=None, alias="showRadius")
    show_radius_arc: Optional[bool] = Field(default=None, alias="showRadiusArc")
    start_angle: Optional[float] = Field(default=None, alias="startAngle")
    end_angle: Optional[float] = Field(default=None, alias="endAngle")
    show_arc: Optional[bool] = Field(default=None, alias="showArc")
    fill_arc: Optional[bool] = Field(default=None, alias="fillArc")
    start_point: Optional[str] = Field(default=None, alias="startPoint")
    end_point: Optional[str] = Field(default=None, alias="endPoint")

    def to_domain(self) -> Circle:
        return Circle(
            center=self.center,
            radius=self.radius,
            show_radius=bool(self.show_radius),
            show_radius_arc=bool(self.show_radius_arc),
            start_angle=self.start_angle,
            end_angle=self.end_angle,
            show_arc=True if self.show_arc is None else bool(self.show_arc),
            fill_arc=bool(self.fill_arc),
            start_point=self.start_point,
            end_point=self.end_point,
        )


class XRangeIn(_Wire):
    min: float
    max: float


class CurveIn(_Wire):
    type: Literal["linear", "quadratic", "logarithm", "exponential"]
    base: Optional[float] = None
    coefficient: Optional[float] = None
    x_range: XRangeIn = Field(alias="xRange")
    points: Optional[int] = None

    def to_domain(self) -> Curve:
        n = self.points
        if n is None or n <= 0:
            n = settings.CURVE_DEFAULT_POINTS
        return Curve(
            type=self.type,
            x_min=self.x_range.min,
            x_max=self.x_range.max,
            points=int(n),
            base=self.base,
            coefficient=self.coefficient,
        )


class SceneDocument(_Wire):
    points: List[PointIn]
    lines: List[LineIn]
    angles: List[AngleIn]
    circles: List[CircleIn]
    curves: List[CurveIn]

    def to_scene(self) -> Scene:
        return Scene(
            points=tuple(p.to_domain() for p in self.points),
            lines=tuple(l.to_domain() for l in self.lines),
            angles=tuple(a.to_domain() for a in self.angles),
            circles=tuple(c.to_domain() for c in self.circles),
            curves=tuple(c.to_domain() for c in self.curves),
        )


# ============================================================================
# PUBLIC API
# ============================================================================

def parse_scene(payload: Any) -> Scene:
    """
    Validate a producer payload and build the immutable Scene.

    Raises SceneGeneratorError for {"error": ...} payloads and
    SceneFormatError for anything structurally incomplete.
    """
    if not isinstance(payload, dict):
        raise SceneFormatError(f"Scene payload must be a JSON object, got {type(payload).__name__}")

    if "error" in payload and not all(k in payload for k in REQUIRED_ARRAYS):
        message = str(payload.get("error") or "scene generator reported an error")
        logger.warning(f"Scene generator returned an error payload: {message}")
        raise SceneGeneratorError(message)

    missing = [k for k in REQUIRED_ARRAYS if k not in payload]
    if missing:
        raise SceneFormatError(f"Scene payload is missing required arrays: {', '.join(missing)}")

    try:
        doc = SceneDocument.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Rejected malformed scene ({e.error_count()} validation errors)")
        raise SceneFormatError(f"Invalid scene payload: {e}") from e

    scene = doc.to_scene()
    logger.debug(
        f"Parsed scene: {len(scene.points)} points, {len(scene.lines)} lines, "
        f"{len(scene.angles)} angles, {len(scene.circles)} circles, {len(scene.curves)} curves"
    )
    return scene


def _drop_none(d: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in d.items() if v is not None}


def scene_to_payload(scene: Scene) -> Dict[str, Any]:
    """Serialise a Scene back to the camelCase wire JSON (unset optionals omitted)."""
    return {
        "points": [
            {"x": p.x, "y": p.y, "label": p.label, "visible": p.visible}
            for p in scene.points
        ],
        "lines": [
            _drop_none({
                "start": l.start,
                "end": l.end,
                "length": l.length,
                "showLength": l.show_length,
                "showLengthArc": l.show_length_arc,
            })
            for l in scene.lines
        ],
        "angles": [
            _drop_none({
                "vertex": a.vertex,
                "start": a.start,
                "end": a.end,
                "value": a.value,
                "showValue": a.show_value,
                "rotation": a.rotation,
            })
            for a in scene.angles
        ],
        "circles": [
            _drop_none({
                "center": c.center,
                "radius": c.radius,
                "showRadius": c.show_radius,
                "showRadiusArc": c.show_radius_arc,
                "startAngle": c.start_angle,
                "endAngle": c.end_angle,
                "showArc": c.show_arc,
                "fillArc": c.fill_arc,
                "startPoint": c.start_point,
                "endPoint": c.end_point,
            })
            for c in scene.circles
        ],
        "curves": [
            _drop_none({
                "type": c.type,
                "base": c.base,
                "coefficient": c.coefficient,
                "xRange": {"min": c.x_min, "max": c.x_max},
                "points": c.points,
            })
            for c in scene.curves
        ],
    }


# ============================================================================
# GENERATOR OUTPUT CLEANUP
# ============================================================================

_FENCE_OPEN_RE = re.compile(r"^\s*```(?:json)?[ \t]*\n?", re.IGNORECASE)
_FENCE_CLOSE_RE = re.compile(r"\n?[ \t]*```\s*$")
_FRACTION_RE = re.compile(r"(-?\d+)/(\d+)")


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ```json ... ``` markdown fence, if any."""
    s = _FENCE_OPEN_RE.sub("", str(text or ""), count=1)
    s = _FENCE_CLOSE_RE.sub("", s, count=1)
    return s.strip()


def normalize_fractions(text: str) -> str:
    """Rewrite literal fractions like 16/3 into decimals so the text is valid JSON."""

    def _repl(m: re.Match) -> str:
        num, den = int(m.group(1)), int(m.group(2))
        if den == 0:
            return m.group(0)
        return repr(num / den)

    return _FRACTION_RE.sub(_repl, text)


def parse_generator_response(text: str) -> Scene:
    """Turn the raw text answer of the scene generator into a Scene."""
    cleaned = normalize_fractions(strip_code_fence(text))
    if not cleaned:
        raise SceneFormatError("Scene generator response is empty")
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"Could not decode scene JSON: {e}")
        raise SceneFormatError(f"Scene generator response is not valid JSON: {e}") from e
    return parse_scene(payload)


def load_scene_file(path) -> Scene:
    data = load_json_file(path)
    if data is None:
        raise SceneFormatError(f"Could not read scene JSON from {path}")
    return parse_scene(data)
