"""
utils.py — Shared helpers for the figure_renderer package

This file contains small, reusable utilities used by:
- geometry_renderer.py / annotations.py (colours)
- render_scenes.py / interaction.py     (scene validation warnings)

It intentionally does NOT contain:
- render() / any draw-command construction
- backends (plotter.py, svg_export.py)

Keep it "boring + stable".
"""

from typing import Dict, List

from .scene import AngleArc, Scene


# ============================================================================
# COLOR
# ============================================================================

PALETTE: Dict[str, str] = {
    "segment": "#212529",
    "annotation": "#495057",
    "angle": "#fd7e14",
    "circle": "#20c997",
    "point": "#4dabf7",
    "point_active": "#ff6b6b",
    "curve_linear": "#ff6b6b",
    "curve": "#4dabf7",
    "axis": "#495057",
    "grid": "#dee2e6",
    "grid_origin": "#adb5bd",
    "grid_text": "#6c757d",
    "background": "#f8f9fa",
}


def get_curve_color(curve_type: str) -> str:
    """Linear curves stand out in red; every other family shares the point blue."""
    if str(curve_type).strip().lower() == "linear":
        return PALETTE["curve_linear"]
    return PALETTE["curve"]


# ============================================================================
# VALIDATION
# ============================================================================

def validate_scene(scene: Scene) -> List[str]:
    """
    Return a list of human-readable issues with a scene.

    None of these stop a render (unresolved entities are skipped there);
    this is for hosts and the batch renderer to surface what was dropped.
    """
    issues: List[str] = []
    labels = scene.point_map()

    seen = set()
    for p in scene.points:
        if p.label in seen:
            issues.append(f"Duplicate point label '{p.label}' (first one is used)")
        seen.add(p.label)

    for i, ln in enumerate(scene.lines):
        for ref in (ln.start, ln.end):
            if ref not in labels:
                issues.append(f"Line {i} references unknown point '{ref}'")

    for i, ang in enumerate(scene.angles):
        for ref in (ang.vertex, ang.start, ang.end):
            if ref not in labels:
                issues.append(f"Angle {i} references unknown point '{ref}'")

    for i, c in enumerate(scene.circles):
        if c.center not in labels:
            issues.append(f"Circle {i} references unknown center '{c.center}'")
        if c.radius <= 0:
            issues.append(f"Circle {i} has non-positive radius {c.radius}")
        for ref in (c.start_point, c.end_point):
            if ref is not None and ref not in labels:
                issues.append(f"Circle {i} references unknown arc point '{ref}'")
        if (c.start_point is None) != (c.end_point is None):
            drawn = "an arc from its start/end angles" if isinstance(c.kind, AngleArc) else "a full circle"
            issues.append(f"Circle {i} has only one arc point; drawn as {drawn}")
        elif c.start_point is None and (c.start_angle is None) != (c.end_angle is None):
            issues.append(f"Circle {i} has only one arc angle; drawn as a full circle")

    for i, cv in enumerate(scene.curves):
        if cv.x_min > cv.x_max:
            issues.append(f"Curve {i} has xRange.min > xRange.max")

    return issues
