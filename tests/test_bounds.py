from __future__ import annotations

import pytest

from geometry_canvas.canvas_scripts.figure_renderer.geometry_bounds import Bounds, compute_scene_bounds
from geometry_canvas.canvas_scripts.figure_renderer.scene import Circle, Curve, Point, Scene


def test_empty_scene_uses_default_extent() -> None:
    assert compute_scene_bounds(Scene()) == Bounds(-10.0, 10.0, -10.0, 10.0)


def test_single_point_is_floored_to_min_span_then_padded() -> None:
    b = compute_scene_bounds(Scene(points=(Point(1.0, 1.0, "A"),)))
    assert (b.x_min, b.x_max) == pytest.approx((0.3, 1.7))
    assert (b.y_min, b.y_max) == pytest.approx((0.3, 1.7))


def test_circle_extent_is_included() -> None:
    scene = Scene(points=(Point(0.0, 0.0, "O"),), circles=(Circle("O", 2.0),))
    b = compute_scene_bounds(scene)
    assert (b.x_min, b.x_max, b.y_min, b.y_max) == pytest.approx((-2.8, 2.8, -2.8, 2.8))


def test_circle_with_unknown_center_is_ignored() -> None:
    scene = Scene(points=(Point(0.0, 0.0, "O"), Point(2.0, 2.0, "A")), circles=(Circle("Z", 50.0),))
    b = compute_scene_bounds(scene)
    assert b.x_max < 5.0


def test_curve_samples_drive_y_extent() -> None:
    scene = Scene(curves=(Curve(type="quadratic", x_min=0.0, x_max=2.0, points=3, coefficient=2.0),))
    b = compute_scene_bounds(scene)
    assert (b.x_min, b.x_max) == pytest.approx((-0.4, 2.4))
    assert (b.y_min, b.y_max) == pytest.approx((-1.6, 9.6))
