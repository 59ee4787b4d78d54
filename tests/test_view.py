from __future__ import annotations

import numpy as np
import pytest

from geometry_canvas.canvas_scripts.figure_renderer.mapper import Canvas
from geometry_canvas.canvas_scripts.figure_renderer.view import (
    ViewState,
    ViewTransforms,
    as_matrix,
    from_matrix,
    grid_transform,
    shape_transform,
    text_counter_transform,
)


def test_zoom_is_clamped() -> None:
    v = ViewState()
    assert v.zoomed_by(10.0).zoom == 3.0
    for _ in range(20):
        v = v.zoomed_by(-0.1)
    assert v.zoom == 0.5


def test_wheel_steps_do_not_drift() -> None:
    v = ViewState()
    for _ in range(5):
        v = v.zoomed_by(0.1)
    assert v.zoom == 1.5


def test_rotation_wraps_into_range() -> None:
    assert ViewState().rotated_by(-15.0).rotation == 345.0
    assert ViewState(rotation=345.0).rotated_by(15.0).rotation == 0.0


def test_reset_keeps_flips_and_grid() -> None:
    v = ViewState(zoom=2.0, pan=(10.0, 5.0), rotation=30.0, flip_x=True, show_grid=True)
    r = v.reset()
    assert (r.zoom, r.pan, r.rotation) == (1.0, (0.0, 0.0), 0.0)
    assert r.flip_x and r.show_grid


def test_grid_layer_ignores_rotation_and_flip(canvas: Canvas) -> None:
    v = ViewState(zoom=2.0, rotation=90.0, flip_x=True)
    cx, cy = canvas.center
    x, y = grid_transform(v, canvas).transform((cx + 10.0, cy))
    assert (x, y) == pytest.approx((cx + 20.0, cy))


def test_shape_layer_applies_flip_about_center(canvas: Canvas) -> None:
    cx, cy = canvas.center
    x, y = shape_transform(ViewState(flip_x=True), canvas).transform((cx + 10.0, cy + 5.0))
    assert (x, y) == pytest.approx((cx - 10.0, cy + 5.0))


def test_shape_layer_applies_pan_last(canvas: Canvas) -> None:
    cx, cy = canvas.center
    x, y = shape_transform(ViewState(pan=(5.0, -3.0), zoom=2.0), canvas).transform((cx, cy))
    assert (x, y) == pytest.approx((cx + 5.0, cy - 3.0))


@pytest.mark.parametrize("rotation", [0.0, 30.0, 90.0, 225.0])
@pytest.mark.parametrize("flip_x, flip_y", [(False, False), (True, False), (False, True), (True, True)])
def test_text_stays_upright_under_any_orientation(canvas: Canvas, rotation: float, flip_x: bool, flip_y: bool) -> None:
    v = ViewState(zoom=2.0, rotation=rotation, flip_x=flip_x, flip_y=flip_y)
    x, y = 123.0, 456.0
    full = text_counter_transform(v, x, y) + shape_transform(v, canvas)

    linear = full.get_matrix()[:2, :2]
    assert np.allclose(linear, 2.0 * np.eye(2))
    # the anchor itself lands where the shape layer puts it
    assert tuple(full.transform((x, y))) == pytest.approx(tuple(shape_transform(v, canvas).transform((x, y))))


def test_screen_to_shape_inverts_shape_transform(canvas: Canvas) -> None:
    t = ViewTransforms.build(ViewState(zoom=1.7, pan=(12.0, -4.0), rotation=75.0, flip_y=True), canvas)
    sx, sy = t.shape_to_screen(210.0, 333.0)
    assert t.screen_to_shape(sx, sy) == pytest.approx((210.0, 333.0))


def test_matrix_conversion_round_trips(canvas: Canvas) -> None:
    t = shape_transform(ViewState(zoom=1.5, rotation=15.0, flip_x=True, pan=(3.0, 4.0)), canvas)
    assert np.allclose(from_matrix(as_matrix(t)).get_matrix(), t.get_matrix())
