from __future__ import annotations

from typing import List

import pytest

from geometry_canvas.canvas_scripts.figure_renderer.commands import DrawList
from geometry_canvas.canvas_scripts.figure_renderer.interaction import InteractionController
from geometry_canvas.canvas_scripts.figure_renderer.mapper import Canvas
from geometry_canvas.canvas_scripts.figure_renderer.scene import Point, Scene
from geometry_canvas.canvas_scripts.figure_renderer.utils import PALETTE
from geometry_canvas.canvas_scripts.figure_renderer.view import ViewState


def _controller(scene: Scene, canvas: Canvas, **kwargs) -> InteractionController:
    return InteractionController(scene=scene, canvas=canvas, **kwargs)


def test_drag_updates_exactly_one_point(triangle_scene: Scene, canvas: Canvas) -> None:
    emitted: List[Scene] = []
    ctrl = _controller(triangle_scene, canvas, on_scene_change=emitted.append)
    mapper = ctrl.drawlist.mapper
    handle = ctrl.drawlist.handles[1]

    assert ctrl.pointer_down(handle.x, handle.y) is True
    ctrl.pointer_move(300.0, 200.0)

    assert len(emitted) == 1
    new = emitted[0]
    ex, ey = mapper.to_data(300.0, 200.0)
    assert (new.points[1].x, new.points[1].y) == pytest.approx((ex, ey))
    assert new.points[0] == triangle_scene.points[0]
    assert new.points[2] == triangle_scene.points[2]
    assert new.lines == triangle_scene.lines
    assert (new.angles, new.circles, new.curves) == (
        triangle_scene.angles,
        triangle_scene.circles,
        triangle_scene.curves,
    )
    # the host owns the scene: nothing adopted until it calls set_scene
    assert ctrl.scene == triangle_scene


def test_drag_under_rotation_inverts_the_view(triangle_scene: Scene, canvas: Canvas) -> None:
    emitted: List[Scene] = []
    ctrl = _controller(triangle_scene, canvas, view=ViewState(rotation=90.0, zoom=1.5), on_scene_change=emitted.append)
    dl = ctrl.drawlist
    handle = dl.handles[0]

    assert ctrl.pointer_down(*dl.transforms.shape_to_screen(handle.x, handle.y))
    target = (350.0, 260.0)
    ctrl.pointer_move(*dl.transforms.shape_to_screen(*target))

    assert (emitted[0].points[0].x, emitted[0].points[0].y) == pytest.approx(dl.mapper.to_data(*target))


def test_without_callback_the_controller_adopts_the_scene(triangle_scene: Scene, canvas: Canvas) -> None:
    ctrl = _controller(triangle_scene, canvas)
    handle = ctrl.drawlist.handles[0]
    ctrl.pointer_down(handle.x, handle.y)
    ctrl.pointer_move(handle.x + 40.0, handle.y)
    assert ctrl.scene.points[0] != triangle_scene.points[0]
    assert ctrl.scene.points[1:] == triangle_scene.points[1:]


def test_drag_highlight_is_cleared_on_release(triangle_scene: Scene, canvas: Canvas) -> None:
    ctrl = _controller(triangle_scene, canvas)
    handle = ctrl.drawlist.handles[2]
    ctrl.pointer_down(handle.x, handle.y)
    assert PALETTE["point_active"] in {s.fill for s in ctrl.drawlist.by_role("point")}
    ctrl.pointer_up()
    assert ctrl.dragging is None
    assert PALETTE["point_active"] not in {s.fill for s in ctrl.drawlist.by_role("point")}


def test_invisible_point_is_not_a_hit_target(canvas: Canvas) -> None:
    scene = Scene(points=(Point(0.0, 0.0, "A"), Point(4.0, 4.0, "H", visible=False)))
    ctrl = _controller(scene, canvas)
    sx, sy = ctrl.drawlist.mapper.to_screen(4.0, 4.0)
    assert ctrl.hit_test(sx, sy) is None
    assert ctrl.pointer_down(sx, sy) is False


def test_pan_accumulates_screen_offset(triangle_scene: Scene, canvas: Canvas) -> None:
    ctrl = _controller(triangle_scene, canvas)
    assert ctrl.pointer_down(5.0, 5.0) is False
    ctrl.pointer_move(15.0, 25.0)
    ctrl.pointer_move(20.0, 25.0)
    ctrl.pointer_up()
    assert ctrl.view.pan == pytest.approx((15.0, 20.0))


def test_wheel_and_buttons_step_zoom(triangle_scene: Scene, canvas: Canvas) -> None:
    ctrl = _controller(triangle_scene, canvas)
    ctrl.wheel(-120.0)
    assert ctrl.view.zoom == pytest.approx(1.1)
    ctrl.wheel(120.0)
    ctrl.wheel(120.0)
    assert ctrl.view.zoom == pytest.approx(0.9)
    ctrl.zoom_in()
    assert ctrl.view.zoom == pytest.approx(1.1)
    for _ in range(10):
        ctrl.zoom_out()
    assert ctrl.view.zoom == 0.5
    for _ in range(20):
        ctrl.zoom_in()
    assert ctrl.view.zoom == 3.0


def test_view_toggles_and_reset(triangle_scene: Scene, canvas: Canvas) -> None:
    ctrl = _controller(triangle_scene, canvas)
    ctrl.rotate_left()
    assert ctrl.view.rotation == 345.0
    ctrl.rotate_right()
    ctrl.rotate_right()
    assert ctrl.view.rotation == 15.0
    ctrl.toggle_flip_x()
    ctrl.toggle_grid()
    ctrl.zoom_in()
    ctrl.reset_view()
    assert (ctrl.view.zoom, ctrl.view.pan, ctrl.view.rotation) == (1.0, (0.0, 0.0), 0.0)
    assert ctrl.view.flip_x and ctrl.view.show_grid
    ctrl.toggle_flip_y()
    assert ctrl.view.flip_y
    assert ctrl.drawlist.grid.items


def test_every_change_renders_once(triangle_scene: Scene, canvas: Canvas) -> None:
    frames: List[DrawList] = []
    ctrl = _controller(triangle_scene, canvas, on_render=frames.append)
    assert len(frames) == 1
    ctrl.zoom_in()
    ctrl.toggle_grid()
    ctrl.set_scene(Scene())
    assert len(frames) == 4
    assert frames[-1] is ctrl.drawlist
