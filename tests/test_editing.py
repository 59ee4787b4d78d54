from __future__ import annotations

import pytest

from geometry_canvas.canvas_scripts.figure_renderer import editing
from geometry_canvas.canvas_scripts.figure_renderer.scene import (
    AngleArc,
    Circle,
    FullCircle,
    Point,
    PointArc,
    Scene,
    default_scene,
)


def test_rename_cascades_to_every_reference() -> None:
    scene = Scene(
        points=(Point(0.0, 0.0, "A"), Point(1.0, 0.0, "B"), Point(0.0, 1.0, "C")),
        circles=(Circle("A", 1.0, start_point="B", end_point="A"),),
    )
    scene = editing.add_line(scene)
    scene = editing.add_angle(scene)

    out = editing.update_point(scene, 0, label="O")

    assert out.points[0].label == "O"
    assert (out.lines[0].start, out.lines[0].end) == ("O", "B")
    assert out.angles[0].vertex == "O"
    assert out.circles[0].center == "O"
    assert out.circles[0].end_point == "O"
    assert out.circles[0].start_point == "B"
    # input untouched
    assert scene.points[0].label == "A"


def test_numeric_fields_accept_strings_and_ignore_garbage() -> None:
    scene = default_scene()
    out = editing.update_point(scene, 1, x="2.5", y="abc")
    assert out.points[1].x == 2.5
    assert out.points[1].y == scene.points[1].y


@pytest.mark.parametrize(
    "raw, expected",
    [("false", False), ("0", False), ("Off", False), ("true", True), ("1", True), (False, False), (1, True)],
)
def test_flag_fields_parse_form_strings(raw, expected: bool) -> None:
    out = editing.update_line(default_scene(), 0, show_length=raw)
    assert out.lines[0].show_length is expected


def test_unparseable_flag_leaves_field_unchanged() -> None:
    scene = default_scene()
    out = editing.update_point(scene, 0, visible="maybe")
    assert out.points[0].visible is True


def test_unknown_field_and_bad_index_raise() -> None:
    scene = default_scene()
    with pytest.raises(ValueError):
        editing.update_point(scene, 0, colour="red")
    with pytest.raises(IndexError):
        editing.update_line(scene, 7, length=2)
    with pytest.raises(IndexError):
        editing.delete_point(scene, -1)


def test_delete_point_cascades() -> None:
    scene = editing.add_circle(default_scene())
    out = editing.delete_point(scene, 0)

    assert [p.label for p in out.points] == ["B", "C"]
    assert [(ln.start, ln.end) for ln in out.lines] == [("B", "C")]
    assert out.angles == ()
    assert out.circles == ()


def test_delete_point_removes_circles_anchored_on_it() -> None:
    scene = Scene(
        points=(Point(0.0, 0.0, "O"), Point(1.0, 0.0, "P"), Point(0.0, 1.0, "Q")),
        circles=(Circle("O", 1.0, start_point="P", end_point="Q"), Circle("O", 2.0)),
    )
    out = editing.delete_point(scene, 2)
    assert out.circles == (Circle("O", 2.0),)


def test_add_point_uses_next_free_label() -> None:
    assert editing.add_point(default_scene()).points[-1] == Point(0.0, 0.0, "D")
    without_b = editing.delete_point(default_scene(), 1)
    assert editing.add_point(without_b).points[-1].label == "B"


def test_add_helpers_need_enough_points() -> None:
    empty = Scene()
    assert editing.add_line(empty) is empty
    assert editing.add_angle(Scene(points=(Point(0, 0, "A"), Point(1, 0, "B")))).angles == ()
    assert editing.add_circle(empty) is empty


def test_add_curve_defaults() -> None:
    curve = editing.add_curve(Scene()).curves[0]
    assert (curve.type, curve.x_min, curve.x_max, curve.points, curve.coefficient) == ("linear", 0.0, 10.0, 100, 1.0)


def test_update_curve_validates_type() -> None:
    scene = editing.add_curve(Scene())
    assert editing.update_curve(scene, 0, type="Quadratic").curves[0].type == "quadratic"
    with pytest.raises(ValueError):
        editing.update_curve(scene, 0, type="sine")


def test_update_circle_re_derives_kind() -> None:
    scene = editing.add_circle(default_scene())
    assert isinstance(scene.circles[0].kind, FullCircle)
    arc = editing.update_circle(scene, 0, start_angle=0, end_angle="90")
    assert arc.circles[0].kind == AngleArc(0.0, 90.0)
    anchored = editing.update_circle(arc, 0, start_point="B", end_point="C", fill_arc=True)
    assert anchored.circles[0].kind == PointArc("B", "C", True)


def test_move_point_changes_only_coordinates() -> None:
    scene = default_scene()
    out = editing.move_point(scene, 2, 1.5, -2.0)
    assert out.points[2] == Point(1.5, -2.0, "C")
    assert out.points[:2] == scene.points[:2]
    assert out.lines == scene.lines and out.angles == scene.angles


def test_delete_helpers() -> None:
    scene = editing.add_curve(default_scene())
    assert len(editing.delete_line(scene, 0).lines) == 2
    assert editing.delete_angle(scene, 0).angles == ()
    assert editing.delete_curve(scene, 0).curves == ()


def test_summaries() -> None:
    scene = editing.add_circle(editing.add_curve(default_scene()), radius=3)
    scene = editing.update_line(scene, 0, length=None)
    lines = editing.summarize_scene(scene)
    assert lines == [
        "A(0.00, 0.00)",
        "B(4.00, 0.00)",
        "C(0.00, 3.00)",
        "AB: -",
        "BC: 5.00",
        "CA: 3.00",
        "∠BAC: 90°",
        "circle A: r=3.00",
        "y = 1x",
    ]
