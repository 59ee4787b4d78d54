from __future__ import annotations

import numpy as np
import pytest

from geometry_canvas.canvas_scripts.figure_renderer.commands import EllipseShape, TextShape
from geometry_canvas.canvas_scripts.figure_renderer.geometry_renderer import render
from geometry_canvas.canvas_scripts.figure_renderer.mapper import Canvas
from geometry_canvas.canvas_scripts.figure_renderer.scene import (
    Angle,
    Circle,
    Curve,
    Line,
    Point,
    Scene,
    default_scene,
)
from geometry_canvas.canvas_scripts.figure_renderer.utils import PALETTE, validate_scene
from geometry_canvas.canvas_scripts.figure_renderer.view import ViewState, from_matrix


NO_SHAPES = ("angle_arc", "right_angle", "angle_label", "circle", "arc", "sector", "curve", "axis")


def test_triangle_end_to_end(triangle_scene: Scene, identity_view: ViewState, canvas: Canvas) -> None:
    dl = render(triangle_scene, identity_view, canvas=canvas)

    assert len(dl.by_role("segment")) == 3
    assert dl.texts("length_label") == ["5", "5", "5"]
    assert len(dl.by_role("point")) == 3
    assert sorted(dl.texts("point_label")) == ["A", "B", "C"]
    for role in NO_SHAPES:
        assert dl.by_role(role) == []
    assert dl.grid.items == []


def test_unresolved_line_is_skipped_without_error(canvas: Canvas) -> None:
    scene = Scene(points=(Point(0.0, 0.0, "A"), Point(1.0, 1.0, "B")), lines=(Line("A", "Z"),))
    dl = render(scene, canvas=canvas)
    assert dl.by_role("segment") == []
    assert len(dl.by_role("point")) == 2


def test_unresolved_angle_and_circle_are_skipped(canvas: Canvas) -> None:
    scene = Scene(
        points=(Point(0.0, 0.0, "A"), Point(1.0, 0.0, "B")),
        angles=(Angle("A", "B", "Z", 40.0, show_value=True),),
        circles=(Circle("Z", 1.0), Circle("A", 1.0, start_point="B", end_point="Z")),
    )
    dl = render(scene, canvas=canvas)
    for role in ("angle_arc", "angle_label", "circle", "arc", "sector"):
        assert dl.by_role(role) == []


def test_invisible_point_is_not_drawn_or_draggable(canvas: Canvas) -> None:
    scene = Scene(points=(Point(0.0, 0.0, "A"), Point(2.0, 2.0, "H", visible=False)))
    dl = render(scene, canvas=canvas)
    assert dl.texts("point_label") == ["A"]
    assert len(dl.by_role("point")) == 1
    assert [h.label for h in dl.handles] == ["A"]


def test_layers_follow_fixed_z_order(canvas: Canvas) -> None:
    scene = Scene(
        points=(Point(0.0, 0.0, "O"), Point(3.0, 0.0, "P"), Point(0.0, 3.0, "Q")),
        lines=(Line("O", "P"),),
        angles=(Angle("O", "P", "Q", 60.0, show_value=True),),
        circles=(Circle("O", 2.0),),
        curves=(Curve(type="linear", x_min=0.0, x_max=3.0, points=4),),
    )
    items = render(scene, canvas=canvas).shapes.items
    first = {}
    for i, s in enumerate(items):
        first.setdefault(s.role, i)
    order = ["axis", "curve", "segment", "angle_arc", "circle", "point"]
    assert [first[r] for r in order] == sorted(first[r] for r in order)


def test_axes_only_with_curves(canvas: Canvas) -> None:
    base = Scene(points=(Point(1.0, 1.0, "A"),))
    assert render(base, canvas=canvas).by_role("axis") == []

    with_curve = Scene(points=base.points, curves=(Curve(type="quadratic", x_min=-2.0, x_max=2.0, coefficient=2.0),))
    dl = render(with_curve, canvas=canvas)
    assert len(dl.by_role("axis")) == 2
    assert len(dl.by_role("curve")) == 1
    assert dl.texts("curve_label") == ["y = 2x²"]


def test_right_angle_uses_glyph(canvas: Canvas) -> None:
    dl = render(default_scene(), canvas=canvas)
    assert len(dl.by_role("right_angle")) == 1
    assert dl.by_role("angle_arc") == []


def test_near_right_angle_uses_arc_and_label(canvas: Canvas) -> None:
    scene = Scene(
        points=(Point(0.0, 0.0, "A"), Point(4.0, 0.0, "B"), Point(0.0, 3.0, "C")),
        angles=(Angle("A", "B", "C", 89.9, show_value=True),),
    )
    dl = render(scene, canvas=canvas)
    assert dl.by_role("right_angle") == []
    assert len(dl.by_role("angle_arc")) == 1
    assert dl.texts("angle_label") == ["89.9°"]


@pytest.mark.parametrize("value", [90.0, 45.0])
def test_hidden_angle_value_hides_the_whole_marker(canvas: Canvas, value: float) -> None:
    scene = Scene(
        points=(Point(0.0, 0.0, "A"), Point(4.0, 0.0, "B"), Point(0.0, 3.0, "C")),
        angles=(Angle("A", "B", "C", value, show_value=False),),
    )
    dl = render(scene, canvas=canvas)
    for role in ("right_angle", "angle_arc", "angle_label"):
        assert dl.by_role(role) == []


def test_circle_variants(canvas: Canvas) -> None:
    points = (Point(0.0, 0.0, "O"), Point(3.0, 0.0, "P"), Point(0.0, 3.0, "Q"))
    scene = Scene(
        points=points,
        circles=(
            Circle("O", 3.0),
            Circle("O", 3.0, start_point="P", end_point="Q", fill_arc=True),
            Circle("O", 2.0, start_angle=0.0, end_angle=120.0),
            Circle("O", 1.0, start_angle=0.0, end_angle=120.0, show_arc=False),
        ),
    )
    dl = render(scene, canvas=canvas)
    assert len(dl.by_role("circle")) == 2
    assert len(dl.by_role("sector")) == 1
    assert len(dl.by_role("sector_edge")) == 2
    assert len(dl.by_role("arc")) == 1


def test_sector_path_closes_through_center(canvas: Canvas) -> None:
    scene = Scene(
        points=(Point(0.0, 0.0, "O"), Point(3.0, 0.0, "P"), Point(0.0, 3.0, "Q")),
        circles=(Circle("O", 3.0, start_point="P", end_point="Q", fill_arc=True),),
    )
    sector = render(scene, canvas=canvas).by_role("sector")[0]
    ops = [seg.op for seg in sector.segments]
    assert ops == ["M", "L", "A", "Z"]
    arc = sector.segments[2]
    # data-CCW becomes SVG sweep-flag 0 on a y-down canvas
    assert arc.args[3] == 0.0 and arc.args[4] == 0.0
    assert sector.fill == PALETTE["circle"]


def test_radius_annotation_and_label(canvas: Canvas) -> None:
    scene = Scene(points=(Point(0.0, 0.0, "O"),), circles=(Circle("O", 2.5, show_radius=True),))
    dl = render(scene, canvas=canvas)
    assert len(dl.by_role("radius")) == 1
    assert dl.texts("radius_label") == ["r=2.5"]


def test_grid_mode_draws_round_circles(canvas: Canvas) -> None:
    scene = Scene(points=(Point(0.0, 0.0, "O"), Point(8.0, 1.0, "A")), circles=(Circle("O", 1.0),))
    circle = render(scene, ViewState(show_grid=True), canvas=canvas).by_role("circle")[0]
    assert isinstance(circle, EllipseShape)
    assert circle.rx == pytest.approx(circle.ry)


def test_grid_lives_in_its_own_group(canvas: Canvas) -> None:
    view = ViewState(show_grid=True, rotation=90.0, zoom=2.0)
    dl = render(Scene(points=(Point(1.0, 1.0, "A"),)), view, canvas=canvas)

    assert dl.by_role("grid_background")
    assert dl.by_role("grid_axis")
    assert all(s in dl.grid.items for s in dl.by_role("grid_line"))
    a, b, c, d, _, _ = dl.grid.transform
    assert (a, b, c, d) == pytest.approx((2.0, 0.0, 0.0, 2.0))


def test_texts_carry_counter_transforms(canvas: Canvas, triangle_scene: Scene) -> None:
    view = ViewState(rotation=60.0, flip_y=True)
    dl = render(triangle_scene, view, canvas=canvas)
    shape_t = from_matrix(dl.shapes.transform)
    texts = [s for s in dl.shapes.items if isinstance(s, TextShape)]
    assert texts
    for t in texts:
        assert t.transform is not None
        full = from_matrix(t.transform) + shape_t
        assert np.allclose(full.get_matrix()[:2, :2], np.eye(2))


def test_highlighted_point_uses_drag_color(canvas: Canvas, triangle_scene: Scene) -> None:
    dl = render(triangle_scene, canvas=canvas, highlight="B")
    fills = {s.fill for s in dl.by_role("point")}
    assert fills == {PALETTE["point"], PALETTE["point_active"]}


def test_render_is_pure(canvas: Canvas, triangle_scene: Scene) -> None:
    before = Scene(points=triangle_scene.points, lines=triangle_scene.lines)
    first = render(triangle_scene, canvas=canvas)
    second = render(triangle_scene, canvas=canvas)
    assert first.shapes.items == second.shapes.items
    assert first.handles == second.handles
    assert triangle_scene == before


def test_validate_scene_reports_dangling_references() -> None:
    scene = Scene(
        points=(Point(0.0, 0.0, "A"), Point(1.0, 0.0, "A")),
        lines=(Line("A", "Z"),),
        circles=(Circle("A", 1.0, start_point="A"),),
    )
    issues = validate_scene(scene)
    assert any("Duplicate" in i for i in issues)
    assert any("'Z'" in i for i in issues)
    assert any("only one arc point" in i for i in issues)


def test_validate_scene_names_the_fallback_for_a_lone_arc_point() -> None:
    points = (Point(0.0, 0.0, "O"), Point(1.0, 0.0, "P"))
    full = validate_scene(Scene(points=points, circles=(Circle("O", 1.0, end_point="P"),)))
    numeric = validate_scene(
        Scene(points=points, circles=(Circle("O", 1.0, end_point="P", start_angle=0.0, end_angle=90.0),))
    )
    assert "Circle 0 has only one arc point; drawn as a full circle" in full
    assert "Circle 0 has only one arc point; drawn as an arc from its start/end angles" in numeric
