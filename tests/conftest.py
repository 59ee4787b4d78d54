from __future__ import annotations

import os

# headless matplotlib before anything imports pyplot
os.environ.setdefault("MPLBACKEND", "Agg")

import matplotlib  # noqa: E402

matplotlib.use("Agg")

import pytest  # noqa: E402

from geometry_canvas.canvas_scripts.figure_renderer.mapper import Canvas  # noqa: E402
from geometry_canvas.canvas_scripts.figure_renderer.scene import Line, Point, Scene  # noqa: E402
from geometry_canvas.canvas_scripts.figure_renderer.view import ViewState  # noqa: E402


@pytest.fixture
def canvas() -> Canvas:
    return Canvas(width=800.0, height=600.0, padding=80.0)


@pytest.fixture
def triangle_scene() -> Scene:
    return Scene(
        points=(
            Point(0.0, 0.0, "A"),
            Point(5.0, 0.0, "B"),
            Point(2.5, 4.0, "C"),
        ),
        lines=(
            Line("A", "B", length=5.0, show_length=True),
            Line("B", "C", length=5.0, show_length=True),
            Line("C", "A", length=5.0, show_length=True),
        ),
    )


@pytest.fixture
def identity_view() -> ViewState:
    return ViewState()


@pytest.fixture
def scene_payload() -> dict:
    return {
        "points": [
            {"x": 0, "y": 0, "label": "O"},
            {"x": 3, "y": 0, "label": "P"},
            {"x": 0, "y": 3, "label": "Q", "visible": False},
        ],
        "lines": [{"start": "O", "end": "P", "length": 3, "showLength": True}],
        "angles": [{"vertex": "O", "start": "P", "end": "Q", "value": 90, "showValue": True}],
        "circles": [
            {"center": "O", "radius": 3, "startPoint": "P", "endPoint": "Q", "fillArc": True},
            {"center": "O", "radius": 1, "showRadius": True},
        ],
        "curves": [{"type": "quadratic", "coefficient": 2, "xRange": {"min": 0, "max": 2}}],
    }
