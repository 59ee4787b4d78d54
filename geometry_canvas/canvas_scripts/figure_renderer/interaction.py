"""
interaction.py — Interaction Controller for figure_renderer

This file contains ONLY:
- InteractionController: owns {scene, view}, turns pointer / wheel / button
  events into new scene or view values, and re-renders synchronously

It intentionally does NOT contain:
- any event-loop / GUI toolkit binding (hosts forward raw events)
- draw-command construction (geometry_renderer.py)

Data flow is one-way:

    event -> new ViewState or new Scene -> render(scene, view) -> DrawList

Scene edits are handed to `on_scene_change`; without a callback the
controller adopts the new scene itself. Every state change renders once.
"""

from __future__ import annotations

from typing import Callable, Optional, Tuple

from geometry_canvas.config import settings
from ..utils import setup_logger
from .commands import DrawList, PointHandle
from .editing import move_point
from .geometry_renderer import render
from .mapper import Canvas
from .scene import Scene, default_scene
from .view import ViewState

logger = setup_logger(__name__)

SceneCallback = Callable[[Scene], None]
RenderCallback = Callable[[DrawList], None]


class InteractionController:
    def __init__(
        self,
        scene: Optional[Scene] = None,
        view: Optional[ViewState] = None,
        canvas: Optional[Canvas] = None,
        on_scene_change: Optional[SceneCallback] = None,
        on_render: Optional[RenderCallback] = None,
    ) -> None:
        self.scene = scene if scene is not None else default_scene()
        self.view = view if view is not None else ViewState()
        self.canvas = canvas if canvas is not None else Canvas.from_settings()
        self.on_scene_change = on_scene_change
        self.on_render = on_render

        self._drag_index: Optional[int] = None
        self._pan_from: Optional[Tuple[float, float]] = None
        self.drawlist: DrawList = self.render()

    # ------------------------------------------------------------------
    # rendering / state setters
    # ------------------------------------------------------------------

    @property
    def dragging(self) -> Optional[int]:
        return self._drag_index

    def _highlight(self) -> Optional[str]:
        if self._drag_index is None or self._drag_index >= len(self.scene.points):
            return None
        return self.scene.points[self._drag_index].label

    def render(self) -> DrawList:
        self.drawlist = render(self.scene, self.view, canvas=self.canvas, highlight=self._highlight())
        if self.on_render is not None:
            self.on_render(self.drawlist)
        return self.drawlist

    def set_scene(self, scene: Scene) -> DrawList:
        self.scene = scene
        return self.render()

    def set_view(self, view: ViewState) -> DrawList:
        self.view = view
        return self.render()

    def _emit_scene(self, scene: Scene) -> None:
        if self.on_scene_change is not None:
            self.on_scene_change(scene)
        else:
            self.set_scene(scene)

    # ------------------------------------------------------------------
    # pointer
    # ------------------------------------------------------------------

    def hit_test(self, sx: float, sy: float) -> Optional[PointHandle]:
        """Topmost visible point whose hit-circle contains the pointer."""
        x, y = self.drawlist.transforms.screen_to_shape(sx, sy)
        for handle in reversed(self.drawlist.handles):
            if handle.hit(x, y):
                return handle
        return None

    def pointer_down(self, sx: float, sy: float) -> bool:
        """Start a point drag (True) or a pan (False)."""
        handle = self.hit_test(sx, sy)
        if handle is not None:
            self._drag_index = handle.index
            logger.debug(f"Drag start on point {handle.label} (index {handle.index})")
            self.render()
            return True
        self._pan_from = (float(sx), float(sy))
        return False

    def pointer_move(self, sx: float, sy: float) -> Optional[Scene]:
        """
        While dragging: map the pointer back through the shape transform and
        the mapper of the last frame, and emit a scene with that one point
        moved. While panning: accumulate the screen offset into the view.
        """
        if self._drag_index is not None:
            x, y = self.drawlist.transforms.screen_to_shape(sx, sy)
            dx, dy = self.drawlist.mapper.to_data(x, y)
            scene = move_point(self.scene, self._drag_index, dx, dy)
            self._emit_scene(scene)
            return scene

        if self._pan_from is not None:
            px, py = self._pan_from
            self._pan_from = (float(sx), float(sy))
            self.set_view(self.view.panned_by(sx - px, sy - py))
        return None

    def pointer_up(self) -> None:
        was_dragging = self._drag_index is not None
        self._drag_index = None
        self._pan_from = None
        if was_dragging:
            self.render()

    # ------------------------------------------------------------------
    # zoom / view buttons
    # ------------------------------------------------------------------

    def wheel(self, delta_y: float) -> DrawList:
        """Wheel up (negative delta) zooms in by one wheel step."""
        if delta_y == 0:
            return self.drawlist
        step = settings.ZOOM_WHEEL_STEP if delta_y < 0 else -settings.ZOOM_WHEEL_STEP
        return self.set_view(self.view.zoomed_by(step))

    def zoom_in(self) -> DrawList:
        return self.set_view(self.view.zoomed_by(settings.ZOOM_BUTTON_STEP))

    def zoom_out(self) -> DrawList:
        return self.set_view(self.view.zoomed_by(-settings.ZOOM_BUTTON_STEP))

    def reset_view(self) -> DrawList:
        return self.set_view(self.view.reset())

    def toggle_grid(self) -> DrawList:
        return self.set_view(self.view.toggled_grid())

    def toggle_flip_x(self) -> DrawList:
        return self.set_view(self.view.toggled_flip_x())

    def toggle_flip_y(self) -> DrawList:
        return self.set_view(self.view.toggled_flip_y())

    def rotate_left(self) -> DrawList:
        return self.set_view(self.view.rotated_by(-settings.ROTATION_STEP))

    def rotate_right(self) -> DrawList:
        return self.set_view(self.view.rotated_by(settings.ROTATION_STEP))
