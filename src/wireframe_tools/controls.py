"""Scene ownership, discrete camera/model commands, and the animation tick.

The controller holds the current Scene snapshot. Every command builds a new
Scene and swaps it in, so a render pass always sees one consistent snapshot
and commands take effect on the next pass.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from wireframe_tools.constants import (
    CAMERA_MOVE_STEP,
    CAMERA_PAN_STEP,
    MS_PER_SECOND,
)
from wireframe_tools.errors import ValidationError
from wireframe_tools.rendering.camera import Camera, validate_camera
from wireframe_tools.rendering.pipeline import RenderedFrame, render_scene
from wireframe_tools.rendering.transforms import (
    AxisSpec,
    animation_step,
    axis_vector,
    rotate_about_point,
)
from wireframe_tools.rendering.vec_math import Vector
from wireframe_tools.scene import Animation, Model, Scene, scene_from_dict

logger = logging.getLogger(__name__)


class SceneController:
    """Owns the active Scene and applies commands between render passes."""

    def __init__(
        self,
        scene: Scene,
        width: int,
        height: int,
        animation_enabled: bool = True,
    ) -> None:
        self.scene = scene
        self.width = width
        self.height = height
        self.animation_enabled = animation_enabled
        self.time = 0.0  # seconds of animation applied so far

    # -- scene replacement ----------------------------------------------

    def update_scene(self, record: Mapping[str, Any]) -> Scene:
        """Replace the scene from a record; on failure the current scene stays active.

        Raises:
            ValidationError: If the record is invalid.
        """
        try:
            scene = scene_from_dict(record)
        except ValidationError:
            logger.warning('Scene update rejected; keeping previous scene', exc_info=True)
            raise
        self.scene = scene
        self.time = 0.0
        return scene

    # -- camera commands ------------------------------------------------

    def _set_camera(self, camera: Camera) -> None:
        validate_camera(camera)
        self.scene = self.scene.with_camera(camera)

    def translate_camera(self, dx: float, dy: float, dz: float) -> None:
        """Move PRP and SRP together by (dx, dy, dz) in world coordinates."""
        self._set_camera(self.scene.camera.moved(Vector((dx, dy, dz))))

    def rotate_camera_about_target(self, angle: float) -> None:
        """Orbit PRP about SRP around the VUP axis by angle (radians)."""
        cam = self.scene.camera
        rot = rotate_about_point(cam.srp, cam.vup, angle)
        prp = (rot @ cam.prp.to_point()).xyz  # type: ignore[union-attr]
        self._set_camera(Camera(prp, cam.srp, cam.vup, cam.clip))

    def pan_camera(self, angle: float = CAMERA_PAN_STEP) -> None:
        """Turn the view direction: rotate SRP about PRP around the VUP axis."""
        cam = self.scene.camera
        rot = rotate_about_point(cam.prp, cam.vup, angle)
        srp = (rot @ cam.srp.to_point()).xyz  # type: ignore[union-attr]
        self._set_camera(Camera(cam.prp, srp, cam.vup, cam.clip))

    def move_forward(self, amount: float = CAMERA_MOVE_STEP) -> None:
        self.translate_camera(0.0, 0.0, -amount)

    def move_backward(self, amount: float = CAMERA_MOVE_STEP) -> None:
        self.translate_camera(0.0, 0.0, amount)

    def move_left(self, amount: float = CAMERA_MOVE_STEP) -> None:
        self.translate_camera(-amount, 0.0, 0.0)

    def move_right(self, amount: float = CAMERA_MOVE_STEP) -> None:
        self.translate_camera(amount, 0.0, 0.0)

    # -- model commands -------------------------------------------------

    def rotate_model(self, index: int, axis: AxisSpec, angle: float) -> None:
        """Rotate model[index] about its own center.

        Raises:
            IndexError: If index is out of range.
            InvalidAxisError: If the axis is invalid.
        """
        model = self._model(index)
        step = rotate_about_point(model.world_center, axis, angle)
        self.scene = self.scene.with_model(index, model.with_matrix(step @ model.matrix))  # type: ignore[arg-type]

    def set_animation(self, index: int, axis: AxisSpec | None, rps: float) -> None:
        """Set (or clear, with axis None or rps 0) the animation of model[index]."""
        model = self._model(index)
        animation = None
        if axis is not None and rps != 0:
            animation = Animation(axis=axis_vector(axis), rps=float(rps))
        self.scene = self.scene.with_model(index, model.with_animation(animation))

    def _model(self, index: int) -> Model:
        if not 0 <= index < len(self.scene.models):
            raise IndexError(f'model index {index} out of range (0..{len(self.scene.models) - 1})')
        return self.scene.models[index]

    # -- frame production -----------------------------------------------

    def render(self) -> RenderedFrame:
        """Render the current scene without advancing time."""
        return render_scene(self.scene, self.width, self.height, time=self.time)

    def advance(self, delta_ms: float) -> RenderedFrame:
        """Apply delta_ms of animation to every animated model, then render.

        Raises:
            ValueError: If delta_ms is negative.
        """
        if delta_ms < 0:
            raise ValueError(f'delta_ms must be non-negative, got {delta_ms!r}')
        delta_seconds = delta_ms / MS_PER_SECOND
        if self.animation_enabled and delta_seconds > 0:
            scene = self.scene
            for index, model in enumerate(scene.models):
                if model.animation is None:
                    continue
                matrix = animation_step(
                    model.matrix,
                    model.world_center,
                    model.animation.axis,
                    model.animation.rps,
                    delta_seconds,
                )
                scene = scene.with_model(index, model.with_matrix(matrix))
            self.scene = scene
            self.time += delta_seconds
        return self.render()
