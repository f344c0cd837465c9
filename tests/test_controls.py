"""Tests for the scene controller commands and animation tick."""

from __future__ import annotations

import math
from typing import Any

import pytest

from wireframe_tools.controls import SceneController
from wireframe_tools.errors import InvalidSceneError
from wireframe_tools.rendering.vec_math import Matrix, Vector, vector3
from wireframe_tools.scene import scene_from_dict


def _record(animation: dict[str, Any] | None = None) -> dict[str, Any]:
    cube: dict[str, Any] = {'type': 'cube', 'center': [0, 0, 0], 'width': 2, 'height': 2, 'depth': 2}
    if animation is not None:
        cube['animation'] = animation
    return {
        'camera': {
            'prp': [0, 0, 5],
            'srp': [0, 0, 0],
            'vup': [0, 1, 0],
            'clip': [-1, 1, -1, 1, -1, -10],
        },
        'models': [cube],
    }


def _controller(animation: dict[str, Any] | None = None, **kwargs: Any) -> SceneController:
    return SceneController(scene_from_dict(_record(animation)), 500, 500, **kwargs)


def test_full_revolution_returns_to_starting_matrix() -> None:
    """1 rps for 1000 ms is one whole turn."""
    ctl = _controller({'axis': 'y', 'rps': 1.0})
    ctl.advance(1000)
    assert ctl.scene.models[0].matrix.isclose(Matrix.identity())
    assert ctl.time == pytest.approx(1.0)


def test_full_revolution_in_small_ticks() -> None:
    """Ten 100 ms ticks at 1 rps also close the loop."""
    ctl = _controller({'axis': [1, 1, 0], 'rps': 1.0})
    for _ in range(10):
        ctl.advance(100)
    assert ctl.scene.models[0].matrix.isclose(Matrix.identity())


def test_quarter_turn_moves_vertices() -> None:
    """250 ms at 1 rps about y turns (-1, 1, 1) to (1, 1, 1)."""
    ctl = _controller({'axis': 'y', 'rps': 1.0})
    frame = ctl.advance(250)
    model = ctl.scene.models[0]
    assert (model.matrix @ model.vertices[0]).isclose(Vector.point(1, 1, 1))  # type: ignore[union-attr]
    assert frame.time == pytest.approx(0.25)
    assert len(frame.segments) == 12


def test_advance_leaves_old_snapshot_untouched() -> None:
    """Commands swap in a new Scene; earlier snapshots keep their state."""
    ctl = _controller({'axis': 'y', 'rps': 1.0})
    before = ctl.scene
    ctl.advance(100)
    assert ctl.scene is not before
    assert before.models[0].matrix == Matrix.identity()


def test_animation_disabled_freezes_models() -> None:
    """With animation off the clock and matrices stay put."""
    ctl = _controller({'axis': 'y', 'rps': 1.0}, animation_enabled=False)
    ctl.advance(500)
    assert ctl.scene.models[0].matrix == Matrix.identity()
    assert ctl.time == 0.0


def test_advance_negative_delta_raises() -> None:
    """Time does not run backward."""
    with pytest.raises(ValueError):
        _controller().advance(-1)


def test_render_does_not_advance() -> None:
    """render() draws the current state only."""
    ctl = _controller({'axis': 'y', 'rps': 1.0})
    frame = ctl.render()
    assert frame.time == 0.0
    assert ctl.scene.models[0].matrix == Matrix.identity()


def test_translate_camera_moves_eye_and_target() -> None:
    """PRP and SRP move together."""
    ctl = _controller()
    ctl.translate_camera(1, 2, 3)
    assert ctl.scene.camera.prp == vector3(1, 2, 8)
    assert ctl.scene.camera.srp == vector3(1, 2, 3)


def test_move_commands() -> None:
    """Forward is -z, right is +x."""
    ctl = _controller()
    ctl.move_forward()
    ctl.move_right(2.0)
    assert ctl.scene.camera.prp == vector3(2, 0, 4)
    ctl.move_backward()
    ctl.move_left(2.0)
    assert ctl.scene.camera.prp == vector3(0, 0, 5)


def test_rotate_camera_about_target() -> None:
    """Half an orbit puts the eye on the far side of the target."""
    ctl = _controller()
    ctl.rotate_camera_about_target(math.pi)
    assert ctl.scene.camera.prp.isclose(vector3(0, 0, -5))
    assert ctl.scene.camera.srp == vector3(0, 0, 0)


def test_pan_camera_turns_view_direction() -> None:
    """A quarter pan swings SRP around PRP."""
    ctl = _controller()
    ctl.pan_camera(math.pi / 2)
    assert ctl.scene.camera.prp == vector3(0, 0, 5)
    assert ctl.scene.camera.srp.isclose(vector3(-5, 0, 5))


def test_rotate_model_about_center() -> None:
    """The model's own center is the pivot."""
    ctl = _controller()
    ctl.rotate_model(0, 'z', math.pi / 2)
    model = ctl.scene.models[0]
    assert (model.matrix @ model.center.to_point()).isclose(Vector.point(0, 0, 0))  # type: ignore[union-attr]
    assert (model.matrix @ Vector.point(1, 0, 0)).isclose(Vector.point(0, 1, 0))  # type: ignore[union-attr]


def test_rotate_model_bad_index() -> None:
    """Out of range model indices raise IndexError."""
    with pytest.raises(IndexError):
        _controller().rotate_model(3, 'x', 1.0)


def test_set_animation_and_clear() -> None:
    """set_animation installs a spin; rps 0 clears it."""
    ctl = _controller()
    ctl.set_animation(0, 'x', 2.0)
    animation = ctl.scene.models[0].animation
    assert animation is not None
    assert animation.axis == vector3(1, 0, 0)
    assert animation.rps == 2.0
    ctl.set_animation(0, 'x', 0)
    assert ctl.scene.models[0].animation is None


def test_update_scene_failure_keeps_previous(caplog) -> None:  # type: ignore[no-untyped-def]
    """A rejected update leaves the active scene in place."""
    ctl = _controller()
    before = ctl.scene
    bad = _record()
    bad['camera']['vup'] = [0, 0, 1]
    with pytest.raises(InvalidSceneError):
        ctl.update_scene(bad)
    assert ctl.scene is before
    assert 'Scene update rejected' in caplog.text


def test_update_scene_resets_clock() -> None:
    """A new scene starts at t=0."""
    ctl = _controller({'axis': 'y', 'rps': 1.0})
    ctl.advance(300)
    ctl.update_scene(_record())
    assert ctl.time == 0.0
    assert ctl.scene.models[0].animation is None


def _translated_controller() -> SceneController:
    record = _record({'axis': 'y', 'rps': 0.25})
    record['models'][0]['transform'] = {'translate': [3, 0, 0]}
    return SceneController(scene_from_dict(record), 500, 500)


def test_translated_model_spins_in_place() -> None:
    """An animated model placed by a transform turns about its placed center."""
    ctl = _translated_controller()
    ctl.advance(1000)
    model = ctl.scene.models[0]
    assert model.world_center.isclose(vector3(3, 0, 0))
    assert (model.matrix @ model.vertices[0]).isclose(Vector.point(4, 1, 1))  # type: ignore[union-attr]


def test_rotate_translated_model_keeps_center() -> None:
    """rotate_model pivots on the center after the model's own transform."""
    ctl = _translated_controller()
    ctl.rotate_model(0, 'z', math.pi / 2)
    model = ctl.scene.models[0]
    assert model.world_center.isclose(vector3(3, 0, 0))
    assert (model.matrix @ Vector.point(1, 0, 0)).isclose(Vector.point(3, 1, 0))  # type: ignore[union-attr]
