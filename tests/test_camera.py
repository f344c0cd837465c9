"""Tests for the camera matrix builder."""

from __future__ import annotations

import pytest

from wireframe_tools.errors import ConfigurationError, DegenerateBasisError
from wireframe_tools.rendering.camera import (
    Camera,
    camera_matrix,
    perspective_matrix,
    validate_camera,
    view_basis,
)
from wireframe_tools.rendering.vec_math import Vector, vector3

_CAMERAS = [
    (vector3(0, 0, 5), vector3(0, 0, 0), vector3(0, 1, 0)),
    (vector3(0, 10, -5), vector3(20, 15, -40), vector3(1, 1, 0)),
    (vector3(-3, 2, 7), vector3(1, -1, 0.5), vector3(0, 0, 1)),
]
_CLIP = (-12.0, 6.0, -12.0, 6.0, 10.0, 100.0)


def _vrc_to_world(camera: Camera, u_c: float, v_c: float, n_c: float) -> Vector:
    u, v, n = view_basis(camera.prp, camera.srp, camera.vup)
    return camera.prp + u * u_c + v * v_c + n * n_c


@pytest.mark.parametrize('prp,srp,vup', _CAMERAS)
def test_prp_maps_to_origin(prp: Vector, srp: Vector, vup: Vector) -> None:
    """The eye lands on the canonical apex."""
    m = perspective_matrix(prp, srp, vup, _CLIP)
    assert (m @ prp.to_point()).isclose(Vector.point(0, 0, 0))


@pytest.mark.parametrize('prp,srp,vup', _CAMERAS)
def test_view_basis_is_orthonormal(prp: Vector, srp: Vector, vup: Vector) -> None:
    """u, v, n are unit length and mutually perpendicular, and right-handed."""
    u, v, n = view_basis(prp, srp, vup)
    for a in (u, v, n):
        assert a.magnitude() == pytest.approx(1.0)
    assert u.dot(v) == pytest.approx(0.0, abs=1e-12)
    assert u.dot(n) == pytest.approx(0.0, abs=1e-12)
    assert v.dot(n) == pytest.approx(0.0, abs=1e-12)
    assert u.cross(v).isclose(n)


def test_view_basis_points_away_from_target() -> None:
    """n points from SRP back toward PRP."""
    _, _, n = view_basis(vector3(0, 0, 5), vector3(0, 0, 0), vector3(0, 1, 0))
    assert n.isclose(vector3(0, 0, 1))


def test_axis_aligned_camera_matrix() -> None:
    """PRP (0,0,5) looking at the origin with a symmetric 2x2 window, near 1, far 10."""
    camera = Camera(vector3(0, 0, 5), vector3(0, 0, 0), vector3(0, 1, 0), (-1, 1, -1, 1, 1, 10))
    m = camera_matrix(camera)
    assert (m @ Vector.point(0, 0, 0)).isclose(Vector.point(0, 0, -0.5))
    assert (m @ Vector.point(1, 1, 1)).isclose(Vector.point(0.1, 0.1, -0.4))
    assert camera.z_min == pytest.approx(-0.1)


def test_negative_front_back_match_positive() -> None:
    """Front/back are used by magnitude."""
    prp, srp, vup = _CAMERAS[1]
    m_pos = perspective_matrix(prp, srp, vup, (-1, 1, -1, 1, 1, 10))
    m_neg = perspective_matrix(prp, srp, vup, (-1, 1, -1, 1, -1, -10))
    assert m_pos.isclose(m_neg)


def test_window_center_on_front_plane_maps_to_axis() -> None:
    """The off-center window center on the front plane lands on the z axis at z_min."""
    prp, srp, vup = _CAMERAS[1]
    camera = Camera(prp, srp, vup, _CLIP)
    cu = (_CLIP[0] + _CLIP[1]) / 2.0
    cv = (_CLIP[2] + _CLIP[3]) / 2.0
    world = _vrc_to_world(camera, cu, cv, -camera.near)
    mapped = camera_matrix(camera) @ world.to_point()
    assert mapped.isclose(Vector.point(0, 0, camera.z_min))  # type: ignore[union-attr]


def test_window_corners_map_to_frustum_edges() -> None:
    """Window corners on the front plane land on x = y = z and x = y = -z."""
    prp, srp, vup = _CAMERAS[1]
    camera = Camera(prp, srp, vup, _CLIP)
    m = camera_matrix(camera)
    z_min = camera.z_min
    low = m @ _vrc_to_world(camera, _CLIP[0], _CLIP[2], -camera.near).to_point()
    high = m @ _vrc_to_world(camera, _CLIP[1], _CLIP[3], -camera.near).to_point()
    assert low.isclose(Vector.point(z_min, z_min, z_min))  # type: ignore[union-attr]
    assert high.isclose(Vector.point(-z_min, -z_min, z_min))  # type: ignore[union-attr]


def test_back_plane_maps_to_minus_one() -> None:
    """A point on the back plane along the window axis lands at z = -1."""
    prp, srp, vup = _CAMERAS[1]
    camera = Camera(prp, srp, vup, _CLIP)
    scale = camera.far / camera.near
    cu = (_CLIP[0] + _CLIP[1]) / 2.0 * scale
    cv = (_CLIP[2] + _CLIP[3]) / 2.0 * scale
    world = _vrc_to_world(camera, cu, cv, -camera.far)
    assert (camera_matrix(camera) @ world.to_point()).isclose(Vector.point(0, 0, -1))  # type: ignore[union-attr]


def test_vup_parallel_to_view_direction_raises() -> None:
    """VUP along the line of sight gives no basis."""
    with pytest.raises(DegenerateBasisError):
        perspective_matrix(vector3(0, 0, 5), vector3(0, 0, 0), vector3(0, 0, 1), _CLIP)


def test_prp_equals_srp_raises() -> None:
    """Eye and target must differ."""
    with pytest.raises(DegenerateBasisError):
        view_basis(vector3(1, 2, 3), vector3(1, 2, 3), vector3(0, 1, 0))


@pytest.mark.parametrize(
    'clip',
    [
        (-1, 1, -1, 1, 10, 1),
        (-1, 1, -1, 1, 5, 5),
        (-1, 1, -1, 1, 0, 10),
        (1, 1, -1, 1, 1, 10),
        (-1, 1, 2, -2, 1, 10),
        (-1, 1, -1, 1, 1),
    ],
)
def test_bad_clip_bounds_raise(clip: tuple[float, ...]) -> None:
    """Empty windows, eye-plane clips and front beyond back are rejected."""
    camera = Camera(vector3(0, 0, 5), vector3(0, 0, 0), vector3(0, 1, 0), clip)  # type: ignore[arg-type]
    with pytest.raises(ConfigurationError):
        validate_camera(camera)


def test_camera_moved_shifts_prp_and_srp() -> None:
    """moved() translates eye and target together."""
    camera = Camera(vector3(0, 0, 5), vector3(0, 0, 0), vector3(0, 1, 0), _CLIP)
    moved = camera.moved(vector3(1, 2, 3))
    assert moved.prp == vector3(1, 2, 8)
    assert moved.srp == vector3(1, 2, 3)
    assert moved.vup == camera.vup
    assert camera.prp == vector3(0, 0, 5)
