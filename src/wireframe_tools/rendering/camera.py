"""Camera and world-to-canonical-view-volume matrix.

The camera is a projection reference point (PRP, the eye), a scene reference
point (SRP, the look-at target), a view-up vector (VUP) and clip bounds
``(umin, umax, vmin, vmax, front, back)`` on the view plane. Front and back
are used by magnitude, so ``(..., 1, 10)`` and ``(..., -1, -10)`` describe the
same frustum.

The resulting matrix maps the view frustum onto the canonical perspective
volume: apex at the origin, ``x`` and ``y`` bounded by ``+/-z``, and
``z`` in ``[-1, z_min]`` with ``z_min = -near/far``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from wireframe_tools.constants import ZERO_TOLERANCE
from wireframe_tools.errors import (
    ConfigurationError,
    DegenerateBasisError,
    DegenerateVectorError,
)
from wireframe_tools.rendering.vec_math import Matrix, Vector, multiply

logger = logging.getLogger(__name__)

ClipBounds = tuple[float, float, float, float, float, float]


@dataclass(frozen=True)
class Camera:
    """Camera parameters; immutable, replaced wholesale on change."""

    prp: Vector
    srp: Vector
    vup: Vector
    clip: ClipBounds

    @property
    def near(self) -> float:
        """Distance from PRP to the front clip plane."""
        return abs(self.clip[4])

    @property
    def far(self) -> float:
        """Distance from PRP to the back clip plane."""
        return abs(self.clip[5])

    @property
    def z_min(self) -> float:
        """Near plane position in the canonical view volume."""
        return -self.near / self.far

    def moved(self, offset: Vector) -> Camera:
        """Camera with PRP and SRP shifted by a 3-vector offset."""
        return Camera(self.prp + offset, self.srp + offset, self.vup, self.clip)


def view_basis(
    prp: Vector, srp: Vector, vup: Vector
) -> tuple[Vector, Vector, Vector]:
    """Orthonormal view basis (u, v, n).

    n points from SRP back toward PRP, u = VUP x n, v = n x u.

    Raises:
        DegenerateBasisError: If PRP == SRP or VUP is parallel to the view direction.
    """
    try:
        n = (prp.xyz - srp.xyz).normalize()
    except DegenerateVectorError as e:
        raise DegenerateBasisError(f'PRP and SRP coincide: prp={prp!r}, srp={srp!r}') from e
    try:
        u = vup.xyz.cross(n).normalize()
    except DegenerateVectorError as e:
        raise DegenerateBasisError(
            f'VUP is parallel to the view direction: vup={vup!r}, n={n!r}'
        ) from e
    v = n.cross(u)
    return (u, v, n)


def _check_clip(clip: Sequence[float]) -> ClipBounds:
    if len(clip) != 6:
        raise ConfigurationError(f'clip needs 6 values, got {len(clip)}')
    umin, umax, vmin, vmax, front, back = (float(c) for c in clip)
    if umax - umin <= ZERO_TOLERANCE:
        raise ConfigurationError(f'clip window has no width: umin={umin!r}, umax={umax!r}')
    if vmax - vmin <= ZERO_TOLERANCE:
        raise ConfigurationError(f'clip window has no height: vmin={vmin!r}, vmax={vmax!r}')
    near, far = abs(front), abs(back)
    if near < ZERO_TOLERANCE:
        raise ConfigurationError(f'front clip plane at the eye: front={front!r}')
    if far < ZERO_TOLERANCE:
        raise ConfigurationError(f'back clip plane at the eye: back={back!r}')
    if near >= far:
        raise ConfigurationError(
            f'front clip plane must be closer than back: front={front!r}, back={back!r}'
        )
    return (umin, umax, vmin, vmax, front, back)


def perspective_matrix(
    prp: Vector, srp: Vector, vup: Vector, clip: Sequence[float]
) -> Matrix:
    """World to canonical perspective view volume (Scale @ Shear @ R @ T).

    1. translate PRP to the origin
    2. rotate the view basis (u, v, n) onto (x, y, z)
    3. shear so the center of the window lies on the z-axis
    4. scale so the volume is bounded by x, y in [z, -z] and z in [-1, z_min]

    Raises:
        DegenerateBasisError: If the view basis is singular.
        ConfigurationError: If the clip bounds would divide by zero.
    """
    umin, umax, vmin, vmax, front, back = _check_clip(clip)
    near, far = abs(front), abs(back)

    t = Matrix.translate(-prp.x, -prp.y, -prp.z)

    u, v, n = view_basis(prp, srp, vup)
    r = Matrix(
        [
            [u.x, u.y, u.z, 0.0],
            [v.x, v.y, v.z, 0.0],
            [n.x, n.y, n.z, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )

    # PRP is the origin after translation, so DOP = CW - 0
    cw = Vector(((umin + umax) / 2.0, (vmin + vmax) / 2.0, -near))
    dop = cw
    shear = Matrix.shear_xy(-dop.x / dop.z, -dop.y / dop.z)

    sx = 2.0 * near / ((umax - umin) * far)
    sy = 2.0 * near / ((vmax - vmin) * far)
    sz = 1.0 / far
    scale = Matrix.scale(sx, sy, sz)

    result = multiply([scale, shear, r, t])
    logger.debug('perspective matrix for prp=%r srp=%r: %r', prp, srp, result)
    return result  # type: ignore[return-value]


def camera_matrix(camera: Camera) -> Matrix:
    """Perspective matrix for a Camera."""
    return perspective_matrix(camera.prp, camera.srp, camera.vup, camera.clip)


def validate_camera(camera: Camera) -> None:
    """Raise ConfigurationError if the camera cannot produce a view matrix."""
    _check_clip(camera.clip)
    view_basis(camera.prp, camera.srp, camera.vup)
