"""Per-model rigid transforms: composition, arbitrary-axis rotation, pivot rotation, animation step."""

from __future__ import annotations

from typing import Sequence, Union

from wireframe_tools.constants import TWO_PI
from wireframe_tools.errors import DegenerateVectorError, InvalidAxisError
from wireframe_tools.rendering.vec_math import Matrix, Vector, multiply

AxisSpec = Union[str, Vector, Sequence[float]]

_NAMED_AXES: dict[str, tuple[float, float, float]] = {
    'x': (1.0, 0.0, 0.0),
    'y': (0.0, 1.0, 0.0),
    'z': (0.0, 0.0, 1.0),
}


def axis_vector(axis: AxisSpec) -> Vector:
    """Unit 3-vector for 'x', 'y', 'z' (any case) or an arbitrary 3-component axis.

    Raises:
        InvalidAxisError: Unknown axis name, wrong component count, or zero length.
    """
    if isinstance(axis, str):
        key = axis.strip().lower()
        if key not in _NAMED_AXES:
            raise InvalidAxisError(f"axis must be 'x', 'y', 'z' or a 3-vector, got {axis!r}")
        return Vector(_NAMED_AXES[key])
    try:
        vec = axis if isinstance(axis, Vector) else Vector(axis)
    except (TypeError, ValueError) as e:
        raise InvalidAxisError(f'invalid rotation axis {axis!r}: {e}') from e
    try:
        return vec.xyz.normalize()
    except DegenerateVectorError as e:
        raise InvalidAxisError(f'rotation axis must be non-zero, got {axis!r}') from e


def rotate_arbitrary_axis(axis: AxisSpec, angle: float) -> Matrix:
    """4x4 rotation by angle (radians) about a unit axis through the origin.

    With c = cos(angle), s = sin(angle), t = 1 - c and axis (x, y, z)::

        [t*x*x + c    t*x*y - z*s  t*x*z + y*s  0]
        [t*x*y + z*s  t*y*y + c    t*y*z - x*s  0]
        [t*x*z - y*s  t*y*z + x*s  t*z*z + c    0]
        [0            0            0            1]

    Raises:
        InvalidAxisError: If the axis has (near) zero length.
    """
    return Matrix.rotate_axis(axis_vector(axis), angle)


def compose_rigid(
    translate: Sequence[float] = (0.0, 0.0, 0.0),
    axis: AxisSpec = 'y',
    angle: float = 0.0,
    scale: Sequence[float] = (1.0, 1.0, 1.0),
) -> Matrix:
    """Translate @ Rotate(axis, angle) @ Scale: scale first, then rotate, then translate."""
    tx, ty, tz = translate
    sx, sy, sz = scale
    return multiply(  # type: ignore[return-value]
        [
            Matrix.translate(tx, ty, tz),
            rotate_arbitrary_axis(axis, angle),
            Matrix.scale(sx, sy, sz),
        ]
    )


def rotate_about_point(center: Vector | Sequence[float], axis: AxisSpec, angle: float) -> Matrix:
    """Rotation about an axis through center: Translate(c) @ Rotate @ Translate(-c)."""
    cx, cy, cz = list(center)[:3]
    return multiply(  # type: ignore[return-value]
        [
            Matrix.translate(cx, cy, cz),
            rotate_arbitrary_axis(axis, angle),
            Matrix.translate(-cx, -cy, -cz),
        ]
    )


def animation_angle(rps: float, delta_seconds: float) -> float:
    """Angle (radians) turned in delta_seconds at rps revolutions per second."""
    return rps * TWO_PI * delta_seconds


def animation_step(
    matrix: Matrix,
    center: Vector | Sequence[float],
    axis: AxisSpec,
    rps: float,
    delta_seconds: float,
) -> Matrix:
    """Accumulated matrix after one animation tick.

    The new rotation is applied after the prior state (left-multiplied).
    """
    step = rotate_about_point(center, axis, animation_angle(rps, delta_seconds))
    return step @ matrix  # type: ignore[return-value]
