"""Projection onto the z=-1 plane, perspective divide, and viewport mapping."""

from __future__ import annotations

from wireframe_tools.constants import ZERO_TOLERANCE
from wireframe_tools.errors import ConfigurationError, DivideByZeroError
from wireframe_tools.rendering.vec_math import Matrix, Vector

# Sends canonical-volume points onto z = -1 while keeping w = -z for the divide.
MPER = Matrix(
    [
        [1.0, 0.0, 0.0, 0.0],
        [0.0, 1.0, 0.0, 0.0],
        [0.0, 0.0, 1.0, 0.0],
        [0.0, 0.0, -1.0, 0.0],
    ]
)


def mper_matrix() -> Matrix:
    """Perspective projection matrix onto the z=-1 plane."""
    return MPER


def project_to_plane(vertex: Vector) -> Vector:
    """Apply MPER to a homogeneous canonical-volume point."""
    return MPER @ vertex  # type: ignore[return-value]


def perspective_divide(vertex: Vector) -> Vector:
    """Homogeneous NDC point (x/w, y/w, z/w, 1).

    Raises:
        DivideByZeroError: If |w| is (near) zero. Clipping removes such points,
            so reaching this is a pipeline invariant violation.
    """
    w = vertex.w
    if abs(w) < ZERO_TOLERANCE:
        raise DivideByZeroError(f'perspective divide with w={w!r} for {vertex!r}')
    return Vector((vertex.x / w, vertex.y / w, vertex.z / w, 1.0))


def viewport_matrix(width: float, height: float, flip_y: bool = True) -> Matrix:
    """Map NDC x, y in [-1, 1] to pixels [0, width] x [0, height].

    Raster y grows downward while NDC y grows upward, so by default y is
    flipped: y_px = (1 - y) * height / 2. With flip_y=False, y_px = (y + 1) * height / 2.

    Raises:
        ConfigurationError: If width or height is not positive.
    """
    if width <= 0 or height <= 0:
        raise ConfigurationError(f'viewport must be positive: width={width!r}, height={height!r}')
    sy = -height / 2.0 if flip_y else height / 2.0
    return Matrix(
        [
            [width / 2.0, 0.0, 0.0, width / 2.0],
            [0.0, sy, 0.0, height / 2.0],
            [0.0, 0.0, 1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def to_viewport(
    ndc: Vector, width: float, height: float, flip_y: bool = True
) -> tuple[float, float]:
    """Pixel (x, y) of an NDC point."""
    mapped = viewport_matrix(width, height, flip_y) @ _homogeneous(ndc)
    return (mapped.x, mapped.y)  # type: ignore[union-attr]


def _homogeneous(ndc: Vector) -> Vector:
    if len(ndc) == 4:
        return ndc
    # (x, y, 1) form: only x and y take part in the mapping
    return Vector((ndc.x, ndc.y, 0.0, 1.0))
