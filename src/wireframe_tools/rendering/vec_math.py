"""Vector and matrix primitives (fixed-size, immutable, backed by numpy float64 arrays).

Vectors have 3 or 4 components; 4-component vectors are homogeneous
(w=1 for points, w=0 for directions). Matrices are row-major 4x4 and are
applied to column vectors, so ``A @ B @ v`` applies B first.
"""

from __future__ import annotations

import math
from functools import reduce
from typing import Iterable, Iterator, Sequence, Union

import numpy as np

from wireframe_tools.constants import ZERO_TOLERANCE
from wireframe_tools.errors import DegenerateVectorError, InvalidAxisError


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr.flags.writeable = False
    return arr


class Vector:
    """Immutable 3- or 4-component vector."""

    __slots__ = ('_v',)

    def __init__(self, values: Iterable[float]) -> None:
        arr = np.array(list(values), dtype=np.float64)
        if arr.ndim != 1 or arr.size not in (3, 4):
            raise ValueError(f'Vector needs 3 or 4 components, got shape {arr.shape!r}')
        self._v = _readonly(arr)

    @classmethod
    def _wrap(cls, arr: np.ndarray) -> Vector:
        vec = cls.__new__(cls)
        vec._v = _readonly(np.asarray(arr, dtype=np.float64).copy())
        return vec

    @classmethod
    def point(cls, x: float, y: float, z: float) -> Vector:
        """Homogeneous point (w=1)."""
        return cls((x, y, z, 1.0))

    @classmethod
    def direction(cls, x: float, y: float, z: float) -> Vector:
        """Homogeneous direction (w=0)."""
        return cls((x, y, z, 0.0))

    # -- element access -------------------------------------------------

    @property
    def x(self) -> float:
        return float(self._v[0])

    @property
    def y(self) -> float:
        return float(self._v[1])

    @property
    def z(self) -> float:
        return float(self._v[2])

    @property
    def w(self) -> float:
        if self._v.size != 4:
            raise AttributeError('3-component Vector has no w')
        return float(self._v[3])

    @property
    def xyz(self) -> Vector:
        """First three components as a 3-vector."""
        return Vector._wrap(self._v[:3])

    def to_point(self) -> Vector:
        """Promote a 3-vector to a homogeneous point (w=1)."""
        return Vector._wrap(np.append(self._v[:3], 1.0))

    def to_direction(self) -> Vector:
        """Promote a 3-vector to a homogeneous direction (w=0)."""
        return Vector._wrap(np.append(self._v[:3], 0.0))

    @property
    def array(self) -> np.ndarray:
        """Read-only view of the components."""
        return self._v

    def __len__(self) -> int:
        return int(self._v.size)

    def __iter__(self) -> Iterator[float]:
        return (float(c) for c in self._v)

    def __getitem__(self, index: int) -> float:
        return float(self._v[index])

    def __array__(self, dtype=None, copy=None):  # type: ignore[no-untyped-def]
        return np.array(self._v, dtype=dtype)

    def __repr__(self) -> str:
        return 'Vector(' + ', '.join(f'{c:.6g}' for c in self._v) + ')'

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return bool(np.array_equal(self._v, other._v))

    def __hash__(self) -> int:
        return hash(tuple(self._v.tolist()))

    # -- arithmetic -----------------------------------------------------

    def _check_size(self, other: Vector) -> None:
        if len(self) != len(other):
            raise ValueError(f'size mismatch: {len(self)} vs {len(other)}')

    def __add__(self, other: Vector) -> Vector:
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_size(other)
        return Vector._wrap(self._v + other._v)

    def __sub__(self, other: Vector) -> Vector:
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_size(other)
        return Vector._wrap(self._v - other._v)

    def __mul__(self, scalar: float) -> Vector:
        if isinstance(scalar, Vector):
            return NotImplemented
        return Vector._wrap(self._v * float(scalar))

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vector:
        return Vector._wrap(self._v / float(scalar))

    def __neg__(self) -> Vector:
        return Vector._wrap(-self._v)

    def dot(self, other: Vector) -> float:
        self._check_size(other)
        return float(np.dot(self._v, other._v))

    def cross(self, other: Vector) -> Vector:
        """Cross product; defined for 3-component vectors only."""
        if len(self) != 3 or len(other) != 3:
            raise ValueError('cross product requires two 3-component vectors')
        return Vector._wrap(np.cross(self._v, other._v))

    def magnitude(self) -> float:
        return float(math.sqrt(np.dot(self._v, self._v)))

    def normalize(self) -> Vector:
        """Unit vector in the same direction.

        Raises:
            DegenerateVectorError: If the magnitude is (near) zero.
        """
        mag = self.magnitude()
        if mag < ZERO_TOLERANCE:
            raise DegenerateVectorError(f'cannot normalize zero-length vector {self!r}')
        return Vector._wrap(self._v / mag)

    def isclose(self, other: Vector, tol: float = 1e-9) -> bool:
        self._check_size(other)
        return bool(np.allclose(self._v, other._v, rtol=0.0, atol=tol))


def vector3(x: float, y: float, z: float) -> Vector:
    """New 3-component vector."""
    return Vector((x, y, z))


def vector4(x: float, y: float, z: float, w: float) -> Vector:
    """New 4-component vector."""
    return Vector((x, y, z, w))


class Matrix:
    """Immutable row-major 4x4 matrix. Build with the named constructors."""

    __slots__ = ('_m',)

    def __init__(self, rows: Sequence[Sequence[float]] | np.ndarray) -> None:
        arr = np.array(rows, dtype=np.float64)
        if arr.shape != (4, 4):
            raise ValueError(f'Matrix must be 4x4, got shape {arr.shape!r}')
        self._m = _readonly(arr)

    @classmethod
    def _wrap(cls, arr: np.ndarray) -> Matrix:
        mat = cls.__new__(cls)
        mat._m = _readonly(np.asarray(arr, dtype=np.float64).copy())
        return mat

    # -- named constructors ---------------------------------------------

    @classmethod
    def identity(cls) -> Matrix:
        return cls._wrap(np.eye(4))

    @classmethod
    def translate(cls, tx: float, ty: float, tz: float) -> Matrix:
        return cls([[1, 0, 0, tx], [0, 1, 0, ty], [0, 0, 1, tz], [0, 0, 0, 1]])

    @classmethod
    def scale(cls, sx: float, sy: float, sz: float) -> Matrix:
        return cls([[sx, 0, 0, 0], [0, sy, 0, 0], [0, 0, sz, 0], [0, 0, 0, 1]])

    @classmethod
    def rotate_x(cls, theta: float) -> Matrix:
        c, s = math.cos(theta), math.sin(theta)
        return cls([[1, 0, 0, 0], [0, c, -s, 0], [0, s, c, 0], [0, 0, 0, 1]])

    @classmethod
    def rotate_y(cls, theta: float) -> Matrix:
        c, s = math.cos(theta), math.sin(theta)
        return cls([[c, 0, s, 0], [0, 1, 0, 0], [-s, 0, c, 0], [0, 0, 0, 1]])

    @classmethod
    def rotate_z(cls, theta: float) -> Matrix:
        c, s = math.cos(theta), math.sin(theta)
        return cls([[c, -s, 0, 0], [s, c, 0, 0], [0, 0, 1, 0], [0, 0, 0, 1]])

    @classmethod
    def rotate_axis(cls, axis: Vector | Sequence[float], theta: float) -> Matrix:
        """Rotation by theta about an arbitrary axis through the origin (Rodrigues form).

        The axis is normalized before use.

        Raises:
            InvalidAxisError: If the axis has (near) zero length.
        """
        vec = axis if isinstance(axis, Vector) else Vector(axis)
        try:
            x, y, z = vec.xyz.normalize()
        except DegenerateVectorError as e:
            raise InvalidAxisError(f'rotation axis must be non-zero, got {vec!r}') from e
        c = math.cos(theta)
        s = math.sin(theta)
        t = 1.0 - c
        return cls(
            [
                [t * x * x + c, t * x * y - z * s, t * x * z + y * s, 0],
                [t * x * y + z * s, t * y * y + c, t * y * z - x * s, 0],
                [t * x * z - y * s, t * y * z + x * s, t * z * z + c, 0],
                [0, 0, 0, 1],
            ]
        )

    @classmethod
    def shear_xy(cls, shx: float, shy: float) -> Matrix:
        """Shear parallel to the xy-plane: x += shx*z, y += shy*z."""
        return cls([[1, 0, shx, 0], [0, 1, shy, 0], [0, 0, 1, 0], [0, 0, 0, 1]])

    # -- access ---------------------------------------------------------

    @property
    def array(self) -> np.ndarray:
        """Read-only view of the 4x4 values."""
        return self._m

    @property
    def rows(self) -> list[list[float]]:
        return self._m.tolist()

    def __getitem__(self, index: tuple[int, int]) -> float:
        return float(self._m[index])

    def __repr__(self) -> str:
        return f'Matrix({self.rows!r})'

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return bool(np.array_equal(self._m, other._m))

    def __hash__(self) -> int:
        return hash(tuple(self._m.ravel().tolist()))

    def isclose(self, other: Matrix, tol: float = 1e-9) -> bool:
        return bool(np.allclose(self._m, other._m, rtol=0.0, atol=tol))

    # -- products -------------------------------------------------------

    def __matmul__(self, other: Matrix | Vector) -> Matrix | Vector:
        if isinstance(other, Matrix):
            return Matrix._wrap(self._m @ other._m)
        if isinstance(other, Vector):
            if len(other) != 4:
                raise ValueError('4x4 matrix needs a homogeneous 4-vector; promote it first')
            return Vector._wrap(self._m @ other.array)
        return NotImplemented

    def transform_all(self, points: Sequence[Vector]) -> list[Vector]:
        """Apply this matrix to every homogeneous point in one array product."""
        if not points:
            return []
        stacked = np.stack([p.array for p in points])
        if stacked.shape[1] != 4:
            raise ValueError('transform_all needs homogeneous 4-vectors')
        out = stacked @ self._m.T
        return [Vector._wrap(row) for row in out]


Transformable = Union[Matrix, Vector]


def multiply(items: Sequence[Transformable]) -> Transformable:
    """Compose ``items[0] @ items[1] @ ... @ items[-1]``.

    Applied to a column vector the rightmost matrix acts first. A trailing
    Vector is allowed, in which case the transformed Vector is returned.

    Raises:
        ValueError: If items is empty or a Vector appears before the end.
    """
    if not items:
        raise ValueError('multiply needs at least one matrix')
    for item in items[:-1]:
        if not isinstance(item, Matrix):
            raise ValueError(f'only the last item may be a Vector, got {item!r}')
    return reduce(lambda acc, item: acc @ item, items)  # type: ignore[operator]
