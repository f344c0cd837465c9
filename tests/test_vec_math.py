"""Tests for Vector/Matrix primitives."""

from __future__ import annotations

import math

import numpy as np
import pytest

from wireframe_tools.errors import ConfigurationError, DegenerateVectorError, InvalidAxisError
from wireframe_tools.rendering.vec_math import Matrix, Vector, multiply, vector3, vector4


def test_vector_arithmetic() -> None:
    """Add, subtract, scale and negate are component-wise."""
    a = vector3(1, 2, 3)
    b = vector3(4, 5, 6)
    assert tuple(a + b) == (5.0, 7.0, 9.0)
    assert tuple(b - a) == (3.0, 3.0, 3.0)
    assert tuple(a * 2) == (2.0, 4.0, 6.0)
    assert tuple(2 * a) == (2.0, 4.0, 6.0)
    assert tuple(-a) == (-1.0, -2.0, -3.0)
    assert a.dot(b) == 32.0


def test_vector_cross_product() -> None:
    """x cross y is z."""
    z = vector3(1, 0, 0).cross(vector3(0, 1, 0))
    assert tuple(z) == (0.0, 0.0, 1.0)


def test_vector_cross_requires_three_components() -> None:
    """Cross product of homogeneous vectors is rejected."""
    with pytest.raises(ValueError):
        Vector.point(1, 0, 0).cross(Vector.point(0, 1, 0))


def test_vector_normalize() -> None:
    """Normalized vector has unit length and the same direction."""
    n = vector3(3, 0, 4).normalize()
    assert n.magnitude() == pytest.approx(1.0)
    assert n.x == pytest.approx(0.6)
    assert n.z == pytest.approx(0.8)


def test_vector_normalize_zero_raises() -> None:
    """Zero-length vectors cannot be normalized."""
    with pytest.raises(DegenerateVectorError):
        vector3(0, 0, 0).normalize()
    assert issubclass(DegenerateVectorError, ConfigurationError)
    assert issubclass(DegenerateVectorError, ValueError)


def test_vector_is_immutable() -> None:
    """The backing array is read-only and operations return new vectors."""
    a = vector3(1, 2, 3)
    with pytest.raises(ValueError):
        a.array[0] = 10.0
    b = a + vector3(1, 1, 1)
    assert tuple(a) == (1.0, 2.0, 3.0)
    assert b is not a


def test_vector_copies_input_array() -> None:
    """Mutating the source array does not leak into the vector."""
    src = np.array([1.0, 2.0, 3.0])
    v = Vector(src)
    src[0] = 99.0
    assert v.x == 1.0


def test_homogeneous_promotion() -> None:
    """Points get w=1, directions w=0."""
    assert Vector.point(1, 2, 3).w == 1.0
    assert Vector.direction(1, 2, 3).w == 0.0
    assert vector3(1, 2, 3).to_point() == vector4(1, 2, 3, 1)
    assert vector3(1, 2, 3).to_direction() == vector4(1, 2, 3, 0)
    assert vector4(1, 2, 3, 1).xyz == vector3(1, 2, 3)


def test_vector_size_validation() -> None:
    """Only 3 or 4 components are allowed."""
    with pytest.raises(ValueError):
        Vector((1, 2))
    with pytest.raises(ValueError):
        Vector((1, 2, 3, 4, 5))


def test_translate_moves_points_not_directions() -> None:
    """Translation affects w=1 points and leaves w=0 directions alone."""
    t = Matrix.translate(1, 2, 3)
    assert tuple(t @ Vector.point(0, 0, 0)) == (1.0, 2.0, 3.0, 1.0)
    assert tuple(t @ Vector.direction(1, 0, 0)) == (1.0, 0.0, 0.0, 0.0)


def test_multiply_applies_rightmost_first() -> None:
    """multiply([T, S]) scales first, then translates."""
    t = Matrix.translate(1, 0, 0)
    s = Matrix.scale(2, 2, 2)
    p = Vector.point(1, 1, 1)
    result = multiply([t, s]) @ p
    assert tuple(result) == (3.0, 2.0, 2.0, 1.0)
    assert multiply([t, s, p]) == result


def test_multiply_rejects_bad_input() -> None:
    """Empty lists and vectors before the end are errors."""
    with pytest.raises(ValueError):
        multiply([])
    with pytest.raises(ValueError):
        multiply([Vector.point(0, 0, 0), Matrix.identity()])


def test_rotate_z_quarter_turn() -> None:
    """Rotating x by 90 degrees about z gives y."""
    r = Matrix.rotate_z(math.pi / 2)
    assert (r @ Vector.point(1, 0, 0)).isclose(Vector.point(0, 1, 0))


def test_rotate_x_and_y_quarter_turns() -> None:
    """Right-handed quarter turns about x and y."""
    assert (Matrix.rotate_x(math.pi / 2) @ Vector.point(0, 1, 0)).isclose(Vector.point(0, 0, 1))
    assert (Matrix.rotate_y(math.pi / 2) @ Vector.point(0, 0, 1)).isclose(Vector.point(1, 0, 0))


def test_rotate_axis_matches_named_rotations() -> None:
    """Arbitrary-axis rotation about a coordinate axis equals the named constructor."""
    theta = 0.7
    assert Matrix.rotate_axis((0, 0, 1), theta).isclose(Matrix.rotate_z(theta))
    assert Matrix.rotate_axis((1, 0, 0), theta).isclose(Matrix.rotate_x(theta))
    assert Matrix.rotate_axis((0, 3, 0), theta).isclose(Matrix.rotate_y(theta))


def test_rotate_axis_zero_raises() -> None:
    """Zero axis is rejected."""
    with pytest.raises(InvalidAxisError):
        Matrix.rotate_axis((0, 0, 0), 1.0)


def test_shear_xy() -> None:
    """Shear adds a multiple of z to x and y."""
    sh = Matrix.shear_xy(0.5, -1.0)
    assert tuple(sh @ Vector.point(1, 1, 2)) == (2.0, -1.0, 2.0, 1.0)


def test_matrix_shape_and_vector_size_checks() -> None:
    """Matrices are 4x4 and only act on 4-vectors."""
    with pytest.raises(ValueError):
        Matrix([[1, 0], [0, 1]])
    with pytest.raises(ValueError):
        Matrix.identity() @ vector3(1, 2, 3)


def test_matrix_is_immutable() -> None:
    """Matrix values cannot be written through the array view."""
    m = Matrix.identity()
    with pytest.raises(ValueError):
        m.array[0, 0] = 2.0


def test_transform_all_matches_single_products() -> None:
    """Batch transform equals one-by-one transform."""
    m = multiply([Matrix.translate(1, 2, 3), Matrix.rotate_y(0.3), Matrix.scale(2, 1, 1)])
    points = [Vector.point(1, 0, 0), Vector.point(0, 1, 0), Vector.point(-2, 3, 5)]
    batch = m.transform_all(points)  # type: ignore[union-attr]
    for p, q in zip(points, batch):
        assert (m @ p).isclose(q)  # type: ignore[union-attr]
    assert m.transform_all([]) == []  # type: ignore[union-attr]
