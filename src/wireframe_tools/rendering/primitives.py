"""Mesh generation for the model kinds (generic, cube, cylinder, sphere, cone).

Each generator is a pure function of its parameters and returns a Mesh of
homogeneous vertices and polyline edges; a closed polyline repeats its first
index at the end. Cylinder, cone and sphere axes run along y.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Sequence

from wireframe_tools.constants import TWO_PI
from wireframe_tools.rendering.vec_math import Vector

Edge = tuple[int, ...]


class MeshKind(enum.Enum):
    """Model type tag as it appears in scene records."""

    GENERIC = 'generic'
    CUBE = 'cube'
    CYLINDER = 'cylinder'
    SPHERE = 'sphere'
    CONE = 'cone'


@dataclass(frozen=True)
class Mesh:
    """Vertices (homogeneous points), edges (index polylines) and center."""

    vertices: tuple[Vector, ...]
    edges: tuple[Edge, ...]
    center: Vector


def centroid(vertices: Sequence[Vector]) -> Vector:
    """Mean of the vertices as a 3-vector; origin when there are none."""
    if not vertices:
        return Vector((0.0, 0.0, 0.0))
    total = Vector((0.0, 0.0, 0.0))
    for v in vertices:
        total = total + v.xyz
    return total / len(vertices)


def _require_positive(**values: float) -> None:
    for name, value in values.items():
        if value <= 0:
            raise ValueError(f'{name} must be positive, got {value!r}')


def _require_count(name: str, value: int, minimum: int) -> None:
    if int(value) != value or value < minimum:
        raise ValueError(f'{name} must be an integer >= {minimum}, got {value!r}')


def _ring(
    cx: float, y: float, cz: float, radius: float, count: int
) -> list[Vector]:
    step = TWO_PI / count
    return [
        Vector.point(cx + radius * math.cos(i * step), y, cz + radius * math.sin(i * step))
        for i in range(count)
    ]


def _closed_loop(start: int, count: int) -> Edge:
    return tuple(range(start, start + count)) + (start,)


def generic_mesh(
    vertices: Sequence[Sequence[float]],
    edges: Sequence[Sequence[int]],
    center: Sequence[float] | None = None,
) -> Mesh:
    """Mesh from explicit vertex coordinates and index polylines."""
    verts = tuple(Vector.point(*v[:3]) for v in vertices)
    cen = Vector(center[:3]) if center is not None else centroid(verts)
    return Mesh(verts, tuple(tuple(int(i) for i in e) for e in edges), cen)


def cube_mesh(
    center: Sequence[float], width: float, height: float, depth: float
) -> Mesh:
    """Axis-aligned box: front face (z + depth/2) indices 0-3, back face 4-7."""
    _require_positive(width=width, height=height, depth=depth)
    cx, cy, cz = center[:3]
    hw, hh, hd = width / 2.0, height / 2.0, depth / 2.0
    vertices: list[Vector] = []
    for sz in (1, -1):
        z = cz + sz * hd
        vertices.append(Vector.point(cx - hw, cy + hh, z))
        vertices.append(Vector.point(cx + hw, cy + hh, z))
        vertices.append(Vector.point(cx + hw, cy - hh, z))
        vertices.append(Vector.point(cx - hw, cy - hh, z))
    edges: tuple[Edge, ...] = (
        (0, 1, 2, 3, 0),
        (4, 5, 6, 7, 4),
        (0, 4),
        (1, 5),
        (2, 6),
        (3, 7),
    )
    return Mesh(tuple(vertices), edges, Vector((cx, cy, cz)))


def cylinder_mesh(
    center: Sequence[float], radius: float, height: float, sides: int
) -> Mesh:
    """Top ring, bottom ring, and one vertical edge per side."""
    _require_positive(radius=radius, height=height)
    _require_count('sides', sides, 3)
    cx, cy, cz = center[:3]
    top = _ring(cx, cy + height / 2.0, cz, radius, sides)
    bottom = _ring(cx, cy - height / 2.0, cz, radius, sides)
    edges = [_closed_loop(0, sides), _closed_loop(sides, sides)]
    edges.extend((i, i + sides) for i in range(sides))
    return Mesh(tuple(top + bottom), tuple(edges), Vector((cx, cy, cz)))


def cone_mesh(
    center: Sequence[float], radius: float, height: float, sides: int
) -> Mesh:
    """Base ring plus one edge from the apex to every base vertex."""
    _require_positive(radius=radius, height=height)
    _require_count('sides', sides, 3)
    cx, cy, cz = center[:3]
    base = _ring(cx, cy - height / 2.0, cz, radius, sides)
    apex = Vector.point(cx, cy + height / 2.0, cz)
    apex_index = sides
    edges = [_closed_loop(0, sides)]
    edges.extend((apex_index, i) for i in range(sides))
    return Mesh(tuple(base + [apex]), tuple(edges), Vector((cx, cy, cz)))


def sphere_mesh(
    center: Sequence[float], radius: float, slices: int, stacks: int
) -> Mesh:
    """Latitude rings plus meridian polylines running pole to pole.

    Vertex 0 is the north pole, vertex 1 the south pole, then ``stacks - 1``
    rings of ``slices`` vertices from north to south.
    """
    _require_positive(radius=radius)
    _require_count('slices', slices, 3)
    _require_count('stacks', stacks, 2)
    cx, cy, cz = center[:3]
    vertices = [Vector.point(cx, cy + radius, cz), Vector.point(cx, cy - radius, cz)]
    for k in range(1, stacks):
        phi = math.pi * k / stacks
        vertices.extend(
            _ring(cx, cy + radius * math.cos(phi), cz, radius * math.sin(phi), slices)
        )
    edges: list[Edge] = []
    for k in range(stacks - 1):
        edges.append(_closed_loop(2 + k * slices, slices))
    for i in range(slices):
        meridian = [0] + [2 + k * slices + i for k in range(stacks - 1)] + [1]
        edges.append(tuple(meridian))
    return Mesh(tuple(vertices), tuple(edges), Vector((cx, cy, cz)))


def build_mesh(kind: MeshKind, **params: object) -> Mesh:
    """Dispatch to the generator for kind."""
    generators = {
        MeshKind.GENERIC: generic_mesh,
        MeshKind.CUBE: cube_mesh,
        MeshKind.CYLINDER: cylinder_mesh,
        MeshKind.SPHERE: sphere_mesh,
        MeshKind.CONE: cone_mesh,
    }
    return generators[kind](**params)  # type: ignore[operator]
