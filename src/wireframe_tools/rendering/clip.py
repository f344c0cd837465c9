"""Segment clipping against the canonical perspective view volume.

Operates after the camera matrix and before the perspective divide. The
volume is bounded by ``x = z`` (left), ``x = -z`` (right), ``y = z``
(bottom), ``y = -z`` (top), ``z = -1`` (far) and ``z = z_min`` (near).
"""

from __future__ import annotations

import logging

from wireframe_tools.constants import (
    BOTTOM,
    CLIP_PLANE_ORDER,
    FAR,
    FLOAT_EPSILON,
    LEFT,
    MAX_CLIP_ITERATIONS,
    NEAR,
    RIGHT,
    TOP,
)
from wireframe_tools.rendering.vec_math import Vector

logger = logging.getLogger(__name__)

Segment = tuple[Vector, Vector]


def outcode(vertex: Vector, z_min: float) -> int:
    """Bitmask of the view volume planes the vertex lies outside of.

    Points within FLOAT_EPSILON of a boundary count as inside.
    """
    x, y, z = vertex.x, vertex.y, vertex.z
    code = 0
    if x < z - FLOAT_EPSILON:
        code |= LEFT
    elif x > -z + FLOAT_EPSILON:
        code |= RIGHT
    if y < z - FLOAT_EPSILON:
        code |= BOTTOM
    elif y > -z + FLOAT_EPSILON:
        code |= TOP
    if z < -1.0 - FLOAT_EPSILON:
        code |= FAR
    elif z > z_min + FLOAT_EPSILON:
        code |= NEAR
    return code


def _plane_parameter(plane: int, p0: Vector, p1: Vector, z_min: float) -> float | None:
    """Parameter t where p0 + t*(p1 - p0) meets the plane; None if parallel."""
    dx = p1.x - p0.x
    dy = p1.y - p0.y
    dz = p1.z - p0.z
    if plane == LEFT:
        num, den = p0.z - p0.x, dx - dz
    elif plane == RIGHT:
        num, den = -p0.x - p0.z, dx + dz
    elif plane == BOTTOM:
        num, den = p0.z - p0.y, dy - dz
    elif plane == TOP:
        num, den = -p0.y - p0.z, dy + dz
    elif plane == FAR:
        num, den = -1.0 - p0.z, dz
    else:
        num, den = z_min - p0.z, dz
    if den == 0.0:
        return None
    return num / den


def _interpolate(p0: Vector, p1: Vector, t: float) -> Vector:
    x = p0.x + t * (p1.x - p0.x)
    y = p0.y + t * (p1.y - p0.y)
    z = p0.z + t * (p1.z - p0.z)
    return Vector.point(x, y, z)


def clip_segment(p0: Vector, p1: Vector, z_min: float) -> Segment | None:
    """Clip segment p0-p1 to the view volume.

    Returns:
        (p0, p1) unchanged when both endpoints are inside, a clipped pair with
        both endpoints inside, or None when the segment is not visible.
    """
    out0 = outcode(p0, z_min)
    out1 = outcode(p1, z_min)
    iterations = 0
    while True:
        if out0 | out1 == 0:
            return (p0, p1)
        if out0 & out1 != 0:
            return None
        if iterations == MAX_CLIP_ITERATIONS:
            break
        iterations += 1
        select_p0 = out0 != 0
        code = out0 if select_p0 else out1
        plane = next(bit for bit in CLIP_PLANE_ORDER if code & bit)
        t = _plane_parameter(plane, p0, p1, z_min)
        if t is None:
            return None
        hit = _interpolate(p0, p1, t)
        if select_p0:
            p0 = hit
            out0 = outcode(p0, z_min)
        else:
            p1 = hit
            out1 = outcode(p1, z_min)
    logger.debug('segment unresolved after %d clip iterations; dropped', MAX_CLIP_ITERATIONS)
    return None
