"""Wireframe transform pipeline.

Stages, in the order a vertex passes through them:

  - transforms   per-model accumulated matrix (rigid composition, pivot rotation)
  - camera       world to canonical perspective view volume
  - clip         segment clipping against the six view volume planes
  - projection   projection onto z=-1, perspective divide, viewport mapping

``pipeline.render_scene`` runs one pass over a scene; ``postscript`` and
``matplotlib_view`` write the resulting frame.
"""

from wireframe_tools.rendering.camera import Camera, camera_matrix, perspective_matrix, view_basis
from wireframe_tools.rendering.clip import clip_segment, outcode
from wireframe_tools.rendering.primitives import Mesh, MeshKind, build_mesh
from wireframe_tools.rendering.projection import (
    perspective_divide,
    project_to_plane,
    to_viewport,
    viewport_matrix,
)
from wireframe_tools.rendering.transforms import (
    animation_step,
    axis_vector,
    compose_rigid,
    rotate_about_point,
    rotate_arbitrary_axis,
)
from wireframe_tools.rendering.vec_math import Matrix, Vector, multiply

__all__: list[str] = [
    'Camera',
    'Matrix',
    'Mesh',
    'MeshKind',
    'Vector',
    'animation_step',
    'axis_vector',
    'build_mesh',
    'camera_matrix',
    'clip_segment',
    'compose_rigid',
    'multiply',
    'outcode',
    'perspective_divide',
    'perspective_matrix',
    'project_to_plane',
    'rotate_about_point',
    'rotate_arbitrary_axis',
    'to_viewport',
    'view_basis',
    'viewport_matrix',
]
