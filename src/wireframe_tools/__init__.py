"""Wireframe 3D scene renderer: camera-defined perspective view to 2D line segments.

A scene (one camera plus wireframe models) is carried through a fixed chain
of 4x4 homogeneous transforms: per-model matrix, view/perspective matrix into
the canonical view volume, 3D segment clipping, projection onto the z=-1
plane, perspective divide and viewport mapping. The output is a list of
pixel-space segments for a drawing surface (PostScript and matplotlib
writers are included).
"""

__all__: list[str] = []
