"""One render pass: scene snapshot -> clipped, projected, viewport-mapped 2D segments."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from wireframe_tools.errors import PipelineInvariantError
from wireframe_tools.rendering.camera import camera_matrix
from wireframe_tools.rendering.clip import Segment, clip_segment
from wireframe_tools.rendering.projection import (
    perspective_divide,
    project_to_plane,
    viewport_matrix,
)
from wireframe_tools.rendering.vec_math import Matrix

if TYPE_CHECKING:
    from wireframe_tools.scene import Scene

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LineSegment2D:
    """Visible segment in pixel coordinates."""

    x0: float
    y0: float
    x1: float
    y1: float
    model_index: int = 0

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.x0, self.y0, self.x1, self.y1)


@dataclass
class RenderedFrame:
    """Output of one render pass."""

    width: int
    height: int
    segments: list[LineSegment2D] = field(default_factory=list)
    time: float = 0.0  # animation clock (seconds) when rendered
    clipped: int = 0  # segments entirely outside the view volume
    skipped: int = 0  # segments dropped on pipeline invariant errors


def _project_segment(
    segment: Segment, viewport: Matrix, model_index: int
) -> LineSegment2D:
    pixels: list[float] = []
    for point in segment:
        ndc = perspective_divide(project_to_plane(point))
        mapped = viewport @ ndc
        pixels.extend((mapped.x, mapped.y))  # type: ignore[union-attr]
    return LineSegment2D(pixels[0], pixels[1], pixels[2], pixels[3], model_index)


def render_scene(
    scene: Scene,
    width: int,
    height: int,
    time: float = 0.0,
    flip_y: bool = True,
) -> RenderedFrame:
    """Transform, clip, project and map every edge of every model.

    Parameters:
        scene: Snapshot to render; not modified.
        width, height: Viewport size in pixels.
        time: Animation clock value recorded on the frame.
        flip_y: Flip y for raster output (y grows downward).

    Returns:
        RenderedFrame with one LineSegment2D per visible edge segment.

    Raises:
        ConfigurationError: If the camera or viewport is invalid (aborts the frame).
    """
    view = camera_matrix(scene.camera)
    z_min = scene.camera.z_min
    viewport = viewport_matrix(width, height, flip_y)
    frame = RenderedFrame(width=width, height=height, time=time)

    for index, model in enumerate(scene.models):
        composite = view @ model.matrix
        transformed = composite.transform_all(model.vertices)  # type: ignore[union-attr]
        for edge in model.edges:
            for a, b in zip(edge, edge[1:]):
                clipped = clip_segment(transformed[a], transformed[b], z_min)
                if clipped is None:
                    frame.clipped += 1
                    continue
                try:
                    segment = _project_segment(clipped, viewport, index)
                except PipelineInvariantError as e:
                    logger.warning('Skipping segment %d-%d of model %d: %s', a, b, index, e)
                    frame.skipped += 1
                    continue
                frame.segments.append(segment)

    logger.debug(
        'Rendered %d segments (%d clipped, %d skipped) at t=%.3f',
        len(frame.segments),
        frame.clipped,
        frame.skipped,
        time,
    )
    return frame
