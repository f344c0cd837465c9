"""Matplotlib-based frame output (alternative to PostScript)."""

from __future__ import annotations

import logging
from pathlib import Path

from wireframe_tools.rendering.pipeline import RenderedFrame

logger = logging.getLogger(__name__)

_DPI = 100


def draw_frame_mpl(
    frame: RenderedFrame,
    output_path: str | Path,
    markers: bool = False,
) -> Path:
    """Draw frame segments to a raster image (format from the file suffix, e.g. .png).

    The axes use raster orientation (origin top-left, y down) so pixel
    coordinates plot as they would on a canvas.
    """
    import matplotlib

    matplotlib.use('Agg')
    import matplotlib.pyplot as plt
    from matplotlib.collections import LineCollection

    output_path = Path(output_path)
    fig = plt.figure(figsize=(frame.width / _DPI, frame.height / _DPI), dpi=_DPI)
    try:
        ax = fig.add_axes((0.0, 0.0, 1.0, 1.0))
        ax.set_xlim(0, frame.width)
        ax.set_ylim(frame.height, 0)
        ax.set_axis_off()
        lines = [((s.x0, s.y0), (s.x1, s.y1)) for s in frame.segments]
        if lines:
            ax.add_collection(LineCollection(lines, colors='black', linewidths=1.0))
            if markers:
                xs = [p[0] for line in lines for p in line]
                ys = [p[1] for line in lines for p in line]
                ax.scatter(xs, ys, s=9, marker='s', color='red', zorder=3)
        fig.savefig(output_path)
    finally:
        plt.close(fig)
    logger.info('Wrote %s', output_path)
    return output_path
