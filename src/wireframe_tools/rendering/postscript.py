"""PostScript output for rendered frames.

Writes one EPSF page per frame. Coordinates use a ``0.1 0.1 scale`` (1 unit =
0.1 points) and are rounded to integers. The frame's raster pixels (y grows
downward) are fitted into the page box with aspect ratio preserved and y
flipped back to PostScript's upward axis.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TextIO

from wireframe_tools.rendering.pipeline import LineSegment2D, RenderedFrame

logger = logging.getLogger(__name__)

# Page bounds in 0.1 pt units (US letter with margins)
MINX = 360
MAXX = 5760
MINY = 1800
MAXY = 7200

BUFSZ = 64  # max points per connected path
MARKER_SIZE = 40  # endpoint marker edge, 0.1 pt units

# Line gray levels, cycled by model index
_GRAY: list[str] = ['0.0 G', '0.3 G', '0.5 G', '0.2 G', '0.4 G']
_MARKER_COLOR = '1 0 0 setrgbcolor'


def _nint(x: float) -> int:
    """Round half away from zero (not banker's rounding)."""
    if x >= 0.0:
        return int(x + 0.5)
    return -int(-x + 0.5)


def _opairi(x: int, y: int, suffix: str) -> str:
    """Format ordered pair of integers as 'X Y suffix'."""
    return f'{x} {y} {suffix}'


def write_ps_header(stream: TextIO, title: str, creator: str) -> None:
    """Write the EPSF header and drawing macros."""
    stream.write('%!PS-Adobe-2.0 EPSF-2.0\n')
    stream.write(f'%%Title: {title}\n')
    stream.write(f'%%Creator: {creator}\n')
    stream.write('%%BoundingBox: 0 0 612 792\n')
    stream.write('%%Pages: 1\n')
    stream.write('%%EndComments\n')
    stream.write('% \n')
    stream.write('0.1 0.1 scale\n')
    stream.write('8 setlinewidth\n')
    stream.write('1 setlinecap\n')
    stream.write('1 setlinejoin\n')
    stream.write('/L {lineto} def\n')
    stream.write('/M {moveto} def\n')
    stream.write('/N {newpath} def\n')
    stream.write('/G {setgray} def\n')
    stream.write('/S {stroke} def\n')


class _PageMap:
    """Pixel -> page unit mapping for one frame."""

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f'frame must have positive size: width={width!r}, height={height!r}')
        self.unit = min((MAXX - MINX) / width, (MAXY - MINY) / height)
        # Center the frame in the page box
        self.left = MINX + ((MAXX - MINX) - width * self.unit) / 2.0
        self.top = MAXY - ((MAXY - MINY) - height * self.unit) / 2.0

    def __call__(self, x: float, y: float) -> tuple[int, int]:
        return (_nint(self.left + x * self.unit), _nint(self.top - y * self.unit))


def _flush_path(stream: TextIO, points: list[tuple[int, int]], gray: str, oldgray: str) -> str:
    stream.write('N\n')
    stream.write(_opairi(points[0][0], points[0][1], 'M') + '\n')
    lastln = _opairi(points[0][0], points[0][1], 'L')
    for px, py in points[1:]:
        lineto = _opairi(px, py, 'L')
        if lineto != lastln:
            stream.write(lineto + '\n')
        lastln = lineto
    if gray != oldgray:
        stream.write(gray + '\n')
    stream.write('S\n')
    return gray


def write_segments(
    segments: list[LineSegment2D], page: _PageMap, stream: TextIO
) -> int:
    """Stroke segments, joining consecutive connected segments of one model into a path.

    Returns:
        Number of paths written.
    """
    if not segments:
        return 0
    paths = 0
    oldgray = ''
    points: list[tuple[int, int]] = []
    color = -1
    for seg in segments:
        begin = page(seg.x0, seg.y0)
        end = page(seg.x1, seg.y1)
        if points and begin == points[-1] and seg.model_index == color and len(points) < BUFSZ:
            points.append(end)
            continue
        if points:
            oldgray = _flush_path(stream, points, _GRAY[color % len(_GRAY)], oldgray)
            paths += 1
        points = [begin, end]
        color = seg.model_index
    oldgray = _flush_path(stream, points, _GRAY[color % len(_GRAY)], oldgray)
    return paths + 1


def write_markers(segments: list[LineSegment2D], page: _PageMap, stream: TextIO) -> None:
    """Fill a small square at every segment endpoint."""
    if not segments:
        return
    stream.write(_MARKER_COLOR + '\n')
    half = MARKER_SIZE // 2
    seen: set[tuple[int, int]] = set()
    for seg in segments:
        for point in (page(seg.x0, seg.y0), page(seg.x1, seg.y1)):
            if point in seen:
                continue
            seen.add(point)
            stream.write(f'{point[0] - half} {point[1] - half} {MARKER_SIZE} {MARKER_SIZE} rectfill\n')
    stream.write('0 G\n')


def write_postscript(
    frame: RenderedFrame,
    stream: TextIO,
    title: str = 'wireframe.ps',
    creator: str = 'wireframe-tools',
    markers: bool = False,
) -> None:
    """Write a complete one-page PostScript document for frame."""
    page = _PageMap(frame.width, frame.height)
    write_ps_header(stream, title, creator)
    stream.write('% \n')
    stream.write('% Viewport frame\n')
    stream.write('% \n')
    x0, y0 = page(0.0, 0.0)
    x1, y1 = page(float(frame.width), float(frame.height))
    stream.write('N\n')
    stream.write(_opairi(x0, y0, 'M') + '\n')
    stream.write(_opairi(x1, y0, 'L') + '\n')
    stream.write(_opairi(x1, y1, 'L') + '\n')
    stream.write(_opairi(x0, y1, 'L') + '\n')
    stream.write('closepath\n')
    stream.write('0.8 G\n')
    stream.write('S\n')
    paths = write_segments(frame.segments, page, stream)
    if markers:
        write_markers(frame.segments, page, stream)
    stream.write('showpage\n')
    logger.debug('Wrote %d segments as %d paths', len(frame.segments), paths)


def save_postscript(
    frame: RenderedFrame,
    path: str | Path,
    creator: str = 'wireframe-tools',
    markers: bool = False,
) -> Path:
    """Write frame to a PostScript file; returns the path."""
    path = Path(path)
    with open(path, 'w', encoding='utf-8') as f:
        write_postscript(frame, f, title=path.name, creator=creator, markers=markers)
    logger.info('Wrote %s', path)
    return path
