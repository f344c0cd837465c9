"""CLI entry point: wireframe-tools render|animate subcommands."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import NoReturn, TextIO, cast

from wireframe_tools.config import get_output_path, get_viewport_size
from wireframe_tools.constants import DEFAULT_FPS, MS_PER_SECOND
from wireframe_tools.controls import SceneController
from wireframe_tools.rendering.matplotlib_view import draw_frame_mpl
from wireframe_tools.rendering.pipeline import RenderedFrame
from wireframe_tools.rendering.postscript import save_postscript, write_postscript
from wireframe_tools.scene import load_scene

logger = logging.getLogger(__name__)

_FORMAT_SUFFIX = {'text': '.txt', 'ps': '.ps', 'png': '.png'}
_SUFFIX_FORMAT = {'.txt': 'text', '.ps': 'ps', '.eps': 'ps', '.png': 'png', '.svg': 'png', '.pdf': 'png'}


def _configure_logging(verbose: bool = False) -> None:
    """Configure logging for CLI (stderr, level from --verbose or WIREFRAME_TOOLS_LOG)."""
    level = logging.DEBUG if verbose else logging.WARNING
    env_level = os.environ.get('WIREFRAME_TOOLS_LOG', '').upper()
    if env_level in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
        level = getattr(logging, env_level)
    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(name)s: %(message)s',
        stream=sys.stderr,
    )
    # matplotlib is chatty at DEBUG (font manager scans).
    logging.getLogger('matplotlib').setLevel(logging.WARNING)


def _resolve_format(fmt: str | None, output: str | None) -> str:
    """Explicit --format wins; otherwise infer from the output suffix, default text."""
    if fmt:
        return fmt
    if output:
        return _SUFFIX_FORMAT.get(Path(output).suffix.lower(), 'text')
    return 'text'


def _write_text(frame: RenderedFrame, out: TextIO) -> None:
    for seg in frame.segments:
        out.write(f'{seg.x0:.3f} {seg.y0:.3f} {seg.x1:.3f} {seg.y1:.3f}\n')


def _write_frame(frame: RenderedFrame, fmt: str, output: str | None, markers: bool) -> None:
    """Write frame in fmt to output (a path) or stdout for text/ps."""
    if fmt == 'png':
        if output is None:
            raise ValueError('png output requires -o/--output')
        draw_frame_mpl(frame, output, markers=markers)
    elif fmt == 'ps':
        if output is None:
            write_postscript(frame, sys.stdout, markers=markers)
        else:
            save_postscript(frame, output, markers=markers)
    elif output is None:
        _write_text(frame, sys.stdout)
    else:
        with open(output, 'w', encoding='utf-8') as f:
            _write_text(frame, f)


def _controller(args: argparse.Namespace) -> SceneController:
    default_width, default_height = get_viewport_size()
    scene = load_scene(args.scene)
    return SceneController(
        scene,
        width=default_width if args.width is None else args.width,
        height=default_height if args.height is None else args.height,
    )


def _render_cmd(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    """Render one frame of a scene (render subcommand).

    Parameters:
        parser: Argument parser (unused).
        args: Parsed args; scene, width, height, time, format, output, markers.

    Returns:
        Exit code 0 on success, 1 on error.
    """
    _ = parser
    try:
        controller = _controller(args)
        if args.time < 0:
            raise ValueError(f'--time must be non-negative, got {args.time!r}')
        frame = controller.advance(args.time * MS_PER_SECOND)
        fmt = _resolve_format(args.format, args.output)
        _write_frame(frame, fmt, args.output, args.markers)
    except (ValueError, RuntimeError, OSError) as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1
    if frame.skipped:
        logger.warning('%d segments skipped on pipeline errors', frame.skipped)
    return 0


def _animate_cmd(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    """Render a sequence of animation frames (animate subcommand).

    Frame 0 is the scene as loaded; each later frame advances the clock by
    1000/fps milliseconds.

    Parameters:
        parser: Argument parser (unused).
        args: Parsed args; scene, frames, fps, format, output directory, etc.

    Returns:
        Exit code 0 on success, 1 on error.
    """
    _ = parser
    try:
        if args.frames <= 0:
            raise ValueError(f'--frames must be positive, got {args.frames!r}')
        if args.fps <= 0:
            raise ValueError(f'--fps must be positive, got {args.fps!r}')
        controller = _controller(args)
        fmt = args.format or 'text'
        outdir = None
        if fmt != 'text' or args.output is not None:
            outdir = Path(args.output or get_output_path())
            outdir.mkdir(parents=True, exist_ok=True)
        delta_ms = MS_PER_SECOND / args.fps
        for index in range(args.frames):
            frame = controller.render() if index == 0 else controller.advance(delta_ms)
            if outdir is None:
                sys.stdout.write(f'# frame {index} t={frame.time:.4f}\n')
                _write_frame(frame, fmt, None, args.markers)
            else:
                path = outdir / f'frame_{index:04d}{_FORMAT_SUFFIX[fmt]}'
                _write_frame(frame, fmt, str(path), args.markers)
    except (ValueError, RuntimeError, OSError) as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1
    return 0


def _add_common_arguments(sub: argparse.ArgumentParser) -> None:
    sub.add_argument('scene', type=str, help='Scene JSON file')
    sub.add_argument(
        '--width', type=int, default=None, help='Viewport width in pixels; env: WIREFRAME_WIDTH'
    )
    sub.add_argument(
        '--height', type=int, default=None, help='Viewport height in pixels; env: WIREFRAME_HEIGHT'
    )
    sub.add_argument(
        '--format',
        type=str,
        default=None,
        choices=['text', 'ps', 'png'],
        help='Output format (default: from output suffix, else text)',
    )
    sub.add_argument(
        '--markers', action='store_true', help='Mark segment endpoints (ps and png only)'
    )
    sub.add_argument('-v', '--verbose', action='store_true', help='Show DEBUG logs')


def main() -> int:
    """Entry point for wireframe-tools CLI (render | animate).

    Returns:
        Exit code 0 on success, 1 on failure.
    """
    parser = argparse.ArgumentParser(
        prog='wireframe-tools',
        description='Render wireframe 3D scenes with a perspective camera to 2D line segments.',
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    render_parser = subparsers.add_parser('render', help='Render a single frame')
    _add_common_arguments(render_parser)
    render_parser.add_argument(
        '--time',
        type=float,
        default=0.0,
        help='Seconds of animation to apply before rendering',
    )
    render_parser.add_argument('-o', '--output', type=str, default=None, help='Output file')
    render_parser.set_defaults(func=_render_cmd)

    animate_parser = subparsers.add_parser('animate', help='Render an animation frame sequence')
    _add_common_arguments(animate_parser)
    animate_parser.add_argument('--frames', type=int, default=30, help='Number of frames')
    animate_parser.add_argument(
        '--fps', type=float, default=DEFAULT_FPS, help='Frames per second of animation clock'
    )
    animate_parser.add_argument(
        '-o',
        '--output',
        type=str,
        default=None,
        help='Output directory; env: WIREFRAME_OUTPUT_PATH',
    )
    animate_parser.set_defaults(func=_animate_cmd)

    args = parser.parse_args()
    _configure_logging(verbose=args.verbose)
    return cast(int, args.func(parser, args))


def cli_main() -> NoReturn:
    """Entry point for console_scripts; calls main() and exits with its return code."""
    sys.exit(main())


if __name__ == '__main__':
    sys.exit(main())
