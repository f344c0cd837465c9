"""Configuration: viewport size and output path from environment."""

import logging
import os

from wireframe_tools.constants import DEFAULT_HEIGHT, DEFAULT_WIDTH

logger = logging.getLogger(__name__)

# Env var overrides with sensible defaults.
DEFAULT_OUTPUT_PATH = '.'


def _positive_int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, '').strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning('Ignoring %s=%r: not an integer; using %d', name, raw, default)
        return default
    if value <= 0:
        logger.warning('Ignoring %s=%r: must be positive; using %d', name, raw, default)
        return default
    return value


def get_viewport_size() -> tuple[int, int]:
    """Return default viewport (width, height) in pixels.

    Reads WIREFRAME_WIDTH and WIREFRAME_HEIGHT; invalid or non-positive
    values fall back to the defaults with a warning.

    Returns:
        Tuple of (width, height).
    """
    return (
        _positive_int_env('WIREFRAME_WIDTH', DEFAULT_WIDTH),
        _positive_int_env('WIREFRAME_HEIGHT', DEFAULT_HEIGHT),
    )


def get_output_path() -> str:
    """Return directory for rendered files (WIREFRAME_OUTPUT_PATH env var or default).

    Returns:
        Path string.
    """
    return os.environ.get('WIREFRAME_OUTPUT_PATH', DEFAULT_OUTPUT_PATH)
