"""Exception taxonomy for the wireframe pipeline.

Configuration errors are fatal for the frame, validation errors are fatal for
a scene load (the previous scene stays active), and pipeline invariant errors
are logged and the offending segment skipped. Each class also derives from
the builtin normally raised for that situation, so callers catching
``ValueError`` / ``RuntimeError`` keep working.
"""

from __future__ import annotations


class WireframeError(Exception):
    """Base class for all wireframe-tools errors."""


class ConfigurationError(WireframeError, ValueError):
    """Camera or transform parameters cannot produce a valid matrix."""


class DegenerateVectorError(ConfigurationError):
    """A vector with (near) zero magnitude was normalized."""


class DegenerateBasisError(ConfigurationError):
    """View basis is singular (VUP parallel to view direction, or PRP == SRP)."""


class InvalidAxisError(ConfigurationError):
    """Rotation axis is zero-length or not recognized."""


class ValidationError(WireframeError, ValueError):
    """Malformed input record."""


class InvalidSceneError(ValidationError):
    """Scene record failed validation."""


class PipelineInvariantError(WireframeError, RuntimeError):
    """A stage received data an earlier stage should have excluded."""


class DivideByZeroError(PipelineInvariantError, ZeroDivisionError):
    """Perspective divide with |w| ~ 0 (an unclipped point reached the divide)."""


__all__: list[str] = [
    'ConfigurationError',
    'DegenerateBasisError',
    'DegenerateVectorError',
    'DivideByZeroError',
    'InvalidAxisError',
    'InvalidSceneError',
    'PipelineInvariantError',
    'ValidationError',
    'WireframeError',
]
