"""
Exception types raised by gmproc.

All errors derive from :class:`GroundMotionError`. The argument-checking
errors also derive from ``ValueError`` so callers that already guard
numerical code with ``except ValueError`` keep working.
"""

__all__ = [
    "GroundMotionError",
    "InvalidWaveformError",
    "InvalidParameterError",
    "SingularSystemError",
]


class GroundMotionError(Exception):
    """Base class for every error raised by the library."""


class InvalidWaveformError(GroundMotionError, ValueError):
    """Malformed time/amplitude arrays (empty, mismatched, non-monotonic time)."""


class InvalidParameterError(GroundMotionError, ValueError):
    """An argument is outside its valid domain (cutoffs, periods, magnitude...)."""


class SingularSystemError(GroundMotionError, ArithmeticError):
    """Gaussian elimination met a (near-)zero pivot."""
