"""Exceptions raised by the curve engine."""

from __future__ import annotations


class CurveError(Exception):
    """Base class of all curve engine errors."""


class CurveConstructionError(CurveError, ValueError):
    """Malformed input while building a segment or curve (no object is created)."""


class CurveDomainError(CurveError, ValueError):
    """Parameter or index outside the domain accepted by an operation."""


class CurveInternalError(CurveError, RuntimeError):
    """Broken internal invariant, e.g. a non-monotonic lookup table."""
