"""Arc length of piecewise cubic curves by adaptive flattening."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Sequence

import numpy as np
from loguru import logger
from numpy.typing import NDArray

from curvekit.common import ParameterType, Side
from curvekit.consts import (
    FLATTEN_MAX_ERROR,
    FLATTEN_MIN_WIDTH,
    FLATTEN_ROOT_SAMPLES,
    ZERO_EPSILON,
)
from curvekit.errors import CurveInternalError
from curvekit.geom import GeomMath
from curvekit.interpolation import MonotonicInterpolator

if TYPE_CHECKING:
    from curvekit.multicurve import MultiCurve


###############################################################################
# FlattenSettings
###############################################################################


@dataclass(frozen=True)
class FlattenSettings:
    """Parameters of the adaptive flattener.

    Attributes:
        max_error (float): Bisect an interval while the tangent deviation from
            its chord exceeds this value. The deviation is |tangent x chord| in
            the units of the curve coordinates squared, so it does not scale
            with the curve: a circle of radius 0.01 is never bisected with the
            default and comes out about 10% short. Scale _max_error_ with the
            square of the curve size for small geometry.
        min_width (float): Never bisect intervals narrower than this (raw parameter units).
        root_samples (int): Evenly spaced start values per continuity side.
    """

    max_error: float = FLATTEN_MAX_ERROR
    min_width: float = FLATTEN_MIN_WIDTH
    root_samples: int = FLATTEN_ROOT_SAMPLES

    def to_dict(self) -> dict:
        """Convert the settings to a dictionary."""
        return {
            "max_error": self.max_error,
            "min_width": self.min_width,
            "root_samples": self.root_samples,
        }

    @classmethod
    def from_dict(cls, data: dict) -> FlattenSettings:
        """Create settings from a dictionary, missing keys take the defaults."""
        return cls(
            max_error=data.get("max_error", FLATTEN_MAX_ERROR),
            min_width=data.get("min_width", FLATTEN_MIN_WIDTH),
            root_samples=data.get("root_samples", FLATTEN_ROOT_SAMPLES),
        )


DEFAULT_FLATTEN_SETTINGS = FlattenSettings()


###############################################################################
# Flattening
###############################################################################


def _flatten_interval(curve: MultiCurve, a1: float, a2: float, settings: FlattenSettings) -> List[float]:
    """Right endpoints of the refinement of [a1, a2], always ending with a2."""
    p1, v1 = curve.frame(a1, ParameterType.PARAMETER, Side.RIGHT)
    p2, v2 = curve.frame(a2, ParameterType.PARAMETER, Side.LEFT)
    chord = p2 - p1
    deviation = abs(v1.cross(chord)) + abs(v2.cross(chord))
    if deviation > settings.max_error and a2 - a1 > settings.min_width:
        mean = (a1 + a2) / 2.0
        return _flatten_interval(curve, a1, mean, settings) + _flatten_interval(curve, mean, a2, settings)
    return [a2]


def flatten_parameters(curve: MultiCurve, settings: FlattenSettings = DEFAULT_FLATTEN_SETTINGS) -> List[float]:
    """
    Raw parameters in [0, N] whose polyline approximates _curve_.

    Every continuity side is seeded with settings.root_samples evenly spaced
    values, then each root interval is bisected while the tangents at its
    ends deviate from the chord by more than settings.max_error.

    Returns:
        List[float]: Strictly increasing parameters starting at 0.0 and ending at N.
    """
    roots: List[float] = []
    for low, high in curve.side_parameter_ranges():
        roots.extend(GeomMath.samples(float(low), float(high), settings.root_samples))

    result = [0.0]
    for r1, r2 in zip(roots, roots[1:]):
        if r2 - r1 <= 0.0:
            continue
        result.extend(_flatten_interval(curve, r1, r2, settings))
    return result


###############################################################################
# ArcLengthMap
###############################################################################


class ArcLengthMap:
    """Bidirectional map between raw parameters and normalized arc length.

    Built from a polyline of the curve: the cumulative chord length at each
    flattening parameter, divided by the total, gives a monotonic table that
    is interpolated in both directions.
    """

    def __init__(self, parameters: Sequence[float], lengths: Sequence[float]):
        """
        Args:
            parameters: Increasing raw parameters, the first one 0.0.
            lengths: Cumulative (absolute) arc length at each parameter.

        Raises:
            CurveInternalError: If the tables are empty or not monotonic.
        """
        if len(parameters) == 0 or len(parameters) != len(lengths):
            raise CurveInternalError(
                f"Arc length table needs matching non-empty columns, got {len(parameters)} and {len(lengths)}"
            )
        self._parameters = np.asarray(parameters, dtype=np.float64)
        self._length = float(lengths[-1])
        end = float(self._parameters[-1])

        if abs(self._length) < ZERO_EPSILON:
            self._length = 0.0
            self._fractions = np.zeros_like(self._parameters)
            self._param_to_fraction = MonotonicInterpolator([0.0, end], [0.0, 0.0])
            self._fraction_to_param = MonotonicInterpolator([0.0, 0.0], [0.0, end])
            return

        fractions = np.asarray(lengths, dtype=np.float64) / self._length
        fractions[-1] = 1.0
        self._fractions = fractions
        self._param_to_fraction = MonotonicInterpolator(self._parameters, fractions)
        self._fraction_to_param = MonotonicInterpolator(fractions, self._parameters)

    @classmethod
    def build(cls, curve: MultiCurve, settings: FlattenSettings = DEFAULT_FLATTEN_SETTINGS) -> ArcLengthMap:
        """Flatten _curve_ and accumulate the chord lengths of the resulting polyline."""
        parameters = flatten_parameters(curve, settings)
        points = curve.points_at_parameters(parameters)
        deltas = np.diff(points, axis=0)
        distances = np.hypot(deltas[:, 0], deltas[:, 1])
        lengths = np.concatenate(([0.0], np.cumsum(distances)))
        logger.debug(
            f"Arc length table of {curve.segment_count} segment(s): "
            f"{len(parameters)} samples, length {float(lengths[-1]):.6g}"
        )
        return cls(parameters, lengths)

    @property
    def length(self) -> float:
        """float: Total arc length of the flattened curve."""
        return self._length

    @property
    def parameters(self) -> NDArray[np.float64]:
        """Raw parameters of the length table."""
        return self._parameters

    @property
    def fractions(self) -> NDArray[np.float64]:
        """Normalized cumulative lengths, one per parameter."""
        return self._fractions

    def parameter_to_length(self, t: float) -> float:
        """Normalized arc length in [0, 1] at raw parameter _t_."""
        return self._param_to_fraction(t)

    def length_to_parameter(self, x: float) -> float:
        """Raw parameter at normalized arc length _x_."""
        return self._fraction_to_param(x)

    def __len__(self) -> int:
        return len(self._parameters)
