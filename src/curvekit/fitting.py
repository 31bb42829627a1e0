"""Least-squares fitting of cubic Bezier curves to ordered point lists."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np
from loguru import logger
from numpy.typing import NDArray

from curvekit.bezier import CurveSegment, PointLike
from curvekit.consts import (
    ADAPTIVE_FIT_DEFAULT_MAX_ERROR,
    ADAPTIVE_FIT_DEFAULT_MAX_ITERATIONS,
    FIT_DEFAULT_MAX_ERROR,
    FIT_DEFAULT_MAX_ITERATIONS,
    FIT_MIN_SPLIT_POINTS,
    FIT_PROBE_STEP,
    FIT_STAGNATION,
)
from curvekit.errors import CurveDomainError
from curvekit.geom import GeomMath, Point2D
from curvekit.multicurve import MultiCurve

PointsLike = Union[Sequence[PointLike], NDArray[np.float64]]
Coefficients = Tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]


###############################################################################
# FitSettings, FitResult
###############################################################################


@dataclass(frozen=True)
class FitSettings:
    """Tolerances of the adaptive fitter.

    Attributes:
        max_error (float): Accepted maximum distance of a point to the fitted
            curve, relative to the chord length of the whole point list.
        max_iterations (int): Re-parameterization rounds before a point list is split.
    """

    max_error: float = ADAPTIVE_FIT_DEFAULT_MAX_ERROR
    max_iterations: int = ADAPTIVE_FIT_DEFAULT_MAX_ITERATIONS

    def to_dict(self) -> dict:
        """Convert the settings to a dictionary."""
        return {"max_error": self.max_error, "max_iterations": self.max_iterations}

    @classmethod
    def from_dict(cls, data: dict) -> FitSettings:
        """Create settings from a dictionary, missing keys take the defaults."""
        return cls(
            max_error=data.get("max_error", ADAPTIVE_FIT_DEFAULT_MAX_ERROR),
            max_iterations=data.get("max_iterations", ADAPTIVE_FIT_DEFAULT_MAX_ITERATIONS),
        )


class FitResult(NamedTuple):
    """Fitted curve together with its normalized maximum error."""

    curve: MultiCurve
    error: float


###############################################################################
# CurveFitter
###############################################################################


class CurveFitter:
    """Fit cubic Bezier segments to an ordered list of points.

    Each round solves the least-squares problem for the polynomial
    coefficients with both end points pinned, measures the largest distance
    of a point to the curve and then moves every point parameter towards the
    foot of its perpendicular on the curve (secant step on the projection
    condition). adaptive_fit() splits the point list in halves when a single
    segment does not converge within the iteration budget.
    """

    @staticmethod
    def _as_array(points: PointsLike) -> NDArray[np.float64]:
        if isinstance(points, np.ndarray) and points.ndim == 2 and points.shape[1] >= 2:
            return np.asarray(points[:, :2], dtype=np.float64)
        return np.array([Point2D.from_any(p).to_tuple() for p in points], dtype=np.float64).reshape(-1, 2)

    @staticmethod
    def initial_parameters(points: PointsLike) -> Tuple[NDArray[np.float64], float]:
        """
        Chord-length parameterization of _points_.

        Returns:
            Tuple[NDArray[np.float64], float]: the cumulative chord lengths divided
            by their total (all zeros if the total is zero) and the total itself.
        """
        pts = CurveFitter._as_array(points)
        deltas = np.diff(pts, axis=0)
        distances = np.hypot(deltas[:, 0], deltas[:, 1])
        cumulative = np.concatenate(([0.0], np.cumsum(distances)))
        total = float(cumulative[-1])
        if total == 0.0:
            return np.zeros(pts.shape[0], dtype=np.float64), 0.0
        return cumulative / total, total

    @staticmethod
    def _solve_coefficients(pts: NDArray[np.float64], params: NDArray[np.float64]) -> Coefficients:
        """Coefficients (a, b, c, d) minimizing the squared distances with B(0) = first and B(1) = last point."""
        p0 = pts[0]
        p1 = pts[-1]
        powers = params[:, np.newaxis] ** np.arange(7)
        s = powers.sum(axis=0)
        ps = powers[:, 1:4].T @ pts  # rows: sum P*t, sum P*t^2, sum P*t^3

        coeff11 = s[6] - 2.0 * s[4] + s[2]
        coeff12 = s[5] - s[4] - s[3] + s[2]
        coeff22 = s[4] - 2.0 * s[3] + s[2]
        r1 = (p0 - p1) * (s[4] - s[2]) - p0 * (s[3] - s[1]) + ps[2] - ps[0]
        r2 = (p0 - p1) * (s[3] - s[2]) - p0 * (s[2] - s[1]) + ps[1] - ps[0]

        a = np.zeros(2, dtype=np.float64)
        b = np.zeros(2, dtype=np.float64)
        for axis in range(2):
            solution = GeomMath.solve_2x2(coeff11, coeff12, coeff12, coeff22, r1[axis], r2[axis])
            if solution is None:
                logger.warning(f"Singular least-squares system for {pts.shape[0]} points, fitting a straight segment")
                a = np.zeros(2, dtype=np.float64)
                b = np.zeros(2, dtype=np.float64)
                break
            a[axis], b[axis] = solution
        d = p0.copy()
        c = p1 - (a + b + p0)
        return a, b, c, d

    @staticmethod
    def _segment(coefficients: Coefficients) -> CurveSegment:
        a, b, c, d = coefficients
        p0 = d
        c0 = p0 + c / 3.0
        c1 = c0 + c / 3.0 + b / 3.0
        p1 = p0 + c + b + a
        return CurveSegment.raw(p0, c0, c1, p1)

    @staticmethod
    def _evaluate(coefficients: Coefficients, params: NDArray[np.float64]) -> NDArray[np.float64]:
        a, b, c, d = coefficients
        t = np.clip(params, 0.0, 1.0)[:, np.newaxis]
        return ((a * t + b) * t + c) * t + d

    @staticmethod
    def _max_error(
        coefficients: Coefficients, pts: NDArray[np.float64], params: NDArray[np.float64], total_length: float
    ) -> float:
        residuals = CurveFitter._evaluate(coefficients, params) - pts
        return float(np.max(np.hypot(residuals[:, 0], residuals[:, 1]))) / total_length

    @staticmethod
    def _reparameterize(
        coefficients: Coefficients, pts: NDArray[np.float64], params: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        """Secant step towards the roots of (B(u) - P) . B'(u) for every point."""
        a, b, c, _ = coefficients

        def projection(u: NDArray[np.float64]) -> NDArray[np.float64]:
            uu = u[:, np.newaxis]
            derivative = (3.0 * a * uu + 2.0 * b) * uu + c
            return np.sum((CurveFitter._evaluate(coefficients, u) - pts) * derivative, axis=1)

        u1 = params
        u2 = np.where(u1 < 1.0 - FIT_PROBE_STEP, u1 + FIT_PROBE_STEP, u1 - FIT_PROBE_STEP)
        z1 = projection(u1)
        z2 = projection(u2)
        equal = z1 == z2
        if np.any(equal):
            u2 = np.where(equal, u2 + FIT_PROBE_STEP, u2)
            z2 = np.where(equal, projection(u2), z2)
        denominator = z2 - z1
        valid = denominator != 0.0
        safe = np.where(valid, denominator, 1.0)
        return np.where(valid, (z2 * u1 - z1 * u2) / safe, u1)

    @staticmethod
    def _check(pts: NDArray[np.float64]) -> None:
        if pts.shape[0] < 2:
            raise CurveDomainError(f"Fitting needs at least 2 points, got {pts.shape[0]}")

    @staticmethod
    def fit(
        points: PointsLike,
        max_error: float = FIT_DEFAULT_MAX_ERROR,
        max_iterations: int = FIT_DEFAULT_MAX_ITERATIONS,
    ) -> CurveSegment:
        """
        Fit one cubic segment to _points_, starting at the first and ending at the last point.

        Iterates until the normalized maximum error is below _max_error_, the
        error stagnates or _max_iterations_ is exceeded.

        Args:
            points: Ordered points, as Point2D / (x, y) sequence or array of shape (n, 2).
            max_error: Accepted maximum distance relative to the chord length of _points_.
            max_iterations: Upper bound of re-parameterization rounds.

        Returns:
            CurveSegment: the fitted segment; a zero-length segment if all points coincide.

        Raises:
            CurveDomainError: If fewer than 2 points are given.
        """
        pts = CurveFitter._as_array(points)
        CurveFitter._check(pts)
        params, total_length = CurveFitter.initial_parameters(pts)
        if total_length == 0.0:
            return CurveSegment.point(pts[0])

        previous_error: Optional[float] = None
        niter = 0
        while True:
            coefficients = CurveFitter._solve_coefficients(pts, params)
            error = CurveFitter._max_error(coefficients, pts, params, total_length)
            params = CurveFitter._reparameterize(coefficients, pts, params)
            if error < max_error:
                break
            if previous_error is not None and abs(error - previous_error) < FIT_STAGNATION:
                break
            if niter > max_iterations:
                break
            previous_error = error
            niter += 1
        logger.debug(f"Fitted {pts.shape[0]} points in {niter} iteration(s), error {error:.3g}")
        return CurveFitter._segment(coefficients)

    @staticmethod
    def adaptive_fit(
        points: PointsLike,
        max_error: float = ADAPTIVE_FIT_DEFAULT_MAX_ERROR,
        max_iterations: int = ADAPTIVE_FIT_DEFAULT_MAX_ITERATIONS,
        total_length: Optional[float] = None,
    ) -> FitResult:
        """
        Fit a piecewise cubic curve to _points_ by recursive halving.

        A point list of more than 8 points whose single-segment fit still
        misses _max_error_ after _max_iterations_ rounds is split into two
        halves sharing the middle point, each fitted on its own.

        Args:
            points: Ordered points, as Point2D / (x, y) sequence or array of shape (n, 2).
            max_error: Accepted maximum distance relative to _total_length_.
            max_iterations: Rounds per segment before splitting.
            total_length: Reference length for the error. Defaults to None,
                in which case the chord length of _points_ is used.

        Returns:
            FitResult: (curve, error) with the largest normalized error of all segments.

        Raises:
            CurveDomainError: If fewer than 2 points are given.
        """
        pts = CurveFitter._as_array(points)
        CurveFitter._check(pts)
        params, chord_length = CurveFitter.initial_parameters(pts)
        if chord_length == 0.0:
            return FitResult(MultiCurve([CurveSegment.point(pts[0])]), 0.0)
        reference = chord_length if total_length is None else total_length

        niter = 0
        while True:
            coefficients = CurveFitter._solve_coefficients(pts, params)
            error = CurveFitter._max_error(coefficients, pts, params, reference)
            params = CurveFitter._reparameterize(coefficients, pts, params)
            if niter > max_iterations and error > max_error and pts.shape[0] > FIT_MIN_SPLIT_POINTS:
                half = pts.shape[0] // 2
                logger.debug(f"Splitting {pts.shape[0]} points at {half - 1}, error {error:.3g}")
                first = CurveFitter.adaptive_fit(pts[:half], max_error, max_iterations, reference)
                second = CurveFitter.adaptive_fit(pts[half - 1 :], max_error, max_iterations, reference)
                return FitResult(first.curve + second.curve, max(first.error, second.error))
            if error < max_error or niter > max_iterations:
                break
            niter += 1
        return FitResult(MultiCurve([CurveFitter._segment(coefficients)]), error)

    @staticmethod
    def fit_curve(points: PointsLike, settings: Optional[FitSettings] = None) -> MultiCurve:
        """Curve of adaptive_fit() with the tolerances of _settings_ (default: FitSettings())."""
        config = settings or FitSettings()
        return CurveFitter.adaptive_fit(points, config.max_error, config.max_iterations).curve
