"""Single cubic Bezier segment: evaluation, subdivision and rigid transforms."""

from __future__ import annotations

from functools import cached_property
from typing import Callable, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from curvekit.common import SegmentForm
from curvekit.consts import POINT_EPSILON
from curvekit.errors import CurveDomainError
from curvekit.geom import ORIGIN, Point2D

PointLike = Union[Point2D, Sequence[float], NDArray[np.float64]]


class CurveSegment:
    """One cubic Bezier piece.

    A segment is given either in raw form (anchor p0, control c0, control c1,
    anchor p1) as in SVG, or in tangent form (anchor p0, offset t0, anchor p1,
    offset t1) where c0 = p0 + t0 and c1 = p1 + t1. The form not given is
    computed on first access. Segments are immutable: every transform returns
    a new segment.

    Evaluation uses the monomial expansion a*t^3 + b*t^2 + c*t + d. Note that
    tangent_at() returns ONE THIRD of the derivative and acceleration_at() the
    second derivative scaled by the same factor; curvature, frames and the
    flattener all rely on this scaling.
    """

    def __init__(
        self,
        form: Union[SegmentForm, str],
        v1: PointLike,
        v2: PointLike,
        v3: PointLike,
        v4: PointLike,
    ):
        """
        Args:
            form: SegmentForm.RAW or SegmentForm.TANGENT (or "raw" / "tangent" / "vector").
            v1, v2, v3, v4: The four values of the segment in the given form.

        Raises:
            CurveConstructionError: If _form_ is unknown or a value has no 2D coordinates.
        """
        self._form = SegmentForm.parse(form)
        values = (
            Point2D.from_any(v1),
            Point2D.from_any(v2),
            Point2D.from_any(v3),
            Point2D.from_any(v4),
        )
        self._values = values

    ###########################################################################
    # Builders
    ###########################################################################

    @classmethod
    def raw(cls, p0: PointLike, c0: PointLike, c1: PointLike, p1: PointLike) -> CurveSegment:
        """Segment from anchors and absolute control points."""
        return cls(SegmentForm.RAW, p0, c0, c1, p1)

    @classmethod
    def tangent(cls, p0: PointLike, t0: PointLike, p1: PointLike, t1: PointLike) -> CurveSegment:
        """Segment from anchors and control offsets (t1 points from p1 to its control point)."""
        return cls(SegmentForm.TANGENT, p0, t0, p1, t1)

    @classmethod
    def from_form(
        cls, form: Union[SegmentForm, str], v1: PointLike, v2: PointLike, v3: PointLike, v4: PointLike
    ) -> CurveSegment:
        """Segment from a form tag and four values."""
        return cls(form, v1, v2, v3, v4)

    @classmethod
    def line(cls, p0: PointLike, p1: PointLike) -> CurveSegment:
        """Straight segment with control points at one third of the chord."""
        start = Point2D.from_any(p0)
        end = Point2D.from_any(p1)
        chord = (end - start) / 3.0
        return cls.tangent(start, chord, end, -chord)

    @classmethod
    def point(cls, p: PointLike) -> CurveSegment:
        """Zero-length segment located at _p_."""
        pt = Point2D.from_any(p)
        return cls.tangent(pt, ORIGIN, pt, ORIGIN)

    ###########################################################################
    # Forms
    ###########################################################################

    @property
    def form(self) -> SegmentForm:
        """SegmentForm: The form the segment was built from."""
        return self._form

    @cached_property
    def raw_points(self) -> Tuple[Point2D, Point2D, Point2D, Point2D]:
        """(p0, c0, c1, p1)"""
        if self._form is SegmentForm.RAW:
            return self._values
        p0, t0, p1, t1 = self._values
        return (p0, p0 + t0, p1 + t1, p1)

    @cached_property
    def tangent_points(self) -> Tuple[Point2D, Point2D, Point2D, Point2D]:
        """(p0, t0, p1, t1)"""
        if self._form is SegmentForm.TANGENT:
            return self._values
        p0, c0, c1, p1 = self._values
        return (p0, c0 - p0, p1, c1 - p1)

    def point_list(self, form: Union[SegmentForm, str] = SegmentForm.RAW) -> Tuple[Point2D, ...]:
        """The four values of the segment in the requested form."""
        if SegmentForm.parse(form) is SegmentForm.RAW:
            return self.raw_points
        return self.tangent_points

    @property
    def data(self) -> Tuple[str, Point2D, Point2D, Point2D, Point2D]:
        """("raw", p0, c0, c1, p1), suitable for CurveSegment.from_form(*data)."""
        return ("raw",) + self.raw_points

    @property
    def first_point(self) -> Point2D:
        """Point2D: The start anchor."""
        return self.raw_points[0]

    @property
    def last_point(self) -> Point2D:
        """Point2D: The end anchor."""
        return self.raw_points[3]

    @property
    def first_vector(self) -> Point2D:
        """Point2D: Offset from the start anchor to its control point."""
        return self.tangent_points[1]

    @property
    def last_vector(self) -> Point2D:
        """Point2D: Offset from the end anchor to its control point."""
        return self.tangent_points[3]

    ###########################################################################
    # Evaluation
    ###########################################################################

    @cached_property
    def coefficients(self) -> Tuple[Point2D, Point2D, Point2D, Point2D]:
        """Polynomial coefficients (a, b, c, d) of a*t^3 + b*t^2 + c*t + d."""
        p0, c0, c1, p1 = self.raw_points
        a = -(p0 - c0 * 3.0 + c1 * 3.0 - p1)
        b = (p0 - c0 * 2.0 + c1) * 3.0
        c = (c0 - p0) * 3.0
        return (a, b, c, p0)

    @cached_property
    def _tangent_coefficients(self) -> Tuple[Point2D, Point2D, Point2D]:
        a, b, c, _ = self.coefficients
        return (a, b * (2.0 / 3.0), c / 3.0)

    def point_at(self, t: float) -> Point2D:
        """Point at local parameter _t_ in [0, 1]."""
        a, b, c, d = self.coefficients
        t2 = t * t
        t3 = t2 * t
        return Point2D(
            d.x + c.x * t + b.x * t2 + a.x * t3,
            d.y + c.y * t + b.y * t2 + a.y * t3,
        )

    def tangent_at(self, t: float) -> Point2D:
        """One third of the derivative at local parameter _t_."""
        ta, tb, tc = self._tangent_coefficients
        t2 = t * t
        return Point2D(tc.x + tb.x * t + ta.x * t2, tc.y + tb.y * t + ta.y * t2)

    def acceleration_at(self, t: float) -> Point2D:
        """Second derivative at local parameter _t_, scaled like tangent_at()."""
        ta, tb, _ = self._tangent_coefficients
        return Point2D(tb.x + 2.0 * ta.x * t, tb.y + 2.0 * ta.y * t)

    def points(self, steps: int) -> NDArray[np.float64]:
        """
        Polygonize the segment into _steps_ line segments.
        Uses direct evaluation with vectorized operations.

        Returns:
            NDArray[np.float64] of shape (steps+1, 2) with the points at t = i/steps.

        Raises:
            CurveDomainError: If _steps_ is smaller than 1.
        """
        if steps < 1:
            raise CurveDomainError(f"Number of steps must be positive, got {steps}")
        return self.points_at(np.linspace(0.0, 1.0, steps + 1, dtype=np.float64))

    def points_at(self, params: Union[Sequence[float], NDArray[np.float64]]) -> NDArray[np.float64]:
        """Points at the local parameters _params_ as array of shape (n, 2)."""
        t = np.asarray(params, dtype=np.float64)
        a, b, c, d = self.coefficients
        t2 = t * t
        t3 = t2 * t
        result = np.empty((t.shape[0], 2), dtype=np.float64)
        result[:, 0] = d.x + c.x * t + b.x * t2 + a.x * t3
        result[:, 1] = d.y + c.y * t + b.y * t2 + a.y * t3
        return result

    ###########################################################################
    # Subdivision and transforms
    ###########################################################################

    def subsegment(self, t1: float, t2: float) -> CurveSegment:
        """Restriction of the segment to the local range [t1, t2] (t1 > t2 runs backwards)."""
        v1 = self.tangent_at(t1) * (t2 - t1)
        v2 = self.tangent_at(t2) * (t1 - t2)
        return CurveSegment.tangent(self.point_at(t1), v1, self.point_at(t2), v2)

    def reverse(self) -> CurveSegment:
        """Same geometry, traversed from p1 to p0."""
        p0, c0, c1, p1 = self.raw_points
        return CurveSegment.raw(p1, c1, c0, p0)

    def map_points(self, func: Callable[[Point2D], Point2D]) -> CurveSegment:
        """Segment whose four raw points are the images of this segment's points under _func_."""
        p0, c0, c1, p1 = self.raw_points
        return CurveSegment.raw(func(p0), func(c0), func(c1), func(p1))

    def translate(self, v: PointLike) -> CurveSegment:
        """Translate every point by _v_."""
        vector = Point2D.from_any(v)
        return self.map_points(lambda p: p + vector)

    def rotate(self, angle: float, center: Optional[PointLike] = None) -> CurveSegment:
        """Rotate every point by _angle_ radians around _center_ (default: origin)."""
        pivot = ORIGIN if center is None else Point2D.from_any(center)
        return self.map_points(lambda p: p.rotate(angle, pivot))

    def reflect(self, center: PointLike) -> CurveSegment:
        """Central symmetry through _center_."""
        pivot = Point2D.from_any(center)
        return self.map_points(lambda p: p.reflect(pivot))

    def axis_reflect(self, point: PointLike, axis: PointLike) -> CurveSegment:
        """Mirror on the line through _point_ with direction _axis_."""
        origin = Point2D.from_any(point)
        direction = Point2D.from_any(axis)
        return self.map_points(lambda p: p.axis_reflect(origin, direction))

    def is_close(self, other: CurveSegment, epsilon: float = POINT_EPSILON) -> bool:
        """True if all control points of both segments are within _epsilon_."""
        return all(p.is_close(q, epsilon) for p, q in zip(self.raw_points, other.raw_points))

    def __repr__(self) -> str:
        p0, c0, c1, p1 = self.raw_points
        return f"CurveSegment.raw({p0}, {c0}, {c1}, {p1})"
