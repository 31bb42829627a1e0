"""Piecewise cubic curves made of CurveSegments, parameterized by normalized arc length."""

from __future__ import annotations

import math
from functools import cached_property
from typing import Callable, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np
import svgpathtools
from loguru import logger
from numpy.typing import NDArray

from curvekit.arclength import DEFAULT_FLATTEN_SETTINGS, ArcLengthMap, FlattenSettings
from curvekit.bezier import CurveSegment, PointLike
from curvekit.common import CurvePathCmds, ParameterType, SegmentForm, Side
from curvekit.consts import CIRCLE_KAPPA, INTERSECTION_SAMPLES, POINT_EPSILON, SMOOTH_TOLERANCE, ZERO_EPSILON
from curvekit.errors import CurveConstructionError, CurveDomainError
from curvekit.geom import ORIGIN, UNIT_X, CurveBox, GeomMath, Point2D
from curvekit.svgpath import CurveSvgPath

SegmentData = Tuple[Union[SegmentForm, str], PointLike, PointLike, PointLike, PointLike]


class MultiCurve:
    """Ordered, non-empty sequence of cubic segments forming one curve.

    A MultiCurve with N segments has the raw parameter domain [0, N]: raw
    parameter i + t is the local parameter t of segment i. Unless stated
    otherwise positions are given in normalized arc length in [0, 1]
    (ParameterType.LENGTH), converted by an ArcLengthMap that is built on
    first use.

    Curves are immutable. Every transform returns a new MultiCurve, so the
    memoised length table and side boundaries never go stale.
    """

    def __init__(self, segments: Sequence[CurveSegment], flatten_settings: Optional[FlattenSettings] = None):
        """
        Args:
            segments: The segments in traversal order.
            flatten_settings: Settings of the arc length flattener. Defaults to None,
                in which case DEFAULT_FLATTEN_SETTINGS are used.

        Raises:
            CurveConstructionError: If _segments_ is empty or holds something else than CurveSegments.
        """
        segment_list = list(segments)
        if not segment_list:
            raise CurveConstructionError("A MultiCurve needs at least one segment")
        for segment in segment_list:
            if not isinstance(segment, CurveSegment):
                raise CurveConstructionError(f"{segment!r} is not a CurveSegment")
        self._segments: Tuple[CurveSegment, ...] = tuple(segment_list)
        self._flatten_settings = flatten_settings or DEFAULT_FLATTEN_SETTINGS

    ###########################################################################
    # Builders
    ###########################################################################

    @classmethod
    def single(
        cls, form: Union[SegmentForm, str], v1: PointLike, v2: PointLike, v3: PointLike, v4: PointLike
    ) -> MultiCurve:
        """Curve made of one segment given by its form and four values."""
        return cls([CurveSegment(form, v1, v2, v3, v4)])

    @classmethod
    def raw(cls, p0: PointLike, c0: PointLike, c1: PointLike, p1: PointLike) -> MultiCurve:
        """Curve made of one segment given by anchors and control points."""
        return cls([CurveSegment.raw(p0, c0, c1, p1)])

    @classmethod
    def vector(cls, p0: PointLike, t0: PointLike, p1: PointLike, t1: PointLike) -> MultiCurve:
        """Curve made of one segment given by anchors and control offsets."""
        return cls([CurveSegment.tangent(p0, t0, p1, t1)])

    @classmethod
    def vector_regular(cls, p0: PointLike, v0: PointLike, p1: PointLike, v1: PointLike) -> MultiCurve:
        """Curve made of one segment whose offsets have the directions of _v0_ and _v1_
        and a third of the chord length each."""
        start = Point2D.from_any(p0)
        end = Point2D.from_any(p1)
        scale = (end - start).length / 3.0
        t0 = Point2D.from_any(v0).normalized() * scale
        t1 = Point2D.from_any(v1).normalized() * scale
        return cls([CurveSegment.tangent(start, t0, end, t1)])

    @classmethod
    def line(cls, p0: PointLike = ORIGIN, p1: PointLike = UNIT_X) -> MultiCurve:
        """Straight curve from _p0_ to _p1_."""
        return cls([CurveSegment.line(p0, p1)])

    @classmethod
    def point(cls, p: PointLike) -> MultiCurve:
        """Zero-length curve located at _p_."""
        return cls([CurveSegment.point(p)])

    @classmethod
    def multi(cls, pieces: Sequence[SegmentData]) -> MultiCurve:
        """Curve made of several segments, each given as (form, v1, v2, v3, v4)."""
        segments = []
        for piece in pieces:
            if len(piece) != 5:
                raise CurveConstructionError(f"Segment data {piece!r} is not (form, v1, v2, v3, v4)")
            segments.append(CurveSegment(*piece))
        return cls(segments)

    @classmethod
    def raws(cls, *points: PointLike) -> MultiCurve:
        """
        Smooth curve through a chain of (anchor, control) pairs.

        The control point given with an anchor is its outgoing control; the
        incoming control is mirrored through the anchor.
        E.g. raws(p0, pc0, p1, pc1, p2, pc2) gives two segments.

        Raises:
            CurveConstructionError: If fewer than two pairs are given.
        """
        pairs = cls._pairs(points)
        segments = []
        for (p1, pc1), (p2, pc2) in zip(pairs, pairs[1:]):
            segments.append(CurveSegment.raw(p1, pc1, p2 + (p2 - pc2), p2))
        return cls(segments)

    @classmethod
    def vectors(cls, *points: PointLike) -> MultiCurve:
        """
        Smooth curve through a chain of (anchor, offset) pairs.

        The offset given with an anchor is its outgoing offset; the incoming
        offset is its opposite.

        Raises:
            CurveConstructionError: If fewer than two pairs are given.
        """
        pairs = cls._pairs(points)
        segments = []
        for (p1, v1), (p2, v2) in zip(pairs, pairs[1:]):
            segments.append(CurveSegment.tangent(p1, v1, p2, -v2))
        return cls(segments)

    @staticmethod
    def _pairs(points: Sequence[PointLike]) -> List[Tuple[Point2D, Point2D]]:
        if len(points) < 4 or len(points) % 2:
            raise CurveConstructionError(f"Expected an even number of at least 4 points, got {len(points)}")
        values = [Point2D.from_any(p) for p in points]
        return list(zip(values[0::2], values[1::2]))

    @classmethod
    def circle(cls, center: PointLike = ORIGIN, radius: float = 1.0) -> MultiCurve:
        """Closed counterclockwise approximation of a circle by four segments, starting at angle 0."""
        middle = Point2D.from_any(center)
        offset = CIRCLE_KAPPA * radius
        anchors = []
        directions = []
        for k in range(4):
            angle = k * math.pi / 2.0
            unit = Point2D(math.cos(angle), math.sin(angle))
            anchors.append(middle + unit * radius)
            directions.append(unit.ortho())
        segments = []
        for k in range(4):
            n = (k + 1) % 4
            segments.append(
                CurveSegment.tangent(anchors[k], directions[k] * offset, anchors[n], directions[n] * -offset)
            )
        return cls(segments)

    @classmethod
    def from_path_string(cls, path_string: str) -> MultiCurve:
        """
        Curve from an SVG path description.

        Lines become straight segments, quadratic segments are elevated to
        cubic ones.

        Raises:
            CurveConstructionError: If the description cannot be parsed, is empty
                or holds elliptical arcs.
        """
        try:
            path_collection = svgpathtools.parse_path(path_string)
        except (ValueError, IndexError) as e:
            raise CurveConstructionError(f"Cannot parse path description {path_string!r}") from e

        def to_point(z: complex) -> Point2D:
            return Point2D(z.real, z.imag)

        segments = []
        for segment in path_collection:
            if isinstance(segment, svgpathtools.CubicBezier):
                segments.append(
                    CurveSegment.raw(
                        to_point(segment.start),
                        to_point(segment.control1),
                        to_point(segment.control2),
                        to_point(segment.end),
                    )
                )
            elif isinstance(segment, svgpathtools.QuadraticBezier):
                start = to_point(segment.start)
                control = to_point(segment.control)
                end = to_point(segment.end)
                segments.append(
                    CurveSegment.raw(
                        start,
                        start + (control - start) * (2.0 / 3.0),
                        end + (control - end) * (2.0 / 3.0),
                        end,
                    )
                )
            elif isinstance(segment, svgpathtools.Line):
                segments.append(CurveSegment.line(to_point(segment.start), to_point(segment.end)))
            else:
                raise CurveConstructionError(f"Unsupported path segment {segment!r}")
        if not segments:
            raise CurveConstructionError(f"Path description {path_string!r} holds no segments")
        return cls(segments)

    ###########################################################################
    # Accessors
    ###########################################################################

    @property
    def segments(self) -> Tuple[CurveSegment, ...]:
        """The segments in traversal order."""
        return self._segments

    @property
    def segment_count(self) -> int:
        """int: Number of segments N."""
        return len(self._segments)

    @property
    def flatten_settings(self) -> FlattenSettings:
        """FlattenSettings: Settings used to build the arc length map."""
        return self._flatten_settings

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self) -> Iterator[CurveSegment]:
        return iter(self._segments)

    def point_list(self, form: Union[SegmentForm, str] = SegmentForm.RAW) -> List[Point2D]:
        """All values of all segments in the requested form, four per segment."""
        points: List[Point2D] = []
        for segment in self._segments:
            points.extend(segment.point_list(form))
        return points

    @property
    def first_point(self) -> Point2D:
        """Point2D: Start anchor of the first segment."""
        return self._segments[0].first_point

    @property
    def last_point(self) -> Point2D:
        """Point2D: End anchor of the last segment."""
        return self._segments[-1].last_point

    @property
    def is_closed(self) -> bool:
        """bool: True if the curve ends where it starts."""
        return self.first_point.is_close(self.last_point, POINT_EPSILON)

    @property
    def viewbox(self) -> CurveBox:
        """CurveBox: Box enclosing all anchors and control points."""
        return CurveBox.from_points(self.point_list())

    @property
    def data(self) -> List[Tuple]:
        """One ("raw", p0, c0, c1, p1) tuple per segment, suitable for MultiCurve.multi()."""
        return [segment.data for segment in self._segments]

    def segment(self, index: Union[int, float], mode: ParameterType = ParameterType.LENGTH) -> CurveSegment:
        """Segment number _index_ if an int, else the segment holding the position _index_."""
        if isinstance(index, int) and not isinstance(index, bool):
            if not -len(self._segments) <= index < len(self._segments):
                raise CurveDomainError(f"Segment index {index} outside of 0..{len(self._segments) - 1}")
            return self._segments[index]
        segment_index, _ = self.parameter_mapping(index, mode)
        return self._segments[segment_index]

    def single_curves(self) -> List[MultiCurve]:
        """One single-segment curve per segment."""
        return [MultiCurve([segment], self._flatten_settings) for segment in self._segments]

    ###########################################################################
    # Parameterization
    ###########################################################################

    def parameter_mapping(
        self, index: float, mode: ParameterType = ParameterType.LENGTH, side: Optional[Side] = None
    ) -> Tuple[int, float]:
        """
        Segment index and local parameter of the position _index_.

        In LENGTH mode _index_ is a normalized arc length in [0, 1], in
        PARAMETER mode a raw parameter, clamped to [0, N]. A position on an
        integer boundary i (0 < i < N) belongs to segment i at t=0 unless
        _side_ is Side.LEFT, which selects segment i-1 at t=1. The position N
        always belongs to the last segment at t=1, the position 0 to the
        first segment at t=0.

        Raises:
            CurveDomainError: If _mode_ is not a ParameterType or a LENGTH position
                lies outside [0, 1].
        """
        mode = ParameterType.check(mode)
        value = float(index)
        if mode is ParameterType.LENGTH:
            if value < -ZERO_EPSILON or value > 1.0 + ZERO_EPSILON:
                raise CurveDomainError(f"Length position {index} outside of [0, 1]")
            value = self.arc_length_map.length_to_parameter(min(max(value, 0.0), 1.0))

        n = len(self._segments)
        value = min(max(value, 0.0), float(n))
        nearest = round(value)
        if abs(value - nearest) < ZERO_EPSILON:
            value = float(nearest)
        whole = math.floor(value)
        if value == whole and whole > 0 and (whole == n or side is Side.LEFT):
            return int(whole) - 1, 1.0
        return int(whole), value - whole

    def _evaluate(
        self,
        func: Callable[[CurveSegment, float], Point2D],
        t: float,
        mode: ParameterType,
        side: Optional[Side] = None,
    ) -> Point2D:
        segment_index, local_t = self.parameter_mapping(t, mode, side)
        return func(self._segments[segment_index], local_t)

    def point_at(self, t: float, mode: ParameterType = ParameterType.LENGTH) -> Point2D:
        """Point at position _t_."""
        return self._evaluate(CurveSegment.point_at, t, mode)

    def tangent_at(self, t: float, mode: ParameterType = ParameterType.LENGTH) -> Point2D:
        """Tangent (one third of the segment derivative) at position _t_."""
        return self._evaluate(CurveSegment.tangent_at, t, mode)

    def acceleration_at(self, t: float, mode: ParameterType = ParameterType.LENGTH) -> Point2D:
        """Acceleration (scaled like tangent_at) at position _t_."""
        return self._evaluate(CurveSegment.acceleration_at, t, mode)

    def frame(
        self, t: float, mode: ParameterType = ParameterType.LENGTH, side: Optional[Side] = None
    ) -> Tuple[Point2D, Point2D]:
        """(point, tangent) at position _t_, both taken from the same segment."""
        segment_index, local_t = self.parameter_mapping(t, mode, side)
        segment = self._segments[segment_index]
        return segment.point_at(local_t), segment.tangent_at(local_t)

    def normal_at(self, t: float, mode: ParameterType = ParameterType.LENGTH) -> Point2D:
        """Tangent rotated by +pi/2 at position _t_ (same scale as tangent_at)."""
        return self.tangent_at(t, mode).ortho()

    def normal_acceleration_at(self, t: float, mode: ParameterType = ParameterType.LENGTH) -> float:
        """Component of acceleration_at() along the unit normal at position _t_."""
        segment_index, local_t = self.parameter_mapping(t, mode)
        segment = self._segments[segment_index]
        normal = segment.tangent_at(local_t).ortho().normalized()
        return segment.acceleration_at(local_t).dot(normal)

    def curvature_at(self, t: float, mode: ParameterType = ParameterType.LENGTH) -> float:
        """
        Signed curvature at position _t_, positive where the curve turns left.

        With the one-third scaled tangent T and acceleration A this is
        (A . unit normal) / (3 |T|^2). Straight pieces and null tangents
        have curvature 0.0.
        """
        segment_index, local_t = self.parameter_mapping(t, mode)
        segment = self._segments[segment_index]
        tangent = segment.tangent_at(local_t)
        speed = tangent.length
        if speed < ZERO_EPSILON:
            return 0.0
        acc_normal = segment.acceleration_at(local_t).dot(tangent.ortho() / speed)
        if acc_normal == 0.0:
            return 0.0
        return acc_normal / (3.0 * speed * speed)

    def tangents(
        self, positions: Union[int, Sequence[float]], mode: ParameterType = ParameterType.LENGTH
    ) -> List[Point2D]:
        """Tangents at _positions_ (evenly spaced count or explicit positions)."""
        return [self.tangent_at(x, mode) for x in self._positions(positions, mode)]

    def normals(
        self, positions: Union[int, Sequence[float]], mode: ParameterType = ParameterType.LENGTH
    ) -> List[Point2D]:
        """Normals at _positions_ (evenly spaced count or explicit positions)."""
        return [self.normal_at(x, mode) for x in self._positions(positions, mode)]

    def curvatures(
        self, positions: Union[int, Sequence[float]], mode: ParameterType = ParameterType.LENGTH
    ) -> List[float]:
        """Curvatures at _positions_ (evenly spaced count or explicit positions)."""
        return [self.curvature_at(x, mode) for x in self._positions(positions, mode)]

    def _positions(self, positions: Union[int, Sequence[float]], mode: ParameterType) -> List[float]:
        # sample positions in [0, 1], scaled to the raw domain in PARAMETER mode
        values = GeomMath.sample_positions(positions)
        if ParameterType.check(mode) is ParameterType.PARAMETER:
            n = len(self._segments)
            return [x * n for x in values]
        return values

    def points_at_parameters(self, params: Sequence[float]) -> NDArray[np.float64]:
        """Points at the raw parameters _params_ as array of shape (n, 2)."""
        result = np.empty((len(params), 2), dtype=np.float64)
        for i, t in enumerate(params):
            point = self._evaluate(CurveSegment.point_at, t, ParameterType.PARAMETER)
            result[i, 0] = point.x
            result[i, 1] = point.y
        return result

    ###########################################################################
    # Arc length
    ###########################################################################

    @cached_property
    def arc_length_map(self) -> ArcLengthMap:
        """ArcLengthMap: Length table of the curve, built on first access."""
        return ArcLengthMap.build(self, self._flatten_settings)

    def length(self) -> float:
        """Arc length of the curve."""
        return self.arc_length_map.length

    def parameter_from_length(self, x: float) -> float:
        """Raw parameter at normalized arc length _x_."""
        return self.arc_length_map.length_to_parameter(x)

    def length_from_parameter(self, t: float) -> float:
        """Normalized arc length at raw parameter _t_."""
        return self.arc_length_map.parameter_to_length(t)

    def segment_lengths(self) -> List[float]:
        """Normalized arc length at each segment boundary: [0.0, ..., 1.0]."""
        lengths = [0.0]
        lengths.extend(self.length_from_parameter(float(i)) for i in range(1, len(self._segments)))
        lengths.append(1.0)
        return lengths

    ###########################################################################
    # Subcurves and transforms
    ###########################################################################

    def subcurve(self, t1: float, t2: float, mode: ParameterType = ParameterType.LENGTH) -> MultiCurve:
        """
        Part of the curve between the positions _t1_ and _t2_.

        If t1 > t2 the result is the reversed subcurve from t2 to t1. On a
        closed curve positions outside the domain wrap around, e.g. on a
        circle subcurve(0.9, 1.1) runs over the starting point.

        Raises:
            CurveDomainError: If a position lies outside the domain of an open curve.
        """
        mode = ParameterType.check(mode)
        if t1 > t2:
            return self.subcurve(t2, t1, mode).reverse()

        high = 1.0 if mode is ParameterType.LENGTH else float(len(self._segments))
        t1 = self._snap(t1, high)
        t2 = self._snap(t2, high)
        if (t1 < 0.0 or t2 > high) and not self.is_closed:
            raise CurveDomainError(f"Range ({t1}, {t2}) outside of [0, {high}] on an open curve")

        segments: List[CurveSegment] = []
        for low, up in GeomMath.modulo_ranges(t1, t2, 0.0, high):
            segments.extend(self._range_segments(low, up, mode))
        return MultiCurve(segments, self._flatten_settings)

    @staticmethod
    def _snap(t: float, high: float) -> float:
        if -ZERO_EPSILON <= t < 0.0:
            return 0.0
        if high < t <= high + ZERO_EPSILON:
            return high
        return t

    def _range_segments(self, t1: float, t2: float, mode: ParameterType) -> List[CurveSegment]:
        i1, u1 = self.parameter_mapping(t1, mode, Side.RIGHT)
        i2, u2 = self.parameter_mapping(t2, mode, Side.LEFT)
        if i1 == i2:
            return [self._segments[i1].subsegment(u1, u2)]
        if i1 > i2:
            # empty range on a segment boundary
            return [self._segments[i1].subsegment(u1, u1)]
        result = [self._segments[i1].subsegment(u1, 1.0)]
        result.extend(self._segments[i1 + 1 : i2])
        result.append(self._segments[i2].subsegment(0.0, u2))
        return result

    def split(self, t1: float, t2: float) -> MultiCurve:
        """Subcurve between the normalized arc lengths _t1_ and _t2_."""
        return self.subcurve(t1, t2, ParameterType.LENGTH)

    def splits(self, count: int) -> List[MultiCurve]:
        """The curve cut into _count_ consecutive parts of equal arc length."""
        if count < 1:
            raise CurveDomainError(f"Number of splits must be positive, got {count}")
        bounds = GeomMath.samples(0.0, 1.0, count + 1)
        return [self.split(t1, t2) for t1, t2 in zip(bounds, bounds[1:])]

    def reverse(self) -> MultiCurve:
        """Same geometry, traversed backwards."""
        return MultiCurve([segment.reverse() for segment in reversed(self._segments)], self._flatten_settings)

    def concatenate(self, other: MultiCurve) -> MultiCurve:
        """Curve made of the segments of this curve followed by those of _other_."""
        return MultiCurve(self._segments + other.segments, self._flatten_settings)

    def __add__(self, other: MultiCurve) -> MultiCurve:
        if not isinstance(other, MultiCurve):
            return NotImplemented
        return self.concatenate(other)

    def _map_segments(self, func: Callable[[CurveSegment], CurveSegment]) -> MultiCurve:
        return MultiCurve([func(segment) for segment in self._segments], self._flatten_settings)

    def translate(self, v: PointLike) -> MultiCurve:
        """Translate the curve by _v_."""
        return self._map_segments(lambda s: s.translate(v))

    def rotate(self, angle: float, center: Optional[PointLike] = None) -> MultiCurve:
        """Rotate the curve by _angle_ radians around _center_ (default: origin)."""
        return self._map_segments(lambda s: s.rotate(angle, center))

    def reflect(self, center: PointLike) -> MultiCurve:
        """Central symmetry through _center_."""
        return self._map_segments(lambda s: s.reflect(center))

    def axis_reflect(self, point: PointLike, axis: PointLike) -> MultiCurve:
        """Mirror on the line through _point_ with direction _axis_."""
        return self._map_segments(lambda s: s.axis_reflect(point, axis))

    def similar(self, start: PointLike, end: PointLike) -> MultiCurve:
        """
        Image of the curve under the similitude (rotation, scaling, translation)
        moving its first point to _start_ and its last point to _end_.

        Raises:
            CurveDomainError: If the curve ends where it starts.
        """
        new_start = Point2D.from_any(start)
        new_end = Point2D.from_any(end)
        old_chord = self.last_point - self.first_point
        old_length = old_chord.length
        if old_length < ZERO_EPSILON:
            raise CurveDomainError("Cannot map a curve whose first and last points coincide")
        new_chord = new_end - new_start
        angle = new_chord.angle() - old_chord.angle()
        scale = new_chord.length / old_length
        origin = self.first_point

        def transform(p: Point2D) -> Point2D:
            return new_start + (p - origin).rotate(angle) * scale

        return self._map_segments(lambda s: s.map_points(transform))

    def is_close(self, other: MultiCurve, epsilon: float = POINT_EPSILON) -> bool:
        """True if both curves have the same number of segments with matching control points."""
        if len(self._segments) != len(other.segments):
            return False
        return all(s.is_close(o, epsilon) for s, o in zip(self._segments, other.segments))

    ###########################################################################
    # Continuity sides
    ###########################################################################

    @staticmethod
    def _is_smooth(incoming: Point2D, outgoing: Point2D) -> bool:
        """True if the junction with end offset _incoming_ and start offset _outgoing_ has no corner."""
        if incoming.length < ZERO_EPSILON or outgoing.length < ZERO_EPSILON:
            return True
        return (-outgoing).normalized().is_close(incoming.normalized(), SMOOTH_TOLERANCE)

    @cached_property
    def _side_boundaries(self) -> Tuple[int, ...]:
        n = len(self._segments)
        result: List[int] = []
        incoming = self._segments[0].last_vector
        for index in range(1, n):
            segment = self._segments[index]
            if not self._is_smooth(incoming, segment.first_vector):
                if not result:
                    result.append(0)
                result.append(index)
            incoming = segment.last_vector

        if self.is_closed:
            outgoing = self._segments[0].first_vector
            if self._is_smooth(incoming, outgoing):
                if incoming.length < ZERO_EPSILON or outgoing.length < ZERO_EPSILON:
                    logger.warning("Null tangent at the closing junction, treated as smooth")
                if result:
                    result[0] = result[-1] - n
                else:
                    result = [0, n]
            else:
                if not result:
                    result.append(0)
                result.append(n)
        else:
            if not result:
                result.append(0)
            result.append(n)
        return tuple(result)

    def side_boundaries(self) -> List[int]:
        """
        Segment indices where the tangent direction jumps, framed by the curve ends.

        Examples:
            line => [0, 1], triangle => [0, 1, 2, 3], circle => [0, 4].
        On a closed curve whose closing junction is smooth the side running
        over the starting point is given by a negative first index, e.g.
        [-2, 2, 3] for five segments with corners at 2 and 3 only.
        """
        return list(self._side_boundaries)

    def sides(self) -> List[MultiCurve]:
        """One curve per smooth side, see side_boundaries()."""
        boundaries = self._side_boundaries
        result = []
        for i1, i2 in zip(boundaries, boundaries[1:]):
            if i1 < 0:
                segments = self._segments[i1:] + self._segments[:i2]
            else:
                segments = self._segments[i1:i2]
            result.append(MultiCurve(segments, self._flatten_settings))
        return result

    def side_parameter_ranges(self) -> List[Tuple[int, int]]:
        """Raw parameter ranges covering [0, N], cut at every side boundary."""
        cuts = sorted({0, len(self._segments)} | {i for i in self._side_boundaries if i >= 0})
        return list(zip(cuts, cuts[1:]))

    ###########################################################################
    # Intersections
    ###########################################################################

    def intersections(
        self,
        other: MultiCurve,
        samples: int = INTERSECTION_SAMPLES,
        mode: ParameterType = ParameterType.LENGTH,
    ) -> List[Tuple[float, float]]:
        """
        Approximate crossings of this curve with _other_.

        Both curves are sampled at _samples_ evenly spaced positions and the
        two polylines are intersected. The position on each curve is
        interpolated linearly between the samples of the crossing edges.

        Args:
            other (MultiCurve): the curve to intersect with
            samples (int, optional): polyline samples per curve. Defaults to INTERSECTION_SAMPLES.
            mode (ParameterType, optional): LENGTH returns positions in [0, 1],
                PARAMETER raw parameters. Defaults to ParameterType.LENGTH.

        Returns:
            List[Tuple[float, float]]: (position on this curve, position on _other_) pairs.

        Raises:
            CurveDomainError: If fewer than 2 samples are requested.
        """
        if samples < 2:
            raise CurveDomainError(f"Intersections need at least 2 samples per curve, got {samples}")
        positions_a = self._positions(samples, mode)
        positions_b = other._positions(samples, mode)  # pylint: disable=protected-access
        line_a = np.array([tuple(self.point_at(x, mode)) for x in positions_a])
        line_b = np.array([tuple(other.point_at(x, mode)) for x in positions_b])

        result = []
        for i, ratio_a, j, ratio_b in GeomMath.polyline_intersections(line_a, line_b):
            t_a = positions_a[i] + ratio_a * (positions_a[i + 1] - positions_a[i])
            t_b = positions_b[j] + ratio_b * (positions_b[j + 1] - positions_b[j])
            result.append((t_a, t_b))
        logger.debug(f"{len(result)} intersection(s) of {self.segment_count} and {other.segment_count} segment(s)")
        return result

    ###########################################################################
    # Sampling and export
    ###########################################################################

    def sample(self, x: float, mode: ParameterType = ParameterType.LENGTH) -> Point2D:
        """Point at _x_ in [0, 1]; in PARAMETER mode _x_ is scaled to the raw domain [0, N]."""
        mode = ParameterType.check(mode)
        if mode is ParameterType.PARAMETER:
            return self.point_at(x * len(self._segments), mode)
        return self.point_at(x, mode)

    def samples(
        self, positions: Union[int, Sequence[float]], mode: ParameterType = ParameterType.LENGTH
    ) -> List[Point2D]:
        """Points at _positions_ evenly spaced positions (int) or at the given positions."""
        return [self.sample(x, mode) for x in GeomMath.sample_positions(positions)]

    def path_commands(self) -> List[Tuple[CurvePathCmds, Tuple[Point2D, ...]]]:
        """(command, points) pairs of the SVG path description."""
        return CurveSvgPath.path_commands(self)

    def path_string(self, round_func: Optional[Callable] = None) -> str:
        """SVG path description, e.g. "M 0.0,1.0 C 1.0,1.0 0.0,0.0 1.0,0.0"."""
        return CurveSvgPath.path_string(self, round_func)

    def __repr__(self) -> str:
        return f"MultiCurve({list(self._segments)!r})"
