"""Handling 2D points, boxes and small numeric helpers"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from curvekit.consts import POINT_EPSILON
from curvekit.errors import CurveConstructionError, CurveDomainError

###############################################################################
# Point2D
###############################################################################


@dataclass(frozen=True)
class Point2D:
    """Immutable 2D point / vector.

    Attributes:
        x (float): The x-coordinate.
        y (float): The y-coordinate.
    """

    x: float
    y: float

    @classmethod
    def from_any(cls, value: Union[Point2D, Sequence[float], NDArray[np.float64]]) -> Point2D:
        """Coerce _value_ into a Point2D.

        Accepts a Point2D, a sequence or array whose first two entries are the
        coordinates (a third "type" column as used for path points is ignored),
        or any object providing numeric ``x`` and ``y`` attributes.

        Raises:
            CurveConstructionError: If _value_ does not carry 2D coordinates.
        """
        if isinstance(value, Point2D):
            return value
        if isinstance(value, (str, bytes)):
            raise CurveConstructionError(f"Value {value!r} does not have 2D coordinates")
        try:
            if hasattr(value, "x") and hasattr(value, "y"):
                return cls(float(value.x), float(value.y))
            if isinstance(value, np.ndarray):
                flat = value.reshape(-1)
                if flat.shape[0] not in (2, 3):
                    raise CurveConstructionError(f"Array of shape {value.shape} is not a 2D point")
                return cls(float(flat[0]), float(flat[1]))
            if isinstance(value, (list, tuple)) and len(value) in (2, 3):
                return cls(float(value[0]), float(value[1]))
        except (TypeError, ValueError) as e:
            raise CurveConstructionError(f"Value {value!r} does not have numeric 2D coordinates") from e
        raise CurveConstructionError(f"Value {value!r} does not have 2D coordinates")

    def __add__(self, other: Point2D) -> Point2D:
        return Point2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point2D) -> Point2D:
        return Point2D(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Point2D:
        return Point2D(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Point2D:
        return Point2D(self.x / scalar, self.y / scalar)

    def __neg__(self) -> Point2D:
        return Point2D(-self.x, -self.y)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def to_tuple(self) -> Tuple[float, float]:
        """The point as (x, y)."""
        return (self.x, self.y)

    @property
    def length(self) -> float:
        """float: Euclidean norm of the vector."""
        return math.hypot(self.x, self.y)

    def dot(self, other: Point2D) -> float:
        """Inner product."""
        return self.x * other.x + self.y * other.y

    def cross(self, other: Point2D) -> float:
        """Scalar 2D cross product (z component of the 3D cross product)."""
        return self.x * other.y - other.x * self.y

    def normalized(self) -> Point2D:
        """Unit vector with the same direction; the zero vector stays zero."""
        r = self.length
        if r == 0.0:
            return ORIGIN
        return self / r

    def angle(self) -> float:
        """Angle of the vector to the x axis in (-pi, pi]."""
        if self.x == 0.0 and self.y == 0.0:
            return 0.0
        return math.atan2(self.y, self.x)

    def ortho(self) -> Point2D:
        """Vector rotated by +pi/2."""
        return Point2D(-self.y, self.x)

    def rotate(self, angle: float, center: Optional[Point2D] = None) -> Point2D:
        """Rotate the point by _angle_ (radians) around _center_ (default: origin)."""
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        if center is None:
            return Point2D(self.x * cos_a - self.y * sin_a, self.x * sin_a + self.y * cos_a)
        dx = self.x - center.x
        dy = self.y - center.y
        return Point2D(center.x + dx * cos_a - dy * sin_a, center.y + dx * sin_a + dy * cos_a)

    def reflect(self, center: Point2D) -> Point2D:
        """Central symmetry of this point through _center_."""
        return Point2D(2.0 * center.x - self.x, 2.0 * center.y - self.y)

    def axis_reflect(self, point: Point2D, axis: Point2D) -> Point2D:
        """Mirror this point on the line through _point_ with direction _axis_."""
        unit = axis.normalized()
        v = self - point
        if unit.x == 0.0 and unit.y == 0.0:
            return self
        return point + unit * (2.0 * v.dot(unit)) - v

    def is_close(self, other: Point2D, epsilon: float = POINT_EPSILON) -> bool:
        """True if the distance to _other_ is below _epsilon_."""
        return math.hypot(other.x - self.x, other.y - self.y) < epsilon

    def __str__(self) -> str:
        return f"({self.x:g}, {self.y:g})"


ORIGIN = Point2D(0.0, 0.0)
UNIT_X = Point2D(1.0, 0.0)
UNIT_Y = Point2D(0.0, 1.0)


###############################################################################
# GeomMath
###############################################################################
class GeomMath:
    """Class to provide various static methods related to geometry handling."""

    @staticmethod
    def solve_2x2(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        a11: float,
        a12: float,
        a21: float,
        a22: float,
        b1: float,
        b2: float,
    ) -> Optional[Tuple[float, float]]:
        """
        Solve the linear system
            | a11 a12 |   | u |   | b1 |
            | a21 a22 | * | v | = | b2 |
        by Cramer's rule.

        Returns:
            Tuple[float, float]: the solution (u, v), or None if the matrix is
            singular or the result is not finite.
        """
        det = a11 * a22 - a12 * a21
        scale = max(abs(a11 * a22), abs(a12 * a21), 1.0e-300)
        if not math.isfinite(det) or abs(det) <= 1.0e-12 * scale:
            return None
        u = (b1 * a22 - b2 * a12) / det
        v = (b2 * a11 - b1 * a21) / det
        if not (math.isfinite(u) and math.isfinite(v)):
            return None
        return (u, v)

    @staticmethod
    def samples(start: float, end: float, count: int) -> List[float]:
        """Return _count_ evenly spaced values from _start_ to _end_ (both included).

        Raises:
            CurveDomainError: If _count_ is smaller than 1.
        """
        if count < 1:
            raise CurveDomainError(f"Number of samples must be positive, got {count}")
        if count == 1:
            return [start]
        step = (end - start) / (count - 1)
        values = [start + i * step for i in range(count - 1)]
        values.append(end)
        return values

    @staticmethod
    def sample_positions(positions: Union[int, Sequence[float]]) -> List[float]:
        """Positions in [0, 1]: _positions_ evenly spaced values if an int, else the given values."""
        if isinstance(positions, int):
            return GeomMath.samples(0.0, 1.0, positions)
        return [float(x) for x in positions]

    @staticmethod
    def modulo_ranges(t1: float, t2: float, low: float = 0.0, high: float = 1.0) -> List[Tuple[float, float]]:
        """Resolve the range (t1, t2) into ascending sub-ranges of [low, high].

        Values outside [low, high] wrap around, e.g. on [0, 1]
            (0.8, 1.2) => [(0.8, 1.0), (0.0, 0.2)]
            (-0.2, 0.3) => [(0.8, 1.0), (0.0, 0.3)]
        Ranges lying completely inside [low, high] are returned unchanged.
        """
        r_min, r_max = (t1, t2) if t1 <= t2 else (t2, t1)
        if low <= r_min and r_max <= high:
            return [(r_min, r_max)]

        size = high - low
        m1 = (r_min - low) % size + low
        m2 = (r_max - low) % size + low
        s1 = math.floor((r_min - low) / size)
        s2 = math.floor((r_max - low) / size)
        if s1 == s2:
            return [(m1, m2)]

        ranges = [(m1, high)]
        ranges.extend((low, high) for _ in range(s2 - s1 - 1))
        if m2 - low > 0.0:
            ranges.append((low, m2))
        return ranges

    @staticmethod
    def polyline_intersections(
        line_a: NDArray[np.float64], line_b: NDArray[np.float64]
    ) -> List[Tuple[int, float, int, float]]:
        """
        Crossings of the polylines _line_a_ and _line_b_ (arrays of shape (n, 2)).

        Every pair of edges is tested at once. A crossing on the shared vertex
        of two consecutive edges is reported only once (by the later edge),
        parallel edges never intersect.

        Returns:
            List[Tuple[int, float, int, float]]: (edge index in a, ratio along that
            edge, edge index in b, ratio along that edge), ratios in [0, 1],
            ordered by the edges of _line_a_.
        """
        a = np.asarray(line_a, dtype=np.float64)[:, :2]
        b = np.asarray(line_b, dtype=np.float64)[:, :2]
        if len(a) < 2 or len(b) < 2:
            return []
        r = a[1:] - a[:-1]
        s = b[1:] - b[:-1]
        qp = b[None, :-1, :] - a[:-1, None, :]
        denom = r[:, None, 0] * s[None, :, 1] - r[:, None, 1] * s[None, :, 0]
        with np.errstate(divide="ignore", invalid="ignore"):
            ratio_a = (qp[..., 0] * s[None, :, 1] - qp[..., 1] * s[None, :, 0]) / denom
            ratio_b = (qp[..., 0] * r[:, None, 1] - qp[..., 1] * r[:, None, 0]) / denom

        last_a = np.zeros(len(r), dtype=bool)
        last_a[-1] = True
        last_b = np.zeros(len(s), dtype=bool)
        last_b[-1] = True
        valid = (
            (denom != 0.0)
            & (ratio_a >= 0.0)
            & ((ratio_a < 1.0) | ((ratio_a == 1.0) & last_a[:, None]))
            & (ratio_b >= 0.0)
            & ((ratio_b < 1.0) | ((ratio_b == 1.0) & last_b[None, :]))
        )
        return [(int(i), float(ratio_a[i, j]), int(j), float(ratio_b[i, j])) for i, j in np.argwhere(valid)]


###############################################################################
# CurveBox
###############################################################################
@dataclass
class CurveBox:
    """
    Represents a rectangular box with coordinates and dimensions.

    Attributes:
        xmin (float): The minimum x-coordinate.
        ymin (float): The minimum y-coordinate.
        xmax (float): The maximum x-coordinate.
        ymax (float): The maximum y-coordinate.
    """

    _xmin: float
    _ymin: float
    _xmax: float
    _ymax: float

    def __init__(self, xmin: float, ymin: float, xmax: float, ymax: float):
        self._xmin = xmin
        self._ymin = ymin
        self._xmax = xmax
        self._ymax = ymax

        # Normalize coordinates to ensure xmin <= xmax and ymin <= ymax
        if self._xmin > self._xmax:
            self._xmin, self._xmax = self._xmax, self._xmin
        if self._ymin > self._ymax:
            self._ymin, self._ymax = self._ymax, self._ymin

    @classmethod
    def from_points(cls, points: Sequence[Point2D]) -> CurveBox:
        """Smallest box enclosing all _points_; an empty list gives the zero box."""
        if not points:
            return cls(0.0, 0.0, 0.0, 0.0)
        xs = [p.x for p in points]
        ys = [p.y for p in points]
        return cls(min(xs), min(ys), max(xs), max(ys))

    @property
    def xmin(self) -> float:
        """float: The minimum x-coordinate."""
        return self._xmin

    @property
    def ymin(self) -> float:
        """float: The minimum y-coordinate."""
        return self._ymin

    @property
    def xmax(self) -> float:
        """float: The maximum x-coordinate."""
        return self._xmax

    @property
    def ymax(self) -> float:
        """float: The maximum y-coordinate."""
        return self._ymax

    @property
    def extent(self) -> Tuple[float, float, float, float]:
        """The extent of the box as Tuple (xmin, ymin, xmax, ymax)."""
        return self._xmin, self._ymin, self._xmax, self._ymax

    @property
    def width(self) -> float:
        """float: The width of the box (difference between xmax and xmin)."""
        return self._xmax - self._xmin

    @property
    def height(self) -> float:
        """float: The height of the box (difference between ymax and ymin)."""
        return self._ymax - self._ymin

    @property
    def area(self) -> float:
        """float: The area of the box."""
        return self.width * self.height

    @property
    def centroid(self) -> Point2D:
        """Point2D: The center of the box."""
        return Point2D((self._xmin + self._xmax) / 2, (self._ymin + self._ymax) / 2)

    @classmethod
    def from_dict(cls, data: dict) -> CurveBox:
        """Create an CurveBox instance from a dictionary."""
        return cls(
            xmin=data.get("xmin", 0.0),
            ymin=data.get("ymin", 0.0),
            xmax=data.get("xmax", 0.0),
            ymax=data.get("ymax", 0.0),
        )

    def to_dict(self) -> dict:
        """Convert the CurveBox instance to a dictionary."""
        return {
            "xmin": self.xmin,
            "ymin": self.ymin,
            "xmax": self.xmax,
            "ymax": self.ymax,
        }

    def __str__(self):
        return (
            f"CurveBox(xmin={self.xmin}, ymin={self.ymin}, "
            f"xmax={self.xmax}, ymax={self.ymax}, "
            f"width={self.width}, height={self.height})"
        )
