"""Central module containing types and enums shared by the curve modules."""

from __future__ import annotations

from enum import Enum, auto
from typing import Literal, Union

from curvekit.errors import CurveConstructionError, CurveDomainError

###############################################################################
# Types
###############################################################################


CurvePathCmds = Literal[  # Type-Definition for path commands emitted for a MultiCurve
    # MoveTo (2) - start a new subpath at (x,y)
    "M",
    # Cubic Bezier To (6) - cubic Bezier curve with two control points and an endpoint (x,y)
    "C",
    # ClosePath (0) - the curve ends where it started
    "Z",
]


###############################################################################
# Enums
###############################################################################


class ParameterType(Enum):
    """Enum to define how a curve position is given.

    PARAMETER: raw parameter in [0, N] where N is the number of segments.
    LENGTH: normalized arc length in [0, 1].
    """

    PARAMETER = auto()
    LENGTH = auto()

    @classmethod
    def check(cls, mode: ParameterType) -> ParameterType:
        """Return _mode_ if it is a ParameterType, raise CurveDomainError otherwise."""
        if not isinstance(mode, cls):
            raise CurveDomainError(f"Invalid parameter type {mode!r}")
        return mode


class Side(Enum):
    """Enum to define which segment owns a parameter on a segment boundary.

    LEFT: the segment ending at the boundary (index i-1, t=1).
    RIGHT: the segment starting at the boundary (index i, t=0).
    """

    LEFT = auto()
    RIGHT = auto()


class SegmentForm(Enum):
    """Enum to define the encoding of the four values describing a segment.

    RAW: (anchor p0, control c0, control c1, anchor p1)
    TANGENT: (anchor p0, offset t0, anchor p1, offset t1) with c0 = p0 + t0, c1 = p1 + t1
    """

    RAW = auto()
    TANGENT = auto()

    @classmethod
    def parse(cls, form: Union[SegmentForm, str]) -> SegmentForm:
        """Convert _form_ given as enum member or name ("raw", "tangent", "vector").

        Raises:
            CurveConstructionError: If _form_ is not a known segment form.
        """
        if isinstance(form, cls):
            return form
        if isinstance(form, str):
            name = form.strip().lower()
            if name == "raw":
                return cls.RAW
            if name in ("tangent", "vector"):
                return cls.TANGENT
        raise CurveConstructionError(f"Segment form {form!r} is not 'raw' or 'tangent'")
