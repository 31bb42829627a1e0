"""Export of piecewise cubic curves as SVG path descriptions"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, List, Optional, Tuple

import svgwrite.path

from curvekit.common import CurvePathCmds
from curvekit.consts import PATH_MOVE_EPSILON
from curvekit.geom import Point2D

if TYPE_CHECKING:
    from curvekit.multicurve import MultiCurve


class CurveSvgPath:
    """
    This class provides a collection of static methods to turn a MultiCurve
    into an SVG path description.
    Emitted commands (command : number of values : command-character):
        MoveTo:           2: M
        CubicBezier:      6: C
        ClosePath:        0: z
    """

    @staticmethod
    def path_commands(curve: MultiCurve) -> List[Tuple[CurvePathCmds, Tuple[Point2D, ...]]]:
        """
        Commands describing _curve_: a "M" whenever a segment does not start
        at the end of its predecessor (and for the first one), a "C" per
        segment and a final "Z" if the curve is closed.

        Returns:
            List[Tuple[CurvePathCmds, Tuple[Point2D, ...]]]: (command, points) pairs.
        """
        commands: List[Tuple[CurvePathCmds, Tuple[Point2D, ...]]] = []
        previous_end: Optional[Point2D] = None
        for segment in curve.segments:
            p0, c0, c1, p1 = segment.raw_points
            if previous_end is None or not p0.is_close(previous_end, PATH_MOVE_EPSILON):
                commands.append(("M", (p0,)))
            commands.append(("C", (c0, c1, p1)))
            previous_end = p1
        if curve.is_closed:
            commands.append(("Z", ()))
        return commands

    @staticmethod
    def path_string(curve: MultiCurve, round_func: Optional[Callable] = None) -> str:
        """
        SVG path description of _curve_, e.g. "M 0.0,1.0 C 1.0,1.0 0.0,0.0 1.0,0.0".

        Args:
            curve (MultiCurve): the curve to export
            round_func (Optional[Callable], optional):
                a function that takes a float and returns a float. Defaults to None,
                in which case coordinates are written with full precision.

        Returns:
            str: the path description
        """

        def fmt(value: float) -> str:
            if round_func:
                return f"{round_func(float(value)):g}"
            return repr(float(value))

        parts = []
        for command, points in CurveSvgPath.path_commands(curve):
            if command == "Z":
                parts.append("z")
            else:
                coords = " ".join(f"{fmt(p.x)},{fmt(p.y)}" for p in points)
                parts.append(f"{command} {coords}")
        return " ".join(parts)

    @staticmethod
    def path_element(curve: MultiCurve, round_func: Optional[Callable] = None) -> str:
        """Standalone SVG element <path d="..."/> of _curve_."""
        return f'<path d="{CurveSvgPath.path_string(curve, round_func)}"/>'

    @staticmethod
    def svgwrite_path(curve: MultiCurve, round_func: Optional[Callable] = None, **attribs) -> svgwrite.path.Path:
        """
        Path element of _curve_ for drawings assembled with svgwrite.

        Args:
            curve (MultiCurve): the curve to export
            round_func (Optional[Callable], optional): see path_string(). Defaults to None.
            **attribs: further SVG attributes like stroke or fill.

        Returns:
            svgwrite.path.Path: the element, ready to be added to a drawing
        """
        return svgwrite.path.Path(d=CurveSvgPath.path_string(curve, round_func), **attribs)

