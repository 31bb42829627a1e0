"""Test module for curvekit.svgpath.CurveSvgPath.

The tests are run using pytest.
"""

import svgwrite.path

from curvekit.geom import Point2D
from curvekit.multicurve import MultiCurve
from curvekit.svgpath import CurveSvgPath


def sample_curve():
    """Single segment (0,1) (1,1) (0,0) (1,0) in raw form."""
    return MultiCurve.raw((0.0, 1.0), (1.0, 1.0), (0.0, 0.0), (1.0, 0.0))


def test_path_commands():
    """One move, one cubic per segment."""
    commands = CurveSvgPath.path_commands(sample_curve())
    assert [cmd for cmd, _ in commands] == ["M", "C"]
    assert commands[0][1] == (Point2D(0.0, 1.0),)
    assert commands[1][1] == (Point2D(1.0, 1.0), Point2D(0.0, 0.0), Point2D(1.0, 0.0))


def test_closed_curve_ends_with_z():
    """Closed curves get a close-path command."""
    curve = sample_curve() + sample_curve().reverse()
    commands = CurveSvgPath.path_commands(curve)
    assert [cmd for cmd, _ in commands] == ["M", "C", "C", "Z"]
    assert CurveSvgPath.path_string(curve).endswith(" z")


def test_nearly_joined_segments_share_subpath():
    """Gaps below the move tolerance do not start a new subpath."""
    curve = MultiCurve.line((0.0, 0.0), (1.0, 0.0)) + MultiCurve.line((1.0 + 1e-9, 0.0), (2.0, 0.0))
    assert [cmd for cmd, _ in CurveSvgPath.path_commands(curve)] == ["M", "C", "C"]


def test_path_element():
    """The element wraps the path description."""
    element = CurveSvgPath.path_element(sample_curve())
    assert element == '<path d="M 0.0,1.0 C 1.0,1.0 0.0,0.0 1.0,0.0"/>'


def test_svgwrite_path():
    """svgwrite elements carry the description and further attributes."""
    path = CurveSvgPath.svgwrite_path(sample_curve(), round_func=round, stroke="black", fill="none")
    assert isinstance(path, svgwrite.path.Path)
    xml = path.tostring()
    assert 'd="M 0,1 C 1,1 0,0 1,0"' in xml
    assert 'stroke="black"' in xml
