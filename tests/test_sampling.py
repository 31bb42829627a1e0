"""Test module for curvekit.sampling: samplers and pipelines.

The tests are run using pytest.
"""

import pytest

from curvekit.common import ParameterType
from curvekit.errors import CurveConstructionError, CurveDomainError
from curvekit.geom import Point2D
from curvekit.multicurve import MultiCurve
from curvekit.sampling import CurveSampler, Pipeline, SamplerKind


@pytest.fixture
def bent_line():
    """Two straight segments of lengths 1 and 3: (0,0) -> (1,0) -> (1,3)."""
    return MultiCurve.line((0.0, 0.0), (1.0, 0.0)) + MultiCurve.line((1.0, 0.0), (1.0, 3.0))


class TestCurveSampler:
    """Evaluation of curves at positions in [0, 1]."""

    def test_point_sampler_uses_arc_length(self, bent_line):
        """Length mode positions are fractions of the total length."""
        sampler = CurveSampler(bent_line)
        assert sampler.kind is SamplerKind.POINT
        assert sampler.curve is bent_line
        assert sampler(0.25).is_close(Point2D(1.0, 0.0), 1e-9)
        assert sampler.sample(0.5).is_close(Point2D(1.0, 1.0), 1e-9)

    def test_parameter_mode(self, bent_line):
        """Parameter mode positions are scaled to the raw domain."""
        sampler = CurveSampler(bent_line, mode=ParameterType.PARAMETER)
        assert sampler(0.25).is_close(Point2D(0.5, 0.0))
        assert sampler(0.75).is_close(Point2D(1.0, 1.5))

    def test_tangent_and_acceleration(self, bent_line):
        """Tangent and acceleration samplers."""
        tangent = CurveSampler(bent_line, SamplerKind.TANGENT)
        assert tangent(0.1).is_close(Point2D(1.0 / 3.0, 0.0))
        assert tangent(0.9).is_close(Point2D(0.0, 1.0))
        acceleration = CurveSampler(bent_line, SamplerKind.ACCELERATION)
        assert acceleration(0.5).is_close(Point2D(0.0, 0.0))

    def test_custom_sampler(self, bent_line):
        """Custom samplers call their function with curve and position."""
        sampler = CurveSampler(bent_line, SamplerKind.CUSTOM, func=lambda curve, x: curve.length() * x)
        assert sampler(0.5) == pytest.approx(2.0)
        with pytest.raises(CurveConstructionError):
            CurveSampler(bent_line, SamplerKind.CUSTOM)

    def test_samples(self, bent_line):
        """Evenly spaced positions or explicit ones."""
        sampler = CurveSampler(bent_line)
        points = sampler.samples(5)
        assert len(points) == 5
        assert points[0].is_close(Point2D(0.0, 0.0))
        assert points[-1].is_close(Point2D(1.0, 3.0))
        assert sampler.samples([0.25])[0].is_close(Point2D(1.0, 0.0), 1e-9)
        with pytest.raises(CurveDomainError):
            sampler.samples(0)

    def test_invalid_mode(self, bent_line):
        """Modes must be ParameterType members."""
        with pytest.raises(CurveDomainError):
            CurveSampler(bent_line, mode="length")


class TestPipeline:
    """Chained transforms of sampled values."""

    def test_transforms_in_insertion_order(self, bent_line):
        """Each transform receives the result of the previous one."""
        pipeline = Pipeline(CurveSampler(bent_line)).then(lambda p: p * 2.0).then(lambda p: p + Point2D(1.0, 0.0))
        assert pipeline(0.25).is_close(Point2D(3.0, 0.0), 1e-9)
        assert len(pipeline) == 2

    def test_then_returns_new_pipeline(self, bent_line):
        """then() leaves the original pipeline unchanged."""
        base = Pipeline(CurveSampler(bent_line))
        scaled = base.then(lambda p: p * 10.0)
        assert base(1.0).is_close(Point2D(1.0, 3.0))
        assert scaled(1.0).is_close(Point2D(10.0, 30.0))
        assert len(base) == 0

    def test_samples(self):
        """Pipelines sample like samplers."""
        pipeline = Pipeline(lambda x: x * 4.0).then(int)
        assert pipeline.samples(5) == [0, 1, 2, 3, 4]
        assert pipeline.samples([0.6]) == [2]
