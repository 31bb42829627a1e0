"""Samplers: callables evaluating curves at positions in [0, 1], chained into pipelines."""

from __future__ import annotations

from enum import Enum, auto
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

from curvekit.common import ParameterType
from curvekit.errors import CurveConstructionError
from curvekit.geom import GeomMath
from curvekit.multicurve import MultiCurve

Positions = Union[int, Sequence[float]]


class SamplerKind(Enum):
    """Enum to define what a CurveSampler returns for a position."""

    POINT = auto()
    TANGENT = auto()
    ACCELERATION = auto()
    CUSTOM = auto()


class CurveSampler:
    """Evaluates a MultiCurve at positions x in [0, 1].

    In LENGTH mode x is the normalized arc length, in PARAMETER mode it is
    scaled to the raw parameter domain [0, N].
    """

    def __init__(
        self,
        curve: MultiCurve,
        kind: SamplerKind = SamplerKind.POINT,
        func: Optional[Callable[[MultiCurve, float], Any]] = None,
        mode: ParameterType = ParameterType.LENGTH,
    ):
        """
        Args:
            curve: The curve to sample.
            kind: What to return per position.
            func: Evaluation func(curve, x) of a SamplerKind.CUSTOM sampler.
            mode: How positions are mapped onto the curve.

        Raises:
            CurveConstructionError: If a CUSTOM sampler has no _func_.
        """
        if kind is SamplerKind.CUSTOM and func is None:
            raise CurveConstructionError("A custom sampler needs an evaluation function")
        self._curve = curve
        self._kind = kind
        self._func = func
        self._mode = ParameterType.check(mode)

    @property
    def curve(self) -> MultiCurve:
        """MultiCurve: The sampled curve."""
        return self._curve

    @property
    def kind(self) -> SamplerKind:
        """SamplerKind: What the sampler returns."""
        return self._kind

    def sample(self, x: float) -> Any:
        """Value at position _x_."""
        if self._kind is SamplerKind.CUSTOM:
            return self._func(self._curve, x)
        t = x * self._curve.segment_count if self._mode is ParameterType.PARAMETER else x
        if self._kind is SamplerKind.TANGENT:
            return self._curve.tangent_at(t, self._mode)
        if self._kind is SamplerKind.ACCELERATION:
            return self._curve.acceleration_at(t, self._mode)
        return self._curve.point_at(t, self._mode)

    __call__ = sample

    def samples(self, positions: Positions) -> List[Any]:
        """Values at _positions_ evenly spaced positions (int) or at the given positions."""
        return [self.sample(x) for x in GeomMath.sample_positions(positions)]


class Pipeline:
    """A source sampler followed by transforms, each applied to the previous result.

    Pipelines are immutable: then() returns a new pipeline and leaves this
    one untouched, so partial pipelines can be shared.
    """

    def __init__(self, source: Callable[[float], Any], transforms: Sequence[Callable[[Any], Any]] = ()):
        self._source = source
        self._transforms: Tuple[Callable[[Any], Any], ...] = tuple(transforms)

    def then(self, transform: Callable[[Any], Any]) -> Pipeline:
        """New pipeline applying _transform_ to the result of this one."""
        return Pipeline(self._source, self._transforms + (transform,))

    def sample(self, x: float) -> Any:
        """Source value at _x_ passed through all transforms in insertion order."""
        value = self._source(x)
        for transform in self._transforms:
            value = transform(value)
        return value

    __call__ = sample

    def samples(self, positions: Positions) -> List[Any]:
        """Values at _positions_ evenly spaced positions (int) or at the given positions."""
        return [self.sample(x) for x in GeomMath.sample_positions(positions)]

    def __len__(self) -> int:
        return len(self._transforms)
