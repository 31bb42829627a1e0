"""Test module for curvekit.interpolation.MonotonicInterpolator.

The tests are run using pytest.
"""

import numpy as np
import pytest

from curvekit.errors import CurveInternalError
from curvekit.interpolation import MonotonicInterpolator


class TestMonotonicInterpolator:
    """Lookups in monotonic tables."""

    def test_linear_interpolation(self):
        """Values between keys are interpolated linearly."""
        interp = MonotonicInterpolator([0.0, 1.0, 3.0], [0.0, 10.0, 30.0])
        assert interp.lookup(0.5) == pytest.approx(5.0)
        assert interp(2.0) == pytest.approx(20.0)
        assert interp(1.0) == pytest.approx(10.0)

    def test_exact_ends(self):
        """The table ends are hit exactly."""
        interp = MonotonicInterpolator([0.0, 0.3, 1.0], [0.0, 2.0, 4.0])
        assert interp(0.0) == 0.0
        assert interp(1.0) == 4.0

    def test_clamping(self):
        """Inputs outside the key domain are clamped."""
        interp = MonotonicInterpolator([0.0, 1.0], [2.0, 4.0])
        assert interp(-5.0) == 2.0
        assert interp(7.0) == 4.0

    def test_single_pair(self):
        """A table with one pair returns its value everywhere."""
        interp = MonotonicInterpolator([0.5], [3.0])
        assert interp(0.0) == 3.0
        assert interp(1.0) == 3.0

    def test_equal_keys_return_upper_value(self):
        """A zero-width key interval resolves to its upper value."""
        interp = MonotonicInterpolator([0.0, 0.0], [0.0, 2.0])
        assert interp(0.0) == 2.0
        assert interp(0.5) == 2.0

    def test_lookup_many(self):
        """Vectorized lookups return an array."""
        interp = MonotonicInterpolator([0.0, 2.0], [0.0, 1.0])
        result = interp.lookup_many([0.0, 1.0, 2.0])
        assert isinstance(result, np.ndarray)
        assert np.allclose(result, [0.0, 0.5, 1.0])
        assert len(interp) == 2
        assert list(interp.keys) == [0.0, 2.0]
        assert list(interp.values) == [0.0, 1.0]

    def test_malformed_tables(self):
        """Empty, mismatched and decreasing tables are internal errors."""
        with pytest.raises(CurveInternalError):
            MonotonicInterpolator([], [])
        with pytest.raises(CurveInternalError):
            MonotonicInterpolator([0.0, 1.0], [0.0])
        with pytest.raises(CurveInternalError):
            MonotonicInterpolator([0.0, 2.0, 1.0], [0.0, 1.0, 2.0])

    def test_internal_error_is_runtime_error(self):
        """The error taxonomy stays compatible with RuntimeError."""
        with pytest.raises(RuntimeError):
            MonotonicInterpolator([1.0, 0.0], [0.0, 1.0])

    def test_large_table(self):
        """Bisection converges on long tables."""
        keys = np.linspace(0.0, 1.0, 10001)
        interp = MonotonicInterpolator(keys, keys * 2.0)
        assert interp(0.123456) == pytest.approx(0.246912)
