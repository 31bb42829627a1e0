"""Linear interpolation over monotonic lookup tables."""

from __future__ import annotations

from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from curvekit.consts import INTERPOLATION_MAX_ITERATIONS
from curvekit.errors import CurveInternalError


class MonotonicInterpolator:
    """Piecewise linear map defined by (key, value) pairs with non-decreasing keys.

    Lookups clamp the input to the key domain, bracket it by binary search and
    interpolate linearly between the values of the bracketing pair.
    """

    def __init__(self, keys: Sequence[float], values: Sequence[float]):
        """
        Args:
            keys: Non-decreasing sequence of keys.
            values: Values, one per key.

        Raises:
            CurveInternalError: If the table is empty, the lengths differ or the keys decrease.
        """
        if len(keys) != len(values):
            raise CurveInternalError(f"Lookup table has {len(keys)} keys but {len(values)} values")
        if len(keys) == 0:
            raise CurveInternalError("Lookup table is empty")
        self._keys = [float(k) for k in keys]
        self._values = [float(v) for v in values]
        for i in range(1, len(self._keys)):
            if self._keys[i] < self._keys[i - 1]:
                raise CurveInternalError(
                    f"Lookup table keys decrease at index {i}: {self._keys[i - 1]} > {self._keys[i]}"
                )

    @property
    def keys(self) -> Sequence[float]:
        """The keys of the table."""
        return self._keys

    @property
    def values(self) -> Sequence[float]:
        """The values of the table."""
        return self._values

    def lookup(self, x: float) -> float:
        """Interpolated value at _x_ (clamped to the key domain).

        Raises:
            CurveInternalError: If the bisection does not converge, which only
                happens for a malformed table.
        """
        keys = self._keys
        values = self._values
        if len(keys) == 1:
            return values[0]

        low = 0
        high = len(keys) - 1
        if x < keys[low]:
            x = keys[low]
        elif x > keys[high]:
            x = keys[high]

        niter = 0
        while high - low > 1:
            if niter >= INTERPOLATION_MAX_ITERATIONS:
                raise CurveInternalError(f"Interpolation of {x} did not converge within {niter} iterations")
            niter += 1
            if x == keys[low]:
                return values[low]
            if x == keys[high]:
                return values[high]
            mid = (low + high) // 2
            if x <= keys[mid]:
                high = mid
            else:
                low = mid

        key0, key1 = keys[low], keys[high]
        if key1 - key0 == 0.0:
            return values[high]
        return values[low] + (values[high] - values[low]) * ((x - key0) / (key1 - key0))

    __call__ = lookup

    def lookup_many(self, xs: Sequence[float]) -> NDArray[np.float64]:
        """Vector of lookups, one per entry of _xs_."""
        return np.array([self.lookup(x) for x in xs], dtype=np.float64)

    def __len__(self) -> int:
        return len(self._keys)
