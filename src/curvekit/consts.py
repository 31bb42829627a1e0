"""Central module containing numeric tolerances and defaults of the curve engine."""

from __future__ import annotations

###############################################################################
# Flattening / arc length
###############################################################################

# Max sum of |tangent x chord| at both ends of a flattening interval
FLATTEN_MAX_ERROR: float = 0.01
# Intervals narrower than this (in raw parameter units) are never bisected
FLATTEN_MIN_WIDTH: float = 0.01
# Number of root samples per continuity side
FLATTEN_ROOT_SAMPLES: int = 5

###############################################################################
# Equality tolerances
###############################################################################

ZERO_EPSILON: float = 1.0e-10
POINT_EPSILON: float = 1.0e-9
# Normalized tangents closer than this (after negating the incoming one) are smooth
SMOOTH_TOLERANCE: float = 0.01
# Path export: start a new subpath when pieces are further apart than this
PATH_MOVE_EPSILON: float = 1.0e-7

###############################################################################
# Interpolation
###############################################################################

INTERPOLATION_MAX_ITERATIONS: int = 1000

###############################################################################
# Fitting
###############################################################################

FIT_DEFAULT_MAX_ERROR: float = 0.01
FIT_DEFAULT_MAX_ITERATIONS: int = 100
ADAPTIVE_FIT_DEFAULT_MAX_ERROR: float = 0.0001
ADAPTIVE_FIT_DEFAULT_MAX_ITERATIONS: int = 10
FIT_STAGNATION: float = 1.0e-5
# A cubic fit needs at least 4 points per half, so smaller lists are never split
FIT_MIN_SPLIT_POINTS: int = 8
# Probe distance of the secant re-parameterization step
FIT_PROBE_STEP: float = 0.01

###############################################################################
# Shapes
###############################################################################

# see http://www.whizkidtech.redprince.net/bezier/circle/
CIRCLE_KAPPA: float = 0.5522847498

###############################################################################
# Intersections
###############################################################################

# Number of polyline samples per curve when intersecting two curves
INTERSECTION_SAMPLES: int = 100
