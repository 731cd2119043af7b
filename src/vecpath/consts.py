"""Central module containing numerical constants"""

from __future__ import annotations

# Exclusion window around t=0 and t=1 when collecting curve extrema.
# Anchor points are added to bounds explicitly.
TOLERANCE: float = 1.0e-5

# Below this magnitude a value is treated as zero.
EPSILON: float = 1.0e-12

# Number of nodes used for the Gauss-Legendre arc length quadrature.
GAUSS_LEGENDRE_ORDER: int = 16

# Relative overshoot of an arc length offset that still maps to the path end.
LENGTH_TOLERANCE: float = 1.0e-9

# Upper bound of cubic arcs generated for one arc_to call (one per quarter circle).
ARC_MAX_SEGMENTS: int = 4

# Maximum iterations for arc length inversion.
PARAMETER_MAX_ITERATIONS: int = 32

DEFAULT_FIT_TOLERANCE: float = 2.5
DEFAULT_MITER_LIMIT: float = 10.0
DEFAULT_STROKE_WIDTH: float = 1.0

# Number of polyline steps per curve used by the path flattener.
FLATTEN_STEPS: int = 32

# Run the full segment and curve consistency scan after every structural edit.
CHECK_INVARIANTS: bool = False
