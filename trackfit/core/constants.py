"""
Constants for the trackfit package.

This module contains the numerical and algorithmic constants used by the
fitting core. Constants are grouped by their purpose and documented with
their units where applicable (positions are in tracker pixels).
"""

# =============================================================================
# MINIMUM POINT COUNTS
# =============================================================================

# Below these counts a primitive's parameters are undefined (NaN)
MIN_SPOT_POINTS = 1
MIN_LINE_POINTS = 2
MIN_ARC_POINTS = 3

# Chi-square degrees of freedom consumed by each primitive's parameters
SPOT_FIT_DOF = 1
LINE_FIT_DOF = 2
ARC_FIT_DOF = 3

# Arc fit quality is not meaningful with fewer points than this
MIN_ARC_POINTS_FOR_PFIT = 4

# =============================================================================
# NUMERICAL TOLERANCES
# =============================================================================

# Eigenvalues of the circle fit with a larger imaginary part are rejected
EIGEN_IMAGINARY_TOLERANCE = 1e-9

# Constraint norm below which an eigenvector is treated as non-positive
HYPER_CONSTRAINT_EPSILON = 1e-12

# =============================================================================
# SERVICE DEFAULTS
# =============================================================================

DEFAULT_ROLLING_WINDOW = 5  # Points per rolling window
DEFAULT_MAX_WORKERS = 4  # Threads for multi-track fitting
DEFAULT_P_NOT_ROUND = 0.05  # Significance for the roundness F-test

# =============================================================================
# VALIDATION
# =============================================================================

assert MIN_SPOT_POINTS <= MIN_LINE_POINTS <= MIN_ARC_POINTS, \
    "Primitive point minimums must be ordered spot <= line <= arc"
