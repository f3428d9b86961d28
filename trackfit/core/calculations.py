"""
Shared vector calculations.

Small 2D helpers used by the fitting core and the query layer. Positions and
vectors are length-2 numpy arrays; the helpers compute in float64 and leave
any casting back to the caller.
"""

import math
import numpy as np
import logging
from typing import Any


logger = logging.getLogger(__name__)


# =============================================================================
# BASIC GEOMETRIC CALCULATIONS
# =============================================================================

def as_vector(point: Any) -> np.ndarray:
    """Return ``point`` as a float64 length-2 array."""
    return np.asarray(point, dtype=np.float64).reshape(2)


def calculate_distance(u: Any, v: Any) -> float:
    """Euclidean distance between two points."""
    du = as_vector(v) - as_vector(u)
    return math.hypot(du[0], du[1])


def length_squared(v: Any) -> float:
    """Squared length of a vector."""
    w = as_vector(v)
    return float(w[0] * w[0] + w[1] * w[1])


def unit_dot(u: Any, v: Any) -> float:
    """
    Dot product of two vectors after scaling each to unit length.

    Returns NaN if either vector has zero length.
    """
    a = as_vector(u)
    b = as_vector(v)
    denominator = math.sqrt(length_squared(a) * length_squared(b))
    if denominator == 0:
        return math.nan
    return float(np.dot(a, b)) / denominator


def project_onto(delta: Any, direction: Any) -> np.ndarray:
    """
    Project ``delta`` onto ``direction``.

    Returns a vector parallel to ``direction`` (NaN if ``direction`` is zero).
    """
    d = as_vector(delta)
    t = as_vector(direction)
    norm2 = length_squared(t)
    if norm2 == 0:
        return np.array([math.nan, math.nan])
    return t * (float(np.dot(d, t)) / norm2)


def signed_angle_between(u: Any, v: Any) -> float:
    """Signed angle in (-pi, pi] rotating ``u`` onto ``v`` counter-clockwise."""
    a = as_vector(u)
    b = as_vector(v)
    cross = a[0] * b[1] - a[1] * b[0]
    dot = a[0] * b[0] + a[1] * b[1]
    return math.atan2(cross, dot)
