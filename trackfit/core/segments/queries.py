"""
Geometric queries on fitted segments.

Direction vectors, distances along the path, projection onto the fitted
curve and alignment between neighbouring segments. Everything here is derived
from a segment's current fit parameters, so callers should ``refit`` after
moving a window and before asking.
"""

import math
import numpy as np
import logging
from enum import Enum
from typing import Any, Optional

from trackfit.core.calculations import as_vector, calculate_distance, unit_dot, project_onto
from trackfit.core.models.kinds import MotionKind
from trackfit.core.validation import NoFitForKindError, ValidationError

logger = logging.getLogger(__name__)


class Which(Enum):
    """End of a segment a direction is requested for."""
    INITIAL = 'initial'
    FINAL = 'final'
    NTH = 'nth'


def _require_fit(segment, operation: str):
    if segment.fit is None:
        raise NoFitForKindError(segment.kind, operation)
    return segment.fit


def delta_vector(segment, u: Any, v: Any) -> np.ndarray:
    """
    Displacement from ``u`` to ``v`` projected on the segment's direction of travel.

    Straight segments project onto the line's tangent ``(-a, b)``; arcs
    project onto the tangent at the chord midpoint. Dwell segments return
    the raw displacement. The result is not normalized.

    Raises:
        NoFitForKindError: If the segment kind carries no fit
    """
    fit = _require_fit(segment, 'direction query')

    u = as_vector(u)
    v = as_vector(v)
    delta = v - u

    if segment.kind is MotionKind.STRAIGHT:
        p = fit.params
        length = (p.b * delta[1] - p.a * delta[0]) / fit.variance_angle_bias()
        return np.array([-p.a * length, p.b * length])

    if segment.kind is MotionKind.ARC:
        p = fit.params
        tangent = (2.0 * p.y0 - (u[1] + v[1]), u[0] + v[0] - 2.0 * p.x0)
        return project_onto(delta, tangent)

    return delta


def _interval_points(segment, which: Which, n: Optional[int]):
    points = segment.points
    endpoints = segment.endpoints
    if which is Which.NTH:
        if endpoints is None or n is None or not 0 <= n < len(endpoints) - 1:
            raise ValidationError(f"No direction interval {n} on segment [{segment.lo}, {segment.hi}]")
        return points.get(endpoints[n]), points.get(endpoints[n + 1])
    if which is Which.INITIAL:
        if endpoints is None or len(endpoints) == 0:
            return points.get(segment.lo), points.get(segment.hi)
        return points.get(endpoints[0]), points.get(endpoints[1])
    if endpoints is None or len(endpoints) < 2:
        return points.get(segment.lo), points.get(segment.hi)
    return points.get(endpoints[-2]), points.get(endpoints[-1])


def direction_vector(segment, which=Which.INITIAL, n: Optional[int] = None) -> np.ndarray:
    """
    Direction of travel at one end of a segment, or along endpoint interval ``n``.

    Args:
        segment: Segment with a fit
        which: ``Which.INITIAL``, ``Which.FINAL`` or ``Which.NTH`` (or their names)
        n: Interval index for ``Which.NTH``

    Returns:
        Vector whose length follows the separation of the raw points
    """
    if not isinstance(which, Which):
        which = Which(str(which).lower())
    u, v = _interval_points(segment, which, n)
    return delta_vector(segment, u, v)


def initial_vector(segment) -> np.ndarray:
    return direction_vector(segment, Which.INITIAL)


def final_vector(segment) -> np.ndarray:
    return direction_vector(segment, Which.FINAL)


def distance_traversed(segment, interval: Optional[int] = None) -> float:
    """
    Distance travelled over one interval, or over the whole segment.

    Arcs report arclength ``|R * angle|``; every other kind reports the
    straight-line distance between the interval's ends. Intervals out of
    range give 0.0.

    Raises:
        NoFitForKindError: If an arc segment holds children instead of a fit
    """
    if interval is None:
        if segment.endpoints is None:
            return distance_traversed(segment, 0)
        return float(sum(distance_traversed(segment, k) for k in range(len(segment.endpoints) - 1)))

    endpoints = segment.endpoints
    if endpoints is None:
        if interval != 0 or segment.is_empty:
            return 0.0
        j0, j1 = segment.lo, segment.hi
    else:
        if interval < 0 or interval >= len(endpoints) - 1:
            return 0.0
        j0, j1 = endpoints[interval], endpoints[interval + 1]

    first = segment.points.get(j0)
    last = segment.points.get(j1)
    if segment.kind is not MotionKind.ARC:
        return calculate_distance(first, last)
    fit = _require_fit(segment, 'arc distance')
    return abs(fit.params.R * fit.arc_delta_coordinate(first, last))


def snap_to_line(segment, point: Any) -> np.ndarray:
    """
    Move ``point`` onto the segment's idealized curve.

    Arcs pull the point radially onto the circle. Straight segments only
    correct points on the positive side of the line (``a*y + b*x + c > 0``);
    points on the other side come back unchanged. Other kinds return the
    point unchanged.

    The result has the same floating dtype as ``point`` (float64 for
    non-floating input); the arithmetic itself is carried out in float64.

    Raises:
        NoFitForKindError: If a straight or arc segment has no fit of its own
    """
    given = np.asarray(point)
    dtype = given.dtype if given.dtype.kind == 'f' else np.dtype(np.float64)
    stray = as_vector(given)

    if segment.kind is MotionKind.ARC:
        p = _require_fit(segment, 'snap_to_line').params
        offset = stray - np.array([p.x0, p.y0])
        radius = math.hypot(offset[0], offset[1])
        if radius > 0:
            stray = np.array([p.x0, p.y0]) + offset * (p.R / radius)
    elif segment.kind is MotionKind.STRAIGHT:
        p = _require_fit(segment, 'snap_to_line').params
        off = p.a * stray[1] + p.b * stray[0] + p.c
        if off > 0:
            shift = -off / (p.a * p.a + p.b * p.b)
            stray = stray + shift * np.array([p.b, p.a])

    return stray.astype(dtype)


def parameterize(segment, point: Any) -> float:
    """Scalar position of ``point`` along the segment's curve (0.0 for kinds without one)."""
    if segment.kind is MotionKind.ARC:
        return _require_fit(segment, 'parameterize').arc_coordinate(point)
    if segment.kind is MotionKind.STRAIGHT:
        return _require_fit(segment, 'parameterize').parallel_coordinate(point)
    return 0.0


def dot_with(segment, other) -> float:
    """
    Alignment of two neighbouring segments.

    Compares this segment's direction at the end facing ``other`` with
    ``other``'s direction at the end facing this one, as a unit dot product
    (1 = continuing straight on, -1 = reversing). NaN if either direction
    has zero length.
    """
    if other.lo < segment.lo:
        theirs = final_vector(other)
        mine = initial_vector(segment)
    else:
        theirs = initial_vector(other)
        mine = final_vector(segment)
    return unit_dot(mine, theirs)
