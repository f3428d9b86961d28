"""
Segment model and window maintenance.

A segment is a contiguous run of time indices ``[lo, hi]`` into a point
sequence, classified as one motion kind and backed by the fit for that kind.
The window grows and shrinks one index at a time from either end; every step
updates the fit's running sums, and gaps in the track are skipped over.
"""

import logging
import numpy as np
from typing import Iterator, List, Optional

from trackfit.core.fitting import FitAccumulator, FitFactory
from trackfit.core.models.kinds import MotionKind, ZERO_KIND
from trackfit.core.points import PointSequence
from trackfit.core.validation import (
    ValidationError, SegmentError, InvalidPointError, NoFitForKindError,
    validate_span, validate_endpoints
)

logger = logging.getLogger(__name__)


class Segment:
    """
    One classified stretch of a track.

    ``kind`` and ``fit`` always agree: the fit is created from the kind by
    ``FitFactory`` and the two can only be replaced together (``mimic``,
    ``reclassify``). A segment that has adopted children keeps no fit of its
    own; the children hold the authoritative fits.
    """

    def __init__(self, points: PointSequence, kind: MotionKind, lo: int, hi: int,
                 fit: Optional[FitAccumulator] = None,
                 endpoints: Optional[List[int]] = None,
                 children: Optional[List[int]] = None):
        kind = MotionKind.from_name(kind)
        expected = FitFactory.fit_class_for(kind)
        if children is not None:
            if fit is not None:
                raise ValidationError("A segment with children cannot carry its own fit")
        elif expected is None and fit is not None:
            raise ValidationError(f"{kind.name} segments carry no fit, got {type(fit).__name__}")
        elif expected is not None and type(fit) is not expected:
            raise ValidationError(f"{kind.name} segments need a {expected.__name__}, got {type(fit).__name__}")

        self.points = points
        self._kind = kind
        self._fit = fit
        self.lo = lo
        self.hi = hi
        self._endpoints = None
        self.children = list(children) if children is not None else None
        self.endpoints = endpoints

    # =========================================================================
    # CONSTRUCTION
    # =========================================================================

    @classmethod
    def over(cls, points: PointSequence, kind: MotionKind, lo: int, hi: Optional[int] = None) -> 'Segment':
        """
        Create a segment over ``[lo, hi]`` (a single index if ``hi`` is None).

        The ends are trimmed inward to present indices and every present
        point in between is added to the fit, which is then recomputed.
        """
        if hi is None:
            hi = lo
        validate_span(lo, hi, len(points))
        kind = MotionKind.from_name(kind)
        first, last = points.trim_to_present(lo, hi)
        if first > last:
            logger.warning(f"No tracked positions in [{lo}, {hi}], creating an empty {kind.name} segment")
            return cls.empty(points, kind, lo)

        segment = cls(points, kind, first, last, FitFactory.create_fit(kind))
        if segment._fit is not None:
            for i in range(first, last + 1):
                point = points.get(i)
                if point is not None:
                    segment._fit.add(point)
            segment.refit()
        return segment

    @classmethod
    def empty(cls, points: PointSequence, kind: MotionKind, i: int) -> 'Segment':
        """Create a segment with an empty window positioned at ``i`` (``hi = i - 1``)."""
        kind = MotionKind.from_name(kind)
        return cls(points, kind, i, i - 1, FitFactory.create_fit(kind))

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def kind(self) -> MotionKind:
        return self._kind

    @property
    def fit(self) -> Optional[FitAccumulator]:
        return self._fit

    @property
    def endpoints(self) -> Optional[List[int]]:
        """Indices marking direction changes inside a line-like segment."""
        return self._endpoints

    @endpoints.setter
    def endpoints(self, values: Optional[List[int]]) -> None:
        if values is not None and not self.is_line:
            raise ValidationError(f"Only line-like segments carry endpoints, not {self._kind.name}")
        self._endpoints = validate_endpoints(values, self.lo, self.hi, self.points)

    @property
    def size(self) -> int:
        return 1 + self.hi - self.lo

    def __len__(self) -> int:
        return max(self.size, 0)

    @property
    def is_empty(self) -> bool:
        return self.hi < self.lo

    @property
    def is_line(self) -> bool:
        return self._kind.is_line

    @property
    def has_children(self) -> bool:
        return self.children is not None

    @property
    def id(self) -> int:
        """Kind ordinal relative to DWELL."""
        return self._kind.value - ZERO_KIND.value

    def has_direction(self) -> bool:
        return self.is_line and (self._endpoints is None or len(self._endpoints) > 1)

    def has_several_directions(self) -> bool:
        return self.is_line and self._endpoints is not None and len(self._endpoints) > 2

    def directions(self) -> int:
        """Number of direction intervals the segment reports."""
        if not self.is_line:
            return 0
        if self._endpoints is None:
            return 1
        return max(len(self._endpoints) - 1, 0)

    def indices(self) -> Iterator[int]:
        """Present indices inside the window."""
        for i in range(max(self.lo, 0), self.hi + 1):
            if self.points.is_present(i):
                yield i

    def window_points(self) -> np.ndarray:
        """(k, 2) array of the present positions inside the window."""
        idx = list(self.indices())
        return self.points.values[idx] if idx else np.empty((0, 2), dtype=self.points.dtype)

    def _require_fit(self, operation: str) -> FitAccumulator:
        if self._fit is None:
            raise NoFitForKindError(self._kind, operation)
        return self._fit

    def _point(self, i: int) -> np.ndarray:
        point = self.points.get(i)
        if point is None:
            raise InvalidPointError(i)
        return point

    # =========================================================================
    # WINDOW OPERATIONS
    # =========================================================================

    def add_right(self, i: int) -> int:
        """
        Add index ``i`` at the right end of the window.

        Returns:
            The next index that can be added on the right: the first present
            index after ``i``, or ``len(points)`` if there is none.
        """
        fit = self._require_fit('add_right')
        fit.add(self._point(i))
        if self.is_empty:
            self.lo = i
        self.hi = i
        return self.points.next_present(i + 1)

    def add_left(self, i: int) -> int:
        """
        Add index ``i`` at the left end of the window.

        Returns:
            The next index that can be added on the left: the last present
            index before ``i``, or -1 if there is none.
        """
        fit = self._require_fit('add_left')
        fit.add(self._point(i))
        if self.is_empty:
            self.hi = i
        self.lo = i
        return self.points.previous_present(i - 1)

    def sub_right(self) -> None:
        """
        Remove the rightmost point, moving ``hi`` back past any gaps.

        Endpoints are not clipped; callers reset them after shrinking past one.
        """
        fit = self._require_fit('sub_right')
        if self.is_empty:
            raise SegmentError("Cannot shrink an empty window")
        fit.remove(self._point(self.hi))
        self.hi -= 1
        while self.hi >= self.lo and not self.points.is_present(self.hi):
            self.hi -= 1

    def sub_left(self) -> None:
        """
        Remove the leftmost point, moving ``lo`` forward past any gaps.

        Endpoints are not clipped; callers reset them after shrinking past one.
        """
        fit = self._require_fit('sub_left')
        if self.is_empty:
            raise SegmentError("Cannot shrink an empty window")
        fit.remove(self._point(self.lo))
        self.lo += 1
        while self.lo <= self.hi and not self.points.is_present(self.lo):
            self.lo += 1

    def shift_right(self, i: int) -> int:
        """Slide the window one step right: drop the left end, add ``i``."""
        self.sub_left()
        return self.add_right(i)

    def shift_left(self, i: int) -> int:
        """Slide the window one step left: drop the right end, add ``i``."""
        self.sub_right()
        return self.add_left(i)

    def refit(self):
        """Recompute the fit parameters; returns them (None for kinds without a fit)."""
        if self._fit is None:
            return None
        return self._fit.recompute()

    def squared_error(self, point) -> float:
        return self._require_fit('squared_error').squared_error(point)

    # =========================================================================
    # KIND CHANGES
    # =========================================================================

    def mimic(self, other: 'Segment') -> None:
        """
        Replace this segment's state with a copy of ``other``'s.

        The fit is copied, never shared, so later window moves on either
        segment leave the other untouched.
        """
        if other.points is not self.points:
            raise ValidationError("Cannot mimic a segment of a different track")
        self._kind = other._kind
        self._fit = other._fit.copy() if other._fit is not None else None
        self.lo = other.lo
        self.hi = other.hi
        self._endpoints = list(other._endpoints) if other._endpoints is not None else None
        self.children = list(other.children) if other.children is not None else None

    def reclassify(self, kind: MotionKind) -> None:
        """
        Change the kind, replacing the fit with one of the new kind.

        The new fit covers the same window; its parameters are recomputed.
        Endpoints are dropped if the new kind is not line-like.
        """
        kind = MotionKind.from_name(kind)
        if self.children is not None:
            raise ValidationError("Cannot reclassify a segment that holds children")
        if kind is self._kind:
            return

        if not kind.has_fit:
            fit = None
        elif self._fit is not None:
            fit = FitFactory.create_fit(kind, sums=self._fit.sums.copy())
        else:
            fit = FitFactory.create_fit(kind)
            for i in self.indices():
                fit.add(self.points.get(i))

        logger.debug(f"Reclassifying [{self.lo}, {self.hi}] from {self._kind.name} to {kind.name}")
        self._kind = kind
        self._fit = fit
        if not kind.is_line:
            self._endpoints = None
        self.refit()

    def __repr__(self) -> str:
        return f"Segment({self._kind.name}, [{self.lo}, {self.hi}], fit={self._fit!r})"
