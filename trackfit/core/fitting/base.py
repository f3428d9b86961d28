"""
Fit accumulator base class.

Every primitive (spot, line, circle) keeps the same running moment sums and
derives its own parameters from them on demand. Adding or removing a point
is O(1); ``recompute`` is O(1) as well, so a window can slide along a track
without refitting from scratch.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from trackfit.core.fitting.sums import MomentSums
from trackfit.core.validation import InvalidPointError, is_absent

logger = logging.getLogger(__name__)


class FitAccumulator(ABC):
    """Abstract base class for incremental least-squares fits."""

    min_points = 1

    def __init__(self, sums: Optional[MomentSums] = None, auto_origin: bool = True):
        self.sums = sums if sums is not None else MomentSums(auto_origin)
        self.params = self._undefined_params()

    @property
    def n(self) -> int:
        """Number of points currently included."""
        return self.sums.n

    @property
    def is_degenerate(self) -> bool:
        """True if there are too few points for the parameters to be defined."""
        return self.n < self.min_points

    def add(self, point: Any) -> None:
        """
        Include a point in the running sums.

        Raises:
            InvalidPointError: If the point is absent
        """
        if is_absent(point):
            raise InvalidPointError()
        self.sums.add(float(point[0]), float(point[1]))

    def remove(self, point: Any) -> None:
        """
        Exclude a previously added point.

        The point must have been added and not yet removed; this is not
        checked and violating it silently corrupts the sums.
        """
        if is_absent(point):
            raise InvalidPointError()
        self.sums.remove(float(point[0]), float(point[1]))

    def recompute(self):
        """
        Derive the primitive's parameters from the current sums.

        Returns NaN parameters (and never raises) when there are too few
        points for the primitive.
        """
        if self.is_degenerate:
            logger.debug(f"{type(self).__name__}: {self.n} points < {self.min_points}, parameters undefined")
            self.params = self._undefined_params()
        else:
            self.params = self._solve()
        return self.params

    def copy(self) -> 'FitAccumulator':
        """Independent copy with the same sums and parameters."""
        other = type(self)(sums=self.sums.copy())
        other.params = self.params
        return other

    def join(self, other: 'FitAccumulator') -> 'FitAccumulator':
        """Merge another accumulator's points into this one (parameters are not refreshed)."""
        self.sums.join(other.sums)
        return self

    def reset(self) -> 'FitAccumulator':
        self.sums.reset()
        self.params = self._undefined_params()
        return self

    @abstractmethod
    def _solve(self):
        """Compute parameters from sums known to hold enough points."""
        pass

    @abstractmethod
    def _undefined_params(self):
        """NaN-filled parameter record."""
        pass

    @abstractmethod
    def squared_error(self, point: Any) -> float:
        """Squared distance from ``point`` to the fitted primitive."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(n={self.n}, params={self.params})"
