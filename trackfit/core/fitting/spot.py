"""
Stationary spot fit: the animal dwelling about a single point.
"""

import math
import logging
from dataclasses import dataclass
from typing import Any

from scipy import stats

from trackfit.core.constants import MIN_SPOT_POINTS, SPOT_FIT_DOF
from trackfit.core.fitting.base import FitAccumulator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpotParameters:
    """Symmetric blob centred at (x0, y0) with spread sigma."""
    x0: float
    y0: float
    sigma: float


class SpotFit(FitAccumulator):
    """Mean position of the included points."""

    min_points = MIN_SPOT_POINTS

    def _undefined_params(self) -> SpotParameters:
        return SpotParameters(math.nan, math.nan, math.nan)

    def _solve(self) -> SpotParameters:
        s = self.sums
        return SpotParameters(
            x0=s.ox + s.sx / s.n,
            y0=s.oy + s.sy / s.n,
            sigma=math.sqrt(max(self.mean_variance(), 0.0)),
        )

    def mean_variance(self) -> float:
        """Mean squared distance of the points from their centroid."""
        s = self.sums
        if s.n < 1:
            return math.nan
        return ((s.sxx + s.syy) - (s.sx * s.sx + s.sy * s.sy) / s.n) / s.n

    def squared_error(self, point: Any) -> float:
        dx = float(point[0]) - self.params.x0
        dy = float(point[1]) - self.params.y0
        return dx * dx + dy * dy

    def p_fit(self, sigma2: float) -> float:
        """
        Probability that the scatter is explained by positional noise alone.

        Args:
            sigma2: Variance of the positional noise

        Returns:
            Upper tail of the chi-square distribution (NaN with < 2 points)
        """
        dof = self.n - SPOT_FIT_DOF
        if dof < 1:
            return math.nan
        chi_sq = self.mean_variance() * dof / sigma2
        return float(stats.chi2.sf(chi_sq, dof))
