"""
Straight line fit in normal form ``a*y + b*x + c = 0``.

The line is found by ordinary least squares along whichever axis the points
spread out more on, then scaled so that ``a*a + b*b == 1``. With that scaling
``a*y + b*x + c`` is the signed perpendicular distance of a point from the
line and ``(-a, b)`` is a unit tangent.
"""

import math
import logging
from dataclasses import dataclass
from typing import Any

from scipy import stats

from trackfit.core.constants import MIN_LINE_POINTS, LINE_FIT_DOF
from trackfit.core.fitting.base import FitAccumulator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LineParameters:
    """Line a*y + b*x + c = 0 with unit normal (b, a)."""
    a: float
    b: float
    c: float


class LineFit(FitAccumulator):
    """Incremental least-squares line."""

    min_points = MIN_LINE_POINTS

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.regress_on_x = True

    def copy(self) -> 'LineFit':
        other = super().copy()
        other.regress_on_x = self.regress_on_x
        return other

    def _undefined_params(self) -> LineParameters:
        return LineParameters(math.nan, math.nan, math.nan)

    def _spread(self):
        """Centred second moments (Dxx, Dyy, Dxy)."""
        s = self.sums
        return (s.sxx - s.sx * s.sx / s.n,
                s.syy - s.sy * s.sy / s.n,
                s.sxy - s.sx * s.sy / s.n)

    def _solve(self) -> LineParameters:
        s = self.sums
        dxx, dyy, dxy = self._spread()
        if dxx == 0 and dyy == 0:
            logger.debug("LineFit: all points coincide, direction undefined")
            return self._undefined_params()

        # Regress y on x unless the points spread further along y
        if abs(dyy) > abs(dxx):
            a, b = -dxy / dyy, 1.0
            self.regress_on_x = False
        else:
            a, b = 1.0, -dxy / dxx
            self.regress_on_x = True
        c = -(a * s.sy + b * s.sx) / s.n - a * s.oy - b * s.ox

        norm = math.hypot(a, b)
        return LineParameters(a / norm, b / norm, c / norm)

    def offset(self, point: Any) -> float:
        """Signed algebraic distance ``a*y + b*x + c``."""
        p = self.params
        return p.a * float(point[1]) + p.b * float(point[0]) + p.c

    def squared_error(self, point: Any) -> float:
        off = self.offset(point)
        return off * off / self.variance_angle_bias()

    def parallel_coordinate(self, point: Any) -> float:
        """Position of the projection of ``point`` along the tangent ``(-a, b)``."""
        p = self.params
        return (p.b * float(point[1]) - p.a * float(point[0])) / math.sqrt(self.variance_angle_bias())

    def perpendicular_coordinate(self, point: Any) -> float:
        return math.sqrt(self.squared_error(point))

    def get_x(self, y: float) -> float:
        p = self.params
        return math.nan if p.b == 0 else -(p.c + p.a * y) / p.b

    def get_y(self, x: float) -> float:
        p = self.params
        return math.nan if p.a == 0 else -(p.c + p.b * x) / p.a

    def variance_angle_bias(self) -> float:
        """Squared length of the normal (a, b); scales algebraic offsets to distances."""
        p = self.params
        return p.a * p.a + p.b * p.b

    def total_variance(self) -> float:
        """Sum of squared distances of the points from their centroid."""
        if self.n < 1:
            return math.nan
        dxx, dyy, _ = self._spread()
        return dxx + dyy

    def unfit_variance(self) -> float:
        """Sum of squared perpendicular residuals about the fitted line."""
        if self.n < 1:
            return math.nan
        p = self.params
        dxx, dyy, dxy = self._spread()
        resid = (p.a * p.a * dyy + p.b * p.b * dxx + 2 * p.a * p.b * dxy) / self.variance_angle_bias()
        return max(resid, 0.0)

    def p_fit(self, sigma2: float) -> float:
        """Probability that the residuals are explained by positional noise of variance sigma2."""
        dof = self.n - LINE_FIT_DOF
        if dof < 1:
            return math.nan
        return float(stats.chi2.sf(self.unfit_variance() / sigma2, dof))

    def p_round(self) -> float:
        """Probability that the point cloud is round rather than elongated (F-test)."""
        dof = self.n - LINE_FIT_DOF
        if dof < 1:
            return math.nan
        unfit = self.unfit_variance()
        if unfit == 0:
            return 0.0
        f_stat = 0.5 * self.total_variance() / unfit
        return float(stats.f.sf(f_stat, self.n - 1, dof))

    def p_non_round_fit(self, sigma2: float, p_not_round: float) -> float:
        """Like ``p_fit`` but zero when the cloud cannot be told apart from a round blob."""
        p_round = self.p_round()
        if math.isnan(p_round):
            return math.nan
        if p_round > p_not_round:
            return 0.0
        return self.p_fit(sigma2)

    def t_score_correlation(self) -> float:
        """t statistic of the regression slope along the dominant axis."""
        dof = self.n - LINE_FIT_DOF
        if dof < 1:
            return math.nan
        p = self.params
        dxx, dyy, _ = self._spread()
        unfit = self.unfit_variance()
        if unfit == 0:
            return math.inf
        if self.regress_on_x:
            return abs(p.b) * math.sqrt(dxx * dof / unfit)
        return abs(p.a) * math.sqrt(dyy * dof / unfit)
