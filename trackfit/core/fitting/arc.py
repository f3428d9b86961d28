"""
Circular arc fit.

Implements the Hyper algebraic circle fit of Al-Sharadqah & Chernov,
Electronic Journal of Statistics 3:886-911 (2009). The circle
``A*z + B*x + C*y + D = 0`` (with ``z = x*x + y*y``) minimizes
``A'MA`` subject to ``A'NA = 1``, where M is the moment matrix of the points
and N the Hyper constraint matrix. Both are 4x4 and built straight from the
running sums, so a refit costs the same no matter how many points the window
holds.
"""

import math
import logging
import numpy as np
from dataclasses import dataclass
from typing import Any, Tuple

from scipy import stats

from trackfit.core.constants import (
    MIN_ARC_POINTS, ARC_FIT_DOF, MIN_ARC_POINTS_FOR_PFIT,
    EIGEN_IMAGINARY_TOLERANCE, HYPER_CONSTRAINT_EPSILON
)
from trackfit.core.calculations import signed_angle_between
from trackfit.core.fitting.base import FitAccumulator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CircleParameters:
    """Circle (x-x0)^2 + (y-y0)^2 = R^2 with algebraic mean squared error."""
    x0: float
    y0: float
    R: float
    mse: float


def _moment_matrices(sums) -> Tuple[np.ndarray, np.ndarray]:
    """Moment matrix M and Hyper constraint N for sums centred on their centroid."""
    n = sums.n
    sz = sums.sxx + sums.syy
    moments = np.array([
        [sums.szz, sums.sxz, sums.syz, sz],
        [sums.sxz, sums.sxx, sums.sxy, 0.0],
        [sums.syz, sums.sxy, sums.syy, 0.0],
        [sz, 0.0, 0.0, float(n)],
    ]) / n
    z_mean = sz / n
    constraint = np.array([
        [8.0 * z_mean, 0.0, 0.0, 2.0],
        [0.0, 1.0, 0.0, 0.0],
        [0.0, 0.0, 1.0, 0.0],
        [2.0, 0.0, 0.0, 0.0],
    ])
    return moments, constraint


class ArcFit(FitAccumulator):
    """Incremental least-squares circle."""

    min_points = MIN_ARC_POINTS

    def _undefined_params(self) -> CircleParameters:
        return CircleParameters(math.nan, math.nan, math.nan, math.nan)

    def _solve(self) -> CircleParameters:
        centred = self.sums.centered()
        if centred.sxx == 0 and centred.syy == 0:
            logger.debug("ArcFit: all points coincide, circle undefined")
            return self._undefined_params()

        moments, constraint = _moment_matrices(centred)

        eigenvalues, eigenvectors = np.linalg.eig(np.linalg.solve(constraint, moments))

        # Smallest eigenvalue whose eigenvector satisfies A'NA > 0
        best_eta = math.inf
        best_vector = None
        for k in range(len(eigenvalues)):
            eta = eigenvalues[k]
            if abs(eta.imag) > EIGEN_IMAGINARY_TOLERANCE * max(1.0, abs(eta.real)):
                continue
            vector = np.real(eigenvectors[:, k])
            norm = float(vector @ constraint @ vector)
            if norm <= HYPER_CONSTRAINT_EPSILON * float(vector @ vector):
                continue
            if eta.real < best_eta:
                best_eta = float(eta.real)
                best_vector = vector

        if best_vector is None:
            logger.debug(f"ArcFit: no admissible eigenvector for {self.n} points")
            return self._undefined_params()

        a, b, c, d = (float(v) for v in best_vector)
        if a == 0:
            logger.debug("ArcFit: points are collinear, circle is unbounded")
            return CircleParameters(math.inf, math.inf, math.inf, max(best_eta, 0.0))

        half_inv_a = 0.5 / a
        x0 = -b * half_inv_a + centred.ox
        y0 = -c * half_inv_a + centred.oy
        radius = math.sqrt(max(b * b + c * c - 4 * a * d, 0.0)) * abs(half_inv_a)
        return CircleParameters(x0, y0, radius, max(best_eta, 0.0))

    def center(self) -> np.ndarray:
        return np.array([self.params.x0, self.params.y0])

    def squared_error(self, point: Any) -> float:
        p = self.params
        r_fit = math.hypot(float(point[0]) - p.x0, float(point[1]) - p.y0)
        return (r_fit - p.R) * (r_fit - p.R)

    def arc_coordinate(self, point: Any) -> float:
        """Angle of ``point`` about the centre; increases counter-clockwise."""
        p = self.params
        return math.atan2(float(point[1]) - p.y0, float(point[0]) - p.x0)

    def arc_delta_coordinate(self, first: Any, second: Any) -> float:
        """Signed angle in (-pi, pi] swept about the centre going from ``first`` to ``second``."""
        p = self.params
        u = (float(first[0]) - p.x0, float(first[1]) - p.y0)
        v = (float(second[0]) - p.x0, float(second[1]) - p.y0)
        return signed_angle_between(u, v)

    def total_variance(self) -> float:
        s = self.sums
        if s.n < 1:
            return math.nan
        return s.sxx - s.sx * s.sx / s.n + s.syy - s.sy * s.sy / s.n

    def unfit_variance(self) -> float:
        return self.n * self.params.mse

    def p_fit(self, sigma2: float) -> float:
        """Probability that the residuals are explained by positional noise of variance sigma2."""
        if self.n < MIN_ARC_POINTS_FOR_PFIT:
            return 0.0
        return float(stats.chi2.sf(self.unfit_variance() / sigma2, self.n - ARC_FIT_DOF))
