"""
Fit accumulator factory.

Maps each motion kind to the fit primitive that backs it, so a segment's kind
and its fit are always created together.
"""

import logging
from typing import Dict, Optional, Type

from trackfit.core.fitting.base import FitAccumulator
from trackfit.core.fitting.spot import SpotFit
from trackfit.core.fitting.line import LineFit
from trackfit.core.fitting.arc import ArcFit
from trackfit.core.fitting.sums import MomentSums
from trackfit.core.models.kinds import MotionKind

logger = logging.getLogger(__name__)


class FitFactory:
    """Factory for creating the fit accumulator of a motion kind."""

    _fits: Dict[MotionKind, Type[FitAccumulator]] = {
        MotionKind.DWELL: SpotFit,
        MotionKind.STRAIGHT: LineFit,
        MotionKind.ARC: ArcFit,
    }

    @classmethod
    def create_fit(cls, kind: MotionKind, sums: Optional[MomentSums] = None,
                   auto_origin: bool = True) -> Optional[FitAccumulator]:
        """
        Create the fit for ``kind``.

        Args:
            kind: Motion kind of the owning segment
            sums: Optional moment sums to start from (taken over, not copied)
            auto_origin: Move the origin to the first point added

        Returns:
            A fit accumulator, or None for kinds that carry no fit
        """
        fit_class = cls._fits.get(MotionKind.from_name(kind))
        if fit_class is None:
            return None
        return fit_class(sums=sums, auto_origin=auto_origin)

    @classmethod
    def fit_class_for(cls, kind: MotionKind) -> Optional[Type[FitAccumulator]]:
        return cls._fits.get(MotionKind.from_name(kind))

    @classmethod
    def get_fitted_kinds(cls) -> Dict[str, str]:
        """Kinds that carry a fit, with the primitive backing each."""
        return {kind.name: fit_class.__name__ for kind, fit_class in cls._fits.items()}


def create_fit(kind: MotionKind, sums: Optional[MomentSums] = None) -> Optional[FitAccumulator]:
    """Convenience function to create the fit for a motion kind."""
    return FitFactory.create_fit(kind, sums)
