"""
Fitting package.

Incremental least-squares fits for the three primitives a segment can be
backed by: a stationary spot, a straight line and a circular arc.
"""

from .sums import MomentSums
from .base import FitAccumulator
from .spot import SpotFit, SpotParameters
from .line import LineFit, LineParameters
from .arc import ArcFit, CircleParameters
from .factory import FitFactory, create_fit

__all__ = [
    'MomentSums',
    'FitAccumulator',
    'SpotFit',
    'SpotParameters',
    'LineFit',
    'LineParameters',
    'ArcFit',
    'CircleParameters',
    'FitFactory',
    'create_fit',
]
