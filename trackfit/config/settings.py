"""
Application settings and configuration.

This module contains package-level defaults and logging configuration.
For algorithmic constants, see trackfit.core.constants.
"""

import logging
from typing import Dict, Any

# Import algorithmic constants from core module
from trackfit.core.constants import (
    DEFAULT_ROLLING_WINDOW,
    DEFAULT_MAX_WORKERS,
    DEFAULT_P_NOT_ROUND,
    MIN_LINE_POINTS,
    MIN_ARC_POINTS,
)

# Fitting defaults
DEFAULT_POSITION_NOISE = 1.0  # Pixels; standard deviation of centroid jitter

# Minimum segment sizes before a fit is reported (reference core constants)
DEFAULT_MIN_STRAIGHT_POINTS = MIN_LINE_POINTS + 1
DEFAULT_MIN_ARC_POINTS = MIN_ARC_POINTS + 1

# Logging configuration
LOGGING_CONFIG = {
    "level": logging.INFO,
    "format": '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    "handlers": [
        logging.StreamHandler(),
    ]
}


def configure_logging(level: int = None) -> None:
    """Apply LOGGING_CONFIG to the root logger."""
    logging.basicConfig(
        level=LOGGING_CONFIG["level"] if level is None else level,
        format=LOGGING_CONFIG["format"],
        handlers=LOGGING_CONFIG["handlers"],
    )


# =============== Configuration Classes ===============
# These classes provide typed access to configuration sections

class FitConfig:
    """Configuration parameters for fit accumulators."""
    POSITION_NOISE = DEFAULT_POSITION_NOISE
    P_NOT_ROUND = DEFAULT_P_NOT_ROUND
    MIN_STRAIGHT_POINTS = DEFAULT_MIN_STRAIGHT_POINTS
    MIN_ARC_POINTS = DEFAULT_MIN_ARC_POINTS

    @classmethod
    def as_dict(cls) -> Dict[str, Any]:
        """Get fit configuration as a dictionary."""
        return {
            'position_noise': cls.POSITION_NOISE,
            'p_not_round': cls.P_NOT_ROUND,
            'min_straight_points': cls.MIN_STRAIGHT_POINTS,
            'min_arc_points': cls.MIN_ARC_POINTS,
        }


class ServiceConfig:
    """Configuration parameters for the segment fitting service."""
    ROLLING_WINDOW = DEFAULT_ROLLING_WINDOW
    MAX_WORKERS = DEFAULT_MAX_WORKERS

    @classmethod
    def as_dict(cls) -> Dict[str, Any]:
        """Get service configuration as a dictionary."""
        return {
            'rolling_window': cls.ROLLING_WINDOW,
            'max_workers': cls.MAX_WORKERS,
        }
