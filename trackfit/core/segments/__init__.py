"""
Segments package.

Segment window maintenance, the arena that owns a track's segments, and the
geometric queries a classifier asks of them.
"""

from .segment import Segment
from .arena import SegmentArena
from .queries import (
    Which,
    delta_vector,
    direction_vector,
    initial_vector,
    final_vector,
    distance_traversed,
    snap_to_line,
    parameterize,
    dot_with,
)

__all__ = [
    # Models
    'Segment',
    'SegmentArena',

    # Geometric queries
    'Which',
    'delta_vector',
    'direction_vector',
    'initial_vector',
    'final_vector',
    'distance_traversed',
    'snap_to_line',
    'parameterize',
    'dot_with',
]
