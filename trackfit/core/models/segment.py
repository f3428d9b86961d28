"""
Segment summary models.

This module defines the flat records a classifier or a report reads back from
fitted segments, and their conversion to and from pandas DataFrames.
"""

import math
from dataclasses import dataclass
from typing import Optional, List, Dict, Any
import numpy as np
import pandas as pd


@dataclass
class SegmentSummary:
    """
    Represents one fitted segment of a track.

    Fit parameter fields that do not apply to the segment's kind are NaN.
    """
    # Classification
    kind: str

    # Index boundaries in the point sequence
    lo: int
    hi: int
    point_count: int  # Number of tracked (non-gap) positions

    # Geometry
    distance: float  # Distance travelled (arclength for arcs)
    direction_x: float = math.nan  # Initial direction of travel
    direction_y: float = math.nan

    # Fit parameters
    x0: float = math.nan  # Spot mean or circle centre
    y0: float = math.nan
    radius: float = math.nan  # Circle radius, or spot sigma
    line_a: float = math.nan  # Normal-form line a*y + b*x + c = 0
    line_b: float = math.nan
    line_c: float = math.nan

    # Quality metrics (optional)
    p_fit: float = math.nan  # Probability the residuals are positional noise
    rms_error: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert summary to dictionary for DataFrame creation."""
        return {
            'kind': self.kind,
            'lo': self.lo,
            'hi': self.hi,
            'point_count': self.point_count,
            'distance': self.distance,
            'direction_x': self.direction_x,
            'direction_y': self.direction_y,
            'x0': self.x0,
            'y0': self.y0,
            'radius': self.radius,
            'line_a': self.line_a,
            'line_b': self.line_b,
            'line_c': self.line_c,
            'p_fit': self.p_fit,
            'rms_error': self.rms_error,
        }

    @property
    def size(self) -> int:
        """Number of time indices spanned, gaps included."""
        return 1 + self.hi - self.lo

    @property
    def heading_degrees(self) -> float:
        """Initial direction as an angle counter-clockwise from +x."""
        return math.degrees(math.atan2(self.direction_y, self.direction_x))


def segments_to_dataframe(summaries: List[SegmentSummary]) -> pd.DataFrame:
    """
    Convert a list of segment summaries to a pandas DataFrame.

    Args:
        summaries: List of SegmentSummary objects

    Returns:
        pandas DataFrame with one row per segment
    """
    if not summaries:
        return pd.DataFrame()

    data = [summary.to_dict() for summary in summaries]
    return pd.DataFrame(data)


def dataframe_to_segments(df: pd.DataFrame) -> List[SegmentSummary]:
    """
    Convert a pandas DataFrame to a list of SegmentSummary objects.

    Args:
        df: DataFrame with summary columns

    Returns:
        List of SegmentSummary objects
    """
    summaries = []

    for _, row in df.iterrows():
        rms = row.get('rms_error')
        summary = SegmentSummary(
            kind=row['kind'],
            lo=int(row['lo']),
            hi=int(row['hi']),
            point_count=int(row['point_count']),
            distance=float(row['distance']),
            direction_x=float(row.get('direction_x', math.nan)),
            direction_y=float(row.get('direction_y', math.nan)),
            x0=float(row.get('x0', math.nan)),
            y0=float(row.get('y0', math.nan)),
            radius=float(row.get('radius', math.nan)),
            line_a=float(row.get('line_a', math.nan)),
            line_b=float(row.get('line_b', math.nan)),
            line_c=float(row.get('line_c', math.nan)),
            p_fit=float(row.get('p_fit', math.nan)),
            rms_error=None if rms is None or pd.isna(rms) else float(rms),
        )
        summaries.append(summary)

    return summaries


def analyze_segment_distribution(summaries: List[SegmentSummary]) -> Dict[str, Any]:
    """
    Analyze the distribution of fitted segments.

    Args:
        summaries: List of segment summaries

    Returns:
        Dictionary with distribution statistics
    """
    if not summaries:
        return {}

    distances = [s.distance for s in summaries]
    sizes = [s.size for s in summaries]
    kinds: Dict[str, int] = {}
    for s in summaries:
        kinds[s.kind] = kinds.get(s.kind, 0) + 1

    stats = {
        'count': len(summaries),
        'kind_counts': kinds,
        'total_distance': float(sum(distances)),
        'avg_segment_distance': float(np.mean(distances)),
        'avg_segment_size': float(np.mean(sizes)),
        'distance_range': (min(distances), max(distances)),
        'size_range': (min(sizes), max(sizes)),
    }

    return stats
