"""
Segment fitting service.

This module provides the pipeline for callers that already know where their
segment boundaries are: build and fit the segments of a track, summarize
them as a DataFrame, scan a track with a rolling window, or process many
independent tracks in parallel.
"""

import math
import logging
import numpy as np
import pandas as pd
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, Hashable, List, Optional, Sequence, Tuple

from trackfit.config.settings import FitConfig, ServiceConfig
from trackfit.core.models.kinds import MotionKind
from trackfit.core.models.segment import SegmentSummary, segments_to_dataframe
from trackfit.core.points import PointSequence
from trackfit.core.segments import Segment, SegmentArena, distance_traversed, initial_vector
from trackfit.core.validation import ValidationError, validate_spans

logger = logging.getLogger(__name__)

Span = Tuple[Any, int, int]


def window_rms_error(segment: Segment) -> float:
    """Root mean squared fit error over the points in the window (NaN without a fit)."""
    if segment.fit is None or segment.is_empty:
        return math.nan
    errors = [segment.squared_error(segment.points.get(i)) for i in segment.indices()]
    return math.sqrt(float(np.mean(errors)))


def summarize_segment(segment: Segment) -> SegmentSummary:
    """
    Build a flat summary of a fitted segment.

    Straight segments report ``p_non_round_fit`` as their fit probability,
    so a round blob classified as straight scores 0.

    Args:
        segment: Segment whose fit is up to date

    Returns:
        SegmentSummary with the kind's fit parameters filled in
    """
    # Arcs need their circle to measure distance; placeholders sit at index -1
    measurable = (not segment.is_empty and segment.lo >= 0
                  and (segment.kind is not MotionKind.ARC or segment.fit is not None))
    summary = SegmentSummary(
        kind=segment.kind.name,
        lo=segment.lo,
        hi=segment.hi,
        point_count=sum(1 for _ in segment.indices()),
        distance=distance_traversed(segment) if measurable else 0.0,
    )

    if segment.fit is None or segment.is_empty:
        return summary

    params = segment.fit.params
    if segment.kind is MotionKind.DWELL:
        summary.x0, summary.y0, summary.radius = params.x0, params.y0, params.sigma
    elif segment.kind is MotionKind.STRAIGHT:
        summary.line_a, summary.line_b, summary.line_c = params.a, params.b, params.c
    elif segment.kind is MotionKind.ARC:
        summary.x0, summary.y0, summary.radius = params.x0, params.y0, params.R

    if segment.is_line:
        direction = initial_vector(segment)
        summary.direction_x, summary.direction_y = float(direction[0]), float(direction[1])

    sigma2 = FitConfig.POSITION_NOISE * FitConfig.POSITION_NOISE
    if segment.kind is MotionKind.STRAIGHT:
        summary.p_fit = segment.fit.p_non_round_fit(sigma2, FitConfig.P_NOT_ROUND)
    else:
        summary.p_fit = segment.fit.p_fit(sigma2)

    summary.rms_error = window_rms_error(segment)
    return summary


def fit_segments(points: PointSequence, spans: Sequence[Span]) -> Tuple[SegmentArena, List[int]]:
    """
    Create and fit one segment per explicit span.

    Args:
        points: Track positions
        spans: Ordered, non-overlapping ``(kind, lo, hi)`` triples

    Returns:
        The arena owning the segments and their ids in span order

    Raises:
        ValidationError: If a span is malformed or names an unknown kind
    """
    validate_spans(spans, len(points))
    arena = SegmentArena(points)
    ids = []

    for kind, lo, hi in spans:
        kind = MotionKind.from_name(kind)
        segment_id = arena.create(kind, lo, hi)
        segment = arena.get(segment_id)

        n = segment.fit.n if segment.fit is not None else 0
        if kind is MotionKind.STRAIGHT and n < FitConfig.MIN_STRAIGHT_POINTS:
            logger.warning(f"Straight segment [{lo}, {hi}] has only {n} points; fit is unreliable")
        elif kind is MotionKind.ARC and n < FitConfig.MIN_ARC_POINTS:
            logger.warning(f"Arc segment [{lo}, {hi}] has only {n} points; fit is unreliable")

        ids.append(segment_id)

    logger.info(f"Fitted {len(ids)} segments over {len(points)} frames")
    return arena, ids


def summarize_arena(arena: SegmentArena, ids: Optional[Sequence[int]] = None) -> pd.DataFrame:
    """Summaries of the given segments (all top-level segments by default) as a DataFrame."""
    if ids is None:
        ids = arena.roots()
    summaries = []
    for segment_id in ids:
        segment = arena.get(segment_id)
        if segment.has_children:
            summaries.extend(summarize_segment(child) for child in arena.children_of(segment_id))
        else:
            summaries.append(summarize_segment(segment))
    return segments_to_dataframe(summaries)


def rolling_fit_errors(points: PointSequence, kind: Any,
                       window: int = ServiceConfig.ROLLING_WINDOW,
                       position_noise: float = FitConfig.POSITION_NOISE) -> pd.DataFrame:
    """
    Slide a fixed-size window along the track and report how well it fits.

    The window is grown to ``window`` points and then advanced one point at
    a time with ``shift_right``, so each step costs O(1) regardless of the
    window size.

    Args:
        points: Track positions
        kind: Motion kind whose fit to evaluate (must carry a fit)
        window: Number of tracked points per window
        position_noise: Standard deviation of centroid jitter, for ``p_fit``

    Returns:
        DataFrame with 'lo', 'hi', 'rms_error' and 'p_fit' per window
    """
    kind = MotionKind.from_name(kind)
    if not kind.has_fit:
        raise ValidationError(f"{kind.name} segments carry no fit to evaluate")
    if window < 1:
        raise ValidationError(f"Window must hold at least one point, got {window}")

    i = points.next_present(0)
    if i >= len(points):
        logger.warning("No tracked positions; nothing to scan")
        return pd.DataFrame(columns=['lo', 'hi', 'rms_error', 'p_fit'])

    segment = Segment.empty(points, kind, i)
    while segment.fit.n < window and i < len(points):
        i = segment.add_right(i)

    sigma2 = position_noise * position_noise
    rows = []

    def record():
        segment.refit()
        rows.append({
            'lo': segment.lo,
            'hi': segment.hi,
            'rms_error': window_rms_error(segment),
            'p_fit': segment.fit.p_fit(sigma2),
        })

    if segment.fit.n == window:
        record()
    while i < len(points):
        i = segment.shift_right(i)
        record()

    logger.debug(f"Scanned {len(rows)} windows of {window} points with {kind.name} fits")
    return pd.DataFrame(rows, columns=['lo', 'hi', 'rms_error', 'p_fit'])


def _fit_track(points: PointSequence, spans: Sequence[Span]) -> pd.DataFrame:
    arena, ids = fit_segments(points, spans)
    return summarize_arena(arena, ids)


def fit_tracks(tracks: Dict[Hashable, Tuple[PointSequence, Sequence[Span]]],
               max_workers: int = ServiceConfig.MAX_WORKERS) -> Dict[Hashable, pd.DataFrame]:
    """
    Fit the segments of many independent tracks in parallel.

    Each track owns its own arena and its point sequence is read-only, so
    tracks share no mutable state.

    Args:
        tracks: Mapping of track id to ``(points, spans)``
        max_workers: Worker threads

    Returns:
        Mapping of track id to its segment summary DataFrame; tracks whose
        spans fail validation map to an empty DataFrame
    """
    results: Dict[Hashable, pd.DataFrame] = {}
    if not tracks:
        return results

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(_fit_track, points, spans): track_id
            for track_id, (points, spans) in tracks.items()
        }

        for future in as_completed(futures):
            track_id = futures[future]
            try:
                results[track_id] = future.result()
            except ValidationError as e:
                logger.error(f"Track {track_id}: validation failed: {e}")
                results[track_id] = pd.DataFrame()

    logger.info(f"Fitted {len(results)} tracks")
    return results
