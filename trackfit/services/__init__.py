"""
Services package.

Pipelines built on the fitting core: explicit-span segment fitting, segment
summaries, rolling-window scans and parallel processing of many tracks.
"""

from .segment_service import (
    fit_segments,
    fit_tracks,
    rolling_fit_errors,
    summarize_arena,
    summarize_segment,
    window_rms_error,
)

__all__ = [
    'fit_segments',
    'fit_tracks',
    'rolling_fit_errors',
    'summarize_arena',
    'summarize_segment',
    'window_rms_error',
]
