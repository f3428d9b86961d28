"""
Error types and input validation for the fitting core.

Contract violations (adding a missing point, asking a fit-less segment for
geometry) raise immediately. Degenerate fits are not errors: they produce NaN
parameters that callers are expected to special-case.
"""

import numpy as np
import pandas as pd
import logging
from typing import Any, Iterable, List, Optional, Sequence

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Custom exception for validation errors."""
    pass


class SegmentError(Exception):
    """Base class for segment contract violations."""
    pass


class InvalidPointError(SegmentError):
    """An absent point was handed to a fit accumulator."""

    def __init__(self, index: Optional[int] = None):
        self.index = index
        if index is None:
            super().__init__("Cannot add an absent point to a fit")
        else:
            super().__init__(f"Cannot add index {index}: no tracked position")


class NoFitForKindError(SegmentError):
    """A window or query operation was invoked on a segment without a fit."""

    def __init__(self, kind: Any, operation: str = "operation"):
        self.kind = kind
        name = getattr(kind, 'name', str(kind))
        super().__init__(f"Cannot perform {operation} on a {name} segment: kind carries no fit")


def is_absent(point: Any) -> bool:
    """True if ``point`` is None or has a non-finite coordinate."""
    if point is None:
        return True
    return not (np.isfinite(point[0]) and np.isfinite(point[1]))


def validate_point_array(values: Any, context: str = "Point sequence") -> np.ndarray:
    """
    Validate an (N, 2) array of positions.

    Args:
        values: Array-like of shape (N, 2); NaN rows mark gaps
        context: Context description for error messages

    Returns:
        The array as a numpy floating array

    Raises:
        ValidationError: If the shape or dtype is unusable
    """
    if values is None:
        raise ValidationError(f"{context}: values are None")

    array = np.asarray(values)
    if array.dtype.kind not in 'fiu':
        raise ValidationError(f"{context}: expected numeric positions, got dtype {array.dtype}")
    if array.ndim != 2 or (array.size > 0 and array.shape[1] != 2):
        raise ValidationError(f"{context}: expected shape (N, 2), got {array.shape}")

    if array.dtype.kind != 'f':
        array = array.astype(np.float64)

    if np.isinf(array).any():
        inf_count = int(np.isinf(array).any(axis=1).sum())
        raise ValidationError(f"{context}: {inf_count} rows contain infinite coordinates")

    gap_count = int(np.isnan(array).any(axis=1).sum())
    if gap_count:
        logger.debug(f"{context}: {gap_count} of {len(array)} frames are gaps")
    return array


def validate_point_dataframe(df: pd.DataFrame, context: str = "Centroid data") -> pd.DataFrame:
    """
    Validate a centroid DataFrame has the position columns.

    Raises:
        ValidationError: If validation fails
    """
    if df is None:
        raise ValidationError(f"{context}: DataFrame is None")

    required_columns = ['x', 'y']
    missing_columns = [col for col in required_columns if col not in df.columns]
    if missing_columns:
        raise ValidationError(f"{context}: Missing required columns: {missing_columns}")

    return df


def validate_span(lo: int, hi: int, length: int, context: str = "Span") -> None:
    """
    Validate an inclusive index span against a sequence length.

    An empty span (``hi == lo - 1``) is allowed.

    Raises:
        ValidationError: If the span is reversed or out of range
    """
    if hi < lo - 1:
        raise ValidationError(f"{context}: hi={hi} is before lo={lo}")
    if lo < 0 or hi >= length:
        if not (hi == lo - 1 and 0 <= lo <= length):
            raise ValidationError(f"{context}: [{lo}, {hi}] outside sequence of length {length}")


def validate_endpoints(endpoints: Optional[Iterable[int]], lo: int, hi: int,
                       points: Any = None) -> Optional[List[int]]:
    """
    Validate a list of direction-change endpoints.

    Endpoints must be non-decreasing and lie within ``[lo, hi]``. When
    ``points`` is given they must also fall on tracked positions.

    Returns:
        The endpoints as a list, or None

    Raises:
        ValidationError: If the endpoints are out of order or out of range
    """
    if endpoints is None:
        return None

    result = [int(e) for e in endpoints]
    for e in result:
        if not lo <= e <= hi:
            raise ValidationError(f"Endpoint {e} outside segment [{lo}, {hi}]")
        if points is not None and not points.is_present(e):
            raise ValidationError(f"Endpoint {e} falls on an untracked position")
    if any(b < a for a, b in zip(result, result[1:])):
        raise ValidationError(f"Endpoints must be ordered, got {result}")
    return result


def validate_spans(spans: Sequence[Any], length: int) -> None:
    """
    Validate explicit (kind, lo, hi) spans for the segment service.

    Spans must be in order and must not overlap.

    Raises:
        ValidationError: If any span is malformed
    """
    previous_hi = -1
    for position, span in enumerate(spans):
        if len(span) != 3:
            raise ValidationError(f"Span {position}: expected (kind, lo, hi), got {span!r}")
        _, lo, hi = span
        validate_span(lo, hi, length, context=f"Span {position}")
        if lo <= previous_hi:
            raise ValidationError(f"Span {position}: [{lo}, {hi}] overlaps previous span ending at {previous_hi}")
        previous_hi = max(previous_hi, hi)
