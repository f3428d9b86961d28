"""
Point sequence models.

A point sequence is the tracked centroid of one animal over time: an ordered,
fixed-length run of optional 2D positions. Frames without a measurement are
gaps and are stored as NaN rows.
"""

import numpy as np
import pandas as pd
import logging
from typing import Iterable, Iterator, Optional, Sequence, Tuple

from trackfit.core.validation import (
    validate_point_array, validate_point_dataframe, ValidationError
)

logger = logging.getLogger(__name__)


class PointSequence:
    """
    Read-only sequence of optional 2D points.

    The positions live in an ``(N, 2)`` numpy array of either float64 or
    float32; ``get`` hands back a row view (or None for a gap), so the
    precision of the sequence flows into everything computed from it.
    """

    def __init__(self, values, dtype=None):
        array = validate_point_array(values)
        if dtype is not None:
            array = array.astype(dtype)
        else:
            array = array.copy()
        if array.size == 0:
            array = array.reshape(0, 2)
        array.setflags(write=False)
        self._values = array
        self._present = ~np.isnan(array).any(axis=1)
        self._present.setflags(write=False)

    @classmethod
    def from_points(cls, points: Iterable[Optional[Sequence[float]]], dtype=np.float64) -> 'PointSequence':
        """Build a sequence from ``(x, y)`` pairs, with None marking gaps."""
        rows = []
        for point in points:
            if point is None:
                rows.append((np.nan, np.nan))
            else:
                if len(point) != 2:
                    raise ValidationError(f"Expected a 2D point, got {point!r}")
                rows.append((point[0], point[1]))
        return cls(np.array(rows, dtype=dtype).reshape(-1, 2))

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame, dtype=np.float64) -> 'PointSequence':
        """Build a sequence from a DataFrame with 'x' and 'y' columns (NaN rows are gaps)."""
        validate_point_dataframe(df)
        return cls(df[['x', 'y']].to_numpy(dtype=dtype))

    @property
    def dtype(self) -> np.dtype:
        return self._values.dtype

    @property
    def values(self) -> np.ndarray:
        """The underlying (N, 2) array (read-only)."""
        return self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[Optional[np.ndarray]]:
        for i in range(len(self)):
            yield self.get(i)

    def get(self, index: int) -> Optional[np.ndarray]:
        """Position at ``index``, or None if the frame is a gap."""
        if not self._present[index]:
            return None
        return self._values[index]

    def __getitem__(self, index: int) -> Optional[np.ndarray]:
        return self.get(index)

    def is_present(self, index: int) -> bool:
        """True if ``index`` is in range and has a tracked position."""
        return 0 <= index < len(self) and bool(self._present[index])

    def next_present(self, index: int) -> int:
        """First present index at or after ``index`` (``len`` if none)."""
        n = len(self)
        while index < n and not self._present[index]:
            index += 1
        return index

    def previous_present(self, index: int) -> int:
        """Last present index at or before ``index`` (-1 if none)."""
        while index >= 0 and not self._present[index]:
            index -= 1
        return index

    def trim_to_present(self, lo: int, hi: int) -> Tuple[int, int]:
        """
        Shrink ``[lo, hi]`` so both ends are present indices.

        Out-of-range ends are clamped first. The result is empty
        (``lo > hi``) if no index in the span is present.
        """
        hi = min(hi, len(self) - 1)
        lo = max(lo, 0)
        while lo <= hi and not self._present[lo]:
            lo += 1
        while hi >= lo and not self._present[hi]:
            hi -= 1
        return lo, hi

    def gap_count(self) -> int:
        """Number of frames with no tracked position."""
        return int((~self._present).sum())

    def to_dataframe(self) -> pd.DataFrame:
        """Positions as a DataFrame with 'x' and 'y' columns."""
        return pd.DataFrame(self._values, columns=['x', 'y'])
