"""
Segment arena.

Owns every segment of one track and records parent/child relations as
integer ids rather than object references. Merging one segment into another
copies state; adopting a run of siblings relinks ids. No fit accumulator is
ever reachable from two segments.
"""

import logging
from collections import deque
from typing import Deque, Iterator, List, Optional, Sequence, Tuple, Union

from trackfit.core.models.kinds import MotionKind
from trackfit.core.points import PointSequence
from trackfit.core.segments.segment import Segment
from trackfit.core.validation import ValidationError

logger = logging.getLogger(__name__)


class SegmentArena:
    """Container for the segments of a single point sequence."""

    def __init__(self, points: PointSequence):
        self.points = points
        self._segments: List[Optional[Segment]] = []

    def __len__(self) -> int:
        return sum(1 for s in self._segments if s is not None)

    def __iter__(self) -> Iterator[Tuple[int, Segment]]:
        for segment_id, segment in enumerate(self._segments):
            if segment is not None:
                yield segment_id, segment

    def __getitem__(self, segment_id: int) -> Segment:
        return self.get(segment_id)

    def get(self, segment_id: int) -> Segment:
        if not 0 <= segment_id < len(self._segments) or self._segments[segment_id] is None:
            raise KeyError(f"No segment with id {segment_id}")
        return self._segments[segment_id]

    def add(self, segment: Segment) -> int:
        """Take ownership of ``segment`` and return its id."""
        if segment.points is not self.points:
            raise ValidationError("Segment belongs to a different track")
        self._segments.append(segment)
        return len(self._segments) - 1

    def create(self, kind: MotionKind, lo: int, hi: Optional[int] = None) -> int:
        """Create a fitted segment over ``[lo, hi]``."""
        return self.add(Segment.over(self.points, kind, lo, hi))

    def create_empty(self, kind: MotionKind, i: int) -> int:
        """Create a segment with an empty window at ``i``, ready to grow."""
        return self.add(Segment.empty(self.points, kind, i))

    def remove(self, segment_id: int) -> None:
        """Destroy a segment together with its fit."""
        self.get(segment_id)
        self._segments[segment_id] = None

    def mimic(self, target_id: int, source_id: int) -> None:
        """Overwrite segment ``target_id`` with a copy of ``source_id``."""
        self.get(target_id).mimic(self.get(source_id))

    def adopt(self, ids: Union[Deque[int], Sequence[int]]) -> int:
        """
        Gather a run of same-kind segments under a new parent.

        Ids are consumed from the front of ``ids`` while they share the kind
        of the first one; a deque passed in is left holding the rest. With a
        single segment the parent is a copy of it that replaces it in the
        arena, and with none it is an empty WEIRD placeholder at index -1.

        Returns:
            Id of the new parent segment
        """
        queue = ids if isinstance(ids, deque) else deque(ids)

        if not queue:
            return self.add(Segment(self.points, MotionKind.WEIRD, -1, -1))

        if len(queue) == 1:
            source_id = queue.popleft()
            parent = Segment(self.points, MotionKind.WEIRD, -1, -1)
            parent.mimic(self.get(source_id))
            self.remove(source_id)
            return self.add(parent)

        first = self.get(queue[0])
        children = []
        hi = first.hi
        while queue and self.get(queue[0]).kind is first.kind:
            child_id = queue.popleft()
            children.append(child_id)
            hi = self.get(child_id).hi

        parent = Segment(self.points, first.kind, first.lo, hi, children=children)
        logger.debug(f"Adopted {len(children)} {first.kind.name} segments into [{first.lo}, {hi}]")
        parent_id = self.add(parent)
        try:
            self.validate_children(parent_id)
        except ValidationError:
            self.remove(parent_id)
            raise
        return parent_id

    def children_of(self, segment_id: int) -> List[Segment]:
        segment = self.get(segment_id)
        if segment.children is None:
            return []
        return [self.get(child_id) for child_id in segment.children]

    def validate_children(self, segment_id: int) -> None:
        """
        Check that a parent's children tile its window.

        Consecutive children may be separated only by gap indices, and
        together they must start at the parent's ``lo`` and end at its ``hi``.

        Raises:
            ValidationError: If the children do not tile the parent
        """
        parent = self.get(segment_id)
        children = self.children_of(segment_id)
        if not children:
            return
        if parent.fit is not None:
            raise ValidationError(f"Parent segment {segment_id} must not carry a fit")
        if children[0].lo != parent.lo or children[-1].hi != parent.hi:
            raise ValidationError(
                f"Children span [{children[0].lo}, {children[-1].hi}] but parent is [{parent.lo}, {parent.hi}]")
        for left, right in zip(children, children[1:]):
            if right.lo <= left.hi:
                raise ValidationError(f"Children [{left.lo}, {left.hi}] and [{right.lo}, {right.hi}] overlap")
            if any(self.points.is_present(i) for i in range(left.hi + 1, right.lo)):
                raise ValidationError(f"Tracked positions between children ending at {left.hi} and starting at {right.lo}")

    def roots(self) -> List[int]:
        """Ids of segments that are nobody's child, in order of their windows."""
        adopted = set()
        for _, segment in self:
            if segment.children is not None:
                adopted.update(segment.children)
        ids = [segment_id for segment_id, _ in self if segment_id not in adopted]
        return sorted(ids, key=lambda segment_id: self.get(segment_id).lo)
