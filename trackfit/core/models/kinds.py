"""
Motion kinds a segment can be classified as.
"""

from enum import Enum

from trackfit.core.validation import ValidationError


class MotionKind(Enum):
    """
    Qualitative shape of motion over a segment.

    The declaration order matters: ``Segment.id`` reports a kind's position
    relative to DWELL.
    """
    WEIRD = 0
    DWELL = 1
    CLUTTER = 2
    STRAIGHT = 3
    ARC = 4

    @property
    def is_line(self) -> bool:
        """Only straight and arc segments have a direction of travel."""
        return self in (MotionKind.STRAIGHT, MotionKind.ARC)

    @property
    def has_fit(self) -> bool:
        return self not in (MotionKind.WEIRD, MotionKind.CLUTTER)

    @classmethod
    def from_name(cls, name) -> 'MotionKind':
        """
        Look up a kind by (case-insensitive) name, passing kinds through.

        Raises:
            ValidationError: If the name is unknown
        """
        if isinstance(name, cls):
            return name
        try:
            return cls[str(name).upper()]
        except KeyError as e:
            raise ValidationError(f"Unknown motion kind: {name!r}") from e


ZERO_KIND = MotionKind.DWELL
