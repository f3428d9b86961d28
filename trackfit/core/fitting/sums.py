"""
Running moment sums shared by every fit primitive.

All sums are taken relative to an origin ``(ox, oy)``. Keeping the origin near
the data (the first point added when ``auto_origin`` is on) keeps the fourth
moments used by the circle fit well conditioned on long tracks.
"""

import logging

logger = logging.getLogger(__name__)


class MomentSums:
    """
    First through fourth moments of a point set, updatable in O(1).

    With ``z = x*x + y*y`` (coordinates relative to the origin) the record
    holds ``n, Sx, Sy, Sxx, Syy, Sxy, Sxz, Syz, Szz``.
    """

    def __init__(self, auto_origin: bool = True):
        self.auto_origin = auto_origin
        self.reset()

    def reset(self, ox: float = 0.0, oy: float = 0.0) -> 'MomentSums':
        """Clear all sums and place the origin at ``(ox, oy)``."""
        self.ox = ox
        self.oy = oy
        self.n = 0
        self.sx = self.sy = 0.0
        self.sxx = self.syy = self.sxy = 0.0
        self.sxz = self.syz = self.szz = 0.0
        return self

    def copy(self) -> 'MomentSums':
        other = MomentSums(self.auto_origin)
        other.__dict__.update(self.__dict__)
        return other

    def add(self, x: float, y: float) -> None:
        if self.n == 0 and self.auto_origin:
            self.reset(x, y)
        x -= self.ox
        y -= self.oy
        z = x * x + y * y
        self.sx += x
        self.sy += y
        self.sxx += x * x
        self.syy += y * y
        self.sxy += x * y
        self.sxz += x * z
        self.syz += y * z
        self.szz += z * z
        self.n += 1

    def remove(self, x: float, y: float) -> None:
        """Undo an earlier ``add`` of the same point (not checked)."""
        x -= self.ox
        y -= self.oy
        z = x * x + y * y
        self.sx -= x
        self.sy -= y
        self.sxx -= x * x
        self.syy -= y * y
        self.sxy -= x * y
        self.sxz -= x * z
        self.syz -= y * z
        self.szz -= z * z
        self.n -= 1

    def move_by(self, dx: float, dy: float) -> 'MomentSums':
        """Re-express every sum relative to the origin shifted by ``(dx, dy)``."""
        n = self.n
        sx, sy = self.sx, self.sy
        sxx, syy, sxy = self.sxx, self.syy, self.sxy
        sxz, syz = self.sxz, self.syz
        dz = dx * dx + dy * dy

        self.szz += (-4 * (dx * sxz + dy * syz)
                     + (4 * dx * dx + 2 * dz) * sxx
                     + (4 * dy * dy + 2 * dz) * syy
                     + 8 * dx * dy * sxy
                     - 4 * dz * (dx * sx + dy * sy)
                     + n * dz * dz)
        self.syz += -dy * (3 * syy + sxx + n * dz) + 2 * dx * (dy * sx - sxy) + (2 * dy * dy + dz) * sy
        self.sxz += -dx * (3 * sxx + syy + n * dz) + 2 * dy * (dx * sy - sxy) + (2 * dx * dx + dz) * sx
        self.sxy += n * dx * dy - dy * sx - dx * sy
        self.syy += n * dy * dy - 2 * dy * sy
        self.sxx += n * dx * dx - 2 * dx * sx
        self.sy -= n * dy
        self.sx -= n * dx
        self.ox += dx
        self.oy += dy
        return self

    def move_to(self, ox: float, oy: float) -> 'MomentSums':
        return self.move_by(ox - self.ox, oy - self.oy)

    def centered(self) -> 'MomentSums':
        """Copy of these sums with the origin moved to the centroid."""
        result = self.copy()
        if self.n > 0:
            result.move_by(self.sx / self.n, self.sy / self.n)
        return result

    def join(self, other: 'MomentSums') -> 'MomentSums':
        """Add another point set's moments into this one."""
        if other.ox != self.ox or other.oy != self.oy:
            if self.n == 0:
                self.reset(other.ox, other.oy)
            else:
                other = other.copy().move_to(self.ox, self.oy)
        self.sx += other.sx
        self.sy += other.sy
        self.sxx += other.sxx
        self.syy += other.syy
        self.sxy += other.sxy
        self.sxz += other.sxz
        self.syz += other.syz
        self.szz += other.szz
        self.n += other.n
        return self

    def __repr__(self) -> str:
        return (f"MomentSums(n={self.n}, origin=({self.ox:.3f}, {self.oy:.3f}), "
                f"Sx={self.sx:.4g}, Sy={self.sy:.4g})")
