"""Single observed geometric primitives."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Tuple

from contracts import Point, RobotType


@dataclass(frozen=True, eq=False)
class Feature:
    """Immutable per-frame geometry.

    Features compare by identity: two blobs with identical geometry are still
    different observations.
    """

    center: Point
    width: float
    height: float
    angle: float = 0.0
    corners: Tuple[Point, ...] = ()
    type: RobotType = RobotType.UNKNOWN

    @property
    def area(self) -> float:
        return self.width * self.height

    def clone(self) -> "Feature":
        return replace(
            self,
            center=(float(self.center[0]), float(self.center[1])),
            corners=tuple((float(x), float(y)) for x, y in self.corners),
        )

    def moved_by(self, dx: float, dy: float) -> "Feature":
        """Copy translated in the image by ``(dx, dy)`` pixels."""
        return replace(
            self,
            center=(float(self.center[0] + dx), float(self.center[1] + dy)),
            corners=tuple((float(x + dx), float(y + dy)) for x, y in self.corners),
        )
