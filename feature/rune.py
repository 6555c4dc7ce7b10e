"""Rune features: the lit target pad on an arm and the hub it spins around."""

from __future__ import annotations

import math
from dataclasses import dataclass

from contracts import Point
from contracts.geometry import wrap_deg
from feature.feature import Feature


def _square_corners(center: Point, width: float, height: float) -> tuple[Point, ...]:
    hw, hh = width / 2.0, height / 2.0
    x, y = center
    return ((x - hw, y + hh), (x - hw, y - hh), (x + hw, y - hh), (x + hw, y + hh))


@dataclass(frozen=True, eq=False)
class RuneTarget(Feature):
    @classmethod
    def from_geometry(cls, center: Point, radius: float) -> "RuneTarget":
        size = 2.0 * radius
        return cls(
            center=(float(center[0]), float(center[1])),
            width=size,
            height=size,
            corners=_square_corners(center, size, size),
        )

    def moved_to(self, center: Point) -> "RuneTarget":
        return self.moved_by(center[0] - self.center[0], center[1] - self.center[1])


@dataclass(frozen=True, eq=False)
class RuneCenter(Feature):
    @classmethod
    def from_geometry(cls, center: Point, size: float) -> "RuneCenter":
        return cls(
            center=(float(center[0]), float(center[1])),
            width=float(size),
            height=float(size),
            corners=_square_corners(center, size, size),
        )


def arm_angle(target: Point, hub: Point) -> float:
    """Direction from hub to target in degrees, counter-clockwise on screen, in [0, 360)."""
    angle = math.degrees(math.atan2(-(target[1] - hub[1]), target[0] - hub[0]))
    return wrap_deg(angle)
