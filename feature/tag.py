"""Four-corner planar markers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from contracts import Point, RobotType
from contracts.geometry import distance
from exceptions import FeatureError
from feature.feature import Feature


@dataclass(frozen=True, eq=False)
class Tag(Feature):
    @classmethod
    def from_corners(cls, corners: Sequence[Point], type: RobotType = RobotType.UNKNOWN) -> "Tag":
        if len(corners) != 4:
            raise FeatureError(
                f'the size of the argument "corners" should be 4, but now it is {len(corners)}.'
            )
        points = tuple((float(x), float(y)) for x, y in corners)
        cx = sum(p[0] for p in points) / 4.0
        cy = sum(p[1] for p in points) / 4.0
        length1 = distance(points[0], points[1])
        length2 = distance(points[1], points[2])
        width = max(length1, length2)
        height = length2 if width == length1 else length1
        return cls(center=(cx, cy), width=width, height=height, corners=points, type=type)
