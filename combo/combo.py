"""Compound targets built from one or more features."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional, Tuple

from contracts import Point, RobotType, Vec3
from exceptions import ComboError
from feature import Feature


@dataclass(frozen=True, eq=False)
class Combo:
    """Canonical pose of a compound target.

    A combo owns its features exclusively; ``clone`` deep-copies them so a
    tracker can keep an observation across frames without sharing it.
    """

    features: Tuple[Feature, ...]
    center: Point
    angle: float
    width: float
    height: float
    corners: Tuple[Point, ...]
    type: RobotType
    t_ns: int
    translation: Optional[Vec3] = None
    rotation: Optional[Vec3] = None

    def __post_init__(self) -> None:
        if not self.features:
            raise ComboError("a combo needs at least one feature")

    def at(self, index: int) -> Feature:
        return self.features[index]

    def clone(self, t_ns: int) -> "Combo":
        return replace(self, features=tuple(f.clone() for f in self.features), t_ns=int(t_ns))

    def moved_by(self, dx: float, dy: float, t_ns: int) -> "Combo":
        """Copy at time ``t_ns`` translated in the image by ``(dx, dy)`` pixels."""
        return replace(
            self,
            features=tuple(f.moved_by(dx, dy) for f in self.features),
            center=(float(self.center[0] + dx), float(self.center[1] + dy)),
            corners=tuple((float(x + dx), float(y + dy)) for x, y in self.corners),
            t_ns=int(t_ns),
        )

    def with_pose(self, **changes: Any) -> "Combo":
        return replace(self, **changes)


@dataclass(frozen=True, eq=False)
class DefaultCombo(Combo):
    @classmethod
    def from_feature(cls, feature: Feature, t_ns: int) -> "DefaultCombo":
        return cls(
            features=(feature,),
            center=feature.center,
            angle=feature.angle,
            width=feature.width,
            height=feature.height,
            corners=feature.corners,
            type=feature.type,
            t_ns=int(t_ns),
        )
