"""Rune combos: one spinning arm identified by its target pad and hub."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

from combo.combo import Combo
from contracts import RobotType
from contracts.geometry import distance, wrap_deg
from feature.rune import RuneCenter, RuneTarget, arm_angle


@dataclass(frozen=True, eq=False)
class Rune(Combo):
    """``angle`` is the arm direction in degrees within [0, 360)."""

    radius: float = 0.0

    @property
    def target(self) -> RuneTarget:
        return self.at(0)

    @property
    def hub(self) -> RuneCenter:
        return self.at(1)

    @classmethod
    def make_combo(cls, target: RuneTarget, hub: RuneCenter, t_ns: int) -> "Rune":
        return cls(
            features=(target, hub),
            center=target.center,
            angle=arm_angle(target.center, hub.center),
            width=target.width,
            height=target.height,
            corners=target.corners,
            type=RobotType.UNKNOWN,
            t_ns=int(t_ns),
            radius=distance(target.center, hub.center),
        )

    def rotated(self, angle: float, t_ns: int) -> "Rune":
        """Copy of this rune with the arm turned to ``angle`` at time ``t_ns``."""
        angle = wrap_deg(angle)
        hub = self.hub.clone()
        rad = math.radians(angle)
        new_center = (
            hub.center[0] + self.radius * math.cos(rad),
            hub.center[1] - self.radius * math.sin(rad),
        )
        target = self.target.moved_to(new_center)
        return replace(
            self,
            features=(target, hub),
            center=target.center,
            angle=angle,
            corners=target.corners,
            t_ns=int(t_ns),
        )
