"""Rune tracker: unwraps the arm angle across revolutions and filters its speed."""

from __future__ import annotations

import math
from typing import Optional

import numpy as np

from combo import Combo, Rune
from contracts import ImuData, TrackerSnapshot
from contracts.geometry import wrap_deg
from exceptions import InvalidArgumentError
from log_config.logger import get_logger
from track.config import RuneTrackerConfig
from track.kalman import constant_velocity, constant_velocity_noise, make_filter, reseed
from track.tracker import Tracker, TrackerKind, VanishState

logger = get_logger(__name__)

FULL_TURN_DEG = 360.0
_ANGLE_H = np.array([[1.0, 0.0]])


class RuneTracker(Tracker):
    """Angle and angular speed of one rune.

    ``total_angle`` is the arm angle mapped onto (-inf, +inf) using the round
    counter; ``rotated_speed`` is the filtered angular speed in degrees per second.
    """

    kind = TrackerKind.RUNE

    def __init__(self, first: Rune, config: Optional[RuneTrackerConfig] = None) -> None:
        config = config or RuneTrackerConfig()
        super().__init__(first, config.tracker)
        self._config = config
        self._round = 0
        self._total_angle = first.angle
        self._last_seen_angle = first.angle
        self._filter = make_filter(np.array([first.angle, 0.0]), self._initial_covariance(), dim_z=1)
        self._history.appendleft(self._snapshot(first, vanished=False))

    @classmethod
    def make_tracker(cls, first: Rune, config: Optional[RuneTrackerConfig] = None) -> "RuneTracker":
        if first is None:
            raise InvalidArgumentError("RuneTracker needs a first rune observation")
        tracker = cls(first, config)
        logger.info(f"Rune tracker created at angle {first.angle:.1f} deg")
        return tracker

    @property
    def round(self) -> int:
        return self._round

    @property
    def total_angle(self) -> float:
        return self._total_angle

    @property
    def filtered_angle(self) -> float:
        return float(self._filter.x[0])

    @property
    def rotated_speed(self) -> float:
        return float(self._filter.x[1])

    def update(self, combo: Optional[Combo], t_ns: int, imu: Optional[ImuData] = None) -> None:
        if combo is not None and not isinstance(combo, Rune):
            raise InvalidArgumentError(f"RuneTracker expects a Rune, got {type(combo).__name__}")
        dt = self._elapsed(t_ns)
        if combo is None:
            self._vanish_process(t_ns, dt)
            return
        self.update_vanish_state(VanishState.APPEAR)
        self._total_angle = self._calculate_total_angle(combo.angle)
        if self._needs_reseed(t_ns):
            self._reseed_rotate_filter(self._unseen_for(t_ns))
        else:
            self._update_rotate_filter(dt, self._total_angle)
        self._last_seen_angle = self._total_angle
        self._mark_seen(t_ns)
        self._push(combo, self._snapshot(combo, vanished=False))

    def _calculate_total_angle(self, angle: float) -> float:
        """Count revolution crossings against the last filtered angle."""
        last_wrapped = self.filtered_angle - self._round * FULL_TURN_DEG
        delta = angle - last_wrapped
        if delta < -FULL_TURN_DEG / 2:
            self._round += 1
        elif delta > FULL_TURN_DEG / 2:
            self._round -= 1
        return angle + self._round * FULL_TURN_DEG

    def _initial_covariance(self) -> np.ndarray:
        return np.diag([self._config.init_angle_var, self._config.init_speed_var])

    def _predict(self, dt: float) -> None:
        self._filter.predict(
            F=constant_velocity(1, dt), Q=constant_velocity_noise(1, dt, self._config.accel_var)
        )

    def _update_rotate_filter(self, dt: float, total_angle: float) -> None:
        self._predict(dt)
        self._filter.update(
            np.array([total_angle]), R=np.array([[self._config.angle_meas_var]]), H=_ANGLE_H
        )

    def _reseed_rotate_filter(self, gap_s: float) -> None:
        speed = (self._total_angle - self._last_seen_angle) / gap_s
        reseed(self._filter, np.array([self._total_angle, speed]), self._initial_covariance())

    def _vanish_process(self, t_ns: int, dt: float) -> None:
        self.update_vanish_state(VanishState.VANISH)
        self._predict(dt)
        self._total_angle = self.filtered_angle
        self._round = math.floor(self._total_angle / FULL_TURN_DEG)
        last: Rune = self.front()
        synthesized = last.rotated(wrap_deg(self._total_angle), t_ns)
        self._push(synthesized, self._snapshot(synthesized, vanished=True))

    def _snapshot(self, combo: Combo, vanished: bool) -> TrackerSnapshot:
        return TrackerSnapshot(
            t_ns=combo.t_ns,
            angle=self._total_angle,
            center=combo.center,
            rotated_speed=self.rotated_speed,
            vanished=vanished,
        )
