"""Armor tracker: fuses plate observations with gimbal IMU data.

Three independent filters are advanced on every update with the true elapsed
time:

* motion filter ``[nx, nz, vnx, vnz]`` over the horizontal plate normal in the
  world frame; its measured rates come from the fused spin rate,
* center filter ``[x, y, z, vx, vy, vz]`` over the plate center (world frame),
* pose filter ``[w, x, y, z]`` over the plate orientation quaternion.

After a gap longer than ``reseed_gap_s`` the filters restart from the new
observation instead of extrapolating stale velocities across the gap.
"""

from __future__ import annotations

import math
from collections import Counter, deque
from typing import Deque, Optional, Tuple

import numpy as np

from combo import Armor, Combo
from contracts import CameraModel, ImuData, RobotType, TrackerSnapshot
from contracts.geometry import (
    rotation_matrix,
    rotation_vector,
    rvec_to_quaternion,
    shortest_delta_deg,
    yaw_pitch_matrix,
)
from exceptions import InvalidArgumentError
from log_config.logger import get_logger
from track.config import ArmorTrackerConfig
from track.kalman import constant_velocity, constant_velocity_noise, make_filter, reseed
from track.tracker import Tracker, TrackerKind, VanishState

logger = get_logger(__name__)

_CENTER_H = np.hstack((np.eye(3), np.zeros((3, 3))))


def _heading(normal: Tuple[float, float]) -> float:
    return math.atan2(normal[0], normal[1])


def _wrap_pi(angle: float) -> float:
    return (angle + math.pi) % (2 * math.pi) - math.pi


def majority_type(types: Deque[RobotType]) -> RobotType:
    """Most frequent label; ties go to the label seen most recently."""
    if not types:
        return RobotType.UNKNOWN
    counts = Counter(types)
    best = max(counts.values())
    for label in reversed(types):
        if counts[label] == best:
            return label
    return RobotType.UNKNOWN


class ArmorTracker(Tracker):
    kind = TrackerKind.ARMOR

    def __init__(
        self,
        first: Armor,
        imu: Optional[ImuData] = None,
        config: Optional[ArmorTrackerConfig] = None,
        camera: Optional[CameraModel] = None,
    ) -> None:
        _require_pose(first)
        config = config or ArmorTrackerConfig()
        super().__init__(first, config.tracker)
        self._config = config
        self._camera = camera
        imu = imu or ImuData()
        self._last_imu = imu
        self._last_armor = first
        self._last_world_center = self._to_world(first.translation, imu)
        self._types: Deque[RobotType] = deque(maxlen=config.type_queue_depth)
        self._types.append(first.type)

        self._motion_filter = make_filter(
            self._motion_state(first, imu, 0.0), self._motion_covariance(), dim_z=4
        )
        self._center3d_filter = make_filter(
            np.concatenate((self._last_world_center, np.zeros(3))), self._center_covariance(), dim_z=3
        )
        self._pose_filter = make_filter(rvec_to_quaternion(first.rotation), self._pose_covariance(), dim_z=4)
        self._pose = (float(self._motion_filter.x[0]), float(self._motion_filter.x[1]))
        self._rotspeed = 0.0
        self._history.appendleft(self._snapshot(first, vanished=False))

    @classmethod
    def make_tracker(
        cls,
        first: Armor,
        imu: Optional[ImuData] = None,
        config: Optional[ArmorTrackerConfig] = None,
        camera: Optional[CameraModel] = None,
    ) -> "ArmorTracker":
        if first is None:
            raise InvalidArgumentError("ArmorTracker needs a first armor observation")
        tracker = cls(first, imu, config, camera)
        logger.info(f"Armor tracker created at {first.center} type={first.type.value}")
        return tracker

    @property
    def pose(self) -> Tuple[float, float]:
        """Filtered horizontal plate normal (world frame, unit length)."""
        return self._pose

    @property
    def rotated_speed(self) -> float:
        """Filtered spin rate about the vertical axis (rad/s, positive as heading grows)."""
        return self._rotspeed

    @property
    def center3d(self) -> Tuple[float, float, float]:
        return tuple(float(v) for v in self._center3d_filter.x[:3])

    @property
    def velocity3d(self) -> Tuple[float, float, float]:
        return tuple(float(v) for v in self._center3d_filter.x[3:])

    @property
    def orientation(self) -> Tuple[float, float, float, float]:
        q = self._pose_filter.x
        norm = float(np.linalg.norm(q)) or 1.0
        return tuple(float(v) / norm for v in q)

    @property
    def type(self) -> RobotType:
        return majority_type(self._types)

    def update(self, combo: Optional[Combo], t_ns: int, imu: Optional[ImuData] = None) -> None:
        if combo is not None:
            _require_pose(combo)
        imu = imu or ImuData()
        dt = self._elapsed(t_ns)
        if combo is None:
            self.update_vanish_state(VanishState.VANISH)
            self._vanish_process(t_ns, dt, imu)
            return
        self.update_vanish_state(VanishState.APPEAR)
        self._update_type(combo.type)
        span = self._unseen_for(t_ns)
        omega = self._fused_spin_rate(combo.pose, imu, span)
        if self._needs_reseed(t_ns):
            self._reseed_filters(combo, imu, omega, span)
        else:
            self._update_motion_filter(combo, imu, omega, dt)
            self._update_position_filter(combo, imu, dt)
            self._update_pose_filter(combo, dt)
        self._refresh_motion_state()
        self._last_imu = imu
        self._last_armor = combo
        self._last_world_center = self._to_world(combo.translation, imu)
        self._mark_seen(t_ns)
        self._push(combo, self._snapshot(combo, vanished=False))

    def _update_type(self, type: RobotType) -> None:
        self._types.append(type)

    def _fused_spin_rate(self, camera_normal: Tuple[float, float], imu: ImuData, span: float) -> float:
        """Image-relative turn plus gimbal turn over the time since the last sighting.

        The gimbal part blends the attitude difference with the integrated rate,
        which softens the skew between image capture and IMU sampling.
        """
        image_delta = _wrap_pi(_heading(camera_normal) - _heading(self._last_armor.pose))
        attitude_delta = math.radians(shortest_delta_deg(self._last_imu.yaw, imu.yaw))
        rate_delta = math.radians(imu.yaw_speed) * span
        alpha = self._config.gyro_fusion_weight
        gimbal_delta = alpha * attitude_delta + (1.0 - alpha) * rate_delta
        return (image_delta + gimbal_delta) / span

    @staticmethod
    def _motion_state(armor: Armor, imu: ImuData, omega: float) -> np.ndarray:
        heading = _heading(armor.pose) + math.radians(imu.yaw)
        nx, nz = math.sin(heading), math.cos(heading)
        return np.array([nx, nz, omega * nz, -omega * nx])

    def _motion_covariance(self) -> np.ndarray:
        config = self._config
        return np.diag([config.normal_meas_var] * 2 + [config.spin_meas_var] * 2)

    def _center_covariance(self) -> np.ndarray:
        return np.diag([self._config.center_meas_var] * 3 + [1.0] * 3)

    def _pose_covariance(self) -> np.ndarray:
        return np.eye(4) * self._config.pose_meas_var

    def _update_motion_filter(self, armor: Armor, imu: ImuData, omega: float, dt: float) -> None:
        self._predict_motion(dt)
        self._motion_filter.update(
            self._motion_state(armor, imu, omega), R=self._motion_covariance(), H=np.eye(4)
        )

    def _update_position_filter(self, armor: Armor, imu: ImuData, dt: float) -> None:
        self._predict_position(dt)
        self._center3d_filter.update(
            self._to_world(armor.translation, imu),
            R=np.eye(3) * self._config.center_meas_var,
            H=_CENTER_H,
        )

    def _update_pose_filter(self, armor: Armor, dt: float) -> None:
        q = self._continuous_quaternion(armor)
        self._predict_pose(dt)
        self._pose_filter.update(q, R=np.eye(4) * self._config.pose_meas_var, H=np.eye(4))

    def _reseed_filters(self, armor: Armor, imu: ImuData, omega: float, gap_s: float) -> None:
        world_center = self._to_world(armor.translation, imu)
        velocity = (world_center - self._last_world_center) / gap_s
        reseed(self._motion_filter, self._motion_state(armor, imu, omega), self._motion_covariance())
        reseed(self._center3d_filter, np.concatenate((world_center, velocity)), self._center_covariance())
        reseed(self._pose_filter, self._continuous_quaternion(armor), self._pose_covariance())

    def _continuous_quaternion(self, armor: Armor) -> np.ndarray:
        q = rvec_to_quaternion(armor.rotation)
        # q and -q are the same rotation; stay on the filter's hemisphere
        if float(np.dot(q, self._pose_filter.x)) < 0:
            q = -q
        return q

    def _predict_motion(self, dt: float) -> None:
        self._motion_filter.predict(
            F=constant_velocity(2, dt), Q=constant_velocity_noise(2, dt, self._config.normal_accel_var)
        )

    def _predict_position(self, dt: float) -> None:
        self._center3d_filter.predict(
            F=constant_velocity(3, dt), Q=constant_velocity_noise(3, dt, self._config.center_accel_var)
        )

    def _predict_pose(self, dt: float) -> None:
        self._pose_filter.predict(F=np.eye(4), Q=np.eye(4) * self._config.pose_process_var * dt)

    def _refresh_motion_state(self) -> None:
        nx, nz, vnx, vnz = (float(v) for v in self._motion_filter.x)
        norm_sq = nx * nx + nz * nz
        if norm_sq < 1e-12:
            return
        norm = math.sqrt(norm_sq)
        self._pose = (nx / norm, nz / norm)
        self._rotspeed = (nz * vnx - nx * vnz) / norm_sq

    def _vanish_process(self, t_ns: int, dt: float, imu: ImuData) -> None:
        self._predict_motion(dt)
        self._predict_position(dt)
        self._predict_pose(dt)
        self._refresh_motion_state()
        synthesized = self._synthesize(t_ns, imu)
        self._push(synthesized, self._snapshot(synthesized, vanished=True))

    def _synthesize(self, t_ns: int, imu: ImuData) -> Armor:
        """Last real armor moved to the predicted center and turned to the predicted heading."""
        last = self._last_armor
        camera_center = yaw_pitch_matrix(imu.yaw, imu.pitch).T @ self._center3d_filter.x[:3]
        turn = _wrap_pi(_heading(self._pose) - math.radians(imu.yaw) - _heading(last.pose))
        rotation = rotation_vector(yaw_pitch_matrix(math.degrees(turn), 0.0) @ rotation_matrix(last.rotation))
        dx = dy = 0.0
        if self._camera is not None:
            shift = self._camera.project(camera_center) - self._camera.project(np.asarray(last.translation))
            dx, dy = float(shift[0]), float(shift[1])
        moved = last.moved_by(dx, dy, t_ns)
        return moved.with_pose(translation=tuple(float(v) for v in camera_center), rotation=rotation)

    @staticmethod
    def _to_world(translation, imu: ImuData) -> np.ndarray:
        return yaw_pitch_matrix(imu.yaw, imu.pitch) @ np.asarray(translation, dtype=float)

    def _snapshot(self, combo: Combo, vanished: bool) -> TrackerSnapshot:
        return TrackerSnapshot(
            t_ns=combo.t_ns,
            angle=math.degrees(_heading(self._pose)),
            center=combo.center,
            rotated_speed=self._rotspeed,
            center3d=self.center3d,
            vanished=vanished,
        )


def _require_pose(combo: Combo) -> None:
    if combo is None:
        raise InvalidArgumentError("ArmorTracker needs a first armor observation")
    if not isinstance(combo, Armor) or combo.translation is None or combo.rotation is None:
        raise InvalidArgumentError("ArmorTracker needs armors with a solved 3D pose (translation and rotation)")
