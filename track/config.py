from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TrackerConfig:
    history_depth: int = 32
    max_vanish_num: int = 10
    min_dt_s: float = 1e-3
    reseed_gap_s: float = 0.5


@dataclass(frozen=True)
class RuneTrackerConfig:
    tracker: TrackerConfig = field(default_factory=TrackerConfig)
    angle_meas_var: float = 1.0
    accel_var: float = 400.0
    init_angle_var: float = 1.0
    init_speed_var: float = 1e4


@dataclass(frozen=True)
class ArmorTrackerConfig:
    tracker: TrackerConfig = field(default_factory=TrackerConfig)
    type_queue_depth: int = 5
    gyro_fusion_weight: float = 0.5
    normal_meas_var: float = 1e-2
    spin_meas_var: float = 1e-1
    normal_accel_var: float = 10.0
    center_meas_var: float = 1e-3
    center_accel_var: float = 4.0
    pose_meas_var: float = 1e-2
    pose_process_var: float = 1e-2
