"""Synthetic rune and armor sequences for tests."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from combo import Armor, Rune
from contracts import ImuData, RobotType
from feature import LightBlob, RuneCenter, RuneTarget


@dataclass(frozen=True)
class SimConfig:
    dt_s: float = 0.01
    steps: int = 100
    noise: float = 0.0
    seed: int = 7


def make_rune(angle_deg: float, t_ns: int, hub: Tuple[float, float] = (640.0, 360.0), radius: float = 150.0) -> Rune:
    rad = math.radians(angle_deg)
    target_center = (hub[0] + radius * math.cos(rad), hub[1] - radius * math.sin(rad))
    return Rune.make_combo(
        RuneTarget.from_geometry(target_center, 30.0),
        RuneCenter.from_geometry(hub, 20.0),
        t_ns,
    )


def simulate_rune(
    config: SimConfig, speed_deg_s: float = 60.0, start_deg: float = 0.0
) -> List[Rune]:
    """Rune spinning at constant speed, with angle noise in degrees."""
    rng = np.random.default_rng(config.seed)
    runes: List[Rune] = []
    for i in range(config.steps):
        t_s = i * config.dt_s
        angle = start_deg + speed_deg_s * t_s
        if config.noise:
            angle += rng.normal(0.0, config.noise)
        runes.append(make_rune(angle, int(round(t_s * 1e9))))
    return runes


def make_armor(
    translation: Tuple[float, float, float],
    heading_rad: float,
    t_ns: int,
    type: RobotType = RobotType.UNKNOWN,
    center_px: Tuple[float, float] = (640.0, 360.0),
) -> Armor:
    """Armor whose plate normal turns ``heading_rad`` about the camera's vertical axis."""
    left = LightBlob.from_geometry((center_px[0] - 40.0, center_px[1]), 6.0, 24.0)
    right = LightBlob.from_geometry((center_px[0] + 40.0, center_px[1]), 6.0, 24.0)
    return Armor(
        features=(left, right),
        center=center_px,
        angle=0.0,
        width=80.0,
        height=24.0,
        corners=(left.corners[1], left.corners[0], right.corners[0], right.corners[1]),
        type=type,
        t_ns=int(t_ns),
        translation=tuple(float(v) for v in translation),
        rotation=(0.0, float(heading_rad), 0.0),
    )


def simulate_armor(
    config: SimConfig,
    spin_rad_s: float = 2.0,
    gimbal_yaw_speed_deg_s: float = 0.0,
    distance_m: float = 3.0,
    type: RobotType = RobotType.INFANTRY_3,
    types: Optional[List[RobotType]] = None,
) -> List[Tuple[Armor, ImuData]]:
    """Plate spinning in place in front of a gimbal that may itself be turning.

    Observations are expressed in the camera frame, so the gimbal yaw is removed
    from the world heading and from the world position.
    """
    rng = np.random.default_rng(config.seed)
    frames: List[Tuple[Armor, ImuData]] = []
    for i in range(config.steps):
        t_s = i * config.dt_s
        t_ns = int(round(t_s * 1e9))
        gimbal_yaw = gimbal_yaw_speed_deg_s * t_s
        world_heading = spin_rad_s * t_s
        if config.noise:
            world_heading += rng.normal(0.0, config.noise)
        camera_heading = world_heading - math.radians(gimbal_yaw)
        yaw = math.radians(gimbal_yaw)
        # world point straight ahead of the start pose, seen from the turned gimbal
        translation = (-math.sin(yaw) * distance_m, 0.0, math.cos(yaw) * distance_m)
        label = types[i % len(types)] if types else type
        armor = make_armor(translation, camera_heading, t_ns, label)
        imu = ImuData(yaw=gimbal_yaw, yaw_speed=gimbal_yaw_speed_deg_s, t_ns=t_ns)
        frames.append((armor, imu))
    return frames
