"""Core data contracts shared by features, combos, detectors and trackers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

import numpy as np

Point = Tuple[float, float]
Vec3 = Tuple[float, float, float]


class RobotType(str, Enum):
    UNKNOWN = "UNKNOWN"
    HERO = "HERO"
    ENGINEER = "ENGINEER"
    INFANTRY_3 = "INFANTRY_3"
    INFANTRY_4 = "INFANTRY_4"
    INFANTRY_5 = "INFANTRY_5"
    OUTPOST = "OUTPOST"
    BASE = "BASE"
    SENTRY = "SENTRY"


@dataclass(frozen=True)
class ImuData:
    """Gimbal attitude (degrees) and angular rate (degrees / second) for one frame."""

    yaw: float = 0.0
    pitch: float = 0.0
    yaw_speed: float = 0.0
    pitch_speed: float = 0.0
    t_ns: int = 0


@dataclass(frozen=True)
class CameraModel:
    camera_matrix: np.ndarray
    dist_coeffs: np.ndarray = field(default_factory=lambda: np.zeros(5, dtype=float))

    @classmethod
    def from_intrinsics(
        cls,
        fx: float,
        fy: float,
        cx: float,
        cy: float,
        distortion: Optional[Tuple[float, float, float, float, float]] = None,
    ) -> "CameraModel":
        matrix = np.array([[fx, 0.0, cx], [0.0, fy, cy], [0.0, 0.0, 1.0]], dtype=float)
        coeffs = np.zeros(5, dtype=float) if distortion is None else np.asarray(distortion, dtype=float)
        return cls(camera_matrix=matrix, dist_coeffs=coeffs)

    def project(self, xyz: np.ndarray) -> np.ndarray:
        x, y, z = np.asarray(xyz, dtype=float).flatten()
        if z == 0:
            z = 1e-6
        fx, fy = self.camera_matrix[0, 0], self.camera_matrix[1, 1]
        cx, cy = self.camera_matrix[0, 2], self.camera_matrix[1, 2]
        return np.array([fx * x / z + cx, fy * y / z + cy], dtype=float)


@dataclass(frozen=True)
class TrackerSnapshot:
    t_ns: int
    angle: float
    center: Point
    rotated_speed: float
    center3d: Optional[Vec3] = None
    vanished: bool = False
