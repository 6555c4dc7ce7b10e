"""Shared data contracts for the perception core."""

from .types import (
    CameraModel,
    ImuData,
    Point,
    RobotType,
    TrackerSnapshot,
    Vec3,
)

__all__ = [
    "CameraModel",
    "ImuData",
    "Point",
    "RobotType",
    "TrackerSnapshot",
    "Vec3",
]
