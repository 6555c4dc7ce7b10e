"""Planar and rotational geometry helpers shared across features, combos and trackers."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from contracts.types import Point


def distance(a: Point, b: Point) -> float:
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    return (dx * dx + dy * dy) ** 0.5


def point_in_polygon(point: Point, polygon: Sequence[Point]) -> bool:
    if len(polygon) < 3:
        return False
    x, y = point
    inside = False
    j = len(polygon) - 1
    for i, (xi, yi) in enumerate(polygon):
        xj, yj = polygon[j]
        intersects = (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi + 1e-9) + xi
        if intersects:
            inside = not inside
        j = i
    return inside


def axis_endpoints(center: Point, length: float, tilt_deg: float) -> tuple[Point, Point]:
    """Return (top, bottom) end points of a segment tilted from vertical (image y down)."""
    rad = math.radians(tilt_deg)
    dx = math.sin(rad) * length / 2.0
    dy = math.cos(rad) * length / 2.0
    top = (center[0] + dx, center[1] - dy)
    bottom = (center[0] - dx, center[1] + dy)
    return top, bottom


def wrap_deg(angle: float) -> float:
    """Map an angle into [0, 360)."""
    wrapped = math.fmod(angle, 360.0)
    if wrapped < 0:
        wrapped += 360.0
    if wrapped >= 360.0:
        wrapped -= 360.0
    return wrapped


def shortest_delta_deg(from_deg: float, to_deg: float) -> float:
    """Signed shortest-path difference in (-180, 180]."""
    delta = wrap_deg(to_deg - from_deg)
    return delta - 360.0 if delta > 180.0 else delta


def rotation_matrix(rvec: Sequence[float]) -> np.ndarray:
    """Rodrigues rotation vector to a 3x3 matrix."""
    import cv2

    matrix, _ = cv2.Rodrigues(np.asarray(rvec, dtype=np.float64).reshape(3, 1))
    return matrix


def rotation_vector(matrix: np.ndarray) -> tuple[float, float, float]:
    """3x3 rotation matrix to a Rodrigues rotation vector."""
    import cv2

    rvec, _ = cv2.Rodrigues(np.asarray(matrix, dtype=np.float64))
    return tuple(float(v) for v in rvec.flatten())


def matrix_to_quaternion(matrix: np.ndarray) -> np.ndarray:
    """Rotation matrix to a unit quaternion (w, x, y, z) with w >= 0."""
    m = np.asarray(matrix, dtype=np.float64)
    trace = m[0, 0] + m[1, 1] + m[2, 2]
    if trace > 0:
        s = 2.0 * math.sqrt(1.0 + trace)
        q = np.array([s / 4.0, (m[2, 1] - m[1, 2]) / s, (m[0, 2] - m[2, 0]) / s, (m[1, 0] - m[0, 1]) / s])
    elif m[0, 0] > m[1, 1] and m[0, 0] > m[2, 2]:
        s = 2.0 * math.sqrt(1.0 + m[0, 0] - m[1, 1] - m[2, 2])
        q = np.array([(m[2, 1] - m[1, 2]) / s, s / 4.0, (m[0, 1] + m[1, 0]) / s, (m[0, 2] + m[2, 0]) / s])
    elif m[1, 1] > m[2, 2]:
        s = 2.0 * math.sqrt(1.0 + m[1, 1] - m[0, 0] - m[2, 2])
        q = np.array([(m[0, 2] - m[2, 0]) / s, (m[0, 1] + m[1, 0]) / s, s / 4.0, (m[1, 2] + m[2, 1]) / s])
    else:
        s = 2.0 * math.sqrt(1.0 + m[2, 2] - m[0, 0] - m[1, 1])
        q = np.array([(m[1, 0] - m[0, 1]) / s, (m[0, 2] + m[2, 0]) / s, (m[1, 2] + m[2, 1]) / s, s / 4.0])
    if q[0] < 0:
        q = -q
    return q / np.linalg.norm(q)


def rvec_to_quaternion(rvec: Sequence[float]) -> np.ndarray:
    """Rodrigues rotation vector to a unit quaternion (w, x, y, z)."""
    return matrix_to_quaternion(rotation_matrix(rvec))


def yaw_pitch_matrix(yaw_deg: float, pitch_deg: float) -> np.ndarray:
    """Camera-to-world rotation for a gimbal (camera axes: x right, y down, z forward).

    Yaw turns about the vertical (y) axis, pitch about the horizontal (x) axis.
    """
    yaw = math.radians(yaw_deg)
    pitch = math.radians(pitch_deg)
    r_yaw = np.array(
        [[math.cos(yaw), 0.0, math.sin(yaw)], [0.0, 1.0, 0.0], [-math.sin(yaw), 0.0, math.cos(yaw)]]
    )
    r_pitch = np.array(
        [[1.0, 0.0, 0.0], [0.0, math.cos(pitch), -math.sin(pitch)], [0.0, math.sin(pitch), math.cos(pitch)]]
    )
    return r_yaw @ r_pitch
