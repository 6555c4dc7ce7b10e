"""Armor plates: two light blobs forming a rectangular target."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Optional, Tuple

import numpy as np

from combo.combo import Combo
from contracts import CameraModel, RobotType
from contracts.geometry import axis_endpoints, distance, point_in_polygon, rotation_matrix
from feature import Feature
from log_config.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ArmorConfig:
    max_length_ratio: float = 1.6
    max_tilt_diff_deg: float = 12.0
    min_spacing_ratio: float = 1.0
    max_spacing_ratio: float = 5.0
    big_spacing_ratio: float = 3.2
    max_line_tilt_deg: float = 25.0
    small_width_m: float = 0.135
    big_width_m: float = 0.230
    light_height_m: float = 0.056


@dataclass(frozen=True, eq=False)
class Armor(Combo):
    error: float = 0.0
    spacing_ratio: float = 0.0
    is_big: bool = False

    @property
    def left(self) -> Feature:
        return self.at(0)

    @property
    def right(self) -> Feature:
        return self.at(1)

    @property
    def pose(self) -> Optional[Tuple[float, float]]:
        """Horizontal components (x, z) of the plate normal in the camera frame."""
        if self.rotation is None:
            return None
        normal = rotation_matrix(self.rotation) @ np.array([0.0, 0.0, 1.0])
        norm = math.hypot(normal[0], normal[2])
        if norm < 1e-9:
            return (0.0, 1.0)
        return (float(normal[0] / norm), float(normal[2] / norm))

    def contains(self, feature: Feature) -> bool:
        """Whether the feature's center lies inside the plate's corner polygon."""
        return point_in_polygon(feature.center, self.corners)

    def with_type(self, type: RobotType) -> "Armor":
        return replace(self, type=type)

    @classmethod
    def make_combo(
        cls,
        left: Feature,
        right: Feature,
        t_ns: int,
        config: Optional[ArmorConfig] = None,
        camera: Optional[CameraModel] = None,
    ) -> Optional["Armor"]:
        """Pair two light blobs, or return None if they do not form a plate."""
        config = config or ArmorConfig()
        if left is right:
            return None
        if left.center[0] > right.center[0]:
            left, right = right, left

        short, long = sorted((left.height, right.height))
        if short <= 0:
            return None
        length_ratio = long / short
        if length_ratio > config.max_length_ratio:
            return None
        tilt_diff = abs(left.angle - right.angle)
        if tilt_diff > config.max_tilt_diff_deg:
            return None
        mean_length = (left.height + right.height) / 2.0
        spacing = distance(left.center, right.center)
        spacing_ratio = spacing / mean_length
        if not config.min_spacing_ratio <= spacing_ratio <= config.max_spacing_ratio:
            return None
        dx = right.center[0] - left.center[0]
        dy = right.center[1] - left.center[1]
        line_tilt = math.degrees(math.atan2(dy, dx))
        if abs(line_tilt) > config.max_line_tilt_deg:
            return None

        error = (
            (length_ratio - 1.0) / max(config.max_length_ratio - 1.0, 1e-6)
            + tilt_diff / config.max_tilt_diff_deg
            + abs(line_tilt) / config.max_line_tilt_deg
        )
        left_top, left_bottom = axis_endpoints(left.center, left.height, left.angle)
        right_top, right_bottom = axis_endpoints(right.center, right.height, right.angle)
        corners = (left_bottom, left_top, right_top, right_bottom)
        is_big = spacing_ratio > config.big_spacing_ratio

        translation = rotation = None
        if camera is not None:
            translation, rotation = _solve_pose(corners, is_big, config, camera)

        return cls(
            features=(left, right),
            center=((left.center[0] + right.center[0]) / 2.0, (left.center[1] + right.center[1]) / 2.0),
            angle=(left.angle + right.angle) / 2.0,
            width=spacing,
            height=mean_length,
            corners=corners,
            type=RobotType.UNKNOWN,
            t_ns=int(t_ns),
            translation=translation,
            rotation=rotation,
            error=float(error),
            spacing_ratio=float(spacing_ratio),
            is_big=is_big,
        )


def _solve_pose(corners, is_big: bool, config: ArmorConfig, camera: CameraModel):
    import cv2

    half_w = (config.big_width_m if is_big else config.small_width_m) / 2.0
    half_h = config.light_height_m / 2.0
    object_points = np.array(
        [[-half_w, half_h, 0.0], [-half_w, -half_h, 0.0], [half_w, -half_h, 0.0], [half_w, half_h, 0.0]],
        dtype=np.float64,
    )
    image_points = np.array(corners, dtype=np.float64)
    ok, rvec, tvec = cv2.solvePnP(
        object_points, image_points, camera.camera_matrix, camera.dist_coeffs, flags=cv2.SOLVEPNP_IPPE
    )
    if not ok:
        logger.debug("solvePnP failed for armor candidate")
        return None, None
    translation = tuple(float(v) for v in tvec.flatten())
    rotation = tuple(float(v) for v in rvec.flatten())
    return translation, rotation
