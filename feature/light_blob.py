"""Elongated light regions (the bars on either side of an armor plate)."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from contracts import Point
from contracts.geometry import axis_endpoints
from feature.feature import Feature


@dataclass(frozen=True)
class LightBlobConfig:
    min_ratio: float = 1.5
    max_ratio: float = 20.0
    max_tilt_deg: float = 40.0


@dataclass(frozen=True, eq=False)
class LightBlob(Feature):
    """Light bar; ``angle`` is the tilt of the long axis from vertical in degrees.

    Corners are ``(top, bottom)``, the end points of the long axis.
    """

    @classmethod
    def from_geometry(
        cls, center: Point, width: float, height: float, angle: float = 0.0
    ) -> "LightBlob":
        top, bottom = axis_endpoints(center, height, angle)
        return cls(
            center=(float(center[0]), float(center[1])),
            width=float(width),
            height=float(height),
            angle=float(angle),
            corners=(top, bottom),
        )

    @classmethod
    def from_contour(
        cls, contour: np.ndarray, config: Optional[LightBlobConfig] = None
    ) -> Optional["LightBlob"]:
        """Fit a light blob to a contour, or return None if it is not bar shaped."""
        import cv2

        config = config or LightBlobConfig()
        rect = cv2.minAreaRect(contour)
        points = cv2.boxPoints(rect)
        edge_a = points[1] - points[0]
        edge_b = points[2] - points[1]
        len_a = float(np.hypot(*edge_a))
        len_b = float(np.hypot(*edge_b))
        if len_a >= len_b:
            long_edge, height, width = edge_a, len_a, len_b
        else:
            long_edge, height, width = edge_b, len_b, len_a
        if width <= 0:
            return None
        ratio = height / width
        if ratio < config.min_ratio or ratio > config.max_ratio:
            return None
        vx, vy = float(long_edge[0]), float(long_edge[1])
        # Point the axis upwards (image y grows downwards)
        if vy > 0:
            vx, vy = -vx, -vy
        tilt = math.degrees(math.atan2(vx, -vy))
        if abs(tilt) > config.max_tilt_deg:
            return None
        center = (float(rect[0][0]), float(rect[0][1]))
        return cls.from_geometry(center, width, height, tilt)
