from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence

import numpy as np

from detect.config import FilterConfig
from feature import LightBlob, LightBlobConfig


def build_light_blobs(
    contours: Iterable[np.ndarray], config: FilterConfig, blob_config: LightBlobConfig
) -> list[LightBlob]:
    import cv2

    output = []
    for contour in contours:
        if cv2.contourArea(contour) < config.min_contour_area:
            continue
        blob = LightBlob.from_contour(contour, blob_config)
        if blob is not None:
            output.append(blob)
    return output


def pixel_brightness(image: np.ndarray, x: int, y: int) -> float:
    if image.ndim == 2:
        return float(image[y, x])
    b, g, r = (float(c) for c in image[y, x, :3])
    return 0.1 * b + 0.6 * g + 0.3 * r


def sample_points(
    blob: LightBlob, samples: int, shape: Sequence[int]
) -> list[tuple[int, int]]:
    """Symmetric offsets along the long axis, clamped into the image."""
    rows, cols = shape[0], shape[1]
    rad = math.radians(blob.angle)
    ux, uy = math.sin(rad), -math.cos(rad)
    points = []
    for i in range(-samples, samples + 1):
        if i == 0:
            continue
        offset = blob.height * i / samples
        x = int(round(blob.center[0] + ux * offset))
        y = int(round(blob.center[1] + uy * offset))
        points.append((min(max(x, 0), cols - 1), min(max(y, 0), rows - 1)))
    return points


def total_brightness(image: np.ndarray, blob: LightBlob, samples: int) -> float:
    return sum(pixel_brightness(image, x, y) for x, y in sample_points(blob, samples, image.shape))


def apply_brightness_filter(
    image: Optional[np.ndarray], blobs: list[LightBlob], config: FilterConfig
) -> list[LightBlob]:
    if image is None:
        return blobs
    output = []
    for blob in blobs:
        if total_brightness(image, blob, config.brightness_samples) > config.max_brightness_sum:
            continue
        output.append(blob)
    return output
