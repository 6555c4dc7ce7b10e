"""Number-sticker regions handed to an external classification service."""

from __future__ import annotations

from typing import Tuple

import numpy as np

from combo import Armor


def armor_roi(image: np.ndarray, armor: Armor, size: Tuple[int, int] = (32, 32)) -> np.ndarray:
    """Warp the plate region (light bars stretched to the sticker height) to ``size``."""
    import cv2

    left_bottom, left_top, right_top, right_bottom = (np.array(p, dtype=np.float32) for p in armor.corners)
    # The sticker is roughly twice as tall as the light bars
    left_mid = (left_top + left_bottom) / 2.0
    right_mid = (right_top + right_bottom) / 2.0
    src = np.array(
        [
            left_mid + (left_bottom - left_mid) * 2.0,
            left_mid + (left_top - left_mid) * 2.0,
            right_mid + (right_top - right_mid) * 2.0,
            right_mid + (right_bottom - right_mid) * 2.0,
        ],
        dtype=np.float32,
    )
    w, h = size
    dst = np.array([[0, h - 1], [0, 0], [w - 1, 0], [w - 1, h - 1]], dtype=np.float32)
    transform = cv2.getPerspectiveTransform(src, dst)
    return cv2.warpPerspective(image, transform, (w, h))
