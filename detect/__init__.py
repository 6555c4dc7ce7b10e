"""Detection module."""

from .armor_detector import ArmorDetector, Classifier, DetectionResult
from .config import DetectorConfig, FilterConfig
from .roi import armor_roi

__all__ = [
    "ArmorDetector",
    "Classifier",
    "DetectionResult",
    "DetectorConfig",
    "FilterConfig",
    "armor_roi",
]
