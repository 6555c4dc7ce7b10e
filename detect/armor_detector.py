"""Armor candidate matcher: light blobs in, validated armor plates out."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

import numpy as np

from combo import Armor
from contracts import CameraModel, RobotType
from detect.config import DetectorConfig
from detect.filters import apply_brightness_filter, build_light_blobs
from detect.roi import armor_roi
from detect.telemetry import TimingRecord, log_timing
from feature import LightBlob
from log_config.logger import get_logger

logger = get_logger(__name__)

Classifier = Callable[[np.ndarray], RobotType]


@dataclass
class DetectionResult:
    features: List[LightBlob] = field(default_factory=list)
    combos: List[Armor] = field(default_factory=list)
    rois: List[np.ndarray] = field(default_factory=list)


class ArmorDetector:
    def __init__(
        self,
        config: Optional[DetectorConfig] = None,
        camera: Optional[CameraModel] = None,
        classifier: Optional[Classifier] = None,
    ) -> None:
        self._config = config or DetectorConfig()
        self._camera = camera
        self._classifier = classifier

    @property
    def config(self) -> DetectorConfig:
        return self._config

    def find(
        self, image: Optional[np.ndarray], contours: Iterable[np.ndarray], t_ns: int = 0
    ) -> DetectionResult:
        """Build light blobs from contours and match them into armor plates."""
        blobs = self.find_light_blobs(contours)
        return self.match(image, blobs, t_ns)

    def match(
        self, image: Optional[np.ndarray], blobs: List[LightBlob], t_ns: int = 0
    ) -> DetectionResult:
        start = time.perf_counter()
        blobs = self.erase_bright_blobs(image, blobs)
        result = DetectionResult(features=sorted(blobs, key=lambda blob: blob.center[0]))
        if len(blobs) >= 2:
            armors = self.find_armors(blobs, t_ns)
            if self._classifier is not None and image is not None:
                armors, result.rois = self._classify(image, armors)
                if self._config.drop_unknown_type:
                    armors = self.erase_fake_armors(armors)
            result.combos = self.erase_error_armors(armors)

        elapsed_ms = (time.perf_counter() - start) * 1000.0
        log_timing(
            TimingRecord(
                stage="match",
                elapsed_ms=elapsed_ms,
                budget_ms=self._config.runtime_budget_ms,
                features=len(result.features),
                combos=len(result.combos),
            )
        )
        return result

    def find_light_blobs(self, contours: Iterable[np.ndarray]) -> List[LightBlob]:
        return build_light_blobs(contours, self._config.filters, self._config.light_blob)

    def erase_bright_blobs(
        self, image: Optional[np.ndarray], blobs: List[LightBlob]
    ) -> List[LightBlob]:
        kept = apply_brightness_filter(image, blobs, self._config.filters)
        if len(kept) != len(blobs):
            logger.debug(f"Dropped {len(blobs) - len(kept)} overexposed light blobs")
        return kept

    def find_armors(self, blobs: List[LightBlob], t_ns: int = 0) -> List[Armor]:
        """Pair blobs left to right, skipping pairs that enclose another blob."""
        ordered = sorted(blobs, key=lambda blob: blob.center[0])
        armors: List[Armor] = []
        for i in range(len(ordered) - 1):
            for j in range(i + 1, len(ordered)):
                armor = Armor.make_combo(
                    ordered[i], ordered[j], t_ns, self._config.armor, self._camera
                )
                if armor is None:
                    continue
                if any(armor.contains(ordered[k]) for k in range(i + 1, j)):
                    logger.debug(f"Pruned armor candidate ({i}, {j}) enclosing another blob")
                    continue
                armors.append(armor)
        return armors

    @staticmethod
    def erase_error_armors(armors: List[Armor]) -> List[Armor]:
        """Single pass over conflicting pairs; every loser of any pair is dropped."""
        if len(armors) < 2:
            return list(armors)
        ordered = sorted(
            armors,
            key=lambda a: (a.left.center[0], a.right.center[0], a.left.center[1], a.right.center[1]),
        )
        removable = [False] * len(ordered)
        for i in range(len(ordered) - 1):
            for j in range(i + 1, len(ordered)):
                a, b = ordered[i], ordered[j]
                if a.left is b.left or a.right is b.right:
                    removable[i if a.width > b.width else j] = True
                elif a.left is b.right or a.right is b.left:
                    removable[i if a.error > b.error else j] = True
        return [armor for armor, drop in zip(ordered, removable) if not drop]

    @staticmethod
    def erase_fake_armors(armors: List[Armor]) -> List[Armor]:
        return [armor for armor in armors if armor.type != RobotType.UNKNOWN]

    def _classify(self, image: np.ndarray, armors: List[Armor]) -> tuple[List[Armor], List[np.ndarray]]:
        classified: List[Armor] = []
        rois: List[np.ndarray] = []
        for armor in armors:
            roi = armor_roi(image, armor, self._config.roi_size)
            classified.append(armor.with_type(self._classifier(roi)))
            rois.append(roi)
        return classified, rois
