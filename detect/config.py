from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from combo.armor import ArmorConfig
from feature.light_blob import LightBlobConfig


@dataclass(frozen=True)
class FilterConfig:
    min_contour_area: float = 10.0
    brightness_samples: int = 5
    max_brightness_sum: float = 1100.0


@dataclass(frozen=True)
class DetectorConfig:
    runtime_budget_ms: float = 4.0
    drop_unknown_type: bool = False
    roi_size: Tuple[int, int] = (32, 32)
    filters: FilterConfig = field(default_factory=FilterConfig)
    light_blob: LightBlobConfig = field(default_factory=LightBlobConfig)
    armor: ArmorConfig = field(default_factory=ArmorConfig)
