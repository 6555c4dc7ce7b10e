"""Configuration loading for the autoaim core."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from combo.armor import ArmorConfig
from configs.validator import validate_config
from contracts import CameraModel
from detect.config import DetectorConfig, FilterConfig
from exceptions import InvalidConfigError
from feature.light_blob import LightBlobConfig
from log_config.logger import configure_logging, get_logger
from track.config import ArmorTrackerConfig, RuneTrackerConfig, TrackerConfig

logger = get_logger(__name__)


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    dir: Optional[str] = None


@dataclass(frozen=True)
class AutoAimConfig:
    detector: DetectorConfig
    tracker: TrackerConfig
    rune_tracker: RuneTrackerConfig
    armor_tracker: ArmorTrackerConfig
    camera: Optional[CameraModel] = None
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _parse_camera(data: Optional[Dict[str, Any]]) -> Optional[CameraModel]:
    if not data:
        return None
    distortion = data.get("distortion")
    return CameraModel.from_intrinsics(
        fx=float(data["fx"]),
        fy=float(data["fy"]),
        cx=float(data["cx"]),
        cy=float(data["cy"]),
        distortion=tuple(distortion) if distortion else None,
    )


def _parse_detector(data: Dict[str, Any]) -> DetectorConfig:
    return DetectorConfig(
        runtime_budget_ms=float(data.get("runtime_budget_ms", 4.0)),
        drop_unknown_type=bool(data.get("drop_unknown_type", False)),
        roi_size=tuple(data.get("roi_size", (32, 32))),
        filters=FilterConfig(**data.get("filters", {})),
        light_blob=LightBlobConfig(**data.get("light_blob", {})),
        armor=ArmorConfig(**data.get("armor", {})),
    )


def parse_config(data: Dict[str, Any]) -> AutoAimConfig:
    """Build an AutoAimConfig from an already validated dictionary."""
    tracker = TrackerConfig(**data["tracker"])
    return AutoAimConfig(
        detector=_parse_detector(data["detector"]),
        tracker=tracker,
        rune_tracker=RuneTrackerConfig(tracker=tracker, **data.get("rune_tracker", {})),
        armor_tracker=ArmorTrackerConfig(tracker=tracker, **data.get("armor_tracker", {})),
        camera=_parse_camera(data.get("camera")),
        logging=LoggingConfig(**data.get("logging", {})),
    )


def load_config(path: Path) -> AutoAimConfig:
    """Load and validate configuration from YAML file.

    Args:
        path: Path to configuration file

    Returns:
        Validated AutoAimConfig instance

    Raises:
        ConfigError: If configuration is invalid or cannot be loaded
    """
    try:
        logger.info(f"Loading configuration from {path}")
        if not path.exists():
            raise InvalidConfigError(f"Configuration file not found: {path}")

        data = yaml.safe_load(path.read_text())
        if not isinstance(data, dict):
            raise InvalidConfigError(f"Configuration root must be a mapping: {path}")

        # Validate against JSON Schema
        validate_config(data)

        logger.debug("Parsing configuration sections")

    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML configuration: {e}")
        raise InvalidConfigError(f"Failed to parse configuration file: {e}")

    try:
        config = parse_config(data)
    except (KeyError, TypeError, ValueError) as e:
        logger.error(f"Failed to construct configuration objects: {e}")
        raise InvalidConfigError(f"Failed to construct configuration: {e}")

    configure_logging(
        level=config.logging.level,
        log_dir=Path(config.logging.dir) if config.logging.dir else None,
    )
    logger.info(
        f"Configuration loaded successfully: history_depth={config.tracker.history_depth}, "
        f"camera={'set' if config.camera is not None else 'none'}"
    )
    return config


__all__ = ["AutoAimConfig", "LoggingConfig", "load_config", "parse_config"]
