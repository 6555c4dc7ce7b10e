"""Configuration validation using JSON Schema."""

from __future__ import annotations

from typing import Any, Dict

import jsonschema
from jsonschema import Draft7Validator, validators

from exceptions import ConfigValidationError
from log_config.logger import get_logger

logger = get_logger(__name__)

_POSITIVE = {"type": "number", "exclusiveMinimum": 0}

# JSON Schema for default.yaml configuration
CONFIG_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["detector", "tracker"],
    "properties": {
        "logging": {
            "type": "object",
            "properties": {
                "level": {"type": "string", "enum": ["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"], "default": "INFO"},
                "dir": {"type": ["string", "null"], "default": None},
            },
        },
        "camera": {
            "type": ["object", "null"],
            "required": ["fx", "fy", "cx", "cy"],
            "properties": {
                "fx": _POSITIVE,
                "fy": _POSITIVE,
                "cx": {"type": "number", "minimum": 0},
                "cy": {"type": "number", "minimum": 0},
                "distortion": {
                    "type": ["array", "null"],
                    "items": {"type": "number"},
                    "minItems": 5,
                    "maxItems": 5,
                },
            },
        },
        "detector": {
            "type": "object",
            "properties": {
                "runtime_budget_ms": {"type": "number", "minimum": 0.1, "maximum": 100, "default": 4.0},
                "drop_unknown_type": {"type": "boolean", "default": False},
                "roi_size": {
                    "type": "array",
                    "items": {"type": "integer", "minimum": 8, "maximum": 256},
                    "minItems": 2,
                    "maxItems": 2,
                    "default": [32, 32],
                },
                "filters": {
                    "type": "object",
                    "properties": {
                        "min_contour_area": {"type": "number", "minimum": 0, "default": 10.0},
                        "brightness_samples": {"type": "integer", "minimum": 1, "maximum": 50, "default": 5},
                        "max_brightness_sum": {"type": "number", "minimum": 0, "default": 1100.0},
                    },
                },
                "light_blob": {
                    "type": "object",
                    "properties": {
                        "min_ratio": {"type": "number", "minimum": 1.0, "default": 1.5},
                        "max_ratio": {"type": "number", "minimum": 1.0, "default": 20.0},
                        "max_tilt_deg": {"type": "number", "minimum": 0, "maximum": 90, "default": 40.0},
                    },
                },
                "armor": {
                    "type": "object",
                    "properties": {
                        "max_length_ratio": {"type": "number", "minimum": 1.0, "default": 1.6},
                        "max_tilt_diff_deg": {"type": "number", "exclusiveMinimum": 0, "default": 12.0},
                        "min_spacing_ratio": {"type": "number", "minimum": 0, "default": 1.0},
                        "max_spacing_ratio": {"type": "number", "minimum": 0, "default": 5.0},
                        "big_spacing_ratio": {"type": "number", "minimum": 0, "default": 3.2},
                        "max_line_tilt_deg": {"type": "number", "exclusiveMinimum": 0, "maximum": 90, "default": 25.0},
                        "small_width_m": _POSITIVE,
                        "big_width_m": _POSITIVE,
                        "light_height_m": _POSITIVE,
                    },
                },
            },
        },
        "tracker": {
            "type": "object",
            "properties": {
                "history_depth": {"type": "integer", "minimum": 2, "maximum": 1000, "default": 32},
                "max_vanish_num": {"type": "integer", "minimum": 0, "default": 10},
                "min_dt_s": {"type": "number", "exclusiveMinimum": 0, "maximum": 0.1, "default": 0.001},
                "reseed_gap_s": {"type": "number", "exclusiveMinimum": 0, "maximum": 10, "default": 0.5},
            },
        },
        "rune_tracker": {
            "type": "object",
            "properties": {
                "angle_meas_var": _POSITIVE,
                "accel_var": _POSITIVE,
                "init_angle_var": _POSITIVE,
                "init_speed_var": _POSITIVE,
            },
        },
        "armor_tracker": {
            "type": "object",
            "properties": {
                "type_queue_depth": {"type": "integer", "minimum": 1, "maximum": 100, "default": 5},
                "gyro_fusion_weight": {"type": "number", "minimum": 0, "maximum": 1, "default": 0.5},
                "normal_meas_var": _POSITIVE,
                "spin_meas_var": _POSITIVE,
                "normal_accel_var": _POSITIVE,
                "center_meas_var": _POSITIVE,
                "center_accel_var": _POSITIVE,
                "pose_meas_var": _POSITIVE,
                "pose_process_var": _POSITIVE,
            },
        },
    },
}


def extend_with_default(validator_class):
    validate_properties = validator_class.VALIDATORS["properties"]

    def set_defaults(validator, properties, instance, schema):
        for prop, subschema in properties.items():
            if "default" in subschema and isinstance(instance, dict):
                instance.setdefault(prop, subschema["default"])

        for error in validate_properties(validator, properties, instance, schema):
            yield error

    return validators.extend(validator_class, {"properties": set_defaults})


DefaultValidatingValidator = extend_with_default(Draft7Validator)


def validate_config(config: Dict[str, Any]) -> None:
    """Validate a configuration dictionary, filling in schema defaults.

    Args:
        config: Configuration dictionary

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    try:
        validator = DefaultValidatingValidator(CONFIG_SCHEMA)
        errors = list(validator.iter_errors(config))

        if errors:
            error_messages = []
            for error in errors:
                path = " -> ".join(str(p) for p in error.path) if error.path else "root"
                error_messages.append(f"{path}: {error.message}")

            logger.error(f"Configuration validation failed with {len(errors)} errors")
            for msg in error_messages:
                logger.error(f"  - {msg}")

            raise ConfigValidationError(
                f"Configuration validation failed with {len(errors)} error(s). See logs for details.",
                validation_errors=error_messages,
            )

        logger.info("Configuration validation passed")

    except jsonschema.exceptions.SchemaError as e:
        logger.error(f"Invalid schema: {e}")
        raise ConfigValidationError(f"Invalid schema definition: {e}")


__all__ = ["validate_config", "CONFIG_SCHEMA"]
