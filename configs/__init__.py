"""Configuration loading and validation."""

from .settings import AutoAimConfig, LoggingConfig, load_config, parse_config
from .validator import CONFIG_SCHEMA, validate_config

__all__ = [
    "AutoAimConfig",
    "CONFIG_SCHEMA",
    "LoggingConfig",
    "load_config",
    "parse_config",
    "validate_config",
]
