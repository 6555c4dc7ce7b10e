"""Custom exception classes for the autoaim perception core."""

from __future__ import annotations

from typing import Optional


class AutoAimError(Exception):
    """Base exception for all autoaim errors."""

    pass


class InvalidArgumentError(AutoAimError, ValueError):
    """Raised when geometric input is malformed (never silently coerced)."""

    pass


class FeatureError(InvalidArgumentError):
    """Raised when a feature cannot be constructed from its input."""

    pass


class ComboError(InvalidArgumentError):
    """Raised when a combo is constructed from an invalid feature set."""

    pass


class TrackerError(AutoAimError):
    """Base exception for tracker contract violations."""

    pass


class TrackerKindError(TrackerError):
    """Raised when a tracker handle is matched against the wrong kind."""

    def __init__(self, message: str, expected: Optional[str] = None, actual: Optional[str] = None):
        self.expected = expected
        self.actual = actual
        super().__init__(message)


class ConfigError(AutoAimError):
    """Base exception for configuration errors."""

    pass


class InvalidConfigError(ConfigError):
    """Raised when configuration file is invalid or corrupted."""

    pass


class ConfigValidationError(ConfigError):
    """Raised when configuration fails schema validation."""

    def __init__(self, message: str, validation_errors: Optional[list] = None):
        self.validation_errors = validation_errors or []
        super().__init__(message)
