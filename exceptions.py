"""Custom exception classes for the segment tracking engine."""

from __future__ import annotations

from typing import Optional


class SegmentTrackingError(Exception):
    """Base exception for all segment tracking errors."""

    pass


class TrackerContractError(SegmentTrackingError):
    """Base exception for violations of the tracker calling contract.

    These are programmer errors. Continuing after one would corrupt the
    tracked model, so they are never caught inside the engine.
    """

    pass


class TrackerConfigurationError(TrackerContractError):
    """Raised when a tracker, tolerance or decision window is misconfigured."""

    pass


class MonotonicityError(TrackerContractError):
    """Raised when time values are not fed in a strictly monotone order."""

    def __init__(
        self,
        message: str,
        attempted: Optional[float] = None,
        previous: Optional[float] = None,
        direction: Optional[str] = None,
    ):
        self.attempted = attempted
        self.previous = previous
        self.direction = direction
        super().__init__(message)


class ConfigError(SegmentTrackingError):
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
