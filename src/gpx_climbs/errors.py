"""Exceptions raised by climb detection."""


class ClimbDetectionError(Exception):
    """Base class for climb detection errors."""


class InvalidInputError(ClimbDetectionError, ValueError):
    """Elevation samples that cannot be analyzed (non-finite or out of order)."""


class ConfigError(ClimbDetectionError, ValueError):
    """A configuration value has the wrong type or an impossible value."""
