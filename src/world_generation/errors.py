"""Exceptions raised by the world generation package."""


class ConfigurationError(ValueError):
    """Raised when generation parameters are invalid.

    Always raised before any per-cell work starts, so a failed request never
    leaves a partially generated world behind.
    """


class GenerationCancelled(RuntimeError):
    """Raised when a generation run is cancelled between passes."""
