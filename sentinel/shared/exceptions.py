"""Shared exception types."""


class ConfigurationError(RuntimeError):
    """Raised at startup when required configuration is missing."""
