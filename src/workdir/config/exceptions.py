"""Configuration error types."""


class ConfigError(Exception):
    """Raised when configuration files, overrides, or values are invalid."""
