"""Custom exceptions for configuration management."""


class ConfigError(Exception):
    """Raised when configuration files or overrides cannot be applied."""
