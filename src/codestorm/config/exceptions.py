"""Exceptions raised while loading or resolving configuration."""


class ConfigError(Exception):
    """Raised when configuration data cannot be read, merged, or validated."""
