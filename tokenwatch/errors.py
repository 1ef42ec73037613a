"""Exceptions raised by tokenwatch."""


class TokenwatchError(Exception):
    """Base class for tokenwatch errors."""


class ConfigError(TokenwatchError):
    """Raised when required configuration is missing or invalid."""
