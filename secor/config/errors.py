"""Configuration error classes.

All config-related exceptions for fast-fail behavior. Callers branch on the
exception type, never on the message.
"""

from __future__ import annotations

from typing import Any


class ConfigError(Exception):
    """Base exception for configuration errors."""

    pass


class ConfigLoadError(ConfigError):
    """Raised when a configuration source cannot be located, read or parsed."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class MissingKeyError(ConfigError):
    """Raised when a required config key is absent from the resolved configuration."""

    def __init__(self, key: str):
        super().__init__(f"Failed to find required configuration option '{key}'.")
        self.key = key


class ConfigTypeError(ConfigError, TypeError):
    """Raised when a stored value cannot be converted to the requested type."""

    def __init__(self, key: str, value: Any, expected: str):
        super().__init__(f"Config key '{key}' has value {value!r} which is not a valid {expected}")
        self.key = key
        self.value = value
        self.expected = expected


class UnknownKeyError(ConfigError):
    """Raised when an unknown config key is requested through the schema."""

    def __init__(self, key: str):
        super().__init__(f"Unknown config key: '{key}'")
        self.key = key


class ConfigValidationError(ConfigError):
    """Raised by eager validation when required keys are missing or malformed."""

    def __init__(self, missing_keys: list[str], invalid_values: list[str]):
        error_parts = []
        if missing_keys:
            error_parts.append(f"Missing required keys ({len(missing_keys)}): {missing_keys}")
        if invalid_values:
            error_parts.append(f"Invalid values ({len(invalid_values)}): {invalid_values}")
        super().__init__("Configuration validation failed.\n" + "\n".join(error_parts))
        self.missing_keys = missing_keys
        self.invalid_values = invalid_values
