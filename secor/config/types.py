"""Configuration type definitions.

Defines the schema for configuration keys: value type, whether the key is
required, and the default used when an optional key is absent.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ConfigType(Enum):
    """Supported configuration value types."""

    STRING = "string"
    INT = "int"
    LONG = "long"
    BOOL = "bool"
    STRING_ARRAY = "string_array"


@dataclass(frozen=True)
class ConfigKey:
    """
    Definition of a configuration key.

    Attributes:
        key: The dot-notation config key (e.g., "kafka.seed.broker.port")
        config_type: The expected type of the value
        required: If True, reading an absent key raises MissingKeyError
        default: Value returned when an optional key is absent
        description: Human-readable description
        backend: Storage or warehouse backend the key belongs to (e.g., "s3"),
            None for keys every deployment reads
    """

    key: str
    config_type: ConfigType
    required: bool = True
    default: Any = None
    description: str = ""
    backend: str | None = None
