"""
Layered configuration for Secor.

Resolves one immutable view of typed configuration values from a base
properties file, an optional override file and the process environment, in
that order of precedence.

Usage:
    from secor.config import ConfigLoader, SecorConfig

    # Explicit: resolve once at startup and pass to components
    config = ConfigLoader(config_path="secor.prod.backup.properties").load()

    # Per-thread cached instance (paths from SECOR_CONFIG / SECOR_OVERRIDE_CONFIG)
    config = SecorConfig.load()

    # Typed accessors
    port = config.get_kafka_seed_broker_port()
    prefix = config.get_s3_prefix()
"""

from __future__ import annotations

from .context import ConfigCache, current_config, use_config
from .errors import (
    ConfigError,
    ConfigLoadError,
    ConfigTypeError,
    ConfigValidationError,
    MissingKeyError,
    UnknownKeyError,
)
from .layers import ConfigurationLayer
from .loader import ConfigLoader, merge_layers
from .properties import load_properties_file, parse_properties, split_list
from .schema import CONFIG_SCHEMA, get_all_required_keys, get_required_keys, get_schema_key
from .secor_config import SecorConfig
from .store import ResolvedConfiguration
from .types import ConfigKey, ConfigType

__all__ = [
    # Loading
    "ConfigLoader",
    "ConfigurationLayer",
    "merge_layers",
    "load_properties_file",
    "parse_properties",
    "split_list",
    # Resolved values
    "ResolvedConfiguration",
    "SecorConfig",
    # Per-thread cache
    "ConfigCache",
    "current_config",
    "use_config",
    # Error classes
    "ConfigError",
    "ConfigLoadError",
    "MissingKeyError",
    "ConfigTypeError",
    "UnknownKeyError",
    "ConfigValidationError",
    # Schema
    "CONFIG_SCHEMA",
    "ConfigKey",
    "ConfigType",
    "get_schema_key",
    "get_all_required_keys",
    "get_required_keys",
]
