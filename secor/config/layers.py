"""Configuration layers.

A layer is one named source of key/value pairs with a fixed position in the
precedence order. Layers are immutable once loaded and always hold plain
strings: array values are serialized with ``LIST_DELIMITER`` before they reach
the merger, matching the properties file representation.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any

from .errors import ConfigLoadError
from .properties import LIST_DELIMITER, load_properties_file

logger = logging.getLogger(__name__)

BASE_LAYER = "base file"
OVERRIDE_LAYER = "override file"
ENVIRONMENT_LAYER = "environment"


@dataclass(frozen=True)
class ConfigurationLayer:
    """
    One ordered, named source of configuration values.

    Attributes:
        name: Human-readable layer name (e.g., "base file")
        values: Read-only mapping of key to string value
        source: Where the values came from (file path), if anywhere
    """

    name: str
    values: Mapping[str, str]
    source: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def __len__(self) -> int:
        return len(self.values)

    def __contains__(self, key: object) -> bool:
        return key in self.values

    @classmethod
    def from_properties_file(cls, path: str | Path, name: str = BASE_LAYER) -> ConfigurationLayer:
        """Load a layer from a properties file (``include`` directives are followed)."""
        values = load_properties_file(path)
        logger.debug(f"Loaded {len(values)} keys for layer '{name}' from {path}")
        return cls(name=name, values=values, source=str(path))

    @classmethod
    def from_json_file(cls, path: str | Path, name: str = OVERRIDE_LAYER) -> ConfigurationLayer:
        """
        Load a layer from a JSON object.

        Nested objects flatten into dotted keys, arrays are joined with
        ``LIST_DELIMITER`` and ``null`` entries are skipped so they do not
        override lower layers.

        Raises:
            ConfigLoadError: If the file is missing, unparseable, or its root is not an object
        """
        path = Path(path)
        if not path.is_file():
            raise ConfigLoadError(f"Configuration file not found: {path}", str(path))
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigLoadError(f"Error parsing JSON configuration file {path}: {e}", str(path)) from e

        if not isinstance(data, dict):
            raise ConfigLoadError(
                f"Config root must be a JSON object, got: {type(data).__name__}",
                str(path),
            )

        values = _flatten(data)
        logger.debug(f"Loaded {len(values)} keys for layer '{name}' from {path}")
        return cls(name=name, values=values, source=str(path))

    @classmethod
    def from_file(cls, path: str | Path, name: str = OVERRIDE_LAYER) -> ConfigurationLayer:
        """Load a layer choosing the codec by suffix: ``.json`` or properties for anything else."""
        if Path(path).suffix.lower() == ".json":
            return cls.from_json_file(path, name=name)
        return cls.from_properties_file(path, name=name)

    @classmethod
    def from_environ(
        cls,
        environ: Mapping[str, str] | None = None,
        properties: Mapping[str, str] | None = None,
        name: str = ENVIRONMENT_LAYER,
    ) -> ConfigurationLayer:
        """
        Build the ambient process layer.

        Every environment entry is taken as-is, with no prefix filtering.
        Explicit process properties (e.g., ``-D key=value`` on the command
        line) are applied on top of the environment.

        Args:
            environ: Environment mapping (defaults to ``os.environ``)
            properties: Explicit process properties
            name: Layer name
        """
        values = dict(os.environ if environ is None else environ)
        if properties:
            values.update(properties)
        return cls(name=name, values=values)


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def _flatten(data: Mapping[str, Any], prefix: str = "") -> dict[str, str]:
    result: dict[str, str] = {}
    for key, value in data.items():
        full_key = f"{prefix}{key}"
        if value is None:
            continue
        if isinstance(value, dict):
            result.update(_flatten(value, full_key + "."))
        elif isinstance(value, list):
            result[full_key] = LIST_DELIMITER.join(_scalar(item) for item in value)
        else:
            result[full_key] = _scalar(value)
    return result
