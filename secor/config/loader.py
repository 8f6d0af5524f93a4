"""
ConfigLoader - builds the layer stack and merges it.

Precedence, lowest to highest:
    1. base properties file (SECOR_CONFIG), required
    2. override file (SECOR_OVERRIDE_CONFIG), optional
    3. ambient process environment, plus explicit process properties

Each layer replaces whole values of the keys it defines. Nothing is merged
below the key level, so array values are never concatenated across layers.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path

from ..settings import Settings, get_settings
from .errors import ConfigLoadError
from .layers import BASE_LAYER, OVERRIDE_LAYER, ConfigurationLayer
from .secor_config import SecorConfig
from .store import ResolvedConfiguration

logger = logging.getLogger(__name__)


def merge_layers(layers: Iterable[ConfigurationLayer]) -> ResolvedConfiguration:
    """
    Merge layers in increasing precedence, last writer wins per key.

    Args:
        layers: Layers ordered lowest precedence first

    Returns:
        The resolved configuration
    """
    merged: dict[str, str] = {}
    layer_count = 0

    for layer in layers:
        overridden = sorted(key for key in layer.values if key in merged)
        merged.update(layer.values)
        layer_count += 1

        logger.debug(f"Applied layer '{layer.name}': {len(layer)} keys, {len(overridden)} overridden")
        if overridden:
            logger.debug(f"Layer '{layer.name}' overrides: {overridden}")

    logger.info(f"Resolved configuration with {len(merged)} keys from {layer_count} layers")
    return ResolvedConfiguration(merged)


class ConfigLoader:
    """
    Loads Secor configuration from its layers.

    Usage:
        # Paths from SECOR_CONFIG / SECOR_OVERRIDE_CONFIG
        config = ConfigLoader().load()

        # Explicit paths and process properties
        config = ConfigLoader(
            config_path="secor.prod.backup.properties",
            properties={"secor.kafka.group": "secor_backup_test"},
        ).load()
    """

    def __init__(
        self,
        config_path: str | Path | None = None,
        override_path: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
        properties: Mapping[str, str] | None = None,
        settings: Settings | None = None,
    ):
        """
        Initialize the loader.

        Args:
            config_path: Base properties file. Defaults to SECOR_CONFIG.
            override_path: Override file. Defaults to SECOR_OVERRIDE_CONFIG.
            environ: Ambient environment (defaults to os.environ at load time)
            properties: Explicit process properties applied with the environment layer
            settings: Startup settings; built from the environment if None
        """
        if config_path is None or override_path is None:
            settings = settings or get_settings()
            config_path = config_path if config_path is not None else settings.config_path
            override_path = override_path if override_path is not None else settings.override_path

        self.config_path = config_path
        self.override_path = override_path
        self._environ = environ
        self._properties = dict(properties or {})

    def build_layers(self) -> list[ConfigurationLayer]:
        """
        Load every layer, lowest precedence first.

        Raises:
            ConfigLoadError: If the base file is not configured or any file fails to load
        """
        if not self.config_path:
            raise ConfigLoadError("No base configuration file given. Set SECOR_CONFIG to a properties file path.")

        layers = [ConfigurationLayer.from_properties_file(self.config_path, name=BASE_LAYER)]
        if self.override_path:
            layers.append(ConfigurationLayer.from_file(self.override_path, name=OVERRIDE_LAYER))
        layers.append(ConfigurationLayer.from_environ(self._environ, self._properties))
        return layers

    def resolve(self) -> ResolvedConfiguration:
        """Load and merge all layers into one immutable store."""
        return merge_layers(self.build_layers())

    def load(self) -> SecorConfig:
        """Load, merge and wrap the configuration in the typed accessor facade."""
        return SecorConfig(self.resolve())
