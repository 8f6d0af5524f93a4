"""Per-thread configuration cache.

Each thread resolves its configuration once, on first use, and keeps that
instance for the rest of its life. Threads never share an instance, so two
workers started at different times may see different snapshots of the
underlying files and environment. There is no refresh: a new snapshot needs
a new thread.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager

from .loader import ConfigLoader
from .secor_config import SecorConfig

logger = logging.getLogger(__name__)


class ConfigCache:
    """
    Memoizes one SecorConfig per thread.

    Usage:
        cache = ConfigCache(lambda: ConfigLoader().load())
        config = cache.get()   # loads on the first call in this thread
        config = cache.get()   # same instance, no source is re-read

        # Test substitution
        with cache.use(SecorConfig.from_mapping({...})):
            ...
    """

    def __init__(self, factory: Callable[[], SecorConfig] | None = None):
        """
        Initialize the cache.

        Args:
            factory: Builds a fresh configuration. Defaults to ``ConfigLoader().load()``.
        """
        self._factory = factory or (lambda: ConfigLoader().load())
        self._local = threading.local()

    def get(self) -> SecorConfig:
        """
        Get the current thread's configuration, resolving it on first use.

        A failed load is not cached; the error propagates to the caller.

        Raises:
            ConfigError: Any error raised while loading
        """
        config: SecorConfig | None = getattr(self._local, "config", None)
        if config is None:
            logger.debug(f"Resolving configuration for thread '{threading.current_thread().name}'")
            config = self._factory()
            self._local.config = config
        return config

    def is_loaded(self) -> bool:
        """Whether the current thread already holds a configuration."""
        return getattr(self._local, "config", None) is not None

    @contextmanager
    def use(self, config: SecorConfig) -> Iterator[SecorConfig]:
        """
        Temporarily replace the current thread's configuration.

        Args:
            config: The configuration to expose inside the block
        """
        original = getattr(self._local, "config", None)
        self._local.config = config
        try:
            yield config
        finally:
            self._local.config = original


_default_cache = ConfigCache()


def current_config() -> SecorConfig:
    """Get the configuration of the current thread from the process-wide cache."""
    return _default_cache.get()


def use_config(config: SecorConfig) -> AbstractContextManager[SecorConfig]:
    """Temporarily substitute the current thread's configuration in the process-wide cache."""
    return _default_cache.use(config)
