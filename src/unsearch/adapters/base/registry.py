"""Adapter Registry — Manages registration and construction of search adapters.

The registry maps adapter names (``"memory"``, ``"meilisearch"``, ...) to
adapter classes so an index can be built from configuration. It also keeps
track of initialized instances for health monitoring and shutdown.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any

from unsearch.adapters.base.adapter import AdapterHealth, SearchAdapter
from unsearch.adapters.base.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class AdapterNotFoundError(Exception):
    """Raised when a requested adapter is not registered."""


class AdapterRegistry:
    """Registry for search adapter classes and instances.

    Example:
        >>> registry = AdapterRegistry()
        >>> registry.register("meilisearch", MeiliSearchAdapter)
        >>> await registry.initialize_adapter("meilisearch", index="docs", api_key="...")
        >>> adapter = registry.get("meilisearch")
    """

    def __init__(self) -> None:
        self._classes: dict[str, type[SearchAdapter]] = {}
        self._instances: dict[str, SearchAdapter] = {}

    def register(self, name: str, adapter_class: type[SearchAdapter]) -> None:
        """Register an adapter class under ``name``."""
        if name in self._classes:
            logger.warning("Overwriting existing adapter registration: %s", name)
        self._classes[name] = adapter_class
        logger.debug("Registered adapter: %s", name)

    def create(self, name: str, **kwargs: Any) -> SearchAdapter:
        """Construct an adapter without initializing it.

        Args:
            name: The registered adapter name.
            **kwargs: Passed to the adapter constructor unchanged.

        Raises:
            AdapterNotFoundError: If no adapter is registered under this name.
            ConfigurationError: If the constructor does not accept ``kwargs``.
        """
        if name not in self._classes:
            raise AdapterNotFoundError(
                f"No adapter registered with name '{name}'. "
                f"Available adapters: {list(self._classes.keys())}"
            )
        adapter_class = self._classes[name]
        try:
            inspect.signature(adapter_class).bind(**kwargs)
        except TypeError as e:
            raise ConfigurationError(f"Invalid options for adapter '{name}': {e}") from e
        return adapter_class(**kwargs)

    async def initialize_adapter(self, name: str, *, alias: str | None = None, **kwargs: Any) -> SearchAdapter:
        """Create and initialize an adapter instance.

        Args:
            name: The registered adapter name.
            alias: Key to track the instance under; defaults to ``name``.
            **kwargs: Passed to the adapter constructor unchanged.

        Returns:
            The initialized adapter instance.
        """
        adapter = self.create(name, **kwargs)
        await adapter.initialize()
        key = alias or name
        self._instances[key] = adapter
        logger.info("Initialized adapter: %s", key)
        return adapter

    def get(self, name: str) -> SearchAdapter:
        """Get an initialized adapter instance by name or alias.

        Raises:
            AdapterNotFoundError: If the adapter is not initialized.
        """
        if name not in self._instances:
            raise AdapterNotFoundError(
                f"Adapter '{name}' is not initialized. "
                f"Call initialize_adapter() first."
            )
        return self._instances[name]

    async def health_check_all(self) -> dict[str, AdapterHealth]:
        """Run health checks on all initialized adapters."""
        results: dict[str, AdapterHealth] = {}
        for name, adapter in self._instances.items():
            try:
                results[name] = await adapter.health_check()
            except Exception as e:
                results[name] = AdapterHealth(status="unhealthy", message=str(e))
        return results

    async def shutdown_all(self) -> None:
        """Gracefully shut down all initialized adapters."""
        for name, adapter in self._instances.items():
            try:
                await adapter.shutdown()
                logger.info("Shut down adapter: %s", name)
            except Exception:
                logger.warning("Error shutting down adapter: %s", name, exc_info=True)
        self._instances.clear()

    @property
    def registered_adapters(self) -> list[str]:
        """List all registered adapter names."""
        return list(self._classes.keys())

    @property
    def active_adapters(self) -> list[str]:
        """List all initialized adapter names."""
        return list(self._instances.keys())
