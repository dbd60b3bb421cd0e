"""Search adapter layer — Pluggable connectors for search backends.

Built-in adapters:
  - memory: In-process dict with fuzzy matching (no backend needed)
  - algolia: Algolia hosted search
  - meilisearch: MeiliSearch (instant, typo-tolerant search)
  - typesense: Typesense (typo-tolerant search)

Implement ``SearchAdapter`` to connect your own search backend.
"""

from __future__ import annotations

from unsearch.adapters.base import AdapterRegistry


def default_registry() -> AdapterRegistry:
    """Create a registry with every built-in adapter registered."""
    from unsearch.adapters.algolia import AlgoliaAdapter
    from unsearch.adapters.meilisearch import MeiliSearchAdapter
    from unsearch.adapters.memory import MemoryAdapter
    from unsearch.adapters.typesense import TypesenseAdapter

    registry = AdapterRegistry()
    registry.register("memory", MemoryAdapter)
    registry.register("algolia", AlgoliaAdapter)
    registry.register("meilisearch", MeiliSearchAdapter)
    registry.register("typesense", TypesenseAdapter)
    return registry
