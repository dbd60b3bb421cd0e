"""Index facade — the caller-facing entry point.

``Index`` validates and normalizes loose caller input, then delegates to
whichever adapter it was given. Behavior is the same for every backend.

Usage::

    async with Index(MemoryAdapter(keys=["title"])) as index:
        await index.submit([{"id": "guides/svelte", "title": "Svelte"}])
        result = await index.search("svelte", {"sort": "-date", "page": "0"})
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from unsearch.adapters.base.exceptions import InvalidDocumentError
from unsearch.core.normalize import normalize_options
from unsearch.models.query import Document, SoftSearchOptions
from unsearch.models.result import SearchResult

if TYPE_CHECKING:
    from unsearch.adapters.base.adapter import SearchAdapter
    from unsearch.adapters.base.registry import AdapterRegistry
    from unsearch.config.settings import IndexSettings

logger = logging.getLogger(__name__)

# Constructor keyword that names the index/collection for each built-in adapter.
_INDEX_PARAMS = {"algolia": "index", "meilisearch": "index", "typesense": "collection"}
# Searchable fields are configured server-side for Algolia and MeiliSearch.
_KEYS_PARAMS = {"memory": "keys", "typesense": "query_by"}


class Index:
    """A searchable index backed by a single adapter.

    Args:
        adapter: The backend adapter every call is delegated to.
    """

    def __init__(self, adapter: SearchAdapter) -> None:
        self._adapter = adapter

    @classmethod
    def from_settings(cls, settings: IndexSettings, registry: AdapterRegistry | None = None) -> Index:
        """Build an index (not yet initialized) from configuration.

        Args:
            settings: Which adapter to use and how to configure it.
            registry: Adapter registry; defaults to the built-in adapters.
        """
        if registry is None:
            from unsearch.adapters import default_registry

            registry = default_registry()

        kwargs: dict[str, Any] = dict(settings.options)
        kwargs.setdefault("page_size", settings.page_size)
        if settings.adapter in _INDEX_PARAMS:
            kwargs.setdefault(_INDEX_PARAMS[settings.adapter], settings.index)
        if settings.keys and settings.adapter in _KEYS_PARAMS:
            kwargs.setdefault(_KEYS_PARAMS[settings.adapter], settings.keys)

        return cls(registry.create(settings.adapter, **kwargs))

    @property
    def adapter(self) -> SearchAdapter:
        return self._adapter

    async def __aenter__(self) -> Index:
        await self._adapter.initialize()
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self._adapter.shutdown()

    async def get(self, doc_id: str) -> Document | None:
        """Return the document with ``doc_id``, or ``None`` if it does not exist."""
        return await self._adapter.get(doc_id)

    async def submit(self, docs: Document | list[Document]) -> None:
        """Insert or replace one document or a list of documents.

        An empty list is a no-op and never reaches the adapter.

        Raises:
            InvalidDocumentError: If any document lacks a non-empty string ``id``.
        """
        batch = [docs] if isinstance(docs, Mapping) else list(docs)
        if not batch:
            return

        for doc in batch:
            doc_id = doc.get("id") if isinstance(doc, Mapping) else None
            if not isinstance(doc_id, str) or not doc_id:
                raise InvalidDocumentError(f"Documents need a non-empty string 'id', got {doc!r}")

        await self._adapter.submit(batch)
        logger.debug("Submitted %d documents to %s", len(batch), self._adapter.name)

    async def search(
        self,
        query: str = "",
        options: SoftSearchOptions | Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> SearchResult:
        """Search the index.

        Args:
            query: Free-text query; empty matches every document.
            options: Page, sort, facets and filters in any accepted shorthand.
            **kwargs: Same fields as ``options``, merged over it.

        Returns:
            One page of results. ``result.filters`` is exactly the
            ``filters`` value that was passed in.

        Raises:
            ConfigurationError: If the options are malformed. Raised before
                the adapter is called.
        """
        if kwargs:
            if isinstance(options, SoftSearchOptions):
                base = {name: getattr(options, name) for name in options.model_fields_set}
            else:
                base = dict(options or {})
            options = {**base, **kwargs}

        canonical = normalize_options(options)
        result = await self._adapter.search(query, canonical)
        return result.model_copy(update={"filters": _caller_filters(options)})

    async def delete(self, doc_id: str) -> None:
        """Remove a document; missing ids are ignored."""
        await self._adapter.delete(doc_id)

    async def swap(self, new_index: str) -> None:
        """Swap this index with ``new_index`` where the backend supports it."""
        await self._adapter.swap(new_index)

    async def clear(self) -> None:
        """Remove every document."""
        await self._adapter.clear()


def _caller_filters(options: SoftSearchOptions | Mapping[str, Any] | None) -> Any:
    if options is None:
        return None
    if isinstance(options, Mapping):
        return options.get("filters")
    return options.filters
