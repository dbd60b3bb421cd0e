"""Base search adapter — Abstract interface for all search backends.

Every backend implements the same six operations so the ``Index`` facade can
delegate to any of them:

  1. get(): Retrieve one document by id (``None`` when missing)
  2. search(): Query, filter, facet, sort and paginate
  3. submit(): Upsert a batch of documents
  4. delete(): Remove one document (no-op when missing)
  5. swap(): Atomically replace this index with another one
  6. clear(): Remove every document
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

from unsearch.models.query import Document, SearchOptions
from unsearch.models.result import SearchResult, Total


class AdapterHealth(BaseModel):
    """Health status of a search adapter."""

    status: str = Field(description="Health status: healthy, degraded, unhealthy")
    latency_ms: int = Field(default=0, description="Latency of last health check in ms")
    last_check: str | None = Field(default=None, description="ISO timestamp of last health check")
    message: str | None = Field(default=None, description="Additional health message")


class SearchAdapter(ABC):
    """Abstract base class for search adapters.

    Adapters own exactly one backend client, created in ``initialize()`` and
    released in ``shutdown()``. Backend failures surface as ``QueryError``
    with the original exception chained; adapters never retry.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique adapter name (e.g., 'meilisearch', 'memory')."""

    @property
    @abstractmethod
    def page_size(self) -> int:
        """Number of records per result page."""

    @abstractmethod
    async def initialize(self) -> None:
        """Create the backend client and verify connectivity."""

    @abstractmethod
    async def shutdown(self) -> None:
        """Release the backend client."""

    @abstractmethod
    async def health_check(self) -> AdapterHealth:
        """Check the health of the search backend."""

    @abstractmethod
    async def get(self, doc_id: str) -> Document | None:
        """Retrieve a single document by id.

        Returns:
            The document, or ``None`` if it does not exist.
        """

    @abstractmethod
    async def search(self, query: str, options: SearchOptions) -> SearchResult:
        """Execute a search.

        Args:
            query: Free-text query. An empty string matches every document.
            options: Canonical search options.

        Returns:
            One page of results. ``result.filters`` is ``options.filters``.
        """

    @abstractmethod
    async def submit(self, docs: list[Document]) -> None:
        """Insert or replace documents by id."""

    @abstractmethod
    async def delete(self, doc_id: str) -> None:
        """Remove a document. Missing ids are ignored."""

    @abstractmethod
    async def swap(self, new_index: str) -> None:
        """Swap this index with ``new_index`` where the backend supports it."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove every document from the index."""

    def empty_result(self, query: str, options: SearchOptions) -> SearchResult:
        """Result for a search that cannot match anything."""
        return SearchResult(
            query=query,
            page=options.page,
            total=Total.from_count(0, self.page_size),
            sort=options.sort,
            filters=options.filters,
        )
