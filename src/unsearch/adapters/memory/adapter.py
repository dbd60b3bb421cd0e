"""In-memory adapter — process-local search with no backend.

Documents live in a dict keyed by id; searches run through
``QueryEngine``. Useful for tests, prototypes and small static sites.

Usage::

    adapter = MemoryAdapter(documents=docs, keys=["title", "tags"], page_size=10)
    index = Index(adapter)
    result = await index.search("svelte", {"facets": ["tags"]})
"""

from __future__ import annotations

import copy
import logging
from datetime import UTC, datetime

from unsearch.adapters.base.adapter import AdapterHealth, SearchAdapter
from unsearch.core.engine import QueryEngine
from unsearch.models.query import Document, SearchOptions
from unsearch.models.result import SearchResult

logger = logging.getLogger(__name__)


class MemoryAdapter(SearchAdapter):
    """Search adapter backed by a Python dict.

    Operations never await, so each call is atomic with respect to other
    coroutines on the same event loop.

    Args:
        documents: Documents to load on construction.
        page_size: Records per result page.
        keys: Fields the text query is matched against.
        threshold: Minimum fuzzy score (0-100) for a text match.
    """

    def __init__(
        self,
        documents: list[Document] | None = None,
        page_size: int = 10,
        keys: list[str] | None = None,
        threshold: int = 70,
    ) -> None:
        self._documents: dict[str, Document] = {}
        self._engine = QueryEngine(keys=keys, page_size=page_size, threshold=threshold)
        self._store(documents or [])

    @property
    def name(self) -> str:
        return "memory"

    @property
    def page_size(self) -> int:
        return self._engine.page_size

    @property
    def keys(self) -> list[str]:
        return self._engine.keys

    async def initialize(self) -> None:
        logger.info("Memory index ready with %d documents", len(self._documents))

    async def shutdown(self) -> None:
        """Nothing to release; documents are kept for reuse."""

    async def health_check(self) -> AdapterHealth:
        return AdapterHealth(
            status="healthy",
            last_check=datetime.now(UTC).isoformat(),
            message=f"{len(self._documents)} documents",
        )

    # ── Documents ────────────────────────────────────────────────────────

    async def get(self, doc_id: str) -> Document | None:
        doc = self._documents.get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    async def submit(self, docs: list[Document]) -> None:
        self._store(docs)

    async def delete(self, doc_id: str) -> None:
        self._documents.pop(doc_id, None)

    async def swap(self, new_index: str) -> None:
        """No secondary index exists to swap with; this is a no-op."""
        logger.debug("Ignoring swap to %r on memory index", new_index)

    async def clear(self) -> None:
        self._documents = {}

    # ── Search ───────────────────────────────────────────────────────────

    async def search(self, query: str, options: SearchOptions) -> SearchResult:
        return self._engine.search(self._documents.values(), query, options)

    def _store(self, docs: list[Document]) -> None:
        for doc in docs:
            self._documents[doc["id"]] = copy.deepcopy(doc)
