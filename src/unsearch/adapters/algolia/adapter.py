"""Algolia adapter — Hosted search via the Algolia REST API.

Talks to ``https://{app_id}.algolia.net`` with ``httpx``; no Algolia SDK is
required. Algolia keys records by ``objectID``, which mirrors the document
``id`` on write and is folded back into ``id`` on read.

Algolia sorts with replica indices configured ahead of time, so query-time
sort options are not sent and ``SearchResult.sort`` is always empty.

Usage::

    adapter = AlgoliaAdapter(app_id="ABC123", api_key="admin-key", index="guides")
    await adapter.initialize()
    result = await adapter.search("svelte", SearchOptions(facets=["tags"]))
"""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from typing import Any
from urllib.parse import quote

import httpx

from unsearch.adapters.base.adapter import AdapterHealth, SearchAdapter
from unsearch.adapters.base.exceptions import ConnectionError, QueryError
from unsearch.core.filters import ALGOLIA, compile_filter
from unsearch.models.query import Document, SearchOptions
from unsearch.models.result import SearchResult, Total

logger = logging.getLogger(__name__)


class AlgoliaAdapter(SearchAdapter):
    """Search adapter for Algolia.

    Args:
        app_id: Algolia application id.
        api_key: API key with search (and, for writes, addObject/deleteObject) ACLs.
        index: Algolia index name.
        page_size: Records per result page (``hitsPerPage``).
        base_url: Override the API host, e.g. for a proxy. Defaults to
            ``https://{app_id}.algolia.net``.
        timeout: HTTP request timeout in seconds.
    """

    def __init__(
        self,
        app_id: str = "",
        api_key: str = "",
        index: str = "documents",
        page_size: int = 10,
        base_url: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._app_id = app_id
        self._api_key = api_key
        self._index = index
        self._page_size = page_size
        self._base_url = (base_url or f"https://{app_id}.algolia.net").rstrip("/")
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    def name(self) -> str:
        return "algolia"

    @property
    def page_size(self) -> int:
        return self._page_size

    async def initialize(self) -> None:
        """Create an ``httpx.AsyncClient`` carrying the Algolia credentials."""
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(self._timeout),
            headers={
                "X-Algolia-Application-Id": self._app_id,
                "X-Algolia-API-Key": self._api_key,
                "Content-Type": "application/json",
            },
        )
        logger.info("Algolia client ready for %s (index: %s)", self._base_url, self._index)

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    # ── Documents ────────────────────────────────────────────────────────

    async def get(self, doc_id: str) -> Document | None:
        client = self._require_client()
        try:
            resp = await client.get(self._object_path(doc_id))
            if resp.status_code == 404:
                return None
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            raise QueryError(f"Failed to fetch object from Algolia: {e}") from e
        return deserialize(data) if data else None

    async def submit(self, docs: list[Document]) -> None:
        """Save objects in one batch; existing objectIDs are replaced."""
        client = self._require_client()
        requests = [{"action": "addObject", "body": serialize(doc)} for doc in docs]
        try:
            resp = await client.post(f"/1/indexes/{self._index}/batch", json={"requests": requests})
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise QueryError(f"Failed to save objects to Algolia: {e}") from e

    async def delete(self, doc_id: str) -> None:
        client = self._require_client()
        try:
            resp = await client.delete(self._object_path(doc_id))
            if resp.status_code == 404:
                return
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise QueryError(f"Failed to delete object from Algolia: {e}") from e

    async def swap(self, new_index: str) -> None:
        """Move this index onto ``new_index`` (``operation: move``)."""
        client = self._require_client()
        try:
            resp = await client.post(
                f"/1/indexes/{self._index}/operation",
                json={
                    "operation": "move",
                    "destination": new_index,
                    "scope": ["rules", "settings"],
                },
            )
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise QueryError(f"Failed to move Algolia index: {e}") from e
        logger.info("Moved Algolia index %s to %s", self._index, new_index)

    async def clear(self) -> None:
        client = self._require_client()
        try:
            resp = await client.post(f"/1/indexes/{self._index}/clear")
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise QueryError(f"Failed to clear Algolia index: {e}") from e

    # ── Search ───────────────────────────────────────────────────────────

    async def search(self, query: str, options: SearchOptions) -> SearchResult:
        """Execute a search using the multi-query endpoint."""
        client = self._require_client()

        expression = compile_filter(options.filters, ALGOLIA) if options.filters is not None else True
        if expression is False:
            return self.empty_result(query, options).model_copy(update={"sort": []})

        if options.sort:
            logger.debug("Algolia ignores query-time sort %s; use a replica index", options.sort)

        request: dict[str, Any] = {
            "indexName": self._index,
            "query": query,
            "page": options.page,
            "hitsPerPage": self._page_size,
        }
        if options.facets:
            request["facets"] = options.facets
        if isinstance(expression, str):
            request["filters"] = expression

        try:
            start = time.monotonic()
            resp = await client.post("/1/indexes/*/queries", json={"requests": [request]})
            resp.raise_for_status()
            took_ms = int((time.monotonic() - start) * 1000)
            results = resp.json().get("results") or [{}]
        except httpx.HTTPError as e:
            raise QueryError(f"Algolia query failed: {e}") from e

        result = results[0]
        total_records = result.get("nbHits") or 0
        logger.debug("Algolia query %r on %s: %d hits in %d ms", query, self._index, total_records, took_ms)

        return SearchResult(
            query=query,
            page=result.get("page") or 0,
            total=Total.from_count(total_records, self._page_size),
            sort=[],
            records=[deserialize(hit) for hit in result.get("hits") or []],
            facets=result.get("facets") or {},
            filters=options.filters,
        )

    # ── Health ───────────────────────────────────────────────────────────

    async def health_check(self) -> AdapterHealth:
        """Fetch the index settings as a liveness probe."""
        if not self._client:
            return AdapterHealth(status="unhealthy", message="Client not initialized")

        try:
            start = time.monotonic()
            resp = await self._client.get(f"/1/indexes/{self._index}/settings")
            latency_ms = int((time.monotonic() - start) * 1000)

            if resp.status_code == 200:
                return AdapterHealth(
                    status="healthy",
                    latency_ms=latency_ms,
                    last_check=datetime.now(UTC).isoformat(),
                    message=f"Index: {self._index}",
                )
            return AdapterHealth(
                status="degraded",
                latency_ms=latency_ms,
                last_check=datetime.now(UTC).isoformat(),
                message=f"Algolia returned HTTP {resp.status_code}",
            )
        except Exception as e:
            return AdapterHealth(status="unhealthy", message=str(e))

    # ── Helpers ──────────────────────────────────────────────────────────

    def _require_client(self) -> httpx.AsyncClient:
        if not self._client:
            raise ConnectionError("Algolia client not initialized.")
        return self._client

    def _object_path(self, doc_id: str) -> str:
        return f"/1/indexes/{self._index}/{quote(doc_id, safe='')}"


def serialize(doc: Document) -> Document:
    return {"objectID": doc["id"], **doc}


def deserialize(hit: Document) -> Document:
    doc = {key: value for key, value in hit.items() if key != "objectID"}
    doc["id"] = hit.get("objectID", hit.get("id"))
    return doc
