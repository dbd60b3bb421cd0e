"""Typesense adapter — Typo-tolerant search via the Typesense REST API.

Talks to the first configured node with ``httpx``; no Typesense SDK is
required. ``swap()`` points an alias named after this collection at
another collection, so searches should go through the alias.

Usage::

    adapter = TypesenseAdapter(
        nodes=[{"host": "localhost", "port": 8108, "protocol": "http"}],
        api_key="xyz",
        collection="guides",
        query_by=["title", "body"],
    )
    await adapter.initialize()
    result = await adapter.search("svelte", SearchOptions(facets=["tags"]))
"""

from __future__ import annotations

import json
import logging
import time
from datetime import UTC, datetime
from typing import Any
from urllib.parse import quote

import httpx

from unsearch.adapters.base.adapter import AdapterHealth, SearchAdapter
from unsearch.adapters.base.exceptions import ConfigurationError, ConnectionError, QueryError
from unsearch.core.filters import TYPESENSE, compile_filter
from unsearch.models.query import Document, SearchOptions, SortField
from unsearch.models.result import FacetStats, SearchResult, Total

logger = logging.getLogger(__name__)


class TypesenseAdapter(SearchAdapter):
    """Search adapter for Typesense.

    Args:
        nodes: Typesense nodes as ``{"host", "port", "protocol"}`` dicts.
            Only the first node is used.
        api_key: Typesense API key.
        collection: Collection (or alias) name.
        page_size: Records per result page (``per_page``).
        query_by: Fields the text query is matched against.
        timeout: HTTP request timeout in seconds.
    """

    def __init__(
        self,
        nodes: list[dict[str, Any]] | None = None,
        api_key: str = "",
        collection: str = "documents",
        page_size: int = 10,
        query_by: list[str] | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._nodes = nodes or [{"host": "localhost", "port": 8108, "protocol": "http"}]
        self._api_key = api_key
        self._collection = collection
        self._page_size = page_size
        self._query_by = list(query_by or [])
        self._timeout = timeout
        self._base_url = node_url(self._nodes[0])
        self._client: httpx.AsyncClient | None = None

    @property
    def name(self) -> str:
        return "typesense"

    @property
    def page_size(self) -> int:
        return self._page_size

    async def initialize(self) -> None:
        """Create an ``httpx.AsyncClient`` and check ``/health``."""
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(self._timeout),
            headers={"X-TYPESENSE-API-KEY": self._api_key},
        )

        try:
            resp = await self._client.get("/health")
            resp.raise_for_status()
            if not resp.json().get("ok"):
                raise ConnectionError(f"Typesense not healthy: {resp.text}")
            logger.info(
                "Connected to Typesense at %s (collection: %s)",
                self._base_url,
                self._collection,
            )
        except httpx.HTTPError as e:
            raise ConnectionError(f"Failed to connect to Typesense: {e}") from e

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    # ── Documents ────────────────────────────────────────────────────────

    async def get(self, doc_id: str) -> Document | None:
        client = self._require_client()
        try:
            resp = await client.get(self._document_path(doc_id))
            if resp.status_code == 404:
                return None
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            raise QueryError(f"Failed to retrieve document from Typesense: {e}") from e
        return data or None

    async def submit(self, docs: list[Document]) -> None:
        """Upsert documents through the JSONL import endpoint.

        Raises:
            QueryError: If the request fails or any document is rejected.
        """
        client = self._require_client()
        body = "\n".join(json.dumps(doc, default=str) for doc in docs)
        try:
            resp = await client.post(
                f"/collections/{self._collection}/documents/import",
                params={"action": "upsert"},
                content=body.encode(),
                headers={"Content-Type": "text/plain"},
            )
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise QueryError(f"Failed to import documents into Typesense: {e}") from e

        failures = [line for line in _import_results(resp.text) if not line.get("success")]
        if failures:
            raise QueryError(
                f"Typesense rejected {len(failures)} of {len(docs)} documents: {failures[0].get('error')}"
            )

    async def delete(self, doc_id: str) -> None:
        client = self._require_client()
        try:
            resp = await client.delete(self._document_path(doc_id))
            if resp.status_code == 404:
                return
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise QueryError(f"Failed to delete document from Typesense: {e}") from e

    async def swap(self, new_index: str) -> None:
        """Point the alias named after this collection at ``new_index``."""
        client = self._require_client()
        try:
            resp = await client.put(
                f"/aliases/{self._collection}",
                json={"collection_name": new_index},
            )
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise QueryError(f"Failed to upsert Typesense alias: {e}") from e
        logger.info("Pointed Typesense alias %s at %s", self._collection, new_index)

    async def clear(self) -> None:
        client = self._require_client()
        try:
            resp = await client.delete(
                f"/collections/{self._collection}/documents",
                params={"truncate": "true"},
            )
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise QueryError(f"Failed to clear Typesense collection: {e}") from e

    # ── Search ───────────────────────────────────────────────────────────

    async def search(self, query: str, options: SearchOptions) -> SearchResult:
        """Execute a search on ``/collections/{collection}/documents/search``.

        Typesense pages are 1-based; ``options.page`` is 0-based. An empty
        query is sent as ``*`` (match everything).
        """
        client = self._require_client()

        expression = compile_filter(options.filters, TYPESENSE) if options.filters is not None else True
        if expression is False:
            return self.empty_result(query, options)

        params: dict[str, Any] = {
            "q": query or "*",
            "page": options.page + 1,
            "per_page": self._page_size,
        }
        if self._query_by:
            params["query_by"] = ",".join(self._query_by)
        if options.sort:
            params["sort_by"] = sort_string(options.sort)
        if options.facets:
            params["facet_by"] = ",".join(options.facets)
        if isinstance(expression, str):
            params["filter_by"] = expression

        try:
            start = time.monotonic()
            resp = await client.get(f"/collections/{self._collection}/documents/search", params=params)
            resp.raise_for_status()
            took_ms = int((time.monotonic() - start) * 1000)
            data = resp.json()
        except httpx.HTTPError as e:
            raise QueryError(f"Typesense query failed: {e}") from e

        total_records = data.get("found") or 0
        logger.debug("Typesense query %r on %s: %d hits in %d ms", query, self._collection, total_records, took_ms)

        return SearchResult(
            query=query,
            page=max((data.get("page") or 1) - 1, 0),
            total=Total.from_count(total_records, self._page_size),
            sort=options.sort,
            records=[hit["document"] for hit in data.get("hits") or [] if "document" in hit],
            facets=facet_distribution(data.get("facet_counts") or []),
            filters=options.filters,
        )

    # ── Health ───────────────────────────────────────────────────────────

    async def health_check(self) -> AdapterHealth:
        """Check Typesense ``/health``."""
        if not self._client:
            return AdapterHealth(status="unhealthy", message="Client not initialized")

        try:
            start = time.monotonic()
            resp = await self._client.get("/health")
            latency_ms = int((time.monotonic() - start) * 1000)

            if resp.status_code == 200:
                ok = bool(resp.json().get("ok"))
                return AdapterHealth(
                    status="healthy" if ok else "degraded",
                    latency_ms=latency_ms,
                    last_check=datetime.now(UTC).isoformat(),
                    message=f"Collection: {self._collection}, ok: {ok}",
                )
            return AdapterHealth(
                status="degraded",
                latency_ms=latency_ms,
                last_check=datetime.now(UTC).isoformat(),
                message=f"Typesense returned HTTP {resp.status_code}",
            )
        except Exception as e:
            return AdapterHealth(status="unhealthy", message=str(e))

    # ── Helpers ──────────────────────────────────────────────────────────

    def _require_client(self) -> httpx.AsyncClient:
        if not self._client:
            raise ConnectionError("Typesense client not initialized.")
        return self._client

    def _document_path(self, doc_id: str) -> str:
        return f"/collections/{self._collection}/documents/{quote(doc_id, safe='')}"


def node_url(node: dict[str, Any]) -> str:
    """Build a base URL from a Typesense node dict."""
    if "url" in node:
        return str(node["url"]).rstrip("/")
    try:
        return f"{node.get('protocol', 'http')}://{node['host']}:{node.get('port', 8108)}"
    except KeyError as e:
        raise ConfigurationError(f"Typesense node needs a 'host' or 'url': {node!r}") from e


def sort_string(sort: list[SortField]) -> str:
    return ",".join(f"{option.field}:{option.direction}" for option in sort)


def facet_distribution(facet_counts: list[dict[str, Any]]) -> dict[str, FacetStats]:
    """Convert Typesense ``facet_counts`` into ``{field: {value: count}}``."""
    facets: dict[str, FacetStats] = {}
    for facet in facet_counts:
        stats = facets.setdefault(facet["field_name"], {})
        for count in facet.get("counts") or []:
            stats[str(count["value"])] = count["count"]
    return facets


def _import_results(text: str) -> list[dict[str, Any]]:
    return [json.loads(line) for line in text.splitlines() if line.strip()]
