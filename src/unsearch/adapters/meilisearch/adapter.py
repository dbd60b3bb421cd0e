"""MeiliSearch adapter — Instant, typo-tolerant search backend.

Communicates via the official REST API using ``httpx``.

MeiliSearch document ids only allow ``[a-zA-Z0-9_-]``, so ids are escaped
on the way in and unescaped on the way out: ``/`` becomes ``--`` and a
literal ``-`` becomes ``-_``. The two transforms are exact inverses.

Usage::

    adapter = MeiliSearchAdapter(
        base_url="http://localhost:7700",
        index="guides",
        api_key="your-master-key",
    )
    await adapter.initialize()
    result = await adapter.search("svelte", SearchOptions(facets=["tags"]))
"""

from __future__ import annotations

import logging
import re
import time
from datetime import UTC, datetime
from typing import Any

import httpx

from unsearch.adapters.base.adapter import AdapterHealth, SearchAdapter
from unsearch.adapters.base.exceptions import ConnectionError, QueryError
from unsearch.core.filters import MEILISEARCH, compile_filter
from unsearch.models.query import Document, SearchOptions, SortField
from unsearch.models.result import SearchResult, Total

logger = logging.getLogger(__name__)

_ESCAPABLE = re.compile(r"[-/]")
_ESCAPED = re.compile(r"-[-_]")


class MeiliSearchAdapter(SearchAdapter):
    """Search adapter for MeiliSearch.

    Communicates with MeiliSearch via its `REST API`_ over HTTP.

    .. _REST API: https://www.meilisearch.com/docs/reference/api/overview

    Args:
        base_url: MeiliSearch instance URL, e.g. ``"http://localhost:7700"``.
        index: MeiliSearch index name (UID).
        api_key: Master key or API key for authentication.
        page_size: Records per result page.
        timeout: HTTP request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:7700",
        index: str = "documents",
        api_key: str | None = None,
        page_size: int = 10,
        timeout: float = 30.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._index = index
        self._api_key = api_key
        self._page_size = page_size
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    def name(self) -> str:
        return "meilisearch"

    @property
    def page_size(self) -> int:
        return self._page_size

    async def initialize(self) -> None:
        """Create an ``httpx.AsyncClient`` and verify connection to MeiliSearch."""
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(self._timeout),
            headers=headers,
        )

        try:
            resp = await self._client.get("/health")
            resp.raise_for_status()
            data = resp.json()
            if data.get("status") != "available":
                raise ConnectionError(f"MeiliSearch not available: {data}")
            logger.info(
                "Connected to MeiliSearch at %s (index: %s)",
                self._base_url,
                self._index,
            )
        except httpx.HTTPError as e:
            raise ConnectionError(f"Failed to connect to MeiliSearch: {e}") from e

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    # ── Documents ────────────────────────────────────────────────────────

    async def get(self, doc_id: str) -> Document | None:
        """Retrieve a document by id; ``None`` when MeiliSearch returns 404."""
        client = self._require_client()
        try:
            resp = await client.get(f"/indexes/{self._index}/documents/{escape_id(doc_id)}")
            if resp.status_code == 404:
                return None
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            raise QueryError(f"Failed to fetch document from MeiliSearch: {e}") from e
        return deserialize(data) if data else None

    async def submit(self, docs: list[Document]) -> None:
        """Add or replace documents (``POST /indexes/{index}/documents``)."""
        client = self._require_client()
        try:
            resp = await client.post(
                f"/indexes/{self._index}/documents",
                json=[serialize(doc) for doc in docs],
            )
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise QueryError(f"Failed to submit documents to MeiliSearch: {e}") from e
        logger.debug("Enqueued %d documents for index %s (task %s)", len(docs), self._index, _task_uid(resp))

    async def delete(self, doc_id: str) -> None:
        client = self._require_client()
        try:
            resp = await client.delete(f"/indexes/{self._index}/documents/{escape_id(doc_id)}")
            if resp.status_code == 404:
                return
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise QueryError(f"Failed to delete document from MeiliSearch: {e}") from e

    async def swap(self, new_index: str) -> None:
        """Swap the contents of ``new_index`` and this index (``POST /swap-indexes``)."""
        client = self._require_client()
        try:
            resp = await client.post("/swap-indexes", json=[{"indexes": [new_index, self._index]}])
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise QueryError(f"Failed to swap MeiliSearch indexes: {e}") from e
        logger.info("Swapped MeiliSearch index %s with %s", self._index, new_index)

    async def clear(self) -> None:
        client = self._require_client()
        try:
            resp = await client.delete(f"/indexes/{self._index}/documents")
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise QueryError(f"Failed to clear MeiliSearch index: {e}") from e

    # ── Search ───────────────────────────────────────────────────────────

    async def search(self, query: str, options: SearchOptions) -> SearchResult:
        """Execute a search using ``POST /indexes/{index}/search``.

        MeiliSearch pages are 1-based; ``options.page`` is 0-based.
        """
        client = self._require_client()

        expression = compile_filter(options.filters, MEILISEARCH) if options.filters is not None else True
        if expression is False:
            return self.empty_result(query, options)

        payload: dict[str, Any] = {
            "q": query,
            "page": options.page + 1,
            "hitsPerPage": self._page_size,
        }
        if options.sort:
            payload["sort"] = sort_strings(options.sort)
        if options.facets:
            payload["facets"] = options.facets
        if isinstance(expression, str):
            payload["filter"] = expression

        try:
            start = time.monotonic()
            resp = await client.post(f"/indexes/{self._index}/search", json=payload)
            resp.raise_for_status()
            took_ms = int((time.monotonic() - start) * 1000)
            data = resp.json()
        except httpx.HTTPError as e:
            raise QueryError(f"MeiliSearch query failed: {e}") from e

        total_records = data.get("totalHits") or 0
        logger.debug("MeiliSearch query %r on %s: %d hits in %d ms", query, self._index, total_records, took_ms)

        return SearchResult(
            query=query,
            page=max((data.get("page") or 1) - 1, 0),
            total=Total.from_count(total_records, self._page_size),
            sort=options.sort,
            records=[deserialize(hit) for hit in data.get("hits") or []],
            facets=data.get("facetDistribution") or {},
            filters=options.filters,
        )

    # ── Health ───────────────────────────────────────────────────────────

    async def health_check(self) -> AdapterHealth:
        """Check MeiliSearch health."""
        if not self._client:
            return AdapterHealth(status="unhealthy", message="Client not initialized")

        try:
            start = time.monotonic()
            resp = await self._client.get("/health")
            latency_ms = int((time.monotonic() - start) * 1000)

            if resp.status_code == 200:
                data = resp.json()
                status = data.get("status", "unknown")
                return AdapterHealth(
                    status="healthy" if status == "available" else "degraded",
                    latency_ms=latency_ms,
                    last_check=datetime.now(UTC).isoformat(),
                    message=f"Index: {self._index}, status: {status}",
                )
            return AdapterHealth(
                status="degraded",
                latency_ms=latency_ms,
                last_check=datetime.now(UTC).isoformat(),
                message=f"MeiliSearch returned HTTP {resp.status_code}",
            )
        except Exception as e:
            return AdapterHealth(status="unhealthy", message=str(e))

    # ── Helpers ──────────────────────────────────────────────────────────

    def _require_client(self) -> httpx.AsyncClient:
        if not self._client:
            raise ConnectionError("MeiliSearch client not initialized.")
        return self._client


def escape_id(doc_id: str) -> str:
    """Encode an id for MeiliSearch: ``/`` -> ``--``, ``-`` -> ``-_``."""
    return _ESCAPABLE.sub(lambda m: "--" if m.group() == "/" else "-_", doc_id)


def unescape_id(doc_id: str) -> str:
    """Inverse of ``escape_id``."""
    return _ESCAPED.sub(lambda m: "/" if m.group() == "--" else "-", doc_id)


def serialize(doc: Document) -> Document:
    return {**doc, "id": escape_id(doc["id"])}


def deserialize(doc: Document) -> Document:
    return {**doc, "id": unescape_id(str(doc["id"]))}


def sort_strings(sort: list[SortField]) -> list[str]:
    return [f"{option.field}:{option.direction}" for option in sort]


def _task_uid(resp: httpx.Response) -> Any:
    try:
        data = resp.json()
    except ValueError:
        return None
    return data.get("taskUid") if isinstance(data, dict) else None
