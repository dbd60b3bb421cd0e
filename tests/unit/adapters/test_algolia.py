"""Tests for the Algolia adapter."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest

from unsearch.adapters.algolia import AlgoliaAdapter
from unsearch.adapters.base.exceptions import ConnectionError, QueryError
from unsearch.models.filters import and_, between, eq, gte, or_
from unsearch.models.query import SearchOptions, SortField

# ── Fixtures ──────────────────────────────────────────────────────────────────


@pytest.fixture
def adapter(mock_client: AsyncMock) -> AlgoliaAdapter:
    a = AlgoliaAdapter(app_id="APP123", api_key="admin-key", index="products", page_size=5)
    a._client = mock_client
    return a


@pytest.fixture
def sample_algolia_response() -> dict[str, Any]:
    return {
        "results": [
            {
                "hits": [
                    {"objectID": "shirt", "title": "T-Shirt", "_highlightResult": {}},
                    {"objectID": "socks", "title": "Socks"},
                ],
                "nbHits": 12,
                "page": 1,
                "nbPages": 3,
                "hitsPerPage": 5,
                "facets": {"category": {"clothing": 12}},
                "query": "shirt",
            }
        ]
    }


# ── Properties ───────────────────────────────────────────────────────────────


class TestAlgoliaProperties:
    def test_name(self, adapter: AlgoliaAdapter) -> None:
        assert adapter.name == "algolia"

    def test_base_url_from_app_id(self) -> None:
        assert AlgoliaAdapter(app_id="APP123")._base_url == "https://APP123.algolia.net"

    def test_base_url_override(self) -> None:
        assert AlgoliaAdapter(app_id="x", base_url="http://proxy:8080/")._base_url == "http://proxy:8080"


# ── Search ───────────────────────────────────────────────────────────────────


class TestAlgoliaSearch:
    async def test_search_not_initialized_raises(self) -> None:
        with pytest.raises(ConnectionError, match="not initialized"):
            await AlgoliaAdapter().search("shirt", SearchOptions())

    async def test_search_maps_response(
        self, adapter: AlgoliaAdapter, mock_client: AsyncMock, http_response, sample_algolia_response: dict
    ) -> None:
        mock_client.post.return_value = http_response(200, sample_algolia_response, method="POST")

        result = await adapter.search("shirt", SearchOptions(page=1, facets=["category"]))

        assert result.page == 1
        assert result.total.records == 12
        assert result.total.pages == 3
        assert result.records[0]["id"] == "shirt"
        assert "objectID" not in result.records[0]
        assert result.facets == {"category": {"clothing": 12}}

    async def test_search_request(self, adapter: AlgoliaAdapter, mock_client: AsyncMock, http_response) -> None:
        mock_client.post.return_value = http_response(200, {"results": [{}]}, method="POST")
        options = SearchOptions(
            page=2,
            facets=["category"],
            filters=and_(eq("category", "clothing"), between("price", 10, 20)),
        )

        await adapter.search("shirt", options)

        assert mock_client.post.call_args.args[0] == "/1/indexes/*/queries"
        assert mock_client.post.call_args.kwargs["json"] == {
            "requests": [
                {
                    "indexName": "products",
                    "query": "shirt",
                    "page": 2,
                    "hitsPerPage": 5,
                    "facets": ["category"],
                    "filters": "(category:clothing) AND (price:10 TO 20)",
                }
            ]
        }

    async def test_sort_is_not_sent_and_not_echoed(
        self, adapter: AlgoliaAdapter, mock_client: AsyncMock, http_response
    ) -> None:
        mock_client.post.return_value = http_response(200, {"results": [{}]}, method="POST")

        result = await adapter.search("", SearchOptions(sort=[SortField(field="price", direction="desc")]))

        request = mock_client.post.call_args.kwargs["json"]["requests"][0]
        assert "sort" not in request
        assert "filters" not in request
        assert result.sort == []
        assert result.page == 0

    async def test_unsatisfiable_filter_skips_request(self, adapter: AlgoliaAdapter, mock_client: AsyncMock) -> None:
        options = SearchOptions(sort=[SortField(field="price")], filters=or_())

        result = await adapter.search("shirt", options)

        mock_client.post.assert_not_called()
        assert result.records == []
        assert result.sort == []

    async def test_filter_always_true_is_omitted(
        self, adapter: AlgoliaAdapter, mock_client: AsyncMock, http_response
    ) -> None:
        mock_client.post.return_value = http_response(200, {"results": [{}]}, method="POST")

        await adapter.search("", SearchOptions(filters=or_(gte("price", 10), and_())))

        assert "filters" not in mock_client.post.call_args.kwargs["json"]["requests"][0]

    async def test_search_http_error(self, adapter: AlgoliaAdapter, mock_client: AsyncMock, http_response) -> None:
        mock_client.post.return_value = http_response(403, {"message": "Invalid API key"}, method="POST")
        with pytest.raises(QueryError, match="Algolia query failed"):
            await adapter.search("shirt", SearchOptions())


# ── Documents ────────────────────────────────────────────────────────────────


class TestAlgoliaDocuments:
    async def test_get(self, adapter: AlgoliaAdapter, mock_client: AsyncMock, http_response) -> None:
        mock_client.get.return_value = http_response(200, {"objectID": "guides/svelte", "title": "Svelte"})

        doc = await adapter.get("guides/svelte")

        assert mock_client.get.call_args.args[0] == "/1/indexes/products/guides%2Fsvelte"
        assert doc == {"id": "guides/svelte", "title": "Svelte"}

    async def test_get_missing(self, adapter: AlgoliaAdapter, mock_client: AsyncMock, http_response) -> None:
        mock_client.get.return_value = http_response(404, {"message": "ObjectID does not exist"})
        assert await adapter.get("nope") is None

    async def test_submit_batches_with_object_ids(
        self, adapter: AlgoliaAdapter, mock_client: AsyncMock, http_response
    ) -> None:
        mock_client.post.return_value = http_response(200, {"taskID": 1}, method="POST")

        await adapter.submit([{"id": "shirt", "title": "T-Shirt"}])

        assert mock_client.post.call_args.args[0] == "/1/indexes/products/batch"
        assert mock_client.post.call_args.kwargs["json"] == {
            "requests": [{"action": "addObject", "body": {"objectID": "shirt", "id": "shirt", "title": "T-Shirt"}}]
        }

    async def test_delete_missing_is_noop(self, adapter: AlgoliaAdapter, mock_client: AsyncMock, http_response) -> None:
        mock_client.delete.return_value = http_response(404, {}, method="DELETE")
        await adapter.delete("nope")
        assert mock_client.delete.call_args.args[0] == "/1/indexes/products/nope"

    async def test_swap_moves_index(self, adapter: AlgoliaAdapter, mock_client: AsyncMock, http_response) -> None:
        mock_client.post.return_value = http_response(200, {"taskID": 2}, method="POST")

        await adapter.swap("products_tmp")

        assert mock_client.post.call_args.args[0] == "/1/indexes/products/operation"
        assert mock_client.post.call_args.kwargs["json"] == {
            "operation": "move",
            "destination": "products_tmp",
            "scope": ["rules", "settings"],
        }

    async def test_clear(self, adapter: AlgoliaAdapter, mock_client: AsyncMock, http_response) -> None:
        mock_client.post.return_value = http_response(200, {"taskID": 3}, method="POST")
        await adapter.clear()
        assert mock_client.post.call_args.args[0] == "/1/indexes/products/clear"

    async def test_clear_error(self, adapter: AlgoliaAdapter, mock_client: AsyncMock, http_response) -> None:
        mock_client.post.return_value = http_response(500, {}, method="POST")
        with pytest.raises(QueryError, match="clear"):
            await adapter.clear()


# ── Health ───────────────────────────────────────────────────────────────────


class TestAlgoliaHealth:
    async def test_healthy(self, adapter: AlgoliaAdapter, mock_client: AsyncMock, http_response) -> None:
        mock_client.get.return_value = http_response(200, {"hitsPerPage": 20})
        assert (await adapter.health_check()).status == "healthy"
        assert mock_client.get.call_args.args[0] == "/1/indexes/products/settings"

    async def test_degraded(self, adapter: AlgoliaAdapter, mock_client: AsyncMock, http_response) -> None:
        mock_client.get.return_value = http_response(403, {})
        assert (await adapter.health_check()).status == "degraded"
