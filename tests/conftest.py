"""Shared test fixtures and configuration."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock

import httpx
import pytest

from unsearch.adapters.memory import MemoryAdapter
from unsearch.config.settings import Settings

_CATEGORIES = ["clothing", "electronics", "books", "garden"]
_TAGS = [["sale"], ["new"], ["sale", "new"], []]


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with defaults."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        debug=True,
    )


@pytest.fixture
def products() -> list[dict[str, Any]]:
    """38 products with ids ``p01``..``p38`` and predictable fields.

    ``price`` is ``i * 5``, ``category`` cycles through four values and
    ``tags`` cycles through ``[sale]``, ``[new]``, ``[sale, new]``, ``[]``.
    """
    return [
        {
            "id": f"p{i:02d}",
            "title": f"Product {i:02d}",
            "price": i * 5,
            "category": _CATEGORIES[(i - 1) % 4],
            "tags": list(_TAGS[(i - 1) % 4]),
        }
        for i in range(1, 39)
    ]


@pytest.fixture
def guides() -> list[dict[str, Any]]:
    """A handful of documentation pages for text matching."""
    return [
        {"id": "guides/svelte", "title": "Getting started with Svelte", "tags": ["svelte", "frontend"]},
        {"id": "guides/react", "title": "Thinking in React", "tags": ["react", "frontend"]},
        {"id": "guides/django", "title": "Django ORM cookbook", "tags": ["python", "backend"]},
        {"id": "guides/sveltekit", "title": "Routing in SvelteKit", "tags": ["svelte"], "draft": True},
        {"id": "guides/untitled", "tags": ["misc"]},
    ]


@pytest.fixture
def memory_adapter(products: list[dict[str, Any]]) -> MemoryAdapter:
    return MemoryAdapter(documents=products, keys=["title"], page_size=5)


# ── HTTP helpers ──────────────────────────────────────────────────────────────


def _http_response(
    status_code: int = 200,
    json: Any = None,
    *,
    method: str = "GET",
    text: str | None = None,
) -> httpx.Response:
    request = httpx.Request(method, "http://test")
    if text is not None:
        return httpx.Response(status_code, text=text, request=request)
    return httpx.Response(status_code, json=json, request=request)


@pytest.fixture
def http_response() -> Callable[..., httpx.Response]:
    """Factory for real ``httpx.Response`` objects so ``raise_for_status()`` behaves normally."""
    return _http_response


@pytest.fixture
def mock_client() -> AsyncMock:
    """An ``httpx.AsyncClient`` stand-in; set ``.get/.post/...`` return values per test."""
    return AsyncMock(spec=httpx.AsyncClient)
