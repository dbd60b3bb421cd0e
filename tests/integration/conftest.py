"""Integration test fixtures — Docker-based MeiliSearch with seed data.

Expects MeiliSearch to be running, e.g.:
    docker run -d -p 7700:7700 -e MEILI_MASTER_KEY=test-master-key getmeili/meilisearch:v1.10

Seed data is loaded on first use; tests are skipped when the service is down.
Run with ``pytest -m integration``.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

import httpx
import pytest

from unsearch.adapters.meilisearch import escape_id

MEILI_HOST = "http://localhost:7700"
MEILI_KEY = "test-master-key"
MEILI_INDEX = "test-guides"

MOCK_DOCUMENTS: list[dict[str, Any]] = [
    {
        "id": "guides/getting-started",
        "title": "Getting started with Svelte",
        "body": "Install the compiler, create a component and mount it.",
        "category": "guides",
        "tags": ["svelte", "frontend"],
        "priority": 1,
    },
    {
        "id": "guides/svelte-kit/routing",
        "title": "Routing in SvelteKit",
        "body": "Filesystem-based routing with layouts and load functions.",
        "category": "guides",
        "tags": ["svelte", "routing"],
        "priority": 5,
    },
    {
        "id": "guides/react-hooks",
        "title": "Thinking in React hooks",
        "body": "State and effects without classes.",
        "category": "guides",
        "tags": ["react", "frontend"],
        "priority": 8,
    },
    {
        "id": "blog/django-orm",
        "title": "Django ORM cookbook",
        "body": "Querysets, annotations and prefetching recipes.",
        "category": "blog",
        "tags": ["python", "backend"],
        "priority": 3,
    },
    {
        "id": "blog/obrien-interview",
        "title": "An interview with O'Brien",
        "body": "Notes from a conversation about search relevance.",
        "category": "blog",
        "tags": ["interview"],
        "priority": 12,
    },
]


def _wait_for_service(url: str, timeout: float = 30.0) -> bool:
    """Block until *url* returns HTTP 200, or timeout."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            r = httpx.get(url, timeout=5)
            if r.status_code == 200:
                return True
        except httpx.HTTPError:
            pass
        time.sleep(2)
    return False


async def _wait_for_task(client: httpx.AsyncClient, resp: httpx.Response) -> None:
    task_uid = resp.json().get("taskUid")
    if task_uid is None:
        return
    for _ in range(60):
        t = await client.get(f"/tasks/{task_uid}")
        if t.json().get("status") in ("succeeded", "failed"):
            return
        await asyncio.sleep(0.5)


async def _seed_meilisearch(host: str = MEILI_HOST, index: str = MEILI_INDEX, api_key: str = MEILI_KEY) -> None:
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }
    async with httpx.AsyncClient(base_url=host, timeout=30, headers=headers) as client:
        await _wait_for_task(client, await client.delete(f"/indexes/{index}"))

        resp = await client.post("/indexes", json={"uid": index, "primaryKey": "id"})
        resp.raise_for_status()
        await _wait_for_task(client, resp)

        resp = await client.patch(
            f"/indexes/{index}/settings",
            json={
                "filterableAttributes": ["category", "tags", "priority", "title"],
                "sortableAttributes": ["priority", "title"],
                "searchableAttributes": ["title", "body", "tags"],
            },
        )
        resp.raise_for_status()
        await _wait_for_task(client, resp)

        documents = [{**doc, "id": escape_id(doc["id"])} for doc in MOCK_DOCUMENTS]
        resp = await client.post(f"/indexes/{index}/documents", json=documents)
        resp.raise_for_status()
        await _wait_for_task(client, resp)


@pytest.fixture(scope="session")
def meilisearch_ready() -> dict[str, str]:
    """Ensure MeiliSearch is running and seeded; returns adapter connection kwargs."""
    if not _wait_for_service(f"{MEILI_HOST}/health"):
        pytest.skip(f"MeiliSearch not available at {MEILI_HOST}")
    asyncio.run(_seed_meilisearch())
    return {"base_url": MEILI_HOST, "index": MEILI_INDEX, "api_key": MEILI_KEY}


@pytest.fixture(scope="session")
def seed_documents() -> list[dict[str, Any]]:
    """The documents loaded into the test index, with their original ids."""
    return MOCK_DOCUMENTS
