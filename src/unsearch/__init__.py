"""unsearch — one search index API over Algolia, MeiliSearch, Typesense and memory.

Quick start::

    from unsearch import Index, MemoryAdapter, and_, eq, gte

    index = Index(MemoryAdapter(keys=["title"], page_size=5))
    await index.submit(products)
    result = await index.search(
        "shirt",
        {"filters": and_(gte("price", 10), eq("category", "clothing")), "facets": ["tags"]},
    )
"""

from unsearch.adapters.algolia import AlgoliaAdapter
from unsearch.adapters.base import AdapterRegistry, SearchAdapter
from unsearch.adapters.base.exceptions import (
    AdapterError,
    ConfigurationError,
    ConnectionError,
    InvalidDocumentError,
    QueryError,
)
from unsearch.adapters.meilisearch import MeiliSearchAdapter
from unsearch.adapters.memory import MemoryAdapter
from unsearch.adapters.typesense import TypesenseAdapter
from unsearch.index import Index
from unsearch.models import (
    Filter,
    SearchOptions,
    SearchResult,
    SoftSearchOptions,
    SortField,
    and_,
    between,
    eq,
    gt,
    gte,
    in_,
    lt,
    lte,
    neq,
    not_,
    or_,
)

__version__ = "0.1.0"

__all__ = [
    "AdapterError",
    "AdapterRegistry",
    "AlgoliaAdapter",
    "ConfigurationError",
    "ConnectionError",
    "Filter",
    "Index",
    "InvalidDocumentError",
    "MeiliSearchAdapter",
    "MemoryAdapter",
    "QueryError",
    "SearchAdapter",
    "SearchOptions",
    "SearchResult",
    "SoftSearchOptions",
    "SortField",
    "TypesenseAdapter",
    "and_",
    "between",
    "eq",
    "gt",
    "gte",
    "in_",
    "lt",
    "lte",
    "neq",
    "not_",
    "or_",
]
