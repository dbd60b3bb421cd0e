"""In-memory query engine — search without a backend.

Runs the same contract the hosted adapters promise over a list of documents:

  1. Match: fuzzy text match over the searchable keys (empty query = all)
  2. Filter: evaluate the filter tree against each matched document
  3. Facet: count values over the whole filtered set (before pagination)
  4. Sort: stable multi-key sort
  5. Paginate: 0-based slice of ``page_size`` records, returned as copies

Usage::

    engine = QueryEngine(keys=["title", "tags"], page_size=10)
    result = engine.search(documents, "svelt", SearchOptions(facets=["tags"]))
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Mapping
from functools import cmp_to_key
from typing import Any

from fuzzywuzzy import fuzz

from unsearch.core.filters.predicate import MISSING, compile_predicate, resolve_field
from unsearch.models.query import Document, SearchOptions, SortField
from unsearch.models.result import FacetStats, SearchResult, Total

logger = logging.getLogger(__name__)


class QueryEngine:
    """Reference implementation of search over process-local documents.

    Args:
        keys: Fields searched by the text query. Dotted paths reach into
            nested mappings; list values are matched element by element.
        page_size: Records per page.
        threshold: Minimum fuzzy score (0-100) for a field to match.
    """

    def __init__(
        self,
        keys: list[str] | None = None,
        page_size: int = 10,
        threshold: int = 70,
    ) -> None:
        self.keys = list(keys or [])
        self.page_size = page_size
        self.threshold = threshold

    def search(self, documents: Iterable[Document], query: str, options: SearchOptions) -> SearchResult:
        """Run the full pipeline and return one page of results."""
        matched = self.match(list(documents), query)
        filtered = self.filter(matched, options)
        facets = aggregate_facets(filtered, options.facets)
        ordered = order(filtered, options.sort)
        records = copy.deepcopy(paginate(ordered, options.page, self.page_size))

        logger.debug(
            "Memory search %r: %d matched, %d filtered, page %d",
            query,
            len(matched),
            len(filtered),
            options.page,
        )

        return SearchResult(
            query=query,
            page=options.page,
            total=Total.from_count(len(filtered), self.page_size),
            sort=options.sort,
            records=records,
            facets=facets,
            filters=options.filters,
        )

    # ── Stages ───────────────────────────────────────────────────────────

    def match(self, documents: list[Document], query: str) -> list[Document]:
        """Fuzzy-match ``query`` against the searchable keys.

        An empty query returns every document in input order. Otherwise
        matches are ordered by descending score, ties kept in input order.
        """
        if not query:
            return documents

        needle = query.lower()
        scored: list[tuple[int, Document]] = []
        for doc in documents:
            score = self.score(doc, needle)
            if score >= self.threshold:
                scored.append((score, doc))

        scored.sort(key=lambda pair: pair[0], reverse=True)
        return [doc for _, doc in scored]

    def score(self, doc: Document, needle: str) -> int:
        """Best fuzzy score of ``needle`` against any searchable value of ``doc``.

        Substring scoring only applies when the query fits inside the value;
        a value shorter than the query is scored as a whole.
        """
        best = 0
        for key in self.keys:
            for text in _texts(resolve_field(doc, key)):
                text = text.lower()
                if len(needle) <= len(text):
                    score = fuzz.partial_ratio(needle, text)
                else:
                    score = fuzz.ratio(needle, text)
                best = max(best, score)
        return best

    def filter(self, documents: list[Document], options: SearchOptions) -> list[Document]:
        if options.filters is None:
            return documents
        predicate = compile_predicate(options.filters)
        return [doc for doc in documents if predicate(doc)]


def _texts(value: Any) -> list[str]:
    if value is MISSING:
        return []
    if isinstance(value, list | tuple | set):
        return [str(item) for item in value if item is not None]
    return [str(value)]


def aggregate_facets(documents: Iterable[Document], facets: list[str]) -> dict[str, FacetStats]:
    """Count facet values; each element of a list-valued field counts once.

    Only facets with at least one value appear in the result.
    """
    results: dict[str, FacetStats] = {}
    for doc in documents:
        for facet in facets:
            value = resolve_field(doc, facet)
            if value is MISSING:
                continue
            values = value if isinstance(value, list | tuple | set) else [value]
            for item in values:
                if item is None:
                    continue
                stats = results.setdefault(facet, {})
                key = facet_key(item)
                stats[key] = stats.get(key, 0) + 1
    return results


def facet_key(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def order(documents: list[Document], sort: list[SortField]) -> list[Document]:
    """Stable multi-key sort.

    Absent values sort last in ascending order and first in descending
    order. Values of different, unorderable types are ordered by type name.
    """
    if not sort:
        return documents

    def comparator(a: Mapping[str, Any], b: Mapping[str, Any]) -> int:
        for option in sort:
            reverse = option.direction == "desc"
            left = resolve_field(a, option.field)
            right = resolve_field(b, option.field)

            if left is MISSING and right is MISSING:
                continue
            if left is MISSING:
                return -1 if reverse else 1
            if right is MISSING:
                return 1 if reverse else -1

            result = compare_values(left, right)
            if result != 0:
                return -result if reverse else result
        return 0

    return sorted(documents, key=cmp_to_key(comparator))


def compare_values(left: Any, right: Any) -> int:
    try:
        if left < right:
            return -1
        if left > right:
            return 1
        return 0
    except TypeError:
        return compare_values(type(left).__name__, type(right).__name__)


def paginate(documents: list[Document], page: int, page_size: int) -> list[Document]:
    """Slice one 0-based page; out-of-range pages are empty."""
    start = page * page_size
    return documents[start : start + page_size]
