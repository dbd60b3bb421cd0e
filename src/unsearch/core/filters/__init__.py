"""Filter compilers — one recursive compiler, one dialect per backend."""

from unsearch.core.filters.algolia import ALGOLIA, AlgoliaDialect
from unsearch.core.filters.base import Dialect, compile_filter
from unsearch.core.filters.meilisearch import MEILISEARCH, MeiliSearchDialect
from unsearch.core.filters.parser import parse_filters
from unsearch.core.filters.predicate import compile_predicate
from unsearch.core.filters.typesense import TYPESENSE, TypesenseDialect

__all__ = [
    "ALGOLIA",
    "MEILISEARCH",
    "TYPESENSE",
    "AlgoliaDialect",
    "Dialect",
    "MeiliSearchDialect",
    "TypesenseDialect",
    "compile_filter",
    "compile_predicate",
    "parse_filters",
]
