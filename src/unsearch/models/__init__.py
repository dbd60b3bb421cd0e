"""Data models — filters, search options and results."""

from unsearch.models.filters import (
    Between,
    Comparison,
    Condition,
    Filter,
    In,
    Not,
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
from unsearch.models.query import Document, SearchOptions, SoftSearchOptions, Sort, SortField
from unsearch.models.result import FacetStats, SearchResult, Total

__all__ = [
    "Between",
    "Comparison",
    "Condition",
    "Document",
    "FacetStats",
    "Filter",
    "In",
    "Not",
    "SearchOptions",
    "SearchResult",
    "SoftSearchOptions",
    "Sort",
    "SortField",
    "Total",
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
