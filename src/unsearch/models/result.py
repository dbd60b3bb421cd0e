"""Search result models."""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, Field

from unsearch.models.query import Document, SortField

FacetStats = dict[str, int]
"""Distribution of facet value -> number of matching records."""


class Total(BaseModel):
    """Totals across all pages."""

    pages: int = Field(default=0, ge=0, description="Number of pages at the adapter's page size")
    records: int = Field(default=0, ge=0, description="Number of matching records")

    @classmethod
    def from_count(cls, records: int, page_size: int) -> Total:
        """Build totals for ``records`` matches split into pages of ``page_size``."""
        return cls(pages=math.ceil(records / page_size) if page_size else 0, records=records)


class SearchResult(BaseModel):
    """Canonical search response returned by every adapter."""

    query: str = Field(description="The query string as given")
    page: int = Field(default=0, ge=0, description="0-based page number")
    total: Total = Field(default_factory=Total, description="Totals across all pages")
    sort: list[SortField] = Field(default_factory=list, description="Sort keys that were applied")
    records: list[Document] = Field(default_factory=list, description="Records on this page")
    facets: dict[str, FacetStats] = Field(default_factory=dict, description="Facet distributions")
    filters: Any = Field(default=None, description="The filters argument, echoed unchanged")
