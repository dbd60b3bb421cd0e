"""Search option models.

``SoftSearchOptions`` is what callers hand to ``Index.search()``; it is loosely
typed and normalised into the canonical ``SearchOptions`` that every adapter
receives.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from unsearch.models.filters import Filter

Document = dict[str, Any]
"""A searchable record: an open mapping with a mandatory string ``id``."""


class SortField(BaseModel):
    """One sort key."""

    field: str = Field(description="Document field to sort on")
    direction: Literal["asc", "desc"] = Field(default="asc", description="Sort direction")


Sort = str | SortField | dict[str, Any] | list[str | SortField | dict[str, Any]]
"""Loose sort input: a field name, a single sort field, or a list of either."""


class SearchOptions(BaseModel):
    """Canonical, adapter-facing search options."""

    page: int = Field(default=0, ge=0, description="0-based page number")
    sort: list[SortField] = Field(default_factory=list, description="Ordered sort keys")
    facets: list[str] = Field(default_factory=list, description="Fields to compute value distributions for")
    filters: Filter | None = Field(default=None, description="Filter tree, if any")


class SoftSearchOptions(BaseModel):
    """Caller-facing search options; every field is optional and loosely typed."""

    page: str | int | None = Field(default=None, description="Page number, as int or numeric string")
    sort: Sort | None = Field(default=None, description="Sort shorthand")
    facets: str | list[str] | None = Field(default=None, description="Facet field or fields")
    filters: Any = Field(
        default=None,
        description="A filter tree, a per-field mapping, or a list of either (implicit AND)",
    )
