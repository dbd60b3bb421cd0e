"""Option normalization — turns loose caller input into canonical ``SearchOptions``."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from unsearch.adapters.base.exceptions import ConfigurationError
from unsearch.core.filters.parser import parse_filters
from unsearch.models.filters import Filter
from unsearch.models.query import SearchOptions, SoftSearchOptions, Sort, SortField

_DIRECTIONS = ("asc", "desc")


def normalize_sort(sort: Sort | None) -> list[SortField]:
    """Normalize sort shorthand into an ordered list of ``SortField``.

    Accepted forms::

        None / "" / []                  -> []
        "title"                         -> [title asc]
        "-title" or "title:desc"        -> [title desc]
        ["title", {"field": "id", "direction": "desc"}, SortField(...)]
    """
    if not sort:
        return []
    if isinstance(sort, str | SortField | Mapping):
        sort = [sort]

    fields: list[SortField] = []
    for option in sort:
        if isinstance(option, SortField):
            fields.append(option)
        elif isinstance(option, str):
            fields.append(_parse_sort_string(option))
        elif isinstance(option, Mapping):
            try:
                fields.append(SortField(field=option["field"], direction=option.get("direction") or "asc"))
            except (KeyError, ValidationError) as e:
                raise ConfigurationError(f"Invalid sort option {dict(option)!r}") from e
        else:
            raise ConfigurationError(f"Invalid sort option {option!r}")
    return fields


def _parse_sort_string(option: str) -> SortField:
    option = option.strip()
    if option.startswith("-"):
        return SortField(field=option[1:], direction="desc")
    field, sep, direction = option.rpartition(":")
    if sep and direction.lower() in _DIRECTIONS:
        return SortField(field=field, direction=direction.lower())  # type: ignore[arg-type]
    return SortField(field=option)


def normalize_page(page: str | int | None) -> int:
    """Normalize a page number given as an int or numeric string."""
    if page is None or page == "":
        return 0
    if isinstance(page, bool):
        raise ConfigurationError(f"Invalid page: {page!r}")
    try:
        number = int(page)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid page: {page!r}") from e
    if number < 0:
        raise ConfigurationError(f"Page must be non-negative, got {number}")
    return number


def normalize_facets(facets: str | list[str] | None) -> list[str]:
    if not facets:
        return []
    if isinstance(facets, str):
        return [facets]
    return list(facets)


def normalize_filters(filters: Any) -> Filter | None:
    """Normalize filters to a single filter tree (``None`` when absent)."""
    if filters is None:
        return None
    return parse_filters(filters)


def normalize_options(options: SoftSearchOptions | Mapping[str, Any] | None = None) -> SearchOptions:
    """Normalize caller-facing options into canonical ``SearchOptions``.

    Raises:
        ConfigurationError: If the page, sort or filters are malformed.
    """
    if options is None:
        return SearchOptions()
    if isinstance(options, Mapping):
        try:
            options = SoftSearchOptions.model_validate(options)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid search options: {e}") from e

    return SearchOptions(
        page=normalize_page(options.page),
        sort=normalize_sort(options.sort),
        facets=normalize_facets(options.facets),
        filters=normalize_filters(options.filters),
    )
