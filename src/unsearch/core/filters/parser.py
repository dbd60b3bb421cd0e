"""Mapping-form filters — parses per-field match specs into a filter tree.

Callers may describe filters as plain data instead of building them with the
helpers in ``unsearch.models.filters``::

    {"title": {"eq": "Svelte"}, "priority": {"gt": 10}}
    {"or": [{"tags": {"in": ["react", "svelte"]}}, {"price": {"between": [10, 20]}}]}
    {"not": {"category": {"eq": "clothing"}}}

Several fields in one mapping, and several operators for one field, are
AND-ed. Serialized filter trees (mappings with an ``op`` key, as produced by
``model_dump()``) are accepted too.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import TypeAdapter, ValidationError

from unsearch.adapters.base.exceptions import ConfigurationError
from unsearch.models.filters import (
    Between,
    Comparison,
    Filter,
    FilterNode,
    In,
    and_,
    not_,
    or_,
)

_COMPARISONS = {
    "eq": "=",
    "neq": "!=",
    "lt": "<",
    "lte": "<=",
    "gt": ">",
    "gte": ">=",
}
OPERATORS = frozenset([*_COMPARISONS, "in", "between"])

_filter_adapter: TypeAdapter[Filter] = TypeAdapter(Filter)


def parse_filters(spec: Any) -> Filter:
    """Parse a filter tree, a mapping-form filter, or a list of either.

    A list is an implicit AND of its items.

    Raises:
        ConfigurationError: If a match spec has no recognised operator, an
            operator is missing its value, or the input is not a filter.
    """
    if isinstance(spec, FilterNode):
        return spec  # type: ignore[return-value]

    if isinstance(spec, Sequence) and not isinstance(spec, str):
        items = [parse_filters(item) for item in spec]
        return items[0] if len(items) == 1 else and_(*items)

    if not isinstance(spec, Mapping):
        raise ConfigurationError(f"Expected a filter mapping, got {type(spec).__name__}: {spec!r}")

    if isinstance(spec.get("op"), str):
        try:
            return _filter_adapter.validate_python(spec)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid filter: {e}") from e

    clauses: list[Filter] = []
    for key, value in spec.items():
        if key in ("and", "or"):
            if isinstance(value, str) or not isinstance(value, Sequence):
                raise ConfigurationError(f"'{key}' expects a list of filters, got {value!r}")
            conditions = [parse_filters(item) for item in value]
            clauses.append(and_(*conditions) if key == "and" else or_(*conditions))
        elif key == "not":
            clauses.append(not_(parse_filters(value)))
        else:
            clauses.extend(_parse_match(key, value))

    return clauses[0] if len(clauses) == 1 else and_(*clauses)


def _parse_match(field: str, match: Any) -> list[Filter]:
    if not isinstance(match, Mapping):
        raise ConfigurationError(f"Match spec for '{field}' must be a mapping, got {match!r}")

    unknown = [key for key in match if key not in OPERATORS]
    if unknown or not match:
        raise ConfigurationError(
            f"Match spec for '{field}' has no recognised operator "
            f"(got {list(match)!r}, expected some of {sorted(OPERATORS)})"
        )

    clauses: list[Filter] = []
    for key, value in match.items():
        if value is None:
            raise ConfigurationError(f"Operator '{key}' on '{field}' is missing a value")

        if key in _COMPARISONS:
            clauses.append(Comparison(field=field, op=_COMPARISONS[key], value=value))
        elif key == "in":
            if isinstance(value, str) or not isinstance(value, Sequence) or not value:
                raise ConfigurationError(f"Operator 'in' on '{field}' expects a non-empty list, got {value!r}")
            clauses.append(In(field=field, values=list(value)))
        else:
            if isinstance(value, str) or not isinstance(value, Sequence) or len(value) != 2:
                raise ConfigurationError(f"Operator 'between' on '{field}' expects [min, max], got {value!r}")
            clauses.append(Between(field=field, values=list(value)))
    return clauses
