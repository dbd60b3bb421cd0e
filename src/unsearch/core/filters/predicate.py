"""In-memory filter dialect — compiles a filter tree into a Python predicate.

The recursion mirrors ``compile_filter`` so both reject the same malformed
trees and fold empty combinators the same way. Evaluation rules:

  - A field that is absent (or ``None``) fails every comparison, so ``!=``
    and ``not`` are true for documents without the field.
  - A list-valued field matches when any element matches.
  - Values that cannot be ordered against each other fail the comparison.
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Mapping
from typing import Any

from unsearch.adapters.base.exceptions import ConfigurationError
from unsearch.core.filters.base import fold, require_bounds, require_members, require_value
from unsearch.models.filters import Between, Comparison, Condition, Filter, In, Not

Predicate = Callable[[Mapping[str, Any]], bool]

MISSING = object()

_ORDERINGS: dict[str, Callable[[Any, Any], bool]] = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


def resolve_field(doc: Mapping[str, Any], field: str) -> Any:
    """Look up ``field`` in ``doc``, following dotted paths into nested mappings.

    Returns ``MISSING`` when the field is absent or ``None``.
    """
    if field in doc:
        value = doc[field]
        return MISSING if value is None else value

    current: Any = doc
    for part in field.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return MISSING
        current = current[part]
    return MISSING if current is None else current


def compile_predicate(filter: Filter) -> Predicate:
    """Compile a filter tree into ``predicate(doc) -> bool``.

    Raises:
        ConfigurationError: If any node is missing a value it needs.
    """
    compiled = _compile(filter)
    if isinstance(compiled, bool):
        return _constant(compiled)
    return compiled


def _compile(filter: Filter) -> Predicate | bool:
    if isinstance(filter, Comparison):
        return _comparison(filter.field, filter.op, require_value(filter))

    if isinstance(filter, Between):
        low, high = require_bounds(filter)
        return _between(filter.field, low, high)

    if isinstance(filter, In):
        return _membership(filter.field, require_members(filter))

    if isinstance(filter, Condition):
        compiled = [_compile(condition) for condition in filter.conditions]
        combine = _all if filter.op == "and" else _any
        return fold(filter.op, compiled, combine)

    if isinstance(filter, Not):
        inner = _compile(filter.condition)
        if isinstance(inner, bool):
            return not inner
        return lambda doc: not inner(doc)

    raise ConfigurationError(f"Unsupported filter node for memory: {filter!r}")


def _candidates(doc: Mapping[str, Any], field: str) -> list[Any]:
    value = resolve_field(doc, field)
    if value is MISSING:
        return []
    if isinstance(value, list | tuple | set):
        return list(value)
    return [value]


def _ordered(compare: Callable[[Any, Any], bool], left: Any, right: Any) -> bool:
    try:
        return bool(compare(left, right))
    except TypeError:
        return False


def _comparison(field: str, op: str, target: Any) -> Predicate:
    if op == "=":
        return lambda doc: any(value == target for value in _candidates(doc, field))
    if op == "!=":
        return lambda doc: not any(value == target for value in _candidates(doc, field))
    compare = _ORDERINGS[op]
    return lambda doc: any(_ordered(compare, value, target) for value in _candidates(doc, field))


def _between(field: str, low: Any, high: Any) -> Predicate:
    def predicate(doc: Mapping[str, Any]) -> bool:
        return any(
            _ordered(operator.ge, value, low) and _ordered(operator.le, value, high)
            for value in _candidates(doc, field)
        )

    return predicate


def _membership(field: str, accepted: list[Any]) -> Predicate:
    return lambda doc: any(value in accepted for value in _candidates(doc, field))


def _all(predicates: list[Predicate]) -> Predicate:
    return lambda doc: all(predicate(doc) for predicate in predicates)


def _any(predicates: list[Predicate]) -> Predicate:
    return lambda doc: any(predicate(doc) for predicate in predicates)


def _constant(result: bool) -> Predicate:
    return lambda doc: result
