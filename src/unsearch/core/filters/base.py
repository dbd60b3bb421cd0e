"""Filter compiler — translates a filter tree into a backend filter string.

One recursive function, ``compile_filter``, walks the tree for every backend.
Backends differ only in spelling, which a ``Dialect`` supplies: the AND/OR
tokens, how comparisons, membership, ranges and negation are written, and a
single ``format_value`` hook that every operator goes through.

Empty combinators are boolean identities and are folded away while compiling:
``and()`` is ``True`` and ``or()`` is ``False``. The result of
``compile_filter`` is therefore either a filter string or a bool, where
``True`` means "no restriction" and ``False`` means "matches nothing".
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from unsearch.adapters.base.exceptions import ConfigurationError
from unsearch.models.filters import Between, Comparison, Condition, Filter, In, Not


class Dialect:
    """Spelling of a backend's filter syntax.

    Subclasses override the token attributes and whichever render hooks
    differ from the defaults below.
    """

    name = "generic"
    and_token = "AND"
    or_token = "OR"
    not_token = "NOT"

    def format_value(self, value: Any) -> str:
        """Render a literal. The only place values are quoted or escaped."""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, str):
            return self.quote(value)
        return str(value)

    def quote(self, value: str) -> str:
        return value

    def comparison(self, field: str, op: str, value: str) -> str:
        return f"{field} {op} {value}"

    def membership(self, field: str, values: list[str]) -> str:
        return f" {self.or_token} ".join(self.comparison(field, "=", value) for value in values)

    def range(self, field: str, low: str, high: str) -> str:
        return f"{field} >= {low} {self.and_token} {field} <= {high}"

    def negate(self, expression: str) -> str:
        return f"{self.not_token} {self.group(expression)}"

    def group(self, expression: str) -> str:
        return f"({expression})"

    def join(self, op: str, expressions: list[str]) -> str:
        token = self.and_token if op == "and" else self.or_token
        return f" {token} ".join(self.group(expression) for expression in expressions)


def compile_filter(filter: Filter, dialect: Dialect) -> str | bool:
    """Compile a filter tree for ``dialect``.

    Args:
        filter: Root of the filter tree.
        dialect: Target backend spelling.

    Returns:
        The filter string, ``True`` if the tree matches everything, or
        ``False`` if it can never match.

    Raises:
        ConfigurationError: If any node is missing a value it needs.
    """
    if isinstance(filter, Comparison):
        value = dialect.format_value(require_value(filter))
        return dialect.comparison(filter.field, filter.op, value)

    if isinstance(filter, Between):
        low, high = require_bounds(filter)
        return dialect.range(filter.field, dialect.format_value(low), dialect.format_value(high))

    if isinstance(filter, In):
        values = require_members(filter)
        return dialect.membership(filter.field, [dialect.format_value(value) for value in values])

    if isinstance(filter, Condition):
        # Compile every branch first so malformed clauses are reported even
        # when a constant would short-circuit the combinator.
        compiled = [compile_filter(condition, dialect) for condition in filter.conditions]
        return fold(filter.op, compiled, lambda parts: dialect.join(filter.op, parts))

    if isinstance(filter, Not):
        inner = compile_filter(filter.condition, dialect)
        if isinstance(inner, bool):
            return not inner
        return dialect.negate(inner)

    raise ConfigurationError(f"Unsupported filter node for {dialect.name}: {filter!r}")


def fold(op: str, compiled: list[Any], combine: Callable[[list[Any]], Any]) -> Any:
    """Fold boolean constants out of an ``and``/``or`` over compiled branches.

    ``combine`` receives the remaining non-constant branches (at least one).
    """
    identity = op == "and"
    parts = []
    for branch in compiled:
        if branch is identity:
            continue
        if isinstance(branch, bool):
            return branch
        parts.append(branch)
    if not parts:
        return identity
    return combine(parts)


def require_value(filter: Comparison) -> Any:
    if filter.value is None:
        raise ConfigurationError(f"Filter '{filter.field} {filter.op}' is missing a value")
    return filter.value


def require_bounds(filter: Between) -> tuple[Any, Any]:
    if len(filter.values) != 2 or any(value is None for value in filter.values):
        raise ConfigurationError(
            f"Filter '{filter.field} between' needs exactly two bounds, got {filter.values!r}"
        )
    low, high = filter.values
    return low, high


def require_members(filter: In) -> list[Any]:
    if not filter.values or any(value is None for value in filter.values):
        raise ConfigurationError(
            f"Filter '{filter.field} in' needs at least one value, got {filter.values!r}"
        )
    return filter.values
