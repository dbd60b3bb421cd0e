"""Filter expression models — the boolean condition tree shared by every adapter.

A filter is a closed, recursive union discriminated on ``op``:

  - ``Comparison``: one field compared to a literal (``=``, ``!=``, ``<``, ...)
  - ``Between``: inclusive range over ``[min, max]``
  - ``In``: set membership
  - ``Condition``: ``and`` / ``or`` over zero or more sub-filters
  - ``Not``: negation of a single sub-filter

The builder functions at the bottom of this module are the intended way to
construct filters::

    and_(gte("price", 10), eq("category", "clothing"))
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class FilterNode(BaseModel):
    """Base for all filter nodes. Nodes are immutable and compare structurally."""

    model_config = ConfigDict(frozen=True)


class Comparison(FilterNode):
    """Compares one document field to a literal value."""

    field: str = Field(description="Document field name")
    op: Literal["=", "!=", "<", "<=", ">", ">="] = Field(description="Comparison operator")
    value: Any = Field(description="Literal the field is compared against")


class Between(FilterNode):
    """Inclusive range check: ``values[0] <= field <= values[1]``."""

    field: str = Field(description="Document field name")
    op: Literal["between"] = "between"
    values: list[Any] = Field(description="Lower and upper bound, both inclusive")


class In(FilterNode):
    """Set membership: the field equals any of ``values``."""

    field: str = Field(description="Document field name")
    op: Literal["in"] = "in"
    values: list[Any] = Field(description="Accepted values")


class Condition(FilterNode):
    """Combines sub-filters with ``and`` / ``or``.

    With no sub-filters, ``and`` is vacuously true and ``or`` is vacuously false.
    """

    op: Literal["and", "or"] = Field(description="Combinator")
    conditions: list[Filter] = Field(default_factory=list, description="Sub-filters")


class Not(FilterNode):
    """Negates a single sub-filter."""

    op: Literal["not"] = "not"
    condition: Filter = Field(description="Negated sub-filter")


Filter = Annotated[
    Comparison | Between | In | Condition | Not,
    Field(discriminator="op"),
]

Condition.model_rebuild()
Not.model_rebuild()


def eq(field: str, value: Any) -> Comparison:
    return Comparison(field=field, op="=", value=value)


def neq(field: str, value: Any) -> Comparison:
    return Comparison(field=field, op="!=", value=value)


def lt(field: str, value: Any) -> Comparison:
    return Comparison(field=field, op="<", value=value)


def lte(field: str, value: Any) -> Comparison:
    return Comparison(field=field, op="<=", value=value)


def gt(field: str, value: Any) -> Comparison:
    return Comparison(field=field, op=">", value=value)


def gte(field: str, value: Any) -> Comparison:
    return Comparison(field=field, op=">=", value=value)


def between(field: str, low: Any, high: Any) -> Between:
    return Between(field=field, values=[low, high])


def in_(field: str, values: Iterable[Any]) -> In:
    return In(field=field, values=list(values))


def not_(condition: Filter) -> Not:
    return Not(condition=condition)


def and_(*conditions: Filter) -> Condition:
    return Condition(op="and", conditions=list(conditions))


def or_(*conditions: Filter) -> Condition:
    return Condition(op="or", conditions=list(conditions))
