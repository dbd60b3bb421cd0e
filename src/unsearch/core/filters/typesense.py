"""Typesense filter dialect.

Colon-comparator syntax joined with ``&&`` / ``||``::

    (category:=clothing) && (price:[10..20])
"""

from __future__ import annotations

import re

from unsearch.adapters.base.exceptions import ConfigurationError
from unsearch.core.filters.base import Dialect

_BARE_TOKEN = re.compile(r"^[\w.\-]+$")


class TypesenseDialect(Dialect):
    name = "typesense"
    and_token = "&&"
    or_token = "||"
    not_token = "!"

    def quote(self, value: str) -> str:
        if _BARE_TOKEN.match(value):
            return value
        # Typesense has no escape sequence inside backtick-quoted values.
        if "`" in value:
            raise ConfigurationError(f"Typesense filter values cannot contain backticks: {value!r}")
        return f"`{value}`"

    def comparison(self, field: str, op: str, value: str) -> str:
        if op == "=":
            return f"{field}:={value}"
        return f"{field}:{op}{value}"

    def membership(self, field: str, values: list[str]) -> str:
        return f"{field}:=[{', '.join(values)}]"

    def range(self, field: str, low: str, high: str) -> str:
        return f"{field}:[{low}..{high}]"

    def negate(self, expression: str) -> str:
        return f"{self.not_token}{self.group(expression)}"


TYPESENSE = TypesenseDialect()
