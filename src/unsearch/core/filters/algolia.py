"""Algolia filter dialect.

Facet-style syntax: ``field:value`` for equality, ``field > value`` for
numeric comparisons, ``field:low TO high`` for ranges, joined with
``AND`` / ``OR`` / ``NOT``::

    (category:clothing) AND (price:10 TO 20)
"""

from __future__ import annotations

import re

from unsearch.core.filters.base import Dialect

_BARE_TOKEN = re.compile(r"^[\w.\-]+$")


class AlgoliaDialect(Dialect):
    name = "algolia"

    def quote(self, value: str) -> str:
        if _BARE_TOKEN.match(value):
            return value
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'

    def comparison(self, field: str, op: str, value: str) -> str:
        if op == "=":
            return f"{field}:{value}"
        if op == "!=":
            return f"{self.not_token} {field}:{value}"
        return f"{field} {op} {value}"

    def range(self, field: str, low: str, high: str) -> str:
        return f"{field}:{low} TO {high}"


ALGOLIA = AlgoliaDialect()
