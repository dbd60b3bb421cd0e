"""MeiliSearch filter dialect.

SQL-like syntax with single-quoted strings and a native ``IN`` list::

    (category = 'clothing') AND (NOT (price = 40))
"""

from __future__ import annotations

from unsearch.core.filters.base import Dialect


class MeiliSearchDialect(Dialect):
    name = "meilisearch"

    def quote(self, value: str) -> str:
        escaped = value.replace("\\", "\\\\").replace("'", "\\'")
        return f"'{escaped}'"

    def membership(self, field: str, values: list[str]) -> str:
        return f"{field} IN [{', '.join(values)}]"


MEILISEARCH = MeiliSearchDialect()
