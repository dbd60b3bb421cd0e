from unsearch.adapters.meilisearch.adapter import MeiliSearchAdapter, escape_id, unescape_id

__all__ = ["MeiliSearchAdapter", "escape_id", "unescape_id"]
