from unsearch.adapters.algolia.adapter import AlgoliaAdapter

__all__ = ["AlgoliaAdapter"]
