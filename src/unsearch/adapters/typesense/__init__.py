from unsearch.adapters.typesense.adapter import TypesenseAdapter

__all__ = ["TypesenseAdapter"]
