"""Base adapter interface — Abstract classes for search backends."""

from unsearch.adapters.base.adapter import AdapterHealth, SearchAdapter
from unsearch.adapters.base.registry import AdapterNotFoundError, AdapterRegistry

__all__ = ["AdapterHealth", "AdapterNotFoundError", "AdapterRegistry", "SearchAdapter"]
