from unsearch.adapters.memory.adapter import MemoryAdapter

__all__ = ["MemoryAdapter"]
