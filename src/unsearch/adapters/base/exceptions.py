"""Adapter-specific exceptions."""


class AdapterError(Exception):
    """Base exception for adapter errors."""


class ConnectionError(AdapterError):
    """Raised when the adapter is not connected to its search backend."""


class QueryError(AdapterError):
    """Raised when a call to the search backend fails."""


class ConfigurationError(AdapterError):
    """Raised when filters, options or adapter configuration are invalid."""


class InvalidDocumentError(AdapterError):
    """Raised when a submitted document has no usable ``id``."""
