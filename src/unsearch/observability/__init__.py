"""Observability — logging setup."""

from unsearch.observability.logging import setup_logging

__all__ = ["setup_logging"]
