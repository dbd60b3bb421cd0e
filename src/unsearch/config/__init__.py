"""Configuration — settings loaded from environment variables and YAML."""

from unsearch.config.settings import IndexSettings, ObservabilitySettings, Settings

__all__ = ["IndexSettings", "ObservabilitySettings", "Settings"]
