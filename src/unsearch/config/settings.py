"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. Environment variables (UNSEARCH_ prefix)
  2. YAML config file (if specified)
  3. Default values
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class IndexSettings(BaseModel):
    """Which adapter backs the index and how it is configured."""

    adapter: str = Field(default="memory", description="Adapter name: memory, algolia, meilisearch, typesense")
    index: str = Field(default="documents", description="Index or collection name")
    page_size: int = Field(default=10, ge=1, description="Records per result page")
    keys: list[str] = Field(default_factory=list, description="Searchable fields (memory keys / Typesense query_by)")
    options: dict[str, Any] = Field(
        default_factory=dict,
        description="Adapter-specific constructor arguments (credentials, hosts, ...), passed through unchanged",
    )

    @field_validator("keys", mode="before")
    @classmethod
    def _parse_keys(cls, v: Any) -> list[str]:
        """Accept a comma-separated string or a list."""
        if isinstance(v, str):
            return [key.strip() for key in v.split(",") if key.strip()]
        return list(v)


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root settings.

    Configuration is loaded from environment variables with the UNSEARCH_ prefix.
    Nested settings use double underscores: UNSEARCH_INDEX__ADAPTER=meilisearch

    Example:
        UNSEARCH_INDEX__ADAPTER=meilisearch
        UNSEARCH_INDEX__INDEX=guides
        UNSEARCH_INDEX__OPTIONS='{"base_url": "http://localhost:7700", "api_key": "..."}'
        UNSEARCH_OBSERVABILITY__LOG_FORMAT=console
    """

    model_config = {
        "env_prefix": "UNSEARCH_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    app_name: str = Field(default="unsearch", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    index: IndexSettings = Field(default_factory=IndexSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values from the YAML file are used as defaults; environment variables
        still take precedence.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
