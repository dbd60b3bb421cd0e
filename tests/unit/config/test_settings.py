"""Tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from unsearch.config.settings import IndexSettings, Settings


class TestSettings:
    def test_defaults(self, settings: Settings) -> None:
        assert settings.app_name == "unsearch"
        assert settings.index.adapter == "memory"
        assert settings.index.page_size == 10
        assert settings.observability.log_format == "json"

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("UNSEARCH_INDEX__ADAPTER", "meilisearch")
        monkeypatch.setenv("UNSEARCH_INDEX__KEYS", '["title", "body"]')
        monkeypatch.setenv("UNSEARCH_INDEX__OPTIONS", '{"base_url": "http://meili:7700"}')

        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.index.adapter == "meilisearch"
        assert settings.index.keys == ["title", "body"]
        assert settings.index.options == {"base_url": "http://meili:7700"}

    def test_from_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "unsearch.yaml"
        path.write_text(
            "index:\n"
            "  adapter: typesense\n"
            "  index: guides\n"
            "  page_size: 20\n"
            "  keys: [title]\n"
            "  options:\n"
            "    api_key: xyz\n"
            "    nodes:\n"
            "      - {host: localhost, port: 8108, protocol: http}\n"
            "observability:\n"
            "  log_format: console\n"
        )

        settings = Settings.from_yaml(path)

        assert settings.index.adapter == "typesense"
        assert settings.index.page_size == 20
        assert settings.index.options["nodes"][0]["port"] == 8108
        assert settings.observability.log_format == "console"

    def test_from_yaml_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            Settings.from_yaml(tmp_path / "missing.yaml")

    def test_page_size_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            IndexSettings(page_size=0)
