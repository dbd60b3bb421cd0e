"""Tests for logging setup."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator

import pytest

from unsearch.config.settings import ObservabilitySettings
from unsearch.observability import setup_logging


@pytest.fixture(autouse=True)
def restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


class TestSetupLogging:
    def test_defaults_to_info(self) -> None:
        setup_logging()
        assert logging.getLogger().level == logging.INFO
        assert len(logging.getLogger().handlers) == 1

    def test_level_from_settings(self) -> None:
        setup_logging(ObservabilitySettings(log_level="debug"))
        assert logging.getLogger().level == logging.DEBUG

    def test_json_lines_on_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(ObservabilitySettings(log_format="json"))

        logging.getLogger("unsearch.test").info("Indexed %d documents", 3)

        captured = capsys.readouterr()
        assert captured.out == ""
        record = json.loads(captured.err.strip().splitlines()[-1])
        assert record["event"] == "Indexed 3 documents"
        assert record["level"] == "info"
        assert record["logger"] == "unsearch.test"
