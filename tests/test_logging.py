"""
Tests for blobpipe logging.
"""

import json
import logging
import sys

import pytest
from rich.logging import RichHandler

from blobpipe.config import configure_settings
from blobpipe.logging import ROOT_LOGGER_NAME, JsonFormatter, get_logger, setup_logging


@pytest.fixture(autouse=True)
def _restore_root_logger():
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


class TestGetLogger:
    """Tests for logger naming."""

    def test_prefixes_namespace(self):
        assert get_logger("download").name == "blobpipe.download"

    def test_keeps_qualified_names(self):
        assert get_logger("blobpipe.store.memory").name == "blobpipe.store.memory"
        assert get_logger("blobpipe").name == "blobpipe"


class TestSetupLogging:
    """Tests for handler configuration."""

    def test_rich_by_default(self):
        logger = setup_logging(level="DEBUG", json_output=False)

        assert logger.level == logging.DEBUG
        assert logger.propagate is False
        assert any(isinstance(h, RichHandler) for h in logger.handlers)

    def test_reconfigure_replaces_own_handler(self):
        setup_logging(json_output=False)
        logger = setup_logging(json_output=True)

        own = [h for h in logger.handlers if getattr(h, "_blobpipe_handler", False)]
        assert len(own) == 1
        assert isinstance(own[0].formatter, JsonFormatter)

    def test_defaults_from_settings(self):
        configure_settings(log_level="WARNING", log_json=True)

        logger = setup_logging()

        assert logger.level == logging.WARNING
        assert any(isinstance(h.formatter, JsonFormatter) for h in logger.handlers)

    def test_json_output(self, capsys):
        setup_logging(level="INFO", json_output=True)

        get_logger("download").info("Completed 1.00 MiB download")

        line = capsys.readouterr().err.strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["level"] == "INFO"
        assert payload["logger"] == "blobpipe.download"
        assert payload["message"] == "Completed 1.00 MiB download"


class TestJsonFormatter:
    """Tests for JSON record rendering."""

    def test_includes_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord(
                "blobpipe.x", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
            )

        payload = json.loads(JsonFormatter().format(record))
        assert "RuntimeError: boom" in payload["exc_info"]
