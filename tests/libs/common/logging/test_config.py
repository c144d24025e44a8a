"""Tests for logging configuration.

Tests verify:
- configure_logging sets up JSON logging correctly
- log_with_context adds context fields properly
"""

import json
import logging
from io import StringIO

import pytest

from libs.common.logging.config import configure_logging, get_logger, log_with_context
from libs.common.logging.formatter import JSONFormatter


@pytest.fixture()
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestConfigureLogging:
    def test_installs_single_json_handler(self, restore_root_logger) -> None:
        logger = configure_logging(service_name="test_service", log_level="DEBUG")

        assert logger is logging.getLogger()
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_reconfigure_replaces_handlers(self, restore_root_logger) -> None:
        configure_logging(service_name="test_service")
        logger = configure_logging(service_name="test_service", log_level="warning")

        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING

    def test_invalid_level_raises(self, restore_root_logger) -> None:
        with pytest.raises(ValueError, match="Invalid log level"):
            configure_logging(service_name="test_service", log_level="LOUD")


class TestGetLogger:
    def test_named_logger(self) -> None:
        assert get_logger("libs.pmp_client").name == "libs.pmp_client"

    def test_root_logger(self) -> None:
        assert get_logger() is logging.getLogger()


class TestLogWithContext:
    def test_context_fields_in_output(self) -> None:
        stream = StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(JSONFormatter(service_name="test_service"))
        logger = logging.getLogger("test.log_with_context")
        logger.setLevel(logging.INFO)
        logger.propagate = False
        logger.addHandler(handler)
        try:
            log_with_context(logger, "WARNING", "Vault unreachable", host="pmp.example.com")
        finally:
            logger.removeHandler(handler)

        log_dict = json.loads(stream.getvalue())
        assert log_dict["level"] == "WARNING"
        assert log_dict["message"] == "Vault unreachable"
        assert log_dict["context"] == {"host": "pmp.example.com"}
