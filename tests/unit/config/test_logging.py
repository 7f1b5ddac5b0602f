"""Unit tests for logging configuration."""

import logging

import pytest
import structlog

from pricelens.config.logging import NOISY_LOGGERS, _add_service, configure_logging


@pytest.fixture(autouse=True)
def restore_structlog():
    """Reset structlog and HTTP logger levels after each test."""
    levels = {name: logging.getLogger(name).level for name in NOISY_LOGGERS}
    yield
    structlog.reset_defaults()
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_http_loggers_quieted_to_warning(self) -> None:
        configure_logging(level="DEBUG")

        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_http_loggers_follow_stricter_level(self) -> None:
        configure_logging(level="ERROR")

        assert logging.getLogger("httpx").level == logging.ERROR

    def test_json_renderer_outside_debug(self) -> None:
        configure_logging(json_output=True)

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        assert _add_service in processors


class TestServiceTag:
    """Tests for the service-name processor."""

    def test_adds_service_name(self) -> None:
        assert _add_service(None, "info", {"event": "x"})["service"] == "pricelens"

    def test_keeps_existing_service(self) -> None:
        assert _add_service(None, "info", {"service": "worker"})["service"] == "worker"
