"""Tests for correlation-aware logging helpers."""

import logging

import pytest

from compact_xml_parser.shared.logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)


@pytest.fixture
def package_logger():
    """Restore the package logger after each test."""
    logger = logging.getLogger("compact_xml_parser")
    handlers = list(logger.handlers)
    level = logger.level
    yield logger
    logger.handlers = handlers
    logger.setLevel(level)


class TestCorrelationLogger:
    """Test the CorrelationLogger wrapper."""

    def test_get_logger_returns_wrapper(self) -> None:
        """Test get_logger builds a CorrelationLogger."""
        logger = get_logger("compact_xml_parser.tests", "req-1", "unit")

        assert isinstance(logger, CorrelationLogger)
        assert logger.correlation_id == "req-1"
        assert logger.component == "unit"

    def test_component_defaults_to_module_name(self) -> None:
        """Test the component falls back to the last dotted name part."""
        logger = get_logger("compact_xml_parser.tree.builder")
        assert logger.component == "builder"

    def test_records_carry_extras(self, caplog) -> None:
        """Test records include component, correlation ID and caller extras."""
        logger = get_logger("compact_xml_parser.tests", "req-2", "unit")

        with caplog.at_level(logging.INFO, logger="compact_xml_parser.tests"):
            logger.info("hello", extra={"size": 3})

        record = caplog.records[-1]
        assert record.getMessage() == "hello"
        assert record.component == "unit"
        assert record.correlation_id == "req-2"
        assert record.size == 3

    def test_is_enabled_for(self, caplog) -> None:
        """Test level checks pass through to the wrapped logger."""
        logger = get_logger("compact_xml_parser.tests.levels")

        with caplog.at_level(logging.WARNING, logger="compact_xml_parser.tests.levels"):
            assert logger.is_enabled_for(logging.WARNING)
            assert not logger.is_enabled_for(logging.DEBUG)


class TestConfigureLogging:
    """Test handler installation on the package logger."""

    def test_installs_single_handler(self, package_logger) -> None:
        """Test repeated calls do not stack handlers."""
        configure_logging("INFO")
        configure_logging("DEBUG")

        marked = [
            h for h in package_logger.handlers
            if getattr(h, "_compact_xml_handler", False)
        ]
        assert len(marked) == 1
        assert package_logger.level == logging.DEBUG
