"""Tests for core logging module."""

import logging
from io import StringIO

import pytest

from .lib import get_logger, parse_level, setup_logging


class TestLogging:
    """Test core logging API."""

    @pytest.mark.unit
    def test_get_logger(self) -> None:
        """Verify logger instance creation."""
        logger = get_logger("test")
        assert logger.name == "test"
        assert isinstance(logger, logging.Logger)

    @pytest.mark.unit
    def test_get_logger_default_name(self) -> None:
        """Verify default logger name."""
        logger = get_logger()
        assert logger.name == "canvas-patterns"

    @pytest.mark.unit
    def test_setup_logging(self) -> None:
        """Verify logging setup accepts a level name."""
        stream = StringIO()
        setup_logging(level="debug", stream=stream)
        logger = get_logger("test_setup")
        logger.debug("test message")

        # basicConfig is a no-op when logging was already configured,
        # so only the API contract is checked here.
        assert logger.level == logging.NOTSET


class TestParseLevel:
    """Tests for level name resolution."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("debug", logging.DEBUG),
            ("WARNING", logging.WARNING),
            (" info ", logging.INFO),
            (logging.ERROR, logging.ERROR),
        ],
    )
    def test_known_levels(self, value, expected) -> None:
        assert parse_level(value) == expected

    @pytest.mark.unit
    def test_unknown_name_falls_back_to_info(self) -> None:
        assert parse_level("chatty") == logging.INFO
