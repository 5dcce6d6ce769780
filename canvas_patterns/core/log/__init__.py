"""Logging micro API for canvas-patterns."""

from .lib import DEFAULT_LOGGER_NAME, get_logger, parse_level, setup_logging

__all__ = ["DEFAULT_LOGGER_NAME", "get_logger", "parse_level", "setup_logging"]
