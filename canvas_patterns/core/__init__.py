"""Core utilities shared across canvas-patterns packages."""

from .log import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
