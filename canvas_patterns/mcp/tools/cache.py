"""Cached resources for MCP tools.

The pattern registry is built once per server process and shared by all
tool calls.
"""

import logging
from functools import lru_cache

from canvas_patterns.registry import PatternRegistry, create_pattern_registry

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_registry() -> PatternRegistry:
    """Get the cached registry of built-in patterns.

    Note:
        The cache persists for the lifetime of the server process.
    """
    registry = create_pattern_registry()
    logger.info(f"Loaded pattern registry with {len(registry)} patterns")
    return registry


def clear_registry_cache() -> None:
    """Drop the cached registry so the next call rebuilds it."""
    get_registry.cache_clear()
    logger.info("Pattern registry cache cleared")


__all__ = ["get_registry", "clear_registry_cache"]
