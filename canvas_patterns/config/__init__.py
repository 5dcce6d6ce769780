"""Centralized configuration management for canvas-patterns.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from canvas_patterns.config import EnvVar, get_environment
    >>>
    >>> strict = get_environment(EnvVar.PATTERN_STRICT_MANIFESTS)  # True
    >>> port = get_environment(EnvVar.MCP_PORT, override=9000)
    >>>
    >>> # List available variables by category
    >>> for var in list_environment_variables("engine"):
    ...     info = get_environment_info(var)
    ...     print(f"{info.name}: {info.description}")

Environment Variable Categories:
    engine: Registration strictness, detector mapping mode, generator layout
    logging: Log level
    service: MCP server host and port
"""

from .lib import (
    # Core types
    EnvConfig,
    EnvVar,
    # Main interface
    get_artboard_size,
    get_environment,
    get_environment_info,
    get_log_level,
    # Introspection
    list_environment_variables,
)

__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    # Convenience functions
    "get_artboard_size",
    "get_log_level",
    # Introspection
    "list_environment_variables",
]
