"""Centralized environment configuration management for canvas-patterns.

Provides a unified interface for all environment variables with:
- Single `get_environment()` function for all configuration
- Type-safe enum with metadata (default, type, description)
- Consistent resolution: override > environment > default

Example:
    >>> from canvas_patterns.config import EnvVar, get_environment
    >>>
    >>> # Get values with automatic type conversion
    >>> strict = get_environment(EnvVar.PATTERN_STRICT_MANIFESTS)  # Returns bool
    >>> port = get_environment(EnvVar.MCP_PORT)  # Returns int
    >>>
    >>> # Override at runtime
    >>> exclusive = get_environment(EnvVar.PATTERN_EXCLUSIVE_MAPPING, override=True)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, overload

# =============================================================================
# Environment Variable Configuration
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Metadata for an environment variable.

    Attributes:
        name: Environment variable name (e.g., "MCP_PORT").
        default: Default value if not set in environment.
        var_type: Python type for value conversion (str, int, bool).
        description: Human-readable description.
        category: Grouping category for documentation.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """All environment variables used by canvas-patterns.

    Each member contains an EnvConfig with name, default, type, and description.
    Use with `get_environment()` for type-safe access.

    Categories:
        - engine: Pattern detection, validation and generation behaviour
        - logging: Log output
        - service: MCP server host and port
    """

    # -------------------------------------------------------------------------
    # Pattern Engine
    # -------------------------------------------------------------------------
    PATTERN_STRICT_MANIFESTS = EnvConfig(
        name="PATTERN_STRICT_MANIFESTS",
        default=True,
        var_type=bool,
        description="Reject manifests with dangling node references at registration",
        category="engine",
    )
    PATTERN_EXCLUSIVE_MAPPING = EnvConfig(
        name="PATTERN_EXCLUSIVE_MAPPING",
        default=False,
        var_type=bool,
        description="Forbid two pattern definitions from mapping to one canvas node",
        category="engine",
    )
    PATTERN_GENERATOR_NESTED = EnvConfig(
        name="PATTERN_GENERATOR_NESTED",
        default=False,
        var_type=bool,
        description="Nest generated nodes under their position.relativeTo target",
        category="engine",
    )
    PATTERN_ARTBOARD_WIDTH = EnvConfig(
        name="PATTERN_ARTBOARD_WIDTH",
        default=1440,
        var_type=int,
        description="Width of the artboard created by the pattern generator",
        category="engine",
    )
    PATTERN_ARTBOARD_HEIGHT = EnvConfig(
        name="PATTERN_ARTBOARD_HEIGHT",
        default=1024,
        var_type=int,
        description="Height of the artboard created by the pattern generator",
        category="engine",
    )

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    LOG_LEVEL = EnvConfig(
        name="LOG_LEVEL",
        default="INFO",
        var_type=str,
        description="Log level for CLI and MCP server (DEBUG, INFO, WARNING)",
        category="logging",
    )

    # -------------------------------------------------------------------------
    # Service Configuration
    # -------------------------------------------------------------------------
    MCP_HOST = EnvConfig(
        name="MCP_HOST",
        default="0.0.0.0",
        var_type=str,
        description="MCP server bind address",
        category="service",
    )
    MCP_PORT = EnvConfig(
        name="MCP_PORT",
        default=18080,
        var_type=int,
        description="MCP server port (avoids 8080)",
        category="service",
    )


# =============================================================================
# Type Conversion Helpers
# =============================================================================


def _parse_bool(value: str) -> bool | None:
    """Parse string to boolean.

    Recognizes: true/false, 1/0, yes/no (case-insensitive).
    Returns None for unrecognized values.
    """
    normalized = value.lower().strip()
    if normalized in ("true", "1", "yes"):
        return True
    if normalized in ("false", "0", "no"):
        return False
    return None


def _convert_value(value: str | None, var_type: type, default: Any) -> Any:
    """Convert string value to target type.

    Args:
        value: Raw string value from environment (or None).
        var_type: Target Python type.
        default: Default value if conversion fails or value is None.

    Returns:
        Converted value or default.
    """
    if value is None:
        return default

    if var_type is str:
        return value

    if var_type is int:
        try:
            return int(value)
        except ValueError:
            return default

    if var_type is bool:
        result = _parse_bool(value)
        return result if result is not None else default

    # Unknown type, return as-is
    return value


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: int) -> int: ...
@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: bool) -> bool: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Get environment variable value with type conversion.

    Resolution priority:
        1. Explicit override parameter (highest)
        2. Environment variable value
        3. Default from EnvConfig (lowest)

    Args:
        env_var: Environment variable enum member.
        override: Optional override value (bypasses env lookup).

    Returns:
        Value converted to the variable's type (str, int, or bool).

    Example:
        >>> get_environment(EnvVar.MCP_PORT)
        18080
        >>> get_environment(EnvVar.MCP_PORT, override=9000)
        9000
    """
    config: EnvConfig = env_var.value

    if override is not None:
        return override

    raw_value = os.environ.get(config.name)

    return _convert_value(raw_value, config.var_type, config.default)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Get metadata for an environment variable.

    Args:
        env_var: Environment variable enum member.

    Returns:
        EnvConfig with name, default, type, and description.
    """
    return env_var.value


# =============================================================================
# Convenience Functions
# =============================================================================


def get_artboard_size() -> tuple[int, int]:
    """Get the (width, height) of generated artboards."""
    return (
        get_environment(EnvVar.PATTERN_ARTBOARD_WIDTH),
        get_environment(EnvVar.PATTERN_ARTBOARD_HEIGHT),
    )


def get_log_level() -> str:
    """Get the configured log level name."""
    return get_environment(EnvVar.LOG_LEVEL)


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List all environment variables, optionally filtered by category.

    Args:
        category: Filter by category (engine, logging, service).
                 None returns all variables.

    Returns:
        List of EnvVar enum members.
    """
    if category is None:
        return list(EnvVar)

    return [var for var in EnvVar if var.value.category == category]


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
