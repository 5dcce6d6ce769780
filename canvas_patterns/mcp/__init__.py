"""MCP (Model Context Protocol) server for canvas-patterns.

This module provides the MCP server implementation that exposes pattern
detection, validation and generation to LLM clients and editor tooling.

Example:
    # Start server in STDIO mode
    >>> from canvas_patterns.mcp import run_server
    >>> run_server()

    # Start server in HTTP mode
    >>> from canvas_patterns.mcp import run_server, TransportType
    >>> run_server(transport=TransportType.HTTP, port=18080)

    # Create server for testing
    >>> from canvas_patterns.mcp import create_server
    >>> server = create_server()

Available Tools:
    - list_patterns, get_pattern, search_patterns: Pattern catalogue
    - detect_patterns: Pattern instances in a canvas document
    - validate_patterns: Design-review report for a canvas document
    - generate_pattern: Starter canvas document from a pattern
    - status: Readiness and configuration
"""

from .lib import (
    SERVER_NAME,
    ServerConfig,
    TransportType,
    get_server_capabilities,
    get_server_version,
)
from .server import create_server, mcp, run_server

__all__ = [
    # Server instance
    "mcp",
    "create_server",
    "run_server",
    # Configuration
    "SERVER_NAME",
    "ServerConfig",
    "TransportType",
    # Utilities
    "get_server_version",
    "get_server_capabilities",
]
