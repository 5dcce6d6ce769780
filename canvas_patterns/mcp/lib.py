"""Core MCP server logic for canvas-patterns.

Provides configuration for creating and running MCP server instances.
"""

from dataclasses import dataclass
from enum import Enum
from importlib.metadata import PackageNotFoundError, version

from canvas_patterns.config import EnvVar, get_environment

SERVER_NAME = "canvas-patterns"
DIST_NAME = "canvas-patterns"
# Reported when running from a source checkout without an install.
FALLBACK_VERSION = "0.1.0"


class TransportType(str, Enum):
    """Supported MCP transport types."""

    STDIO = "stdio"
    HTTP = "http"
    SSE = "sse"


@dataclass
class ServerConfig:
    """Configuration for MCP server.

    Attributes:
        name: Server display name.
        transport: Transport type for communication.
        host: Bind address for HTTP/SSE transports.
        port: Port for HTTP/SSE transports.
        path: URL path for HTTP transport.
    """

    name: str = SERVER_NAME
    transport: TransportType = TransportType.STDIO
    host: str = "0.0.0.0"
    port: int = 18080
    path: str = "/mcp"

    @classmethod
    def from_env(
        cls,
        transport: TransportType | None = None,
    ) -> "ServerConfig":
        """Create config from environment variables.

        Args:
            transport: Override transport type (default: STDIO).

        Returns:
            ServerConfig with host and port from MCP_HOST / MCP_PORT.
        """
        return cls(
            transport=transport or TransportType.STDIO,
            host=get_environment(EnvVar.MCP_HOST),
            port=get_environment(EnvVar.MCP_PORT),
        )


def get_server_version() -> str:
    """Get server version string from the installed distribution metadata."""
    try:
        return version(DIST_NAME)
    except PackageNotFoundError:
        return FALLBACK_VERSION


def get_server_capabilities() -> dict:
    """Get server capabilities for MCP protocol.

    Returns:
        Dictionary of capability flags.
    """
    return {
        "tools": True,
        "resources": True,
        "prompts": False,
        "logging": True,
    }


__all__ = [
    "SERVER_NAME",
    "TransportType",
    "ServerConfig",
    "get_server_version",
    "get_server_capabilities",
]
