"""FastMCP server instance for canvas-patterns.

This module provides the MCP server that exposes the pattern engine to
LLM clients and editor integrations:

    1. list_patterns / search_patterns / get_pattern: browse the catalogue
    2. detect_patterns: find pattern instances in a canvas document
    3. validate_patterns: design-review report for a canvas document
    4. generate_pattern: starter canvas document from a pattern

Usage:
    # STDIO mode (for Claude Desktop)
    python -m canvas_patterns.mcp.server

    # HTTP mode
    python -m canvas_patterns.mcp.server --transport http --port 18080

    # Via CLI
    python . mcp run
    python . mcp serve --port 18080
"""

import argparse
import json
import logging
import sys
from functools import lru_cache
from typing import Any

from fastmcp import FastMCP

from canvas_patterns.canvas import export_document_schema
from canvas_patterns.config import EnvVar, get_environment, get_log_level
from canvas_patterns.core import setup_logging
from canvas_patterns.manifest import PatternCategory, PatternLayer, export_manifest_schema

from .lib import (
    SERVER_NAME,
    TransportType,
    get_server_capabilities,
    get_server_version,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Validation Helpers (Internal)
# =============================================================================


def _validate_category(category: str) -> None:
    """Validate category parameter against the closed category set."""
    valid = [c.value for c in PatternCategory]
    if category not in valid:
        raise ValueError(f"Invalid category '{category}'. Valid: {valid}")


def _validate_layer(layer: str) -> None:
    """Validate layer parameter against the closed layer set."""
    valid = [layer_.value for layer_ in PatternLayer]
    if layer not in valid:
        raise ValueError(f"Invalid layer '{layer}'. Valid: {valid}")


# =============================================================================
# Server Instructions (LLM Guidance)
# =============================================================================

SERVER_INSTRUCTIONS = """\
## Canvas Patterns MCP Server

Recognizes, validates and generates reusable UI patterns (Tabs, Dialog,
Accordion, Form, Card, Navigation) in canvas design documents. Nodes are
matched through their `semanticKey` (e.g. "tabs.tablist", "tabs.tab[0]").

### Quick Start
1. `status()` -> check readiness and registered patterns
2. `search_patterns("tab")` -> find a pattern
3. `validate_patterns(document)` -> review a design before implementation

### Tools
- `list_patterns(category?, layer?, tag?)` - Browse the catalogue
- `get_pattern(pattern_id)` - Full manifest (structure, relationships, emission)
- `search_patterns(query)` - Case-insensitive name/description search
- `detect_patterns(document)` - Pattern instances with node mappings
- `validate_patterns(document)` - Errors, warnings and suggestions
- `generate_pattern(pattern_id, name)` - Starter document for a pattern

### Resources
- `schema://manifest` - Pattern manifest JSON schema
- `schema://document` - Canvas document JSON schema
"""

# =============================================================================
# Server Instance
# =============================================================================

mcp = FastMCP(
    name=SERVER_NAME,
    instructions=SERVER_INSTRUCTIONS,
)


# =============================================================================
# Catalogue Tools
# =============================================================================


@mcp.tool
def list_patterns(
    category: str | None = None,
    layer: str | None = None,
    tag: str | None = None,
) -> dict[str, Any]:
    """List the registered UI patterns.

    Args:
        category: Filter by category, e.g. "Navigation", "Forms", "Containers".
        layer: Filter by layer: primitives, compounds, composers, assemblies.
        tag: Filter by exact tag, e.g. "accessibility".

    Returns:
        Dictionary with:
        - patterns: id, name, description, category, layer, tags, node_count
        - count: Number of patterns listed
    """
    if category is not None:
        _validate_category(category)
    if layer is not None:
        _validate_layer(layer)

    from .tools.patterns import list_patterns as _list

    return _list(category=category, layer=layer, tag=tag)


@mcp.tool
def get_pattern(pattern_id: str) -> dict[str, Any]:
    """Get the full manifest of a pattern.

    Args:
        pattern_id: Pattern id, e.g. "pattern.tabs".

    Returns:
        The manifest: structure (node definitions with semantic keys),
        relationships, emission templates, validation rules and examples.
    """
    from .tools.patterns import get_pattern as _get

    return _get(pattern_id=pattern_id)


@mcp.tool
def search_patterns(query: str) -> dict[str, Any]:
    """Search patterns by name or description (case-insensitive).

    Args:
        query: Text to look for, e.g. "tab" or "modal".

    Returns:
        Dictionary with query, matching pattern summaries and count.
    """
    if not query.strip():
        raise ValueError("query must not be empty")

    from .tools.patterns import search_patterns as _search

    return _search(query=query)


# =============================================================================
# Document Tools
# =============================================================================


@mcp.tool
def detect_patterns(
    document: dict[str, Any],
    pattern_id: str | None = None,
) -> dict[str, Any]:
    """Detect UI pattern instances in a canvas document.

    Args:
        document: Canvas document JSON with schemaVersion, id, name and
            artboards. Nodes carry semanticKey values such as "tabs.tab[0]".
        pattern_id: Only look for this pattern (optional).

    Returns:
        Dictionary with:
        - instances: patternId, rootNodeId, nodeMappings, isComplete,
          validationErrors for every instance found
        - count / complete_count
        - document_errors: Schema problems (only if the document is invalid)
    """
    from .tools.detect import detect_patterns as _detect

    return _detect(document=document, pattern_id=pattern_id)


@mcp.tool
def validate_patterns(document: dict[str, Any]) -> dict[str, Any]:
    """Validate the UI patterns in a canvas document.

    Use this before handing a design to implementation: it reports
    missing required nodes and relationships of every detected pattern.

    Args:
        document: Canvas document JSON.

    Returns:
        Dictionary with:
        - valid: True if no pattern errors were found
        - errors: Critical issues to fix
        - warnings: Detection messages
        - suggestions: How to complete partial patterns
        - instances: Detected pattern instances
    """
    from .tools.validate import validate_patterns as _validate

    return _validate(document=document)


@mcp.tool
def generate_pattern(
    pattern_id: str,
    name: str,
    x: float = 0,
    y: float = 0,
    properties: dict[str, Any] | None = None,
    nested: bool | None = None,
) -> dict[str, Any]:
    """Generate a starter canvas document from a pattern.

    Args:
        pattern_id: Pattern id, e.g. "pattern.dialog".
        name: Name of the new document.
        x: Horizontal origin of the generated nodes. Default: 0
        y: Vertical origin of the generated nodes. Default: 0
        properties: Props for generated component nodes (optional).
        nested: Nest nodes inside their positioning target. Default: the
            PATTERN_GENERATOR_NESTED setting (flat unless set). Flat output
            keeps every node at top level, so the parts of a container
            pattern such as Card each validate as an incomplete instance;
            pass True to nest them inside their container.

    Returns:
        Dictionary with pattern_id, document (canvas JSON) and node_count.
    """
    from .tools.generate import generate_pattern as _generate

    return _generate(
        pattern_id=pattern_id,
        name=name,
        x=x,
        y=y,
        properties=properties,
        nested=nested,
    )


# =============================================================================
# Status Tools
# =============================================================================


@mcp.tool
def status() -> dict[str, Any]:
    """Check server readiness and configuration.

    Returns:
        Dictionary with:
        - status: "healthy" when patterns are registered, else "unhealthy"
        - version: Server version
        - capabilities: MCP capability flags
        - patterns: Registered pattern ids
        - configuration: Engine settings in effect
    """
    from .tools.cache import get_registry

    registry = get_registry()
    return {
        "status": "healthy" if len(registry) else "unhealthy",
        "version": get_server_version(),
        "capabilities": get_server_capabilities(),
        "patterns": [manifest.id for manifest in registry],
        "configuration": {
            "strict_manifests": registry.strict,
            "exclusive_mapping": get_environment(EnvVar.PATTERN_EXCLUSIVE_MAPPING),
            "generator_nested": get_environment(EnvVar.PATTERN_GENERATOR_NESTED),
        },
    }


# =============================================================================
# Resources (Schema Reference)
# =============================================================================


@lru_cache(maxsize=1)
def _cached_manifest_schema() -> str:
    """Cached manifest schema."""
    return json.dumps(export_manifest_schema(), indent=2)


@lru_cache(maxsize=1)
def _cached_document_schema() -> str:
    """Cached canvas document schema."""
    return json.dumps(export_document_schema(), indent=2)


@mcp.resource("schema://manifest")
def get_manifest_schema() -> str:
    """Get the PatternManifest JSON schema."""
    return _cached_manifest_schema()


@mcp.resource("schema://document")
def get_document_schema() -> str:
    """Get the CanvasDocument JSON schema."""
    return _cached_document_schema()


# =============================================================================
# Server Factory & Runner
# =============================================================================


def create_server() -> FastMCP:
    """Create and configure the MCP server instance.

    Returns:
        Configured FastMCP server instance.
    """
    return mcp


def run_server(
    transport: TransportType = TransportType.STDIO,
    host: str = "0.0.0.0",
    port: int = 18080,
) -> None:
    """Run the MCP server with specified transport.

    Args:
        transport: Transport type (stdio, http, sse).
        host: Bind address for HTTP/SSE.
        port: Port for HTTP/SSE.
    """
    from .tools.cache import get_registry

    logger.info(f"Starting {SERVER_NAME} server v{get_server_version()}")
    logger.info(f"Transport: {transport.value}")
    logger.info(f"Patterns: {', '.join(m.id for m in get_registry())}")

    if transport == TransportType.STDIO:
        logger.info("Running in STDIO mode")
        mcp.run()
    elif transport == TransportType.HTTP:
        logger.info(f"Running in HTTP mode at http://{host}:{port}/mcp")
        mcp.run(
            transport="http",
            host=host,
            port=port,
            path="/mcp",
        )
    elif transport == TransportType.SSE:
        logger.info(f"Running in SSE mode at http://{host}:{port}")
        mcp.run(
            transport="sse",
            host=host,
            port=port,
        )
    else:
        raise ValueError(f"Unknown transport: {transport}")


# =============================================================================
# CLI Entry Point
# =============================================================================


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for MCP server.

    Args:
        argv: Command line arguments (uses sys.argv if None).

    Returns:
        Exit code (0 for success).
    """
    parser = argparse.ArgumentParser(
        prog=SERVER_NAME,
        description="MCP server for UI pattern detection, validation and generation",
    )
    parser.add_argument(
        "--transport",
        "-t",
        type=str,
        choices=["stdio", "http", "sse"],
        default="stdio",
        help="Transport type (default: stdio)",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=get_environment(EnvVar.MCP_HOST),
        help="Bind address for HTTP/SSE (default: MCP_HOST or 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=get_environment(EnvVar.MCP_PORT),
        help="Port for HTTP/SSE (default: MCP_PORT or 18080)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args(argv)

    setup_logging(level="DEBUG" if args.verbose else get_log_level())

    try:
        run_server(
            transport=TransportType(args.transport),
            host=args.host,
            port=args.port,
        )
        return 0
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        return 0
    except Exception as e:
        logger.error(f"Server error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
