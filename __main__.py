"""CLI entry point for canvas-patterns.

This module acts as the central entry point for the project's CLI tools.
It delegates commands to the pattern engine and the MCP server.
"""

import argparse
import json
import subprocess
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from canvas_patterns.config import get_environment, get_log_level
from canvas_patterns.core import get_logger, setup_logging

# Load environment variables from .env file
load_dotenv()

logger = get_logger("cli")


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2))


def _read_document(path: Path) -> dict[str, Any] | None:
    """Load a canvas document JSON file, logging why it can't be read."""
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        logger.error(f"Document not found: {path}")
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in {path}: {e}")
    except UnicodeDecodeError as e:
        logger.error(f"Document is not UTF-8 text: {path}: {e}")
    except OSError as e:
        logger.error(f"Cannot read document {path}: {e}")
    return None


# =============================================================================
# Patterns Command
# =============================================================================


def cmd_patterns_list(args: argparse.Namespace) -> int:
    """Handle the patterns list command."""
    from canvas_patterns.mcp.tools import list_patterns

    _print_json(list_patterns(category=args.category, layer=args.layer, tag=args.tag))
    return 0


def cmd_patterns_show(args: argparse.Namespace) -> int:
    """Handle the patterns show command."""
    from canvas_patterns.manifest import PatternNotFoundError
    from canvas_patterns.mcp.tools import get_pattern

    try:
        _print_json(get_pattern(args.pattern_id))
    except PatternNotFoundError as e:
        logger.error(str(e))
        return 1
    return 0


def cmd_patterns_search(args: argparse.Namespace) -> int:
    """Handle the patterns search command."""
    from canvas_patterns.mcp.tools import search_patterns

    _print_json(search_patterns(args.query))
    return 0


def handle_patterns_command(argv: list[str]) -> int:
    """Handle pattern catalogue commands."""
    from canvas_patterns.manifest import PatternCategory, PatternLayer

    parser = argparse.ArgumentParser(
        prog="python . patterns",
        description="Browse the registered UI patterns",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    list_parser = subparsers.add_parser("list", help="List registered patterns")
    list_parser.add_argument(
        "--category",
        "-c",
        type=str,
        default=None,
        choices=[c.value for c in PatternCategory],
        help="Filter by category",
    )
    list_parser.add_argument(
        "--layer",
        "-l",
        type=str,
        default=None,
        choices=[layer.value for layer in PatternLayer],
        help="Filter by layer",
    )
    list_parser.add_argument(
        "--tag",
        "-t",
        type=str,
        default=None,
        help="Filter by exact tag",
    )
    list_parser.set_defaults(func=cmd_patterns_list)

    show_parser = subparsers.add_parser("show", help="Show a pattern manifest")
    show_parser.add_argument("pattern_id", type=str, help="Pattern id, e.g. pattern.tabs")
    show_parser.set_defaults(func=cmd_patterns_show)

    search_parser = subparsers.add_parser(
        "search", help="Search pattern names and descriptions"
    )
    search_parser.add_argument("query", type=str, help="Case-insensitive search text")
    search_parser.set_defaults(func=cmd_patterns_search)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


# =============================================================================
# Detect / Validate Commands
# =============================================================================


def handle_detect_command(argv: list[str]) -> int:
    """Detect pattern instances in a canvas document file."""
    parser = argparse.ArgumentParser(
        prog="python . detect",
        description="Detect UI pattern instances in a canvas document",
    )
    parser.add_argument("document", type=Path, help="Canvas document JSON file")
    parser.add_argument(
        "--pattern",
        "-p",
        type=str,
        default=None,
        help="Only look for this pattern id",
    )
    parser.add_argument(
        "--exclusive",
        action="store_true",
        default=None,
        help="Claim each canvas node for at most one definition",
    )
    args = parser.parse_args(argv)

    document = _read_document(args.document)
    if document is None:
        return 1

    from canvas_patterns.mcp.tools import detect_patterns

    result = detect_patterns(document, pattern_id=args.pattern, exclusive=args.exclusive)
    _print_json(result)

    if "document_errors" in result:
        logger.error(f"{args.document} is not a valid canvas document")
        return 1
    logger.info(
        f"Found {result['count']} instance(s), {result['complete_count']} complete"
    )
    return 0


def handle_validate_command(argv: list[str]) -> int:
    """Validate the patterns of a canvas document file."""
    parser = argparse.ArgumentParser(
        prog="python . validate",
        description="Validate UI patterns in a canvas document",
    )
    parser.add_argument("document", type=Path, help="Canvas document JSON file")
    parser.add_argument(
        "--strict-exit",
        action="store_true",
        help="Exit with status 1 when pattern errors are found",
    )
    parser.add_argument(
        "--exclusive",
        action="store_true",
        default=None,
        help="Claim each canvas node for at most one definition",
    )
    args = parser.parse_args(argv)

    document = _read_document(args.document)
    if document is None:
        return 1

    from canvas_patterns.mcp.tools import validate_patterns

    report = validate_patterns(document, exclusive=args.exclusive)
    _print_json(report)

    if "document_errors" in report:
        logger.error(f"{args.document} is not a valid canvas document")
        return 1
    if not report["valid"]:
        logger.warning(f"{len(report['errors'])} pattern error(s) found")
        return 1 if args.strict_exit else 0
    return 0


# =============================================================================
# Generate Command
# =============================================================================


def handle_generate_command(argv: list[str]) -> int:
    """Generate a starter canvas document from a pattern."""
    parser = argparse.ArgumentParser(
        prog="python . generate",
        description="Generate a canvas document from a UI pattern",
        epilog=(
            "Flat output (the default unless PATTERN_GENERATOR_NESTED is set) keeps "
            "every node at top level, so the parts of a container pattern such as "
            "Card validate as incomplete instances. Use --nested for a document "
            "that passes validate."
        ),
    )
    parser.add_argument("pattern_id", type=str, help="Pattern id, e.g. pattern.dialog")
    parser.add_argument(
        "--name",
        "-n",
        type=str,
        required=True,
        help="Name of the generated document",
    )
    parser.add_argument("--x", type=float, default=0, help="Horizontal origin (default: 0)")
    parser.add_argument("--y", type=float, default=0, help="Vertical origin (default: 0)")
    parser.add_argument(
        "--nested",
        action="store_true",
        default=None,
        help="Nest nodes inside their positioning target (needed for container "
        "patterns to validate)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output file path (prints to stdout if not specified)",
    )
    args = parser.parse_args(argv)

    from canvas_patterns.manifest import PatternNotFoundError
    from canvas_patterns.mcp.tools import generate_pattern

    try:
        result = generate_pattern(
            args.pattern_id, name=args.name, x=args.x, y=args.y, nested=args.nested
        )
    except PatternNotFoundError as e:
        logger.error(str(e))
        return 1

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(
            json.dumps(result["document"], indent=2), encoding="utf-8"
        )
        logger.info(f"Wrote {result['node_count']} node(s) to {args.output}")
    else:
        _print_json(result["document"])
    return 0


# =============================================================================
# MCP Command
# =============================================================================


def handle_mcp_command(argv: list[str]) -> int:
    """Handle MCP server commands.

    Usage:
        python . mcp run              # Start in STDIO mode
        python . mcp serve            # Start in HTTP mode
        python . mcp serve --port 8080
        python . mcp info             # Show server info
    """
    if not argv:
        print("MCP Server Commands")
        print("\nUsage: python . mcp {command} [options]")
        print("\nCommands:")
        print("  run                 Start server in STDIO mode")
        print("  serve               Start server in HTTP mode")
        print("  info                Show server information")
        print("\nOptions for 'serve':")
        print("  --host HOST         Bind address (default: MCP_HOST or 0.0.0.0)")
        print("  --port PORT         Port number (default: MCP_PORT or 18080)")
        print("  --transport TYPE    Transport: http or sse (default: http)")
        return 1

    subcommand = argv[0]
    subargs = argv[1:]

    if subcommand == "run":
        from canvas_patterns.mcp import TransportType, run_server

        logger.info("Starting MCP server in STDIO mode...")
        run_server(transport=TransportType.STDIO)
        return 0

    elif subcommand == "serve":
        from canvas_patterns.mcp import ServerConfig, TransportType, run_server

        parser = argparse.ArgumentParser(prog="python . mcp serve")
        parser.add_argument("--host", type=str, default=None)
        parser.add_argument("--port", type=int, default=None)
        parser.add_argument(
            "--transport", type=str, default="http", choices=["http", "sse"]
        )
        args = parser.parse_args(subargs)

        config = ServerConfig.from_env(transport=TransportType(args.transport))
        host = args.host or config.host
        port = args.port or config.port

        logger.info(f"Starting MCP server in {config.transport.value} mode...")
        logger.info(f"Listening on {host}:{port}")
        run_server(transport=config.transport, host=host, port=port)
        return 0

    elif subcommand == "info":
        from canvas_patterns.mcp import (
            SERVER_NAME,
            ServerConfig,
            get_server_capabilities,
            get_server_version,
        )
        from canvas_patterns.mcp.tools import get_registry

        config = ServerConfig.from_env()
        print(f"{SERVER_NAME} MCP Server")
        print("=" * 40)
        print(f"Version: {get_server_version()}")
        print(f"HTTP endpoint: http://{config.host}:{config.port}{config.path}")
        print("\nCapabilities:")
        for cap, enabled in get_server_capabilities().items():
            status = "enabled" if enabled else "disabled"
            print(f"  {cap}: {status}")
        print("\nTools:")
        print("  - list_patterns / get_pattern / search_patterns")
        print("  - detect_patterns: Pattern instances in a document")
        print("  - validate_patterns: Design-review report")
        print("  - generate_pattern: Starter document from a pattern")
        print("  - status: Readiness and configuration")
        print("\nPatterns:")
        for manifest in get_registry():
            print(f"  - {manifest.id}: {manifest.name}")
        return 0

    else:
        logger.error(f"Unknown mcp command: {subcommand}")
        return handle_mcp_command([])


# =============================================================================
# Test Command
# =============================================================================


def cmd_test(extra_args: list[str]) -> int:
    """Run pytest with provided arguments and test tier options.

    Usage:
        python . test                # Run all tests
        python . test --unit         # Run only unit tests
        python . test --integration  # Run end-to-end engine tests
        python . test --mcp          # Run MCP protocol tests
        python . test -k "detect"    # Run tests matching pattern
    """
    tier_markers = {
        "--unit": ["-m", "unit"],
        "--integration": ["-m", "integration"],
        "--mcp": ["-m", "mcp"],
        "--all": [],
    }

    pytest_args: list[str] = []
    remaining_args: list[str] = []

    for arg in extra_args:
        if arg in tier_markers:
            pytest_args.extend(tier_markers[arg])
        else:
            remaining_args.append(arg)

    cmd = [sys.executable, "-m", "pytest", *pytest_args, *remaining_args]
    logger.info(f"Running: {' '.join(cmd)}")

    try:
        return subprocess.call(cmd)
    except KeyboardInterrupt:
        return 130


# =============================================================================
# Environment Command
# =============================================================================


def cmd_env(_argv: list[str]) -> int:
    """Show the configuration variables and their current values."""
    from canvas_patterns.config import get_environment_info, list_environment_variables

    for var in list_environment_variables():
        info = get_environment_info(var)
        print(f"{info.name} = {get_environment(var)!r}  [{info.category}]")
        print(f"    {info.description}")
    return 0


def show_help() -> None:
    """Display CLI help message."""
    print("Usage: python . {command} [args]")
    print("\n=== Patterns ===")
    print("  patterns   Browse registered patterns (list, show, search)")
    print("  detect     Detect pattern instances in a canvas document")
    print("  validate   Validate the patterns of a canvas document")
    print("  generate   Generate a canvas document from a pattern")
    print("             (add --nested so container patterns validate)")
    print("\n=== MCP Server ===")
    print("  mcp        Run MCP server (STDIO or HTTP mode)")
    print("\n=== Development ===")
    print("  test       Run the test suite (--unit, --integration, --mcp)")
    print("  env        Show configuration variables")
    print("\nExamples:")
    print("  python . patterns list --category Navigation")
    print("  python . patterns show pattern.tabs")
    print("  python . validate design.json --strict-exit")
    print("  python . generate pattern.dialog --name Confirm --nested -o dialog.json")
    print("  python . mcp run                    # Start STDIO server")
    print("  python . mcp serve --port 18080     # Start HTTP server")


def main() -> int:
    """Main entry point for the CLI."""
    if len(sys.argv) < 2:
        show_help()
        return 1

    command = sys.argv[1]
    rest_args = sys.argv[2:]

    if command in ("-h", "--help"):
        show_help()
        return 0

    commands = {
        "patterns": lambda: handle_patterns_command(rest_args),
        "detect": lambda: handle_detect_command(rest_args),
        "validate": lambda: handle_validate_command(rest_args),
        "generate": lambda: handle_generate_command(rest_args),
        "mcp": lambda: handle_mcp_command(rest_args),
        "test": lambda: cmd_test(rest_args),
        "env": lambda: cmd_env(rest_args),
    }

    if command in commands:
        setup_logging(level=get_log_level())
        return commands[command]()

    logger.error(f"Unknown command: {command}")
    show_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
