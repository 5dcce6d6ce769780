"""MCP tools for canvas-patterns.

Plain functions behind the server's tools, sharing one cached registry.

Tools:
    - list_patterns / get_pattern / search_patterns: Pattern catalogue
    - detect_patterns: Find pattern instances in a canvas document
    - validate_patterns: Design-review report for a canvas document
    - generate_pattern: Starter canvas document from a pattern
"""

from .cache import clear_registry_cache, get_registry
from .detect import detect_patterns
from .generate import generate_pattern
from .patterns import get_pattern, list_patterns, search_patterns
from .validate import validate_patterns

__all__ = [
    "get_registry",
    "clear_registry_cache",
    "list_patterns",
    "get_pattern",
    "search_patterns",
    "detect_patterns",
    "validate_patterns",
    "generate_pattern",
]
