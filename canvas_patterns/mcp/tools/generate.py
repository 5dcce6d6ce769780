"""Generate pattern tool for MCP server.

Builds a starter canvas document from a registered pattern.
"""

from typing import Any

from canvas_patterns.canvas import count_nodes
from canvas_patterns.generator import GenerationSpec, PatternGenerator

from .cache import get_registry


def generate_pattern(
    pattern_id: str,
    name: str,
    x: float = 0,
    y: float = 0,
    properties: dict[str, Any] | None = None,
    nested: bool | None = None,
) -> dict[str, Any]:
    """Generate a canvas document realizing a pattern.

    Args:
        pattern_id: Registered pattern id (e.g. "pattern.dialog").
        name: Name of the new document.
        x: Horizontal origin of the generated nodes.
        y: Vertical origin of the generated nodes.
        properties: Props merged into generated component nodes.
        nested: Nest nodes under their positioning target.

    Returns:
        Dictionary with ``document`` (canvas JSON) and ``node_count``.

    Raises:
        PatternNotFoundError: If the pattern id is not registered.
    """
    spec = GenerationSpec(name=name, position={"x": x, "y": y}, properties=properties or {})
    document = PatternGenerator(get_registry(), nested=nested).generate_from_pattern(
        pattern_id, spec
    )
    return {
        "pattern_id": pattern_id,
        "document": document.to_dict(),
        "node_count": count_nodes(document),
    }


__all__ = ["generate_pattern"]
