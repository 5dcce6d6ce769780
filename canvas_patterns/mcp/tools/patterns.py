"""Pattern catalogue tools for MCP server.

List, fetch and search the manifests in the server's registry.
"""

from typing import Any

from canvas_patterns.manifest import PatternManifest, PatternNotFoundError

from .cache import get_registry


def summarize_pattern(manifest: PatternManifest) -> dict[str, Any]:
    """Short description of a manifest for list results."""
    return {
        "id": manifest.id,
        "name": manifest.name,
        "description": manifest.description,
        "category": manifest.category,
        "layer": manifest.layer,
        "tags": sorted(manifest.tags),
        "node_count": len(manifest.iter_definitions()),
    }


def list_patterns(
    category: str | None = None,
    layer: str | None = None,
    tag: str | None = None,
) -> dict[str, Any]:
    """List registered patterns, optionally filtered.

    Filters combine: a pattern is listed only if it matches every filter
    given.

    Args:
        category: Category value (e.g. "Navigation").
        layer: Layer value (e.g. "composers").
        tag: Exact tag.

    Returns:
        Dictionary with ``patterns`` (summaries) and ``count``.
    """
    registry = get_registry()
    manifests = registry.get_all()
    if category is not None:
        manifests = [m for m in manifests if m in registry.get_by_category(category)]
    if layer is not None:
        manifests = [m for m in manifests if m in registry.get_by_layer(layer)]
    if tag is not None:
        manifests = [m for m in manifests if m in registry.get_by_tag(tag)]

    return {
        "patterns": [summarize_pattern(m) for m in manifests],
        "count": len(manifests),
    }


def get_pattern(pattern_id: str) -> dict[str, Any]:
    """Full manifest in its JSON form.

    Raises:
        PatternNotFoundError: If the id is not registered.
    """
    manifest = get_registry().get(pattern_id)
    if manifest is None:
        raise PatternNotFoundError(pattern_id)
    return manifest.to_dict()


def search_patterns(query: str) -> dict[str, Any]:
    """Case-insensitive search over pattern names and descriptions."""
    manifests = get_registry().search(query)
    return {
        "query": query,
        "patterns": [summarize_pattern(m) for m in manifests],
        "count": len(manifests),
    }


__all__ = ["summarize_pattern", "list_patterns", "get_pattern", "search_patterns"]
