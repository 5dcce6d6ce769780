"""Canvas document model and traversal.

Example usage:
    >>> from canvas_patterns.canvas import parse_document, iter_nodes
    >>> document = parse_document(raw_json)
    >>> keys = [n.semantic_key for n in iter_nodes(document) if n.semantic_key]
"""

from .lib import (
    SCHEMA_VERSION,
    SEMANTIC_KEY_PATTERN,
    SemanticKey,
    Artboard,
    BaseNode,
    CanvasDocument,
    CanvasError,
    ComponentNode,
    DocumentIssue,
    FrameNode,
    GroupNode,
    ImageNode,
    Node,
    Rect,
    Style,
    TextNode,
    TextStyle,
    VectorNode,
    base_semantic_key,
    children_of,
    count_nodes,
    export_document_schema,
    find_node,
    is_container,
    is_valid_semantic_key,
    iter_nodes,
    iter_subtree,
    parse_document,
    semantic_key_matches,
)

__all__ = [
    "SCHEMA_VERSION",
    "SEMANTIC_KEY_PATTERN",
    "SemanticKey",
    # Models
    "Rect",
    "Style",
    "TextStyle",
    "BaseNode",
    "FrameNode",
    "GroupNode",
    "TextNode",
    "ImageNode",
    "ComponentNode",
    "VectorNode",
    "Node",
    "Artboard",
    "CanvasDocument",
    # Parsing
    "CanvasError",
    "DocumentIssue",
    "parse_document",
    "export_document_schema",
    # Traversal
    "children_of",
    "is_container",
    "iter_subtree",
    "iter_nodes",
    "find_node",
    "count_nodes",
    # Semantic keys
    "base_semantic_key",
    "semantic_key_matches",
    "is_valid_semantic_key",
]
