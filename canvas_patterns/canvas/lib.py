"""Canvas document model.

The canvas document is the tree the pattern engine reads and writes:
a document holds artboards, an artboard holds nodes, and frame/group nodes
hold further nodes. Nodes form a closed union discriminated on ``type`` so
every consumer can branch on the concrete model class instead of probing
for optional fields.

Field names follow the canvas JSON format (``semanticKey``,
``schemaVersion``, ``componentKey``); the Python attributes are snake_case
and the camelCase names are pydantic aliases. Dump with ``by_alias=True``
to get the wire format back.

All traversal helpers walk the tree with an explicit stack, so document
depth is bounded by memory rather than the interpreter recursion limit.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, ValidationError

SCHEMA_VERSION = "0.1.0"

# Dot notation for hierarchy with optional index suffixes
# (e.g. "hero.title", "nav.items[0]").
SEMANTIC_KEY_PATTERN = r"^[a-z][a-z0-9]*(\.[a-z0-9]+|\[[0-9]+\])*$"

_INDEX_SUFFIX = re.compile(r"(\[[0-9]+\])+$")

SemanticKey = Annotated[str, StringConstraints(pattern=SEMANTIC_KEY_PATTERN)]


class Rect(BaseModel):
    """Rectangle coordinates for positioning nodes and artboards."""

    x: float = 0
    y: float = 0
    width: float = Field(default=0, ge=0)
    height: float = Field(default=0, ge=0)


class TextStyle(BaseModel):
    """Text styling properties."""

    model_config = ConfigDict(populate_by_name=True)

    family: str | None = None
    size: float | None = None
    line_height: float | None = Field(default=None, alias="lineHeight")
    weight: str | None = None
    letter_spacing: float | None = Field(default=None, alias="letterSpacing")
    color: str | None = None


class Style(BaseModel):
    """Visual styling properties for nodes."""

    fills: list[Any] | None = None
    strokes: list[Any] | None = None
    radius: float | None = None
    opacity: float | None = Field(default=None, ge=0, le=1)
    shadow: Any = None


class BaseNode(BaseModel):
    """Fields shared by every canvas node.

    Attributes:
        id: Identifier, unique within the document.
        name: Human-readable layer name.
        visible: Whether the node is rendered.
        frame: Position and size relative to the parent.
        style: Optional visual styling.
        data: Free-form metadata carried through untouched.
        semantic_key: Stable design-intent key (``semanticKey``).
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1, description="Unique node identifier")
    name: str = Field(..., description="Human-readable layer name")
    visible: bool = True
    frame: Rect = Field(default_factory=Rect)
    style: Style | None = None
    data: dict[str, Any] | None = None
    semantic_key: SemanticKey | None = Field(
        default=None,
        alias="semanticKey",
        description="Stable path-like key expressing design intent",
    )


class FrameNode(BaseNode):
    """Container node with optional layout settings."""

    type: Literal["frame"] = "frame"
    layout: dict[str, Any] | None = None
    children: list["Node"] = Field(default_factory=list)


class GroupNode(BaseNode):
    """Logical grouping of nodes."""

    type: Literal["group"] = "group"
    children: list["Node"] = Field(default_factory=list)


class TextNode(BaseNode):
    """Text content with styling."""

    type: Literal["text"] = "text"
    text: str = ""
    text_style: TextStyle | None = Field(default=None, alias="textStyle")


class ImageNode(BaseNode):
    """Bitmap or vector image."""

    type: Literal["image"] = "image"
    src: str
    mode: Literal["cover", "contain", "fill", "none"] = "cover"


class ComponentNode(BaseNode):
    """Instance of a design-system component."""

    type: Literal["component"] = "component"
    component_key: str = Field(..., alias="componentKey")
    props: dict[str, Any] = Field(default_factory=dict)


class VectorNode(BaseNode):
    """SVG path-based graphic."""

    type: Literal["vector"] = "vector"
    path: str
    winding_rule: Literal["nonzero", "evenodd"] = Field(
        default="nonzero", alias="windingRule"
    )


Node = Annotated[
    Union[FrameNode, GroupNode, TextNode, ImageNode, ComponentNode, VectorNode],
    Field(discriminator="type"),
]

FrameNode.model_rebuild()
GroupNode.model_rebuild()


class Artboard(BaseModel):
    """A canvas page with its own viewport."""

    id: str = Field(..., min_length=1)
    name: str
    frame: Rect = Field(default_factory=Rect)
    children: list[Node] = Field(default_factory=list)


class CanvasDocument(BaseModel):
    """Complete canvas document.

    Attributes:
        schema_version: Format version (``schemaVersion``), always "0.1.0".
        id: Document identifier.
        name: Document name.
        artboards: At least one artboard.
    """

    model_config = ConfigDict(populate_by_name=True)

    schema_version: Literal["0.1.0"] = Field(
        default=SCHEMA_VERSION, alias="schemaVersion"
    )
    id: str = Field(..., min_length=1)
    name: str
    artboards: list[Artboard] = Field(..., min_length=1)

    def to_dict(self) -> dict[str, Any]:
        """Dump to the camelCase JSON wire format."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# Errors
# =============================================================================


@dataclass
class DocumentIssue:
    """A single problem found while parsing a canvas document."""

    path: str
    message: str
    error_type: str


class CanvasError(ValueError):
    """Raised when input data is not a valid canvas document."""

    def __init__(self, message: str, issues: list[DocumentIssue] | None = None):
        super().__init__(message)
        self.issues = issues or []


def parse_document(data: dict[str, Any] | CanvasDocument) -> CanvasDocument:
    """Validate JSON-like data into a CanvasDocument.

    Args:
        data: Parsed JSON document, or an existing CanvasDocument.

    Returns:
        The validated document.

    Raises:
        CanvasError: If the data does not satisfy the canvas schema. The
            exception's ``issues`` lists each field-level problem.
    """
    if isinstance(data, CanvasDocument):
        return data
    try:
        return CanvasDocument.model_validate(data)
    except ValidationError as e:
        issues = [
            DocumentIssue(
                path=".".join(str(part) for part in err["loc"]) or "document",
                message=err["msg"],
                error_type=err["type"],
            )
            for err in e.errors()
        ]
        raise CanvasError(
            f"Invalid canvas document: {len(issues)} issue(s)", issues
        ) from e


def export_document_schema() -> dict[str, Any]:
    """Export the CanvasDocument JSON Schema (by alias)."""
    return CanvasDocument.model_json_schema(by_alias=True)


# =============================================================================
# Traversal
# =============================================================================


def children_of(node: BaseNode) -> list[BaseNode]:
    """Direct children of a node; empty for leaf node types."""
    if isinstance(node, (FrameNode, GroupNode)):
        return node.children
    return []


def is_container(node: BaseNode) -> bool:
    """Whether the node is a frame or group."""
    return isinstance(node, (FrameNode, GroupNode))


def _walk(roots: list[BaseNode]) -> Iterator[BaseNode]:
    stack = list(reversed(roots))
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(children_of(current)))


def iter_subtree(node: BaseNode) -> Iterator[BaseNode]:
    """Yield ``node`` and all its descendants in pre-order."""
    return _walk([node])


def iter_nodes(document: CanvasDocument) -> Iterator[BaseNode]:
    """Yield every node of every artboard in pre-order."""
    for artboard in document.artboards:
        yield from _walk(artboard.children)


def find_node(document: CanvasDocument, node_id: str) -> BaseNode | None:
    """Find a node by id anywhere in the document."""
    for node in iter_nodes(document):
        if node.id == node_id:
            return node
    return None


def count_nodes(document: CanvasDocument) -> int:
    """Total number of nodes across all artboards."""
    return sum(1 for _ in iter_nodes(document))


# =============================================================================
# Semantic Keys
# =============================================================================


def base_semantic_key(key: str) -> str:
    """Strip trailing index suffixes: ``"tabs.tab[1]"`` -> ``"tabs.tab"``."""
    return _INDEX_SUFFIX.sub("", key)


def semantic_key_matches(node_key: str | None, definition_key: str | None) -> bool:
    """Whether a node's semantic key realizes a definition's key.

    A key matches when it is equal to the definition key, or when it is the
    definition key followed by index suffixes, so ``tabs.tab[0]`` realizes
    ``tabs.tab`` while ``tabs.tabpanel[0]`` does not.
    """
    if not node_key or not definition_key:
        return False
    if node_key == definition_key:
        return True
    stripped = base_semantic_key(node_key)
    return stripped != node_key and stripped == definition_key


def is_valid_semantic_key(key: str) -> bool:
    """Check a key against the semantic key grammar."""
    return re.match(SEMANTIC_KEY_PATTERN, key) is not None


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
