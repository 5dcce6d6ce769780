"""Canvas document generation from pattern manifests.

Builds a fresh single-artboard document containing one node per definition
of a manifest. Output is flat by default: every node is appended to the
artboard. With nesting enabled, a node is placed inside the node generated
for its ``position.relativeTo`` target (its parent definition when no target
is given) whenever that node is a frame or group. Nested nodes are positioned
by their definition offset relative to the parent; top-level nodes at the
requested position plus that offset.

Node ids are ULIDs, so two runs over the same input differ only in ids.
"""

import logging
from typing import Any

from pydantic import BaseModel, Field
from ulid import ULID

from canvas_patterns.canvas import (
    Artboard,
    BaseNode,
    CanvasDocument,
    ComponentNode,
    FrameNode,
    GroupNode,
    Rect,
    TextNode,
    is_container,
)
from canvas_patterns.config import EnvVar, get_artboard_size, get_environment
from canvas_patterns.manifest import (
    Offset,
    PatternManifest,
    PatternNodeDefinition,
    PatternNotFoundError,
)
from canvas_patterns.registry import PatternRegistry, create_pattern_registry

logger = logging.getLogger(__name__)

ARTBOARD_NAME = "Main"

# (width, height) of generated nodes per definition type
DEFAULT_SIZES: dict[str, tuple[float, float]] = {
    "frame": (300, 100),
    "group": (300, 100),
    "text": (200, 40),
    "component": (200, 40),
}


class GenerationSpec(BaseModel):
    """Parameters for one generation run.

    Attributes:
        name: Name of the generated document.
        position: Origin added to every generated node's position.
        properties: Props merged into generated component nodes.
    """

    name: str = Field(..., min_length=1)
    position: Offset = Field(default_factory=Offset)
    properties: dict[str, Any] = Field(default_factory=dict)


def _new_id() -> str:
    return str(ULID())


def _definition_offset(definition: PatternNodeDefinition) -> Offset:
    if definition.position is not None and definition.position.offset is not None:
        return definition.position.offset
    return Offset()


def _definition_parents(manifest: PatternManifest) -> dict[str, str | None]:
    """Map each definition id to the id of the definition nesting it."""
    parents: dict[str, str | None] = {}
    stack: list[tuple[PatternNodeDefinition, str | None]] = [
        (definition, None) for definition in reversed(manifest.structure)
    ]
    while stack:
        definition, parent_id = stack.pop()
        parents.setdefault(definition.id, parent_id)
        stack.extend((child, definition.id) for child in reversed(definition.children))
    return parents


class PatternGenerator:
    """Generate canvas documents from registered manifests.

    Args:
        registry: Manifests to generate from.
        nested: Nest nodes under their positioning target. None reads
            ``PATTERN_GENERATOR_NESTED`` (default False, flat output).
    """

    def __init__(self, registry: PatternRegistry, nested: bool | None = None):
        self.registry = registry
        self.nested = get_environment(EnvVar.PATTERN_GENERATOR_NESTED, override=nested)

    def generate_from_pattern(
        self, pattern_id: str, spec: GenerationSpec | dict[str, Any]
    ) -> CanvasDocument:
        """Generate a document realizing a pattern.

        Args:
            pattern_id: Registered manifest id.
            spec: Generation parameters, or their dict form.

        Returns:
            New document with one artboard holding the generated nodes.

        Raises:
            PatternNotFoundError: If ``pattern_id`` is not registered.
        """
        manifest = self.registry.get(pattern_id)
        if manifest is None:
            raise PatternNotFoundError(pattern_id)
        if not isinstance(spec, GenerationSpec):
            spec = GenerationSpec.model_validate(spec)

        width, height = get_artboard_size()
        artboard = Artboard(
            id=_new_id(),
            name=ARTBOARD_NAME,
            frame=Rect(x=0, y=0, width=width, height=height),
            children=self._generate_nodes(manifest, spec),
        )
        document = CanvasDocument(id=_new_id(), name=spec.name, artboards=[artboard])

        logger.info(
            f"Generated {len(manifest.iter_definitions())} node(s) from {pattern_id}"
        )
        return document

    def _generate_nodes(
        self, manifest: PatternManifest, spec: GenerationSpec
    ) -> list[BaseNode]:
        built = [
            (definition, self._build_node(definition, spec))
            for definition in manifest.iter_definitions()
        ]
        if not self.nested:
            return [node for _, node in built]

        nodes: dict[str, BaseNode] = {}
        for definition, node in built:
            nodes.setdefault(definition.id, node)

        parents = _definition_parents(manifest)
        placed: dict[str, str] = {}
        roots: list[BaseNode] = []
        for definition, node in built:
            target_id = self._nesting_target(definition, parents, nodes, placed)
            if target_id is None:
                roots.append(node)
                continue
            # Nested frames are relative to their parent.
            offset = _definition_offset(definition)
            node.frame = node.frame.model_copy(update={"x": offset.x, "y": offset.y})
            nodes[target_id].children.append(node)
            placed[definition.id] = target_id
        return roots

    def _nesting_target(
        self,
        definition: PatternNodeDefinition,
        parents: dict[str, str | None],
        nodes: dict[str, BaseNode],
        placed: dict[str, str],
    ) -> str | None:
        position = definition.position
        if position is not None and position.relative_to is not None:
            target_id = position.relative_to
        else:
            target_id = parents.get(definition.id)
        if target_id is None or target_id not in nodes:
            return None
        if not is_container(nodes[target_id]):
            return None

        # Refuse placements that would make the node its own ancestor.
        current: str | None = target_id
        while current is not None:
            if current == definition.id:
                return None
            current = placed.get(current)
        return target_id

    def _build_node(
        self, definition: PatternNodeDefinition, spec: GenerationSpec
    ) -> BaseNode:
        width, height = DEFAULT_SIZES[definition.type]
        offset = _definition_offset(definition)

        properties = dict(definition.properties or {})
        common = {
            "id": _new_id(),
            "name": definition.name,
            "frame": Rect(
                x=spec.position.x + offset.x,
                y=spec.position.y + offset.y,
                width=width,
                height=height,
            ),
            "semantic_key": definition.semantic_key,
        }

        if definition.type == "component":
            component_key = properties.pop("componentKey", None) or definition.id
            return ComponentNode(
                **common,
                component_key=component_key,
                props={**properties, **spec.properties},
            )

        data = properties or None
        if definition.type == "frame":
            return FrameNode(**common, data=data, children=[])
        if definition.type == "group":
            return GroupNode(**common, data=data, children=[])
        return TextNode(**common, data=data, text=definition.name)


def generate_pattern(
    pattern_id: str,
    spec: GenerationSpec | dict[str, Any],
    registry: PatternRegistry | None = None,
) -> CanvasDocument:
    """Generate a document, using the built-in patterns by default."""
    if registry is None:
        registry = create_pattern_registry()
    return PatternGenerator(registry).generate_from_pattern(pattern_id, spec)


__all__ = [
    "ARTBOARD_NAME",
    "DEFAULT_SIZES",
    "GenerationSpec",
    "PatternGenerator",
    "generate_pattern",
]
