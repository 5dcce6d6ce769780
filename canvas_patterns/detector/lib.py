"""Pattern detection over canvas documents.

For every registered manifest the detector:

1. Walks the document looking for candidate roots: nodes whose semantic key
   realizes one of the manifest's definition keys, and frames/groups whose
   direct children include a node of a type the manifest uses.
2. Maps the manifest's definitions onto the candidate's subtree, first by
   semantic key and then, for definitions still unmapped, by node type.
3. Emits a ``PatternInstance`` for every candidate anchored by at least one
   semantic-key match (any mapping at all for manifests without keys). A
   candidate inside an emitted root is skipped unless it brings nodes that
   root does not explain, so a second Tabs nested in a tab panel is reported
   on its own. A candidate also yields to a descendant candidate bringing
   the same new nodes, so the innermost node spanning them becomes the root.

Detection never raises for a valid document. Missing required nodes are
reported on the instance (``validation_errors``), not as exceptions.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from canvas_patterns.canvas import (
    BaseNode,
    CanvasDocument,
    children_of,
    is_container,
    iter_nodes,
    iter_subtree,
    parse_document,
    semantic_key_matches,
)
from canvas_patterns.config import EnvVar, get_environment
from canvas_patterns.manifest import PatternManifest, PatternNodeDefinition
from canvas_patterns.registry import PatternRegistry, create_pattern_registry

logger = logging.getLogger(__name__)


@dataclass
class PatternInstance:
    """A manifest matched against a concrete subtree.

    Attributes:
        pattern_id: Id of the matched manifest.
        root_node_id: Id of the candidate root node.
        node_mappings: Definition id -> canvas node id.
        validation_errors: One entry per required definition left unmapped.
    """

    pattern_id: str
    root_node_id: str
    node_mappings: dict[str, str] = field(default_factory=dict)
    validation_errors: list[str] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return not self.validation_errors

    def to_dict(self) -> dict[str, Any]:
        """JSON-serialisable form with camelCase keys."""
        return {
            "patternId": self.pattern_id,
            "rootNodeId": self.root_node_id,
            "nodeMappings": dict(self.node_mappings),
            "isComplete": self.is_complete,
            "validationErrors": list(self.validation_errors),
        }


@dataclass
class _Mapping:
    node_mappings: dict[str, str] = field(default_factory=dict)
    keyed_mappings: dict[str, str] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)


class PatternDetector:
    """Find pattern instances in canvas documents.

    Args:
        registry: Manifests to look for.
        exclusive: When True, a canvas node is claimed by at most one
            definition per instance. None reads ``PATTERN_EXCLUSIVE_MAPPING``
            (default False, first-match reuse allowed).
    """

    def __init__(self, registry: PatternRegistry, exclusive: bool | None = None):
        self.registry = registry
        self.exclusive = get_environment(
            EnvVar.PATTERN_EXCLUSIVE_MAPPING, override=exclusive
        )

    def detect_patterns(
        self, document: CanvasDocument | dict[str, Any]
    ) -> list[PatternInstance]:
        """Detect instances of every registered manifest.

        Args:
            document: Canvas document, or its JSON form.

        Returns:
            Instances grouped by manifest in registry order, and by root in
            document pre-order within a manifest.
        """
        document = parse_document(document)
        instances: list[PatternInstance] = []
        for manifest in self.registry:
            instances.extend(self._detect_manifest(document, manifest))
        return instances

    def detect_pattern(
        self, document: CanvasDocument | dict[str, Any], pattern_id: str
    ) -> list[PatternInstance]:
        """Detect instances of a single manifest. Unknown ids yield []."""
        manifest = self.registry.get(pattern_id)
        if manifest is None:
            return []
        return self._detect_manifest(parse_document(document), manifest)

    def _detect_manifest(
        self, document: CanvasDocument, manifest: PatternManifest
    ) -> list[PatternInstance]:
        definitions = manifest.iter_definitions()
        has_keys = any(d.semantic_key for d in definitions)
        repeatable = {d.id for d in definitions if d.multiple}

        # (root, ids in its subtree, mapping, evidence) per anchored candidate
        candidates = []
        for root in _find_candidate_roots(document, definitions):
            subtree = list(iter_subtree(root))
            mapping = self._map_definitions(definitions, subtree)
            evidence = mapping.keyed_mappings if has_keys else mapping.node_mappings
            if evidence:
                candidates.append((root, {n.id for n in subtree}, mapping, evidence))

        # (subtree ids, instance) per emitted root
        emitted: list[tuple[set[str], PatternInstance]] = []
        for index, (root, subtree_ids, mapping, evidence) in enumerate(candidates):
            unclaimed = _unclaimed_evidence(root.id, evidence, emitted, repeatable)
            # Nothing beyond what an enclosing instance already explains.
            if not unclaimed:
                continue
            # A wrapper whose descendant candidate brings the same new nodes
            # yields to that descendant.
            if any(
                other.id in subtree_ids
                and _unclaimed_evidence(other.id, other_evidence, emitted, repeatable)
                == unclaimed
                for other, _, _, other_evidence in candidates[index + 1 :]
            ):
                continue
            instance = PatternInstance(
                pattern_id=manifest.id,
                root_node_id=root.id,
                node_mappings=mapping.node_mappings,
                validation_errors=mapping.errors,
            )
            emitted.append((subtree_ids, instance))

        logger.debug(f"{manifest.id}: {len(emitted)} instance(s)")
        return [instance for _, instance in emitted]

    def _map_definitions(
        self, definitions: list[PatternNodeDefinition], subtree: list[BaseNode]
    ) -> _Mapping:
        mapping = _Mapping()
        claimed: set[str] = set()
        failed: set[str] = set()

        def available(node: BaseNode) -> bool:
            return not self.exclusive or node.id not in claimed

        # Pass A: semantic keys
        for definition in definitions:
            if not definition.semantic_key:
                continue
            match = next(
                (
                    node
                    for node in subtree
                    if available(node)
                    and semantic_key_matches(node.semantic_key, definition.semantic_key)
                ),
                None,
            )
            if match is not None:
                mapping.node_mappings[definition.id] = match.id
                mapping.keyed_mappings[definition.id] = match.id
                claimed.add(match.id)
            elif definition.required:
                mapping.errors.append(
                    f'Required node "{definition.name}" with semantic key '
                    f'"{definition.semantic_key}" not found'
                )
                failed.add(definition.id)

        # Pass B: node types
        for definition in definitions:
            if definition.id in mapping.node_mappings or definition.id in failed:
                continue
            match = next(
                (
                    node
                    for node in subtree
                    if available(node) and node.type == definition.type
                ),
                None,
            )
            if match is not None:
                mapping.node_mappings[definition.id] = match.id
                claimed.add(match.id)
            elif definition.required:
                mapping.errors.append(
                    f'Required node "{definition.name}" of type '
                    f'"{definition.type}" not found'
                )

        return mapping


def _unclaimed_evidence(
    node_id: str,
    evidence: dict[str, str],
    emitted: list[tuple[set[str], PatternInstance]],
    repeatable: set[str],
) -> dict[str, str]:
    """Evidence not explained by the emitted instances enclosing ``node_id``.

    A node is explained when an enclosing instance already maps it, or when
    it repeats a ``multiple`` definition that instance has mapped (the
    second tab of a tab list). A second realization of a single-valued
    definition, such as another tab list inside a tab panel, stays unclaimed
    and so starts a nested instance.
    """
    enclosing = [instance for ids, instance in emitted if node_id in ids]
    owned = {n for instance in enclosing for n in instance.node_mappings.values()}
    mapped = {d for instance in enclosing for d in instance.node_mappings}
    return {
        definition_id: mapped_id
        for definition_id, mapped_id in evidence.items()
        if mapped_id not in owned
        and not (definition_id in repeatable and definition_id in mapped)
    }


def _find_candidate_roots(
    document: CanvasDocument, definitions: list[PatternNodeDefinition]
) -> list[BaseNode]:
    keys = [d.semantic_key for d in definitions if d.semantic_key]
    types = {d.type for d in definitions}

    roots = []
    for node in iter_nodes(document):
        if any(semantic_key_matches(node.semantic_key, key) for key in keys):
            roots.append(node)
        elif is_container(node) and any(
            child.type in types for child in children_of(node)
        ):
            roots.append(node)
    return roots


def detect_patterns(
    document: CanvasDocument | dict[str, Any],
    registry: PatternRegistry | None = None,
) -> list[PatternInstance]:
    """Detect pattern instances, using the built-in patterns by default."""
    if registry is None:
        registry = create_pattern_registry()
    return PatternDetector(registry).detect_patterns(document)


__all__ = [
    "PatternInstance",
    "PatternDetector",
    "detect_patterns",
]
