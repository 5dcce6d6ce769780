"""Pattern manifest data model.

A pattern manifest is the declarative description of a reusable UI pattern:
which nodes it is made of (``structure``), how those nodes relate
(``relationships``), and auxiliary data the matching engine carries through
untouched (emission templates, accessibility rules, validation rules,
examples).

Manifests are frozen value objects. The registry replaces a manifest when
a new one is registered under the same id; nothing mutates one in place.

Field names follow the manifest JSON format (``semanticKey``,
``relativeTo``, ``nodeId``, ``from``/``to``) through pydantic aliases.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from canvas_patterns.canvas import CanvasDocument, SemanticKey


class PatternCategory(str, Enum):
    """Design-system category of a pattern."""

    ACTIONS = "Actions"
    CONTAINERS = "Containers"
    DISPLAY = "Display"
    FEEDBACK = "Feedback"
    FORMS = "Forms"
    INPUTS = "Inputs"
    NAVIGATION = "Navigation"
    TEXTUAL = "Textual"
    DATA_VISUALIZATION = "Data Visualization"
    EDITING = "Editing"


class PatternLayer(str, Enum):
    """Composition layer, from atomic primitives to full assemblies."""

    PRIMITIVES = "primitives"
    COMPOUNDS = "compounds"
    COMPOSERS = "composers"
    ASSEMBLIES = "assemblies"


class DefinitionType(str, Enum):
    """Canvas node types a pattern definition may require."""

    FRAME = "frame"
    TEXT = "text"
    COMPONENT = "component"
    GROUP = "group"


class RelationshipType(str, Enum):
    """Semantic relationship between two pattern nodes (ARIA-flavoured)."""

    CONTROLS = "controls"
    LABELLEDBY = "labelledby"
    DESCRIBEDBY = "describedby"
    OWNS = "owns"
    PARENT = "parent"


class Alignment(str, Enum):
    """Alignment hint relative to the positioning target."""

    START = "start"
    CENTER = "center"
    END = "end"


class EmissionTarget(str, Enum):
    """Code generation targets for emission rules."""

    HTML = "html"
    REACT = "react"
    VUE = "vue"
    SVELTE = "svelte"


class AccessibilityRuleType(str, Enum):
    """Accessibility attributes an emission must produce."""

    ROLE = "role"
    ARIA_LABEL = "aria-label"
    ARIA_LABELLEDBY = "aria-labelledby"
    ARIA_DESCRIBEDBY = "aria-describedby"
    ARIA_CONTROLS = "aria-controls"


class ValidationRuleType(str, Enum):
    """Kinds of declarative validation rules."""

    REQUIRED_CHILD = "required-child"
    RELATIONSHIP = "relationship"
    PROPERTY = "property"
    STRUCTURE = "structure"


_MODEL_CONFIG = ConfigDict(populate_by_name=True, frozen=True, use_enum_values=True)


class Offset(BaseModel):
    """Pixel offset from the positioning target."""

    model_config = _MODEL_CONFIG

    x: float = 0
    y: float = 0


class NodePosition(BaseModel):
    """Positioning hints for a pattern node."""

    model_config = _MODEL_CONFIG

    relative_to: str | None = Field(default=None, alias="relativeTo")
    offset: Offset | None = None
    alignment: Alignment | None = None


class PatternNodeDefinition(BaseModel):
    """One node a pattern is made of.

    Attributes:
        id: Identifier, unique within the manifest's structure.
        name: Display name, used in error messages.
        type: Canvas node type the definition expects.
        semantic_key: Key a realizing canvas node carries (``semanticKey``).
        required: Whether the pattern is incomplete without this node.
        multiple: Whether the node may occur more than once.
        properties: Free-form properties (e.g. ARIA role).
        children: Nested definitions.
        position: Positioning hints.
    """

    model_config = _MODEL_CONFIG

    id: str = Field(..., min_length=1)
    name: str
    type: DefinitionType
    semantic_key: SemanticKey | None = Field(default=None, alias="semanticKey")
    required: bool
    multiple: bool = False
    properties: dict[str, Any] | None = None
    children: list["PatternNodeDefinition"] = Field(default_factory=list)
    position: NodePosition | None = None


class PatternRelationship(BaseModel):
    """Relationship between two definitions, referenced by id."""

    model_config = _MODEL_CONFIG

    from_id: str = Field(..., alias="from")
    to_id: str = Field(..., alias="to")
    type: RelationshipType
    required: bool
    description: str = ""


class PatternEmissionRule(BaseModel):
    """Rendering hint for one target. Templates are opaque strings."""

    model_config = _MODEL_CONFIG

    target: EmissionTarget
    template: str | None = None
    component: str | None = None
    props: dict[str, Any] | None = None
    children: str | None = None


class AccessibilityRule(BaseModel):
    """Accessibility attribute required on a pattern node."""

    model_config = _MODEL_CONFIG

    node_id: str = Field(..., alias="nodeId")
    rule: AccessibilityRuleType
    value: str | list[str]
    required: bool


class PatternEmission(BaseModel):
    """Emission rules per target plus accessibility requirements."""

    model_config = _MODEL_CONFIG

    html: PatternEmissionRule | None = None
    react: PatternEmissionRule | None = None
    accessibility: list[AccessibilityRule] = Field(default_factory=list)


class PatternValidationRule(BaseModel):
    """Declarative validation rule. ``condition`` is opaque."""

    model_config = _MODEL_CONFIG

    type: ValidationRuleType
    message: str
    node_id: str | None = Field(default=None, alias="nodeId")
    condition: str | None = None


class PatternExample(BaseModel):
    """Example document realizing the pattern."""

    model_config = _MODEL_CONFIG

    name: str
    description: str = ""
    canvas_document: CanvasDocument = Field(..., alias="canvasDocument")
    generated_code: str | None = Field(default=None, alias="generatedCode")
    screenshot: str | None = None


class PatternManifest(BaseModel):
    """Declarative specification of a reusable UI pattern.

    Attributes:
        id: Stable unique id (e.g. "pattern.tabs").
        name: Display name.
        description: Short description, searched by the registry.
        version: Manifest version string.
        category: Design-system category.
        layer: Composition layer.
        tags: Free-form tags.
        structure: Node definitions.
        relationships: Relationships between definitions.
        emission: Opaque rendering rules.
        validation: Opaque validation rules.
        examples: Example documents.
    """

    model_config = _MODEL_CONFIG

    id: str = Field(..., min_length=1)
    name: str
    description: str = ""
    version: str = "1.0.0"
    category: PatternCategory
    layer: PatternLayer
    tags: frozenset[str] = Field(default_factory=frozenset)
    structure: list[PatternNodeDefinition] = Field(default_factory=list)
    relationships: list[PatternRelationship] = Field(default_factory=list)
    emission: PatternEmission = Field(default_factory=PatternEmission)
    validation: list[PatternValidationRule] = Field(default_factory=list)
    examples: list[PatternExample] = Field(default_factory=list)

    @field_serializer("tags")
    def _serialize_tags(self, tags: frozenset[str]) -> list[str]:
        return sorted(tags)

    def iter_definitions(self) -> list[PatternNodeDefinition]:
        """All definitions, nested ``children`` included, in pre-order."""
        result: list[PatternNodeDefinition] = []
        stack = list(reversed(self.structure))
        while stack:
            definition = stack.pop()
            result.append(definition)
            stack.extend(reversed(definition.children))
        return result

    def get_definition(self, definition_id: str) -> PatternNodeDefinition | None:
        """Look up a definition by id."""
        for definition in self.iter_definitions():
            if definition.id == definition_id:
                return definition
        return None

    def semantic_keys(self) -> set[str]:
        """Semantic keys declared anywhere in the structure."""
        return {d.semantic_key for d in self.iter_definitions() if d.semantic_key}

    def to_dict(self) -> dict[str, Any]:
        """Dump to the camelCase JSON format."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


PatternNodeDefinition.model_rebuild()


def export_manifest_schema() -> dict[str, Any]:
    """Export the PatternManifest JSON Schema (by alias)."""
    return PatternManifest.model_json_schema(by_alias=True)


# =============================================================================
# Errors
# =============================================================================


class PatternError(Exception):
    """Base class for pattern engine errors."""


@dataclass
class ManifestIssue:
    """A structural problem in a pattern manifest.

    Attributes:
        path: Location inside the manifest (e.g. "relationships[0].to").
        message: Human-readable description.
        error_type: Machine-readable classification.
    """

    path: str
    message: str
    error_type: str


class ManifestError(PatternError):
    """Raised when a manifest fails registration-time checks."""

    def __init__(self, manifest_id: str, issues: list[ManifestIssue]):
        details = "; ".join(f"{i.path}: {i.message}" for i in issues)
        super().__init__(f"Invalid pattern manifest \"{manifest_id}\": {details}")
        self.manifest_id = manifest_id
        self.issues = issues


class PatternNotFoundError(PatternError, KeyError):
    """Raised when a pattern id is not registered."""

    def __init__(self, pattern_id: str):
        super().__init__(f"Pattern \"{pattern_id}\" not found")
        self.pattern_id = pattern_id

    def __str__(self) -> str:
        # KeyError would repr() the message.
        return str(self.args[0])


# =============================================================================
# Registration-time Checks
# =============================================================================


def manifest_errors(manifest: PatternManifest) -> list[ManifestIssue]:
    """Check a manifest for dangling or ambiguous definition references.

    Checks for:
    - Duplicate definition ids (nested children included)
    - Relationship endpoints that are not declared definitions
    - ``position.relativeTo`` targets that are undeclared or self-referencing
    - Accessibility and validation rules naming undeclared definitions

    Args:
        manifest: Manifest to check.

    Returns:
        List of issues. Empty list if the manifest is well formed.
    """
    issues: list[ManifestIssue] = []

    seen: set[str] = set()
    for definition in manifest.iter_definitions():
        if definition.id in seen:
            issues.append(
                ManifestIssue(
                    f"structure.{definition.id}",
                    f"Duplicate definition id '{definition.id}'",
                    "duplicate_definition",
                )
            )
        seen.add(definition.id)

    for definition in manifest.iter_definitions():
        position = definition.position
        if position is None or position.relative_to is None:
            continue
        path = f"structure.{definition.id}.position.relativeTo"
        if position.relative_to == definition.id:
            issues.append(
                ManifestIssue(
                    path,
                    f"Definition '{definition.id}' is positioned relative to itself",
                    "self_reference",
                )
            )
        elif position.relative_to not in seen:
            issues.append(
                ManifestIssue(
                    path,
                    f"Unknown definition '{position.relative_to}'",
                    "unknown_reference",
                )
            )

    for i, relationship in enumerate(manifest.relationships):
        for end, ref in (("from", relationship.from_id), ("to", relationship.to_id)):
            if ref not in seen:
                issues.append(
                    ManifestIssue(
                        f"relationships[{i}].{end}",
                        f"Unknown definition '{ref}'",
                        "unknown_reference",
                    )
                )

    for i, rule in enumerate(manifest.emission.accessibility):
        if rule.node_id not in seen:
            issues.append(
                ManifestIssue(
                    f"emission.accessibility[{i}].nodeId",
                    f"Unknown definition '{rule.node_id}'",
                    "unknown_reference",
                )
            )

    for i, rule in enumerate(manifest.validation):
        if rule.node_id is not None and rule.node_id not in seen:
            issues.append(
                ManifestIssue(
                    f"validation[{i}].nodeId",
                    f"Unknown definition '{rule.node_id}'",
                    "unknown_reference",
                )
            )

    return issues


def check_manifest(manifest: PatternManifest) -> None:
    """Raise ManifestError if ``manifest_errors`` reports anything."""
    issues = manifest_errors(manifest)
    if issues:
        raise ManifestError(manifest.id, issues)


__all__ = [
    # Enums
    "PatternCategory",
    "PatternLayer",
    "DefinitionType",
    "RelationshipType",
    "Alignment",
    "EmissionTarget",
    "AccessibilityRuleType",
    "ValidationRuleType",
    # Models
    "Offset",
    "NodePosition",
    "PatternNodeDefinition",
    "PatternRelationship",
    "PatternEmissionRule",
    "AccessibilityRule",
    "PatternEmission",
    "PatternValidationRule",
    "PatternExample",
    "PatternManifest",
    "export_manifest_schema",
    # Errors
    "PatternError",
    "ManifestIssue",
    "ManifestError",
    "PatternNotFoundError",
    # Checks
    "manifest_errors",
    "check_manifest",
]
