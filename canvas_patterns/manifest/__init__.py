"""Pattern manifest data model.

This module provides:
- Manifest, node definition and relationship models
- Closed enums for categories, layers, node and relationship types
- Registration-time structural checks
- The pattern engine's exception hierarchy

Example usage:
    >>> from canvas_patterns.manifest import PatternManifest, manifest_errors
    >>> manifest = PatternManifest.model_validate(raw_manifest)
    >>> issues = manifest_errors(manifest)
"""

from .lib import (
    AccessibilityRule,
    AccessibilityRuleType,
    Alignment,
    DefinitionType,
    EmissionTarget,
    ManifestError,
    ManifestIssue,
    NodePosition,
    Offset,
    PatternCategory,
    PatternEmission,
    PatternEmissionRule,
    PatternError,
    PatternExample,
    PatternLayer,
    PatternManifest,
    PatternNodeDefinition,
    PatternNotFoundError,
    PatternRelationship,
    PatternValidationRule,
    RelationshipType,
    ValidationRuleType,
    check_manifest,
    export_manifest_schema,
    manifest_errors,
)

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
