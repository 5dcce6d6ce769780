"""Pattern validation for canvas documents.

Runs the detector and turns every detected instance into a design-review
report: errors for missing required nodes and unresolved required
relationships, warnings carried over from detection, and suggestions for
incomplete instances.

Reports aggregate across all instances and manifests; validation never
stops at the first problem.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from canvas_patterns.canvas import CanvasDocument
from canvas_patterns.detector import PatternDetector, PatternInstance
from canvas_patterns.manifest import PatternManifest
from canvas_patterns.registry import PatternRegistry, create_pattern_registry

logger = logging.getLogger(__name__)


@dataclass
class ValidationReport:
    """Result of validating the patterns in a document.

    Attributes:
        errors: Missing required nodes and relationships.
        warnings: Detection messages of the instances.
        suggestions: How to complete incomplete instances.
        instances: Detector output the report was computed from.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    instances: list[PatternInstance] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "suggestions": list(self.suggestions),
            "instances": [instance.to_dict() for instance in self.instances],
        }


def _describe_definition(semantic_key: str | None, definition_id: str) -> str:
    if semantic_key:
        return f'semantic key "{semantic_key}"'
    return f'definition "{definition_id}"'


class PatternValidator:
    """Validate detected pattern instances against their manifests.

    Args:
        registry: Manifests to validate against.
        exclusive: Mapping mode handed to the detector.
    """

    def __init__(self, registry: PatternRegistry, exclusive: bool | None = None):
        self.registry = registry
        self.detector = PatternDetector(registry, exclusive=exclusive)

    def validate_patterns(
        self, document: CanvasDocument | dict[str, Any]
    ) -> ValidationReport:
        """Detect and validate every pattern instance in a document."""
        return self.validate_instances(self.detector.detect_patterns(document))

    def validate_instances(self, instances: list[PatternInstance]) -> ValidationReport:
        """Validate pre-computed detector output.

        Instances whose manifest is no longer registered are kept in the
        report but contribute no messages.
        """
        report = ValidationReport(instances=list(instances))
        for instance in instances:
            manifest = self.registry.get(instance.pattern_id)
            if manifest is None:
                logger.debug(f"Skipping instance of unregistered {instance.pattern_id}")
                continue
            self._check_instance(manifest, instance, report)

        logger.debug(
            f"Validated {len(instances)} instance(s): "
            f"{len(report.errors)} error(s), {len(report.warnings)} warning(s)"
        )
        return report

    def _check_instance(
        self,
        manifest: PatternManifest,
        instance: PatternInstance,
        report: ValidationReport,
    ) -> None:
        missing = [
            definition
            for definition in manifest.iter_definitions()
            if definition.required and definition.id not in instance.node_mappings
        ]
        for definition in missing:
            report.errors.append(
                f'Missing required node "{definition.name}" in {manifest.name} pattern '
                f"({_describe_definition(definition.semantic_key, definition.id)})"
            )

        for relationship in manifest.relationships:
            if not relationship.required:
                continue
            if (
                relationship.from_id not in instance.node_mappings
                or relationship.to_id not in instance.node_mappings
            ):
                report.errors.append(
                    f"Missing relationship {relationship.from_id} -> {relationship.to_id} "
                    f"({relationship.type}) in {manifest.name} pattern"
                )

        report.warnings.extend(instance.validation_errors)

        if not instance.is_complete:
            names = ", ".join(definition.name for definition in missing)
            suggestion = f"Complete {manifest.name} pattern by adding missing required nodes"
            report.suggestions.append(f"{suggestion}: {names}" if names else suggestion)


def validate_patterns(
    document: CanvasDocument | dict[str, Any],
    registry: PatternRegistry | None = None,
) -> ValidationReport:
    """Validate a document, using the built-in patterns by default."""
    if registry is None:
        registry = create_pattern_registry()
    return PatternValidator(registry).validate_patterns(document)


__all__ = [
    "ValidationReport",
    "PatternValidator",
    "validate_patterns",
]
