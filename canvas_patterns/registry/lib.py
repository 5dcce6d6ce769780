"""Pattern registry.

In-memory store of pattern manifests keyed by id, with lookup by category,
layer, tag and free-text search. Registries are plain values: callers build
one (usually through ``create_pattern_registry``) and hand it to the
detector, validator and generator.
"""

import logging
from collections.abc import Iterator

from canvas_patterns.config import EnvVar, get_environment
from canvas_patterns.manifest import (
    PatternCategory,
    PatternLayer,
    PatternManifest,
    check_manifest,
)

from .builtin import builtin_patterns

logger = logging.getLogger(__name__)


def _enum_value(value: PatternCategory | PatternLayer | str) -> str:
    return value.value if isinstance(value, (PatternCategory, PatternLayer)) else value


class PatternRegistry:
    """Registry of pattern manifests.

    Registration is last-write-wins by manifest id. Iteration and ``get_all``
    follow first-registration order; overwriting keeps the original slot.

    Args:
        strict: Run ``check_manifest`` before accepting a manifest. None
            reads ``PATTERN_STRICT_MANIFESTS`` (default True).
    """

    def __init__(self, strict: bool | None = None):
        self.strict = get_environment(EnvVar.PATTERN_STRICT_MANIFESTS, override=strict)
        self._patterns: dict[str, PatternManifest] = {}

    def register(self, manifest: PatternManifest) -> None:
        """Register a manifest, replacing any manifest with the same id.

        Raises:
            ManifestError: In strict mode, if the manifest references
                undeclared definitions. The registry is left unchanged.
        """
        if self.strict:
            check_manifest(manifest)
        if manifest.id in self._patterns:
            logger.debug(f"Replacing pattern {manifest.id}")
        else:
            logger.debug(f"Registered pattern {manifest.id}")
        self._patterns[manifest.id] = manifest

    def unregister(self, pattern_id: str) -> bool:
        """Remove a manifest. Returns False if it was not registered."""
        return self._patterns.pop(pattern_id, None) is not None

    def __len__(self) -> int:
        return len(self._patterns)

    def __contains__(self, pattern_id: object) -> bool:
        return pattern_id in self._patterns

    def __iter__(self) -> Iterator[PatternManifest]:
        return iter(list(self._patterns.values()))

    def get(self, pattern_id: str) -> PatternManifest | None:
        return self._patterns.get(pattern_id)

    def get_all(self) -> list[PatternManifest]:
        return list(self._patterns.values())

    def get_by_category(self, category: PatternCategory | str) -> list[PatternManifest]:
        """Manifests in a category. Accepts the enum or its value ("Forms")."""
        wanted = _enum_value(category)
        return [m for m in self._patterns.values() if m.category == wanted]

    def get_by_layer(self, layer: PatternLayer | str) -> list[PatternManifest]:
        """Manifests in a composition layer."""
        wanted = _enum_value(layer)
        return [m for m in self._patterns.values() if m.layer == wanted]

    def get_by_tag(self, tag: str) -> list[PatternManifest]:
        return [m for m in self._patterns.values() if tag in m.tags]

    def search(self, query: str) -> list[PatternManifest]:
        """Case-insensitive substring search over name and description.

        Example:
            >>> registry.search("TAB")  # finds Tabs
        """
        needle = query.lower()
        return [
            m
            for m in self._patterns.values()
            if needle in m.name.lower() or needle in m.description.lower()
        ]

    def load_builtin_patterns(self) -> None:
        """Register the built-in Tabs, Dialog, Accordion, Form, Card and
        Navigation manifests."""
        for manifest in builtin_patterns():
            self.register(manifest)
        logger.debug(f"Loaded built-in patterns ({len(self)} registered)")


def create_pattern_registry(strict: bool | None = None) -> PatternRegistry:
    """Create a registry pre-loaded with the built-in patterns."""
    registry = PatternRegistry(strict=strict)
    registry.load_builtin_patterns()
    return registry


__all__ = [
    "PatternRegistry",
    "create_pattern_registry",
]
