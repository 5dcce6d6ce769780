"""Unit tests for the pattern registry and built-in manifests."""

import pytest

from canvas_patterns.manifest import (
    ManifestError,
    PatternCategory,
    PatternLayer,
    PatternManifest,
    manifest_errors,
)

from .builtin import builtin_patterns, tabs_pattern
from .lib import PatternRegistry, create_pattern_registry


def _broken_manifest() -> PatternManifest:
    return PatternManifest.model_validate(
        {
            "id": "pattern.broken",
            "name": "Broken",
            "description": "Relationship to nowhere",
            "category": "Display",
            "layer": "primitives",
            "structure": [
                {"id": "box", "name": "Box", "type": "frame", "required": True}
            ],
            "relationships": [
                {"from": "box", "to": "ghost", "type": "owns", "required": True}
            ],
        }
    )


class TestBuiltinPatterns:
    """Tests for the built-in manifest data."""

    @pytest.mark.unit
    def test_six_builtins(self):
        ids = [m.id for m in builtin_patterns()]
        assert ids == [
            "pattern.tabs",
            "pattern.dialog",
            "pattern.accordion",
            "pattern.form",
            "pattern.card",
            "pattern.navigation",
        ]

    @pytest.mark.unit
    @pytest.mark.parametrize("manifest", builtin_patterns(), ids=lambda m: m.id)
    def test_builtins_are_well_formed(self, manifest):
        assert manifest_errors(manifest) == []

    @pytest.mark.unit
    def test_tabs_structure(self):
        tabs = tabs_pattern()

        assert tabs.semantic_keys() == {"tabs.tablist", "tabs.tab", "tabs.tabpanel"}
        assert tabs.get_definition("tab").multiple is True
        assert tabs.emission.react.component == "Tabs"

    @pytest.mark.unit
    def test_tabs_example_realizes_pattern(self):
        example = tabs_pattern().examples[0]
        assert example.name == "Simple Tabs"
        assert example.canvas_document.artboards[0].name == "Desktop"

    @pytest.mark.unit
    def test_factories_return_fresh_objects(self):
        assert tabs_pattern() is not tabs_pattern()


class TestPatternRegistry:
    """Tests for registration and lookup."""

    @pytest.mark.unit
    def test_create_registry_loads_builtins(self):
        registry = create_pattern_registry()

        assert len(registry) == 6
        assert "pattern.dialog" in registry
        assert registry.get("pattern.dialog").name == "Dialog"

    @pytest.mark.unit
    def test_get_unknown_returns_none(self):
        assert create_pattern_registry().get("pattern.nonexistent") is None

    @pytest.mark.unit
    def test_empty_registry(self):
        registry = PatternRegistry()
        assert len(registry) == 0
        assert registry.get_all() == []
        assert list(registry) == []

    @pytest.mark.unit
    @pytest.mark.parametrize("query", ["tab", "TAB", "Tab"])
    def test_search_is_case_insensitive(self, query):
        ids = [m.id for m in create_pattern_registry().search(query)]
        assert "pattern.tabs" in ids

    @pytest.mark.unit
    def test_search_matches_description(self):
        ids = [m.id for m in create_pattern_registry().search("collapsible")]
        assert ids == ["pattern.accordion"]

    @pytest.mark.unit
    def test_search_without_match(self):
        assert create_pattern_registry().search("carousel") == []

    @pytest.mark.unit
    def test_get_by_category(self):
        registry = create_pattern_registry()

        by_enum = {m.id for m in registry.get_by_category(PatternCategory.NAVIGATION)}
        by_value = {m.id for m in registry.get_by_category("Navigation")}

        assert by_enum == {"pattern.tabs", "pattern.navigation"}
        assert by_value == by_enum

    @pytest.mark.unit
    def test_get_by_layer(self):
        registry = create_pattern_registry()
        ids = {m.id for m in registry.get_by_layer(PatternLayer.COMPOSERS)}
        assert ids == {"pattern.tabs", "pattern.dialog", "pattern.form"}

    @pytest.mark.unit
    def test_get_by_tag(self):
        registry = create_pattern_registry()
        ids = {m.id for m in registry.get_by_tag("accessibility")}
        assert ids == {"pattern.tabs", "pattern.dialog"}

    @pytest.mark.unit
    def test_last_write_wins(self):
        registry = PatternRegistry()
        registry.register(tabs_pattern())
        renamed = tabs_pattern().model_copy(update={"name": "Tabs v2"})

        registry.register(renamed)

        assert len(registry) == 1
        assert registry.get("pattern.tabs").name == "Tabs v2"

    @pytest.mark.unit
    def test_unregister(self):
        registry = create_pattern_registry()

        assert registry.unregister("pattern.card") is True
        assert registry.unregister("pattern.card") is False
        assert "pattern.card" not in registry

    @pytest.mark.unit
    def test_iteration_order_is_registration_order(self):
        ids = [m.id for m in create_pattern_registry()]
        assert ids[0] == "pattern.tabs"
        assert ids[-1] == "pattern.navigation"


class TestStrictRegistration:
    """Tests for registration-time manifest checks."""

    @pytest.mark.unit
    def test_strict_rejects_dangling_reference(self):
        registry = PatternRegistry(strict=True)

        with pytest.raises(ManifestError) as exc_info:
            registry.register(_broken_manifest())

        assert "ghost" in str(exc_info.value)
        assert "pattern.broken" not in registry

    @pytest.mark.unit
    def test_lenient_accepts_dangling_reference(self):
        registry = PatternRegistry(strict=False)
        registry.register(_broken_manifest())
        assert "pattern.broken" in registry

    @pytest.mark.unit
    def test_strict_mode_from_environment(self, monkeypatch):
        monkeypatch.setenv("PATTERN_STRICT_MANIFESTS", "false")
        assert PatternRegistry().strict is False

    @pytest.mark.unit
    def test_strict_by_default(self, monkeypatch):
        monkeypatch.delenv("PATTERN_STRICT_MANIFESTS", raising=False)
        assert PatternRegistry().strict is True
