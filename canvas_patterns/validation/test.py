"""Unit tests for pattern validation."""

import pytest

from canvas_patterns.detector import PatternInstance
from canvas_patterns.manifest import PatternManifest
from canvas_patterns.registry import PatternRegistry, tabs_example_document

from .lib import PatternValidator, ValidationReport, validate_patterns


class TestTabsScenarios:
    """Design-review scenarios for the Tabs pattern."""

    @pytest.mark.unit
    def test_missing_panel_is_invalid(self, tabs_registry, incomplete_tabs_document):
        report = PatternValidator(tabs_registry).validate_patterns(incomplete_tabs_document)

        assert report.valid is False
        assert any("tabpanel" in error for error in report.errors)

    @pytest.mark.unit
    def test_missing_panel_messages(self, tabs_registry, incomplete_tabs_document):
        report = PatternValidator(tabs_registry).validate_patterns(incomplete_tabs_document)

        assert report.errors == [
            'Missing required node "Tab Panel" in Tabs pattern '
            '(semantic key "tabs.tabpanel")',
            "Missing relationship tab -> tabpanel (controls) in Tabs pattern",
        ]
        assert report.warnings == [
            'Required node "Tab Panel" with semantic key "tabs.tabpanel" not found'
        ]
        assert report.suggestions == [
            "Complete Tabs pattern by adding missing required nodes: Tab Panel"
        ]

    @pytest.mark.unit
    def test_adding_panel_makes_it_valid(self, tabs_registry, complete_tabs_document):
        report = PatternValidator(tabs_registry).validate_patterns(complete_tabs_document)

        assert report.valid is True
        assert report.errors == []
        assert report.warnings == []
        assert report.suggestions == []

    @pytest.mark.unit
    def test_builtin_example_is_valid(self, builtin_registry):
        report = PatternValidator(builtin_registry).validate_patterns(
            tabs_example_document()
        )
        assert report.valid

    @pytest.mark.unit
    def test_incomplete_nested_tabs_is_invalid(self, tabs_registry, nested_tabs_document):
        report = PatternValidator(tabs_registry).validate_patterns(nested_tabs_document)

        assert report.valid is False
        assert [i.root_node_id for i in report.instances] == ["container", "inner-tablist"]
        assert report.errors == [
            'Missing required node "Tab Panel" in Tabs pattern '
            '(semantic key "tabs.tabpanel")',
            "Missing relationship tab -> tabpanel (controls) in Tabs pattern",
        ]

    @pytest.mark.unit
    def test_idempotent(self, tabs_registry, incomplete_tabs_document):
        validator = PatternValidator(tabs_registry)

        first = validator.validate_patterns(incomplete_tabs_document)
        second = validator.validate_patterns(incomplete_tabs_document)

        assert set(first.errors) == set(second.errors)
        assert set(first.warnings) == set(second.warnings)
        assert set(first.suggestions) == set(second.suggestions)


class TestValidatorContract:
    """General validator behaviour."""

    @pytest.mark.unit
    def test_document_without_patterns_is_valid(self, tabs_registry):
        document = {
            "id": "doc",
            "name": "Empty",
            "artboards": [{"id": "board", "name": "Main"}],
        }

        report = PatternValidator(tabs_registry).validate_patterns(document)

        assert report.valid
        assert report.instances == []

    @pytest.mark.unit
    def test_aggregates_across_instances(self, tabs_registry):
        instances = [
            PatternInstance("pattern.tabs", "a", {"tablist": "a"}, ["first"]),
            PatternInstance("pattern.tabs", "b", {"tablist": "b"}, ["second"]),
        ]

        report = PatternValidator(tabs_registry).validate_instances(instances)

        # tab and tabpanel missing on both instances, plus both relationships
        assert len(report.errors) == 8
        assert report.warnings == ["first", "second"]
        assert len(report.suggestions) == 2

    @pytest.mark.unit
    def test_unregistered_instances_are_skipped(self):
        instances = [PatternInstance("pattern.gone", "root", {}, ["missing"])]

        report = PatternValidator(PatternRegistry()).validate_instances(instances)

        assert report.valid
        assert report.warnings == []
        assert report.instances == instances

    @pytest.mark.unit
    def test_definition_id_named_when_no_key(self):
        registry = PatternRegistry()
        registry.register(
            PatternManifest.model_validate(
                {
                    "id": "pattern.badge",
                    "name": "Badge",
                    "category": "Display",
                    "layer": "primitives",
                    "structure": [
                        {"id": "label", "name": "Label", "type": "text", "required": True}
                    ],
                }
            )
        )
        instances = [PatternInstance("pattern.badge", "root", {}, ["x"])]

        report = PatternValidator(registry).validate_instances(instances)

        assert report.errors == [
            'Missing required node "Label" in Badge pattern (definition "label")'
        ]

    @pytest.mark.unit
    def test_optional_relationship_ignored(self, builtin_registry):
        # Dialog's close -> dialog relationship is optional
        instances = [
            PatternInstance(
                "pattern.dialog",
                "root",
                {"trigger": "t", "dialog": "d", "title": "h", "content": "c"},
            )
        ]

        report = PatternValidator(builtin_registry).validate_instances(instances)

        assert report.valid

    @pytest.mark.unit
    def test_report_to_dict(self, tabs_registry, incomplete_tabs_document):
        data = PatternValidator(tabs_registry).validate_patterns(
            incomplete_tabs_document
        ).to_dict()

        assert data["valid"] is False
        assert data["instances"][0]["patternId"] == "pattern.tabs"
        assert data["instances"][0]["isComplete"] is False

    @pytest.mark.unit
    def test_valid_tracks_errors(self):
        assert ValidationReport().valid is True
        assert ValidationReport(errors=["x"]).valid is False

    @pytest.mark.unit
    def test_module_level_uses_builtins(self, complete_tabs_document):
        assert validate_patterns(complete_tabs_document).valid
