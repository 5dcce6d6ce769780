"""Unit tests for the manifest data model."""

import pytest
from pydantic import ValidationError

from .lib import (
    ManifestError,
    PatternCategory,
    PatternLayer,
    PatternManifest,
    PatternNotFoundError,
    check_manifest,
    export_manifest_schema,
    manifest_errors,
)


def _raw_manifest(**overrides) -> dict:
    raw = {
        "id": "pattern.stepper",
        "name": "Stepper",
        "description": "Numbered progress steps",
        "category": "Navigation",
        "layer": "compounds",
        "tags": ["steps", "progress"],
        "structure": [
            {
                "id": "list",
                "name": "Step List",
                "type": "frame",
                "semanticKey": "stepper.list",
                "required": True,
                "children": [
                    {
                        "id": "step",
                        "name": "Step",
                        "type": "text",
                        "semanticKey": "stepper.step",
                        "required": True,
                        "multiple": True,
                        "position": {"relativeTo": "list", "offset": {"x": 8, "y": 0}},
                    }
                ],
            },
            {
                "id": "label",
                "name": "Current Label",
                "type": "text",
                "required": False,
            },
        ],
        "relationships": [
            {
                "from": "list",
                "to": "step",
                "type": "owns",
                "required": True,
                "description": "List owns steps",
            }
        ],
        "emission": {
            "html": {"target": "html", "template": "<ol>{{#step}}<li>{{text}}</li>{{/step}}</ol>"},
            "accessibility": [
                {"nodeId": "list", "rule": "role", "value": "list", "required": True}
            ],
        },
        "validation": [
            {"type": "required-child", "message": "Needs a step", "nodeId": "list"}
        ],
    }
    raw.update(overrides)
    return raw


class TestManifestModel:
    """Tests for parsing and dumping manifests."""

    @pytest.mark.unit
    def test_parses_wire_format(self):
        manifest = PatternManifest.model_validate(_raw_manifest())

        assert manifest.category == PatternCategory.NAVIGATION
        assert manifest.layer == PatternLayer.COMPOUNDS
        assert manifest.tags == frozenset({"steps", "progress"})
        assert manifest.relationships[0].from_id == "list"
        assert manifest.relationships[0].to_id == "step"
        assert manifest.version == "1.0.0"

    @pytest.mark.unit
    def test_nested_definitions_are_flattened_in_order(self):
        manifest = PatternManifest.model_validate(_raw_manifest())
        assert [d.id for d in manifest.iter_definitions()] == ["list", "step", "label"]

    @pytest.mark.unit
    def test_get_definition(self):
        manifest = PatternManifest.model_validate(_raw_manifest())
        assert manifest.get_definition("step").position.relative_to == "list"
        assert manifest.get_definition("missing") is None

    @pytest.mark.unit
    def test_semantic_keys(self):
        manifest = PatternManifest.model_validate(_raw_manifest())
        assert manifest.semantic_keys() == {"stepper.list", "stepper.step"}

    @pytest.mark.unit
    def test_to_dict_uses_aliases(self):
        data = PatternManifest.model_validate(_raw_manifest()).to_dict()

        assert data["relationships"][0]["from"] == "list"
        assert data["structure"][0]["semanticKey"] == "stepper.list"
        assert data["tags"] == ["progress", "steps"]
        assert data["emission"]["accessibility"][0]["nodeId"] == "list"

    @pytest.mark.unit
    def test_manifest_is_frozen(self):
        manifest = PatternManifest.model_validate(_raw_manifest())
        with pytest.raises(ValidationError):
            manifest.name = "Renamed"

    @pytest.mark.unit
    def test_unknown_category_rejected(self):
        with pytest.raises(ValidationError):
            PatternManifest.model_validate(_raw_manifest(category="Widgets"))

    @pytest.mark.unit
    def test_unknown_definition_type_rejected(self):
        raw = _raw_manifest()
        raw["structure"][1]["type"] = "image"
        with pytest.raises(ValidationError):
            PatternManifest.model_validate(raw)

    @pytest.mark.unit
    def test_malformed_definition_key_rejected(self):
        raw = _raw_manifest()
        raw["structure"][1]["semanticKey"] = "Current Label"
        with pytest.raises(ValidationError):
            PatternManifest.model_validate(raw)

    @pytest.mark.unit
    def test_emission_template_kept_verbatim(self):
        manifest = PatternManifest.model_validate(_raw_manifest())
        assert manifest.emission.html.template.startswith("<ol>{{#step}}")

    @pytest.mark.unit
    def test_schema_export(self):
        schema = export_manifest_schema()
        assert "structure" in schema["properties"]


class TestManifestChecks:
    """Tests for registration-time manifest checks."""

    @pytest.mark.unit
    def test_well_formed_manifest_has_no_issues(self):
        manifest = PatternManifest.model_validate(_raw_manifest())
        assert manifest_errors(manifest) == []
        check_manifest(manifest)

    @pytest.mark.unit
    def test_dangling_relationship_endpoint(self):
        raw = _raw_manifest()
        raw["relationships"][0]["to"] = "steps"
        manifest = PatternManifest.model_validate(raw)

        issues = manifest_errors(manifest)
        assert len(issues) == 1
        assert issues[0].path == "relationships[0].to"
        assert issues[0].error_type == "unknown_reference"

    @pytest.mark.unit
    def test_dangling_relative_to(self):
        raw = _raw_manifest()
        raw["structure"][1]["position"] = {"relativeTo": "header"}
        manifest = PatternManifest.model_validate(raw)

        issues = manifest_errors(manifest)
        assert [i.error_type for i in issues] == ["unknown_reference"]
        assert "header" in issues[0].message

    @pytest.mark.unit
    def test_self_relative_to(self):
        raw = _raw_manifest()
        raw["structure"][1]["position"] = {"relativeTo": "label"}
        manifest = PatternManifest.model_validate(raw)

        assert [i.error_type for i in manifest_errors(manifest)] == ["self_reference"]

    @pytest.mark.unit
    def test_duplicate_definition_ids(self):
        raw = _raw_manifest()
        raw["structure"][1]["id"] = "step"
        manifest = PatternManifest.model_validate(raw)

        assert "duplicate_definition" in {i.error_type for i in manifest_errors(manifest)}

    @pytest.mark.unit
    def test_dangling_accessibility_and_validation_rules(self):
        raw = _raw_manifest()
        raw["emission"]["accessibility"][0]["nodeId"] = "ghost"
        raw["validation"][0]["nodeId"] = "ghost"
        manifest = PatternManifest.model_validate(raw)

        paths = {i.path for i in manifest_errors(manifest)}
        assert paths == {"emission.accessibility[0].nodeId", "validation[0].nodeId"}

    @pytest.mark.unit
    def test_check_manifest_raises_with_issues(self):
        raw = _raw_manifest()
        raw["relationships"][0]["from"] = "nowhere"
        manifest = PatternManifest.model_validate(raw)

        with pytest.raises(ManifestError) as exc_info:
            check_manifest(manifest)
        assert exc_info.value.manifest_id == "pattern.stepper"
        assert "nowhere" in str(exc_info.value)
        assert len(exc_info.value.issues) == 1


class TestPatternNotFoundError:
    """Tests for the unknown-pattern error."""

    @pytest.mark.unit
    def test_message_names_pattern(self):
        error = PatternNotFoundError("pattern.nonexistent")
        assert str(error) == 'Pattern "pattern.nonexistent" not found'
        assert error.pattern_id == "pattern.nonexistent"

    @pytest.mark.unit
    def test_is_a_key_error(self):
        with pytest.raises(KeyError):
            raise PatternNotFoundError("x")
