"""End-to-end tests across generation, detection and validation."""

import json

import pytest

from canvas_patterns.canvas import parse_document
from canvas_patterns.detector import detect_patterns
from canvas_patterns.generator import PatternGenerator
from canvas_patterns.registry import create_pattern_registry, tabs_example_document
from canvas_patterns.validation import validate_patterns


@pytest.mark.integration
class TestGenerateThenValidate:
    """Generated documents fed back through the engine."""

    def test_nested_card_is_valid(self):
        registry = create_pattern_registry()
        document = PatternGenerator(registry, nested=True).generate_from_pattern(
            "pattern.card", {"name": "Card"}
        )

        report = validate_patterns(document, registry)

        assert report.valid
        assert len(report.instances) == 1
        instance = report.instances[0]
        assert instance.pattern_id == "pattern.card"
        assert instance.root_node_id == document.artboards[0].children[0].id
        assert set(instance.node_mappings) == {"card", "header", "body", "footer"}

    def test_flat_card_parts_lose_their_container(self):
        registry = create_pattern_registry()
        document = PatternGenerator(registry).generate_from_pattern(
            "pattern.card", {"name": "Card"}
        )

        report = validate_patterns(document, registry)

        assert not report.valid
        # container, header, body and footer each anchor an instance
        assert len(report.instances) == 4
        assert report.errors == [
            'Missing required node "Card Container" in Card pattern '
            '(semantic key "card.container")'
        ] * 3

    def test_generated_json_round_trip(self):
        registry = create_pattern_registry()
        document = PatternGenerator(registry, nested=True).generate_from_pattern(
            "pattern.card", {"name": "Card", "position": {"x": 40, "y": 40}}
        )

        data = json.loads(json.dumps(document.to_dict()))

        assert parse_document(data).to_dict() == document.to_dict()
        assert validate_patterns(data, registry).valid


@pytest.mark.integration
class TestTabsExample:
    """The example document shipped with the Tabs manifest."""

    def test_example_validates_after_json_round_trip(self):
        data = json.loads(json.dumps(tabs_example_document().to_dict()))

        report = validate_patterns(data)

        assert report.valid
        assert [i.pattern_id for i in report.instances] == ["pattern.tabs"]
        assert report.instances[0].root_node_id == "01JF2Q06GTS16EJ3A3F0KK9K3T"

    def test_manifest_example_matches_factory(self):
        tabs = create_pattern_registry().get("pattern.tabs")
        example = tabs.examples[0].canvas_document

        assert example.to_dict() == tabs_example_document().to_dict()
        assert detect_patterns(example)[0].is_complete
