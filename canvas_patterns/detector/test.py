"""Unit tests for pattern detection."""

import copy

import pytest

from canvas_patterns.canvas import CanvasError, parse_document
from canvas_patterns.manifest import PatternManifest
from canvas_patterns.registry import PatternRegistry, tabs_example_document

from .lib import PatternDetector, PatternInstance, detect_patterns


def _caption_registry() -> PatternRegistry:
    """Registry with a manifest that declares no semantic keys."""
    registry = PatternRegistry()
    registry.register(
        PatternManifest.model_validate(
            {
                "id": "pattern.caption",
                "name": "Caption",
                "description": "Title with subtitle",
                "category": "Textual",
                "layer": "primitives",
                "structure": [
                    {"id": "title", "name": "Title", "type": "text", "required": True},
                    {"id": "subtitle", "name": "Subtitle", "type": "text", "required": True},
                ],
            }
        )
    )
    return registry


def _single_text_document() -> dict:
    return {
        "id": "doc",
        "name": "Caption",
        "artboards": [
            {
                "id": "board",
                "name": "Main",
                "children": [
                    {
                        "id": "box",
                        "type": "frame",
                        "name": "Box",
                        "children": [{"id": "only", "type": "text", "name": "Only"}],
                    }
                ],
            }
        ],
    }


class TestTabsDetection:
    """Detection of the Tabs pattern."""

    @pytest.mark.unit
    def test_complete_instance(self, tabs_registry, complete_tabs_document):
        instances = PatternDetector(tabs_registry).detect_patterns(complete_tabs_document)

        assert len(instances) == 1
        instance = instances[0]
        assert instance.pattern_id == "pattern.tabs"
        assert instance.root_node_id == "container"
        assert instance.node_mappings == {
            "tablist": "tablist",
            "tab": "tab-0",
            "tabpanel": "panel-0",
        }
        assert instance.is_complete
        assert instance.validation_errors == []

    @pytest.mark.unit
    def test_missing_panel_gives_partial_instance(
        self, tabs_registry, incomplete_tabs_document
    ):
        instances = PatternDetector(tabs_registry).detect_patterns(incomplete_tabs_document)

        assert len(instances) == 1
        instance = instances[0]
        assert not instance.is_complete
        assert "tabpanel" not in instance.node_mappings
        assert instance.validation_errors == [
            'Required node "Tab Panel" with semantic key "tabs.tabpanel" not found'
        ]

    @pytest.mark.unit
    def test_indexed_keys_realize_definition(self, tabs_registry, complete_tabs_document):
        """tabs.tab[0] on the canvas maps the tabs.tab definition."""
        instance = PatternDetector(tabs_registry).detect_patterns(complete_tabs_document)[0]
        assert instance.node_mappings["tab"] == "tab-0"

    @pytest.mark.unit
    def test_wrapper_frame_does_not_become_root(
        self, tabs_registry, complete_tabs_document
    ):
        board = complete_tabs_document["artboards"][0]
        board["children"] = [
            {"id": "page", "type": "frame", "name": "Page", "children": board["children"]}
        ]

        instances = PatternDetector(tabs_registry).detect_patterns(complete_tabs_document)

        assert [i.root_node_id for i in instances] == ["container"]

    @pytest.mark.unit
    def test_two_separate_tab_groups(self, tabs_registry, complete_tabs_document):
        board = complete_tabs_document["artboards"][0]
        second = copy.deepcopy(board["children"][0])
        stack = [second]
        while stack:
            node = stack.pop()
            node["id"] += "-b"
            stack.extend(node.get("children", []))
        board["children"].append(second)

        instances = PatternDetector(tabs_registry).detect_patterns(complete_tabs_document)

        assert [i.root_node_id for i in instances] == ["container", "container-b"]
        assert all(i.is_complete for i in instances)
        assert instances[1].node_mappings["tab"] == "tab-0-b"

    @pytest.mark.unit
    def test_builtin_example_document(self, builtin_registry):
        instances = PatternDetector(builtin_registry).detect_patterns(
            tabs_example_document()
        )

        assert len(instances) == 1
        assert instances[0].pattern_id == "pattern.tabs"
        assert instances[0].root_node_id == "01JF2Q06GTS16EJ3A3F0KK9K3T"
        assert instances[0].is_complete

    @pytest.mark.unit
    def test_nested_tabs_reported_separately(self, tabs_registry, nested_tabs_document):
        instances = PatternDetector(tabs_registry).detect_patterns(nested_tabs_document)

        assert [(i.root_node_id, i.is_complete) for i in instances] == [
            ("container", True),
            ("inner-tablist", False),
        ]
        assert instances[1].node_mappings == {
            "tablist": "inner-tablist",
            "tab": "inner-tab-0",
        }

    @pytest.mark.unit
    def test_extra_tabs_belong_to_enclosing_instance(
        self, tabs_registry, complete_tabs_document
    ):
        tablist = complete_tabs_document["artboards"][0]["children"][0]["children"][0]
        second_tab = copy.deepcopy(tablist["children"][0])
        second_tab.update(id="tab-1", semanticKey="tabs.tab[1]")
        tablist["children"].append(second_tab)

        instances = PatternDetector(tabs_registry).detect_patterns(complete_tabs_document)

        assert [i.root_node_id for i in instances] == ["container"]


class TestDetectorContract:
    """General detector behaviour."""

    @pytest.mark.unit
    def test_unrelated_document_yields_nothing(self, builtin_registry):
        document = _single_text_document()
        assert PatternDetector(builtin_registry).detect_patterns(document) == []

    @pytest.mark.unit
    def test_empty_registry_yields_nothing(self, complete_tabs_document):
        assert PatternDetector(PatternRegistry()).detect_patterns(complete_tabs_document) == []

    @pytest.mark.unit
    def test_detect_single_pattern(self, builtin_registry, complete_tabs_document):
        detector = PatternDetector(builtin_registry)

        assert len(detector.detect_pattern(complete_tabs_document, "pattern.tabs")) == 1
        assert detector.detect_pattern(complete_tabs_document, "pattern.dialog") == []
        assert detector.detect_pattern(complete_tabs_document, "pattern.nope") == []

    @pytest.mark.unit
    def test_invalid_document_raises_canvas_error(self, tabs_registry):
        with pytest.raises(CanvasError):
            PatternDetector(tabs_registry).detect_patterns({"id": "doc"})

    @pytest.mark.unit
    def test_document_is_not_mutated(self, tabs_registry, incomplete_tabs_document):
        document = parse_document(incomplete_tabs_document)
        before = document.model_dump()

        PatternDetector(tabs_registry).detect_patterns(document)

        assert document.model_dump() == before

    @pytest.mark.unit
    def test_keyless_manifest_anchors_on_type(self):
        instances = PatternDetector(_caption_registry()).detect_patterns(
            _single_text_document()
        )

        assert len(instances) == 1
        assert instances[0].root_node_id == "box"

    @pytest.mark.unit
    def test_module_level_uses_builtins(self, complete_tabs_document):
        ids = [i.pattern_id for i in detect_patterns(complete_tabs_document)]
        assert ids == ["pattern.tabs"]

    @pytest.mark.unit
    def test_instance_to_dict(self):
        instance = PatternInstance(
            pattern_id="pattern.tabs",
            root_node_id="root",
            node_mappings={"tablist": "n1"},
            validation_errors=["missing"],
        )

        assert instance.to_dict() == {
            "patternId": "pattern.tabs",
            "rootNodeId": "root",
            "nodeMappings": {"tablist": "n1"},
            "isComplete": False,
            "validationErrors": ["missing"],
        }


class TestMappingModes:
    """Permissive and exclusive node mapping."""

    @pytest.mark.unit
    def test_permissive_reuses_nodes(self):
        detector = PatternDetector(_caption_registry(), exclusive=False)
        instance = detector.detect_patterns(_single_text_document())[0]

        assert instance.node_mappings == {"title": "only", "subtitle": "only"}
        assert instance.is_complete

    @pytest.mark.unit
    def test_exclusive_claims_each_node_once(self):
        detector = PatternDetector(_caption_registry(), exclusive=True)
        instance = detector.detect_patterns(_single_text_document())[0]

        assert instance.node_mappings == {"title": "only"}
        assert instance.validation_errors == [
            'Required node "Subtitle" of type "text" not found'
        ]
        mapped = list(instance.node_mappings.values())
        assert len(mapped) == len(set(mapped))

    @pytest.mark.unit
    def test_exclusive_mode_from_environment(self, monkeypatch):
        monkeypatch.setenv("PATTERN_EXCLUSIVE_MAPPING", "true")
        assert PatternDetector(PatternRegistry()).exclusive is True

    @pytest.mark.unit
    def test_permissive_by_default(self):
        assert PatternDetector(PatternRegistry()).exclusive is False
