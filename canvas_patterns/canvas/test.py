"""Unit tests for the canvas document model."""

import pytest
from pydantic import TypeAdapter, ValidationError

from .lib import (
    CanvasDocument,
    CanvasError,
    ComponentNode,
    FrameNode,
    GroupNode,
    TextNode,
    VectorNode,
    base_semantic_key,
    children_of,
    count_nodes,
    export_document_schema,
    find_node,
    is_valid_semantic_key,
    iter_nodes,
    iter_subtree,
    parse_document,
    semantic_key_matches,
)


def _raw_document() -> dict:
    return {
        "schemaVersion": "0.1.0",
        "id": "doc-1",
        "name": "Landing Page",
        "artboards": [
            {
                "id": "board-1",
                "name": "Desktop",
                "frame": {"x": 0, "y": 0, "width": 800, "height": 600},
                "children": [
                    {
                        "id": "hero",
                        "type": "frame",
                        "name": "Hero",
                        "frame": {"x": 0, "y": 0, "width": 800, "height": 300},
                        "semanticKey": "hero.container",
                        "children": [
                            {
                                "id": "title",
                                "type": "text",
                                "name": "Title",
                                "frame": {"x": 16, "y": 16, "width": 400, "height": 48},
                                "text": "Welcome",
                                "semanticKey": "hero.title",
                            },
                            {
                                "id": "cta",
                                "type": "component",
                                "name": "CTA",
                                "frame": {"x": 16, "y": 80, "width": 120, "height": 40},
                                "componentKey": "Button",
                                "props": {"variant": "primary"},
                            },
                        ],
                    },
                    {
                        "id": "logo",
                        "type": "vector",
                        "name": "Logo",
                        "frame": {"x": 0, "y": 320, "width": 32, "height": 32},
                        "path": "M0 0L10 10",
                    },
                ],
            }
        ],
    }


class TestDocumentModel:
    """Tests for CanvasDocument parsing and the node union."""

    @pytest.mark.unit
    def test_parses_camel_case_fields(self):
        """Wire-format aliases populate snake_case attributes."""
        document = parse_document(_raw_document())

        hero = document.artboards[0].children[0]
        assert isinstance(hero, FrameNode)
        assert hero.semantic_key == "hero.container"
        assert document.schema_version == "0.1.0"

    @pytest.mark.unit
    def test_union_dispatches_on_type(self):
        """Each node is parsed into its concrete variant."""
        document = parse_document(_raw_document())
        hero, logo = document.artboards[0].children

        title, cta = hero.children
        assert isinstance(title, TextNode)
        assert isinstance(cta, ComponentNode)
        assert cta.component_key == "Button"
        assert cta.props == {"variant": "primary"}
        assert isinstance(logo, VectorNode)
        assert logo.winding_rule == "nonzero"

    @pytest.mark.unit
    def test_round_trips_to_wire_format(self):
        """to_dict emits camelCase keys."""
        data = parse_document(_raw_document()).to_dict()

        hero = data["artboards"][0]["children"][0]
        assert data["schemaVersion"] == "0.1.0"
        assert hero["semanticKey"] == "hero.container"
        assert hero["children"][1]["componentKey"] == "Button"

    @pytest.mark.unit
    def test_unknown_node_type_rejected(self):
        raw = _raw_document()
        raw["artboards"][0]["children"][1]["type"] = "polygon"

        with pytest.raises(CanvasError) as exc_info:
            parse_document(raw)
        assert exc_info.value.issues

    @pytest.mark.unit
    def test_document_requires_artboard(self):
        raw = _raw_document()
        raw["artboards"] = []

        with pytest.raises(CanvasError):
            parse_document(raw)

    @pytest.mark.unit
    def test_malformed_semantic_key_rejected(self):
        """Keys must follow dot/index notation in lower case."""
        with pytest.raises(ValidationError):
            TextNode(id="t", name="T", semanticKey="Hero Title")

    @pytest.mark.unit
    def test_negative_size_rejected(self):
        with pytest.raises(ValidationError):
            FrameNode(id="f", name="F", frame={"x": 0, "y": 0, "width": -1, "height": 0})

    @pytest.mark.unit
    def test_parse_document_passes_through_models(self):
        document = parse_document(_raw_document())
        assert parse_document(document) is document

    @pytest.mark.unit
    def test_issue_paths_point_at_field(self):
        raw = _raw_document()
        del raw["name"]

        with pytest.raises(CanvasError) as exc_info:
            parse_document(raw)
        assert any(issue.path == "name" for issue in exc_info.value.issues)

    @pytest.mark.unit
    def test_schema_export(self):
        schema = export_document_schema()
        assert "artboards" in schema["properties"]
        assert "schemaVersion" in schema["properties"]


class TestTraversal:
    """Tests for iterative traversal helpers."""

    @pytest.mark.unit
    def test_iter_nodes_is_pre_order(self):
        document = parse_document(_raw_document())
        assert [n.id for n in iter_nodes(document)] == ["hero", "title", "cta", "logo"]

    @pytest.mark.unit
    def test_iter_subtree_includes_root(self):
        document = parse_document(_raw_document())
        hero = document.artboards[0].children[0]
        assert [n.id for n in iter_subtree(hero)] == ["hero", "title", "cta"]

    @pytest.mark.unit
    def test_leaf_nodes_have_no_children(self):
        assert children_of(TextNode(id="t", name="T")) == []

    @pytest.mark.unit
    def test_group_children(self):
        group = GroupNode(id="g", name="G", children=[TextNode(id="t", name="T")])
        assert [c.id for c in children_of(group)] == ["t"]

    @pytest.mark.unit
    def test_find_node(self):
        document = parse_document(_raw_document())
        assert find_node(document, "cta").name == "CTA"
        assert find_node(document, "missing") is None

    @pytest.mark.unit
    def test_count_nodes(self):
        assert count_nodes(parse_document(_raw_document())) == 4

    @pytest.mark.unit
    def test_deep_tree_does_not_hit_recursion_limit(self):
        """Traversal uses an explicit stack."""
        node = TextNode(id="leaf", name="Leaf")
        for depth in range(5000):
            node = FrameNode(id=f"f{depth}", name="Level", children=[node])

        ids = [n.id for n in iter_subtree(node)]
        assert len(ids) == 5001
        assert ids[-1] == "leaf"


class TestSemanticKeys:
    """Tests for semantic key matching."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "node_key,definition_key,expected",
        [
            ("tabs.tab", "tabs.tab", True),
            ("tabs.tab[0]", "tabs.tab", True),
            ("tabs.tab[0][1]", "tabs.tab", True),
            ("tabs.tabpanel[0]", "tabs.tab", False),
            ("tabs.tablist", "tabs.tab", False),
            ("tabs.tab", "tabs.tab[0]", False),
            (None, "tabs.tab", False),
            ("tabs.tab", None, False),
        ],
    )
    def test_matches(self, node_key, definition_key, expected):
        assert semantic_key_matches(node_key, definition_key) is expected

    @pytest.mark.unit
    def test_base_key(self):
        assert base_semantic_key("nav.items[3]") == "nav.items"
        assert base_semantic_key("nav.items") == "nav.items"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "key,expected",
        [
            ("hero.title", True),
            ("nav.items[0]", True),
            ("a", True),
            ("Hero.title", False),
            ("hero..title", False),
            ("hero.title[x]", False),
        ],
    )
    def test_grammar(self, key, expected):
        assert is_valid_semantic_key(key) is expected

    @pytest.mark.unit
    def test_semantic_key_type_exported_from_package(self):
        """Other packages annotate fields with the package-level SemanticKey."""
        from canvas_patterns.canvas import SemanticKey

        adapter = TypeAdapter(SemanticKey)

        assert adapter.validate_python("nav.items[0]") == "nav.items[0]"
        with pytest.raises(ValidationError):
            adapter.validate_python("Nav..items")

    @pytest.mark.unit
    def test_manifest_package_imports(self):
        import canvas_patterns.manifest as manifest

        assert hasattr(manifest, "PatternManifest")


class TestModelDefaults:
    """Tests for node construction defaults."""

    @pytest.mark.unit
    def test_type_literal_defaults(self):
        assert FrameNode(id="f", name="F").type == "frame"
        assert TextNode(id="t", name="T").type == "text"

    @pytest.mark.unit
    def test_document_defaults_schema_version(self):
        document = CanvasDocument(
            id="d", name="Doc", artboards=[{"id": "a", "name": "Main"}]
        )
        assert document.schema_version == "0.1.0"
        assert document.artboards[0].children == []
