"""Unit tests for the pattern generator."""

import pytest
from pydantic import ValidationError

from canvas_patterns.canvas import (
    ComponentNode,
    FrameNode,
    TextNode,
    iter_nodes,
    parse_document,
)
from canvas_patterns.manifest import PatternManifest, PatternNotFoundError
from canvas_patterns.registry import PatternRegistry

from .lib import GenerationSpec, PatternGenerator, generate_pattern


def _shape(document) -> list[tuple[str, str | None]]:
    return [(node.type, node.semantic_key) for node in iter_nodes(document)]


def _stepper_registry() -> PatternRegistry:
    registry = PatternRegistry()
    registry.register(
        PatternManifest.model_validate(
            {
                "id": "pattern.stepper",
                "name": "Stepper",
                "category": "Navigation",
                "layer": "compounds",
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
                                "position": {"offset": {"x": 8, "y": 4}},
                            }
                        ],
                    },
                    {
                        "id": "badge",
                        "name": "Badge",
                        "type": "component",
                        "required": False,
                    },
                ],
            }
        )
    )
    return registry


class TestFlatGeneration:
    """Default flat output."""

    @pytest.mark.unit
    def test_document_shell(self, builtin_registry):
        document = PatternGenerator(builtin_registry).generate_from_pattern(
            "pattern.tabs", {"name": "My Tabs"}
        )

        assert document.schema_version == "0.1.0"
        assert document.name == "My Tabs"
        assert len(document.artboards) == 1
        artboard = document.artboards[0]
        assert artboard.name == "Main"
        assert (artboard.frame.width, artboard.frame.height) == (1440, 1024)

    @pytest.mark.unit
    def test_one_flat_node_per_definition(self, builtin_registry):
        document = PatternGenerator(builtin_registry).generate_from_pattern(
            "pattern.dialog", {"name": "Confirm"}
        )

        children = document.artboards[0].children
        assert [c.semantic_key for c in children] == [
            "dialog.trigger",
            "dialog.container",
            "dialog.title",
            "dialog.content",
            "dialog.close",
        ]
        assert all(c.children == [] for c in children if isinstance(c, FrameNode))

    @pytest.mark.unit
    def test_default_geometry(self, builtin_registry):
        document = PatternGenerator(builtin_registry).generate_from_pattern(
            "pattern.dialog", GenerationSpec(name="Confirm", position={"x": 100, "y": 50})
        )
        trigger, dialog, title = document.artboards[0].children[:3]

        assert (trigger.frame.width, trigger.frame.height) == (300, 100)
        assert (trigger.frame.x, trigger.frame.y) == (100, 50)
        assert (title.frame.width, title.frame.height) == (200, 40)
        # position plus the definition's offset
        assert (title.frame.x, title.frame.y) == (124, 74)

    @pytest.mark.unit
    def test_text_nodes_carry_definition_name(self, builtin_registry):
        document = PatternGenerator(builtin_registry).generate_from_pattern(
            "pattern.dialog", {"name": "Confirm"}
        )
        title = document.artboards[0].children[2]

        assert isinstance(title, TextNode)
        assert title.text == "Dialog Title"

    @pytest.mark.unit
    def test_definition_properties_kept_in_data(self, builtin_registry):
        document = PatternGenerator(builtin_registry).generate_from_pattern(
            "pattern.tabs", {"name": "Tabs"}
        )
        tablist = document.artboards[0].children[0]
        assert tablist.data == {"role": "tablist"}

    @pytest.mark.unit
    def test_component_nodes(self, builtin_registry):
        document = PatternGenerator(builtin_registry).generate_from_pattern(
            "pattern.form", {"name": "Signup", "properties": {"size": "lg"}}
        )
        field_input = next(
            n for n in document.artboards[0].children if isinstance(n, ComponentNode)
        )

        assert field_input.component_key == "TextField"
        assert field_input.props == {"size": "lg"}
        assert (field_input.frame.width, field_input.frame.height) == (200, 40)

    @pytest.mark.unit
    def test_component_key_defaults_to_definition_id(self):
        document = PatternGenerator(_stepper_registry()).generate_from_pattern(
            "pattern.stepper", {"name": "Steps"}
        )
        badge = document.artboards[0].children[-1]
        assert badge.component_key == "badge"

    @pytest.mark.unit
    def test_nested_definitions_emitted(self):
        document = PatternGenerator(_stepper_registry()).generate_from_pattern(
            "pattern.stepper", {"name": "Steps"}
        )
        assert [n.name for n in document.artboards[0].children] == [
            "Step List",
            "Step",
            "Badge",
        ]

    @pytest.mark.unit
    def test_ids_are_unique_ulids(self, builtin_registry):
        document = PatternGenerator(builtin_registry).generate_from_pattern(
            "pattern.form", {"name": "Signup"}
        )
        ids = [document.id, document.artboards[0].id, *(n.id for n in iter_nodes(document))]

        assert len(set(ids)) == len(ids)
        assert all(len(i) == 26 for i in ids)

    @pytest.mark.unit
    def test_deterministic_apart_from_ids(self, builtin_registry):
        generator = PatternGenerator(builtin_registry)
        first = generator.generate_from_pattern("pattern.accordion", {"name": "FAQ"})
        second = generator.generate_from_pattern("pattern.accordion", {"name": "FAQ"})

        assert _shape(first) == _shape(second)
        assert first.id != second.id

    @pytest.mark.unit
    def test_output_is_a_valid_document(self, builtin_registry):
        document = PatternGenerator(builtin_registry).generate_from_pattern(
            "pattern.navigation", {"name": "Nav"}
        )
        assert parse_document(document.to_dict()).to_dict() == document.to_dict()


class TestNestedGeneration:
    """Nesting by positioning target."""

    @pytest.mark.unit
    def test_dialog_children_nest_in_container(self, builtin_registry):
        document = PatternGenerator(builtin_registry, nested=True).generate_from_pattern(
            "pattern.dialog", {"name": "Confirm", "position": {"x": 100, "y": 50}}
        )
        top = document.artboards[0].children

        assert [n.semantic_key for n in top] == ["dialog.trigger", "dialog.container"]
        dialog = top[1]
        assert [n.semantic_key for n in dialog.children] == [
            "dialog.title",
            "dialog.content",
            "dialog.close",
        ]
        # relative to the dialog container
        assert (dialog.children[0].frame.x, dialog.children[0].frame.y) == (24, 24)
        assert (dialog.frame.x, dialog.frame.y) == (100, 50)

    @pytest.mark.unit
    def test_nested_keeps_node_count(self, builtin_registry):
        flat = PatternGenerator(builtin_registry).generate_from_pattern(
            "pattern.card", {"name": "Card"}
        )
        nested = PatternGenerator(builtin_registry, nested=True).generate_from_pattern(
            "pattern.card", {"name": "Card"}
        )
        assert sorted(_shape(flat), key=str) == sorted(_shape(nested), key=str)

    @pytest.mark.unit
    def test_structural_children_nest_under_parent(self):
        document = PatternGenerator(_stepper_registry(), nested=True).generate_from_pattern(
            "pattern.stepper", {"name": "Steps"}
        )
        step_list, badge = document.artboards[0].children

        assert [n.name for n in step_list.children] == ["Step"]
        assert (step_list.children[0].frame.x, step_list.children[0].frame.y) == (8, 4)
        assert badge.name == "Badge"

    @pytest.mark.unit
    def test_relative_to_cycle_stays_finite(self):
        registry = PatternRegistry(strict=False)
        registry.register(
            PatternManifest.model_validate(
                {
                    "id": "pattern.loop",
                    "name": "Loop",
                    "category": "Display",
                    "layer": "primitives",
                    "structure": [
                        {
                            "id": "a",
                            "name": "A",
                            "type": "frame",
                            "required": True,
                            "position": {"relativeTo": "b"},
                        },
                        {
                            "id": "b",
                            "name": "B",
                            "type": "frame",
                            "required": True,
                            "position": {"relativeTo": "a"},
                        },
                    ],
                }
            )
        )

        document = PatternGenerator(registry, nested=True).generate_from_pattern(
            "pattern.loop", {"name": "Loop"}
        )

        assert [n.name for n in document.artboards[0].children] == ["B"]
        assert [n.name for n in iter_nodes(document)] == ["B", "A"]

    @pytest.mark.unit
    def test_nested_from_environment(self, builtin_registry, monkeypatch):
        monkeypatch.setenv("PATTERN_GENERATOR_NESTED", "1")
        assert PatternGenerator(builtin_registry).nested is True


class TestGeneratorErrors:
    """Failure modes."""

    @pytest.mark.unit
    def test_unknown_pattern(self, builtin_registry):
        with pytest.raises(PatternNotFoundError) as exc_info:
            PatternGenerator(builtin_registry).generate_from_pattern(
                "nonexistent", {"name": "X"}
            )
        assert "nonexistent" in str(exc_info.value)

    @pytest.mark.unit
    def test_spec_requires_name(self, builtin_registry):
        with pytest.raises(ValidationError):
            PatternGenerator(builtin_registry).generate_from_pattern(
                "pattern.tabs", {"position": {"x": 0, "y": 0}}
            )

    @pytest.mark.unit
    def test_artboard_size_from_environment(self, builtin_registry, monkeypatch):
        monkeypatch.setenv("PATTERN_ARTBOARD_WIDTH", "800")
        monkeypatch.setenv("PATTERN_ARTBOARD_HEIGHT", "600")

        document = PatternGenerator(builtin_registry).generate_from_pattern(
            "pattern.card", {"name": "Card"}
        )

        assert document.artboards[0].frame.width == 800
        assert document.artboards[0].frame.height == 600

    @pytest.mark.unit
    def test_module_level_uses_builtins(self):
        document = generate_pattern("pattern.card", {"name": "Card"})
        assert len(document.artboards[0].children) == 4
