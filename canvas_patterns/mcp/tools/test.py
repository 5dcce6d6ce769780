"""Unit tests for MCP tools."""

import pytest

from canvas_patterns.manifest import PatternNotFoundError

from .cache import clear_registry_cache, get_registry
from .detect import detect_patterns
from .generate import generate_pattern
from .patterns import get_pattern, list_patterns, search_patterns
from .validate import validate_patterns


class TestRegistryCache:
    """Tests for the cached tool registry."""

    @pytest.mark.unit
    def test_registry_is_cached(self):
        assert get_registry() is get_registry()

    @pytest.mark.unit
    def test_clear_rebuilds(self):
        first = get_registry()
        clear_registry_cache()
        assert get_registry() is not first


class TestCatalogueTools:
    """Tests for list/get/search tools."""

    @pytest.mark.unit
    def test_list_all(self):
        result = list_patterns()

        assert result["count"] == 6
        tabs = result["patterns"][0]
        assert tabs["id"] == "pattern.tabs"
        assert tabs["category"] == "Navigation"
        assert tabs["tags"] == sorted(tabs["tags"])
        assert tabs["node_count"] == 3

    @pytest.mark.unit
    def test_filters_combine(self):
        result = list_patterns(category="Navigation", layer="compounds")
        assert [p["id"] for p in result["patterns"]] == ["pattern.navigation"]

    @pytest.mark.unit
    def test_filter_by_tag(self):
        result = list_patterns(tag="modal")
        assert [p["id"] for p in result["patterns"]] == ["pattern.dialog"]

    @pytest.mark.unit
    def test_get_pattern_uses_wire_names(self):
        data = get_pattern("pattern.tabs")

        assert data["structure"][0]["semanticKey"] == "tabs.tablist"
        assert data["relationships"][0]["from"] == "tab"

    @pytest.mark.unit
    def test_get_pattern_unknown(self):
        with pytest.raises(PatternNotFoundError):
            get_pattern("pattern.nope")

    @pytest.mark.unit
    def test_search(self):
        result = search_patterns("Tab")
        assert result["query"] == "Tab"
        assert [p["id"] for p in result["patterns"]] == ["pattern.tabs"]


class TestDocumentTools:
    """Tests for detect/validate/generate tools."""

    @pytest.mark.unit
    def test_detect(self, incomplete_tabs_document):
        result = detect_patterns(incomplete_tabs_document)

        assert result["count"] == 1
        assert result["complete_count"] == 0
        assert result["instances"][0]["patternId"] == "pattern.tabs"

    @pytest.mark.unit
    def test_detect_single_pattern(self, complete_tabs_document):
        assert detect_patterns(complete_tabs_document, pattern_id="pattern.card")["count"] == 0

    @pytest.mark.unit
    def test_detect_invalid_document(self):
        result = detect_patterns({"id": "doc", "name": "Broken", "artboards": []})

        assert result["count"] == 0
        assert result["document_errors"][0]["path"] == "artboards"

    @pytest.mark.unit
    def test_validate(self, complete_tabs_document):
        result = validate_patterns(complete_tabs_document)

        assert result["valid"] is True
        assert result["errors"] == []
        assert "document_errors" not in result

    @pytest.mark.unit
    def test_validate_invalid_document(self):
        result = validate_patterns({"name": "No id"})

        assert result["valid"] is False
        assert result["errors"]
        assert {i["path"] for i in result["document_errors"]} >= {"id", "artboards"}

    @pytest.mark.unit
    def test_generate(self):
        result = generate_pattern(
            "pattern.dialog", name="Confirm", x=10, y=20, nested=True
        )

        document = result["document"]
        assert result["node_count"] == 5
        assert [n["semanticKey"] for n in document["artboards"][0]["children"]] == [
            "dialog.trigger",
            "dialog.container",
        ]

    @pytest.mark.unit
    def test_generate_unknown_pattern(self):
        with pytest.raises(PatternNotFoundError, match="nonexistent"):
            generate_pattern("nonexistent", name="X")
