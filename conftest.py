"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- Isolation of engine environment variables between tests
- Shared registries and canvas documents for the pattern engine tests
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

import pytest
from dotenv import load_dotenv

from canvas_patterns.config import list_environment_variables

if TYPE_CHECKING:
    from canvas_patterns.registry import PatternRegistry

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Environment Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def _isolate_engine_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test against engine defaults, whatever .env says."""
    for env_var in list_environment_variables("engine"):
        monkeypatch.delenv(env_var.value.name, raising=False)


# =============================================================================
# Registries
# =============================================================================


@pytest.fixture
def builtin_registry() -> PatternRegistry:
    """Registry holding the six built-in patterns."""
    from canvas_patterns.registry import create_pattern_registry

    return create_pattern_registry()


@pytest.fixture
def tabs_registry() -> PatternRegistry:
    """Registry holding only the built-in Tabs pattern."""
    from canvas_patterns.registry import PatternRegistry, tabs_pattern

    registry = PatternRegistry()
    registry.register(tabs_pattern())
    return registry


# =============================================================================
# Canvas Documents
# =============================================================================

_INCOMPLETE_TABS: dict[str, Any] = {
    "schemaVersion": "0.1.0",
    "id": "doc-tabs",
    "name": "Tabs Review",
    "artboards": [
        {
            "id": "board",
            "name": "Desktop",
            "frame": {"x": 0, "y": 0, "width": 800, "height": 600},
            "children": [
                {
                    "id": "container",
                    "type": "frame",
                    "name": "Tabs Container",
                    "frame": {"x": 32, "y": 32, "width": 736, "height": 536},
                    "semanticKey": "tabs.container",
                    "children": [
                        {
                            "id": "tablist",
                            "type": "frame",
                            "name": "Tab List",
                            "frame": {"x": 0, "y": 0, "width": 736, "height": 48},
                            "semanticKey": "tabs.tablist",
                            "children": [
                                {
                                    "id": "tab-0",
                                    "type": "text",
                                    "name": "Tab 1",
                                    "frame": {"x": 16, "y": 12, "width": 80, "height": 24},
                                    "text": "Overview",
                                    "semanticKey": "tabs.tab[0]",
                                }
                            ],
                        }
                    ],
                }
            ],
        }
    ],
}

_TAB_PANEL: dict[str, Any] = {
    "id": "panel-0",
    "type": "frame",
    "name": "Tab Panel 1",
    "frame": {"x": 0, "y": 48, "width": 736, "height": 488},
    "semanticKey": "tabs.tabpanel[0]",
    "children": [],
}


@pytest.fixture
def incomplete_tabs_document() -> dict[str, Any]:
    """Tabs container with a tab list and one tab, but no panel."""
    return copy.deepcopy(_INCOMPLETE_TABS)


@pytest.fixture
def complete_tabs_document(incomplete_tabs_document) -> dict[str, Any]:
    """The incomplete document plus a panel beside the tab list."""
    container = incomplete_tabs_document["artboards"][0]["children"][0]
    container["children"].append(copy.deepcopy(_TAB_PANEL))
    return incomplete_tabs_document


_INNER_TABS: dict[str, Any] = {
    "id": "inner-container",
    "type": "frame",
    "name": "Nested Tabs",
    "frame": {"x": 16, "y": 16, "width": 704, "height": 400},
    "semanticKey": "tabs.container",
    "children": [
        {
            "id": "inner-tablist",
            "type": "frame",
            "name": "Nested Tab List",
            "frame": {"x": 0, "y": 0, "width": 704, "height": 40},
            "semanticKey": "tabs.tablist",
            "children": [
                {
                    "id": "inner-tab-0",
                    "type": "text",
                    "name": "Nested Tab 1",
                    "frame": {"x": 8, "y": 8, "width": 80, "height": 24},
                    "text": "Details",
                    "semanticKey": "tabs.tab[0]",
                }
            ],
        }
    ],
}


@pytest.fixture
def nested_tabs_document(complete_tabs_document) -> dict[str, Any]:
    """Complete tabs whose first panel holds a second tab list without panels."""
    panel = complete_tabs_document["artboards"][0]["children"][0]["children"][1]
    panel["children"].append(copy.deepcopy(_INNER_TABS))
    return complete_tabs_document
