"""Pattern registry and built-in pattern manifests.

Example usage:
    >>> from canvas_patterns.registry import create_pattern_registry
    >>> registry = create_pattern_registry()
    >>> [m.id for m in registry.search("tab")]
    ['pattern.tabs']
"""

from .builtin import (
    accordion_pattern,
    builtin_patterns,
    card_pattern,
    dialog_pattern,
    form_pattern,
    navigation_pattern,
    tabs_example_document,
    tabs_pattern,
)
from .lib import PatternRegistry, create_pattern_registry

__all__ = [
    # Registry
    "PatternRegistry",
    "create_pattern_registry",
    # Built-ins
    "builtin_patterns",
    "tabs_pattern",
    "dialog_pattern",
    "accordion_pattern",
    "form_pattern",
    "card_pattern",
    "navigation_pattern",
    "tabs_example_document",
]
