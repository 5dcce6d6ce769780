"""Canvas document generation from pattern manifests.

Example usage:
    >>> from canvas_patterns.generator import PatternGenerator
    >>> generator = PatternGenerator(registry, nested=True)
    >>> document = generator.generate_from_pattern("pattern.dialog", {"name": "Confirm"})
"""

from .lib import (
    ARTBOARD_NAME,
    DEFAULT_SIZES,
    GenerationSpec,
    PatternGenerator,
    generate_pattern,
)

__all__ = [
    "ARTBOARD_NAME",
    "DEFAULT_SIZES",
    "GenerationSpec",
    "PatternGenerator",
    "generate_pattern",
]
