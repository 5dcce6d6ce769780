"""Pattern detection.

Example usage:
    >>> from canvas_patterns.detector import PatternDetector
    >>> detector = PatternDetector(registry)
    >>> for instance in detector.detect_patterns(document):
    ...     print(instance.pattern_id, instance.is_complete)
"""

from .lib import PatternDetector, PatternInstance, detect_patterns

__all__ = [
    "PatternInstance",
    "PatternDetector",
    "detect_patterns",
]
