"""Pattern validation.

Example usage:
    >>> from canvas_patterns.validation import PatternValidator
    >>> report = PatternValidator(registry).validate_patterns(document)
    >>> if not report.valid:
    ...     print("\\n".join(report.errors))
"""

from .lib import PatternValidator, ValidationReport, validate_patterns

__all__ = [
    "ValidationReport",
    "PatternValidator",
    "validate_patterns",
]
