"""Validate patterns tool for MCP server.

Runs pattern validation over a canvas document and reports errors,
warnings and suggestions for design review.
"""

import logging
from typing import Any

from canvas_patterns.canvas import CanvasError, parse_document
from canvas_patterns.validation import PatternValidator

from .cache import get_registry

logger = logging.getLogger(__name__)


def document_issues(error: CanvasError) -> list[dict[str, Any]]:
    """Schema problems of a rejected document as JSON objects."""
    return [
        {"path": issue.path, "message": issue.message, "error_type": issue.error_type}
        for issue in error.issues
    ]


def validate_patterns(
    document: dict[str, Any],
    exclusive: bool | None = None,
) -> dict[str, Any]:
    """Validate the UI patterns in a canvas document.

    Args:
        document: Canvas document JSON (camelCase keys).
        exclusive: Claim each canvas node for at most one definition.

    Returns:
        Dictionary containing:
        - valid: True if no pattern errors were found
        - errors: Missing required nodes and relationships
        - warnings: Detection messages
        - suggestions: How to complete partial patterns
        - instances: Detected pattern instances
        - document_errors: Schema problems (only if the document is invalid)

    Example:
        >>> result = validate_patterns(document)
        >>> if not result["valid"]:
        ...     print(result["errors"])
    """
    try:
        parsed = parse_document(document)
    except CanvasError as e:
        logger.debug(f"Rejected document: {e}")
        issues = document_issues(e)
        return {
            "valid": False,
            "errors": [f"{i['path']}: {i['message']}" for i in issues],
            "warnings": [],
            "suggestions": [],
            "instances": [],
            "document_errors": issues,
        }

    report = PatternValidator(get_registry(), exclusive=exclusive).validate_patterns(parsed)
    return report.to_dict()


__all__ = ["document_issues", "validate_patterns"]
