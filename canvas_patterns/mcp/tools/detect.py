"""Detect patterns tool for MCP server."""

import logging
from typing import Any

from canvas_patterns.canvas import CanvasError, parse_document
from canvas_patterns.detector import PatternDetector

from .cache import get_registry
from .validate import document_issues

logger = logging.getLogger(__name__)


def detect_patterns(
    document: dict[str, Any],
    pattern_id: str | None = None,
    exclusive: bool | None = None,
) -> dict[str, Any]:
    """Find pattern instances in a canvas document.

    Args:
        document: Canvas document JSON (camelCase keys).
        pattern_id: Restrict detection to one pattern.
        exclusive: Claim each canvas node for at most one definition.

    Returns:
        Dictionary with ``instances``, ``count`` and ``complete_count``.
        Invalid documents yield no instances and a ``document_errors`` list.
    """
    try:
        parsed = parse_document(document)
    except CanvasError as e:
        logger.debug(f"Rejected document: {e}")
        return {
            "instances": [],
            "count": 0,
            "complete_count": 0,
            "document_errors": document_issues(e),
        }

    detector = PatternDetector(get_registry(), exclusive=exclusive)
    if pattern_id is None:
        instances = detector.detect_patterns(parsed)
    else:
        instances = detector.detect_pattern(parsed, pattern_id)

    return {
        "instances": [instance.to_dict() for instance in instances],
        "count": len(instances),
        "complete_count": sum(1 for instance in instances if instance.is_complete),
    }


__all__ = ["detect_patterns"]
