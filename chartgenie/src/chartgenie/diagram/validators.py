"""Content, structure and entity-preservation checks for diagram text."""

from dataclasses import dataclass, field
from typing import List, Optional

from chartgenie.constants import (
    ER_FORMAT,
    ER_ROOT_KEYWORD,
    MIN_DIAGRAM_LINES,
    MIN_RESPONSE_LENGTH,
)
from chartgenie.diagram.extraction import normalize_entity_names
from chartgenie.diagram.parser import ENTITY_HEADER_RE, extract_entity_names
from chartgenie.config.logging import get_logger

logger = get_logger(__name__)


@dataclass
class DiagramIssue:
    """Problem found in candidate diagram text."""

    code: str  # e.g., "TOO_SHORT", "NO_ENTITIES"
    message: str
    location: str = "diagram"
    details: dict = field(default_factory=dict)


def check_content(code: Optional[str], output_format: str = ER_FORMAT) -> List[DiagramIssue]:
    """
    Content-quality check applied right after cleanup.

    Args:
        code: Candidate diagram text
        output_format: Requested output format

    Returns:
        List of DiagramIssue objects (empty if the text looks usable)
    """
    if not code or not code.strip():
        return [DiagramIssue(code="EMPTY", message="Empty or invalid diagram code")]

    issues: List[DiagramIssue] = []
    text = code.strip()
    if len(text) < MIN_RESPONSE_LENGTH:
        issues.append(
            DiagramIssue(
                code="TOO_SHORT",
                message=f"Response too short ({len(text)} chars)",
                details={"length": len(text)},
            )
        )

    if output_format == ER_FORMAT and not text.startswith(ER_ROOT_KEYWORD):
        issues.append(
            DiagramIssue(
                code="MISSING_ROOT_KEYWORD",
                message=f"Diagram does not start with {ER_ROOT_KEYWORD}",
                location="line 1",
            )
        )

    return issues


def validate_diagram_structure(
    code: Optional[str], output_format: str = ER_FORMAT
) -> List[DiagramIssue]:
    """
    Structural validation of a finished diagram.

    Only the entity-relationship notation is checked in depth; other
    notations pass as long as they are non-empty.

    Args:
        code: Diagram text
        output_format: Requested output format

    Returns:
        List of DiagramIssue objects (empty if validation passes)
    """
    if not code or not isinstance(code, str) or not code.strip():
        return [DiagramIssue(code="EMPTY", message="Empty or invalid diagram code")]

    if output_format != ER_FORMAT:
        return []

    issues: List[DiagramIssue] = []
    if ER_ROOT_KEYWORD not in code:
        issues.append(
            DiagramIssue(
                code="MISSING_ROOT_KEYWORD",
                message=f"Missing {ER_ROOT_KEYWORD} declaration",
            )
        )

    lines = [line for line in code.split("\n") if line.strip()]
    if len(lines) < MIN_DIAGRAM_LINES:
        issues.append(
            DiagramIssue(
                code="TOO_FEW_LINES",
                message="Diagram too simple or malformed",
                details={"lines": len(lines)},
            )
        )

    if not any(ENTITY_HEADER_RE.match(line.strip()) for line in lines):
        issues.append(DiagramIssue(code="NO_ENTITIES", message="No entities found in diagram"))

    return issues


def preserves_entities(new_diagram: Optional[str], original_diagram: Optional[str]) -> bool:
    """
    Check that an edited diagram kept every original entity and added one.

    Args:
        new_diagram: Diagram returned for a modification request
        original_diagram: Diagram the modification was applied to

    Returns:
        True if the new entity set is a strict superset of the original
    """
    if not original_diagram or not new_diagram:
        return False

    original = extract_entity_names(normalize_entity_names(original_diagram))
    updated = extract_entity_names(normalize_entity_names(new_diagram))
    logger.debug(f"Preservation check: original={original}, new={updated}")

    missing = [name for name in original if name not in updated]
    if missing:
        logger.warning(f"Modified diagram dropped entities: {missing}")
        return False

    if len(updated) <= len(original):
        logger.warning("Modified diagram added no new entities")
        return False

    return True
