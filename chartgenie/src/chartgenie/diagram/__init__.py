"""Parsing, cleanup and validation of entity-relationship diagram text."""

from .parser import parse_entities, extract_entity_names, is_relationship_line
from .extraction import (
    clean_diagram_code,
    extract_diagram_from_response,
    normalize_entity_names,
    remove_duplicate_relationships,
    trim_trailing_prose,
)
from .validators import (
    DiagramIssue,
    check_content,
    validate_diagram_structure,
    preserves_entities,
)

__all__ = [
    "parse_entities",
    "extract_entity_names",
    "is_relationship_line",
    "clean_diagram_code",
    "extract_diagram_from_response",
    "normalize_entity_names",
    "remove_duplicate_relationships",
    "trim_trailing_prose",
    "DiagramIssue",
    "check_content",
    "validate_diagram_structure",
    "preserves_entities",
]
