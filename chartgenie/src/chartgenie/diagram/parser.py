"""Parse Mermaid erDiagram text into entities."""

import re
from typing import List, Optional

from chartgenie.ir.diagram import Entity

# Upper-case identifier immediately followed by an opening brace
ENTITY_HEADER_RE = re.compile(r"^([A-Z_][A-Z0-9_]*)\s*\{")

# Left and right cardinality markers joined by an identifying (--) or
# non-identifying (..) line
RELATIONSHIP_RE = re.compile(r"(\|o|\|\||\}o|\}\|)(--|\.\.)(o\||\|\||o\{|\|\{)")


def is_relationship_line(line: str) -> bool:
    """Return True if the line contains a cardinality token."""
    return RELATIONSHIP_RE.search(line) is not None


def parse_entities(diagram_code: Optional[str]) -> List[Entity]:
    """
    Parse entity blocks out of diagram text.

    Tolerates arbitrary surrounding prose: only lines matching the narrow
    header pattern open a block, and lines outside a block are ignored.
    Never raises; malformed input yields an empty or partial list.

    Args:
        diagram_code: Diagram text, possibly surrounded by prose

    Returns:
        Entities in the order their headers appear
    """
    if not diagram_code:
        return []

    entities: List[Entity] = []
    current: Optional[Entity] = None

    for line in diagram_code.split("\n"):
        trimmed = line.strip()

        header = ENTITY_HEADER_RE.match(trimmed)
        if header:
            current = Entity(name=header.group(1))
            entities.append(current)
            # "NAME { }" opens and closes on one line
            if trimmed.endswith("}"):
                current = None
            continue

        if trimmed == "}":
            current = None
            continue

        if current is None or not trimmed:
            continue
        if "}" in trimmed or is_relationship_line(trimmed):
            continue
        current.fields.append(trimmed)

    return entities


def extract_entity_names(diagram_code: Optional[str]) -> List[str]:
    """
    Return the distinct entity header names in first-seen order.

    Uses the same header rule as parse_entities.
    """
    names: List[str] = []
    for entity in parse_entities(diagram_code):
        if entity.name not in names:
            names.append(entity.name)
    return names
