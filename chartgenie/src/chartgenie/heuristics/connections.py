"""Infer which existing entities a new table should reference."""

from typing import List, Sequence

from chartgenie.heuristics.knowledge import CONNECTION_RULES
from chartgenie.ir.diagram import Entity


def infer_connections(new_table: str, existing_entities: Sequence[Entity]) -> List[str]:
    """
    Propose existing entities for the new table to reference.

    An existing entity matches if the forward rule for the new table lists
    it, or if its name contains a rule key whose partners include the new
    table. Entities are visited in the given order, so the result is stable
    and de-duplicated by first match. The new table never references itself.

    Args:
        new_table: Name of the table being added
        existing_entities: Entities already in the diagram

    Returns:
        Entity names in first-match order
    """
    new_lower = new_table.lower()
    new_upper = new_table.upper()
    forward = CONNECTION_RULES.get(new_lower, [])
    connections: List[str] = []

    for entity in existing_entities:
        if entity.name == new_upper or entity.name in connections:
            continue

        entity_lower = entity.name.lower()
        if entity.name in forward:
            connections.append(entity.name)
            continue

        for key, partners in CONNECTION_RULES.items():
            if key in entity_lower and new_upper in partners:
                connections.append(entity.name)
                break

    return connections
