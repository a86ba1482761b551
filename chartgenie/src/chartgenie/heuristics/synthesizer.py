"""Build a new entity, its foreign keys and relationships from a table name."""

import re
from typing import Sequence

from chartgenie.constants import DEFAULT_RELATIONSHIP_LABEL, ONE_TO_MANY
from chartgenie.heuristics.connections import infer_connections
from chartgenie.heuristics.knowledge import (
    GENERIC_FIELDS,
    RELATIONSHIP_LABELS,
    TABLE_TYPE_FIELDS,
)
from chartgenie.ir.diagram import Entity, Relationship, TableFragment
from chartgenie.config.logging import get_logger

logger = get_logger(__name__)


def normalize_identifier(table_name: str) -> str:
    """Collapse anything outside [A-Za-z0-9_] into underscores."""
    cleaned = re.sub(r"[^A-Za-z0-9_]+", "_", table_name.strip()).strip("_")
    if not cleaned:
        return "ENTITY"
    if cleaned[0].isdigit():
        cleaned = f"_{cleaned}"
    return cleaned


def determine_relationship_type(new_table: str, existing_table: str) -> str:
    """Cardinality from the existing entity to the new one. Always one-to-many."""
    return ONE_TO_MANY


def determine_relationship_label(from_entity: str, to_entity: str) -> str:
    """Look up the verb for (from, to), both lower-case, defaulting to "has"."""
    return RELATIONSHIP_LABELS.get(from_entity, {}).get(to_entity, DEFAULT_RELATIONSHIP_LABEL)


def build_table(table_name: str, existing_entities: Sequence[Entity]) -> TableFragment:
    """
    Synthesize a new entity with domain fields and links to existing entities.

    Args:
        table_name: Free-text table name, e.g. "review"
        existing_entities: Entities already in the diagram

    Returns:
        TableFragment holding the new entity and its relationships
    """
    identifier = normalize_identifier(table_name)
    upper_name = identifier.upper()
    lower_name = identifier.lower()

    fields = [f"int {lower_name}_id PK", "string name"]
    fields.extend(TABLE_TYPE_FIELDS.get(lower_name, GENERIC_FIELDS))

    connections = infer_connections(identifier, existing_entities)
    logger.info(f"Connections inferred for {upper_name}: {connections}")

    for connection in connections:
        fields.append(f"int {connection.lower()}_id FK")

    relationships = [
        Relationship(
            from_entity=connection,
            to_entity=upper_name,
            cardinality=determine_relationship_type(lower_name, connection.lower()),
            label=determine_relationship_label(connection.lower(), lower_name),
        )
        for connection in connections
    ]

    return TableFragment(
        entity=Entity(name=upper_name, fields=fields),
        relationships=relationships,
    )


def synthesize_table(table_name: str, existing_entities: Sequence[Entity]) -> str:
    """Render build_table's fragment as diagram text ready to append."""
    return build_table(table_name, existing_entities).render()
