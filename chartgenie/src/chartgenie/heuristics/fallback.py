"""Deterministic diagram generation used when the LLM path is unusable."""

from typing import Optional, Sequence

from chartgenie.constants import ER_FORMAT
from chartgenie.diagram.extraction import normalize_entity_names
from chartgenie.diagram.parser import parse_entities
from chartgenie.heuristics.intent import is_modification
from chartgenie.heuristics.names import extract_table_name
from chartgenie.heuristics.synthesizer import normalize_identifier, synthesize_table
from chartgenie.heuristics.templates import NON_ER_TEMPLATES, select_template
from chartgenie.ir.conversation import Exchange
from chartgenie.config.logging import get_logger

logger = get_logger(__name__)


def generate_fallback(
    user_text: str,
    history: Optional[Sequence[Exchange]] = None,
    current_diagram: Optional[str] = None,
    output_format: str = ER_FORMAT,
) -> str:
    """
    Extend the current diagram or originate one without the LLM.

    For an edit, the requested table is synthesized and appended to the
    current diagram, whose entity names are upper-cased first. If no table
    name can be recognized, or it already exists, the current diagram is
    returned unchanged. Otherwise a canned template is chosen from domain
    keywords in the message.

    Args:
        user_text: The user's message
        history: Earlier exchanges of the conversation (context only)
        current_diagram: Diagram currently shown to the user, if any
        output_format: Requested output format

    Returns:
        Non-empty diagram text
    """
    if output_format != ER_FORMAT:
        if current_diagram and current_diagram.strip() and is_modification(user_text, current_diagram):
            logger.info(f"Fallback ({output_format}): keeping current diagram unchanged")
            return current_diagram
        logger.info(f"Fallback ({output_format}): using generic template")
        return NON_ER_TEMPLATES[output_format]

    if current_diagram is not None and not current_diagram.strip():
        current_diagram = None
    # Entity names are compared and referenced in upper case
    normalized = normalize_entity_names(current_diagram) if current_diagram else ""
    existing = parse_entities(normalized)
    if current_diagram and not existing:
        logger.warning("Current diagram has no entity blocks, appending to it as-is")

    modification = is_modification(user_text, current_diagram)
    logger.info(
        f"Generating fallback (modification={modification}, "
        f"history={len(history) if history else 0} exchanges)"
    )

    if modification and current_diagram:
        table_name = extract_table_name(user_text)
        logger.info(f"Detected table to add: {table_name}")

        if not table_name:
            logger.warning("Could not determine what to add, returning current diagram")
            return current_diagram

        if normalize_identifier(table_name).upper() in {e.name for e in existing}:
            logger.warning(f"{table_name.upper()} already exists, returning current diagram")
            return current_diagram

        fragment = synthesize_table(table_name, existing)
        logger.info(f"Fallback: preserved {len(existing)} entities and added {table_name.upper()}")
        return normalized.strip() + "\n" + fragment

    diagram = select_template(user_text)
    logger.info(f"Fallback: fresh diagram from template with {diagram.entity_names()}")
    return diagram.to_mermaid()
