"""Decide whether a message edits the current diagram or asks for a new one."""

from typing import Optional

from chartgenie.heuristics.knowledge import (
    STRONG_MODIFICATION_KEYWORDS,
    STRUCTURAL_NOUNS,
    WEAK_MODIFICATION_KEYWORDS,
)


def is_modification(user_text: str, current_diagram: Optional[str]) -> bool:
    """
    Classify a message as an edit of the current diagram.

    Strong edit verbs decide on their own. Weak keywords ("need", "another",
    ...) count only together with a structural noun (table, entity, field).
    Without a current diagram there is nothing to modify.

    Args:
        user_text: The user's message
        current_diagram: Diagram currently shown to the user, if any

    Returns:
        True if the message should modify the current diagram
    """
    if not current_diagram:
        return False

    text = (user_text or "").lower()

    if any(keyword in text for keyword in STRONG_MODIFICATION_KEYWORDS):
        return True

    has_weak = any(keyword in text for keyword in WEAK_MODIFICATION_KEYWORDS)
    has_structural = any(noun in text for noun in STRUCTURAL_NOUNS)
    return has_weak and has_structural
