"""Extract a candidate table name from free-form user text."""

import re
from typing import NamedTuple, Optional, Pattern, Tuple

from chartgenie.heuristics.knowledge import COMMON_ENTITY_NOUNS, NAME_STOP_WORDS
from chartgenie.config.logging import get_logger

logger = get_logger(__name__)


class NameRule(NamedTuple):
    """A phrasing pattern whose first group captures the table name."""

    name: str
    pattern: Pattern[str]

    def apply(self, text: str) -> Optional[str]:
        match = self.pattern.search(text)
        if not match or not match.group(1):
            return None
        candidate = match.group(1).lower()
        if candidate in NAME_STOP_WORDS:
            return None
        return candidate


def _rule(name: str, pattern: str) -> NameRule:
    return NameRule(name, re.compile(pattern, re.IGNORECASE))


# Evaluated in order, first match wins
NAME_RULES: Tuple[NameRule, ...] = (
    _rule("add_x_table", r"\badd (?:a |an )?(\w+) table"),
    _rule("add_table_named_x", r"\badd (?:a |an )?table (?:called |named )?(\w+)"),
    _rule("add_x", r"\badd (?:a |an )?(\w+)(?:\s|$)"),
    _rule("include_x_table", r"\binclude (?:a |an )?(\w+) table"),
    _rule("include_x", r"\binclude (?:a |an )?(\w+)(?:\s|$)"),
    _rule("create_x_table", r"\bcreate (?:a |an )?(\w+) table"),
    _rule("need_x_table", r"\bneed (?:a |an )?(\w+) table"),
    _rule("want_x_table", r"\bwant (?:a |an )?(\w+) table"),
)


def match_vocabulary(text: str) -> Optional[str]:
    """
    Find the first common entity noun among the whitespace-split words.

    Plurals are reduced by dropping one trailing "s".
    """
    for word in text.lower().split():
        if word in COMMON_ENTITY_NOUNS:
            return word[:-1] if word.endswith("s") else word
    return None


def extract_table_name(user_text: str) -> Optional[str]:
    """
    Extract the table the user wants to add.

    Args:
        user_text: Free-form request, e.g. "add a review table"

    Returns:
        Lower-case table name, or None if nothing recognizable was found
    """
    if not user_text:
        return None

    for rule in NAME_RULES:
        name = rule.apply(user_text)
        if name:
            logger.debug(f"Table name '{name}' matched rule {rule.name}")
            return name

    name = match_vocabulary(user_text)
    if name:
        logger.debug(f"Table name '{name}' matched common entity vocabulary")
    return name
