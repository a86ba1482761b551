"""Recover diagram code from free-form LLM output."""

import re
from typing import List, Set

from chartgenie.constants import (
    CODE_FENCE_LANGUAGES,
    DIAGRAM_START_MARKERS,
    ER_FORMAT,
    ER_ROOT_KEYWORD,
    EXTRACT_BLANK_LINE_RUN,
    EXTRACT_MIN_LINES_BEFORE_BLANK_STOP,
)
from chartgenie.diagram.parser import RELATIONSHIP_RE, is_relationship_line
from chartgenie.config.logging import get_logger

logger = get_logger(__name__)

FENCE_RE = re.compile(
    r"```(?:" + "|".join(CODE_FENCE_LANGUAGES) + r")?", re.IGNORECASE
)
# Reasoning models wrap their chain of thought in <think>...</think>
REASONING_BLOCK_RE = re.compile(r"^\s*<think>.*?</think>", re.DOTALL | re.IGNORECASE)
ROOT_KEYWORD_RE = re.compile(r"^erdiagram", re.IGNORECASE)

ENTITY_DECL_RE = re.compile(r"^(\s*)([a-zA-Z_][a-zA-Z0-9_]*)\s*(\{.*)$")
RELATIONSHIP_DECL_RE = re.compile(
    r"^(\s*)([a-zA-Z_][a-zA-Z0-9_]*)\s+(\S*(?:--|\.\.)\S*)\s+"
    r"([a-zA-Z_][a-zA-Z0-9_]*)\s*:\s*(.*)$"
)


def clean_diagram_code(response: str, output_format: str = ER_FORMAT) -> str:
    """
    Cheap cleanup pass: strip a leading reasoning block and code fences, trim.

    Args:
        response: Raw LLM output
        output_format: Requested output format

    Returns:
        Cleaned text (empty string for empty input)
    """
    if not response:
        return ""

    text = REASONING_BLOCK_RE.sub("", response, count=1)
    text = FENCE_RE.sub("", text)
    return text.strip()


def extract_diagram_from_response(response: str, output_format: str = ER_FORMAT) -> str:
    """
    Escalation pass: locate the diagram's root line and drop everything before it.

    Collection stops at a closing code fence, at @enduml (kept), or after a
    run of blank lines once the diagram has some body. When no root line
    exists the cheap-pass text is returned unchanged.

    Args:
        response: Raw LLM output
        output_format: Requested output format

    Returns:
        Candidate diagram text
    """
    cleaned = clean_diagram_code(response, output_format)
    if not response:
        return cleaned

    text = REASONING_BLOCK_RE.sub("", response, count=1)
    diagram_lines: List[str] = []
    found_start = False

    for line in text.split("\n"):
        lowered = line.strip().lower()

        if not found_start:
            if lowered.startswith(DIAGRAM_START_MARKERS):
                found_start = True
                diagram_lines.append(line)
            continue

        if lowered.startswith("```"):
            break
        if lowered == "@enduml":
            diagram_lines.append(line)
            break

        diagram_lines.append(line)

        if (
            output_format == ER_FORMAT
            and not lowered
            and len(diagram_lines) > EXTRACT_MIN_LINES_BEFORE_BLANK_STOP
            and all(not l.strip() for l in diagram_lines[-EXTRACT_BLANK_LINE_RUN:])
        ):
            break

    if not found_start:
        logger.debug("No diagram start marker found, keeping cleaned response")
        return cleaned

    code = "\n".join(diagram_lines).strip()
    return ROOT_KEYWORD_RE.sub(ER_ROOT_KEYWORD, code, count=1)


def trim_trailing_prose(code: str) -> str:
    """
    Cut everything after the last line that belongs to the diagram.

    Inside an entity block every line counts. Outside one, only the root
    keyword, entity headers, relationship lines and %% comments do.
    """
    if not code:
        return ""

    lines = code.split("\n")
    last = -1
    in_block = False
    for i, line in enumerate(lines):
        stripped = line.strip()
        if not stripped:
            continue
        if in_block:
            last = i
            if "}" in stripped:
                in_block = False
            continue
        if ENTITY_DECL_RE.match(line):
            last = i
            in_block = not stripped.endswith("}")
        elif (
            ROOT_KEYWORD_RE.match(stripped)
            or stripped.startswith("%%")
            or is_relationship_line(stripped)
        ):
            last = i

    if last < 0 or last == len(lines) - 1:
        return code

    dropped = sum(1 for line in lines[last + 1:] if line.strip())
    if dropped:
        logger.debug(f"Trimmed {dropped} trailing non-diagram line(s)")
    return "\n".join(lines[: last + 1])


def normalize_entity_names(code: str) -> str:
    """Upper-case entity header names and relationship endpoints."""
    if not code:
        return ""

    normalized = []
    for line in code.split("\n"):
        stripped = line.strip()
        if stripped.lower().startswith(ER_ROOT_KEYWORD.lower()):
            normalized.append(line)
            continue

        entity = ENTITY_DECL_RE.match(line)
        if entity:
            spaces, name, rest = entity.groups()
            normalized.append(f"{spaces}{name.upper()} {rest}")
            continue

        relation = RELATIONSHIP_DECL_RE.match(line)
        if relation and RELATIONSHIP_RE.search(relation.group(3)):
            spaces, left, token, right, label = relation.groups()
            normalized.append(f"{spaces}{left.upper()} {token} {right.upper()} : {label}")
            continue

        normalized.append(line)

    return "\n".join(normalized)


def remove_duplicate_relationships(code: str) -> str:
    """Drop relationship lines that repeat an earlier one."""
    if not code:
        return ""

    seen: Set[str] = set()
    kept = []
    removed = 0
    for line in code.split("\n"):
        if is_relationship_line(line):
            key = re.sub(r"\s+", " ", line.strip()).lower()
            if key in seen:
                removed += 1
                continue
            seen.add(key)
        kept.append(line)

    if removed:
        logger.debug(f"Removed {removed} duplicate relationship line(s)")
    return "\n".join(kept)
