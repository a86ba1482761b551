"""Tests for parsing entity blocks out of diagram text."""

from chartgenie.diagram.parser import (
    extract_entity_names,
    is_relationship_line,
    parse_entities,
)
from chartgenie.heuristics.synthesizer import synthesize_table


def test_parse_entities_reads_names_and_fields(shop_diagram):
    """Test that headers open entities and field lines are collected in order."""
    entities = parse_entities(shop_diagram)
    assert [e.name for e in entities] == ["USER", "PRODUCT"]
    assert entities[0].fields == ["int user_id PK", "string username", "string email"]
    assert entities[1].fields == ["int product_id PK", "string name", "decimal price"]


def test_parse_entities_ignores_surrounding_prose():
    """Test that prose around the diagram (even with braces) is ignored."""
    text = (
        "Here is your diagram {as requested}:\n"
        "erDiagram\n"
        "    ORDER {\n"
        "        int order_id PK\n"
        "    }\n"
        "Hope this helps { really }"
    )
    entities = parse_entities(text)
    assert [e.name for e in entities] == ["ORDER"]
    assert entities[0].fields == ["int order_id PK"]


def test_parse_entities_skips_relationship_lines_inside_block():
    """Test that relationship lines never become fields."""
    text = "erDiagram\n    A {\n        int id PK\n    A ||--o{ B : has\n    }"
    assert parse_entities(text)[0].fields == ["int id PK"]


def test_parse_entities_tolerates_unclosed_block():
    """Test that an unclosed block still yields a partial result."""
    entities = parse_entities("erDiagram\n    USER {\n        int id PK")
    assert len(entities) == 1
    assert entities[0].fields == ["int id PK"]


def test_parse_entities_lowercase_header_is_not_an_entity():
    """Test that only upper-case identifiers open entity blocks."""
    assert parse_entities("erDiagram\n    user {\n        int id PK\n    }") == []


def test_parse_entities_empty_input():
    """Test that empty input returns an empty list instead of raising."""
    assert parse_entities("") == []
    assert parse_entities(None) == []


def test_single_line_block():
    """Test that 'NAME { }' opens and closes on one line."""
    entities = parse_entities("erDiagram\n    EMPTY { }\n    int stray\n")
    assert [e.name for e in entities] == ["EMPTY"]
    assert entities[0].fields == []


def test_extract_entity_names_deduplicates():
    """Test that repeated headers are reported once, in first-seen order."""
    text = "erDiagram\n    B {\n    }\n    A {\n    }\n    B {\n    }"
    assert extract_entity_names(text) == ["B", "A"]


def test_is_relationship_line():
    """Test detection of cardinality tokens."""
    assert is_relationship_line("USER ||--o{ ORDER : places")
    assert is_relationship_line("A }o--o{ B : tags")
    assert is_relationship_line("A |o..o| B : maybe")
    assert not is_relationship_line("int user_id FK")


def test_parsing_synthesized_diagram_returns_same_names(shop_diagram):
    """Test that names parsed from synthesized text match the names fed in."""
    existing = parse_entities(shop_diagram)
    combined = shop_diagram + "\n" + synthesize_table("review", existing)
    assert extract_entity_names(combined) == ["USER", "PRODUCT", "REVIEW"]
