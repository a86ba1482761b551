"""Structured model of an entity-relationship diagram."""

from typing import Dict, List, Literal
from pydantic import BaseModel, Field

from chartgenie.constants import ER_ROOT_KEYWORD, ONE_TO_MANY

OutputFormat = Literal["mermaid", "tikz", "pgf", "plantuml"]

FORMAT_DESCRIPTIONS: Dict[str, str] = {
    "mermaid": "Mermaid.js diagrams for web rendering",
    "tikz": "TikZ/LaTeX code for academic papers",
    "pgf": "PGF/LaTeX code for advanced graphics",
    "plantuml": "PlantUML for documentation",
}

ENTITY_INDENT = " " * 4
FIELD_INDENT = " " * 8


class Entity(BaseModel):
    """A table in the diagram: a name and its raw field declarations."""

    name: str
    fields: List[str] = Field(default_factory=list)

    def render(self) -> str:
        lines = [f"{ENTITY_INDENT}{self.name} {{"]
        lines.extend(f"{FIELD_INDENT}{f}" for f in self.fields)
        lines.append(f"{ENTITY_INDENT}}}")
        return "\n".join(lines)


class Relationship(BaseModel):
    """An association between two entity names."""

    from_entity: str
    to_entity: str
    cardinality: str = ONE_TO_MANY
    label: str = "has"

    def render(self) -> str:
        return (
            f"{ENTITY_INDENT}{self.from_entity} {self.cardinality} "
            f"{self.to_entity} : {self.label}"
        )


class Diagram(BaseModel):
    """A complete entity-relationship diagram."""

    entities: List[Entity] = Field(default_factory=list)
    relationships: List[Relationship] = Field(default_factory=list)

    def entity_names(self) -> List[str]:
        return [e.name for e in self.entities]

    def to_mermaid(self) -> str:
        """Serialize to the Mermaid erDiagram notation."""
        parts = [ER_ROOT_KEYWORD]
        parts.extend(e.render() for e in self.entities)
        parts.extend(r.render() for r in self.relationships)
        return "\n".join(parts)


class TableFragment(BaseModel):
    """A synthesized entity plus the relationships that attach it to a diagram."""

    entity: Entity
    relationships: List[Relationship] = Field(default_factory=list)

    def render(self) -> str:
        """Render as text that can be appended to an existing diagram."""
        parts = [self.entity.render()]
        parts.extend(r.render() for r in self.relationships)
        return "\n".join(parts)
