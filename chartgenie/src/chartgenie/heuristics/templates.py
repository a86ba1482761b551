"""Canned diagrams for fresh generation when the LLM path is unusable."""

from typing import NamedTuple, Tuple

from chartgenie.ir.diagram import Diagram, Entity, Relationship

HOSPITAL_DIAGRAM = Diagram(
    entities=[
        Entity(name="PATIENT", fields=[
            "int patient_id PK", "string first_name", "string last_name",
            "string email", "string phone", "date date_of_birth",
        ]),
        Entity(name="DOCTOR", fields=[
            "int doctor_id PK", "string first_name", "string last_name",
            "string specialty", "string email",
        ]),
        Entity(name="APPOINTMENT", fields=[
            "int appointment_id PK", "int patient_id FK", "int doctor_id FK",
            "datetime appointment_datetime", "string status", "text notes",
        ]),
    ],
    relationships=[
        Relationship(from_entity="PATIENT", to_entity="APPOINTMENT", label="books"),
        Relationship(from_entity="DOCTOR", to_entity="APPOINTMENT", label="conducts"),
    ],
)

ECOMMERCE_DIAGRAM = Diagram(
    entities=[
        Entity(name="USER", fields=[
            "int user_id PK", "string username", "string email",
            "string password_hash", "datetime created_at",
        ]),
        Entity(name="PRODUCT", fields=[
            "int product_id PK", "string name", "text description",
            "decimal price", "int stock_quantity",
        ]),
        Entity(name="ORDER", fields=[
            "int order_id PK", "int user_id FK", "datetime order_date",
            "decimal total_amount", "string status",
        ]),
        Entity(name="ORDER_ITEM", fields=[
            "int order_item_id PK", "int order_id FK", "int product_id FK",
            "int quantity", "decimal unit_price",
        ]),
    ],
    relationships=[
        Relationship(from_entity="USER", to_entity="ORDER", label="places"),
        Relationship(from_entity="ORDER", to_entity="ORDER_ITEM", label="contains"),
        Relationship(from_entity="PRODUCT", to_entity="ORDER_ITEM", label="includes"),
    ],
)

GENERIC_DIAGRAM = Diagram(
    entities=[
        Entity(name="USER", fields=[
            "int id PK", "string name", "string email", "datetime created_at",
        ]),
        Entity(name="ITEM", fields=[
            "int id PK", "string title", "text description",
            "int user_id FK", "datetime created_at",
        ]),
    ],
    relationships=[Relationship(from_entity="USER", to_entity="ITEM", label="owns")],
)

# Generic templates for notations the rule-based path does not synthesize
PLANTUML_TEMPLATE = """@startuml
entity USER {
  * id : int
  --
  name : string
  email : string
}
entity ITEM {
  * id : int
  --
  title : string
  user_id : int <<FK>>
}
USER ||--o{ ITEM : owns
@enduml"""

TIKZ_TEMPLATE = r"""\begin{tikzpicture}[entity/.style={draw, rectangle, minimum width=2.5cm, minimum height=1cm}]
  \node[entity] (user) at (0,0) {USER};
  \node[entity] (item) at (5,0) {ITEM};
  \draw[->] (user) -- node[above] {owns} (item);
\end{tikzpicture}"""

PGF_TEMPLATE = r"""\begin{tikzpicture}
  \pgfmathsetmacro{\gap}{5}
  \node[draw, rectangle, minimum width=2.5cm] (user) at (0,0) {USER};
  \node[draw, rectangle, minimum width=2.5cm] (item) at (\gap,0) {ITEM};
  \draw[->] (user) -- node[above] {owns} (item);
\end{tikzpicture}"""

NON_ER_TEMPLATES = {
    "plantuml": PLANTUML_TEMPLATE,
    "tikz": TIKZ_TEMPLATE,
    "pgf": PGF_TEMPLATE,
}


class TemplateRule(NamedTuple):
    """Domain keywords that select a canned diagram."""

    name: str
    keywords: Tuple[str, ...]
    diagram: Diagram

    def matches(self, text: str) -> bool:
        lowered = text.lower()
        return any(keyword in lowered for keyword in self.keywords)


# Evaluated in order, first match wins
TEMPLATE_RULES: Tuple[TemplateRule, ...] = (
    TemplateRule("hospital", ("hospital", "medical", "patient"), HOSPITAL_DIAGRAM),
    TemplateRule("ecommerce", ("ecommerce", "shop", "store", "product"), ECOMMERCE_DIAGRAM),
)


def select_template(user_text: str) -> Diagram:
    """Pick the canned diagram whose domain keywords appear in the text."""
    for rule in TEMPLATE_RULES:
        if rule.matches(user_text or ""):
            return rule.diagram
    return GENERIC_DIAGRAM
