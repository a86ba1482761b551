"""Intermediate representations for diagrams and conversations."""

from .diagram import (
    OutputFormat,
    FORMAT_DESCRIPTIONS,
    Entity,
    Relationship,
    Diagram,
    TableFragment,
)
from .conversation import (
    Exchange,
    ConversationSession,
    DiagramRequest,
    DiagramResult,
    ResultSource,
)

__all__ = [
    "OutputFormat",
    "FORMAT_DESCRIPTIONS",
    "Entity",
    "Relationship",
    "Diagram",
    "TableFragment",
    "Exchange",
    "ConversationSession",
    "DiagramRequest",
    "DiagramResult",
    "ResultSource",
]
