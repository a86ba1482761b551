"""Conversation and request/response models."""

from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, Field

from .diagram import OutputFormat

ResultSource = Literal[
    "llm",
    "fallback_llm_failed",
    "fallback_invalid_output",
    "fallback_not_preserved",
    "fallback_invalid_structure",
    "cache",
]


class Exchange(BaseModel):
    """One user message and a short summary of the diagram it produced."""

    user_message: str
    assistant_summary: str
    timestamp: datetime = Field(default_factory=datetime.now)


class ConversationSession(BaseModel):
    """Process-local conversation state."""

    id: str
    history: List[Exchange] = Field(default_factory=list)
    current_diagram: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def last_activity(self) -> datetime:
        if self.history:
            return self.history[-1].timestamp
        return self.created_at


class DiagramRequest(BaseModel):
    """Input to a single generation run."""

    user_text: str
    output_format: OutputFormat = "mermaid"
    history: List[Exchange] = Field(default_factory=list)
    current_diagram: Optional[str] = None


class DiagramResult(BaseModel):
    """Outcome of a generation run. Always carries a usable diagram."""

    diagram_code: str
    format: OutputFormat = "mermaid"
    source: ResultSource = "llm"
    message: str = ""
    is_modification: bool = False
    error: Optional[str] = None
    session_id: Optional[str] = None
