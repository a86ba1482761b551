"""Per-request blackboard for the generation pipeline."""

from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, Field

from chartgenie.ir.conversation import DiagramRequest, ResultSource

Stage = Literal[
    "PROMPTING",
    "CALLING_LLM",
    "CLEANING",
    "VALIDATING_PRESERVATION",
    "STRUCTURAL_VALIDATION",
    "RESULT",
]


class Blackboard(BaseModel):
    """
    State carried through one generation run.

    Each stage reads what the previous one wrote; nothing outlives the
    request.
    """

    request: DiagramRequest
    stage: Stage = "PROMPTING"
    is_modification: bool = False
    messages: List[Dict[str, str]] = Field(default_factory=list)
    raw_response: Optional[str] = None
    candidate: Optional[str] = None
    source: Optional[ResultSource] = None
    error: Optional[str] = None
    issues: List[str] = Field(default_factory=list)
