"""Generation pipeline for natural language -> diagram."""

from .base import Blackboard
from .orchestrator import Orchestrator, generate_diagram

__all__ = ["Blackboard", "Orchestrator", "generate_diagram"]
