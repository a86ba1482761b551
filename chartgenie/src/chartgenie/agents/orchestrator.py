"""Orchestrator for the prompt -> LLM -> cleanup -> validation -> fallback pipeline."""

from typing import Callable, Dict, List, Optional, Sequence, Tuple

from chartgenie.agents.base import Blackboard, Stage
from chartgenie.agents.prompt_builder import build_messages, build_prompt
from chartgenie.agents.tools.llm_client import chat
from chartgenie.config.settings import Settings, get_settings
from chartgenie.constants import ER_FORMAT, LOG_TRUNCATE_LENGTH
from chartgenie.diagram.extraction import (
    clean_diagram_code,
    extract_diagram_from_response,
    normalize_entity_names,
    remove_duplicate_relationships,
    trim_trailing_prose,
)
from chartgenie.diagram.validators import (
    DiagramIssue,
    check_content,
    preserves_entities,
    validate_diagram_structure,
)
from chartgenie.heuristics.fallback import generate_fallback
from chartgenie.heuristics.intent import is_modification
from chartgenie.ir.conversation import DiagramRequest, DiagramResult, Exchange, ResultSource
from chartgenie.ir.validators import validate_input
from chartgenie.config.logging import get_logger

logger = get_logger(__name__)

ChatFn = Callable[[List[Dict[str, str]]], str]

FALLBACK_MESSAGES: Dict[str, str] = {
    "fallback_llm_failed": "LLM unavailable, generated diagram with rule-based fallback",
    "fallback_invalid_output": "LLM output was unusable, generated diagram with rule-based fallback",
    "fallback_not_preserved": "LLM dropped existing entities, extended diagram with rule-based fallback",
    "fallback_invalid_structure": "LLM diagram failed validation, generated diagram with rule-based fallback",
}


class Orchestrator:
    """
    Runs one request through the generation state machine.

    PROMPTING -> CALLING_LLM -> CLEANING -> [VALIDATING_PRESERVATION] ->
    STRUCTURAL_VALIDATION -> RESULT. Any failure jumps to the rule-based
    fallback, so every run ends with a usable diagram; only invalid input
    raises.
    """

    def __init__(self, chat_fn: Optional[ChatFn] = None, settings: Optional[Settings] = None):
        """
        Initialize orchestrator.

        Args:
            chat_fn: Completion function (messages in, text out); defaults
                to the configured LLM client
            settings: Settings override (defaults to the global settings)
        """
        self.chat_fn = chat_fn or chat
        self.settings = settings or get_settings()

    def generate(self, request: DiagramRequest) -> DiagramResult:
        """
        Validate the request and execute the pipeline.

        Raises:
            InputValidationError: If the message or format is rejected
        """
        validate_input(request.user_text, request.output_format, self.settings.max_input_length)
        return self.execute(Blackboard(request=request))

    def execute(self, board: Blackboard) -> DiagramResult:
        """
        Execute all stages on the blackboard.

        Args:
            board: Blackboard holding the request

        Returns:
            DiagramResult with the diagram and its provenance
        """
        request = board.request
        fmt = request.output_format

        self._enter(board, "PROMPTING")
        board.is_modification = is_modification(request.user_text, request.current_diagram)
        prompt = build_prompt(
            request.user_text,
            fmt,
            request.history,
            request.current_diagram,
            board.is_modification,
            context_size=self.settings.context_history_size,
        )
        board.messages = build_messages(prompt)
        logger.info(f"Request is_modification={board.is_modification}, format={fmt}")

        self._enter(board, "CALLING_LLM")
        try:
            board.raw_response = self.chat_fn(board.messages)
        except Exception as e:
            logger.warning(f"LLM call failed: {e}")
            board.error = str(e)
            return self._fallback(board, "fallback_llm_failed")

        self._enter(board, "CLEANING")
        candidate, issues = self._clean(board.raw_response or "", fmt)
        if issues:
            board.issues = [issue.message for issue in issues]
            logger.warning(f"LLM output unusable after cleanup: {board.issues}")
            logger.debug(f"Raw response: {(board.raw_response or '')[:LOG_TRUNCATE_LENGTH]}")
            return self._fallback(board, "fallback_invalid_output")
        board.candidate = candidate

        if board.is_modification and request.current_diagram and fmt == ER_FORMAT:
            self._enter(board, "VALIDATING_PRESERVATION")
            if not preserves_entities(candidate, request.current_diagram):
                board.issues = ["Modification did not preserve existing entities"]
                return self._fallback(board, "fallback_not_preserved")

        self._enter(board, "STRUCTURAL_VALIDATION")
        structure_issues = validate_diagram_structure(candidate, fmt)
        if structure_issues:
            board.issues = [issue.message for issue in structure_issues]
            logger.warning(f"Structural validation failed: {board.issues}")
            return self._fallback(board, "fallback_invalid_structure")

        self._enter(board, "RESULT")
        board.source = "llm"
        logger.info("Diagram generated by LLM")
        return DiagramResult(
            diagram_code=candidate,
            format=fmt,
            source="llm",
            message="Diagram modified" if board.is_modification else "Diagram generated",
            is_modification=board.is_modification,
        )

    def _enter(self, board: Blackboard, stage: Stage) -> None:
        logger.debug(f"Stage {board.stage} -> {stage}")
        board.stage = stage

    def _clean(self, raw: str, fmt: str) -> Tuple[str, List[DiagramIssue]]:
        """Cheap cleanup first; escalate to line extraction if it is not enough."""
        candidate = self._postprocess(clean_diagram_code(raw, fmt), fmt)
        issues = check_content(candidate, fmt)
        if not issues:
            return candidate, []

        logger.debug(f"Cheap cleanup insufficient ({[i.code for i in issues]}), extracting")
        candidate = self._postprocess(extract_diagram_from_response(raw, fmt), fmt)
        return candidate, check_content(candidate, fmt)

    @staticmethod
    def _postprocess(code: str, fmt: str) -> str:
        if fmt != ER_FORMAT:
            return code
        return remove_duplicate_relationships(normalize_entity_names(trim_trailing_prose(code)))

    def _fallback(self, board: Blackboard, reason: ResultSource) -> DiagramResult:
        request = board.request
        logger.info(f"Falling back to rule-based generation ({reason})")
        diagram = generate_fallback(
            request.user_text,
            request.history,
            request.current_diagram,
            request.output_format,
        )
        board.stage = "RESULT"
        board.source = reason
        board.candidate = diagram
        return DiagramResult(
            diagram_code=diagram,
            format=request.output_format,
            source=reason,
            message=FALLBACK_MESSAGES[reason],
            is_modification=board.is_modification,
            error=board.error or ("; ".join(board.issues) or None),
        )


def generate_diagram(
    user_text: str,
    output_format: str = ER_FORMAT,
    history: Optional[Sequence[Exchange]] = None,
    current_diagram: Optional[str] = None,
    chat_fn: Optional[ChatFn] = None,
) -> DiagramResult:
    """Convenience wrapper: build a request and run it through an Orchestrator."""
    validate_input(user_text, output_format)
    request = DiagramRequest(
        user_text=user_text,
        output_format=output_format,
        history=list(history or []),
        current_diagram=current_diagram,
    )
    return Orchestrator(chat_fn=chat_fn).generate(request)
