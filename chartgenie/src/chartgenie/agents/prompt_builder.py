"""Build the chat messages sent to the LLM."""

from typing import Dict, List, Optional, Sequence

from chartgenie.constants import ER_FORMAT
from chartgenie.ir.conversation import Exchange
from chartgenie.prompts.loader import load_prompt, render_prompt


def build_context(history: Sequence[Exchange], size: int) -> str:
    """Quote the last few user messages as conversation context."""
    recent = list(history)[-size:] if size > 0 else []
    if not recent:
        return ""
    lines = ["", "Conversation context:"]
    lines.extend(f'- User said: "{exchange.user_message}"' for exchange in recent)
    return "\n".join(lines) + "\n"


def build_prompt(
    user_text: str,
    output_format: str,
    history: Sequence[Exchange],
    current_diagram: Optional[str],
    modification: bool,
    context_size: int = 3,
) -> str:
    """
    Render the user prompt for one request.

    Args:
        user_text: The user's message
        output_format: Requested output format
        history: Earlier exchanges of the conversation
        current_diagram: Diagram currently shown to the user, if any
        modification: Whether the message edits the current diagram
        context_size: How many earlier user messages to quote

    Returns:
        Prompt text
    """
    if output_format == ER_FORMAT:
        if modification and current_diagram:
            return render_prompt(
                load_prompt("diagram/modify_user.txt"),
                CURRENT_DIAGRAM=current_diagram,
                USER_REQUEST=user_text,
            )
        return render_prompt(
            load_prompt("diagram/create_user.txt"),
            CONTEXT=build_context(history, context_size),
            USER_REQUEST=user_text,
        )

    existing = f"\nExisting diagram:\n{current_diagram}\n" if current_diagram else ""
    return render_prompt(
        load_prompt("diagram/passthrough_user.txt"),
        OUTPUT_FORMAT=output_format,
        USER_REQUEST=user_text,
        EXISTING=existing,
    )


def build_messages(user_prompt: str) -> List[Dict[str, str]]:
    """Pair the fixed system instruction with the rendered user prompt."""
    return [
        {"role": "system", "content": load_prompt("diagram/system.txt").strip()},
        {"role": "user", "content": user_prompt},
    ]
