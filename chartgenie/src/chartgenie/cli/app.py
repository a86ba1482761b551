"""Typer CLI application."""

from pathlib import Path
from typing import Optional

import typer

from chartgenie.config.logging import setup_logging
from chartgenie.agents.tools.llm_client import check_llm_connection
from chartgenie.diagram.parser import parse_entities
from chartgenie.errors import InputValidationError
from chartgenie.ir.diagram import FORMAT_DESCRIPTIONS
from chartgenie.services.conversation import ConversationService

app = typer.Typer(help="ChartGenie: conversational ER diagrams from natural language")

CHAT_COMMANDS = "/history, /diagram, /clear, /quit"


def _service() -> ConversationService:
    return ConversationService()


def _echo_result(result) -> None:
    typer.echo(result.diagram_code)
    typer.echo(f"\n[{result.source}] {result.message}", err=True)


@app.command()
def generate(
    message: str,
    format: str = typer.Option("mermaid", "--format", "-f", help="Output format"),
    current: Optional[Path] = typer.Option(None, help="File holding the diagram to modify"),
    out: Optional[Path] = typer.Option(None, help="Write the diagram to this file"),
):
    """
    Generate a diagram from a single message.

    Args:
        message: Natural language description or edit request
        format: Output format (mermaid, tikz, pgf, plantuml)
        current: Optional diagram file to modify
        out: Optional output file
    """
    setup_logging(quiet=True)
    current_diagram = current.read_text(encoding="utf-8") if current else None

    try:
        result = _service().handle_message(message, format, current_diagram=current_diagram)
    except InputValidationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if out:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(result.diagram_code, encoding="utf-8")
        typer.echo(f"✓ Diagram written to {out} [{result.source}]")
    else:
        _echo_result(result)


@app.command()
def chat(format: str = typer.Option("mermaid", "--format", "-f", help="Output format")):
    """Hold a conversation that builds up one diagram."""
    setup_logging(quiet=True)
    service = _service()
    session_id: Optional[str] = None
    typer.echo(f"Describe your data model. Commands: {CHAT_COMMANDS}")

    while True:
        message = typer.prompt(">", prompt_suffix=" ").strip()
        if message == "/quit":
            break
        if message == "/clear":
            if session_id:
                service.clear_conversation(session_id)
            session_id = None
            typer.echo("Conversation cleared")
            continue
        if message in ("/history", "/diagram"):
            session = service.get_conversation(session_id) if session_id else None
            if session is None:
                typer.echo("No conversation yet")
            elif message == "/history":
                for exchange in session.history:
                    typer.echo(f"- {exchange.user_message} -> {exchange.assistant_summary}")
            else:
                typer.echo(session.current_diagram or "")
            continue

        try:
            result = service.handle_message(message, format, session_id=session_id)
        except InputValidationError as e:
            typer.echo(f"Error: {e}", err=True)
            continue
        session_id = result.session_id
        _echo_result(result)


@app.command()
def entities(diagram_file: Path):
    """List the entity blocks parsed from a diagram file."""
    parsed = parse_entities(diagram_file.read_text(encoding="utf-8"))
    if not parsed:
        typer.echo("No entities found", err=True)
        raise typer.Exit(1)
    for entity in parsed:
        typer.echo(f"{entity.name} ({len(entity.fields)} fields)")


@app.command()
def formats():
    """List supported output formats."""
    for name, description in FORMAT_DESCRIPTIONS.items():
        typer.echo(f"{name:<10} {description}")


@app.command("test-llm")
def test_llm():
    """Check that the configured LLM provider answers."""
    setup_logging(quiet=True)
    result = check_llm_connection()
    if result["status"] != "success":
        typer.echo(f"✗ LLM unavailable: {result['error']}", err=True)
        raise typer.Exit(1)
    typer.echo(f"✓ LLM reachable via {', '.join(result['providers'])}: {result['response']}")


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
