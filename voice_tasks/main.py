"""
Main CLI interface for voice-tasks.

This module provides the Typer-based command-line interface with commands for:
- Interpreting task-creation sentences into task drafts
- Interpreting queries into filter specs
- Showing the effective keyword lexicons
"""

import json
import logging
import os
import sys
from datetime import datetime
from typing import Optional

import pyperclip
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .core.config import ConfigError, load_env_file
from .core.interpret import UtteranceInterpreter
from .core.lexicon import get_lexicons, iter_tables
from .core.query import QueryInterpreter
from .core.review import missing_fields, recognized_summary
from .core.types import FilterSpec, TaskDraft

app = typer.Typer(
    name="voice-tasks",
    help="Voice task parser CLI - Turn spoken task sentences and questions into structured tasks and filters",
    no_args_is_help=True,
)

console = Console()
logger = logging.getLogger(__name__)

UNKNOWN_QUERY_HINT = "I couldn't understand that query. Try something like:\n\n• Show today's high priority tasks\n• I have 15 minutes"


def _parse_now(value: Optional[str]) -> Optional[datetime]:
    """Parse the --now option as an ISO timestamp."""
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Expected an ISO timestamp such as 2024-03-01T09:00, got {value!r}", param_hint="--now")


def _prepare(env_file: Optional[str], debug: bool) -> None:
    """Load the env file and apply the debug flag. CLI flag always overrides .env."""
    load_env_file(env_file)
    if debug:
        os.environ["VT_DEBUG"] = "1"


def _copy_to_clipboard(payload: str) -> None:
    try:
        pyperclip.copy(payload)
    except Exception as e:
        # Clipboard access is optional; headless systems have none
        logger.debug("Clipboard copy failed: %s", e)


@app.command()
def parse(
    text: str = typer.Argument(..., help="Task sentence to interpret"),
    now: Optional[str] = typer.Option(None, "--now", help="Reference time as ISO timestamp (default: current time)"),
    output_format: str = typer.Option("rich", "--format", "-f", help="Output format (rich, json)"),
    copy: bool = typer.Option(False, "--copy", help="Copy the JSON result to the clipboard"),
    debug: bool = typer.Option(False, "--debug", help="Write JSON traces of the interpretation"),
    env_file: Optional[str] = typer.Option(None, "--env-file", help="Path to a .env file to load"),
):
    """
    Interpret a task-creation sentence.

    Examples:
        voice-tasks parse "urgent meeting tomorrow at 3pm remind me 10 minutes before"
        voice-tasks parse "add a task to call mom" --format json
    """
    reference = _parse_now(now)
    try:
        _prepare(env_file, debug)
        draft = UtteranceInterpreter(get_lexicons()).interpret(text, reference)
    except ConfigError as e:
        console.print(f"[bold red]Configuration Error:[/bold red] {e}")
        sys.exit(1)

    payload = json.dumps(draft.model_dump(mode="json", by_alias=True), indent=2)
    if copy:
        _copy_to_clipboard(payload)

    if output_format == "json":
        console.print(payload, soft_wrap=True, markup=False, highlight=False, emoji=False)
        return
    _display_draft(draft)


@app.command()
def query(
    text: str = typer.Argument(..., help="Query sentence to interpret"),
    now: Optional[str] = typer.Option(None, "--now", help="Reference time as ISO timestamp (default: current time)"),
    output_format: str = typer.Option("rich", "--format", "-f", help="Output format (rich, json)"),
    copy: bool = typer.Option(False, "--copy", help="Copy the JSON result to the clipboard"),
    debug: bool = typer.Option(False, "--debug", help="Write JSON traces of the interpretation"),
    env_file: Optional[str] = typer.Option(None, "--env-file", help="Path to a .env file to load"),
):
    """
    Interpret a task query.

    Examples:
        voice-tasks query "show today's high priority tasks"
        voice-tasks query "I have 15 minutes" --format json
    """
    reference = _parse_now(now)
    try:
        _prepare(env_file, debug)
        spec = QueryInterpreter(get_lexicons()).interpret(text, reference)
    except ConfigError as e:
        console.print(f"[bold red]Configuration Error:[/bold red] {e}")
        sys.exit(1)

    payload = json.dumps(spec.model_dump(mode="json", by_alias=True, exclude_none=True), indent=2)
    if copy:
        _copy_to_clipboard(payload)

    if output_format == "json":
        console.print(payload, soft_wrap=True, markup=False, highlight=False, emoji=False)
        return
    _display_query(spec)


@app.command()
def lexicon(
    env_file: Optional[str] = typer.Option(None, "--env-file", help="Path to a .env file to load"),
):
    """
    Show the effective keyword lexicons, including any VT_LEXICON_FILE overrides.
    """
    try:
        load_env_file(env_file)
        lexicons = get_lexicons()
    except ConfigError as e:
        console.print(f"[bold red]Configuration Error:[/bold red] {e}")
        sys.exit(1)

    for name, table in iter_tables(lexicons):
        lex_table = Table(title=name.replace("_", " ").title())
        lex_table.add_column("Key", style="cyan")
        lex_table.add_column("Value", style="white")
        for key, value in table.items():
            lex_table.add_row(key, ", ".join(value) if isinstance(value, list) else str(value))
        console.print(lex_table)


def _display_draft(draft: TaskDraft) -> None:
    """Display a task draft as a table with follow-up notes."""
    draft_table = Table(show_header=False, box=None)
    draft_table.add_column("Field", style="cyan")
    draft_table.add_column("Value", style="white")

    draft_table.add_row("Name", draft.name)
    draft_table.add_row("Priority", draft.priority)
    draft_table.add_row("Category", draft.category or "-")
    draft_table.add_row("Due", draft.due_date.strftime("%Y-%m-%d %H:%M") if draft.due_date else "-")
    draft_table.add_row("Reminder", f"{draft.reminder_minutes}m before" if draft.reminder_minutes is not None else "-")
    reminder_time = draft.reminder_time()
    if reminder_time is not None:
        draft_table.add_row("Reminds at", reminder_time.strftime("%Y-%m-%d %H:%M"))
    draft_table.add_row("Complete", "Yes" if draft.is_complete else "No")

    console.print("\n[bold green]Task Draft:[/bold green]")
    console.print(Panel(draft_table, border_style="green"))

    missing = missing_fields(draft)
    if missing:
        console.print(f"\n[yellow]I understood:[/yellow] {recognized_summary(draft)}")
        console.print(f"[yellow]Missing:[/yellow] {', '.join(missing)}")


def _display_query(spec: FilterSpec) -> None:
    """Display a filter spec."""
    if spec.type == "unknown":
        console.print(Panel(UNKNOWN_QUERY_HINT, title="Unclear Query", border_style="yellow"))
        return

    if spec.type == "time-based":
        console.print(f"[bold green]Time available:[/bold green] {spec.time_available} minutes")
        return

    filter_table = Table(title="Task Filter")
    filter_table.add_column("Criterion", style="cyan")
    filter_table.add_column("Value", style="white")
    criteria = spec.filter.model_dump(exclude_none=True) if spec.filter else {}
    for key, value in criteria.items():
        filter_table.add_row(key.title(), str(value))
    console.print(filter_table)


if __name__ == "__main__":
    app()
