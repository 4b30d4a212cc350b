"""Console transcript for interactive extraction sessions.

Questions and answers are printed as a chat log; extraction progress and
LLM timing go to a dimmed side channel on the same console.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from kextract.core.events import ExtractionEvent, ExtractionEventType
from kextract.core.types.knowledge import SchemaIssue
from kextract.llm.events import LLMEvent


class TranscriptDisplay:
    """Renders extraction events and LLM calls with Rich."""

    def __init__(self, console: Optional[Console] = None, show_progress: bool = True):
        self.console = console or Console()
        self.show_progress = show_progress
        self._rounds = 0

    def assistant(self, text: str) -> None:
        self.console.print(Text("assistant> ", style="bold blue") + Text(text))

    def prompt_user(self) -> str:
        return self.console.input("[bold green]you> [/bold green]")

    def show_issues(self, issues: Iterable[SchemaIssue]) -> None:
        table = Table(title="Schema errors", title_style="bold red")
        table.add_column("field")
        table.add_column("check")
        table.add_column("problem")
        table.add_column("value", style="dim")
        for issue in issues:
            table.add_row(issue.key or "-", issue.code, issue.message, repr(issue.value))
        self.console.print(table)

    def show_result(self, title: str, knowledge: Dict[str, Any], style: str = "green") -> None:
        table = Table(show_header=False, box=None)
        table.add_column(style="bold")
        table.add_column()
        for name, value in knowledge.items():
            table.add_row(name, repr(value))
        self.console.print(Panel(table, title=title, border_style=style))

    def on_extraction_event(self, event: ExtractionEvent) -> None:
        if not self.show_progress:
            return

        if event.event_type == ExtractionEventType.SESSION_START:
            mode = event.metadata.get("mode", "?")
            self._note(f"session started ({mode}), {len(event.outstanding)} fields to fill")

        elif event.event_type == ExtractionEventType.TURN_END:
            self._rounds = event.metadata.get("round", self._rounds)
            if event.merged:
                self._note(
                    f"round {self._rounds}: got {', '.join(event.merged)} "
                    f"({event.duration:.1f}s)"
                )
            else:
                self._note(f"round {self._rounds}: nothing new ({event.duration:.1f}s)")

        elif event.event_type == ExtractionEventType.PARSE_ERROR:
            self._note(f"unreadable model answer: {event.metadata.get('error', '')}", "yellow")

        elif event.event_type == ExtractionEventType.SESSION_ABORTED:
            self._note(f"gave up, still missing {', '.join(event.outstanding)}", "bold red")

        elif event.event_type == ExtractionEventType.SESSION_STOPPED:
            self._note("session stopped", "yellow")

    def on_llm_event(self, event: LLMEvent, is_start: bool) -> None:
        if not self.show_progress or is_start:
            return
        if event.error:
            self._note(f"model error: {event.error}", "bold red")
            return
        tokens = ""
        if event.usage:
            tokens = f" | {event.usage.input_tokens}+{event.usage.output_tokens} tok"
        self._note(f"model {event.duration:.1f}s{tokens}")

    def _note(self, text: str, style: str = "dim") -> None:
        self.console.print(Text(f"  · {text}", style=style))
