"""Rich-powered console driver for a :class:`QuizSession`.

The loop renders the session snapshot, reads one command per round, feeds the
wall time spent waiting to ``tick`` and applies the command. Rendering is
stateless: everything shown comes from ``snapshot()``.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Literal

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .session import QuizSession, QuizSummary, SessionSnapshot

InputProvider = Callable[[], str]
Clock = Callable[[], float]
ExitAction = Literal["finished", "quit", "empty"]

CHOICE_KEYS = "ABCD"


@dataclass(frozen=True)
class SessionCommand:
    """Normalized user command parsed from console input."""

    type: Literal["select", "hint", "next", "quit"]
    choice: int | None = None


@dataclass(frozen=True)
class ConsoleRunResult:
    """Return value from ``run_console_quiz``."""

    summary: QuizSummary
    exit_action: ExitAction


def format_elapsed(seconds: float, precision: int = 1) -> str:
    return f"Time: {seconds:.{precision}f}s"


def choice_label(index: int) -> str:
    if 0 <= index < len(CHOICE_KEYS):
        return CHOICE_KEYS[index]
    return str(index + 1)


def parse_session_command(raw: str | None) -> SessionCommand | None:
    """Parse raw user input into a structured command."""

    if raw is None:
        return None
    text = raw.strip().lower()
    if not text:
        return None
    if text in {"h", "hint"}:
        return SessionCommand("hint")
    if text in {"n", "next"}:
        return SessionCommand("next")
    if text in {"q", "quit", "exit"}:
        return SessionCommand("quit")
    if text.isdigit():
        return SessionCommand("select", int(text) - 1)
    if len(text) == 1 and text.upper() in CHOICE_KEYS:
        return SessionCommand("select", CHOICE_KEYS.index(text.upper()))
    return None


def run_console_quiz(
    session: QuizSession,
    console: Console,
    input_provider: InputProvider,
    *,
    clock: Clock = time.monotonic,
    time_precision: int = 1,
) -> ConsoleRunResult:
    """Drive ``session`` from typed commands until it finishes or the user quits."""

    session.start()
    if session.is_finished():
        console.print(
            Panel(
                "No questions loaded.",
                title="Quiz",
                border_style="yellow",
            )
        )
        _render_finished(console, session.summary())
        return ConsoleRunResult(session.summary(), "empty")

    exit_action: ExitAction = "finished"
    while not session.is_finished():
        _render_snapshot(console, session.snapshot(), time_precision)
        waited_from = clock()
        try:
            raw = input_provider()
        except (EOFError, KeyboardInterrupt, StopIteration):
            console.print("\n[bold yellow]Session interrupted.[/]")
            exit_action = "quit"
            break
        session.tick(clock() - waited_from)

        command = parse_session_command(raw)
        if command is None:
            console.print("[red]Unrecognized command. Try again.[/]")
            continue
        if command.type == "quit":
            console.print("\n[bold yellow]Ending quiz early.[/]")
            exit_action = "quit"
            break
        _apply_command(command, session, console)

    summary = session.summary()
    _render_finished(console, summary)
    return ConsoleRunResult(summary, exit_action)


def _apply_command(
    command: SessionCommand, session: QuizSession, console: Console
) -> None:
    if command.type == "select" and command.choice is not None:
        snapshot = session.snapshot()
        choices = snapshot.question.choices if snapshot.question else ()
        if not 0 <= command.choice < len(choices):
            console.print("[red]That is not a choice for this question.[/]")
            return
        outcome = session.select_answer(command.choice)
        if outcome is True:
            console.print("[bold green]Correct![/]")
        elif outcome is False:
            console.print("[bold red]Wrong![/]")
        elif snapshot.is_answered:
            console.print("[dim]Already answered. Type n for next.[/]")
        else:
            console.print("[dim]That choice was removed by the hint.[/]")
        return
    if command.type == "hint":
        disabled = session.use_hint()
        if disabled is None:
            console.print("[dim]No hint available.[/]")
        else:
            console.print(
                f"Hint: choice [bold]{choice_label(disabled)}[/] is wrong."
            )
        return
    if command.type == "next":
        if not session.advance():
            console.print("[dim]Answer the question first.[/]")


def _render_snapshot(
    console: Console, snapshot: SessionSnapshot, time_precision: int
) -> None:
    question = snapshot.question
    if question is None:
        return
    header = Text.assemble(
        (f"Question {snapshot.index + 1}", "bold cyan"),
        (f" / {snapshot.total}", "dim"),
    )
    console.print()
    console.rule(header)
    console.print(Text(question.prompt, style="bold"))

    table = Table(show_header=False, box=box.SIMPLE, expand=True)
    table.add_column("Key", justify="center", style="cyan")
    table.add_column("Choice")
    for idx, text in enumerate(question.choices):
        row = Text(text)
        if snapshot.is_answered and idx == question.correct_index:
            row.stylize("bold green")
        elif snapshot.is_answered and idx == snapshot.selected_index:
            row.stylize("bold red")
        elif not snapshot.choice_enabled(idx):
            row.stylize("dim strike")
        table.add_row(choice_label(idx), row)
    console.print(table)

    console.print(
        Text(
            f"Score: {snapshot.score} | Coins: {snapshot.coins} | "
            f"{format_elapsed(snapshot.elapsed, time_precision)}",
            style="dim",
        )
    )
    if snapshot.is_answered:
        console.print(Text("Commands: n (next), quit", style="dim"))
    else:
        hint = ", h (hint)" if snapshot.hint_available else ""
        keys = ", ".join(
            choice_label(idx) for idx in range(len(question.choices))
        )
        console.print(
            Text(f"Commands: choices [{keys}]{hint}, quit", style="dim")
        )


def _render_finished(console: Console, summary: QuizSummary) -> None:
    console.print()
    console.rule(Text("Quiz Finished!", style="bold magenta"))

    overview = Table(
        show_header=False,
        box=box.MINIMAL_DOUBLE_HEAD,
        expand=False,
    )
    overview.add_column("Metric", style="bold")
    overview.add_column("Value", justify="right")
    overview.add_row("Questions", str(summary.total_questions))
    overview.add_row("Answered", str(summary.answered_questions))
    overview.add_row("Correct", str(summary.correct_answers))
    overview.add_row("Accuracy", f"{summary.accuracy * 100:.1f}%")
    overview.add_row("Hints used", str(summary.hints_used))
    overview.add_row("Score", str(summary.score))
    overview.add_row("Coins", str(summary.coins))
    console.print(overview)
