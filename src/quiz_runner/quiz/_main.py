import argparse
import logging
import random
import sys
from pathlib import Path
from typing import Optional, Sequence, Tuple

from rich import box
from rich.console import Console
from rich.table import Table

from ..core import (
    TomlConfigError,
    configure_logger,
    ensure_workspace,
    read_question_source,
    write_toml_template,
)
from ..core.workspace import WorkspaceError
from .config import (
    CONFIG_TEMPLATE,
    ConfigOverrides,
    LoadResult,
    QuizConfigError,
    default_config_path,
    load_config,
)
from .console import choice_label, run_console_quiz
from .questions import ParseError, load_question_set, parse_question_set
from .session import QuizSession


def _add_session_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "source",
        nargs="?",
        type=Path,
        help="CSV question file (defaults to questions.source in config).",
    )
    parser.add_argument("--config", type=Path, help="Path to a TOML config.")
    parser.add_argument(
        "--workspace",
        type=Path,
        help="Override the workspace root holding config and logs.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for hint selection, for reproducible runs.",
    )
    parser.add_argument("--log-level", help="Logging level for the run.")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Mirror log records to stderr.",
    )


def build_play_parser(prog: str = "quiz play") -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog=prog, description="Play a quiz in the terminal."
    )
    _add_session_arguments(p)
    return p


def build_tui_parser(prog: str = "quiz tui") -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog=prog, description="Play a quiz in a Textual interface."
    )
    _add_session_arguments(p)
    return p


def _prepare_session(
    args: argparse.Namespace,
) -> Tuple[Optional[QuizSession], Optional[LoadResult], int]:
    overrides = ConfigOverrides(
        source=args.source,
        seed=args.seed,
        log_level=args.log_level,
    )
    try:
        loaded = load_config(
            config_path=args.config,
            overrides=overrides,
            workspace_path=args.workspace,
        )
    except QuizConfigError as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return None, None, 2

    logger, _ = configure_logger(
        "quiz_runner",
        log_dir=loaded.layout.path_for("logs"),
        level=loaded.config.log_level,
        verbose=bool(args.verbose),
    )
    try:
        questions = load_question_set(loaded.config.source)
    except ParseError as exc:
        logger.error(
            "Invalid question file",
            extra={
                "source": loaded.config.source,
                "line_number": exc.line_number,
            },
        )
        sys.stderr.write(
            f"Error: invalid question file {loaded.config.source}: {exc}\n"
        )
        return None, loaded, 1

    logger.info(
        "Loaded questions",
        extra={
            "source": loaded.config.source,
            "question_count": len(questions),
        },
    )
    session = QuizSession(questions, rng=random.Random(loaded.config.seed))
    return session, loaded, 0


def play_main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_play_parser().parse_args(argv)
    session, loaded, code = _prepare_session(args)
    if session is None or loaded is None:
        return code
    console = Console()
    result = run_console_quiz(
        session,
        console,
        lambda: console.input("[bold]> [/]"),
        time_precision=loaded.config.time_precision,
    )
    logging.getLogger("quiz_runner").info(
        "Console session ended", extra={"exit_action": result.exit_action}
    )
    return 0


def tui_main(argv: Optional[Sequence[str]] = None) -> int:
    from .app import QuizApp

    args = build_tui_parser().parse_args(argv)
    session, loaded, code = _prepare_session(args)
    if session is None or loaded is None:
        return code
    app = QuizApp(session, time_precision=loaded.config.time_precision)
    app.run()
    return 0


def check_main(argv: Optional[Sequence[str]] = None) -> int:
    """Parse a question file and list what a session would present."""
    p = argparse.ArgumentParser(
        prog="quiz check", description="Validate a CSV question file."
    )
    p.add_argument("source", type=Path)
    args = p.parse_args(argv)

    source: Path = args.source
    if not source.is_file():
        sys.stderr.write(f"Error: question file not found: {source}\n")
        return 1
    try:
        questions = parse_question_set(read_question_source(source))
    except ParseError as exc:
        sys.stderr.write(f"Error: {source}: {exc}\n")
        return 1
    if not questions:
        print("No questions found.")
        return 1

    table = Table(title=str(source), box=box.SIMPLE, expand=False)
    table.add_column("#", justify="right")
    table.add_column("Prompt", overflow="fold")
    table.add_column("Answer")
    for idx, question in enumerate(questions, start=1):
        table.add_row(
            str(idx),
            question.prompt,
            f"{choice_label(question.correct_index)}) "
            f"{question.correct_choice}",
        )
    console = Console()
    console.print(table)
    console.print(f"{len(questions)} question(s) OK.")
    return 0


def init_main(argv: Optional[Sequence[str]] = None) -> int:
    p = argparse.ArgumentParser(
        prog="quiz init",
        description="Write the default quiz_runner.toml to the workspace.",
    )
    p.add_argument("--workspace", type=Path)
    p.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing config file.",
    )
    args = p.parse_args(argv)

    try:
        layout = ensure_workspace(path=args.workspace)
    except WorkspaceError as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 2
    target = default_config_path(layout)
    try:
        write_toml_template(
            target, template=CONFIG_TEMPLATE, overwrite=bool(args.force)
        )
    except TomlConfigError as exc:
        sys.stderr.write(f"{exc}. Use --force to overwrite.\n")
        return 1
    print(f"Created template {target}")
    return 0
