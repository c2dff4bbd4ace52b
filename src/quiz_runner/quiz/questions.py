"""Parse comma-separated question files into ``QuizQuestion`` records.

The expected layout is one header line followed by one question per line::

    prompt,choice1,choice2,choice3,choice4,correctIndex

The header is always discarded. Rows with fewer than six fields are skipped
so trailing blank lines or truncated rows do not abort a load, while a row
with an unusable answer index raises :class:`ParseError`. Fields are split on
every comma; quoting is not supported.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from ..core.files import read_question_source

__all__ = [
    "CHOICE_COUNT",
    "ParseError",
    "QuizQuestion",
    "iter_question_rows",
    "load_question_set",
    "parse_question_set",
]

logger = logging.getLogger(__name__)

DELIMITER = ","
CHOICE_COUNT = 4
MIN_FIELDS = CHOICE_COUNT + 2


class ParseError(ValueError):
    """Raised when an otherwise well-shaped row has a bad answer index.

    That covers an index that is not an integer and one that does not name
    one of the four choices (outside ``0..3``).
    """

    def __init__(self, message: str, *, line_number: int, line: str) -> None:
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number
        self.line = line


@dataclass(frozen=True)
class QuizQuestion:
    """Immutable multiple-choice question."""

    prompt: str
    choices: tuple[str, ...]
    correct_index: int

    def __post_init__(self) -> None:
        if not self.choices:
            raise ValueError("A question needs at least one choice.")
        if not 0 <= self.correct_index < len(self.choices):
            raise ValueError(
                f"correct_index {self.correct_index} is outside "
                f"0..{len(self.choices) - 1}"
            )

    @property
    def correct_choice(self) -> str:
        return self.choices[self.correct_index]

    def wrong_indexes(self) -> list[int]:
        return [
            idx for idx in range(len(self.choices)) if idx != self.correct_index
        ]


def iter_question_rows(text: str) -> Iterator[tuple[int, str, list[str]]]:
    """Yield ``(line_number, line, fields)`` for every row after the header.

    Lines end only at ``\\n``, ``\\r`` or ``\\r\\n``; other characters that
    :meth:`str.splitlines` treats as breaks stay inside the field.
    """

    lines = io.StringIO(text, newline=None)
    for line_number, line in enumerate(lines, start=1):
        if line_number == 1:
            continue
        line = line.removesuffix("\n")
        yield line_number, line, line.split(DELIMITER)


def parse_question_set(text: str) -> list[QuizQuestion]:
    """Parse ``text`` into questions in file order."""

    questions: list[QuizQuestion] = []
    skipped = 0
    for line_number, line, fields in iter_question_rows(text):
        if len(fields) < MIN_FIELDS:
            skipped += 1
            logger.debug(
                "Skipped short question row",
                extra={"line_number": line_number, "field_count": len(fields)},
            )
            continue
        questions.append(_build_question(line_number, line, fields))

    logger.debug(
        "Parsed question set",
        extra={"question_count": len(questions), "skipped_rows": skipped},
    )
    return questions


def load_question_set(path: Path) -> list[QuizQuestion]:
    """Read and parse a question file; a missing file yields no questions."""

    return parse_question_set(read_question_source(path))


def _build_question(
    line_number: int, line: str, fields: list[str]
) -> QuizQuestion:
    raw_index = fields[CHOICE_COUNT + 1]
    try:
        correct_index = int(raw_index)
    except ValueError as exc:
        raise ParseError(
            f"answer index {raw_index!r} is not an integer",
            line_number=line_number,
            line=line,
        ) from exc
    if not 0 <= correct_index < CHOICE_COUNT:
        raise ParseError(
            f"answer index {correct_index} is outside 0..{CHOICE_COUNT - 1}",
            line_number=line_number,
            line=line,
        )
    return QuizQuestion(
        prompt=fields[0],
        choices=tuple(fields[1 : CHOICE_COUNT + 1]),
        correct_index=correct_index,
    )
