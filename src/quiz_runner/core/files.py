"""Question source file helpers."""

from __future__ import annotations

import logging
from pathlib import Path

__all__ = ["read_question_source"]

logger = logging.getLogger(__name__)


def read_question_source(path: Path) -> str:
    """Return the text of a question file, or ``""`` when it cannot be read.

    A missing asset is not an error for the caller: it is logged and the
    empty text yields an empty question set.
    """

    source = Path(path)
    try:
        with source.open("r", encoding="utf-8-sig", errors="replace") as fh:
            return fh.read()
    except FileNotFoundError:
        logger.error("Question source not found", extra={"source": source})
    except IsADirectoryError:
        logger.error(
            "Question source is a directory", extra={"source": source}
        )
    except PermissionError:
        logger.error(
            "Question source is not readable", extra={"source": source}
        )
    return ""
