"""TOML configuration helpers shared by quiz-runner commands."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Mapping

__all__ = [
    "TomlConfigError",
    "load_toml",
    "merge_defaults",
    "write_toml_template",
]


class TomlConfigError(RuntimeError):
    """Raised when TOML config IO or validation fails."""


def load_toml(path: Path) -> dict[str, Any]:
    """Load a TOML document from ``path``.

    The file is decoded as UTF-8 with an optional byte order mark, matching
    how question files are read. Every failure is surfaced as
    :class:`TomlConfigError` so callers only have one exception to translate.
    """

    try:
        text = path.read_text(encoding="utf-8-sig")
    except FileNotFoundError as exc:
        raise TomlConfigError(f"Config file not found: {path}") from exc
    except IsADirectoryError as exc:
        raise TomlConfigError(f"Config path is a directory: {path}") from exc
    except PermissionError as exc:
        raise TomlConfigError(f"Config file not readable: {path}") from exc
    except UnicodeDecodeError as exc:
        raise TomlConfigError(f"Config file is not UTF-8: {path}") from exc
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise TomlConfigError(f"Failed to parse config TOML: {exc}") from exc


def merge_defaults(
    defaults: Mapping[str, Any],
    override: Mapping[str, Any],
    *,
    path: str = "",
) -> dict[str, Any]:
    """Return ``defaults`` with ``override`` layered on top.

    Only keys present in ``defaults`` are accepted, and tables must stay
    tables. ``defaults`` itself is left untouched.
    """

    merged = {
        key: dict(value) if isinstance(value, Mapping) else value
        for key, value in defaults.items()
    }
    for key, value in override.items():
        dotted = f"{path}{key}"
        if key not in merged:
            raise TomlConfigError(f"Unknown configuration key '{dotted}'.")
        current = merged[key]
        if isinstance(current, Mapping):
            if not isinstance(value, Mapping):
                raise TomlConfigError(
                    f"Expected table for '{dotted}', found "
                    f"{type(value).__name__}."
                )
            merged[key] = merge_defaults(current, value, path=f"{dotted}.")
        elif isinstance(value, Mapping):
            raise TomlConfigError(f"Unexpected table for '{dotted}'.")
        else:
            merged[key] = value
    return merged


def write_toml_template(
    path: Path,
    *,
    template: str,
    overwrite: bool = False,
) -> Path:
    """Write ``template`` to ``path`` unless it exists and ``overwrite`` is off.

    The template must parse as TOML; the file is staged next to ``path`` and
    moved into place so a failed write never leaves a half-written config.
    """

    try:
        tomllib.loads(template)
    except tomllib.TOMLDecodeError as exc:
        raise TomlConfigError(f"Template is not valid TOML: {exc}") from exc
    if path.exists() and not overwrite:
        raise TomlConfigError(f"Config already exists: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    staging = path.with_name(f".{path.name}.tmp")
    staging.write_text(template, encoding="utf-8")
    staging.replace(path)
    return path
