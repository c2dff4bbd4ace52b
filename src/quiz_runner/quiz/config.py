"""Configuration loader for quiz sessions."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from quiz_runner.core import config as core_config
from quiz_runner.core import workspace as workspace_mod

CONFIG_FILENAME = "quiz_runner.toml"
CONFIG_ENV = "QUIZ_RUNNER_CONFIG"
ENV_PREFIX = "QUIZ_RUNNER_"

_DEFAULT_SOURCE = "questions.csv"
_DEFAULT_TIME_PRECISION = 1
_DEFAULT_LOG_LEVEL = "INFO"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

CONFIG_TEMPLATE = """\
# quiz-runner configuration

[questions]
# CSV question file; relative paths resolve against the workspace root.
source = "questions.csv"

[session]
# Uncomment to make hint choices reproducible.
# seed = 1234

[display]
# Decimal places shown on the per-question timer.
time_precision = 1

[logging]
level = "INFO"
"""


class QuizConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""


@dataclass(frozen=True)
class QuizConfig:
    """Fully resolved configuration for a quiz run."""

    source: Path
    seed: Optional[int]
    time_precision: int
    log_level: str


@dataclass(frozen=True)
class ConfigOverrides:
    """CLI-sourced overrides applied on top of file/env options."""

    source: Optional[Path] = None
    seed: Optional[int] = None
    log_level: Optional[str] = None


@dataclass(frozen=True)
class LoadResult:
    """Resolved configuration plus the workspace it was read from."""

    config: QuizConfig
    layout: workspace_mod.WorkspaceLayout
    config_path: Optional[Path]


def load_config(
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[ConfigOverrides] = None,
    env: Optional[Mapping[str, str]] = None,
    workspace_path: Optional[Path] = None,
) -> LoadResult:
    """Load configuration applying precedence CLI > env > TOML > defaults."""

    overrides = overrides or ConfigOverrides()
    env_map = os.environ if env is None else env

    try:
        layout = workspace_mod.ensure_workspace(
            env=env_map, path=workspace_path
        )
    except workspace_mod.WorkspaceError as exc:
        raise QuizConfigError(str(exc)) from exc

    requested = _resolve_config_path(config_path, env_map, layout)
    table = _default_table()
    loaded_path: Optional[Path] = None
    if requested.exists():
        try:
            table = core_config.merge_defaults(
                table, core_config.load_toml(requested)
            )
        except core_config.TomlConfigError as exc:
            raise QuizConfigError(str(exc)) from exc
        loaded_path = requested
    elif config_path is not None or env_map.get(CONFIG_ENV, "").strip():
        raise QuizConfigError(f"Config file not found: {requested}")

    source = _pick_first(
        overrides.source,
        _env_path(env_map, "SOURCE"),
        _coerce_source(table["questions"]["source"]),
    )
    seed = _pick_first(
        overrides.seed,
        _env_int(env_map, "SEED"),
        _coerce_seed(table["session"]["seed"]),
    )
    log_level = _normalize_log_level(
        _pick_first(
            overrides.log_level,
            _env_string(env_map, "LOG_LEVEL"),
            table["logging"]["level"],
        )
    )

    config = QuizConfig(
        source=layout.resolve(source),
        seed=seed,
        time_precision=_coerce_precision(table["display"]["time_precision"]),
        log_level=log_level,
    )
    return LoadResult(config=config, layout=layout, config_path=loaded_path)


def default_config_path(layout: workspace_mod.WorkspaceLayout) -> Path:
    return layout.path_for("config") / CONFIG_FILENAME


def _default_table() -> dict[str, Any]:
    return {
        "questions": {"source": _DEFAULT_SOURCE},
        "session": {"seed": None},
        "display": {"time_precision": _DEFAULT_TIME_PRECISION},
        "logging": {"level": _DEFAULT_LOG_LEVEL},
    }


def _resolve_config_path(
    config_path: Optional[Path],
    env_map: Mapping[str, str],
    layout: workspace_mod.WorkspaceLayout,
) -> Path:
    if config_path is not None:
        return config_path.expanduser()
    env_candidate = env_map.get(CONFIG_ENV, "").strip()
    if env_candidate:
        return Path(env_candidate).expanduser()
    return default_config_path(layout)


def _pick_first(*values):
    for value in values:
        if value is not None:
            return value
    return None


def _env_string(env_map: Mapping[str, str], key: str) -> Optional[str]:
    raw = env_map.get(f"{ENV_PREFIX}{key}")
    if raw is None or not raw.strip():
        return None
    return raw.strip()


def _env_path(env_map: Mapping[str, str], key: str) -> Optional[Path]:
    raw = _env_string(env_map, key)
    return Path(raw) if raw is not None else None


def _env_int(env_map: Mapping[str, str], key: str) -> Optional[int]:
    raw = _env_string(env_map, key)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise QuizConfigError(
            f"{ENV_PREFIX}{key} must be an integer, got {raw!r}."
        ) from exc


def _coerce_source(value: object) -> Path:
    if isinstance(value, str) and value.strip():
        return Path(value.strip())
    raise QuizConfigError("questions.source must be a non-empty string.")


def _coerce_seed(value: object) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise QuizConfigError("session.seed must be an integer.")
    return value


def _coerce_precision(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise QuizConfigError(
            "display.time_precision must be a non-negative integer."
        )
    return value


def _normalize_log_level(value: object) -> str:
    if not isinstance(value, str):
        raise QuizConfigError("logging.level must be a string.")
    normalized = value.strip().upper()
    if normalized not in _LOG_LEVELS:
        expected = ", ".join(_LOG_LEVELS)
        raise QuizConfigError(
            f"Unknown log level '{value}'. Expected one of: {expected}."
        )
    return normalized
