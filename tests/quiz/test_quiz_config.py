from __future__ import annotations

from pathlib import Path

import pytest

from quiz_runner.quiz import config as cfg


def test_load_config_defaults_use_workspace(tmp_path):
    workspace_root = tmp_path / "workspace"

    result = cfg.load_config(env={}, workspace_path=workspace_root)

    assert result.layout.home == workspace_root
    assert result.config_path is None
    assert result.config.source == (workspace_root / "questions.csv").resolve()
    assert result.config.seed is None
    assert result.config.time_precision == 1
    assert result.config.log_level == "INFO"
    assert (workspace_root / "logs").is_dir()


def test_load_config_reads_workspace_file(tmp_path):
    workspace_root = tmp_path / "ws"
    config_file = workspace_root / "config" / cfg.CONFIG_FILENAME
    config_file.parent.mkdir(parents=True)
    config_file.write_text(
        """
        [questions]
        source = "decks/geo.csv"

        [session]
        seed = 42

        [display]
        time_precision = 2

        [logging]
        level = "warning"
        """.strip()
        + "\n",
        encoding="utf-8",
    )

    result = cfg.load_config(env={}, workspace_path=workspace_root)

    assert result.config_path == config_file
    assert result.config.source == (workspace_root / "decks/geo.csv").resolve()
    assert result.config.seed == 42
    assert result.config.time_precision == 2
    assert result.config.log_level == "WARNING"


def test_env_overrides_file_and_cli_overrides_env(tmp_path):
    workspace_root = tmp_path / "env-ws"
    config_file = tmp_path / "custom.toml"
    config_file.write_text("[session]\nseed = 1\n", encoding="utf-8")
    env = {
        cfg.CONFIG_ENV: str(config_file),
        "QUIZ_RUNNER_SEED": "5",
        "QUIZ_RUNNER_SOURCE": str(tmp_path / "env.csv"),
        "QUIZ_RUNNER_LOG_LEVEL": "debug",
    }

    from_env = cfg.load_config(env=env, workspace_path=workspace_root)
    assert from_env.config_path == config_file
    assert from_env.config.seed == 5
    assert from_env.config.source == tmp_path / "env.csv"
    assert from_env.config.log_level == "DEBUG"

    overrides = cfg.ConfigOverrides(
        source=Path("cli.csv"), seed=9, log_level="error"
    )
    from_cli = cfg.load_config(
        env=env, workspace_path=workspace_root, overrides=overrides
    )
    assert from_cli.config.seed == 9
    assert from_cli.config.source == (workspace_root / "cli.csv").resolve()
    assert from_cli.config.log_level == "ERROR"


def test_explicit_missing_config_is_an_error(tmp_path):
    with pytest.raises(cfg.QuizConfigError, match="not found"):
        cfg.load_config(
            config_path=tmp_path / "nope.toml",
            env={},
            workspace_path=tmp_path / "ws",
        )


@pytest.mark.parametrize(
    "body, message",
    [
        ("[questions]\nsurce = 'x'\n", "Unknown configuration key"),
        ("questions = 3\n", "Expected table"),
        ("[session]\nseed = 'abc'\n", "session.seed"),
        ("[display]\ntime_precision = -1\n", "time_precision"),
        ("[logging]\nlevel = 'loud'\n", "Unknown log level"),
        ("[questions]\nsource = ''\n", "questions.source"),
        ("[questions\n", "Failed to parse"),
    ],
)
def test_invalid_config_values(tmp_path, body, message):
    config_file = tmp_path / "bad.toml"
    config_file.write_text(body, encoding="utf-8")

    with pytest.raises(cfg.QuizConfigError, match=message):
        cfg.load_config(
            config_path=config_file, env={}, workspace_path=tmp_path / "ws"
        )


def test_invalid_env_seed(tmp_path):
    with pytest.raises(cfg.QuizConfigError, match="QUIZ_RUNNER_SEED"):
        cfg.load_config(
            env={"QUIZ_RUNNER_SEED": "soon"}, workspace_path=tmp_path / "ws"
        )


def test_template_matches_defaults(tmp_path):
    workspace_root = tmp_path / "tpl"
    target = workspace_root / "config" / cfg.CONFIG_FILENAME
    target.parent.mkdir(parents=True)
    target.write_text(cfg.CONFIG_TEMPLATE, encoding="utf-8")

    result = cfg.load_config(env={}, workspace_path=workspace_root)

    assert result.config_path == target
    assert result.config.seed is None
    assert result.config.time_precision == 1
